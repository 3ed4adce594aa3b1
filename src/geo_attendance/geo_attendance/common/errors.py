from __future__ import annotations

import logging

from flask import Flask
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    ExcuseRequiredError,
    GeolocationError,
    NotFoundError,
    OutsideGeofenceError,
    StateConflictError,
    UpstreamError,
    ValidationError,
)
from .http import fail

logger = logging.getLogger(__name__)

# Most specific first.
_STATUS_BY_ERROR = (
    (ExcuseRequiredError, 422),
    (GeolocationError, 422),
    (OutsideGeofenceError, 422),
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (StateConflictError, 409),
    (UpstreamError, 503),
)


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def _detail(error: DomainError):
    if isinstance(error, ExcuseRequiredError):
        return {"late_count": error.late_count, "allowance": error.allowance}
    if isinstance(error, GeolocationError):
        return {"failure": error.failure.value}
    return None


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain(e: DomainError):
        status = status_for(e)
        if status >= 500:
            logger.warning("Upstream failure: %s", e, exc_info=True)
        return fail(str(e), status=status, code=e.code, detail=_detail(e))

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500)

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        logger.exception("Unhandled error")
        return fail("Internal server error", status=500)
