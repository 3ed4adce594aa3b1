from __future__ import annotations

from typing import Mapping

from ..common.validators import require_latitude, require_longitude
from ..core.constants import GEOLOCATION_TIMEOUT_SECONDS
from ..core.enums import GeolocationFailure
from ..core.exceptions import GeolocationError, ValidationError
from .model import Coordinate

FAILURE_MESSAGES = {
    GeolocationFailure.PERMISSION_DENIED: "Location permission denied. Enable location access and try again.",
    GeolocationFailure.TIMEOUT: f"Could not get your location within {GEOLOCATION_TIMEOUT_SECONDS} seconds. Try again.",
    GeolocationFailure.POSITION_UNAVAILABLE: "Your position is currently unavailable. Move to an open area and try again.",
}


def parse_position(payload: Mapping) -> Coordinate:
    """Turn a check-in payload into a Coordinate.

    The client reports geolocation failures as ``{"error": "<kind>"}``; each
    kind maps to its own user-facing message and is never retried here.
    """

    raw_error = payload.get("error")
    if raw_error:
        try:
            failure = GeolocationFailure(str(raw_error).strip().lower())
        except ValueError:
            failure = GeolocationFailure.POSITION_UNAVAILABLE
        raise GeolocationError(FAILURE_MESSAGES[failure], failure=failure)

    if payload.get("latitude") is None or payload.get("longitude") is None:
        raise ValidationError("latitude and longitude are required")

    return Coordinate(
        latitude=require_latitude(payload.get("latitude")),
        longitude=require_longitude(payload.get("longitude")),
    )
