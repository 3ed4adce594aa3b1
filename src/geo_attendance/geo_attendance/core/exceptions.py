class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    code = "authentication_error"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "authorization_error"


class StateConflictError(DomainError):
    """Raised when a transition is not legal from the current state."""

    code = "state_conflict"


class NotFoundError(DomainError):
    """A normal negative outcome: the thing asked for does not exist."""

    code = "not_found"


class UpstreamError(DomainError):
    """Persistence or an external service is unavailable. Safe to retry."""

    code = "upstream_unavailable"


class GeolocationError(ValidationError):
    code = "geolocation_error"

    def __init__(self, message: str, *, failure):
        super().__init__(message)
        self.failure = failure


class ExcuseRequiredError(ValidationError):
    """Check-in blocked until the employee supplies a lateness excuse."""

    code = "excuse_required"

    def __init__(self, message: str, *, late_count: int, allowance: int):
        super().__init__(message)
        self.late_count = late_count
        self.allowance = allowance


class OutsideGeofenceError(NotFoundError):
    code = "not_in_any_location"


class NotCheckedInError(NotFoundError):
    code = "not_checked_in"


class DuplicateCheckInError(StateConflictError):
    code = "duplicate_check_in"


class AlreadyCheckedOutError(StateConflictError):
    code = "already_checked_out"


class WrongChannelError(StateConflictError):
    code = "wrong_channel"


class CheckOutBeforeCheckInError(StateConflictError):
    code = "checkout_before_checkin"


class RequestAlreadyDecidedError(StateConflictError):
    code = "request_already_decided"
