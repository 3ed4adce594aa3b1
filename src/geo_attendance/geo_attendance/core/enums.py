from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class AttendanceSource(str, Enum):
    """Channel an attendance event originated from."""

    APPLICATION = "application"
    BIOMETRIC_DEVICE = "biometric_device"


class AttendanceState(str, Enum):
    """Per-employee, per-day attendance state."""

    NOT_CHECKED_IN = "NOT_CHECKED_IN"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"


class RequestType(str, Enum):
    LEAVE = "leave"
    EXCUSE = "excuse"


class RequestStatus(str, Enum):
    """Approval workflow status (leave/excuse)."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class DayStatus(str, Enum):
    """Classification of one employee-day in reports, in precedence order."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    ON_LEAVE = "ON_LEAVE"
    EXCUSE_ACCEPTED = "EXCUSE_ACCEPTED"
    EXCUSE_REJECTED = "EXCUSE_REJECTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    UNJUSTIFIED = "UNJUSTIFIED"


class GeolocationFailure(str, Enum):
    """Client-side geolocation failures reported alongside a check-in."""

    PERMISSION_DENIED = "permission_denied"
    TIMEOUT = "timeout"
    POSITION_UNAVAILABLE = "position_unavailable"
