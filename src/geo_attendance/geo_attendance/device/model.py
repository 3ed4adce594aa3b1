from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional

# Key names differ between device firmware / connector versions.
_USER_KEYS = ("uid", "userId", "userid", "user_id")
_TIME_KEYS = ("attendanceTime", "timestamp", "time")


@dataclass(frozen=True)
class DeviceEvent:
    """One punch on the biometric terminal."""

    device_user_id: str
    timestamp: datetime


@dataclass
class ImportResult:
    checked_in: int = 0
    checked_out: int = 0
    ignored: int = 0
    unknown_user: int = 0
    rejected: int = 0
    invalid: int = 0

    def to_dict(self) -> dict:
        return {
            "checked_in": self.checked_in,
            "checked_out": self.checked_out,
            "ignored": self.ignored,
            "unknown_user": self.unknown_user,
            "rejected": self.rejected,
            "invalid": self.invalid,
        }


def _first(log: Mapping, keys) -> Optional[object]:
    for key in keys:
        value = log.get(key)
        if value not in (None, ""):
            return value
    return None


def parse_device_log(log: Mapping) -> Optional[DeviceEvent]:
    """Build a DeviceEvent from a raw connector log; None when unusable.

    Timestamps are ISO-8601 strings; an offset, if present, is dropped after
    conversion to local wall-clock time so they compare with stored records.
    """

    user = _first(log, _USER_KEYS)
    raw_ts = _first(log, _TIME_KEYS)
    if user is None or raw_ts is None:
        return None

    if isinstance(raw_ts, datetime):
        ts = raw_ts
    else:
        try:
            ts = datetime.fromisoformat(str(raw_ts).strip().replace("Z", "+00:00"))
        except ValueError:
            return None

    if ts.tzinfo is not None:
        ts = ts.astimezone().replace(tzinfo=None)
    return DeviceEvent(device_user_id=str(user).strip(), timestamp=ts)
