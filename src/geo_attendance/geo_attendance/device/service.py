from __future__ import annotations

import logging
from typing import Iterable, Mapping

from ..attendance.repository import AttendanceRepository
from ..attendance.service import AttendanceService
from ..core.enums import AttendanceSource
from ..core.exceptions import DuplicateCheckInError, StateConflictError
from ..users.repository import UserRepository
from .model import DeviceEvent, ImportResult, parse_device_log

logger = logging.getLogger(__name__)


class DeviceEventService:
    """Feeds biometric punches into the attendance state machine.

    The first punch of a day checks the employee in; a later punch closes a
    device-sourced record that is still open. Anything else is ignored, so
    importing the same log batch twice changes nothing.
    """

    def __init__(self, attendance_service: AttendanceService, attendance: AttendanceRepository, users: UserRepository):
        self._attendance_service = attendance_service
        self._attendance = attendance
        self._users = users

    def import_logs(self, logs: Iterable[Mapping]) -> ImportResult:
        result = ImportResult()
        events = []
        for log in logs:
            event = parse_device_log(log) if isinstance(log, Mapping) else None
            if event is None:
                result.invalid += 1
            else:
                events.append(event)

        self.import_events(events, result=result)
        return result

    def import_events(self, events: Iterable[DeviceEvent], *, result: ImportResult | None = None) -> ImportResult:
        result = result or ImportResult()
        for event in sorted(events, key=lambda e: e.timestamp):
            self._apply(event, result)

        logger.info("Device import finished: %s", result.to_dict())
        return result

    def _apply(self, event: DeviceEvent, result: ImportResult) -> None:
        user = self._users.get_by_device_user_id(event.device_user_id)
        if not user:
            result.unknown_user += 1
            logger.debug("Skipping punch for unknown device user %s", event.device_user_id)
            return

        record = self._attendance.get_for_user_and_date(user.user_id, event.timestamp.date())
        if record is None:
            try:
                self._attendance_service.check_in_from_device(user.user_id, at=event.timestamp)
                result.checked_in += 1
            except DuplicateCheckInError:
                result.ignored += 1
            return

        if record.check_out_time is not None or event.timestamp <= record.check_in_time:
            result.ignored += 1
            return

        try:
            self._attendance_service.check_out(
                user.user_id, source=AttendanceSource.BIOMETRIC_DEVICE, now=event.timestamp
            )
            result.checked_out += 1
        except StateConflictError as e:
            result.rejected += 1
            logger.warning("Device punch for user %s rejected: %s", user.user_id, e)
