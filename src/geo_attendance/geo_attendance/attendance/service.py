from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import format_hhmm, now_local
from ..common.validators import optional_text
from ..core.constants import DEFAULT_HISTORY_LIMIT, INSTANT_LATE_TITLE
from ..core.enums import AttendanceSource, AttendanceState
from ..core.exceptions import (
    AlreadyCheckedOutError,
    CheckOutBeforeCheckInError,
    DuplicateCheckInError,
    ExcuseRequiredError,
    NotCheckedInError,
    NotFoundError,
    OutsideGeofenceError,
    UpstreamError,
    WrongChannelError,
)
from ..locations.geofence import find_matching_location
from ..locations.model import Coordinate
from ..locations.repository import LocationRepository
from ..notifications.service import NotificationService
from ..settings.model import SystemSettings
from ..settings.store import SettingsStore
from ..users.model import User
from ..users.repository import UserRepository
from .escalation import EscalationVerdict, LatenessEscalationPolicy
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, state_of
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Per-employee, per-day state machine: NOT_CHECKED_IN -> CHECKED_IN -> CHECKED_OUT."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        locations: LocationRepository,
        users: UserRepository,
        notifications: NotificationService,
        settings: SettingsStore,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        escalation: LatenessEscalationPolicy | None = None,
    ):
        self._attendance = attendance
        self._locations = locations
        self._users = users
        self._notifications = notifications
        self._settings = settings
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._escalation = escalation or LatenessEscalationPolicy(attendance)

    def _get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("Employee not found")
        return user

    def check_in(
        self,
        user_id: int,
        *,
        position: Coordinate,
        excuse: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()
        settings = self._settings.get()
        user = self._get_user(user_id)

        if self._attendance.get_for_user_and_date(user_id, today):
            raise DuplicateCheckInError("Already checked in today")

        location = find_matching_location(position, self._locations.list_all())
        if location is None:
            logger.info("Check-in rejected for user %s: outside every approved location", user_id)
            raise OutsideGeofenceError("You are not within any registered work site")

        decision = self._factory.decide(now=now, settings=settings)
        verdict = self._escalation.evaluate(user_id, day=today, is_late=decision.is_late, settings=settings)

        excuse_text = optional_text(excuse)
        if verdict.requires_excuse and not excuse_text:
            logger.info(
                "Check-in for user %s needs an excuse (%s late so far, allowance %s)",
                user_id, verdict.late_count_so_far, verdict.allowance,
            )
            raise ExcuseRequiredError(
                settings.auto_request_message(verdict.resulting_count),
                late_count=verdict.late_count_so_far,
                allowance=verdict.allowance,
            )

        mandatory = excuse_text if verdict.requires_excuse else None
        voluntary = None if verdict.requires_excuse else excuse_text

        attendance_id = self._attendance.create_checkin(
            user_id=user_id,
            work_date=today,
            check_in_time=now,
            is_late=decision.is_late,
            late_minutes=decision.late_minutes,
            source=AttendanceSource.APPLICATION,
            location_id=location.location_id,
            excuse_reason=voluntary,
            mandatory_excuse_reason=mandatory,
        )
        record = AttendanceRecord(
            attendance_id=attendance_id,
            user_id=user_id,
            work_date=today,
            check_in_time=now,
            check_out_time=None,
            is_late=decision.is_late,
            late_minutes=decision.late_minutes,
            source=AttendanceSource.APPLICATION,
            location_id=location.location_id,
            excuse_reason=voluntary,
            mandatory_excuse_reason=mandatory,
        )
        logger.info(
            "User %s checked in at %s (location=%s, late=%s, minutes=%s)",
            user_id, now.isoformat(), location.location_id, decision.is_late, decision.late_minutes,
        )

        self._after_checkin(user, record, verdict, settings, now)
        return record

    def _after_checkin(
        self,
        user: User,
        record: AttendanceRecord,
        verdict: EscalationVerdict,
        settings: SystemSettings,
        now: datetime,
    ) -> None:
        # The record is already committed; sink failures must not surface to the caller.
        if not record.is_late:
            return
        try:
            if settings.instant_late_notification_enabled:
                self._notifications.notify_user(
                    user.user_id, INSTANT_LATE_TITLE, settings.instant_late_message(), now=now
                )
            self._escalation.notify(
                user.user_id,
                verdict,
                settings=settings,
                notifications=self._notifications,
                employee_name=user.full_name,
                now=now,
            )
        except UpstreamError:
            logger.warning("Notifications after check-in failed for user %s", user.user_id, exc_info=True)

    def check_in_from_device(self, user_id: int, *, at: datetime) -> AttendanceRecord:
        """Device-originated check-in: no geofence, no excuse gate."""
        settings = self._settings.get()
        today = at.date()

        if self._attendance.get_for_user_and_date(user_id, today):
            raise DuplicateCheckInError("Already checked in today")

        decision = self._factory.decide(now=at, settings=settings)
        attendance_id = self._attendance.create_checkin(
            user_id=user_id,
            work_date=today,
            check_in_time=at,
            is_late=decision.is_late,
            late_minutes=decision.late_minutes,
            source=AttendanceSource.BIOMETRIC_DEVICE,
        )
        return AttendanceRecord(
            attendance_id=attendance_id,
            user_id=user_id,
            work_date=today,
            check_in_time=at,
            check_out_time=None,
            is_late=decision.is_late,
            late_minutes=decision.late_minutes,
            source=AttendanceSource.BIOMETRIC_DEVICE,
        )

    def check_out(
        self,
        user_id: int,
        *,
        source: AttendanceSource = AttendanceSource.APPLICATION,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        record = self._attendance.get_for_user_and_date(user_id, today)
        if not record:
            raise NotCheckedInError("You have not checked in today")
        if record.check_out_time is not None:
            raise AlreadyCheckedOutError("Attendance already completed today")
        if record.source != source:
            raise WrongChannelError(
                f"This attendance was recorded by {record.source.value}; check out via the same channel"
            )
        if now <= record.check_in_time:
            raise CheckOutBeforeCheckInError("Check-out must be after check-in")

        if not self._attendance.update_checkout(attendance_id=record.attendance_id, check_out_time=now):
            raise AlreadyCheckedOutError("Attendance already completed today")

        logger.info("User %s checked out at %s via %s", user_id, now.isoformat(), source.value)
        return replace(record, check_out_time=now)

    def today_state(self, user_id: int, *, today: date | None = None) -> tuple[AttendanceState, Optional[AttendanceRecord]]:
        today = today or now_local().date()
        record = self._attendance.get_for_user_and_date(user_id, today)
        return state_of(record), record

    def history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_user(user_id, max(1, int(limit)))

    def late_threshold_label(self) -> str:
        return format_hhmm(self._settings.get().latest_allowed_time)
