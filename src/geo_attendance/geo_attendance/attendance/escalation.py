"""Lateness escalation: when a check-in needs a written excuse.

The rule is evaluated prospectively. An attempt requires an excuse iff it is
itself late and ``late_count_so_far + 1 >= allowance``. The check-in gate and
the notification trigger both go through ``excuse_required`` so they cannot
disagree.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

from ..common.datetime_utils import month_start
from ..core.constants import ADMIN_ESCALATION_TITLE, AUTO_REQUEST_TITLE
from ..notifications.service import NotificationService
from ..settings.model import SystemSettings
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def excuse_required(late_count_so_far: int, allowance: int) -> bool:
    """True when one more late check-in reaches the monthly allowance."""
    return late_count_so_far + 1 >= allowance


@dataclass(frozen=True)
class EscalationVerdict:
    late_count_so_far: int
    allowance: int
    is_late: bool

    @property
    def resulting_count(self) -> int:
        return self.late_count_so_far + (1 if self.is_late else 0)

    @property
    def requires_excuse(self) -> bool:
        return self.is_late and excuse_required(self.late_count_so_far, self.allowance)


class LatenessEscalationPolicy:
    """Recomputes the monthly late count from persisted records on every call."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def evaluate(self, user_id: int, *, day: date, is_late: bool, settings: SystemSettings) -> EscalationVerdict:
        count = self._attendance.count_late_in_month(user_id, month_start=month_start(day), before=day)
        return EscalationVerdict(
            late_count_so_far=int(count),
            allowance=int(settings.allowed_lateness_per_month),
            is_late=is_late,
        )

    def notify(
        self,
        user_id: int,
        verdict: EscalationVerdict,
        *,
        settings: SystemSettings,
        notifications: NotificationService,
        employee_name: str,
        now: datetime,
    ) -> bool:
        """Fan out the escalation notifications; True when any were emitted."""
        if not verdict.requires_excuse or not settings.auto_request_reason_enabled:
            return False

        count = verdict.resulting_count
        notifications.notify_user(user_id, AUTO_REQUEST_TITLE, settings.auto_request_message(count), now=now)
        notifications.notify_admins(
            ADMIN_ESCALATION_TITLE,
            f"{employee_name} has been late {count} times this month (allowance {verdict.allowance}).",
            now=now,
        )
        logger.info("Lateness escalation for user %s: %s late check-ins this month", user_id, count)
        return True
