from __future__ import annotations

from dataclasses import dataclass

from .attendance.escalation import LatenessEscalationPolicy
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .device.client import FingerprintApiClient
from .device.service import DeviceEventService
from .device.sync_service import FingerprintSyncService
from .locations.mysql_location_repository import MySQLLocationRepository
from .locations.repository import LocationRepository
from .locations.service import LocationService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .reports.service import ReportService
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import RequestRepository
from .requests.service import RequestService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService
from .settings.store import SettingsStore
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    locations_repo: LocationRepository
    attendance_repo: AttendanceRepository
    requests_repo: RequestRepository
    notifications_repo: NotificationRepository

    settings_store: SettingsStore
    settings_service: SettingsService
    auth_service: AuthService
    user_service: UserService
    location_service: LocationService
    notification_service: NotificationService
    attendance_service: AttendanceService
    request_service: RequestService
    report_service: ReportService
    device_service: DeviceEventService
    fingerprint_service: FingerprintSyncService


def wire(
    *,
    users_repo: UserRepository,
    locations_repo: LocationRepository,
    attendance_repo: AttendanceRepository,
    requests_repo: RequestRepository,
    notifications_repo: NotificationRepository,
    settings_repo: SettingsRepository | None = None,
    fingerprint_client: FingerprintApiClient | None = None,
) -> Container:
    """Build every service on top of the given repositories."""

    settings_store = SettingsStore()
    notification_service = NotificationService(notifications_repo, users_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        locations_repo,
        users_repo,
        notification_service,
        settings_store,
        strategy_factory=AttendanceStrategyFactory(),
        escalation=LatenessEscalationPolicy(attendance_repo),
    )

    return Container(
        users_repo=users_repo,
        locations_repo=locations_repo,
        attendance_repo=attendance_repo,
        requests_repo=requests_repo,
        notifications_repo=notifications_repo,
        settings_store=settings_store,
        settings_service=SettingsService(settings_store, settings_repo),
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        location_service=LocationService(locations_repo),
        notification_service=notification_service,
        attendance_service=attendance_service,
        request_service=RequestService(requests_repo, users_repo, notification_service),
        report_service=ReportService(attendance_repo, requests_repo, users_repo, settings_store, notification_service),
        device_service=DeviceEventService(attendance_service, attendance_repo, users_repo),
        fingerprint_service=FingerprintSyncService(
            fingerprint_client or FingerprintApiClient(), users_repo, settings_store
        ),
    )


def build_container(*, db_config: dict, fingerprint_timeout: float = 10.0) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        users_repo=MySQLUserRepository(conn),
        locations_repo=MySQLLocationRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        requests_repo=MySQLRequestRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        fingerprint_client=FingerprintApiClient(timeout=fingerprint_timeout),
    )
