from __future__ import annotations

from dataclasses import dataclass

from .core.constants import DEFAULT_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .hours.service import HoursReportService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.service import NotificationService
from .organizations.mysql_organization_repository import MySQLOrganizationRepository
from .schedules.mysql_schedule_repository import MySQLScheduleWeekRepository
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .timeclock.factory import ClockStrategyFactory
from .timeclock.mysql_time_entry_repository import MySQLTimeEntryRepository
from .timeclock.service import TimeClockService
from .users.mysql_user_repository import MySQLUserRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    organizations_repo: MySQLOrganizationRepository
    users_repo: MySQLUserRepository
    weeks_repo: MySQLScheduleWeekRepository
    shifts_repo: MySQLShiftRepository
    time_entries_repo: MySQLTimeEntryRepository
    notifications_repo: MySQLNotificationRepository

    notification_service: NotificationService
    time_clock_service: TimeClockService
    hours_report_service: HoursReportService


def build_container(*, db_config: dict, default_timezone: str = DEFAULT_TIMEZONE) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    organizations_repo = MySQLOrganizationRepository(conn, default_timezone=default_timezone)
    users_repo = MySQLUserRepository(conn)
    weeks_repo = MySQLScheduleWeekRepository(conn)
    shifts_repo = MySQLShiftRepository(conn)
    time_entries_repo = MySQLTimeEntryRepository(conn)
    notifications_repo = MySQLNotificationRepository(conn)

    notification_service = NotificationService(notifications_repo, users_repo)
    time_clock_service = TimeClockService(
        time_entries_repo,
        shifts_repo,
        organizations_repo,
        weeks_repo,
        users_repo,
        notification_service,
        strategy_factory=ClockStrategyFactory(),
    )
    hours_report_service = HoursReportService(organizations_repo, weeks_repo, shifts_repo, time_entries_repo)

    return Container(
        conn=conn,
        organizations_repo=organizations_repo,
        users_repo=users_repo,
        weeks_repo=weeks_repo,
        shifts_repo=shifts_repo,
        time_entries_repo=time_entries_repo,
        notifications_repo=notifications_repo,
        notification_service=notification_service,
        time_clock_service=time_clock_service,
        hours_report_service=hours_report_service,
    )
