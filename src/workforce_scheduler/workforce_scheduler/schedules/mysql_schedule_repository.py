from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from ..core.enums import WeekState
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchone, to_db
from .model import ScheduleWeek
from .repository import ScheduleWeekRepository


def _to_week(r: Dict[str, Any]) -> ScheduleWeek:
    return ScheduleWeek(
        week_id=r["week_id"],
        org_id=r["org_id"],
        start_date=as_utc(r["start_date"]),
        end_date=as_utc(r["end_date"]),
        state=WeekState(r["state"]),
    )


class MySQLScheduleWeekRepository(ScheduleWeekRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, *, org_id: str, week_id: str) -> Optional[ScheduleWeek]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT week_id, org_id, start_date, end_date, state
                FROM schedule_weeks
                WHERE week_id=%s AND org_id=%s
                """,
                (week_id, org_id),
            )
            r = fetchone(cur)
            return _to_week(r) if r else None

    def get_containing(self, *, org_id: str, at: datetime) -> Optional[ScheduleWeek]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT week_id, org_id, start_date, end_date, state
                FROM schedule_weeks
                WHERE org_id=%s AND start_date <= %s AND end_date >= %s
                ORDER BY start_date DESC
                LIMIT 1
                """,
                (org_id, to_db(at), to_db(at)),
            )
            r = fetchone(cur)
            return _to_week(r) if r else None
