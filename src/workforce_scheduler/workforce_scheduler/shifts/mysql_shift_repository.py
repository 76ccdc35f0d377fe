from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import ShiftStatus, ShiftType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall, fetchone, to_db
from .model import Shift
from .repository import ShiftRepository

_COLUMNS = """
    s.shift_id, s.employee_id, s.department_id, s.location_id, s.schedule_week_id,
    s.start_time, s.end_time, s.break_duration_minutes, s.break_is_paid, s.shift_type, s.status
"""


def _to_shift(r: Dict[str, Any]) -> Shift:
    return Shift(
        shift_id=r["shift_id"],
        employee_id=r.get("employee_id"),
        department_id=r.get("department_id"),
        location_id=r.get("location_id"),
        schedule_week_id=r.get("schedule_week_id"),
        start_time=as_utc(r["start_time"]),
        end_time=as_utc(r["end_time"]),
        break_duration_minutes=int(r.get("break_duration_minutes") or 0),
        break_is_paid=bool(r.get("break_is_paid")),
        shift_type=ShiftType(r["shift_type"]),
        status=ShiftStatus(r["status"]),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee(self, *, org_id: str, shift_id: str, employee_id: str) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM shifts s
                JOIN schedule_weeks w ON w.week_id = s.schedule_week_id
                WHERE s.shift_id=%s AND s.employee_id=%s AND w.org_id=%s
                """,
                (shift_id, employee_id, org_id),
            )
            r = fetchone(cur)
            return _to_shift(r) if r else None

    def list_overlapping_for_employee(
        self,
        *,
        org_id: str,
        employee_id: str,
        ends_after: datetime,
        starts_before: datetime,
        limit: int,
    ) -> Sequence[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM shifts s
                JOIN schedule_weeks w ON w.week_id = s.schedule_week_id
                WHERE s.employee_id=%s AND w.org_id=%s
                  AND s.end_time >= %s AND s.start_time <= %s
                ORDER BY s.start_time ASC
                LIMIT %s
                """,
                (employee_id, org_id, to_db(ends_after), to_db(starts_before), int(limit)),
            )
            return [_to_shift(r) for r in fetchall(cur)]

    def list_starting_between(
        self,
        *,
        org_id: str,
        employee_id: str,
        start: datetime,
        end: datetime,
    ) -> Sequence[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM shifts s
                JOIN schedule_weeks w ON w.week_id = s.schedule_week_id
                WHERE s.employee_id=%s AND w.org_id=%s
                  AND s.start_time >= %s AND s.start_time < %s
                ORDER BY s.start_time ASC
                """,
                (employee_id, org_id, to_db(start), to_db(end)),
            )
            return [_to_shift(r) for r in fetchall(cur)]

    def list_for_week(self, *, week_id: str) -> Sequence[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM shifts s
                WHERE s.schedule_week_id=%s
                ORDER BY s.start_time ASC
                """,
                (week_id,),
            )
            return [_to_shift(r) for r in fetchall(cur)]
