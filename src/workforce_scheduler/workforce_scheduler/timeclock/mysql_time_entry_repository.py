from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.enums import TimeEntryStatus
from ..core.exceptions import InvalidStateError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall, fetchone, to_db
from .model import NewTimeEntry, TimeEntry
from .repository import TimeEntryRepository

_COLUMNS = """
    entry_id, org_id, employee_id, shift_id, clock_in_at, clock_out_at,
    scheduled_start, scheduled_end, is_late, late_by_minutes, status, notes
"""

_OPEN_KEY = "uq_time_entries_one_open"


def _to_entry(r: Dict[str, Any]) -> TimeEntry:
    return TimeEntry(
        entry_id=r["entry_id"],
        org_id=r["org_id"],
        employee_id=r["employee_id"],
        shift_id=r.get("shift_id"),
        clock_in_at=as_utc(r["clock_in_at"]),
        clock_out_at=as_utc(r.get("clock_out_at")),
        scheduled_start=as_utc(r.get("scheduled_start")),
        scheduled_end=as_utc(r.get("scheduled_end")),
        is_late=bool(r.get("is_late")),
        late_by_minutes=int(r.get("late_by_minutes") or 0),
        status=TimeEntryStatus(r["status"]),
        notes=r.get("notes"),
    )


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_by_id(self, entry_id: str) -> TimeEntry:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_entries WHERE entry_id=%s", (entry_id,))
            r = fetchone(cur)
        if not r:
            raise NotFoundError("Time entry not found")
        return _to_entry(r)

    def get_open_for_employee(self, *, org_id: str, employee_id: str) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_entries
                WHERE org_id=%s AND employee_id=%s AND status=%s AND clock_out_at IS NULL
                ORDER BY clock_in_at DESC
                LIMIT 1
                """,
                (org_id, employee_id, TimeEntryStatus.CLOCKED_IN.value),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def get_open_by_id(self, *, org_id: str, employee_id: str, entry_id: str) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_entries
                WHERE entry_id=%s AND org_id=%s AND employee_id=%s
                  AND status=%s AND clock_out_at IS NULL
                """,
                (entry_id, org_id, employee_id, TimeEntryStatus.CLOCKED_IN.value),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def get_open_for_shift(self, *, org_id: str, employee_id: str, shift_id: str) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_entries
                WHERE org_id=%s AND employee_id=%s AND shift_id=%s
                  AND status=%s AND clock_out_at IS NULL
                ORDER BY clock_in_at DESC
                LIMIT 1
                """,
                (org_id, employee_id, shift_id, TimeEntryStatus.CLOCKED_IN.value),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_for_shift(self, *, org_id: str, employee_id: str, shift_id: str) -> Sequence[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_entries
                WHERE org_id=%s AND employee_id=%s AND shift_id=%s
                ORDER BY clock_in_at ASC
                """,
                (org_id, employee_id, shift_id),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def create(self, entry: NewTimeEntry) -> TimeEntry:
        entry_id = str(uuid.uuid4())
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO time_entries(entry_id, org_id, employee_id, shift_id, clock_in_at,
                                             scheduled_start, scheduled_end, is_late, late_by_minutes,
                                             status, notes)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        entry_id,
                        entry.org_id,
                        entry.employee_id,
                        entry.shift_id,
                        to_db(entry.clock_in_at),
                        to_db(entry.scheduled_start),
                        to_db(entry.scheduled_end),
                        1 if entry.is_late else 0,
                        int(entry.late_by_minutes),
                        entry.status.value,
                        entry.notes,
                    ),
                )
        except mysql_errors.IntegrityError as e:
            # A concurrent clock-in won the unique open-entry key.
            if _OPEN_KEY in str(e):
                raise InvalidStateError("You are already clocked in") from e
            raise
        return self._get_by_id(entry_id)

    def close(self, *, entry_id: str, clock_out_at: datetime, status: TimeEntryStatus) -> TimeEntry:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_entries
                SET clock_out_at=%s, status=%s
                WHERE entry_id=%s AND clock_out_at IS NULL
                """,
                (to_db(clock_out_at), status.value, entry_id),
            )
            if cur.rowcount == 0:
                raise InvalidStateError("No active clock-in entry found")
        return self._get_by_id(entry_id)

    def get_pending_overtime(self, *, org_id: str, entry_id: str) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_entries
                WHERE entry_id=%s AND org_id=%s AND status=%s
                """,
                (entry_id, org_id, TimeEntryStatus.PENDING_OVERTIME_APPROVAL.value),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_pending_overtime(self, *, org_id: str) -> Sequence[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_entries
                WHERE org_id=%s AND status=%s
                  AND clock_out_at IS NOT NULL AND scheduled_end IS NOT NULL
                ORDER BY clock_out_at DESC
                """,
                (org_id, TimeEntryStatus.PENDING_OVERTIME_APPROVAL.value),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def resolve_overtime(self, *, entry_id: str, clock_out_at: datetime) -> TimeEntry:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_entries
                SET clock_out_at=%s, status=%s
                WHERE entry_id=%s AND status=%s
                """,
                (
                    to_db(clock_out_at),
                    TimeEntryStatus.CLOCKED_OUT.value,
                    entry_id,
                    TimeEntryStatus.PENDING_OVERTIME_APPROVAL.value,
                ),
            )
            if cur.rowcount == 0:
                raise NotFoundError("Overtime request not found")
        return self._get_by_id(entry_id)

    def list_clocked_in_between(
        self,
        *,
        org_id: str,
        start: datetime,
        end: datetime,
        employee_id: Optional[str] = None,
    ) -> Sequence[TimeEntry]:
        sql = f"""
            SELECT {_COLUMNS}
            FROM time_entries
            WHERE org_id=%s AND clock_in_at >= %s AND clock_in_at < %s
        """
        params: list = [org_id, to_db(start), to_db(end)]
        if employee_id:
            sql += " AND employee_id=%s"
            params.append(employee_id)
        sql += " ORDER BY clock_in_at ASC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_entry(r) for r in fetchall(cur)]
