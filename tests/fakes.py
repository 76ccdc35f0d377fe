"""In-memory repositories shared by the service and controller tests."""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional

from src.workforce_scheduler.workforce_scheduler.core.enums import Role, TimeEntryStatus
from src.workforce_scheduler.workforce_scheduler.core.exceptions import InvalidStateError
from src.workforce_scheduler.workforce_scheduler.notifications.model import NewNotification
from src.workforce_scheduler.workforce_scheduler.organizations.model import OrganizationPolicy
from src.workforce_scheduler.workforce_scheduler.schedules.model import ScheduleWeek
from src.workforce_scheduler.workforce_scheduler.shifts.model import Shift
from src.workforce_scheduler.workforce_scheduler.timeclock.model import NewTimeEntry, TimeEntry
from src.workforce_scheduler.workforce_scheduler.users.model import User


class FakeOrganizations:
    def __init__(self, *policies: OrganizationPolicy):
        self._by_id = {p.org_id: p for p in policies}

    def get_policy(self, org_id):
        return self._by_id.get(org_id)


class FakeUsers:
    def __init__(self, *users: User):
        self._by_id = {u.user_id: u for u in users}

    def get_by_id(self, user_id):
        return self._by_id.get(user_id)

    def list_by_ids(self, user_ids: Iterable[str]):
        return [self._by_id[i] for i in user_ids if i in self._by_id]

    def list_active_by_roles(self, *, org_id, roles):
        roles = set(roles)
        return [u for u in self._by_id.values() if u.org_id == org_id and u.is_active and u.role in roles]


class FakeWeeks:
    def __init__(self, *weeks: ScheduleWeek):
        self._weeks = list(weeks)

    def get_by_id(self, *, org_id, week_id):
        return next((w for w in self._weeks if w.week_id == week_id and w.org_id == org_id), None)

    def get_containing(self, *, org_id, at):
        matches = [w for w in self._weeks if w.org_id == org_id and w.start_date <= at <= w.end_date]
        matches.sort(key=lambda w: w.start_date, reverse=True)
        return matches[0] if matches else None


class FakeShifts:
    def __init__(self, *shifts: Shift, org_id: str = "org-1"):
        self._shifts = list(shifts)
        self._org_id = org_id

    def add(self, shift: Shift) -> Shift:
        self._shifts.append(shift)
        return shift

    def get_for_employee(self, *, org_id, shift_id, employee_id):
        if org_id != self._org_id:
            return None
        return next((s for s in self._shifts if s.shift_id == shift_id and s.employee_id == employee_id), None)

    def list_overlapping_for_employee(self, *, org_id, employee_id, ends_after, starts_before, limit):
        if org_id != self._org_id:
            return []
        rows = [
            s
            for s in self._shifts
            if s.employee_id == employee_id and s.end_time >= ends_after and s.start_time <= starts_before
        ]
        return sorted(rows, key=lambda s: s.start_time)[:limit]

    def list_starting_between(self, *, org_id, employee_id, start, end):
        if org_id != self._org_id:
            return []
        rows = [s for s in self._shifts if s.employee_id == employee_id and start <= s.start_time < end]
        return sorted(rows, key=lambda s: s.start_time)

    def list_for_week(self, *, week_id):
        return sorted((s for s in self._shifts if s.schedule_week_id == week_id), key=lambda s: s.start_time)


class FakeTimeEntries:
    """Mirrors the MySQL repository, including the one-open-entry unique key."""

    def __init__(self):
        self._by_id: dict[str, TimeEntry] = {}
        self._next_id = 1

    def all(self) -> list[TimeEntry]:
        return sorted(self._by_id.values(), key=lambda e: e.clock_in_at)

    def put(self, entry: TimeEntry) -> TimeEntry:
        self._by_id[entry.entry_id] = entry
        return entry

    def _open(self, org_id, employee_id):
        return [
            e
            for e in self._by_id.values()
            if e.org_id == org_id and e.employee_id == employee_id and e.is_open
        ]

    def get_open_for_employee(self, *, org_id, employee_id):
        rows = sorted(self._open(org_id, employee_id), key=lambda e: e.clock_in_at, reverse=True)
        return rows[0] if rows else None

    def get_open_by_id(self, *, org_id, employee_id, entry_id):
        return next((e for e in self._open(org_id, employee_id) if e.entry_id == entry_id), None)

    def get_open_for_shift(self, *, org_id, employee_id, shift_id):
        rows = sorted(
            (e for e in self._open(org_id, employee_id) if e.shift_id == shift_id),
            key=lambda e: e.clock_in_at,
            reverse=True,
        )
        return rows[0] if rows else None

    def list_for_shift(self, *, org_id, employee_id, shift_id):
        return [
            e
            for e in self.all()
            if e.org_id == org_id and e.employee_id == employee_id and e.shift_id == shift_id
        ]

    def create(self, entry: NewTimeEntry) -> TimeEntry:
        if any(e.employee_id == entry.employee_id and e.clock_out_at is None for e in self._by_id.values()):
            raise InvalidStateError("You are already clocked in")
        entry_id = f"entry-{self._next_id}"
        self._next_id += 1
        return self.put(
            TimeEntry(
                entry_id=entry_id,
                org_id=entry.org_id,
                employee_id=entry.employee_id,
                shift_id=entry.shift_id,
                clock_in_at=entry.clock_in_at,
                clock_out_at=None,
                scheduled_start=entry.scheduled_start,
                scheduled_end=entry.scheduled_end,
                is_late=entry.is_late,
                late_by_minutes=entry.late_by_minutes,
                status=entry.status,
                notes=entry.notes,
            )
        )

    def close(self, *, entry_id, clock_out_at, status):
        return self.put(replace(self._by_id[entry_id], clock_out_at=clock_out_at, status=status))

    def get_pending_overtime(self, *, org_id, entry_id):
        entry = self._by_id.get(entry_id)
        if entry and entry.org_id == org_id and entry.status == TimeEntryStatus.PENDING_OVERTIME_APPROVAL:
            return entry
        return None

    def list_pending_overtime(self, *, org_id):
        rows = [
            e
            for e in self._by_id.values()
            if e.org_id == org_id
            and e.status == TimeEntryStatus.PENDING_OVERTIME_APPROVAL
            and e.clock_out_at
            and e.scheduled_end
        ]
        return sorted(rows, key=lambda e: e.clock_out_at, reverse=True)

    def resolve_overtime(self, *, entry_id, clock_out_at):
        return self.put(
            replace(self._by_id[entry_id], clock_out_at=clock_out_at, status=TimeEntryStatus.CLOCKED_OUT)
        )

    def list_clocked_in_between(self, *, org_id, start, end, employee_id=None):
        return [
            e
            for e in self.all()
            if e.org_id == org_id
            and start <= e.clock_in_at < end
            and (employee_id is None or e.employee_id == employee_id)
        ]


class FakeNotifications:
    def __init__(self, *, fail: bool = False):
        self.sent: list[NewNotification] = []
        self._fail = fail

    def create(self, notification: NewNotification) -> str:
        if self._fail:
            raise RuntimeError("notification store unavailable")
        self.sent.append(notification)
        return f"n-{len(self.sent)}"


def make_user(user_id: str, first: str, last: str, *, role: Role = Role.EMPLOYEE, org_id: str = "org-1") -> User:
    return User(
        user_id=user_id,
        org_id=org_id,
        first_name=first,
        last_name=last,
        email=f"{first.lower()}@example.com",
        role=role,
    )


def make_shift(
    shift_id: str,
    start: datetime,
    end: datetime,
    *,
    employee_id: Optional[str] = "emp-1",
    week_id: Optional[str] = "week-1",
    **kwargs,
) -> Shift:
    return Shift(
        shift_id=shift_id,
        employee_id=employee_id,
        start_time=start,
        end_time=end,
        schedule_week_id=week_id,
        **kwargs,
    )
