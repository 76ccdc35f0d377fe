from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import TimeEntryStatus
from ..organizations.model import OrganizationPolicy
from ..shifts.model import Shift


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class TimeEntry:
    """Domain entity: a clock record.

    ``scheduled_start``/``scheduled_end`` are a snapshot of the shift window
    taken at clock-in; both are None for manual entries.
    """

    entry_id: str
    org_id: str
    employee_id: str
    shift_id: Optional[str]
    clock_in_at: datetime
    clock_out_at: Optional[datetime]
    scheduled_start: Optional[datetime]
    scheduled_end: Optional[datetime]
    is_late: bool
    late_by_minutes: int
    status: TimeEntryStatus
    notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.clock_out_at is None and self.status == TimeEntryStatus.CLOCKED_IN

    def as_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "orgId": self.org_id,
            "employeeId": self.employee_id,
            "shiftId": self.shift_id,
            "clockInAt": _iso(self.clock_in_at),
            "clockOutAt": _iso(self.clock_out_at),
            "scheduledStart": _iso(self.scheduled_start),
            "scheduledEnd": _iso(self.scheduled_end),
            "isLate": self.is_late,
            "lateByMinutes": self.late_by_minutes,
            "status": self.status.value,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class NewTimeEntry:
    org_id: str
    employee_id: str
    shift_id: Optional[str]
    clock_in_at: datetime
    scheduled_start: Optional[datetime]
    scheduled_end: Optional[datetime]
    is_late: bool
    late_by_minutes: int
    status: TimeEntryStatus = TimeEntryStatus.CLOCKED_IN
    notes: Optional[str] = None


@dataclass(frozen=True)
class EligibleShift:
    shift: Shift
    earliest_clock_in_at: datetime
    latest_clock_in_at: datetime
    can_clock_in: bool

    def as_dict(self) -> dict:
        return {
            "id": self.shift.shift_id,
            "startTime": _iso(self.shift.start_time),
            "endTime": _iso(self.shift.end_time),
            "canClockIn": self.can_clock_in,
        }


@dataclass(frozen=True)
class ClockStatus:
    policy: OrganizationPolicy
    active_entry: Optional[TimeEntry]
    eligible_shift: Optional[EligibleShift]

    @property
    def earliest_clock_in_at(self) -> Optional[datetime]:
        return self.eligible_shift.earliest_clock_in_at if self.eligible_shift else None

    def as_dict(self) -> dict:
        return {
            "policy": self.policy.as_dict(),
            "activeEntry": self.active_entry.as_dict() if self.active_entry else None,
            "eligibleShift": self.eligible_shift.as_dict() if self.eligible_shift else None,
            "earliestClockInAt": _iso(self.earliest_clock_in_at),
        }


@dataclass(frozen=True)
class ClockOutResult:
    entry: TimeEntry
    worked_minutes: int
    worked_hours: float
    needs_overtime_approval: bool

    def as_dict(self) -> dict:
        data = self.entry.as_dict()
        data.update(
            {
                "workedMinutes": self.worked_minutes,
                "workedHours": self.worked_hours,
                "needsOvertimeApproval": self.needs_overtime_approval,
            }
        )
        return data


@dataclass(frozen=True)
class WeeklyHours:
    week_start: datetime
    week_end: datetime
    scheduled_hours: float
    actual_hours: float
    difference_hours: float
    late_clock_ins: int
    entries: list[TimeEntry] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "weekStart": _iso(self.week_start),
            "weekEnd": _iso(self.week_end),
            "scheduledHours": self.scheduled_hours,
            "actualHours": self.actual_hours,
            "differenceHours": self.difference_hours,
            "lateClockIns": self.late_clock_ins,
            "entries": [e.as_dict() for e in self.entries],
        }


@dataclass(frozen=True)
class EmployeeHoursRow:
    employee_id: str
    employee_name: str
    email: str
    scheduled_hours: float
    actual_hours: float
    difference_hours: float
    completion_rate_pct: int
    late_clock_ins: int

    def as_dict(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "email": self.email,
            "scheduledHours": self.scheduled_hours,
            "actualHours": self.actual_hours,
            "differenceHours": self.difference_hours,
            "completionRatePct": self.completion_rate_pct,
            "lateClockIns": self.late_clock_ins,
        }


@dataclass(frozen=True)
class HoursComparison:
    week_id: str
    week_start: datetime
    week_end: datetime
    employees: list[EmployeeHoursRow]
    total_scheduled_hours: float
    total_actual_hours: float

    def as_dict(self) -> dict:
        return {
            "weekId": self.week_id,
            "weekStart": _iso(self.week_start),
            "weekEnd": _iso(self.week_end),
            "employees": [e.as_dict() for e in self.employees],
            "totals": {
                "scheduledHours": self.total_scheduled_hours,
                "actualHours": self.total_actual_hours,
            },
        }
