from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import ensure_utc, minutes_between, utcnow
from ..core.constants import OVERTIME_RISK_LIMIT
from ..core.enums import ShiftType
from ..core.exceptions import NotFoundError
from ..organizations.model import OrganizationPolicy
from ..organizations.repository import OrganizationRepository
from ..schedules.repository import ScheduleWeekRepository
from ..shifts.model import Shift
from ..shifts.repository import ShiftRepository
from ..timeclock.repository import TimeEntryRepository
from .overtime import OvertimeBreakdown, calculate_hours, calculate_overtime


@dataclass(frozen=True)
class OvertimeRisk:
    employee_id: str
    hours: float
    is_at_risk: bool

    def as_dict(self) -> dict:
        return {"employeeId": self.employee_id, "hours": self.hours, "isAtRisk": self.is_at_risk}


@dataclass(frozen=True)
class DepartmentHours:
    department_id: str
    total_shifts: int
    scheduled_employees: int
    regular_hours: float

    def as_dict(self) -> dict:
        return {
            "departmentId": self.department_id,
            "totalShifts": self.total_shifts,
            "scheduledEmployees": self.scheduled_employees,
            "regularHours": self.regular_hours,
        }


@dataclass(frozen=True)
class WeeklySummary:
    week_id: str
    week_state: str
    total_shifts: int
    overtime: OvertimeBreakdown
    scheduled_employees: int
    shift_counts: dict
    department_shifts: dict
    location_shifts: dict
    department_hours: dict
    location_hours: dict
    departments: list[DepartmentHours]
    overtime_risks: list[OvertimeRisk]
    open_shifts: int
    coverage_pct: float
    actual_worked_hours: float
    late_clock_ins: int

    def as_dict(self) -> dict:
        return {
            "scheduleWeekId": self.week_id,
            "scheduleWeekState": self.week_state,
            "totalShifts": self.total_shifts,
            "totalScheduledHours": self.overtime.total_hours,
            "regularHours": self.overtime.regular_hours,
            "overtimeHours": self.overtime.overtime_hours,
            "doubleOvertimeHours": self.overtime.double_overtime_hours,
            "overtime": self.overtime.as_dict(),
            "scheduledEmployees": self.scheduled_employees,
            "shiftCounts": self.shift_counts,
            "departmentShifts": self.department_shifts,
            "locationShifts": self.location_shifts,
            "departmentHours": self.department_hours,
            "locationHours": self.location_hours,
            "departments": [d.as_dict() for d in self.departments],
            "overtimeRisks": [r.as_dict() for r in self.overtime_risks],
            "openShifts": self.open_shifts,
            "coveragePct": self.coverage_pct,
            "actualWorkedHours": self.actual_worked_hours,
            "lateClockIns": self.late_clock_ins,
        }


def rank_overtime_risks(shifts: Sequence[Shift], policy: OrganizationPolicy, *, limit: int = OVERTIME_RISK_LIMIT) -> list[OvertimeRisk]:
    """Top employees by scheduled hours; over the weekly threshold means at risk."""
    hours: dict[str, float] = {}
    for shift in shifts:
        if not shift.employee_id:
            continue
        hours[shift.employee_id] = hours.get(shift.employee_id, 0.0) + calculate_hours([shift], policy.timezone).total_hours

    ranked = sorted(hours.items(), key=lambda item: item[1], reverse=True)[:limit]
    return [
        OvertimeRisk(employee_id=employee_id, hours=h, is_at_risk=h > policy.weekly_otc_threshold)
        for employee_id, h in ranked
    ]


def department_breakdown(shifts: Sequence[Shift], policy: OrganizationPolicy) -> list[DepartmentHours]:
    """REGULAR shifts only, grouped by department."""
    grouped: dict[str, list[Shift]] = {}
    for shift in shifts:
        if shift.shift_type != ShiftType.REGULAR or not shift.department_id:
            continue
        grouped.setdefault(shift.department_id, []).append(shift)

    return [
        DepartmentHours(
            department_id=department_id,
            total_shifts=len(dept_shifts),
            scheduled_employees=len({s.employee_id for s in dept_shifts if s.employee_id}),
            regular_hours=calculate_hours(dept_shifts, policy.timezone).total_hours,
        )
        for department_id, dept_shifts in sorted(grouped.items())
    ]


def coverage_pct(shifts: Sequence[Shift]) -> float:
    if not shifts:
        return 0.0
    return sum(1 for s in shifts if s.employee_id) / len(shifts) * 100


def _hours_by(shifts: Sequence[Shift], key: str, timezone: str) -> dict:
    out: dict[str, float] = {}
    for shift in shifts:
        group = getattr(shift, key)
        if not group:
            continue
        hours = calculate_hours([shift], timezone).total_hours
        out[group] = out.get(group, 0.0) + hours
    return out


class HoursReportService:
    """Weekly scheduled-hours summary for managers."""

    def __init__(
        self,
        organizations: OrganizationRepository,
        weeks: ScheduleWeekRepository,
        shifts: ShiftRepository,
        entries: TimeEntryRepository,
        *,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._organizations = organizations
        self._weeks = weeks
        self._shifts = shifts
        self._entries = entries
        self._clock = clock

    def build_weekly_summary(self, org_id: str, week_id: Optional[str] = None, *, now: Optional[datetime] = None) -> WeeklySummary:
        policy = self._organizations.get_policy(org_id)
        if not policy:
            raise NotFoundError("Organization not found")

        if week_id:
            week = self._weeks.get_by_id(org_id=org_id, week_id=week_id)
        else:
            week = self._weeks.get_containing(org_id=org_id, at=ensure_utc(now or self._clock()))
        if not week:
            raise NotFoundError("Schedule week not found")

        shifts = list(self._shifts.list_for_week(week_id=week.week_id))
        entries = self._entries.list_clocked_in_between(org_id=org_id, start=week.start_date, end=week.end_date)

        # Raw clocked time here; pending overtime is not capped in the summary.
        actual_minutes = sum(minutes_between(e.clock_in_at, e.clock_out_at) for e in entries if e.clock_out_at)

        return WeeklySummary(
            week_id=week.week_id,
            week_state=week.state.value,
            total_shifts=len(shifts),
            overtime=calculate_overtime(shifts, policy),
            scheduled_employees=len({s.employee_id for s in shifts if s.employee_id}),
            shift_counts=dict(Counter(s.shift_type.value for s in shifts)),
            department_shifts=dict(Counter(s.department_id for s in shifts if s.department_id)),
            location_shifts=dict(Counter(s.location_id for s in shifts if s.location_id)),
            department_hours=_hours_by(shifts, "department_id", policy.timezone),
            location_hours=_hours_by(shifts, "location_id", policy.timezone),
            departments=department_breakdown(shifts, policy),
            overtime_risks=rank_overtime_risks(shifts, policy),
            open_shifts=sum(1 for s in shifts if not s.employee_id),
            coverage_pct=coverage_pct(shifts),
            actual_worked_hours=actual_minutes / 60,
            late_clock_ins=sum(1 for e in entries if e.is_late),
        )
