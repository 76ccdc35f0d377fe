"""Scheduled-hours and overtime computation.

Both functions are pure: they take shifts (anything with ``start_time``,
``end_time`` and ``break_duration_minutes``) plus the org policy or timezone,
and never touch storage.

Daily and weekly overtime are computed independently and both subtracted
from the total, so an hour can land in both buckets and ``regular_hours`` can
go negative. Payroll reporting reads these numbers as-is; do not clamp here.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import asdict, dataclass
from datetime import date
from typing import Iterable, Sequence

from ..common.datetime_utils import local_day_key, utc_to_local
from ..organizations.model import OrganizationPolicy


@dataclass(frozen=True)
class HoursBreakdown:
    total_hours: float
    break_minutes: int
    break_hours: float

    def as_dict(self) -> dict:
        return {
            "totalHours": self.total_hours,
            "breakMinutes": self.break_minutes,
            "breakHours": self.break_hours,
        }


@dataclass(frozen=True)
class OvertimeBreakdown:
    regular_hours: float
    daily_overtime_hours: float
    weekly_overtime_hours: float
    double_overtime_hours: float
    total_hours: float

    @property
    def overtime_hours(self) -> float:
        return self.daily_overtime_hours + self.weekly_overtime_hours

    def as_dict(self) -> dict:
        data = asdict(self)
        return {
            "regularHours": data["regular_hours"],
            "dailyOvertimeHours": data["daily_overtime_hours"],
            "weeklyOvertimeHours": data["weekly_overtime_hours"],
            "doubleOvertimeHours": data["double_overtime_hours"],
            "totalHours": data["total_hours"],
        }


def calculate_hours(shifts: Iterable, timezone: str) -> HoursBreakdown:
    """Sum shift durations in hours; breaks are tracked but not subtracted."""
    total_seconds = 0.0
    break_minutes = 0

    for shift in shifts:
        start = utc_to_local(shift.start_time, timezone)
        end = utc_to_local(shift.end_time, timezone)
        # Aware subtraction: overnight and DST-spanning shifts come out right.
        total_seconds += (end - start).total_seconds()
        break_minutes += int(shift.break_duration_minutes or 0)

    return HoursBreakdown(
        total_hours=total_seconds / 3600,
        break_minutes=break_minutes,
        break_hours=break_minutes / 60,
    )


def group_by_local_day(shifts: Iterable, timezone: str) -> dict[date, list]:
    """Bucket shifts by the org-local date of their start."""
    days: dict[date, list] = defaultdict(list)
    for shift in shifts:
        days[local_day_key(shift.start_time, timezone)].append(shift)
    return dict(days)


def calculate_overtime(shifts: Sequence, policy: OrganizationPolicy) -> OvertimeBreakdown:
    daily_threshold = float(policy.daily_otc_threshold)
    weekly_threshold = float(policy.weekly_otc_threshold)

    daily_overtime = 0.0
    for day_shifts in group_by_local_day(shifts, policy.timezone).values():
        day_total = calculate_hours(day_shifts, policy.timezone).total_hours
        if day_total > daily_threshold:
            daily_overtime += day_total - daily_threshold

    # Recomputed over the full set rather than summed from the daily totals.
    total_hours = calculate_hours(shifts, policy.timezone).total_hours

    weekly_overtime = 0.0
    if total_hours > weekly_threshold:
        weekly_overtime = total_hours - weekly_threshold

    double_overtime = 0.0
    if total_hours > weekly_threshold * 2:
        double_overtime = total_hours - weekly_threshold * 2

    return OvertimeBreakdown(
        regular_hours=total_hours - daily_overtime - weekly_overtime - double_overtime,
        daily_overtime_hours=daily_overtime,
        weekly_overtime_hours=weekly_overtime,
        double_overtime_hours=double_overtime,
        total_hours=total_hours,
    )
