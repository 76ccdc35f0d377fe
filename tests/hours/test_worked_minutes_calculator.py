from datetime import datetime, timedelta

import pytz

from src.workforce_scheduler.workforce_scheduler.core.enums import TimeEntryStatus
from src.workforce_scheduler.workforce_scheduler.hours.calculator.standard_calculator import (
    StandardWorkedMinutesCalculator,
)
from src.workforce_scheduler.workforce_scheduler.timeclock.model import TimeEntry
from tests.fakes import make_shift

T = datetime(2026, 3, 2, 9, 0, tzinfo=pytz.UTC)


def _entry(clock_out, status, scheduled_end=None):
    return TimeEntry(
        entry_id="e1",
        org_id="org-1",
        employee_id="emp-1",
        shift_id="s1",
        clock_in_at=T,
        clock_out_at=clock_out,
        scheduled_start=T,
        scheduled_end=scheduled_end,
        is_late=False,
        late_by_minutes=0,
        status=status,
    )


def test_open_entry_counts_nothing():
    calc = StandardWorkedMinutesCalculator()
    assert calc.worked_minutes(_entry(None, TimeEntryStatus.CLOCKED_IN)) == 0


def test_closed_entry_counts_whole_minutes():
    calc = StandardWorkedMinutesCalculator()
    entry = _entry(T + timedelta(hours=2, seconds=59), TimeEntryStatus.CLOCKED_OUT)
    assert calc.worked_minutes(entry) == 120


def test_pending_overtime_is_capped_at_scheduled_end():
    calc = StandardWorkedMinutesCalculator()
    entry = _entry(T + timedelta(hours=9), TimeEntryStatus.PENDING_OVERTIME_APPROVAL, scheduled_end=T + timedelta(hours=8))
    assert calc.worked_minutes(entry) == 480


def test_scheduled_minutes_subtract_break_but_not_below_zero():
    calc = StandardWorkedMinutesCalculator()
    assert calc.scheduled_minutes(make_shift("s", T, T + timedelta(hours=8), break_duration_minutes=30)) == 450
    assert calc.scheduled_minutes(make_shift("s", T, T + timedelta(minutes=20), break_duration_minutes=30)) == 0
