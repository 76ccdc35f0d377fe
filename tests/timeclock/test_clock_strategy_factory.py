from datetime import datetime, timedelta

import pytz

from src.workforce_scheduler.workforce_scheduler.core.enums import TimeEntryStatus
from src.workforce_scheduler.workforce_scheduler.timeclock.factory import ClockStrategyFactory
from src.workforce_scheduler.workforce_scheduler.timeclock.model import TimeEntry
from src.workforce_scheduler.workforce_scheduler.timeclock.strategies.late_strategy import LateStrategy
from src.workforce_scheduler.workforce_scheduler.timeclock.strategies.normal_strategy import NormalStrategy
from src.workforce_scheduler.workforce_scheduler.timeclock.strategies.overtime_strategy import OvertimeStrategy
from tests.fakes import make_shift

T = datetime(2026, 3, 2, 9, 0, tzinfo=pytz.UTC)
SHIFT = make_shift("s1", T, T + timedelta(hours=8))


def _open_entry(scheduled_end):
    return TimeEntry(
        entry_id="e1",
        org_id="org-1",
        employee_id="emp-1",
        shift_id="s1" if scheduled_end else None,
        clock_in_at=T,
        clock_out_at=None,
        scheduled_start=T if scheduled_end else None,
        scheduled_end=scheduled_end,
        is_late=False,
        late_by_minutes=0,
        status=TimeEntryStatus.CLOCKED_IN,
    )


def test_factory_clock_in_on_time_is_normal():
    f = ClockStrategyFactory()
    strategy = f.for_clock_in(now=T, shift=SHIFT, is_first_entry=True)
    assert isinstance(strategy, NormalStrategy)

    decision = strategy.decide_clock_in(now=T, shift=SHIFT)
    assert decision.status == TimeEntryStatus.CLOCKED_IN
    assert decision.is_late is False


def test_factory_first_clock_in_after_start_is_late():
    now = T + timedelta(minutes=10, seconds=30)
    strategy = ClockStrategyFactory().for_clock_in(now=now, shift=SHIFT, is_first_entry=True)
    assert isinstance(strategy, LateStrategy)

    decision = strategy.decide_clock_in(now=now, shift=SHIFT)
    assert decision.is_late is True
    assert decision.late_by_minutes == 10


def test_factory_re_clock_in_is_never_late():
    now = T + timedelta(hours=3)
    strategy = ClockStrategyFactory().for_clock_in(now=now, shift=SHIFT, is_first_entry=False)
    assert isinstance(strategy, NormalStrategy)


def test_factory_clock_out_after_scheduled_end_needs_approval():
    entry = _open_entry(T + timedelta(hours=8))
    now = T + timedelta(hours=8, minutes=1)

    strategy = ClockStrategyFactory().for_clock_out(now=now, entry=entry)
    assert isinstance(strategy, OvertimeStrategy)
    decision = strategy.decide_clock_out(now=now, entry=entry)
    assert decision.status == TimeEntryStatus.PENDING_OVERTIME_APPROVAL
    assert decision.needs_overtime_approval is True


def test_factory_clock_out_at_scheduled_end_is_normal():
    entry = _open_entry(T + timedelta(hours=8))
    strategy = ClockStrategyFactory().for_clock_out(now=T + timedelta(hours=8), entry=entry)
    assert isinstance(strategy, NormalStrategy)


def test_factory_manual_entry_never_needs_approval():
    entry = _open_entry(None)
    strategy = ClockStrategyFactory().for_clock_out(now=T + timedelta(hours=14), entry=entry)
    assert isinstance(strategy, NormalStrategy)
    assert strategy.decide_clock_out(now=T + timedelta(hours=14), entry=entry).status == TimeEntryStatus.CLOCKED_OUT
