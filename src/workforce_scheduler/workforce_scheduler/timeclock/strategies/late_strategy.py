from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...common.datetime_utils import minutes_between
from ...core.enums import TimeEntryStatus
from ...shifts.model import Shift
from ..model import TimeEntry
from .base import ClockDecision, ClockStrategy


class LateStrategy(ClockStrategy):
    """First clock-in for a shift after its scheduled start."""

    def decide_clock_in(self, *, now: datetime, shift: Optional[Shift]) -> ClockDecision:
        late_by = minutes_between(shift.start_time, now) if shift else 0
        return ClockDecision(status=TimeEntryStatus.CLOCKED_IN, is_late=late_by > 0, late_by_minutes=late_by)

    def decide_clock_out(self, *, now: datetime, entry: TimeEntry) -> ClockDecision:
        return ClockDecision(status=TimeEntryStatus.CLOCKED_OUT, is_late=entry.is_late, late_by_minutes=entry.late_by_minutes)
