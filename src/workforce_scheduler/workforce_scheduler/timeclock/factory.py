from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..shifts.model import Shift
from .model import TimeEntry
from .strategies.base import ClockStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy
from .strategies.overtime_strategy import OvertimeStrategy


@dataclass
class ClockStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_clock_in(self, *, now: datetime, shift: Optional[Shift], is_first_entry: bool) -> ClockStrategy:
        # Re-clock-ins on the same shift are never late.
        if not shift or not is_first_entry:
            return NormalStrategy()

        if now > shift.start_time:
            return LateStrategy()
        return NormalStrategy()

    def for_clock_out(self, *, now: datetime, entry: TimeEntry) -> ClockStrategy:
        if entry.scheduled_end is not None and now > entry.scheduled_end:
            return OvertimeStrategy()
        return NormalStrategy()
