from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import TimeEntryStatus
from ...shifts.model import Shift
from ..model import TimeEntry
from .base import ClockDecision, ClockStrategy


class NormalStrategy(ClockStrategy):
    """On-time (or repeat) clock-in, clock-out within the scheduled window."""

    def decide_clock_in(self, *, now: datetime, shift: Optional[Shift]) -> ClockDecision:
        return ClockDecision(status=TimeEntryStatus.CLOCKED_IN)

    def decide_clock_out(self, *, now: datetime, entry: TimeEntry) -> ClockDecision:
        return ClockDecision(status=TimeEntryStatus.CLOCKED_OUT, is_late=entry.is_late, late_by_minutes=entry.late_by_minutes)
