from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import TimeEntryStatus
from ...shifts.model import Shift
from ..model import TimeEntry


@dataclass(frozen=True)
class ClockDecision:
    status: TimeEntryStatus
    is_late: bool = False
    late_by_minutes: int = 0

    @property
    def needs_overtime_approval(self) -> bool:
        return self.status == TimeEntryStatus.PENDING_OVERTIME_APPROVAL


class ClockStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide a time entry's status."""

    @abstractmethod
    def decide_clock_in(self, *, now: datetime, shift: Optional[Shift]) -> ClockDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_clock_out(self, *, now: datetime, entry: TimeEntry) -> ClockDecision:
        raise NotImplementedError
