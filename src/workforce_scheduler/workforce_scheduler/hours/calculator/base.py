from __future__ import annotations

from abc import ABC, abstractmethod

from ...shifts.model import Shift
from ...timeclock.model import TimeEntry


class WorkedMinutesCalculator(ABC):
    """Calculator interface (Strategy Pattern for actual-vs-scheduled reconciliation)."""

    @abstractmethod
    def worked_minutes(self, entry: TimeEntry) -> int:
        raise NotImplementedError

    @abstractmethod
    def scheduled_minutes(self, shift: Shift) -> int:
        raise NotImplementedError
