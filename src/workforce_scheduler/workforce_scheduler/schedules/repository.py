from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import ScheduleWeek


class ScheduleWeekRepository(Protocol):
    def get_by_id(self, *, org_id: str, week_id: str) -> Optional[ScheduleWeek]:
        raise NotImplementedError

    def get_containing(self, *, org_id: str, at: datetime) -> Optional[ScheduleWeek]:
        """Week with start_date <= at <= end_date (latest start wins)."""

        raise NotImplementedError
