from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import WeekState


@dataclass(frozen=True)
class ScheduleWeek:
    week_id: str
    org_id: str
    start_date: datetime
    end_date: datetime
    state: WeekState = WeekState.DRAFT
