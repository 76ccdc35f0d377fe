from __future__ import annotations

from ...common.datetime_utils import minutes_between
from ...core.enums import TimeEntryStatus
from ...shifts.model import Shift
from ...timeclock.model import TimeEntry
from .base import WorkedMinutesCalculator


class StandardWorkedMinutesCalculator(WorkedMinutesCalculator):
    """Standard rule: worked = out - in, scheduled = shift - break, not below 0.

    Unapproved overtime is capped at the scheduled end until a manager
    resolves it.
    """

    def worked_minutes(self, entry: TimeEntry) -> int:
        if not entry.clock_out_at:
            return 0
        clock_out = entry.clock_out_at
        if entry.status == TimeEntryStatus.PENDING_OVERTIME_APPROVAL and entry.scheduled_end:
            clock_out = entry.scheduled_end
        return minutes_between(entry.clock_in_at, clock_out)

    def scheduled_minutes(self, shift: Shift) -> int:
        total = minutes_between(shift.start_time, shift.end_time)
        return max(total - int(shift.break_duration_minutes or 0), 0)
