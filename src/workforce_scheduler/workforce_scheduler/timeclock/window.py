"""Clock-in eligibility windows."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..core.constants import LATE_CLOCK_IN_GRACE_HOURS
from ..shifts.model import Shift
from .model import EligibleShift


@dataclass(frozen=True)
class ClockWindow:
    earliest_clock_in: datetime
    latest_clock_in: datetime

    def contains(self, now: datetime) -> bool:
        return self.earliest_clock_in <= now <= self.latest_clock_in


def get_clock_eligible_window(shift: Shift, allowance_minutes: int) -> ClockWindow:
    """``[start - allowance, end + 2h]`` for ``shift``."""
    return ClockWindow(
        earliest_clock_in=shift.start_time - timedelta(minutes=allowance_minutes),
        latest_clock_in=shift.end_time + timedelta(hours=LATE_CLOCK_IN_GRACE_HOURS),
    )


def find_best_eligible_shift(shifts: Sequence[Shift], now: datetime, allowance_minutes: int) -> Optional[EligibleShift]:
    """Pick the shift an employee should clock into.

    Among shifts whose window contains ``now`` the earliest start wins. When
    none is open yet, the soonest upcoming one is returned with
    ``can_clock_in=False`` so callers can show when clocking opens.
    """
    if not shifts:
        return None

    with_window = [(shift, get_clock_eligible_window(shift, allowance_minutes)) for shift in shifts]

    current = sorted(
        (row for row in with_window if row[1].contains(now)),
        key=lambda row: row[0].start_time,
    )
    if current:
        shift, window = current[0]
        return EligibleShift(
            shift=shift,
            earliest_clock_in_at=window.earliest_clock_in,
            latest_clock_in_at=window.latest_clock_in,
            can_clock_in=True,
        )

    upcoming = sorted(
        (row for row in with_window if now < row[1].earliest_clock_in),
        key=lambda row: row[1].earliest_clock_in,
    )
    if not upcoming:
        return None

    shift, window = upcoming[0]
    return EligibleShift(
        shift=shift,
        earliest_clock_in_at=window.earliest_clock_in,
        latest_clock_in_at=window.latest_clock_in,
        can_clock_in=False,
    )
