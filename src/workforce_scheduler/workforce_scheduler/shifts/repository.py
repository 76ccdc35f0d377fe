from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Shift


class ShiftRepository(Protocol):
    def get_for_employee(self, *, org_id: str, shift_id: str, employee_id: str) -> Optional[Shift]:
        """Shift assigned to ``employee_id`` within the organization, if any."""

        raise NotImplementedError

    def list_overlapping_for_employee(
        self,
        *,
        org_id: str,
        employee_id: str,
        ends_after: datetime,
        starts_before: datetime,
        limit: int,
    ) -> Sequence[Shift]:
        """Shifts with end >= ends_after and start <= starts_before, ordered by start."""

        raise NotImplementedError

    def list_starting_between(
        self,
        *,
        org_id: str,
        employee_id: str,
        start: datetime,
        end: datetime,
    ) -> Sequence[Shift]:
        """Shifts with start in [start, end)."""

        raise NotImplementedError

    def list_for_week(self, *, week_id: str) -> Sequence[Shift]:
        raise NotImplementedError
