from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import TimeEntryStatus
from .model import NewTimeEntry, TimeEntry


class TimeEntryRepository(Protocol):
    def get_open_for_employee(self, *, org_id: str, employee_id: str) -> Optional[TimeEntry]:
        """Most recent CLOCKED_IN entry without a clock-out."""

        raise NotImplementedError

    def get_open_by_id(self, *, org_id: str, employee_id: str, entry_id: str) -> Optional[TimeEntry]:
        raise NotImplementedError

    def get_open_for_shift(self, *, org_id: str, employee_id: str, shift_id: str) -> Optional[TimeEntry]:
        """Most recent open entry for the shift."""

        raise NotImplementedError

    def list_for_shift(self, *, org_id: str, employee_id: str, shift_id: str) -> Sequence[TimeEntry]:
        """All entries for (employee, shift), oldest clock-in first."""

        raise NotImplementedError

    def create(self, entry: NewTimeEntry) -> TimeEntry:
        """Insert an entry.

        Implementations must reject a second open entry for the same employee
        by raising ``InvalidStateError``.
        """

        raise NotImplementedError

    def close(self, *, entry_id: str, clock_out_at: datetime, status: TimeEntryStatus) -> TimeEntry:
        raise NotImplementedError

    def get_pending_overtime(self, *, org_id: str, entry_id: str) -> Optional[TimeEntry]:
        raise NotImplementedError

    def list_pending_overtime(self, *, org_id: str) -> Sequence[TimeEntry]:
        """PENDING_OVERTIME_APPROVAL entries with clock-out and scheduled end, newest clock-out first."""

        raise NotImplementedError

    def resolve_overtime(self, *, entry_id: str, clock_out_at: datetime) -> TimeEntry:
        """Mark the entry CLOCKED_OUT with the given clock-out."""

        raise NotImplementedError

    def list_clocked_in_between(
        self,
        *,
        org_id: str,
        start: datetime,
        end: datetime,
        employee_id: Optional[str] = None,
    ) -> Sequence[TimeEntry]:
        """Entries with clock_in_at in [start, end), oldest first."""

        raise NotImplementedError
