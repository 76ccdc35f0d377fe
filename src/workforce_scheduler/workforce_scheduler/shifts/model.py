from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ShiftStatus, ShiftType
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Shift:
    """Domain entity: a scheduled work interval.

    ``employee_id`` is None for an open slot.
    """

    shift_id: str
    employee_id: Optional[str]
    start_time: datetime
    end_time: datetime
    department_id: Optional[str] = None
    location_id: Optional[str] = None
    schedule_week_id: Optional[str] = None
    break_duration_minutes: int = 0
    break_is_paid: bool = False
    shift_type: ShiftType = ShiftType.REGULAR
    status: ShiftStatus = ShiftStatus.SCHEDULED

    def __post_init__(self):
        if self.end_time <= self.start_time:
            raise ValidationError("Shift end time must be after start time")

    def as_dict(self) -> dict:
        return {
            "id": self.shift_id,
            "employeeId": self.employee_id,
            "departmentId": self.department_id,
            "locationId": self.location_id,
            "scheduleWeekId": self.schedule_week_id,
            "startTime": self.start_time.isoformat(),
            "endTime": self.end_time.isoformat(),
            "breakDurationMinutes": self.break_duration_minutes,
            "breakIsPaid": self.break_is_paid,
            "shiftType": self.shift_type.value,
            "status": self.status.value,
        }
