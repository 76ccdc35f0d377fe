from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"


MANAGER_ROLES = (Role.ADMIN, Role.MANAGER)


class ShiftType(str, Enum):
    REGULAR = "REGULAR"
    ON_CALL = "ON_CALL"
    OVERTIME = "OVERTIME"
    DOUBLE_OVERTIME = "DOUBLE_OVERTIME"


class ShiftStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    PUBLISHED = "PUBLISHED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class WeekState(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"


class TimeEntryStatus(str, Enum):
    """Clock record lifecycle stored in the database."""

    CLOCKED_IN = "CLOCKED_IN"
    CLOCKED_OUT = "CLOCKED_OUT"
    PENDING_OVERTIME_APPROVAL = "PENDING_OVERTIME_APPROVAL"


class OvertimeDecision(str, Enum):
    APPROVE = "APPROVE"
    DENY = "DENY"


class NotificationType(str, Enum):
    WARNING = "WARNING"
    OVERTIME_APPROVAL = "OVERTIME_APPROVAL"
    OVERTIME_APPROVED = "OVERTIME_APPROVED"
    OVERTIME_DENIED = "OVERTIME_DENIED"
