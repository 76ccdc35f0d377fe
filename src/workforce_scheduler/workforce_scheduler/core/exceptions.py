class DomainError(Exception):
    """Base exception for business rule violations."""


class NotFoundError(DomainError):
    """Raised when an organization, shift or time entry is missing or not owned by the caller."""


class InvalidStateError(DomainError):
    """Raised when an operation is not allowed from the record's current state."""


class WindowViolationError(DomainError):
    """Raised when a clock-in falls outside the shift's eligibility window."""


class CapacityExceededError(DomainError):
    """Raised when the per-shift clock record cap is reached."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
