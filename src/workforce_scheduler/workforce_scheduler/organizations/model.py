from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import (
    DEFAULT_CLOCK_IN_EARLY_ALLOWANCE_MINUTES,
    DEFAULT_DAILY_OTC_THRESHOLD,
    DEFAULT_TIMEZONE,
    DEFAULT_WEEKLY_OTC_THRESHOLD,
)


@dataclass(frozen=True)
class OrganizationPolicy:
    """Per-organization overtime thresholds and clock-in tolerance.

    Read-only input to the hours calculator and the time clock.
    """

    org_id: str
    name: str = ""
    timezone: str = DEFAULT_TIMEZONE
    daily_otc_threshold: float = DEFAULT_DAILY_OTC_THRESHOLD
    weekly_otc_threshold: float = DEFAULT_WEEKLY_OTC_THRESHOLD
    clock_in_early_allowance_minutes: int = DEFAULT_CLOCK_IN_EARLY_ALLOWANCE_MINUTES

    @property
    def early_allowance_minutes(self) -> int:
        # A stored 0/NULL means "not configured".
        return int(self.clock_in_early_allowance_minutes or DEFAULT_CLOCK_IN_EARLY_ALLOWANCE_MINUTES)

    def as_dict(self) -> dict:
        return {
            "clockInEarlyAllowanceMinutes": self.early_allowance_minutes,
            "timezone": self.timezone,
        }
