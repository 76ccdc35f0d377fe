"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "UTC"
DEFAULT_DAILY_OTC_THRESHOLD = 8.0
DEFAULT_WEEKLY_OTC_THRESHOLD = 40.0
DEFAULT_CLOCK_IN_EARLY_ALLOWANCE_MINUTES = 5

# Clock-in stays possible until this long after the scheduled end.
LATE_CLOCK_IN_GRACE_HOURS = 2

# Candidate shifts considered for "what can I clock into now".
CANDIDATE_LOOKBACK_HOURS = 12
CANDIDATE_LOOKAHEAD_HOURS = 24
CANDIDATE_SHIFT_LIMIT = 8

MAX_ENTRIES_PER_SHIFT = 3
OVERTIME_RISK_LIMIT = 5

MANUAL_FORCE_NOTE = "Manual clock-in (force)"
MANUAL_UNASSIGNED_NOTE = "Manual clock-in (no assigned shift)"
