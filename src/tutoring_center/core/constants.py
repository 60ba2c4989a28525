"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SESSION_CODE_DIGITS = 2
DEFAULT_REACTIVATION_POLICY = "reuse_row"
RETENTION_DISPLAY_DECIMALS = 1
HOURS_DISPLAY_DECIMALS = 2
SECONDS_PER_DAY = 24 * 60 * 60
