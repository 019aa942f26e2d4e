"""Constants and defaults."""

DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 10

DEFAULT_WORK_START = "09:00"
DEFAULT_WORK_END = "18:00"
DEFAULT_LATE_GRACE_MINUTES = 0

HOURS_DECIMALS = 2
