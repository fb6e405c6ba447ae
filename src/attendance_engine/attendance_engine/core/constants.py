"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

PAIRING_TIMEOUT_SECONDS = 30

DEFAULT_LATE_TOLERANCE_MINUTES = 15
DEFAULT_DAY_RESET_TIME = time(4, 0)
DEFAULT_SCHOOL_START = time(9, 0)
DEFAULT_SCHOOL_END = time(16, 0)

DEFAULT_CLOSEOUT_TIME = time(23, 59)
DEFAULT_NOTIFY_WORKERS = 2
