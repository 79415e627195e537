"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_WORK_START = "08:00"
DEFAULT_LATE_TOLERANCE_MINUTES = 15
DEFAULT_CODE_VALIDITY_HOURS = 24
DEFAULT_QR_CODE_PREFIX = "ATTEND"
DEFAULT_SCAN_RETRY_ATTEMPTS = 3
DEFAULT_FEED_LIMIT = 10

# MySQL error numbers meaning another transaction won the race on the same rows.
MYSQL_DUPLICATE_KEY = 1062
MYSQL_LOCK_WAIT_TIMEOUT = 1205
MYSQL_DEADLOCK = 1213
