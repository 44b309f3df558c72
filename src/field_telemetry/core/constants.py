"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SCAN_COOLDOWN_SECONDS = 60
MAX_ALERT_HISTORY = 100
UNKNOWN_DEVICE = "unknown"

DEFAULT_DB_POOL_SIZE = 10
DEFAULT_DB_CONNECT_TIMEOUT = 10
DEFAULT_PORT = 3000
POOL_RETRY_INTERVAL_SECONDS = 0.05
