"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EMPLOYEES_CACHE_KEY = "employees"
PUNCHES_CACHE_KEY = "punches"
PENDING_WRITES_KEY = "pending_writes"

LOCAL_ID_PREFIX = "local-"

DEFAULT_PAGE_SIZE = 104
MAX_PIN_LENGTH = 6
DEFAULT_KIOSK_COOLDOWN_SECONDS = 2
DEFAULT_PROXY_PREFIX = "/api/proxy"
DEFAULT_REQUEST_TIMEOUT = 15.0

OFFLINE_MESSAGE = "operating from cache"
