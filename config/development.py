from werkzeug.security import generate_password_hash

from .config import Config, env_bool

SECRET_KEY = Config.SECRET_KEY
DEBUG = env_bool("DEBUG", "1")
LOG_LEVEL = Config.LOG_LEVEL

BACKEND_URL = Config.BACKEND_URL
PROXY_PREFIX = Config.PROXY_PREFIX
REQUEST_TIMEOUT = Config.REQUEST_TIMEOUT

CACHE_BACKEND = Config.CACHE_BACKEND
CACHE_PATH = Config.CACHE_PATH
DB_CONFIG = Config.DB_CONFIG
# Creates the cache table on startup when CACHE_BACKEND=mysql
AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "1")

RETRY_POLICY = Config.RETRY_POLICY
RETRY_ATTEMPTS = Config.RETRY_ATTEMPTS
RETRY_DELAY = Config.RETRY_DELAY

# Local default admin/@admin123 unless a hash is provided
ADMIN_USERNAME = Config.ADMIN_USERNAME
ADMIN_PASSWORD_HASH = Config.ADMIN_PASSWORD_HASH or generate_password_hash("@admin123")

KIOSK_COOLDOWN_SECONDS = Config.KIOSK_COOLDOWN_SECONDS
