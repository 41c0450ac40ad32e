from werkzeug.security import generate_password_hash

SECRET_KEY = "test-secret"
DEBUG = False
TESTING = True
LOG_LEVEL = "DEBUG"

BACKEND_URL = "http://backend.test"
PROXY_PREFIX = "/api/proxy"
REQUEST_TIMEOUT = 1.0

CACHE_BACKEND = "memory"
CACHE_PATH = ""
DB_CONFIG = {}
AUTO_INIT_DB = False

RETRY_POLICY = "none"
RETRY_ATTEMPTS = 0
RETRY_DELAY = 0.0

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD_HASH = generate_password_hash("secret")

KIOSK_COOLDOWN_SECONDS = 0.0
