import os

from .config import Config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

BACKEND_URL = Config.BACKEND_URL
PROXY_PREFIX = Config.PROXY_PREFIX
REQUEST_TIMEOUT = Config.REQUEST_TIMEOUT

CACHE_BACKEND = os.getenv("CACHE_BACKEND", "mysql")
CACHE_PATH = Config.CACHE_PATH
DB_CONFIG = Config.DB_CONFIG
AUTO_INIT_DB = Config.AUTO_INIT_DB

RETRY_POLICY = Config.RETRY_POLICY
RETRY_ATTEMPTS = Config.RETRY_ATTEMPTS
RETRY_DELAY = Config.RETRY_DELAY

# No default password in production: login stays closed until the hash is set.
ADMIN_USERNAME = Config.ADMIN_USERNAME
ADMIN_PASSWORD_HASH = Config.ADMIN_PASSWORD_HASH

KIOSK_COOLDOWN_SECONDS = Config.KIOSK_COOLDOWN_SECONDS
