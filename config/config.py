import os

DEFAULT_BACKEND_URL = "https://backend-ponto-digital-2.onrender.com"


def env_bool(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Settings shared by every environment; each module below picks and overrides."""

    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Remote backend
    BACKEND_URL = os.getenv("BACKEND_URL", DEFAULT_BACKEND_URL)
    PROXY_PREFIX = os.getenv("PROXY_PREFIX", "/api/proxy")
    REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "15"))

    # Offline cache: memory | file | mysql
    CACHE_BACKEND = os.getenv("CACHE_BACKEND", "file")
    CACHE_PATH = os.getenv("CACHE_PATH", "instance/ponto_cache.json")

    DB_CONFIG = {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", ""),
        "database": os.getenv("DB_NAME", "ponto_cache"),
    }
    AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "0")

    # Queue replay: none | fixed | exponential
    RETRY_POLICY = os.getenv("RETRY_POLICY", "exponential")
    RETRY_ATTEMPTS = int(os.getenv("RETRY_ATTEMPTS", "3"))
    RETRY_DELAY = float(os.getenv("RETRY_DELAY", "0.5"))

    ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH", "")

    KIOSK_COOLDOWN_SECONDS = float(os.getenv("KIOSK_COOLDOWN_SECONDS", "2"))
