from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.errors import register_error_handlers
from .container import Container, build_container
from .auth.controller import register as register_auth
from .employees.controller import register as register_employees
from .kiosk.controller import register as register_kiosk
from .proxy.controller import register as register_proxy
from .punches.controller import register as register_punches
from .sync.controller import register as register_sync

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("settings=%s backend=%s cache=%s", settings_module, getattr(settings, "BACKEND_URL", None), getattr(settings, "CACHE_BACKEND", "memory"))

    if container is None:
        container = build_container(settings)
        # Warm the read model; an unreachable backend just leaves us on the cache.
        container.sync_manager.refresh()

    register_error_handlers(app)
    register_auth(app, container)
    register_kiosk(app, container)
    register_employees(app, container)
    register_punches(app, container)
    register_sync(app, container)
    register_proxy(app, container)

    return app
