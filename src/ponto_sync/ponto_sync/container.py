from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .auth.service import AuthService
from .backend.client import HttpBackendClient
from .core.constants import DEFAULT_KIOSK_COOLDOWN_SECONDS, DEFAULT_PROXY_PREFIX, DEFAULT_REQUEST_TIMEOUT
from .database.bootstrap import ensure_kv_table
from .database.connection import DBConfig, DatabaseConnection
from .kiosk.service import KioskService
from .proxy.forwarder import ProxyForwarder
from .storage.json_file_store import JsonFileStore
from .storage.memory_store import InMemoryStore
from .storage.mysql_store import MySQLStore
from .storage.store import KeyValueStore
from .sync.factory import RetryStrategyFactory
from .sync.manager import SyncManager
from .sync.queue import PendingWriteQueue


@dataclass(frozen=True)
class Container:
    store: KeyValueStore
    backend: HttpBackendClient
    proxy: ProxyForwarder

    sync_manager: SyncManager
    kiosk_service: KioskService
    auth_service: AuthService


def build_store(settings: Any) -> KeyValueStore:
    kind = str(getattr(settings, "CACHE_BACKEND", "memory")).strip().lower()
    if kind == "memory":
        return InMemoryStore()
    if kind == "file":
        return JsonFileStore(getattr(settings, "CACHE_PATH", "ponto_cache.json"))
    if kind == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_mapping(getattr(settings, "DB_CONFIG", {})))
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            ensure_kv_table(conn)
        return MySQLStore(conn)
    raise ValueError(f"Unknown CACHE_BACKEND: {kind!r}")


def build_container(settings: Any) -> Container:
    backend_url = str(getattr(settings, "BACKEND_URL"))
    timeout = float(getattr(settings, "REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT))

    store = build_store(settings)
    backend = HttpBackendClient(backend_url, timeout=timeout)
    proxy = ProxyForwarder(
        backend_url,
        prefix=getattr(settings, "PROXY_PREFIX", DEFAULT_PROXY_PREFIX),
        timeout=timeout,
    )

    retry_strategy = RetryStrategyFactory().from_settings(
        policy=getattr(settings, "RETRY_POLICY", "none"),
        retries=getattr(settings, "RETRY_ATTEMPTS", 3),
        delay=getattr(settings, "RETRY_DELAY", 1.0),
    )
    sync_manager = SyncManager(backend, store, queue=PendingWriteQueue(store), retry_strategy=retry_strategy)
    kiosk_service = KioskService(
        sync_manager,
        cooldown_seconds=float(getattr(settings, "KIOSK_COOLDOWN_SECONDS", DEFAULT_KIOSK_COOLDOWN_SECONDS)),
    )
    auth_service = AuthService(
        str(getattr(settings, "ADMIN_USERNAME", "admin")),
        str(getattr(settings, "ADMIN_PASSWORD_HASH", "")),
    )

    return Container(
        store=store,
        backend=backend,
        proxy=proxy,
        sync_manager=sync_manager,
        kiosk_service=kiosk_service,
        auth_service=auth_service,
    )
