from __future__ import annotations

import httpx
import pytest
from werkzeug.security import generate_password_hash

from src.ponto_sync.ponto_sync.auth.service import AuthService
from src.ponto_sync.ponto_sync.container import Container
from src.ponto_sync.ponto_sync.core.enums import Collection
from src.ponto_sync.ponto_sync.kiosk.service import KioskService
from src.ponto_sync.ponto_sync.main import create_app
from src.ponto_sync.ponto_sync.proxy.forwarder import ProxyForwarder


def proxy_handler(request):
    if request.url.path == "/down":
        raise httpx.ConnectError("refused", request=request)
    if request.url.path == "/boom":
        raise RuntimeError("relay bug")
    if request.url.path == "/plain":
        return httpx.Response(200, text="pong")
    return httpx.Response(200, json={"path": request.url.path, "query": request.url.query.decode()})


@pytest.fixture
def app(monkeypatch, backend, store, manager):
    monkeypatch.setenv("APP_ENV", "testing")
    backend.seed(Collection.EMPLOYEES, [{"id": "e1", "name": "Ana", "pin": "1234"}])
    backend.seed(
        Collection.PUNCHES,
        [
            {"id": "p1", "pin": "1234", "name": "Ana", "date": "05/01/2025", "time": "08:00:00", "kind": "clock-in"},
            {"id": "p2", "pin": "1234", "name": "Ana", "date": "2025-01-06", "time": "08:00:00", "kind": "clock-in"},
        ],
    )
    manager.refresh()
    container = Container(
        store=store,
        backend=backend,
        proxy=ProxyForwarder("http://backend.test", transport=httpx.MockTransport(proxy_handler)),
        sync_manager=manager,
        kiosk_service=KioskService(manager, cooldown_seconds=0),
        auth_service=AuthService("admin", generate_password_hash("@admin123")),
    )
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin(client):
    response = client.post("/login", json={"username": "admin", "password": "@admin123"})
    assert response.status_code == 200
    return client


def test_admin_endpoints_require_login(client):
    response = client.get("/api/admin/employees")

    assert response.status_code == 401
    assert response.get_json()["success"] is False


def test_wrong_password_is_401(client):
    response = client.post("/login", json={"username": "admin", "password": "nope"})

    assert response.status_code == 401
    assert response.get_json()["error"]["message"] == "Invalid username or password"


def test_logout_closes_the_session(admin):
    admin.post("/logout")

    assert admin.get("/api/admin/employees").status_code == 401


def test_list_employees(admin):
    body = admin.get("/api/admin/employees").get_json()

    assert body["success"] is True
    assert body["data"] == [{"id": "e1", "name": "Ana", "pin": "1234", "department": None}]
    assert body["meta"]["sync_status"] == "online"


def test_create_employee_and_duplicate_pin(admin):
    created = admin.post("/api/admin/employees", json={"name": "Bruno", "pin": "5678"})
    duplicate = admin.post("/api/admin/employees", json={"name": "Carla", "pin": "5678"})

    assert created.status_code == 201
    assert created.get_json()["meta"]["queued"] is False
    assert duplicate.status_code == 400


def test_update_employee_cascades(admin, backend):
    response = admin.put("/api/admin/employees/e1", json={"pin": "4321"})

    assert response.status_code == 200
    assert {p["pin"] for p in backend.data[Collection.PUNCHES].values()} == {"4321"}


def test_delete_employee_offline_is_queued(admin, backend):
    backend.online = False

    body = admin.delete("/api/admin/employees/e1").get_json()

    assert body["meta"]["queued"] is True


def test_list_punches_with_filters_and_sort(admin):
    body = admin.get("/api/admin/punches?start=2025-01-06&name=ana").get_json()
    assert [p["id"] for p in body["data"]] == ["p2"]
    assert body["meta"]["total_pages"] == 1

    body = admin.get("/api/admin/punches?sort=date&direction=asc").get_json()
    assert [p["id"] for p in body["data"]] == ["p1", "p2"]


@pytest.mark.parametrize("query", ["start=yesterday", "page=two", "sort=salary", "sort=date&direction=up"])
def test_list_punches_rejects_bad_query(admin, query):
    assert admin.get(f"/api/admin/punches?{query}").status_code == 400


def test_create_and_delete_punch(admin, backend):
    created = admin.post(
        "/api/admin/punches",
        json={"pin": "1234", "name": "Ana", "date": "2025-01-07", "time": "12:00", "kind": "break-start"},
    ).get_json()["data"]

    assert created["date"] == "07/01/2025"
    assert admin.delete(f"/api/admin/punches/{created['id']}").status_code == 200
    assert created["id"] not in backend.data[Collection.PUNCHES]


def test_kiosk_flow(client):
    validated = client.post("/api/kiosk/validate", json={"pin": "1234"})
    assert validated.get_json()["data"] == {"id": "e1", "name": "Ana"}

    punched = client.post("/api/kiosk/punch", json={"pin": "1234", "kind": "clock-in"})
    body = punched.get_json()
    assert punched.status_code == 201
    assert body["message"] == "Have a good shift, Ana!"
    assert body["meta"]["queued"] is False


def test_kiosk_rejects_unknown_pin(client):
    response = client.post("/api/kiosk/validate", json={"pin": "9999"})

    assert response.status_code == 400
    assert response.get_json()["error"]["message"] == "Invalid PIN"


def test_sync_status_is_public(client, backend):
    backend.online = False

    body = client.get("/api/sync/status").get_json()

    assert body["data"] == {"status": "online", "backend": "disconnected", "pending": 0}


def test_sync_replay_drains_queue(admin, backend):
    backend.online = False
    admin.post("/api/admin/employees", json={"name": "Bruno", "pin": "5678"})
    backend.online = True

    body = admin.post("/api/sync/replay").get_json()

    assert body["data"]["replay"]["replayed"] == 1
    assert body["data"]["replay"]["drained"] is True
    assert body["data"]["refresh"]["status"] == "online"


def test_proxy_preflight_has_cors_headers(client):
    response = client.options("/api/proxy/employees")

    assert response.status_code == 200
    assert response.data == b""
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert "DELETE" in response.headers["Access-Control-Allow-Methods"]


def test_proxy_forwards_without_prefix(client):
    response = client.get("/api/proxy/employees?page=2")

    assert response.get_json() == {"path": "/employees", "query": "page=2"}
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_proxy_wraps_text_bodies(client):
    assert client.get("/api/proxy/plain").get_json() == {"text": "pong"}


def test_proxy_failure_is_500_with_message(client):
    response = client.get("/api/proxy/down")

    body = response.get_json()
    assert response.status_code == 500
    assert (body["success"], body["error"]) == (False, "Proxy error")
    assert body["message"]
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_unknown_route_is_json_404(client):
    response = client.get("/nope")

    assert response.status_code == 404
    assert response.get_json()["success"] is False


def test_proxy_unexpected_failure_keeps_cors_and_shape(client):
    response = client.get("/api/proxy/boom")

    body = response.get_json()
    assert response.status_code == 500
    assert (body["success"], body["error"], body["message"]) == (False, "Proxy error", "relay bug")
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_proxy_non_ascii_header_is_a_proxy_error(client):
    response = client.get("/api/proxy/employees", headers={"X-Name": "José"})

    assert response.status_code == 500
    assert response.get_json()["error"] == "Proxy error"
    assert response.headers["Access-Control-Allow-Origin"] == "*"
