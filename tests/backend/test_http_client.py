from __future__ import annotations

import json

import httpx
import pytest

from src.ponto_sync.ponto_sync.backend.client import HttpBackendClient
from src.ponto_sync.ponto_sync.backend.envelope import ApiResponse
from src.ponto_sync.ponto_sync.core.enums import Collection
from src.ponto_sync.ponto_sync.core.exceptions import TransientNetworkError


def client_for(handler) -> HttpBackendClient:
    return HttpBackendClient("http://backend.test/", transport=httpx.MockTransport(handler))


def test_list_accepts_bare_json_array():
    def handler(request):
        assert request.url.path == "/employees"
        return httpx.Response(200, json=[{"_id": "e1", "name": "Ana", "pin": "1"}])

    assert client_for(handler).list(Collection.EMPLOYEES) == [{"_id": "e1", "name": "Ana", "pin": "1"}]


def test_list_with_a_malformed_item_fails_as_a_whole():
    def handler(request):
        return httpx.Response(200, json=[{"id": "e1", "name": "Ana", "pin": "1"}, "junk"])

    with pytest.raises(TransientNetworkError, match="malformed record"):
        client_for(handler).list(Collection.EMPLOYEES)


def test_list_accepts_success_envelope():
    def handler(request):
        return httpx.Response(200, json={"success": True, "data": [{"id": "p1"}]})

    assert client_for(handler).list(Collection.PUNCHES) == [{"id": "p1"}]


def test_success_false_is_a_failure_even_with_200():
    def handler(request):
        return httpx.Response(200, json={"success": False, "message": "db down"})

    with pytest.raises(TransientNetworkError, match="db down"):
        client_for(handler).list(Collection.EMPLOYEES)


def test_server_error_carries_status():
    def handler(request):
        return httpx.Response(503, json={"error": "maintenance"})

    with pytest.raises(TransientNetworkError) as exc:
        client_for(handler).list(Collection.EMPLOYEES)

    assert exc.value.status == 503


def test_transport_error_is_transient():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransientNetworkError):
        client_for(handler).list(Collection.EMPLOYEES)


def test_malformed_body_is_transient():
    def handler(request):
        return httpx.Response(200, text="<html>gateway</html>")

    with pytest.raises(TransientNetworkError, match="malformed"):
        client_for(handler).list(Collection.EMPLOYEES)


def test_create_posts_payload_and_returns_record():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"id": "srv-1", **seen["body"]})

    created = client_for(handler).create(Collection.EMPLOYEES, {"name": "Ana", "pin": "1234"})

    assert seen == {"method": "POST", "body": {"name": "Ana", "pin": "1234"}}
    assert created["id"] == "srv-1"


def test_create_without_id_in_response_is_a_failure():
    def handler(request):
        return httpx.Response(201, json={"ok": True})

    with pytest.raises(TransientNetworkError):
        client_for(handler).create(Collection.EMPLOYEES, {"name": "Ana"})


def test_update_puts_to_record_path():
    def handler(request):
        assert (request.method, request.url.path) == ("PUT", "/punches/p1")
        return httpx.Response(204)

    assert client_for(handler).update(Collection.PUNCHES, "p1", {"time": "08:00:00"}) is None


def test_delete_treats_404_as_success():
    def handler(request):
        return httpx.Response(404, json={"message": "not found"})

    client_for(handler).delete(Collection.EMPLOYEES, "gone")


def test_update_does_not_treat_404_as_success():
    def handler(request):
        return httpx.Response(404, json={"message": "not found"})

    with pytest.raises(TransientNetworkError):
        client_for(handler).update(Collection.EMPLOYEES, "gone", {})


def test_ping_is_true_for_any_http_answer():
    assert client_for(lambda request: httpx.Response(404)).ping() is True


def test_ping_is_false_when_unreachable():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    assert client_for(handler).ping() is False


def test_envelope_from_error_body_keeps_message():
    envelope = ApiResponse.from_http(400, {"error": "bad pin"})

    assert (envelope.ok, envelope.message) == (False, "bad pin")
