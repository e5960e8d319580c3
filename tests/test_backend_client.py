from __future__ import annotations

import json

import httpx
import pytest

from penpot_panel.errors import MalformedResponse, TransportError
from penpot_panel.services.backend_client import BackendClient


def _client(handler, **kwargs) -> BackendClient:
    return BackendClient(
        "http://backend.test", transport=httpx.MockTransport(handler), **kwargs
    )


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_unwraps_envelope_data():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/status"
        return httpx.Response(
            200,
            json={"success": True, "message": "", "data": {"running": False, "services": [], "message": "idle"}},
        )

    client = _client(handler)
    try:
        payload = await client.get("/status")
    finally:
        await client.aclose()

    assert payload == {"running": False, "services": [], "message": "idle"}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_post_sends_json_body_and_returns_envelope():
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        seen["path"] = request.url.path
        return httpx.Response(200, json={"success": True, "message": "Started 3 Penpot service(s)"})

    client = _client(handler)
    try:
        payload = await client.post("/start", {})
    finally:
        await client.aclose()

    assert seen == {"body": {}, "path": "/start"}
    assert payload["message"] == "Started 3 Penpot service(s)"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_plain_json_passes_through():
    client = _client(lambda r: httpx.Response(200, json={"running": True, "services": []}))
    try:
        assert await client.get("/status") == {"running": True, "services": []}
    finally:
        await client.aclose()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unsuccessful_envelope_raises_transport_error():
    client = _client(
        lambda r: httpx.Response(200, json={"success": False, "message": "Failed to get Penpot status"})
    )
    try:
        with pytest.raises(TransportError, match="Failed to get Penpot status"):
            await client.get("/status")
    finally:
        await client.aclose()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_http_error_status_raises_with_backend_message():
    client = _client(
        lambda r: httpx.Response(500, json={"success": False, "message": "Failed to stop Penpot"})
    )
    try:
        with pytest.raises(TransportError) as excinfo:
            await client.post("/stop", {})
    finally:
        await client.aclose()

    assert excinfo.value.status_code == 500
    assert "Failed to stop Penpot" in str(excinfo.value)
    assert not isinstance(excinfo.value, MalformedResponse)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_invalid_json_is_malformed_response():
    client = _client(
        lambda r: httpx.Response(200, content=b"<html>", headers={"content-type": "application/json"})
    )
    try:
        with pytest.raises(MalformedResponse):
            await client.get("/status")
    finally:
        await client.aclose()


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "exc",
    [httpx.ConnectError("Connection refused"), httpx.ReadTimeout("timed out")],
)
async def test_network_failures_become_transport_errors(exc):
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc

    client = _client(handler)
    try:
        with pytest.raises(TransportError):
            await client.get("/status")
    finally:
        await client.aclose()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_text_accepts_plain_text_and_envelope():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/logs/plain":
            return httpx.Response(200, text="line 1\nline 2\n")
        return httpx.Response(200, json={"success": True, "data": "from envelope"})

    client = _client(handler)
    try:
        assert await client.get_text("/logs/plain") == "line 1\nline 2\n"
        assert await client.get_text("/logs/wrapped") == "from envelope"
    finally:
        await client.aclose()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_text_rejects_non_text_payload():
    client = _client(lambda r: httpx.Response(200, json={"success": True, "data": {"lines": []}}))
    try:
        with pytest.raises(MalformedResponse):
            await client.get_text("/logs/x")
    finally:
        await client.aclose()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_side_channels_never_raise():
    def boom(*args):
        raise RuntimeError("no client context")

    client = _client(lambda r: httpx.Response(200, json={}), notifier=boom, opener=boom)
    try:
        client.notify("success", "Starting...")
        client.open_external("http://localhost:9001")
    finally:
        await client.aclose()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_side_channels_forward_to_sinks():
    notes: list = []
    opened: list = []
    client = _client(
        lambda r: httpx.Response(200, json={}),
        notifier=lambda kind, text: notes.append((kind, text)),
        opener=opened.append,
    )
    try:
        client.notify("error", "Failed to start Penpot")
        client.open_external("http://localhost:1080")
        client.open_external("javascript:alert(1)")
        client.open_external("/relative")
    finally:
        await client.aclose()

    assert notes == [("error", "Failed to start Penpot")]
    assert opened == ["http://localhost:1080"]


@pytest.mark.unit
def test_socket_path_uses_local_base_url():
    client = BackendClient("http://ignored", socket_path="/run/guest-services/backend.sock")
    assert client.base_url == "http://localhost"
    assert client.socket_path == "/run/guest-services/backend.sock"
