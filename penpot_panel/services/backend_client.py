from __future__ import annotations

import logging
from typing import Any, Callable, Literal
from urllib.parse import urlparse

import httpx
from nicegui import ui

from penpot_panel.errors import MalformedResponse, TransportError

NotifyKind = Literal["success", "error"]
Notifier = Callable[[NotifyKind, str], None]
Opener = Callable[[str], None]


def _ui_notify(kind: NotifyKind, text: str) -> None:
    ui.notify(text, color="positive" if kind == "success" else "negative")


def _ui_open(url: str) -> None:
    ui.navigate.to(url, new_tab=True)


def _unwrap(payload: Any) -> Any:
    """Strip the backend's ``{success, message, data}`` envelope if present."""
    if isinstance(payload, dict) and "success" in payload:
        if not payload.get("success"):
            raise TransportError(str(payload.get("message") or "Backend request failed"))
        if "data" in payload:
            return payload["data"]
    return payload


class BackendClient:
    """
    Async RPC client for the Penpot control backend.

    - get/post return the decoded JSON payload or raise TransportError
      (MalformedResponse for undecodable bodies). No retries.
    - notify/open_external are host side channels; they never raise.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        *,
        socket_path: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        notifier: Notifier | None = None,
        opener: Opener | None = None,
    ) -> None:
        if transport is None and socket_path:
            transport = httpx.AsyncHTTPTransport(uds=socket_path)
            # Host is irrelevant over a Unix socket but httpx requires one
            base_url = "http://localhost"
        self.base_url = base_url
        self.socket_path = socket_path
        self._client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout, transport=transport
        )
        self._notifier: Notifier = notifier or _ui_notify
        self._opener: Opener = opener or _ui_open

    async def _request(self, method: str, path: str, body: Any = None) -> httpx.Response:
        try:
            if method == "POST":
                resp = await self._client.post(path, json=body if body is not None else {})
            else:
                resp = await self._client.get(path)
        except httpx.TimeoutException as e:
            raise TransportError(f"{method} {path} timed out") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e
        if resp.is_error:
            raise TransportError(
                f"{method} {path} returned HTTP {resp.status_code}{self._detail(resp)}",
                status_code=resp.status_code,
            )
        logging.debug("%s %s -> %s", method, path, resp.status_code)
        return resp

    @staticmethod
    def _detail(resp: httpx.Response) -> str:
        try:
            payload = resp.json()
        except ValueError:
            return ""
        if isinstance(payload, dict) and payload.get("message"):
            return f": {payload['message']}"
        return ""

    @staticmethod
    def _decode(resp: httpx.Response, method: str, path: str) -> Any:
        try:
            payload = resp.json()
        except ValueError as e:
            raise MalformedResponse(f"{method} {path} returned invalid JSON") from e
        return _unwrap(payload)

    async def get(self, path: str) -> Any:
        resp = await self._request("GET", path)
        return self._decode(resp, "GET", path)

    async def post(self, path: str, body: Any = None) -> Any:
        resp = await self._request("POST", path, body)
        return self._decode(resp, "POST", path)

    async def get_text(self, path: str) -> str:
        """GET an endpoint that yields raw text, either plain or wrapped in the JSON envelope."""
        resp = await self._request("GET", path)
        if "json" not in resp.headers.get("content-type", ""):
            return resp.text
        data = self._decode(resp, "GET", path)
        if not isinstance(data, str):
            raise MalformedResponse(f"GET {path} did not return text")
        return data

    def notify(self, kind: NotifyKind, text: str) -> None:
        try:
            self._notifier(kind, text)
        except Exception as e:
            logging.warning("Notification dropped (%s: %s): %s", kind, text, e)

    def open_external(self, url: str) -> None:
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            logging.warning("Refusing to open non-http(s) URL: %s", url)
            return
        try:
            self._opener(url)
        except Exception as e:
            logging.warning("Open external %s failed: %s", url, e)

    async def aclose(self) -> None:
        await self._client.aclose()
