from __future__ import annotations

import logging

from penpot_panel.errors import LogicalError, PanelError
from penpot_panel.services.backend_client import BackendClient
from penpot_panel.services.status_poller import StatusPoller
from penpot_panel.state import ActionKind, ActionResult


class ActionController:
    """
    Serializes start/stop/restart against the whole service group.

    Idle -> Busy -> Idle. At most one action is in flight; requests made while
    busy are rejected, never queued. Every dispatched action ends with a status
    refresh before the controller returns to idle.
    """

    def __init__(self, client: BackendClient, poller: StatusPoller) -> None:
        self._client = client
        self._poller = poller
        self._busy = False
        self._current: ActionKind | None = None
        self._error: str | None = None

    def is_busy(self) -> bool:
        return self._busy

    @property
    def current(self) -> ActionKind | None:
        return self._current

    def last_error(self) -> str | None:
        return self._error

    def clear_error(self) -> None:
        self._error = None

    def can_perform(self, kind: ActionKind) -> bool:
        return not self._busy and self._precondition_error(kind) is None

    def _precondition_error(self, kind: ActionKind) -> str | None:
        running = self._poller.is_running()
        if kind is ActionKind.START and running:
            return "Penpot is already running"
        if kind in (ActionKind.STOP, ActionKind.RESTART) and not running:
            return "Penpot is not running"
        return None

    def _reject(self, kind: ActionKind, reason: str) -> ActionResult:
        logging.info("Rejected %s: %s", kind.value, reason)
        self._client.notify("error", reason)
        return ActionResult(kind=kind, ok=False, message=reason, error=LogicalError(reason))

    async def perform(self, kind: ActionKind | str) -> ActionResult:
        kind = ActionKind(kind)
        # Busy must be claimed before the first await
        if self._busy:
            current = self._current.value if self._current else "another action"
            return self._reject(kind, f"Cannot {kind.value}: {current} is still in progress")
        reason = self._precondition_error(kind)
        if reason:
            return self._reject(kind, reason)

        self._busy = True
        self._current = kind
        self._error = None
        try:
            try:
                payload = await self._client.post(kind.path, {})
            except PanelError as e:
                text = f"Failed to {kind.value} Penpot"
                self._error = text
                logging.error("%s: %s", text, e)
                self._client.notify("error", text)
                return ActionResult(kind=kind, ok=False, message=text, error=e)

            message = ""
            if isinstance(payload, dict) and isinstance(payload.get("message"), str):
                message = payload["message"]
            if message:
                self._client.notify("success", message)
            logging.info("%s accepted: %s", kind.value.upper(), message or "-")
            return ActionResult(kind=kind, ok=True, message=message)
        finally:
            # Let the next poll reveal the group's actual state, success or not
            try:
                await self._poller.refresh()
            finally:
                self._busy = False
                self._current = None
