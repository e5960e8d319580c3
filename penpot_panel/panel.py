from __future__ import annotations

import logging

from penpot_panel.constants import MAILCATCHER_URL, PENPOT_URL, STATUS_POLL_INTERVAL_S
from penpot_panel.errors import PanelError
from penpot_panel.services.action_controller import ActionController
from penpot_panel.services.backend_client import BackendClient
from penpot_panel.services.log_viewer import LogViewer
from penpot_panel.services.status_poller import StatusPoller
from penpot_panel.state import (
    ActionKind,
    ActionResult,
    PanelView,
    ServiceHealth,
    ServiceInfo,
    ServiceRow,
    ServiceState,
    Tag,
)

# Exhaustive over the enums; unknown backend strings already parse to OTHER/UNKNOWN
STATE_TAGS: dict[ServiceState, Tag] = {
    ServiceState.RUNNING: Tag("Running", "positive", "check_circle"),
    ServiceState.EXITED: Tag("Exited", "negative", "cancel"),
    ServiceState.OTHER: Tag("Other", "warning", "error"),
}

HEALTH_TAGS: dict[ServiceHealth, Tag] = {
    ServiceHealth.HEALTHY: Tag("Healthy", "positive"),
    ServiceHealth.UNHEALTHY: Tag("Unhealthy", "negative"),
    ServiceHealth.STARTING: Tag("Starting", "warning"),
    ServiceHealth.UNKNOWN: Tag("N/A", "grey"),
}

RUNNING_CHIP = Tag("Running", "positive", "check_circle")
STOPPED_CHIP = Tag("Stopped", "grey", "cancel")
UNKNOWN_CHIP = Tag("Unknown", "grey", "help")

PENDING_LABELS: dict[ActionKind, str] = {
    ActionKind.START: "Starting...",
    ActionKind.STOP: "Stopping...",
    ActionKind.RESTART: "Restarting...",
}


def state_tag(state: ServiceState) -> Tag:
    return STATE_TAGS[state]


def health_tag(health: ServiceHealth) -> Tag:
    return HEALTH_TAGS[health]


class ControlPanel:
    """
    Composition root: wires the backend client, poller, action controller and
    log viewer together and derives the presented view model from their state.
    """

    def __init__(self, client: BackendClient) -> None:
        self.client = client
        self.poller = StatusPoller(client)
        self.actions = ActionController(client, self.poller)
        self.logs = LogViewer(client)
        # service name -> description, from GET /services
        self.catalog: dict[str, str] = {}

    # ---- Lifecycle ----

    async def startup(self, interval_s: float = STATUS_POLL_INTERVAL_S) -> None:
        await self.load_catalog()
        self.poller.start(interval_s)
        logging.info("Status polling every %.1fs", interval_s)

    async def shutdown(self) -> None:
        await self.poller.stop()
        await self.client.aclose()

    async def load_catalog(self) -> None:
        try:
            entries = await self.client.get("/services")
        except PanelError as e:
            logging.info("Service catalog unavailable: %s", e)
            return
        if not isinstance(entries, list):
            logging.info("Service catalog ignored: unexpected payload")
            return
        self.catalog = {
            str(e["name"]): str(e.get("description") or "")
            for e in entries
            if isinstance(e, dict) and e.get("name")
        }

    # ---- User intents ----

    async def start(self) -> ActionResult:
        return await self.actions.perform(ActionKind.START)

    async def stop(self) -> ActionResult:
        return await self.actions.perform(ActionKind.STOP)

    async def restart(self) -> ActionResult:
        return await self.actions.perform(ActionKind.RESTART)

    async def refresh(self) -> None:
        await self.poller.refresh()

    async def open_logs(self, service_name: str) -> None:
        await self.logs.open(service_name)

    def close_logs(self) -> None:
        self.logs.close()

    def dismiss_error(self) -> None:
        self.actions.clear_error()
        self.poller.clear_error()

    def open_platform(self) -> None:
        self.client.open_external(PENPOT_URL)

    def open_mail_catcher(self) -> None:
        self.client.open_external(MAILCATCHER_URL)

    # ---- View model ----

    def _row(self, service: ServiceInfo) -> ServiceRow:
        return ServiceRow(
            name=service.name,
            status=service.status,
            state_tag=state_tag(service.state),
            health_tag=health_tag(service.health),
            ports=service.ports or "-",
            description=self.catalog.get(service.name, ""),
        )

    def view(self) -> PanelView:
        snapshot = self.poller.snapshot
        busy = self.actions.is_busy()
        loading = self.poller.is_loading()
        running = bool(snapshot and snapshot.running)
        pending = self.actions.current
        if snapshot is None:
            chip = UNKNOWN_CHIP
        else:
            chip = RUNNING_CHIP if running else STOPPED_CHIP
        return PanelView(
            status_chip=chip,
            loading=loading,
            message=snapshot.message if snapshot else "",
            error=self.actions.last_error() or self.poller.last_error(),
            busy=busy,
            pending_action=PENDING_LABELS[pending] if pending else "",
            start_enabled=not busy and not running,
            stop_enabled=not busy and running,
            restart_enabled=not busy and running,
            refresh_enabled=not loading,
            show_quick_access=running,
            show_getting_started=not running,
            rows=tuple(self._row(s) for s in snapshot.services) if snapshot else (),
            logs_open=self.logs.is_open(),
            logs_service=self.logs.selected_service(),
            logs_text=self.logs.get_text(),
        )
