from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from penpot_panel.errors import MalformedResponse, PanelError


class ServiceState(str, Enum):
    RUNNING = "running"
    EXITED = "exited"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> "ServiceState":
        if value == "running":
            return cls.RUNNING
        if value == "exited":
            return cls.EXITED
        return cls.OTHER


class ServiceHealth(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    STARTING = "starting"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "ServiceHealth":
        # Backend reports "N/A" for containers without a healthcheck
        for member in (cls.HEALTHY, cls.UNHEALTHY, cls.STARTING):
            if value == member.value:
                return member
        return cls.UNKNOWN


class ActionKind(str, Enum):
    START = "start"
    STOP = "stop"
    RESTART = "restart"

    @property
    def path(self) -> str:
        return f"/{self.value}"


@dataclass(frozen=True)
class ServiceInfo:
    name: str
    status: str = ""
    state: ServiceState = ServiceState.OTHER
    health: ServiceHealth = ServiceHealth.UNKNOWN
    ports: str = ""  # e.g. "9001:8080, 1080:1080"

    @classmethod
    def from_payload(cls, item: Any) -> "ServiceInfo":
        if not isinstance(item, dict):
            raise MalformedResponse(f"service entry is not an object: {item!r}")
        name = item.get("name")
        if not isinstance(name, str) or not name:
            raise MalformedResponse(f"service entry without a name: {item!r}")
        return cls(
            name=name,
            status=str(item.get("status") or ""),
            state=ServiceState.parse(item.get("state")),
            health=ServiceHealth.parse(item.get("health")),
            ports=str(item.get("ports") or ""),
        )


@dataclass(frozen=True)
class ServiceGroupStatus:
    """Immutable point-in-time read of the whole service group."""

    running: bool
    services: tuple[ServiceInfo, ...] = ()
    message: str = ""

    @classmethod
    def from_payload(cls, payload: Any) -> "ServiceGroupStatus":
        if not isinstance(payload, dict):
            raise MalformedResponse("status payload is not an object")
        running = payload.get("running")
        if not isinstance(running, bool):
            raise MalformedResponse("status payload has no boolean 'running'")
        raw_services = payload.get("services")
        if raw_services is None:
            raw_services = []
        if not isinstance(raw_services, list):
            raise MalformedResponse("status payload 'services' is not a list")
        message = payload.get("message")
        return cls(
            running=running,
            services=tuple(ServiceInfo.from_payload(s) for s in raw_services),
            message=message if isinstance(message, str) else "",
        )

    def service(self, name: str) -> ServiceInfo | None:
        return next((s for s in self.services if s.name == name), None)


@dataclass(frozen=True)
class ActionResult:
    kind: ActionKind
    ok: bool
    message: str = ""
    error: PanelError | None = None


# ---- View model (derived by ControlPanel, rendered by the dashboard page) ----


@dataclass(frozen=True)
class Tag:
    label: str
    color: str  # Quasar color name
    icon: str = ""


@dataclass(frozen=True)
class ServiceRow:
    name: str
    status: str
    state_tag: Tag
    health_tag: Tag
    ports: str
    description: str = ""


@dataclass(frozen=True)
class PanelView:
    status_chip: Tag
    loading: bool
    message: str
    error: str | None
    busy: bool
    start_enabled: bool
    stop_enabled: bool
    restart_enabled: bool
    refresh_enabled: bool
    show_quick_access: bool
    show_getting_started: bool
    rows: tuple[ServiceRow, ...] = field(default_factory=tuple)
    logs_open: bool = False
    logs_service: str = ""
    logs_text: str = ""
    pending_action: str = ""
