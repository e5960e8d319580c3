from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from penpot_panel import constants


@dataclass
class Config:
    """Runtime configuration for the NiceGUI app and the backend connection."""
    BACKEND_URL: str = constants.BACKEND_URL
    BACKEND_SOCKET: Optional[str] = None
    REQUEST_TIMEOUT_S: float = constants.REQUEST_TIMEOUT_S
    POLL_INTERVAL_S: float = constants.STATUS_POLL_INTERVAL_S
    UI_HOST: str = constants.SERVER_HOST
    UI_PORT: int = constants.SERVER_PORT  # NiceGUI server port

    @classmethod
    def from_env(cls) -> "Config":
        """Build from the environment values resolved once in constants."""
        if constants.STATUS_POLL_INTERVAL_S <= 0:
            raise ValueError("PENPOT_PANEL_POLL_INTERVAL must be > 0")
        return cls(
            BACKEND_URL=constants.BACKEND_URL,
            BACKEND_SOCKET=constants.BACKEND_SOCKET,
            REQUEST_TIMEOUT_S=constants.REQUEST_TIMEOUT_S,
            POLL_INTERVAL_S=constants.STATUS_POLL_INTERVAL_S,
            UI_HOST=constants.SERVER_HOST,
            UI_PORT=constants.SERVER_PORT,
        )
