from __future__ import annotations

import logging
import os

# Well-known Penpot URLs exposed as quick-access shortcuts
PENPOT_URL = "http://localhost:9001"
MAILCATCHER_URL = "http://localhost:1080"
PENPOT_DOC_URL = "https://help.penpot.app/technical-guide/"

# Backend control API target. A socket path takes precedence over the URL.
BACKEND_URL: str = os.getenv("PENPOT_PANEL_BACKEND_URL", "http://127.0.0.1:8000")
BACKEND_SOCKET: str | None = os.getenv("PENPOT_PANEL_BACKEND_SOCKET") or None
DEFAULT_BACKEND_SOCKET = "/run/guest-services/backend.sock"
REQUEST_TIMEOUT_S: float = float(os.getenv("PENPOT_PANEL_REQUEST_TIMEOUT", "10.0"))

# Status poll cadence (fixed, not adaptive)
STATUS_POLL_INTERVAL_S: float = float(os.getenv("PENPOT_PANEL_POLL_INTERVAL", "5.0"))

# Webserver bind (NiceGUI host/port)
SERVER_HOST: str = os.getenv("PENPOT_PANEL_SERVER_IP", "127.0.0.1")
SERVER_PORT: int = int(os.getenv("PENPOT_PANEL_SERVER_PORT", "8080"))

# Log viewer placeholders
LOGS_LOADING_TEXT = "Loading logs..."
LOGS_FAILED_TEXT = "Failed to load logs"
LOGS_EMPTY_TEXT = "No log output"


def _resolve_log_level() -> int:
    s = os.getenv("PENPOT_PANEL_LOG_LEVEL")
    if s:
        name = s.strip().upper()
        mapping = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL,
        }
        return mapping.get(name, logging.WARNING)
    else:
        return logging.WARNING


LOG_LEVEL: int = _resolve_log_level()
