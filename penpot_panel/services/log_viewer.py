from __future__ import annotations

import logging
from urllib.parse import quote

from penpot_panel.constants import LOGS_EMPTY_TEXT, LOGS_FAILED_TEXT, LOGS_LOADING_TEXT
from penpot_panel.errors import PanelError
from penpot_panel.services.backend_client import BackendClient


class LogViewer:
    """Selected service and fetched log text for the logs dialog."""

    def __init__(self, client: BackendClient) -> None:
        self._client = client
        self._open = False
        self._service = ""
        self._text = ""
        # Bumped by every open/close; responses from older generations are dropped
        self._generation = 0

    def is_open(self) -> bool:
        return self._open

    def get_text(self) -> str:
        return self._text

    def selected_service(self) -> str:
        return self._service

    async def open(self, service_name: str) -> None:
        self._generation += 1
        generation = self._generation
        self._service = service_name
        self._text = LOGS_LOADING_TEXT
        self._open = True
        try:
            text = await self._client.get_text(f"/logs/{quote(service_name, safe='')}")
        except PanelError as e:
            logging.warning("Fetching logs for %s failed: %s", service_name, e)
            text = LOGS_FAILED_TEXT
        else:
            text = text or LOGS_EMPTY_TEXT
        if generation != self._generation:
            logging.debug("Dropping superseded logs for %s", service_name)
            return
        self._text = text

    def close(self) -> None:
        self._generation += 1
        self._open = False
        self._service = ""
        self._text = ""
