from __future__ import annotations

import asyncio
import contextlib
import logging

from penpot_panel.errors import PanelError
from penpot_panel.services.backend_client import BackendClient
from penpot_panel.state import ServiceGroupStatus


class StatusPoller:
    """
    Owns the canonical ServiceGroupStatus snapshot.

    The snapshot is replaced by a single reference assignment, so readers never
    see a torn value. Overlapping refreshes are allowed; each request is tagged
    with a sequence number and a response older than the newest applied one is
    discarded.
    """

    def __init__(self, client: BackendClient) -> None:
        self._client = client
        self._snapshot: ServiceGroupStatus | None = None
        self._error: str | None = None
        self._in_flight = 0
        self._seq = 0
        self._applied_seq = 0
        self._task: asyncio.Task | None = None

    @property
    def snapshot(self) -> ServiceGroupStatus | None:
        return self._snapshot

    def get_snapshot(self) -> ServiceGroupStatus | None:
        return self._snapshot

    def is_loading(self) -> bool:
        return self._in_flight > 0

    def last_error(self) -> str | None:
        return self._error

    def clear_error(self) -> None:
        self._error = None

    def is_running(self) -> bool:
        """True when the last known snapshot says the group is running."""
        return bool(self._snapshot and self._snapshot.running)

    async def refresh(self) -> None:
        self._seq += 1
        seq = self._seq
        self._in_flight += 1
        self._error = None
        try:
            payload = await self._client.get("/status")
            status = ServiceGroupStatus.from_payload(payload)
        except PanelError as e:
            if seq > self._applied_seq:
                self._error = f"Failed to fetch Penpot status: {e}"
                logging.warning("Status refresh failed: %s", e)
            else:
                logging.debug("Dropping stale status failure #%d: %s", seq, e)
        else:
            if seq > self._applied_seq:
                self._applied_seq = seq
                self._snapshot = status
                # An older failure may have landed while this request was out
                self._error = None
                logging.debug(
                    "Status #%d: running=%s services=%d",
                    seq,
                    status.running,
                    len(status.services),
                )
            else:
                logging.debug("Dropping stale status response #%d", seq)
        finally:
            self._in_flight -= 1

    # ---- Timer ----

    def start(self, interval_s: float = 5.0) -> None:
        """Refresh now and then every interval_s seconds; replaces any running timer."""
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        if self._task is not None and not self._task.done():
            logging.debug("Status poller restarted with interval %.2fs", interval_s)
            self._task.cancel()
        self._task = asyncio.create_task(self._run(interval_s))

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    def is_polling(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self, interval_s: float) -> None:
        try:
            while True:
                await self.refresh()
                await asyncio.sleep(interval_s)
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logging.error("Status poller stopped unexpectedly: %s", e)
