from __future__ import annotations


class PanelError(Exception):
    """Base class for control panel failures."""


class TransportError(PanelError):
    """Backend unreachable, timed out, or answered with a non-success response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(TransportError):
    """Backend payload does not have the expected shape."""


class LogicalError(PanelError):
    """Request rejected locally: an action is already in flight or a precondition failed."""
