from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from penpot_panel.common.logging_config import (
    TRACE,
    AnsiColorFormatter,
    UiLogHandler,
    attach_ui_log,
    detach_ui_log,
)
from penpot_panel import constants
from penpot_panel.config import Config

if TYPE_CHECKING:
    from pytest import MonkeyPatch


class RecorderLog:
    """Collects pushed lines like a ui.log widget."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def push(self, line: str) -> None:
        self.lines.append(line)


@pytest.mark.unit
def test_config_from_resolved_constants(monkeypatch: MonkeyPatch):
    monkeypatch.setattr(constants, "BACKEND_URL", "http://127.0.0.1:9999")
    monkeypatch.setattr(constants, "BACKEND_SOCKET", "/tmp/backend.sock")
    monkeypatch.setattr(constants, "STATUS_POLL_INTERVAL_S", 2.5)
    monkeypatch.setattr(constants, "SERVER_PORT", 8181)

    cfg = Config.from_env()

    assert cfg.BACKEND_URL == "http://127.0.0.1:9999"
    assert cfg.BACKEND_SOCKET == "/tmp/backend.sock"
    assert cfg.POLL_INTERVAL_S == 2.5
    assert cfg.UI_PORT == 8181


@pytest.mark.unit
def test_config_reads_env_only_through_constants(monkeypatch: MonkeyPatch):
    monkeypatch.setenv("PENPOT_PANEL_BACKEND_URL", "http://elsewhere:1")

    cfg = Config.from_env()

    assert cfg.BACKEND_URL == constants.BACKEND_URL


@pytest.mark.unit
def test_config_rejects_bad_interval(monkeypatch: MonkeyPatch):
    monkeypatch.setattr(constants, "STATUS_POLL_INTERVAL_S", 0.0)
    with pytest.raises(ValueError):
        Config.from_env()


@pytest.mark.unit
def test_ui_log_handler_mirrors_records():
    widget = RecorderLog()
    handler = UiLogHandler(level=logging.INFO)
    attach_ui_log(widget)
    try:
        record = logging.LogRecord("penpot", logging.INFO, __file__, 1, "STOP accepted: %s", ("ok",), None)
        handler.emit(record)
    finally:
        detach_ui_log(widget)

    assert len(widget.lines) == 1
    assert "[INFO] STOP accepted: ok" in widget.lines[0]

    handler.emit(logging.LogRecord("penpot", logging.INFO, __file__, 1, "after detach", (), None))
    assert len(widget.lines) == 1


@pytest.mark.unit
def test_plain_formatter_without_tty():
    fmt = AnsiColorFormatter(colored=False)
    record = logging.LogRecord("penpot", TRACE, __file__, 1, "wire dump", (), None)
    out = fmt.format(record)
    assert "TRACE penpot: wire dump" in out
    assert "\033[" not in out
