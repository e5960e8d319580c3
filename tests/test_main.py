from __future__ import annotations

import logging

import pytest

from penpot_panel import main
from penpot_panel.common.logging_config import TRACE
from penpot_panel.constants import LOG_LEVEL


@pytest.mark.unit
@pytest.mark.parametrize(
    ("argv", "expected"),
    [
        (["--log-level", "DEBUG"], logging.DEBUG),
        (["--log-level", "TRACE"], TRACE),
        (["-vvv"], TRACE),
        (["-vv"], logging.DEBUG),
        (["-v"], logging.INFO),
        (["-q"], logging.WARNING),
        ([], LOG_LEVEL),
    ],
)
def test_resolve_log_level(argv, expected):
    assert main.resolve_log_level(main.parse_args(argv)) == expected


@pytest.mark.unit
def test_parse_backend_target():
    args = main.parse_args(
        ["--backend-url", "http://127.0.0.1:7000", "--socket", "/run/guest-services/backend.sock", "--poll-interval", "2"]
    )
    assert args.backend_url == "http://127.0.0.1:7000"
    assert args.socket == "/run/guest-services/backend.sock"
    assert args.poll_interval == 2.0


@pytest.mark.unit
def test_create_panel_uses_config():
    cfg = main.Config(BACKEND_URL="http://127.0.0.1:7000", REQUEST_TIMEOUT_S=1.0)
    panel = main.create_panel(cfg)
    assert panel.client.base_url == "http://127.0.0.1:7000"
    assert panel.poller.get_snapshot() is None
