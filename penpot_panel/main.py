from __future__ import annotations

import argparse
import logging
import sys

from nicegui import app as ng_app
from nicegui import ui

from penpot_panel.common.logging_config import TRACE, attach_ui_log, configure_logging
from penpot_panel.common.theme import apply_theme, get_theme, toggle_theme
from penpot_panel.config import Config
from penpot_panel.constants import DEFAULT_BACKEND_SOCKET, LOG_LEVEL, PENPOT_DOC_URL
from penpot_panel.pages.dashboard import DashboardPage
from penpot_panel.panel import ControlPanel
from penpot_panel.services.backend_client import BackendClient

# Runtime configuration (resolved later from CLI/env)
config = Config.from_env()

# Built once per process; every browser tab renders the same panel
panel: ControlPanel | None = None


def create_panel(cfg: Config) -> ControlPanel:
    client = BackendClient(
        cfg.BACKEND_URL,
        socket_path=cfg.BACKEND_SOCKET,
        timeout=cfg.REQUEST_TIMEOUT_S,
    )
    return ControlPanel(client)


async def _app_startup() -> None:
    global panel
    if panel is None:
        panel = create_panel(config)
    target = config.BACKEND_SOCKET or config.BACKEND_URL
    logging.info("Backend target: %s", target)
    await panel.startup(config.POLL_INTERVAL_S)


async def _app_shutdown() -> None:
    if panel is not None:
        await panel.shutdown()
        logging.info("Control panel stopped")


@ui.page("/")
def index() -> None:
    if panel is None:
        ui.label("Control panel is starting...")
        return
    apply_theme(get_theme())
    with ui.header().classes("items-center justify-between px-4"):
        ui.label("Penpot Control Panel").classes("text-lg")
        with ui.row().classes("items-center gap-2"):
            ui.button(icon="contrast", on_click=lambda: toggle_theme()).props(
                "flat round color=white"
            )
            ui.button(
                "?",
                on_click=lambda: ui.navigate.to(PENPOT_DOC_URL, new_tab=True),
            ).props("round unelevated")
    page = DashboardPage(panel)
    page.build()
    if page.activity_log:
        attach_ui_log(page.activity_log)


ng_app.on_startup(_app_startup)
ng_app.on_shutdown(_app_shutdown)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Penpot NiceGUI Control Panel")
    parser.add_argument("--host", default=config.UI_HOST, help="Webserver bind host")
    parser.add_argument(
        "--port", type=int, default=config.UI_PORT, help="Webserver bind port"
    )
    parser.add_argument(
        "--backend-url",
        default=config.BACKEND_URL,
        help="Base URL of the control backend",
    )
    parser.add_argument(
        "--socket",
        default=config.BACKEND_SOCKET,
        help=f"Unix socket of the control backend (e.g. {DEFAULT_BACKEND_SOCKET}); overrides --backend-url",
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=config.POLL_INTERVAL_S,
        help="Status poll interval in seconds",
    )
    parser.add_argument(
        "--log-level",
        choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set log level",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity; -v=INFO, -vv=DEBUG",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Enable WARNING logging"
    )
    return parser.parse_args(argv)


def resolve_log_level(args: argparse.Namespace) -> int:
    """--log-level > -v/-q > env default from constants."""
    if args.log_level:
        if args.log_level == "TRACE":
            return TRACE
        return getattr(logging, args.log_level)
    if args.verbose >= 3:
        return TRACE
    if args.verbose >= 2:
        return logging.DEBUG
    if args.verbose == 1:
        return logging.INFO
    if args.quiet:
        return logging.WARNING
    return LOG_LEVEL


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    if args.poll_interval <= 0:
        raise SystemExit("--poll-interval must be > 0")

    config.UI_HOST = args.host
    config.UI_PORT = int(args.port)
    config.BACKEND_URL = args.backend_url
    config.BACKEND_SOCKET = args.socket
    config.POLL_INTERVAL_S = float(args.poll_interval)

    configure_logging(resolve_log_level(args))
    logging.info(f"Webserver bind: host={config.UI_HOST} port={config.UI_PORT}")

    ui.run(
        title="Penpot Control Panel",
        host=config.UI_HOST,
        port=config.UI_PORT,
        reload=False,
        show=False,
        loop="uvloop" if sys.platform != "win32" else "asyncio",
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
