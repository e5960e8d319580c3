from __future__ import annotations

import logging
from functools import partial

from nicegui import ui

from penpot_panel.constants import MAILCATCHER_URL, PENPOT_URL
from penpot_panel.panel import ControlPanel
from penpot_panel.state import PanelView, ServiceRow

# Page refresh cadence; only re-renders from in-memory state, never hits the backend
VIEW_REFRESH_INTERVAL_S = 0.25


class DashboardPage:
    """Status card, quick access, services table and logs dialog."""

    def __init__(self, panel: ControlPanel) -> None:
        self.panel = panel
        self.status_chip: ui.chip | None = None
        self.spinner: ui.spinner | None = None
        self.message_label: ui.label | None = None
        self.error_banner: ui.row | None = None
        self.error_label: ui.label | None = None
        self.start_button: ui.button | None = None
        self.stop_button: ui.button | None = None
        self.restart_button: ui.button | None = None
        self.refresh_button: ui.button | None = None
        self.quick_access_card: ui.card | None = None
        self.getting_started_card: ui.card | None = None
        self.logs_dialog: ui.dialog | None = None
        self.logs_title: ui.label | None = None
        self.logs_area: ui.textarea | None = None
        self.activity_log: ui.log | None = None
        self._rows: tuple[ServiceRow, ...] | None = None

    # ---- Actions ----

    async def _on_start(self) -> None:
        await self.panel.start()

    async def _on_stop(self) -> None:
        await self.panel.stop()

    async def _on_restart(self) -> None:
        await self.panel.restart()

    async def _on_refresh(self) -> None:
        await self.panel.refresh()

    async def _on_view_logs(self, name: str) -> None:
        if self.logs_dialog:
            self.logs_dialog.open()
        await self.panel.open_logs(name)

    def _on_close_logs(self) -> None:
        self.panel.close_logs()
        if self.logs_dialog:
            self.logs_dialog.close()

    # ---- UI ----

    @ui.refreshable
    def services_table(self) -> None:
        rows = self._rows or ()
        if not rows:
            return
        with ui.card().classes("w-full"):
            ui.label("Services").classes("text-h6")
            with ui.grid(columns=6).classes("w-full items-center gap-2"):
                for header in ("Status", "Service Name", "State", "Health", "Ports", ""):
                    ui.label(header).classes("text-sm font-medium")
                for row in rows:
                    ui.icon(row.state_tag.icon, color=row.state_tag.color)
                    with ui.column().classes("gap-0"):
                        ui.label(row.name).classes("text-sm font-medium")
                        if row.description:
                            ui.label(row.description).classes("text-xs text-grey")
                    ui.chip(row.status).props("outline dense")
                    ui.chip(row.health_tag.label, color=row.health_tag.color).props("dense")
                    ui.label(row.ports).classes("text-sm text-grey")
                    ui.button(
                        icon="visibility", on_click=partial(self._on_view_logs, row.name)
                    ).props("flat round dense").tooltip("View Logs")

    def update(self) -> None:
        """Apply the panel's current view model to the widgets."""
        view: PanelView = self.panel.view()
        if self.status_chip:
            self.status_chip.text = view.status_chip.label
            self.status_chip.props(f"color={view.status_chip.color} icon={view.status_chip.icon}")
            self.status_chip.set_visibility(not view.loading)
        if self.spinner:
            self.spinner.set_visibility(view.loading)
        if self.message_label:
            self.message_label.text = view.pending_action or view.message
        if self.error_banner and self.error_label:
            self.error_label.text = view.error or ""
            self.error_banner.set_visibility(bool(view.error))
        for button, enabled in (
            (self.start_button, view.start_enabled),
            (self.stop_button, view.stop_enabled),
            (self.restart_button, view.restart_enabled),
            (self.refresh_button, view.refresh_enabled),
        ):
            if button:
                button.set_enabled(enabled)
        if self.quick_access_card:
            self.quick_access_card.set_visibility(view.show_quick_access)
        if self.getting_started_card:
            self.getting_started_card.set_visibility(view.show_getting_started)
        if self.logs_title:
            self.logs_title.text = f"Service Logs: {view.logs_service}"
        if self.logs_area and view.logs_open:
            self.logs_area.value = view.logs_text
        if view.rows != self._rows:
            self._rows = view.rows
            self.services_table.refresh()

    def build(self) -> None:
        with ui.column().classes("w-full max-w-screen-xl mx-auto p-4 gap-4"):
            ui.label("Penpot - Self-Hosted Design Platform").classes("text-h4 font-bold")
            ui.label(
                "Open-source design and prototyping platform for cross-domain teams"
            ).classes("text-grey")

            with ui.row().classes(
                "w-full items-center bg-red-1 text-negative p-2 rounded"
            ) as self.error_banner:
                ui.icon("error")
                self.error_label = ui.label("")
                ui.space()
                ui.button(icon="close", on_click=self.panel.dismiss_error).props(
                    "flat round dense"
                )
            self.error_banner.set_visibility(False)

            with ui.card().classes("w-full"):
                with ui.row().classes("w-full items-center justify-between"):
                    with ui.row().classes("items-center gap-2"):
                        ui.label("Status:").classes("text-h6")
                        self.spinner = ui.spinner(size="md")
                        self.status_chip = ui.chip("Unknown")
                        self.message_label = ui.label("").classes("text-sm text-grey")
                    with ui.row().classes("gap-2"):
                        self.start_button = ui.button(
                            "Start", icon="play_arrow", on_click=self._on_start
                        ).props("color=positive")
                        self.stop_button = ui.button(
                            "Stop", icon="stop", on_click=self._on_stop
                        ).props("color=negative")
                        self.restart_button = ui.button(
                            "Restart", icon="refresh", on_click=self._on_restart
                        ).props("outline")
                        self.refresh_button = ui.button(
                            "Refresh", icon="refresh", on_click=self._on_refresh
                        ).props("outline")

            with ui.card().classes("w-full") as self.quick_access_card:
                ui.label("Quick Access").classes("text-h6")
                with ui.row().classes("gap-2"):
                    ui.button(
                        "Open Penpot (Port 9001)",
                        icon="open_in_new",
                        on_click=self.panel.open_platform,
                    )
                    ui.button(
                        "Open MailCatcher (Port 1080)",
                        icon="open_in_new",
                        on_click=self.panel.open_mail_catcher,
                    ).props("outline")
                ui.label(
                    "Default login: Check MailCatcher for registration emails (development mode)"
                ).classes("text-xs text-grey")

            self.services_table()

            with ui.card().classes("w-full") as self.getting_started_card:
                ui.label("Getting Started").classes("text-h6")
                ui.markdown(
                    "1. Click **Start** to launch all Penpot services\n"
                    "2. Wait for all services to become healthy "
                    "(this may take a few minutes on first launch)\n"
                    f"3. Access Penpot at [{PENPOT_URL}]({PENPOT_URL})\n"
                    "4. Register a new account - check MailCatcher at "
                    f"[{MAILCATCHER_URL}]({MAILCATCHER_URL}) for confirmation emails"
                )

            with ui.expansion("Activity", icon="list").classes("w-full"):
                self.activity_log = ui.log(max_lines=200).classes("w-full h-40")

        with ui.dialog() as self.logs_dialog, ui.card().classes(
            "w-full max-w-4xl"
        ):
            self.logs_title = ui.label("Service Logs").classes("text-h6")
            self.logs_area = (
                ui.textarea(value="")
                .props("readonly outlined rows=20")
                .classes("w-full logs-text")
            )
            with ui.row().classes("w-full justify-end"):
                ui.button("Close", on_click=self._on_close_logs).props("flat")
        self.logs_dialog.on("hide", lambda: self.panel.close_logs())

        ui.timer(VIEW_REFRESH_INTERVAL_S, self.update)
        self.update()
        logging.debug("Dashboard built")
