from __future__ import annotations

import logging
from typing import Literal, cast, get_args

from nicegui import app, ui

ThemeMode = Literal["light", "dark", "system"]


def get_palette(mode: ThemeMode) -> dict[str, str]:
    """Return palette tokens for the given mode."""
    if mode == "dark":
        return {
            "primary": "#6911D4",
            "background": "#18181A",
            "surface": "#232325",
            "text": "#E8E9EA",
            "muted": "#8F9DA3",
            "positive": "#21BA45",
            "negative": "#DB2828",
            "warning": "#F2C037",
        }
    # light
    return {
        "primary": "#6911D4",
        "background": "#F3F4F6",
        "surface": "#FFFFFF",
        "text": "#1F1F1F",
        "muted": "#A6A6A6",
        "positive": "#21BA45",
        "negative": "#DB2828",
        "warning": "#F2C037",
    }


def _inject_css_vars(p: dict[str, str]) -> None:
    ui.add_css(
        f"""
:root {{
  --panel-bg: {p["background"]};
  --panel-surface: {p["surface"]};
  --panel-text: {p["text"]};
  --panel-muted: {p["muted"]};
}}

body, .q-page {{ background: var(--panel-bg); color: var(--panel-text); }}
.q-card {{ background: var(--panel-surface); color: var(--panel-text); }}
.logs-text textarea {{ font-family: monospace; font-size: 0.875rem; }}
"""
    )


def apply_theme(mode: ThemeMode) -> None:
    """Set Quasar colors, dark mode and CSS variables for the selected mode."""
    choice = mode
    if mode == "system":
        choice = "dark" if ui.dark_mode().client.page.dark else "light"
        logging.debug(f"System theme: {choice}")

    pal = get_palette(choice)
    ui.colors(
        primary=pal["primary"],
        positive=pal["positive"],
        negative=pal["negative"],
        warning=pal["warning"],
    )
    if choice == "dark":
        ui.dark_mode().enable()
    else:
        ui.dark_mode().disable()
    _inject_css_vars(pal)


def set_theme(mode: ThemeMode) -> ThemeMode:
    """Persist, set and apply theme mode."""
    app.storage.general["theme_mode"] = mode
    apply_theme(mode)
    return mode


def get_theme() -> ThemeMode:
    """Return current requested mode ('light'/'dark'/'system')."""
    mode = app.storage.general.get("theme_mode", "system")
    if isinstance(mode, str) and mode in get_args(ThemeMode):
        return cast("ThemeMode", mode)
    return cast("ThemeMode", "system")


def toggle_theme() -> ThemeMode:
    """Cycle through modes: system -> light -> dark -> system."""
    order: list[ThemeMode] = ["system", "light", "dark"]
    current = get_theme()
    next_mode: ThemeMode = order[(order.index(current) + 1) % len(order)]
    set_theme(next_mode)
    return next_mode
