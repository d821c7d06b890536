"""Dracula-inspired console styles, one per log level."""

from __future__ import annotations

from rich.style import Style

DRACULA_COLORS = {
    "log": "#f8f8f2",  # light foreground
    "warn": "#f1fa8c",  # yellow
    "error": "#ff5555",  # red
    "trace": "#bd93f9",  # purple
}

DRACULA_STYLES = {level: Style(color=color) for level, color in DRACULA_COLORS.items()}


def style_for(level: str) -> Style:
    """Console style for a log level; unknown levels render unstyled."""
    return DRACULA_STYLES.get(level, Style.null())
