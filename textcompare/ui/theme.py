"""
Application palettes.

Every theme uses the Fusion style. Light and dark themes get a palette
built from a small table of base colors; the highlight comes from the
color settings so it can be changed alongside the word highlight tints.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from PyQt6.QtGui import QColor, QPalette
from PyQt6.QtWidgets import QApplication, QStyleFactory

from textcompare.services.settings import ColorSettings, Theme


@dataclass(frozen=True)
class PaletteColors:
    """Base colors of one theme."""
    window: str
    base: str
    text: str
    disabled_text: str
    highlighted_text: str
    border: str
    bright_text: str = "#ff0000"


LIGHT_COLORS = PaletteColors(
    window="#f0f0f0",
    base="#ffffff",
    text="#000000",
    disabled_text="#a0a0a0",
    highlighted_text="#ffffff",
    border="#c8c8c8",
)

DARK_COLORS = PaletteColors(
    window="#2d2d2d",
    base="#232323",
    text="#d4d4d4",
    disabled_text="#7f7f7f",
    highlighted_text="#000000",
    border="#3d3d3d",
)

_THEME_COLORS = {
    Theme.LIGHT: LIGHT_COLORS,
    Theme.DARK: DARK_COLORS,
}


def highlight_color(colors: ColorSettings, theme: Theme) -> str:
    if theme is Theme.DARK:
        return colors.dark_selection_background
    return colors.selection_background


def build_palette(base: PaletteColors, highlight: str) -> QPalette:
    """Build a full palette from a theme's base colors."""
    Role = QPalette.ColorRole
    roles = {
        Role.Window: base.window,
        Role.WindowText: base.text,
        Role.Base: base.base,
        Role.AlternateBase: base.window,
        Role.ToolTipBase: base.base,
        Role.ToolTipText: base.text,
        Role.Text: base.text,
        Role.Button: base.window,
        Role.ButtonText: base.text,
        Role.BrightText: base.bright_text,
        Role.Link: highlight,
        Role.Highlight: highlight,
        Role.HighlightedText: base.highlighted_text,
    }

    palette = QPalette()
    for role, color in roles.items():
        palette.setColor(role, QColor(color))
    for role in (Role.WindowText, Role.Text, Role.ButtonText):
        palette.setColor(QPalette.ColorGroup.Disabled, role, QColor(base.disabled_text))
    return palette


def build_stylesheet(base: PaletteColors, highlight: str) -> str:
    """Style the widgets the palette does not reach."""
    return f"""
        QToolTip {{
            color: {base.text};
            background-color: {base.base};
            border: 1px solid {base.border};
            padding: 4px;
        }}
        QMenu::item:selected {{
            background-color: {highlight};
        }}
        QSplitter::handle:hover {{
            background-color: {highlight};
        }}
    """


def apply_theme(
    app: QApplication,
    theme: Theme,
    colors: Optional[ColorSettings] = None
) -> None:
    """
    Apply a theme to the whole application.

    Args:
        app: QApplication instance
        theme: Theme to apply; SYSTEM uses the style's standard palette
        colors: Color settings supplying the highlight color
    """
    logging.info(f"Applying theme: {theme.value}")
    colors = colors or ColorSettings()

    app.setStyleSheet("")
    app.setStyle(QStyleFactory.create("Fusion"))

    base = _THEME_COLORS.get(theme)
    if base is None:
        app.setPalette(app.style().standardPalette())
        return

    highlight = highlight_color(colors, theme)
    app.setPalette(build_palette(base, highlight))
    app.setStyleSheet(build_stylesheet(base, highlight))
