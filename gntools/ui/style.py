# Copyright (C) 2025-2026 GameNative Config Tools Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""
Theme tokens and the application stylesheet.

Usage
-----
    from gntools.ui.style import active_theme, set_theme, build_stylesheet

    set_theme("Light")
    app.setStyleSheet(build_stylesheet())
    active_theme().accent_error     # e.g. "#E5534B"
"""

from __future__ import annotations

from dataclasses import dataclass


# ======================================================================
# Theme dataclass
# ======================================================================

@dataclass(frozen=True)
class Theme:
    name: str

    # Backgrounds
    bg_base:     str   # window background
    bg_surface:  str   # panels / tab pane
    bg_input:    str   # text editors and fields
    bg_hover:    str

    # Foregrounds
    fg_primary:   str
    fg_secondary: str  # hints, captions

    border: str

    # Accents
    accent_primary: str  # primary buttons, selections
    accent_error:   str  # conversion errors

    font_family: str = "Segoe UI"
    mono_family: str = "Consolas"
    font_size:   str = "9pt"


THEMES: dict[str, Theme] = {
    "Default": Theme(
        name="Default",
        bg_base="#0D1017", bg_surface="#131820", bg_input="#0A0D12",
        bg_hover="#1C2B36",
        fg_primary="#CDD2DA", fg_secondary="#6E7A8A",
        border="#1E2430",
        accent_primary="#3D7A9E", accent_error="#E5534B",
    ),
    "Light": Theme(
        name="Light",
        bg_base="#F5F6F8", bg_surface="#EBEDF0", bg_input="#FFFFFF",
        bg_hover="#D8DCE2",
        fg_primary="#1E2128", fg_secondary="#5A6270",
        border="#D0D4DA",
        accent_primary="#2E7BBF", accent_error="#C62828",
    ),
}

_active: Theme = THEMES["Default"]


def active_theme() -> Theme:
    """Return the current global theme."""
    return _active


def set_theme(name: str) -> Theme:
    """Set the active theme by name.  Returns the new theme."""
    global _active
    _active = THEMES.get(name, THEMES["Default"])
    return _active


# ======================================================================
# Stylesheet builder
# ======================================================================

_RADIUS = "4px"


def build_stylesheet(theme: Theme | None = None) -> str:
    """Return the complete application QSS for the given (or active) theme."""
    t = theme or _active

    return f"""
    * {{
        font-family: "{t.font_family}";
        font-size: {t.font_size};
    }}

    QMainWindow, QDialog {{ background-color: {t.bg_base}; color: {t.fg_primary}; }}
    QWidget       {{ color: {t.fg_primary}; }}
    QLabel        {{ background: transparent; }}
    QLabel#sectionLabel {{ color: {t.fg_secondary}; }}
    QLabel#errorLabel   {{ color: {t.accent_error}; }}

    QTabWidget::pane {{
        background-color: {t.bg_surface};
        border: 1px solid {t.border};
    }}
    QTabBar::tab {{
        background: {t.bg_base}; color: {t.fg_secondary};
        padding: 6px 14px; border: 1px solid {t.border}; border-bottom: none;
    }}
    QTabBar::tab:selected {{ background: {t.bg_surface}; color: {t.fg_primary}; }}

    QPlainTextEdit, QLineEdit, QComboBox, QSpinBox, QTableWidget {{
        background-color: {t.bg_input}; color: {t.fg_primary};
        border: 1px solid {t.border}; border-radius: {_RADIUS};
        selection-background-color: {t.accent_primary};
    }}
    QPlainTextEdit {{ font-family: "{t.mono_family}"; }}

    QPushButton {{
        background-color: {t.bg_surface}; color: {t.fg_primary};
        border: 1px solid {t.border}; border-radius: {_RADIUS};
        padding: 5px 14px;
    }}
    QPushButton:hover    {{ background-color: {t.bg_hover}; }}
    QPushButton:disabled {{ color: {t.fg_secondary}; }}
    QPushButton#primaryButton {{
        background-color: {t.accent_primary}; color: #FFFFFF; border: none;
    }}

    QHeaderView::section {{
        background-color: {t.bg_surface}; color: {t.fg_secondary};
        border: none; border-bottom: 1px solid {t.border}; padding: 4px;
    }}
    """
