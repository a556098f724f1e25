# Copyright (C) 2025-2026 GameNative Config Tools Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""
Small dialog helpers shared by the panels.

The message boxes use ``QMessageBox.Icon.NoIcon`` with the standard pixmap
set by hand so Windows does not play the system beep on every error.
"""

from __future__ import annotations

from pathlib import Path

from PySide6.QtWidgets import QApplication, QFileDialog, QMessageBox, QStyle

_PIXMAPS = {
    "information": QStyle.StandardPixmap.SP_MessageBoxInformation,
    "warning": QStyle.StandardPixmap.SP_MessageBoxWarning,
    "critical": QStyle.StandardPixmap.SP_MessageBoxCritical,
}


def _show(parent, kind: str, title: str, text: str) -> None:
    box = QMessageBox(parent)
    box.setIcon(QMessageBox.Icon.NoIcon)
    box.setWindowTitle(title)
    box.setText(text)
    icon = QApplication.style().standardIcon(_PIXMAPS[kind])
    box.setIconPixmap(icon.pixmap(32, 32))
    box.setStandardButtons(QMessageBox.StandardButton.Ok)
    box.exec()


def information(parent, title: str, text: str) -> None:
    _show(parent, "information", title, text)


def warning(parent, title: str, text: str) -> None:
    _show(parent, "warning", title, text)


def critical(parent, title: str, text: str) -> None:
    _show(parent, "critical", title, text)


def ask_json_save_path(parent, title: str, directory: Path, filename: str) -> Path | None:
    """Ask where to save a ``.json`` export.  Returns ``None`` on cancel."""
    path, _ = QFileDialog.getSaveFileName(
        parent,
        title,
        str(directory / filename),
        "JSON files (*.json);;All files (*)",
    )
    return Path(path) if path else None
