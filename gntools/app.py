# Copyright (C) 2025-2026 GameNative Config Tools Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

from __future__ import annotations

from PySide6.QtWidgets import QApplication

from gntools.core.config import AppSettings
from gntools.ui.main_window import MainWindow
from gntools.ui.style import build_stylesheet, set_theme


class GNToolsApp:
    """Top-level application controller."""

    def __init__(self, argv: list[str], settings: AppSettings | None = None):
        self._qt = QApplication(argv)
        self._qt.setApplicationName("GameNative Config Tools")
        self._qt.setOrganizationName("GameNative Config Tools")

        self._settings = settings or AppSettings.load()
        set_theme(self._settings.theme)
        self._qt.setStyleSheet(build_stylesheet())

        self._window = MainWindow(self._settings)

    def run(self) -> int:
        """Show the main window and enter the Qt event loop."""
        if self._settings.start_maximized:
            self._window.showMaximized()
        else:
            self._window.show()
        return self._qt.exec()
