# Copyright (C) 2025-2026 GameNative Config Tools Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

from __future__ import annotations

from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QMainWindow, QTabWidget

from gntools.core.config import AppSettings
from gntools.ui import dialogs
from gntools.ui.browser_panel import BrowserPanel
from gntools.ui.converter_panel import ConverterPanel
from gntools.ui.editor_panel import EditorPanel

_ABOUT_TEXT = (
    "GameNative Config Tools\n\n"
    "Convert raw GameNative key/value dumps to importable JSON, edit "
    "exported container configs and browse community-submitted configs."
)


class MainWindow(QMainWindow):
    """Converter, editor and browser tabs in one window."""

    def __init__(self, settings: AppSettings):
        super().__init__()
        self._settings = settings
        self.setWindowTitle("GameNative Config Tools")
        self.resize(1100, 720)

        self._converter = ConverterPanel(settings)
        self._editor = EditorPanel(settings)
        self._browser = BrowserPanel(settings)

        self._tabs = QTabWidget()
        self._tabs.addTab(self._converter, "Converter")
        self._tabs.addTab(self._editor, "Editor")
        self._tabs.addTab(self._browser, "Browse Configs")
        self.setCentralWidget(self._tabs)

        self._editor.send_to_converter.connect(self._show_in_converter)
        self._browser.open_in_editor.connect(self._show_in_editor)

        self._build_menu()

        if 0 <= settings.last_tab < self._tabs.count():
            self._tabs.setCurrentIndex(settings.last_tab)

    def _build_menu(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        quit_action = QAction("&Quit", self)
        quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        help_menu = self.menuBar().addMenu("&Help")
        about_action = QAction("&About", self)
        about_action.triggered.connect(
            lambda: dialogs.information(self, "About", _ABOUT_TEXT)
        )
        help_menu.addAction(about_action)

    def _show_in_converter(self, text: str) -> None:
        self._converter.set_input(text)
        self._tabs.setCurrentWidget(self._converter)

    def _show_in_editor(self, raw: str) -> None:
        if self._editor.load_json(raw):
            self._tabs.setCurrentWidget(self._editor)
        else:
            dialogs.warning(
                self, "Open in Editor",
                "This config has no container id and cannot be edited.",
            )

    def closeEvent(self, event) -> None:
        self._settings.last_tab = self._tabs.currentIndex()
        self._settings.save()
        super().closeEvent(event)
