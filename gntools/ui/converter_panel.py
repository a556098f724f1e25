# Copyright (C) 2025-2026 GameNative Config Tools Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""Converter tab: paste a raw key/value dump, preview and save ``config.json``."""

from __future__ import annotations

import logging
import threading

from PySide6.QtCore import QObject, Qt, Signal
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from formats.gamenative import (
    CONVERTER_FILENAME,
    ConversionError,
    build_export,
    convert_text,
    resolve_container_name,
    write_export,
)
from gntools.core.config import AppSettings
from gntools.ui import dialogs

log = logging.getLogger(__name__)

_PLACEHOLDER = (
    "Paste the key/value dump copied from GameNative here, one entry per line:\n\n"
    "wineVersion\n8.0\nshowFPS\ntrue\nA\nbutton1"
)


class _LookupRelay(QObject):
    """Carries a finished name lookup from the worker thread to the GUI."""
    finished = Signal(int, object, str)   # request id, config, container name


class ConverterPanel(QWidget):
    """Raw dump on the left, JSON preview on the right."""

    def __init__(self, settings: AppSettings, parent=None):
        super().__init__(parent)
        self._settings = settings
        self._request_id = 0
        self._relay = _LookupRelay(self)
        self._relay.finished.connect(self._on_lookup_finished)

        root = QVBoxLayout(self)
        root.setContentsMargins(12, 12, 12, 12)
        root.setSpacing(8)

        hint = QLabel(
            "Lines alternate between a key and its value. Controller buttons "
            "(A, B, DPAD UP, ...) become controllerEmulationBindings."
        )
        hint.setObjectName("sectionLabel")
        hint.setWordWrap(True)
        root.addWidget(hint)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        self._input = QPlainTextEdit()
        self._input.setPlaceholderText(_PLACEHOLDER)
        self._input.textChanged.connect(self._clear_error)
        splitter.addWidget(self._input)

        self._preview = QPlainTextEdit()
        self._preview.setReadOnly(True)
        self._preview.setPlaceholderText("Converted JSON appears here.")
        splitter.addWidget(self._preview)
        splitter.setSizes([1, 1])
        root.addWidget(splitter, 1)

        self._error = QLabel("")
        self._error.setObjectName("errorLabel")
        self._error.setWordWrap(True)
        root.addWidget(self._error)

        row = QHBoxLayout()
        self._status = QLabel("")
        self._status.setObjectName("sectionLabel")
        row.addWidget(self._status, 1)

        self._btn_clear = QPushButton("Clear")
        self._btn_clear.clicked.connect(self._clear)
        row.addWidget(self._btn_clear)

        self._btn_preview = QPushButton("Preview")
        self._btn_preview.setToolTip("Convert without saving (Ctrl+Enter)")
        self._btn_preview.clicked.connect(self.preview)
        row.addWidget(self._btn_preview)

        self._btn_save = QPushButton("Convert && Save...")
        self._btn_save.setObjectName("primaryButton")
        self._btn_save.clicked.connect(self.convert_and_save)
        row.addWidget(self._btn_save)
        root.addLayout(row)

        for seq in ("Ctrl+Return", "Ctrl+Enter"):
            QShortcut(QKeySequence(seq), self, activated=self.preview)

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def _convert(self) -> dict | None:
        try:
            config = convert_text(self._input.toPlainText())
        except ConversionError as exc:
            self._error.setText(str(exc))
            self._preview.clear()
            return None
        self._error.clear()
        return config

    def preview(self) -> None:
        config = self._convert()
        if config is None:
            return
        self._preview.setPlainText(build_export(config).to_json())
        self._status.setText(f"{len(config)} key(s) converted")

    def convert_and_save(self) -> None:
        config = self._convert()
        if config is None:
            return
        self._preview.setPlainText(build_export(config).to_json())

        self._request_id += 1
        request_id = self._request_id
        lookup = self._settings.game_name_lookup()
        self._btn_save.setEnabled(False)
        self._status.setText("Looking up game name...")

        def _worker() -> None:
            name = resolve_container_name(config, lookup)
            self._relay.finished.emit(request_id, config, name)

        threading.Thread(target=_worker, daemon=True).start()

    def _on_lookup_finished(self, request_id: int, config: dict, name: str) -> None:
        if request_id != self._request_id:
            return
        self._btn_save.setEnabled(True)
        self._status.setText(f"Container name: {name}")

        export = build_export(config, container_name=name)
        self._preview.setPlainText(export.to_json())

        dest = dialogs.ask_json_save_path(
            self, "Save GameNative Config", self._settings.export_dir(), CONVERTER_FILENAME,
        )
        if dest is None:
            return
        try:
            write_export(export, dest)
        except OSError as exc:
            log.error("Failed to save %s: %s", dest, exc)
            dialogs.critical(self, "Save Failed", f"Could not write {dest}:\n\n{exc}")
            return

        self._settings.last_export_dir = str(dest.parent)
        self._settings.save()
        self._status.setText(f"Saved {dest.name}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _clear_error(self) -> None:
        if self._error.text():
            self._error.clear()

    def _clear(self) -> None:
        self._input.clear()
        self._preview.clear()
        self._status.clear()

    def set_input(self, text: str) -> None:
        self._input.setPlainText(text)
