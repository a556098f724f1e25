# Copyright (C) 2025-2026 GameNative Config Tools Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

from __future__ import annotations

import logging

from PySide6.QtCore import QStringListModel, Qt, Signal
from PySide6.QtWidgets import (
    QCompleter,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from formats.gamenative import (
    GameConfigRecord,
    SnapshotError,
    load_filter_snapshot,
    load_records,
    record_to_export,
    search_records,
    write_export,
)
from formats.gamenative.export import now_ms
from formats.gamenative.snapshot import (
    FILTERS_FILENAME,
    FilterSnapshot,
    load_filters_json,
    match_suggestions,
    record_filename,
)
from gntools.core.config import AppSettings
from gntools.ui import dialogs

log = logging.getLogger(__name__)


class _SuggestField(QLineEdit):
    """Line edit whose completer is fed by :func:`match_suggestions`.

    ``exact`` is set when the text came from picking a suggestion and is
    cleared again as soon as the user types.
    """

    def __init__(self, placeholder: str, parent=None):
        super().__init__(parent)
        self.setPlaceholderText(placeholder)
        self.exact = False
        self._names: list[str] = []
        self._model = QStringListModel(self)
        completer = QCompleter(self._model, self)
        completer.setCompletionMode(QCompleter.CompletionMode.UnfilteredPopupCompletion)
        completer.setCaseSensitivity(Qt.CaseSensitivity.CaseInsensitive)
        completer.activated.connect(self._on_picked)
        self.setCompleter(completer)
        self.textEdited.connect(self._on_edited)

    def set_names(self, names: list[str]) -> None:
        self._names = names

    def _on_edited(self, text: str) -> None:
        self.exact = False
        self._model.setStringList(match_suggestions(text, self._names))

    def _on_picked(self, text: str) -> None:
        self.exact = True
        self.setText(text)


class BrowserPanel(QWidget):
    """Search the bundled community snapshot and export a stored config."""

    open_in_editor = Signal(str)

    HEADERS = ["Game", "Device", "GPU", "Rating", "Avg FPS", "Wine", "Submitted"]

    def __init__(self, settings: AppSettings, parent=None):
        super().__init__(parent)
        self._settings = settings
        self._records: list[GameConfigRecord] = []
        self._loaded = False

        root = QVBoxLayout(self)
        root.setContentsMargins(12, 12, 12, 12)
        root.setSpacing(8)

        filters = QFormLayout()
        filters.setLabelAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        self._filter_game = _SuggestField("Filter by game title...")
        self._filter_gpu = _SuggestField("Filter by GPU...")
        self._filter_device = _SuggestField("Filter by device model...")
        for label, edit in (
            ("Game:", self._filter_game),
            ("GPU:", self._filter_gpu),
            ("Device:", self._filter_device),
        ):
            edit.textChanged.connect(self._apply_filters)
            filters.addRow(label, edit)
        root.addLayout(filters)

        self._status = QLabel("")
        self._status.setObjectName("sectionLabel")
        root.addWidget(self._status)

        self._table = QTableWidget(0, len(self.HEADERS))
        self._table.setHorizontalHeaderLabels(self.HEADERS)
        self._table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self._table.setSelectionMode(QTableWidget.SelectionMode.SingleSelection)
        self._table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self._table.itemSelectionChanged.connect(self._on_selection_changed)
        self._table.doubleClicked.connect(lambda _=None: self._open_selected())
        root.addWidget(self._table, 1)

        row = QHBoxLayout()
        row.addStretch()
        self._btn_reload = QPushButton("Reload")
        self._btn_reload.clicked.connect(self.reload)
        row.addWidget(self._btn_reload)

        self._btn_open = QPushButton("Open in Editor")
        self._btn_open.setEnabled(False)
        self._btn_open.clicked.connect(self._open_selected)
        row.addWidget(self._btn_open)

        self._btn_download = QPushButton("Download...")
        self._btn_download.setObjectName("primaryButton")
        self._btn_download.setEnabled(False)
        self._btn_download.clicked.connect(self._download_selected)
        row.addWidget(self._btn_download)
        root.addLayout(row)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        if not self._loaded:
            self.reload()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def reload(self) -> None:
        self._loaded = True
        db_path = self._settings.resolved_snapshot_path()
        try:
            self._records = load_records(db_path)
            snapshot = load_filter_snapshot(db_path)
        except SnapshotError as exc:
            log.warning("Snapshot unavailable: %s", exc)
            self._records = []
            snapshot = load_filters_json(db_path.with_name(FILTERS_FILENAME))
            self._status.setText(str(exc))
        else:
            self._status.setText(f"Snapshot: {db_path.name}")
        self._apply_snapshot(snapshot)
        self._apply_filters()

    def _apply_snapshot(self, snapshot: FilterSnapshot) -> None:
        self._filter_game.set_names([g.name for g in snapshot.games])
        self._filter_gpu.set_names(snapshot.gpus)
        self._filter_device.set_names(sorted({d.model for d in snapshot.devices if d.model}))

    def _apply_filters(self) -> None:
        exact = any(f.exact for f in (self._filter_game, self._filter_gpu, self._filter_device))
        rows = search_records(
            self._records,
            game=self._filter_game.text().strip(),
            gpu=self._filter_gpu.text().strip(),
            device=self._filter_device.text().strip(),
            exact=exact,
        )

        self._table.setRowCount(len(rows))
        for r, record in enumerate(rows):
            values = [
                record.game.name if record.game else "",
                record.device.model if record.device else "",
                record.device.gpu if record.device else "",
                f"{record.rating:g}",
                f"{record.avg_fps:.1f}",
                str(record.configs.get("wineVersion", "")),
                record.created_at or "",
            ]
            for c, value in enumerate(values):
                item = QTableWidgetItem(value)
                item.setData(Qt.ItemDataRole.UserRole, record)
                self._table.setItem(r, c, item)

        self._table.resizeColumnsToContents()
        self._on_selection_changed()
        if self._records:
            self._status.setText(f"{len(rows)} of {len(self._records)} config(s) shown")

    # ------------------------------------------------------------------
    # Selection actions
    # ------------------------------------------------------------------

    def _selected_record(self) -> GameConfigRecord | None:
        items = self._table.selectedItems()
        if not items:
            return None
        record = items[0].data(Qt.ItemDataRole.UserRole)
        return record if isinstance(record, GameConfigRecord) else None

    def _on_selection_changed(self) -> None:
        has = self._selected_record() is not None
        self._btn_open.setEnabled(has)
        self._btn_download.setEnabled(has)

    def _open_selected(self) -> None:
        record = self._selected_record()
        if record is None:
            return
        self.open_in_editor.emit(record_to_export(record).to_json())

    def _download_selected(self) -> None:
        record = self._selected_record()
        if record is None:
            return
        ts = now_ms()
        dest = dialogs.ask_json_save_path(
            self, "Download Config", self._settings.export_dir(), record_filename(record, ts),
        )
        if dest is None:
            return
        try:
            write_export(record_to_export(record, timestamp=ts), dest)
        except OSError as exc:
            log.error("Failed to save %s: %s", dest, exc)
            dialogs.critical(self, "Download Failed", f"Could not write {dest}:\n\n{exc}")
            return
        self._settings.last_export_dir = str(dest.parent)
        self._settings.save()
