# Copyright (C) 2025-2026 GameNative Config Tools Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""
Editor tab: load an exported container config and edit it field by field.

The form is generated from :data:`formats.gamenative.editor.EDITOR_TABS`;
every widget writes straight into the :class:`ContainerDraft`, which owns
the packed sub-field handling.  The Win Components, Environment and Drives
tabs have no declarative fields and get list editors instead.
"""

from __future__ import annotations

import logging

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QPushButton,
    QScrollArea,
    QTableWidget,
    QTableWidgetItem,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from formats.gamenative import (
    EDITOR_TABS,
    ContainerDraft,
    EditorImportError,
    FieldSpec,
    TabSpec,
    config_to_text,
    import_container,
    write_export,
)
from formats.gamenative.editor import field_options
from formats.gamenative.fields import (
    DEFAULT_CORE_COUNT,
    WINCOMPONENT_OPTIONS,
    EnvVar,
    parse_cpu_list,
)
from gntools.core.config import AppSettings
from gntools.ui import dialogs

log = logging.getLogger(__name__)

# Changing one of these can show or hide other fields.
_LAYOUT_KEYS = frozenset({"containerVariant", "graphicsDriver", "dxwrapper"})


class EditorPanel(QWidget):
    """Import box on top, generated tabbed form below."""

    send_to_converter = Signal(str)

    def __init__(self, settings: AppSettings, parent=None):
        super().__init__(parent)
        self._settings = settings
        self._draft: ContainerDraft | None = None
        self._updating = False

        root = QVBoxLayout(self)
        root.setContentsMargins(12, 12, 12, 12)
        root.setSpacing(8)

        self._import_box = QPlainTextEdit()
        self._import_box.setPlaceholderText(
            "Paste an exported config (or a bare config object) and press Load."
        )
        self._import_box.setMaximumHeight(120)
        root.addWidget(self._import_box)

        row = QHBoxLayout()
        self._error = QLabel("")
        self._error.setObjectName("errorLabel")
        row.addWidget(self._error, 1)
        btn_load = QPushButton("Load")
        btn_load.setObjectName("primaryButton")
        btn_load.clicked.connect(lambda: self.load_json(self._import_box.toPlainText()))
        row.addWidget(btn_load)
        root.addLayout(row)

        header = QHBoxLayout()
        self._title = QLabel("No config loaded")
        self._title.setObjectName("sectionLabel")
        header.addWidget(self._title, 1)

        self._btn_dump = QPushButton("Open in Converter")
        self._btn_dump.setToolTip("Render this config as a key/value dump")
        self._btn_dump.clicked.connect(self._send_dump)
        header.addWidget(self._btn_dump)

        self._btn_copy = QPushButton("Copy JSON")
        self._btn_copy.clicked.connect(self._copy_json)
        header.addWidget(self._btn_copy)

        self._btn_export = QPushButton("Export...")
        self._btn_export.setObjectName("primaryButton")
        self._btn_export.clicked.connect(self._export)
        header.addWidget(self._btn_export)
        root.addLayout(header)

        self._tabs = QTabWidget()
        root.addWidget(self._tabs, 1)

        self._set_actions_enabled(False)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_json(self, raw: str) -> bool:
        try:
            draft = import_container(raw)
        except EditorImportError as exc:
            self._error.setText(str(exc))
            return False
        self._error.clear()
        self._import_box.setPlainText(raw)
        self._draft = draft
        self._set_actions_enabled(True)
        self._rebuild_tabs()
        return True

    def _set_actions_enabled(self, enabled: bool) -> None:
        for btn in (self._btn_dump, self._btn_copy, self._btn_export):
            btn.setEnabled(enabled)

    # ------------------------------------------------------------------
    # Form generation
    # ------------------------------------------------------------------

    def _rebuild_tabs(self) -> None:
        current = self._tabs.currentIndex()
        while self._tabs.count():
            page = self._tabs.widget(0)
            self._tabs.removeTab(0)
            page.deleteLater()
        draft = self._draft
        if draft is None:
            return
        self._title.setText(f"{draft.container_name}  ({draft.config.get('id', '')})")

        for tab in EDITOR_TABS:
            if tab.id == "components":
                page = self._components_page()
            elif tab.id == "environment":
                page = self._environment_page()
            elif tab.id == "drives":
                page = self._drives_page()
            else:
                page = self._form_page(tab)
            scroll = QScrollArea()
            scroll.setWidgetResizable(True)
            scroll.setWidget(page)
            scroll.setToolTip(tab.description)
            self._tabs.addTab(scroll, tab.label)

        if 0 <= current < self._tabs.count():
            self._tabs.setCurrentIndex(current)

    def _form_page(self, tab: TabSpec) -> QWidget:
        page = QWidget()
        form = QFormLayout(page)
        form.setLabelAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        desc = QLabel(tab.description)
        desc.setObjectName("sectionLabel")
        form.addRow(desc)
        for spec in self._draft.visible_fields(tab):
            widget = self._field_widget(spec)
            if spec.description:
                widget.setToolTip(spec.description)
            form.addRow(f"{spec.label}:", widget)
        return page

    def _field_widget(self, spec: FieldSpec) -> QWidget:
        draft = self._draft
        value = draft.get_value(spec)

        if spec.kind == "toggle":
            box = QCheckBox()
            box.setChecked(bool(value))
            box.toggled.connect(lambda checked, s=spec: self._on_field_changed(s, checked))
            return box

        if spec.kind == "select":
            combo = QComboBox()
            for opt_value, label in field_options(spec, draft.config):
                combo.addItem(label, opt_value)
            idx = combo.findData(value)
            if idx < 0 and value not in (None, ""):
                combo.addItem(str(value), value)
                idx = combo.count() - 1
            combo.setCurrentIndex(max(idx, 0))
            combo.activated.connect(
                lambda i, s=spec, c=combo: self._on_field_changed(s, c.itemData(i))
            )
            return combo

        if spec.kind == "cores":
            return self._cores_widget(spec.key)

        edit = QLineEdit("" if value is None else str(value))
        edit.setPlaceholderText(spec.placeholder)
        edit.editingFinished.connect(
            lambda s=spec, e=edit: self._on_field_changed(s, e.text())
        )
        return edit

    def _cores_widget(self, key: str) -> QWidget:
        enabled = set(parse_cpu_list(self._draft.config.get(key)))
        holder = QWidget()
        row = QHBoxLayout(holder)
        row.setContentsMargins(0, 0, 0, 0)
        for core in range(DEFAULT_CORE_COUNT):
            box = QCheckBox(f"CPU{core}")
            box.setChecked(core in enabled)
            box.toggled.connect(lambda _=False, k=key, c=core: self._draft.toggle_core(k, c))
            row.addWidget(box)
        row.addStretch()
        return holder

    def _on_field_changed(self, spec: FieldSpec, value) -> None:
        if self._updating or self._draft is None:
            return
        try:
            self._draft.set_value(spec, value)
        except (TypeError, ValueError) as exc:
            log.warning("Rejected value %r for %s: %s", value, spec.key, exc)
            return
        if spec.key in _LAYOUT_KEYS:
            self._rebuild_tabs()
        elif spec.key == "containerName":
            self._title.setText(
                f"{self._draft.container_name}  ({self._draft.config.get('id', '')})"
            )

    # ------------------------------------------------------------------
    # List editors
    # ------------------------------------------------------------------

    def _components_page(self) -> QWidget:
        page = QWidget()
        form = QFormLayout(page)
        components = self._draft.wincomponents()
        if not components:
            form.addRow(QLabel("This config has no wincomponents entry."))
        for name, current in components.items():
            combo = QComboBox()
            for opt_value, label in WINCOMPONENT_OPTIONS:
                combo.addItem(label, opt_value)
            combo.setCurrentIndex(max(combo.findData(current), 0))
            combo.activated.connect(
                lambda i, n=name, c=combo: self._draft.set_wincomponent(n, c.itemData(i))
            )
            form.addRow(f"{name}:", combo)
        return page

    def _environment_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        table = QTableWidget(0, 2)
        table.setHorizontalHeaderLabels(["Name", "Value"])
        table.horizontalHeader().setStretchLastSection(True)
        self._fill_env_table(table)
        table.itemChanged.connect(lambda _item, t=table: self._store_env_table(t))
        layout.addWidget(table, 1)

        row = QHBoxLayout()
        row.addStretch()
        btn_add = QPushButton("Add Variable")
        btn_add.clicked.connect(lambda: self._add_env(table))
        row.addWidget(btn_add)
        btn_remove = QPushButton("Remove Selected")
        btn_remove.clicked.connect(lambda: self._remove_env(table))
        row.addWidget(btn_remove)
        layout.addLayout(row)
        return page

    def _fill_env_table(self, table: QTableWidget) -> None:
        self._updating = True
        try:
            env = self._draft.env_vars()
            table.setRowCount(len(env))
            for r, var in enumerate(env):
                table.setItem(r, 0, QTableWidgetItem(var.name))
                table.setItem(r, 1, QTableWidgetItem(var.value))
        finally:
            self._updating = False

    def _store_env_table(self, table: QTableWidget) -> None:
        if self._updating:
            return
        env: list[EnvVar] = []
        for r in range(table.rowCount()):
            name = table.item(r, 0).text().strip() if table.item(r, 0) else ""
            value = table.item(r, 1).text() if table.item(r, 1) else ""
            if name:
                env.append(EnvVar(name=name, value=value))
        self._draft.set_env_vars(env)

    def _add_env(self, table: QTableWidget) -> None:
        self._draft.add_env_var(f"VAR{table.rowCount() + 1}")
        self._fill_env_table(table)

    def _remove_env(self, table: QTableWidget) -> None:
        row = table.currentRow()
        if row < 0:
            return
        self._draft.remove_env_var(row)
        self._fill_env_table(table)

    def _drives_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        table = QTableWidget(0, 2)
        table.setHorizontalHeaderLabels(["Drive", "Android Path"])
        table.horizontalHeader().setStretchLastSection(True)
        self._fill_drive_table(table)
        table.itemChanged.connect(self._on_drive_edited)
        layout.addWidget(table, 1)

        row = QHBoxLayout()
        row.addStretch()
        btn_add = QPushButton("Add Drive")
        btn_add.clicked.connect(lambda: self._add_drive(table))
        row.addWidget(btn_add)
        btn_remove = QPushButton("Remove Selected")
        btn_remove.clicked.connect(lambda: self._remove_drive(table))
        row.addWidget(btn_remove)
        layout.addLayout(row)
        return page

    def _fill_drive_table(self, table: QTableWidget) -> None:
        self._updating = True
        try:
            drives = self._draft.drives()
            table.setRowCount(len(drives))
            for r, drive in enumerate(drives):
                letter = QTableWidgetItem(f"{drive.letter}:")
                letter.setFlags(letter.flags() & ~Qt.ItemFlag.ItemIsEditable)
                table.setItem(r, 0, letter)
                table.setItem(r, 1, QTableWidgetItem(drive.path))
        finally:
            self._updating = False

    def _on_drive_edited(self, item: QTableWidgetItem) -> None:
        if self._updating or item.column() != 1:
            return
        self._draft.set_drive_path(item.row(), item.text())

    def _add_drive(self, table: QTableWidget) -> None:
        self._draft.add_drive()
        self._fill_drive_table(table)

    def _remove_drive(self, table: QTableWidget) -> None:
        row = table.currentRow()
        if row < 0:
            return
        self._draft.remove_drive(row)
        self._fill_drive_table(table)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _copy_json(self) -> None:
        if self._draft is None:
            return
        QGuiApplication.clipboard().setText(self._draft.to_export().to_json())

    def _send_dump(self) -> None:
        if self._draft is None:
            return
        self.send_to_converter.emit(config_to_text(self._draft.config))

    def _export(self) -> None:
        if self._draft is None:
            return
        dest = dialogs.ask_json_save_path(
            self, "Export Container Config",
            self._settings.export_dir(), self._draft.export_filename(),
        )
        if dest is None:
            return
        try:
            write_export(self._draft.to_export(), dest)
        except OSError as exc:
            log.error("Failed to export %s: %s", dest, exc)
            dialogs.critical(self, "Export Failed", f"Could not write {dest}:\n\n{exc}")
            return
        self._settings.last_export_dir = str(dest.parent)
        self._settings.save()
