"""GameNative container-config library.

Converts raw key/value dumps into the structured JSON GameNative imports,
edits existing container configs, and reads the community snapshot.
All operations are pure Python with no external dependencies.

Quick start::

    from formats.gamenative import (
        SteamStoreLookup,
        build_export,
        convert_text,
        resolve_container_name,
        write_export,
    )

    config = convert_text(raw_dump)
    name = resolve_container_name(config, lookup=SteamStoreLookup())
    write_export(build_export(config, container_name=name), "config.json")
"""

from __future__ import annotations

from .coerce import coerce_value
from .converter import (
    classify_lines,
    config_to_text,
    convert_text,
    resolve_pairs,
    split_lines,
    tokenize,
)
from .editor import EDITOR_TABS, ContainerDraft, FieldSpec, TabSpec, import_container
from .errors import (
    ConversionError,
    EditorImportError,
    EmptyInputError,
    SnapshotError,
    UnknownKeyError,
)
from .export import (
    CONVERTER_FILENAME,
    build_export,
    resolve_container_name,
    steam_app_id,
    write_export,
)
from .models import (
    BUTTON_INDEX_MAP,
    DEFAULT_CONTAINER_NAME,
    EXCLUDED_KEYS,
    KNOWN_KEYS,
    STRING_ONLY_KEYS,
    ExportData,
)
from .snapshot import (
    GameConfigRecord,
    load_filter_snapshot,
    load_records,
    record_to_export,
    search_records,
)
from .steam import SteamStoreLookup, no_lookup

__all__ = [
    # Vocabulary
    "KNOWN_KEYS",
    "EXCLUDED_KEYS",
    "STRING_ONLY_KEYS",
    "BUTTON_INDEX_MAP",
    "DEFAULT_CONTAINER_NAME",
    # Converter
    "split_lines",
    "classify_lines",
    "tokenize",
    "resolve_pairs",
    "convert_text",
    "config_to_text",
    "coerce_value",
    # Errors
    "ConversionError",
    "EmptyInputError",
    "UnknownKeyError",
    "EditorImportError",
    "SnapshotError",
    # Export
    "ExportData",
    "CONVERTER_FILENAME",
    "build_export",
    "steam_app_id",
    "resolve_container_name",
    "write_export",
    "SteamStoreLookup",
    "no_lookup",
    # Editor
    "EDITOR_TABS",
    "TabSpec",
    "FieldSpec",
    "ContainerDraft",
    "import_container",
    # Snapshot
    "GameConfigRecord",
    "load_records",
    "load_filter_snapshot",
    "search_records",
    "record_to_export",
]
