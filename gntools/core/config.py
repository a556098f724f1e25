# Copyright (C) 2025-2026 GameNative Config Tools Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""
Persistent application settings for GameNative Config Tools.

Settings are stored as a JSON file in the OS-appropriate config directory
(``%APPDATA%/GameNative Config Tools`` on Windows).  Everything else in the
app receives an :class:`AppSettings` instance rather than reading the file
itself.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path

from PySide6.QtCore import QStandardPaths

from formats.gamenative.snapshot import SNAPSHOT_FILENAME
from formats.gamenative.steam import DEFAULT_ENDPOINTS, SteamStoreLookup, no_lookup


# -- Defaults --------------------------------------------------------------

_CONFIG_FILE = "settings.json"

_ROOT = Path(__file__).resolve().parent.parent.parent
DEFAULT_SNAPSHOT_PATH = _ROOT / "data" / SNAPSHOT_FILENAME

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _config_dir() -> Path:
    """Return (and create) the per-user config directory."""
    base = QStandardPaths.writableLocation(
        QStandardPaths.StandardLocation.AppConfigLocation,
    )
    path = Path(base)
    path.mkdir(parents=True, exist_ok=True)
    return path


# -- Settings data ---------------------------------------------------------

@dataclass
class AppSettings:
    """All user-facing settings.  Serialises to / from JSON."""

    # Window
    start_maximized: bool = False
    last_tab: int = 0
    theme: str = "Default"

    # Converter
    steam_lookup_enabled: bool = True
    steam_lookup_endpoints: list[str] = field(
        default_factory=lambda: list(DEFAULT_ENDPOINTS),
    )
    steam_lookup_timeout: float = 8.0
    last_export_dir: str = ""

    # Browser
    snapshot_path: str = ""            # empty = bundled data/cached-configs.sqlite

    # Debug
    debug_logging: bool = False
    debug_log_level: str = "WARNING"   # DEBUG / INFO / WARNING / ERROR

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path | None = None) -> AppSettings:
        """Load from disk, returning defaults if the file is missing or bad.

        Keys this version does not know about are dropped.
        """
        path = path or _config_dir() / _CONFIG_FILE
        if not path.exists():
            return cls()
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            known = {f.name for f in fields(cls)}
            raw = {k: v for k, v in raw.items() if k in known}
            return cls(**raw)
        except Exception:
            return cls()

    def save(self, path: Path | None = None) -> None:
        """Write current settings to disk."""
        path = path or _config_dir() / _CONFIG_FILE
        path.write_text(
            json.dumps(asdict(self), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def game_name_lookup(self):
        """Return the lookup callable the converter should use."""
        if not self.steam_lookup_enabled:
            return no_lookup
        return SteamStoreLookup(
            endpoints=self.steam_lookup_endpoints or DEFAULT_ENDPOINTS,
            timeout=self.steam_lookup_timeout,
        )

    def resolved_snapshot_path(self) -> Path:
        return Path(self.snapshot_path) if self.snapshot_path else DEFAULT_SNAPSHOT_PATH

    def snapshot_available(self) -> bool:
        return self.resolved_snapshot_path().is_file()

    def export_dir(self) -> Path:
        if self.last_export_dir and Path(self.last_export_dir).is_dir():
            return Path(self.last_export_dir)
        return Path.home()
