"""Read the bundled community-config snapshot.

The snapshot is a SQLite file (``cached-configs.sqlite``) with three
tables: ``data`` (one row per submitted game run, its config flattened into
``configs_*`` columns), ``games`` and ``devices``.  :func:`load_records`
joins them and rebuilds each nested config object; the flattened column
names follow the remote store's export, e.g.
``configs_extraData_graphicsDriverAdreno`` or
``configs_controllerEmulationBindings_DPAD_UP``.

An optional ``filters.json`` next to the database carries the same lookup
lists as :func:`load_filter_snapshot` and is read by
:func:`load_filters_json`.
"""

from __future__ import annotations

import json
import logging
import re
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .errors import SnapshotError
from .export import browser_filename, build_export
from .models import EXPORTED_FROM_BROWSER, ExportData

log = logging.getLogger(__name__)

SNAPSHOT_FILENAME = "cached-configs.sqlite"
FILTERS_FILENAME = "filters.json"
CACHED_CONTAINER_NAME = "Cached Config"
SUGGESTION_LIMIT = 15

_CONFIG_COLUMNS: tuple[str, ...] = (
    "id", "name", "drives", "lc_all", "cpuList", "envVars", "showFPS", "execArgs",
    "language", "rcfileId", "dxwrapper", "inputType", "steamType", "wow64Mode",
    "screenSize", "audioDriver", "box64Preset", "box86Preset", "installPath",
    "box64Version", "box86Version", "cpuListWoW64", "desktopTheme", "midiSoundFont",
    "wincomponents", "executablePath", "graphicsDriver", "needsUnpacking",
    "dxwrapperConfig", "launchRealSteam", "dinputMapperType", "sdlControllerAPI",
    "startupSelection", "controllerMapping", "disableMouseInput", "primaryController",
    "emulateKeyboardMouse", "graphicsDriverVersion", "touchscreenMode",
    "allowSteamUpdates", "graphicsDriverConfig", "useDRI3", "emulator", "forceDlc",
    "wineVersion", "useLegacyDRM", "fexcorePreset", "fexcoreVersion",
    "containerVariant",
)

_EXTRA_DATA_COLUMNS: tuple[str, ...] = (
    "dxwrapper", "appVersion", "imgVersion", "audioDriver", "desktopTheme",
    "wincomponents", "config_changed", "graphicsDriver", "startupSelection",
    "emulateKeyboardMouse", "discord_support_prompt_shown", "graphicsDriverAdreno",
    "box64Version", "fexcoreVersion", "sharpnessLevel", "sharpnessEffect",
    "sharpnessDenoise", "lastInstalledMainWrapper", "profileId", "wineprefixNeedsUpdate",
)

_BINDING_BUTTONS: tuple[str, ...] = (
    "A", "B", "X", "Y", "L1", "L2", "L3", "R1", "R2", "R3", "START", "SELECT",
    "DPAD_UP", "DPAD_DOWN", "DPAD_LEFT", "DPAD_RIGHT",
)

_RECORDS_QUERY = """
    SELECT
        d.*,
        g.name AS game_name,
        dev.model AS device_model,
        dev.gpu AS device_gpu,
        dev.android_ver AS device_android_ver
    FROM data d
    LEFT JOIN games g ON d.game_id = g.id
    LEFT JOIN devices dev ON d.device_id = dev.id
"""

_CLEAN_RE = re.compile(r"[^a-z0-9\s]")
_SPACES_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class GameRef:
    id: Any
    name: str


@dataclass(frozen=True)
class DeviceRef:
    id: Any
    model: str
    gpu: str = ""
    android_ver: str = ""


@dataclass(frozen=True)
class DeviceOption:
    name: str
    model: str


@dataclass
class GameConfigRecord:
    """One community-submitted run with its denormalised config."""
    id: Any
    rating: float = 0
    avg_fps: float = 0.0
    notes: str | None = None
    configs: dict[str, Any] = field(default_factory=dict)
    created_at: str | None = None
    app_version: str | None = None
    tags: list | None = None
    session_length_sec: float | None = None
    configs_id: Any = None
    configs_executable_path: str | None = None
    game: GameRef | None = None
    device: DeviceRef | None = None


@dataclass
class FilterSnapshot:
    games: list[GameRef] = field(default_factory=list)
    gpus: list[str] = field(default_factory=list)
    devices: list[DeviceOption] = field(default_factory=list)
    updated_at: str = ""


# ── Row decoding ─────────────────────────────────────────────────────────

def build_configs(row: dict[str, Any]) -> dict[str, Any]:
    """Rebuild the nested config object from flattened ``configs_*`` columns."""
    configs: dict[str, Any] = {}
    for col in _CONFIG_COLUMNS:
        value = row.get(f"configs_{col}")
        if value is not None:
            configs[col] = value

    extra: dict[str, Any] = {}
    for col in _EXTRA_DATA_COLUMNS:
        value = row.get(f"configs_extraData_{col}")
        if value is not None:
            extra[col] = value

    bindings: dict[str, Any] = {}
    for button in _BINDING_BUTTONS:
        value = row.get(f"configs_controllerEmulationBindings_{button}")
        if value is not None:
            bindings[button] = value
        value = row.get(f"configs_extraData_controllerEmulationBindings_{button}")
        if value is not None:
            extra[f"controllerEmulationBindings_{button}"] = value

    if bindings:
        configs["controllerEmulationBindings"] = bindings
    if extra:
        configs["extraData"] = extra

    avg_fps = row.get("configs_sessionMetadata_avg_fps")
    length = row.get("configs_sessionMetadata_session_length_sec")
    if avg_fps is not None or length is not None:
        configs["sessionMetadata"] = {
            "avg_fps": avg_fps,
            "session_length_sec": length,
        }
    return configs


def _parse_tags(raw: Any) -> list | None:
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return None
    return parsed if isinstance(parsed, list) else None


def _parse_float(raw: Any, default: float | None) -> float | None:
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except (TypeError, ValueError):
        return default


def record_from_row(row: dict[str, Any]) -> GameConfigRecord:
    game = None
    if row.get("game_name"):
        game = GameRef(id=row.get("game_id"), name=row["game_name"])
    device = None
    if row.get("device_model"):
        device = DeviceRef(
            id=row.get("device_id"),
            model=row["device_model"],
            gpu=row.get("device_gpu") or "",
            android_ver=row.get("device_android_ver") or "",
        )
    return GameConfigRecord(
        id=row.get("id"),
        rating=row.get("rating") or 0,
        avg_fps=_parse_float(row.get("avg_fps"), 0.0),
        notes=row.get("notes"),
        configs=build_configs(row),
        created_at=row.get("created_at"),
        app_version=row.get("configs_extraData_appVersion") or None,
        tags=_parse_tags(row.get("tags")),
        session_length_sec=_parse_float(row.get("session_length_sec"), None),
        configs_id=row.get("configs_id") or None,
        configs_executable_path=row.get("configs_executablePath") or None,
        game=game,
        device=device,
    )


# ── Loading ──────────────────────────────────────────────────────────────

def _connect(db_path: str | Path) -> sqlite3.Connection:
    path = Path(db_path)
    if not path.exists():
        raise SnapshotError(f"Snapshot database not found at {path}")
    try:
        conn = sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)
    except sqlite3.Error as exc:
        raise SnapshotError(f"Failed to open snapshot database: {exc}") from exc
    conn.row_factory = sqlite3.Row
    return conn


def load_records(db_path: str | Path) -> list[GameConfigRecord]:
    conn = _connect(db_path)
    try:
        rows = conn.execute(_RECORDS_QUERY).fetchall()
    except sqlite3.Error as exc:
        raise SnapshotError(f"Failed to read snapshot records: {exc}") from exc
    finally:
        conn.close()

    records = [record_from_row({k: r[k] for k in r.keys()}) for r in rows]
    log.debug("Loaded %d snapshot records from %s", len(records), db_path)
    return records


def load_filter_snapshot(db_path: str | Path) -> FilterSnapshot:
    conn = _connect(db_path)
    try:
        games = [
            GameRef(id=r["id"], name=r["name"])
            for r in conn.execute("SELECT id, name FROM games ORDER BY name")
        ]
        gpus = [
            r["gpu"] for r in conn.execute(
                "SELECT DISTINCT gpu FROM devices "
                "WHERE gpu IS NOT NULL AND gpu != '' AND gpu != 'Unknown' ORDER BY gpu"
            )
        ]
        devices = [
            DeviceOption(name=r["name"] or r["model"], model=r["model"])
            for r in conn.execute(
                "SELECT DISTINCT name, model FROM devices "
                "WHERE model IS NOT NULL ORDER BY name"
            )
        ]
    except sqlite3.Error as exc:
        raise SnapshotError(f"Failed to read snapshot filters: {exc}") from exc
    finally:
        conn.close()

    return FilterSnapshot(
        games=games,
        gpus=gpus,
        devices=devices,
        updated_at=datetime.now(timezone.utc).isoformat(),
    )


def load_filters_json(path: str | Path) -> FilterSnapshot:
    """Read a ``filters.json`` lookup file; missing or bad files give empty lists."""
    p = Path(path)
    if not p.exists():
        return FilterSnapshot()
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        log.warning("Ignoring unreadable filters file %s: %s", p, exc)
        return FilterSnapshot()
    if not isinstance(raw, dict):
        return FilterSnapshot()

    games = [
        GameRef(id=g.get("id"), name=str(g.get("name", "")))
        for g in raw.get("games", []) if isinstance(g, dict)
    ]
    gpus = [str(g) for g in raw.get("gpus", []) if g]
    devices = [
        DeviceOption(
            name=str(d.get("name") or d.get("model") or ""),
            model=str(d.get("model") or ""),
        )
        for d in raw.get("devices", []) if isinstance(d, dict)
    ]
    return FilterSnapshot(
        games=games, gpus=gpus, devices=devices,
        updated_at=str(raw.get("updatedAt") or ""),
    )


# ── Searching ────────────────────────────────────────────────────────────

def _clean(text: str) -> str:
    return _SPACES_RE.sub(" ", _CLEAN_RE.sub(" ", text.lower())).strip()


def suggestion_matches(term: str, name: str) -> bool:
    """Loose match used for autocomplete lists.

    True when the raw or cleaned term is a substring of the name, or when
    every search word is contained in some word of the name.
    """
    lowered = name.lower()
    search = term.lower()
    clean_name = _clean(name)
    clean_search = _clean(term)
    if clean_search in clean_name or search in lowered:
        return True
    name_words = clean_name.split(" ")
    return all(
        any(word in name_word for name_word in name_words)
        for word in clean_search.split(" ")
    )


def match_suggestions(
    term: str,
    names: list[str],
    limit: int = SUGGESTION_LIMIT,
) -> list[str]:
    if len(term) < 2:
        return []
    return [n for n in names if suggestion_matches(term, n)][:limit]


def search_records(
    records: list[GameConfigRecord],
    game: str = "",
    gpu: str = "",
    device: str = "",
    exact: bool = False,
) -> list[GameConfigRecord]:
    """Filter *records* by game name, GPU and device model.

    Matching is a case-insensitive substring test, or an exact comparison
    when *exact* is set (a suggestion was picked).  Empty filters match
    everything.
    """
    def _match(value: str | None, wanted: str) -> bool:
        if not wanted:
            return True
        if value is None:
            return False
        if exact:
            return value == wanted
        return wanted.lower() in value.lower()

    return [
        r for r in records
        if _match(r.game.name if r.game else None, game)
        and _match(r.device.gpu if r.device else None, gpu)
        and _match(r.device.model if r.device else None, device)
    ]


def record_to_export(record: GameConfigRecord, timestamp: int | None = None) -> ExportData:
    name = record.game.name if record.game else CACHED_CONTAINER_NAME
    return build_export(
        dict(record.configs),
        container_name=name,
        exported_from=EXPORTED_FROM_BROWSER,
        timestamp=timestamp,
    )


def record_filename(record: GameConfigRecord, timestamp: int) -> str:
    return browser_filename(record.game.name if record.game else None, timestamp)
