"""Vocabularies and typed data models for GameNative container configs."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from typing import Any


# ── Recognised top-level keys ────────────────────────────────────────────
# Exact, case-sensitive names as they appear in a raw GameNative dump.

KNOWN_KEYS: frozenset[str] = frozenset({
    "id", "name", "drives", "lc all", "cpuList", "envVars", "showFPS",
    "useDRI3", "emulator", "execArgs", "forceDlc", "language", "rcfileId",
    "dxwrapper", "extraData", "profileId", "appVersion", "imgVersion",
    "audioDriver", "box64Version", "desktopTheme", "wincomponents",
    "config changed", "fexcoreVersion", "graphicsDriver", "sharpnessLevel",
    "sharpnessEffect", "sharpnessDenoise", "startupSelection",
    "graphicsDriverAdreno", "lastInstalledMainWrapper",
    "discord support prompt shown", "inputType", "steamType", "wow64Mode",
    "screenSize", "box64Preset", "box86Preset", "installPath", "wineVersion",
    "box86Version", "cpuListWoW64", "useLegacyDRM", "fexcorePreset",
    "midiSoundFont", "executablePath", "needsUnpacking", "dxwrapperConfig",
    "launchRealSteam", "sessionMetadata", "avg fps", "session length sec",
    "touchscreenMode", "containerVariant", "dinputMapperType",
    "sdlControllerAPI", "allowSteamUpdates", "controllerMapping",
    "disableMouseInput", "primaryController", "emulateKeyboardMouse",
    "graphicsDriverConfig", "graphicsDriverVersion",
    "controllerEmulationBindings",
})

# Session / bookkeeping keys: their value line is consumed but dropped.
EXCLUDED_KEYS: frozenset[str] = frozenset({
    "avg fps", "session length sec", "appVersion", "imgVersion",
    "config changed", "discord support prompt shown", "profileId",
})

# Version and identifier fields never go through boolean/number inference.
STRING_ONLY_KEYS: frozenset[str] = frozenset({
    "wineVersion", "box86Version", "box64Version", "fexcoreVersion",
    "graphicsDriverVersion", "graphicsDriverConfig", "dxwrapperConfig", "id",
})

JSON_KEYS: frozenset[str] = frozenset({"extraData", "sessionMetadata"})

# Raw key -> output key, for the few names that are not valid identifiers.
KEY_RENAMES: dict[str, str] = {"lc all": "lc_all"}
OUTPUT_TO_RAW_KEY: dict[str, str] = {v: k for k, v in KEY_RENAMES.items()}

BINDINGS_KEY = "controllerEmulationBindings"


# ── Controller buttons ──────────────────────────────────────────────────

BUTTON_INDEX_MAP: dict[str, str] = {
    "A": "0", "B": "1", "X": "2", "Y": "3",
    "L1": "4", "R1": "5", "SELECT": "6", "START": "7",
    "MENU": "8", "L2": "9", "R2": "10", "L3": "11",
    "R3": "12", "DPAD UP": "13", "DPAD DOWN": "14",
    "DPAD LEFT": "15", "DPAD RIGHT": "16",
}

BUTTON_KEYS: frozenset[str] = frozenset(BUTTON_INDEX_MAP)
INDEX_TO_BUTTON: dict[str, str] = {v: k for k, v in BUTTON_INDEX_MAP.items()}


# ── Envelope defaults ───────────────────────────────────────────────────

EXPORT_VERSION = 1
DEFAULT_CONTAINER_NAME = "Imported Config"
EXPORTED_FROM_CONVERTER = "GameNative"
EXPORTED_FROM_EDITOR = "WebEditor"
EXPORTED_FROM_BROWSER = "CachedBrowser"

STEAM_ID_PREFIX = "STEAM_"


class Coercion(enum.Enum):
    """How a raw value line is turned into a config value."""
    STRIP_WHITESPACE = "strip_whitespace"
    JSON = "json"
    STRING = "string"
    INFER = "infer"


def coercion_for(key: str) -> Coercion:
    """Return the coercion policy for the *raw* key name."""
    if key == "drives":
        return Coercion.STRIP_WHITESPACE
    if key in JSON_KEYS:
        return Coercion.JSON
    if key in STRING_ONLY_KEYS:
        return Coercion.STRING
    return Coercion.INFER


class LineKind(enum.Enum):
    BUTTON = "button"
    KEY = "key"
    UNKNOWN = "unknown"


def is_vocabulary_line(text: str) -> bool:
    """True when *text* names a button or a recognised key."""
    return text in BUTTON_KEYS or text in KNOWN_KEYS


@dataclass(frozen=True)
class ClassifiedLine:
    """One non-blank input line.  *position* is 1-based."""
    position: int
    text: str
    kind: LineKind


class Target(enum.Enum):
    CONFIG = "config"
    BINDINGS = "bindings"


@dataclass(frozen=True)
class Assignment:
    """A resolved ``(target, key, value)`` triple.

    For ``Target.BINDINGS`` *key* is the button's index string.
    """
    target: Target
    key: str
    value: Any


@dataclass
class ExportData:
    """Downloadable envelope wrapping a converted or edited config."""
    config: dict[str, Any] = field(default_factory=dict)
    container_name: str = DEFAULT_CONTAINER_NAME
    exported_from: str = EXPORTED_FROM_CONVERTER
    timestamp: int = 0
    version: int = EXPORT_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "exportedFrom": self.exported_from,
            "timestamp": self.timestamp,
            "containerName": self.container_name,
            "config": self.config,
        }

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ExportData:
        """Build from a parsed envelope, tolerating missing fields."""
        config = raw.get("config")
        return cls(
            config=dict(config) if isinstance(config, dict) else {},
            container_name=str(raw.get("containerName") or DEFAULT_CONTAINER_NAME),
            exported_from=str(raw.get("exportedFrom") or EXPORTED_FROM_CONVERTER),
            timestamp=int(raw.get("timestamp") or 0),
            version=int(raw.get("version") or EXPORT_VERSION),
        )
