"""Helpers for the packed string fields inside a container config.

Several config values are small serialized structures of their own:

* ``dxwrapperConfig`` / ``graphicsDriverConfig`` / ``wincomponents``:
  comma-separated ``key=value`` pairs
* ``envVars``: space-separated ``NAME=value`` assignments
* ``drives``: concatenated ``<letter>:<path>`` pairs with no separator
* ``cpuList`` / ``cpuListWoW64``: comma-separated core indices
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Any


# ── key=value lists ──────────────────────────────────────────────────────

def parse_kv(text: Any) -> dict[str, str]:
    if text is None or text == "":
        return {}
    result: dict[str, str] = {}
    for pair in str(text).split(","):
        key, sep, val = pair.partition("=")
        if not sep:
            continue
        key = key.strip()
        if key:
            result[key] = val.strip()
    return result


def stringify_kv(values: dict[str, str]) -> str:
    return ",".join(f"{k}={v}" for k, v in values.items())


# ── Environment variables ────────────────────────────────────────────────

@dataclass
class EnvVar:
    name: str
    value: str


def parse_env(text: Any) -> list[EnvVar]:
    if text is None or text == "":
        return []
    result: list[EnvVar] = []
    for token in str(text).split(" "):
        if "=" not in token:
            continue
        name, _, value = token.partition("=")
        result.append(EnvVar(name=name, value=value))
    return result


def stringify_env(env: list[EnvVar]) -> str:
    return " ".join(f"{e.name}={e.value}" for e in env)


# ── Drives ───────────────────────────────────────────────────────────────

DEFAULT_DRIVE_PATH = "/storage/emulated/0/"


@dataclass
class Drive:
    letter: str
    path: str


def parse_drives(text: str | None) -> list[Drive]:
    """Split ``"C:/a/D:/b"`` into ``[Drive("C", "/a/"), Drive("D", "/b")]``.

    The letter is the character right before each ``:``, and a path runs up
    to the letter of the next drive.
    """
    if not text:
        return []
    result: list[Drive] = []
    index = text.find(":")
    while index != -1:
        letter = text[index - 1] if index > 0 else ""
        next_index = text.find(":", index + 1)
        end = next_index - 1 if next_index != -1 else len(text)
        result.append(Drive(letter=letter, path=text[index + 1:end]))
        index = next_index
    return result


def stringify_drives(drives: list[Drive]) -> str:
    return "".join(f"{d.letter}:{d.path}" for d in drives)


def next_drive_letter(drives: list[Drive]) -> str:
    used = {d.letter.upper() for d in drives}
    for letter in string.ascii_uppercase:
        if letter not in used:
            return letter
    return "Z"


# ── CPU affinity ─────────────────────────────────────────────────────────

DEFAULT_CORE_COUNT = 8


def parse_cpu_list(text: Any) -> list[int]:
    """Read a core list; a lone inferred ``0`` is core 0, not empty."""
    if text is None or text == "":
        return []
    cores: list[int] = []
    for token in str(text).split(","):
        token = token.strip()
        if token.isdigit():
            cores.append(int(token))
    return cores


def toggle_core(text: Any, core: int) -> str:
    """Flip *core* in a comma-separated core list, keeping it sorted."""
    cores = parse_cpu_list(text)
    if core in cores:
        cores = [c for c in cores if c != core]
    else:
        cores.append(core)
    return ",".join(str(c) for c in sorted(cores))


# ── Option tables ────────────────────────────────────────────────────────
# (value, label) pairs; values are what the Android tool stores.

BOX_PRESETS: list[tuple[str, str]] = [
    ("STABILITY", "Stability"),
    ("COMPATIBILITY", "Compatibility"),
    ("INTERMEDIATE", "Intermediate"),
    ("PERFORMANCE", "Performance"),
    ("UNITY", "Unity"),
    ("UNITY MONO BLEEDING EDGE", "Unity Mono Bleeding Edge"),
]

FEXCORE_PRESETS: list[tuple[str, str]] = BOX_PRESETS[:4]

CONTAINER_VARIANTS = ("glibc", "bionic")

GRAPHICS_DRIVERS: dict[str, list[tuple[str, str]]] = {
    "glibc": [
        ("vortek", "Vortek (Universal)"),
        ("turnip", "Turnip (Adreno)"),
        ("virgl", "VirGL (Universal)"),
        ("adreno", "Adreno (Adreno)"),
        ("sd-8-elite", "SD 8 Elite (SD 8 Elite)"),
    ],
    "bionic": [
        ("Wrapper", "Wrapper"),
        ("Wrapper-v2", "Wrapper-v2"),
        ("Wrapper-leegao", "Wrapper-leegao"),
        ("Wrapper-legacy", "Wrapper-legacy"),
    ],
}

WINCOMPONENT_OPTIONS: list[tuple[str, str]] = [
    ("0", "Builtin (Wine)"),
    ("1", "Native (Windows)"),
]
