"""Build, name and write :class:`ExportData` envelopes."""

from __future__ import annotations

import logging
import os
import re
import tempfile
import time
from pathlib import Path
from typing import Any

from .models import (
    DEFAULT_CONTAINER_NAME,
    EXPORTED_FROM_CONVERTER,
    STEAM_ID_PREFIX,
    ExportData,
)
from .steam import GameNameLookup

log = logging.getLogger(__name__)

_APP_ID_RE = re.compile(r"^[0-9]+$")
_UNSAFE_FILENAME_RE = re.compile(r"[^a-z0-9]", re.IGNORECASE)

CONVERTER_FILENAME = "config.json"


def now_ms() -> int:
    return int(time.time() * 1000)


def build_export(
    config: dict[str, Any],
    container_name: str = DEFAULT_CONTAINER_NAME,
    exported_from: str = EXPORTED_FROM_CONVERTER,
    timestamp: int | None = None,
) -> ExportData:
    return ExportData(
        config=config,
        container_name=container_name,
        exported_from=exported_from,
        timestamp=now_ms() if timestamp is None else timestamp,
    )


# ── Container naming ─────────────────────────────────────────────────────

def steam_app_id(config: dict[str, Any]) -> str | None:
    """Return the numeric app id from a ``STEAM_<digits>`` config id."""
    cid = config.get("id")
    if not isinstance(cid, str) or not cid.startswith(STEAM_ID_PREFIX):
        return None
    app_id = cid[len(STEAM_ID_PREFIX):]
    if not _APP_ID_RE.match(app_id):
        return None
    return app_id


def resolve_container_name(
    config: dict[str, Any],
    lookup: GameNameLookup | None = None,
    default: str = DEFAULT_CONTAINER_NAME,
) -> str:
    """Name the container after its Steam game, falling back to *default*.

    Lookup failures are logged and swallowed so naming can never fail a
    conversion.
    """
    if lookup is None:
        return default
    app_id = steam_app_id(config)
    if app_id is None:
        return default
    try:
        name = lookup(app_id)
    except Exception:
        log.warning("Game name lookup for app %s failed", app_id, exc_info=True)
        return default
    return name or default


# ── Writing ──────────────────────────────────────────────────────────────

def browser_filename(game_name: str | None, timestamp: int) -> str:
    stem = _UNSAFE_FILENAME_RE.sub("_", game_name or "config").lower()
    return f"{stem}_{timestamp}.json"


def write_export(export: ExportData, path: str | Path) -> Path:
    """Write *export* as pretty JSON via temp-file-and-rename."""
    dest = Path(path)
    dest.parent.mkdir(parents=True, exist_ok=True)
    text = export.to_json(indent=2)

    fd, tmp = tempfile.mkstemp(
        suffix=".json", dir=str(dest.parent), prefix=".tmp_export_"
    )
    try:
        os.close(fd)
        Path(tmp).write_text(text, encoding="utf-8")
        Path(tmp).replace(dest)
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise

    log.debug("Wrote %s export to %s", export.exported_from, dest)
    return dest
