# Copyright (C) 2025-2026 GameNative Config Tools Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

import logging
import sys
import traceback
from datetime import datetime, timezone
from pathlib import Path

from PySide6.QtCore import QCoreApplication

_ROOT = Path(__file__).resolve().parent
_CACHE_DIR = _ROOT / "cache"
_CRASH_LOG = _CACHE_DIR / "latest.log"
_DEBUG_LOG = _CACHE_DIR / "gntools_debug.log"
_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

APP_NAME = "GameNative Config Tools"

log = logging.getLogger("gntools")


def _write_crash_report(exc_type, exc_value, exc_tb) -> None:
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    lines = [
        f"{APP_NAME} crash log",
        f"Timestamp : {stamp}",
        f"Python    : {sys.version.split()[0]} on {sys.platform}",
        f"Exception : {exc_type.__name__}: {exc_value}",
        "",
        *traceback.format_exception(exc_type, exc_value, exc_tb),
    ]
    _CACHE_DIR.mkdir(parents=True, exist_ok=True)
    _CRASH_LOG.write_text("\n".join(line.rstrip("\n") for line in lines), encoding="utf-8")


def _install_crash_logger() -> None:
    """Route unhandled exceptions through ``cache/latest.log`` first."""
    previous = sys.excepthook

    def _hook(exc_type, exc_value, exc_tb):
        try:
            _write_crash_report(exc_type, exc_value, exc_tb)
        except OSError:
            pass
        previous(exc_type, exc_value, exc_tb)

    sys.excepthook = _hook


def _configure_logging(settings) -> None:
    if not settings.debug_logging:
        logging.basicConfig(level=logging.WARNING, force=True)
        return
    _CACHE_DIR.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, settings.debug_log_level, logging.WARNING),
        format=_LOG_FORMAT,
        handlers=[
            logging.FileHandler(str(_DEBUG_LOG), encoding="utf-8"),
            logging.StreamHandler(sys.stderr),
        ],
        force=True,
    )


def _report_startup(settings) -> None:
    """Log what the converter and browser will use this session."""
    snapshot = settings.resolved_snapshot_path()
    if settings.snapshot_available():
        log.info("Community snapshot: %s", snapshot)
    else:
        log.warning("Community snapshot not found at %s; Browse Configs will be empty", snapshot)
    if settings.steam_lookup_enabled:
        log.info("Steam name lookup via %d endpoint(s)", len(settings.steam_lookup_endpoints))
    else:
        log.info("Steam name lookup disabled; exports use the default container name")


def main():
    _install_crash_logger()
    QCoreApplication.setOrganizationName(APP_NAME)
    QCoreApplication.setApplicationName(APP_NAME)

    from gntools.core.config import AppSettings
    settings = AppSettings.load()
    _configure_logging(settings)
    _report_startup(settings)

    from gntools.app import GNToolsApp
    app = GNToolsApp(sys.argv, settings)
    sys.exit(app.run())


if __name__ == "__main__":
    main()
