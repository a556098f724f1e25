"""Best-effort Steam store lookup used to name exported containers.

The lookup is injected into :func:`formats.gamenative.export.resolve_container_name`
as a plain callable ``(app_id) -> str | None``.  It never raises: every
network or payload problem falls through to the next endpoint and finally
to ``None``.
"""

from __future__ import annotations

import json
import logging
import urllib.request
from typing import Any, Callable, Iterable
from urllib.parse import quote

log = logging.getLogger(__name__)

GameNameLookup = Callable[[str], "str | None"]

STEAM_APPDETAILS_URL = "https://store.steampowered.com/api/appdetails?appids={app_id}"

# An empty prefix means "call the store API directly".  The proxy prefixes
# are kept as fallbacks for networks where the store API is filtered.
DEFAULT_ENDPOINTS: tuple[str, ...] = (
    "",
    "https://api.allorigins.win/raw?url=",
    "https://corsproxy.io/?",
)

_HTTP_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "GNTools/1.0",
}


def no_lookup(app_id: str) -> str | None:
    return None


def _endpoint_url(prefix: str, api_url: str) -> str:
    if not prefix:
        return api_url
    return prefix + quote(api_url, safe="")


def extract_game_name(payload: Any, app_id: str) -> str | None:
    """Pull ``payload[app_id].data.name`` out of an appdetails response."""
    if not isinstance(payload, dict):
        return None
    entry = payload.get(app_id)
    if not isinstance(entry, dict) or entry.get("success") is not True:
        return None
    data = entry.get("data")
    if not isinstance(data, dict):
        return None
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    return name.strip()


class SteamStoreLookup:
    """Resolve a numeric Steam app id to the store's display name."""

    def __init__(
        self,
        endpoints: Iterable[str] = DEFAULT_ENDPOINTS,
        timeout: float = 8.0,
    ) -> None:
        self.endpoints = tuple(endpoints)
        self.timeout = timeout

    def __call__(self, app_id: str) -> str | None:
        api_url = STEAM_APPDETAILS_URL.format(app_id=app_id)
        for prefix in self.endpoints:
            url = _endpoint_url(prefix, api_url)
            try:
                req = urllib.request.Request(url, headers=_HTTP_HEADERS, method="GET")
                with urllib.request.urlopen(req, timeout=self.timeout) as res:
                    payload = json.loads(res.read().decode("utf-8", errors="replace"))
            except Exception as exc:
                log.warning("Steam lookup via %s failed: %s", prefix or "store API", exc)
                continue

            name = extract_game_name(payload, app_id)
            if name:
                log.debug("Steam app %s resolved to %r", app_id, name)
                return name
            log.warning("Invalid appdetails response via %s", prefix or "store API")
        return None
