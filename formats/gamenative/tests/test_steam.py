"""Tests for the Steam store game-name lookup (network is patched out)."""

import json
import urllib.error

import pytest

from formats.gamenative.steam import (
    DEFAULT_ENDPOINTS,
    SteamStoreLookup,
    extract_game_name,
    no_lookup,
)


def _payload(app_id: str, name: str = "Portal 2", success: bool = True) -> dict:
    return {app_id: {"success": success, "data": {"name": name}}}


class _FakeResponse:
    def __init__(self, body: bytes) -> None:
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> bool:
        return False


def _install(monkeypatch, results: list):
    """Patch urlopen to return/raise *results* in order; returns seen URLs."""
    seen: list[str] = []
    queue = list(results)

    def fake_urlopen(req, timeout=None):
        seen.append(req.full_url)
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, bytes):
            return _FakeResponse(item)
        return _FakeResponse(json.dumps(item).encode("utf-8"))

    monkeypatch.setattr("urllib.request.urlopen", fake_urlopen)
    return seen


class TestSteamStoreLookup:
    def test_direct_success(self, monkeypatch) -> None:
        seen = _install(monkeypatch, [_payload("620")])

        assert SteamStoreLookup()("620") == "Portal 2"
        assert seen == ["https://store.steampowered.com/api/appdetails?appids=620"]

    def test_falls_back_to_proxy(self, monkeypatch) -> None:
        seen = _install(monkeypatch, [
            urllib.error.URLError("blocked"),
            _payload("620", name="  Portal 2  "),
        ])

        assert SteamStoreLookup()("620") == "Portal 2"
        assert len(seen) == 2
        assert seen[1].startswith(DEFAULT_ENDPOINTS[1])
        assert "https%3A%2F%2Fstore.steampowered.com" in seen[1]

    def test_unsuccessful_payload_tries_next(self, monkeypatch) -> None:
        seen = _install(monkeypatch, [
            _payload("620", success=False),
            b"<html>not json</html>",
            _payload("620", name="Portal 2"),
        ])

        assert SteamStoreLookup()("620") == "Portal 2"
        assert len(seen) == 3

    def test_all_endpoints_failing_returns_none(self, monkeypatch) -> None:
        _install(monkeypatch, [OSError("down")] * len(DEFAULT_ENDPOINTS))
        assert SteamStoreLookup()("620") is None

    def test_custom_endpoints(self, monkeypatch) -> None:
        seen = _install(monkeypatch, [_payload("10", name="Counter-Strike")])
        lookup = SteamStoreLookup(endpoints=["https://proxy.example/?u="], timeout=2)

        assert lookup("10") == "Counter-Strike"
        assert seen[0].startswith("https://proxy.example/?u=https%3A%2F%2F")


class TestExtractGameName:
    @pytest.mark.parametrize("payload", [
        None,
        [],
        {},
        {"620": {"success": True}},
        {"620": {"success": "true", "data": {"name": "x"}}},
        {"620": {"success": True, "data": {"name": 5}}},
        {"620": {"success": True, "data": {"name": "   "}}},
        {"621": {"success": True, "data": {"name": "Other"}}},
    ])
    def test_rejects_malformed(self, payload) -> None:
        assert extract_game_name(payload, "620") is None


def test_no_lookup() -> None:
    assert no_lookup("620") is None
