"""Tests for export envelopes and container naming."""

import json
from pathlib import Path

import pytest

from formats.gamenative.export import (
    browser_filename,
    build_export,
    resolve_container_name,
    steam_app_id,
    write_export,
)
from formats.gamenative.models import DEFAULT_CONTAINER_NAME, ExportData


class TestBuildExport:
    def test_envelope_fields(self) -> None:
        export = build_export({"showFPS": True}, timestamp=1700000000000)
        assert export.to_dict() == {
            "version": 1,
            "exportedFrom": "GameNative",
            "timestamp": 1700000000000,
            "containerName": "Imported Config",
            "config": {"showFPS": True},
        }

    def test_timestamp_defaults_to_now(self) -> None:
        export = build_export({})
        assert export.timestamp > 1_600_000_000_000

    def test_to_json_is_indented(self) -> None:
        text = build_export({"a": 1}, timestamp=1).to_json()
        assert text.startswith("{\n  ")
        assert json.loads(text)["config"] == {"a": 1}

    def test_from_dict_tolerates_missing_fields(self) -> None:
        export = ExportData.from_dict({"config": {"id": "x"}})
        assert export.config == {"id": "x"}
        assert export.container_name == DEFAULT_CONTAINER_NAME
        assert export.version == 1


class TestSteamAppId:
    @pytest.mark.parametrize("cid, expected", [
        ("STEAM_646570", "646570"),
        ("STEAM_", None),
        ("STEAM_12a", None),
        ("STEAM_-1", None),
        ("GOG_1207658924", None),
        ("steam_646570", None),
        (646570, None),
    ])
    def test_parsing(self, cid, expected) -> None:
        assert steam_app_id({"id": cid}) == expected

    def test_missing_id(self) -> None:
        assert steam_app_id({}) is None


class TestResolveContainerName:
    def test_uses_lookup_result(self) -> None:
        calls: list[str] = []

        def lookup(app_id: str) -> str | None:
            calls.append(app_id)
            return "Slay the Spire"

        name = resolve_container_name({"id": "STEAM_646570"}, lookup)
        assert name == "Slay the Spire"
        assert calls == ["646570"]

    def test_no_lookup_keeps_default(self) -> None:
        assert resolve_container_name({"id": "STEAM_1"}) == DEFAULT_CONTAINER_NAME

    def test_non_steam_id_skips_lookup(self) -> None:
        calls: list[str] = []
        name = resolve_container_name({"id": "custom"}, lambda a: calls.append(a) or "x")
        assert name == DEFAULT_CONTAINER_NAME
        assert calls == []

    def test_lookup_miss_keeps_default(self) -> None:
        assert resolve_container_name({"id": "STEAM_1"}, lambda a: None) == DEFAULT_CONTAINER_NAME

    def test_lookup_failure_keeps_default(self) -> None:
        def boom(app_id: str) -> str | None:
            raise OSError("network down")

        name = resolve_container_name({"id": "STEAM_1"}, boom, default="Fallback")
        assert name == "Fallback"


class TestWriteExport:
    def test_writes_json_atomically(self, tmp_path: Path) -> None:
        dest = tmp_path / "out" / "config.json"
        export = build_export({"wineVersion": "8.0"}, container_name="Game", timestamp=5)

        written = write_export(export, dest)

        assert written == dest
        data = json.loads(dest.read_text(encoding="utf-8"))
        assert data["containerName"] == "Game"
        assert data["config"] == {"wineVersion": "8.0"}
        assert not list(dest.parent.glob(".tmp_export_*"))

    def test_overwrites_existing(self, tmp_path: Path) -> None:
        dest = tmp_path / "config.json"
        dest.write_text("old", encoding="utf-8")
        write_export(build_export({}, timestamp=1), dest)
        assert json.loads(dest.read_text(encoding="utf-8"))["timestamp"] == 1


class TestBrowserFilename:
    def test_sanitizes_game_name(self) -> None:
        assert browser_filename("Slay the Spire!", 123) == "slay_the_spire__123.json"

    def test_missing_name(self) -> None:
        assert browser_filename(None, 9) == "config_9.json"
