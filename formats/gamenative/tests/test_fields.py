"""Tests for packed config sub-fields (kv lists, env vars, drives, cores)."""

import pytest

from formats.gamenative.fields import (
    Drive,
    EnvVar,
    next_drive_letter,
    parse_cpu_list,
    parse_drives,
    parse_env,
    parse_kv,
    stringify_drives,
    stringify_env,
    stringify_kv,
    toggle_core,
)


class TestKeyValue:
    def test_parse(self) -> None:
        assert parse_kv("version=2.3, renderer = gl ,bad,=x") == {
            "version": "2.3",
            "renderer": "gl",
        }

    def test_empty(self) -> None:
        assert parse_kv("") == {}
        assert parse_kv(None) == {}

    def test_value_keeps_equals(self) -> None:
        assert parse_kv("args=a=b") == {"args": "a=b"}

    def test_stringify_keeps_order(self) -> None:
        assert stringify_kv({"b": "1", "a": "2"}) == "b=1,a=2"


class TestEnvVars:
    def test_parse(self) -> None:
        env = parse_env("ZINK_DESCRIPTORS=lazy WINEESYNC=1 junk")
        assert env == [EnvVar("ZINK_DESCRIPTORS", "lazy"), EnvVar("WINEESYNC", "1")]

    def test_value_with_equals(self) -> None:
        assert parse_env("DXVK_CONFIG=a=b") == [EnvVar("DXVK_CONFIG", "a=b")]

    def test_stringify(self) -> None:
        env = [EnvVar("A", "1"), EnvVar("B", "")]
        assert stringify_env(env) == "A=1 B="


class TestDrives:
    def test_parse_two_drives(self) -> None:
        drives = parse_drives("C:/storage/emulatedD:/sdcard")
        assert drives == [Drive("C", "/storage/emulated"), Drive("D", "/sdcard")]

    def test_parse_single_drive(self) -> None:
        assert parse_drives("D:/storage/emulated/0/Download") == [
            Drive("D", "/storage/emulated/0/Download"),
        ]

    def test_leading_colon_has_no_letter(self) -> None:
        assert parse_drives(":/x") == [Drive("", "/x")]

    def test_empty(self) -> None:
        assert parse_drives("") == []
        assert parse_drives(None) == []

    def test_stringify(self) -> None:
        drives = [Drive("D", "/a/"), Drive("E", "/b")]
        assert stringify_drives(drives) == "D:/a/E:/b"

    def test_next_letter_skips_used(self) -> None:
        assert next_drive_letter([]) == "A"
        assert next_drive_letter([Drive("a", "/"), Drive("B", "/")]) == "C"

    def test_next_letter_when_exhausted(self) -> None:
        drives = [Drive(chr(c), "/") for c in range(ord("A"), ord("Z") + 1)]
        assert next_drive_letter(drives) == "Z"


class TestCpuList:
    @pytest.mark.parametrize("raw, expected", [
        ("0,1,2,3", [0, 1, 2, 3]),
        ("0,1,,3", [0, 1, 3]),
        (" 4 , x, 5", [4, 5]),
        ("", []),
        (None, []),
    ])
    def test_parse(self, raw, expected) -> None:
        assert parse_cpu_list(raw) == expected

    def test_toggle_adds_sorted(self) -> None:
        assert toggle_core("3,0", 1) == "0,1,3"

    def test_toggle_removes(self) -> None:
        assert toggle_core("0,1,3", 1) == "0,3"

    def test_toggle_from_empty(self) -> None:
        assert toggle_core(None, 7) == "7"

    def test_inferred_zero_is_core_zero(self) -> None:
        assert parse_cpu_list(0) == [0]
        assert toggle_core(0, 1) == "0,1"

    def test_inferred_number_list(self) -> None:
        assert parse_cpu_list(3) == [3]


class TestNonStringValues:
    # Converted configs can hold inferred booleans and numbers here.
    def test_kv_accepts_scalars(self) -> None:
        assert parse_kv(True) == {}
        assert parse_kv(1) == {}

    def test_env_accepts_scalars(self) -> None:
        assert parse_env(1) == []
        assert parse_env(False) == []
