"""Tests for per-key value coercion."""

import pytest

from formats.gamenative.coerce import (
    coerce_value,
    infer_value,
    parse_json_field,
    parse_number,
    stringify_value,
)
from formats.gamenative.models import Coercion, coercion_for


class TestCoercionPolicy:
    @pytest.mark.parametrize("key, policy", [
        ("drives", Coercion.STRIP_WHITESPACE),
        ("extraData", Coercion.JSON),
        ("sessionMetadata", Coercion.JSON),
        ("wineVersion", Coercion.STRING),
        ("graphicsDriverConfig", Coercion.STRING),
        ("id", Coercion.STRING),
        ("showFPS", Coercion.INFER),
        ("A", Coercion.INFER),
    ])
    def test_policy_lookup(self, key, policy) -> None:
        assert coercion_for(key) is policy


class TestDrives:
    def test_strips_all_whitespace(self) -> None:
        assert coerce_value("C : /sdcard/C ", "drives") == "C:/sdcard/C"

    def test_strips_tabs_between_pairs(self) -> None:
        assert coerce_value("C:/a\t D:/b", "drives") == "C:/aD:/b"


class TestJsonFields:
    def test_invalid_json_is_none(self) -> None:
        assert coerce_value("{not json", "extraData") is None

    def test_empty_and_null_are_none(self) -> None:
        assert coerce_value("   ", "extraData") is None
        assert coerce_value("null", "sessionMetadata") is None

    def test_object_is_parsed(self) -> None:
        value = coerce_value(' {"avg_fps": 59.5} ', "sessionMetadata")
        assert value == {"avg_fps": 59.5}

    def test_non_standard_constants_rejected(self) -> None:
        assert parse_json_field("NaN") is None
        assert parse_json_field('{"a": Infinity}') is None

    def test_scalar_json_is_kept(self) -> None:
        assert parse_json_field("[1, 2]") == [1, 2]
        assert parse_json_field("true") is True


class TestStringOnly:
    def test_version_not_numeric(self) -> None:
        value = coerce_value("8.0", "wineVersion")
        assert value == "8.0"
        assert isinstance(value, str)

    def test_boolean_looking_config_stays_string(self) -> None:
        assert coerce_value(" false ", "dxwrapperConfig") == "false"

    def test_numeric_id_stays_string(self) -> None:
        assert coerce_value("12345", "id") == "12345"


class TestInference:
    def test_booleans(self) -> None:
        assert coerce_value("true", "showFPS") is True
        assert coerce_value(" false ", "showFPS") is False

    def test_boolean_match_is_exact(self) -> None:
        assert coerce_value("True", "showFPS") == "True"

    def test_integers(self) -> None:
        assert coerce_value("42", "sharpnessLevel") == 42
        assert coerce_value("-7", "startupSelection") == -7

    def test_decimals(self) -> None:
        assert coerce_value("3.14", "sharpnessLevel") == pytest.approx(3.14)

    def test_integral_decimal_becomes_int(self) -> None:
        value = infer_value("8.0")
        assert value == 8
        assert isinstance(value, int)

    @pytest.mark.parametrize("raw", ["1e5", "+5", ".5", "5.", "0x10", "1,000"])
    def test_non_plain_numbers_stay_strings(self, raw) -> None:
        assert infer_value(raw) == raw

    def test_empty_is_empty_string(self) -> None:
        assert coerce_value("", "execArgs") == ""

    def test_text_is_trimmed(self) -> None:
        assert coerce_value("  WINE_DEBUG=warn  ", "envVars") == "WINE_DEBUG=warn"

    def test_non_finite_decimal_rejected(self) -> None:
        assert parse_number("1" * 400 + ".5") is None

    @pytest.mark.parametrize("digits", [400, 5000])
    def test_oversized_integer_stays_string(self, digits) -> None:
        raw = "9" * digits
        assert parse_number(raw) is None
        assert coerce_value(raw, "sharpnessLevel") == raw

    def test_large_integer_uses_double_precision(self) -> None:
        value = infer_value("9007199254740993")
        assert isinstance(value, int)
        assert value == 9007199254740992


class TestStringifyValue:
    def test_renders_like_json(self) -> None:
        assert stringify_value(True) == "true"
        assert stringify_value(False) == "false"
        assert stringify_value(None) == "null"
        assert stringify_value(3) == "3"
        assert stringify_value(1.5) == "1.5"
        assert stringify_value({"a": 1}) == '{"a":1}'
        assert stringify_value("x y") == "x y"
