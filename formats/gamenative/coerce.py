"""Value coercion for raw GameNative dump lines.

Every function here is pure and total: malformed embedded JSON degrades
to ``None`` instead of raising, and anything that is not clearly a boolean
or a number stays a string.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any

from .models import Coercion, coercion_for

_WHITESPACE_RE = re.compile(r"\s+")
_NUMBER_RE = re.compile(r"^-?[0-9]+(\.[0-9]+)?$")


def _reject_constant(name: str) -> Any:
    # json.loads accepts NaN/Infinity by default; the Android side does not.
    raise ValueError(f"non-standard JSON constant {name}")


def parse_json_field(text: str) -> Any:
    """Strictly parse an embedded JSON value, ``None`` on any failure."""
    trimmed = text.strip()
    if trimmed == "" or trimmed == "null":
        return None
    try:
        return json.loads(trimmed, parse_constant=_reject_constant)
    except ValueError:
        return None


def parse_number(text: str) -> int | float | None:
    """Return *text* as a number if it is a plain decimal literal.

    Every literal is read as a double, so integral values come back as
    ``int`` (``"8.0"`` -> ``8``) and literals too large for a double are
    rejected.
    """
    if not _NUMBER_RE.match(text):
        return None
    number = float(text)
    if not math.isfinite(number):
        return None
    if number.is_integer():
        return int(number)
    return number


def infer_value(text: str) -> bool | int | float | str:
    trimmed = text.strip()
    if trimmed == "true":
        return True
    if trimmed == "false":
        return False
    number = parse_number(trimmed)
    if number is not None:
        return number
    return trimmed


def coerce_value(raw: str, key: str) -> Any:
    """Coerce one raw value line using the policy of the raw *key* name."""
    policy = coercion_for(key)
    if policy is Coercion.STRIP_WHITESPACE:
        return _WHITESPACE_RE.sub("", raw)
    if policy is Coercion.JSON:
        return parse_json_field(raw)
    if policy is Coercion.STRING:
        return raw.strip()
    return infer_value(raw)


def stringify_value(value: Any) -> str:
    """Render a coerced value the way the JSON consumer would print it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)
