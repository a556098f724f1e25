"""Convert a raw GameNative key/value dump into a structured config.

The dump is a newline-delimited stream where a recognised key is followed
by its value on the next line::

    wineVersion
    8.0
    showFPS
    true
    A
    button1

A key is *value-less* when the next non-blank line is itself a recognised
key or a controller button name; that membership test is the only signal
used to tell keys and values apart.  Controller button names (``A``,
``DPAD UP``, ...) collect into the nested ``controllerEmulationBindings``
map keyed by the button's fixed index.

Conversion is all-or-nothing: the first line the cursor cannot treat as a
key raises :class:`UnknownKeyError` and no config is returned.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from .coerce import coerce_value, stringify_value
from .errors import EmptyInputError, UnknownKeyError
from .models import (
    BINDINGS_KEY,
    BUTTON_INDEX_MAP,
    BUTTON_KEYS,
    EXCLUDED_KEYS,
    INDEX_TO_BUTTON,
    KEY_RENAMES,
    KNOWN_KEYS,
    OUTPUT_TO_RAW_KEY,
    Assignment,
    ClassifiedLine,
    LineKind,
    Target,
    is_vocabulary_line,
)

log = logging.getLogger(__name__)


# ── Tokenizer ────────────────────────────────────────────────────────────

def split_lines(text: str) -> list[str]:
    """Return the trimmed non-blank lines of *text* in order."""
    return [line.strip() for line in text.split("\n") if line.strip()]


def classify_line(text: str) -> LineKind:
    if text in BUTTON_KEYS:
        return LineKind.BUTTON
    if text in KNOWN_KEYS:
        return LineKind.KEY
    return LineKind.UNKNOWN


def classify_lines(lines: list[str]) -> list[ClassifiedLine]:
    return [
        ClassifiedLine(position=i, text=line, kind=classify_line(line))
        for i, line in enumerate(lines, 1)
    ]


def tokenize(text: str) -> list[ClassifiedLine]:
    """Split and classify *text*, raising on empty input."""
    lines = split_lines(text)
    if not lines:
        raise EmptyInputError()
    return classify_lines(lines)


# ── Pair resolver ────────────────────────────────────────────────────────

def _value_line(lines: list[ClassifiedLine], i: int) -> str | None:
    """Return the value line following index *i*, if there is one."""
    if i + 1 >= len(lines):
        return None
    nxt = lines[i + 1].text
    if is_vocabulary_line(nxt):
        return None
    return nxt


def resolve_pairs(lines: list[ClassifiedLine]) -> Iterator[Assignment]:
    """Walk *lines* with a single forward cursor.

    Yields one :class:`Assignment` per button and per included key.
    Excluded keys still consume their value line but yield nothing.
    """
    i = 0
    n = len(lines)
    while i < n:
        line = lines[i]
        value = _value_line(lines, i)
        step = 1 if value is None else 2

        if line.kind is LineKind.BUTTON:
            bound = "" if value is None else stringify_value(
                coerce_value(value, line.text)
            )
            yield Assignment(Target.BINDINGS, BUTTON_INDEX_MAP[line.text], bound)
        elif line.kind is LineKind.KEY:
            if line.text not in EXCLUDED_KEYS:
                out_key = KEY_RENAMES.get(line.text, line.text)
                raw = "" if value is None else value
                yield Assignment(Target.CONFIG, out_key, coerce_value(raw, line.text))
        else:
            raise UnknownKeyError(line.text, line.position)

        i += step


# ── Assembly ─────────────────────────────────────────────────────────────

def convert_lines(lines: list[ClassifiedLine]) -> dict[str, Any]:
    config: dict[str, Any] = {}
    bindings: dict[str, str] = {}
    for assignment in resolve_pairs(lines):
        if assignment.target is Target.BINDINGS:
            bindings[assignment.key] = assignment.value
        else:
            config[assignment.key] = assignment.value

    if bindings:
        config[BINDINGS_KEY] = {k: bindings[k] for k in sorted(bindings, key=int)}
    return config


def convert_text(text: str) -> dict[str, Any]:
    """Convert a raw dump into a config dict.

    Raises :class:`EmptyInputError` or :class:`UnknownKeyError`.
    """
    lines = tokenize(text)
    config = convert_lines(lines)
    log.debug(
        "Converted %d lines into %d config keys", len(lines), len(config),
    )
    return config


# ── Inverse rendering ────────────────────────────────────────────────────

def config_to_text(config: dict[str, Any]) -> str:
    """Render *config* back into the raw line-stream format.

    ``lc_all`` becomes ``lc all`` again and bindings are written as button
    lines.  Empty values are written as a bare key line, which the
    converter reads back as a value-less key.
    """
    out: list[str] = []
    for key, value in config.items():
        if key == BINDINGS_KEY and isinstance(value, dict):
            for index, bound in value.items():
                button = INDEX_TO_BUTTON.get(str(index))
                if button is None:
                    continue
                out.append(button)
                if bound != "":
                    out.append(str(bound))
            continue
        out.append(OUTPUT_TO_RAW_KEY.get(key, key))
        rendered = stringify_value(value)
        if rendered != "":
            out.append(rendered)
    return "\n".join(out) + "\n"
