"""Exceptions raised by the GameNative format library."""

from __future__ import annotations


class ConversionError(ValueError):
    """Base class for failures of the raw-dump converter."""


class EmptyInputError(ConversionError):
    def __init__(self) -> None:
        super().__init__("Input is empty. Please provide key-value pairs.")


class UnknownKeyError(ConversionError):
    """A line the cursor expected to be a key is in neither vocabulary.

    *position* is 1-based and counts non-blank lines only.
    """

    def __init__(self, key: str, position: int) -> None:
        self.key = key
        self.position = position
        super().__init__(f'Unknown key "{key}" at position {position}.')


class EditorImportError(ValueError):
    """Pasted editor JSON is unparseable or not a container config."""


class SnapshotError(RuntimeError):
    """The bundled configuration snapshot could not be read."""
