"""
Exceptions raised by the annotated text data model and its JSON codec.

All of them derive from DataModelError, which is a plain Exception rather than
a ValueError: pydantic converts ValueErrors raised inside validators into
ValidationErrors, and codec failures must reach the caller unchanged.
"""

from typing import Optional


class DataModelError(Exception):
    """Base class for data model and codec errors."""


class JsonDecodeError(DataModelError):
    """Input does not have the shape the decoder expects."""


class WrongTokenError(JsonDecodeError):
    """
    Decoder found a different JSON token than the one it needs.

    Token names follow the usual streaming-parser vocabulary
    (START_ARRAY, START_OBJECT, VALUE_STRING, ...).
    """

    def __init__(self, expected: str, actual: str, message: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        prefix = f"{message}: " if message else ""
        super().__init__(f"{prefix}expected {expected}, got {actual}")


class UnboundCodecError(DataModelError):
    """A codec was used before its secondary decoders were resolved."""


class UnknownAttributeError(JsonDecodeError):
    """Document carries a layer under an attribute key outside the catalog."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Unknown attribute key: {key!r}")
