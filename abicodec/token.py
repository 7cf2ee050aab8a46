"""ABI tokens: typed values ready to be encoded."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

ADDRESS_LENGTH = 20
_WORD_BITS = 256


class TokenKind(enum.Enum):
    """The kinds of value a token can hold."""

    ADDRESS = "address"
    FIXED_BYTES = "fixed_bytes"
    BYTES = "bytes"
    INT = "int"
    UINT = "uint"
    BOOL = "bool"
    STRING = "string"
    FIXED_ARRAY = "fixed_array"
    ARRAY = "array"
    TUPLE = "tuple"


_BYTE_KINDS = {TokenKind.ADDRESS, TokenKind.FIXED_BYTES, TokenKind.BYTES}
_SEQUENCE_KINDS = {TokenKind.FIXED_ARRAY, TokenKind.ARRAY, TokenKind.TUPLE}


def _normalise(kind: TokenKind, value: Any) -> Any:
    if kind in _BYTE_KINDS:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError(f"{kind.value} token needs bytes, got {type(value).__name__}")
        value = bytes(value)
        if kind is TokenKind.ADDRESS and len(value) != ADDRESS_LENGTH:
            raise ValueError(f"address must be {ADDRESS_LENGTH} bytes, got {len(value)}")
        return value
    if kind in (TokenKind.INT, TokenKind.UINT):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{kind.value} token needs an int, got {type(value).__name__}")
        low = -(1 << (_WORD_BITS - 1)) if kind is TokenKind.INT else 0
        if not low <= value < (1 << _WORD_BITS):
            raise ValueError(f"{kind.value} value {value} does not fit in 256 bits")
        return value
    if kind is TokenKind.BOOL:
        if not isinstance(value, bool):
            raise TypeError(f"bool token needs a bool, got {type(value).__name__}")
        return value
    if kind is TokenKind.STRING:
        if not isinstance(value, str):
            raise TypeError(f"string token needs a str, got {type(value).__name__}")
        return value
    items = tuple(value)
    for item in items:
        if not isinstance(item, Token):
            raise TypeError(f"{kind.value} token holds only tokens, got {type(item).__name__}")
    return items


@dataclass(frozen=True)
class Token:
    """A value tagged with its ABI kind.

    Byte kinds hold ``bytes``, integer kinds an ``int``, ``BOOL`` a ``bool``,
    ``STRING`` a ``str`` and the sequence kinds a tuple of tokens.
    """

    kind: TokenKind
    value: Any

    def __post_init__(self) -> None:
        if not isinstance(self.kind, TokenKind):
            raise TypeError(f"kind must be a TokenKind, got {type(self.kind).__name__}")
        object.__setattr__(self, "value", _normalise(self.kind, self.value))

    def is_dynamic(self) -> bool:
        """Whether the encoded token lives in the tail behind an offset."""
        if self.kind in (TokenKind.BYTES, TokenKind.STRING, TokenKind.ARRAY):
            return True
        if self.kind in (TokenKind.FIXED_ARRAY, TokenKind.TUPLE):
            return any(item.is_dynamic() for item in self.value)
        return False