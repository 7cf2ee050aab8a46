"""ABI encoder: turns tokens into the head/tail byte layout of the ABI."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from itertools import chain

from .token import Token, TokenKind

WORD_SIZE = 32
_U32_MAX = 0xFFFFFFFF
_WORD_MASK = (1 << (8 * WORD_SIZE)) - 1


def pad_u32(value: int) -> bytes:
    """Return ``value`` as a big-endian 32-byte word."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"pad_u32 needs an int, got {type(value).__name__}")
    if not 0 <= value <= _U32_MAX:
        raise ValueError(f"{value} does not fit in an unsigned 32-bit integer")
    return value.to_bytes(WORD_SIZE, "big")


def _pad_fixed_bytes(data: bytes) -> list[bytes]:
    return [data[start : start + WORD_SIZE].ljust(WORD_SIZE, b"\0") for start in range(0, len(data), WORD_SIZE)]


def _pad_bytes(data: bytes) -> list[bytes]:
    return [pad_u32(len(data)), *_pad_fixed_bytes(data)]


class _Layout(enum.Enum):
    RAW = enum.auto()
    PREFIXED = enum.auto()
    PREFIXED_ARRAY = enum.auto()
    PREFIXED_ARRAY_WITH_LENGTH = enum.auto()
    RAW_TUPLE = enum.auto()
    PREFIXED_TUPLE = enum.auto()


_INLINE = {_Layout.RAW, _Layout.RAW_TUPLE}


@dataclass(frozen=True)
class _Mediate:
    """An intermediate form of a token, split into head and tail words."""

    layout: _Layout
    words: tuple[bytes, ...] = ()
    children: tuple["_Mediate", ...] = ()

    def head_len(self) -> int:
        if self.layout is _Layout.RAW:
            return WORD_SIZE * len(self.words)
        if self.layout is _Layout.RAW_TUPLE:
            return sum(child.head_len() for child in self.children)
        return WORD_SIZE

    def tail_len(self) -> int:
        if self.layout in _INLINE:
            return 0
        if self.layout is _Layout.PREFIXED:
            return WORD_SIZE * len(self.words)
        body = sum(child.head_len() + child.tail_len() for child in self.children)
        if self.layout is _Layout.PREFIXED_ARRAY_WITH_LENGTH:
            return WORD_SIZE + body
        return body

    def head(self, suffix_offset: int) -> list[bytes]:
        if self.layout is _Layout.RAW:
            return list(self.words)
        if self.layout is _Layout.RAW_TUPLE:
            return list(chain.from_iterable(child.head(0) for child in self.children))
        return [pad_u32(suffix_offset)]

    def tail(self) -> list[bytes]:
        if self.layout in _INLINE:
            return []
        if self.layout is _Layout.PREFIXED:
            return list(self.words)
        if self.layout is _Layout.PREFIXED_ARRAY_WITH_LENGTH:
            return [pad_u32(len(self.children)), *_encode_head_tail(self.children)]
        return _encode_head_tail(self.children)


def _encode_head_tail(mediates: Sequence[_Mediate]) -> list[bytes]:
    offset = sum(mediate.head_len() for mediate in mediates)
    heads: list[bytes] = []
    for mediate in mediates:
        heads.extend(mediate.head(offset))
        offset += mediate.tail_len()
    tails = chain.from_iterable(mediate.tail() for mediate in mediates)
    return [*heads, *tails]


def _raw(words: Iterable[bytes]) -> _Mediate:
    return _Mediate(_Layout.RAW, words=tuple(words))


def _encode_token(token: Token) -> _Mediate:
    kind = token.kind
    if kind is TokenKind.ADDRESS:
        return _raw([token.value.rjust(WORD_SIZE, b"\0")])
    if kind is TokenKind.BYTES:
        return _Mediate(_Layout.PREFIXED, words=tuple(_pad_bytes(token.value)))
    if kind is TokenKind.STRING:
        return _Mediate(_Layout.PREFIXED, words=tuple(_pad_bytes(token.value.encode("utf-8"))))
    if kind is TokenKind.FIXED_BYTES:
        return _raw(_pad_fixed_bytes(token.value))
    if kind in (TokenKind.INT, TokenKind.UINT):
        return _raw([(token.value & _WORD_MASK).to_bytes(WORD_SIZE, "big")])
    if kind is TokenKind.BOOL:
        return _raw([(1 if token.value else 0).to_bytes(WORD_SIZE, "big")])

    children = tuple(_encode_token(item) for item in token.value)
    if kind is TokenKind.ARRAY:
        return _Mediate(_Layout.PREFIXED_ARRAY_WITH_LENGTH, children=children)
    if kind is TokenKind.FIXED_ARRAY:
        if token.is_dynamic():
            return _Mediate(_Layout.PREFIXED_ARRAY, children=children)
        return _raw(_encode_head_tail(children))
    if token.is_dynamic():
        return _Mediate(_Layout.PREFIXED_TUPLE, children=children)
    return _Mediate(_Layout.RAW_TUPLE, children=children)


def encode(tokens: Iterable[Token]) -> bytes:
    """Encode a sequence of tokens into ABI-compliant bytes."""
    mediates = [_encode_token(token) for token in tokens]
    return b"".join(_encode_head_tail(mediates))