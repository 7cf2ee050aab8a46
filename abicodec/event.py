"""Contract events: signatures, topic filters and log parsing."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from itertools import repeat
from typing import Any, Union

from Crypto.Hash import keccak

from .constructor import type_check
from .encoder import WORD_SIZE, encode
from .errors import InvalidData
from .event_param import EventParam, ParamKind, ParamType, format_param_type
from .token import Token, TokenKind

TopicValue = Union[None, bytes, tuple[bytes, ...]]

_MAX_RAW_TOPICS = 3


def _keccak256(data: bytes) -> bytes:
    return keccak.new(digest_bits=256, data=data).digest()


def long_signature(name: str, kinds: Iterable[ParamType]) -> bytes:
    """Return the keccak-256 hash of ``name(type1,type2,...)``."""
    types = ",".join(format_param_type(kind) for kind in kinds)
    return _keccak256(f"{name}({types})".encode("utf-8"))


@dataclass(frozen=True)
class TopicFilter:
    """A filter over the four topics of a log.

    Each topic is ``None`` (matches anything), a 32-byte hash (matches only
    that value) or a tuple of hashes (matches any of them).
    """

    topic0: TopicValue = None
    topic1: TopicValue = None
    topic2: TopicValue = None
    topic3: TopicValue = None


@dataclass(frozen=True)
class LogParam:
    """A decoded, named log parameter."""

    name: str
    value: Token


def _word(data: bytes, pos: int) -> bytes:
    if pos < 0 or pos + WORD_SIZE > len(data):
        raise InvalidData()
    return data[pos : pos + WORD_SIZE]


def _read_usize(data: bytes, pos: int) -> int:
    return int.from_bytes(_word(data, pos), "big")


def _decode_static(kind: ParamType, data: bytes, pos: int) -> tuple[Token, int]:
    if kind.kind is ParamKind.FIXED_ARRAY:
        items = []
        for item_kind in repeat(kind.inner, kind.size):
            token, pos = _decode_param(item_kind, data, pos)
            items.append(token)
        return Token(TokenKind.FIXED_ARRAY, items), pos
    if kind.kind is ParamKind.TUPLE:
        items = []
        for item_kind in kind.components:
            token, pos = _decode_param(item_kind, data, pos)
            items.append(token)
        return Token(TokenKind.TUPLE, items), pos

    word = _word(data, pos)
    if kind.kind is ParamKind.ADDRESS:
        token = Token(TokenKind.ADDRESS, word[WORD_SIZE - 20 :])
    elif kind.kind is ParamKind.INT:
        token = Token(TokenKind.INT, int.from_bytes(word, "big", signed=True))
    elif kind.kind is ParamKind.UINT:
        token = Token(TokenKind.UINT, int.from_bytes(word, "big"))
    elif kind.kind is ParamKind.BOOL:
        if any(word[:-1]) or word[-1] > 1:
            raise InvalidData()
        token = Token(TokenKind.BOOL, word[-1] == 1)
    elif kind.kind is ParamKind.FIXED_BYTES:
        if kind.size > WORD_SIZE:
            raise InvalidData()
        token = Token(TokenKind.FIXED_BYTES, word[: kind.size])
    else:
        raise InvalidData()
    return token, pos + WORD_SIZE


def _decode_dynamic_body(kind: ParamType, region: bytes) -> Token:
    if kind.kind in (ParamKind.BYTES, ParamKind.STRING):
        length = _read_usize(region, 0)
        if WORD_SIZE + length > len(region):
            raise InvalidData()
        raw = region[WORD_SIZE : WORD_SIZE + length]
        if kind.kind is ParamKind.BYTES:
            return Token(TokenKind.BYTES, raw)
        try:
            return Token(TokenKind.STRING, raw.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise InvalidData(f"UTF-8 parsing error: {exc}") from exc
    if kind.kind is ParamKind.ARRAY:
        length = _read_usize(region, 0)
        if length > len(region):
            raise InvalidData()
        items = _decode_sequence(repeat(kind.inner, length), region[WORD_SIZE:])
        return Token(TokenKind.ARRAY, items)
    if kind.kind is ParamKind.FIXED_ARRAY:
        return Token(TokenKind.FIXED_ARRAY, _decode_sequence(repeat(kind.inner, kind.size), region))
    return Token(TokenKind.TUPLE, _decode_sequence(kind.components, region))


def _decode_param(kind: ParamType, data: bytes, pos: int) -> tuple[Token, int]:
    if kind.is_dynamic():
        offset = _read_usize(data, pos)
        if offset > len(data):
            raise InvalidData()
        return _decode_dynamic_body(kind, data[offset:]), pos + WORD_SIZE
    return _decode_static(kind, data, pos)


def _decode_sequence(kinds: Iterable[ParamType], data: bytes) -> list[Token]:
    tokens = []
    pos = 0
    for kind in kinds:
        token, pos = _decode_param(kind, data, pos)
        tokens.append(token)
    return tokens


def _topic_param_type(kind: ParamType) -> ParamType:
    """Indexed dynamic and compound values are stored as their 32-byte hash."""
    if kind.kind in (ParamKind.STRING, ParamKind.BYTES, ParamKind.ARRAY, ParamKind.FIXED_ARRAY, ParamKind.TUPLE):
        return ParamType(ParamKind.FIXED_BYTES, size=32)
    return kind


def _convert_token(token: Token, kind: ParamType) -> bytes:
    if not isinstance(token, Token) or not type_check(token, kind):
        raise InvalidData()
    encoded = encode([token])
    if len(encoded) == WORD_SIZE:
        return encoded
    return _keccak256(encoded)


def _convert_topic(topic: Any, kind: ParamType | None) -> TopicValue:
    if topic is None:
        return None
    if kind is None:
        raise InvalidData()
    if isinstance(topic, Token):
        return _convert_token(topic, kind)
    return tuple(_convert_token(token, kind) for token in topic)


@dataclass(frozen=True)
class Event:
    """Contract event specification."""

    name: str
    inputs: tuple[EventParam, ...] = field(default_factory=tuple)
    anonymous: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "inputs", tuple(self.inputs))

    def _indexed_params(self, indexed: bool) -> list[EventParam]:
        return [param for param in self.inputs if param.indexed == indexed]

    def signature(self) -> bytes:
        """Return the 32-byte event signature hash."""
        return long_signature(self.name, (param.kind for param in self.inputs))

    def filter(self, *topics: Any) -> TopicFilter:
        """Build a topic filter from up to three values for the indexed inputs.

        Each value is ``None`` for any, a token for exactly that value, or an
        iterable of tokens for any of them.
        """
        if len(topics) > _MAX_RAW_TOPICS:
            raise TypeError(f"at most {_MAX_RAW_TOPICS} topics can be given, got {len(topics)}")
        raw = list(topics) + [None] * (_MAX_RAW_TOPICS - len(topics))
        kinds = [param.kind for param in self._indexed_params(True)]
        converted = [
            _convert_topic(topic, kinds[index] if index < len(kinds) else None) for index, topic in enumerate(raw)
        ]
        if self.anonymous:
            return TopicFilter(*converted, None)
        return TopicFilter(self.signature(), *converted)

    def parse_log(self, topics: Sequence[bytes], data: bytes) -> list[LogParam]:
        """Decode a raw log into its named parameters, in declaration order."""
        topics = [bytes(topic) for topic in topics]
        if self.anonymous:
            to_skip = 0
        else:
            if not topics or topics[0] != self.signature():
                raise InvalidData()
            to_skip = 1

        topic_params = self._indexed_params(True)
        data_params = self._indexed_params(False)

        flat_topics = b"".join(topics[to_skip:])
        topic_tokens = _decode_sequence((_topic_param_type(p.kind) for p in topic_params), flat_topics)
        if len(topic_tokens) != len(topics) - to_skip:
            raise InvalidData()

        data_tokens = _decode_sequence((p.kind for p in data_params), bytes(data))

        named = {param.name: token for param, token in zip(topic_params, topic_tokens)}
        named.update((param.name, token) for param, token in zip(data_params, data_tokens))
        return [LogParam(param.name, named[param.name]) for param in self.inputs]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Event:
        """Build an event from its ABI JSON object."""
        if not isinstance(data, Mapping):
            raise InvalidData("an event must be an object")
        for key in ("name", "inputs", "anonymous"):
            if key not in data:
                raise InvalidData(f"missing field `{key}`")
        name = data["name"]
        if not isinstance(name, str):
            raise InvalidData("`name` must be a string")
        inputs = data["inputs"]
        if isinstance(inputs, (str, bytes, Mapping)) or not isinstance(inputs, Iterable):
            raise InvalidData("`inputs` must be a list")
        anonymous = data["anonymous"]
        if not isinstance(anonymous, bool):
            raise InvalidData("`anonymous` must be a boolean")
        return cls(name=name, inputs=tuple(EventParam.from_dict(item) for item in inputs), anonymous=anonymous)

    def to_dict(self) -> dict[str, Any]:
        """Return the ABI JSON object describing this event."""
        return {
            "name": self.name,
            "inputs": [param.to_dict() for param in self.inputs],
            "anonymous": self.anonymous,
        }