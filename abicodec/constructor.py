"""Contract constructor specification and call builder."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .encoder import encode
from .errors import InvalidData
from .event_param import ParamKind, ParamType
from .token import Token, TokenKind

_DIRECT = {
    TokenKind.ADDRESS: ParamKind.ADDRESS,
    TokenKind.BYTES: ParamKind.BYTES,
    TokenKind.INT: ParamKind.INT,
    TokenKind.UINT: ParamKind.UINT,
    TokenKind.BOOL: ParamKind.BOOL,
    TokenKind.STRING: ParamKind.STRING,
}


def type_check(token: Token, kind: ParamType) -> bool:
    """Whether ``token`` is a valid value of ``kind``."""
    if token.kind in _DIRECT:
        return kind.kind is _DIRECT[token.kind]
    if token.kind is TokenKind.FIXED_BYTES:
        return kind.kind is ParamKind.FIXED_BYTES and kind.size >= len(token.value)
    if token.kind is TokenKind.ARRAY:
        return kind.kind is ParamKind.ARRAY and all(type_check(item, kind.inner) for item in token.value)
    if token.kind is TokenKind.FIXED_ARRAY:
        return (
            kind.kind is ParamKind.FIXED_ARRAY
            and kind.size == len(token.value)
            and all(type_check(item, kind.inner) for item in token.value)
        )
    return kind.kind is ParamKind.TUPLE and types_check(token.value, kind.components)


def types_check(tokens: Sequence[Token], kinds: Sequence[ParamType]) -> bool:
    """Whether ``tokens`` match ``kinds`` one for one."""
    tokens = list(tokens)
    kinds = list(kinds)
    return len(tokens) == len(kinds) and all(type_check(token, kind) for token, kind in zip(tokens, kinds))


@dataclass(frozen=True)
class Param:
    """A named function or constructor parameter."""

    name: str
    kind: ParamType
    internal_type: str | None = None


@dataclass(frozen=True)
class Constructor:
    """Contract constructor specification."""

    inputs: tuple[Param, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "inputs", tuple(self.inputs))

    def param_types(self) -> list[ParamType]:
        """Return the types of all inputs."""
        return [param.kind for param in self.inputs]

    def encode_input(self, code: bytes, tokens: Sequence[Token]) -> bytes:
        """Append the encoded constructor arguments to the contract code."""
        tokens = list(tokens)
        if not types_check(tokens, self.param_types()):
            raise InvalidData()
        return bytes(code) + encode(tokens)