"""Parameter types and event parameter specifications."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .errors import InvalidData


class ParamKind(enum.Enum):
    """The families of ABI parameter types."""

    ADDRESS = "address"
    BYTES = "bytes"
    INT = "int"
    UINT = "uint"
    BOOL = "bool"
    STRING = "string"
    ARRAY = "array"
    FIXED_BYTES = "fixed_bytes"
    FIXED_ARRAY = "fixed_array"
    TUPLE = "tuple"


_SIZED = {ParamKind.INT, ParamKind.UINT, ParamKind.FIXED_BYTES, ParamKind.FIXED_ARRAY}
_NESTED = {ParamKind.ARRAY, ParamKind.FIXED_ARRAY}


@dataclass(frozen=True)
class ParamType:
    """An ABI parameter type.

    ``size`` holds the bit width of ``INT``/``UINT``, the byte length of
    ``FIXED_BYTES`` and the length of ``FIXED_ARRAY``; ``inner`` holds the
    element type of arrays; ``components`` the member types of a tuple.
    """

    kind: ParamKind
    size: int | None = None
    inner: ParamType | None = None
    components: tuple[ParamType, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.kind, ParamKind):
            raise TypeError(f"kind must be a ParamKind, got {type(self.kind).__name__}")
        if self.kind in _SIZED:
            if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size < 0:
                raise ValueError(f"{self.kind.value} needs a non-negative integer size")
        elif self.size is not None:
            raise ValueError(f"{self.kind.value} takes no size")
        if self.kind in _NESTED:
            if not isinstance(self.inner, ParamType):
                raise ValueError(f"{self.kind.value} needs an inner ParamType")
        elif self.inner is not None:
            raise ValueError(f"{self.kind.value} takes no inner type")
        components = tuple(self.components)
        if components and self.kind is not ParamKind.TUPLE:
            raise ValueError(f"{self.kind.value} takes no components")
        for component in components:
            if not isinstance(component, ParamType):
                raise TypeError("tuple components must be ParamType instances")
        object.__setattr__(self, "components", components)

    def is_dynamic(self) -> bool:
        """Whether values of this type are encoded in the tail."""
        if self.kind in (ParamKind.BYTES, ParamKind.STRING, ParamKind.ARRAY):
            return True
        if self.kind is ParamKind.FIXED_ARRAY:
            return self.inner.is_dynamic()
        if self.kind is ParamKind.TUPLE:
            return any(component.is_dynamic() for component in self.components)
        return False


_SIMPLE = {
    "address": ParamKind.ADDRESS,
    "bytes": ParamKind.BYTES,
    "bool": ParamKind.BOOL,
    "string": ParamKind.STRING,
}


def _parse_size(text: str, whole: str) -> int:
    if not text.isdigit():
        raise InvalidData(f"Invalid type: {whole}")
    return int(text)


def _split_top_level(body: str, whole: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in body:
        if char in "([":
            depth += 1
        elif char in ")]":
            depth -= 1
            if depth < 0:
                raise InvalidData(f"Invalid type: {whole}")
        if char == "," and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    if depth != 0:
        raise InvalidData(f"Invalid type: {whole}")
    parts.append("".join(current))
    return parts


def parse_param_type(text: str) -> ParamType:
    """Parse a type name such as ``uint256[2][]`` or ``(address,bool)``."""
    if not isinstance(text, str):
        raise InvalidData(f"Invalid type: {text!r}")
    text = text.strip()
    if not text:
        raise InvalidData("Invalid type: empty type name")

    if text.endswith("]"):
        start = text.rfind("[")
        if start <= 0:
            raise InvalidData(f"Invalid type: {text}")
        inner = parse_param_type(text[:start])
        size_text = text[start + 1 : -1]
        if not size_text:
            return ParamType(ParamKind.ARRAY, inner=inner)
        return ParamType(ParamKind.FIXED_ARRAY, size=_parse_size(size_text, text), inner=inner)

    if text.startswith("(") and text.endswith(")"):
        body = text[1:-1].strip()
        if not body:
            return ParamType(ParamKind.TUPLE)
        members = (parse_param_type(part) for part in _split_top_level(body, text))
        return ParamType(ParamKind.TUPLE, components=tuple(members))

    if text == "tuple":
        return ParamType(ParamKind.TUPLE)
    if text in _SIMPLE:
        return ParamType(_SIMPLE[text])
    for prefix, kind in (("bytes", ParamKind.FIXED_BYTES), ("uint", ParamKind.UINT), ("int", ParamKind.INT)):
        if text.startswith(prefix):
            return ParamType(kind, size=_parse_size(text[len(prefix) :], text))
    raise InvalidData(f"Invalid type: {text}")


def format_param_type(kind: ParamType) -> str:
    """Return the canonical type name used in signatures."""
    if kind.kind in (ParamKind.INT, ParamKind.UINT):
        return f"{kind.kind.value}{kind.size}"
    if kind.kind is ParamKind.FIXED_BYTES:
        return f"bytes{kind.size}"
    if kind.kind is ParamKind.ARRAY:
        return f"{format_param_type(kind.inner)}[]"
    if kind.kind is ParamKind.FIXED_ARRAY:
        return f"{format_param_type(kind.inner)}[{kind.size}]"
    if kind.kind is ParamKind.TUPLE:
        return "(" + ",".join(format_param_type(component) for component in kind.components) + ")"
    return kind.kind.value


def _abi_type_name(kind: ParamType) -> str:
    """Type name as written in ABI JSON, where tuples are spelled ``tuple``."""
    if kind.kind is ParamKind.TUPLE:
        return "tuple"
    if kind.kind is ParamKind.ARRAY:
        return f"{_abi_type_name(kind.inner)}[]"
    if kind.kind is ParamKind.FIXED_ARRAY:
        return f"{_abi_type_name(kind.inner)}[{kind.size}]"
    return format_param_type(kind)


def _inner_tuple(kind: ParamType) -> tuple[ParamType, ...] | None:
    if kind.kind is ParamKind.TUPLE:
        return kind.components
    if kind.kind in _NESTED:
        return _inner_tuple(kind.inner)
    return None


def _extend_tuple(kind: ParamType, extra: tuple[ParamType, ...]) -> ParamType:
    if kind.kind is ParamKind.TUPLE:
        return ParamType(ParamKind.TUPLE, components=kind.components + extra)
    return ParamType(kind.kind, size=kind.size, inner=_extend_tuple(kind.inner, extra))


def _set_tuple_components(kind: ParamType, components: Any) -> ParamType:
    if _inner_tuple(kind) is None:
        return kind
    if components is None:
        raise InvalidData("missing field `components`")
    return _extend_tuple(kind, tuple(_component_from_dict(item) for item in _as_list(components)))


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise InvalidData("`components` must be a list")
    return list(value)


def _read_type(data: Mapping[str, Any]) -> ParamType:
    if "type" not in data:
        raise InvalidData("missing field `type`")
    return _set_tuple_components(parse_param_type(data["type"]), data.get("components"))


def _component_from_dict(data: Any) -> ParamType:
    if not isinstance(data, Mapping):
        raise InvalidData("a tuple component must be an object")
    return _read_type(data)


def _components_to_list(components: tuple[ParamType, ...]) -> list[dict[str, Any]]:
    result = []
    for component in components:
        entry: dict[str, Any] = {"type": _abi_type_name(component)}
        nested = _inner_tuple(component)
        if nested is not None:
            entry["components"] = _components_to_list(nested)
        result.append(entry)
    return result


@dataclass(frozen=True)
class EventParam:
    """One input of an event."""

    name: str
    kind: ParamType
    indexed: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EventParam:
        """Build an event parameter from its ABI JSON object."""
        if not isinstance(data, Mapping):
            raise InvalidData("an event parameter must be an object")
        if "name" not in data:
            raise InvalidData("missing field `name`")
        name = data["name"]
        if not isinstance(name, str):
            raise InvalidData("`name` must be a string")
        kind = _read_type(data)
        indexed = data.get("indexed", False)
        if not isinstance(indexed, bool):
            raise InvalidData("`indexed` must be a boolean")
        return cls(name=name, kind=kind, indexed=indexed)

    def to_dict(self) -> dict[str, Any]:
        """Return the ABI JSON object describing this parameter."""
        result: dict[str, Any] = {
            "name": self.name,
            "type": _abi_type_name(self.kind),
            "indexed": self.indexed,
        }
        components = _inner_tuple(self.kind)
        if components is not None:
            result["components"] = _components_to_list(components)
        return result