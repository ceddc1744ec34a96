"""Field tree of CFG documents and their type annotations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Iterator, Mapping, Sequence


class CFGFieldType(Enum):
    STRING = auto()
    INTEGER = auto()
    FLOAT = auto()
    NUMBER = auto()
    STRUCT = auto()
    STRUCT_MEMBER_REQUIRED = auto()
    ARRAY = auto()
    CUSTOM = auto()
    RAW = auto()


_PRIMITIVE_NAMES: dict[str, CFGFieldType] = {
    "Str": CFGFieldType.STRING,
    "Int": CFGFieldType.INTEGER,
    "Flt": CFGFieldType.FLOAT,
}

_IDENTIFIER_CHARS = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_"
)


@dataclass
class CFGField:
    """A single value in a CFG document."""

    type: CFGFieldType = CFGFieldType.STRING
    value: Any = None
    name: str | None = None
    type_annotation: str = ""
    automatically_created: bool = False
    parent: "CFGObject | None" = field(default=None, repr=False, compare=False)


@dataclass
class CFGObject(CFGField):
    """An array or struct holding other fields."""

    type: CFGFieldType = CFGFieldType.ARRAY
    items: list[CFGField] = field(default_factory=list)

    def __post_init__(self) -> None:
        for item in self.items:
            item.parent = self

    def add_item(self, item: CFGField) -> None:
        item.parent = self
        self.items.append(item)

    def item(self, index: int) -> CFGField | None:
        """Return the item at ``index``, or None if there is none."""
        if 0 <= index < len(self.items):
            return self.items[index]
        return None

    def find(self, name: str) -> CFGField | None:
        """Return the first item called ``name``, or None."""
        return next((i for i in self.items if i.name == name), None)

    def __iter__(self) -> Iterator[CFGField]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def is_valid_type(
    received: CFGFieldType, expected: CFGFieldType, allow_casts: bool = True
) -> bool:
    """Tell whether a field of type ``received`` may stand where ``expected`` is wanted."""
    if received is expected:
        return True
    if not allow_casts:
        return False
    if expected is CFGFieldType.NUMBER:
        return received in (CFGFieldType.INTEGER, CFGFieldType.FLOAT)
    if expected is CFGFieldType.FLOAT:
        return received in (CFGFieldType.INTEGER, CFGFieldType.NUMBER)
    return False


def _is_ascii_alpha(c: str) -> bool:
    return c.isascii() and c.isalpha()


def parse_type_annotation(
    text: str,
    allow_non_primitives: bool = False,
    custom_types: Mapping[str, Sequence[CFGFieldType]] | None = None,
) -> list[CFGFieldType]:
    """Turn an annotation such as ``[{Str,Int}]`` into a flat list of field types.

    Raises ValueError when the annotation is malformed or names an unknown
    type while non-primitives are not allowed.
    """
    types: list[CFGFieldType] = []
    array_depth = 0
    struct_depth = 0
    awaiting_type = False
    pos = 0
    while pos < len(text):
        c = text[pos]
        if c == "[":
            array_depth += 1
            types.append(CFGFieldType.ARRAY)
        elif c == "]":
            array_depth -= 1
        elif c == "{":
            struct_depth += 1
            types.append(CFGFieldType.STRUCT)
        elif c == "}":
            struct_depth -= 1
        elif _is_ascii_alpha(c) or c == "_":
            end = pos
            while end < len(text) and text[end] in _IDENTIFIER_CHARS:
                end += 1
            name = text[pos:end]
            pos = end - 1
            primitive = _PRIMITIVE_NAMES.get(name)
            if primitive is not None:
                types.append(primitive)
            elif not allow_non_primitives:
                raise ValueError(f"Unknown type '{name}' in annotation '{text}'")
            elif custom_types and name in custom_types:
                types.extend(custom_types[name])
            else:
                types.append(CFGFieldType.CUSTOM)
            awaiting_type = False
        elif c == ",":
            awaiting_type = True
        else:
            raise ValueError(f"Unexpected character {c!r} in annotation '{text}'")
        pos += 1
    if array_depth or struct_depth or awaiting_type:
        raise ValueError(f"Unbalanced type annotation '{text}'")
    return types


def new_field(field_type: CFGFieldType) -> CFGField:
    """Create a field of the given type holding its default value."""
    if field_type in (CFGFieldType.STRUCT, CFGFieldType.ARRAY):
        return CFGObject(type=field_type)
    defaults: dict[CFGFieldType, Any] = {
        CFGFieldType.STRING: "",
        CFGFieldType.RAW: "",
        CFGFieldType.INTEGER: 0,
        CFGFieldType.FLOAT: 0.0,
        CFGFieldType.NUMBER: 0.0,
    }
    return CFGField(type=field_type, value=defaults.get(field_type))