"""Settings structures that can be written to and read from CFG files."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from os import PathLike
from pathlib import Path
from typing import Any, Callable, Iterator

from latren.cfgdump import dump
from latren.cfgfields import (
    CFGField,
    CFGFieldType,
    CFGObject,
    is_valid_type,
    new_field,
)
from latren.cfgvalidate import CFGFileTemplate, load

logger = logging.getLogger(__name__)

VEC2 = tuple[float, float]
IVEC2 = tuple[int, int]

_REQ = CFGFieldType.STRUCT_MEMBER_REQUIRED

_CFG_TYPES: dict[Any, tuple[CFGFieldType, ...]] = {
    str: (CFGFieldType.STRING,),
    int: (CFGFieldType.INTEGER,),
    bool: (CFGFieldType.INTEGER,),
    float: (CFGFieldType.FLOAT,),
    VEC2: (CFGFieldType.STRUCT, _REQ, CFGFieldType.FLOAT, _REQ, CFGFieldType.FLOAT),
    IVEC2: (CFGFieldType.STRUCT, _REQ, CFGFieldType.INTEGER, _REQ, CFGFieldType.INTEGER),
}

_DEFAULTS: dict[Any, Any] = {
    str: "",
    int: 0,
    bool: False,
    float: 0.0,
    VEC2: (0.0, 0.0),
    IVEC2: (0, 0),
}


class MetaType(Enum):
    NONE = auto()
    NEWLINE = auto()
    COMMENT = auto()


@dataclass
class _Member:
    name: str
    value_type: Any
    value: Any = None
    meta_type: MetaType = MetaType.NONE
    meta_data: str = ""


def _read_float(field: CFGField) -> float:
    if not is_valid_type(field.type, CFGFieldType.FLOAT):
        raise ValueError("expected a float")
    return float(field.value)


def _read_int(field: CFGField) -> int:
    if not is_valid_type(field.type, CFGFieldType.INTEGER):
        raise ValueError("expected an integer")
    return int(field.value)


def _read_bool(field: CFGField) -> bool:
    return bool(_read_int(field))


def _read_str(field: CFGField) -> str:
    if field.type is not CFGFieldType.STRING:
        raise ValueError("expected a string")
    return str(field.value)


def _vector_reader(component: Callable[[CFGField], Any]) -> Callable[[CFGField], tuple]:
    def read(field: CFGField) -> tuple:
        if not isinstance(field, CFGObject) or field.type is not CFGFieldType.STRUCT:
            raise ValueError("expected a struct")
        if len(field.items) < 2:
            raise ValueError("expected two components")
        return tuple(component(item) for item in field.items[:2])

    return read


_DESERIALIZERS: dict[Any, Callable[[CFGField], Any]] = {
    float: _read_float,
    int: _read_int,
    bool: _read_bool,
    str: _read_str,
    VEC2: _vector_reader(_read_float),
    IVEC2: _vector_reader(_read_int),
}


def _type_name(value_type: Any) -> str:
    return getattr(value_type, "__name__", None) or str(value_type)


class SerializableStruct:
    """An ordered set of named, typed values with layout hints for CFG output."""

    def __init__(self) -> None:
        self._members: list[_Member] = []
        self._meta_counter = 0

    def add_member(self, name: str, value_type: Any, default: Any = None) -> None:
        """Declare a member; without a default it takes its type's zero value."""
        if default is None:
            default = _DEFAULTS.get(value_type)
        self._members.append(_Member(name, value_type, default))

    def _add_meta(self, meta_type: MetaType, data: str = "") -> None:
        name = f"#meta{self._meta_counter}"
        self._meta_counter += 1
        self._members.append(_Member(name, None, None, meta_type, data))

    def add_newline(self) -> None:
        """Add an empty line to the written form."""
        self._add_meta(MetaType.NEWLINE)

    def add_comment(self, comment: str) -> None:
        """Add a comment line to the written form."""
        self._add_meta(MetaType.COMMENT, comment)

    def member(self, name: str) -> _Member | None:
        """Return the member called ``name``, or None."""
        return next((m for m in self._members if m.name == name), None)

    def _value_member(self, name: str) -> _Member:
        found = self.member(name)
        if found is None or found.meta_type is not MetaType.NONE:
            raise KeyError(name)
        return found

    def __getitem__(self, name: str) -> Any:
        return self._value_member(name).value

    def __setitem__(self, name: str, value: Any) -> None:
        self._value_member(name).value = value

    def __iter__(self) -> Iterator[str]:
        return (m.name for m in self._members if m.meta_type is MetaType.NONE)

    def _cfg_template(self) -> CFGFileTemplate:
        return CFGFileTemplate()

    def _member_to_field(self, m: _Member) -> CFGField | None:
        if m.meta_type is not MetaType.NONE:
            text = "\n" if m.meta_type is MetaType.NEWLINE else f"# {m.meta_data}\n"
            return CFGField(type=CFGFieldType.RAW, value=text)
        types = _CFG_TYPES.get(m.value_type)
        if types is None:
            logger.warning("Cannot serialize member '%s' (%s)", m.name, _type_name(m.value_type))
            return None
        if len(types) == 1:
            created = new_field(types[0])
            if types[0] is CFGFieldType.INTEGER:
                created.value = int(m.value)
            elif types[0] is CFGFieldType.FLOAT:
                created.value = float(m.value)
            else:
                created.value = m.value
            return created
        struct = CFGObject(type=CFGFieldType.STRUCT)
        components = iter(m.value)
        for t in types[1:]:
            if t is _REQ:
                continue
            item = new_field(t)
            value = next(components)
            item.value = int(value) if t is CFGFieldType.INTEGER else float(value)
            struct.add_item(item)
        return struct

    def to_cfg(self) -> CFGObject:
        """Build a CFG root object holding every member in order."""
        root = CFGObject()
        for m in self._members:
            created = self._member_to_field(m)
            if created is None:
                continue
            created.name = m.name
            root.add_item(created)
        return root

    def from_cfg(self, obj: CFGObject) -> None:
        """Take values from the named fields of ``obj``; bad values are skipped."""
        for item in obj.items:
            m = self.member(item.name or "")
            if m is None or m.meta_type is not MetaType.NONE:
                continue
            reader = _DESERIALIZERS.get(m.value_type)
            if reader is None:
                logger.warning("No CFG serializer found for type %s!", _type_name(m.value_type))
                continue
            try:
                m.value = reader(item)
            except ValueError:
                logger.warning(
                    "Invalid CFG value for field '%s'! (trying to serialize as %s)",
                    item.name or "UNNAMED_FIELD",
                    _type_name(m.value_type),
                )


def save_config(path: str | PathLike[str], config: SerializableStruct) -> None:
    """Write ``config`` to ``path`` as CFG text."""
    Path(path).write_text(dump(config.to_cfg()), encoding="utf-8")


def load_config(path: str | PathLike[str], config: SerializableStruct) -> bool:
    """Read ``config`` from ``path``.

    If the file cannot be read or parsed, the current values are written
    there instead and False is returned.
    """
    target = Path(path)
    try:
        text = target.read_text(encoding="utf-8")
        root = load(text, config._cfg_template())
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        logger.error("Can't load config '%s': %s", target, exc)
        logger.info("Restoring defaults...")
        save_config(target, config)
        return False
    config.from_cfg(root)
    return True