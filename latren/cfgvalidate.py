"""Validation of parsed CFG documents against a file template."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence

from latren.cfgfields import (
    CFGField,
    CFGFieldType,
    CFGObject,
    is_valid_type,
    new_field,
    parse_type_annotation,
)
from latren.cfgparse import parse


class CFGValidationError(ValueError):
    """Raised when a CFG document does not match what is expected of it."""


@dataclass
class CFGFieldSpec:
    """What a template expects of one named field.

    ``types`` is a flat type list as produced by ``parse_type_annotation``;
    for an object field, ``fields`` describes its members instead.
    """

    name: str
    types: Sequence[CFGFieldType] = ()
    required: bool = True
    is_object: bool = False
    fields: list["CFGFieldSpec"] = field(default_factory=list)


@dataclass
class CFGFileTemplate:
    """The fields a CFG file must hold and the custom types it may name."""

    fields: list[CFGFieldSpec] = field(default_factory=list)
    types: Mapping[str, Sequence[CFGFieldType]] = field(default_factory=dict)


def _cast_to_float(item: CFGField) -> None:
    item.type = CFGFieldType.FLOAT
    item.value = float(item.value)


def _replace_in_parent(old: CFGField, new: CFGField) -> None:
    parent = old.parent
    if parent is None:
        return
    for index, sibling in enumerate(parent.items):
        if sibling is old:
            parent.items[index] = new
            new.parent = parent
            return


def _copy_field(node: CFGField) -> CFGField:
    if isinstance(node, CFGObject):
        return CFGObject(type=node.type, value=node.value, items=list(node.items))
    return CFGField(type=node.type, value=node.value)


def _describe_expected(types: Sequence[CFGFieldType]) -> str:
    parts: list[str] = []
    required = False
    for t in types:
        if t is CFGFieldType.STRUCT_MEMBER_REQUIRED:
            required = True
            continue
        parts.append(f"{{{'req' if required else 'opt'}}}{t.name}")
        required = False
    return ", ".join(parts)


def _struct_error(types: Sequence[CFGFieldType], received: Sequence[CFGField]) -> CFGValidationError:
    got = ", ".join(item.type.name for item in received)
    return CFGValidationError(
        f"Invalid struct field types! (Expected [{_describe_expected(types)}] "
        f"but received [{got}])"
    )


def _validate_struct(node: CFGField, types: Sequence[CFGFieldType]) -> CFGObject:
    if node.type is CFGFieldType.STRUCT and isinstance(node, CFGObject):
        struct = node
    else:
        struct = CFGObject(name=node.name, type=CFGFieldType.STRUCT)
        struct.add_item(_copy_field(node))
        _replace_in_parent(node, struct)

    expected = list(types)
    received = list(struct.items)
    error = _struct_error(expected, received)
    r = 0
    t = 0
    while t < len(expected):
        current = expected[t]
        if current is CFGFieldType.STRUCT_MEMBER_REQUIRED:
            t += 1
            if r >= len(received) or t >= len(expected):
                raise error
            current = expected[t]
        elif r >= len(received):
            created = new_field(current)
            created.automatically_created = True
            struct.add_item(created)
        if r < len(received):
            item = received[r]
            if not is_valid_type(item.type, current):
                raise error
            if item.type is CFGFieldType.INTEGER and current is CFGFieldType.FLOAT:
                _cast_to_float(item)
            r += 1
        t += 1
    if r < len(received):
        raise error
    return struct


def validate_field_type(field: CFGField | None, types: Sequence[CFGFieldType]) -> CFGField:
    """Check ``field`` against a flat type list, converting it where allowed.

    Integers become floats where floats are expected and single values
    become structs where structs are expected. Returns the field that now
    stands in the document, which may be a new struct wrapping the old one.
    """
    types = list(types)
    if not types:
        raise CFGValidationError("No types to validate against")
    if field is None:
        raise CFGValidationError("Missing field")
    head = types[0]
    if head is CFGFieldType.STRUCT:
        return _validate_struct(field, types[1:])
    if not is_valid_type(field.type, head):
        raise CFGValidationError(
            f"Invalid field type for '{field.name or 'UNNAMED_FIELD'}'! "
            f"(Expected {head.name} but received {field.type.name})"
        )
    if field.type is CFGFieldType.INTEGER and head is CFGFieldType.FLOAT:
        _cast_to_float(field)
    if head is CFGFieldType.ARRAY:
        if not isinstance(field, CFGObject):
            raise CFGValidationError(f"'{field.name or 'UNNAMED_FIELD'}' is not an array")
        for item in list(field.items):
            validate_field_type(item, types[1:])
    return field


def _validate_fields(node: CFGObject, specs: Sequence[CFGFieldSpec]) -> None:
    for spec in specs:
        found = node.find(spec.name)
        if found is None:
            if spec.required:
                raise CFGValidationError(f"Missing mandatory field '{spec.name}'!")
            if spec.is_object:
                created: CFGField = CFGObject()
            elif spec.types:
                created = new_field(spec.types[0])
            else:
                raise CFGValidationError(f"No type given for field '{spec.name}'")
            created.automatically_created = True
            created.name = spec.name
            node.add_item(created)
            continue
        if spec.is_object:
            if not isinstance(found, CFGObject):
                raise CFGValidationError(f"'{spec.name}' is not an object")
            _validate_fields(found, spec.fields)
        else:
            validate_field_type(found, spec.types)


def _convert_annotations(node: CFGField, custom: Mapping[str, Sequence[CFGFieldType]]) -> None:
    if node.type_annotation:
        try:
            types = parse_type_annotation(node.type_annotation, True, custom)
        except ValueError as exc:
            raise CFGValidationError(str(exc)) from exc
        validate_field_type(node, types)
        return
    if isinstance(node, CFGObject) and node.type in (CFGFieldType.STRUCT, CFGFieldType.ARRAY):
        for item in list(node.items):
            _convert_annotations(item, custom)


def validate(root: CFGObject, template: CFGFileTemplate | None = None) -> CFGObject:
    """Apply type annotations and the template's fields to ``root`` in place."""
    if template is None:
        template = CFGFileTemplate()
    _convert_annotations(root, template.types)
    _validate_fields(root, template.fields)
    return root


def load(text: str, template: CFGFileTemplate | None = None) -> CFGObject:
    """Parse CFG text and validate it against ``template``."""
    return validate(parse(text), template)