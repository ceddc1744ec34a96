"""Writing CFG field trees back out as text."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from latren.cfgfields import CFGField, CFGFieldType, CFGObject


class StringLiteral(Enum):
    APOSTROPHES = auto()
    QUOTES = auto()


@dataclass(frozen=True)
class Formatting:
    """How strings are quoted and how far array items are indented."""

    string_literal: StringLiteral = StringLiteral.APOSTROPHES
    indents: int = 4


def format_decimal(value: float) -> str:
    """Format a float with six decimals, dropping trailing zeros but keeping one."""
    decimal = f"{value:.6f}"
    while len(decimal) > 3 and decimal[-1] == "0":
        if decimal[-2] == ".":
            break
        decimal = decimal[:-1]
    return decimal


def _quote(value: str, literal: StringLiteral) -> str:
    if literal is StringLiteral.APOSTROPHES:
        return "'" + value.replace("'", "\\a") + "'"
    return '"' + value.replace('"', "\\q") + '"'


def _value_to_string(item: CFGField, formatting: Formatting, indents: int, out: list[str]) -> None:
    if item.automatically_created:
        return
    t = item.type
    if t in (CFGFieldType.NUMBER, CFGFieldType.FLOAT):
        out.append(format_decimal(item.value))
    elif t is CFGFieldType.INTEGER:
        out.append(str(int(item.value)))
    elif t is CFGFieldType.STRING:
        out.append(_quote(item.value, formatting.string_literal))
    elif t is CFGFieldType.STRUCT and isinstance(item, CFGObject):
        last = len(item.items) - 1
        for index, member in enumerate(item.items):
            if member.automatically_created:
                continue
            _value_to_string(member, formatting, indents, out)
            if index < last:
                out.append(" ")
    elif t is CFGFieldType.ARRAY and isinstance(item, CFGObject):
        indents += formatting.indents
        last = len(item.items) - 1
        for index, element in enumerate(item.items):
            out.append(" " * indents)
            if element.name is not None:
                out.append(f"{element.name}: ")
            _value_to_string(element, formatting, indents, out)
            if index < last:
                out.append("\n")


def dump(root: CFGObject, formatting: Formatting | None = None) -> str:
    """Render a CFG root object as text."""
    if formatting is None:
        formatting = Formatting()
    out: list[str] = []
    for child in root.items:
        if child.type is CFGFieldType.RAW:
            out.append(child.value)
            continue
        if child.name is not None:
            out.append(f"{child.name} = ")
        if child.type is CFGFieldType.ARRAY:
            out.append("\n")
        _value_to_string(child, formatting, 0, out)
        out.append("\n")
    return "".join(out)