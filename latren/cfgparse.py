"""Parsing of CFG text into a field tree."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from latren.cfgfields import (
    CFGField,
    CFGFieldType,
    CFGObject,
    parse_type_annotation,
)

_WHITESPACE = " \t\n\v\f\r"
_DIGITS = "0123456789"
_ANNOTATION_SPECIALS = "[]{}_,"
_SPACE_AROUND_SPECIAL = re.compile(r"[ \t\n\v\f\r]*([\[\]{}_,])[ \t\n\v\f\r]*")
_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1
_FLOAT_MAX = 3.4028234663852886e38


class CFGSyntaxError(ValueError):
    """Raised when CFG text cannot be parsed."""


def _is_space(c: str) -> bool:
    return c in _WHITESPACE


def _is_digit(c: str) -> bool:
    return c in _DIGITS


def _is_alpha(c: str) -> bool:
    return c.isascii() and c.isalpha()


def _is_alnum(c: str) -> bool:
    return c.isascii() and c.isalnum()


def _should_parse_as_number(text: str, first: int) -> bool:
    if len(text) <= first:
        return False
    c = text[first]
    if _is_digit(c):
        return True
    if c == "-":
        if len(text) < first + 2:
            return False
        after = text[first + 1]
        if after == "-":
            return False
        if after == ".":
            return len(text) > first + 2 and _is_digit(text[first + 2])
        return _is_digit(after)
    if c == ".":
        return len(text) >= first + 2 and _is_digit(text[first + 1])
    return False


def _should_parse_as_string(text: str, first: int = 0) -> bool:
    if len(text) <= first:
        return False
    c = text[first]
    return _is_alpha(c) or c in "\"'"


def _parse_string(text: str, first: int, last: int, whole: bool = False) -> tuple[str, int]:
    """Read a quoted or bare string between ``first`` and ``last`` (inclusive)."""
    quote = text[first]
    if quote in "\"'":
        end = text.find(quote, first + 1, last + 1)
        if end == -1:
            raise CFGSyntaxError(f"Unterminated string literal in {text!r}")
        if whole and end < last:
            raise CFGSyntaxError(f"Unexpected text after string literal in {text!r}")
        return text[first + 1 : end], end + 1
    for i in range(first + 1, last + 1):
        c = text[i]
        if _is_alnum(c) or c == "_":
            continue
        if not whole and _is_space(c):
            return text[first:i], i
        raise CFGSyntaxError(f"Invalid character {c!r} in {text!r}")
    return text[first : last + 1], last + 1


def _parse_number(text: str, start: int) -> tuple[CFGField, int]:
    end = len(text)
    digits_from = start + 1 if text[start] == "-" else start
    is_float = False
    for i in range(digits_from, len(text)):
        c = text[i]
        if c == ".":
            if is_float:
                raise CFGSyntaxError(f"Malformed number in {text!r}")
            is_float = True
        elif not _is_digit(c):
            end = i
            break
    literal = text[start:end]
    if is_float:
        number = float(literal)
        if abs(number) > _FLOAT_MAX:
            raise CFGSyntaxError(f"Number out of range: {literal}")
        return CFGField(CFGFieldType.FLOAT, number), end
    integer = int(literal)
    if not _INT_MIN <= integer <= _INT_MAX:
        raise CFGSyntaxError(f"Number out of range: {literal}")
    return CFGField(CFGFieldType.INTEGER, integer), end


def parse_field_value(text: str, start: int = 0) -> tuple[CFGField, int]:
    """Parse one number or string starting at ``start``.

    Returns the field and the index just past it.
    """
    if len(text) <= start:
        raise CFGSyntaxError("Missing value")
    if _should_parse_as_number(text, start):
        return _parse_number(text, start)
    if _should_parse_as_string(text, start):
        value, nxt = _parse_string(text, start, len(text) - 1)
        value = value.replace("\\q", '"').replace("\\a", "'")
        return CFGField(CFGFieldType.STRING, value), nxt
    raise CFGSyntaxError(f"Cannot parse value {text[start:]!r}")


def _rnext_non_space(text: str, start: int) -> int:
    for i in range(start, 0, -1):
        if not _is_space(text[i]):
            return i
    return 0


def _is_annotation_symbol(c: str) -> bool:
    return _is_space(c) or _is_alnum(c) or c in _ANNOTATION_SPECIALS


def read_type_annotation(text: str, pos: int) -> tuple[str, int]:
    """Read a ``:Type`` annotation that ends at ``pos``, scanning leftwards.

    Returns the annotation and the index of the last non-space character
    before its colon; with no annotation, returns ``("", pos)``.
    """
    colon = -1
    for i in range(pos, -1, -1):
        c = text[i]
        if c == ":":
            colon = i
            break
        if not _is_annotation_symbol(c):
            break
    if colon == -1:
        return "", pos
    annotation = text[colon + 1 : pos + 1].strip(_WHITESPACE)
    annotation = _SPACE_AROUND_SPECIAL.sub(r"\1", annotation)
    new_pos = _rnext_non_space(text, colon - 1) if colon > 0 else 0
    return annotation, new_pos


@dataclass
class _IndentNode:
    value: str = ""
    children: list["_IndentNode"] = field(default_factory=list)
    parent: "_IndentNode | None" = field(default=None, repr=False, compare=False)

    def add_child(self, child: "_IndentNode") -> None:
        child.parent = self
        self.children.append(child)


def _strip_comment(expr: str) -> str:
    in_literal = False
    for i, c in enumerate(expr):
        if c in "\"'":
            if i == 0 or expr[i - 1] != "\\":
                in_literal = not in_literal
        elif c == "#" and not in_literal:
            return expr[:i]
    return expr


def build_indent_tree(text: str) -> _IndentNode:
    """Group the lines of ``text`` into a tree by indentation."""
    root = _IndentNode()
    node = root
    current_indent = 0
    for line in text.split("\n"):
        expr = line.lstrip(" \t")
        indent = len(line) - len(expr)
        expr = _strip_comment(expr).rstrip(" \t")
        if not expr:
            continue
        if indent < current_indent:
            current_indent = indent
            if node.parent is None:
                raise CFGSyntaxError(f"Unexpected dedent at {expr!r}")
            node = node.parent
        elif indent > current_indent:
            if not node.children:
                raise CFGSyntaxError(f"Unexpected indent at {expr!r}")
            current_indent = indent
            node = node.children[-1]
        node.add_child(_IndentNode(expr))
    return root


def _first_not_in_literal(text: str, find: str) -> int | None:
    in_literal = False
    literal = ""
    for i, c in enumerate(text):
        if c == find and not in_literal:
            return i
        if c in "\"'":
            if in_literal and c == literal:
                in_literal = False
            else:
                in_literal = True
                literal = c
    return None


def _check_annotation(annotation: str) -> None:
    if not annotation:
        return
    try:
        parse_type_annotation(annotation, True)
    except ValueError as exc:
        raise CFGSyntaxError(str(exc)) from exc


def _parse_node(node: _IndentNode, is_root: bool = False) -> CFGField:
    text = node.value
    name: str | None = None
    annotation = ""
    equals = _first_not_in_literal(text, "=")

    last_of_name = 0
    if equals is not None and equals > 0:
        last_of_name = _rnext_non_space(text, equals - 1)
        annotation, last_of_name = read_type_annotation(text, last_of_name)
        _check_annotation(annotation)

    if is_root or (equals is not None and equals == len(text) - 1):
        if not is_root and last_of_name > 0:
            name, _ = _parse_string(text, 0, last_of_name, whole=True)
        obj = CFGObject(name=name, type=CFGFieldType.ARRAY, type_annotation=annotation)
        for child in node.children:
            obj.add_item(_parse_node(child))
        return obj

    value = text
    if equals is not None:
        value = text[equals + 1 :].lstrip(_WHITESPACE)
        if _should_parse_as_string(text):
            name, _ = _parse_string(text, 0, last_of_name, whole=True)

    value_last = len(value) - 1
    if not annotation:
        annotation, value_last = read_type_annotation(value, value_last)
        _check_annotation(annotation)

    fields: list[CFGField] = []
    nxt = 0
    while nxt <= value_last:
        item, nxt = parse_field_value(value, nxt)
        fields.append(item)
        while nxt <= value_last and _is_space(value[nxt]):
            nxt += 1
    if not fields:
        raise CFGSyntaxError(f"Missing value in {text!r}")

    if len(fields) > 1:
        result: CFGField = CFGObject(name=name, type=CFGFieldType.STRUCT, items=fields)
    else:
        result = fields[0]
        result.name = name
    result.type_annotation = annotation
    return result


def parse(text: str) -> CFGObject:
    """Parse CFG text into its root object."""
    tree = build_indent_tree(text)
    root = _parse_node(tree, is_root=True)
    assert isinstance(root, CFGObject)
    return root