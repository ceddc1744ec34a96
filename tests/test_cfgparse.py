import pytest

from latren.cfgfields import CFGFieldType, CFGObject
from latren.cfgparse import (
    CFGSyntaxError,
    build_indent_tree,
    parse,
    parse_field_value,
    read_type_annotation,
)

T = CFGFieldType


def test_parse_integer():
    f, nxt = parse_field_value("42")
    assert (f.type, f.value, nxt) == (T.INTEGER, 42, 2)


def test_parse_negative_float():
    f, _ = parse_field_value("-3.5")
    assert f.type is T.FLOAT
    assert f.value == -3.5


def test_parse_quoted_string_and_next():
    text = "'hello world' rest"
    f, nxt = parse_field_value(text)
    assert f.value == "hello world"
    assert text[nxt:] == " rest"


def test_parse_string_escapes():
    f, _ = parse_field_value("'say \\qhi\\q and \\ait'")
    assert f.value == "say \"hi\" and 'it"


def test_parse_bare_words_from_offset():
    text = "abc def"
    first, nxt = parse_field_value(text)
    assert first.value == "abc"
    second, end = parse_field_value(text, nxt + 1)
    assert second.value == "def"
    assert end == len(text)


@pytest.mark.parametrize("text", ["1.2.3", "#x", "'open", "abc:d", "", "99999999999"])
def test_parse_field_value_errors(text):
    with pytest.raises(CFGSyntaxError):
        parse_field_value(text)


def test_read_type_annotation_before_equals():
    text = "name: [Texture]"
    annotation, pos = read_type_annotation(text, len(text) - 1)
    assert annotation == "[Texture]"
    assert text[: pos + 1] == "name"


def test_read_type_annotation_removes_spaces_near_symbols():
    text = "value :{ Int , Flt }"
    annotation, _ = read_type_annotation(text, len(text) - 1)
    assert annotation == "{Int,Flt}"


def test_read_type_annotation_absent():
    assert read_type_annotation("hello", 4) == ("", 4)


def test_build_indent_tree_structure():
    tree = build_indent_tree("a = 1 # note\nb =\n  c = 2\n\n")
    assert [c.value for c in tree.children] == ["a = 1", "b ="]
    assert [c.value for c in tree.children[1].children] == ["c = 2"]
    assert tree.children[1].children[0].parent is tree.children[1]


def test_build_indent_tree_keeps_hash_in_literal():
    tree = build_indent_tree("s = 'a#b'")
    assert tree.children[0].value == "s = 'a#b'"


def test_build_indent_tree_initial_indent_fails():
    with pytest.raises(CFGSyntaxError):
        build_indent_tree("  a = 1")


def test_build_indent_tree_dedent_past_root_fails():
    with pytest.raises(CFGSyntaxError):
        build_indent_tree("a =\n    b = 1\n  c = 2\nd = 3")


DOCUMENT = """\
title = 'Game'
volume = 0.5
size = 1280 720
imports: [Texture] =
    grass = 'grass.png'
"""


def test_parse_document():
    root = parse(DOCUMENT)
    assert root.type is T.ARRAY
    assert [i.name for i in root] == ["title", "volume", "size", "imports"]
    title = root.find("title")
    assert (title.type, title.value) == (T.STRING, "Game")
    assert root.find("volume").value == 0.5
    size = root.find("size")
    assert isinstance(size, CFGObject)
    assert size.type is T.STRUCT
    assert [i.value for i in size] == [1280, 720]


def test_parse_document_nested_array():
    imports = parse(DOCUMENT).find("imports")
    assert imports.type is T.ARRAY
    assert imports.type_annotation == "[Texture]"
    grass = imports.item(0)
    assert (grass.name, grass.value) == ("grass", "grass.png")
    assert grass.parent is imports


def test_parse_annotation_after_value():
    field = parse("x = 5 :Int").find("x")
    assert (field.value, field.type_annotation) == (5, "Int")


def test_parse_annotation_before_equals():
    field = parse("x: Int = 5").find("x")
    assert (field.value, field.type_annotation) == (5, "Int")


def test_parse_quoted_name_and_unnamed_value():
    root = parse("'quoted name' = 3\n5")
    assert root.item(0).name == "quoted name"
    assert root.item(1).name is None
    assert root.item(1).value == 5


@pytest.mark.parametrize(
    "text", ["x = 1.2.3", "my var = 1", "x = 5 :Foo Bar", "x = 'open", "x = ?"]
)
def test_parse_errors(text):
    with pytest.raises(CFGSyntaxError):
        parse(text)


def test_parse_empty_document():
    root = parse("# only a comment\n\n")
    assert len(root) == 0