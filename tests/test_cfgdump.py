import pytest

from latren.cfgdump import Formatting, StringLiteral, dump, format_decimal
from latren.cfgfields import CFGField, CFGFieldType, CFGObject
from latren.cfgparse import parse

APOS = Formatting(StringLiteral.APOSTROPHES, 4)
QUOT = Formatting(StringLiteral.QUOTES, 4)


@pytest.mark.parametrize(
    "value, text",
    [(1.5, "1.5"), (2.0, "2.0"), (3.25, "3.25"), (-0.5, "-0.5"), (10.0, "10.0")],
)
def test_format_decimal(value, text):
    assert format_decimal(value) == text


def test_format_decimal_parses_back():
    for value in (0.125, 7.0, 123.75):
        assert float(format_decimal(value)) == value


def test_dump_simple_fields_matches_source_text():
    text = "a = 1\nb = 'x'\nc = 1.5 2\n"
    assert dump(parse(text), APOS) == text


def test_quotes_escaped_and_round_trip():
    root = CFGObject(items=[CFGField(CFGFieldType.STRING, 'say "hi"', name="s")])
    out = dump(root, QUOT)
    assert "\\q" in out
    assert parse(out).find("s").value == 'say "hi"'


def test_apostrophes_escaped_and_round_trip():
    root = CFGObject(items=[CFGField(CFGFieldType.STRING, "it's", name="s")])
    out = dump(root, APOS)
    assert "\\a" in out
    assert parse(out).find("s").value == "it's"


def test_raw_field_written_verbatim():
    raw = CFGField(CFGFieldType.RAW, "# comment\n")
    root = CFGObject(items=[raw, CFGField(CFGFieldType.INTEGER, 3, name="n")])
    out = dump(root, APOS)
    assert out.startswith("# comment\n")
    assert parse(out).find("n").value == 3


def test_array_indentation():
    root = parse("list =\n  1\n  2\n")
    assert dump(root, Formatting(StringLiteral.APOSTROPHES, 2)) == "list = \n  1\n  2\n"


def test_array_round_trip():
    root = parse("list =\n  1\n  2.5\n  'x'\n")
    again = parse(dump(root, APOS))
    assert [(i.type, i.value) for i in again.find("list").items] == [
        (i.type, i.value) for i in root.find("list").items
    ]


def test_named_array_element():
    arr = CFGObject(name="arr", items=[CFGField(CFGFieldType.INTEGER, 4, name="k")])
    out = dump(CFGObject(items=[arr]), APOS)
    assert "    k: 4" in out


def test_automatically_created_members_skipped():
    auto = CFGField(CFGFieldType.INTEGER, 0, automatically_created=True)
    struct = CFGObject(
        name="s",
        type=CFGFieldType.STRUCT,
        items=[CFGField(CFGFieldType.STRING, "v"), auto],
    )
    out = dump(CFGObject(items=[struct]), APOS)
    reparsed = parse(out).find("s")
    assert reparsed.type is CFGFieldType.STRING
    assert reparsed.value == "v"


def test_float_round_trip():
    root = CFGObject(items=[CFGField(CFGFieldType.FLOAT, 0.75, name="f")])
    f = parse(dump(root, APOS)).find("f")
    assert (f.type, f.value) == (CFGFieldType.FLOAT, 0.75)


def test_default_formatting_round_trip():
    text = "a = 'q'\nb = 9\n"
    root = parse(dump(parse(text)))
    assert [(i.name, i.value) for i in root.items] == [("a", "q"), ("b", 9)]