import logging
from pathlib import Path

from latren.paths import (
    ResourcePath,
    get_global_path_var,
    list_global_path_vars,
    set_global_path_var,
)


def test_is_empty():
    assert ResourcePath("").is_empty()
    assert not ResourcePath("a").is_empty()


def test_plain_path_is_unchanged():
    assert ResourcePath("a/b.txt").parsed_str() == "a/b.txt"
    assert ResourcePath("a/b.txt").parsed() == Path("a/b.txt")


def test_variable_substitution():
    set_global_path_var("tp_res", "assets")
    assert ResourcePath("${tp_res}/font.ttf").parsed_str() == "assets/font.ttf"


def test_nested_variables_are_expanded():
    set_global_path_var("tp_root", "base")
    set_global_path_var("tp_sub", "${tp_root}/sub")
    assert ResourcePath("${tp_sub}/file").parsed_str() == "base/sub/file"


def test_multiple_variables():
    set_global_path_var("tp_a", "x")
    set_global_path_var("tp_b", ResourcePath("y"))
    assert ResourcePath("${tp_a}/${tp_b}").parsed_str() == "x/y"


def test_missing_variable_is_replaced_by_empty(caplog):
    with caplog.at_level(logging.WARNING):
        result = ResourcePath("pre${tp_missing}post").parsed_str()
    assert result == "prepost"
    assert "tp_missing" in caplog.text


def test_get_missing_variable_returns_empty_path():
    assert get_global_path_var("tp_never_set").is_empty()


def test_unclosed_variable_is_left_alone():
    assert ResourcePath("a/${unclosed").parsed_str() == "a/${unclosed"
    assert ResourcePath("a/${").parsed_str() == "a/${"


def test_cwd_variable_defaults_to_working_directory():
    assert get_global_path_var("cwd").unparsed == Path.cwd().as_posix()


def test_listing_is_sorted_and_contains_set_values():
    set_global_path_var("tp_zeta", "z")
    set_global_path_var("tp_alpha", "a")
    pairs = list_global_path_vars()
    names = [name for name, _ in pairs]
    assert names == sorted(names)
    assert ("tp_alpha", ResourcePath("a")) in pairs


def test_str_is_unparsed():
    assert str(ResourcePath("${x}/y")) == "${x}/y"