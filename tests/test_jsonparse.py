import pytest

from attestkit.jsonparse import load
from attestkit.jsonvalue import JSON, JSONType


def test_object_with_mixed_members():
    doc = load('{"s": "text", "i": 7, "f": 2.5, "t": true, "n": null, "a": [1, 2]}')
    assert doc == JSON({"s": "text", "i": 7, "f": 2.5, "t": True, "n": None, "a": [1, 2]})


def test_report_style_document():
    doc = load('{"id":"abc","version":3,"isvEnclaveQuoteStatus":"OK"}')
    assert doc.get("version").to_int() == 3
    assert doc.get("isvEnclaveQuoteStatus").to_string() == "OK"
    assert doc.size() == 3


def test_whitespace_everywhere():
    doc = load(' \n{ "a" : [ 1 , 2 ] ,\t"b" : { } }')
    assert doc == JSON({"a": [1, 2], "b": {}})


def test_empty_containers():
    assert load("[]") == JSON([])
    assert load("{}") == JSON({})


def test_top_level_number_needs_terminator():
    assert load("42").is_null()
    assert load("42 ") == JSON(42)


def test_negative_integer():
    assert load("-5 ") == JSON(-5)


def test_float_value():
    result = load("[0.25]")
    assert result.get(0).json_type is JSONType.FLOATING
    assert result.get(0).to_float() == 0.25


def test_exponent_gives_float():
    assert load("[1.5e2]").get(0) == JSON(150.0)
    assert load("[2e3]").get(0) == JSON(2000.0)
    assert load("[5e-1]").get(0) == JSON(0.5)


def test_number_with_bad_trailing_char_is_null():
    assert load("[12x]") == JSON([])
    assert load("12x").is_null()


def test_lone_minus_raises():
    with pytest.raises(ValueError):
        load("- ")


def test_booleans_and_null():
    assert load("true") == JSON(True)
    assert load("false") == JSON(False)
    assert load("null").is_null()
    assert load("tru").is_null()


def test_unknown_start_is_null():
    assert load("@").is_null()
    assert load("").is_null()


def test_string_escapes():
    assert load('"a\\nb\\t\\/"') == JSON("a\nb\t/")


def test_unicode_escape_kept_verbatim():
    assert load('"\\u0041"') == JSON("\\u0041")


def test_invalid_unicode_escape_gives_empty_string():
    assert load('"\\u00zz"') == JSON("")


def test_unknown_escape_becomes_backslash():
    assert load('"a\\qb"') == JSON("a\\b")


def test_object_keys_are_stored_escaped():
    doc = load('{"a\\"b": 1}')
    assert doc.has_key('a\\"b')
    assert not doc.has_key('a"b')


def test_array_error_gives_empty_array():
    assert load("[1 2]") == JSON([])


def test_object_missing_colon_keeps_earlier_members():
    doc = load('{"a": 1, "b" 2}')
    assert doc == JSON({"a": 1})


def test_nested_structures_round_trip_members():
    doc = load('{"outer": {"inner": [true, {"k": "v"}]}}')
    inner = doc.get("outer").get("inner")
    assert inner.length() == 2
    assert inner.get(0).to_bool() is True
    assert inner.get(1).get("k").to_string() == "v"