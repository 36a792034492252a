import urllib.parse

import pytest

from attestkit.urldecode import url_decode


def test_plus_becomes_space():
    assert url_decode("a+b") == "a b"


def test_plain_text_unchanged():
    assert url_decode("-----BEGIN") == "-----BEGIN"


@pytest.mark.parametrize(
    "text",
    ["-----BEGIN CERTIFICATE-----\nMIIF\n", "a/b=c&d", "100% sure", "x+y"],
)
def test_round_trip_with_quote_plus(text):
    assert url_decode(urllib.parse.quote_plus(text)) == text


def test_lowercase_and_uppercase_hex_agree():
    assert url_decode("%2f") == url_decode("%2F") == "/"


def test_percent_encoded_utf8():
    assert url_decode(urllib.parse.quote("é")) == "é"


@pytest.mark.parametrize("text", ["%", "%4", "abc%2"])
def test_premature_end(text):
    with pytest.raises(ValueError, match="premature end of string"):
        url_decode(text)


@pytest.mark.parametrize("text", ["%zz", "%4g", "%0x"])
def test_invalid_encoding(text):
    with pytest.raises(ValueError, match="invalid encoding"):
        url_decode(text)