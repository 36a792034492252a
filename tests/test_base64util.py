import base64

import pytest

from attestkit.base64util import base64_decode


def test_minimal_decode_case():
    assert base64_decode("YW55IGNhcm5hbCBwbGVhc3U=") == b"any carnal pleasu"


def test_full_phrase_decode():
    decoded = base64_decode("YW55IGNhcm5hbCBwbGVhc3VyZQ==")
    assert decoded == b"any carnal pleasure"
    assert len(decoded) == 19


def test_accepts_bytes():
    assert base64_decode(b"YW55IGNhcm5hbCBwbGVhc3U=") == b"any carnal pleasu"


def test_empty_input():
    assert base64_decode("") == b""


@pytest.mark.parametrize("payload", [b"", b"\x00", b"\x00\xff\x10", bytes(range(256))])
def test_round_trip(payload):
    assert base64_decode(base64.b64encode(payload).decode()) == payload


def test_missing_padding_tolerated():
    assert base64_decode("YW55IGNhcm5hbCBwbGVhc3VyZQ") == b"any carnal pleasure"


def test_trailing_newline_ignored():
    assert base64_decode("YW55IGNhcm5hbCBwbGVhc3U=\n") == b"any carnal pleasu"


def test_invalid_characters_rejected():
    with pytest.raises(ValueError):
        base64_decode("YW55*GNh")