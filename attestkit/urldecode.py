"""Decoding of URL-encoded (form-style) text."""

from __future__ import annotations

_WHITESPACE = " \t\n\r\f\v"
_HEX = "0123456789abcdefABCDEF"


def _hex_pair(pair: str) -> int:
    """Read two characters as a hex number, strtoul-style, requiring all be used."""
    rest = pair.lstrip(_WHITESPACE)
    negative = False
    if rest[:1] in ("+", "-"):
        negative = rest[0] == "-"
        rest = rest[1:]
    if not rest or any(ch not in _HEX for ch in rest):
        raise ValueError("invalid encoding")
    value = int(rest, 16)
    return (-value if negative else value) & 0xFF


def url_decode(text: str) -> str:
    """Turn '+' into a space and '%hh' into the byte hh.

    Raises ValueError when a '%' is not followed by two characters or when
    they are not a hex number.
    """
    decoded = bytearray()
    pos = 0
    length = len(text)
    while pos < length:
        ch = text[pos]
        if ch == "+":
            decoded.append(ord(" "))
        elif ch == "%":
            if pos + 3 > length:
                raise ValueError("premature end of string")
            decoded.append(_hex_pair(text[pos + 1 : pos + 3]))
            pos += 2
        else:
            decoded.extend(ch.encode("utf-8", errors="surrogateescape"))
        pos += 1
    return decoded.decode("utf-8", errors="surrogateescape")