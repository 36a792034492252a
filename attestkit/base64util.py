"""Base64 decoding of single-line input."""

from __future__ import annotations

import base64
import binascii


def base64_decode(msg: str | bytes) -> bytes:
    """Decode standard base64 text written on one line.

    Missing trailing padding is tolerated; any other malformed input raises
    ValueError.
    """
    data = msg.encode("ascii") if isinstance(msg, str) else bytes(msg)
    data = data.strip()
    data += b"=" * (-len(data) % 4)
    try:
        return base64.b64decode(data, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64 input: {exc}") from exc