"""Incremental state-machine parser for HTTP responses."""

from __future__ import annotations

import enum
from enum import Enum, auto

from attestkit.response import HeaderItem, Response


class ParseResult(Enum):
    """Outcome of feeding data to the parser."""

    COMPLETED = auto()
    INCOMPLETE = auto()
    ERROR = auto()


class _State(enum.Enum):
    STATUS_START = auto()
    VERSION_PREFIX = auto()
    VERSION_MAJOR_START = auto()
    VERSION_MAJOR = auto()
    VERSION_MINOR_START = auto()
    VERSION_MINOR = auto()
    STATUS_CODE_START = auto()
    STATUS_CODE = auto()
    STATUS_TEXT_START = auto()
    STATUS_TEXT = auto()
    STATUS_NEWLINE = auto()
    HEADER_LINE_START = auto()
    HEADER_LWS = auto()
    HEADER_NAME = auto()
    SPACE_BEFORE_HEADER_VALUE = auto()
    HEADER_VALUE = auto()
    EXPECTING_NEWLINE_2 = auto()
    EXPECTING_NEWLINE_3 = auto()
    BODY = auto()
    CHUNK_SIZE = auto()
    CHUNK_EXTENSION_NAME = auto()
    CHUNK_EXTENSION_VALUE = auto()
    CHUNK_SIZE_NEWLINE = auto()
    CHUNK_SIZE_NEWLINE_2 = auto()
    CHUNK_SIZE_NEWLINE_3 = auto()
    CHUNK_TRAILER_NAME = auto()
    CHUNK_TRAILER_VALUE = auto()
    CHUNK_DATA = auto()
    CHUNK_DATA_NEWLINE_1 = auto()
    CHUNK_DATA_NEWLINE_2 = auto()


_VERSION_PREFIX = b"HTTP/"
_SPECIAL = frozenset(b'()<>@,;:\\"/[]?={} \t')
_CR, _LF, _SP, _HT = ord("\r"), ord("\n"), ord(" "), ord("\t")


def _is_char(c: int) -> bool:
    return c <= 127


def _is_control(c: int) -> bool:
    return c <= 31 or c == 127


def _is_digit(c: int) -> bool:
    return ord("0") <= c <= ord("9")


def _is_alnum(c: int) -> bool:
    return bytes((c,)).isalnum()


def _is_alpha(c: int) -> bool:
    return bytes((c,)).isalpha()


def _strtol(text: str, base: int) -> int:
    """Read a leading integer the way C's strtol does; no digits gives 0."""
    s = text.lstrip(" \t\n\r\f\v")
    sign = 1
    if s[:1] in ("+", "-"):
        sign = -1 if s[0] == "-" else 1
        s = s[1:]
    digits = "0123456789abcdef"[:base]
    if base == 16 and s[:2].lower() == "0x" and len(s) > 2 and s[2].lower() in digits:
        s = s[2:]
    value = 0
    for ch in s.lower():
        digit = digits.find(ch)
        if digit < 0:
            break
        value = value * base + digit
    return sign * value


class HttpResponseParser:
    """Parses an HTTP response, possibly delivered in several pieces.

    The parser keeps its state between calls to :meth:`parse`, so the same
    parser and response must be used for every piece of one message.
    """

    def __init__(self) -> None:
        self._state = _State.STATUS_START
        self._prefix_pos = 0
        self._content_size = 0
        self._chunk_size_text = ""
        self._chunk_size = 0
        self._chunked = False

    def parse(self, response: Response, data: bytes | bytearray | memoryview | str) -> ParseResult:
        """Feed data into the parser, filling in ``response``.

        Returns COMPLETED once the whole message is read, ERROR on malformed
        input and INCOMPLETE when more data is needed.
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        for byte in bytes(data):
            result = self._consume(response, byte)
            if result is not None:
                return result
        return ParseResult.INCOMPLETE

    def _consume(self, resp: Response, c: int) -> ParseResult | None:
        error = ParseResult.ERROR
        match self._state:
            case _State.STATUS_START | _State.VERSION_PREFIX:
                if c != _VERSION_PREFIX[self._prefix_pos]:
                    return error
                self._prefix_pos += 1
                self._state = _State.VERSION_PREFIX
                if self._prefix_pos == len(_VERSION_PREFIX):
                    resp.version_major = 0
                    resp.version_minor = 0
                    self._state = _State.VERSION_MAJOR_START
            case _State.VERSION_MAJOR_START:
                if not _is_digit(c):
                    return error
                resp.version_major = c - ord("0")
                self._state = _State.VERSION_MAJOR
            case _State.VERSION_MAJOR:
                if c == ord("."):
                    self._state = _State.VERSION_MINOR_START
                elif _is_digit(c):
                    resp.version_major = resp.version_major * 10 + c - ord("0")
                else:
                    return error
            case _State.VERSION_MINOR_START:
                if not _is_digit(c):
                    return error
                resp.version_minor = c - ord("0")
                self._state = _State.VERSION_MINOR
            case _State.VERSION_MINOR:
                if c == _SP:
                    self._state = _State.STATUS_CODE_START
                    resp.status_code = 0
                elif _is_digit(c):
                    resp.version_minor = resp.version_minor * 10 + c - ord("0")
                else:
                    return error
            case _State.STATUS_CODE_START:
                if not _is_digit(c):
                    return error
                resp.status_code = c - ord("0")
                self._state = _State.STATUS_CODE
            case _State.STATUS_CODE:
                if _is_digit(c):
                    resp.status_code = resp.status_code * 10 + c - ord("0")
                elif not 100 <= resp.status_code <= 999 or c != _SP:
                    return error
                else:
                    self._state = _State.STATUS_TEXT_START
            case _State.STATUS_TEXT_START:
                if not _is_char(c):
                    return error
                resp.status += chr(c)
                self._state = _State.STATUS_TEXT
            case _State.STATUS_TEXT:
                if c == _CR:
                    self._state = _State.STATUS_NEWLINE
                elif _is_char(c):
                    resp.status += chr(c)
                else:
                    return error
            case _State.STATUS_NEWLINE:
                if c != _LF:
                    return error
                self._state = _State.HEADER_LINE_START
            case _State.HEADER_LINE_START:
                if c == _CR:
                    self._state = _State.EXPECTING_NEWLINE_3
                elif resp.headers and c in (_SP, _HT):
                    self._state = _State.HEADER_LWS
                elif not _is_char(c) or _is_control(c) or c in _SPECIAL:
                    return error
                else:
                    resp.headers.append(HeaderItem(name=chr(c)))
                    self._state = _State.HEADER_NAME
            case _State.HEADER_LWS:
                if c == _CR:
                    self._state = _State.EXPECTING_NEWLINE_2
                elif c in (_SP, _HT):
                    pass
                elif _is_control(c):
                    return error
                else:
                    self._state = _State.HEADER_VALUE
                    resp.headers[-1].value += chr(c)
            case _State.HEADER_NAME:
                if c == ord(":"):
                    self._state = _State.SPACE_BEFORE_HEADER_VALUE
                elif not _is_char(c) or _is_control(c) or c in _SPECIAL:
                    return error
                else:
                    resp.headers[-1].name += chr(c)
            case _State.SPACE_BEFORE_HEADER_VALUE:
                if c != _SP:
                    return error
                self._state = _State.HEADER_VALUE
            case _State.HEADER_VALUE:
                if c == _CR:
                    self._header_finished(resp.headers[-1])
                    self._state = _State.EXPECTING_NEWLINE_2
                elif _is_control(c):
                    return error
                else:
                    resp.headers[-1].value += chr(c)
            case _State.EXPECTING_NEWLINE_2:
                if c != _LF:
                    return error
                self._state = _State.HEADER_LINE_START
            case _State.EXPECTING_NEWLINE_3:
                self._decide_keep_alive(resp)
                if self._chunked:
                    self._state = _State.CHUNK_SIZE
                elif self._content_size == 0:
                    return ParseResult.COMPLETED if c == _LF else error
                else:
                    self._state = _State.BODY
            case _State.BODY:
                self._content_size -= 1
                resp.content.append(c)
                if self._content_size == 0:
                    return ParseResult.COMPLETED
            case _State.CHUNK_SIZE:
                if _is_alnum(c):
                    self._chunk_size_text += chr(c)
                elif c == ord(";"):
                    self._state = _State.CHUNK_EXTENSION_NAME
                elif c == _CR:
                    self._state = _State.CHUNK_SIZE_NEWLINE
                else:
                    return error
            case _State.CHUNK_EXTENSION_NAME:
                if _is_alnum(c) or c == _SP:
                    pass
                elif c == ord("="):
                    self._state = _State.CHUNK_EXTENSION_VALUE
                elif c == _CR:
                    self._state = _State.CHUNK_SIZE_NEWLINE
                else:
                    return error
            case _State.CHUNK_EXTENSION_VALUE:
                if _is_alnum(c) or c == _SP:
                    pass
                elif c == _CR:
                    self._state = _State.CHUNK_SIZE_NEWLINE
                else:
                    return error
            case _State.CHUNK_SIZE_NEWLINE:
                if c != _LF:
                    return error
                self._chunk_size = _strtol(self._chunk_size_text, 16)
                self._chunk_size_text = ""
                if self._chunk_size == 0:
                    self._state = _State.CHUNK_SIZE_NEWLINE_2
                else:
                    self._state = _State.CHUNK_DATA
            case _State.CHUNK_SIZE_NEWLINE_2:
                if c == _CR:
                    self._state = _State.CHUNK_SIZE_NEWLINE_3
                elif _is_alpha(c):
                    self._state = _State.CHUNK_TRAILER_NAME
                else:
                    return error
            case _State.CHUNK_SIZE_NEWLINE_3:
                return ParseResult.COMPLETED if c == _LF else error
            case _State.CHUNK_TRAILER_NAME:
                if _is_alnum(c):
                    pass
                elif c == ord(":"):
                    self._state = _State.CHUNK_TRAILER_VALUE
                else:
                    return error
            case _State.CHUNK_TRAILER_VALUE:
                if _is_alnum(c) or c == _SP:
                    pass
                elif c == _CR:
                    self._state = _State.CHUNK_SIZE_NEWLINE
                else:
                    return error
            case _State.CHUNK_DATA:
                resp.content.append(c)
                self._chunk_size -= 1
                if self._chunk_size == 0:
                    self._state = _State.CHUNK_DATA_NEWLINE_1
            case _State.CHUNK_DATA_NEWLINE_1:
                if c != _CR:
                    return error
                self._state = _State.CHUNK_DATA_NEWLINE_2
            case _State.CHUNK_DATA_NEWLINE_2:
                if c != _LF:
                    return error
                self._state = _State.CHUNK_SIZE
            case _:
                return error
        return None

    def _header_finished(self, header: HeaderItem) -> None:
        name = header.name.lower()
        if name == "content-length":
            self._content_size = _strtol(header.value, 10)
        elif name == "transfer-encoding" and header.value.lower() == "chunked":
            self._chunked = True

    @staticmethod
    def _decide_keep_alive(resp: Response) -> None:
        connection = next(
            (h for h in resp.headers if h.name.lower() == "connection"), None
        )
        if connection is not None:
            resp.keep_alive = connection.value.lower() == "keep-alive"
        elif resp.version_major > 1 or (
            resp.version_major == 1 and resp.version_minor == 1
        ):
            resp.keep_alive = True