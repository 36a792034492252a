"""A lenient JSON reader that builds :class:`~attestkit.jsonvalue.JSON` values.

The reader never rejects a document outright. Malformed parts turn into
null values, empty arrays or empty strings, and reading stops where the
input stops making sense. Only a number with no usable digits raises
ValueError.
"""

from __future__ import annotations

import re

from attestkit.jsonvalue import JSON

_SPACE = " \t\n\v\f\r"
_NUMBER_END = _SPACE + ",]}"
_DIGITS = "0123456789"
_HEX = "0123456789abcdefABCDEF"
_END = "\0"
_SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}
_INT_PREFIX = re.compile(r"-?\d+")
_FLOAT_PREFIX = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")


def _leading_int(text: str) -> int:
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"no integer in {text!r}")
    return int(match.group())


def _leading_float(text: str) -> float:
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"no number in {text!r}")
    return float(match.group())


class _Reader:
    """Walks over the text; reading past its end yields NUL characters."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def char(self, pos: int | None = None) -> str:
        pos = self.pos if pos is None else pos
        return self.text[pos] if pos < len(self.text) else _END

    def take(self) -> str:
        ch = self.char()
        self.pos += 1
        return ch

    def skip_space(self) -> None:
        while self.char() in _SPACE and self.char() != _END:
            self.pos += 1

    def value(self) -> JSON:
        self.skip_space()
        ch = self.char()
        if ch == "[":
            return self.array()
        if ch == "{":
            return self.object()
        if ch == '"':
            return self.string()
        if ch in ("t", "f"):
            return self.boolean()
        if ch == "n":
            return self.null()
        if ch in _DIGITS or ch == "-":
            return self.number()
        return JSON()

    def object(self) -> JSON:
        result = JSON({})
        self.pos += 1
        self.skip_space()
        if self.char() == "}":
            self.pos += 1
            return result
        while True:
            key = self.value()
            self.skip_space()
            if self.char() != ":":
                break
            self.pos += 1
            self.skip_space()
            member = self.value()
            result[key.to_string()] = member
            self.skip_space()
            ch = self.char()
            if ch == ",":
                self.pos += 1
                continue
            if ch == "}":
                self.pos += 1
            break
        return result

    def array(self) -> JSON:
        result = JSON([])
        self.pos += 1
        self.skip_space()
        if self.char() == "]":
            self.pos += 1
            return result
        while True:
            result.append(self.value())
            self.skip_space()
            ch = self.char()
            if ch == ",":
                self.pos += 1
                continue
            if ch == "]":
                self.pos += 1
                return result
            return JSON([])

    def string(self) -> JSON:
        chars: list[str] = []
        self.pos += 1
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch == '"':
                break
            if ch == "\\":
                self.pos += 1
                escaped = self.char()
                if escaped in _SIMPLE_ESCAPES:
                    chars.append(_SIMPLE_ESCAPES[escaped])
                elif escaped == "u":
                    digits = "".join(self.char(self.pos + i) for i in range(1, 5))
                    if not all(d in _HEX and d != _END for d in digits):
                        return JSON("")
                    chars.append("\\u" + digits)
                    self.pos += 4
                else:
                    chars.append("\\")
            else:
                chars.append(ch)
            self.pos += 1
        self.pos += 1
        return JSON("".join(chars))

    def number(self) -> JSON:
        mantissa: list[str] = []
        is_double = False
        while True:
            ch = self.take()
            if ch == "-" or (ch in _DIGITS and ch != _END):
                mantissa.append(ch)
            elif ch == ".":
                mantissa.append(ch)
                is_double = True
            else:
                break
        exponent_text: str | None = None
        exponent = 0
        if ch in ("e", "E"):
            exponent_chars: list[str] = []
            ch = self.take()
            if ch in ("+", "-"):
                if ch == "-":
                    exponent_chars.append(ch)
                ch = self.take()
            while ch in _DIGITS and ch != _END:
                exponent_chars.append(ch)
                ch = self.take()
            if ch not in _NUMBER_END or ch == _END:
                return JSON()
            exponent_text = "".join(exponent_chars)
            exponent = _leading_int(exponent_text)
        elif ch not in _NUMBER_END or ch == _END:
            return JSON()
        self.pos -= 1

        text = "".join(mantissa)
        if is_double:
            return JSON(_leading_float(text) * 10.0**exponent)
        if exponent_text is not None:
            return JSON(float(_leading_int(text)) * 10.0**exponent)
        return JSON(_leading_int(text))

    def boolean(self) -> JSON:
        if self.text.startswith("true", self.pos):
            self.pos += 4
            return JSON(True)
        if self.text.startswith("false", self.pos):
            self.pos += 5
            return JSON(False)
        return JSON()

    def null(self) -> JSON:
        if self.text.startswith("null", self.pos):
            self.pos += 4
        return JSON()


def load(text: str) -> JSON:
    """Read the first JSON value in ``text``.

    Object keys are stored in their escaped form, "\\uXXXX" escapes are kept
    as written, and a number must be followed by whitespace, ',', ']' or '}'
    to count as a number.
    """
    return _Reader(text).value()