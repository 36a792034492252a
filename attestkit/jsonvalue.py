"""A small dynamically typed JSON value."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum, auto
from typing import Any

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def json_escape(text: str) -> str:
    """Escape quotes, backslashes and the common control characters."""
    return "".join(_ESCAPES.get(ch, ch) for ch in text)


class JSONType(Enum):
    """The kind of value a :class:`JSON` holds."""

    NULL = auto()
    OBJECT = auto()
    ARRAY = auto()
    STRING = auto()
    FLOATING = auto()
    INTEGRAL = auto()
    BOOLEAN = auto()


class JSON:
    """A JSON value: null, object, array, string, float, integer or boolean.

    Built from plain Python values; nested dicts and lists are converted
    recursively. Copying another JSON makes a deep copy.
    """

    __slots__ = ("_type", "_value")

    def __init__(self, value: Any = None) -> None:
        self._type, self._value = self._convert(value)

    @staticmethod
    def _convert(value: Any) -> tuple[JSONType, Any]:
        if isinstance(value, JSON):
            return value._type, JSON._copy_payload(value)
        if value is None:
            return JSONType.NULL, None
        if isinstance(value, bool):
            return JSONType.BOOLEAN, value
        if isinstance(value, int):
            return JSONType.INTEGRAL, value
        if isinstance(value, float):
            return JSONType.FLOATING, value
        if isinstance(value, str):
            return JSONType.STRING, value
        if isinstance(value, Mapping):
            return JSONType.OBJECT, {str(k): JSON(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return JSONType.ARRAY, [JSON(v) for v in value]
        raise TypeError(f"cannot represent {type(value).__name__} as JSON")

    @staticmethod
    def _copy_payload(other: JSON) -> Any:
        if other._type is JSONType.OBJECT:
            return {k: JSON(v) for k, v in other._value.items()}
        if other._type is JSONType.ARRAY:
            return [JSON(v) for v in other._value]
        return other._value

    @property
    def json_type(self) -> JSONType:
        """The kind of value held."""
        return self._type

    def _set_type(self, kind: JSONType) -> None:
        if kind is self._type:
            return
        self._type = kind
        self._value = {
            JSONType.NULL: None,
            JSONType.OBJECT: {},
            JSONType.ARRAY: [],
            JSONType.STRING: "",
            JSONType.FLOATING: 0.0,
            JSONType.INTEGRAL: 0,
            JSONType.BOOLEAN: False,
        }[kind]

    def to_string(self) -> str:
        """The escaped string, or "" when this is not a string."""
        return json_escape(self._value) if self._type is JSONType.STRING else ""

    def to_int(self) -> int:
        """The integer, or 0 when this is not an integer."""
        return self._value if self._type is JSONType.INTEGRAL else 0

    def to_float(self) -> float:
        """The float, or 0.0 when this is not a float."""
        return self._value if self._type is JSONType.FLOATING else 0.0

    def to_bool(self) -> bool:
        """The boolean, or False when this is not a boolean."""
        return self._value if self._type is JSONType.BOOLEAN else False

    def is_null(self) -> bool:
        """True when this is null."""
        return self._type is JSONType.NULL

    def has_key(self, key: str) -> bool:
        """True when this is an object holding ``key``."""
        return self._type is JSONType.OBJECT and key in self._value

    def length(self) -> int:
        """Number of array elements, or -1 when this is not an array."""
        return len(self._value) if self._type is JSONType.ARRAY else -1

    def size(self) -> int:
        """Number of members of an object or array, otherwise -1."""
        if self._type in (JSONType.OBJECT, JSONType.ARRAY):
            return len(self._value)
        return -1

    def get(self, key: str | int) -> JSON:
        """Look up a member or element; a missing one reads as null."""
        if isinstance(key, str):
            if self._type is JSONType.OBJECT and key in self._value:
                return self._value[key]
        elif self._type is JSONType.ARRAY and 0 <= key < len(self._value):
            return self._value[key]
        return JSON()

    def append(self, value: Any) -> None:
        """Append to this array, turning the value into an array first."""
        self._set_type(JSONType.ARRAY)
        self._value.append(JSON(value))

    def __getitem__(self, key: str | int) -> JSON:
        if isinstance(key, str):
            if self._type is not JSONType.OBJECT:
                raise KeyError(key)
            return self._value[key]
        if self._type is not JSONType.ARRAY:
            raise IndexError(key)
        return self._value[key]

    def __setitem__(self, key: str | int, value: Any) -> None:
        if isinstance(key, str):
            self._set_type(JSONType.OBJECT)
            self._value[key] = JSON(value)
            return
        if key < 0:
            raise IndexError(key)
        self._set_type(JSONType.ARRAY)
        while len(self._value) <= key:
            self._value.append(JSON())
        self._value[key] = JSON(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JSON):
            return NotImplemented
        return self._type is other._type and self._value == other._value

    def __repr__(self) -> str:
        return f"JSON({self._type.name}, {self._value!r})"