"""YAD keys — a name bound to one value.

Wire layout:

    0xF3 | name (0x70|width, length, utf-8) | value | 0xF4
"""

from __future__ import annotations

from typing import Any

from ._constants import KEY_END, KEY_NAME, KEY_START
from ._errors import ERR_BOUNDARY, ERR_TYPE, YadError
from ._names import decode_name, encode_name
from ._value import Value, decode_value, encode_value


class Key:
    """A named value.  Plain Python values are converted with Value.from_python."""

    __slots__ = ("_name", "value")

    def __init__(self, name: str, value: Any) -> None:
        if not isinstance(name, str):
            raise YadError(ERR_TYPE, "key name must be a string")
        self._name = name
        self.value = Value.from_python(value)

    @property
    def name(self) -> str:
        """Fixed at construction; rows index keys by it."""
        return self._name

    def encode(self) -> bytes:
        return b"".join([
            bytes([KEY_START]),
            encode_name(self.name, KEY_NAME),
            encode_value(self.value),
            bytes([KEY_END]),
        ])

    @classmethod
    def decode(cls, chunk: bytes) -> "Key":
        """Decode one complete key chunk, sentinels included."""
        if len(chunk) < 2 or chunk[0] != KEY_START or chunk[-1] != KEY_END:
            raise YadError(ERR_BOUNDARY, "key chunk missing start or end sentinel")
        body = chunk[:-1]
        name, off = decode_name(body, 1, KEY_NAME)
        value, off = decode_value(body, off)
        if off != len(body):
            raise YadError(ERR_BOUNDARY, "trailing bytes after key value")
        return cls(name, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return self.name == other.name and self.value == other.value

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return "Key({!r}, {!r})".format(self.name, self.value)
