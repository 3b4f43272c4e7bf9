"""YAD rows — a named, unordered set of uniquely named keys.

Wire layout:

    0xF1 | name (0x60|width, length, utf-8) | key chunk* | 0xF2

Key order on the wire carries no meaning.  When two keys share a name,
the one inserted (or decoded) last wins.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Union

from ._constants import ROW_END, ROW_NAME, ROW_START
from ._errors import ERR_BOUNDARY, ERR_TYPE, YadError
from ._key import Key
from ._names import decode_name, encode_name
from ._segment import split_keys

logger = logging.getLogger(__name__)


class Row:
    """A named mapping of key name → Key.

    `keys` may be an iterable of Key objects or a mapping.  Mapping values
    that are not Key objects are wrapped as Key(mapping_key, value):

        >>> Row("user", {"id": 42, "name": "Johan"})["id"].value
        Value.unsigned(42, width=1)
    """

    def __init__(self, name: str,
                 keys: Union[Mapping[str, Any], Iterable[Key], None] = None) -> None:
        if not isinstance(name, str):
            raise YadError(ERR_TYPE, "row name must be a string")
        self._name = name
        self._keys: Dict[str, Key] = {}
        if keys is None:
            return
        if isinstance(keys, Mapping):
            for k, v in keys.items():
                if isinstance(v, Key) and v.name != k:
                    raise YadError(ERR_TYPE, "mapping key {!r} holds Key {!r}".format(k, v.name))
                self.insert(v if isinstance(v, Key) else Key(k, v))
        else:
            for key in keys:
                if not isinstance(key, Key):
                    raise YadError(ERR_TYPE, "row entries must be Key objects")
                self.insert(key)

    # ── Mapping behaviour ────────────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    @property
    def keys(self) -> Mapping[str, Key]:
        return MappingProxyType(self._keys)

    def insert(self, key: Key) -> None:
        if key.name in self._keys:
            logger.debug("row %r: key %r overwritten", self.name, key.name)
        self._keys[key.name] = key

    def set(self, name: str, value: Any) -> Key:
        key = Key(name, value)
        self.insert(key)
        return key

    def get(self, name: str) -> Optional[Key]:
        return self._keys.get(name)

    def remove(self, name: str) -> Optional[Key]:
        return self._keys.pop(name, None)

    def __getitem__(self, name: str) -> Key:
        return self._keys[name]

    def __contains__(self, name: object) -> bool:
        return name in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def to_python(self) -> Dict[str, Any]:
        return {name: key.value.to_python() for name, key in self._keys.items()}

    # ── Codec ────────────────────────────────────────────────

    def encode(self) -> bytes:
        parts = [bytes([ROW_START]), encode_name(self.name, ROW_NAME)]
        for key in self._keys.values():
            parts.append(key.encode())
        parts.append(bytes([ROW_END]))
        return b"".join(parts)

    @classmethod
    def decode(cls, chunk: bytes) -> "Row":
        """Decode one complete row chunk, sentinels included."""
        if len(chunk) < 2 or chunk[0] != ROW_START or chunk[-1] != ROW_END:
            raise YadError(ERR_BOUNDARY, "row chunk missing start or end sentinel")
        body = chunk[:-1]
        name, off = decode_name(body, 1, ROW_NAME)
        row = cls(name)
        for raw_key in split_keys(body, off):
            row.insert(Key.decode(raw_key))
        logger.debug("decoded row %r with %d keys", name, len(row))
        return row

    # ── Dunder ───────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return self.name == other.name and self._keys == other._keys

    __hash__ = None

    def __repr__(self) -> str:
        return "Row({!r}, [{}])".format(self.name, ", ".join(repr(k) for k in self._keys.values()))
