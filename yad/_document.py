"""YAD documents — version stamp plus an unordered set of named rows.

Wire layout:

    0xF0 major minor patch beta | row chunk*

The document is a strict ownership tree (document → rows → keys → one
value each).  Duplicate row names resolve last-writer-wins, the same as
duplicate keys inside a row.
"""

from __future__ import annotations

import logging
from collections import namedtuple
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Union

from ._constants import CURRENT_VERSION, VERSION_HEADER, VERSION_SIZE
from ._errors import ERR_RANGE, ERR_TYPE, ERR_VERSION, YadError
from ._row import Row
from ._segment import split_rows

logger = logging.getLogger(__name__)


class Version(namedtuple("Version", "major minor patch beta")):
    """Format version stamp.  beta == 0 marks a stable release.

    Tuple ordering gives the lexicographic (major, minor, patch, beta)
    comparison for free.
    """

    __slots__ = ()

    def __new__(cls, major: int, minor: int, patch: int, beta: int = 0) -> "Version":
        for field in (major, minor, patch, beta):
            if isinstance(field, bool) or not isinstance(field, int):
                raise YadError(ERR_TYPE, "version fields must be integers")
            if not 0 <= field <= 0xFF:
                raise YadError(ERR_RANGE, "version field {} outside 0..255".format(field))
        return super().__new__(cls, major, minor, patch, beta)

    @property
    def is_stable(self) -> bool:
        return self.beta == 0

    def serialize(self) -> bytes:
        return bytes([VERSION_HEADER, self.major, self.minor, self.patch, self.beta])

    @classmethod
    def deserialize(cls, data: bytes) -> "Version":
        """Read the 5-byte stamp at the start of `data`."""
        if len(data) < VERSION_SIZE:
            raise YadError(ERR_VERSION, "version stamp needs {} bytes".format(VERSION_SIZE))
        if data[0] != VERSION_HEADER:
            raise YadError(ERR_VERSION, "bad version header 0x{:02x}".format(data[0]))
        return cls(data[1], data[2], data[3], data[4])

    def __str__(self) -> str:
        base = "{}.{}.{}".format(self.major, self.minor, self.patch)
        if self.beta:
            return "{}-beta.{}".format(base, self.beta)
        return base


class Document:
    """Root container: a version and a mapping of row name → Row."""

    def __init__(self, version: Optional[Version] = None,
                 rows: Union[Mapping[str, Row], Iterable[Row], None] = None) -> None:
        self.version = Version(*CURRENT_VERSION) if version is None else version
        if not isinstance(self.version, Version):
            raise YadError(ERR_TYPE, "version must be a Version")
        self._rows: Dict[str, Row] = {}
        if rows is None:
            return
        if isinstance(rows, Mapping):
            rows = rows.values()
        for row in rows:
            self.add_row(row)

    @classmethod
    def from_python(cls, data: Mapping[str, Mapping[str, Any]],
                    version: Optional[Version] = None) -> "Document":
        """Build from {row name: {key name: python value}}."""
        if not isinstance(data, Mapping):
            raise YadError(ERR_TYPE, "document data must be a mapping")
        doc = cls(version)
        for name, keys in data.items():
            if not isinstance(keys, Mapping):
                raise YadError(ERR_TYPE, "row {!r} must be a mapping".format(name))
            doc.add_row(Row(name, keys))
        return doc

    def to_python(self) -> Dict[str, Dict[str, Any]]:
        return {name: row.to_python() for name, row in self._rows.items()}

    # ── Row access ───────────────────────────────────────────

    @property
    def rows(self) -> Mapping[str, Row]:
        return MappingProxyType(self._rows)

    def add_row(self, row: Row) -> None:
        if not isinstance(row, Row):
            raise YadError(ERR_TYPE, "document entries must be Row objects")
        if row.name in self._rows:
            logger.debug("row %r overwritten", row.name)
        self._rows[row.name] = row

    def get_row(self, name: str) -> Optional[Row]:
        return self._rows.get(name)

    def remove_row(self, name: str) -> Optional[Row]:
        return self._rows.pop(name, None)

    def __getitem__(self, name: str) -> Row:
        return self._rows[name]

    def __contains__(self, name: object) -> bool:
        return name in self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[str]:
        return iter(self._rows)

    # ── Codec ────────────────────────────────────────────────

    def encode(self) -> bytes:
        parts = [self.version.serialize()]
        for row in self._rows.values():
            parts.append(row.encode())
        return b"".join(parts)

    @classmethod
    def decode(cls, data: bytes) -> "Document":
        data = bytes(data)
        doc = cls(Version.deserialize(data))
        for raw_row in split_rows(data, VERSION_SIZE):
            doc.add_row(Row.decode(raw_row))
        logger.debug("decoded document v%s with %d rows", doc.version, len(doc))
        return doc

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self.version == other.version and self._rows == other._rows

    __hash__ = None

    def __repr__(self) -> str:
        return "Document(version={!r}, rows=[{}])".format(
            str(self.version), ", ".join(repr(r) for r in self._rows.values()))


def encode(document: Document) -> bytes:
    """Serialize a Document to YAD bytes."""
    if not isinstance(document, Document):
        raise YadError(ERR_TYPE, "encode() expects a Document")
    return document.encode()


def decode(data: bytes) -> Document:
    """Parse YAD bytes into a Document.  Fails as a whole or not at all."""
    return Document.decode(data)
