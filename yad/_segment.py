"""Splitting a flat buffer into row and key chunks.

Two strategies live here.

`segment()` is the plain sentinel scan: it cuts wherever it sees a start
or end byte.  It does not know about payloads, so a string that happens
to contain 0xF3 or 0xF4 will split a key in the wrong place.  It is kept
for inspecting raw dumps and for buffers known to be sentinel-clean.

`split_keys()` and `split_rows()` are what the decoders use.  They walk
the same wire format but step over each name and value by its declared
length, so payload bytes are never read as sentinels.  Anything between
chunks other than a start sentinel is rejected.
"""

from __future__ import annotations

from typing import List

from ._constants import KEY_END, KEY_NAME, KEY_START, ROW_END, ROW_NAME, ROW_START
from ._errors import ERR_BOUNDARY, ERR_TRUNCATED, YadError
from ._names import skip_name
from ._value import skip_value


def segment(data: bytes, start: int, end: int) -> List[bytes]:
    """Cut `data` into [start ... end] chunks by scanning for sentinel bytes.

    A new start byte discards any unterminated chunk in progress; bytes
    outside a chunk are ignored; a trailing unterminated chunk is dropped.
    """
    result: List[bytes] = []
    current = bytearray()
    inside = False
    for b in data:
        if b == start:
            current = bytearray([b])
            inside = True
        elif b == end and inside:
            current.append(b)
            result.append(bytes(current))
            current = bytearray()
            inside = False
        elif inside:
            current.append(b)
    return result


def segment_keys(data: bytes) -> List[bytes]:
    return segment(data, KEY_START, KEY_END)


def segment_rows(data: bytes) -> List[bytes]:
    return segment(data, ROW_START, ROW_END)


# ── Length-aware walkers ──────────────────────────────────────

def _skip_key(buf: bytes, off: int) -> int:
    """`off` points at KEY_START; return the offset just past KEY_END."""
    off = skip_name(buf, off + 1, KEY_NAME)
    off = skip_value(buf, off)
    if off >= len(buf):
        raise YadError(ERR_TRUNCATED, "key missing end sentinel")
    if buf[off] != KEY_END:
        raise YadError(ERR_BOUNDARY, "expected key end sentinel at offset {}".format(off))
    return off + 1


def split_keys(buf: bytes, off: int = 0) -> List[bytes]:
    """Split buf[off:] into complete key chunks.  The whole tail must be keys."""
    chunks: List[bytes] = []
    while off < len(buf):
        if buf[off] != KEY_START:
            raise YadError(ERR_BOUNDARY,
                           "expected key start sentinel at offset {}, got 0x{:02x}".format(off, buf[off]))
        end = _skip_key(buf, off)
        chunks.append(bytes(buf[off:end]))
        off = end
    return chunks


def split_rows(buf: bytes, off: int = 0) -> List[bytes]:
    """Split buf[off:] into complete row chunks.  The whole tail must be rows."""
    chunks: List[bytes] = []
    while off < len(buf):
        if buf[off] != ROW_START:
            raise YadError(ERR_BOUNDARY,
                           "expected row start sentinel at offset {}, got 0x{:02x}".format(off, buf[off]))
        start = off
        off = skip_name(buf, off + 1, ROW_NAME)
        while True:
            if off >= len(buf):
                raise YadError(ERR_TRUNCATED, "row missing end sentinel")
            if buf[off] == ROW_END:
                off += 1
                break
            if buf[off] != KEY_START:
                raise YadError(ERR_BOUNDARY,
                               "unexpected byte 0x{:02x} inside row at offset {}".format(buf[off], off))
            off = _skip_key(buf, off)
        chunks.append(bytes(buf[start:off]))
    return chunks
