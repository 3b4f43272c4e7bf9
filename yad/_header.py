"""Header byte and length-field codec.

A header byte packs a type nibble (high) and a width nibble (low).  For
numbers the width is the payload size; for strings and arrays it is the
size of the big-endian count that follows the header.
"""

from __future__ import annotations

import sys
from typing import Tuple

from ._constants import (
    BOOL_FALSE,
    BOOL_TRUE,
    COLLECTION_TYPES,
    NUMERIC_TYPES,
    TYPE_BOOL,
    UINT64_MAX,
    WIDTH_BYTES,
    WIDTH_EIGHT,
    WIDTH_FOUR,
    WIDTH_ONE,
    WIDTH_TWO,
    WIDTH_ZERO,
)
from ._errors import (
    ERR_EMPTY,
    ERR_HEADER,
    ERR_LENGTH_OVERFLOW,
    ERR_TRUNCATED,
    YadError,
)

_VALUE_TYPES = NUMERIC_TYPES + COLLECTION_TYPES


def pack_header(type_tag: int, width_tag: int) -> int:
    return type_tag | width_tag


def unpack_header(byte: int) -> Tuple[int, int]:
    """Split a value header into (type nibble, width nibble).

    Booleans are matched on the full byte before anything else, because
    0x80/0x81 share the high nibble with the bool family but do not carry
    a width.
    """
    if byte == BOOL_TRUE or byte == BOOL_FALSE:
        return TYPE_BOOL, WIDTH_ZERO

    type_tag = byte & 0xF0
    width_tag = byte & 0x0F
    if type_tag not in _VALUE_TYPES:
        raise YadError(ERR_HEADER, "unknown type in header 0x{:02x}".format(byte))
    if width_tag not in WIDTH_BYTES:
        raise YadError(ERR_HEADER, "unknown width in header 0x{:02x}".format(byte))
    if type_tag in NUMERIC_TYPES and width_tag == WIDTH_ZERO:
        raise YadError(ERR_HEADER, "numeric header 0x{:02x} has no width".format(byte))
    return type_tag, width_tag


def width_bytes(width_tag: int) -> int:
    """Byte count behind a width nibble (nibble 3 → 4 bytes, 4 → 8)."""
    try:
        return WIDTH_BYTES[width_tag]
    except KeyError:
        raise YadError(ERR_HEADER, "unknown width nibble {}".format(width_tag))


# ── Length fields ─────────────────────────────────────────────

def choose_width(count: int) -> int:
    """Return the smallest width nibble able to hold `count`.

    Zero has no representation: the format never encodes an empty string
    or an empty array.
    """
    if count <= 0:
        raise YadError(ERR_EMPTY, "collection of length zero")
    if count <= 0xFF:
        return WIDTH_ONE
    if count <= 0xFFFF:
        return WIDTH_TWO
    if count <= 0xFFFFFFFF:
        return WIDTH_FOUR
    if count <= UINT64_MAX:
        return WIDTH_EIGHT
    raise YadError(ERR_LENGTH_OVERFLOW, "length {} exceeds 64 bits".format(count))


def encode_length(count: int, width_tag: int) -> bytes:
    n = width_bytes(width_tag)
    if n == 0:
        raise YadError(ERR_EMPTY, "zero-width length field")
    if count < 0 or count >= 1 << (8 * n):
        raise YadError(ERR_LENGTH_OVERFLOW,
                       "length {} does not fit {} bytes".format(count, n))
    return count.to_bytes(n, "big")


def decode_length(buf: bytes, off: int, width_tag: int) -> Tuple[int, int]:
    """Read a big-endian count of `width_tag` size at `off`.

    Returns (count, offset after the field).
    """
    n = width_bytes(width_tag)
    if off + n > len(buf):
        raise YadError(ERR_TRUNCATED, "truncated length field")
    count = int.from_bytes(buf[off:off + n], "big")
    if count > sys.maxsize:
        raise YadError(ERR_LENGTH_OVERFLOW,
                       "length {} exceeds platform size".format(count))
    return count, off + n
