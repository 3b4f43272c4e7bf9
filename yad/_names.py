"""Row and key names.

A name is written exactly like a STRING value except that the type nibble
is replaced with a marker (0x60 for rows, 0x70 for keys), so a name can
never be mistaken for a value when walking a chunk.
"""

from __future__ import annotations

from typing import Tuple

from ._constants import WIDTH_BYTES, WIDTH_ZERO
from ._errors import ERR_BOUNDARY, ERR_EMPTY, ERR_HEADER, ERR_TRUNCATED, ERR_TYPE, ERR_UTF8, YadError
from ._header import choose_width, decode_length, encode_length
from ._value import validate_utf8


def encode_name(name: str, marker: int) -> bytes:
    if not isinstance(name, str):
        raise YadError(ERR_TYPE, "name must be a string")
    try:
        raw = name.encode("utf-8")
    except UnicodeEncodeError:
        raise YadError(ERR_UTF8, "name is not encodable as utf-8")
    if not raw:
        raise YadError(ERR_EMPTY, "name of length zero")
    width_tag = choose_width(len(raw))
    return bytes([marker | width_tag]) + encode_length(len(raw), width_tag) + raw


def _name_span(buf: bytes, off: int, marker: int) -> Tuple[int, int]:
    """Locate the name bytes at `off`.  Returns (payload start, payload end)."""
    if off >= len(buf):
        raise YadError(ERR_TRUNCATED, "truncated name header")
    header = buf[off]
    if header & 0xF0 != marker:
        raise YadError(ERR_BOUNDARY,
                       "expected name marker 0x{:02x}, got 0x{:02x}".format(marker, header))
    width_tag = header & 0x0F
    if width_tag not in WIDTH_BYTES:
        raise YadError(ERR_HEADER, "unknown width in name header 0x{:02x}".format(header))
    if width_tag == WIDTH_ZERO:
        raise YadError(ERR_EMPTY, "name of length zero")
    n, off = decode_length(buf, off + 1, width_tag)
    if n == 0:
        raise YadError(ERR_EMPTY, "name of length zero")
    if off + n > len(buf):
        raise YadError(ERR_TRUNCATED, "truncated name")
    return off, off + n


def decode_name(buf: bytes, off: int, marker: int) -> Tuple[str, int]:
    start, end = _name_span(buf, off, marker)
    return validate_utf8(bytes(buf[start:end])), end


def skip_name(buf: bytes, off: int, marker: int) -> int:
    return _name_span(buf, off, marker)[1]
