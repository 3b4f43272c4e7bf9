"""YAD values — the typed union and its recursive encode/decode.

A value is one of six variants:

    UINT    (0x10)  — unsigned integer, 1/2/4/8 bytes
    INT     (0x20)  — two's-complement integer, 1/2/4/8 bytes
    FLOAT   (0x30)  — E4M3 / binary16 / binary32 / binary64, kept as raw bits
    STRING  (0x40)  — non-empty UTF-8 text behind a 1/2/4/8-byte length
    ARRAY   (0x50)  — non-empty ordered list of values behind a count
    BOOL    (0x80)  — 0x80 false, 0x81 true; no payload

Encoding layout is header byte, optional big-endian length field, payload.
Decoding is a pure recursive descent over (buf, offset) pairs: every
function returns the value it read together with the offset just past it,
and nothing ever reads beyond len(buf).
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Tuple

from ._constants import (
    BOOL_FALSE,
    BOOL_TRUE,
    BYTES_WIDTH,
    MAX_DEPTH,
    NUMERIC_TYPES,
    TYPE_ARRAY,
    TYPE_BOOL,
    TYPE_FLOAT,
    TYPE_INT,
    TYPE_NAMES,
    TYPE_STRING,
    TYPE_UINT,
    WIDTH_ZERO,
)
from ._errors import (
    ERR_BOUNDARY,
    ERR_EMPTY,
    ERR_LIMIT_DEPTH,
    ERR_RANGE,
    ERR_TRUNCATED,
    ERR_TYPE,
    ERR_UTF8,
    YadError,
)
from ._floats import bits_to_float, float_to_bits
from ._header import (
    choose_width,
    decode_length,
    encode_length,
    pack_header,
    unpack_header,
    width_bytes,
)

_SIZES = (1, 2, 4, 8)


def _check_size(size: int) -> None:
    if size not in _SIZES:
        raise YadError(ERR_RANGE, "numeric width must be 1, 2, 4 or 8, got {!r}".format(size))


def _uint_fits(n: int, size: int) -> bool:
    return 0 <= n < 1 << (8 * size)


def _int_fits(n: int, size: int) -> bool:
    half = 1 << (8 * size - 1)
    return -half <= n < half


def _require_int(n: Any) -> int:
    # bool is an int subclass; True must not silently become 1.
    if isinstance(n, bool) or not isinstance(n, int):
        raise YadError(ERR_TYPE, "integer expected, got {}".format(type(n).__name__))
    return n


def validate_utf8(raw: bytes) -> str:
    try:
        return raw.decode("utf-8", errors="strict")
    except UnicodeDecodeError:
        raise YadError(ERR_UTF8, "invalid utf-8")


class Value:
    """One typed YAD value.

    Values are immutable and compare by (type, width, payload).  For
    floats the payload is the raw bit pattern, so two NaNs with the same
    bits are equal and 0.0 differs from -0.0.  Strings and arrays derive
    their length-field width from their content.

    Build values with the constructors rather than calling the class:

        >>> Value.unsigned(42, width=1)
        Value.unsigned(42, width=1)
        >>> Value.from_python([1, "two", True])
        Value.array([Value.unsigned(1, width=1), Value.string('two'), Value.boolean(True)])
    """

    __slots__ = ("_type", "_size", "_payload")

    def __init__(self, type_tag: int, size: int, payload: Any) -> None:
        self._type = type_tag
        self._size = size
        self._payload = payload

    # ── Constructors ─────────────────────────────────────────

    @classmethod
    def unsigned(cls, n: int, width: Optional[int] = None) -> "Value":
        """Unsigned integer; `width=None` picks the smallest that fits."""
        n = _require_int(n)
        if width is None:
            for width in _SIZES:
                if _uint_fits(n, width):
                    break
        _check_size(width)
        if not _uint_fits(n, width):
            raise YadError(ERR_RANGE, "{} does not fit a {}-byte uint".format(n, width))
        return cls(TYPE_UINT, width, n)

    @classmethod
    def signed(cls, n: int, width: Optional[int] = None) -> "Value":
        """Signed integer; `width=None` picks the smallest that fits."""
        n = _require_int(n)
        if width is None:
            for width in _SIZES:
                if _int_fits(n, width):
                    break
        _check_size(width)
        if not _int_fits(n, width):
            raise YadError(ERR_RANGE, "{} does not fit a {}-byte int".format(n, width))
        return cls(TYPE_INT, width, n)

    @classmethod
    def floating(cls, x: float, width: int = 8) -> "Value":
        """Float rounded to the `width`-byte format (1 = E4M3, 2 = half)."""
        _check_size(width)
        return cls(TYPE_FLOAT, width, float_to_bits(x, width))

    @classmethod
    def float_bits(cls, bits: int, width: int) -> "Value":
        """Float from an already-encoded bit pattern."""
        _check_size(width)
        bits = _require_int(bits)
        if not _uint_fits(bits, width):
            raise YadError(ERR_RANGE, "bit pattern wider than {} bytes".format(width))
        return cls(TYPE_FLOAT, width, bits)

    @classmethod
    def string(cls, s: str) -> "Value":
        if not isinstance(s, str):
            raise YadError(ERR_TYPE, "str expected, got {}".format(type(s).__name__))
        try:
            raw = s.encode("utf-8")
        except UnicodeEncodeError:
            # Lone surrogates cannot be written as UTF-8.
            raise YadError(ERR_UTF8, "string is not encodable as utf-8")
        return cls(TYPE_STRING, width_bytes(choose_width(len(raw))), s)

    @classmethod
    def boolean(cls, b: bool) -> "Value":
        if not isinstance(b, bool):
            raise YadError(ERR_TYPE, "bool expected, got {}".format(type(b).__name__))
        return cls(TYPE_BOOL, 0, b)

    @classmethod
    def array(cls, items: Iterable[Any], _depth: int = 0) -> "Value":
        """Ordered array; plain Python items go through `from_python`."""
        if _depth + 1 > MAX_DEPTH:
            raise YadError(ERR_LIMIT_DEPTH, "array nesting exceeds MAX_DEPTH")
        elems = []
        for item in items:
            elems.append(cls.from_python(item, _depth + 1))
        return cls(TYPE_ARRAY, width_bytes(choose_width(len(elems))), tuple(elems))

    @classmethod
    def from_python(cls, obj: Any, _depth: int = 0) -> "Value":
        """Map a native Python object onto the smallest matching variant.

        bool → BOOL, int ≥ 0 → UINT, int < 0 → INT, float → 8-byte FLOAT,
        str → STRING, list/tuple → ARRAY.  Values pass through untouched.
        """
        if isinstance(obj, Value):
            return obj
        # bool before int, same subclass trap as above
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, int):
            return cls.unsigned(obj) if obj >= 0 else cls.signed(obj)
        if isinstance(obj, float):
            return cls.floating(obj, 8)
        if isinstance(obj, str):
            return cls.string(obj)
        if isinstance(obj, (list, tuple)):
            return cls.array(obj, _depth)
        raise YadError(ERR_TYPE, "unsupported type: {}".format(type(obj).__name__))

    # ── Introspection ────────────────────────────────────────

    @property
    def type(self) -> int:
        return self._type

    @property
    def type_name(self) -> str:
        return TYPE_NAMES[self._type]

    @property
    def width(self) -> int:
        """Payload bytes for numbers, length-field bytes for strings/arrays."""
        return self._size

    @property
    def payload(self) -> Any:
        return self._payload

    @property
    def is_numeric(self) -> bool:
        return self._type in NUMERIC_TYPES

    def header(self) -> int:
        if self._type == TYPE_BOOL:
            return BOOL_TRUE if self._payload else BOOL_FALSE
        return pack_header(self._type, BYTES_WIDTH[self._size])

    # ── Accessors ────────────────────────────────────────────

    def _expect(self, *types: int) -> None:
        if self._type not in types:
            wanted = "/".join(TYPE_NAMES[t] for t in types)
            raise YadError(ERR_TYPE, "value is {}, not {}".format(self.type_name, wanted))

    def as_int(self) -> int:
        self._expect(TYPE_UINT, TYPE_INT)
        return self._payload

    def as_float(self) -> float:
        self._expect(TYPE_FLOAT)
        return bits_to_float(self._payload, self._size)

    def as_str(self) -> str:
        self._expect(TYPE_STRING)
        return self._payload

    def as_bool(self) -> bool:
        self._expect(TYPE_BOOL)
        return self._payload

    def as_list(self) -> List["Value"]:
        self._expect(TYPE_ARRAY)
        return list(self._payload)

    def to_python(self) -> Any:
        """Plain Python equivalent; widths are dropped."""
        if self._type == TYPE_FLOAT:
            return self.as_float()
        if self._type == TYPE_ARRAY:
            return [item.to_python() for item in self._payload]
        return self._payload

    # ── Dunder ───────────────────────────────────────────────

    def _key(self) -> Tuple[int, int, Any]:
        return (self._type, self._size, self._payload)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        if self._type == TYPE_UINT:
            return "Value.unsigned({}, width={})".format(self._payload, self._size)
        if self._type == TYPE_INT:
            return "Value.signed({}, width={})".format(self._payload, self._size)
        if self._type == TYPE_FLOAT:
            return "Value.floating({!r}, width={})".format(self.as_float(), self._size)
        if self._type == TYPE_STRING:
            return "Value.string({!r})".format(self._payload)
        if self._type == TYPE_BOOL:
            return "Value.boolean({!r})".format(self._payload)
        return "Value.array([{}])".format(", ".join(repr(v) for v in self._payload))


# ── Encode ────────────────────────────────────────────────────

def encode_value(value: Any, depth: int = 0) -> bytes:
    """Encode one value (or a plain Python object) to bytes.

    Depth counts array nesting the same way decode does, so anything this
    function emits can be read back by decode_value.
    """
    value = Value.from_python(value)
    t = value.type

    if t == TYPE_BOOL:
        return bytes([value.header()])

    if t == TYPE_UINT or t == TYPE_INT:
        return bytes([value.header()]) + value.payload.to_bytes(
            value.width, "big", signed=(t == TYPE_INT))

    if t == TYPE_FLOAT:
        return bytes([value.header()]) + value.payload.to_bytes(value.width, "big")

    if t == TYPE_STRING:
        raw = value.payload.encode("utf-8")
        width_tag = choose_width(len(raw))
        return bytes([pack_header(TYPE_STRING, width_tag)]) + encode_length(len(raw), width_tag) + raw

    # TYPE_ARRAY
    if depth + 1 > MAX_DEPTH:
        raise YadError(ERR_LIMIT_DEPTH, "array nesting exceeds MAX_DEPTH")
    items = value.payload
    width_tag = choose_width(len(items))
    parts: List[bytes] = [bytes([pack_header(TYPE_ARRAY, width_tag)]),
                          encode_length(len(items), width_tag)]
    for item in items:
        parts.append(encode_value(item, depth + 1))
    return b"".join(parts)


# ── Decode ────────────────────────────────────────────────────

def _read_header(buf: bytes, off: int) -> Tuple[int, int, int]:
    if off >= len(buf):
        raise YadError(ERR_TRUNCATED, "truncated header")
    type_tag, width_tag = unpack_header(buf[off])
    return type_tag, width_tag, off + 1


def _read_count(buf: bytes, off: int, width_tag: int, what: str) -> Tuple[int, int]:
    if width_tag == WIDTH_ZERO:
        raise YadError(ERR_EMPTY, "{} of length zero".format(what))
    count, off = decode_length(buf, off, width_tag)
    if count == 0:
        raise YadError(ERR_EMPTY, "{} of length zero".format(what))
    return count, off


def decode_value(buf: bytes, off: int = 0, depth: int = 0) -> Tuple[Value, int]:
    """Decode one value from buf at offset.  Returns (value, next offset)."""
    type_tag, width_tag, off = _read_header(buf, off)

    if type_tag == TYPE_BOOL:
        return Value(TYPE_BOOL, 0, buf[off - 1] == BOOL_TRUE), off

    if type_tag in NUMERIC_TYPES:
        size = width_bytes(width_tag)
        if off + size > len(buf):
            raise YadError(ERR_TRUNCATED, "truncated {} payload".format(TYPE_NAMES[type_tag]))
        raw = buf[off:off + size]
        n = int.from_bytes(raw, "big", signed=(type_tag == TYPE_INT))
        return Value(type_tag, size, n), off + size

    if type_tag == TYPE_STRING:
        n, off = _read_count(buf, off, width_tag, "string")
        if off + n > len(buf):
            raise YadError(ERR_TRUNCATED, "truncated string payload")
        s = validate_utf8(buf[off:off + n])
        return Value(TYPE_STRING, width_bytes(choose_width(n)), s), off + n

    # TYPE_ARRAY
    if depth + 1 > MAX_DEPTH:
        raise YadError(ERR_LIMIT_DEPTH, "array nesting exceeds MAX_DEPTH")
    count, off = _read_count(buf, off, width_tag, "array")
    # Every element needs at least one byte; refuse impossible counts
    # before looping over them.
    if count > len(buf) - off:
        raise YadError(ERR_TRUNCATED, "array declares more elements than bytes remain")
    items = []
    for _ in range(count):
        item, off = decode_value(buf, off, depth + 1)
        items.append(item)
    return Value(TYPE_ARRAY, width_bytes(choose_width(count)), tuple(items)), off


def skip_value(buf: bytes, off: int = 0, depth: int = 0) -> int:
    """Return the offset just past the value at `off` without building it.

    Headers and lengths are validated exactly as in decode_value; string
    payloads are not UTF-8 checked here.
    """
    type_tag, width_tag, off = _read_header(buf, off)

    if type_tag == TYPE_BOOL:
        return off

    if type_tag in NUMERIC_TYPES:
        end = off + width_bytes(width_tag)
        if end > len(buf):
            raise YadError(ERR_TRUNCATED, "truncated {} payload".format(TYPE_NAMES[type_tag]))
        return end

    if type_tag == TYPE_STRING:
        n, off = _read_count(buf, off, width_tag, "string")
        if off + n > len(buf):
            raise YadError(ERR_TRUNCATED, "truncated string payload")
        return off + n

    if depth + 1 > MAX_DEPTH:
        raise YadError(ERR_LIMIT_DEPTH, "array nesting exceeds MAX_DEPTH")
    count, off = _read_count(buf, off, width_tag, "array")
    if count > len(buf) - off:
        raise YadError(ERR_TRUNCATED, "array declares more elements than bytes remain")
    for _ in range(count):
        off = skip_value(buf, off, depth + 1)
    return off


def value_from_bytes(data: bytes) -> Value:
    """Decode a buffer holding exactly one value."""
    value, end = decode_value(data, 0)
    if end != len(data):
        raise YadError(ERR_BOUNDARY, "trailing bytes after value")
    return value
