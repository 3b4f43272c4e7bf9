"""Float bit-pattern conversion for the four FLOAT widths.

Floats travel as raw bit patterns.  A decoded value keeps its bits, so
re-encoding never passes through a wider float and cannot drift.

    1 byte  — E4M3FN minifloat: 1 sign, 4 exponent (bias 7), 3 mantissa.
              No infinities; only S.1111.111 is NaN, max finite is 448.
              Out-of-range input saturates to ±448.
    2 bytes — IEEE binary16
    4 bytes — IEEE binary32
    8 bytes — IEEE binary64
"""

from __future__ import annotations

import math
import struct

from ._errors import ERR_RANGE, ERR_TYPE, YadError

_E4M3_BIAS = 7
_E4M3_MAX_BITS = 0x7E  # 0 1111 110 → 1.75 * 2**8 = 448
_E4M3_MAX = 448.0
_E4M3_NAN = 0x7F

_STRUCT_FORMATS = {2: ">e", 4: ">f", 8: ">d"}


def float_to_e4m3(x: float) -> int:
    """Round a Python float to the nearest E4M3FN bit pattern (ties to even).

    Infinities and magnitudes beyond 448 clamp to ±448.
    """
    sign = 0x80 if math.copysign(1.0, x) < 0 else 0x00
    if math.isnan(x):
        return sign | _E4M3_NAN

    a = abs(x)
    if a >= _E4M3_MAX:
        return sign | _E4M3_MAX_BITS
    if a < 2.0 ** (1 - _E4M3_BIAS):
        # Subnormal range: steps of 2**-9.  A result of 8 carries into the
        # smallest normal, which the bit layout handles on its own.
        bits = round(a * 512)
    else:
        frac, exp = math.frexp(a)
        mantissa = round((frac * 2 - 1) * 8)
        bits = ((exp - 1 + _E4M3_BIAS) << 3) + mantissa
    return sign | min(bits, _E4M3_MAX_BITS)


def e4m3_to_float(bits: int) -> float:
    sign = -1.0 if bits & 0x80 else 1.0
    exp = (bits >> 3) & 0x0F
    mantissa = bits & 0x07
    if bits & 0x7F == _E4M3_NAN:
        return math.nan
    if exp == 0:
        return sign * (mantissa / 8) * 2.0 ** (1 - _E4M3_BIAS)
    return sign * (1 + mantissa / 8) * 2.0 ** (exp - _E4M3_BIAS)


def float_to_bits(x: float, size: int) -> int:
    """Encode `x` as the raw bit pattern of a `size`-byte float."""
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        raise YadError(ERR_TYPE, "float expected, got {}".format(type(x).__name__))
    try:
        x = float(x)
    except OverflowError:
        raise YadError(ERR_RANGE, "integer too large for a float")
    if size == 1:
        return float_to_e4m3(x)
    try:
        fmt = _STRUCT_FORMATS[size]
    except KeyError:
        raise YadError(ERR_RANGE, "no {}-byte float format".format(size))
    try:
        raw = struct.pack(fmt, x)
    except (OverflowError, struct.error):
        raise YadError(ERR_RANGE, "{!r} does not fit a {}-byte float".format(x, size))
    return int.from_bytes(raw, "big")


def bits_to_float(bits: int, size: int) -> float:
    if size == 1:
        return e4m3_to_float(bits)
    return struct.unpack(_STRUCT_FORMATS[size], bits.to_bytes(size, "big"))[0]
