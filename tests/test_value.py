"""Unit tests for the value codec.

Organized by variant.  Golden byte vectors live in
conformance/conformance_vectors.json; these tests cover the constructors,
accessors and edge cases around them.
"""

from __future__ import annotations

import math
import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from yad import (
    ERR_BOUNDARY,
    ERR_EMPTY,
    ERR_HEADER,
    ERR_LIMIT_DEPTH,
    ERR_RANGE,
    ERR_TRUNCATED,
    ERR_TYPE,
    ERR_UTF8,
    MAX_DEPTH,
    TYPE_ARRAY,
    TYPE_FLOAT,
    TYPE_UINT,
    Value,
    YadError,
    decode_value,
    encode_value,
    value_from_bytes,
)


def _round_trip(value: Value) -> Value:
    return value_from_bytes(encode_value(value))


# ── Integers ──────────────────────────────────────────────────

class TestIntegers(unittest.TestCase):
    def test_scenario_a_uint8(self):
        data = encode_value(Value.unsigned(42, width=1))
        self.assertEqual(data, b"\x11\x2a")
        self.assertEqual(value_from_bytes(data).as_int(), 42)

    def test_every_width(self):
        cases = [
            (Value.unsigned(0xAB, 1), b"\x11\xab"),
            (Value.unsigned(0x0102, 2), b"\x12\x01\x02"),
            (Value.unsigned(0x01020304, 4), b"\x13\x01\x02\x03\x04"),
            (Value.unsigned(1, 8), b"\x14" + b"\x00" * 7 + b"\x01"),
            (Value.signed(-1, 1), b"\x21\xff"),
            (Value.signed(-1, 2), b"\x22\xff\xff"),
            (Value.signed(-2, 4), b"\x23\xff\xff\xff\xfe"),
            (Value.signed(-(2**63), 8), b"\x24\x80" + b"\x00" * 7),
        ]
        for value, expected in cases:
            with self.subTest(value=value):
                self.assertEqual(encode_value(value), expected)
                self.assertEqual(_round_trip(value), value)

    def test_uint64_max(self):
        v = Value.unsigned(2**64 - 1, 8)
        self.assertEqual(encode_value(v), b"\x14" + b"\xff" * 8)
        self.assertEqual(_round_trip(v).as_int(), 2**64 - 1)

    def test_smallest_width_by_default(self):
        self.assertEqual(Value.unsigned(255).width, 1)
        self.assertEqual(Value.unsigned(256).width, 2)
        self.assertEqual(Value.unsigned(2**32).width, 8)
        self.assertEqual(Value.signed(-128).width, 1)
        self.assertEqual(Value.signed(-129).width, 2)
        self.assertEqual(Value.signed(127).width, 1)
        self.assertEqual(Value.signed(128).width, 2)

    def test_width_is_part_of_identity(self):
        self.assertNotEqual(Value.unsigned(1, 1), Value.unsigned(1, 2))
        self.assertNotEqual(Value.unsigned(1, 1), Value.signed(1, 1))

    def test_out_of_range(self):
        for build in (lambda: Value.unsigned(256, 1),
                      lambda: Value.unsigned(-1),
                      lambda: Value.unsigned(2**64),
                      lambda: Value.signed(128, 1),
                      lambda: Value.signed(-(2**63) - 1)):
            with self.assertRaises(YadError) as ctx:
                build()
            self.assertEqual(ctx.exception.code, ERR_RANGE)

    def test_bad_width(self):
        with self.assertRaises(YadError) as ctx:
            Value.unsigned(1, 3)
        self.assertEqual(ctx.exception.code, ERR_RANGE)

    def test_bool_is_not_an_integer(self):
        with self.assertRaises(YadError) as ctx:
            Value.unsigned(True)
        self.assertEqual(ctx.exception.code, ERR_TYPE)

    def test_truncated_payload(self):
        with self.assertRaises(YadError) as ctx:
            decode_value(b"\x13\x00\x00")
        self.assertEqual(ctx.exception.code, ERR_TRUNCATED)


# ── Floats ────────────────────────────────────────────────────

class TestFloats(unittest.TestCase):
    def test_minifloat_bits(self):
        cases = [
            (1.0, 0x38),
            (1.5, 0x3C),
            (-2.0, 0xC0),
            (240.0, 0x77),
            (256.0, 0x78),
            (448.0, 0x7E),
            (-448.0, 0xFE),
            (2.0 ** -6, 0x08),
            (2.0 ** -9, 0x01),
            (0.0, 0x00),
            (-0.0, 0x80),
        ]
        for x, bits in cases:
            with self.subTest(x=x):
                v = Value.floating(x, 1)
                self.assertEqual(v.payload, bits)
                self.assertEqual(encode_value(v), bytes([0x31, bits]))
                self.assertEqual(v.as_float(), x)

    def test_minifloat_rounds_to_nearest(self):
        v = Value.floating(0.1, 1)
        self.assertEqual(v.payload, 0x1D)
        self.assertEqual(v.as_float(), 0.1015625)
        self.assertEqual(Value.floating(300.0, 1).payload, 0x79)

    def test_minifloat_top_exponent_is_finite(self):
        expected = [256.0, 288.0, 320.0, 352.0, 384.0, 416.0, 448.0]
        for bits, x in zip(range(0x78, 0x7F), expected):
            with self.subTest(bits=bits):
                self.assertEqual(value_from_bytes(bytes([0x31, bits])).as_float(), x)
                self.assertEqual(value_from_bytes(bytes([0x31, bits | 0x80])).as_float(), -x)

    def test_minifloat_saturates(self):
        for x, bits in ((460.0, 0x7E), (1000.0, 0x7E), (1e300, 0x7E),
                        (-1000.0, 0xFE), (math.inf, 0x7E), (-math.inf, 0xFE)):
            with self.subTest(x=x):
                self.assertEqual(Value.floating(x, 1).payload, bits)

    def test_minifloat_nan(self):
        self.assertEqual(Value.floating(math.nan, 1).payload & 0x7F, 0x7F)
        self.assertTrue(math.isnan(value_from_bytes(b"\x31\x7f").as_float()))
        self.assertTrue(math.isnan(value_from_bytes(b"\x31\xff").as_float()))

    def test_half(self):
        self.assertEqual(encode_value(Value.floating(1.0, 2)), b"\x32\x3c\x00")
        self.assertEqual(encode_value(Value.floating(65504.0, 2)), b"\x32\x7b\xff")

    def test_half_overflow(self):
        with self.assertRaises(YadError) as ctx:
            Value.floating(70000.0, 2)
        self.assertEqual(ctx.exception.code, ERR_RANGE)

    def test_single_and_double(self):
        self.assertEqual(encode_value(Value.floating(1.0, 4)), b"\x33\x3f\x80\x00\x00")
        self.assertEqual(encode_value(Value.floating(-2.0, 8)),
                         b"\x34\xc0" + b"\x00" * 7)

    def test_single_overflow(self):
        with self.assertRaises(YadError) as ctx:
            Value.floating(1e39, 4)
        self.assertEqual(ctx.exception.code, ERR_RANGE)

    def test_bits_survive_round_trip(self):
        """NaN payloads and signed zero come back with identical bits."""
        for v in (Value.float_bits(0x7FC00001, 4),
                  Value.float_bits(0x7E01, 2),
                  Value.float_bits(0x7F, 1),
                  Value.floating(-0.0, 8)):
            with self.subTest(v=v):
                back = _round_trip(v)
                self.assertEqual(back, v)
                self.assertEqual(back.payload, v.payload)

    def test_every_minifloat_pattern_round_trips(self):
        for bits in range(256):
            v = Value.float_bits(bits, 1)
            self.assertEqual(_round_trip(v).payload, bits)

    def test_finite_minifloats_reencode_from_float(self):
        for bits in range(256):
            x = Value.float_bits(bits, 1).as_float()
            if math.isnan(x):
                continue
            with self.subTest(bits=bits):
                self.assertEqual(Value.floating(x, 1).payload, bits)

    def test_float_rejects_strings(self):
        with self.assertRaises(YadError) as ctx:
            Value.floating("1.0", 4)
        self.assertEqual(ctx.exception.code, ERR_TYPE)


# ── Strings ───────────────────────────────────────────────────

class TestStrings(unittest.TestCase):
    def test_scenario_b(self):
        self.assertEqual(encode_value(Value.string("Johan")), b"\x41\x05Johan")

    def test_two_byte_length(self):
        s = "a" * 300
        data = encode_value(Value.string(s))
        self.assertEqual(data[:3], b"\x42\x01\x2c")
        self.assertEqual(value_from_bytes(data).as_str(), s)

    def test_length_counts_utf8_bytes(self):
        data = encode_value(Value.string("é"))
        self.assertEqual(data, b"\x41\x02\xc3\xa9")

    def test_empty_rejected(self):
        with self.assertRaises(YadError) as ctx:
            encode_value(Value.string(""))
        self.assertEqual(ctx.exception.code, ERR_EMPTY)

    def test_empty_never_decodes(self):
        for data in (b"\x40", b"\x41\x00", b"\x42\x00\x00"):
            with self.subTest(data=data):
                with self.assertRaises(YadError) as ctx:
                    decode_value(data)
                self.assertEqual(ctx.exception.code, ERR_EMPTY)

    def test_invalid_utf8(self):
        with self.assertRaises(YadError) as ctx:
            decode_value(b"\x41\x02\xc3\x28")
        self.assertEqual(ctx.exception.code, ERR_UTF8)

    def test_surrogate_rejected_on_decode(self):
        with self.assertRaises(YadError) as ctx:
            decode_value(b"\x41\x03\xed\xa0\x80")
        self.assertEqual(ctx.exception.code, ERR_UTF8)

    def test_lone_surrogate_rejected_on_encode(self):
        with self.assertRaises(YadError) as ctx:
            Value.string("\ud800")
        self.assertEqual(ctx.exception.code, ERR_UTF8)

    def test_non_minimal_length_accepted(self):
        """A wider-than-needed length field still decodes to the same string."""
        v = value_from_bytes(b"\x42\x00\x03abc")
        self.assertEqual(v, Value.string("abc"))
        self.assertEqual(encode_value(v), b"\x41\x03abc")

    def test_truncated_payload(self):
        with self.assertRaises(YadError) as ctx:
            decode_value(b"\x41\x05Joh")
        self.assertEqual(ctx.exception.code, ERR_TRUNCATED)


# ── Booleans ──────────────────────────────────────────────────

class TestBooleans(unittest.TestCase):
    def test_single_byte(self):
        self.assertEqual(encode_value(Value.boolean(True)), b"\x81")
        self.assertEqual(encode_value(Value.boolean(False)), b"\x80")

    def test_decode(self):
        self.assertIs(value_from_bytes(b"\x81").as_bool(), True)
        self.assertIs(value_from_bytes(b"\x80").as_bool(), False)

    def test_consumes_one_byte(self):
        _, off = decode_value(b"\x81\x11\x01")
        self.assertEqual(off, 1)

    def test_other_bool_family_bytes_rejected(self):
        with self.assertRaises(YadError) as ctx:
            decode_value(b"\x82")
        self.assertEqual(ctx.exception.code, ERR_HEADER)


# ── Arrays ────────────────────────────────────────────────────

class TestArrays(unittest.TestCase):
    def test_scenario_c(self):
        v = Value.array([Value.unsigned(20, 1), Value.unsigned(50, 1)])
        self.assertEqual(encode_value(v), b"\x51\x02\x11\x14\x11\x32")

    def test_order_preserved(self):
        v = Value.array([3, 1, 2])
        self.assertEqual(_round_trip(v).to_python(), [3, 1, 2])

    def test_nested(self):
        v = Value.array([[True, False], "x", [[1.5]]])
        back = _round_trip(v)
        self.assertEqual(back, v)
        self.assertEqual(back.to_python(), [[True, False], "x", [[1.5]]])

    def test_mixed_types(self):
        v = Value.array([Value.signed(-5), Value.floating(0.5, 2), "s", True])
        self.assertEqual(_round_trip(v), v)

    def test_count_field_grows(self):
        v = Value.array([True] * 256)
        data = encode_value(v)
        self.assertEqual(data[:3], b"\x52\x01\x00")
        self.assertEqual(len(data), 3 + 256)
        self.assertEqual(_round_trip(v), v)

    def test_empty_rejected(self):
        with self.assertRaises(YadError) as ctx:
            Value.array([])
        self.assertEqual(ctx.exception.code, ERR_EMPTY)

    def test_empty_never_decodes(self):
        for data in (b"\x50", b"\x51\x00"):
            with self.subTest(data=data):
                with self.assertRaises(YadError) as ctx:
                    decode_value(data)
                self.assertEqual(ctx.exception.code, ERR_EMPTY)

    def test_count_larger_than_buffer(self):
        with self.assertRaises(YadError) as ctx:
            decode_value(b"\x54" + b"\x00\x00\x00\x00\xff\xff\xff\xff" + b"\x81")
        self.assertEqual(ctx.exception.code, ERR_TRUNCATED)

    def test_depth_limit_on_decode(self):
        ok = b"\x51\x01" * MAX_DEPTH + b"\x81"
        self.assertEqual(value_from_bytes(ok).type, TYPE_ARRAY)
        too_deep = b"\x51\x01" * (MAX_DEPTH + 1) + b"\x81"
        with self.assertRaises(YadError) as ctx:
            value_from_bytes(too_deep)
        self.assertEqual(ctx.exception.code, ERR_LIMIT_DEPTH)

    def test_depth_limit_on_encode(self):
        v = Value.boolean(True)
        for _ in range(MAX_DEPTH + 1):
            v = Value.array([v])
        with self.assertRaises(YadError) as ctx:
            encode_value(v)
        self.assertEqual(ctx.exception.code, ERR_LIMIT_DEPTH)

    def test_depth_limit_on_plain_lists(self):
        def nest(levels):
            obj = [True]
            for _ in range(levels - 1):
                obj = [obj]
            return obj

        self.assertEqual(value_from_bytes(encode_value(nest(MAX_DEPTH))).type, TYPE_ARRAY)
        for levels in (MAX_DEPTH + 1, 600):
            with self.subTest(levels=levels):
                with self.assertRaises(YadError) as ctx:
                    encode_value(nest(levels))
                self.assertEqual(ctx.exception.code, ERR_LIMIT_DEPTH)
                with self.assertRaises(YadError) as ctx:
                    Value.from_python(nest(levels))
                self.assertEqual(ctx.exception.code, ERR_LIMIT_DEPTH)


# ── Decoder contract ──────────────────────────────────────────

class TestDecoder(unittest.TestCase):
    SAMPLES = [
        Value.unsigned(2**40),
        Value.signed(-300),
        Value.floating(3.25, 4),
        Value.string("hello, wörld"),
        Value.array([1, [2, "three"], False, Value.floating(1.5, 1)]),
    ]

    def test_round_trip(self):
        for v in self.SAMPLES:
            with self.subTest(v=v):
                self.assertEqual(_round_trip(v), v)

    def test_every_strict_prefix_is_truncated(self):
        for v in self.SAMPLES:
            data = encode_value(v)
            for k in range(len(data)):
                with self.subTest(v=v, k=k):
                    with self.assertRaises(YadError) as ctx:
                        decode_value(data[:k])
                    self.assertEqual(ctx.exception.code, ERR_TRUNCATED)

    def test_offset_and_consumed(self):
        data = b"\x00\x00" + encode_value(Value.string("ab")) + b"\xff"
        v, off = decode_value(data, 2)
        self.assertEqual(v.as_str(), "ab")
        self.assertEqual(off, 6)

    def test_trailing_bytes(self):
        with self.assertRaises(YadError) as ctx:
            value_from_bytes(b"\x11\x2a\x00")
        self.assertEqual(ctx.exception.code, ERR_BOUNDARY)

    def test_unknown_header(self):
        for data in (b"\x60\x01a", b"\xf3", b"\x00"):
            with self.subTest(data=data):
                with self.assertRaises(YadError) as ctx:
                    decode_value(data)
                self.assertEqual(ctx.exception.code, ERR_HEADER)


# ── Python conversion ─────────────────────────────────────────

class TestFromPython(unittest.TestCase):
    def test_mapping(self):
        self.assertEqual(Value.from_python(True), Value.boolean(True))
        self.assertEqual(Value.from_python(7), Value.unsigned(7, 1))
        self.assertEqual(Value.from_python(-7), Value.signed(-7, 1))
        self.assertEqual(Value.from_python(0.5), Value.floating(0.5, 8))
        self.assertEqual(Value.from_python("a"), Value.string("a"))
        self.assertEqual(Value.from_python((1, 2)).type, TYPE_ARRAY)

    def test_value_passes_through(self):
        v = Value.unsigned(1, 8)
        self.assertIs(Value.from_python(v), v)

    def test_unsupported(self):
        for obj in (None, {"a": 1}, b"raw", object()):
            with self.subTest(obj=obj):
                with self.assertRaises(YadError) as ctx:
                    Value.from_python(obj)
                self.assertEqual(ctx.exception.code, ERR_TYPE)

    def test_encode_accepts_plain_python(self):
        self.assertEqual(encode_value(42), b"\x11\x2a")

    def test_accessor_on_wrong_variant(self):
        with self.assertRaises(YadError) as ctx:
            Value.string("x").as_int()
        self.assertEqual(ctx.exception.code, ERR_TYPE)

    def test_introspection(self):
        v = Value.floating(1.0, 2)
        self.assertEqual(v.type, TYPE_FLOAT)
        self.assertEqual(v.type_name, "float")
        self.assertTrue(v.is_numeric)
        self.assertFalse(Value.string("s").is_numeric)
        self.assertEqual(Value.unsigned(1).type, TYPE_UINT)

    def test_hashable(self):
        self.assertEqual(len({Value.unsigned(1, 1), Value.unsigned(1, 1), Value.unsigned(1, 2)}), 2)


if __name__ == "__main__":
    unittest.main()
