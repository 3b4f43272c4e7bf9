#!/usr/bin/env python3
# tools/invariants_runner.py
#
# Codec invariants (property tests) over random YAD documents.
#
# This runner:
# - generates random documents (rows of keys holding every value variant)
# - checks encode/decode algebra in Python
# - checks that every strict prefix of an encoding fails with a YadError
#
# Exit code:
#   0 -> all checks passed
#   1 -> invariant violation

import os, sys, random
from typing import Any, List

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

from yad import (
    Document, Key, Row, Value, Version, YadError,
    decode, decode_value, encode, encode_value,
)

SEED = int(os.environ.get("YAD_SEED", "1337"))
TRIALS = int(os.environ.get("YAD_TRIALS", "2000"))
MAX_GEN_DEPTH = int(os.environ.get("YAD_GEN_MAX_DEPTH", "4"))
MAX_ROWS = int(os.environ.get("YAD_GEN_MAX_ROWS", "4"))
MAX_KEYS = int(os.environ.get("YAD_GEN_MAX_KEYS", "6"))
MAX_LIST = int(os.environ.get("YAD_GEN_MAX_LIST", "5"))
MAX_STR = int(os.environ.get("YAD_GEN_MAX_STR", "24"))

random.seed(SEED)

def rand_utf8_string(min_len: int = 1) -> str:
    # Scalars only; the last band includes U+F0000.. whose lead bytes are sentinels.
    out = []
    n = random.randint(min_len, MAX_STR)
    for _ in range(n):
        r = random.random()
        if r < 0.70:
            out.append(chr(random.randint(0x20, 0x7E)))
        elif r < 0.85:
            out.append(chr(random.randint(0xA0, 0xFF)))
        elif r < 0.95:
            out.append(chr(random.randint(0x0100, 0xD7FF)))
        else:
            out.append(chr(random.randint(0xF0000, 0x10FFFF)))
    return "".join(out)

def gen_scalar() -> Value:
    r = random.random()
    width = random.choice((1, 2, 4, 8))
    if r < 0.2:
        return Value.unsigned(random.randrange(1 << (8 * width)), width)
    if r < 0.4:
        half = 1 << (8 * width - 1)
        return Value.signed(random.randrange(-half, half), width)
    if r < 0.6:
        return Value.float_bits(random.getrandbits(8 * width), width)
    if r < 0.7:
        return Value.boolean(random.random() < 0.5)
    return Value.string(rand_utf8_string())

def gen_value(depth: int) -> Value:
    if depth >= MAX_GEN_DEPTH or random.random() < 0.7:
        return gen_scalar()
    n = random.randint(1, MAX_LIST)
    return Value.array([gen_value(depth + 1) for _ in range(n)])

def gen_document() -> Document:
    version = Version(*(random.randrange(256) for _ in range(4)))
    rows: List[Row] = []
    for _ in range(random.randint(0, MAX_ROWS)):
        keys = [Key(rand_utf8_string(), gen_value(0)) for _ in range(random.randint(0, MAX_KEYS))]
        rows.append(Row(rand_utf8_string(), keys))
    return Document(version, rows)

def fail(label: str, ctx: Any) -> int:
    print("INVARIANT FAIL:", label)
    print("CTX:", repr(ctx)[:2000])
    return 1

def main() -> int:
    for t in range(TRIALS):
        doc = gen_document()

        # (1) Encode stability (encode twice same bytes)
        b1 = encode(doc)
        if b1 != encode(doc):
            return fail("encode stability", {"trial": t})

        # (2) Round trip
        back = decode(b1)
        if back != doc:
            return fail("round trip", {"trial": t, "hex": b1.hex()})

        # (3) Re-encoding the decoded document is byte-identical
        if encode(back) != b1:
            return fail("re-encode identity", {"trial": t, "hex": b1.hex()})

        # (4) Row and key order do not change equality
        shuffled_rows = list(doc.rows.values())
        random.shuffle(shuffled_rows)
        reordered = Document(doc.version, [
            Row(r.name, random.sample(list(r.keys.values()), len(r))) for r in shuffled_rows
        ])
        if decode(encode(reordered)) != doc:
            return fail("order invariance", {"trial": t})

        # (5) Value codec agrees with itself on every key value
        for row in doc.rows.values():
            for key in row.keys.values():
                raw = encode_value(key.value)
                v, end = decode_value(raw)
                if v != key.value or end != len(raw):
                    return fail("value round trip", {"trial": t, "value": key.value})

        # (6) Every strict prefix fails cleanly or is itself a complete document
        for k in range(len(b1)):
            try:
                decode(b1[:k])
            except YadError:
                continue
            except Exception as e:  # anything else is a decoder bug
                return fail("prefix raised {}".format(type(e).__name__), {"trial": t, "k": k})

    print(f"OK: invariants passed for TRIALS={TRIALS} seed={SEED}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
