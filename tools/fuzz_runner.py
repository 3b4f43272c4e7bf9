#!/usr/bin/env python3
# tools/fuzz_runner.py
#
# Mutation fuzzing of the YAD decoders.
#
# Generates three fuzz categories:
#   A) valid documents with random byte flips -> decode
#   B) random byte strings -> decode_value
#   C) random JSON texts (valid + invalid) -> json_to_document -> encode -> decode
#
# Decoders may only ever raise YadError.  Anything else prints a minimal
# repro payload and exits non-zero.

import os, sys, json, base64, random
from typing import Any, Dict

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

from yad import Document, Row, YadError, decode, decode_value, encode, json_to_document

SEED = int(os.environ.get("YAD_SEED", "4242"))
ROUNDS = int(os.environ.get("YAD_FUZZ_ROUNDS", "5000"))

random.seed(SEED)

INTERESTING = [0x00, 0x11, 0x41, 0x51, 0x60, 0x70, 0x80, 0x81,
               0xF0, 0xF1, 0xF2, 0xF3, 0xF4, 0xFF]

def b64(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def crash(label: str, exc: BaseException, ctx: Dict[str, Any]) -> None:
    print("CRASH:", label)
    print("EXC :", type(exc).__name__, exc)
    print("CTX:", json.dumps(ctx, ensure_ascii=False)[:4000])
    raise SystemExit(1)

# --- generators ---

def rand_ascii(nmin: int, nmax: int) -> str:
    n = random.randint(nmin, nmax)
    return "".join(chr(random.randint(0x20, 0x7E)) for _ in range(n))

def rand_py_value(depth: int) -> Any:
    r = random.random()
    if depth < 3 and r < 0.2:
        return [rand_py_value(depth + 1) for _ in range(random.randint(1, 4))]
    if r < 0.4:
        return random.randint(-(1 << 40), 1 << 40)
    if r < 0.55:
        return random.uniform(-1e6, 1e6)
    if r < 0.65:
        return random.random() < 0.5
    return rand_ascii(1, 16)

def rand_document() -> Document:
    doc = Document()
    for _ in range(random.randint(0, 3)):
        keys = {rand_ascii(1, 8): rand_py_value(0) for _ in range(random.randint(0, 4))}
        doc.add_row(Row(rand_ascii(1, 8), keys))
    return doc

def mutate(data: bytes) -> bytes:
    buf = bytearray(data)
    for _ in range(random.randint(1, 4)):
        op = random.random()
        if op < 0.5 and buf:
            i = random.randrange(len(buf))
            buf[i] = random.choice(INTERESTING) if random.random() < 0.5 else random.getrandbits(8)
        elif op < 0.75 and buf:
            del buf[random.randrange(len(buf))]
        else:
            buf.insert(random.randint(0, len(buf)), random.choice(INTERESTING))
    return bytes(buf)

def rand_json_valid() -> bytes:
    obj = {rand_ascii(1, 6): {rand_ascii(1, 6): rand_py_value(0) for _ in range(random.randint(0, 4))}
           for _ in range(random.randint(0, 3))}
    return json.dumps(obj, ensure_ascii=False).encode("utf-8")

def rand_json_invalid() -> bytes:
    # Small set of known-invalid templates; keeps it deterministic.
    templates = [
        b'{"r": {"k": null}}',     # null has no YAD variant
        b'{"r": {"k": {}}}',       # nested object
        b'{"r": {"k": ""}}',       # empty string
        b'{"r": {"k": []}}',       # empty array
        b'{"r": 1}',               # row is not an object
        b'{"r": {"k": "\xff"}}',   # invalid utf-8
        b'[]',                     # top level is not an object
    ]
    return random.choice(templates)

def main() -> int:
    for i in range(ROUNDS):
        r = random.random()

        # A) mutated documents
        if r < 0.50:
            raw = mutate(encode(rand_document()))
            try:
                decode(raw)
            except YadError:
                pass
            except Exception as e:
                crash("A decode", e, {"round": i, "input_b64": b64(raw)})
            continue

        # B) raw bytes into the value decoder
        if r < 0.75:
            raw = bytes(random.choice(INTERESTING) if random.random() < 0.3 else random.getrandbits(8)
                        for _ in range(random.randint(0, 24)))
            try:
                decode_value(raw)
            except YadError:
                pass
            except Exception as e:
                crash("B decode_value", e, {"round": i, "input_b64": b64(raw)})
            continue

        # C) JSON adapter (valid + invalid mix)
        raw = rand_json_valid() if random.random() < 0.7 else rand_json_invalid()
        try:
            doc = json_to_document(raw)
        except YadError:
            continue
        except Exception as e:
            crash("C json_to_document", e, {"round": i, "input_b64": b64(raw)})
        if decode(encode(doc)) != doc:
            crash("C round trip", AssertionError("documents differ"), {"round": i, "input_b64": b64(raw)})

    print(f"OK: fuzz rounds={ROUNDS} seed={SEED} (no crashes)")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
