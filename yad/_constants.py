"""YAD constants — header nibbles, sentinel bytes, and safety limits.

Every encoded value starts with a single header byte: the high nibble is
the type, the low nibble the width.  Containers (rows, keys) are framed
by sentinel bytes taken from the 0xF0 range, which no value header uses.
"""

from __future__ import annotations

from typing import Dict, Tuple

# ── Type nibbles (high 4 bits of a value header) ─────────────
TYPE_UINT: int = 0x10
TYPE_INT: int = 0x20
TYPE_FLOAT: int = 0x30
TYPE_STRING: int = 0x40
TYPE_ARRAY: int = 0x50
TYPE_BOOL: int = 0x80

# Booleans are full-byte discriminants, not type + width.
BOOL_FALSE: int = 0x80
BOOL_TRUE: int = 0x81

NUMERIC_TYPES: Tuple[int, ...] = (TYPE_UINT, TYPE_INT, TYPE_FLOAT)
COLLECTION_TYPES: Tuple[int, ...] = (TYPE_STRING, TYPE_ARRAY)

TYPE_NAMES: Dict[int, str] = {
    TYPE_UINT: "uint",
    TYPE_INT: "int",
    TYPE_FLOAT: "float",
    TYPE_STRING: "string",
    TYPE_ARRAY: "array",
    TYPE_BOOL: "bool",
}

# ── Name markers ─────────────────────────────────────────────
# A name is encoded like a STRING value with this nibble in place of 0x40.
ROW_NAME: int = 0x60
KEY_NAME: int = 0x70

# ── Sentinels ────────────────────────────────────────────────
VERSION_HEADER: int = 0xF0
ROW_START: int = 0xF1
ROW_END: int = 0xF2
KEY_START: int = 0xF3
KEY_END: int = 0xF4

# ── Width nibbles (low 4 bits) ───────────────────────────────
# The nibble is an ordinal, not a byte count: 0x03 means 4 bytes.
WIDTH_ZERO: int = 0x00
WIDTH_ONE: int = 0x01
WIDTH_TWO: int = 0x02
WIDTH_FOUR: int = 0x03
WIDTH_EIGHT: int = 0x04

WIDTH_BYTES: Dict[int, int] = {
    WIDTH_ZERO: 0,
    WIDTH_ONE: 1,
    WIDTH_TWO: 2,
    WIDTH_FOUR: 4,
    WIDTH_EIGHT: 8,
}
BYTES_WIDTH: Dict[int, int] = {n: tag for tag, n in WIDTH_BYTES.items()}

# ── Version stamp ────────────────────────────────────────────
VERSION_SIZE: int = 5
CURRENT_VERSION: Tuple[int, int, int, int] = (1, 0, 0, 0)

# ── Numeric limits ───────────────────────────────────────────
# Python ints are unbounded, so each width is range-checked by hand.
UINT64_MAX: int = 2**64 - 1

# Arrays recurse on decode; cap the nesting so hostile input cannot
# exhaust the interpreter stack.
MAX_DEPTH: int = 256
