"""yad — Python implementation of the YAD binary document format.

A YAD document holds named rows, each row holds named keys, and each key
holds one self-describing typed value: unsigned/signed integers, floats
(8/16/32/64-bit), UTF-8 strings, booleans, and nested arrays.

Quick start:
    >>> from yad import Document, Row, encode, decode
    >>> doc = Document(rows=[Row("user", {"id": 42, "name": "Johan"})])
    >>> decode(encode(doc)) == doc
    True
    >>> encode(Document()).hex()
    'f001000000'
"""

from __future__ import annotations

from ._constants import (
    BOOL_FALSE,
    BOOL_TRUE,
    CURRENT_VERSION,
    KEY_END,
    KEY_NAME,
    KEY_START,
    MAX_DEPTH,
    ROW_END,
    ROW_NAME,
    ROW_START,
    TYPE_ARRAY,
    TYPE_BOOL,
    TYPE_FLOAT,
    TYPE_INT,
    TYPE_STRING,
    TYPE_UINT,
    VERSION_HEADER,
    WIDTH_EIGHT,
    WIDTH_FOUR,
    WIDTH_ONE,
    WIDTH_TWO,
    WIDTH_ZERO,
)
from ._document import Document, Version, decode, encode
from ._errors import (
    ERR_BOUNDARY,
    ERR_EMPTY,
    ERR_HEADER,
    ERR_LENGTH_OVERFLOW,
    ERR_LIMIT_DEPTH,
    ERR_RANGE,
    ERR_TRUNCATED,
    ERR_TYPE,
    ERR_UTF8,
    ERR_VERSION,
    YadError,
)
from ._header import choose_width, decode_length, encode_length, pack_header, unpack_header
from ._json_adapter import document_to_json, json_to_document
from ._key import Key
from ._row import Row
from ._segment import segment, segment_keys, segment_rows, split_keys, split_rows
from ._value import Value, decode_value, encode_value, value_from_bytes

__version__ = "1.0.0"

__all__ = [
    # Document model
    "Document",
    "Row",
    "Key",
    "Value",
    "Version",
    # Entry points
    "encode",
    "decode",
    "encode_value",
    "decode_value",
    "value_from_bytes",
    # Header and length codec
    "pack_header",
    "unpack_header",
    "choose_width",
    "encode_length",
    "decode_length",
    # Segmentation
    "segment",
    "segment_keys",
    "segment_rows",
    "split_keys",
    "split_rows",
    # JSON
    "json_to_document",
    "document_to_json",
    # Exception
    "YadError",
    # Error codes
    "ERR_TRUNCATED",
    "ERR_HEADER",
    "ERR_UTF8",
    "ERR_EMPTY",
    "ERR_LENGTH_OVERFLOW",
    "ERR_BOUNDARY",
    "ERR_VERSION",
    "ERR_TYPE",
    "ERR_RANGE",
    "ERR_LIMIT_DEPTH",
    # Wire constants
    "TYPE_UINT",
    "TYPE_INT",
    "TYPE_FLOAT",
    "TYPE_STRING",
    "TYPE_ARRAY",
    "TYPE_BOOL",
    "BOOL_TRUE",
    "BOOL_FALSE",
    "WIDTH_ZERO",
    "WIDTH_ONE",
    "WIDTH_TWO",
    "WIDTH_FOUR",
    "WIDTH_EIGHT",
    "VERSION_HEADER",
    "ROW_START",
    "ROW_END",
    "ROW_NAME",
    "KEY_START",
    "KEY_END",
    "KEY_NAME",
    "CURRENT_VERSION",
    "MAX_DEPTH",
]
