"""JSON ↔ YAD document adapter.

Type mapping (JSON → YAD):
    top-level object → Document, each member an object → Row
    string           → STRING (must be non-empty)
    true / false     → BOOL
    integer ≥ 0      → smallest UINT that fits
    integer < 0      → smallest INT that fits
    number with . /e → 8-byte FLOAT
    array            → ARRAY (must be non-empty)
    null, object     → ERR_TYPE (no such YAD value)

Going the other way, widths are dropped unless `typed=True`, in which
case every value is written as {"type", "width", "value"} so a dump
shows exactly what is on the wire.
"""

from __future__ import annotations

import json
from typing import Any, Dict

from ._constants import MAX_DEPTH, TYPE_ARRAY
from ._document import Document
from ._errors import ERR_LIMIT_DEPTH, ERR_TYPE, ERR_UTF8, YadError
from ._value import Value


def _json_to_value(obj: Any, where: str, depth: int = 0) -> Value:
    if obj is None:
        raise YadError(ERR_TYPE, "null is not a YAD value ({})".format(where))
    if isinstance(obj, dict):
        raise YadError(ERR_TYPE, "nested object is not a YAD value ({})".format(where))
    if isinstance(obj, list):
        if depth + 1 > MAX_DEPTH:
            raise YadError(ERR_LIMIT_DEPTH, "array nesting exceeds MAX_DEPTH ({})".format(where))
        items = []
        for item in obj:
            items.append(_json_to_value(item, where, depth + 1))
        return Value.array(items)
    return Value.from_python(obj)


def json_to_document(raw: bytes) -> Document:
    """Parse UTF-8 JSON bytes of shape {row: {key: value}} into a Document."""
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise YadError(ERR_UTF8, "JSON input is not valid utf-8")
    obj = json.loads(text)
    if not isinstance(obj, dict):
        raise YadError(ERR_TYPE, "JSON document must be an object of rows")

    data: Dict[str, Dict[str, Value]] = {}
    for row_name, keys in obj.items():
        if not isinstance(keys, dict):
            raise YadError(ERR_TYPE, "row {!r} must be a JSON object".format(row_name))
        data[row_name] = {
            key_name: _json_to_value(v, "{}.{}".format(row_name, key_name))
            for key_name, v in keys.items()
        }
    return Document.from_python(data)


def value_to_typed(value: Value) -> Dict[str, Any]:
    if value.type == TYPE_ARRAY:
        inner: Any = [value_to_typed(item) for item in value.payload]
    else:
        inner = value.to_python()
    return {"type": value.type_name, "width": value.width, "value": inner}


def document_to_json(doc: Document, typed: bool = False, indent: int = 2) -> str:
    if typed:
        out: Dict[str, Any] = {
            "version": str(doc.version),
            "rows": {
                row_name: {k: value_to_typed(key.value) for k, key in doc[row_name].keys.items()}
                for row_name in doc
            },
        }
    else:
        out = doc.to_python()
    return json.dumps(out, ensure_ascii=False, indent=indent)
