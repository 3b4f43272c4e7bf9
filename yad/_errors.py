"""YAD error codes and exception class.

There is exactly one exception type.  Callers branch on `.code`, which is
one of the ERR_* strings below; the message is for humans only.
"""

from __future__ import annotations

from typing import List

# ── Decode and encode failures ───────────────────────────────

ERR_TRUNCATED: str = "ERR_TRUNCATED"              # fewer bytes than a field needs
ERR_HEADER: str = "ERR_HEADER"                    # unknown type or width nibble
ERR_UTF8: str = "ERR_UTF8"                        # string payload is not UTF-8
ERR_EMPTY: str = "ERR_EMPTY"                      # zero-length string, array or name
ERR_LENGTH_OVERFLOW: str = "ERR_LENGTH_OVERFLOW"  # count too large to index
ERR_BOUNDARY: str = "ERR_BOUNDARY"                # missing/misplaced sentinel
ERR_VERSION: str = "ERR_VERSION"                  # bad 5-byte version stamp

# ── Model failures ───────────────────────────────────────────

ERR_TYPE: str = "ERR_TYPE"                # wrong variant or unsupported Python type
ERR_RANGE: str = "ERR_RANGE"              # number does not fit its width
ERR_LIMIT_DEPTH: str = "ERR_LIMIT_DEPTH"  # arrays nested deeper than MAX_DEPTH

ALL_CODES: List[str] = [
    ERR_TRUNCATED,
    ERR_HEADER,
    ERR_UTF8,
    ERR_EMPTY,
    ERR_LENGTH_OVERFLOW,
    ERR_BOUNDARY,
    ERR_VERSION,
    ERR_TYPE,
    ERR_RANGE,
    ERR_LIMIT_DEPTH,
]


class YadError(Exception):
    """Exception for every YAD encode/decode failure.

    The `.code` attribute is one of the ERR_* strings above and is what
    tests and the CLI compare against.
    """

    def __init__(self, code: str, msg: str = "") -> None:
        super().__init__(msg or code)
        self.code = code
