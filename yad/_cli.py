"""YAD command-line interface.

Usage:
    echo '{"user": {"id": 42}}' | python3 -m yad build > user.b64
    python3 -m yad build --input user.json --output user.yad
    python3 -m yad dump --input user.yad [--typed]
    base64 -d user.b64 | python3 -m yad dump
    python3 -m yad version
"""

from __future__ import annotations

import argparse
import base64
import binascii
import json
import logging
import sys
from typing import List, Optional

from . import (
    CURRENT_VERSION,
    Version,
    YadError,
    __version__,
    decode,
    document_to_json,
    encode,
    json_to_document,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yad",
        description="YAD — self-describing binary documents",
    )
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log decoder activity to stderr")
    sub = parser.add_subparsers(dest="command")

    # ── build ──
    build_p = sub.add_parser("build", help="Encode a JSON document as YAD")
    build_p.add_argument("--input", "-i", metavar="FILE",
                         help="Read JSON from FILE instead of stdin")
    build_p.add_argument("--output", "-o", metavar="FILE",
                         help="Write raw YAD bytes to FILE (default: base64 on stdout)")

    # ── dump ──
    dump_p = sub.add_parser("dump", help="Decode a YAD document to JSON")
    dump_p.add_argument("--input", "-i", metavar="FILE",
                        help="Read YAD bytes from FILE instead of stdin")
    dump_p.add_argument("--base64", action="store_true",
                        help="Input is base64 text rather than raw bytes")
    dump_p.add_argument("--typed", action="store_true",
                        help="Show type and width for every value")

    # ── version ──
    sub.add_parser("version", help="Print version and exit")

    return parser


def _read_input(filepath: Optional[str]) -> bytes:
    """Read bytes from a file or stdin."""
    if filepath:
        with open(filepath, "rb") as f:
            return f.read()
    if sys.stdin.isatty():
        print("yad: reading from stdin (Ctrl-D to end)...", file=sys.stderr)
    return sys.stdin.buffer.read()


def _cmd_build(args: argparse.Namespace) -> None:
    doc = json_to_document(_read_input(args.input))
    data = encode(doc)
    if args.output:
        with open(args.output, "wb") as f:
            f.write(data)
    else:
        print(base64.b64encode(data).decode("ascii"))


def _cmd_dump(args: argparse.Namespace) -> None:
    raw = _read_input(args.input)
    if args.base64:
        raw = base64.b64decode(raw.strip(), validate=True)
    print(document_to_json(decode(raw), typed=args.typed))


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr,
                            format="%(name)s: %(message)s")

    if args.command == "version":
        print(f"yad {__version__} (format {Version(*CURRENT_VERSION)})")
        return

    try:
        if args.command == "build":
            _cmd_build(args)
        elif args.command == "dump":
            _cmd_dump(args)
    except YadError as e:
        print(f"yad: error [{e.code}]: {e}", file=sys.stderr)
        sys.exit(2)
    except json.JSONDecodeError as e:
        print(f"yad: JSON parse error: {e}", file=sys.stderr)
        sys.exit(2)
    except binascii.Error as e:
        print(f"yad: base64 error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
