"""Riv command-line interface.

Usage:
    echo '{"a": [1, 2]}' | python3 -m riv encode [--name N] [--indent K]
    python3 -m riv decode --input file.riv
    python3 -m riv minify --input file.riv
    python3 -m riv check --input file.riv
    python3 -m riv demo
    python3 -m riv version
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
from datetime import datetime, timezone
from typing import List, Optional

from . import (
    BigInt,
    Record,
    RivConfig,
    RivError,
    __version__,
    deserialize,
    equal,
    json_to_value,
    kind_of,
    merge,
    minify,
    override,
    serialize,
    validate,
)
from ._constants import DATE_FORMATS, DEFAULT_DATE_FORMAT, DEFAULT_INDENT, __format_version__
from ._json_adapter import dumps

logger = logging.getLogger("riv.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="riv",
        description="Riv — readable serialization for rich value graphs",
    )
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log debug output to stderr")
    sub = parser.add_subparsers(dest="command")

    # ── encode ──
    enc_p = sub.add_parser("encode", help="Convert JSON to Riv")
    enc_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read JSON from FILE instead of stdin")
    enc_p.add_argument("--name", metavar="NAME",
                       help="Name the top-level record (@NAME)")
    enc_p.add_argument("--indent", type=int, default=DEFAULT_INDENT, metavar="K",
                       help="Spaces per indentation level (default %(default)s)")
    enc_p.add_argument("--date-format", choices=DATE_FORMATS, default=DEFAULT_DATE_FORMAT,
                       help="How dates are written (default %(default)s)")

    # ── decode ──
    dec_p = sub.add_parser("decode", help="Convert Riv to JSON")
    dec_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read Riv text from FILE instead of stdin")
    dec_p.add_argument("--compact", action="store_true",
                       help="Emit JSON on a single line")

    # ── minify ──
    min_p = sub.add_parser("minify", help="Print Riv text on a single line")
    min_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read Riv text from FILE instead of stdin")

    # ── check ──
    chk_p = sub.add_parser("check", help="Parse Riv text and report its top-level kind")
    chk_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read Riv text from FILE instead of stdin")

    # ── demo / version ──
    sub.add_parser("demo", help="Walk through the main operations on a sample value")
    sub.add_parser("version", help="Print version and exit")

    return parser


def _read_input(filepath: Optional[str]) -> bytes:
    """Read input bytes from a file or stdin."""
    if filepath:
        with open(filepath, "rb") as f:
            data = f.read()
        logger.debug("read %d bytes from %s", len(data), filepath)
        return data
    if sys.stdin.isatty():
        print("riv: reading from stdin (Ctrl-D to end)...", file=sys.stderr)
    return sys.stdin.buffer.read()


def _cmd_encode(args: argparse.Namespace) -> None:
    value = json_to_value(_read_input(args.input))
    cfg = RivConfig(indent=args.indent, date_format=args.date_format)
    print(serialize(value, args.name, config=cfg))


def _cmd_decode(args: argparse.Namespace) -> None:
    value = deserialize(_read_input(args.input))
    print(dumps(value, indent=None if args.compact else 2))


def _cmd_minify(args: argparse.Namespace) -> None:
    print(minify(deserialize(_read_input(args.input))))


def _cmd_check(args: argparse.Namespace) -> None:
    value = deserialize(_read_input(args.input))
    kind = kind_of(value)
    if isinstance(value, Record) and value.name:
        print("OK: {} @{}".format(kind.value, value.name))
    else:
        print("OK: {}".format(kind.value))


def _cmd_demo(args: argparse.Namespace) -> None:
    sample = Record(
        {
            "name": "Test User",
            "age": 30,
            "active": True,
            "data": None,
            "tags": ["dev", "py"],
            "meta": {"theme": "dark"},
            "numbers": [1, 2.5, float("nan"), float("inf")],
            "date": datetime(2024, 1, 1, tzinfo=timezone.utc),
            "pattern": re.compile("test", re.IGNORECASE),
            "set": {1, 2, 3},
            "big": BigInt(123),
            "error": Exception("Test error"),
            "buffer": bytes(4),
        },
        name="user",
    )
    print("Original:", sample)

    text = serialize(sample)
    print("\nSerialized:\n" + text)

    restored = deserialize(text)
    print("\nDeserialized:", restored)
    print("\nEqual?", equal(sample, restored))
    print("\nMinified:", minify(sample))

    print("\nMerge:", merge({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}, "e": 4}))

    schema = {"name": "string", "age": "number", "tags": ["string"]}
    print("\nValidation (valid):", validate(schema, {"name": "John", "age": 30, "tags": ["dev"]}))
    print("Validation (invalid):", validate(schema, {"name": "John", "age": "30", "tags": ["dev"]}))

    with override(date_format="timestamp"):
        print("\nTimestamp date:", serialize(sample["date"]))


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "version":
        print(f"riv {__version__} (format {__format_version__})")
        return

    handlers = {
        "encode": _cmd_encode,
        "decode": _cmd_decode,
        "minify": _cmd_minify,
        "check": _cmd_check,
        "demo": _cmd_demo,
    }
    logger.debug("running %s", args.command)
    try:
        handlers[args.command](args)
    except RivError as e:
        print(f"riv: error [{e.code}]: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
