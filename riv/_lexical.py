"""Riv lexical helpers shared by the encoder and the decoder.

String escaping, number rendering, indentation, and the payload text of the
tagged literals (dates, patterns, buffers).  Each helper pair here is the
single definition of how one piece of text is written and read back.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Pattern

from ._constants import (
    CONTEXT_RADIUS,
    DATE_TIMESTAMP,
    ESCAPES,
    REGEX_FLAG_LETTERS,
    REGEX_IGNORED_LETTERS,
    UNESCAPES,
)
from ._errors import ConversionError

# ── Strings ──────────────────────────────────────────────────

_ESCAPE_RE = re.compile('["\\\\\n\r\t\b\f]')
# One backslash plus whatever follows it.  Matching pairs left to right is
# what keeps "\\\\n" (escaped backslash, then n) from turning into a newline.
_UNESCAPE_RE = re.compile(r"\\.", re.DOTALL)


def escape(s: str) -> str:
    return _ESCAPE_RE.sub(lambda m: ESCAPES[m.group(0)], s)


def unescape(s: str) -> str:
    """Resolve known escape pairs; unknown pairs pass through unchanged."""
    return _UNESCAPE_RE.sub(lambda m: UNESCAPES.get(m.group(0), m.group(0)), s)


def quote(s: str) -> str:
    return '"' + escape(s) + '"'


# ── Indentation ──────────────────────────────────────────────

def indent(level: int, width: int) -> str:
    return " " * (width * level)


def reindent(text: str, prefix: str) -> str:
    """Prefix every line of `text`.  Only "\\n" separates lines."""
    return "\n".join(prefix + line for line in text.split("\n"))


def context_window(text: str, pos: int) -> str:
    """The slice of `text` shown around `pos` in decode error messages."""
    return text[max(0, pos - CONTEXT_RADIUS):pos + CONTEXT_RADIUS]


# ── Numbers ──────────────────────────────────────────────────

def format_number(val: float) -> str:
    """Decimal text of a finite int or float.

    repr() keeps ints and floats apart ("3" vs "3.0") and gives the
    shortest float text that reads back to the same double.
    """
    if isinstance(val, float) and not math.isfinite(val):
        raise ConversionError("non-finite number has no decimal form: {!r}".format(val))
    if isinstance(val, int):
        try:
            return str(int(val))
        except ValueError:
            # interpreter limit on int-to-str digits
            raise ConversionError("integer too large to write")
    return float.__repr__(float(val))


def parse_number(token: str) -> float:
    """Convert a scanned numeric literal.  Integral text gives an int."""
    try:
        if any(ch in token for ch in ".eE"):
            return float(token)
        return int(token)
    except ValueError:
        raise ConversionError("invalid number: {}".format(token))


def parse_bigint(token: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise ConversionError("invalid big integer: {!r}".format(token))


# ── Dates ────────────────────────────────────────────────────
# ISO text matches JavaScript's toISOString(): UTC, millisecond precision,
# "Z" suffix.  Naive datetimes are taken to be UTC.

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)
_TIMESTAMP_RE = re.compile(r"-?\d+")


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_date(dt: datetime, date_format: str) -> str:
    try:
        dt = _as_utc(dt)
    except OverflowError:
        raise ConversionError("date out of range: {!r}".format(dt))
    if date_format == DATE_TIMESTAMP:
        return str((dt - _EPOCH) // _ONE_MS)
    return "{:04d}-{:02d}-{:02d}T{:02d}:{:02d}:{:02d}.{:03d}Z".format(
        dt.year, dt.month, dt.day, dt.hour, dt.minute, dt.second, dt.microsecond // 1000
    )


def parse_date(text: str) -> datetime:
    """Read either payload form back; the shape of the text decides which."""
    if _TIMESTAMP_RE.fullmatch(text):
        try:
            return _EPOCH + int(text) * _ONE_MS
        except OverflowError:
            raise ConversionError("invalid date: {}".format(text))
    iso = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return _as_utc(datetime.fromisoformat(iso))
    except (ValueError, OverflowError):
        raise ConversionError("invalid date: {}".format(text))


# ── Patterns ─────────────────────────────────────────────────

_FLAG_BITS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "a": re.ASCII,
}
_REGEX_TEXT_RE = re.compile(r"/(.*)/([a-z]*)", re.DOTALL)


def format_pattern(pattern: Pattern) -> str:
    source = pattern.pattern
    if isinstance(source, bytes):
        source = source.decode("latin-1")
    letters = "".join(ch for ch in REGEX_FLAG_LETTERS if pattern.flags & _FLAG_BITS[ch])
    return "/{}/{}".format(source, letters)


def parse_pattern(text: str) -> Pattern:
    """Compile "/pattern/flags", or the whole text when it isn't in that form."""
    m = _REGEX_TEXT_RE.fullmatch(text)
    source, flags = text, 0
    if m:
        source = m.group(1)
        for ch in m.group(2):
            if ch in _FLAG_BITS:
                flags |= _FLAG_BITS[ch]
            elif ch not in REGEX_IGNORED_LETTERS:
                raise ConversionError("invalid regex flag {!r} in {}".format(ch, text))
    try:
        return re.compile(source, flags)
    except (re.error, ValueError, OverflowError) as e:
        raise ConversionError("invalid regex {}: {}".format(text, e))


# ── Buffers ──────────────────────────────────────────────────

def format_buffer(data) -> str:
    return ",".join(str(b) for b in bytes(data))


def parse_buffer(text: str) -> bytes:
    if not text:
        return b""
    try:
        return bytes(int(part) for part in text.split(","))
    except ValueError:
        raise ConversionError("invalid buffer: {}".format(text))
