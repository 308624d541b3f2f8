"""Riv decoder — recursive-descent parser from text to values.

A single cursor (`pos`) moves forward through the text.  Every parse_*
method starts at the cursor and leaves it just past what it consumed.

Dispatch at a value position, in order:

    1. literal markers       #nil #yes #no #nan #inf #-inf
    2. tagged literals       #big: #date: #regex: #error: #buffer: #set: #map:
    3. JSON barewords        true false null
    4. by first character    "  string
                             <  sequence
                             @  record block
                             -/digit  number

Record blocks have no closing delimiter.  Membership is decided line by
line from indentation, using two numbers:

    base   the indentation of the block's first entry line
    outer  the base of the enclosing block (-1 at top level)

A first entry line must be deeper than `outer`, or the record is empty.
After that, a line shallower than `base`, or a column-0 line starting with
@ < or >, ends the block; the cursor goes back to the start of that line
so the enclosing parser sees it.  Blank lines are skipped, and so are lines
that don't start with ":" (lenient, for stray content).

Errors are raised bare from the parse methods.  decode() adds the input
window around the cursor exactly once, on the way out.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from ._config import RivConfig, snapshot
from ._constants import (
    ARROW,
    BLOCK_BREAKERS,
    INF,
    JSON_FALSE,
    JSON_NULL,
    JSON_TRUE,
    KEY_MARK,
    NAME_FORBIDDEN,
    NAN,
    NEG_INF,
    NIL,
    NO,
    QUOTE,
    RECORD_OPEN,
    SEQ_CLOSE,
    SEQ_OPEN,
    TAG_BIG,
    TAG_BUFFER,
    TAG_DATE,
    TAG_ERROR,
    TAG_MAP,
    TAG_REGEX,
    TAG_SET,
    YES,
)
from ._errors import (
    ERR_LIMIT_DEPTH,
    ERR_LIMIT_LENGTH,
    ConversionError,
    GrammarError,
    LimitExceededError,
    RivError,
)
from ._lexical import (
    context_window,
    parse_bigint,
    parse_buffer,
    parse_date,
    parse_number,
    parse_pattern,
    unescape,
)
from ._types import BigInt, Record, ValueMap

_LITERALS: Tuple[Tuple[str, Any], ...] = (
    (NIL, None),
    (YES, True),
    (NO, False),
    (NAN, float("nan")),
    (INF, float("inf")),
    (NEG_INF, float("-inf")),
)

_JSON_LITERALS: Tuple[Tuple[str, Any], ...] = (
    (JSON_TRUE, True),
    (JSON_FALSE, False),
    (JSON_NULL, None),
)

_STRING_BODY = re.compile(r'(?:[^"\\]|\\.)*', re.DOTALL)
_NUMBER = re.compile(r"-?[0-9]*(?:\.[0-9]*)?(?:[eE][+-]?[0-9]*)?")
_BIGINT = re.compile(r"[0-9-]*")
_INLINE_WS = " \t"
_NUMBER_START = "-0123456789"


class Decoder:
    """Single-use parser over one input text."""

    def __init__(self, text: str, config: RivConfig) -> None:
        self.text = text
        self.n = len(text)
        self.pos = 0
        self.cfg = config
        self._tagged: Dict[str, Callable[[int, int], Any]] = {
            TAG_BIG: self._parse_bigint,
            TAG_DATE: self._parse_date,
            TAG_REGEX: self._parse_regex,
            TAG_ERROR: self._parse_error,
            TAG_BUFFER: self._parse_buffer,
            TAG_SET: self._parse_set,
            TAG_MAP: self._parse_map,
        }

    def decode(self) -> Any:
        if self.n == 0:
            raise GrammarError("empty input")
        if self.n > self.cfg.max_length:
            raise LimitExceededError(
                "input length {} exceeds max_length {}".format(self.n, self.cfg.max_length),
                code=ERR_LIMIT_LENGTH,
            )
        value = self.parse_value(0, -1)
        self._skip_ws()
        if self.pos < self.n:
            raise GrammarError("unexpected content at {}".format(self.pos))
        return value

    # ── Cursor helpers ───────────────────────────────────────

    def _skip_inline(self) -> None:
        while self.pos < self.n and self.text[self.pos] in _INLINE_WS:
            self.pos += 1

    def _skip_ws(self) -> None:
        while self.pos < self.n and self.text[self.pos].isspace():
            self.pos += 1

    def _skip_spaces(self) -> int:
        start = self.pos
        while self.pos < self.n and self.text[self.pos] == " ":
            self.pos += 1
        return self.pos - start

    def _line_end(self) -> int:
        eol = self.text.find("\n", self.pos)
        return self.n if eol < 0 else eol

    def _next_line(self) -> None:
        """Move past the end of the current line."""
        self.pos = min(self._line_end() + 1, self.n)

    def _at_line_start(self) -> bool:
        return self.pos >= self.n or self.pos == 0 or self.text[self.pos - 1] == "\n"

    def _expect(self, ch: str) -> None:
        if self.pos >= self.n or self.text[self.pos] != ch:
            found = self.text[self.pos] if self.pos < self.n else "end of input"
            raise GrammarError("expected {!r} at {}, found {!r}".format(ch, self.pos, found))
        self.pos += 1

    # ── Values ───────────────────────────────────────────────

    def parse_value(self, depth: int, outer: int) -> Any:
        if depth > self.cfg.max_depth:
            raise LimitExceededError(
                "max depth {} exceeded".format(self.cfg.max_depth), code=ERR_LIMIT_DEPTH
            )
        self._skip_inline()
        if self.pos >= self.n:
            raise GrammarError("unexpected end of input")

        text, pos = self.text, self.pos
        for marker, val in _LITERALS:
            if text.startswith(marker, pos):
                self.pos += len(marker)
                return val
        for prefix, parse in self._tagged.items():
            if text.startswith(prefix, pos):
                self.pos += len(prefix)
                return parse(depth, outer)
        for marker, val in _JSON_LITERALS:
            if text.startswith(marker, pos):
                self.pos += len(marker)
                return val

        ch = text[pos]
        if ch == QUOTE:
            return self.parse_string()
        if ch == SEQ_OPEN:
            return self.parse_sequence(depth, outer)
        if ch == RECORD_OPEN:
            return self.parse_record(depth, outer)
        if ch in _NUMBER_START:
            return self.parse_number()
        raise GrammarError("invalid token {!r} at {}".format(ch, pos))

    def parse_string(self) -> str:
        self._expect(QUOTE)
        m = _STRING_BODY.match(self.text, self.pos)
        end = m.end()
        if end >= self.n or self.text[end] != QUOTE:
            self.pos = end
            raise GrammarError("unterminated string")
        self.pos = end + 1
        return unescape(m.group(0))

    def parse_number(self) -> Union[int, float]:
        m = _NUMBER.match(self.text, self.pos)
        self.pos = m.end()
        return parse_number(m.group(0))

    def parse_sequence(self, depth: int, outer: int) -> List[Any]:
        """`<` values `>`.  Newlines between values are insignificant."""
        self._expect(SEQ_OPEN)
        items: List[Any] = []
        while True:
            self._skip_ws()
            if self.pos >= self.n:
                raise GrammarError("unterminated sequence")
            if self.text[self.pos] == SEQ_CLOSE:
                self.pos += 1
                return items
            items.append(self.parse_value(depth + 1, outer))

    # ── Record blocks ────────────────────────────────────────

    def parse_record(self, depth: int, outer: int) -> Record:
        self._expect(RECORD_OPEN)
        start = self.pos
        while (
            self.pos < self.n
            and not self.text[self.pos].isspace()
            and self.text[self.pos] not in NAME_FORBIDDEN
        ):
            self.pos += 1
        record = Record(name=self.text[start:self.pos] or None)

        # Anything else on the header line means there is no block: "<@ @>".
        self._skip_inline()
        if self.pos < self.n and self.text[self.pos] not in "\r\n":
            return record
        self._next_line()

        base: Optional[int] = None
        while self.pos < self.n:
            line_start = self.pos
            width = self._skip_spaces()
            eol = self._line_end()
            if not self.text[self.pos:eol].strip():
                self.pos = min(eol + 1, self.n)
                continue
            ch = self.text[self.pos]
            if base is None:
                # A block opens with an entry; any other first line belongs
                # to whatever holds this empty record.
                if width <= outer or ch != KEY_MARK:
                    self.pos = line_start
                    break
                base = width
            if width < base or (width == 0 and ch in BLOCK_BREAKERS):
                self.pos = line_start
                break
            if ch != KEY_MARK:
                self.pos = min(eol + 1, self.n)
                continue
            self._parse_entry(record, depth, base)
        return record

    def _parse_entry(self, record: Record, depth: int, base: int) -> None:
        self._expect(KEY_MARK)
        start = self.pos
        while (
            self.pos < self.n
            and not self.text[self.pos].isspace()
            and self.text[self.pos] != "="
        ):
            self.pos += 1
        key = self.text[start:self.pos]

        self._skip_inline()
        if not self.text.startswith(ARROW, self.pos):
            raise GrammarError("expected '=>' after key {!r} at {}".format(key, self.pos))
        self.pos += len(ARROW)
        self._skip_inline()

        # Nothing after "=>": the value is on the following line(s).
        if self.pos < self.n and self.text[self.pos] in "\r\n":
            self._next_line()
            self._skip_spaces()

        record[key] = self.parse_value(depth + 1, base)

        # A nested block already stopped at the start of a line.
        if not self._at_line_start():
            self._next_line()

    # ── Tagged literals ──────────────────────────────────────

    def _parse_bigint(self, depth: int, outer: int) -> BigInt:
        m = _BIGINT.match(self.text, self.pos)
        self.pos = m.end()
        return BigInt(parse_bigint(m.group(0)))

    def _parse_date(self, depth: int, outer: int) -> Any:
        return parse_date(self.parse_string())

    def _parse_regex(self, depth: int, outer: int) -> Any:
        return parse_pattern(self.parse_string())

    def _parse_error(self, depth: int, outer: int) -> Exception:
        return Exception(self.parse_string())

    def _parse_buffer(self, depth: int, outer: int) -> bytes:
        return parse_buffer(self.parse_string())

    def _parse_set(self, depth: int, outer: int) -> set:
        out = set()
        for item in self.parse_sequence(depth, outer):
            out.add(_freeze(item))
        return out

    def _parse_map(self, depth: int, outer: int) -> ValueMap:
        out = ValueMap()
        for entry in self.parse_sequence(depth, outer):
            # Anything but a two-item pair is ignored, as on the writing side
            # nothing else is ever produced.
            if isinstance(entry, list) and len(entry) == 2:
                out[_freeze(entry[0])] = entry[1]
        return out


def _freeze(val: Any) -> Any:
    """Make a decoded value usable as a set element or map key.

    Sequences become tuples (which encode back to the same text) and sets
    become frozensets.  Anything still unhashable is a conversion failure.
    """
    if isinstance(val, list):
        return tuple(_freeze(v) for v in val)
    if isinstance(val, set):
        return frozenset(_freeze(v) for v in val)
    try:
        hash(val)
    except TypeError:
        raise ConversionError("unhashable {} cannot be a set element or map key".format(
            type(val).__name__))
    return val


def decode(text: Union[str, bytes], config: Optional[RivConfig] = None) -> Any:
    """Decode Riv text into a fresh value graph.

    Every RivError leaving this function carries `position` and `context`
    (up to ten characters either side of the cursor).
    """
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("utf-8")
        except UnicodeDecodeError:
            raise GrammarError("input is not valid UTF-8")
    if not isinstance(text, str):
        raise GrammarError("invalid input: expected str, got {}".format(type(text).__name__))

    parser = Decoder(text, snapshot(config))
    try:
        return parser.decode()
    except RivError as e:
        raise e.with_context(parser.pos, context_window(text, parser.pos)) from e
    except RecursionError:
        err = LimitExceededError("nesting too deep to decode", code=ERR_LIMIT_DEPTH)
        raise err.with_context(parser.pos, context_window(text, parser.pos))
