"""Riv encoder — value graph to text.

One method per value kind, selected by kind_of().  The walk is depth-first
and carries the indentation level of the value being written:

    Root call starts at start_level (normally 0).
    Children of a sequence, set or record are written at level+1; a map
    writes each pair as a two-item sequence, so keys and values sit at level+2.
    A value at a level above max_depth aborts the whole call.

Circular references are caught with an on-stack marker: a container's id()
goes into `_active` when the walk enters it and comes out when the walk
leaves it.  Meeting an id() that is still on the stack means the container
contains itself.  Two siblings pointing at the same object are both written
out in full, since the first one is off the stack before the second starts.
"""

from __future__ import annotations

import math
from typing import Any, Iterator, List, Optional, Set

from ._config import RivConfig, snapshot
from ._constants import (
    ARROW,
    EMPTY_SEQ,
    INF,
    INLINE_WIDTH,
    KEY_MARK,
    NAN,
    NEG_INF,
    NIL,
    NO,
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
    CircularReferenceError,
    GrammarError,
    LimitExceededError,
)
from ._lexical import (
    format_buffer,
    format_date,
    format_number,
    format_pattern,
    indent,
    quote,
    reindent,
)
from ._types import Record, is_record_name, is_skipped_member, kind_of


class Encoder:
    """Single-use encoder.  Holds the config snapshot and the on-stack set."""

    def __init__(self, config: RivConfig) -> None:
        self.cfg = config
        self._active: Set[int] = set()

    def encode(self, value: Any, level: int = 0, name: Optional[str] = None) -> str:
        if level > self.cfg.max_depth:
            raise LimitExceededError(
                "max depth {} exceeded".format(self.cfg.max_depth), code=ERR_LIMIT_DEPTH
            )
        kind = kind_of(value)
        return getattr(self, "_encode_" + kind.value)(value, level, name)

    def _pad(self, level: int) -> str:
        return indent(level, self.cfg.indent)

    # ── Scalars ──────────────────────────────────────────────

    def _encode_nil(self, value: Any, level: int, name: Optional[str]) -> str:
        return NIL

    def _encode_boolean(self, value: bool, level: int, name: Optional[str]) -> str:
        return YES if value else NO

    def _encode_number(self, value: float, level: int, name: Optional[str]) -> str:
        if isinstance(value, float):
            if math.isnan(value):
                return NAN
            if value == math.inf:
                return INF
            if value == -math.inf:
                return NEG_INF
        return format_number(value)

    def _encode_bigint(self, value: int, level: int, name: Optional[str]) -> str:
        return TAG_BIG + format_number(int(value))

    def _encode_string(self, value: str, level: int, name: Optional[str]) -> str:
        return quote(value)

    def _encode_date(self, value: Any, level: int, name: Optional[str]) -> str:
        return TAG_DATE + quote(format_date(value, self.cfg.date_format))

    def _encode_pattern(self, value: Any, level: int, name: Optional[str]) -> str:
        return TAG_REGEX + quote(format_pattern(value))

    def _encode_error(self, value: BaseException, level: int, name: Optional[str]) -> str:
        return TAG_ERROR + quote(str(value))

    def _encode_buffer(self, value: Any, level: int, name: Optional[str]) -> str:
        return TAG_BUFFER + quote(format_buffer(value))

    # ── Containers ───────────────────────────────────────────

    def _enter(self, value: Any) -> int:
        key = id(value)
        if key in self._active:
            raise CircularReferenceError(
                "circular reference to {}".format(type(value).__name__)
            )
        self._active.add(key)
        return key

    def _leave(self, key: int) -> None:
        self._active.discard(key)

    def _children(self, value: Any, level: int) -> List[str]:
        key = self._enter(value)
        try:
            return [self.encode(v, level) for v in value]
        finally:
            self._leave(key)

    def _bracket(self, items: List[str], level: int, width: Optional[int] = None) -> str:
        """Join encoded items inside < >.

        Inline when no item spans lines (and, given a width, the joined text
        is shorter than it).  Otherwise one item per line at level+1 and the
        closing bracket on its own line at level, so a record item's block
        always ends before the bracket.
        """
        inline = " ".join(items)
        if "\n" not in inline and (width is None or len(inline) < width):
            return SEQ_OPEN + inline + SEQ_CLOSE
        inner = self._pad(level + 1)
        lines = [SEQ_OPEN] + [inner + item for item in items] + [self._pad(level) + SEQ_CLOSE]
        return "\n".join(lines)

    def _encode_sequence(self, value: Any, level: int, name: Optional[str]) -> str:
        if len(value) == 0:
            return EMPTY_SEQ
        return self._bracket(self._children(value, level + 1), level, INLINE_WIDTH)

    def _encode_set(self, value: Any, level: int, name: Optional[str]) -> str:
        # Members sorted by their text: set iteration order is not stable
        # across a decode, and the text must be.
        return TAG_SET + self._bracket(sorted(self._children(value, level + 1)), level)

    def _encode_map(self, value: dict, level: int, name: Optional[str]) -> str:
        # Each pair is a two-item sequence one level down, so keys and values
        # sit at level+2, the same depth the decoder counts for them.
        key = self._enter(value)
        try:
            pairs = [
                self._bracket([self.encode(k, level + 2), self.encode(v, level + 2)], level + 1)
                for k, v in value.items()
            ]
        finally:
            self._leave(key)
        return TAG_MAP + self._bracket(pairs, level)

    def _encode_record(self, value: dict, level: int, name: Optional[str]) -> str:
        if not name and isinstance(value, Record):
            name = value.name
        # An empty name writes a bare "@".
        if name and not is_record_name(name):
            raise GrammarError("invalid record name: {!r}".format(name))
        header = RECORD_OPEN + (name or "")

        key = self._enter(value)
        try:
            lines = list(self._record_lines(value, level))
        finally:
            self._leave(key)

        if not lines:
            return header
        return "\n".join([header] + lines)

    def _record_lines(self, value: dict, level: int) -> Iterator[str]:
        pad = self._pad(level + 1)
        for k, v in value.items():
            if is_skipped_member(v):
                continue
            text = self.encode(v, level + 1)
            if "\n" in text:
                yield "{}{}{} {}\n{}".format(
                    pad, KEY_MARK, k, ARROW, reindent(text, self._pad(level + 2))
                )
            else:
                yield "{}{}{} {} {}".format(pad, KEY_MARK, k, ARROW, text)


def encode(
    value: Any,
    name: Optional[str] = None,
    start_level: int = 0,
    config: Optional[RivConfig] = None,
) -> str:
    """Encode a value to Riv text.  Pure: no state survives the call."""
    if start_level < 0:
        raise ValueError("start_level must not be negative")
    encoder = Encoder(snapshot(config))
    try:
        return encoder.encode(value, start_level, name)
    except RecursionError:
        # max_depth set beyond what the interpreter stack can walk.
        raise LimitExceededError("nesting too deep to encode", code=ERR_LIMIT_DEPTH)

