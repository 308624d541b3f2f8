"""Riv constants — literal markers, tagged-literal prefixes, layout and limits.

Everything the encoder writes and the decoder recognizes by prefix lives
here, so the two sides cannot drift apart.
"""

from __future__ import annotations

from typing import Dict, Tuple

__format_version__ = "1.0"

# ── Literal markers ──────────────────────────────────────────
# Order matters for the NaN/inf checks on the encode side: NaN first,
# because NaN compares unequal to everything including the infinities.
NIL: str = "#nil"
YES: str = "#yes"
NO: str = "#no"
NAN: str = "#nan"
INF: str = "#inf"
NEG_INF: str = "#-inf"

# JSON barewords, accepted on read only.
JSON_TRUE: str = "true"
JSON_FALSE: str = "false"
JSON_NULL: str = "null"

# ── Tagged-literal prefixes ──────────────────────────────────
TAG_BIG: str = "#big:"
TAG_DATE: str = "#date:"
TAG_REGEX: str = "#regex:"
TAG_ERROR: str = "#error:"
TAG_BUFFER: str = "#buffer:"
TAG_SET: str = "#set:"
TAG_MAP: str = "#map:"

# ── Structural characters ────────────────────────────────────
QUOTE: str = '"'
SEQ_OPEN: str = "<"
SEQ_CLOSE: str = ">"
RECORD_OPEN: str = "@"
KEY_MARK: str = ":"
ARROW: str = "=>"
EMPTY_SEQ: str = "<>"

# A line at column 0 starting with one of these always ends a block.
BLOCK_BREAKERS: Tuple[str, ...] = (RECORD_OPEN, SEQ_OPEN, SEQ_CLOSE)

# Characters a record name may not contain (besides whitespace).
NAME_FORBIDDEN: str = '<>"'

# ── String escapes ───────────────────────────────────────────
# Only these seven are escaped.  Everything else, including other control
# characters and non-ASCII, is written verbatim.
ESCAPES: Dict[str, str] = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}
UNESCAPES: Dict[str, str] = {v: k for k, v in ESCAPES.items()}

# ── Regex flags ──────────────────────────────────────────────
# Letters written after the closing slash of "/pattern/flags".  The JS-only
# letters g, u and y are accepted on read and carry no Python flag.
REGEX_FLAG_LETTERS: str = "imsxa"
REGEX_IGNORED_LETTERS: str = "guy"

# ── Layout ───────────────────────────────────────────────────
# A sequence is written on one line when its joined form is shorter than this.
INLINE_WIDTH: int = 60

# Characters shown on each side of the cursor in decode error messages.
CONTEXT_RADIUS: int = 10

# ── Configuration defaults ───────────────────────────────────
DEFAULT_INDENT: int = 2
DEFAULT_MAX_DEPTH: int = 100
DEFAULT_MAX_LENGTH: int = 1_000_000
DATE_ISO: str = "iso"
DATE_TIMESTAMP: str = "timestamp"
DATE_FORMATS: Tuple[str, ...] = (DATE_ISO, DATE_TIMESTAMP)
DEFAULT_DATE_FORMAT: str = DATE_ISO
