"""Riv JSON adapter — moving values between JSON documents and Riv.

JSON → Riv (json_to_value):
    object   → Record, keys in document order
    array    → list
    string   → str
    integer  → int
    float    → float (NaN / Infinity / -Infinity constants accepted)
    true/false/null → bool / None

Riv → JSON (value_to_json), for the kinds JSON has no word for:
    BigInt   → decimal string
    Date     → ISO-8601 string (always ISO, whatever date_format says)
    Pattern  → "/pattern/flags"
    Error    → {"error": message}
    Set      → list
    ValueMap → list of [key, value] pairs
    Buffer   → list of byte values
    Record   → object (the record name is dropped)

The JSON side goes through the standard json module, with an
object_pairs_hook so key order survives and duplicate keys are caught.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Union

from ._config import RivConfig, snapshot
from ._constants import DATE_ISO
from ._errors import ERR_LIMIT_DEPTH, ConversionError, GrammarError, LimitExceededError
from ._lexical import format_date, format_pattern
from ._types import Kind, Record, kind_of


def _pairs_hook(pairs: list) -> Record:
    out = Record()
    for key, value in pairs:
        if key in out:
            raise GrammarError("duplicate key in JSON: {!r}".format(key))
        out[key] = value
    return out


def json_to_value(raw: Union[str, bytes]) -> Any:
    """Parse a JSON document into Riv values."""
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError:
            raise GrammarError("invalid UTF-8 in JSON input")
    try:
        return json.loads(raw, object_pairs_hook=_pairs_hook)
    except json.JSONDecodeError as e:
        raise GrammarError("JSON parse error: {}".format(e))


def value_to_json(value: Any, config: Optional[RivConfig] = None) -> Any:
    """Project a Riv value onto JSON-compatible Python data."""
    cfg = snapshot(config)
    return _project(value, 0, cfg.max_depth)


def _project(value: Any, depth: int, max_depth: int) -> Any:
    if depth > max_depth:
        raise LimitExceededError("max depth {} exceeded".format(max_depth), code=ERR_LIMIT_DEPTH)
    kind = kind_of(value)

    if kind in (Kind.NIL, Kind.BOOLEAN, Kind.NUMBER, Kind.STRING):
        return value
    if kind is Kind.BIGINT:
        return str(int(value))
    if kind is Kind.DATE:
        return format_date(value, DATE_ISO)
    if kind is Kind.PATTERN:
        return format_pattern(value)
    if kind is Kind.ERROR:
        return {"error": str(value)}
    if kind is Kind.BUFFER:
        return list(bytes(value))
    if kind in (Kind.SEQUENCE, Kind.SET):
        return [_project(v, depth + 1, max_depth) for v in value]
    if kind is Kind.MAP:
        return [
            [_project(k, depth + 2, max_depth), _project(v, depth + 2, max_depth)]
            for k, v in value.items()
        ]
    if kind is Kind.RECORD:
        return {k: _project(v, depth + 1, max_depth) for k, v in value.items()}
    raise ConversionError("no JSON form for {}".format(kind.value))


def dumps(value: Any, indent: Optional[int] = 2, config: Optional[RivConfig] = None) -> str:
    """value_to_json + json.dumps, keeping non-ASCII text as is."""
    return json.dumps(value_to_json(value, config), indent=indent, ensure_ascii=False)
