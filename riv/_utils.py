"""Riv utilities built on the encoder and decoder.

    pretty     alias of serialize
    minify     serialize, then fold every newline+indent run into one space
    clone      serialize, then deserialize
    equal      textual identity of the two serializations
    merge      deep merge of plain records
    validate   shape check against a small schema vocabulary

equal() compares text, not structure.  Two values are equal exactly when
they serialize to the same characters, so record key order matters and
record names count, while a NaN equals a NaN.  The 60-character inline
rule is part of the comparison too; both sides are written from level 0,
so structurally equal values always produce the same layout.
"""

from __future__ import annotations

import re
from typing import Any, List, Optional

from ._config import RivConfig, snapshot
from ._decoder import decode
from ._encoder import encode
from ._errors import RivError
from ._types import BigInt, Kind, Record, kind_of

_FOLD = re.compile(r"\n\s*")

_MISSING = object()


def pretty(value: Any, name: Optional[str] = None, *, config: Optional[RivConfig] = None) -> str:
    return encode(value, name, config=config)


def minify(value: Any, name: Optional[str] = None, *, config: Optional[RivConfig] = None) -> str:
    """Single-line rendering for display.

    Folding newlines removes the indentation record blocks depend on, so
    the result is not meant to be read back.
    """
    return _FOLD.sub(" ", encode(value, name, config=config)).strip()


def clone(value: Any, *, config: Optional[RivConfig] = None) -> Any:
    """Deep copy through the text form.

    Shared sub-objects come back as independent copies, and anything the
    format doesn't carry (exception subclasses, function members) is lost.
    """
    cfg = snapshot(config)
    return decode(encode(value, config=cfg), config=cfg)


def equal(a: Any, b: Any, *, config: Optional[RivConfig] = None) -> bool:
    """True if both values serialize to identical text.

    A value that can't be serialized (circular, too deep, unsupported
    type) is equal to nothing.
    """
    cfg = snapshot(config)
    try:
        return encode(a, config=cfg) == encode(b, config=cfg)
    except RivError:
        return False


# ── merge ─────────────────────────────────────────────────────

def _is_plain_record(val: Any) -> bool:
    return isinstance(val, dict) and kind_of(val) is Kind.RECORD


def merge(target: Any, source: Any, *, config: Optional[RivConfig] = None) -> Any:
    """Deep-merge `source` into a clone of `target`.

    Records merge key by key, recursively.  Every other value in `source`,
    sequences included, replaces what `target` had.  When either side is
    not a record, `source` wins outright.

    Example:
        >>> merged = merge({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}, "e": 4})
        >>> merged == {"a": 1, "b": {"c": 2, "d": 3}, "e": 4}
        True
    """
    if not (_is_plain_record(target) and _is_plain_record(source)):
        return source
    result = clone(target, config=config)
    return _merge_into(result, source)


def _merge_into(tgt: dict, src: dict) -> dict:
    for key, val in src.items():
        if _is_plain_record(val):
            current = tgt.get(key)
            if not _is_plain_record(current):
                current = Record()
                tgt[key] = current
            _merge_into(current, val)
        else:
            tgt[key] = val
    return tgt


# ── validate ──────────────────────────────────────────────────
# Schema vocabulary:
#   "string" "number" "boolean" "object" "array" "any"   type names
#   None                                                  the nil value
#   [schema]                                              sequence of schema
#   {"field": schema, ...}                                required fields

def _type_matches(type_name: str, val: Any) -> bool:
    if type_name == "any":
        return True
    if type_name == "string":
        return isinstance(val, str)
    if type_name == "boolean":
        return isinstance(val, bool)
    if type_name == "number":
        # bool and BigInt are ints in Python but not numbers here.
        return isinstance(val, (int, float)) and not isinstance(val, (bool, BigInt))
    if type_name == "object":
        return isinstance(val, dict)
    if type_name == "array":
        return isinstance(val, (list, tuple))
    return False


def _check(schema: Any, val: Any, path: str, errors: List[str]) -> None:
    if val is _MISSING:
        errors.append("{}: missing".format(path or "$"))
        return
    if schema is None:
        if val is not None:
            errors.append("{}: expected nil".format(path or "$"))
        return
    if isinstance(schema, str):
        if not _type_matches(schema, val):
            errors.append("{}: expected {}".format(path or "$", schema))
        return
    if isinstance(schema, (list, tuple)):
        if not isinstance(val, (list, tuple)):
            errors.append("{}: expected array".format(path or "$"))
            return
        item_schema = schema[0] if schema else "any"
        for i, item in enumerate(val):
            _check(item_schema, item, "{}[{}]".format(path, i), errors)
        return
    if isinstance(schema, dict):
        if not isinstance(val, dict):
            errors.append("{}: expected object".format(path or "$"))
            return
        for key, sub in schema.items():
            _check(sub, val.get(key, _MISSING), "{}.{}".format(path, key), errors)
        return
    errors.append("{}: unusable schema node {!r}".format(path or "$", schema))


def validation_errors(schema: Any, data: Any) -> List[str]:
    """List every place where `data` doesn't fit `schema` (empty if it fits).

    Paths look like ".tags[1]" or ".meta.theme"; "$" is the root.
    """
    errors: List[str] = []
    _check(schema, data, "", errors)
    return errors


def validate(schema: Any, data: Any) -> bool:
    """True if `data` has the shape `schema` describes.

    Example:
        >>> validate({"name": "string", "tags": ["string"]},
        ...          {"name": "John", "tags": ["dev", "js"]})
        True
    """
    return not validation_errors(schema, data)
