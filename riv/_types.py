"""Riv value model — the closed set of value kinds and their Python carriers.

    NIL       None
    BOOLEAN   bool
    NUMBER    int / float (NaN and the infinities included)
    BIGINT    BigInt           (int subclass, written as #big:)
    STRING    str
    SEQUENCE  list / tuple
    RECORD    dict with string keys, or Record (dict + optional name)
    DATE      datetime.datetime
    PATTERN   compiled re.Pattern
    ERROR     any exception instance
    SET       set / frozenset
    MAP       ValueMap, or a dict whose keys can't be written as record keys
    BUFFER    bytes / bytearray / memoryview

kind_of() is the single place that maps a Python object to its kind.  The
encoder dispatches on the result, one method per kind.
"""

from __future__ import annotations

import enum
import inspect
import re
from datetime import datetime
from typing import Any, Optional

from ._constants import NAME_FORBIDDEN
from ._errors import UnsupportedTypeError


class Kind(enum.Enum):
    NIL = "nil"
    BOOLEAN = "boolean"
    NUMBER = "number"
    BIGINT = "bigint"
    STRING = "string"
    SEQUENCE = "sequence"
    RECORD = "record"
    DATE = "date"
    PATTERN = "pattern"
    ERROR = "error"
    SET = "set"
    MAP = "map"
    BUFFER = "buffer"


class BigInt(int):
    """An integer written as a #big: literal rather than a plain number."""

    def __repr__(self) -> str:
        return "BigInt({})".format(int(self))


class Record(dict):
    """An ordered string-keyed mapping with an optional name.

    The name is what `@name` carries in the text.  It is an attribute, not
    a key, so no key is reserved.  Equality is plain dict equality: the
    name does not take part in it.
    """

    def __init__(self, *args: Any, name: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.name = name

    def __repr__(self) -> str:
        if self.name is None:
            return "Record({})".format(dict.__repr__(self))
        return "Record({}, name={!r})".format(dict.__repr__(self), self.name)

    def copy(self) -> "Record":
        return Record(self, name=self.name)


class ValueMap(dict):
    """A mapping whose keys may be any hashable value (written as #map:)."""

    def __repr__(self) -> str:
        return "ValueMap({})".format(dict.__repr__(self))


_SPACE = re.compile(r"\s")


def is_record_key(key: Any) -> bool:
    """True if `key` can be written as `:key =>` and read back unchanged."""
    if not isinstance(key, str) or not key:
        return False
    if _SPACE.search(key) or "=" in key:
        return False
    return True


def is_record_name(name: Any) -> bool:
    """True if `name` can follow `@` in a record header."""
    if not isinstance(name, str) or not name:
        return False
    if _SPACE.search(name):
        return False
    return not any(ch in NAME_FORBIDDEN for ch in name)


def is_skipped_member(val: Any) -> bool:
    """Function-valued record entries are left out of the text."""
    return inspect.isroutine(val)


def kind_of(value: Any) -> Kind:
    """Classify a Python value.  Raises UnsupportedTypeError for anything else."""
    if value is None:
        return Kind.NIL
    # bool before int: isinstance(True, int) is True.
    if isinstance(value, bool):
        return Kind.BOOLEAN
    # BigInt before int for the same reason.
    if isinstance(value, BigInt):
        return Kind.BIGINT
    if isinstance(value, (int, float)):
        return Kind.NUMBER
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, datetime):
        return Kind.DATE
    if isinstance(value, re.Pattern):
        return Kind.PATTERN
    if isinstance(value, BaseException):
        return Kind.ERROR
    if isinstance(value, (set, frozenset)):
        return Kind.SET
    if isinstance(value, (bytes, bytearray, memoryview)):
        return Kind.BUFFER
    if isinstance(value, (list, tuple)):
        return Kind.SEQUENCE
    if isinstance(value, ValueMap):
        return Kind.MAP
    if isinstance(value, dict):
        if all(is_record_key(k) for k in value):
            return Kind.RECORD
        return Kind.MAP
    raise UnsupportedTypeError("unsupported type: {}".format(type(value).__name__))
