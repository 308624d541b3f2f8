"""riv — Riv text serialization for Python.

Riv is a readable notation for value graphs that plain JSON can't carry:
dates, regular expressions, big integers, sets, value-keyed maps, byte
buffers and error objects, with named records laid out by indentation.

Quick start:
    >>> from riv import serialize, deserialize
    >>> text = serialize({"name": "Ada", "tags": ["math", "code"]}, "user")
    >>> print(text)
    @user
      :name => "Ada"
      :tags => <"math" "code">
    >>> deserialize(text)
    Record({'name': 'Ada', 'tags': ['math', 'code']}, name='user')

Values survive the trip with their kind intact:
    >>> deserialize(serialize({1, 2})) == {1, 2}
    True
"""

from __future__ import annotations

from typing import Any, Optional, Union

from ._config import RivConfig, configure, get_config, override
from ._decoder import decode
from ._encoder import encode
from ._errors import (
    ERR_CIRCULAR,
    ERR_CONFIG,
    ERR_CONVERSION,
    ERR_GRAMMAR,
    ERR_LIMIT_DEPTH,
    ERR_LIMIT_LENGTH,
    ERR_TYPE,
    CircularReferenceError,
    ConfigError,
    ConversionError,
    GrammarError,
    LimitExceededError,
    RivError,
    UnsupportedTypeError,
)
from ._json_adapter import json_to_value, value_to_json
from ._types import BigInt, Kind, Record, ValueMap, kind_of
from ._utils import clone, equal, merge, minify, pretty, validate, validation_errors

__version__ = "1.0.0"

__all__ = [
    # Public API functions
    "serialize",
    "deserialize",
    "pretty",
    "minify",
    "clone",
    "equal",
    "merge",
    "validate",
    "validation_errors",
    # JSON bridge
    "json_to_value",
    "value_to_json",
    # Configuration
    "RivConfig",
    "get_config",
    "configure",
    "override",
    # Value types
    "BigInt",
    "Record",
    "ValueMap",
    "Kind",
    "kind_of",
    # Exceptions
    "RivError",
    "GrammarError",
    "LimitExceededError",
    "CircularReferenceError",
    "ConversionError",
    "UnsupportedTypeError",
    "ConfigError",
    # Error codes
    "ERR_GRAMMAR",
    "ERR_LIMIT_DEPTH",
    "ERR_LIMIT_LENGTH",
    "ERR_CIRCULAR",
    "ERR_CONVERSION",
    "ERR_TYPE",
    "ERR_CONFIG",
]


# ── Core API ──────────────────────────────────────────────────

def serialize(
    value: Any,
    name: Optional[str] = None,
    start_level: int = 0,
    *,
    config: Optional[RivConfig] = None,
) -> str:
    """Write `value` as Riv text.

    `name` labels a top-level record (`@name`); a Record's own name is used
    when none is given.  `start_level` shifts nested indentation for text
    that will be embedded in a larger document.
    """
    return encode(value, name, start_level, config)


def deserialize(text: Union[str, bytes], *, config: Optional[RivConfig] = None) -> Any:
    """Read one Riv value from `text`.

    Raises a RivError subclass on malformed input; the error's `position`
    and `context` point at where reading stopped.
    """
    return decode(text, config)
