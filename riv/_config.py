"""Riv configuration — process-wide defaults with per-call overrides.

The default configuration is mutable and shared by the whole process.
Every encode/decode call takes a snapshot of it (or of the config passed
in) when it starts, so a concurrent configure() never changes the rules
halfway through a call.
"""

from __future__ import annotations

import copy
import logging
from contextlib import contextmanager
from dataclasses import dataclass, fields
from typing import Any, Dict, Iterator, Optional

from ._constants import (
    DATE_FORMATS,
    DEFAULT_DATE_FORMAT,
    DEFAULT_INDENT,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_LENGTH,
)
from ._errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class RivConfig:
    indent: int = DEFAULT_INDENT
    max_depth: int = DEFAULT_MAX_DEPTH
    max_length: int = DEFAULT_MAX_LENGTH
    date_format: str = DEFAULT_DATE_FORMAT

    def validate(self) -> None:
        """Raise ConfigError if any field is out of range."""
        # bool is an int subclass; True is not a usable indent width.
        for name in ("indent", "max_depth", "max_length"):
            val = getattr(self, name)
            if isinstance(val, bool) or not isinstance(val, int):
                raise ConfigError("{} must be an integer, got {!r}".format(name, val))
        if self.indent < 1:
            raise ConfigError("indent must be at least 1")
        if self.max_depth < 0:
            raise ConfigError("max_depth must not be negative")
        if self.max_length < 1:
            raise ConfigError("max_length must be at least 1")
        if self.date_format not in DATE_FORMATS:
            raise ConfigError(
                "date_format must be one of {}, got {!r}".format(
                    "|".join(DATE_FORMATS), self.date_format
                )
            )


_FIELD_NAMES = frozenset(f.name for f in fields(RivConfig))

_default = RivConfig()


def get_config() -> RivConfig:
    """Return the process-wide default configuration (the live object)."""
    return _default


def snapshot(config: Optional[RivConfig] = None) -> RivConfig:
    """Copy the effective configuration for the duration of one call."""
    cfg = copy.copy(config if config is not None else _default)
    cfg.validate()
    return cfg


def configure(**changes: Any) -> Dict[str, Any]:
    """Update the default configuration.  Returns the previous values.

    Unknown field names and out-of-range values raise ConfigError and
    leave the defaults untouched.
    """
    unknown = set(changes) - _FIELD_NAMES
    if unknown:
        raise ConfigError("unknown config field(s): {}".format(", ".join(sorted(unknown))))

    candidate = copy.copy(_default)
    for name, val in changes.items():
        setattr(candidate, name, val)
    candidate.validate()

    previous = {name: getattr(_default, name) for name in changes}
    for name, val in changes.items():
        setattr(_default, name, val)
    if changes:
        logger.debug("riv config updated: %s", changes)
    return previous


@contextmanager
def override(**changes: Any) -> Iterator[RivConfig]:
    """Temporarily change the default configuration.

    Example:
        >>> with override(date_format="timestamp"):
        ...     serialize(some_date)
    """
    previous = configure(**changes)
    try:
        yield _default
    finally:
        configure(**previous)
