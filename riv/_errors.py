"""Riv error codes and exception classes.

Every failure raised by the package is a RivError carrying a `.code`
string, so callers (and the CLI) can branch on the code without caring
about the concrete class.  Decode errors additionally carry the cursor
position and a short window of the input around it.
"""

from __future__ import annotations

from typing import Optional

# ── Error codes ──────────────────────────────────────────────
# Grep-friendly; the conformance vectors compare against these strings.

ERR_GRAMMAR: str = "ERR_GRAMMAR"              # unexpected character or token
ERR_LIMIT_DEPTH: str = "ERR_LIMIT_DEPTH"      # nesting over max_depth
ERR_LIMIT_LENGTH: str = "ERR_LIMIT_LENGTH"    # input over max_length
ERR_CIRCULAR: str = "ERR_CIRCULAR"            # container reachable from itself
ERR_CONVERSION: str = "ERR_CONVERSION"        # payload text can't become a value
ERR_TYPE: str = "ERR_TYPE"                    # Python type outside the value model
ERR_CONFIG: str = "ERR_CONFIG"                # bad configuration value


class RivError(Exception):
    """Base exception for Riv encoding and decoding errors.

    `.code` is one of the ERR_* strings above.  `.position` and `.context`
    are only set on errors that left deserialize(); they hold the cursor
    offset and the input window around it.
    """

    code: str = ERR_GRAMMAR

    def __init__(
        self,
        msg: str = "",
        *,
        position: Optional[int] = None,
        context: Optional[str] = None,
    ) -> None:
        self.message = msg or self.code
        self.position = position
        self.context = context
        if context is not None:
            super().__init__('{} | context: "{}"'.format(self.message, context))
        else:
            super().__init__(self.message)

    def with_context(self, position: int, context: str) -> "RivError":
        """Return a copy of this error annotated with an input window."""
        return type(self)(self.message, position=position, context=context)


class GrammarError(RivError):
    code = ERR_GRAMMAR


class LimitExceededError(RivError):
    """Depth or length limit exceeded.  The code tells which one."""

    code = ERR_LIMIT_DEPTH

    def __init__(self, msg: str = "", *, code: str = ERR_LIMIT_DEPTH, **kwargs) -> None:
        self.code = code
        super().__init__(msg, **kwargs)

    def with_context(self, position: int, context: str) -> "LimitExceededError":
        return LimitExceededError(
            self.message, code=self.code, position=position, context=context
        )


class CircularReferenceError(RivError):
    code = ERR_CIRCULAR


class ConversionError(RivError):
    code = ERR_CONVERSION


class UnsupportedTypeError(RivError):
    code = ERR_TYPE


class ConfigError(RivError):
    code = ERR_CONFIG
