# errors.py
from __future__ import annotations
from enum import Enum


class ParseErrorKind(Enum):
    INVALID_NUMBER = "invalid number"
    INVALID_CLOCK_FIELD = "invalid clock field"
    OVERFLOW = "overflow"


class CountdownError(Exception):
    """base for everything the countdown core raises"""


class ParseFailure(CountdownError, ValueError):
    """time input could not be turned into seconds"""
    def __init__(self, kind: ParseErrorKind, text: str, detail: str = ""):
        self.kind = kind
        self.text = text
        shown = text if len(text) <= 40 else text[:40] + "..."
        msg = f"{kind.value}: {shown!r}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class TimeOverflow(CountdownError, OverflowError):
    """end instant is outside the representable time range"""


class SinkWriteFailure(CountdownError, OSError):
    """
    an output line could not be persisted.
    only ever logged by the sink, never raised into the countdown.
    """
    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"could not write {path}: {cause}")
