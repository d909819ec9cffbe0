# timeparse.py
from __future__ import annotations
from datetime import datetime, timedelta
from typing import List, Optional

from errors import ParseErrorKind, ParseFailure

U32_MAX = 2**32 - 1
DIGITS = "0123456789"
MAX_FIELD_DIGITS = len(str(U32_MAX))


def is_valid_input(text: str, colon_allowed: bool) -> bool:
    """
    True for a non-empty string made only of digits
    (and colons, if allowed). Used to colour the form fields.
    """
    if not text:
        return False
    allowed = DIGITS + ":" if colon_allowed else DIGITS
    return all(ch in allowed for ch in text)


def _field(text: str, part: str, invalid: ParseErrorKind, too_big: ParseErrorKind) -> int:
    # int() would also take "+5", " 5" and "1_0"
    if not part or any(ch not in DIGITS for ch in part):
        raise ParseFailure(invalid, text, f"field {_clip(part)!r}")
    significant = part.lstrip("0") or "0"
    # anything longer already exceeds U32_MAX; int() refuses huge strings anyway
    if len(significant) > MAX_FIELD_DIGITS:
        raise ParseFailure(too_big, text, f"field of {len(significant)} digits")
    return int(significant)


def _clip(part: str) -> str:
    return part if len(part) <= 12 else part[:12] + "..."


def parse_relative(text: str) -> int:
    """
    "1:02:03" -> 3723, "90" -> 90.
    fields are read right-to-left as seconds, minutes, hours, ...
    """
    seconds = 0
    for index, part in enumerate(reversed(text.split(":"))):
        value = _field(text, part, ParseErrorKind.INVALID_NUMBER, ParseErrorKind.OVERFLOW)
        if value:
            seconds += value * 60**index
        if seconds > U32_MAX:
            raise ParseFailure(ParseErrorKind.OVERFLOW, text)
    return seconds


def _clock_fields(text: str) -> List[int]:
    parts = text.split(":")
    if len(parts) > 3:
        raise ParseFailure(ParseErrorKind.INVALID_CLOCK_FIELD, text, "too many fields")
    kind = ParseErrorKind.INVALID_CLOCK_FIELD
    fields = [_field(text, part, kind, kind) for part in parts]
    # pad minute/second
    fields += [0] * (3 - len(fields))
    return fields


def parse_until(text: str, now: Optional[datetime] = None) -> int:
    """
    seconds from now until the next occurrence of the clock time in text
    ("18:30", "7", "23:59:59"). a time already passed today means tomorrow.
    """
    if now is None:
        now = datetime.now()
    hour, minute, second = _clock_fields(text)
    try:
        target = now.replace(hour=hour, minute=minute, second=second)
    except ValueError as exc:
        raise ParseFailure(ParseErrorKind.INVALID_CLOCK_FIELD, text, str(exc)) from exc

    delta = target - now
    if delta < timedelta(0):
        delta += timedelta(days=1)
    return int(delta.total_seconds())


def parse_time_in(text: str, until: bool, now: Optional[datetime] = None) -> int:
    if until:
        return parse_until(text, now)
    return parse_relative(text)
