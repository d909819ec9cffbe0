"""Shared fixtures: a controllable wall clock and a recording sink."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import List

import pytest

from sinks import Sink


class FakeClock:
    """Wall clock that only moves when sleep() is called."""

    def __init__(self, start: datetime, drift: float = 1.0) -> None:
        self.now = start
        self.drift = drift  # seconds of clock time per requested second
        self.sleeps: List[float] = []

    def __call__(self) -> datetime:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += timedelta(seconds=seconds * self.drift)

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class RecordingSink(Sink):
    def __init__(self) -> None:
        self.lines: List[str] = []

    def emit(self, line: str) -> None:
        self.lines.append(line)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 5, 1, 12, 0, 0))


@pytest.fixture
def recorder() -> RecordingSink:
    return RecordingSink()

