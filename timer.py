# timer.py
from __future__ import annotations
import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from errors import TimeOverflow

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def format_time(total_seconds: int) -> str:
    """
    format seconds as MM:SS, or HH:MM:SS from one hour on.
    negative values use Python's floor division/modulo (-1 -> "-1:59").
    """
    minutes = total_seconds // 60
    if abs(minutes) > 59:
        hours = total_seconds // 3600
        return f"{hours:02d}:{minutes % 60:02d}:{total_seconds % 60:02d}"
    return f"{minutes:02d}:{total_seconds % 60:02d}"


def tick_line(prefix: str, remaining: int, blink: bool = False) -> str:
    shown = format_time(remaining)
    if blink:
        shown = shown.replace(":", " ")
    return f"{prefix} {shown}"


@dataclass(frozen=True)
class CountdownPlan:
    """everything one countdown run needs, fixed for the run's lifetime"""
    total_seconds: int
    prefix: str = ""
    ending: str = ""
    step: int = 1
    filepath: str = "./time.txt"
    verbose: bool = False

    def __post_init__(self):
        if self.step < 1:
            raise ValueError(f"step must be >= 1, got {self.step}")
        if self.total_seconds < 0:
            raise ValueError(f"total_seconds must be >= 0, got {self.total_seconds}")


def _whole_seconds(dt: datetime) -> datetime:
    return dt.replace(microsecond=0)


class Countdown:
    """
    a single countdown run
    the wall clock decides when it is over, the counter only decides what is shown
    """
    def __init__(self, plan: CountdownPlan, clock: Clock = datetime.now):
        self.plan = plan
        self._clock = clock
        self.remaining = plan.total_seconds  # signed, may overshoot below zero
        self.end_instant: Optional[datetime] = None
        self.started_at: Optional[datetime] = None

    def start(self) -> "Countdown":
        now = self._clock()
        try:
            self.end_instant = now + timedelta(seconds=self.plan.total_seconds)
        except OverflowError as exc:
            raise TimeOverflow(
                f"cannot count down {self.plan.total_seconds}s from {now.isoformat()}"
            ) from exc
        self.started_at = now
        self.remaining = self.plan.total_seconds
        return self

    def expired(self, now: Optional[datetime] = None) -> bool:
        if self.end_instant is None:
            raise RuntimeError("countdown not started")
        if now is None:
            now = self._clock()
        return _whole_seconds(now) >= _whole_seconds(self.end_instant)

    def next_line(self, blink: bool = False) -> str:
        line = tick_line(self.plan.prefix, self.remaining, blink)
        self.remaining -= self.plan.step
        return line


def count_me_down(plan: CountdownPlan, sink,
                  clock: Clock = datetime.now,
                  sleep: Callable[[float], None] = time.sleep) -> None:
    """
    blocking countdown: one line per step until the end instant,
    then the ending line exactly once (even if empty)
    """
    countdown = Countdown(plan, clock).start()
    logger.info("counting down %ss in steps of %ss to %s",
                plan.total_seconds, plan.step, plan.filepath)
    while not countdown.expired():
        line = countdown.next_line()
        logger.debug("tick: %r", line)
        sink.emit(line)
        sleep(plan.step)
    sink.emit(plan.ending)
    logger.info("countdown finished")


class Ticker:
    """
    calls on_tick every `interval` seconds on a daemon thread,
    independent of the UI event loop
    """
    def __init__(self, on_tick: Callable[[], None], interval: float = 1.0):
        self._on_tick = on_tick # callback every interval
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # ----- properties -----
    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # ----- outer controls -----
    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="countdown-ticker", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    # ----- internal methods -----
    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self._on_tick()
            except Exception:
                # the ticker outlives a failing callback
                logger.exception("tick callback failed")
