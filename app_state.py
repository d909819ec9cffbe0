# app_state.py
from __future__ import annotations
import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, List, Optional, Tuple

from sinks import Sink
from timer import Clock, Countdown, CountdownPlan, tick_line

logger = logging.getLogger(__name__)


class RunPhase(Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True)
class RunSnapshot:
    """one consistent view of the run; replaced as a whole, never edited"""
    phase: RunPhase = RunPhase.IDLE
    plan: Optional[CountdownPlan] = None
    sink: Optional[Sink] = None
    countdown: Optional[Countdown] = None  # only consulted for the end instant
    remaining: int = 0
    tick_count: int = 0
    next_due: Optional[datetime] = None

    @property
    def running(self) -> bool:
        return self.phase is RunPhase.RUNNING


@dataclass(frozen=True)
class TickResult:
    line: str
    sink: Sink
    finished: bool = False


@dataclass
class AppState:
    """
    GUI-side run state, shared by the Run button (UI thread)
    and the ticker thread. every change goes through the one lock.
    """
    clock: Clock = datetime.now
    _snapshot: RunSnapshot = field(default_factory=RunSnapshot, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _subscribers: List[Callable[[RunSnapshot], None]] = field(default_factory=list, repr=False)

    # ---------- pub-sub ----------
    def subscribe(self, fn: Callable[[RunSnapshot], None]) -> None:
        """Register a callback invoked with the new snapshot whenever the phase changes."""
        self._subscribers.append(fn)

    def _notify(self, snap: RunSnapshot) -> None:
        for fn in list(self._subscribers):
            try:
                fn(snap)
            except Exception:
                logger.exception("state subscriber failed")

    # ---------- reads ----------
    def snapshot(self) -> RunSnapshot:
        with self._lock:
            return self._snapshot

    # ---------- transitions ----------
    def toggle(self, make_run: Callable[[], Tuple[CountdownPlan, Sink]]) -> RunSnapshot:
        """
        Idle -> Running, Running -> Idle.
        make_run is only called when starting, so a stop never depends on the
        form being valid. ParseFailure/TimeOverflow leave the state Idle.
        """
        with self._lock:
            if self._snapshot.running:
                logger.info("run stopped at tick %d", self._snapshot.tick_count)
                self._snapshot = RunSnapshot()
            else:
                plan, sink = make_run()
                countdown = Countdown(plan, self.clock).start()
                self._snapshot = RunSnapshot(
                    phase=RunPhase.RUNNING,
                    plan=plan,
                    sink=sink,
                    countdown=countdown,
                    remaining=plan.total_seconds,
                    next_due=countdown.started_at,
                )
                logger.info("run started: %ss, step %ss", plan.total_seconds, plan.step)
            snap = self._snapshot
        self._notify(snap)
        return snap

    def advance(self, now: Optional[datetime] = None) -> Optional[TickResult]:
        """
        called by the ticker once a second.
        returns the line to emit, if any; the caller writes it outside the lock.
        """
        with self._lock:
            snap = self._snapshot
            if not snap.running:
                return None
            if now is None:
                now = self.clock()
            if not snap.countdown.expired(now):
                if now.replace(microsecond=0) < snap.next_due.replace(microsecond=0):
                    return None
                # separator blinks on odd ticks
                line = tick_line(snap.plan.prefix, snap.remaining, blink=snap.tick_count % 2 == 1)
                self._snapshot = replace(
                    snap,
                    remaining=snap.remaining - snap.plan.step,
                    tick_count=snap.tick_count + 1,
                    next_due=snap.next_due + timedelta(seconds=snap.plan.step),
                )
                return TickResult(line, snap.sink)
            self._snapshot = finished = RunSnapshot()
            result = TickResult(snap.plan.ending, snap.sink, finished=True)
        logger.info("run finished")
        self._notify(finished)
        return result
