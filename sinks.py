# sinks.py
from __future__ import annotations
import logging
import queue
import sys
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from errors import SinkWriteFailure

logger = logging.getLogger(__name__)


class Sink:
    """receives one line of text per tick"""
    def emit(self, line: str) -> None:
        raise NotImplementedError


class FileSink(Sink):
    """
    replaces the whole file with the latest line.
    write errors are logged and counted, the countdown keeps going.
    """
    def __init__(self, path: str):
        self.path = path
        self.failure_count = 0
        self.last_failure: Optional[SinkWriteFailure] = None

    def emit(self, line: str) -> None:
        try:
            Path(self.path).write_text(line, encoding="utf-8")
        # ValueError: NUL in the path, or a lone surrogate from argv in the line
        except (OSError, ValueError) as exc:
            failure = SinkWriteFailure(self.path, exc)
            self.failure_count += 1
            self.last_failure = failure
            logger.error("%s", failure)


class ConsoleSink(Sink):
    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    def emit(self, line: str) -> None:
        # sys.stdout may be swapped after construction
        print(line, file=self._stream or sys.stdout, flush=True)


class LabelSink(Sink):
    """hands lines to the UI thread through a queue; the UI drains it"""
    def __init__(self, lines: "queue.Queue[str]"):
        self.lines = lines

    def emit(self, line: str) -> None:
        self.lines.put(line)


class FanOutSink(Sink):
    def __init__(self, sinks: Iterable[Sink]):
        self.sinks = list(sinks)

    def emit(self, line: str) -> None:
        for sink in self.sinks:
            sink.emit(line)


def build_sink(filepath: str, verbose: bool,
               label_queue: "Optional[queue.Queue[str]]" = None) -> FanOutSink:
    """file always, console if verbose, label if the UI passed a queue"""
    sinks: List[Sink] = [FileSink(filepath)]
    if verbose:
        sinks.append(ConsoleSink())
    if label_queue is not None:
        sinks.append(LabelSink(label_queue))
    return FanOutSink(sinks)
