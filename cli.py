# cli.py
from __future__ import annotations
import argparse
import logging
import sys
import time
from datetime import datetime
from typing import Callable, List, Optional

from errors import ParseFailure, TimeOverflow
from logsetup import setup_logging
from sinks import build_sink
from timeparse import parse_time_in
from timer import Clock, CountdownPlan, count_me_down

logger = logging.getLogger(__name__)

DEFAULT_FILE = "./time.txt"


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if n < 1:
        raise argparse.ArgumentTypeError(f"step must be at least 1, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="countmedown",
        description="Count down to zero, writing the remaining time to a file every step.",
    )
    parser.add_argument("time_in",
                        help='duration like "10:00" or "1:02:03", or a clock time with --until')
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="also print every line to stdout")
    parser.add_argument("-f", "--file", default=DEFAULT_FILE,
                        help=f"output file, overwritten every step (default: {DEFAULT_FILE})")
    parser.add_argument("-s", "--step", type=_positive_int, default=1,
                        help="seconds between updates (default: 1)")
    parser.add_argument("-p", "--prefix", default="", help="text in front of the time")
    parser.add_argument("-e", "--ending", default="", help="text written when the countdown ends")
    parser.add_argument("-u", "--until", action="store_true",
                        help="treat time_in as a time of day (HH[:MM[:SS]]) to count down to")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="diagnostics on stderr (default: WARNING)")
    parser.add_argument("--log-file", default=None,
                        help="also append diagnostics to this file")
    return parser


def run(argv: Optional[List[str]] = None,
        clock: Clock = datetime.now,
        sleep: Callable[[float], None] = time.sleep) -> int:
    """parse arguments and count down; returns the process exit status"""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        setup_logging(args.log_level, args.log_file)
    except OSError as exc:
        parser.error(f"cannot open log file: {exc}")

    try:
        seconds = parse_time_in(args.time_in, args.until, clock())
        plan = CountdownPlan(
            total_seconds=seconds,
            prefix=args.prefix,
            ending=args.ending,
            step=args.step,
            filepath=args.file,
            verbose=args.verbose,
        )
        count_me_down(plan, build_sink(plan.filepath, plan.verbose), clock=clock, sleep=sleep)
    except (ParseFailure, TimeOverflow) as exc:
        logger.debug("startup failed", exc_info=True)
        print(f"countmedown: error: {exc}", file=sys.stderr)
        return 1
    return 0
