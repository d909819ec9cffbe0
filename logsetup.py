# logsetup.py
from __future__ import annotations
import logging
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: Union[int, str] = logging.WARNING, log_path: Optional[str] = None) -> None:
    """
    stderr handler, plus a file handler when log_path is given.
    stdout stays reserved for the countdown lines themselves.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_path:
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
