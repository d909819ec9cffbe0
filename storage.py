# storage.py
from __future__ import annotations
import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from timeparse import parse_relative
from timer import CountdownPlan

logger = logging.getLogger(__name__)

# path setup
CONFIG_DIR_ENV = "COUNTMEDOWN_CONFIG_DIR"
CONFIG_NAME = "countmedown.json"


def config_path() -> Path:
    """$COUNTMEDOWN_CONFIG_DIR/countmedown.json, else ~/.config/CountMeDown/"""
    base = os.environ.get(CONFIG_DIR_ENV)
    config_dir = Path(base) if base else Path.home() / ".config" / "CountMeDown"
    return config_dir / CONFIG_NAME


@dataclass
class RunConfig:
    """the five user-facing parameters of a countdown, as saved on disk"""
    time_in: str
    prefix: str
    ending: str
    step: int
    filepath: str

    @classmethod
    def default(cls) -> "RunConfig":
        return cls(
            time_in="10:00",
            prefix="Start in:",
            ending="",
            step=1,
            filepath=str(Path.cwd() / "time.txt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> "RunConfig":
        """
        build from a parsed JSON object.
        raises ValueError when a field is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError("config must be a JSON object")
        values = {}
        for f in fields(cls):
            if f.name not in data:
                raise ValueError(f"missing field {f.name!r}")
            value = data[f.name]
            expected = int if f.name == "step" else str
            # bool is an int subclass
            if not isinstance(value, expected) or isinstance(value, bool):
                raise ValueError(f"field {f.name!r} must be {expected.__name__}")
            values[f.name] = value
        return cls(**values)

    def get_seconds(self) -> int:
        return parse_relative(self.time_in)

    def to_plan(self, verbose: bool = False) -> CountdownPlan:
        return CountdownPlan(
            total_seconds=self.get_seconds(),
            prefix=self.prefix,
            ending=self.ending,
            step=self.step,
            filepath=self.filepath,
            verbose=verbose,
        )


def load_config(path: Optional[Path] = None) -> Optional[RunConfig]:
    """
    read the saved config.
    missing or corrupt file -> None (no configuration available)
    """
    path = path or config_path()
    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as f:
            return RunConfig.from_dict(json.load(f))
    except (OSError, ValueError) as exc:
        # json.JSONDecodeError is a ValueError
        logger.warning("ignoring config %s: %s", path, exc)
        return None


def save_config(cfg: RunConfig, path: Optional[Path] = None) -> Path:
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(cfg.to_dict(), f, ensure_ascii=False, indent=2)
    logger.info("config saved to %s", path)
    return path
