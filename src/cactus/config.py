"""Runtime configuration. Defaults can be overridden with CACTUS_* variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

VERSION = "0.0.1"
ENV_PREFIX = "CACTUS_"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(f"{ENV_PREFIX}{name}")
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("ignoring %s%s=%r: not an integer", ENV_PREFIX, name, raw)
        return default
    if value <= 0:
        logger.warning("ignoring %s%s=%r: must be positive", ENV_PREFIX, name, raw)
        return default
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(f"{ENV_PREFIX}{name}")
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("ignoring %s%s=%r: not a number", ENV_PREFIX, name, raw)
        return default


@dataclass
class Config:
    """Editor configuration."""

    tab_stop: int = 8
    quit_times: int = 3
    message_timeout: float = 5.0  # seconds
    log_file: str = ""
    log_level: str = "WARNING"


def load_config() -> Config:
    defaults = Config()
    return Config(
        tab_stop=_env_int("TAB_STOP", defaults.tab_stop),
        quit_times=_env_int("QUIT_TIMES", defaults.quit_times),
        message_timeout=_env_float("MESSAGE_TIMEOUT", defaults.message_timeout),
        log_file=os.environ.get(f"{ENV_PREFIX}LOG_FILE", defaults.log_file),
        log_level=os.environ.get(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level).upper(),
    )
