"""
nkey_core.config
----------------
Runtime settings resolved from an explicit dict, then the environment,
then defaults.

    NKEYS_LOG_LEVEL   logging level name (default WARNING)
    NKEYS_LOG_FILE    optional path for a JSON log file
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import logging, os

_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    log_file: Optional[str] = None

    @property
    def level(self) -> int:
        return logging.getLevelName(self.log_level)


def load_settings(config: dict | None = None) -> Settings:
    config = config or {}

    level = (config.get("log_level") or os.getenv("NKEYS_LOG_LEVEL", "WARNING")).upper()
    if level not in _LEVELS:
        raise ValueError(f"Unknown log level: {level}")

    log_file = config.get("log_file") or os.getenv("NKEYS_LOG_FILE") or None

    return Settings(log_level=level, log_file=log_file)
