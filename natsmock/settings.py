"""Environment-driven settings; a .env file supplies values the environment lacks."""

import logging
import os
from typing import Optional

from dotenv import dotenv_values, find_dotenv

DEFAULT_LOG_LEVEL = "INFO"


def _get(key: str) -> Optional[str]:
    """Read `key` from os.environ, else from the nearest .env; os.environ is left as is."""
    value = os.environ.get(key)
    if value is None:
        value = dotenv_values(find_dotenv(usecwd=True)).get(key)
    return value


def log_level() -> int:
    """Level for natsmock loggers from NATSMOCK_LOG_LEVEL; unknown names fall back to INFO."""
    name = (_get("NATSMOCK_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()
    level = getattr(logging, name, None)
    if not isinstance(level, int):
        return logging.INFO
    return level
