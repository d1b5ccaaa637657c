# log.py — loguru setup for applications embedding filterviz
# -----------------------------------------------------------
# The package disables its own logger on import; call configure_logging()
# (the CLI does) to route filterviz records to stderr.
#   FILTERVIZ_LOG_LEVEL : DEBUG, INFO, WARNING, ERROR (default INFO)
# -----------------------------------------------------------
from __future__ import annotations

import os
import sys
from typing import Final, Optional

from loguru import logger

__all__ = ["configure_logging", "FORMAT"]

_ENV_LEVEL: Final = "FILTERVIZ_LOG_LEVEL"

FORMAT: Final = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level:8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(level: Optional[str] = None, sink=None) -> int:
    """Enable filterviz logging at *level* (env var, then INFO); returns the sink id."""
    level = (level or os.getenv(_ENV_LEVEL, "INFO")).upper()
    sink = sink or sys.stderr
    logger.remove()
    sink_id = logger.add(sink, level=level, format=FORMAT, colorize=sink is sys.stderr)
    logger.enable("filterviz")
    return sink_id
