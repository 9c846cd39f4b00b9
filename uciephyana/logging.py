"""
# Logging

Sweeps report dispatch, completion, and failure of their simulation jobs on the
`uciephyana` logger. It prints `[LEVEL] message` lines at INFO and above by default.
"""

import logging
from typing import Union

logger = logging.getLogger("uciephyana")
logger.setLevel(logging.INFO)

if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(_handler)

# Level at which nothing is logged
SILENT = logging.CRITICAL + 1


def set_log_level(level: Union[str, int]) -> None:
    """Set the level of per-job sweep logging. `"SILENT"` turns it off."""
    if isinstance(level, str):
        level = SILENT if level.upper() == "SILENT" else logging.getLevelName(level.upper())
    logger.setLevel(level)
