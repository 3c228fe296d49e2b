"""
Logging setup for the bot process.

Stdout is reserved for the turn protocol, so everything goes to stderr.
Modules log through ``logging.getLogger(__name__)``; pass ``extra={"turn": n}``
to fill the turn column.

Example output:
    13:02:11.412 | INFO    |    7 | Turn done: 2 moves, 1 spawns, budget 5 left (1.8 ms)
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, Union

ROOT_LOGGER = "platinum_rift"


class RiftFormatter(logging.Formatter):
    """Adds a right-aligned turn column (dash when absent)."""

    BASE_FMT = "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(turn_col)4s | %(message)s"
    DATE_FMT = "%H:%M:%S"

    def format(self, record: logging.LogRecord) -> str:
        record.turn_col = str(getattr(record, "turn", "-"))
        return super().format(record)


def configure_logging(level: Union[int, str] = logging.WARNING,
                      stream=None) -> logging.Logger:
    """
    Install a single stderr handler on the package logger.

    Calling it again only updates the level.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(RiftFormatter(fmt=RiftFormatter.BASE_FMT, datefmt=RiftFormatter.DATE_FMT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger


def turn_extra(turn: Optional[int]) -> dict:
    return {"turn": "-" if turn is None else turn}
