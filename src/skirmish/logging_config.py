"""Process logging setup for hosts embedding the engine."""
from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "SKIRMISH_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int | str | None = None) -> None:
    """Configure logging; ``SKIRMISH_LOG_LEVEL`` wins when no level is given."""
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "WARNING")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("skirmish").setLevel(level)
