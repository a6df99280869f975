from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "BLAST_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str | int | None = None) -> None:
    """Configure root logging; ``level`` falls back to $BLAST_LOG_LEVEL then INFO."""
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO
        level = resolved
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("blast").setLevel(level)
