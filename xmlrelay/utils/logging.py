from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s | %(message)s"


def configure_logging(level: str | None = None) -> logging.Logger:
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    resolved = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=resolved, stream=sys.stdout, format=LOG_FORMAT)
    return logging.getLogger("xmlrelay")


__all__ = ["LOG_FORMAT", "configure_logging"]
