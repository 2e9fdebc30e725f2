# Logging setup for the rpm_life logger tree

from __future__ import annotations

import logging
from typing import Optional

from rpm_life.utils.config import CONFIG

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger("rpm_life")


def setup_logging(debug: Optional[bool] = None) -> None:
    """Configure the rpm_life logger tree once; DEBUG when debug_mode is on."""
    if debug is None:
        debug = CONFIG.get("debug_mode", False)
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
