# src/shinglesim/logging_config.py
import logging
from typing import Optional

from .similarity_search import configs


def setup_logging(debug: Optional[bool] = None) -> int:
    """Configure root logging for the CLI / API entry points. Returns the level used."""
    if debug is None:
        debug = configs.ENABLE_DEBUG_LOGS
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s", force=True)
    return level
