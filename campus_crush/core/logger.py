"""
Logging setup - one stream handler on the root logger.

Usage:
    from campus_crush.core.logger import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys

from campus_crush.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def setup_logging(level: str = None) -> None:
    """Configure root logging once. Later calls only adjust the level."""
    global _configured
    level = (level or get_settings().log_level).upper()

    root = logging.getLogger()
    root.setLevel(level)

    if not _configured:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        # SQL echo is controlled by the debug flag, not the root level
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
        _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
