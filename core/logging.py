"""
Logging configuration shared by the import scripts and the API
"""

import logging
import sys
from typing import Optional
from core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Third-party loggers held at WARNING; request lines come from RequestContextMiddleware
QUIET_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "uvicorn.access",
    "httpx",
)


def setup_logging(level: Optional[str] = None) -> int:
    """
    Configure the root logger for a script run or the API process.

    Returns the numeric level applied; an unknown level name falls back to INFO.
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, None)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging configured at {logging.getLevelName(log_level)} ({settings.ENVIRONMENT})"
    )
    return log_level
