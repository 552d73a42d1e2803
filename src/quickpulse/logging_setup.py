"""
Logging setup for applications embedding the reporting client.

The package itself only creates module-level loggers; the host decides
whether and how to configure handlers.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging with the package's standard format.

    Args:
        level: Level name; defaults to the `[logging]` level from config.toml
    """
    if level is None:
        from .config import get_config
        level = get_config().logging.level

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
    )
