"""Logging configuration shared by every command-line entry point."""

import logging
import os
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger.

    Args:
        level: Level name; defaults to the LOG_LEVEL env var, then WARNING so
               INFO logs do not clutter command output.
    """
    level_name = (level or os.getenv('LOG_LEVEL', 'WARNING')).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format=LOG_FORMAT,
        datefmt='%Y-%m-%d %H:%M:%S',
    )
