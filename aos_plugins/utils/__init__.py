"""Utility functions for the plugin tooling."""

from .console import Colors, colorize, fail_mark, ok_mark, warn_mark
from .logging_setup import setup_logging

__all__ = [
    'Colors',
    'colorize',
    'fail_mark',
    'ok_mark',
    'warn_mark',
    'setup_logging',
]
