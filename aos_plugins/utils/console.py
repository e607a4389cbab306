"""Coloured console markers for CLI output."""

import os
import sys


class Colors:
    """ANSI color codes (only used when TTY detected)"""
    RESET = '\033[0m'
    GREEN = '\033[92m'     # passed
    YELLOW = '\033[93m'    # warnings, exemptions
    RED = '\033[91m'       # failures
    BOLD = '\033[1m'
    DIM = '\033[2m'


def _should_use_colors() -> bool:
    """Check if colored output should be enabled"""
    # Check environment variable first
    force_color = os.getenv('FORCE_COLOR', '').lower()
    if force_color in ('1', 'true', 'yes', 'on'):
        return True
    elif force_color in ('0', 'false', 'no', 'off'):
        return False

    # Auto-detect: use colors if stdout is a TTY
    return sys.stdout.isatty()


def colorize(text: str, color: str) -> str:
    """Apply color to text if colors are enabled"""
    if _should_use_colors():
        return f"{color}{text}{Colors.RESET}"
    return text


def ok_mark() -> str:
    return colorize("✓", Colors.GREEN)


def fail_mark() -> str:
    return colorize("✗", Colors.RED)


def warn_mark() -> str:
    return colorize("⚠", Colors.YELLOW)
