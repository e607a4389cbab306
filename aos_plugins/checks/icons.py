"""Icon quality rules for SVG icons."""

import re
from pathlib import Path
from typing import List

from aos_plugins.constants import MAX_ICON_BYTES

_THEMEABLE_RE = re.compile(r'fill="currentcolor"|stroke="currentcolor"|fill="none"')
_HARDCODED_COLOR_RE = re.compile(
    r"""(?:fill|stroke|stop-color|color)\s*[=:]\s*["']?\s*(#[0-9a-fA-F]{3,8}\b|rgba?\(|hsla?\()""",
    re.IGNORECASE,
)


def check_svg(content: str, size: int) -> List[str]:
    """Problems with an SVG icon; empty when it is fine."""
    problems = []
    if size > MAX_ICON_BYTES:
        problems.append(f"icon is {size} bytes (max {MAX_ICON_BYTES})")
    if "<svg" not in content or "</svg>" not in content:
        problems.append("not a valid SVG (missing <svg> or </svg>)")
        return problems
    if "viewBox" not in content:
        problems.append("missing viewBox")
    if not _THEMEABLE_RE.search(content.lower()):
        problems.append('does not use currentColor (fill="currentColor" or stroke="currentColor")')
    match = _HARDCODED_COLOR_RE.search(content)
    if match:
        problems.append(f"hard-coded color {match.group(1)!r} (use currentColor)")
    return problems


def check_svg_file(path: Path) -> List[str]:
    data = path.read_bytes()
    return check_svg(data.decode("utf-8", errors="replace"), len(data))
