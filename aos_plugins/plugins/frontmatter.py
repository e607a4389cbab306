"""YAML frontmatter parsing for plugin, connector and app readmes."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DELIMITER = "---"


class FrontmatterError(ValueError):
    """Raised when a readme cannot be read or its block is not a YAML mapping."""


def split_frontmatter(content: str) -> Optional[tuple[str, str]]:
    """Split a Markdown document into (frontmatter yaml, body).

    Returns:
        None if the document does not open with a closed ``---`` block
    """
    if not content.startswith(DELIMITER):
        return None
    end = content.find(f"\n{DELIMITER}", len(DELIMITER))
    if end == -1:
        return None
    yaml_text = content[len(DELIMITER) + 1:end]
    body_start = content.find("\n", end + 1)
    body = content[body_start + 1:] if body_start != -1 else ""
    return yaml_text, body


def parse_frontmatter(content: str) -> Optional[Dict[str, Any]]:
    """Parse the YAML frontmatter of a Markdown document.

    Args:
        content: Full Markdown text

    Returns:
        The frontmatter mapping, or None when there is no frontmatter block
        (or the block is empty)

    Raises:
        FrontmatterError: The block is not valid YAML or not a mapping
    """
    parts = split_frontmatter(content)
    if parts is None:
        return None

    try:
        data = yaml.safe_load(parts[0])
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid YAML: {e}") from e

    if data is None:
        return None
    if not isinstance(data, dict):
        raise FrontmatterError(f"Frontmatter must be a mapping, got {type(data).__name__}")
    return data


def load_frontmatter(path: Path) -> Optional[Dict[str, Any]]:
    """Read a file and parse its frontmatter (see parse_frontmatter).

    Raises:
        FrontmatterError: The file cannot be read as UTF-8 text, or its
            block is not valid YAML or not a mapping
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FrontmatterError(f"Cannot read {path.name}: {e}") from e
    frontmatter = parse_frontmatter(content)
    if frontmatter is None:
        logger.debug(f"No YAML frontmatter found: {path}")
    return frontmatter
