"""Test coverage - which declared tools are exercised by a plugin's tests."""

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Set

from aos_plugins.constants import TESTS_DIRNAME

logger = logging.getLogger(__name__)

TOOL_GROUPS = ("actions", "operations", "utilities")

# tool: 'task.list' (TypeScript), "tool": "task.list" or tool="task.list" (Python)
TOOL_REFERENCE_RE = re.compile(r"""\btool['"]?\s*[:=]\s*['"]([^'"]+)['"]""")

TEST_FILE_PATTERNS = ("*.test.ts", "test_*.py")


class UnreadableTestFileError(ValueError):
    """Raised when a plugin test file cannot be read as UTF-8 text."""

    def __init__(self, path: Path, error: Exception):
        self.path = path
        super().__init__(f"{TESTS_DIRNAME}/{path.name}: {error}")


def get_tools(frontmatter: Dict[str, Any]) -> List[str]:
    """All tool names (actions + operations + utilities) declared in frontmatter."""
    tools = []
    for group in TOOL_GROUPS:
        entries = frontmatter.get(group)
        if isinstance(entries, dict):
            tools.extend(str(name) for name in entries)
    return tools


def find_test_files(plugin_dir: Path) -> List[Path]:
    """Test files directly under <plugin>/tests/."""
    tests_dir = plugin_dir / TESTS_DIRNAME
    if not tests_dir.is_dir():
        return []
    files = set()
    for pattern in TEST_FILE_PATTERNS:
        files.update(p for p in tests_dir.glob(pattern) if p.is_file())
    return sorted(files)


def get_tested_tools(plugin_dir: Path) -> Set[str]:
    """Tool names referenced by the plugin's test files.

    Raises:
        UnreadableTestFileError: A test file is not readable UTF-8 text
    """
    tested = set()
    for test_file in find_test_files(plugin_dir):
        try:
            content = test_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise UnreadableTestFileError(test_file, e) from e
        tested.update(TOOL_REFERENCE_RE.findall(content))
    logger.debug(f"{plugin_dir.name}: tested tools {sorted(tested)}")
    return tested


def get_untested_tools(frontmatter: Dict[str, Any], plugin_dir: Path) -> List[str]:
    """Declared tools with no test, in declaration order."""
    tested = get_tested_tools(plugin_dir)
    return [tool for tool in get_tools(frontmatter) if tool not in tested]
