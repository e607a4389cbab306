"""Plugin scaffold generator.

Creates a new plugin folder with correct boilerplate:

- readme.md with YAML frontmatter and action definitions
- placeholder icon.svg
- test file with the patterns the test linter requires
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from aos_plugins.constants import PLUGIN_NAME_PATTERN, README_FILE, TESTS_DIRNAME
from aos_plugins.scaffold.templates import ICON_SVG, render_py_test, render_readme, render_ts_test

logger = logging.getLogger(__name__)


class ScaffoldError(Exception):
    """Raised when a plugin cannot be scaffolded."""


@dataclass
class ScaffoldResult:
    plugin: str
    path: Path
    files: List[Path] = field(default_factory=list)


def display_name(plugin_name: str) -> str:
    """my-service → My Service"""
    return " ".join(word[:1].upper() + word[1:] for word in plugin_name.split("-"))


def validate_plugin_name(plugin_name: str) -> None:
    if not re.fullmatch(PLUGIN_NAME_PATTERN, plugin_name or ""):
        raise ScaffoldError(
            f"Invalid plugin name: {plugin_name}\n"
            "   Must start with lowercase letter, contain only a-z, 0-9, -"
        )


class PluginScaffold:
    """Writes new plugin folders under a plugins directory."""

    def __init__(self, plugins_dir: Path):
        self.plugins_dir = plugins_dir

    def create(self, plugin_name: str, readonly: bool = False, local: bool = False,
               python: bool = False) -> ScaffoldResult:
        """Create plugins/<name>/ with readme, icon and tests.

        Args:
            plugin_name: Folder name and plugin id (kebab-case)
            readonly: Only list/get actions, no create/update/delete
            local: No auth block, no credential handling in tests
            python: Write a pytest file instead of a vitest file

        Raises:
            ScaffoldError: Invalid name or the folder already exists
        """
        validate_plugin_name(plugin_name)

        plugin_dir = self.plugins_dir / plugin_name
        if plugin_dir.exists():
            raise ScaffoldError(f"Plugin already exists: {plugin_dir}")

        display = display_name(plugin_name)
        if python:
            test_path = plugin_dir / TESTS_DIRNAME / f"test_{plugin_name.replace('-', '_')}.py"
            test_body = render_py_test(plugin_name, display, readonly, local)
        else:
            test_path = plugin_dir / TESTS_DIRNAME / f"{plugin_name}.test.ts"
            test_body = render_ts_test(plugin_name, display, readonly, local)

        files = {
            plugin_dir / README_FILE: render_readme(plugin_name, display, readonly, local),
            plugin_dir / "icon.svg": ICON_SVG,
            test_path: test_body,
        }

        (plugin_dir / TESTS_DIRNAME).mkdir(parents=True)
        for path, content in files.items():
            path.write_text(content, encoding="utf-8")

        logger.info(f"Scaffolded plugin {plugin_name} at {plugin_dir}")
        return ScaffoldResult(plugin=plugin_name, path=plugin_dir, files=list(files))
