"""Schema validator - the commit-time gate for plugin folders.

For each plugin folder, in order, stopping at the first failure:

1. readme.md exists
2. readme.md has YAML frontmatter
3. the frontmatter validates against the plugin manifest model
4. an icon file (icon.*) exists
5. every declared action/operation/utility is referenced by a test

Unreadable files (not UTF-8) fail their stage instead of aborting the run.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from aos_plugins.constants import README_FILE
from aos_plugins.plugins.discovery import PluginDiscovery
from aos_plugins.plugins.frontmatter import FrontmatterError, load_frontmatter
from aos_plugins.plugins.manifest import validate_frontmatter
from aos_plugins.utils.console import ok_mark
from aos_plugins.validation.coverage import UnreadableTestFileError, get_tools, get_untested_tools
from aos_plugins.validation.quarantine import move_to_needs_work

logger = logging.getLogger(__name__)


@dataclass
class PluginValidationResult:
    """Outcome of validating one plugin folder."""

    name: str
    reason: Optional[str] = None  # None when the plugin passed
    details: List[str] = field(default_factory=list)
    tools: List[str] = field(default_factory=list)
    untested: List[str] = field(default_factory=list)
    moved: bool = False

    @property
    def ok(self) -> bool:
        return self.reason is None


@dataclass
class ValidationSummary:
    results: List[PluginValidationResult] = field(default_factory=list)

    @property
    def failed(self) -> List[PluginValidationResult]:
        return [r for r in self.results if not r.ok]

    @property
    def moved_count(self) -> int:
        return sum(1 for r in self.results if r.moved)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0


class SchemaValidator:
    """Validates plugin folders under a plugins directory."""

    def __init__(self, plugins_dir: Path):
        self.plugins_dir = plugins_dir
        self.discovery = PluginDiscovery(plugins_dir)

    def select(self, names: Iterable[str] = (), filter_value: Optional[str] = None) -> List[str]:
        """Plugins to validate: the given names, or every plugin folder if none.

        Args:
            names: Explicit plugin folder names
            filter_value: Keep only names containing this substring
        """
        selected = list(names) or self.discovery.list_names()
        if filter_value:
            selected = [name for name in selected if filter_value in name]
        return selected

    def validate_plugin(self, name: str) -> PluginValidationResult:
        """Validate one plugin folder without printing or moving anything."""
        result = PluginValidationResult(name=name)
        plugin_dir = self.plugins_dir / name
        readme_path = plugin_dir / README_FILE

        if not plugin_dir.is_dir():
            result.reason = "plugin folder not found"
            return result

        if not readme_path.exists():
            result.reason = f"{README_FILE} not found"
            return result

        try:
            frontmatter = load_frontmatter(readme_path)
        except FrontmatterError as e:
            result.reason = "Invalid YAML frontmatter"
            result.details = [str(e)]
            return result

        if frontmatter is None:
            result.reason = "No YAML frontmatter found"
            return result

        manifest, errors = validate_frontmatter(frontmatter)
        if manifest is None:
            result.reason = "Schema validation failed"
            result.details = errors
            return result

        if not any(p.is_file() for p in plugin_dir.glob("icon.*")):
            result.reason = "icon file not found (required)"
            return result

        result.tools = get_tools(frontmatter)
        try:
            result.untested = get_untested_tools(frontmatter, plugin_dir)
        except UnreadableTestFileError as e:
            result.reason = "Unreadable test file"
            result.details = [str(e)]
            return result
        if result.untested:
            result.reason = f"Missing tests for: {', '.join(result.untested)}"
        return result

    def run(self, names: Iterable[str] = (), filter_value: Optional[str] = None,
            auto_move: bool = True) -> ValidationSummary:
        """Validate, report to the console and quarantine failures.

        Args:
            names: Plugin names; every plugin when empty
            filter_value: Substring filter applied to the selection
            auto_move: Move failing plugins into .needs-work
        """
        summary = ValidationSummary()

        for name in self.select(names, filter_value):
            result = self.validate_plugin(name)
            summary.results.append(result)
            self._report(result)

            if not result.ok and auto_move and (self.plugins_dir / name).is_dir():
                result.moved = move_to_needs_work(self.plugins_dir, name)

        if summary.moved_count:
            print(f"\n📦 Moved {summary.moved_count} plugin(s) to plugins/.needs-work/")

        if summary.failed:
            print("\n❌ Validation failed")
        else:
            print("\n✅ All plugins valid")

        logger.info(f"Validated {len(summary.results)} plugin(s), {len(summary.failed)} failed")
        return summary

    @staticmethod
    def _report(result: PluginValidationResult) -> None:
        if not result.ok:
            print(f"❌ plugins/{result.name}: {result.reason}")
            for line in result.details:
                print(f"   {line}")
        elif result.tools:
            print(f"{ok_mark()} plugins/{result.name} ({len(result.tools)} tools, all tested)")
        else:
            print(f"{ok_mark()} plugins/{result.name}")
