"""Test linter for plugin tests.

Requirements are inferred from the plugin frontmatter (auth, create
operations). Plugins can declare exemptions with documented reasons:

    testing:
      exempt:
        credential_handling: "reason"
        cleanup: "reason"
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from aos_plugins.constants import README_FILE, TESTS_DIRNAME
from aos_plugins.linting.checks import ALWAYS, CLEANUP, CREDENTIAL_HANDLING, FLAVOR_CHECKS, Check
from aos_plugins.plugins.discovery import PluginDiscovery
from aos_plugins.plugins.frontmatter import FrontmatterError, load_frontmatter
from aos_plugins.utils.console import fail_mark, ok_mark, warn_mark
from aos_plugins.validation.coverage import TOOL_GROUPS

logger = logging.getLogger(__name__)


@dataclass
class PluginMeta:
    """What the linter needs to know about a plugin."""

    id: str
    has_auth: bool = False
    has_create_ops: bool = False
    has_delete_ops: bool = False
    first_read_action: Optional[str] = None
    exemptions: Dict[str, str] = field(default_factory=dict)

    @property
    def needs_credential_handling(self) -> bool:
        return self.has_auth and CREDENTIAL_HANDLING not in self.exemptions

    @property
    def needs_cleanup(self) -> bool:
        return self.has_create_ops and CLEANUP not in self.exemptions


@dataclass
class LintResult:
    plugin: str
    meta: PluginMeta
    test_files: List[Path] = field(default_factory=list)
    required: List[str] = field(default_factory=list)
    failed: List[Tuple[Path, Check]] = field(default_factory=list)
    unreadable: List[Path] = field(default_factory=list)
    error: Optional[str] = None  # plugin frontmatter could not be read

    @property
    def passed(self) -> bool:
        return self.error is None and not self.failed and not self.unreadable


def _is_kind(name: str, action: Any, kind: str) -> bool:
    """create/delete detection: 'create', 'task.create' or operation: create."""
    if name == kind or f".{kind}" in name:
        return True
    return isinstance(action, dict) and action.get("operation") == kind


def build_plugin_meta(frontmatter: Dict[str, Any], default_id: str) -> PluginMeta:
    """Derive linter requirements from plugin frontmatter."""
    tools: Dict[str, Any] = {}
    for group in TOOL_GROUPS:
        entries = frontmatter.get(group)
        if isinstance(entries, dict):
            tools.update(entries)

    first_read = None
    for name, action in tools.items():
        reads = (("." in name and name.split(".", 1)[1] == "read")
                 or (isinstance(action, dict) and action.get("operation") == "read"))
        if reads:
            first_read = name
            break

    exemptions = {}
    testing = frontmatter.get("testing")
    exempt = testing.get("exempt") if isinstance(testing, dict) else None
    if isinstance(exempt, dict):
        for key in (CREDENTIAL_HANDLING, CLEANUP):
            if isinstance(exempt.get(key), str):
                exemptions[key] = exempt[key]

    return PluginMeta(
        id=frontmatter.get("id") or default_id,
        has_auth=frontmatter.get("auth") is not None,
        has_create_ops=any(_is_kind(n, a, "create") for n, a in tools.items()),
        has_delete_ops=any(_is_kind(n, a, "delete") for n, a in tools.items()),
        first_read_action=first_read,
        exemptions=exemptions,
    )


def get_required_checks(meta: PluginMeta, flavor: str) -> List[Check]:
    """Checks a test file of the given flavor ('ts' or 'py') must pass."""
    required = []
    for check in FLAVOR_CHECKS[flavor]:
        if (check.group == ALWAYS
                or (check.group == CREDENTIAL_HANDLING and meta.needs_credential_handling)
                or (check.group == CLEANUP and meta.needs_cleanup)):
            required.append(check)
    return required


def conventional_test_files(plugin_dir: Path, plugin_name: str) -> List[Tuple[Path, str]]:
    """(path, flavor) of the conventional test files for a plugin."""
    tests_dir = plugin_dir / TESTS_DIRNAME
    return [
        (tests_dir / f"{plugin_name}.test.ts", "ts"),
        (tests_dir / f"test_{plugin_name.replace('-', '_')}.py", "py"),
    ]


class PluginTestLinter:
    """Lints plugin test files against the requirements of each plugin."""

    def __init__(self, plugins_dir: Path):
        self.plugins_dir = plugins_dir
        self.discovery = PluginDiscovery(plugins_dir)

    def lint_plugin(self, plugin_name: str) -> LintResult:
        plugin_dir = self.plugins_dir / plugin_name
        readme_path = plugin_dir / README_FILE

        frontmatter = None
        if readme_path.exists():
            try:
                frontmatter = load_frontmatter(readme_path)
            except FrontmatterError as e:
                logger.warning(f"{plugin_name}: {e}")

        if frontmatter is None:
            return LintResult(plugin=plugin_name, meta=PluginMeta(id=plugin_name), error="plugin_yaml")

        meta = build_plugin_meta(frontmatter, plugin_name)
        result = LintResult(plugin=plugin_name, meta=meta)

        for path, flavor in conventional_test_files(plugin_dir, plugin_name):
            if not path.exists():
                continue
            result.test_files.append(path)
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"{plugin_name}: cannot read {path.name}: {e}")
                result.unreadable.append(path)
                continue
            for check in get_required_checks(meta, flavor):
                result.required.append(check.id)
                if not check.matches(content):
                    result.failed.append((path, check))

        return result

    def run(self, names: Iterable[str] = ()) -> List[LintResult]:
        """Lint the given plugins (every plugin when empty) and print a report."""
        plugins = list(names) or self.discovery.list_names()
        print("Linting plugin tests...\n")

        results = []
        for plugin in plugins:
            result = self.lint_plugin(plugin)
            results.append(result)
            print(format_result(result))
            print()

        with_tests = [r for r in results if r.test_files]
        passed = [r for r in results if r.passed]
        print("─" * 50)
        print(f"{len(results)} plugins, {len(passed)} passed, {len(results) - len(passed)} failed")
        if len(with_tests) < len(results):
            print(f"({len(results) - len(with_tests)} plugins have no test file)")
        return results


def format_result(result: LintResult) -> str:
    """Human-readable report for one plugin."""
    status = ok_mark() if result.passed else fail_mark()
    lines = [f"{status} {result.plugin}"]

    if result.error:
        lines.append(f"  {fail_mark()} missing: readable {README_FILE} frontmatter ({result.error})")
        return "\n".join(lines)

    meta = result.meta
    if meta.needs_credential_handling and meta.needs_cleanup:
        needs = "credential_handling + cleanup"
    elif meta.needs_credential_handling:
        needs = "credential_handling"
    elif meta.needs_cleanup:
        needs = "cleanup"
    else:
        needs = "minimal"
    lines.append(
        f"  auth: {'yes' if meta.has_auth else 'no'}, "
        f"create: {'yes' if meta.has_create_ops else 'no'}, → {needs}"
    )

    for key, reason in meta.exemptions.items():
        lines.append(f"  {warn_mark()} exempt: {key}: {reason}")

    if not result.test_files:
        lines.append("  (no test file)")
        return "\n".join(lines)

    for path in result.unreadable:
        lines.append(f"  {fail_mark()} unreadable: {path.name}")

    for path, check in result.failed:
        suffix = f" ({path.name})" if len(result.test_files) > 1 else ""
        lines.append(f"  {fail_mark()} missing: {check.description}{suffix}")

    return "\n".join(lines)
