"""Security scan for plugin definitions.

Plugins talk to services through rest:/graphql: blocks so the host injects
credentials; scripts never see or print the raw token.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from aos_plugins.checks.report import CheckReport
from aos_plugins.constants import README_FILE, TESTS_DIRNAME

logger = logging.getLogger(__name__)

SCRIPT_SUFFIXES = (".sh", ".py", ".js", ".mjs", ".ts", ".swift", ".applescript")


@dataclass(frozen=True)
class SecurityRule:
    id: str
    pattern: re.Pattern
    message: str


SECURITY_RULES = (
    SecurityRule(
        "token_exposure",
        re.compile(r"\b(echo|print|printf|console\.log)\b[^\n]*\$\{?AUTH_TOKEN\b"),
        "$AUTH_TOKEN must never be printed",
    ),
    SecurityRule(
        "shell_http",
        re.compile(r"(^|[\s;|&(`'\"])(curl|wget)\s"),
        "curl/wget are not allowed (use rest: or graphql: blocks)",
    ),
    SecurityRule(
        "manual_bearer",
        re.compile(r"Bearer\s+(\$\{?AUTH_TOKEN\b|\{\{\s*auth)"),
        "bearer tokens are added by the host (use auth.header/auth.prefix)",
    ),
)


def scan_text(text: str, location: str, rules: Iterable[SecurityRule] = SECURITY_RULES) -> CheckReport:
    """Report every rule match as location:line."""
    report = CheckReport(checked=1)
    for lineno, line in enumerate(text.splitlines(), start=1):
        for rule in rules:
            if rule.pattern.search(line):
                report.error(f"{location}:{lineno}", rule.message)
    return report


def plugin_files(plugin_dir: Path) -> List[Path]:
    """readme.md plus the plugin's own scripts (tests excluded)."""
    files = []
    readme = plugin_dir / README_FILE
    if readme.exists():
        files.append(readme)
    for path in sorted(plugin_dir.rglob("*")):
        if not path.is_file() or path.suffix not in SCRIPT_SUFFIXES:
            continue
        if TESTS_DIRNAME in path.relative_to(plugin_dir).parts:
            continue
        files.append(path)
    return files


def scan_plugin(plugins_dir: Path, name: str) -> CheckReport:
    report = CheckReport()
    plugin_dir = plugins_dir / name
    for path in plugin_files(plugin_dir):
        location = f"plugins/{name}/{path.relative_to(plugin_dir).as_posix()}"
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping {location}: {e}")
            continue
        report.extend(scan_text(text, location))
    return report
