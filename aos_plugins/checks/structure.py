"""Structure and convention checks for apps, connectors and plugins.

These run without the AgentOS host; they only look at the filesystem and
the YAML.

Schema conventions are versioned by date: files last changed before a
version date only get a warning (grandfathered), files changed after it (or
not yet committed) must comply.
"""

import logging
import re
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from aos_plugins.checks.icons import check_svg_file
from aos_plugins.checks.report import CheckReport
from aos_plugins.constants import README_FILE
from aos_plugins.plugins.discovery import PluginDiscovery
from aos_plugins.plugins.frontmatter import FrontmatterError, load_frontmatter

logger = logging.getLogger(__name__)

# Add new versions here as conventions evolve
SCHEMA_VERSIONS = {
    # refs/metadata pattern, pull/push instead of import/export/sync
    "refs-metadata": datetime(2026, 1, 5, tzinfo=timezone.utc),
}

_TITLE_RE = re.compile(r"^#\s+\w+", re.MULTILINE)
_DATA_APP_MARKERS = ("local database", "per-app database")


def get_file_last_modified(path: Path) -> Optional[datetime]:
    """Date of the last commit touching a file, None if git does not know it."""
    try:
        output = subprocess.run(
            ["git", "log", "-1", "--format=%aI", "--", path.name],
            cwd=path.parent, capture_output=True, text=True, check=True,
        ).stdout.strip()
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug(f"git log failed for {path}: {e}")
        return None
    return datetime.fromisoformat(output) if output else None


def is_file_newer_than(path: Path, version_date: datetime) -> bool:
    """True if the file must follow the conventions of version_date.

    Files git does not know about are new and must comply.
    """
    last_modified = get_file_last_modified(path)
    if last_modified is None:
        return True
    return last_modified > version_date


def _read_frontmatter(path: Path, report: CheckReport, location: str) -> Optional[Dict[str, Any]]:
    try:
        return load_frontmatter(path)
    except FrontmatterError as e:
        report.error(location, str(e))
        return None


def _schema_field_is_object(schema: Dict[str, Any], name: str) -> bool:
    spec = schema.get(name)
    return isinstance(spec, dict) and spec.get("type") == "object"


def _check_icon(icon_path: Path, report: CheckReport, location: str) -> None:
    if icon_path.exists():
        for problem in check_svg_file(icon_path):
            report.error(location, problem)


class StructureChecker:
    """Checks apps/, apps/*/connectors/ and plugins/ against repo conventions."""

    def __init__(self, apps_dir: Path, plugins_dir: Path):
        self.apps_dir = apps_dir
        self.plugins_dir = plugins_dir

    def app_names(self) -> List[str]:
        if not self.apps_dir.exists():
            return []
        return sorted(d.name for d in self.apps_dir.iterdir() if d.is_dir() and not d.name.startswith("."))

    def check_app(self, app: str) -> CheckReport:
        report = CheckReport(checked=1)
        app_dir = self.apps_dir / app
        location = f"apps/{app}"
        readme_path = app_dir / README_FILE

        if not readme_path.exists():
            report.error(location, f"{README_FILE} not found")
        if not (app_dir / "icon.svg").exists():
            report.error(location, "icon.svg not found")
        _check_icon(app_dir / "icon.svg", report, f"{location}/icon.svg")
        if (app_dir / "schema.sql").exists():
            report.error(location, f"schema.sql is not allowed (define schema: in {README_FILE})")

        if not readme_path.exists():
            return report

        try:
            readme = readme_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            report.error(location, f"cannot read {README_FILE}: {e}")
            return report
        if not _TITLE_RE.search(readme):
            report.error(location, f"{README_FILE} has no '# Title'")

        frontmatter = _read_frontmatter(readme_path, report, location) or {}
        schema = frontmatter.get("schema")
        if any(marker in readme.lower() for marker in _DATA_APP_MARKERS) and not schema:
            report.error(location, "data app has no schema: in its frontmatter")

        if isinstance(schema, dict):
            self._check_conventions(readme_path, schema, frontmatter.get("actions"), report, location)
        return report

    def _check_conventions(self, readme_path: Path, schema: Dict[str, Any], actions: Any,
                           report: CheckReport, location: str) -> None:
        if not is_file_newer_than(readme_path, SCHEMA_VERSIONS["refs-metadata"]):
            report.warning(location, "grandfathered: update to refs/metadata and pull/push when ready")
            return

        if not _schema_field_is_object(schema, "refs"):
            report.error(location, "schema needs a 'refs' object for external IDs")
        if not _schema_field_is_object(schema, "metadata"):
            report.error(location, "schema needs a 'metadata' object")
        for timestamp in ("created_at", "updated_at"):
            if timestamp not in schema:
                report.error(location, f"schema needs a '{timestamp}' field")

        action_names = actions.keys() if isinstance(actions, dict) else []
        if "pull" not in action_names and "push" not in action_names:
            report.error(location, "data app needs a pull or push action")

    def check_connectors(self, app: str) -> CheckReport:
        report = CheckReport()
        connectors_dir = self.apps_dir / app / "connectors"
        if not connectors_dir.is_dir():
            return report

        for connector_dir in sorted(d for d in connectors_dir.iterdir() if d.is_dir()):
            report.checked += 1
            location = f"apps/{app}/connectors/{connector_dir.name}"
            files = [p.name for p in connector_dir.iterdir()]

            if README_FILE not in files:
                report.error(location, f"{README_FILE} not found")
            has_mapping = "mapping.yaml" in files
            if not has_mapping and not any(name.startswith("icon.") for name in files):
                report.error(location, "needs mapping.yaml or an icon")
            if has_mapping:
                try:
                    mapping = (connector_dir / "mapping.yaml").read_text(encoding="utf-8")
                except (OSError, UnicodeDecodeError) as e:
                    report.error(f"{location}/mapping.yaml", f"cannot read: {e}")
                    mapping = None
                if mapping is not None and not re.search(r"^actions:", mapping, re.MULTILINE):
                    report.error(f"{location}/mapping.yaml", "has no actions: section")
            _check_icon(connector_dir / "icon.svg", report, f"{location}/icon.svg")
        return report

    def check_plugin(self, name: str) -> CheckReport:
        report = CheckReport(checked=1)
        plugin_dir = self.plugins_dir / name
        location = f"plugins/{name}"
        readme_path = plugin_dir / README_FILE

        if readme_path.exists():
            frontmatter = _read_frontmatter(readme_path, report, location)
            if frontmatter is not None:
                if frontmatter.get("id") != name:
                    report.error(location, f"id '{frontmatter.get('id')}' does not match folder name '{name}'")
                tags = frontmatter.get("tags")
                if not isinstance(tags, list) or not tags:
                    report.error(location, "tags must be a non-empty list")
                for legacy, replacement in (("apps", "tags"), ("extended_actions", "actions")):
                    if legacy in frontmatter:
                        report.error(location, f"legacy '{legacy}' field (use '{replacement}')")
        _check_icon(plugin_dir / "icon.svg", report, f"{location}/icon.svg")
        return report

    def run(self) -> CheckReport:
        report = CheckReport()
        for app in self.app_names():
            report.extend(self.check_app(app))
            report.extend(self.check_connectors(app))
        for name in PluginDiscovery(self.plugins_dir).list_names():
            report.extend(self.check_plugin(name))
        return report
