"""Plugin discovery - scans the plugins directory for plugin folders."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from aos_plugins.constants import NEEDS_WORK_DIRNAME, README_FILE, TESTS_DIRNAME
from aos_plugins.plugins.frontmatter import FrontmatterError, load_frontmatter
from aos_plugins.plugins.manifest import PluginManifest, validate_frontmatter

logger = logging.getLogger(__name__)


@dataclass
class PluginInstance:
    """A plugin folder and what could be loaded from it."""

    name: str
    path: Path
    frontmatter: Optional[Dict[str, Any]] = None
    manifest: Optional[PluginManifest] = field(default=None, repr=False)
    errors: List[str] = field(default_factory=list)

    @property
    def readme_path(self) -> Path:
        return self.path / README_FILE

    @property
    def tests_dir(self) -> Path:
        return self.path / TESTS_DIRNAME

    @property
    def is_valid(self) -> bool:
        return self.manifest is not None and not self.errors

    def icon_files(self) -> List[Path]:
        return sorted(p for p in self.path.glob("icon.*") if p.is_file())

    def to_dict(self) -> dict:
        """Summary used by listings."""
        fm = self.frontmatter or {}
        auth = fm.get("auth")
        return {
            "id": fm.get("id", self.name),
            "name": fm.get("name", ""),
            "tags": fm.get("tags") or [],
            "auth": auth.get("type", "") if isinstance(auth, dict) else "",
            "tools": len(self.manifest.tool_names()) if self.manifest else 0,
            "valid": self.is_valid,
            "errors": list(self.errors),
        }


class PluginDiscovery:
    """Discovers plugins by scanning a directory for readme.md manifests."""

    def __init__(self, plugins_dir: Path):
        self.plugins_dir = plugins_dir

    def list_names(self) -> List[str]:
        """Plugin folder names, sorted, excluding .needs-work and hidden folders."""
        if not self.plugins_dir.exists():
            logger.debug(f"Plugins directory does not exist: {self.plugins_dir}")
            return []
        return sorted(
            item.name for item in self.plugins_dir.iterdir()
            if item.is_dir() and item.name != NEEDS_WORK_DIRNAME and not item.name.startswith(".")
        )

    def list_quarantined(self) -> List[str]:
        needs_work = self.plugins_dir / NEEDS_WORK_DIRNAME
        if not needs_work.exists():
            return []
        return sorted(item.name for item in needs_work.iterdir() if item.is_dir())

    def discover_all(self) -> List[PluginInstance]:
        """Load every plugin folder (invalid ones included, with errors)."""
        plugins = [self.load(name) for name in self.list_names()]
        logger.info(f"Discovered {len(plugins)} plugin(s)")
        return plugins

    def load(self, name: str) -> PluginInstance:
        """Load a single plugin folder.

        Problems are recorded on the instance rather than raised.
        """
        instance = PluginInstance(name=name, path=self.plugins_dir / name)

        if not instance.readme_path.exists():
            instance.errors.append(f"{README_FILE} not found")
            return instance

        try:
            instance.frontmatter = load_frontmatter(instance.readme_path)
        except FrontmatterError as e:
            instance.errors.append(str(e))
            return instance

        if instance.frontmatter is None:
            instance.errors.append("No YAML frontmatter found")
            return instance

        instance.manifest, errors = validate_frontmatter(instance.frontmatter)
        instance.errors.extend(errors)
        if errors:
            logger.debug(f"Invalid manifest in {instance.readme_path}: {errors}")
        return instance
