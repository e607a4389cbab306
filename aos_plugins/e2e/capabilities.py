"""Capability contracts.

An action that declares `provides: <capability>` must return data of the
shape below. Validators raise AssertionError so they read like test
assertions.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from aos_plugins.constants import README_FILE
from aos_plugins.plugins.discovery import PluginDiscovery
from aos_plugins.plugins.frontmatter import FrontmatterError, load_frontmatter

logger = logging.getLogger(__name__)

# Host errors that skip a capability test instead of failing it
SKIP_ERROR_MARKERS = ("No credentials configured", "credentials", "not found in response")


@dataclass(frozen=True)
class CapabilitySchema:
    description: str
    test_params: Dict[str, Any]
    validate: Callable[[Any], None]


@dataclass(frozen=True)
class CapabilityProvider:
    plugin: str
    tool: str
    capability: str


def _has_string_fields(item: Any, *fields: str) -> None:
    assert isinstance(item, dict), f"expected an object, got {type(item).__name__}"
    for name in fields:
        assert name in item, f"missing '{name}'"
        assert isinstance(item[name], str), f"'{name}' should be a string"


def _has_fields(item: Any, *fields: str) -> None:
    assert isinstance(item, dict), f"expected an object, got {type(item).__name__}"
    for name in fields:
        assert name in item, f"missing '{name}'"


def _validate_web_search(result: Any) -> None:
    assert isinstance(result, list), "web_search should return an array"
    assert len(result) > 0, "web_search returned no results"
    _has_string_fields(result[0], "url", "title")


def _validate_web_read(result: Any) -> None:
    _has_string_fields(result, "url", "content")


def _validate_id_title_list(result: Any) -> None:
    assert isinstance(result, list), "expected an array"
    if result:
        _has_fields(result[0], "id", "title")


def _validate_id_title(result: Any) -> None:
    _has_fields(result, "id", "title")


CAPABILITY_SCHEMAS: Dict[str, CapabilitySchema] = {
    "web_search": CapabilitySchema(
        "Search results with url and title", {"query": "test", "limit": 2}, _validate_web_search),
    "web_read": CapabilitySchema(
        "Page content with url and content", {"url": "https://example.com"}, _validate_web_read),
    "task_list": CapabilitySchema(
        "Array of tasks with id and title", {"limit": 5}, _validate_id_title_list),
    # Requires an id; skipped when there are no tasks
    "task_get": CapabilitySchema(
        "Single task with id and title", {}, _validate_id_title),
    "book_list": CapabilitySchema(
        "Array of books with id and title", {"limit": 5}, _validate_id_title_list),
}


def find_plugins_with_capabilities(plugins_dir: Path, only: Optional[str] = None) -> List[CapabilityProvider]:
    """Every action that declares provides:, optionally for a single plugin id."""
    providers = []
    for name in PluginDiscovery(plugins_dir).list_names():
        readme_path = plugins_dir / name / README_FILE
        if not readme_path.exists():
            continue
        try:
            frontmatter = load_frontmatter(readme_path)
        except FrontmatterError as e:
            logger.warning(f"Failed to parse {name}/{README_FILE}: {e}")
            continue
        if not frontmatter or not isinstance(frontmatter.get("actions"), dict):
            continue

        plugin_id = frontmatter.get("id") or name
        if only and plugin_id != only:
            continue
        for tool, action in frontmatter["actions"].items():
            if isinstance(action, dict) and isinstance(action.get("provides"), str):
                providers.append(CapabilityProvider(plugin_id, tool, action["provides"]))
    return providers


def is_skippable_error(error: Exception) -> bool:
    message = str(error)
    if "Path" in message and "not found" in message:
        return True
    return any(marker in message for marker in SKIP_ERROR_MARKERS)
