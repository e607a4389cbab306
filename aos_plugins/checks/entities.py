"""Entity definition checks (entities/*.yaml)."""

import logging
from pathlib import Path
from typing import List

import yaml

from aos_plugins.checks.report import CheckReport

logger = logging.getLogger(__name__)

# graph.yaml describes relationships between entities, not an entity
GRAPH_FILE = "graph.yaml"
REQUIRED_FIELDS = ("id", "name", "description", "properties", "operations")


def entity_files(entities_dir: Path) -> List[Path]:
    if not entities_dir.exists():
        return []
    return sorted(p for p in entities_dir.glob("*.yaml") if p.name != GRAPH_FILE)


def check_entity_file(path: Path) -> CheckReport:
    report = CheckReport(checked=1)
    location = f"entities/{path.name}"

    try:
        entity = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        report.error(location, f"Invalid YAML: {e}")
        return report
    except (OSError, UnicodeDecodeError) as e:
        report.error(location, f"cannot read: {e}")
        return report

    if not isinstance(entity, dict):
        report.error(location, "entity file must be a mapping")
        return report

    for key in REQUIRED_FIELDS:
        if entity.get(key) is None:
            report.error(location, f"missing '{key}'")

    operations = entity.get("operations")
    if operations is not None and (not isinstance(operations, list) or not operations):
        report.error(location, "operations must be a non-empty list")

    properties = entity.get("properties")
    if isinstance(properties, dict):
        for prop_name, prop_def in properties.items():
            if not isinstance(prop_def, dict) or "type" not in prop_def:
                report.error(location, f"properties.{prop_name} missing 'type'")
    elif properties is not None:
        report.error(location, "properties must be a mapping")

    return report


def check_entities(entities_dir: Path) -> CheckReport:
    report = CheckReport()
    files = entity_files(entities_dir)
    if entities_dir.exists() and not files:
        report.warning("entities", "no entity files found")
    for path in files:
        report.extend(check_entity_file(path))
    return report
