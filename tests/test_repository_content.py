"""The plugins, apps and entities shipped in this repository pass every check."""

import pytest

from aos_plugins.checks import StructureChecker, check_entities, scan_plugin
from aos_plugins.constants import APPS_DIR, ENTITIES_DIR, PLUGINS_DIR
from aos_plugins.linting import PluginTestLinter, format_result
from aos_plugins.plugins.discovery import PluginDiscovery
from aos_plugins.validation import SchemaValidator

PLUGINS = PluginDiscovery(PLUGINS_DIR).list_names()


@pytest.mark.parametrize("name", PLUGINS)
class TestBundledPlugins:
    def test_schema_icon_and_coverage(self, name):
        result = SchemaValidator(PLUGINS_DIR).validate_plugin(name)
        assert result.ok, f"{result.reason}: {result.details}"

    def test_tests_follow_lint_rules(self, name):
        result = PluginTestLinter(PLUGINS_DIR).lint_plugin(name)
        assert result.passed, format_result(result)

    def test_no_security_findings(self, name):
        report = scan_plugin(PLUGINS_DIR, name)
        assert report.findings == [], [str(f) for f in report.findings]


def test_structure():
    report = StructureChecker(APPS_DIR, PLUGINS_DIR).run()
    assert report.errors == [], [str(f) for f in report.errors]


def test_entities():
    report = check_entities(ENTITIES_DIR)
    assert report.checked > 0
    assert report.findings == [], [str(f) for f in report.findings]
