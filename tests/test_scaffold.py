"""Tests for the plugin scaffold (new-plugin)."""

import pytest

from aos_plugins.checks import check_svg
from aos_plugins.linting import PluginTestLinter
from aos_plugins.plugins.frontmatter import load_frontmatter
from aos_plugins.scaffold import PluginScaffold, ScaffoldError, display_name
from aos_plugins.scaffold.templates import ICON_SVG
from aos_plugins.validation import SchemaValidator


class TestPluginScaffold:
    """Tests for PluginScaffold.create."""

    def test_full_plugin(self, plugins_dir):
        result = PluginScaffold(plugins_dir).create("foo")
        plugin_dir = plugins_dir / "foo"

        assert result.path == plugin_dir
        assert (plugin_dir / "icon.svg").exists()

        frontmatter = load_frontmatter(plugin_dir / "readme.md")
        assert frontmatter["id"] == "foo"
        assert frontmatter["name"] == "Foo"
        assert frontmatter["auth"]["type"] == "api_key"
        assert list(frontmatter["actions"]) == ["list", "get", "create", "update", "delete"]

        test_file = (plugin_dir / "tests" / "foo.test.ts").read_text()
        assert "let skipTests = false" in test_file
        assert "if (skipTests) return;" in test_file
        assert "afterAll" in test_file
        assert "createdItems" in test_file

    def test_local_readonly_plugin(self, plugins_dir):
        PluginScaffold(plugins_dir).create("foo", readonly=True, local=True)
        plugin_dir = plugins_dir / "foo"

        frontmatter = load_frontmatter(plugin_dir / "readme.md")
        assert "auth" not in frontmatter
        assert list(frontmatter["actions"]) == ["list", "get"]

        test_file = (plugin_dir / "tests" / "foo.test.ts").read_text()
        assert "skipTests" not in test_file
        assert "afterAll" not in test_file
        assert "beforeAll" not in test_file

    def test_python_flavor(self, plugins_dir):
        result = PluginScaffold(plugins_dir).create("my-tool", python=True)
        test_path = plugins_dir / "my-tool" / "tests" / "test_my_tool.py"

        assert test_path in result.files
        content = test_path.read_text()
        assert "from aos_plugins.e2e import" in content
        assert "pytest.mark.skipif(not host_available()" in content
        assert "except CredentialNotFoundError" in content
        assert "created_items" in content

    @pytest.mark.parametrize("readonly, local, python", [
        (False, False, False),
        (True, False, False),
        (False, True, False),
        (True, True, False),
        (False, False, True),
        (True, True, True),
    ])
    def test_scaffold_passes_validator_and_linter(self, plugins_dir, readonly, local, python):
        PluginScaffold(plugins_dir).create("fresh", readonly=readonly, local=local, python=python)

        assert SchemaValidator(plugins_dir).validate_plugin("fresh").ok
        assert PluginTestLinter(plugins_dir).lint_plugin("fresh").passed

    @pytest.mark.parametrize("name", ["INVALID_NAME", "Foo", "1plugin", "-dash", "under_score", "", "foo\n"])
    def test_invalid_name_creates_nothing(self, plugins_dir, name):
        with pytest.raises(ScaffoldError, match="Invalid plugin name"):
            PluginScaffold(plugins_dir).create(name)
        assert list(plugins_dir.iterdir()) == []

    def test_existing_folder_rejected(self, plugins_dir):
        (plugins_dir / "foo").mkdir()
        with pytest.raises(ScaffoldError, match="Plugin already exists"):
            PluginScaffold(plugins_dir).create("foo")

    def test_icon_is_themeable(self):
        assert check_svg(ICON_SVG, len(ICON_SVG.encode())) == []


class TestDisplayName:
    def test_kebab_case_to_title(self):
        assert display_name("my-service") == "My Service"
        assert display_name("github") == "Github"
