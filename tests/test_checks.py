"""Tests for repository checks: icons, structure, entities, security."""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from aos_plugins.checks import StructureChecker, check_entities, check_svg, scan_text
from aos_plugins.checks.security import scan_plugin
from aos_plugins.checks.structure import is_file_newer_than

ICON = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24" fill="none" stroke="currentColor">'
    '<circle cx="12" cy="12" r="9"/></svg>\n'
)

APP_README = """---
id: tasks
schema:
  title:
    type: string
  refs:
    type: object
  metadata:
    type: object
  created_at:
    type: datetime
  updated_at:
    type: datetime
actions:
  pull: {}
---

# Tasks

Stored in a local database.
"""


class TestCheckSvg:
    """Tests for check_svg."""

    def test_good_icon(self):
        assert check_svg(ICON, len(ICON)) == []

    def test_too_large(self):
        problems = check_svg(ICON, 6000)
        assert any("6000 bytes" in p for p in problems)

    def test_not_svg(self):
        assert check_svg("PNG", 3) == ["not a valid SVG (missing <svg> or </svg>)"]

    def test_missing_viewbox(self):
        svg = '<svg fill="currentColor"><path d="M0 0"/></svg>'
        assert check_svg(svg, len(svg)) == ["missing viewBox"]

    def test_hardcoded_color(self):
        svg = '<svg viewBox="0 0 24 24" fill="currentColor"><path fill="#ff0000" d="M0 0"/></svg>'
        problems = check_svg(svg, len(svg))
        assert problems == ["hard-coded color '#ff0000' (use currentColor)"]

    def test_not_themeable(self):
        svg = '<svg viewBox="0 0 24 24"><path d="M0 0"/></svg>'
        assert any("currentColor" in p for p in check_svg(svg, len(svg)))


@pytest.fixture
def repo(tmp_path):
    (tmp_path / "apps").mkdir()
    (tmp_path / "plugins").mkdir()
    return tmp_path


def make_app(repo, readme=APP_README, icon=ICON):
    app_dir = repo / "apps" / "tasks"
    app_dir.mkdir()
    if readme is not None:
        (app_dir / "readme.md").write_text(readme, encoding="utf-8")
    if icon is not None:
        (app_dir / "icon.svg").write_text(icon, encoding="utf-8")
    return app_dir


class TestStructureChecker:
    """Tests for StructureChecker."""

    def test_valid_app(self, repo):
        make_app(repo)
        report = StructureChecker(repo / "apps", repo / "plugins").check_app("tasks")
        assert report.findings == []

    def test_app_needs_readme_and_icon(self, repo):
        make_app(repo, readme=None, icon=None)
        report = StructureChecker(repo / "apps", repo / "plugins").check_app("tasks")
        assert {f.message for f in report.errors} == {"readme.md not found", "icon.svg not found"}

    def test_non_utf8_readme_is_reported(self, repo):
        app_dir = make_app(repo)
        (app_dir / "readme.md").write_bytes(b"# Tasks\n\xff\n")
        report = StructureChecker(repo / "apps", repo / "plugins").check_app("tasks")
        assert [f.message.split(":")[0] for f in report.errors] == ["cannot read readme.md"]

    def test_schema_sql_not_allowed(self, repo):
        app_dir = make_app(repo)
        (app_dir / "schema.sql").write_text("CREATE TABLE t (id TEXT);")
        report = StructureChecker(repo / "apps", repo / "plugins").check_app("tasks")
        assert any("schema.sql" in f.message for f in report.errors)

    def test_data_app_without_schema(self, repo):
        make_app(repo, readme="# Tasks\n\nKept in a local database.\n")
        report = StructureChecker(repo / "apps", repo / "plugins").check_app("tasks")
        assert [f.message for f in report.errors] == ["data app has no schema: in its frontmatter"]

    def test_new_schema_must_follow_conventions(self, repo):
        make_app(repo, readme="---\nschema:\n  title:\n    type: string\n---\n\n# Tasks\n")
        report = StructureChecker(repo / "apps", repo / "plugins").check_app("tasks")
        messages = [f.message for f in report.errors]
        assert "schema needs a 'refs' object for external IDs" in messages
        assert "schema needs a 'metadata' object" in messages
        assert "schema needs a 'created_at' field" in messages
        assert "data app needs a pull or push action" in messages

    def test_old_schema_is_grandfathered(self, repo):
        make_app(repo, readme="---\nschema:\n  title:\n    type: string\n---\n\n# Tasks\n")
        old = datetime(2025, 6, 1, tzinfo=timezone.utc)
        with patch("aos_plugins.checks.structure.get_file_last_modified", return_value=old):
            report = StructureChecker(repo / "apps", repo / "plugins").check_app("tasks")

        assert report.errors == []
        assert len(report.warnings) == 1
        assert "grandfathered" in report.warnings[0].message

    def test_untracked_files_count_as_new(self, tmp_path):
        path = tmp_path / "readme.md"
        path.write_text("x")
        with patch("aos_plugins.checks.structure.get_file_last_modified", return_value=None):
            assert is_file_newer_than(path, datetime(2026, 1, 5, tzinfo=timezone.utc))

    def test_connectors(self, repo):
        app_dir = make_app(repo)
        good = app_dir / "connectors" / "todoist"
        good.mkdir(parents=True)
        (good / "readme.md").write_text("# Todoist\n")
        (good / "mapping.yaml").write_text("actions:\n  pull: {}\n")
        bad = app_dir / "connectors" / "empty"
        bad.mkdir()

        report = StructureChecker(repo / "apps", repo / "plugins").check_connectors("tasks")
        assert report.checked == 2
        assert {(f.location, f.message) for f in report.errors} == {
            ("apps/tasks/connectors/empty", "readme.md not found"),
            ("apps/tasks/connectors/empty", "needs mapping.yaml or an icon"),
        }

    def test_plugin_id_must_match_folder(self, repo):
        plugin_dir = repo / "plugins" / "todoist"
        plugin_dir.mkdir()
        (plugin_dir / "readme.md").write_text("---\nid: todo\n---\n")
        (plugin_dir / "icon.svg").write_text('<svg><rect fill="#fff"/></svg>')

        report = StructureChecker(repo / "apps", repo / "plugins").run()
        messages = [f.message for f in report.errors]
        assert "id 'todo' does not match folder name 'todoist'" in messages
        assert "missing viewBox" in messages
        assert report.exit_code == 1

    def test_plugin_tags_and_legacy_fields(self, repo):
        plugin_dir = repo / "plugins" / "todoist"
        plugin_dir.mkdir()
        (plugin_dir / "readme.md").write_text("---\nid: todoist\napps: [tasks]\n---\n")

        report = StructureChecker(repo / "apps", repo / "plugins").check_plugin("todoist")
        assert [f.message for f in report.errors] == [
            "tags must be a non-empty list",
            "legacy 'apps' field (use 'tags')",
        ]


class TestCheckEntities:
    def test_valid_entity(self, tmp_path):
        (tmp_path / "task.yaml").write_text(
            "id: task\nname: Task\ndescription: A task\n"
            "properties:\n  title:\n    type: string\noperations: [list]\n"
        )
        (tmp_path / "graph.yaml").write_text("edges: []\n")

        report = check_entities(tmp_path)
        assert report.checked == 1
        assert report.findings == []

    def test_entity_problems(self, tmp_path):
        (tmp_path / "note.yaml").write_text(
            "id: note\nname: Note\nproperties:\n  body: {}\noperations: []\n"
        )
        messages = [f.message for f in check_entities(tmp_path).errors]
        assert messages == [
            "missing 'description'",
            "operations must be a non-empty list",
            "properties.body missing 'type'",
        ]

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "bad.yaml").write_text("id: [oops\n")
        assert check_entities(tmp_path).errors[0].message.startswith("Invalid YAML")


class TestSecurityScan:
    """Tests for the security scan."""

    @pytest.mark.parametrize("line", [
        'run: echo "$AUTH_TOKEN"',
        "print(os.environ['X'], $AUTH_TOKEN)",
        "run: curl -s https://api.example.com",
        "  wget https://example.com/file",
        'Authorization: "Bearer $AUTH_TOKEN"',
        'Authorization: "Bearer {{auth.token}}"',
    ])
    def test_blocked_lines(self, line):
        report = scan_text(f"---\n{line}\n---\n", "plugins/x/readme.md")
        assert report.exit_code == 1
        assert report.errors[0].location == "plugins/x/readme.md:2"

    @pytest.mark.parametrize("line", [
        'prefix: "Bearer "',
        "url: https://api.example.com/curly-braces",
        "description: token is injected by the host",
    ])
    def test_allowed_lines(self, line):
        assert scan_text(line, "readme.md").findings == []

    def test_scan_plugin_skips_tests(self, plugins_dir):
        plugin_dir = plugins_dir / "x"
        (plugin_dir / "scripts").mkdir(parents=True)
        (plugin_dir / "tests").mkdir()
        (plugin_dir / "readme.md").write_text("---\nid: x\n---\n")
        (plugin_dir / "scripts" / "fetch.sh").write_text("#!/bin/sh\ncurl https://x\n")
        (plugin_dir / "tests" / "x.test.ts").write_text("// curl https://x\n")

        report = scan_plugin(plugins_dir, "x")
        assert [f.location for f in report.errors] == ["plugins/x/scripts/fetch.sh:2"]
