"""Tests for frontmatter parsing."""

import pytest

from aos_plugins.plugins.frontmatter import FrontmatterError, load_frontmatter, parse_frontmatter, split_frontmatter


class TestParseFrontmatter:
    """Tests for parse_frontmatter."""

    def test_parses_mapping(self):
        content = "---\nid: todoist\ntags: [tasks]\n---\n\n# Todoist\n"
        assert parse_frontmatter(content) == {"id": "todoist", "tags": ["tasks"]}

    def test_no_frontmatter_returns_none(self):
        assert parse_frontmatter("# Just markdown\n") is None

    def test_unclosed_block_returns_none(self):
        assert parse_frontmatter("---\nid: todoist\n# no closing line\n") is None

    def test_empty_block_returns_none(self):
        assert parse_frontmatter("---\n---\n# Body\n") is None

    def test_invalid_yaml_raises(self):
        with pytest.raises(FrontmatterError, match="Invalid YAML"):
            parse_frontmatter("---\nid: [unclosed\n---\n")

    def test_non_mapping_raises(self):
        with pytest.raises(FrontmatterError, match="must be a mapping"):
            parse_frontmatter("---\n- a\n- b\n---\n")

    def test_block_must_start_the_document(self):
        assert parse_frontmatter("\n---\nid: x\n---\n") is None


class TestSplitFrontmatter:
    def test_returns_yaml_and_body(self):
        yaml_text, body = split_frontmatter("---\nid: x\n---\n# Title\nText\n")
        assert yaml_text == "id: x"
        assert body == "# Title\nText\n"


class TestLoadFrontmatter:
    def test_reads_file(self, tmp_path):
        path = tmp_path / "readme.md"
        path.write_text("---\nid: demo\n---\n", encoding="utf-8")
        assert load_frontmatter(path) == {"id": "demo"}

    def test_non_utf8_file_raises(self, tmp_path):
        path = tmp_path / "readme.md"
        path.write_bytes(b"---\nid: \xff\n---\n")
        with pytest.raises(FrontmatterError, match="Cannot read readme.md"):
            load_frontmatter(path)
