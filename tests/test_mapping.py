"""Tests for response mapping expressions."""

import pytest

from aos_plugins.plugins.mapping import parse_mapping_expression, validate_mapping


class TestParseMappingExpression:
    """Tests for parse_mapping_expression."""

    def test_string_literal(self):
        expr = parse_mapping_expression("'todoist'")
        assert expr.kind == "literal"
        assert expr.literal == "todoist"

    def test_json_literals(self):
        assert parse_mapping_expression("true").literal is True
        assert parse_mapping_expression("null").literal is None
        assert parse_mapping_expression("42").literal == 42

    def test_object_path(self):
        expr = parse_mapping_expression(".due.date")
        assert expr.kind == "path"
        assert expr.path == ["due", "date"]
        assert not expr.is_array

    def test_array_path(self):
        expr = parse_mapping_expression("[].id")
        assert expr.path == ["[]", "id"]
        assert expr.is_array

    def test_nested_array_path(self):
        expr = parse_mapping_expression(".items[].contributions[0].name")
        assert expr.path == ["items[]", "contributions[0]", "name"]

    def test_bare_column_name(self):
        assert parse_mapping_expression("title").path == ["title"]

    def test_transforms(self):
        expr = parse_mapping_expression(".priority | to_int")
        assert [t.name for t in expr.transforms] == ["to_int"]

    def test_default_transform_takes_value(self):
        expr = parse_mapping_expression(".due | default:none")
        assert expr.transforms[0].name == "default"
        assert expr.transforms[0].arg == "none"

    def test_pipe_inside_literal_is_not_a_transform(self):
        expr = parse_mapping_expression("'a | b'")
        assert expr.literal == "a | b"
        assert expr.transforms == []

    @pytest.mark.parametrize("expr, message", [
        ("", "empty"),
        (".a..b", "invalid path segment"),
        (".a | to_date", "unknown transform"),
        (".a | default", "requires a value"),
        (".a | to_int:5", "takes no value"),
        ("'unterminated", "unterminated"),
    ])
    def test_malformed_expressions(self, expr, message):
        with pytest.raises(ValueError, match=message):
            parse_mapping_expression(expr)


class TestValidateMapping:
    def test_valid_mapping_has_no_errors(self):
        assert validate_mapping({"id": ".id", "plugin": "'x'", "done": True}) == []

    def test_nested_mapping_reports_location(self):
        errors = validate_mapping({"author": {"name": ".a | nope"}})
        assert len(errors) == 1
        assert errors[0].startswith("author.name:")

    def test_rejects_non_mapping(self):
        assert validate_mapping(["id"]) == ["mapping: must be a mapping of field -> expression"]
