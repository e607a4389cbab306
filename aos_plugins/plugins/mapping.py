"""Response mapping expressions.

A mapping entry translates part of a raw API/DB response into a field of the
normalized entity. The host evaluates them; here they are only parsed so
malformed expressions are caught at commit time.

Forms::

    "'todoist'"                 static string literal
    "true", "null", "42"        JSON literal
    ".content"                  path into the response object
    "[].id"                     path applied to every element of an array
    ".items[].name"             nested array path
    "title"                     bare column name (SQL rows)
    ".priority | to_int"        path with transform pipes
    ".due.date | default:none"  transform with an argument
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional

# Transforms the host understands; those in ARG_TRANSFORMS take ":<value>"
KNOWN_TRANSFORMS = frozenset({
    "to_int",
    "to_float",
    "to_bool",
    "to_string",
    "strip_quotes",
    "trim",
    "lowercase",
    "uppercase",
    "json",
    "default",
})
ARG_TRANSFORMS = frozenset({"default"})

_SEGMENT_RE = re.compile(r"^([A-Za-z_@$][\w@$-]*)?(\[\d*\])*$")
_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")


@dataclass
class Transform:
    name: str
    arg: Optional[str] = None


@dataclass
class MappingExpression:
    """Parsed mapping expression."""

    source: str
    kind: str  # "literal" | "path"
    literal: Any = None
    path: List[str] = field(default_factory=list)
    transforms: List[Transform] = field(default_factory=list)

    @property
    def is_array(self) -> bool:
        return any("[" in segment for segment in self.path)


def _split_pipes(expr: str) -> List[str]:
    """Split on '|' outside of quoted literals."""
    parts = []
    current = []
    quote = None
    for ch in expr:
        if quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == "|":
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    if quote:
        raise ValueError(f"unterminated string literal in {expr!r}")
    parts.append("".join(current))
    return parts


def _parse_path(text: str) -> List[str]:
    body = text[1:] if text.startswith(".") else text
    if not body:
        return []  # "." is the response root
    segments = body.split(".")
    for segment in segments:
        if not segment or not _SEGMENT_RE.match(segment):
            raise ValueError(f"invalid path segment {segment!r} in {text!r}")
    return segments


def _parse_transform(text: str) -> Transform:
    name, sep, arg = text.partition(":")
    name = name.strip()
    if name not in KNOWN_TRANSFORMS:
        raise ValueError(f"unknown transform {name!r}")
    if name in ARG_TRANSFORMS:
        if not sep:
            raise ValueError(f"transform {name!r} requires a value ({name}:<value>)")
        return Transform(name, arg.strip())
    if sep:
        raise ValueError(f"transform {name!r} takes no value")
    return Transform(name)


def parse_mapping_expression(expr: str) -> MappingExpression:
    """Parse a mapping expression.

    Raises:
        ValueError: The expression is malformed
    """
    parts = _split_pipes(expr)
    head = parts[0].strip()
    if not head:
        raise ValueError("empty mapping expression")

    transforms = [_parse_transform(p.strip()) for p in parts[1:]]

    if head[0] in ("'", '"'):
        if len(head) < 2 or head[-1] != head[0]:
            raise ValueError(f"malformed string literal {head!r}")
        return MappingExpression(expr, "literal", literal=head[1:-1], transforms=transforms)

    if head in ("true", "false", "null") or _NUMBER_RE.match(head):
        return MappingExpression(expr, "literal", literal=json.loads(head), transforms=transforms)

    return MappingExpression(expr, "path", path=_parse_path(head), transforms=transforms)


def validate_mapping(mapping: Any, prefix: str = "") -> List[str]:
    """Collect problems in a (possibly nested) response mapping.

    Returns:
        Human-readable errors, empty when every expression parses
    """
    errors = []
    if not isinstance(mapping, dict):
        return [f"{prefix or 'mapping'}: must be a mapping of field -> expression"]

    for key, value in mapping.items():
        location = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            errors.extend(validate_mapping(value, location))
        elif isinstance(value, str):
            try:
                parse_mapping_expression(value)
            except ValueError as e:
                errors.append(f"{location}: {e}")
        elif value is not None and not isinstance(value, (bool, int, float)):
            errors.append(f"{location}: unsupported mapping value {value!r}")
    return errors
