"""Shared result type and field-extraction helpers for content parsers.

Both carriers (plain YAML documents and Markdown files with a leading YAML
header) produce the same ``ParseResult``: a success flag, the structured
value, the optional ``_schema`` tag and, for Markdown, the body text.

Parsers never raise on malformed input. A syntax error inside a present
document or header yields ``success=False`` with a message that carries the
line and column reported by PyYAML, and the scanner skips the file.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

import yaml

# Reserved top-level key a file uses to declare its schema.
SCHEMA_KEY = "_schema"

YAML_EXTENSIONS = (".yaml", ".yml")
MARKDOWN_EXTENSIONS = (".md", ".markdown")


@dataclass
class ParseResult:
    """Outcome of parsing one file's content.

    Attributes:
        success: False only for read failures and syntax errors.
        content: Parsed structured value. ``None`` for empty files and for
            Markdown without a header.
        schema: Value of the reserved ``_schema`` key, if it is a string.
        body: Markdown body after the header (whole text if no header).
            Always ``None`` for YAML.
        has_header: True if a complete header block was found (Markdown).
        error: Human-readable failure description when ``success`` is False.
    """

    success: bool
    content: Any = None
    schema: str | None = None
    body: str | None = None
    has_header: bool = False
    error: str | None = None

    @classmethod
    def failure(cls, error: str) -> ParseResult:
        return cls(success=False, error=error)


def is_yaml_file(path: str | Path) -> bool:
    return str(path).lower().endswith(YAML_EXTENSIONS)


def is_markdown_file(path: str | Path) -> bool:
    return str(path).lower().endswith(MARKDOWN_EXTENSIONS)


def extract_schema_tag(value: Any) -> str | None:
    """Return the ``_schema`` tag of a mapping, if present and a string."""
    if isinstance(value, dict):
        tag = value.get(SCHEMA_KEY)
        if isinstance(tag, str):
            return tag.strip() or None
    return None


def describe_yaml_error(exc: yaml.YAMLError, label: str = "YAML") -> str:
    """Format a PyYAML error with its line/column when available.

    PyYAML marks are zero-based; the message reports one-based positions.
    """
    mark = getattr(exc, "problem_mark", None)
    problem = getattr(exc, "problem", None) or str(exc).splitlines()[0]
    if mark is not None:
        return f"{label} syntax error: {problem} (line {mark.line + 1}, column {mark.column + 1})"
    return f"{label} syntax error: {problem}"


def get_nested_value(data: Any, path: str) -> Any:
    """Walk a dotted field path (``meta.feature``) through nested mappings.

    Returns None as soon as a segment is missing or a non-mapping is hit.
    """
    current = data
    for part in path.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


def extract_feature_id(
    content: Any,
    identifier_field: str,
    legacy_fields: Iterable[str] = (),
) -> str | None:
    """Extract the owning feature identifier from parsed content.

    Tries ``identifier_field`` first, then each legacy field in order. The
    first non-empty string wins.

    Args:
        content: Parsed YAML document or Markdown header.
        identifier_field: Dotted path, e.g. "meta.feature".
        legacy_fields: Ordered fallback field names.

    Returns:
        The feature identifier, or None if no field yields a string.
    """
    if not isinstance(content, dict):
        return None
    for field_path in (identifier_field, *legacy_fields):
        value = get_nested_value(content, field_path)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None
