"""Parser for plain YAML artifacts (``*.yaml`` / ``*.yml``).

The document root carries the schema tag. Non-mapping roots (scalars,
lists) are valid YAML but cannot carry ``_schema``; they parse successfully
with no schema rather than failing.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import yaml

from schemascout.parsers.base import ParseResult, describe_yaml_error, extract_schema_tag


def parse_yaml_content(text: str) -> ParseResult:
    """Parse YAML text and extract its schema tag.

    Args:
        text: Raw file content.

    Returns:
        ``ParseResult`` with ``content=None`` for empty or whitespace-only
        documents, and ``success=False`` on syntax errors.
    """
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        return ParseResult.failure(describe_yaml_error(exc))

    if parsed is None:
        return ParseResult(success=True)
    return ParseResult(success=True, content=parsed, schema=extract_schema_tag(parsed))


def parse_yaml_file(path: Path) -> ParseResult:
    """Read and parse a YAML file. Read failures become a failed result."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return ParseResult.failure(f"Cannot read file: {exc}")
    return parse_yaml_content(text)


async def parse_yaml_file_async(path: Path) -> ParseResult:
    """Async variant of ``parse_yaml_file``; the read runs in a worker thread."""
    try:
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return ParseResult.failure(f"Cannot read file: {exc}")
    return parse_yaml_content(text)
