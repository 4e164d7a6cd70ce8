"""Parser for Markdown artifacts with a leading YAML header.

A header is a block fenced by ``---`` lines at the very start of the file::

    ---
    _schema: ai-coding/design@1.0
    meta:
      feature: checkout
    ---
    # Design
    ...

Header Detection
----------------
- No opening ``---`` line: no header, the whole text is body (success).
- Opening ``---`` without a closing ``---`` line: treated as no header so
  partially-written files are tolerated (success).
- Empty header: parses to an empty mapping.
- Header that is not a mapping, or has a YAML syntax error: failure, the
  scanner skips the file.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path

import yaml

from schemascout.parsers.base import ParseResult, describe_yaml_error, extract_schema_tag

_FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)(.*)",
    re.DOTALL | re.MULTILINE,
)


def has_frontmatter(text: str) -> bool:
    """Quick check: does the text open with a header delimiter?"""
    return text.startswith("---")


def parse_frontmatter_content(text: str) -> ParseResult:
    """Parse the leading header of Markdown text.

    Args:
        text: Raw Markdown content.

    Returns:
        ``ParseResult`` whose ``content`` is the header mapping (or None
        when there is no header) and whose ``body`` is the remaining text.
    """
    if not has_frontmatter(text):
        return ParseResult(success=True, body=text)

    match = _FRONTMATTER_PATTERN.match(text)
    if not match:
        return ParseResult(success=True, body=text)

    header, body = match.group(1), match.group(2)
    try:
        parsed = yaml.safe_load(header)
    except yaml.YAMLError as exc:
        return ParseResult.failure(describe_yaml_error(exc, label="Frontmatter"))

    if parsed is None:
        return ParseResult(success=True, content={}, body=body, has_header=True)
    if not isinstance(parsed, dict):
        return ParseResult.failure(
            f"Frontmatter must be a mapping, got {type(parsed).__name__}"
        )
    return ParseResult(
        success=True,
        content=parsed,
        schema=extract_schema_tag(parsed),
        body=body,
        has_header=True,
    )


def parse_frontmatter_file(path: Path) -> ParseResult:
    """Read and parse a Markdown file. Read failures become a failed result."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return ParseResult.failure(f"Cannot read file: {exc}")
    return parse_frontmatter_content(text)


async def parse_frontmatter_file_async(path: Path) -> ParseResult:
    """Async variant of ``parse_frontmatter_file``."""
    try:
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return ParseResult.failure(f"Cannot read file: {exc}")
    return parse_frontmatter_content(text)
