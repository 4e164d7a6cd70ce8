"""Content parsers for YAML documents and Markdown headers."""

from schemascout.parsers.base import (
    SCHEMA_KEY,
    ParseResult,
    extract_feature_id,
    get_nested_value,
    is_markdown_file,
    is_yaml_file,
)
from schemascout.parsers.frontmatter import (
    has_frontmatter,
    parse_frontmatter_content,
    parse_frontmatter_file,
    parse_frontmatter_file_async,
)
from schemascout.parsers.yaml_parser import (
    parse_yaml_content,
    parse_yaml_file,
    parse_yaml_file_async,
)

__all__ = [
    "ParseResult",
    "SCHEMA_KEY",
    "extract_feature_id",
    "get_nested_value",
    "has_frontmatter",
    "is_markdown_file",
    "is_yaml_file",
    "parse_frontmatter_content",
    "parse_frontmatter_file",
    "parse_frontmatter_file_async",
    "parse_yaml_content",
    "parse_yaml_file",
    "parse_yaml_file_async",
]
