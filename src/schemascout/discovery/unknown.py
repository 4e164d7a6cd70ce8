"""Classification and remediation hints for unusable schema tags."""

from __future__ import annotations

import re

from schemascout.discovery.models import UnknownSchemaCategory, UnknownSchemaHint
from schemascout.schema.models import is_valid_schema_id

_EXAMPLE_ID = "ai-coding/progress-log@1.0"


def format_suggestion(schema_id: str) -> str:
    """Name the concrete defects of a malformed schema identifier."""
    issues: list[str] = []
    base, _, version = schema_id.partition("@")

    if "/" not in base:
        issues.append("missing namespace; use namespace/name")
    if re.search(r"[A-Z]", schema_id):
        issues.append("contains uppercase letters; use lowercase kebab-case")
    for segment in base.split("/"):
        if segment[:1].isdigit():
            issues.append("namespace and name must not start with a digit")
            break
    if re.search(r"[^a-zA-Z0-9/-]", base):
        issues.append("only letters, digits and '-' are allowed in namespace and name")
    if "@" in schema_id and not re.fullmatch(r"\d+\.\d+", version):
        issues.append("version must be major.minor, e.g. @1.0")

    if issues:
        return "; ".join(issues)
    return f"expected format namespace/name@major.minor, e.g. {_EXAMPLE_ID}"


def classify_unknown_schema(schema_id: str, is_legacy: bool = False) -> UnknownSchemaHint:
    """Explain why a schema tag cannot be used and how to fix it.

    Args:
        schema_id: The tag as written in the file (or assigned by a
            legacy rule).
        is_legacy: The file was classified by filename convention.

    Returns:
        An ``UnknownSchemaHint`` with category ``legacy``, ``invalid`` or
        ``unknown``.
    """
    if is_legacy:
        return UnknownSchemaHint(
            category=UnknownSchemaCategory.LEGACY,
            message="File was classified by its filename; it declares no _schema",
            suggestion=f"Add _schema: '{schema_id}' at the top of the file",
        )
    if not is_valid_schema_id(schema_id):
        return UnknownSchemaHint(
            category=UnknownSchemaCategory.INVALID,
            message=f"Invalid schema id format: {schema_id}",
            suggestion=format_suggestion(schema_id),
        )
    return UnknownSchemaHint(
        category=UnknownSchemaCategory.UNKNOWN,
        message=f"Unregistered schema: {schema_id}",
        suggestion=(
            "Check the schema id for typos, or register it under "
            "schema_extensions.custom in project.yaml"
        ),
    )
