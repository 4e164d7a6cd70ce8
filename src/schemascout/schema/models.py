"""Data models for schema definitions: SchemaScope, Carrier, SchemaDefinition.

A schema definition describes one logical artifact role (a progress log, a
design document, ...) that a file can claim through its ``_schema`` tag.
Definitions are plain immutable values; the ``SchemaRegistry`` owns the
catalog.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from schemascout.exceptions import SchemaDefinitionError

# Lexical grammar for schema identifiers: ``namespace/name[@major.minor]``.
SCHEMA_ID_PATTERN = re.compile(r"[a-z][a-z0-9-]*/[a-z][a-z0-9-]*(@[0-9]+\.[0-9]+)?")

# Splits a (possibly malformed) identifier into base and optional version.
_VERSION_SUFFIX = re.compile(r"^(.+?)(?:@(\d+\.\d+))?$")


class SchemaScope(Enum):
    """Whether a schema belongs to a single feature or to the whole project."""

    FEATURE = "feature"
    PROJECT = "project"


class Carrier(Enum):
    """Content format a file uses to carry schema-tagged data."""

    YAML = "yaml"
    MARKDOWN = "md-frontmatter"

    @classmethod
    def parse(cls, value: str) -> Carrier:
        """Parse a carrier name, accepting ``markdown-with-header`` as an alias."""
        normalized = value.strip().lower()
        if normalized in ("markdown-with-header", "markdown", "md"):
            return cls.MARKDOWN
        return cls(normalized)


def split_schema_id(schema_id: str) -> tuple[str, str | None]:
    """Split ``ns/name@1.0`` into ``("ns/name", "1.0")``.

    Identifiers without a version suffix return ``None`` as the version.
    """
    match = _VERSION_SUFFIX.match(schema_id)
    if not match:
        return schema_id, None
    return match.group(1), match.group(2)


def is_valid_schema_id(schema_id: str) -> bool:
    """Return True if ``schema_id`` matches the identifier grammar."""
    return SCHEMA_ID_PATTERN.fullmatch(schema_id) is not None


@dataclass(frozen=True)
class SchemaDefinition:
    """A registered schema: one logical artifact role.

    Attributes:
        id: Base identifier without version (e.g., "ai-coding/progress-log").
        version: Current ``major.minor`` version of the schema.
        description: Human-readable summary of the artifact role.
        scope: Feature-level or project-level artifact.
        required: Whether every feature is expected to carry this artifact.
        identifier_field: Dotted path to the owning feature identifier
            inside the parsed content (e.g., "meta.feature").
        legacy_fields: Top-level fallback field names tried in order when
            ``identifier_field`` yields nothing.
        carriers: Content formats this schema may be carried in.
    """

    id: str
    version: str = "1.0"
    description: str = ""
    scope: SchemaScope = SchemaScope.FEATURE
    required: bool = False
    identifier_field: str = "meta.feature"
    legacy_fields: tuple[str, ...] = ()
    carriers: tuple[Carrier, ...] = field(default=(Carrier.YAML,))

    @property
    def file_type(self) -> str:
        """Logical file type: the trailing segment of the identifier."""
        return self.id.rsplit("/", 1)[-1]

    @property
    def full_id(self) -> str:
        """Identifier including the version suffix."""
        return f"{self.id}@{self.version}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain, JSON-compatible data."""
        return {
            "id": self.id,
            "version": self.version,
            "description": self.description,
            "scope": self.scope.value,
            "required": self.required,
            "identifier_field": self.identifier_field,
            "legacy_fields": list(self.legacy_fields),
            "carriers": [c.value for c in self.carriers],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SchemaDefinition:
        """Build a definition from config data (snake_case or camelCase keys).

        A versioned ``id`` (``ns/name@2.1``) sets the version unless an
        explicit ``version`` key is also present.

        Raises:
            SchemaDefinitionError: If the identifier, scope or carriers
                are missing or malformed.
        """
        raw_id = data.get("id")
        if not isinstance(raw_id, str) or not raw_id.strip():
            raise SchemaDefinitionError("Schema definition is missing an 'id'")
        raw_id = raw_id.strip()
        if not is_valid_schema_id(raw_id):
            raise SchemaDefinitionError(
                f"Invalid schema id '{raw_id}': expected namespace/name[@major.minor]"
            )
        base_id, id_version = split_schema_id(raw_id)

        try:
            scope = SchemaScope(str(data.get("scope", "feature")).lower())
        except ValueError:
            raise SchemaDefinitionError(
                f"Schema '{base_id}' has unknown scope: {data.get('scope')!r}"
            ) from None

        raw_carriers = data.get("carriers", ["yaml"])
        if isinstance(raw_carriers, str):
            raw_carriers = [raw_carriers]
        try:
            carriers = tuple(Carrier.parse(str(c)) for c in raw_carriers)
        except ValueError:
            raise SchemaDefinitionError(
                f"Schema '{base_id}' has unknown carrier in {raw_carriers!r}"
            ) from None

        legacy = data.get("legacy_fields", data.get("legacyFields", ()))
        if isinstance(legacy, str):
            legacy = [legacy]

        return cls(
            id=base_id,
            version=str(data.get("version") or id_version or "1.0"),
            description=str(data.get("description", "")),
            scope=scope,
            required=bool(data.get("required", False)),
            identifier_field=str(
                data.get("identifier_field", data.get("identifierField", "meta.feature"))
            ),
            legacy_fields=tuple(str(f) for f in legacy),
            carriers=carriers,
        )
