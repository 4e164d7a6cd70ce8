"""Schema registry: the catalog of known schema identifiers.

The ``SchemaRegistry`` maps base schema identifiers (``namespace/name``) to
their ``SchemaDefinition``. Lookups accept both versioned
(``ai-coding/progress-log@1.0``) and unversioned forms; the version suffix
is stripped before the lookup.

Registries are plain values. ``default_registry()`` builds a fresh registry
pre-loaded with the built-in schemas, so each scanner (and each test) works
against its own catalog instead of process-wide state.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable

from schemascout.schema.models import (
    Carrier,
    SchemaDefinition,
    SchemaScope,
    is_valid_schema_id,
    split_schema_id,
)

BUILTIN_SCHEMAS: tuple[SchemaDefinition, ...] = (
    SchemaDefinition(
        id="ai-coding/progress-log",
        description="Feature progress log tracking tasks and status",
        scope=SchemaScope.FEATURE,
        required=True,
        identifier_field="meta.feature",
        legacy_fields=("feature", "feature_id"),
        carriers=(Carrier.YAML,),
    ),
    SchemaDefinition(
        id="ai-coding/context",
        description="Feature context: background, boundaries and user stories",
        scope=SchemaScope.FEATURE,
        required=True,
        identifier_field="meta.feature",
        legacy_fields=("feature",),
        carriers=(Carrier.MARKDOWN,),
    ),
    SchemaDefinition(
        id="ai-coding/design",
        description="Technical design document",
        scope=SchemaScope.FEATURE,
        identifier_field="meta.feature",
        carriers=(Carrier.MARKDOWN,),
    ),
    SchemaDefinition(
        id="ai-coding/test-plan",
        description="Test plan",
        scope=SchemaScope.FEATURE,
        identifier_field="meta.feature",
        carriers=(Carrier.MARKDOWN, Carrier.YAML),
    ),
    SchemaDefinition(
        id="ai-coding/phase-gate-status",
        description="Per-feature phase gate status tracking",
        scope=SchemaScope.FEATURE,
        identifier_field="meta.feature",
        carriers=(Carrier.YAML,),
    ),
    SchemaDefinition(
        id="ai-coding/project",
        description="Project configuration",
        scope=SchemaScope.PROJECT,
        identifier_field="project.name",
        carriers=(Carrier.YAML,),
    ),
    SchemaDefinition(
        id="ai-coding/phase-gate",
        description="Phase gate rule definitions",
        scope=SchemaScope.PROJECT,
        identifier_field="phase_gate.name",
        carriers=(Carrier.YAML,),
    ),
)


class SchemaRegistry:
    """Registry of schema definitions keyed by base identifier.

    Registration is last-write-wins: registering a definition whose ``id``
    is already present replaces the earlier one.

    Attributes:
        schemas: Mapping of base identifier to definition, in
            registration order.
    """

    def __init__(self, schemas: Iterable[SchemaDefinition] = ()) -> None:
        self.schemas: dict[str, SchemaDefinition] = {}
        for schema in schemas:
            self.register(schema)

    def __len__(self) -> int:
        return len(self.schemas)

    def __contains__(self, schema_id: object) -> bool:
        return isinstance(schema_id, str) and self.is_known(schema_id)

    def register(self, schema: SchemaDefinition) -> None:
        """Insert or overwrite a definition by its base identifier."""
        base_id, _ = split_schema_id(schema.id)
        if base_id != schema.id:
            schema = replace(schema, id=base_id)
        self.schemas[base_id] = schema

    def override(self, schema_id: str, changes: dict[str, Any]) -> bool:
        """Patch fields of a registered definition.

        Args:
            schema_id: Identifier of the definition to patch.
            changes: Field values in config form (same keys as
                ``SchemaDefinition.from_dict``).

        Returns:
            True if the definition existed and was patched.
        """
        current = self.get(schema_id)
        if current is None:
            return False
        merged = {**current.to_dict(), **changes, "id": current.id}
        self.register(SchemaDefinition.from_dict(merged))
        return True

    def get(self, schema_id: str) -> SchemaDefinition | None:
        """Return the definition for ``schema_id``, or None if unknown."""
        base_id, _ = split_schema_id(schema_id)
        return self.schemas.get(base_id)

    def get_all(self) -> list[SchemaDefinition]:
        return list(self.schemas.values())

    def is_known(self, schema_id: str) -> bool:
        return self.get(schema_id) is not None

    def get_by_scope(self, scope: SchemaScope | str) -> list[SchemaDefinition]:
        """Return all definitions with the given scope (none for an unknown scope)."""
        if isinstance(scope, str):
            try:
                scope = SchemaScope(scope.lower())
            except ValueError:
                return []
        return [s for s in self.schemas.values() if s.scope is scope]

    def get_required(self) -> list[SchemaDefinition]:
        return [s for s in self.schemas.values() if s.required]

    def supports_carrier(self, schema_id: str, carrier: Carrier) -> bool:
        """Check whether a known schema may be carried in ``carrier``."""
        schema = self.get(schema_id)
        return schema is not None and carrier in schema.carriers

    def file_types(self) -> list[str]:
        """Logical file types of all registered schemas."""
        return [s.file_type for s in self.schemas.values()]

    @staticmethod
    def parse_schema_id(schema_id: str) -> tuple[str, str | None]:
        """Split an identifier into ``(base_id, version)``."""
        return split_schema_id(schema_id)

    @staticmethod
    def file_type_of(schema_id: str) -> str:
        """Logical file type of an identifier (``ns/progress-log@1.0`` -> ``progress-log``)."""
        base_id, _ = split_schema_id(schema_id)
        return base_id.rsplit("/", 1)[-1]

    def format_schema_id(self, schema_id: str, version: str | None = None) -> str:
        """Format a full ``id@version`` string.

        Uses ``version`` when given, else the registered version, else
        returns the identifier unchanged.
        """
        base_id, _ = split_schema_id(schema_id)
        if version:
            return f"{base_id}@{version}"
        schema = self.get(base_id)
        if schema is not None:
            return schema.full_id
        return schema_id

    @staticmethod
    def validate_schema_id_format(schema_id: str) -> bool:
        """Check the lexical shape ``namespace/name[@major.minor]``.

        Runs before any semantic lookup; a malformed identifier is never
        looked up.
        """
        return is_valid_schema_id(schema_id)


def default_registry(extra: Iterable[SchemaDefinition] = ()) -> SchemaRegistry:
    """Create a SchemaRegistry pre-loaded with the built-in schemas.

    Args:
        extra: Additional definitions registered after the built-ins
            (they win on identifier collisions).

    Returns:
        A new, independent registry.
    """
    registry = SchemaRegistry(BUILTIN_SCHEMAS)
    for schema in extra:
        registry.register(schema)
    return registry
