"""Schema definitions and the schema registry."""

from schemascout.schema.models import (
    SCHEMA_ID_PATTERN,
    Carrier,
    SchemaDefinition,
    SchemaScope,
    is_valid_schema_id,
    split_schema_id,
)
from schemascout.schema.registry import BUILTIN_SCHEMAS, SchemaRegistry, default_registry

__all__ = [
    "BUILTIN_SCHEMAS",
    "Carrier",
    "SCHEMA_ID_PATTERN",
    "SchemaDefinition",
    "SchemaRegistry",
    "SchemaScope",
    "default_registry",
    "is_valid_schema_id",
    "split_schema_id",
]
