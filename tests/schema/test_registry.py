"""Tests for the schema registry and schema identifier grammar."""

from __future__ import annotations

import pytest

from schemascout.exceptions import SchemaDefinitionError
from schemascout.schema.models import (
    Carrier,
    SchemaDefinition,
    SchemaScope,
    is_valid_schema_id,
    split_schema_id,
)
from schemascout.schema.registry import BUILTIN_SCHEMAS, SchemaRegistry, default_registry


class TestSchemaIdGrammar:
    """Lexical validation of ``namespace/name[@major.minor]``."""

    @pytest.mark.parametrize("schema_id", [
        "ai-coding/progress-log",
        "ai-coding/progress-log@1.0",
        "acme/x@12.34",
        "a/b",
    ])
    def test_valid_ids(self, schema_id: str) -> None:
        assert is_valid_schema_id(schema_id)

    @pytest.mark.parametrize("schema_id", [
        "progress-log",
        "AI-coding/progress-log",
        "ai-coding/Progress-Log",
        "1ai/progress-log",
        "ai-coding/progress-log@1",
        "ai-coding/progress-log@v1.0",
        "ai-coding/progress-log@1.0.0",
        "ai-coding/progress_log",
        "",
        "ai-coding/progress-log\n",
        "ai-coding/progress-log@1.0\n",
    ])
    def test_invalid_ids(self, schema_id: str) -> None:
        assert not is_valid_schema_id(schema_id)

    def test_split_versioned(self) -> None:
        assert split_schema_id("ai-coding/design@2.1") == ("ai-coding/design", "2.1")

    def test_split_unversioned(self) -> None:
        assert split_schema_id("ai-coding/design") == ("ai-coding/design", None)


class TestRegistryLookup:
    """get / is_known accept versioned and unversioned identifiers."""

    def test_builtins_loaded(self, registry: SchemaRegistry) -> None:
        assert len(registry) == len(BUILTIN_SCHEMAS)

    def test_get_unversioned(self, registry: SchemaRegistry) -> None:
        schema = registry.get("ai-coding/progress-log")
        assert schema is not None
        assert schema.required is True

    def test_get_versioned_strips_version(self, registry: SchemaRegistry) -> None:
        assert registry.get("ai-coding/progress-log@9.9") is registry.get("ai-coding/progress-log")

    def test_unknown_returns_none(self, registry: SchemaRegistry) -> None:
        assert registry.get("acme/unknown@1.0") is None
        assert not registry.is_known("acme/unknown")

    def test_contains(self, registry: SchemaRegistry) -> None:
        assert "ai-coding/context@1.0" in registry
        assert "acme/nothing" not in registry
        assert 42 not in registry

    def test_validate_format_is_static(self) -> None:
        assert SchemaRegistry.validate_schema_id_format("ai-coding/design@1.0")
        assert not SchemaRegistry.validate_schema_id_format("Design")


class TestRegistryQueries:
    """Scope, required and carrier queries used by the validator and scanner."""

    def test_get_required(self, registry: SchemaRegistry) -> None:
        required = {s.file_type for s in registry.get_required()}
        assert required == {"progress-log", "context"}

    def test_get_by_scope_enum(self, registry: SchemaRegistry) -> None:
        project = {s.file_type for s in registry.get_by_scope(SchemaScope.PROJECT)}
        assert project == {"project", "phase-gate"}

    def test_get_by_scope_string(self, registry: SchemaRegistry) -> None:
        assert len(registry.get_by_scope("feature")) == 5

    def test_get_by_scope_unknown_string(self, registry: SchemaRegistry) -> None:
        assert registry.get_by_scope("bogus") == []

    def test_supports_carrier(self, registry: SchemaRegistry) -> None:
        assert registry.supports_carrier("ai-coding/context", Carrier.MARKDOWN)
        assert not registry.supports_carrier("ai-coding/context", Carrier.YAML)
        assert registry.supports_carrier("ai-coding/test-plan@1.0", Carrier.YAML)
        assert not registry.supports_carrier("acme/none", Carrier.YAML)

    def test_file_types(self, registry: SchemaRegistry) -> None:
        assert "phase-gate-status" in registry.file_types()

    def test_file_type_of(self) -> None:
        assert SchemaRegistry.file_type_of("ai-coding/progress-log@1.0") == "progress-log"

    def test_parse_schema_id(self) -> None:
        assert SchemaRegistry.parse_schema_id("a/b@1.2") == ("a/b", "1.2")

    def test_format_schema_id(self, registry: SchemaRegistry) -> None:
        assert registry.format_schema_id("ai-coding/design") == "ai-coding/design@1.0"
        assert registry.format_schema_id("ai-coding/design", "2.0") == "ai-coding/design@2.0"
        assert registry.format_schema_id("acme/x") == "acme/x"


class TestRegistration:
    """register / override and registry isolation."""

    def test_register_last_write_wins(self) -> None:
        registry = SchemaRegistry()
        registry.register(SchemaDefinition(id="acme/notes", description="first"))
        registry.register(SchemaDefinition(id="acme/notes", description="second"))
        assert len(registry) == 1
        assert registry.get("acme/notes").description == "second"

    def test_register_strips_version_from_id(self) -> None:
        registry = SchemaRegistry()
        registry.register(SchemaDefinition(id="acme/notes@2.0"))
        assert registry.get("acme/notes").id == "acme/notes"

    def test_override_existing(self, registry: SchemaRegistry) -> None:
        assert registry.override("ai-coding/design", {"required": True})
        assert registry.get("ai-coding/design").required is True

    def test_override_unknown(self, registry: SchemaRegistry) -> None:
        assert registry.override("acme/none", {"required": True}) is False

    def test_registries_are_isolated(self) -> None:
        first = default_registry()
        second = default_registry()
        first.register(SchemaDefinition(id="acme/extra"))
        assert first.is_known("acme/extra")
        assert not second.is_known("acme/extra")

    def test_default_registry_extra_wins(self) -> None:
        custom = SchemaDefinition(id="ai-coding/design", required=True)
        registry = default_registry([custom])
        assert registry.get("ai-coding/design").required is True


class TestSchemaDefinitionFromDict:
    """Config-form schema definitions."""

    def test_camel_case_keys(self) -> None:
        schema = SchemaDefinition.from_dict({
            "id": "acme/runbook@2.1",
            "scope": "project",
            "identifierField": "meta.owner",
            "legacyFields": ["owner"],
            "carriers": ["markdown-with-header"],
        })
        assert schema.id == "acme/runbook"
        assert schema.version == "2.1"
        assert schema.scope is SchemaScope.PROJECT
        assert schema.identifier_field == "meta.owner"
        assert schema.legacy_fields == ("owner",)
        assert schema.carriers == (Carrier.MARKDOWN,)

    def test_round_trip_via_to_dict(self) -> None:
        original = BUILTIN_SCHEMAS[0]
        assert SchemaDefinition.from_dict(original.to_dict()) == original

    @pytest.mark.parametrize("data", [
        {},
        {"id": "NoNamespace"},
        {"id": "acme/x", "scope": "galaxy"},
        {"id": "acme/x", "carriers": ["json"]},
    ])
    def test_malformed_raises(self, data: dict) -> None:
        with pytest.raises(SchemaDefinitionError):
            SchemaDefinition.from_dict(data)
