"""Tests for unknown-schema classification and format suggestions."""

from __future__ import annotations

import pytest

from schemascout.discovery.models import UnknownSchemaCategory
from schemascout.discovery.unknown import classify_unknown_schema, format_suggestion


class TestClassifyUnknownSchema:
    def test_invalid(self) -> None:
        hint = classify_unknown_schema("ProgressLog")
        assert hint.category is UnknownSchemaCategory.INVALID
        assert "ProgressLog" in hint.message

    def test_unknown(self) -> None:
        hint = classify_unknown_schema("acme/runbook@1.0")
        assert hint.category is UnknownSchemaCategory.UNKNOWN
        assert "schema_extensions.custom" in hint.suggestion

    def test_legacy(self) -> None:
        hint = classify_unknown_schema("ai-coding/context@1.0", is_legacy=True)
        assert hint.category is UnknownSchemaCategory.LEGACY
        assert hint.suggestion == "Add _schema: 'ai-coding/context@1.0' at the top of the file"


class TestFormatSuggestion:
    """Each defect of a malformed id is named."""

    @pytest.mark.parametrize("schema_id, fragment", [
        ("progress-log", "missing namespace"),
        ("AI/progress-log", "uppercase"),
        ("ai-coding/9log", "must not start with a digit"),
        ("ai-coding/progress-log@1", "major.minor"),
        ("ai-coding/progress-log@v1.0", "major.minor"),
        ("ai_coding/log", "only letters, digits and '-'"),
    ])
    def test_defect_named(self, schema_id: str, fragment: str) -> None:
        assert fragment in format_suggestion(schema_id)

    def test_several_defects_joined(self) -> None:
        suggestion = format_suggestion("Log@1")
        assert "missing namespace" in suggestion
        assert "uppercase" in suggestion
        assert "major.minor" in suggestion
