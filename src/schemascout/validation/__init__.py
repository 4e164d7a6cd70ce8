"""Completeness validation of scanned features."""

from schemascout.discovery.unknown import classify_unknown_schema
from schemascout.validation.feature import get_feature_phase, validate_feature
from schemascout.validation.models import (
    FeatureValidationReport,
    IssueLevel,
    ValidationIssue,
    ValidationReport,
    ValidationStatus,
)
from schemascout.validation.validator import Validator

__all__ = [
    "FeatureValidationReport",
    "IssueLevel",
    "ValidationIssue",
    "ValidationReport",
    "ValidationStatus",
    "Validator",
    "classify_unknown_schema",
    "get_feature_phase",
    "validate_feature",
]
