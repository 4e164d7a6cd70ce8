"""Project discovery: tree scanning, legacy detection and multi-instance resolution."""

from schemascout.discovery.legacy import (
    LEGACY_DETECTION_RULES,
    LegacyDetectionRule,
    LegacyDetector,
    infer_feature_id_from_path,
)
from schemascout.discovery.models import (
    ConflictReportRaw,
    ConflictReportUI,
    DiscoveredFile,
    DiscoveredFileInfo,
    FeatureScanResult,
    FileMeta,
    ResolutionResult,
    ScanResult,
    ScanStats,
    SelectionReason,
    UnknownSchemaCategory,
    UnknownSchemaHint,
    UnknownSchemaItem,
)
from schemascout.discovery.resolver import REASON_TEXTS, MultiInstanceResolver
from schemascout.discovery.scanner import ProjectScanner, common_base_dir, compile_patterns
from schemascout.discovery.unknown import classify_unknown_schema

__all__ = [
    "ConflictReportRaw",
    "ConflictReportUI",
    "DiscoveredFile",
    "DiscoveredFileInfo",
    "FeatureScanResult",
    "FileMeta",
    "LEGACY_DETECTION_RULES",
    "LegacyDetectionRule",
    "LegacyDetector",
    "MultiInstanceResolver",
    "ProjectScanner",
    "REASON_TEXTS",
    "ResolutionResult",
    "ScanResult",
    "ScanStats",
    "SelectionReason",
    "UnknownSchemaCategory",
    "UnknownSchemaHint",
    "UnknownSchemaItem",
    "classify_unknown_schema",
    "common_base_dir",
    "compile_patterns",
    "infer_feature_id_from_path",
]
