"""Validation report models.

``ValidationStatus`` is ordered (VALID < WARNING < ERROR) so that the worst
status over a set of reports is simply ``max()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Any


class ValidationStatus(IntEnum):
    """Health of a feature or of a whole project, ordered by severity."""

    VALID = 0
    WARNING = 1
    ERROR = 2

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def worst(cls, statuses: list[ValidationStatus]) -> ValidationStatus:
        return max(statuses, default=cls.VALID)


class IssueLevel(Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class ValidationIssue:
    """One finding about a feature.

    Attributes:
        level: Severity of the finding.
        code: Stable machine-readable code (``MISSING_REQUIRED_FILE``, ...).
        message: Human-readable description.
        file: Offending file path, when the finding concerns one file.
        suggestion: Remediation hint.
    """

    level: IssueLevel
    code: str
    message: str
    file: str | None = None
    suggestion: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level.value,
            "code": self.code,
            "message": self.message,
            "file": self.file,
            "suggestion": self.suggestion,
        }


@dataclass
class FeatureValidationReport:
    """Completeness report for one feature.

    Attributes:
        feature_id: Feature identifier.
        status: ERROR if a required file type is missing, WARNING if a
            phase-gated file is missing or any warning fired, else VALID.
        missing_required: Required file types with no primary file.
        missing_for_phase: Phase-gated file types missing at the current
            phase, formatted as ``"<type> (Phase N+)"``.
        warnings: Free-text warnings (instance overflow, implicit primary).
        issues: Every finding, in the order it was raised.
        current_phase: Phase the gating was evaluated against, if known.
    """

    feature_id: str
    status: ValidationStatus = ValidationStatus.VALID
    missing_required: list[str] = field(default_factory=list)
    missing_for_phase: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    issues: list[ValidationIssue] = field(default_factory=list)
    current_phase: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "feature_id": self.feature_id,
            "status": self.status.label,
            "current_phase": self.current_phase,
            "missing_required": list(self.missing_required),
            "missing_for_phase": list(self.missing_for_phase),
            "warnings": list(self.warnings),
            "issues": [issue.to_dict() for issue in self.issues],
        }


@dataclass
class ValidationReport:
    """Project-wide validation outcome.

    Attributes:
        status: Worst feature status, raised to at least WARNING when
            unknown-schema files were found.
        feature_reports: Feature identifier -> report.
        unknown_schema_count: Number of unknown-schema files in the scan.
        timestamp: When the report was produced (UTC).
    """

    status: ValidationStatus
    feature_reports: dict[str, FeatureValidationReport] = field(default_factory=dict)
    unknown_schema_count: int = 0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def count_by_status(self) -> dict[ValidationStatus, int]:
        counts = {status: 0 for status in ValidationStatus}
        for report in self.feature_reports.values():
            counts[report.status] += 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.label,
            "timestamp": self.timestamp.isoformat(),
            "unknown_schema_count": self.unknown_schema_count,
            "features": {fid: r.to_dict() for fid, r in self.feature_reports.items()},
        }
