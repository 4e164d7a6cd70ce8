"""Project-wide completeness validation over a scan result."""

from __future__ import annotations

import logging

from schemascout.config.defaults import default_project_config
from schemascout.config.models import FeatureSpec
from schemascout.discovery.models import ScanResult
from schemascout.validation.feature import get_feature_phase, validate_feature
from schemascout.validation.models import ValidationReport, ValidationStatus

logger = logging.getLogger(__name__)

_STATUS_TEXT = {
    ValidationStatus.VALID: "passed",
    ValidationStatus.WARNING: "passed with warnings",
    ValidationStatus.ERROR: "failed",
}


class Validator:
    """Validates every feature of a ``ScanResult`` against a ``FeatureSpec``.

    Args:
        feature_spec: Completeness rules. Defaults to the built-in spec
            (progress-log and context required, design from phase 4,
            test-plan from phase 6).
    """

    def __init__(self, feature_spec: FeatureSpec | None = None) -> None:
        self.feature_spec = (
            feature_spec if feature_spec is not None else default_project_config().feature_spec
        )

    def validate(
        self, scan_result: ScanResult, feature_spec: FeatureSpec | None = None,
    ) -> ValidationReport:
        """Produce a report for every feature in ``scan_result``.

        Args:
            scan_result: Output of ``ProjectScanner``.
            feature_spec: Overrides the validator's spec for this call.
        """
        spec = feature_spec if feature_spec is not None else self.feature_spec
        report = ValidationReport(
            status=ValidationStatus.VALID,
            unknown_schema_count=len(scan_result.unknown_schemas),
        )

        for feature_id, feature in scan_result.features.items():
            feature_report = validate_feature(feature, spec, get_feature_phase(feature))
            report.feature_reports[feature_id] = feature_report
            logger.debug("Feature %s: %s", feature_id, feature_report.status.label)

        report.status = ValidationStatus.worst(
            [r.status for r in report.feature_reports.values()]
        )
        if report.unknown_schema_count and report.status < ValidationStatus.WARNING:
            report.status = ValidationStatus.WARNING
        return report

    def get_summary(self, report: ValidationReport) -> str:
        """Short multi-line text summary of a report."""
        counts = report.count_by_status()
        lines = [
            f"Validation {_STATUS_TEXT[report.status]}",
            f"Features: {len(report.feature_reports)}",
            (
                f"  valid: {counts[ValidationStatus.VALID]}, "
                f"warning: {counts[ValidationStatus.WARNING]}, "
                f"error: {counts[ValidationStatus.ERROR]}"
            ),
        ]
        if report.unknown_schema_count:
            lines.append(f"Unknown schemas: {report.unknown_schema_count}")
        return "\n".join(lines)
