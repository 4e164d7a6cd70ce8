"""Per-feature completeness checks."""

from __future__ import annotations

from schemascout.config.models import FeatureSpec
from schemascout.discovery.models import FeatureScanResult
from schemascout.discovery.unknown import classify_unknown_schema
from schemascout.validation.models import (
    FeatureValidationReport,
    IssueLevel,
    ValidationIssue,
    ValidationStatus,
)


def _phase_value(value: object) -> int | None:
    # bool is an int subclass; a YAML ``true`` is not a phase.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def get_feature_phase(feature: FeatureScanResult) -> int | None:
    """Current phase of a feature.

    Read from the primary progress log (``meta.current_phase``), falling
    back to the primary phase-gate status file (top-level
    ``current_phase``). Returns None when neither declares a number.
    """
    progress_log = feature.primary_files.get("progress-log")
    if progress_log is not None and isinstance(progress_log.content, dict):
        meta = progress_log.content.get("meta")
        if isinstance(meta, dict):
            phase = _phase_value(meta.get("current_phase"))
            if phase is not None:
                return phase

    gate_status = feature.primary_files.get("phase-gate-status")
    if gate_status is not None and isinstance(gate_status.content, dict):
        return _phase_value(gate_status.content.get("current_phase"))
    return None


def validate_feature(
    feature: FeatureScanResult,
    spec: FeatureSpec,
    current_phase: int | None = None,
) -> FeatureValidationReport:
    """Compare a feature's primary files against the feature spec.

    Args:
        feature: Grouped, resolved scan output for one feature.
        spec: Per-file-type completeness rules.
        current_phase: Phase used for ``required_from_phase`` gating. No
            phase means phase-gated types are never reported missing.

    Returns:
        The feature's report. Issues are reported, never raised.
    """
    report = FeatureValidationReport(feature_id=feature.feature_id, current_phase=current_phase)

    for file_type, file_spec in spec.file_types.items():
        primary = feature.primary_files.get(file_type)

        if primary is None:
            if file_spec.required:
                report.missing_required.append(file_type)
                report.issues.append(ValidationIssue(
                    level=IssueLevel.ERROR,
                    code="MISSING_REQUIRED_FILE",
                    message=f"Missing required file: {file_type}",
                    suggestion=f"Create a {file_type} file with a _schema field",
                ))
            elif (
                current_phase is not None
                and file_spec.required_from_phase is not None
                and current_phase >= file_spec.required_from_phase
            ):
                report.missing_for_phase.append(
                    f"{file_type} (Phase {file_spec.required_from_phase}+)"
                )
                report.issues.append(ValidationIssue(
                    level=IssueLevel.WARNING,
                    code="MISSING_PHASE_FILE",
                    message=f"Phase {current_phase} expects a {file_type} file",
                    suggestion=f"{file_type} is needed from phase {file_spec.required_from_phase}",
                ))
            continue

        instances = feature.all_files.get(file_type, [])
        if file_spec.max_instances is not None and len(instances) > file_spec.max_instances:
            report.warnings.append(
                f"{file_type} has {len(instances)} instances, "
                f"more than the limit of {file_spec.max_instances}"
            )
            report.issues.append(ValidationIssue(
                level=IssueLevel.WARNING,
                code="TOO_MANY_INSTANCES",
                message=(
                    f"{file_type} instance count ({len(instances)}) exceeds "
                    f"the limit ({file_spec.max_instances})"
                ),
                file=primary.path,
                suggestion=f"Archive or delete the extra {file_type} files",
            ))

    for conflict in feature.conflicts:
        if conflict.has_explicit_primary:
            continue
        report.warnings.append(
            f"{conflict.file_type} has {len(conflict.instances)} instances "
            f"but no explicit primary"
        )
        report.issues.append(ValidationIssue(
            level=IssueLevel.WARNING,
            code="IMPLICIT_PRIMARY",
            message=(
                f"{conflict.file_type} has no explicit primary, "
                f"using {conflict.selected_path}"
            ),
            file=conflict.selected_path,
            suggestion="Add meta.is_primary: true to the intended primary file",
        ))

    for file_type in sorted(feature.primary_files):
        primary = feature.primary_files[file_type]
        if primary.legacy:
            hint = classify_unknown_schema(primary.schema, is_legacy=True)
            report.issues.append(ValidationIssue(
                level=IssueLevel.INFO,
                code="LEGACY_FILE",
                message=hint.message,
                file=primary.path,
                suggestion=hint.suggestion,
            ))

    if report.missing_required:
        report.status = ValidationStatus.ERROR
    elif report.missing_for_phase or report.warnings:
        report.status = ValidationStatus.WARNING
    return report
