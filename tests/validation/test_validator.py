"""Tests for feature completeness validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from schemascout.config.models import FeatureSpec, FileTypeSpec
from schemascout.discovery.models import (
    ConflictReportUI,
    DiscoveredFile,
    FeatureScanResult,
    ScanResult,
    UnknownSchemaHint,
    UnknownSchemaItem,
    UnknownSchemaCategory,
)
from schemascout.discovery.scanner import ProjectScanner
from schemascout.validation.feature import get_feature_phase, validate_feature
from schemascout.validation.models import IssueLevel, ValidationStatus
from schemascout.validation.validator import Validator

from tests.discovery.helpers import make_file, progress_log, write_markdown, write_yaml


def _feature(feature_id: str = "alpha", **files: object) -> FeatureScanResult:
    """Feature with one primary file per keyword (file type with '_' for '-')."""
    feature = FeatureScanResult(feature_id=feature_id)
    for key, file in files.items():
        file_type = key.replace("_", "-")
        feature.primary_files[file_type] = file
        feature.all_files[file_type] = [file]
    return feature


def _with_phase(path: str, phase: object) -> DiscoveredFile:
    return make_file(path, content={"meta": {"current_phase": phase}})


@pytest.fixture
def spec() -> FeatureSpec:
    return FeatureSpec(file_types={
        "progress-log": FileTypeSpec(required=True, max_instances=1),
        "context": FileTypeSpec(required=True),
        "design": FileTypeSpec(required_from_phase=4),
    })


class TestGetFeaturePhase:
    """Current phase extraction."""

    def test_from_progress_log(self) -> None:
        feature = _feature(progress_log=_with_phase("p.yaml", 5))
        assert get_feature_phase(feature) == 5

    def test_from_phase_gate_status(self) -> None:
        gate = make_file(
            "g.yaml", "ai-coding/phase-gate-status@1.0", content={"current_phase": 2},
        )
        feature = _feature(phase_gate_status=gate)
        assert get_feature_phase(feature) == 2

    def test_progress_log_wins(self) -> None:
        gate = make_file(
            "g.yaml", "ai-coding/phase-gate-status@1.0", content={"current_phase": 2},
        )
        feature = _feature(progress_log=_with_phase("p.yaml", 7), phase_gate_status=gate)
        assert get_feature_phase(feature) == 7

    @pytest.mark.parametrize("value", ["4", True, None])
    def test_non_numeric_ignored(self, value: object) -> None:
        feature = _feature(progress_log=_with_phase("p.yaml", value))
        assert get_feature_phase(feature) is None

    def test_no_files(self) -> None:
        assert get_feature_phase(FeatureScanResult(feature_id="x")) is None


class TestValidateFeature:
    """Status rules per feature."""

    def test_complete_feature_is_valid(self, spec: FeatureSpec) -> None:
        feature = _feature(
            progress_log=make_file("p.yaml"),
            context=make_file("c.md", "ai-coding/context@1.0"),
        )
        report = validate_feature(feature, spec, current_phase=1)
        assert report.status is ValidationStatus.VALID
        assert report.issues == []

    def test_missing_required_is_error(self, spec: FeatureSpec) -> None:
        feature = _feature(progress_log=make_file("p.yaml"))
        report = validate_feature(feature, spec)
        assert report.status is ValidationStatus.ERROR
        assert report.missing_required == ["context"]
        assert report.issues[0].code == "MISSING_REQUIRED_FILE"
        assert report.issues[0].level is IssueLevel.ERROR

    def test_missing_required_ignores_phase(self, spec: FeatureSpec) -> None:
        feature = _feature(context=make_file("c.md", "ai-coding/context@1.0"))
        assert validate_feature(feature, spec, current_phase=0).status is ValidationStatus.ERROR

    def test_phase_gated_missing_at_threshold(self, spec: FeatureSpec) -> None:
        feature = _feature(
            progress_log=make_file("p.yaml"),
            context=make_file("c.md", "ai-coding/context@1.0"),
        )
        report = validate_feature(feature, spec, current_phase=4)
        assert report.status is ValidationStatus.WARNING
        assert report.missing_for_phase == ["design (Phase 4+)"]
        assert report.issues[0].code == "MISSING_PHASE_FILE"

    def test_phase_gated_missing_below_threshold(self, spec: FeatureSpec) -> None:
        feature = _feature(
            progress_log=make_file("p.yaml"),
            context=make_file("c.md", "ai-coding/context@1.0"),
        )
        report = validate_feature(feature, spec, current_phase=3)
        assert report.status is ValidationStatus.VALID
        assert report.missing_for_phase == []

    def test_unknown_phase_never_gates(self, spec: FeatureSpec) -> None:
        feature = _feature(
            progress_log=make_file("p.yaml"),
            context=make_file("c.md", "ai-coding/context@1.0"),
        )
        assert validate_feature(feature, spec, None).status is ValidationStatus.VALID

    def test_too_many_instances(self, spec: FeatureSpec) -> None:
        primary = make_file("docs/alpha/p.yaml", is_primary=True)
        feature = _feature(
            progress_log=primary,
            context=make_file("c.md", "ai-coding/context@1.0"),
        )
        feature.all_files["progress-log"] = [primary, make_file("docs/alpha/old/p.yaml")]
        feature.conflicts.append(ConflictReportUI(
            file_type="progress-log",
            instances=["docs/alpha/old/p.yaml", "docs/alpha/p.yaml"],
            selected_path="docs/alpha/p.yaml",
            reason_text="Explicitly marked as primary (meta.is_primary: true)",
            has_explicit_primary=True,
        ))
        report = validate_feature(feature, spec)
        assert report.status is ValidationStatus.WARNING
        assert [i.code for i in report.issues] == ["TOO_MANY_INSTANCES"]
        assert "2 instances" in report.warnings[0]

    def test_implicit_primary(self, spec: FeatureSpec) -> None:
        feature = _feature(
            progress_log=make_file("p.yaml"),
            context=make_file("c.md", "ai-coding/context@1.0"),
        )
        feature.conflicts.append(ConflictReportUI(
            file_type="context",
            instances=["a/c.md", "c.md"],
            selected_path="c.md",
            reason_text="Most recently modified instance",
            has_explicit_primary=False,
        ))
        report = validate_feature(feature, spec)
        assert report.status is ValidationStatus.WARNING
        issue = report.issues[-1]
        assert issue.code == "IMPLICIT_PRIMARY"
        assert issue.file == "c.md"

    def test_legacy_primary_is_info_only(self, spec: FeatureSpec) -> None:
        feature = _feature(
            progress_log=make_file("90_PROGRESS_LOG.yaml", legacy=True),
            context=make_file("c.md", "ai-coding/context@1.0"),
        )
        report = validate_feature(feature, spec)
        assert report.status is ValidationStatus.VALID
        assert [i.code for i in report.issues] == ["LEGACY_FILE"]
        assert report.issues[0].level is IssueLevel.INFO
        assert "ai-coding/progress-log@1.0" in report.issues[0].suggestion


class TestValidator:
    """Project-wide aggregation."""

    def test_worst_status_wins(self, spec: FeatureSpec) -> None:
        scan = ScanResult(root=Path("/p"), features={
            "ok": _feature(
                "ok",
                progress_log=make_file("p.yaml"),
                context=make_file("c.md", "ai-coding/context@1.0"),
            ),
            "bad": _feature("bad", progress_log=make_file("q.yaml")),
        })
        report = Validator(spec).validate(scan)
        assert report.status is ValidationStatus.ERROR
        assert report.feature_reports["ok"].status is ValidationStatus.VALID
        assert report.feature_reports["bad"].status is ValidationStatus.ERROR

    def test_unknown_schemas_raise_to_warning(self, spec: FeatureSpec) -> None:
        item = UnknownSchemaItem(
            file=make_file("x.yaml", "acme/x@1.0"),
            hint=UnknownSchemaHint(UnknownSchemaCategory.UNKNOWN, "Unregistered", "register"),
        )
        scan = ScanResult(root=Path("/p"), unknown_schemas=[item])
        report = Validator(spec).validate(scan)
        assert report.status is ValidationStatus.WARNING
        assert report.unknown_schema_count == 1

    def test_empty_scan_is_valid(self) -> None:
        report = Validator().validate(ScanResult(root=Path("/p")))
        assert report.status is ValidationStatus.VALID
        assert report.feature_reports == {}

    def test_spec_override_per_call(self, spec: FeatureSpec) -> None:
        scan = ScanResult(root=Path("/p"), features={
            "a": _feature("a", progress_log=make_file("p.yaml")),
        })
        validator = Validator(spec)
        assert validator.validate(scan).status is ValidationStatus.ERROR
        assert validator.validate(scan, FeatureSpec()).status is ValidationStatus.VALID

    def test_summary(self, spec: FeatureSpec) -> None:
        scan = ScanResult(root=Path("/p"), features={
            "bad": _feature("bad", progress_log=make_file("q.yaml")),
        })
        validator = Validator(spec)
        summary = validator.get_summary(validator.validate(scan))
        assert summary.splitlines()[0] == "Validation failed"
        assert "Features: 1" in summary
        assert "error: 1" in summary

    def test_to_dict(self, spec: FeatureSpec) -> None:
        scan = ScanResult(root=Path("/p"), features={
            "bad": _feature("bad", progress_log=make_file("q.yaml")),
        })
        data = Validator(spec).validate(scan).to_dict()
        assert data["status"] == "error"
        assert data["features"]["bad"]["missing_required"] == ["context"]


class TestEndToEnd:
    """Scan a tree, then validate it with the default spec."""

    def test_phase_gated_design(self, project_root: Path) -> None:
        write_yaml(project_root, "docs/alpha/progress.yaml", progress_log("alpha", current_phase=5))
        write_markdown(
            project_root, "docs/alpha/context.md",
            {"_schema": "ai-coding/context@1.0", "meta": {"feature": "alpha"}},
        )
        scan = ProjectScanner().scan_sync(project_root)
        report = Validator().validate(scan)
        alpha = report.feature_reports["alpha"]
        assert alpha.current_phase == 5
        assert alpha.missing_for_phase == ["design (Phase 4+)"]
        assert report.status is ValidationStatus.WARNING
