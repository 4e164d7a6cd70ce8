"""Data models for the discovery pipeline.

Contains the value types produced by ``ProjectScanner`` and
``MultiInstanceResolver``: per-file discovery records, conflict reports,
per-feature scan results and the aggregate scan result.

Every record is created fresh by a scan and never mutated afterwards.
Each exposes ``to_dict()`` so downstream consumers (the CLI, a cache, a
presentation layer) can work with plain, JSON-compatible data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any

from schemascout.schema.models import Carrier, split_schema_id


class SelectionReason(Enum):
    """Why a primary file was selected among same-typed candidates.

    The first five values are the stages of the resolution chain, in
    default priority order. The last two are the trivial base cases.
    """

    EXPLICIT_PRIMARY = "explicit_primary"
    ACTIVE_STATUS = "active_status"
    LATEST_MODIFIED = "latest_modified"
    SHALLOWEST_PATH = "shallowest_path"
    ALPHABETICALLY_FIRST = "alphabetically_first"
    SINGLE_INSTANCE = "single_instance"
    NO_INSTANCES = "no_instances"


class UnknownSchemaCategory(Enum):
    """Classification of a file whose schema tag could not be used."""

    INVALID = "invalid"
    UNKNOWN = "unknown"
    LEGACY = "legacy"


@dataclass(frozen=True)
class FileMeta:
    """Author-declared metadata extracted from a file's ``meta`` block.

    Attributes:
        is_primary: Explicit ``meta.is_primary`` flag, None if absent.
        status: Free-form lifecycle tag (active, archived, backup, ...).
        version: Declared document version.
        feature: Owning feature identifier (from content or path).
    """

    is_primary: bool | None = None
    status: str | None = None
    version: str | None = None
    feature: str | None = None

    @classmethod
    def from_content(cls, content: Any, feature: str | None = None) -> FileMeta:
        """Extract ``is_primary``, ``status`` and ``version`` from ``content["meta"]``.

        Values of the wrong type are ignored. Numeric versions (``1.0``
        parsed as a float) are kept as strings.
        """
        is_primary = status = version = None
        meta = content.get("meta") if isinstance(content, dict) else None
        if isinstance(meta, dict):
            if isinstance(meta.get("is_primary"), bool):
                is_primary = meta["is_primary"]
            if isinstance(meta.get("status"), str) and meta["status"].strip():
                status = meta["status"].strip()
            raw_version = meta.get("version")
            if isinstance(raw_version, str) and raw_version.strip():
                version = raw_version.strip()
            elif isinstance(raw_version, (int, float)) and not isinstance(raw_version, bool):
                version = str(raw_version)
        return cls(is_primary=is_primary, status=status, version=version, feature=feature)

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_primary": self.is_primary,
            "status": self.status,
            "version": self.version,
            "feature": self.feature,
        }


@dataclass(frozen=True)
class DiscoveredFileInfo:
    """Compact projection of a discovered file for presentation layers."""

    file_type: str
    path: str
    display_name: str
    schema: str

    def to_dict(self) -> dict[str, str]:
        return {
            "file_type": self.file_type,
            "path": self.path,
            "display_name": self.display_name,
            "schema": self.schema,
        }


@dataclass(frozen=True)
class DiscoveredFile:
    """A YAML or Markdown file classified during a scan.

    Attributes:
        path: POSIX-style path relative to the project root. Never empty.
        schema: Schema identifier, as declared or as assigned by a legacy
            rule (may be invalid/unknown for unknown-schema items).
        carrier: Content format the file was parsed as.
        content: Parsed YAML document or Markdown header (opaque).
        last_modified: Modification time (timezone-aware, UTC).
        size: File size in bytes.
        legacy: True if classified by filename convention rather than an
            explicit ``_schema`` tag.
        meta: Extracted author metadata, including the feature identifier.
    """

    path: str
    schema: str
    carrier: Carrier
    content: Any
    last_modified: datetime
    size: int
    legacy: bool = False
    meta: FileMeta = field(default_factory=FileMeta)

    def __post_init__(self) -> None:
        if not self.path:
            raise ValueError("DiscoveredFile.path must not be empty")

    @property
    def file_type(self) -> str:
        """Trailing segment of the schema's base identifier."""
        base_id, _ = split_schema_id(self.schema)
        return base_id.rsplit("/", 1)[-1]

    @property
    def feature_id(self) -> str | None:
        return self.meta.feature

    @property
    def is_primary(self) -> bool:
        return self.meta.is_primary is True

    @property
    def depth(self) -> int:
        """Number of path segments, including the filename."""
        return len(PurePosixPath(self.path).parts)

    def to_info(self) -> DiscoveredFileInfo:
        return DiscoveredFileInfo(
            file_type=self.file_type,
            path=self.path,
            display_name=PurePosixPath(self.path).name,
            schema=self.schema,
        )

    def to_dict(self, include_content: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {
            "path": self.path,
            "schema": self.schema,
            "file_type": self.file_type,
            "carrier": self.carrier.value,
            "last_modified": self.last_modified.isoformat(),
            "size": self.size,
            "legacy": self.legacy,
            "meta": self.meta.to_dict(),
        }
        if include_content:
            data["content"] = self.content
        return data


@dataclass(frozen=True)
class ConflictReportUI:
    """User-facing summary of a multi-instance resolution.

    Attributes:
        file_type: Logical file type (e.g., "progress-log").
        instances: Paths of all candidates, sorted by path.
        selected_path: Path of the chosen primary.
        reason_text: Human-readable explanation of the choice.
        has_explicit_primary: Whether any candidate declared
            ``meta.is_primary: true``.
    """

    file_type: str
    instances: list[str]
    selected_path: str
    reason_text: str
    has_explicit_primary: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_type": self.file_type,
            "instances": list(self.instances),
            "selected_path": self.selected_path,
            "reason_text": self.reason_text,
            "has_explicit_primary": self.has_explicit_primary,
        }


@dataclass(frozen=True)
class ConflictReportRaw:
    """Diagnostic record of a multi-instance resolution.

    Attributes:
        file_type: Logical file type.
        instances: All candidate files.
        reason: Stage that produced the final singleton.
        decision_log: Ordered, human-readable log of each stage.
    """

    file_type: str
    instances: list[DiscoveredFile]
    reason: SelectionReason
    decision_log: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_type": self.file_type,
            "instances": [f.to_dict() for f in self.instances],
            "reason": self.reason.value,
            "decision_log": list(self.decision_log),
        }


@dataclass
class ResolutionResult:
    """Outcome of resolving one (feature, file type) candidate group.

    Attributes:
        primary: The selected file, None only for an empty group.
        reason: Stage (or base case) that selected the primary.
        confident: True when the choice rests on author intent or
            unambiguous status filtering; False for heuristic tie-breaks.
        all_instances: Every candidate, sorted by path.
        conflict_ui: Compact report, present iff there was more than one
            candidate.
        conflict_raw: Diagnostic report, present iff ``conflict_ui`` is.
    """

    primary: DiscoveredFile | None
    reason: SelectionReason
    confident: bool
    all_instances: list[DiscoveredFile] = field(default_factory=list)
    conflict_ui: ConflictReportUI | None = None
    conflict_raw: ConflictReportRaw | None = None

    @property
    def has_conflict(self) -> bool:
        return self.conflict_ui is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "primary": self.primary.path if self.primary else None,
            "reason": self.reason.value,
            "confident": self.confident,
            "all_instances": [f.path for f in self.all_instances],
            "conflict_ui": self.conflict_ui.to_dict() if self.conflict_ui else None,
            "conflict_raw": self.conflict_raw.to_dict() if self.conflict_raw else None,
        }


@dataclass(frozen=True)
class UnknownSchemaHint:
    """Category plus remediation advice for an unusable schema tag."""

    category: UnknownSchemaCategory
    message: str
    suggestion: str


@dataclass(frozen=True)
class UnknownSchemaItem:
    """A file whose schema tag failed format validation or registry lookup."""

    file: DiscoveredFile
    hint: UnknownSchemaHint

    @property
    def category(self) -> UnknownSchemaCategory:
        return self.hint.category

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.file.path,
            "schema": self.file.schema,
            "category": self.hint.category.value,
            "message": self.hint.message,
            "suggestion": self.hint.suggestion,
        }


@dataclass
class FeatureScanResult:
    """All artifacts discovered for one feature.

    Attributes:
        feature_id: Feature identifier.
        primary_files: File type -> resolved primary file.
        all_files: File type -> every candidate of that type.
        conflicts: Compact reports for every multi-candidate file type.
        resolutions: File type -> full resolution result.
        base_dir: Shallowest common directory of the feature's files
            (advisory only; None when the files share no directory).
    """

    feature_id: str
    primary_files: dict[str, DiscoveredFile] = field(default_factory=dict)
    all_files: dict[str, list[DiscoveredFile]] = field(default_factory=dict)
    conflicts: list[ConflictReportUI] = field(default_factory=list)
    resolutions: dict[str, ResolutionResult] = field(default_factory=dict)
    base_dir: str | None = None

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    def discovered_files(self) -> list[DiscoveredFileInfo]:
        """Projections of the primary files, ordered by file type."""
        return [self.primary_files[t].to_info() for t in sorted(self.primary_files)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "feature_id": self.feature_id,
            "base_dir": self.base_dir,
            "primary_files": {t: f.to_dict() for t, f in self.primary_files.items()},
            "all_files": {t: [f.path for f in files] for t, files in self.all_files.items()},
            "conflicts": [c.to_dict() for c in self.conflicts],
            "resolutions": {
                t: {"reason": r.reason.value, "confident": r.confident}
                for t, r in self.resolutions.items()
            },
        }


@dataclass
class ScanStats:
    """Aggregate scan statistics.

    Attributes:
        total_files: YAML/Markdown files visited.
        schema_files: Files carrying a recognized or legacy schema.
        scan_time_ms: Wall-clock scan duration in milliseconds.
    """

    total_files: int = 0
    schema_files: int = 0
    scan_time_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_files": self.total_files,
            "schema_files": self.schema_files,
            "scan_time_ms": round(self.scan_time_ms, 3),
        }


@dataclass
class ScanResult:
    """Complete result of scanning one project tree.

    Attributes:
        root: Absolute project root that was scanned.
        features: Feature identifier -> per-feature result, sorted by id.
        project_files: File type -> primary project-scoped file.
        project_conflicts: Conflict reports among project-scoped files.
        unknown_schemas: Files with invalid or unregistered schema tags.
        stats: Aggregate statistics.
        warnings: Non-fatal notes (e.g., no config file found).
    """

    root: Path
    features: dict[str, FeatureScanResult] = field(default_factory=dict)
    project_files: dict[str, DiscoveredFile] = field(default_factory=dict)
    project_conflicts: list[ConflictReportUI] = field(default_factory=list)
    unknown_schemas: list[UnknownSchemaItem] = field(default_factory=list)
    stats: ScanStats = field(default_factory=ScanStats)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": str(self.root),
            "features": {fid: f.to_dict() for fid, f in self.features.items()},
            "project_files": {t: f.to_dict() for t, f in self.project_files.items()},
            "project_conflicts": [c.to_dict() for c in self.project_conflicts],
            "unknown_schemas": [u.to_dict() for u in self.unknown_schemas],
            "stats": self.stats.to_dict(),
            "warnings": list(self.warnings),
        }
