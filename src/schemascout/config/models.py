"""Project configuration models.

These dataclasses mirror the ``project.yaml`` layout. They are built from
raw YAML data (after merging with the defaults) by ``ProjectConfig.from_dict``
and are pure data holders with no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from schemascout.exceptions import ConfigError
from schemascout.schema.models import SchemaDefinition

# Resolution stages a priority chain may name, in default order.
RESOLUTION_STAGES: tuple[str, ...] = (
    "explicit_primary",
    "active_status",
    "latest_modified",
    "shallowest_path",
    "alphabetically_first",
)


def _mapping(value: Any, where: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{where} must be a mapping, got {type(value).__name__}")
    return value


def _string_list(value: Any, where: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, list):
        raise ConfigError(f"{where} must be a list, got {type(value).__name__}")
    for item in value:
        if not isinstance(item, (str, int, float)) or isinstance(item, bool):
            raise ConfigError(f"{where} entries must be strings, got {item!r}")
    return [str(item) for item in value]


def _integer(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{where} must be an integer, got {value!r}")
    return value


def _flag(value: Any, where: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{where} must be true or false, got {value!r}")
    return value


@dataclass
class ScannerConfig:
    """Tree-walk settings.

    Attributes:
        ignore: Glob patterns (``**`` aware) of relative paths to skip.
        include: Glob patterns that override ``ignore``.
        max_depth: Maximum directory nesting below the root.
        follow_symlinks: Whether symlinked files and directories are visited.
        feature_dirs: Container directory names whose immediate child
            directory names a feature (``docs/<feature>/...``).
    """

    ignore: list[str] = field(default_factory=list)
    include: list[str] = field(default_factory=list)
    max_depth: int = 10
    follow_symlinks: bool = False
    feature_dirs: list[str] = field(default_factory=lambda: ["docs", "features"])

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScannerConfig:
        """Build scanner settings.

        Raises:
            ConfigError: If a value has the wrong type.
        """
        return cls(
            ignore=_string_list(data.get("ignore"), "scanner.ignore"),
            include=_string_list(data.get("include"), "scanner.include"),
            max_depth=_integer(data.get("max_depth", 10), "scanner.max_depth"),
            follow_symlinks=_flag(
                data.get("follow_symlinks", False), "scanner.follow_symlinks"
            ),
            feature_dirs=(
                _string_list(data.get("feature_dirs"), "scanner.feature_dirs")
                or ["docs", "features"]
            ),
        )


@dataclass(frozen=True)
class FileTypeSpec:
    """Completeness rules for one file type.

    Attributes:
        required: Missing primary file is an error.
        required_from_phase: Missing primary file is a warning once the
            feature's current phase reaches this number.
        max_instances: Warn when more candidates than this exist.
    """

    required: bool = False
    required_from_phase: int | None = None
    max_instances: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], where: str = "file type") -> FileTypeSpec:
        phase = data.get("required_from_phase")
        limit = data.get("max_instances")
        return cls(
            required=_flag(data.get("required", False), f"{where}.required"),
            required_from_phase=(
                _integer(phase, f"{where}.required_from_phase") if phase is not None else None
            ),
            max_instances=(
                _integer(limit, f"{where}.max_instances") if limit is not None else None
            ),
        )


@dataclass
class FeatureSpec:
    """Per-file-type completeness rules applied to every feature."""

    file_types: dict[str, FileTypeSpec] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FeatureSpec:
        raw = _mapping(data.get("file_types"), "feature_spec.file_types")
        file_types: dict[str, FileTypeSpec] = {}
        for name, spec in raw.items():
            where = f"feature_spec.file_types.{name}"
            file_types[str(name)] = FileTypeSpec.from_dict(_mapping(spec, where), where)
        return cls(file_types=file_types)


@dataclass
class ResolutionConfig:
    """Multi-instance resolution settings.

    Attributes:
        priority: Ordered resolution stage names. Names outside
            ``RESOLUTION_STAGES`` are dropped on load.
        archived_statuses: Status values treated as inactive (lowercase).
    """

    priority: list[str] = field(default_factory=lambda: list(RESOLUTION_STAGES))
    archived_statuses: list[str] = field(
        default_factory=lambda: ["archived", "backup", "deprecated", "obsolete"]
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResolutionConfig:
        names = [
            name.strip().lower()
            for name in _string_list(data.get("priority"), "multi_instance_resolution.priority")
        ]
        statuses = _string_list(
            data.get("archived_statuses"), "multi_instance_resolution.archived_statuses"
        )
        return cls(
            priority=[name for name in names if name in RESOLUTION_STAGES],
            archived_statuses=[s.strip().lower() for s in statuses],
        )


@dataclass
class ProjectInfo:
    name: str = "unnamed-project"
    version: str | None = None
    description: str | None = None


@dataclass
class ProjectConfig:
    """Complete, defaults-merged project configuration.

    Attributes:
        schema: The config file's own ``_schema`` tag.
        project: Basic project information.
        scanner: Tree-walk settings.
        custom_schemas: Extra schema definitions to register.
        schema_overrides: Schema id -> field patches for existing schemas.
        feature_spec: Completeness rules for the validator.
        resolution: Multi-instance resolution settings.
    """

    schema: str = "ai-coding/project@1.0"
    project: ProjectInfo = field(default_factory=ProjectInfo)
    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    custom_schemas: list[SchemaDefinition] = field(default_factory=list)
    schema_overrides: dict[str, dict[str, Any]] = field(default_factory=dict)
    feature_spec: FeatureSpec = field(default_factory=FeatureSpec)
    resolution: ResolutionConfig = field(default_factory=ResolutionConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectConfig:
        """Build a config from snake_case data already merged with defaults.

        Raises:
            ConfigError: If a section or value has the wrong shape.
            SchemaDefinitionError: If a custom schema is malformed.
        """
        project = _mapping(data.get("project"), "project")
        extensions = _mapping(data.get("schema_extensions"), "schema_extensions")
        custom = extensions.get("custom") or []
        if not isinstance(custom, list):
            raise ConfigError("schema_extensions.custom must be a list of schema definitions")
        overrides = _mapping(extensions.get("overrides"), "schema_extensions.overrides")
        version = project.get("version")
        description = project.get("description")
        return cls(
            schema=str(data.get("_schema", "")),
            project=ProjectInfo(
                name=str(project.get("name") or "unnamed-project"),
                version=str(version) if version is not None else None,
                description=str(description) if description is not None else None,
            ),
            scanner=ScannerConfig.from_dict(_mapping(data.get("scanner"), "scanner")),
            custom_schemas=[
                SchemaDefinition.from_dict(
                    _mapping(entry, f"schema_extensions.custom[{index}]")
                )
                for index, entry in enumerate(custom)
            ],
            schema_overrides={
                str(k): dict(_mapping(v, f"schema_extensions.overrides.{k}"))
                for k, v in overrides.items()
            },
            feature_spec=FeatureSpec.from_dict(
                _mapping(data.get("feature_spec"), "feature_spec")
            ),
            resolution=ResolutionConfig.from_dict(
                _mapping(data.get("multi_instance_resolution"), "multi_instance_resolution")
            ),
        )


@dataclass
class LoadResult:
    """Outcome of loading a project config.

    Attributes:
        config: The effective configuration.
        source: Path of the config file, or None when defaults were used.
        warnings: Non-fatal problems found while loading.
    """

    config: ProjectConfig
    source: Path | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def is_default(self) -> bool:
        return self.source is None
