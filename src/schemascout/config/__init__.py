"""Project configuration: models, defaults and the ``project.yaml`` loader."""

from schemascout.config.defaults import (
    DEFAULT_IGNORE_PATTERNS,
    deep_merge,
    default_project_config,
    merge_with_defaults,
)
from schemascout.config.loader import (
    CONFIG_FILE_PRIORITY,
    build_registry,
    find_config_file,
    lint_project_config,
    load_project_config,
    load_project_config_async,
)
from schemascout.config.models import (
    RESOLUTION_STAGES,
    FeatureSpec,
    FileTypeSpec,
    LoadResult,
    ProjectConfig,
    ProjectInfo,
    ResolutionConfig,
    ScannerConfig,
)

__all__ = [
    "CONFIG_FILE_PRIORITY",
    "DEFAULT_IGNORE_PATTERNS",
    "FeatureSpec",
    "FileTypeSpec",
    "LoadResult",
    "ProjectConfig",
    "ProjectInfo",
    "RESOLUTION_STAGES",
    "ResolutionConfig",
    "ScannerConfig",
    "build_registry",
    "deep_merge",
    "default_project_config",
    "find_config_file",
    "lint_project_config",
    "load_project_config",
    "load_project_config_async",
    "merge_with_defaults",
]
