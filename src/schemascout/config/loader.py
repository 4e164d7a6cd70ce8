"""Locate, load and lint the project configuration file.

Config files are searched at the project root in a fixed priority order
(``CONFIG_FILE_PRIORITY``). A missing config file is not an error: the
built-in defaults apply and a warning is returned with them. A config file
that exists but cannot be parsed raises ``ConfigError``.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import yaml

from schemascout.config.defaults import default_project_config, merge_with_defaults
from schemascout.config.models import RESOLUTION_STAGES, LoadResult, ProjectConfig
from schemascout.exceptions import ConfigError
from schemascout.schema.registry import SchemaRegistry, default_registry

logger = logging.getLogger(__name__)

CONFIG_FILE_PRIORITY: tuple[str, ...] = (
    "project.yaml",
    "ai-coding.project.yaml",
    ".ai-coding/project.yaml",
)

_CONFIG_SCHEMA_PREFIX = "ai-coding/project@"


def find_config_file(project_root: Path) -> Path | None:
    """Return the highest-priority config file present, or None."""
    for name in CONFIG_FILE_PRIORITY:
        candidate = project_root / name
        if candidate.is_file():
            return candidate
    return None


def parse_config_file(path: Path) -> dict[str, Any]:
    """Read a config file and return its raw mapping.

    Raises:
        ConfigError: On read failure, YAML syntax error, or a non-mapping
            document root.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        location = f"{path}:{mark.line + 1}:{mark.column + 1}" if mark else str(path)
        raise ConfigError(f"Config file YAML syntax error at {location}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file {path} must contain a mapping, got {type(data).__name__}"
        )
    return data


def check_config_schema(data: dict[str, Any]) -> list[str]:
    """Warn when the config's own ``_schema`` tag is missing or wrong."""
    tag = data.get("_schema")
    if not tag:
        return ["Config file has no _schema field; add _schema: 'ai-coding/project@1.0'"]
    if not str(tag).startswith(_CONFIG_SCHEMA_PREFIX):
        return [f"Config file _schema is '{tag}', expected 'ai-coding/project@1.0'"]
    return []


def build_registry(config: ProjectConfig) -> SchemaRegistry:
    """Create the effective registry: built-ins, then custom schemas, then overrides."""
    registry = default_registry(config.custom_schemas)
    for schema_id, changes in config.schema_overrides.items():
        if not registry.override(schema_id, changes):
            logger.warning("Schema override for unknown schema ignored: %s", schema_id)
    return registry


def lint_project_config(
    config: ProjectConfig,
    raw_priority: list[Any] | None = None,
    registry: SchemaRegistry | None = None,
) -> list[str]:
    """Check an effective config for likely mistakes.

    Args:
        config: The merged configuration.
        raw_priority: The priority chain as written by the user, used to
            report stage names that were dropped on load.
        registry: Registry whose file types are considered known. Built
            from ``config`` when omitted.

    Returns:
        Warning messages, empty when nothing looks wrong.
    """
    warnings: list[str] = []
    registry = registry if registry is not None else build_registry(config)
    known_types = set(registry.file_types())

    for file_type in config.feature_spec.file_types:
        if file_type not in known_types:
            warnings.append(
                f"feature_spec.file_types has unknown key '{file_type}', possibly a typo"
            )

    for pattern in config.scanner.ignore:
        if pattern.strip() in ("*", "**", "**/*"):
            warnings.append(
                f"scanner.ignore pattern '{pattern}' is too broad and may ignore every file"
            )

    if raw_priority is not None:
        for name in raw_priority:
            if str(name).strip().lower() not in RESOLUTION_STAGES:
                warnings.append(
                    f"multi_instance_resolution.priority has unknown stage '{name}'"
                )
    if not config.resolution.priority:
        warnings.append(
            "multi_instance_resolution.priority is empty; "
            "ties fall back to alphabetical order"
        )

    return warnings


def load_project_config(project_root: Path) -> LoadResult:
    """Load the project config, falling back to defaults when absent.

    Args:
        project_root: Directory to search for a config file.

    Returns:
        A ``LoadResult`` with the effective config, its source and any
        warnings.

    Raises:
        ConfigError: If a config file exists but is unusable.
        SchemaDefinitionError: If a custom schema in the config is malformed.
    """
    project_root = Path(project_root)
    config_path = find_config_file(project_root)

    if config_path is None:
        message = "No config file found, using defaults; consider adding project.yaml"
        logger.info("%s (root: %s)", message, project_root)
        return LoadResult(
            config=default_project_config(project_root.name or None),
            source=None,
            warnings=[message],
        )

    user_data = parse_config_file(config_path)
    warnings = check_config_schema(user_data)
    merged = merge_with_defaults(user_data)
    try:
        config = ProjectConfig.from_dict(merged)
    except ConfigError as exc:
        raise ConfigError(f"{config_path}: {exc}") from exc
    user_project = user_data.get("project")
    if not (isinstance(user_project, dict) and user_project.get("name")):
        config.project.name = project_root.name or config.project.name

    raw_resolution = merged.get("multi_instance_resolution") or {}
    warnings.extend(lint_project_config(config, raw_priority=raw_resolution.get("priority")))

    for message in warnings:
        logger.warning("%s: %s", config_path, message)
    return LoadResult(config=config, source=config_path, warnings=warnings)


async def load_project_config_async(project_root: Path) -> LoadResult:
    """Async variant of ``load_project_config``."""
    return await asyncio.to_thread(load_project_config, project_root)
