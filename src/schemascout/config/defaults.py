"""Built-in configuration defaults and the merge rules for user config.

User config is merged over ``DEFAULT_CONFIG_DATA`` with ``deep_merge``:
mappings merge recursively, lists and scalars replace. Keys are normalized
to snake_case first, so ``maxDepth`` and ``max_depth`` are equivalent.
"""

from __future__ import annotations

import copy
import re
from typing import Any

from schemascout.config.models import RESOLUTION_STAGES, ProjectConfig

DEFAULT_IGNORE_PATTERNS: list[str] = [
    # dependencies
    "**/node_modules/**",
    "**/vendor/**",
    "**/.venv/**",
    "**/venv/**",
    # version control
    "**/.git/**",
    "**/.svn/**",
    # build output
    "**/dist/**",
    "**/build/**",
    "**/out/**",
    "**/.next/**",
    "**/.nuxt/**",
    # editors
    "**/.idea/**",
    "**/.vscode/**",
    # caches
    "**/.cache/**",
    "**/coverage/**",
    "**/__pycache__/**",
    # scratch files
    "**/*.log",
    "**/*.tmp",
]

DEFAULT_FEATURE_SPEC_DATA: dict[str, Any] = {
    "file_types": {
        "progress-log": {"required": True, "max_instances": 1},
        "context": {"required": True, "max_instances": 1},
        "design": {"required": False, "required_from_phase": 4, "max_instances": 1},
        "test-plan": {"required": False, "required_from_phase": 6, "max_instances": 1},
        "phase-gate-status": {"required": False, "max_instances": 1},
    }
}

DEFAULT_CONFIG_DATA: dict[str, Any] = {
    "_schema": "ai-coding/project@1.0",
    "project": {"name": "unnamed-project"},
    "scanner": {
        "ignore": DEFAULT_IGNORE_PATTERNS,
        "include": [],
        "max_depth": 10,
        "follow_symlinks": False,
        "feature_dirs": ["docs", "features"],
    },
    "schema_extensions": {"custom": [], "overrides": {}},
    "feature_spec": DEFAULT_FEATURE_SPEC_DATA,
    "multi_instance_resolution": {
        "priority": list(RESOLUTION_STAGES),
        "archived_statuses": ["archived", "backup", "deprecated", "obsolete"],
    },
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def to_snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"_\1", key).lower()


def normalize_keys(value: Any) -> Any:
    """Recursively convert camelCase mapping keys to snake_case.

    Keys without uppercase letters (file types such as ``progress-log``,
    schema identifiers) are left untouched.
    """
    if isinstance(value, dict):
        return {
            (to_snake_case(k) if isinstance(k, str) else k): normalize_keys(v)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [normalize_keys(v) for v in value]
    return value


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``.

    Nested mappings merge recursively; any other value in ``override``
    (including lists) replaces the base value. ``None`` values are skipped.
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if value is None:
            continue
        current = result.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            result[key] = deep_merge(current, value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def merge_with_defaults(user_data: dict[str, Any]) -> dict[str, Any]:
    """Merge raw user config data over the defaults (keys normalized)."""
    return deep_merge(DEFAULT_CONFIG_DATA, normalize_keys(user_data))


def default_project_config(project_name: str | None = None) -> ProjectConfig:
    """Build the built-in configuration, optionally naming the project."""
    data = copy.deepcopy(DEFAULT_CONFIG_DATA)
    if project_name:
        data["project"]["name"] = project_name
    return ProjectConfig.from_dict(data)
