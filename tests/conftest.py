"""Shared fixtures for schemascout tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from schemascout.config.defaults import default_project_config
from schemascout.config.models import ProjectConfig
from schemascout.schema.registry import SchemaRegistry, default_registry


@pytest.fixture
def registry() -> SchemaRegistry:
    """A fresh registry holding only the built-in schemas."""
    return default_registry()


@pytest.fixture
def default_config() -> ProjectConfig:
    return default_project_config("test-project")


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """An empty project directory."""
    root = tmp_path / "project"
    root.mkdir()
    return root
