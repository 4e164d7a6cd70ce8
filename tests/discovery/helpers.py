"""Shared test helpers for building project trees and discovered files.

The tree helpers write real YAML and Markdown artifacts under a temporary
project root; ``make_file`` builds ``DiscoveredFile`` records directly for
resolver tests that need no filesystem.
"""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import yaml

from schemascout.discovery.models import DiscoveredFile, FileMeta
from schemascout.schema.models import Carrier

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


def write_yaml(root: Path, rel: str, data: Any) -> Path:
    """Write ``data`` as a YAML document at ``root/rel``."""
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


def write_markdown(root: Path, rel: str, header: dict[str, Any] | None, body: str = "# Doc\n") -> Path:
    """Write a Markdown file, with a YAML header when ``header`` is given."""
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    if header is None:
        text = body
    else:
        text = "---\n" + yaml.safe_dump(header, sort_keys=False) + "---\n" + body
    path.write_text(text, encoding="utf-8")
    return path


def write_text(root: Path, rel: str, text: str) -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def set_mtime(path: Path, offset_seconds: int) -> None:
    """Set a file's modification time relative to ``BASE_TIME``."""
    stamp = (BASE_TIME + timedelta(seconds=offset_seconds)).timestamp()
    os.utime(path, (stamp, stamp))


def progress_log(feature: str | None = None, **meta: Any) -> dict[str, Any]:
    """Build a tagged progress-log document."""
    meta_block: dict[str, Any] = dict(meta)
    if feature is not None:
        meta_block["feature"] = feature
    return {"_schema": "ai-coding/progress-log@1.0", "meta": meta_block, "tasks": []}


def make_file(
    path: str,
    schema: str = "ai-coding/progress-log@1.0",
    *,
    feature: str | None = "alpha",
    is_primary: bool | None = None,
    status: str | None = None,
    modified: int = 0,
    legacy: bool = False,
    content: Any = None,
) -> DiscoveredFile:
    """Build a ``DiscoveredFile`` without touching the filesystem.

    Args:
        modified: Seconds after ``BASE_TIME`` for ``last_modified``.
    """
    carrier = Carrier.MARKDOWN if path.endswith(".md") else Carrier.YAML
    return DiscoveredFile(
        path=path,
        schema=schema,
        carrier=carrier,
        content=content if content is not None else {},
        last_modified=BASE_TIME + timedelta(seconds=modified),
        size=10,
        legacy=legacy,
        meta=FileMeta(is_primary=is_primary, status=status, feature=feature),
    )
