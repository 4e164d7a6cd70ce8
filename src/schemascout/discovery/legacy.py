"""Fallback classifier for files that predate the ``_schema`` convention.

Older projects name their artifacts by convention (``90_PROGRESS_LOG.yaml``,
``10_CONTEXT.md``, ...) without declaring a schema. The ``LegacyDetector``
maps such filenames to schemas through an ordered rule table.

Rule Matching
-------------
Rules are tried in declaration order against the base filename and the
first match wins. Filename patterns are kept mutually exclusive by
convention, so order only matters for custom rule tables.

Feature Identification
----------------------
1. Content fields from the rule (``identifier_field``, then each legacy
   field).
2. The path segment right after a feature container directory
   (``docs/<feature>/...`` or ``features/<feature>/...``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import PurePosixPath
from typing import Any, Iterable, Sequence

from schemascout.discovery.models import DiscoveredFile, FileMeta
from schemascout.parsers.base import extract_feature_id, is_markdown_file
from schemascout.schema.models import Carrier

DEFAULT_FEATURE_DIRS: tuple[str, ...] = ("docs", "features")


@dataclass(frozen=True)
class LegacyDetectionRule:
    """Binds a filename pattern to a schema.

    Attributes:
        pattern: Regex searched against the base filename.
        schema: Versioned schema identifier assigned on match.
        file_type: Logical file type the schema represents.
        identifier_field: Dotted path to the feature id in the content.
        legacy_fields: Top-level fallback fields for the feature id.
    """

    pattern: re.Pattern[str]
    schema: str
    file_type: str
    identifier_field: str = "meta.feature"
    legacy_fields: tuple[str, ...] = ("feature",)

    def matches(self, filename: str) -> bool:
        return self.pattern.search(filename) is not None


LEGACY_DETECTION_RULES: tuple[LegacyDetectionRule, ...] = (
    LegacyDetectionRule(
        pattern=re.compile(r"90_PROGRESS_LOG\.ya?ml$", re.IGNORECASE),
        schema="ai-coding/progress-log@1.0",
        file_type="progress-log",
        legacy_fields=("feature", "feature_id"),
    ),
    LegacyDetectionRule(
        pattern=re.compile(r"10_CONTEXT\.md$", re.IGNORECASE),
        schema="ai-coding/context@1.0",
        file_type="context",
    ),
    LegacyDetectionRule(
        pattern=re.compile(r"40_DESIGN(?:_FINAL)?\.md$", re.IGNORECASE),
        schema="ai-coding/design@1.0",
        file_type="design",
    ),
    LegacyDetectionRule(
        pattern=re.compile(r"60_TEST_PLAN\.(?:md|ya?ml)$", re.IGNORECASE),
        schema="ai-coding/test-plan@1.0",
        file_type="test-plan",
    ),
    LegacyDetectionRule(
        pattern=re.compile(r"PHASE_GATE_STATUS\.ya?ml$", re.IGNORECASE),
        schema="ai-coding/phase-gate-status@1.0",
        file_type="phase-gate-status",
    ),
)


def infer_feature_id_from_path(
    path: str,
    feature_dirs: Iterable[str] = DEFAULT_FEATURE_DIRS,
) -> str | None:
    """Infer a feature id from a ``<container>/<feature>/...`` path.

    Containers are tried in order; for each, the first occurrence that is
    followed by another directory segment wins. The filename itself never
    counts as a feature directory.

    Example:
        ``docs/checkout/_old/90_PROGRESS_LOG.yaml`` -> ``checkout``
    """
    directories = PurePosixPath(path).parts[:-1]
    for container in feature_dirs:
        for index, part in enumerate(directories[:-1]):
            if part == container:
                return directories[index + 1]
    return None


def carrier_for_path(path: str) -> Carrier:
    """Carrier implied by a file extension."""
    return Carrier.MARKDOWN if is_markdown_file(path) else Carrier.YAML


class LegacyDetector:
    """Classifies untagged files by filename convention.

    Args:
        rules: Ordered rule table. Defaults to ``LEGACY_DETECTION_RULES``.
        feature_dirs: Container directory names used for path-based
            feature inference.
    """

    def __init__(
        self,
        rules: Sequence[LegacyDetectionRule] | None = None,
        feature_dirs: Iterable[str] = DEFAULT_FEATURE_DIRS,
    ) -> None:
        self.rules: tuple[LegacyDetectionRule, ...] = tuple(
            rules if rules is not None else LEGACY_DETECTION_RULES
        )
        self.feature_dirs: tuple[str, ...] = tuple(feature_dirs)

    def get_matching_rule(self, path: str) -> LegacyDetectionRule | None:
        """Return the first rule whose pattern matches the base filename."""
        filename = PurePosixPath(path).name
        for rule in self.rules:
            if rule.matches(filename):
                return rule
        return None

    def matches_any_rule(self, path: str) -> bool:
        return self.get_matching_rule(path) is not None

    def detect(
        self,
        path: str,
        content: Any,
        last_modified: datetime,
        size: int,
    ) -> DiscoveredFile | None:
        """Classify a file by its name.

        Args:
            path: Relative POSIX path of the file.
            content: Parsed YAML document or Markdown header (may be None).
            last_modified: File modification time.
            size: File size in bytes.

        Returns:
            A legacy-flagged ``DiscoveredFile``, or None when no rule matches.
        """
        rule = self.get_matching_rule(path)
        if rule is None:
            return None

        feature = extract_feature_id(content, rule.identifier_field, rule.legacy_fields)
        if feature is None:
            feature = infer_feature_id_from_path(path, self.feature_dirs)

        return DiscoveredFile(
            path=path,
            schema=rule.schema,
            carrier=carrier_for_path(path),
            content=content,
            last_modified=last_modified,
            size=size,
            legacy=True,
            meta=FileMeta.from_content(content, feature=feature),
        )
