"""Project tree scanner: find, parse, classify, group and resolve artifacts.

Walks a project tree, parses every YAML document and Markdown file, and
classifies each one by its ``_schema`` tag or, failing that, by legacy
filename convention. Feature-scoped files are grouped per feature and per
file type, and each group is handed to the ``MultiInstanceResolver``.

Scan Algorithm:
    1. Collect ``.yaml``/``.yml``/``.md`` files below the root, honouring
       ignore/include globs, the depth limit and the symlink policy.
    2. Parse each file with the parser matching its extension. Files that
       fail to parse are logged and skipped.
    3. Tagged files: validate the tag format, look it up in the registry.
       Invalid or unregistered tags become unknown-schema items.
       Untagged files: try the legacy rules; no match means the file is
       silently dropped.
    4. Group feature-scoped files by feature, then by file type, resolve
       every group and compute the feature's base directory.
    5. Resolve project-scoped files per file type.

Ignore Matching:
    Patterns use gitignore (``gitwildmatch``) semantics via ``pathspec`` and
    are matched against POSIX paths relative to the root: ``*`` stays within
    one path segment, ``**`` spans any number of segments (including none).
    Directories are tested with a trailing ``/`` so that a pattern such as
    ``**/node_modules/**`` prunes the whole subtree.
    ``include`` patterns override ``ignore``; when any are configured,
    ignored directories are still walked and only their files are filtered.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Iterable, Sequence

import pathspec

from schemascout.config.defaults import default_project_config
from schemascout.config.loader import build_registry, load_project_config
from schemascout.config.models import ProjectConfig
from schemascout.discovery.legacy import (
    LegacyDetector,
    carrier_for_path,
    infer_feature_id_from_path,
)
from schemascout.discovery.models import (
    DiscoveredFile,
    FeatureScanResult,
    FileMeta,
    ScanResult,
    ScanStats,
    UnknownSchemaItem,
)
from schemascout.discovery.resolver import MultiInstanceResolver
from schemascout.discovery.unknown import classify_unknown_schema
from schemascout.exceptions import ConfigError, ProjectRootError
from schemascout.parsers.base import ParseResult, extract_feature_id, is_markdown_file, is_yaml_file
from schemascout.parsers.frontmatter import parse_frontmatter_file, parse_frontmatter_file_async
from schemascout.parsers.yaml_parser import parse_yaml_file, parse_yaml_file_async
from schemascout.schema.models import SchemaScope, is_valid_schema_id
from schemascout.schema.registry import SchemaRegistry

logger = logging.getLogger(__name__)


def compile_patterns(patterns: Iterable[str], where: str) -> pathspec.PathSpec:
    """Compile gitignore-style patterns into a ``PathSpec``.

    Raises:
        ConfigError: If a pattern cannot be compiled.
    """
    try:
        return pathspec.PathSpec.from_lines("gitwildmatch", patterns)
    except ValueError as exc:
        raise ConfigError(f"Invalid {where} pattern: {exc}") from exc


@dataclass
class Classification:
    """One file's classification outcome inside a scan."""

    file: DiscoveredFile | None = None
    unknown: UnknownSchemaItem | None = None


class ProjectScanner:
    """Discovers schema-tagged and legacy artifacts in a project tree.

    Usage::

        scanner = ProjectScanner.for_project(Path("."))
        result = scanner.scan_sync(Path("."))
        for feature_id, feature in result.features.items():
            print(feature_id, sorted(feature.primary_files))

    Args:
        config: Effective project config. Defaults to the built-in config.
        registry: Schema registry. Built from ``config`` when omitted.
        resolver: Multi-instance resolver. Built from ``config`` when omitted.
        legacy_detector: Legacy classifier. Built from ``config`` when omitted.
        warnings: Notes to carry into every ``ScanResult`` (e.g. from
            config loading).
    """

    def __init__(
        self,
        config: ProjectConfig | None = None,
        registry: SchemaRegistry | None = None,
        resolver: MultiInstanceResolver | None = None,
        legacy_detector: LegacyDetector | None = None,
        warnings: Sequence[str] = (),
    ) -> None:
        self.config = config if config is not None else default_project_config()
        self.registry = registry if registry is not None else build_registry(self.config)
        self.resolver = (
            resolver if resolver is not None else MultiInstanceResolver(self.config.resolution)
        )
        self.legacy_detector = (
            legacy_detector
            if legacy_detector is not None
            else LegacyDetector(feature_dirs=self.config.scanner.feature_dirs)
        )
        self.warnings = list(warnings)
        self._ignore_spec = compile_patterns(self.config.scanner.ignore, "scanner.ignore")
        self._include_spec = compile_patterns(self.config.scanner.include, "scanner.include")

    @classmethod
    def for_project(cls, root: Path) -> ProjectScanner:
        """Build a scanner from the config file found at ``root``.

        Raises:
            ConfigError: If a config file exists but is unusable.
        """
        loaded = load_project_config(Path(root))
        return cls(config=loaded.config, warnings=loaded.warnings)

    # -- file collection -------------------------------------------------------

    def is_ignored(self, rel_path: str, is_dir: bool = False) -> bool:
        """True if a relative path is excluded by the scanner globs."""
        candidate = f"{rel_path}/" if is_dir else rel_path
        if self._include_spec.match_file(candidate):
            return False
        return self._ignore_spec.match_file(candidate)

    def collect_files(self, root: Path) -> list[str]:
        """List candidate files below ``root`` as sorted relative POSIX paths.

        Raises:
            ProjectRootError: If ``root`` is missing, not a directory or
                unreadable.
        """
        root = self._check_root(root)
        try:
            entries = sorted(os.scandir(root), key=lambda e: e.name)
        except OSError as exc:
            raise ProjectRootError(f"Cannot read project root {root}: {exc}") from exc

        files: list[str] = []
        visited = {os.path.realpath(root)}
        self._walk_entries(entries, "", 0, files, visited)
        return sorted(files)

    def _check_root(self, root: Path) -> Path:
        root = Path(root).expanduser().resolve()
        if not root.exists():
            raise ProjectRootError(f"Project root does not exist: {root}")
        if not root.is_dir():
            raise ProjectRootError(f"Project root is not a directory: {root}")
        return root

    def _walk(
        self, directory: str, rel_dir: str, depth: int, files: list[str], visited: set[str],
    ) -> None:
        if depth > self.config.scanner.max_depth:
            return
        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)
        except OSError as exc:
            logger.warning("Skipping unreadable directory %s: %s", rel_dir, exc)
            return
        self._walk_entries(entries, rel_dir, depth, files, visited)

    def _walk_entries(
        self,
        entries: list[os.DirEntry[str]],
        rel_dir: str,
        depth: int,
        files: list[str],
        visited: set[str],
    ) -> None:
        follow = self.config.scanner.follow_symlinks
        for entry in entries:
            rel_path = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
            try:
                if entry.is_symlink() and not follow:
                    continue
                if entry.is_dir(follow_symlinks=follow):
                    # Ignored directories are still walked when include patterns exist.
                    if not self.config.scanner.include and self._ignore_spec.match_file(
                        f"{rel_path}/"
                    ):
                        continue
                    real = os.path.realpath(entry.path)
                    if real in visited:
                        logger.debug("Skipping already visited directory %s", rel_path)
                        continue
                    visited.add(real)
                    self._walk(entry.path, rel_path, depth + 1, files, visited)
                elif entry.is_file(follow_symlinks=follow):
                    if not (is_yaml_file(entry.name) or is_markdown_file(entry.name)):
                        continue
                    if self.is_ignored(rel_path):
                        continue
                    files.append(rel_path)
            except OSError as exc:
                logger.warning("Skipping %s: %s", rel_path, exc)

    # -- scanning --------------------------------------------------------------

    def scan_sync(self, root: Path) -> ScanResult:
        """Scan a project tree synchronously.

        Raises:
            ProjectRootError: If the root cannot be read.
        """
        started = time.perf_counter()
        root = self._check_root(root)
        paths = self.collect_files(root)
        parsed = [(rel, self._parse(root / rel, rel)) for rel in paths]
        return self._build_result(root, paths, parsed, started)

    async def scan(self, root: Path) -> ScanResult:
        """Scan a project tree without blocking the event loop.

        Directory walking and file reads run in worker threads; the result is
        identical to ``scan_sync`` for the same tree.
        """
        started = time.perf_counter()
        root = await asyncio.to_thread(self._check_root, root)
        paths = await asyncio.to_thread(self.collect_files, root)
        results = await asyncio.gather(*(self._parse_async(root / rel, rel) for rel in paths))
        return self._build_result(root, paths, list(zip(paths, results)), started)

    def _parse(self, path: Path, rel: str) -> ParseResult:
        if is_markdown_file(rel):
            return parse_frontmatter_file(path)
        return parse_yaml_file(path)

    async def _parse_async(self, path: Path, rel: str) -> ParseResult:
        if is_markdown_file(rel):
            return await parse_frontmatter_file_async(path)
        return await parse_yaml_file_async(path)

    def _build_result(
        self,
        root: Path,
        paths: list[str],
        parsed: list[tuple[str, ParseResult]],
        started: float,
    ) -> ScanResult:
        discovered: list[DiscoveredFile] = []
        unknown: list[UnknownSchemaItem] = []

        for rel, result in parsed:
            if not result.success:
                logger.warning("Skipping %s: %s", rel, result.error)
                continue
            classified = self.classify(root, rel, result)
            if classified.file is not None:
                discovered.append(classified.file)
            elif classified.unknown is not None:
                unknown.append(classified.unknown)

        feature_files: list[DiscoveredFile] = []
        project_files: list[DiscoveredFile] = []
        for file in discovered:
            if self._scope_of(file) is SchemaScope.PROJECT:
                project_files.append(file)
            else:
                feature_files.append(file)

        result = ScanResult(
            root=root,
            features=self.group_features(feature_files),
            unknown_schemas=unknown,
            warnings=list(self.warnings),
        )
        for file_type, files in self._group_by_type(project_files).items():
            resolution = self.resolver.resolve(files, file_type)
            if resolution.primary is not None:
                result.project_files[file_type] = resolution.primary
            if resolution.conflict_ui is not None:
                result.project_conflicts.append(resolution.conflict_ui)

        result.stats = ScanStats(
            total_files=len(paths),
            schema_files=len(discovered),
            scan_time_ms=(time.perf_counter() - started) * 1000,
        )
        logger.info(
            "Scanned %s: %d files, %d schema files, %d features, %d unknown schemas",
            root,
            result.stats.total_files,
            result.stats.schema_files,
            len(result.features),
            len(unknown),
        )
        return result

    # -- classification --------------------------------------------------------

    def classify(self, root: Path, rel: str, parsed: ParseResult) -> Classification:
        """Turn one successfully parsed file into a discovery record.

        Returns an empty outcome for untagged files that no legacy rule
        claims, and for files whose metadata cannot be read.
        """
        try:
            stat = (root / rel).stat()
        except OSError as exc:
            logger.warning("Cannot stat %s: %s", rel, exc)
            return Classification()
        last_modified = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)

        if parsed.schema is None:
            legacy = self.legacy_detector.detect(rel, parsed.content, last_modified, stat.st_size)
            if legacy is not None:
                logger.debug("Legacy match %s -> %s", rel, legacy.schema)
            return Classification(file=legacy)

        definition = self.registry.get(parsed.schema) if is_valid_schema_id(parsed.schema) else None
        if definition is None:
            file = DiscoveredFile(
                path=rel,
                schema=parsed.schema,
                carrier=carrier_for_path(rel),
                content=parsed.content,
                last_modified=last_modified,
                size=stat.st_size,
                meta=FileMeta.from_content(parsed.content),
            )
            hint = classify_unknown_schema(parsed.schema)
            logger.debug("Unknown schema in %s: %s", rel, hint.message)
            return Classification(unknown=UnknownSchemaItem(file=file, hint=hint))

        carrier = carrier_for_path(rel)
        if carrier not in definition.carriers:
            logger.debug("%s uses carrier %s not declared by %s", rel, carrier.value, definition.id)

        feature = extract_feature_id(
            parsed.content, definition.identifier_field, definition.legacy_fields
        )
        if feature is None:
            feature = infer_feature_id_from_path(rel, self.config.scanner.feature_dirs)

        return Classification(
            file=DiscoveredFile(
                path=rel,
                schema=parsed.schema,
                carrier=carrier,
                content=parsed.content,
                last_modified=last_modified,
                size=stat.st_size,
                meta=FileMeta.from_content(parsed.content, feature=feature),
            )
        )

    def _scope_of(self, file: DiscoveredFile) -> SchemaScope:
        definition = self.registry.get(file.schema)
        return definition.scope if definition is not None else SchemaScope.FEATURE

    # -- grouping --------------------------------------------------------------

    @staticmethod
    def _group_by_type(files: Iterable[DiscoveredFile]) -> dict[str, list[DiscoveredFile]]:
        groups: dict[str, list[DiscoveredFile]] = defaultdict(list)
        for file in files:
            groups[file.file_type].append(file)
        return {file_type: groups[file_type] for file_type in sorted(groups)}

    def group_features(self, files: Iterable[DiscoveredFile]) -> dict[str, FeatureScanResult]:
        """Group feature-scoped files and resolve every (feature, file type) pair.

        Files without a feature identifier are left out of every feature.
        """
        by_feature: dict[str, list[DiscoveredFile]] = defaultdict(list)
        for file in files:
            if file.feature_id is None:
                logger.debug("No feature identifier for %s, not grouped", file.path)
                continue
            by_feature[file.feature_id].append(file)

        features: dict[str, FeatureScanResult] = {}
        for feature_id in sorted(by_feature):
            feature = FeatureScanResult(
                feature_id=feature_id,
                base_dir=common_base_dir(f.path for f in by_feature[feature_id]),
            )
            for file_type, group in self._group_by_type(by_feature[feature_id]).items():
                resolution = self.resolver.resolve(group, file_type, feature_id)
                feature.resolutions[file_type] = resolution
                feature.all_files[file_type] = resolution.all_instances
                if resolution.primary is not None:
                    feature.primary_files[file_type] = resolution.primary
                if resolution.conflict_ui is not None:
                    feature.conflicts.append(resolution.conflict_ui)
            features[feature_id] = feature
        return features


def common_base_dir(paths: Iterable[str]) -> str | None:
    """Deepest directory containing every path, or None if they share none."""
    prefix: tuple[str, ...] | None = None
    for path in paths:
        parts = PurePosixPath(path).parts[:-1]
        if prefix is None:
            prefix = parts
            continue
        common = 0
        for left, right in zip(prefix, parts):
            if left != right:
                break
            common += 1
        prefix = prefix[:common]
    if not prefix:
        return None
    return "/".join(prefix)
