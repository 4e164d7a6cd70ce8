"""Property-based tests for scanner ignore/include matching.

Verifies:
- Anything below a ``node_modules`` directory is ignored, at any depth
- Ordinary documentation paths are never ignored by the defaults
- An ``include`` pattern always overrides ``ignore``
- ``*`` stays within one segment; ``**`` spans zero or more segments
"""
from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from schemascout.config.defaults import default_project_config
from schemascout.discovery.scanner import ProjectScanner, compile_patterns

segments = st.sampled_from(["docs", "alpha", "beta", "src", "notes", "feature-x"])
leaf_names = st.sampled_from(["progress.yaml", "context.md", "design.yml", "README.md"])
prefixes = st.lists(segments, min_size=0, max_size=4)


def _path(*parts: str) -> str:
    return "/".join(p for p in parts if p)


class TestDefaultIgnores:
    """Behaviour of the built-in ignore list."""

    @given(prefix=prefixes, inner=prefixes, leaf=leaf_names)
    @settings(max_examples=200)
    def test_node_modules_always_ignored(
        self, prefix: list[str], inner: list[str], leaf: str,
    ) -> None:
        scanner = ProjectScanner()
        rel = _path(*prefix, "node_modules", *inner, leaf)
        assert scanner.is_ignored(rel)

    @given(prefix=prefixes)
    def test_node_modules_dir_pruned(self, prefix: list[str]) -> None:
        assert ProjectScanner().is_ignored(_path(*prefix, "node_modules"), is_dir=True)

    @given(prefix=prefixes, leaf=leaf_names)
    @settings(max_examples=200)
    def test_plain_paths_kept(self, prefix: list[str], leaf: str) -> None:
        scanner = ProjectScanner()
        assert not scanner.is_ignored(_path(*prefix, leaf))


class TestIncludeOverride:
    @given(prefix=prefixes, leaf=leaf_names)
    @settings(max_examples=100)
    def test_include_beats_ignore(self, prefix: list[str], leaf: str) -> None:
        config = default_project_config()
        config.scanner.include = ["**/node_modules/keep/**"]
        scanner = ProjectScanner(config)
        rel = _path(*prefix, "node_modules", "keep", leaf)
        assert not scanner.is_ignored(rel)
        assert scanner.is_ignored(_path(*prefix, "node_modules", "drop", leaf))


class TestPatternSemantics:
    @given(prefix=prefixes, leaf=leaf_names)
    def test_double_star_prefix_matches_any_depth(self, prefix: list[str], leaf: str) -> None:
        spec = compile_patterns([f"**/{leaf}"], "scanner.ignore")
        assert spec.match_file(_path(*prefix, leaf))

    @given(inner=prefixes, leaf=leaf_names)
    def test_inner_double_star_spans_zero_or_more(self, inner: list[str], leaf: str) -> None:
        spec = compile_patterns([f"docs/**/{leaf}"], "scanner.ignore")
        assert spec.match_file(_path("docs", *inner, leaf))

    @given(inner=st.lists(segments, min_size=1, max_size=3), leaf=leaf_names)
    def test_single_star_never_crosses_slash(self, inner: list[str], leaf: str) -> None:
        spec = compile_patterns([f"docs/*{leaf[-5:]}"], "scanner.ignore")
        assert spec.match_file(_path("docs", leaf))
        assert not spec.match_file(_path("docs", *inner, leaf))
