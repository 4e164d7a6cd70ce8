"""Property-based tests for the schema identifier grammar.

Verifies:
- Generated well-formed identifiers are accepted and split losslessly
- Any uppercase letter makes an identifier invalid
- Every invalid identifier gets a non-empty format suggestion
"""
from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from schemascout.discovery.unknown import format_suggestion
from schemascout.schema.models import is_valid_schema_id, split_schema_id

segment = st.from_regex(r"[a-z][a-z0-9-]{0,12}", fullmatch=True)
version = st.builds(
    lambda major, minor: f"{major}.{minor}",
    st.integers(min_value=0, max_value=99),
    st.integers(min_value=0, max_value=99),
)


@st.composite
def schema_ids(draw: st.DrawFn) -> tuple[str, str, str | None]:
    """Generate ``(full_id, base_id, version)`` triples."""
    base = f"{draw(segment)}/{draw(segment)}"
    ver = draw(st.none() | version)
    full = base if ver is None else f"{base}@{ver}"
    return full, base, ver


class TestGrammar:
    @given(triple=schema_ids())
    @settings(max_examples=300)
    def test_valid_ids_accepted(self, triple: tuple[str, str, str | None]) -> None:
        full, base, ver = triple
        assert is_valid_schema_id(full)
        assert split_schema_id(full) == (base, ver)

    @given(triple=schema_ids(), data=st.data())
    @settings(max_examples=200)
    def test_uppercase_rejected(
        self, triple: tuple[str, str, str | None], data: st.DataObject,
    ) -> None:
        full, base, _ = triple
        index = data.draw(st.integers(min_value=0, max_value=len(base) - 1))
        if not base[index].isalpha():
            return
        mutated = full[:index] + full[index].upper() + full[index + 1:]
        assert not is_valid_schema_id(mutated)
        assert "uppercase" in format_suggestion(mutated)

    @given(text=st.text(max_size=30))
    @settings(max_examples=300)
    def test_invalid_ids_get_suggestion(self, text: str) -> None:
        if is_valid_schema_id(text):
            return
        assert format_suggestion(text)
