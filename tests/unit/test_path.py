"""Unit tests for JSON path rendering and immutability."""

from __future__ import annotations

import pytest

from strict_json import JsonPath

try:
    from hypothesis import given, settings
    from hypothesis import strategies as st

    HYPOTHESIS_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - fallback path
    HYPOTHESIS_AVAILABLE = False


def test_root_renders_placeholder() -> None:
    root = JsonPath.root()

    assert str(root) == "<json_root>"
    assert root.is_root
    assert root.depth == 0


def test_mixed_steps_render_as_dotted_and_bracketed_trail() -> None:
    path = JsonPath.root().with_property("a").with_property("b").with_array_index(1)

    assert str(path) == "$.a.b[1]"
    assert path.steps == ("a", "b", 1)
    assert not path.is_root


def test_array_index_at_root() -> None:
    assert str(JsonPath.root().with_array_index(0)) == "$[0]"


def test_derivation_never_mutates_the_parent() -> None:
    parent = JsonPath.root().with_property("items")
    first = parent.with_array_index(0)
    second = parent.with_array_index(1)

    assert str(parent) == "$.items"
    assert str(first) == "$.items[0]"
    assert str(second) == "$.items[1]"


def test_paths_compare_by_steps() -> None:
    assert JsonPath.root().with_property("a") == JsonPath.root().with_property("a")
    assert JsonPath.root().with_property("a") != JsonPath.root().with_array_index(0)
    assert len({JsonPath.root(), JsonPath.root()}) == 1


def test_invalid_steps_are_rejected() -> None:
    with pytest.raises(TypeError, match="array index must be an int"):
        JsonPath.root().with_array_index(True)
    with pytest.raises(TypeError, match="property name must be a string"):
        JsonPath.root().with_property(3)  # type: ignore[arg-type]


if HYPOTHESIS_AVAILABLE:

    @given(
        steps=st.lists(
            st.one_of(
                st.integers(min_value=0, max_value=10_000),
                st.text(alphabet="abcdefghij_", min_size=1, max_size=8),
            ),
            max_size=12,
        )
    )
    @settings(max_examples=60, deadline=None)
    def test_rendering_matches_step_sequence(steps: list[int | str]) -> None:
        path = JsonPath.root()
        for step in steps:
            path = path.with_array_index(step) if isinstance(step, int) else path.with_property(step)

        expected = "$" + "".join(f"[{s}]" if isinstance(s, int) else f".{s}" for s in steps)
        assert path.depth == len(steps)
        assert str(path) == (expected if steps else "<json_root>")
