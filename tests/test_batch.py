"""Tests for batch identifier expansion."""

import pytest
from hypothesis import given, strategies as st

from game_catalog.batch import expand


def test_expand_examples() -> None:
    assert expand(100, 3) == [100, 101, 102]
    assert expand(100, 1) == [100]


@pytest.mark.parametrize("count", [0, -1])
def test_expand_rejects_empty_batches(count: int) -> None:
    with pytest.raises(ValueError):
        expand(100, count)


@given(st.integers(min_value=1, max_value=10**9), st.integers(min_value=1, max_value=200))
def test_expand_is_contiguous_and_ascending(start: int, count: int) -> None:
    ids = expand(start, count)

    assert len(ids) == count
    assert ids[0] == start
    assert all(b - a == 1 for a, b in zip(ids, ids[1:]))
