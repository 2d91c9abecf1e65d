from __future__ import annotations

import pytest

from combine_models.distill.sampler import SeededSampler
from combine_models.errors import InvalidArgument


def test_same_seed_same_sequence() -> None:
    a = SeededSampler(1).draw(50, 100)
    b = SeededSampler(1).draw(50, 100)
    assert a == b


def test_different_seeds_differ() -> None:
    assert SeededSampler(1).draw(1000, 50) != SeededSampler(2).draw(1000, 50)


def test_values_within_bound() -> None:
    sampler = SeededSampler(3)
    values = sampler.draw(7, 500)
    assert all(0 <= v < 7 for v in values)
    assert set(values) == set(range(7))
    assert sampler.draws == 500


def test_bound_one_always_zero() -> None:
    assert SeededSampler(9).draw(1, 20) == [0] * 20


@pytest.mark.parametrize("bound", [0, -3, 2.5, True])
def test_invalid_bound(bound) -> None:
    with pytest.raises(InvalidArgument):
        SeededSampler(1).next(bound)


def test_negative_seed_is_reproducible() -> None:
    assert SeededSampler(-5).draw(100, 10) == SeededSampler(-5).draw(100, 10)


def test_draw_rejects_negative_count() -> None:
    with pytest.raises(InvalidArgument):
        SeededSampler(1).draw(10, -1)
