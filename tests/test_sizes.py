import math

import numpy as np
import pytest

from mpfluor.schema import LogNormalSizes, RandomSource, ReplaySource


@pytest.mark.parametrize("n", [0, 1, 10, 1000])
def test_sample_length_and_bounds(n: int) -> None:
    sizes = LogNormalSizes().sample(n, RandomSource(seed=n))
    assert sizes.shape == (n,)
    assert np.all((sizes >= 5) & (sizes <= 5000))


def test_sample_empty() -> None:
    src = ReplaySource([0.5])
    assert LogNormalSizes().sample(0, src).size == 0
    assert src.consumed == 0


def test_box_muller_mapping() -> None:
    # sqrt(-2 ln u1) == 1 and cos(0) == 1, so z == 1
    src = ReplaySource([math.exp(-0.5), 0.0])
    (size,) = LogNormalSizes().sample(1, src)
    assert size == pytest.approx(500 * math.exp(0.6))
    assert src.consumed == 2


@pytest.mark.parametrize(("u2", "expected"), [(0.0, 5000), (0.5, 5)])
def test_clamped(u2: float, expected: float) -> None:
    sizes = LogNormalSizes().sample(3, ReplaySource([1e-300, u2]))
    np.testing.assert_array_equal(sizes, expected)


def test_zero_uniform_is_clamped() -> None:
    sizes = LogNormalSizes().sample(1, ReplaySource([0.0, 0.0]))
    assert sizes[0] == 5000


def test_distribution_median() -> None:
    sizes = LogNormalSizes().sample(20_000, RandomSource(seed=0))
    assert np.median(sizes) == pytest.approx(500, rel=0.05)


def test_invalid_bounds() -> None:
    with pytest.raises(ValueError):
        LogNormalSizes(min_um=100, max_um=10)
