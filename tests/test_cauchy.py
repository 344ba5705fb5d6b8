import random

import pytest

from coopcoev.cauchy import cauchy


class _Sequence:
    def __init__(self, values):
        self._values = iter(values)

    def random(self):
        return next(self._values)


def test_values_are_within_cutoff():
    rng = random.Random(1)
    samples = [cauchy(0.3, rng) for _ in range(2000)]
    assert all(abs(s) <= 10.0 for s in samples)


def test_seeded_draws_are_reproducible():
    a = [cauchy(0.3, random.Random(42)) for _ in range(5)]
    b = [cauchy(0.3, random.Random(42)) for _ in range(5)]
    assert a == b


def test_half_is_redrawn():
    # 0.5 would hit tan(pi/2); 0.25 gives tan(pi/4) == 1
    assert cauchy(0.3, _Sequence([0.5, 0.25])) == pytest.approx(0.3)


def test_out_of_range_values_are_rejected():
    # u close to 0.5 gives a huge tangent and must be rejected
    assert cauchy(1.0, _Sequence([0.4999, 0.25])) == pytest.approx(1.0)


def test_centred_on_zero():
    rng = random.Random(7)
    samples = sorted(cauchy(0.3, rng) for _ in range(4001))
    assert abs(samples[2000]) < 0.05