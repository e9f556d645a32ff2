import pytest

from modular_equations.elliptic import MontgomeryCurve, MontgomeryPoint, ecm_trial
from modular_equations.primality import seeded_rng

P = 1000003


@pytest.fixture
def curve_point():
    return MontgomeryCurve.suyama(11, P)


def test_ladder_is_consistent(curve_point):
    _, point = curve_point
    for k1, k2 in [(2, 3), (5, 7), (12, 31), (1009, 997)]:
        assert k1 * (k2 * point) == (k1 * k2) * point
        assert k2 * (k1 * point) == (k1 * k2) * point


def test_ladder_small_multiples(curve_point):
    curve, point = curve_point
    assert 1 * point == point
    x2, z2 = curve.double(point.x, point.z)
    assert 2 * point == MontgomeryPoint(curve, x2, z2)
    x3, z3 = curve.add(x2, z2, point.x, point.z, point.x, point.z)
    assert 3 * point == MontgomeryPoint(curve, x3, z3)


def test_zero_multiple_is_infinity(curve_point):
    _, point = curve_point
    assert (0 * point).z == 0


def test_ecm_splits_semiprime():
    n = 1000003 * (2**61 - 1)
    rng = seeded_rng(3, n)
    factor = None
    for _ in range(40):
        factor = ecm_trial(n, rng, 2000)
        if factor:
            break
    assert factor == 1000003


def test_ecm_stage_one_only():
    # b1 below 2 * STAGE2_D + 2 skips stage 2
    n = 10007 * (2**61 - 1)
    rng = seeded_rng(4, n)
    found = [ecm_trial(n, rng, 150) for _ in range(200)]
    assert 10007 in found
    assert set(found) <= {None, 10007}


def test_stage2_finds_large_prime():
    # stage 2 runs up to B2 = 100 * b1 = 25000
    n = 1000003 * (2**61 - 1)
    rng = seeded_rng(8, n)
    hits = sum(ecm_trial(n, rng, 250) == 1000003 for _ in range(30))
    assert hits > 0


def test_ecm_stops_when_asked():
    n = (2**61 - 1) * (2**89 - 1)
    assert ecm_trial(n, seeded_rng(1, n), 50000, stop=lambda: True) is None
