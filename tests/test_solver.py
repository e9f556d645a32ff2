import threading

import pytest

from modular_equations import (ArithmeticOverflow, FactorizationCancelled, InvalidModulus,
                               LinearEquation, QuadraticEquation, SolutionCountOverflow,
                               SolverConfig, count_solutions, solve, solve_linear, solve_quadratic)


@pytest.fixture
def config():
    return SolverConfig(workers=3, seed=11)


@pytest.mark.parametrize("coefficients, expected", [
    ((1, 0, -1, 0, 77), [1, 34, 43, 76]),
    ((1, 0, -4, 0, 77), [2, 9, 68, 75]),
    ((1, 0, -23, 0, 77), [10, 32, 45, 67]),
    ((1, 0, -24, 0, 60), [12, 18, 42, 48]),
    ((1, 3, 0, 298, 315), [29, 38, 94, 148, 164, 218, 274, 283]),
    ((7, 7, 7, 0, 49), [2, 4, 9, 11, 16, 18, 23, 25, 30, 32, 37, 39, 44, 46]),
    ((7, 7, 7, 0, 343), [18, 30, 67, 79, 116, 128, 165, 177, 214, 226, 263, 275, 312, 324]),
    ((2, 0, 0, 0, 9), [0, 3, 6]),
    ((3, 0, 6, 0, 27), [4, 5, 13, 14, 22, 23]),
    ((1, 1, 47, 0, 343), [99, 243]),
    ((1, 0, 0, 1, 8), [1, 3, 5, 7]),
    ((-1, 5, -11, 0, 115), [13, 38, 82, 107]),
    ((-127, 125, -127, 0, 125), [57, 68]),
    ((250, 253, 4, 0, 125), [82]),
    ((-1, 1, -1, 0, 4611686014132420609), [581405252161832858, 4030280761970587752]),
    ((1, 0, -1, 0, 79792266297612001), [1, 79792266297612000]),
    ((1, 0, 0, 9999999999999999, 9223372036854775783), [287990794123520843, 8935381242731254940]),
    ((1, 3, 4, 0, 2**60), [226765812977082276, 926155691629764697]),
])
def test_quadratic_vectors(coefficients, expected, config):
    assert solve_quadratic(*coefficients, config=config) == expected


def test_sixteen_solutions(config):
    eq = QuadraticEquation(1, 3124213, 1231121313123, 0, 9223372036854775803)
    got = solve(eq, config)
    assert len(got) == 16
    assert got[0] == 566238308012032964
    assert got[-1] == 8657133728839618626
    assert all(eq.is_solution(x) for x in got)
    assert count_solutions(eq, config) == 16


def test_large_semiprime(config):
    n = 2082064493491567088228629031592644077
    assert solve_quadratic(-1, 2, -1, 0, n, config) == [1]


@pytest.mark.parametrize("coefficients, expected", [
    ((81, 9, 77, 79), [34]),
    ((-1, -1000, 17, 7), [5]),
    ((15, 3, 33, 55), [2, 13, 24, 35, 46]),
    ((17, 0, 1, 255), None),
    ((5, 0, 1, 5), None),
    ((5, 0, 1, 10), None),
])
def test_linear_vectors(coefficients, expected, config):
    assert solve_linear(*coefficients, config=config) == expected


def test_linear_many_solutions(config):
    got = solve_linear(100, -1, 199, 500, config)
    assert len(got) == 100
    assert got[0] == 2
    assert got[-1] == 497


def test_no_solution_is_none(config):
    assert solve_quadratic(1, 0, 0, 3, 7, config) is None
    assert solve_quadratic(1, 0, 0, 2, 4, config) is None


def test_brute_force_small_moduli(config):
    for n in (6, 12, 30, 36, 72, 100, 105):
        for a, b, c in [(1, 0, -1), (2, 3, 1), (3, 3, 0), (4, 0, 4), (6, 1, 5)]:
            expected = [x for x in range(n) if (a * x * x + b * x + c) % n == 0] or None
            assert solve_quadratic(a, b, c, 0, n, config) == expected, (a, b, c, n)


def test_vanishing_leading_coefficient(config):
    # 10 ≡ 0 (mod 5), so this is 3x ≡ 1
    assert solve_quadratic(10, 3, 0, 1, 5, config) == [2]


def test_every_solution_checks(config):
    # one root mod 2^10 and 3^5, two mod 7 and 11
    eq = QuadraticEquation(12, 7, -16, 3, 2**10 * 3**5 * 7 * 11)
    got = solve(eq, config)
    assert len(got) == 4
    assert all(eq.is_solution(x) for x in got)


def test_idempotent(config):
    eq = QuadraticEquation(1, 3, 0, 298, 315)
    assert solve(eq, config) == solve(eq, config) == eq.solve(config)


def test_huge_identity_counts_without_listing(config):
    eq = QuadraticEquation(2**64, 0, 0, 0, 2**64)
    assert count_solutions(eq, config) == 2**64
    with pytest.raises(SolutionCountOverflow):
        solve(eq, config)


def test_count_squares_mod_two_power(config):
    assert count_solutions(QuadraticEquation(1, 0, 0, 0, 2**100), config) == 2**50
    assert QuadraticEquation(1, 0, -1, 0, 77).count(config) == 4
    assert LinearEquation(3, 0, 1, 9).count(config) == 0


def test_max_solutions():
    config = SolverConfig(max_solutions=3, seed=1)
    with pytest.raises(SolutionCountOverflow):
        solve_quadratic(1, 0, -1, 0, 77, config)


def test_invalid_modulus():
    for n in (1, 0, -7):
        with pytest.raises(InvalidModulus):
            QuadraticEquation(1, 0, 0, 0, n)
        with pytest.raises(InvalidModulus):
            solve_linear(1, 0, 0, n)


def test_overflow():
    with pytest.raises(ArithmeticOverflow):
        solve_quadratic(1, 0, 0, 0, 2**128)
    with pytest.raises(ArithmeticOverflow):
        solve_quadratic(-(2**127), 0, 0, 0, 7)
    with pytest.raises(ArithmeticOverflow):
        solve_quadratic(1, 0, 0, 300, 7, SolverConfig(bits=8))


def test_unchecked_accepts_wide_coefficients():
    config = SolverConfig(checked=False, seed=3)
    assert solve_quadratic(77 * 2**124 + 1, 0, -1, 0, 77, config) == [1, 34, 43, 76]


def test_cancel_token():
    cancel = threading.Event()
    cancel.set()
    config = SolverConfig(cancel=cancel, workers=2, seed=5)
    n = (2**61 - 1) * (2**67 - 1)
    with pytest.raises(FactorizationCancelled):
        solve_quadratic(1, 0, -4, 0, n, config)


def test_config_validation():
    with pytest.raises(ValueError):
        SolverConfig(workers=0)
    with pytest.raises(ValueError):
        SolverConfig(max_solutions=-1)


def test_solve_rejects_other_types():
    with pytest.raises(TypeError):
        solve((1, 2, 3, 4))
