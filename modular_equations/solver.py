"""
Solving a*x^2 + b*x + c ≡ d and a*x + b ≡ c modulo n.

A quadratic is solved modulo every prime power of n separately and the
results are recombined with the Chinese Remainder Theorem. Linear equations
need no factorization and are solved directly modulo n.

Solutions are the least nonnegative residues, ascending and distinct. No
solution is reported as None, never as an empty list.
"""

import logging
from dataclasses import dataclass
from math import prod
from typing import List, Optional, Tuple, Union

from .config import DEFAULT_CONFIG, SolverConfig
from .crt import combine, materialize
from .errors import InvalidModulus
from .factorization import factorize
from .linear import solve_linear_congruence
from .prime_power import solve_mod_prime_power
from .residues import ResidueSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuadraticEquation:
    """a*x^2 + b*x + c ≡ d (mod modulus)"""

    a: int
    b: int
    c: int
    d: int
    modulus: int

    def __post_init__(self):
        if self.modulus <= 1:
            raise InvalidModulus(self.modulus)

    @property
    def coefficients(self) -> Tuple[int, int, int, int]:
        return self.a, self.b, self.c, self.d

    def is_solution(self, x: int) -> bool:
        return (self.a * x * x + self.b * x + self.c - self.d) % self.modulus == 0

    def solve(self, config: Optional[SolverConfig] = None) -> Optional[List[int]]:
        return solve(self, config)

    def count(self, config: Optional[SolverConfig] = None) -> int:
        return count_solutions(self, config)

    def __str__(self):
        return f"{self.a}*x^2 + {self.b}*x + {self.c} = {self.d} (mod {self.modulus})"


@dataclass(frozen=True)
class LinearEquation:
    """a*x + b ≡ c (mod modulus)"""

    a: int
    b: int
    c: int
    modulus: int

    def __post_init__(self):
        if self.modulus <= 1:
            raise InvalidModulus(self.modulus)

    @property
    def coefficients(self) -> Tuple[int, int, int]:
        return self.a, self.b, self.c

    def is_solution(self, x: int) -> bool:
        return (self.a * x + self.b - self.c) % self.modulus == 0

    def solve(self, config: Optional[SolverConfig] = None) -> Optional[List[int]]:
        return solve(self, config)

    def count(self, config: Optional[SolverConfig] = None) -> int:
        return count_solutions(self, config)

    def __str__(self):
        return f"{self.a}*x + {self.b} = {self.c} (mod {self.modulus})"


Equation = Union[QuadraticEquation, LinearEquation]


# ---------- per-equation solution sets ----------
def _linear_set(eq: LinearEquation, config: SolverConfig) -> ResidueSet:
    n = eq.modulus
    arith = config.arith_for(n, *eq.coefficients)
    a, b, c = (arith.residue(v, n) for v in eq.coefficients)
    return solve_linear_congruence(a, arith.sub(c, b, n), n, arith)


def _quadratic_sets(eq: QuadraticEquation, config: SolverConfig):
    """
    Solution sets of a quadratic, either a single ResidueSet modulo n or one
    per prime power together with the factorization of n.
    """
    n = eq.modulus
    arith = config.arith_for(n, *eq.coefficients)
    a, b, c, d = (arith.residue(v, n) for v in eq.coefficients)
    if a == 0:
        logger.info("leading coefficient vanishes mod %d, solving %d*x = %d", n, b, (d - c) % n)
        return solve_linear_congruence(b, arith.sub(d, c, n), n, arith), None

    factorization = factorize(n, config.workers, config.seed, config.cancel, config.mr_rounds)
    logger.info("modulus %d = %s", n, factorization)
    sets = []
    for p, e in factorization:
        s = solve_mod_prime_power(a, b, c, d, p, e, arith)
        if not s:
            logger.info("no solution mod %d^%d", p, e)
            return [], factorization
        sets.append(s)
    return sets, factorization


# ---------- public entry points ----------
def solve(equation: Equation, config: Optional[SolverConfig] = None) -> Optional[List[int]]:
    """
    All solutions of a quadratic or linear congruence.

    :param equation: QuadraticEquation or LinearEquation.
    :param config: Solver settings, defaults when None.
    :return: Ascending list of distinct residues in [0, modulus), or None.
    :raises ArithmeticOverflow: if a value does not fit the selected width.
    :raises SolutionCountOverflow: if there are more than max_solutions.
    :raises FactorizationCancelled: if config.cancel fires while factoring.
    """
    config = config or DEFAULT_CONFIG
    if isinstance(equation, LinearEquation):
        solutions = materialize(_linear_set(equation, config), config.max_solutions)
    elif isinstance(equation, QuadraticEquation):
        sets, factorization = _quadratic_sets(equation, config)
        if factorization is None:
            solutions = materialize(sets, config.max_solutions)
        else:
            solutions = combine(sets, factorization, config.max_solutions) if sets else []
    else:
        raise TypeError(f"cannot solve {type(equation).__name__}")
    logger.info("%s: %d solutions", equation, len(solutions))
    return solutions or None


def count_solutions(equation: Equation, config: Optional[SolverConfig] = None) -> int:
    """
    Number of solutions, computed without listing them.
    """
    config = config or DEFAULT_CONFIG
    if isinstance(equation, LinearEquation):
        return _linear_set(equation, config).count
    if isinstance(equation, QuadraticEquation):
        sets, factorization = _quadratic_sets(equation, config)
        if factorization is None:
            return sets.count
        return prod(s.count for s in sets) if sets else 0
    raise TypeError(f"cannot count solutions of {type(equation).__name__}")


def solve_quadratic(a: int, b: int, c: int, d: int, modulus: int,
                    config: Optional[SolverConfig] = None) -> Optional[List[int]]:
    """Solve a*x^2 + b*x + c ≡ d (mod modulus)."""
    return solve(QuadraticEquation(a, b, c, d, modulus), config)


def solve_linear(a: int, b: int, c: int, modulus: int,
                 config: Optional[SolverConfig] = None) -> Optional[List[int]]:
    """Solve a*x + b ≡ c (mod modulus)."""
    return solve(LinearEquation(a, b, c, modulus), config)
