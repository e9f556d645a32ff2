"""
Solve a*x^2 + b*x + c ≡ d and a*x + b ≡ c modulo n.

    >>> from modular_equations import solve_quadratic
    >>> solve_quadratic(1, 0, 0, 1, 8)
    [1, 3, 5, 7]
"""

__version__ = "0.3.0"

from .config import SolverConfig
from .crt import combine
from .errors import (ArithmeticOverflow, FactorizationCancelled, InvalidModulus,
                     ModularEquationError, NoInverseExists, SolutionCountOverflow)
from .factorization import Factorization, factorize
from .primality import is_prime
from .prime_power import solve_mod_prime_power
from .residues import ResidueSet
from .solver import (LinearEquation, QuadraticEquation, count_solutions, solve,
                     solve_linear, solve_quadratic)

__all__ = [
    "ArithmeticOverflow",
    "Factorization",
    "FactorizationCancelled",
    "InvalidModulus",
    "LinearEquation",
    "ModularEquationError",
    "NoInverseExists",
    "QuadraticEquation",
    "ResidueSet",
    "SolutionCountOverflow",
    "SolverConfig",
    "combine",
    "count_solutions",
    "factorize",
    "is_prime",
    "solve",
    "solve_linear",
    "solve_mod_prime_power",
    "solve_quadratic",
]
