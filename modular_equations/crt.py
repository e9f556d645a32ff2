"""
Chinese Remainder recombination of per-prime-power solution sets.

For n = p1^e1 * ... * pk^ek every combination of one solution modulo each
prime power gives exactly one solution modulo n, so the result has the
product of the per-factor counts. That product is checked against a limit
before anything is enumerated.
"""

import itertools
import logging
import sys
from math import prod
from typing import List, Optional, Sequence

from .arith import mod_inverse
from .errors import SolutionCountOverflow
from .factorization import Factorization
from .residues import ResidueSet

logger = logging.getLogger(__name__)


def crt_basis(moduli: Sequence[int]) -> List[int]:
    """
    Coefficients e_i with e_i ≡ 1 (mod moduli[i]) and e_i ≡ 0 modulo the
    other moduli, reduced modulo their product.
    """
    n = prod(moduli)
    basis = []
    for m in moduli:
        q = n // m
        basis.append(q * mod_inverse(q, m) % n)
    return basis


def chinese_remainder(residues: Sequence[int], moduli: Sequence[int]) -> int:
    """
    Solve the system x ≡ residues[i] (mod moduli[i]) for pairwise coprime moduli.
    """
    return sum(r * e for r, e in zip(residues, crt_basis(moduli))) % prod(moduli)


def _check_count(count: int, limit: Optional[int]) -> int:
    limit = sys.maxsize if limit is None else limit
    if count > limit:
        raise SolutionCountOverflow(count, limit)
    return count


def materialize(residue_set: ResidueSet, limit: Optional[int] = None) -> List[int]:
    """
    List every residue of a single set, ascending.

    :raises SolutionCountOverflow: if the set holds more than ``limit`` residues.
    """
    _check_count(residue_set.count, limit)
    return residue_set.to_list()


def combine(per_factor_sets: Sequence[ResidueSet], factorization: Factorization,
            limit: Optional[int] = None) -> List[int]:
    """
    Merge solution sets modulo the prime powers of ``factorization`` into the
    solutions modulo its value.

    :param per_factor_sets: One ResidueSet per (prime, exponent) pair, same order.
    :param limit: Max number of solutions to build, sys.maxsize if None.
    :return: Sorted, duplicate-free solutions; [] if any factor has none.
    :raises SolutionCountOverflow: when the total exceeds ``limit``.
    """
    if len(per_factor_sets) != len(factorization):
        raise ValueError("need exactly one solution set per prime power")
    if any(not s for s in per_factor_sets):
        return []
    moduli = factorization.prime_powers()
    total = _check_count(prod(s.count for s in per_factor_sets), limit)
    if len(moduli) == 1:
        return per_factor_sets[0].to_list()

    n = factorization.value
    basis = crt_basis(moduli)
    solutions = {sum(r * e for r, e in zip(combo, basis)) % n
                 for combo in itertools.product(*per_factor_sets)}
    if len(solutions) != total:
        logger.warning("CRT produced %d distinct solutions, expected %d", len(solutions), total)
    logger.debug("combined %d prime powers into %d solutions mod %d", len(moduli), total, n)
    return sorted(solutions)
