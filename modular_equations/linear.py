# Linear congruences a*x ≡ rhs (mod m).

import logging
from typing import Optional

from .arith import DEFAULT_ARITH, ModArith
from .residues import ResidueSet

logger = logging.getLogger(__name__)


def solve_linear_congruence(a: int, rhs: int, modulus: int,
                            arith: Optional[ModArith] = None) -> ResidueSet:
    """
    Solve a*x ≡ rhs (mod modulus).

    With g = gcd(a, modulus) there is no solution unless g divides rhs, and
    exactly g solutions otherwise: x0 + k*(modulus/g) where x0 solves the
    reduced congruence (a/g)*x ≡ rhs/g (mod modulus/g), whose coefficient is
    invertible.

    :return: ResidueSet of all solutions, symbolic when a ≡ 0.
    """
    arith = arith or DEFAULT_ARITH
    a %= modulus
    rhs %= modulus
    g = arith.gcd(a, modulus)
    if rhs % g:
        return ResidueSet.empty(modulus)
    period = modulus // g
    if period == 1:
        return ResidueSet.full(modulus)
    x0 = arith.mul(rhs // g, arith.inverse(a // g, period), period)
    logger.debug("%d*x = %d (mod %d): %d solutions from x0=%d", a, rhs, modulus, g, x0)
    return ResidueSet((x0,), period, modulus)
