"""
Quadratic congruences modulo a prime power p^e.

The equation a*x^2 + b*x + c ≡ d is first reduced to c - d on the left and
stripped of its content, the largest power of p dividing every coefficient.
What is left has some coefficient that is a unit mod p and falls in one of
these cases:

  a ≡ 0 (mod p^e)        linear congruence
  a unit, p odd          (2a*x + b)^2 ≡ b^2 - 4ac, square roots mod p^e
  a unit, p = 2, b even  (a*x + b/2)^2 ≡ (b/2)^2 - ac, square roots mod 2^e
  a unit, p = 2, b odd   roots 0 and 1 mod 2 when c is even, lifted
  a non-unit, b unit     one root mod p, lifted
  otherwise              c is a unit, no solution

Roots with a unit derivative lift uniquely by Newton's method (Hensel's
lemma); square roots handle the singular cases themselves.
"""

import logging
from typing import List, Optional

from .arith import DEFAULT_ARITH, ModArith
from .linear import solve_linear_congruence
from .primality import legendre
from .residues import ResidueSet

logger = logging.getLogger(__name__)


def _valuation(x: int, p: int, cap: int) -> int:
    """Exponent of p in x, capped at cap (x = 0 gives cap)."""
    v = 0
    while v < cap and x % p == 0:
        x //= p
        v += 1
    return v


# ---------- square roots ----------
def sqrt_mod_prime(n: int, p: int, arith: Optional[ModArith] = None) -> Optional[int]:
    """
    Compute a square root of n mod odd prime p.
    Euler's criterion decides residuosity; p ≡ 3 (mod 4) takes the direct
    exponent, everything else goes through Tonelli-Shanks.
    """
    arith = arith or DEFAULT_ARITH
    n %= p
    if n == 0:
        return 0
    if legendre(n, p) != 1:
        return None
    if p % 4 == 3:
        return arith.pow(n, (p + 1) // 4, p)
    q = p - 1
    s = 0
    while q % 2 == 0:
        q //= 2
        s += 1
    z = 2
    while legendre(z, p) != -1:
        z += 1
    c = arith.pow(z, q, p)
    x = arith.pow(n, (q + 1) // 2, p)
    t = arith.pow(n, q, p)
    m = s
    while t != 1:
        i = 1
        t2i = arith.mul(t, t, p)
        while i < m and t2i != 1:
            t2i = arith.mul(t2i, t2i, p)
            i += 1
        b = arith.pow(c, 1 << (m - i - 1), p)
        x = arith.mul(x, b, p)
        c = arith.mul(b, b, p)
        t = arith.mul(t, c, p)
        m = i
    return x


def hensel_lift_sqrt(y: int, u: int, p: int, e: int, arith: Optional[ModArith] = None) -> int:
    """
    Lift y with y^2 ≡ u (mod p), p odd and u a unit, to a root mod p^e.

    Each Newton step y -> y - (y^2 - u) / (2y) doubles the precision.
    """
    arith = arith or DEFAULT_ARITH
    pe = p ** e
    mod = p
    while mod < pe:
        mod = min(mod * mod, pe)
        f = arith.sub(arith.mul(y, y, mod), u % mod, mod)
        y = arith.sub(y, arith.mul(f, arith.inverse(2 * y % mod, mod), mod), mod)
    return y


def _sqrt_unit_mod_two_power(u: int, m: int) -> List[int]:
    """
    All square roots of the odd u modulo 2^m.
    """
    mod = 1 << m
    if m == 1:
        return [1]
    if m == 2:
        return [1, 3] if u % 4 == 1 else []
    if u % 8 != 1:
        return []
    # r^2 ≡ u (mod 2^k) -> fix bit k by adding 2^(k-1)
    r = 1
    for k in range(3, m):
        if (r * r - u) % (1 << (k + 1)):
            r += 1 << (k - 1)
    half = mod >> 1
    return sorted({r, mod - r, (r + half) % mod, (mod - r + half) % mod})


def sqrt_mod_prime_power(n: int, p: int, e: int, arith: Optional[ModArith] = None) -> ResidueSet:
    """
    All y in [0, p^e) with y^2 ≡ n (mod p^e).

    n ≡ 0 gives the multiples of p^ceil(e/2). Otherwise n = p^(2k) * u with u a
    unit (an odd power of p has no root), and the roots are p^k * z for the
    roots z of u mod p^(e-2k), which repeat with period p^(e-k).
    """
    arith = arith or DEFAULT_ARITH
    pe = p ** e
    n %= pe
    if n == 0:
        return ResidueSet((0,), p ** ((e + 1) // 2), pe)
    v = _valuation(n, p, e)
    if v % 2:
        return ResidueSet.empty(pe)
    k = v // 2
    m = e - v
    u = n // p ** v
    if p == 2:
        unit_roots = _sqrt_unit_mod_two_power(u, m)
    else:
        z = sqrt_mod_prime(u, p, arith)
        if z is None:
            return ResidueSet.empty(pe)
        z = hensel_lift_sqrt(z, u, p, m, arith)
        pm = p ** m
        unit_roots = [z, pm - z]
    period = p ** (e - k)
    return ResidueSet((p ** k * z for z in unit_roots), period, pe)


# ---------- roots of the quadratic ----------
def _lift_simple_root(a: int, b: int, c: int, x: int, mod: int, arith: ModArith) -> int:
    """
    Newton's method for a root x mod p of a*x^2 + b*x + c whose derivative
    2a*x + b is a unit; converges quadratically to the unique root mod ``mod``.
    """
    while True:
        fx = arith.add(arith.mul(arith.add(arith.mul(a, x, mod), b, mod), x, mod), c, mod)
        if fx == 0:
            return x
        dfx = arith.add(arith.mul(2 * a % mod, x, mod), b, mod)
        x = arith.sub(x, arith.mul(fx, arith.inverse(dfx, mod), mod), mod)


def _solve_primitive(a: int, b: int, c: int, p: int, e: int, arith: ModArith) -> ResidueSet:
    """a*x^2 + b*x + c ≡ 0 (mod p^e) where p does not divide all coefficients."""
    pe = p ** e
    if a % p:
        if p != 2:
            disc = arith.sub(arith.mul(b, b, pe), arith.mul(4 * a % pe, c, pe), pe)
            ys = sqrt_mod_prime_power(disc, p, e, arith)
            return ys.affine(-b, arith.inverse(2 * a % pe, pe))
        if b % 2 == 0:
            half_b = b // 2
            disc = arith.sub(arith.mul(half_b, half_b, pe), arith.mul(a, c, pe), pe)
            ys = sqrt_mod_prime_power(disc, 2, e, arith)
            return ys.affine(-half_b, arith.inverse(a, pe))
        if c % 2:
            # x^2 + x is always even
            return ResidueSet.empty(pe)
        return ResidueSet([_lift_simple_root(a, b, c, x0, pe, arith) for x0 in (0, 1)], pe, pe)
    if b % p:
        x0 = arith.mul(p - c % p, arith.inverse(b % p, p), p)
        return ResidueSet((_lift_simple_root(a, b, c, x0, pe, arith),), pe, pe)
    return ResidueSet.empty(pe)


def solve_mod_prime_power(a: int, b: int, c: int, d: int, prime: int, exponent: int,
                          arith: Optional[ModArith] = None) -> ResidueSet:
    """
    Solve a*x^2 + b*x + c ≡ d (mod prime^exponent).

    :param a, b, c, d: Coefficients, any integers.
    :param prime: The prime p.
    :param exponent: e >= 1.
    :return: ResidueSet of all solutions in [0, p^e). For an odd prime and a
        unit leading coefficient it holds at most two residues; when the
        equation reduces to 0 ≡ 0 it is the whole ring.
    """
    arith = arith or DEFAULT_ARITH
    pe = prime ** exponent
    a, b = a % pe, b % pe
    c = arith.sub(c % pe, d % pe, pe)
    if a == 0:
        result = solve_linear_congruence(b, pe - c if c else 0, pe, arith)
    else:
        v = min(_valuation(x, prime, exponent) for x in (a, b, c))
        if v:
            scale = prime ** v
            inner = _solve_primitive(a // scale, b // scale, c // scale, prime, exponent - v, arith)
            result = inner.extend(pe)
        else:
            result = _solve_primitive(a, b, c, prime, exponent, arith)
    logger.debug("mod %d^%d: %d solutions", prime, exponent, result.count)
    return result
