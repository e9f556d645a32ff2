"""
Elliptic-curve arithmetic for Lenstra's factorization method.

Curves are in Montgomery form B*y^2 = x^3 + A*x^2 + x over Z/nZ and points
are kept as projective (X:Z) pairs, dropping y. Scalar multiplication is the
Montgomery ladder: every bit costs one differential addition and one
doubling, and no step needs a modular inverse.
"""

import logging
import random
from bisect import bisect_right
from math import gcd
from typing import Callable, Optional

from .arith import mod_inverse
from .errors import NoInverseExists
from .primality import primes_below

logger = logging.getLogger(__name__)

# Stage 2 walks r in steps of 2 * STAGE2_D up to B2 = min(B2_FACTOR * B1, B2_MAX).
STAGE2_D = 105
B2_FACTOR = 100
B2_MAX = 10 ** 7


class MontgomeryCurve(object):
    """
    Curve with parameter a24 = (A + 2) / 4 modulo n.
    """

    def __init__(self, a24: int, n: int):
        self.a24 = a24 % n
        self.n = n

    def double(self, x: int, z: int):
        n = self.n
        s = (x + z) * (x + z) % n
        d = (x - z) * (x - z) % n
        t = (s - d) % n
        return s * d % n, t * (d + self.a24 * t) % n

    def add(self, xp: int, zp: int, xq: int, zq: int, xd: int, zd: int):
        """Differential addition: P + Q given P - Q = (xd : zd)."""
        n = self.n
        u = (xp - zp) * (xq + zq) % n
        v = (xp + zp) * (xq - zq) % n
        return zd * (u + v) * (u + v) % n, xd * (u - v) * (u - v) % n

    def ladder(self, k: int, x: int, z: int):
        """k * (x : z) by the Montgomery ladder."""
        if k == 0:
            # point at infinity
            return 1, 0
        x0, z0 = x, z
        x1, z1 = self.double(x, z)
        for bit in bin(k)[3:]:
            if bit == '1':
                x0, z0 = self.add(x1, z1, x0, z0, x, z)
                x1, z1 = self.double(x1, z1)
            else:
                x1, z1 = self.add(x0, z0, x1, z1, x, z)
                x0, z0 = self.double(x0, z0)
        return x0, z0

    @classmethod
    def suyama(cls, sigma: int, n: int):
        """
        Curve and starting point from Suyama's parametrization.

        :raises NoInverseExists: when the curve degenerates modulo some
            factor of n; the gcd in ``.value`` may be that factor.
        """
        u = (sigma * sigma - 5) % n
        v = 4 * sigma % n
        x = pow(u, 3, n)
        z = pow(v, 3, n)
        num = pow(v - u, 3, n) * (3 * u + v) % n
        den = 16 * x * v % n
        curve = cls(num * mod_inverse(den, n), n)
        return curve, MontgomeryPoint(curve, x, z)


class MontgomeryPoint(object):
    def __init__(self, curve: MontgomeryCurve, x: int, z: int):
        self.curve = curve
        self.x, self.z = x, z

    def __rmul__(self, other: int):
        x, z = self.curve.ladder(other, self.x, self.z)
        return MontgomeryPoint(self.curve, x, z)

    def __eq__(self, other):
        if not isinstance(other, MontgomeryPoint):
            return NotImplemented
        n = self.curve.n
        return (self.x * other.z - other.x * self.z) % n == 0

    def __repr__(self):
        return f"MontgomeryPoint({self.x}, {self.z})"


def _stage2(curve: MontgomeryCurve, x: int, z: int, b1: int, b2: int,
            stop: Optional[Callable[[], bool]]) -> int:
    """
    Standard continuation: catch a single prime q in (b1, b2] dividing the
    group order. With R = r*Q and S[d] = 2d*Q, q = r + 2d gives q*Q = O
    modulo a factor exactly when R and -S[d] share their x coordinate, so
    the cross products x_R*z_S - x_S*z_R are multiplied up and gcd'd once.
    """
    n = curve.n
    d_max = STAGE2_D
    s = [None] * (d_max + 1)
    s[1] = curve.double(x, z)
    s[2] = curve.double(*s[1])
    for d in range(3, d_max + 1):
        s[d] = curve.add(*s[d - 1], *s[1], *s[d - 2])

    r = b1 if b1 % 2 else b1 - 1
    rx, rz = curve.ladder(r, x, z)
    tx, tz = curve.ladder(r - 2 * d_max, x, z)
    primes = primes_below(b2 + 1)
    i = bisect_right(primes, r)
    g = 1
    while i < len(primes):
        if stop is not None and stop():
            return 1
        top = r + 2 * d_max
        while i < len(primes) and primes[i] <= top:
            sx, sz = s[(primes[i] - r) // 2]
            g = g * (rx * sz - sx * rz) % n
            i += 1
        rx, rz, tx, tz = (*curve.add(rx, rz, *s[d_max], tx, tz), rx, rz)
        r = top
    return gcd(g, n)


def ecm_trial(n: int, rng: random.Random, b1: int,
              stop: Optional[Callable[[], bool]] = None) -> Optional[int]:
    """
    Run the elliptic curve method on one random curve.

    :param n: Odd composite to split.
    :param rng: Source for the curve parameter.
    :param b1: Stage 1 bound; the point is multiplied by every prime power <= b1.
        Stage 2 then looks for one more prime up to B2_FACTOR * b1.
    :param stop: Polled before each prime; returning True abandons the curve.
    :return: A nontrivial factor of n, or None.
    """
    sigma = rng.randrange(6, n - 1)
    try:
        curve, point = MontgomeryCurve.suyama(sigma, n)
    except NoInverseExists as e:
        d = e.value
        return d if 1 < d < n else None

    for p in primes_below(b1 + 1):
        if stop is not None and stop():
            return None
        pk = p
        while pk * p <= b1:
            pk *= p
        point = pk * point

    d = gcd(point.z, n)
    if d == 1 and b1 > 2 * STAGE2_D + 1:
        d = _stage2(curve, point.x, point.z, b1, min(B2_FACTOR * b1, B2_MAX), stop)
    if 1 < d < n:
        logger.debug("curve sigma=%d with B1=%d split off %d", sigma, b1, d)
        return d
    return None
