# Fixed-width modular arithmetic.
#
# Every solver component works through a ModArith instance bound to one of the
# supported widths. Python integers never wrap, so "checked" here means that
# operands are validated against the width before use: an operand that would
# not fit the native integer of that width raises ArithmeticOverflow instead
# of being silently accepted. The unchecked variant skips validation.

from math import gcd
from typing import Optional

from .errors import ArithmeticOverflow, InvalidModulus, NoInverseExists

SUPPORTED_WIDTHS = (8, 16, 32, 64, 128)


def mod_inverse(a: int, n: int) -> int:
    """
    Inverse of a modulo n by the extended Euclidean algorithm.

    :raises NoInverseExists: when gcd(a, n) != 1; the gcd is in ``.value``.
    """
    r1, s1, t1 = 1, 0, a % n
    r2, s2, t2 = 0, 1, n
    while t2:
        q = t1 // t2
        r1, r2 = r2, r1 - q * r2
        s1, s2 = s2, s1 - q * s2
        t1, t2 = t2, t1 - q * t2

    if t1 != 1:
        raise NoInverseExists(t1, n)
    return r1 % n


class ModArith(object):
    """
    Modular add/sub/mul/pow/inverse over one fixed integer width.

    The equation solvers (linear, prime_power) do all residue arithmetic
    through an instance. Factoring and primality testing only ever reduce
    modulo the modulus or one of its divisors, which already fits the
    selected width, so they use plain int operations.

    :param bits: Width of the unsigned integer type, one of SUPPORTED_WIDTHS.
    :param checked: Validate operands against the width (default). Disable
        only for throughput; results are still exact.
    """

    def __init__(self, bits: int = 128, checked: bool = True):
        if bits not in SUPPORTED_WIDTHS:
            raise ValueError(f"unsupported width {bits}, pick one of {SUPPORTED_WIDTHS}")
        self.bits = bits
        self.checked = checked
        self.max_unsigned = (1 << bits) - 1
        # Two's complement MIN has no absolute value, keep the range symmetric.
        self.max_signed = (1 << (bits - 1)) - 1

    def __repr__(self):
        mode = "checked" if self.checked else "unchecked"
        return f"ModArith(bits={self.bits}, {mode})"

    @classmethod
    def for_values(cls, modulus: int, *coefficients: int, bits: Optional[int] = None,
                   checked: bool = True) -> "ModArith":
        """
        Pick the narrowest width holding the modulus and all coefficients.

        With ``bits`` given, validate against that width instead.
        """
        if modulus <= 1:
            raise InvalidModulus(modulus)
        widths = SUPPORTED_WIDTHS if bits is None else (bits,)
        for width in widths:
            arith = cls(width, checked)
            if arith.fits(modulus, *coefficients):
                return arith
        if not checked:
            return cls(widths[-1], checked)
        largest = cls(widths[-1])
        if modulus > largest.max_unsigned:
            raise ArithmeticOverflow(modulus, largest.bits)
        bad = next(v for v in coefficients if not largest.fits_signed(v))
        raise ArithmeticOverflow(bad, largest.bits, signed=bad < 0)

    def fits(self, modulus: int, *coefficients: int) -> bool:
        return 0 <= modulus <= self.max_unsigned and all(self.fits_signed(v) for v in coefficients)

    def fits_signed(self, value: int) -> bool:
        return -self.max_signed <= value <= self.max_unsigned

    def _check(self, *values: int):
        if not self.checked:
            return
        for v in values:
            if v < 0 or v > self.max_unsigned:
                raise ArithmeticOverflow(v, self.bits)

    def residue(self, value: int, n: int) -> int:
        """Map a signed or unsigned coefficient to its representative in [0, n)."""
        if self.checked and not self.fits_signed(value):
            raise ArithmeticOverflow(value, self.bits, signed=value < 0)
        return value % n

    def add(self, x: int, y: int, n: int) -> int:
        self._check(x, y, n)
        return (x + y) % n

    def sub(self, x: int, y: int, n: int) -> int:
        self._check(x, y, n)
        return (x - y) % n

    def mul(self, x: int, y: int, n: int) -> int:
        # Product is formed at double width before reduction.
        self._check(x, y, n)
        return (x * y) % n

    def pow(self, base: int, exp: int, n: int) -> int:
        self._check(base, exp, n)
        return pow(base, exp, n)

    def inverse(self, x: int, n: int) -> int:
        self._check(x, n)
        return mod_inverse(x, n)

    def gcd(self, x: int, y: int) -> int:
        self._check(x, y)
        return gcd(x, y)


# Default capability for callers that do not care about widths.
DEFAULT_ARITH = ModArith(128)
