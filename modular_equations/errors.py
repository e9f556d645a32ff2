"""Exceptions raised while solving modular equations."""


class ModularEquationError(Exception):
    """Base class for every error raised by this package."""


class InvalidModulus(ModularEquationError, ValueError):
    def __init__(self, modulus):
        super().__init__(f"modulus must be at least 2, got {modulus}")
        self.modulus = modulus


class ArithmeticOverflow(ModularEquationError, OverflowError):
    """A value does not fit the working integer width."""

    def __init__(self, value, bits: int, signed: bool = False):
        kind = "signed" if signed else "unsigned"
        super().__init__(f"{value} does not fit a {bits}-bit {kind} integer")
        self.value = value
        self.bits = bits


class NoInverseExists(ModularEquationError, ArithmeticError):
    """
    Raised by the extended Euclidean algorithm when gcd(x, n) != 1.

    The gcd is kept in ``value``: the elliptic-curve method reads factors
    of n from it.
    """

    def __init__(self, value, modulus=None):
        super().__init__(f"no inverse modulo {modulus}, gcd is {value}")
        self.value = value
        self.modulus = modulus


class SolutionCountOverflow(ModularEquationError, OverflowError):
    def __init__(self, count: int, limit: int):
        super().__init__(f"{count} solutions exceed the limit of {limit}")
        self.count = count
        self.limit = limit


class FactorizationCancelled(ModularEquationError):
    """The caller's cancel token fired before the modulus was factored."""
