"""
Solution sets modulo one prime power.

A quadratic congruence modulo p^e can have an enormous number of solutions:
x^2 ≡ 0 (mod 2^100) has 2^50 of them and 0·x ≡ 0 has every residue. Such
sets are always a few roots repeated with some period dividing p^e, so
ResidueSet stores just the roots and the period. Nothing is enumerated
until the set is iterated.
"""

from typing import Iterable, Iterator, List


class ResidueSet(object):
    """
    The residues r + k*period in [0, modulus), for r in roots and k >= 0.

    :param roots: Residues modulo period, duplicates are dropped.
    :param period: Divisor of modulus.
    :param modulus: The prime power the set lives in.
    """

    __slots__ = ("roots", "period", "modulus")

    def __init__(self, roots: Iterable[int], period: int, modulus: int):
        if modulus % period:
            raise ValueError(f"period {period} does not divide {modulus}")
        self.roots = sorted({r % period for r in roots})
        self.period = period
        self.modulus = modulus

    @classmethod
    def empty(cls, modulus: int) -> "ResidueSet":
        return cls((), modulus, modulus)

    @classmethod
    def full(cls, modulus: int) -> "ResidueSet":
        """Every residue, for equations that degenerate to 0 ≡ 0."""
        return cls((0,), 1, modulus)

    @property
    def count(self) -> int:
        return len(self.roots) * (self.modulus // self.period)

    @property
    def is_full(self) -> bool:
        return self.count == self.modulus

    def __bool__(self) -> bool:
        return bool(self.roots)

    def __iter__(self) -> Iterator[int]:
        # roots < period, so this is ascending
        for base in range(0, self.modulus, self.period):
            for r in self.roots:
                yield base + r

    def __contains__(self, x: int) -> bool:
        return x % self.period in self.roots

    def __eq__(self, other):
        if not isinstance(other, ResidueSet):
            return NotImplemented
        return (self.modulus, self.period, self.roots) == (other.modulus, other.period, other.roots)

    def __repr__(self):
        return f"ResidueSet(roots={self.roots}, period={self.period}, modulus={self.modulus})"

    def affine(self, shift: int, scale: int) -> "ResidueSet":
        """
        The image under x -> (x + shift) * scale mod modulus.

        scale must be a unit, which makes the map a bijection preserving the period.
        """
        return ResidueSet(((r + shift) * scale for r in self.roots), self.period, self.modulus)

    def extend(self, modulus: int) -> "ResidueSet":
        """Same congruence condition, read in a larger modulus (a multiple of this one)."""
        return ResidueSet(self.roots, self.period, modulus)

    def to_list(self) -> List[int]:
        return list(self)
