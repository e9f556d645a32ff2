# Solver settings, passed explicitly to every solve call.

import sys
import threading
from dataclasses import dataclass
from typing import Optional

from .arith import ModArith
from .factorization import DEFAULT_WORKERS
from .primality import MR_ROUNDS


@dataclass
class SolverConfig:
    """
    :param bits: Integer width to validate against; None picks the narrowest
        one holding the modulus and coefficients.
    :param checked: Raise ArithmeticOverflow on out-of-range operands.
    :param workers: Threads racing to split each hard composite.
    :param seed: Fixes the random streams of primality testing and factoring.
    :param mr_rounds: Random Miller-Rabin rounds above 2^64.
    :param max_solutions: Refuse to build larger solution lists.
    :param cancel: Setting this event aborts a running factorization.
    """

    bits: Optional[int] = None
    checked: bool = True
    workers: int = DEFAULT_WORKERS
    seed: Optional[int] = None
    mr_rounds: int = MR_ROUNDS
    max_solutions: int = sys.maxsize
    cancel: Optional[threading.Event] = None

    def __post_init__(self):
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.max_solutions < 0:
            raise ValueError(f"max_solutions must be nonnegative, got {self.max_solutions}")

    def arith_for(self, modulus: int, *coefficients: int) -> ModArith:
        return ModArith.for_values(modulus, *coefficients, bits=self.bits, checked=self.checked)


DEFAULT_CONFIG = SolverConfig()
