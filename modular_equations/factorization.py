"""
Integer factorization of the modulus.

The pipeline for n is
  - trial division by the primes below TRIAL_BOUND,
  - primality testing of what is left,
  - perfect power detection and a short Fermat search,
  - a pool of worker threads racing to split the remaining composite:
    worker 0 starts with Brent's variant of Pollard rho, after which every
    worker runs the elliptic curve method on random Montgomery curves.

The first worker to find a nontrivial factor wins; the others notice at
their next loop boundary and return. Both halves are factored again until
only primes remain. There is no timeout: the search for a hard composite
runs until it succeeds or until the caller sets the ``cancel`` event.
"""

import logging
import os
import random
import threading
from collections import Counter
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from dataclasses import dataclass
from math import gcd, isqrt, prod
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from .elliptic import ecm_trial
from .errors import FactorizationCancelled, InvalidModulus
from .primality import MR_ROUNDS, is_prime, primes_below, seeded_rng

logger = logging.getLogger(__name__)

TRIAL_BOUND = 1000
FERMAT_STEPS = 10
# f() evaluations worker 0 spends on rho before switching to curves.
RHO_BUDGET = 1 << 16
RHO_BATCH = 128
ECM_B1_SCHEDULE = (2000, 11000, 50000, 250000, 1000000)
ECM_CURVES_PER_LEVEL = 25

DEFAULT_WORKERS = max(2, min(6, os.cpu_count() or 2))


@dataclass(frozen=True)
class Factorization:
    """Prime factorization as ascending (prime, exponent) pairs."""

    pairs: Tuple[Tuple[int, int], ...]

    @classmethod
    def from_counts(cls, counts: Dict[int, int]) -> "Factorization":
        return cls(tuple(sorted((p, e) for p, e in counts.items() if e > 0)))

    @property
    def value(self) -> int:
        return prod(p ** e for p, e in self.pairs)

    @property
    def primes(self) -> List[int]:
        return [p for p, _ in self.pairs]

    def prime_powers(self) -> List[int]:
        return [p ** e for p, e in self.pairs]

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def __str__(self) -> str:
        return " * ".join(f"{p}^{e}" if e > 1 else str(p) for p, e in self.pairs)


# ---------- cheap splitters ----------
def trial_division(n: int, bound: int = TRIAL_BOUND) -> Tuple[Counter, int]:
    """
    Strip all prime factors below bound.

    :return: (Counter of prime -> exponent, remaining cofactor)
    """
    factors = Counter()
    for p in primes_below(bound):
        if p * p > n:
            break
        while n % p == 0:
            factors[p] += 1
            n //= p
    if 1 < n < bound:
        factors[n] += 1
        n = 1
    return factors, n


def _iroot(n: int, k: int) -> int:
    """Floor of the k-th root of n."""
    if k == 2:
        return isqrt(n)
    x = 1 << -(-n.bit_length() // k)
    while True:
        y = ((k - 1) * x + n // x ** (k - 1)) // k
        if y >= x:
            return x
        x = y


def perfect_power(n: int) -> Tuple[int, int]:
    """
    Return (r, k) with r^k == n and k prime, or (n, 1) if n is no perfect power.
    """
    for k in primes_below(n.bit_length() + 1):
        r = _iroot(n, k)
        if r > 1 and r ** k == n:
            return r, k
    return n, 1


def fermat(n: int, steps: int = FERMAT_STEPS) -> Optional[int]:
    """Fermat's method for odd n = (a - b)(a + b) with factors close to sqrt(n)."""
    a = isqrt(n)
    if a * a < n:
        a += 1
    for _ in range(steps):
        b2 = a * a - n
        b = isqrt(b2)
        if b * b == b2 and 1 < a - b < n:
            return a - b
        a += 1
    return None


def pollard_rho(n: int, rng: random.Random, stop: Optional[Callable[[], bool]] = None,
                budget: Optional[int] = None) -> Optional[int]:
    """
    Brent's variant of Pollard rho with batched gcds.

    Retries with a fresh polynomial x^2 + c whenever a cycle closes without
    a factor.

    :param budget: Max evaluations of x^2 + c; None means unbounded.
    :param stop: Polled after every batch.
    :return: Nontrivial factor of n, or None when stopped or out of budget.
    """
    if n % 2 == 0:
        return 2
    used = 0
    while budget is None or used < budget:
        c = rng.randrange(1, n - 1)
        y = rng.randrange(2, n - 1)
        r, q, g = 1, 1, 1
        x = ys = y
        while g == 1:
            x = y
            for _ in range(r):
                y = (y * y + c) % n
            k = 0
            while k < r and g == 1:
                if stop is not None and stop():
                    return None
                ys = y
                for _ in range(min(RHO_BATCH, r - k)):
                    y = (y * y + c) % n
                    q = q * abs(x - y) % n
                g = gcd(q, n)
                k += RHO_BATCH
            used += 2 * r
            r *= 2
            if budget is not None and used >= budget and g == 1:
                return None
        if g == n:
            # the batch overshot, replay it one step at a time
            while True:
                ys = (ys * ys + c) % n
                g = gcd(abs(x - ys), n)
                if g > 1:
                    break
        if 1 < g < n:
            return g
    return None


# ---------- concurrent search ----------
class _FirstFactor(object):
    """Write-once slot shared by the workers splitting one cofactor."""

    def __init__(self):
        self._lock = threading.Lock()
        self._done = threading.Event()
        self.factor = None

    def offer(self, factor: int) -> bool:
        with self._lock:
            if self.factor is not None:
                return False
            self.factor = factor
            self._done.set()
            return True

    def close(self):
        self._done.set()

    def is_closed(self) -> bool:
        return self._done.is_set()


def _search(n: int, index: int, rng: random.Random, slot: _FirstFactor,
            stop: Callable[[], bool]) -> Optional[int]:
    """
    Worker: look for a factor of n until one is found by anybody or stop() says so.
    """
    if index == 0:
        f = pollard_rho(n, rng, stop, RHO_BUDGET)
        if f is not None:
            slot.offer(f)
            return f
    curves = 0
    while not stop():
        level = min(curves // ECM_CURVES_PER_LEVEL, len(ECM_B1_SCHEDULE) - 1)
        f = ecm_trial(n, rng, ECM_B1_SCHEDULE[level], stop)
        curves += 1
        if f is not None:
            slot.offer(f)
            return f
    return None


def split_composite(n: int, workers: int = DEFAULT_WORKERS, seed: Optional[int] = None,
                    cancel: Optional[threading.Event] = None) -> int:
    """
    Find a nontrivial factor of the composite n with a pool of worker threads.

    Blocks until a worker reports a factor. Runs indefinitely on a composite
    none of the strategies can split, unless ``cancel`` is set.

    :raises FactorizationCancelled: when cancel is set before a factor is found.
    """
    slot = _FirstFactor()

    def stop():
        return slot.is_closed() or (cancel is not None and cancel.is_set())

    logger.debug("splitting %d-bit composite %d with %d workers", n.bit_length(), n, workers)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="factor") as pool:
        futures = [pool.submit(_search, n, i, seeded_rng(seed, n, i), slot, stop)
                   for i in range(workers)]
        try:
            done, _ = wait(futures, return_when=FIRST_COMPLETED)
            for future in done:
                future.result()
        finally:
            slot.close()
    if slot.factor is None:
        raise FactorizationCancelled(f"search for a factor of {n} was cancelled")
    logger.debug("found factor %d of %d", slot.factor, n)
    return slot.factor


def factorize(n: int, workers: Optional[int] = None, seed: Optional[int] = None,
              cancel: Optional[threading.Event] = None, rounds: int = MR_ROUNDS) -> Factorization:
    """
    Complete prime factorization of n.

    :param n: Integer > 1.
    :param workers: Threads racing on each hard composite, DEFAULT_WORKERS if None.
    :param seed: Makes the randomized search reproducible.
    :param cancel: Event that aborts the search when set.
    :param rounds: Miller-Rabin rounds for cofactors above 2^64.
    :raises InvalidModulus: if n <= 1.
    """
    if n <= 1:
        raise InvalidModulus(n)
    if workers is None:
        workers = DEFAULT_WORKERS
    counts, rest = trial_division(n)
    pending = [(rest, 1)] if rest > 1 else []
    while pending:
        m, mult = pending.pop()
        if is_prime(m, rounds, seed):
            counts[m] += mult
            continue
        root, k = perfect_power(m)
        if k > 1:
            pending.append((root, mult * k))
            continue
        f = fermat(m) or split_composite(m, workers, seed, cancel)
        pending.append((f, mult))
        pending.append((m // f, mult))
    result = Factorization.from_counts(counts)
    logger.debug("%d = %s", n, result)
    return result
