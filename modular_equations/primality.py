# Primality testing: trial division, Miller-Rabin, Baillie-PSW.

import hashlib
import random
from functools import lru_cache
from math import isqrt
from typing import Optional, Tuple

# Primes used for trial division before any Miller-Rabin round.
_SMALL_PRIMES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59, 61)
# Anything below the square of the next prime that survives trial division is prime.
_TRIAL_THRESHOLD = 67 * 67

# Deterministic witness sets.
_MR_BASES_32 = (2, 7, 61)
_MR_BASES_64 = (2, 325, 9375, 28178, 450775, 9780504, 1795265022)

# Random witnesses used on top of Baillie-PSW above 2^64.
MR_ROUNDS = 40


# ---------- deterministic RNG ----------
def seeded_rng(seed: Optional[int], *key: int) -> random.Random:
    """
    Deterministic RNG per (seed, key...). If seed is None, the RNG is seeded
    from the OS and every call yields a fresh stream.

    :param seed: Optional seed for reproducibility.
    :param key: Integers identifying the stream, e.g. modulus and worker id.
    :return: random.Random instance, private to the caller.
    """
    if seed is None:
        return random.Random()
    b = ":".join(str(k) for k in (seed,) + key).encode()
    h = hashlib.blake2b(b, digest_size=16).digest()
    return random.Random(int.from_bytes(h, "big"))


@lru_cache(maxsize=8)
def primes_below(limit: int) -> Tuple[int, ...]:
    """Sieve of Eratosthenes, primes p < limit."""
    if limit < 3:
        return ()
    sieve = bytearray([1]) * limit
    sieve[0] = sieve[1] = 0
    for i in range(2, isqrt(limit - 1) + 1):
        if sieve[i]:
            sieve[i * i::i] = bytearray(len(range(i * i, limit, i)))
    return tuple(i for i in range(limit) if sieve[i])


# ---------- Miller–Rabin ----------
def _split_even(n: int) -> Tuple[int, int]:
    """Write n = 2^s * d with d odd, return (d, s)."""
    d, s = n, 0
    while d % 2 == 0:
        d //= 2
        s += 1
    return d, s


def _mr_witness(a: int, n: int, d: int, s: int) -> bool:
    """
    Check if a is a Miller-Rabin witness for composite n.
    """
    x = pow(a, d, n)
    if x == 1 or x == n - 1:
        return False
    for _ in range(s - 1):
        x = (x * x) % n
        if x == n - 1:
            return False
    return True  # composite


def _passes_bases(n: int, bases) -> bool:
    d, s = _split_even(n - 1)
    for a in bases:
        a %= n
        if a == 0:
            continue
        if _mr_witness(a, n, d, s):
            return False
    return True


def is_prime(n: int, rounds: int = MR_ROUNDS, seed: Optional[int] = None) -> bool:
    """
    Primality test.

    Deterministic below 2^64. Above that, a Baillie-PSW test followed by
    ``rounds`` random Miller-Rabin witnesses; a composite passing all of
    them is possible in principle, more rounds make it less likely.

    :param n: Number to test.
    :param rounds: Random witnesses used above 2^64.
    :param seed: Seed for the random witnesses.
    :return: True if n is (probably, above 2^64) prime.
    """
    if n < 2:
        return False
    for p in _SMALL_PRIMES:
        if n % p == 0:
            return n == p
    if n < _TRIAL_THRESHOLD:
        return True
    if n < (1 << 32):
        return _passes_bases(n, _MR_BASES_32)
    if n < (1 << 64):
        return _passes_bases(n, _MR_BASES_64)
    if not bpsw(n):
        return False
    rng = seeded_rng(seed, n)
    return _passes_bases(n, (rng.randrange(2, n - 1) for _ in range(rounds)))


# ---------- Baillie-PSW probable prime test ----------
def _selfridge_params(n: int):
    """Pick D (≡1 mod 4) with Jacobi(D/n) = -1; then P=1, Q=(1-D)/4."""
    D = 5
    sign = 1
    while True:
        Ds = D * sign
        j = jacobi(Ds, n)
        if j == -1:
            break
        if j == 0 and abs(Ds) != n:
            # nontrivial gcd with n => composite
            return None
        D += 2
        sign = -sign
    P = 1
    Q = (1 - Ds) // 4  # guaranteed integer
    return P, Q


def lucas_uv(P: int, Q: int, n: int, k: int):
    """
    Fast-doubling Lucas: return (U_k, V_k, Q^k) mod n.
    Start from k=1 state (U1=1, V1=P, Q^1=Q).
    """
    if k == 0:
        return 0, 2 % n, 1
    U = 1
    V = P % n
    Qk = Q % n
    inv2 = (n + 1) // 2
    D = (P * P - 4 * Q) % n
    # skip leading '1' bit of k
    for b in bin(k)[3:]:
        # double
        U = (U * V) % n
        V = (V * V - 2 * Qk) % n
        Qk = (Qk * Qk) % n
        if b == '1':
            # increment
            U, V = ((P * U + V) * inv2) % n, ((D * U + P * V) * inv2) % n
            Qk = (Qk * Q) % n
    return U, V, Qk


def is_strong_lucas_prp(n: int, P: int, Q: int) -> bool:
    D = P * P - 4 * Q
    j = jacobi(D, n)
    if j == 0:
        return False  # nontrivial gcd => composite
    d, s = _split_even(n - j)  # n+1 if j = -1, else n-1
    U, V, Qd = lucas_uv(P, Q, n, d)
    if U % n == 0:
        return True
    for _ in range(s):
        if V % n == 0:
            return True
        V = (V * V - 2 * Qd) % n
        Qd = (Qd * Qd) % n
    return False


def bpsw(n: int) -> bool:
    """Baillie-PSW: strong base-2 test plus strong Lucas test, for odd n > 61."""
    r = isqrt(n)
    if r * r == n:
        return False
    if not _passes_bases(n, (2,)):
        return False
    params = _selfridge_params(n)
    if params is None:
        return False
    return is_strong_lucas_prp(n, *params)


# ---------- symbols (cached) ----------
@lru_cache(maxsize=200_000)
def jacobi(a: int, n: int) -> int:
    """
    Compute the Jacobi symbol (a/n).

    :param a: Numerator.
    :param n: Denominator (odd positive integer).
    :return: Jacobi symbol value.
    """
    if n <= 0 or n % 2 == 0:
        raise ValueError("n must be a positive odd integer.")
    a %= n
    result = 1
    while a:
        while a % 2 == 0:
            a //= 2
            if n % 8 in (3, 5):
                result = -result
        a, n = n, a
        if a % 4 == 3 and n % 4 == 3:
            result = -result
        a %= n
    if n == 1:
        return result
    else:
        return 0


@lru_cache(maxsize=200_000)
def legendre(a: int, p: int) -> int:
    """
    Compute the Legendre symbol (a/p) by Euler's criterion.

    :param a: Numerator.
    :param p: Odd prime denominator.
    :return: 1 if quadratic residue, -1 if not, 0 if a ≡ 0 mod p.
    """
    a %= p
    if a == 0:
        return 0
    t = pow(a, (p - 1) // 2, p)
    if t == p - 1:
        return -1
    else:
        return t
