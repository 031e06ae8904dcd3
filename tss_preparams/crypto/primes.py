"""
Primality testing and ordinary prime generation.

Provides:
- A numpy sieve of small primes used for trial division
- Miller-Rabin with a configurable number of random bases
- Random prime search with cooperative cancellation

Shared by the Paillier key generator and the safe-prime searcher.
"""

import math
import threading
import time
from typing import Iterable, Optional

import numpy as np

from ..config.config import PRIMALITY_ERROR_EXPONENT
from ..errors import PreparationCancelledError, PreparationTimeoutError
from .random_source import RandomSource, SecureRandom


SMALL_PRIME_LIMIT = 1 << 13


def small_primes(limit: int) -> list:
    """
    Primes <= limit (sieve of Eratosthenes).

    Args:
        limit: Inclusive upper bound

    Returns:
        Sorted list of primes as Python ints
    """
    if limit < 2:
        return []
    sieve = np.ones(limit + 1, dtype=bool)
    sieve[:2] = False
    for i in range(2, math.isqrt(limit) + 1):
        if sieve[i]:
            sieve[i * i::i] = False
    return [int(p) for p in np.flatnonzero(sieve)]


SMALL_PRIMES = small_primes(SMALL_PRIME_LIMIT)
# Product of the odd small primes; one gcd replaces the trial division loop
ODD_PRIMORIAL = math.prod(SMALL_PRIMES[1:])
# Below this bound trial division alone decides primality
TRIAL_DIVISION_BOUND = SMALL_PRIMES[-1] ** 2


class _Counter:
    """Thread-safe call counter for instrumentation."""

    def __init__(self):
        self._lock = threading.Lock()
        self.value = 0

    def increment(self):
        with self._lock:
            self.value += 1

    def reset(self):
        with self._lock:
            self.value = 0


_PRIMALITY_TESTS = _Counter()


def primality_test_count() -> int:
    """Number of is_probable_prime calls made in this process."""
    return _PRIMALITY_TESTS.value


def reset_primality_test_count():
    _PRIMALITY_TESTS.reset()


def miller_rabin_rounds(error_exponent: int = PRIMALITY_ERROR_EXPONENT) -> int:
    """Rounds needed for a worst-case error of at most 2^-error_exponent."""
    # Each round lets a composite through with probability <= 1/4
    return (error_exponent + 1) // 2


def trial_division(n: int) -> Optional[bool]:
    """
    Decide n by small prime division where possible.

    Returns:
        False if composite, True if proven prime, None if undecided
    """
    if n < 2:
        return False
    for p in SMALL_PRIMES:
        if p * p > n:
            return True
        if n % p == 0:
            return n == p
    return None


def miller_rabin(
    n: int,
    rounds: int,
    rng: Optional[RandomSource] = None,
    bases: Iterable[int] = ()
) -> bool:
    """
    Miller-Rabin probable prime test.

    Args:
        n: Odd number > 3 to test
        rounds: Number of random bases
        rng: Source for the random bases
        bases: Fixed bases tried before the random ones

    Returns:
        True if probably prime, False if composite
    """
    # Write n-1 as 2^s * d
    d = n - 1
    s = (d & -d).bit_length() - 1
    d >>= s

    def is_witness(a: int) -> bool:
        x = pow(a, d, n)
        if x == 1 or x == n - 1:
            return False
        for _ in range(s - 1):
            x = x * x % n
            if x == n - 1:
                return False
        return True

    for a in bases:
        if is_witness(a % n):
            return False

    rng = rng or SecureRandom()
    for _ in range(rounds):
        if is_witness(rng.randrange(2, n - 1)):
            return False
    return True


def is_probable_prime(
    n: int,
    rounds: Optional[int] = None,
    rng: Optional[RandomSource] = None
) -> bool:
    """
    Primality test with negligible false positive probability.

    Small numbers are decided exactly by trial division; larger ones go
    through Miller-Rabin with `rounds` random bases (default: enough for
    2^-128).
    """
    _PRIMALITY_TESTS.increment()
    verdict = trial_division(n) if n < TRIAL_DIVISION_BOUND else None
    if verdict is not None:
        return verdict
    if math.gcd(n, 2 * ODD_PRIMORIAL) != 1:
        return False
    if rounds is None:
        rounds = miller_rabin_rounds()
    return miller_rabin(n, rounds, rng)


def check_interrupt(cancel_event=None, deadline: Optional[float] = None):
    """
    Raise if the caller asked to stop or the deadline passed.

    Args:
        cancel_event: threading.Event shared with a sibling task
        deadline: time.monotonic() value after which work stops
    """
    if cancel_event is not None and cancel_event.is_set():
        raise PreparationCancelledError("generation cancelled")
    if deadline is not None and time.monotonic() >= deadline:
        raise PreparationTimeoutError("generation deadline exceeded")


def generate_prime(
    bits: int,
    rng: Optional[RandomSource] = None,
    rounds: Optional[int] = None,
    cancel_event=None,
    deadline: Optional[float] = None
) -> int:
    """
    Generate a prime with exactly `bits` bits and its top two bits set.

    With the top two bits set, the product of two such primes has exactly
    2 * bits bits.

    Raises:
        PreparationCancelledError: If cancel_event is set between candidates
        PreparationTimeoutError: If the deadline passes between candidates
    """
    if bits < 2:
        raise ValueError(f"prime bit length must be >= 2, got {bits}")
    rng = rng or SecureRandom()
    top = 3 << (bits - 2)
    while True:
        check_interrupt(cancel_event, deadline)
        candidate = rng.randbits(bits) | top | 1
        if is_probable_prime(candidate, rounds, rng):
            return candidate
