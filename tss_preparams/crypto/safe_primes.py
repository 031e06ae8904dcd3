"""
Concurrent safe prime search.

A safe prime is p = 2q + 1 with q (the Sophie Germain component) also
prime. Candidates are tested in batches on a worker pool; batches are
merged in submission order so that a seeded random source gives the same
primes whatever the number of workers.
"""

import math
import multiprocessing
import threading
from concurrent.futures import (
    FIRST_COMPLETED,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    wait
)
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..config.config import WORKER_BACKENDS, resolve_concurrency
from ..errors import ConfigurationError, SafePrimeSearchError
from .primes import (
    ODD_PRIMORIAL,
    TRIAL_DIVISION_BOUND,
    check_interrupt,
    is_probable_prime,
    miller_rabin,
    miller_rabin_rounds,
    small_primes
)
from .random_source import RandomSource, SecureRandom


@dataclass(frozen=True)
class SafePrime:
    """Sophie Germain prime q and its safe prime p = 2q + 1."""
    q: int
    p: int

    def __post_init__(self):
        if self.p != 2 * self.q + 1:
            raise ValueError("safe prime must equal 2q + 1")

    @property
    def prime(self) -> int:
        return self.q

    @property
    def safe_prime(self) -> int:
        return self.p

    def validate(self, rounds: Optional[int] = None) -> bool:
        return is_probable_prime(self.q, rounds) and is_probable_prime(self.p, rounds)

    def __repr__(self) -> str:
        # Factors of NTilde are secret
        return f'SafePrime(bits={self.p.bit_length()})'


def is_safe_prime_candidate(
    q: int,
    rounds: Optional[int] = None,
    rng: Optional[RandomSource] = None
) -> bool:
    """Test whether q and 2q + 1 are both prime."""
    p = 2 * q + 1
    if p < TRIAL_DIVISION_BOUND:
        return is_probable_prime(q, rounds, rng) and is_probable_prime(p, rounds, rng)
    # Cheap filters first: small factors of q or p, then a base-2 round on each
    if math.gcd(q, ODD_PRIMORIAL) != 1 or math.gcd(p, ODD_PRIMORIAL) != 1:
        return False
    if not miller_rabin(q, 0, bases=(2,)) or not miller_rabin(p, 0, bases=(2,)):
        return False
    return is_probable_prime(q, rounds, rng) and is_probable_prime(p, rounds, rng)


# Longest q for which the safe primes are counted up front
COUNTABLE_BIT_LENGTH = 16


def count_safe_primes(bit_length: int) -> Optional[int]:
    """
    Number of safe primes whose Sophie Germain component has exactly
    `bit_length` bits, or None when the range is too large to sieve.
    """
    if bit_length > COUNTABLE_BIT_LENGTH:
        return None
    primes = small_primes(1 << (bit_length + 1))
    prime_set = set(primes)
    low = 1 << (bit_length - 1)
    # Candidates are forced odd, so q = 2 is never drawn
    return sum(1 for q in primes[1:] if low <= q < 2 * low and 2 * q + 1 in prime_set)


# Stop event installed in each worker process by the pool initializer
_WORKER_STOP = None


def _init_worker(stop_event):
    global _WORKER_STOP
    _WORKER_STOP = stop_event


def search_batch(
    bit_length: int,
    batch_size: int,
    rounds: int,
    rng: RandomSource,
    stop_event=None
) -> Tuple[Optional[Tuple[int, int]], int]:
    """
    Test up to batch_size random candidates for q.

    Returns:
        ((q, p) or None, number of candidates tried)
    """
    stop = stop_event if stop_event is not None else _WORKER_STOP
    top = 1 << (bit_length - 1)
    tried = 0
    for i in range(batch_size):
        if stop is not None and stop.is_set():
            break
        candidate_rng = rng.child(i)
        q = candidate_rng.randbits(bit_length) | top | 1
        tried += 1
        if is_safe_prime_candidate(q, rounds, candidate_rng):
            return (q, 2 * q + 1), tried
    return None, tried


def _make_pool(backend: str, concurrency: int):
    """Create the worker pool and the stop event its workers watch."""
    if backend == 'thread':
        stop = threading.Event()
        return ThreadPoolExecutor(max_workers=concurrency), stop, stop
    # Worker processes must not be forked from the orchestrator's threads
    ctx = multiprocessing.get_context('spawn')
    stop = ctx.Event()
    executor = ProcessPoolExecutor(
        max_workers=concurrency,
        mp_context=ctx,
        initializer=_init_worker,
        initargs=(stop,)
    )
    return executor, stop, None


def find_safe_primes(
    bit_length: int,
    count: int,
    concurrency: int,
    rng: Optional[RandomSource] = None,
    rounds: Optional[int] = None,
    backend: str = 'process',
    batch_size: int = 16,
    max_attempts: Optional[int] = None,
    cancel_event=None,
    deadline: Optional[float] = None,
    observer=None,
    poll_interval: float = 0.05
) -> List[SafePrime]:
    """
    Find `count` distinct safe primes whose Sophie Germain component has
    `bit_length` bits.

    Args:
        bit_length: Bit length of q
        count: Number of distinct safe primes required
        concurrency: Number of parallel workers (>= 1)
        rng: Random source (default: OS randomness)
        rounds: Miller-Rabin rounds (default: error <= 2^-128)
        backend: 'process' or 'thread'
        batch_size: Candidates per work item
        max_attempts: Total candidate budget (None = unbounded)
        cancel_event: Event that aborts the search when set
        deadline: time.monotonic() value after which the search aborts
        observer: Receives search statistics
        poll_interval: Seconds between cancellation checks while waiting

    Returns:
        List of `count` SafePrime values with pairwise distinct primes

    Raises:
        ConfigurationError: On invalid arguments, before any work starts
        SafePrimeSearchError: If max_attempts candidates yield too few primes
        PreparationCancelledError: If cancel_event is set
        PreparationTimeoutError: If the deadline passes
    """
    if concurrency is None:
        raise ConfigurationError("concurrency must be a positive integer, got None")
    concurrency = resolve_concurrency(concurrency)
    if bit_length < 2:
        raise ConfigurationError(f"bit_length must be >= 2, got {bit_length}")
    if count < 1:
        raise ConfigurationError(f"count must be >= 1, got {count}")
    if backend not in WORKER_BACKENDS:
        raise ConfigurationError(f"Unknown worker backend {backend!r}")
    if batch_size < 1:
        raise ConfigurationError("batch_size must be >= 1")
    if max_attempts is not None and max_attempts < 1:
        raise ConfigurationError("max_attempts must be >= 1")
    available = count_safe_primes(bit_length)
    if available is not None and available < count:
        raise ConfigurationError(
            f"only {available} safe primes have a {bit_length}-bit Sophie Germain "
            f"component, {count} requested"
        )
    check_interrupt(cancel_event, deadline)

    rng = rng or SecureRandom()
    stream = rng.child('safe-prime')
    if rounds is None:
        rounds = miller_rabin_rounds()
    max_batches = None if max_attempts is None else -(-max_attempts // batch_size)

    executor, stop, thread_stop = _make_pool(backend, concurrency)
    in_flight = {}
    finished = {}
    accepted: List[SafePrime] = []
    next_batch = 0
    next_merge = 0
    tried = 0
    duplicates = 0
    try:
        while True:
            while len(in_flight) < 2 * concurrency and (
                max_batches is None or next_batch < max_batches
            ):
                future = executor.submit(
                    search_batch, bit_length, batch_size, rounds,
                    stream.child(next_batch), thread_stop
                )
                in_flight[future] = next_batch
                next_batch += 1

            if not in_flight:
                raise SafePrimeSearchError(
                    f"found {len(accepted)} of {count} safe primes "
                    f"in {tried} candidates"
                )

            done, _ = wait(in_flight, timeout=poll_interval, return_when=FIRST_COMPLETED)
            for future in done:
                finished[in_flight.pop(future)] = future.result()

            # Merge in batch order; results past the target are never used
            while next_merge in finished:
                found, n = finished.pop(next_merge)
                next_merge += 1
                tried += n
                if found is None:
                    continue
                candidate = SafePrime(*found)
                if any(candidate.p == other.p for other in accepted):
                    duplicates += 1
                    continue
                accepted.append(candidate)
                if len(accepted) == count:
                    if observer is not None:
                        observer.record_event(
                            'safe prime search', candidates=tried,
                            duplicates=duplicates, workers=concurrency
                        )
                    return accepted

            check_interrupt(cancel_event, deadline)
    finally:
        stop.set()
        executor.shutdown(wait=True, cancel_futures=True)
