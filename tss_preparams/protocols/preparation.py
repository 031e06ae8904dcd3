"""
Preparation Parameter Generation.

Runs the two expensive generation steps concurrently:
1. Paillier key generation
2. Safe prime search (two safe primes, fanned out over a worker pool)

then derives the commitment setup (NTilde, h1, h2) from the safe primes.
This can take minutes at production sizes, so parties are expected to run
it ahead of time, out of band.
"""

import threading
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..config.config import PreparationConfig, get_config, resolve_concurrency
from ..crypto.commitment import generate_ntilde
from ..crypto.paillier import PaillierPrivateKey, PaillierPublicKey, generate_keypair
from ..crypto.primes import miller_rabin_rounds
from ..crypto.random_source import make_random_source
from ..crypto.safe_primes import find_safe_primes
from ..errors import ConfigurationError, PreparationCancelledError
from ..utils.helpers import LoggingObserver


@dataclass
class PreparationResult:
    """
    Local preparation parameters of one party.

    The caller owns every secret held here and should call wipe() once the
    values have been handed to the protocol layer.
    """
    paillier_sk: Optional[PaillierPrivateKey]
    ntilde: Optional[int]
    h1: Optional[int]
    h2: Optional[int]
    # Trapdoor: h2 = h1^alpha mod ntilde, beta = alpha^{-1} mod p*q
    alpha: Optional[int] = None
    beta: Optional[int] = None
    # Sophie Germain components of the two safe primes behind ntilde
    p: Optional[int] = None
    q: Optional[int] = None

    @property
    def paillier_pk(self) -> Optional[PaillierPublicKey]:
        return None if self.paillier_sk is None else self.paillier_sk.public_key

    def validate(self) -> bool:
        return (
            self.paillier_sk is not None
            and self.ntilde is not None
            and self.h1 is not None
            and self.h2 is not None
        )

    def validate_with_proof(self) -> bool:
        return (
            self.validate()
            and self.alpha is not None
            and self.beta is not None
            and self.p is not None
            and self.q is not None
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        JSON-compatible mapping with stable field names.

        Integers are written as decimal strings. The Paillier key is stored
        as its factors; everything else about it is re-derived on load.
        """
        if not self.validate():
            raise ValueError("cannot serialize incomplete preparation parameters")

        def enc(value: Optional[int]) -> Optional[str]:
            return None if value is None else str(value)

        sk = self.paillier_sk
        return {
            'paillier_sk': {'n': str(sk.n), 'p': str(sk.p), 'q': str(sk.q)},
            'ntilde': enc(self.ntilde),
            'h1': enc(self.h1),
            'h2': enc(self.h2),
            'alpha': enc(self.alpha),
            'beta': enc(self.beta),
            'p': enc(self.p),
            'q': enc(self.q)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PreparationResult':
        """Rebuild parameters written by to_dict()."""
        def dec(key: str) -> Optional[int]:
            value = data.get(key)
            return None if value is None else int(value)

        try:
            sk_data = data['paillier_sk']
            sk = PaillierPrivateKey(int(sk_data['p']), int(sk_data['q']))
            n = int(sk_data['n'])
            values = {key: dec(key) for key in ('ntilde', 'h1', 'h2', 'alpha', 'beta', 'p', 'q')}
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError("malformed preparation parameters") from e
        if sk.n != n:
            raise ValueError("Paillier modulus does not match its factors")
        return cls(paillier_sk=sk, **values)

    def wipe(self):
        """Drop every reference to secret material held by this record."""
        # Python ints are immutable; releasing them is all the runtime allows
        self.paillier_sk = None
        self.ntilde = self.h1 = self.h2 = None
        self.alpha = self.beta = self.p = self.q = None

    def __repr__(self) -> str:
        if not self.validate():
            return 'PreparationResult(wiped)'
        return (
            f'PreparationResult(paillier_bits={self.paillier_sk.n.bit_length()}, '
            f'ntilde_bits={self.ntilde.bit_length()})'
        )


def _first_cause(failed):
    """Pick the originating error; cancellations are only consequences."""
    errors = [future.exception() for future in failed]
    for error in errors:
        if not isinstance(error, PreparationCancelledError):
            return error
    return errors[0]


def generate_preparation_params(
    concurrency: Optional[int] = None,
    config: Optional[PreparationConfig] = None,
    rng=None,
    observer=None,
    timeout: Optional[float] = None,
    keygen=None,
    prime_search=None
) -> PreparationResult:
    """
    Generate the Paillier key and commitment setup for one party.

    Args:
        concurrency: Safe prime search workers (None = config value, then CPU count)
        config: PreparationConfig (default: production parameters)
        rng: Random source (default: built from config.seed)
        observer: Receives timings (default: logs at DEBUG level)
        timeout: Overall deadline in seconds (default: config.timeout)
        keygen: Paillier key generator (default: generate_keypair)
        prime_search: Safe prime searcher (default: find_safe_primes)

    Returns:
        PreparationResult

    Raises:
        ConfigurationError: Before any work if the configuration is invalid
        SubtaskError: First failure of either generation task
        GenerationError: If the commitment setup cannot be derived
    """
    config = config or get_config()
    if concurrency is None:
        concurrency = config.search.concurrency
    concurrency = resolve_concurrency(concurrency)
    config.validate()
    if timeout is None:
        timeout = config.timeout
    elif timeout <= 0:
        raise ConfigurationError(f"timeout must be positive, got {timeout}")

    rng = rng or make_random_source(config.seed)
    observer = observer or LoggingObserver()
    keygen = keygen or generate_keypair
    prime_search = prime_search or find_safe_primes
    rounds = miller_rabin_rounds(config.crypto.primality_error_exponent)

    cancel = threading.Event()
    deadline = None if timeout is None else time.monotonic() + timeout

    def paillier_task():
        start = time.monotonic()
        keypair = keygen(
            config.crypto.paillier_modulus_bits, rng, rounds=rounds,
            max_attempts=config.paillier_max_attempts,
            cancel_event=cancel, deadline=deadline
        )
        observer.record_duration('paillier keygen', time.monotonic() - start)
        return keypair

    def safe_prime_task():
        start = time.monotonic()
        safe_primes = prime_search(
            config.crypto.safe_prime_bits, config.crypto.safe_prime_count,
            concurrency, rng, rounds=rounds, backend=config.search.backend,
            batch_size=config.search.batch_size,
            max_attempts=config.search.max_attempts,
            cancel_event=cancel, deadline=deadline, observer=observer
        )
        observer.record_duration('safe primes', time.monotonic() - start)
        return safe_primes

    executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix='preparams')
    try:
        paillier_future = executor.submit(paillier_task)
        safe_prime_future = executor.submit(safe_prime_task)
        done, _ = wait([paillier_future, safe_prime_future], return_when=FIRST_EXCEPTION)
        failed = [future for future in done if future.exception() is not None]
        if failed:
            cancel.set()
            raise _first_cause(failed)
        keypair = paillier_future.result()
        safe_primes = safe_prime_future.result()
    finally:
        # Stops a still running sibling; a no-op once both are done
        cancel.set()
        executor.shutdown(wait=True)

    start = time.monotonic()
    setup = generate_ntilde(
        safe_primes, rng.child('ntilde'),
        max_attempts=config.generator_max_attempts, rounds=rounds
    )
    observer.record_duration('ntilde', time.monotonic() - start)

    return PreparationResult(
        paillier_sk=keypair.private,
        ntilde=setup.ntilde,
        h1=setup.h1,
        h2=setup.h2,
        alpha=setup.alpha,
        beta=setup.beta,
        p=setup.p,
        q=setup.q
    )
