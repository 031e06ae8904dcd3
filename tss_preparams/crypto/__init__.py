"""
Cryptographic primitives for preparation parameter generation.

Provides implementations of:
- Primality testing and prime search
- Concurrent safe prime search
- Paillier key generation
- NTilde / h1 / h2 commitment setup
"""

from .random_source import (
    SecureRandom,
    SeededRandom,
    make_random_source
)

from .primes import (
    small_primes,
    is_probable_prime,
    miller_rabin_rounds,
    generate_prime,
    primality_test_count,
    reset_primality_test_count
)

from .safe_primes import (
    SafePrime,
    count_safe_primes,
    find_safe_primes
)

from .paillier import (
    PaillierPublicKey,
    PaillierPrivateKey,
    PaillierKeyPair,
    generate_keypair
)

from .commitment import (
    CommitmentSetup,
    generate_ntilde
)

__all__ = [
    # Randomness
    'SecureRandom',
    'SeededRandom',
    'make_random_source',
    # Primes
    'small_primes',
    'is_probable_prime',
    'miller_rabin_rounds',
    'generate_prime',
    'primality_test_count',
    'reset_primality_test_count',
    'SafePrime',
    'count_safe_primes',
    'find_safe_primes',
    # Paillier
    'PaillierPublicKey',
    'PaillierPrivateKey',
    'PaillierKeyPair',
    'generate_keypair',
    # Commitment
    'CommitmentSetup',
    'generate_ntilde'
]
