"""
Configuration settings for preparation parameter generation.
Protocol bit lengths must match the downstream multi-party protocol.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from ..errors import ConfigurationError


# Protocol constants shared with every other party
PAILLIER_MODULUS_LEN = 2048
SAFE_PRIME_BIT_LEN = 1024
PRIMALITY_ERROR_EXPONENT = 128

# Shortest Sophie Germain component with two distinct safe primes (23, 29)
MIN_SAFE_PRIME_BITS = 5

WORKER_BACKENDS = ('process', 'thread')


@dataclass
class CryptoConfig:
    """Cryptographic parameters configuration."""
    # Bit length of the Paillier modulus N
    paillier_modulus_bits: int = PAILLIER_MODULUS_LEN
    # Bit length of the Sophie Germain component q (safe prime is 2q + 1)
    safe_prime_bits: int = SAFE_PRIME_BIT_LEN
    # Miller-Rabin false positive bound is 2^-error_exponent
    primality_error_exponent: int = PRIMALITY_ERROR_EXPONENT
    # Number of safe primes backing NTilde
    safe_prime_count: int = 2


@dataclass
class SearchConfig:
    """Safe-prime worker pool configuration."""
    # Number of workers (None = host CPU count)
    concurrency: Optional[int] = None
    # 'process' for CPU parallelism, 'thread' for in-process workers
    backend: str = 'process'
    # Candidates tested per submitted work item
    batch_size: int = 16
    # Total candidate budget (None = unbounded)
    max_attempts: Optional[int] = None


@dataclass
class PreparationConfig:
    """Complete preparation configuration."""
    crypto: CryptoConfig = field(default_factory=CryptoConfig)
    search: SearchConfig = field(default_factory=SearchConfig)

    # Overall deadline in seconds (None = no deadline)
    timeout: Optional[float] = None
    # Paillier prime pair retries
    paillier_max_attempts: int = 16
    # Resampling bound for h1 and alpha
    generator_max_attempts: int = 128
    # Seed for reproducible runs (None = OS randomness)
    seed: Optional[int] = None

    def validate(self):
        """Raise ConfigurationError if any value is unusable."""
        crypto, search = self.crypto, self.search
        if crypto.paillier_modulus_bits < 16 or crypto.paillier_modulus_bits % 2:
            raise ConfigurationError(
                f"paillier_modulus_bits must be an even integer >= 16, "
                f"got {crypto.paillier_modulus_bits}"
            )
        if crypto.safe_prime_bits < MIN_SAFE_PRIME_BITS:
            raise ConfigurationError(
                f"safe_prime_bits must be >= {MIN_SAFE_PRIME_BITS}, got {crypto.safe_prime_bits}"
            )
        if crypto.safe_prime_count != 2:
            raise ConfigurationError("NTilde requires exactly 2 safe primes")
        if crypto.primality_error_exponent < 1:
            raise ConfigurationError("primality_error_exponent must be positive")
        if search.concurrency is not None:
            resolve_concurrency(search.concurrency)
        if search.backend not in WORKER_BACKENDS:
            raise ConfigurationError(
                f"Unknown worker backend {search.backend!r}, expected one of {WORKER_BACKENDS}"
            )
        if search.batch_size < 1:
            raise ConfigurationError("batch_size must be >= 1")
        if search.max_attempts is not None and search.max_attempts < 1:
            raise ConfigurationError("max_attempts must be >= 1")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")
        if self.paillier_max_attempts < 1 or self.generator_max_attempts < 1:
            raise ConfigurationError("retry bounds must be >= 1")


# Default configuration instance
DEFAULT_CONFIG = PreparationConfig()


def resolve_concurrency(concurrency: Optional[int] = None) -> int:
    """
    Resolve the worker count for the safe-prime search.

    Args:
        concurrency: Requested worker count, or None for the host CPU count

    Returns:
        A positive worker count

    Raises:
        ConfigurationError: If concurrency is not a positive integer
    """
    if concurrency is None:
        return os.cpu_count() or 1
    # bool is an int subclass; True is not a worker count
    if isinstance(concurrency, bool) or not isinstance(concurrency, int):
        raise ConfigurationError(
            f"concurrency must be a positive integer, got {concurrency!r}"
        )
    if concurrency < 1:
        raise ConfigurationError(
            f"concurrency must be a positive integer, got {concurrency}"
        )
    return concurrency


def get_config(
    concurrency: Optional[int] = None,
    timeout: Optional[float] = None,
    backend: str = 'process',
    seed: Optional[int] = None
) -> PreparationConfig:
    """
    Get configuration with production protocol parameters.

    Args:
        concurrency: Safe-prime search workers (None = CPU count)
        timeout: Overall deadline in seconds
        backend: Worker pool backend ('process' or 'thread')
        seed: Seed for reproducible randomness (never use in production)

    Returns:
        Configured PreparationConfig instance
    """
    config = PreparationConfig()
    config.search.concurrency = concurrency
    config.search.backend = backend
    config.timeout = timeout
    config.seed = seed
    return config


def get_test_config(
    safe_prime_bits: int = 8,
    paillier_modulus_bits: int = 64,
    concurrency: Optional[int] = None,
    backend: str = 'thread',
    seed: Optional[int] = None
) -> PreparationConfig:
    """Configuration with toy bit lengths for fast tests."""
    config = get_config(concurrency=concurrency, backend=backend, seed=seed)
    config.crypto.safe_prime_bits = safe_prime_bits
    config.crypto.paillier_modulus_bits = paillier_modulus_bits
    config.search.batch_size = 4
    return config
