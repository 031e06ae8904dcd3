from .config import (
    PAILLIER_MODULUS_LEN,
    SAFE_PRIME_BIT_LEN,
    PRIMALITY_ERROR_EXPONENT,
    MIN_SAFE_PRIME_BITS,
    WORKER_BACKENDS,
    CryptoConfig,
    SearchConfig,
    PreparationConfig,
    DEFAULT_CONFIG,
    resolve_concurrency,
    get_config,
    get_test_config
)

__all__ = [
    'PAILLIER_MODULUS_LEN',
    'SAFE_PRIME_BIT_LEN',
    'PRIMALITY_ERROR_EXPONENT',
    'MIN_SAFE_PRIME_BITS',
    'WORKER_BACKENDS',
    'CryptoConfig',
    'SearchConfig',
    'PreparationConfig',
    'DEFAULT_CONFIG',
    'resolve_concurrency',
    'get_config',
    'get_test_config'
]
