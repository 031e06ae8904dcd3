"""
tss-preparams: preparation parameters for threshold ECDSA

Generates, once per party and ahead of time, the secret and public values a
party needs before it can join distributed key generation:

- A Paillier key pair
- Two safe primes p1 = 2q1 + 1, p2 = 2q2 + 1
- The commitment setup NTilde = p1 * p2, h1, h2 = h1^alpha mod NTilde

Main entry point:
- generate_preparation_params(concurrency=None)
"""

__version__ = '1.0.0'
__author__ = 'Anonymous'

from . import config
from . import crypto
from . import protocols
from . import utils
from .config import (
    PAILLIER_MODULUS_LEN,
    SAFE_PRIME_BIT_LEN,
    CryptoConfig,
    SearchConfig,
    PreparationConfig,
    DEFAULT_CONFIG,
    get_config,
    get_test_config
)
from .errors import (
    PreparationError,
    ConfigurationError,
    GenerationError,
    SubtaskError,
    SafePrimeSearchError,
    PaillierGenerationError,
    PreparationTimeoutError,
    PreparationCancelledError
)
from .protocols import PreparationResult, generate_preparation_params

__all__ = [
    'PAILLIER_MODULUS_LEN',
    'SAFE_PRIME_BIT_LEN',
    'CryptoConfig',
    'SearchConfig',
    'PreparationConfig',
    'DEFAULT_CONFIG',
    'get_config',
    'get_test_config',
    'PreparationError',
    'ConfigurationError',
    'GenerationError',
    'SubtaskError',
    'SafePrimeSearchError',
    'PaillierGenerationError',
    'PreparationTimeoutError',
    'PreparationCancelledError',
    'PreparationResult',
    'generate_preparation_params'
]
