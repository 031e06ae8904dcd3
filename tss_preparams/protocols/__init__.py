"""
Preparation protocol for threshold ECDSA parties.

Runs Paillier key generation and the safe prime search concurrently and
derives the NTilde commitment setup from their results.
"""

from .preparation import (
    PreparationResult,
    generate_preparation_params
)

__all__ = [
    'PreparationResult',
    'generate_preparation_params'
]
