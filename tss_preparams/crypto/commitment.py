"""
Trapdoor commitment setup (NTilde, h1, h2).

NTilde is the product of two safe primes; h2 = h1^alpha mod NTilde for a
secret alpha. Range proofs in the signing protocol commit against these
values, and alpha is the trapdoor linking the two generators.
"""

import math
from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..errors import GenerationError
from .random_source import RandomSource, SecureRandom
from .safe_primes import SafePrime


@dataclass(frozen=True)
class CommitmentSetup:
    """NTilde, its two generators and the retained trapdoor."""
    ntilde: int = field(repr=False)
    h1: int = field(repr=False)
    h2: int = field(repr=False)
    # h2 = h1^alpha mod NTilde; beta = alpha^{-1} mod p*q
    alpha: int = field(repr=False)
    beta: int = field(repr=False)
    # Sophie Germain components of the two safe primes
    p: int = field(repr=False)
    q: int = field(repr=False)

    def __repr__(self) -> str:
        return f'CommitmentSetup(bits={self.ntilde.bit_length()})'


def _sample_unit(modulus: int, rng: RandomSource, max_attempts: int, what: str) -> int:
    """Uniform element of [1, modulus) coprime to modulus."""
    for _ in range(max_attempts):
        value = rng.randrange(1, modulus)
        if math.gcd(value, modulus) == 1:
            return value
    raise GenerationError(f"no invertible {what} after {max_attempts} attempts")


def generate_ntilde(
    safe_primes: Sequence[SafePrime],
    rng: Optional[RandomSource] = None,
    max_attempts: int = 128,
    rounds: Optional[int] = None
) -> CommitmentSetup:
    """
    Derive the commitment setup from two safe primes.

    Args:
        safe_primes: Exactly two SafePrime values with distinct primes
        rng: Random source (default: OS randomness)
        max_attempts: Resampling bound for h1 and for alpha
        rounds: Miller-Rabin rounds used to re-check the primes

    Returns:
        CommitmentSetup with ntilde = p1 * p2 and h2 = h1^alpha mod ntilde

    Raises:
        GenerationError: On bad input primes or exhausted resampling
    """
    if len(safe_primes) != 2:
        raise GenerationError(f"NTilde needs two safe primes, got {len(safe_primes)}")
    first, second = safe_primes
    if not first.validate(rounds) or not second.validate(rounds):
        raise GenerationError("NTilde factors must be safe primes")
    if first.p == second.p:
        raise GenerationError("NTilde factors must be distinct")

    rng = rng or SecureRandom()
    ntilde = first.p * second.p
    # alpha must be invertible in the order of the quadratic residues
    order = first.q * second.q

    h1 = _sample_unit(ntilde, rng, max_attempts, 'h1')
    for _ in range(max_attempts):
        alpha = rng.randrange(1, ntilde)
        if math.gcd(alpha, order) == 1:
            break
    else:
        raise GenerationError(f"no invertible alpha after {max_attempts} attempts")
    beta = pow(alpha, -1, order)
    h2 = pow(h1, alpha, ntilde)

    return CommitmentSetup(
        ntilde=ntilde, h1=h1, h2=h2, alpha=alpha, beta=beta,
        p=first.q, q=second.q
    )
