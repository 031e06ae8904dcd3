"""
Paillier Cryptosystem Implementation.

Implements the Paillier public-key cryptosystem supporting:
- Homomorphic addition of ciphertexts
- Scalar multiplication of ciphertexts
- CRT-accelerated decryption

Each party publishes its Paillier public key during key generation so that
other parties can run multiplicative-to-additive conversions against it.
"""

import math
from typing import Optional, Tuple

from ..config.config import PAILLIER_MODULUS_LEN
from ..errors import ConfigurationError, PaillierGenerationError
from .primes import check_interrupt, generate_prime
from .random_source import RandomSource, SecureRandom


def _lcm(a: int, b: int) -> int:
    """Compute least common multiple of a and b."""
    return abs(a * b) // math.gcd(a, b)


def _L(x: int, n: int) -> int:
    """L function: L(x) = (x - 1) / n."""
    return (x - 1) // n


class PaillierPublicKey:
    """Paillier public key for encryption."""

    def __init__(self, n: int):
        """
        Initialize public key.

        Args:
            n: Modulus n = p * q (generator is fixed to g = n + 1)
        """
        self.n = n
        self.g = n + 1
        self.n_sq = n * n

    def random_unit(self, rng: Optional[RandomSource] = None) -> int:
        """Random r in [1, n) with gcd(r, n) = 1."""
        rng = rng or SecureRandom()
        r = rng.randrange(1, self.n)
        while math.gcd(r, self.n) != 1:
            r = rng.randrange(1, self.n)
        return r

    def encrypt_and_return_randomness(
        self,
        plaintext: int,
        r: Optional[int] = None,
        rng: Optional[RandomSource] = None
    ) -> Tuple[int, int]:
        """
        Encrypt a plaintext message.

        Args:
            plaintext: Message to encrypt (must be in [0, n))
            r: Random value for encryption (generated if not provided)
            rng: Source for r

        Returns:
            (ciphertext c = g^m * r^n mod n^2, r)
        """
        if not 0 <= plaintext < self.n:
            raise ValueError("plaintext is outside the message space [0, n)")
        if r is None:
            r = self.random_unit(rng)

        # g = n + 1, so g^m = 1 + m*n mod n^2
        g_m = (1 + plaintext * self.n) % self.n_sq
        r_n = pow(r, self.n, self.n_sq)
        return (g_m * r_n) % self.n_sq, r

    def encrypt(
        self,
        plaintext: int,
        r: Optional[int] = None,
        rng: Optional[RandomSource] = None
    ) -> int:
        ciphertext, _ = self.encrypt_and_return_randomness(plaintext, r, rng)
        return ciphertext

    def add(self, c1: int, c2: int) -> int:
        """
        Homomorphic addition: Dec(c1 * c2) = m1 + m2.

        Args:
            c1: First ciphertext
            c2: Second ciphertext

        Returns:
            Encrypted sum
        """
        return (c1 * c2) % self.n_sq

    def scalar_mult(self, c: int, scalar: int) -> int:
        """
        Scalar multiplication: Dec(c^scalar) = scalar * m.

        Args:
            c: Ciphertext
            scalar: Scalar multiplier

        Returns:
            Encrypted product
        """
        if scalar < 0:
            scalar = scalar % self.n
        return pow(c, scalar, self.n_sq)

    def __eq__(self, other) -> bool:
        return isinstance(other, PaillierPublicKey) and other.n == self.n

    def __hash__(self) -> int:
        return hash(self.n)

    def __repr__(self) -> str:
        return f'PaillierPublicKey(bits={self.n.bit_length()})'


class PaillierPrivateKey:
    """Paillier private key for decryption."""

    def __init__(self, p: int, q: int):
        """
        Initialize private key and its decryption constants.

        Args:
            p: First prime factor of n
            q: Second prime factor of n
        """
        if p == q:
            raise ValueError("Paillier primes must be distinct")
        self.public_key = PaillierPublicKey(p * q)
        self.p = p
        self.q = q
        self.n = self.public_key.n
        self.n_sq = self.public_key.n_sq

        # Euler and Carmichael totients
        self.phi = (p - 1) * (q - 1)
        self.lam = _lcm(p - 1, q - 1)
        # mu = L(g^lambda mod n^2)^{-1} mod n, with g = n + 1 this is lambda^{-1}
        self.mu = pow(self.lam, -1, self.n)

        # CRT constants
        self.p_sq = p * p
        self.q_sq = q * q
        self.p_inverse = pow(p, -1, q)
        self.hp = self._h_function(p, self.p_sq)
        self.hq = self._h_function(q, self.q_sq)

    def _h_function(self, x: int, x_sq: int) -> int:
        """h(x) = L_x(g^(x-1) mod x^2)^{-1} mod x."""
        return pow(_L(pow(self.public_key.g, x - 1, x_sq), x), -1, x)

    def decrypt(self, ciphertext: int) -> int:
        """
        Decrypt a ciphertext.

        Args:
            ciphertext: Encrypted message

        Returns:
            Decrypted plaintext in [0, n)
        """
        mp = _L(pow(ciphertext, self.p - 1, self.p_sq), self.p) * self.hp % self.p
        mq = _L(pow(ciphertext, self.q - 1, self.q_sq), self.q) * self.hq % self.q
        # Recombine with Garner's formula
        u = (mq - mp) * self.p_inverse % self.q
        return mp + u * self.p

    def __eq__(self, other) -> bool:
        return isinstance(other, PaillierPrivateKey) and (other.p, other.q) == (self.p, self.q)

    def __hash__(self) -> int:
        return hash((self.p, self.q))

    def __repr__(self) -> str:
        return f'PaillierPrivateKey(bits={self.n.bit_length()})'


class PaillierKeyPair:
    """Container for Paillier key pair."""

    def __init__(self, public_key: PaillierPublicKey, private_key: PaillierPrivateKey):
        self.public = public_key
        self.private = private_key


def generate_keypair(
    modulus_bit_length: int = PAILLIER_MODULUS_LEN,
    rng: Optional[RandomSource] = None,
    rounds: Optional[int] = None,
    max_attempts: int = 16,
    cancel_event=None,
    deadline: Optional[float] = None
) -> PaillierKeyPair:
    """
    Generate a new Paillier key pair.

    Args:
        modulus_bit_length: Exact bit length of n
        rng: Random source (default: OS randomness)
        rounds: Miller-Rabin rounds per prime (default: error <= 2^-128)
        max_attempts: Prime pairs tried before giving up
        cancel_event: Event that aborts generation when set
        deadline: time.monotonic() value after which generation aborts

    Returns:
        PaillierKeyPair containing public and private keys

    Raises:
        ConfigurationError: If the bit length is odd or below 16
        PaillierGenerationError: If no valid pair is found in max_attempts
    """
    if modulus_bit_length < 16 or modulus_bit_length % 2:
        raise ConfigurationError(
            f"modulus bit length must be an even integer >= 16, got {modulus_bit_length}"
        )
    if max_attempts < 1:
        raise ConfigurationError("max_attempts must be >= 1")

    rng = rng or SecureRandom()
    stream = rng.child('paillier')
    half = modulus_bit_length // 2

    for attempt in range(max_attempts):
        check_interrupt(cancel_event, deadline)
        p = generate_prime(half, stream.child(attempt, 0), rounds, cancel_event, deadline)
        q = generate_prime(half, stream.child(attempt, 1), rounds, cancel_event, deadline)
        if p == q:
            continue
        n = p * q
        if n.bit_length() != modulus_bit_length:
            continue
        # Guarantees lambda is invertible mod n
        if math.gcd(n, (p - 1) * (q - 1)) != 1:
            continue
        private_key = PaillierPrivateKey(p, q)
        return PaillierKeyPair(private_key.public_key, private_key)

    raise PaillierGenerationError(
        f"no valid {modulus_bit_length}-bit Paillier modulus after {max_attempts} attempts"
    )


if __name__ == '__main__':
    # Basic functionality test
    print("Testing Paillier encryption...")

    keys = generate_keypair(512)
    pk, sk = keys.public, keys.private

    # Test encryption/decryption
    m1, m2 = 42, 58
    c1 = pk.encrypt(m1)
    c2 = pk.encrypt(m2)

    assert sk.decrypt(c1) == m1, "Decryption failed"
    assert sk.decrypt(c2) == m2, "Decryption failed"

    # Test homomorphic addition
    c_sum = pk.add(c1, c2)
    assert sk.decrypt(c_sum) == m1 + m2, "Homomorphic addition failed"

    # Test scalar multiplication
    scalar = 3
    c_mult = pk.scalar_mult(c1, scalar)
    assert sk.decrypt(c_mult) == m1 * scalar, "Scalar multiplication failed"

    print("All tests passed!")
