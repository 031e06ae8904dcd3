"""
Randomness sources for parameter generation.

SecureRandom draws from the operating system CSPRNG and is safe to share
between threads and worker processes. SeededRandom is a reproducible source
for tests: every child stream is derived from the root seed and a label path
through numpy's SeedSequence, so workers never share generator state.
"""

import hashlib
import secrets
import threading
from typing import Tuple, Union

import numpy as np


Label = Union[int, str]


def _label_to_int(label: Label) -> int:
    if isinstance(label, int):
        return label
    digest = hashlib.sha256(label.encode('utf-8')).digest()
    return int.from_bytes(digest[:4], 'big')


class SecureRandom:
    """Operating system randomness via the secrets module."""

    def randbits(self, k: int) -> int:
        return secrets.randbits(k)

    def randbelow(self, n: int) -> int:
        return secrets.randbelow(n)

    def randrange(self, start: int, stop: int) -> int:
        """Uniform integer in [start, stop)."""
        if stop <= start:
            raise ValueError(f"empty range [{start}, {stop})")
        return start + secrets.randbelow(stop - start)

    def child(self, *labels: Label) -> 'SecureRandom':
        # The OS source has no state to split
        return self

    def __repr__(self) -> str:
        return 'SecureRandom()'


class SeededRandom:
    """
    Deterministic random source for reproducible test runs.

    Not suitable for real key material: the underlying PCG64 generator is
    not a cryptographic generator.

    Args:
        seed: Root entropy
        path: Label path identifying this stream below the root
    """

    def __init__(self, seed: int, path: Tuple[int, ...] = ()):
        self.seed = seed
        self.path = tuple(path)
        self._lock = threading.Lock()
        self._generator = None

    def _gen(self) -> np.random.Generator:
        if self._generator is None:
            sequence = np.random.SeedSequence(self.seed, spawn_key=self.path)
            self._generator = np.random.Generator(np.random.PCG64(sequence))
        return self._generator

    def randbits(self, k: int) -> int:
        if k < 0:
            raise ValueError("number of bits must be non-negative")
        if k == 0:
            return 0
        with self._lock:
            raw = self._gen().bytes((k + 7) // 8)
        return int.from_bytes(raw, 'big') >> (-k % 8)

    def randbelow(self, n: int) -> int:
        if n <= 0:
            raise ValueError("upper bound must be positive")
        k = n.bit_length()
        while True:
            value = self.randbits(k)
            if value < n:
                return value

    def randrange(self, start: int, stop: int) -> int:
        """Uniform integer in [start, stop)."""
        if stop <= start:
            raise ValueError(f"empty range [{start}, {stop})")
        return start + self.randbelow(stop - start)

    def child(self, *labels: Label) -> 'SeededRandom':
        """Independent stream for the given label path."""
        return SeededRandom(self.seed, self.path + tuple(_label_to_int(label) for label in labels))

    # Locks do not pickle; worker processes rebuild the stream from seed and path
    def __getstate__(self):
        return {'seed': self.seed, 'path': self.path}

    def __setstate__(self, state):
        self.__init__(state['seed'], state['path'])

    def __repr__(self) -> str:
        return f'SeededRandom(seed={self.seed}, path={self.path})'


RandomSource = Union[SecureRandom, SeededRandom]


def make_random_source(seed=None) -> RandomSource:
    """
    Build the random source for a run.

    Args:
        seed: None for OS randomness, an integer for a reproducible stream

    Returns:
        SecureRandom or SeededRandom
    """
    if seed is None:
        return SecureRandom()
    return SeededRandom(seed)
