"""
Cryptographic Backend

Provides the two primitives the Sudoku proof is built on: a source of
randomness and a hash-based commitment scheme. Everything above this module
consumes randomness through an injected RandomSource so tests can swap in a
seeded generator.
"""

import hashlib
import hmac
import secrets
from abc import ABC, abstractmethod
from typing import List, MutableSequence, Optional, Tuple

import numpy as np

RANDOMNESS_BYTES = 64
DIGEST_BYTES = 32


class RandomSource(ABC):
    """
    Interface for the randomness consumed by the protocol.

    Implementations must provide uniform bytes, uniform integers below a
    bound and uniform shuffles.
    """

    @abstractmethod
    def token_bytes(self, n: int) -> bytes:
        """Return n uniformly random bytes."""

    @abstractmethod
    def randbelow(self, n: int) -> int:
        """Return an integer drawn uniformly from [0, n)."""

    @abstractmethod
    def shuffle(self, seq: MutableSequence) -> None:
        """Shuffle seq in place, uniformly over all orderings."""

    def permutation(self, n: int) -> List[int]:
        """
        Uniformly random ordering of 1..n.

        Args:
            n: Number of elements

        Returns:
            List holding each of 1..n exactly once
        """
        values = list(range(1, n + 1))
        self.shuffle(values)
        return values


class SystemRandomSource(RandomSource):
    """
    Cryptographically secure source backed by the OS entropy pool.
    """

    def token_bytes(self, n: int) -> bytes:
        return secrets.token_bytes(n)

    def randbelow(self, n: int) -> int:
        return secrets.randbelow(n)

    def shuffle(self, seq: MutableSequence) -> None:
        # Fisher-Yates with secrets.randbelow
        for i in range(len(seq) - 1, 0, -1):
            j = secrets.randbelow(i + 1)
            seq[i], seq[j] = seq[j], seq[i]


class SeededRandomSource(RandomSource):
    """
    Deterministic source for reproducible tests and experiments.

    NOT cryptographically secure. Never use it to produce real proofs.
    """

    def __init__(self, seed: int = 0):
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def token_bytes(self, n: int) -> bytes:
        return self.rng.bytes(n)

    def randbelow(self, n: int) -> int:
        if n <= 0:
            raise ValueError(f"Upper bound must be positive, got {n}")
        return int(self.rng.integers(0, n))

    def shuffle(self, seq: MutableSequence) -> None:
        for i in range(len(seq) - 1, 0, -1):
            j = self.randbelow(i + 1)
            seq[i], seq[j] = seq[j], seq[i]


_default_source: Optional[RandomSource] = None


def default_random_source() -> RandomSource:
    """Shared SystemRandomSource used when no source is injected."""
    global _default_source
    if _default_source is None:
        _default_source = SystemRandomSource()
    return _default_source


class Commitment(bytes):
    """SHA-256 digest binding one committed message."""

    def verify(self, message: bytes, randomness: "Randomness") -> bool:
        return HashCommitment.verify(self, message, randomness)

    def __repr__(self) -> str:
        return f"Commitment({self.hex()[:16]}...)"


class Randomness(bytes):
    """Opening randomness paired with exactly one Commitment."""

    def __repr__(self) -> str:
        # Do not leak the full opening into logs
        return f"Randomness({len(self)} bytes)"


class HashCommitment:
    """
    Hiding and binding commitment scheme using cryptographic hashing.

    commit(m) samples r of RANDOMNESS_BYTES bytes and returns
    C = SHA-256(m || r). Binding follows from collision resistance,
    hiding from the high-entropy r and preimage resistance.
    """

    @staticmethod
    def digest(message: bytes, randomness: bytes) -> bytes:
        hasher = hashlib.sha256()
        hasher.update(message)
        hasher.update(randomness)
        return hasher.digest()

    @staticmethod
    def commit(
        message: bytes,
        random_source: Optional[RandomSource] = None
    ) -> Tuple[Commitment, Randomness]:
        """
        Create hash commitment to message.

        Args:
            message: Bytes to commit to
            random_source: Source for the opening randomness
                (defaults to the system CSPRNG)

        Returns:
            Tuple of (commitment, randomness)
        """
        source = random_source or default_random_source()
        randomness = Randomness(source.token_bytes(RANDOMNESS_BYTES))
        commitment = Commitment(HashCommitment.digest(message, randomness))
        return commitment, randomness

    @staticmethod
    def verify(commitment: bytes, message: bytes, randomness: bytes) -> bool:
        """
        Verify hash commitment.

        Args:
            commitment: Commitment to verify against
            message: Claimed committed message
            randomness: Claimed opening randomness

        Returns:
            True if commitment matches (message, randomness)
        """
        expected = HashCommitment.digest(message, randomness)
        return hmac.compare_digest(expected, bytes(commitment))


def commit(
    message: bytes,
    random_source: Optional[RandomSource] = None
) -> Tuple[Commitment, Randomness]:
    return HashCommitment.commit(message, random_source)


def verify(commitment: bytes, message: bytes, randomness: bytes) -> bool:
    return HashCommitment.verify(commitment, message, randomness)
