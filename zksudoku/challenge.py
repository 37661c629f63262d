"""
Challenge Generation Module

A challenge names which part of the committed board the Prover must open:
0-8 a row, 9-17 a column, 18-26 a 3x3 subgrid and 27 the puzzle clues.
The Verifier draws exactly one challenge per round, uniformly, after the
commitments are fixed.
"""

import numbers
from typing import List, Optional

from .board import (
    BOARD_SIZE,
    NUM_CELLS,
    column_indices,
    row_indices,
    subgrid_indices,
)
from .crypto_backend import RandomSource, default_random_source
from .exceptions import InvalidChallenge

NUM_CHALLENGES = 3 * BOARD_SIZE + 1
GIVENS_CHALLENGE = NUM_CHALLENGES - 1

ROW = "row"
COLUMN = "column"
SUBGRID = "subgrid"
GIVENS = "givens"


class Challenge:
    """
    One verifier challenge.

    The value is stored as given so that a faulty value can be passed
    through the protocol; kind, selector and indices raise
    InvalidChallenge when the value is out of range.
    """

    __slots__ = ('_value',)

    def __init__(self, value: int):
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    @property
    def is_valid(self) -> bool:
        return (
            isinstance(self._value, numbers.Integral)
            and not isinstance(self._value, bool)
            and 0 <= self._value < NUM_CHALLENGES
        )

    @property
    def kind(self) -> str:
        if not self.is_valid:
            raise InvalidChallenge(f"Challenge {self._value!r} outside [0, {GIVENS_CHALLENGE}]")
        if self._value < BOARD_SIZE:
            return ROW
        if self._value < 2 * BOARD_SIZE:
            return COLUMN
        if self._value < 3 * BOARD_SIZE:
            return SUBGRID
        return GIVENS

    @property
    def selector(self) -> Optional[int]:
        """1-based row/column/subgrid number, None for the givens challenge."""
        kind = self.kind
        if kind == GIVENS:
            return None
        return int(self._value) % BOARD_SIZE + 1

    @property
    def is_givens(self) -> bool:
        return self.kind == GIVENS

    def indices(self) -> List[int]:
        """
        Flat board indices opened for this challenge.

        Returns:
            9 indices for a region challenge, all 81 for the givens challenge
        """
        kind = self.kind
        if kind == ROW:
            return row_indices(self.selector)
        if kind == COLUMN:
            return column_indices(self.selector)
        if kind == SUBGRID:
            return subgrid_indices(self.selector)
        return list(range(NUM_CELLS))

    def __eq__(self, other) -> bool:
        return isinstance(other, Challenge) and other._value == self._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"Challenge({self._value!r})"


class ChallengeGenerator:
    """
    Draws verifier challenges from a cryptographically random source.

    The challenge must stay unpredictable to the Prover until its
    commitments are fixed, so it is drawn fresh for every round.
    """

    def __init__(self, random_source: Optional[RandomSource] = None):
        """
        Initialize challenge generator.

        Args:
            random_source: Source of randomness (defaults to the system CSPRNG)
        """
        self.random_source = random_source or default_random_source()

    def generate(self) -> Challenge:
        """
        Draw one challenge uniformly from [0, 27].

        Returns:
            Fresh Challenge
        """
        return Challenge(self.random_source.randbelow(NUM_CHALLENGES))


def all_challenges() -> List[Challenge]:
    return [Challenge(value) for value in range(NUM_CHALLENGES)]
