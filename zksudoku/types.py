"""
Messages and state exchanged during one proof round.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from .board import NUM_CELLS
from .crypto_backend import Commitment, Randomness
from .puzzle import Grid


@dataclass(frozen=True)
class Statement:
    """Public puzzle the proof is about."""
    sudoku: Grid


@dataclass(frozen=True)
class Witness:
    """Complete solution, known only to the Prover."""
    solution: Grid = field(repr=False)


@dataclass(frozen=True)
class PermutedCommittedSudoku:
    """
    Output of the commit phase.

    Only commitments are sent to the Verifier; randomness and the permuted
    digits stay with the Prover until a challenge is opened.
    """
    commitments: Tuple[Commitment, ...]
    randomness: Tuple[Randomness, ...] = field(repr=False)
    permuted_sudoku: Tuple[int, ...] = field(repr=False)

    def __post_init__(self):
        sizes = {len(self.commitments), len(self.randomness), len(self.permuted_sudoku)}
        if sizes != {NUM_CELLS}:
            raise ValueError(f"Expected {NUM_CELLS} commitments, openings and digits")


@dataclass(frozen=True)
class Decommitment:
    """
    Prover response to a challenge.

    Digits and randomness are parallel sequences. For a region challenge both
    have 9 entries; for the givens challenge both have 81 entries and the
    digit of every non-clue cell is 0.
    """
    digits: List[int]
    randomness: List[Randomness] = field(repr=False)

    def __iter__(self):
        # Allow `digits, randomness = decommitment`
        yield self.digits
        yield self.randomness

    def __len__(self) -> int:
        return len(self.digits)
