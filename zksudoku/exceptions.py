"""
Reject reasons of the Sudoku proof.

Every error is local to one round. Callers branch on the exception class
(or on its ``reason`` string) and start a fresh round if they want to retry.
"""


class ProofError(Exception):
    """Base class for all protocol failures."""

    reason = "proof_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__doc__)


class UnsolvableSudoku(ProofError):
    """Statement does not have exactly one solution."""

    reason = "unsolvable_sudoku"


class InvalidChallenge(ProofError):
    """Challenge value outside [0, 27]."""

    reason = "invalid_challenge"


class NonUniqueValues(ProofError):
    """Revealed region does not hold 9 distinct digits."""

    reason = "non_unique_values"


class CommitmentMismatch(ProofError):
    """Opened value does not match its commitment."""

    reason = "commitment_mismatch"


class GivensMismatch(ProofError):
    """Opened clue cells are not a consistent relabeling of the puzzle clues."""

    reason = "givens_mismatch"
