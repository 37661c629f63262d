"""
Verification Module

Verifier side of the zero-knowledge Sudoku proof: accepts a statement only
if it has a unique solution, draws the round's challenge and checks the
Prover's openings against the stored commitments and the Sudoku rules.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .board import BOARD_SIZE, NUM_CELLS, select
from .challenge import NUM_CHALLENGES, Challenge, ChallengeGenerator
from .crypto_backend import Commitment, RandomSource, default_random_source, verify
from .exceptions import (
    CommitmentMismatch,
    GivensMismatch,
    InvalidChallenge,
    NonUniqueValues,
    UnsolvableSudoku,
)
from .puzzle import solutions_count_up_to
from .types import Decommitment, Statement

logger = logging.getLogger(__name__)

Opening = Union[Decommitment, Tuple[Sequence[int], Sequence[bytes]]]


class Verifier:
    """
    Verifier for one round of the Sudoku proof.

    Holds only public data: the statement and the 81 commitments
    received from the Prover.
    """

    def __init__(
        self,
        statement: Statement,
        commitments: Iterable[Commitment],
        random_source: Optional[RandomSource] = None,
        strict_givens: bool = True
    ):
        """
        Initialize verifier.

        Args:
            statement: Public puzzle
            commitments: One commitment per cell, row-major
            random_source: Source for challenge generation
                (defaults to the system CSPRNG)
            strict_givens: Also require the opened clue cells to be a
                consistent relabeling of the puzzle clues

        Raises:
            UnsolvableSudoku: If the puzzle does not have exactly one solution
            ValueError: If there are not exactly 81 commitments
        """
        if solutions_count_up_to(statement.sudoku, 2) != 1:
            raise UnsolvableSudoku()

        commitments = tuple(commitments)
        if len(commitments) != NUM_CELLS:
            raise ValueError(f"Expected {NUM_CELLS} commitments, got {len(commitments)}")

        self.statement = statement
        self.commitments = commitments
        self.strict_givens = strict_givens
        self.challenge_generator = ChallengeGenerator(random_source or default_random_source())

    def generate_challenge(self) -> Challenge:
        """
        Draw this round's challenge.

        Returns:
            Challenge drawn uniformly from [0, 27]
        """
        challenge = self.challenge_generator.generate()
        logger.debug(f"Drew {challenge}")
        return challenge

    def check(self, challenge: Challenge, decommitment: Opening) -> None:
        """
        Check the Prover's opening for challenge.

        Checks, in order:
        1. Region challenges open 9 distinct digits in [1, 9]
        2. Every opened (digit, randomness) pair matches its commitment
           (only clue cells for the givens challenge)
        3. Givens challenge in strict mode: opened clues are a consistent
           relabeling of the puzzle clues

        Args:
            challenge: The challenge issued this round
            decommitment: Prover's opening, as Decommitment or
                (digits, randomness) pair

        Raises:
            InvalidChallenge: Challenge value outside [0, 27]
            NonUniqueValues: Region digits are not 9 distinct digits
            CommitmentMismatch: An opening does not match its commitment or is malformed
            GivensMismatch: Opened clues contradict the puzzle
        """
        if not challenge.is_valid:
            raise InvalidChallenge(
                f"Challenge {challenge.value!r} outside [0, {NUM_CHALLENGES - 1}]"
            )

        try:
            digits, randomness = decommitment
            digits = [int(d) for d in digits]
            randomness = [bytes(memoryview(r)) for r in randomness]
        except (TypeError, ValueError) as e:
            raise CommitmentMismatch(f"Malformed opening for {challenge}: {e}") from e
        indices = challenge.indices()

        if len(digits) != len(indices) or len(randomness) != len(indices):
            raise CommitmentMismatch(
                f"Expected {len(indices)} openings for {challenge}, got "
                f"{len(digits)} digits and {len(randomness)} randomness values"
            )

        if not challenge.is_givens:
            self._check_region(digits, randomness, indices)
        else:
            self._check_givens(digits, randomness)

        logger.debug(f"Accepted opening for {challenge}")

    def _check_region(
        self,
        digits: List[int],
        randomness: Sequence[bytes],
        indices: List[int]
    ) -> None:
        if len(set(digits)) != BOARD_SIZE or not all(1 <= d <= BOARD_SIZE for d in digits):
            raise NonUniqueValues(f"Region does not hold 9 distinct digits: {digits}")

        commitments = select(indices, self.commitments)
        for commitment, digit, opening in zip(commitments, digits, randomness):
            if not verify(commitment, bytes([digit]), opening):
                raise CommitmentMismatch()

    def _check_givens(self, digits: List[int], randomness: Sequence[bytes]) -> None:
        relabeling: Dict[int, int] = {}
        for index, clue in enumerate(self.statement.sudoku.cells()):
            if clue is None:
                continue
            digit = digits[index]
            if not 0 <= digit <= 255 or not verify(self.commitments[index], bytes([digit]), randomness[index]):
                raise CommitmentMismatch(f"Clue cell {index} does not match its commitment")
            relabeling.setdefault(clue, digit)
            if self.strict_givens and (
                relabeling[clue] != digit or not 1 <= digit <= BOARD_SIZE
            ):
                raise GivensMismatch(f"Clue cell {index} opened inconsistently")

        if self.strict_givens and len(set(relabeling.values())) != len(relabeling):
            raise GivensMismatch("Different clues opened to the same digit")


def soundness_error(rounds: int = 1) -> float:
    """
    Upper bound on a cheating Prover's acceptance probability.

    An invalid witness breaks at least one of the 28 challengeable
    constraints, so one round catches it with probability >= 1/28.

    Args:
        rounds: Number of independent rounds run by the caller

    Returns:
        (27/28) ** rounds
    """
    return ((NUM_CHALLENGES - 1) / NUM_CHALLENGES) ** rounds


def compute_detection_probability(rounds: int = 1) -> float:
    return 1.0 - soundness_error(rounds)
