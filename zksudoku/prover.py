"""
Prover

Holds the public puzzle and its secret solution. Each round the Prover
relabels the solution digits with a fresh random permutation, commits to
every cell separately and later opens only the cells a challenge names.
"""

import logging
from typing import Optional

import numpy as np

from .board import select
from .challenge import Challenge
from .crypto_backend import HashCommitment, RandomSource, default_random_source
from .puzzle import Grid
from .types import Decommitment, PermutedCommittedSudoku, Statement, Witness

logger = logging.getLogger(__name__)


class Prover:
    """
    Prover side of the zero-knowledge Sudoku proof.

    The permutation used in a round is a local value of permute_and_commit
    and is never stored; reveal only needs the already permuted digits
    kept in the PermutedCommittedSudoku bundle.
    """

    def __init__(
        self,
        statement: Statement,
        witness: Witness,
        random_source: Optional[RandomSource] = None
    ):
        """
        Initialize prover.

        Args:
            statement: Public puzzle
            witness: Complete grid the Prover claims solves the puzzle
            random_source: Source of randomness (defaults to the system CSPRNG)

        Raises:
            ValueError: If the witness has empty cells
        """
        if not witness.solution.is_complete():
            raise ValueError("Witness must fill every cell")
        self.statement = statement
        self._witness = witness
        self.random_source = random_source or default_random_source()

    @classmethod
    def sudoku_instance(
        cls,
        sudoku: Grid,
        solution: Grid,
        random_source: Optional[RandomSource] = None
    ) -> "Prover":
        """
        Build a Prover for a puzzle and its solution.

        Args:
            sudoku: Public puzzle (statement)
            solution: Complete solution (witness)
            random_source: Source of randomness (defaults to the system CSPRNG)

        Returns:
            Prover instance

        Raises:
            ValueError: If solution is not a valid, complete solution of sudoku
        """
        if not solution.is_valid_solution():
            raise ValueError("Witness is not a complete, valid Sudoku solution")
        if not solution.matches(sudoku):
            raise ValueError("Witness disagrees with the puzzle's given clues")
        return cls(Statement(sudoku), Witness(solution), random_source)

    def permute_and_commit(self) -> PermutedCommittedSudoku:
        """
        Commit to a freshly relabeled copy of the solution.

        A new permutation of 1..9 and new opening randomness are drawn on
        every call, so two calls give unlinkable commitment sets.

        Returns:
            Bundle of 81 commitments, openings and permuted digits
        """
        permutation = np.array(self.random_source.permutation(9), dtype=np.int8)
        # permutation[d - 1] is the new label of digit d
        permuted = permutation[self._witness.solution.to_array() - 1]

        commitments = []
        randomness = []
        for value in permuted:
            commitment, opening = HashCommitment.commit(bytes([int(value)]), self.random_source)
            commitments.append(commitment)
            randomness.append(opening)

        logger.debug(f"Committed to {len(commitments)} permuted cells")

        return PermutedCommittedSudoku(
            commitments=tuple(commitments),
            randomness=tuple(randomness),
            permuted_sudoku=tuple(int(v) for v in permuted)
        )

    def reveal(
        self,
        permuted_sudoku: PermutedCommittedSudoku,
        challenge: Challenge
    ) -> Decommitment:
        """
        Open the cells named by challenge.

        For a row, column or subgrid challenge the 9 permuted digits and
        their randomness are returned as-is. For the givens challenge every
        cell's randomness is returned but the digit of each non-clue cell is
        masked with 0.

        Args:
            permuted_sudoku: Bundle produced by permute_and_commit
            challenge: Verifier challenge

        Returns:
            Decommitment for the challenged cells

        Raises:
            InvalidChallenge: If the challenge value is outside [0, 27]
        """
        indices = challenge.indices()

        if not challenge.is_givens:
            digits = select(indices, permuted_sudoku.permuted_sudoku)
            randomness = select(indices, permuted_sudoku.randomness)
        else:
            givens = self.statement.sudoku.givens_mask()
            digits = [
                permuted_sudoku.permuted_sudoku[i] if givens[i] else 0
                for i in indices
            ]
            randomness = list(permuted_sudoku.randomness)

        logger.debug(f"Revealed {len(digits)} cells for {challenge}")
        return Decommitment(digits=list(digits), randomness=list(randomness))
