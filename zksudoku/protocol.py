"""
Sudoku Proof Round

Coordinates one commit-challenge-reveal-check round between a Prover and a
Verifier. A round moves strictly forward through

    UNINITIALIZED -> COMMITTED -> CHALLENGED -> REVEALED -> CHECKED

and is single-shot: to run another round, build a new ProofRound so that
the permutation and commitment randomness are fresh.
"""

import logging
import time
from enum import Enum
from typing import Any, Dict, Optional

from .challenge import Challenge
from .crypto_backend import RandomSource
from .exceptions import ProofError
from .prover import Prover
from .types import Decommitment, PermutedCommittedSudoku
from .verifier import Verifier

logger = logging.getLogger(__name__)


class RoundState(Enum):
    UNINITIALIZED = "uninitialized"
    COMMITTED = "committed"
    CHALLENGED = "challenged"
    REVEALED = "revealed"
    CHECKED = "checked"


class ProofRound:
    """
    Main coordinator for a single proof round.

    The protocol operates in four phases:
    1. Commit: Prover commits to a permuted copy of its solution
    2. Challenge: Verifier draws one of 28 challenges
    3. Reveal: Prover opens the challenged cells
    4. Check: Verifier accepts or rejects with a specific reason
    """

    def __init__(
        self,
        prover: Prover,
        random_source: Optional[RandomSource] = None,
        strict_givens: bool = True,
        verbose: bool = False
    ):
        """
        Initialize proof round.

        Args:
            prover: Prover holding statement and witness
            random_source: Verifier randomness (defaults to the system CSPRNG)
            strict_givens: Passed through to the Verifier
            verbose: Log phase summaries at INFO instead of DEBUG
        """
        self.prover = prover
        self.random_source = random_source
        self.strict_givens = strict_givens
        self.verbose = verbose

        self.state = RoundState.UNINITIALIZED
        self.bundle: Optional[PermutedCommittedSudoku] = None
        self.verifier: Optional[Verifier] = None
        self.challenge: Optional[Challenge] = None
        self.decommitment: Optional[Decommitment] = None
        self.accepted: Optional[bool] = None
        self.reject_reason: Optional[ProofError] = None
        self.timings: Dict[str, float] = {}

    def _log(self, message: str) -> None:
        logger.log(logging.INFO if self.verbose else logging.DEBUG, message)

    def _require(self, expected: RoundState, phase: str) -> None:
        if self.state is not expected:
            raise RuntimeError(
                f"Cannot {phase}: round is {self.state.value}, expected {expected.value}"
            )

    def commit(self) -> PermutedCommittedSudoku:
        """
        Commit phase.

        Builds the Verifier from the statement and the 81 commitments.

        Raises:
            UnsolvableSudoku: If the statement is not uniquely solvable
        """
        self._require(RoundState.UNINITIALIZED, "commit")
        start_time = time.time()

        self.bundle = self.prover.permute_and_commit()
        self.verifier = Verifier(
            self.prover.statement,
            self.bundle.commitments,
            random_source=self.random_source,
            strict_givens=self.strict_givens
        )

        self.timings['commit_time'] = time.time() - start_time
        self.state = RoundState.COMMITTED
        self._log(f"Prover: Committed to 81 cells in {self.timings['commit_time']:.3f}s")
        return self.bundle

    def issue_challenge(self) -> Challenge:
        """
        Challenge phase.

        Returns:
            The challenge drawn by the Verifier
        """
        self._require(RoundState.COMMITTED, "issue challenge")
        start_time = time.time()

        self.challenge = self.verifier.generate_challenge()

        self.timings['challenge_time'] = time.time() - start_time
        self.state = RoundState.CHALLENGED
        self._log(f"Verifier: Issued {self.challenge}")
        return self.challenge

    def reveal(self) -> Decommitment:
        """
        Reveal phase.

        Returns:
            The Prover's opening of the challenged cells

        Raises:
            InvalidChallenge: If the challenge value is outside [0, 27]
        """
        self._require(RoundState.CHALLENGED, "reveal")
        start_time = time.time()

        self.decommitment = self.prover.reveal(self.bundle, self.challenge)

        self.timings['reveal_time'] = time.time() - start_time
        self.state = RoundState.REVEALED
        self._log(f"Prover: Opened {len(self.decommitment)} cells in {self.timings['reveal_time']:.3f}s")
        return self.decommitment

    def check(self) -> bool:
        """
        Check phase. Terminal: the round cannot be resumed afterwards.

        Returns:
            True if the Verifier accepted, False otherwise
        """
        self._require(RoundState.REVEALED, "check")
        start_time = time.time()

        try:
            self.verifier.check(self.challenge, self.decommitment)
        except ProofError as e:
            self.accepted = False
            self.reject_reason = e
            logger.warning(f"Verifier: Rejected {self.challenge}: {e.reason}")
        else:
            self.accepted = True

        self.timings['check_time'] = time.time() - start_time
        self.state = RoundState.CHECKED
        self._log(f"Verifier: Overall result: {'ACCEPT' if self.accepted else 'REJECT'}")
        return self.accepted

    def run(self) -> bool:
        """Run all four phases and return whether the Verifier accepted."""
        self.commit()
        self.issue_challenge()
        self.reveal()
        return self.check()

    def get_metrics(self) -> Dict[str, Any]:
        """
        Get round metrics.

        Returns:
            Dictionary with state, challenge, outcome and phase timings
        """
        return {
            'state': self.state.value,
            'challenge': None if self.challenge is None else self.challenge.value,
            'accepted': self.accepted,
            'reject_reason': None if self.reject_reason is None else self.reject_reason.reason,
            **self.timings
        }
