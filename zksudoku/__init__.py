"""
Zero-Knowledge Sudoku

Interactive commit-challenge-reveal proof that a Prover knows the solution
of a Sudoku puzzle without revealing it.
"""

from .board import get_column, get_row, get_subgrid
from .challenge import GIVENS_CHALLENGE, NUM_CHALLENGES, Challenge, ChallengeGenerator
from .crypto_backend import (
    Commitment,
    HashCommitment,
    Randomness,
    RandomSource,
    SeededRandomSource,
    SystemRandomSource,
)
from .exceptions import (
    CommitmentMismatch,
    GivensMismatch,
    InvalidChallenge,
    NonUniqueValues,
    ProofError,
    UnsolvableSudoku,
)
from .protocol import ProofRound, RoundState
from .prover import Prover
from .puzzle import Grid, generate, solution_of, solutions_count_up_to
from .types import Decommitment, PermutedCommittedSudoku, Statement, Witness
from .verifier import Verifier, compute_detection_probability, soundness_error

__version__ = "1.0.0"

__all__ = [
    'Challenge',
    'ChallengeGenerator',
    'Commitment',
    'CommitmentMismatch',
    'Decommitment',
    'GIVENS_CHALLENGE',
    'GivensMismatch',
    'Grid',
    'HashCommitment',
    'InvalidChallenge',
    'NUM_CHALLENGES',
    'NonUniqueValues',
    'PermutedCommittedSudoku',
    'ProofError',
    'ProofRound',
    'Prover',
    'RandomSource',
    'Randomness',
    'RoundState',
    'SeededRandomSource',
    'Statement',
    'SystemRandomSource',
    'UnsolvableSudoku',
    'Verifier',
    'Witness',
    'compute_detection_probability',
    'generate',
    'get_column',
    'get_row',
    'get_subgrid',
    'solution_of',
    'solutions_count_up_to',
    'soundness_error',
]
