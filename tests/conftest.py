"""
Shared fixtures for the Sudoku proof tests.
"""

import pytest

from zksudoku import Grid, Prover, SeededRandomSource, Verifier, generate

PUZZLE = (
    "53..7...."
    "6..195..."
    ".98....6."
    "8...6...3"
    "4..8.3..1"
    "7...2...6"
    ".6....28."
    "...419..5"
    "....8..79"
)

SOLUTION = (
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)


@pytest.fixture
def puzzle():
    """Known puzzle with a unique solution."""
    return Grid.from_string(PUZZLE)


@pytest.fixture
def solution():
    return Grid.from_string(SOLUTION)


@pytest.fixture
def seeded():
    return SeededRandomSource(seed=1234)


@pytest.fixture
def prover(puzzle, solution):
    return Prover.sudoku_instance(puzzle, solution)


@pytest.fixture
def bundle(prover):
    return prover.permute_and_commit()


@pytest.fixture
def verifier(prover, bundle):
    return Verifier(prover.statement, bundle.commitments)


@pytest.fixture(scope="session")
def generated_puzzle():
    """Randomly generated uniquely solvable puzzle and its solution."""
    grid = generate(SeededRandomSource(seed=2024), min_givens=28)
    return grid, grid.solution()
