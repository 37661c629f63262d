"""
Tests for the Verifier: statement acceptance and opening checks.
"""

import pytest

from zksudoku import (
    Challenge,
    CommitmentMismatch,
    Decommitment,
    GivensMismatch,
    Grid,
    InvalidChallenge,
    NonUniqueValues,
    Prover,
    SeededRandomSource,
    Statement,
    UnsolvableSudoku,
    Verifier,
    Witness,
    compute_detection_probability,
    soundness_error,
)
from zksudoku.challenge import all_challenges


def test_completeness_for_every_challenge(prover, bundle, verifier):
    for challenge in all_challenges():
        verifier.check(challenge, prover.reveal(bundle, challenge))


def test_completeness_on_generated_puzzle(generated_puzzle):
    grid, solution = generated_puzzle
    prover = Prover.sudoku_instance(grid, solution)
    bundle = prover.permute_and_commit()
    verifier = Verifier(prover.statement, bundle.commitments)

    for challenge in all_challenges():
        verifier.check(challenge, prover.reveal(bundle, challenge))


def test_accepts_tuple_openings(prover, bundle, verifier):
    digits, randomness = prover.reveal(bundle, Challenge(3))
    verifier.check(Challenge(3), (digits, randomness))


def test_first_row_scenario(prover, bundle, verifier, solution):
    """Open the first row, then tamper with one randomness byte."""
    challenge = Challenge(0)
    digits, randomness = prover.reveal(bundle, challenge)

    relabeling = dict(zip(solution.cells(), bundle.permuted_sudoku))
    assert sorted(digits) == sorted(relabeling[d] for d in range(1, 10))
    verifier.check(challenge, (digits, randomness))

    tampered = list(randomness)
    corrupted = bytearray(tampered[4])
    corrupted[0] ^= 0xFF
    tampered[4] = bytes(corrupted)
    with pytest.raises(CommitmentMismatch):
        verifier.check(challenge, (digits, tampered))


def test_rejects_unsolvable_statement(bundle):
    cells = [0] * 81
    cells[0] = cells[1] = 5
    with pytest.raises(UnsolvableSudoku):
        Verifier(Statement(Grid(cells)), bundle.commitments)


def test_rejects_statement_with_multiple_solutions(bundle, solution):
    grid = Grid(solution.to_list()[:9] + [0] * 72)
    with pytest.raises(UnsolvableSudoku):
        Verifier(Statement(grid), bundle.commitments)


def test_rejects_wrong_number_of_commitments(prover, bundle):
    with pytest.raises(ValueError):
        Verifier(prover.statement, bundle.commitments[:80])


def test_duplicate_digits_rejected(prover, bundle, verifier):
    challenge = Challenge(12)
    digits, randomness = prover.reveal(bundle, challenge)
    digits[1] = digits[0]

    with pytest.raises(NonUniqueValues):
        verifier.check(challenge, (digits, randomness))


def test_out_of_range_digits_rejected(prover, bundle, verifier):
    challenge = Challenge(20)
    digits, randomness = prover.reveal(bundle, challenge)
    digits[digits.index(9)] = 10

    with pytest.raises(NonUniqueValues):
        verifier.check(challenge, (digits, randomness))


def test_swapped_digits_rejected(prover, bundle, verifier):
    challenge = Challenge(22)
    digits, randomness = prover.reveal(bundle, challenge)
    digits[0], digits[1] = digits[1], digits[0]

    with pytest.raises(CommitmentMismatch):
        verifier.check(challenge, (digits, randomness))


@pytest.mark.parametrize("value", [0, 9, 18, 27])
def test_wrong_opening_length_rejected(prover, bundle, verifier, value):
    challenge = Challenge(value)
    digits, randomness = prover.reveal(bundle, challenge)

    with pytest.raises(CommitmentMismatch):
        verifier.check(challenge, (digits[:-1], randomness[:-1]))


@pytest.mark.parametrize("value", [28, 200, -3])
def test_invalid_challenge(prover, bundle, verifier, value):
    opening = prover.reveal(bundle, Challenge(0))
    with pytest.raises(InvalidChallenge):
        verifier.check(Challenge(value), opening)


def test_givens_tampered_clue_rejected(prover, bundle, verifier, puzzle):
    challenge = Challenge(27)
    digits, randomness = prover.reveal(bundle, challenge)
    first_clue = next(i for i, v in enumerate(puzzle.cells()) if v is not None)
    digits[first_clue] = digits[first_clue] % 9 + 1

    with pytest.raises(CommitmentMismatch):
        verifier.check(challenge, (digits, randomness))


def test_givens_ignores_empty_cells(prover, bundle, verifier, puzzle):
    challenge = Challenge(27)
    digits, randomness = prover.reveal(bundle, challenge)
    empty = next(i for i, v in enumerate(puzzle.cells()) if v is None)
    randomness[empty] = b"\x00" * 64

    verifier.check(challenge, Decommitment(digits, randomness))


def _wrong_witness_prover(puzzle, solution):
    # Rows 1 and 2 swapped: still a valid Sudoku, but it breaks the clues
    rows = solution.rows()
    rows[0], rows[1] = rows[1], rows[0]
    return Prover(Statement(puzzle), Witness(Grid.from_rows(rows)))


def test_givens_mismatch_detected(puzzle, solution):
    prover = _wrong_witness_prover(puzzle, solution)
    bundle = prover.permute_and_commit()
    verifier = Verifier(prover.statement, bundle.commitments)
    challenge = Challenge(27)

    with pytest.raises(GivensMismatch):
        verifier.check(challenge, prover.reveal(bundle, challenge))

    # Every region challenge still passes: only the givens check catches it
    for value in range(27):
        verifier.check(Challenge(value), prover.reveal(bundle, Challenge(value)))


def test_lenient_givens_check(puzzle, solution):
    prover = _wrong_witness_prover(puzzle, solution)
    bundle = prover.permute_and_commit()
    verifier = Verifier(prover.statement, bundle.commitments, strict_givens=False)

    verifier.check(Challenge(27), prover.reveal(bundle, Challenge(27)))


def test_invalid_witness_caught_by_column(puzzle, solution):
    # Swap two cells of row 1: row stays valid, columns 3 and 4 break
    cells = solution.to_list()
    cells[2], cells[3] = cells[3], cells[2]
    prover = Prover(Statement(puzzle), Witness(Grid(cells)))
    bundle = prover.permute_and_commit()
    verifier = Verifier(prover.statement, bundle.commitments)

    verifier.check(Challenge(0), prover.reveal(bundle, Challenge(0)))
    with pytest.raises(NonUniqueValues):
        verifier.check(Challenge(11), prover.reveal(bundle, Challenge(11)))


def test_generate_challenge_seeded(prover, bundle):
    first = Verifier(prover.statement, bundle.commitments, SeededRandomSource(seed=1))
    second = Verifier(prover.statement, bundle.commitments, SeededRandomSource(seed=1))

    draws = [first.generate_challenge() for _ in range(50)]
    assert draws == [second.generate_challenge() for _ in range(50)]
    assert all(c.is_valid for c in draws)


def test_soundness_error():
    assert soundness_error(1) == pytest.approx(27 / 28)
    assert soundness_error(0) == 1.0
    assert soundness_error(500) < 1e-7
    assert compute_detection_probability(1) == pytest.approx(1 / 28)


def test_malformed_randomness_rejected(prover, bundle, verifier):
    challenge = Challenge(0)
    digits, randomness = prover.reveal(bundle, challenge)
    randomness[0] = None

    with pytest.raises(CommitmentMismatch):
        verifier.check(challenge, (digits, randomness))


def test_malformed_digit_rejected(prover, bundle, verifier, puzzle):
    challenge = Challenge(27)
    digits, randomness = prover.reveal(bundle, challenge)
    first_clue = next(i for i, v in enumerate(puzzle.cells()) if v is not None)
    digits[first_clue] = "x"

    with pytest.raises(CommitmentMismatch):
        verifier.check(challenge, (digits, randomness))


def test_malformed_opening_shape_rejected(verifier):
    with pytest.raises(CommitmentMismatch):
        verifier.check(Challenge(4), (None, None))
    with pytest.raises(CommitmentMismatch):
        verifier.check(Challenge(4), ([1, 2, 3],))


def test_givens_merged_clues_rejected(puzzle, solution):
    """Clues 1 and 2 both open to the same digit when the witness merges them."""
    cells = [1 if v == 2 else v for v in solution.to_list()]
    prover = Prover(Statement(puzzle), Witness(Grid(cells)))
    bundle = prover.permute_and_commit()
    verifier = Verifier(prover.statement, bundle.commitments)
    challenge = Challenge(27)

    with pytest.raises(GivensMismatch, match="same digit"):
        verifier.check(challenge, prover.reveal(bundle, challenge))
