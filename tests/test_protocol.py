"""
Tests for the single-round orchestration and its state machine.
"""

import logging

import pytest

from zksudoku import (
    CommitmentMismatch,
    Grid,
    NonUniqueValues,
    ProofRound,
    Prover,
    RoundState,
    SeededRandomSource,
    Statement,
    UnsolvableSudoku,
    Witness,
)


def test_honest_round_accepts(prover):
    round_ = ProofRound(prover)

    assert round_.run()
    assert round_.state is RoundState.CHECKED
    assert round_.reject_reason is None


def test_phases_in_order(prover):
    round_ = ProofRound(prover, random_source=SeededRandomSource(seed=3))

    bundle = round_.commit()
    assert round_.state is RoundState.COMMITTED
    assert round_.verifier.commitments == bundle.commitments

    challenge = round_.issue_challenge()
    assert round_.state is RoundState.CHALLENGED
    assert challenge.is_valid

    opening = round_.reveal()
    assert round_.state is RoundState.REVEALED
    assert len(opening) in (9, 81)

    assert round_.check() is True
    metrics = round_.get_metrics()
    assert metrics['state'] == 'checked'
    assert metrics['accepted'] is True
    assert metrics['challenge'] == challenge.value
    for key in ('commit_time', 'challenge_time', 'reveal_time', 'check_time'):
        assert metrics[key] >= 0.0


def test_out_of_order_calls_rejected(prover):
    round_ = ProofRound(prover)

    with pytest.raises(RuntimeError):
        round_.reveal()
    with pytest.raises(RuntimeError):
        round_.check()

    round_.run()
    # A finished round cannot be reused
    for phase in (round_.commit, round_.issue_challenge, round_.reveal, round_.check):
        with pytest.raises(RuntimeError):
            phase()


def test_unsolvable_statement_stops_round(solution):
    puzzle = Grid(solution.to_list()[:9] + [0] * 72)
    round_ = ProofRound(Prover(Statement(puzzle), Witness(solution)))

    with pytest.raises(UnsolvableSudoku):
        round_.commit()
    assert round_.state is RoundState.UNINITIALIZED


def test_cheating_prover_is_eventually_rejected(puzzle, solution, caplog):
    cells = solution.to_list()
    cells[2], cells[3] = cells[3], cells[2]
    cheater = Prover(Statement(puzzle), Witness(Grid(cells)))
    source = SeededRandomSource(seed=17)

    rejected = []
    with caplog.at_level(logging.WARNING, logger="zksudoku.protocol"):
        for _ in range(400):
            round_ = ProofRound(cheater, random_source=source)
            if not round_.run():
                rejected.append(round_)

    assert rejected
    assert all(isinstance(r.reject_reason, NonUniqueValues) for r in rejected)
    assert {r.challenge.value for r in rejected} <= {11, 12, 18, 19}
    assert "non_unique_values" in caplog.text


def test_verbose_logs_at_info(prover, caplog):
    with caplog.at_level(logging.INFO, logger="zksudoku.protocol"):
        ProofRound(prover, verbose=True).run()

    assert "Overall result: ACCEPT" in caplog.text


def test_malformed_opening_ends_round_in_reject(prover):
    round_ = ProofRound(prover, random_source=SeededRandomSource(seed=5))
    round_.commit()
    round_.issue_challenge()
    opening = round_.reveal()
    opening.randomness[0] = None

    assert round_.check() is False
    assert isinstance(round_.reject_reason, CommitmentMismatch)
    assert round_.state is RoundState.CHECKED
