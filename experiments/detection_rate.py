"""
Cheating Prover Detection Rate Experiment

Measures how often a Prover without a valid witness is caught when a caller
repeats the single-round proof k times, and compares the empirical rate
with the bound 1 - (27/28)^k.

Attack types:
1. honest: Valid solution (control, must never be rejected)
2. swap: Two cells of one row exchanged (breaks 2 columns and 2 subgrids)
3. relabel: Two rows of a band exchanged (valid Sudoku, wrong clues)
4. random: Uniformly random digits

Runtime: ~1-3 minutes with the default settings
"""

import argparse
import json
import logging
import time
from datetime import datetime
from pathlib import Path

import numpy as np

from zksudoku import Grid, ProofRound, Prover, Statement, Witness, generate, soundness_error


def make_witness(attack_type: str, solution: Grid, rng: np.random.Generator) -> Grid:
    """Build the witness a Prover of the given attack type would use."""
    if attack_type == 'honest':
        return solution
    if attack_type == 'swap':
        cells = solution.to_list()
        row = int(rng.integers(0, 9)) * 9
        a, b = rng.choice(9, size=2, replace=False)
        cells[row + a], cells[row + b] = cells[row + b], cells[row + a]
        return Grid(cells)
    if attack_type == 'relabel':
        rows = solution.rows()
        rows[0], rows[1] = rows[1], rows[0]
        return Grid.from_rows(rows)
    if attack_type == 'random':
        return Grid(rng.integers(1, 10, size=81))
    raise ValueError(f"Unknown attack type {attack_type!r}")


def run_detection_experiment(
    attack_type: str,
    rounds_per_proof: int,
    num_proofs: int,
    seed: int
) -> float:
    """
    Fraction of proofs rejected in at least one of rounds_per_proof rounds.
    """
    rng = np.random.default_rng(seed)
    puzzle = generate()
    solution = puzzle.solution()

    detected = 0
    for _ in range(num_proofs):
        witness = make_witness(attack_type, solution, rng)
        prover = Prover(Statement(puzzle), Witness(witness))
        for _ in range(rounds_per_proof):
            if not ProofRound(prover).run():
                detected += 1
                break

    return detected / num_proofs


def main():
    parser = argparse.ArgumentParser(description='Cheating Prover Detection Experiment')
    parser.add_argument('--attack-types', nargs='+', default=['honest', 'swap', 'relabel', 'random'],
                        help='Attack types to test')
    parser.add_argument('--rounds', nargs='+', type=int, default=[1, 10, 28, 64],
                        help='Rounds per proof (k)')
    parser.add_argument('--proofs', type=int, default=50, help='Proofs per experiment')
    parser.add_argument('--seed', type=int, default=0, help='Seed for witness corruption')
    parser.add_argument('--output', type=str, default='results', help='Output directory')
    parser.add_argument('--verbose', action='store_true', help='Log every round')
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.ERROR,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    print("=" * 70)
    print("Cheating Prover Detection Rate Experiment")
    print("=" * 70)
    print(f"  Attack types: {', '.join(args.attack_types)}")
    print(f"  Rounds per proof: {args.rounds}")
    print(f"  Proofs per experiment: {args.proofs}")
    print()

    results = {
        'config': vars(args),
        'detection_rates': {}
    }

    start_time = time.time()

    for attack_type in args.attack_types:
        print(f"Testing {attack_type} prover...")
        results['detection_rates'][attack_type] = {}

        for k in args.rounds:
            rate = run_detection_experiment(attack_type, k, args.proofs, args.seed)
            bound = 1.0 - soundness_error(k)
            results['detection_rates'][attack_type][f'k{k}'] = {
                'detected': rate,
                'lower_bound': bound
            }
            print(f"  k={k}: {rate*100:.1f}% detected (bound {bound*100:.1f}%)")
        print()

    total_time = time.time() - start_time
    results['total_time'] = total_time

    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    results_file = output_dir / f'detection_rate_{timestamp}.json'

    with open(results_file, 'w') as f:
        json.dump(results, f, indent=2)

    print("=" * 70)
    print(f"Experiment complete in {total_time:.1f}s")
    print(f"Results saved to {results_file}")


if __name__ == '__main__':
    main()
