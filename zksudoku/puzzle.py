"""
Sudoku Puzzle Collaborator

Grid representation, solution counting, solving and generation of
uniquely-solvable puzzles. The proof only depends on the small surface
exported here: generate, solution_of, solutions_count_up_to,
Grid.cells and Grid.to_flat_bytes.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Sequence

import numpy as np

from .board import BOARD_SIZE, BOX_SIZE, NUM_CELLS, column_indices, row_indices, subgrid_indices
from .crypto_backend import RandomSource, default_random_source

logger = logging.getLogger(__name__)

DIGITS = tuple(range(1, BOARD_SIZE + 1))

UNITS = (
    [row_indices(i) for i in DIGITS]
    + [column_indices(i) for i in DIGITS]
    + [subgrid_indices(i) for i in DIGITS]
)


def _peers_of(index: int) -> tuple:
    r, c = divmod(index, BOARD_SIZE)
    box = (r // BOX_SIZE) * BOX_SIZE + c // BOX_SIZE + 1
    peers = set(row_indices(r + 1)) | set(column_indices(c + 1)) | set(subgrid_indices(box))
    peers.discard(index)
    return tuple(sorted(peers))


PEERS = tuple(_peers_of(i) for i in range(NUM_CELLS))


class Grid:
    """
    Immutable 9x9 Sudoku board.

    Cells are stored row-major in an 81-element int8 array; 0 marks an
    empty cell.
    """

    def __init__(self, cells: Iterable):
        if not isinstance(cells, np.ndarray):
            cells = [0 if c is None else c for c in cells]
        values = np.asarray(cells, dtype=np.int64).reshape(-1)
        if values.size != NUM_CELLS:
            raise ValueError(f"Grid must have {NUM_CELLS} cells, got {values.size}")
        if values.min() < 0 or values.max() > BOARD_SIZE:
            raise ValueError("Grid cells must be digits in [0, 9]")
        self._cells = values.astype(np.int8)
        self._cells.setflags(write=False)

    @classmethod
    def from_string(cls, text: str) -> "Grid":
        """
        Parse a grid from 81 characters.

        Digits 1-9 are clues, '0' or '.' mark empty cells and whitespace
        is ignored.
        """
        chars = [ch for ch in text if not ch.isspace()]
        if len(chars) != NUM_CELLS:
            raise ValueError(f"Expected {NUM_CELLS} cells, got {len(chars)}")
        cells = []
        for ch in chars:
            if ch == '.':
                cells.append(0)
            elif ch.isdigit():
                cells.append(int(ch))
            else:
                raise ValueError(f"Invalid cell character {ch!r}")
        return cls(cells)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Grid":
        if len(rows) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in rows):
            raise ValueError("Expected 9 rows of 9 cells")
        return cls([cell for row in rows for cell in row])

    @classmethod
    def from_flat_bytes(cls, data: bytes) -> "Grid":
        return cls(np.frombuffer(bytes(data), dtype=np.uint8))

    def cells(self) -> Iterator[Optional[int]]:
        """Yield each cell in row-major order, None for empty cells."""
        for value in self._cells:
            yield int(value) if value else None

    def to_flat_bytes(self) -> bytes:
        return self._cells.astype(np.uint8).tobytes()

    def to_array(self) -> np.ndarray:
        return self._cells.copy()

    def to_list(self) -> List[int]:
        return [int(v) for v in self._cells]

    def rows(self) -> List[List[int]]:
        return self._cells.reshape(BOARD_SIZE, BOARD_SIZE).tolist()

    def givens_mask(self) -> np.ndarray:
        return self._cells != 0

    @property
    def num_givens(self) -> int:
        return int(np.count_nonzero(self._cells))

    def is_complete(self) -> bool:
        return bool(np.all(self._cells != 0))

    def is_valid_solution(self) -> bool:
        """True if every row, column and subgrid holds the digits 1-9."""
        if not self.is_complete():
            return False
        expected = np.arange(1, BOARD_SIZE + 1)
        return all(np.array_equal(np.sort(self._cells[unit]), expected) for unit in UNITS)

    def matches(self, puzzle: "Grid") -> bool:
        """True if this grid agrees with every clue of puzzle."""
        mask = puzzle.givens_mask()
        return bool(np.array_equal(self._cells[mask], puzzle._cells[mask]))

    def solutions_count_up_to(self, bound: int) -> int:
        return solutions_count_up_to(self, bound)

    def solution(self) -> "Grid":
        return solution_of(self)

    def __len__(self) -> int:
        return NUM_CELLS

    def __getitem__(self, index: int) -> int:
        return int(self._cells[index])

    def __eq__(self, other) -> bool:
        return isinstance(other, Grid) and np.array_equal(self._cells, other._cells)

    def __hash__(self) -> int:
        return hash(self.to_flat_bytes())

    def __repr__(self) -> str:
        text = ''.join(str(v) if v else '.' for v in self._cells)
        return f"Grid({text!r})"

    def __str__(self) -> str:
        lines = []
        for r, row in enumerate(self.rows()):
            if r and r % BOX_SIZE == 0:
                lines.append("------+-------+------")
            chunks = [
                ' '.join(str(v) if v else '.' for v in row[c:c + BOX_SIZE])
                for c in range(0, BOARD_SIZE, BOX_SIZE)
            ]
            lines.append(' | '.join(chunks))
        return '\n'.join(lines)


def _givens_consistent(cells: List[int]) -> bool:
    for index, value in enumerate(cells):
        if value and any(cells[p] == value for p in PEERS[index]):
            return False
    return True


def _search(
    cells: List[int],
    bound: int,
    solutions: List[List[int]],
    random_source: Optional[RandomSource] = None
) -> int:
    """
    Backtracking search over the most constrained empty cell.

    Fills cells in place while searching and restores them before
    returning. Stops once bound solutions have been found.

    Returns:
        Number of solutions found (at most bound)
    """
    best = -1
    best_candidates: List[int] = []
    for index in range(NUM_CELLS):
        if cells[index]:
            continue
        used = {cells[p] for p in PEERS[index]}
        candidates = [d for d in DIGITS if d not in used]
        if not candidates:
            return 0
        if best < 0 or len(candidates) < len(best_candidates):
            best, best_candidates = index, candidates
            if len(candidates) == 1:
                break

    if best < 0:
        solutions.append(list(cells))
        return 1

    if random_source is not None:
        random_source.shuffle(best_candidates)

    count = 0
    for digit in best_candidates:
        cells[best] = digit
        count += _search(cells, bound - count, solutions, random_source)
        if count >= bound:
            break
    cells[best] = 0
    return count


def solutions_count_up_to(grid: Grid, bound: int) -> int:
    """
    Count solutions of grid, stopping at bound.

    Args:
        grid: Puzzle to count solutions for
        bound: Maximum number of solutions to look for

    Returns:
        min(number of solutions, bound); 0 if the clues already conflict
    """
    if bound <= 0:
        return 0
    cells = grid.to_list()
    if not _givens_consistent(cells):
        return 0
    return _search(cells, bound, [])


def solution_of(grid: Grid) -> Grid:
    """
    Solve grid.

    Raises:
        ValueError: If the grid has no solution
    """
    cells = grid.to_list()
    solutions: List[List[int]] = []
    if not _givens_consistent(cells) or _search(cells, 1, solutions) == 0:
        raise ValueError("Sudoku has no solution")
    return Grid(solutions[0])


def generate(
    random_source: Optional[RandomSource] = None,
    min_givens: int = 17
) -> Grid:
    """
    Generate a random puzzle with exactly one solution.

    A random complete grid is built first; clues are then removed in random
    order as long as the puzzle stays uniquely solvable.

    Args:
        random_source: Source of randomness (defaults to the system CSPRNG)
        min_givens: Stop removing clues once this many remain

    Returns:
        Uniquely solvable puzzle
    """
    source = random_source or default_random_source()

    solutions: List[List[int]] = []
    _search([0] * NUM_CELLS, 1, solutions, source)
    cells = solutions[0]

    order = list(range(NUM_CELLS))
    source.shuffle(order)

    givens = NUM_CELLS
    for index in order:
        if givens <= min_givens:
            break
        removed = cells[index]
        cells[index] = 0
        if _search(list(cells), 2, []) != 1:
            cells[index] = removed
        else:
            givens -= 1

    logger.debug(f"Generated puzzle with {givens} givens")
    return Grid(cells)
