"""
Board Partition Utilities

Pure functions selecting a row, column or 3x3 subgrid out of any flat
81-element sequence (digits, randomness, commitments). Prover and Verifier
both go through region_indices so they always agree on which 9 cells a
challenge names.
"""

from typing import List, Sequence, TypeVar

BOARD_SIZE = 9
BOX_SIZE = 3
NUM_CELLS = BOARD_SIZE * BOARD_SIZE

T = TypeVar('T')


def _check_selector(selector: int, name: str) -> None:
    if not 1 <= selector <= BOARD_SIZE:
        raise ValueError(f"{name} selector must be in [1, 9], got {selector}")


def _check_board(board: Sequence) -> None:
    if len(board) != NUM_CELLS:
        raise ValueError(f"Board must have {NUM_CELLS} cells, got {len(board)}")


def row_indices(row: int) -> List[int]:
    _check_selector(row, "Row")
    start = (row - 1) * BOARD_SIZE
    return list(range(start, start + BOARD_SIZE))


def column_indices(column: int) -> List[int]:
    _check_selector(column, "Column")
    return [r * BOARD_SIZE + (column - 1) for r in range(BOARD_SIZE)]


def subgrid_indices(subgrid: int) -> List[int]:
    """
    Flat indices of a 3x3 subgrid in row-major order.

    Subgrids are numbered 1..9 left to right, top to bottom.
    """
    _check_selector(subgrid, "Subgrid")
    start_row = (subgrid - 1) // BOX_SIZE * BOX_SIZE
    start_col = (subgrid - 1) % BOX_SIZE * BOX_SIZE
    return [
        (start_row + i) * BOARD_SIZE + start_col + j
        for i in range(BOX_SIZE)
        for j in range(BOX_SIZE)
    ]


def get_row(row: int, board: Sequence[T]) -> List[T]:
    """
    Select one row of the board.

    Args:
        row: 1-based row number
        board: Flat row-major sequence of 81 elements

    Returns:
        The 9 elements of that row
    """
    _check_board(board)
    return [board[i] for i in row_indices(row)]


def get_column(column: int, board: Sequence[T]) -> List[T]:
    """
    Select one column of the board.

    Args:
        column: 1-based column number
        board: Flat row-major sequence of 81 elements

    Returns:
        The 9 elements of that column, top to bottom
    """
    _check_board(board)
    return [board[i] for i in column_indices(column)]


def get_subgrid(subgrid: int, board: Sequence[T]) -> List[T]:
    """
    Select one 3x3 subgrid of the board.

    Args:
        subgrid: 1-based subgrid number, left to right, top to bottom
        board: Flat row-major sequence of 81 elements

    Returns:
        The 9 elements of that subgrid in row-major order
    """
    _check_board(board)
    return [board[i] for i in subgrid_indices(subgrid)]


def select(indices: Sequence[int], board: Sequence[T]) -> List[T]:
    """Pick the elements at indices out of an 81-element board."""
    _check_board(board)
    return [board[i] for i in indices]
