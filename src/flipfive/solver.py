"""Minimum-move queries for Flip Five boards.

Boards are bit-packed ints, bit i = cell i in row-major order. An
unreachable board yields None rather than an exception; callers should
treat it as a broken puzzle.
"""
from __future__ import annotations

import logging
from typing import Optional

from .algebra import (
    bits_to_indices,
    build_matrix,
    gf2_min_weight_solution,
    gf2_solve_with_nullspace,
)
from .board import GRID_SIZE

logger = logging.getLogger(__name__)


def _solve(board: int, n: int) -> Optional[tuple[int, int]]:
    solution = gf2_solve_with_nullspace(build_matrix(n), board)
    if solution is None:
        logger.warning(
            "board %#x has no solution on a %dx%d grid", board, n, n
        )
        return None
    return gf2_min_weight_solution(solution.particular, solution.basis)


def compute_minimum_moves(board: int, n: int = GRID_SIZE) -> Optional[int]:
    """Fewest presses that clear `board`, or None if it cannot be cleared."""
    result = _solve(board, n)
    if result is None:
        return None
    return result[1]


def compute_minimum_solution(
    board: int, n: int = GRID_SIZE
) -> Optional[list[int]]:
    """One minimal set of cells to press, in ascending order."""
    result = _solve(board, n)
    if result is None:
        return None
    return bits_to_indices(result[0])


def is_solvable(board: int, n: int = GRID_SIZE) -> bool:
    return gf2_solve_with_nullspace(build_matrix(n), board) is not None
