from __future__ import annotations

from typing import Iterator, Literal, Optional

from ..algebra import bits_to_indices, build_matrix
from ..board import BoardState
from .base import NoPlanError, Strategy


def chase(n: int, board: int, first_row_mask: int) -> Optional[int]:
    """Press the first row per `first_row_mask`, then chase lights down.

    Each later cell is pressed iff the cell above it is still lit. Returns
    the press set if the board ends up dark, otherwise None.
    """
    effects = build_matrix(n)
    grid = board
    presses = 0
    for c in range(n):
        if (first_row_mask >> c) & 1:
            presses |= 1 << c
            grid ^= effects[c]
    for r in range(1, n):
        for c in range(n):
            i = r * n + c
            if (grid >> (i - n)) & 1:
                presses |= 1 << i
                grid ^= effects[i]
    if grid:
        return None
    return presses


def all_solutions(n: int, board: int) -> Iterator[int]:
    """Every press set that clears `board`; the first row fixes the rest."""
    for mask in range(1 << n):
        presses = chase(n, board, mask)
        if presses is not None:
            yield presses


class ChasingLights(Strategy):
    """
    Try all possible first-row presses and chase lights down.
    Finds the minimum-weight solution if one exists.
    """

    def __init__(
        self, tie_break: Literal["min_weight", "lexicographic"] = "min_weight"
    ):
        self.plan: Optional[list[int]] = None
        self.tie_break: Literal["min_weight", "lexicographic"] = tie_break
        self.n: Optional[int] = None

    def reset(self, n: int, params: dict | None = None) -> None:
        self.n = n
        self.plan = None
        if params and "tie_break" in params:
            tb = params["tie_break"]
            if tb in ("min_weight", "lexicographic"):
                self.tie_break = tb

    def _candidate_key(self, presses: int) -> tuple:
        cells = tuple(bits_to_indices(presses))
        if self.tie_break == "min_weight":
            return (len(cells), cells)
        first_row = tuple((presses >> c) & 1 for c in range(self.n))
        return (first_row, cells)

    def _compute_plan(self, state: BoardState) -> list[int]:
        assert self.n is not None, "Strategy not initialized properly."

        best_key: Optional[tuple] = None
        best_plan: Optional[int] = None
        for presses in all_solutions(self.n, state.to_bits()):
            key = self._candidate_key(presses)
            if best_key is None or key < best_key:
                best_key, best_plan = key, presses

        self.plan = [] if best_plan is None else bits_to_indices(best_plan)
        return self.plan

    def select_action(self, state: BoardState, t: int, history) -> int:
        if self.plan is None:
            self._compute_plan(state)
        if self.plan is None or len(self.plan) == 0:
            raise NoPlanError("No valid chasing-lights plan for this board.")

        return int(self.plan.pop(0))
