from __future__ import annotations

from typing import Optional

from ..board import BoardState
from ..solver import compute_minimum_solution
from .base import NoPlanError, Strategy


class LinearAlgebraMinWeight(Strategy):
    """Solve the board for a minimum-weight press set upfront."""

    def __init__(self):
        self.plan: list[int] | None = None
        self.n: Optional[int] = None

    def reset(self, n: int, params: dict | None = None) -> None:
        self.n = n
        self.plan = None

    def _compute_plan(self, state: BoardState) -> None:
        assert self.n is not None, "Strategy not initialized properly."
        solution = compute_minimum_solution(state.to_bits(), self.n)
        self.plan = [] if solution is None else solution

    def select_action(self, state: BoardState, t: int, history) -> int:
        if self.plan is None:
            self._compute_plan(state)

        if self.plan is None or len(self.plan) == 0:
            raise NoPlanError("No linear algebra solution for this board.")
        return int(self.plan.pop(0))
