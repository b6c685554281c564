from __future__ import annotations

from typing import Optional

from .algebra import build_matrix
from .board import GRID_SIZE, BoardState
from .daily import generate_daily
from .solver import compute_minimum_moves
from .strategies.base import NoPlanError


class FlipFiveGame:
    """One play session on a board, tracking moves and the best solve."""

    def __init__(
        self, start_bits: int, n: int = GRID_SIZE, date: str | None = None
    ):
        self.n = n
        self.N = n * n
        self.date = date
        self.start_bits = start_bits
        self.state_bits = start_bits
        self.moves = 0
        self.best_moves: Optional[int] = None
        self._optimal: Optional[int] = None
        self._optimal_known = False

    @classmethod
    def for_date(cls, date_str: str) -> "FlipFiveGame":
        puzzle = generate_daily(date_str)
        return cls(puzzle.start_bits, date=puzzle.date)

    @property
    def state(self) -> BoardState:
        return BoardState.from_bits(self.n, self.state_bits)

    @property
    def optimal(self) -> Optional[int]:
        """Least presses that clear the starting board, computed once."""
        if not self._optimal_known:
            self._optimal = compute_minimum_moves(self.start_bits, self.n)
            self._optimal_known = True
        return self._optimal

    def is_solved(self) -> bool:
        return self.state_bits == 0

    def press(self, i: int) -> bool:
        if not 0 <= i < self.N:
            raise IndexError(f"cell {i} outside a {self.n}x{self.n} board")
        self.state_bits ^= build_matrix(self.n)[i]
        self.moves += 1
        solved = self.is_solved()
        if solved and (self.best_moves is None or self.moves < self.best_moves):
            self.best_moves = self.moves
        return solved

    def reset(self) -> None:
        self.state_bits = self.start_bits
        self.moves = 0

    def restart(self) -> None:
        """Regenerate the puzzle from scratch and forget the best score."""
        if self.date is not None:
            self.start_bits = generate_daily(self.date, self.n).start_bits
            self._optimal_known = False
        self.reset()
        self.best_moves = None

    def run(self, policy, T: int):
        counts = [self.state.count_on()]
        actions = []
        if self.is_solved():
            return self.state, actions, counts
        for t in range(T):
            try:
                a = policy.select_action(self.state, t, counts)
            except NoPlanError:
                # Stop immediately: no action taken, no additional count appended.
                break
            solved = self.press(a)
            actions.append(a)
            counts.append(self.state.count_on())
            if solved:
                break
        return self.state, actions, counts
