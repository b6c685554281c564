from __future__ import annotations

from typing import Protocol

from ..board import BoardState


class NoPlanError(Exception):
    """A strategy has no press left to offer for the current board."""


class Strategy(Protocol):
    """Anything FlipFiveGame.run can drive.

    `reset` prepares the strategy for an n x n board. `select_action` sees
    the current board, the step number and the lit-cell count after every
    press so far (starting with the initial board), and returns the cell
    to press as an index in 0..n*n-1.
    """

    def reset(self, n: int, params: dict | None = None) -> None: ...

    def select_action(
        self, state: BoardState, t: int, history: list[int]
    ) -> int: ...
