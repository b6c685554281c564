from __future__ import annotations

import numpy as np

GRID_SIZE = 5


class BoardState:
    def __init__(self, n: int = GRID_SIZE, state: np.ndarray | None = None):
        self.n = n
        if state is None:
            self.state = np.zeros((n, n), dtype=bool)
        else:
            assert state.shape == (n, n)
            self.state = state.astype(bool, copy=True)

    def copy(self) -> "BoardState":
        return BoardState(self.n, self.state.copy())

    def to_flat(self) -> np.ndarray:
        return self.state.reshape(-1)

    @staticmethod
    def from_flat(n: int, flat: np.ndarray) -> "BoardState":
        return BoardState(n, np.asarray(flat).reshape(n, n))

    def to_bits(self) -> int:
        """Pack the grid row-major into an int, bit i = cell i."""
        flat = self.to_flat()
        return sum(1 << i for i in np.flatnonzero(flat).tolist())

    @staticmethod
    def from_bits(n: int, bits: int) -> "BoardState":
        N = n * n
        flat = np.array([(bits >> i) & 1 for i in range(N)], dtype=bool)
        return BoardState.from_flat(n, flat)

    def press(self, i: int) -> None:
        """Toggle cell i and its edge neighbours in place."""
        N = self.n * self.n
        if not 0 <= i < N:
            raise IndexError(f"cell {i} outside a {self.n}x{self.n} board")
        r, c = divmod(i, self.n)
        grid = self.state
        grid[r, c] ^= True
        if r > 0:
            grid[r - 1, c] ^= True
        if r < self.n - 1:
            grid[r + 1, c] ^= True
        if c > 0:
            grid[r, c - 1] ^= True
        if c < self.n - 1:
            grid[r, c + 1] ^= True

    def count_on(self) -> int:
        return int(self.state.sum())

    def is_solved(self) -> bool:
        return not self.state.any()

    def __eq__(self, other) -> bool:
        if not isinstance(other, BoardState):
            return NotImplemented
        return self.n == other.n and bool(np.array_equal(self.state, other.state))

    def __repr__(self):
        return f"BoardState(n={self.n}, on={self.count_on()})"

    def __str__(self) -> str:
        return "\n".join(
            "".join("1" if cell else "0" for cell in row) for row in self.state
        )
