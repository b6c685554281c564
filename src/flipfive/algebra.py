from __future__ import annotations

import functools
import itertools
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .board import GRID_SIZE

# Enumeration of the null space is 2**k; refuse anything past this.
MAX_NULLITY = 20


class NullSpaceTooLargeError(ValueError):
    """Raised when the solution coset is too large to enumerate."""

    pass


class LinearSolution(NamedTuple):
    particular: int
    basis: List[int]
    pivots: List[int]
    free: List[int]


def neighbours(n: int, i: int) -> list[int]:
    r, c = divmod(i, n)
    neigh = [i]
    if r > 0:
        neigh.append(i - n)
    if r < n - 1:
        neigh.append(i + n)
    if c > 0:
        neigh.append(i - 1)
    if c < n - 1:
        neigh.append(i + 1)
    return neigh


@functools.lru_cache(maxsize=None)
def build_matrix(n: int = GRID_SIZE) -> Tuple[int, ...]:
    """Return the effect matrix of an n x n board as N row masks.

    Bit p of row t is set when pressing p toggles cell t. The toggle rule
    is symmetric, so row t and column t carry the same mask. The tuple is
    built once per size and shared by every caller.
    """
    N = n * n
    rows = [0] * N
    for p in range(N):
        for t in neighbours(n, p):
            rows[t] |= 1 << p
    return tuple(rows)


def build_A(n: int = GRID_SIZE) -> np.ndarray:
    """Dense N x N uint8 copy of build_matrix(n), A[i, j] = bit j of row i."""
    N = n * n
    A = np.zeros((N, N), dtype=np.uint8)
    for i, mask in enumerate(build_matrix(n)):
        for j in range(N):
            A[i, j] = (mask >> j) & 1
    return A


def apply_matrix(rows: Sequence[int], x: int) -> int:
    """Return M x over GF(2): the board reached from all-off by pressing x."""
    out = 0
    for i, mask in enumerate(rows):
        if (mask & x).bit_count() & 1:
            out |= 1 << i
    return out


def gf2_rref_augmented(
    rows: Sequence[int], b: int
) -> Tuple[list[int], list[int], dict[int, int], list[int]]:
    """Gauss-Jordan reduce [rows | b] over GF(2).

    Returns the reduced row masks, their target bits, a map from pivot
    column to pivot row, and the free columns.
    """
    m = len(rows)
    R = list(rows)
    t = [(b >> i) & 1 for i in range(m)]

    row = 0
    pivot_rows: dict[int, int] = {}
    frees: list[int] = []
    for col in range(m):
        bit = 1 << col
        pivot = None
        for r in range(row, m):
            if R[r] & bit:
                pivot = r
                break
        if pivot is None:
            frees.append(col)
            continue
        if pivot != row:
            R[row], R[pivot] = R[pivot], R[row]
            t[row], t[pivot] = t[pivot], t[row]
        for r in range(m):
            if r != row and R[r] & bit:
                R[r] ^= R[row]
                t[r] ^= t[row]
        pivot_rows[col] = row
        row += 1
    return R, t, pivot_rows, frees


def gf2_solve_with_nullspace(
    rows: Sequence[int], b: int
) -> Optional[LinearSolution]:
    """Solve M x = b over GF(2) and return a null-space basis of M.

    Returns None when the system is inconsistent, i.e. b cannot be
    reached from the all-off board.
    """
    R, t, pivot_rows, frees = gf2_rref_augmented(rows, b)

    # 0...0 | 1 rows
    for mask, target in zip(R, t):
        if mask == 0 and target == 1:
            return None

    # Free variables are 0, so each pivot variable equals its row's target.
    x0 = 0
    for pc, ri in pivot_rows.items():
        if t[ri]:
            x0 |= 1 << pc

    basis: list[int] = []
    for f in frees:
        v = 1 << f
        for pc, ri in pivot_rows.items():
            if (R[ri] >> f) & 1:
                v |= 1 << pc
        basis.append(v)

    return LinearSolution(x0, basis, sorted(pivot_rows), frees)


def gf2_min_weight_solution(
    particular: int, basis: Sequence[int]
) -> Tuple[int, int]:
    """Return the lightest vector in particular + span(basis) and its weight."""
    k = len(basis)
    if k > MAX_NULLITY:
        raise NullSpaceTooLargeError(
            f"null space of dimension {k} exceeds limit {MAX_NULLITY}"
        )
    best = particular
    best_w = best.bit_count()
    for r in range(1, k + 1):
        for combo in itertools.combinations(basis, r):
            cand = particular
            for v in combo:
                cand ^= v
            w = cand.bit_count()
            if w < best_w:
                best, best_w = cand, w
    return best, best_w


def minimum_presses(particular: int, basis: Sequence[int]) -> int:
    return gf2_min_weight_solution(particular, basis)[1]


def bits_to_indices(bits: int) -> list[int]:
    out = []
    i = 0
    while bits:
        if bits & 1:
            out.append(i)
        bits >>= 1
        i += 1
    return out
