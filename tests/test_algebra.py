import itertools

import numpy as np
import pytest

from flipfive.algebra import (
    MAX_NULLITY,
    NullSpaceTooLargeError,
    apply_matrix,
    bits_to_indices,
    build_A,
    build_matrix,
    gf2_min_weight_solution,
    gf2_solve_with_nullspace,
    minimum_presses,
    neighbours,
)

N = 25


def _random_board(rng, presses):
    rows = build_matrix()
    bits = 0
    for i in rng.integers(0, N, size=presses):
        bits ^= rows[int(i)]
    return bits


def _to_vec(bits):
    return np.array([(bits >> i) & 1 for i in range(N)], dtype=np.uint8)


def test_matrix_is_symmetric():
    A = build_A(5)
    assert A.shape == (N, N)
    assert np.array_equal(A, A.T)


def test_matrix_is_memoized():
    assert build_matrix(5) is build_matrix(5)
    assert isinstance(build_matrix(5), tuple)


def test_press_effects():
    rows = build_matrix(5)
    # corner: self + 2 neighbours, edge: 4, interior: 5
    assert rows[0].bit_count() == 3
    assert rows[2].bit_count() == 4
    assert rows[12].bit_count() == 5
    assert sorted(neighbours(5, 12)) == [7, 11, 12, 13, 17]
    assert sorted(neighbours(5, 4)) == [3, 4, 9]


def test_apply_matrix_matches_dense_product():
    A = build_A(5)
    rows = build_matrix(5)
    rng = np.random.default_rng(7)
    for _ in range(50):
        x = int(rng.integers(0, 1 << N))
        expected = (A @ _to_vec(x)) % 2
        assert np.array_equal(_to_vec(apply_matrix(rows, x)), expected)


def test_pressing_twice_restores_board():
    rows = build_matrix(5)
    rng = np.random.default_rng(1)
    for _ in range(20):
        board = int(rng.integers(0, 1 << N))
        x = int(rng.integers(0, 1 << N))
        once = board ^ apply_matrix(rows, x)
        assert once ^ apply_matrix(rows, x) == board


def test_5x5_nullity_is_two():
    sol = gf2_solve_with_nullspace(build_matrix(5), 0)
    assert sol is not None
    assert len(sol.basis) == 2
    assert len(sol.pivots) == 23
    assert sorted(sol.pivots + sol.free) == list(range(N))


def test_zero_target_gives_zero_particular():
    sol = gf2_solve_with_nullspace(build_matrix(5), 0)
    assert sol.particular == 0
    assert minimum_presses(sol.particular, sol.basis) == 0


def test_nullspace_vectors_toggle_nothing():
    rows = build_matrix(5)
    sol = gf2_solve_with_nullspace(rows, 0)
    for v in sol.basis:
        assert v != 0
        assert apply_matrix(rows, v) == 0


def test_particular_solution_reproduces_board():
    rows = build_matrix(5)
    rng = np.random.default_rng(3)
    for _ in range(50):
        board = _random_board(rng, int(rng.integers(1, 20)))
        sol = gf2_solve_with_nullspace(rows, board)
        assert sol is not None
        assert apply_matrix(rows, sol.particular) == board


def test_inconsistent_system_returns_none():
    rows = build_matrix(5)
    v = gf2_solve_with_nullspace(rows, 0).basis[0]
    # reachable boards are orthogonal to the null space; this one overlaps v once
    lone = 1 << bits_to_indices(v)[0]
    assert gf2_solve_with_nullspace(rows, lone) is None


def test_full_rank_sizes_have_empty_basis():
    # 3x3 Lights Out is uniquely solvable
    rows = build_matrix(3)
    sol = gf2_solve_with_nullspace(rows, rows[4])
    assert sol.basis == []
    assert sol.particular == 1 << 4


def test_min_weight_never_exceeds_particular():
    rows = build_matrix(5)
    rng = np.random.default_rng(11)
    for _ in range(30):
        board = _random_board(rng, 12)
        sol = gf2_solve_with_nullspace(rows, board)
        best, weight = gf2_min_weight_solution(sol.particular, sol.basis)
        assert weight <= sol.particular.bit_count()
        assert best.bit_count() == weight
        assert apply_matrix(rows, best) == board


def test_min_weight_matches_exhaustive_search():
    rows = build_matrix(5)
    # every board reachable in at most two presses
    for k in (1, 2):
        for cells in itertools.combinations(range(N), k):
            board = 0
            for c in cells:
                board ^= rows[c]
            sol = gf2_solve_with_nullspace(rows, board)
            assert minimum_presses(sol.particular, sol.basis) == k


def test_all_on_board_needs_fifteen():
    rows = build_matrix(5)
    sol = gf2_solve_with_nullspace(rows, (1 << N) - 1)
    assert minimum_presses(sol.particular, sol.basis) == 15


def test_oversized_null_space_is_rejected():
    basis = [1 << i for i in range(MAX_NULLITY + 1)]
    with pytest.raises(NullSpaceTooLargeError):
        gf2_min_weight_solution(0, basis)


def test_bits_to_indices():
    assert bits_to_indices(0) == []
    assert bits_to_indices(0b100101) == [0, 2, 5]
