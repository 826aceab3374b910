# FILE: pairing_core/hungarian.py
"""
Kuhn-Munkres (Hungarian) minimum-cost assignment.

- Works on square or rectangular matrices; the short side is padded.
- Integer input stays integer (object dtype), so large scores are exact.
- Returns a list 'assign' where assign[row] = chosen column, or -1 for rows
  left over on a wide-short mismatch.
"""
from __future__ import annotations
from numbers import Integral
from typing import List, Sequence, Tuple
import numpy as np


def _as_cost_array(cost_matrix) -> np.ndarray:
    arr = np.asarray(cost_matrix, dtype=object)
    if arr.size and all(isinstance(v, Integral) for v in arr.flat):
        return np.vectorize(int, otypes=[object])(arr).reshape(arr.shape)
    return np.asarray(cost_matrix, dtype=float)


def _pad_to_square(cost: np.ndarray) -> Tuple[np.ndarray, int, int]:
    r, c = cost.shape
    n = max(r, c)
    if r == c:
        return cost.copy(), r, c
    # any constant works for padding; it adds the same amount to every matching
    out = np.full((n, n), cost.max(), dtype=cost.dtype)
    out[:r, :c] = cost
    return out, r, c


def make_cost_matrix(profit_matrix: Sequence[Sequence]) -> np.ndarray:
    """Turn a profit matrix into a cost matrix: cost = max(profit) - profit."""
    profit = _as_cost_array(profit_matrix)
    if profit.size == 0:
        return profit
    return profit.max() - profit


def hungarian(cost_matrix) -> List[int]:
    cost = _as_cost_array(cost_matrix)
    if cost.size == 0:
        return []
    if cost.ndim != 2:
        raise ValueError("cost matrix must be two-dimensional")

    sq, r, c = _pad_to_square(cost)
    n = sq.shape[0]

    # Step 1: row/column reductions
    sq = sq - sq.min(axis=1).reshape(n, 1)
    sq = sq - sq.min(axis=0).reshape(1, n)

    starred = np.zeros((n, n), dtype=bool)
    primed = np.zeros((n, n), dtype=bool)
    row_cover = np.zeros(n, dtype=bool)
    col_cover = np.zeros(n, dtype=bool)

    # Step 2: star one independent zero per row/column
    for i in range(n):
        for j in range(n):
            if sq[i, j] == 0 and not row_cover[i] and not col_cover[j]:
                starred[i, j] = True
                row_cover[i] = True
                col_cover[j] = True
    row_cover[:] = False
    col_cover[:] = False

    def uncovered_zero():
        for i in np.flatnonzero(~row_cover):
            for j in np.flatnonzero(~col_cover):
                if sq[i, j] == 0:
                    return int(i), int(j)
        return None

    def star_in_row(i):
        js = np.flatnonzero(starred[i])
        return int(js[0]) if js.size else None

    def star_in_col(j):
        rows = np.flatnonzero(starred[:, j])
        return int(rows[0]) if rows.size else None

    def prime_in_row(i):
        js = np.flatnonzero(primed[i])
        return int(js[0]) if js.size else None

    while True:
        # Step 3: done once every column holds a star
        col_cover[:] = starred.any(axis=0)
        if col_cover.all():
            break
        while True:
            # Step 4: prime uncovered zeros until one has no star in its row
            z = uncovered_zero()
            while z is None:
                # Step 6: shift by the smallest uncovered value
                m = min(sq[i, j] for i in np.flatnonzero(~row_cover) for j in np.flatnonzero(~col_cover))
                sq[row_cover, :] += m
                sq[:, ~col_cover] -= m
                z = uncovered_zero()
            i, j = z
            primed[i, j] = True
            star_j = star_in_row(i)
            if star_j is None:
                break
            row_cover[i] = True
            col_cover[star_j] = False

        # Step 5: alternate stars and primes along the augmenting path
        path = [(i, j)]
        row = star_in_col(j)
        while row is not None:
            path.append((row, path[-1][1]))
            col = prime_in_row(row)
            path.append((row, col))
            row = star_in_col(col)
        for pi, pj in path:
            starred[pi, pj] = not starred[pi, pj]
        primed[:] = False
        row_cover[:] = False

    assign = [-1] * r
    for i in range(r):
        j = star_in_row(i)
        if j is not None and j < c:
            assign[i] = j
    return assign
