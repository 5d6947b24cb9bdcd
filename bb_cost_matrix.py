#!/usr/bin/env python3
"""
bb_cost_matrix.py - Reduced Cost Matrix for Branch & Bound
==========================================================
Immutable residual edge-cost matrix with an accumulated lower bound.
Row/column reduction yields a valid relaxation bound for the tours that
remain reachable, and following an edge derives the matrix of the child
search state.
"""

import logging
from typing import Optional, Sequence, Union

import numpy as np

from utils import DimensionMismatch, as_distance_matrix


logger = logging.getLogger(__name__)

INF = np.inf


class CostMatrix:
    """
    Residual edge costs for one Branch & Bound node.

    Entries are non-negative floats; +inf marks an edge that does not exist
    or has been excluded. The backing array is read-only, so every operation
    returns a new matrix and a parent can be shared by all of its children.
    """

    def __init__(self, costs: Union[Sequence[Sequence[float]], np.ndarray],
                 lower_bound: float = 0.0, cities_visited: int = 0,
                 num_cities: Optional[int] = None, root_city: int = 0):
        matrix = np.array(costs, dtype=float)

        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise DimensionMismatch(f"Cost matrix must be square, got shape {matrix.shape}")
        if num_cities is not None and matrix.shape[0] != num_cities:
            raise DimensionMismatch(
                f"Cost matrix size {matrix.shape[0]} does not match city count {num_cities}"
            )

        matrix.setflags(write=False)
        self._costs = matrix
        self._lower_bound = float(lower_bound)
        self._cities_visited = cities_visited
        self._root_city = root_city

    @classmethod
    def _from_owned(cls, costs: np.ndarray, lower_bound: float,
                    cities_visited: int, root_city: int) -> 'CostMatrix':
        """Wrap an array this module just allocated, without copying it."""
        matrix = cls.__new__(cls)
        costs.setflags(write=False)
        matrix._costs = costs
        matrix._lower_bound = float(lower_bound)
        matrix._cities_visited = cities_visited
        matrix._root_city = root_city
        return matrix

    @classmethod
    def from_distances(cls, distances, root_city: int = 0) -> 'CostMatrix':
        """
        Build the root matrix of a search from raw distances.
        The diagonal is excluded and the result is fully reduced.
        """
        raw = as_distance_matrix(distances)
        if raw.shape[0] and not 0 <= root_city < raw.shape[0]:
            raise DimensionMismatch(f"Root city {root_city} outside a {raw.shape[0]}-city instance")

        root = cls._from_owned(raw, 0.0, 0, root_city).reduce()
        logger.debug(f"Root matrix for {root.size} cities, lower bound {root.lower_bound}")
        return root

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def costs(self) -> np.ndarray:
        """Read-only view of the residual costs."""
        return self._costs

    @property
    def lower_bound(self) -> float:
        return self._lower_bound

    @property
    def cities_visited(self) -> int:
        return self._cities_visited

    @property
    def root_city(self) -> int:
        return self._root_city

    @property
    def size(self) -> int:
        return self._costs.shape[0]

    def cost(self, from_city: int, to_city: int) -> float:
        """Residual cost of edge (from_city, to_city)."""
        return float(self._costs[from_city, to_city])

    def is_reduced(self) -> bool:
        """True when every row and column holds a zero or is entirely +inf."""
        if self.size == 0:
            return True

        finite = np.isfinite(self._costs)
        zeros = self._costs == 0
        rows_ok = np.all(zeros.any(axis=1) | ~finite.any(axis=1))
        cols_ok = np.all(zeros.any(axis=0) | ~finite.any(axis=0))
        return bool(rows_ok and cols_ok)

    # ------------------------------------------------------------------
    # Derivations
    # ------------------------------------------------------------------

    def reduce(self) -> 'CostMatrix':
        """
        Subtract each row minimum from its row, then each column minimum from
        its column, adding every subtracted minimum to the lower bound.
        Rows and columns that are entirely +inf are left alone.
        """
        costs = self._costs.copy()
        lower_bound = self._lower_bound

        if self.size:
            row_min = costs.min(axis=1)
            finite_rows = np.isfinite(row_min)
            costs[finite_rows] -= row_min[finite_rows, np.newaxis]
            lower_bound += float(row_min[finite_rows].sum())

            col_min = costs.min(axis=0)
            finite_cols = np.isfinite(col_min)
            costs[:, finite_cols] -= col_min[finite_cols]
            lower_bound += float(col_min[finite_cols].sum())

        return CostMatrix._from_owned(costs, lower_bound, self._cities_visited, self._root_city)

    def follow_route(self, from_city: int, to_city: int) -> 'CostMatrix':
        """
        Derive the reduced matrix of the state where edge (from_city, to_city)
        has been taken.

        Nothing may leave from_city or enter to_city again, the reverse edge
        is excluded, and to_city may not return to the root unless this edge
        is the second-to-last one of the tour. The residual cost of the taken
        edge is added to the bound; an excluded edge yields an infinite bound.
        """
        costs = self._costs.copy()
        edge_cost = costs[from_city, to_city]

        costs[from_city, :] = INF
        costs[:, to_city] = INF
        costs[to_city, from_city] = INF

        if self._cities_visited < self.size - 2:
            costs[to_city, self._root_city] = INF

        derived = CostMatrix._from_owned(
            costs,
            self._lower_bound + float(edge_cost),
            self._cities_visited + 1,
            self._root_city
        )
        return derived.reduce()

    def __repr__(self) -> str:
        return (f"CostMatrix(size={self.size}, lower_bound={self._lower_bound}, "
                f"cities_visited={self._cities_visited})")
