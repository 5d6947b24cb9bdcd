#!/usr/bin/env python3
"""
bb_search_node.py - Search Nodes and Expansion Priority
=======================================================
Partial tours of the Branch & Bound search tree and the depth/cost hybrid
priority that orders them in the frontier.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from bb_cost_matrix import CostMatrix
from config import Config


DEPTH_NONE = -1


def _default_depth_slack() -> int:
    return Config.SEARCH['depth_slack']


@dataclass(frozen=True)
class Priority:
    """
    Expansion priority of a search node; lower compares as more urgent.

    A node at least depth_slack levels deeper than another goes first,
    which keeps the frontier from growing without bound. Within the slack,
    or when either side is the depth-agnostic sentinel, cost decides.
    """
    depth: int
    cost: float
    depth_slack: int = field(default_factory=_default_depth_slack)

    def __post_init__(self):
        if self.depth_slack < 1:
            raise ValueError(f"Depth slack must be at least 1, got {self.depth_slack}")

    @classmethod
    def cost_only(cls, cost: float) -> 'Priority':
        """Sentinel that ignores depth, used for pruning against a new best tour."""
        return cls(depth=DEPTH_NONE, cost=cost)

    @property
    def is_depth_agnostic(self) -> bool:
        return self.depth == DEPTH_NONE

    def compare_to(self, other: 'Priority') -> int:
        """Three-way comparison: negative when self should be extracted first."""
        if not self.is_depth_agnostic and not other.is_depth_agnostic:
            if self.depth - other.depth >= self.depth_slack:
                return -1
            if other.depth - self.depth >= self.depth_slack:
                return 1

        if self.cost < other.cost:
            return -1
        if self.cost > other.cost:
            return 1
        return 0

    def __lt__(self, other: 'Priority') -> bool:
        return self.compare_to(other) < 0

    def __le__(self, other: 'Priority') -> bool:
        return self.compare_to(other) <= 0

    def __gt__(self, other: 'Priority') -> bool:
        return self.compare_to(other) > 0

    def __ge__(self, other: 'Priority') -> bool:
        return self.compare_to(other) >= 0


@dataclass(eq=False)
class SearchNode:
    """
    Node in the Branch & Bound search tree.
    Holds the partial tour, its reduced cost matrix and its lower bound.
    Nodes compare and hash by identity.
    """
    path: Tuple[int, ...]
    matrix: CostMatrix
    cost: float

    @classmethod
    def root(cls, matrix: CostMatrix) -> 'SearchNode':
        """Node holding only the root city."""
        return cls(path=(matrix.root_city,), matrix=matrix, cost=matrix.lower_bound)

    @property
    def depth(self) -> int:
        return len(self.path)

    @property
    def last_city(self) -> int:
        return self.path[-1]

    @property
    def is_complete(self) -> bool:
        """True when the path visits every city."""
        return len(self.path) == self.matrix.size

    def unvisited_cities(self) -> List[int]:
        visited = set(self.path)
        return [city for city in range(self.matrix.size) if city not in visited]

    def extend(self, city: int) -> 'SearchNode':
        """Child node for travelling from the last city to city."""
        child_matrix = self.matrix.follow_route(self.last_city, city)
        if math.isinf(child_matrix.lower_bound):
            child_cost = math.inf
        else:
            child_cost = self.cost + (child_matrix.lower_bound - self.matrix.lower_bound)
        return SearchNode(path=self.path + (city,), matrix=child_matrix, cost=child_cost)

    def priority(self, depth_slack: Optional[int] = None) -> Priority:
        if depth_slack is None:
            return Priority(self.depth, self.cost)
        return Priority(self.depth, self.cost, depth_slack)
