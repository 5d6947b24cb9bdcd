#!/usr/bin/env python3
"""
bb_tsp_solver.py - Time-boxed Branch & Bound TSP Solver
=======================================================
Best-first Branch & Bound over partial tours. Lower bounds come from
reduced cost matrices, the frontier is an indexed heap ordered by the
depth/cost hybrid priority, and the whole frontier is pruned every time a
better tour is found. The search stops when the time budget runs out, the
frontier is exhausted, or the cheapest frontier bound meets the best tour.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import numpy as np

from bb_cost_matrix import CostMatrix
from bb_priority_queue import IndexedHeapPriorityQueue
from bb_search_node import Priority, SearchNode
from config import Config
from time_management import TimeBudget
from utils import (
    InfeasibleInstance, ValidationError, as_distance_matrix,
    distance_matrix_from, timer, tour_cost, validate_tour
)
from warm_start import make_warm_start


logger = logging.getLogger(__name__)

WarmStart = Union[Sequence[int], Callable[[np.ndarray], Sequence[int]], None]


class SearchState(Enum):
    """Lifecycle of one search."""
    INIT = "init"
    SEARCHING = "searching"
    TIME_EXPIRED = "time_expired"
    QUEUE_EXHAUSTED = "queue_exhausted"
    PROVEN_OPTIMAL = "proven_optimal"

    @property
    def is_terminal(self) -> bool:
        return self in (SearchState.TIME_EXPIRED,
                        SearchState.QUEUE_EXHAUSTED,
                        SearchState.PROVEN_OPTIMAL)


@dataclass
class SearchConfiguration:
    """Configuration for one Branch & Bound search."""
    root_city: int = field(default_factory=lambda: Config.SEARCH['root_city'])
    depth_slack: int = field(default_factory=lambda: Config.SEARCH['depth_slack'])
    time_limit: float = field(default_factory=lambda: Config.SEARCH['time_limit'])
    log_interval: int = field(default_factory=lambda: Config.SEARCH['log_interval'])
    warm_start_method: str = field(default_factory=lambda: Config.SEARCH['warm_start'])

    # Frontier tuning
    initial_capacity: int = field(default_factory=lambda: Config.QUEUE['initial_capacity'])
    index_cleanup_ratio: float = field(default_factory=lambda: Config.QUEUE['index_cleanup_ratio'])


@dataclass
class SearchStatistics:
    """Statistics collected during search."""
    nodes_generated: int = 0
    nodes_pruned: int = 0
    nodes_expanded: int = 0
    max_queue_size: int = 0
    solutions_found: int = 0
    iterations: int = 0
    pruning_efficiency: float = 0.0

    def update_pruning_efficiency(self):
        """Update pruning efficiency metric."""
        if self.nodes_generated > 0:
            self.pruning_efficiency = self.nodes_pruned / self.nodes_generated


@dataclass
class SearchResult:
    """Outcome of a search: the best tour and how it was found."""
    best_tour: List[int]
    best_cost: float
    elapsed: float
    nodes_generated: int
    nodes_pruned: int
    max_queue_size: int
    solutions_found: int
    termination: SearchState
    initial_cost: float = math.inf
    root_lower_bound: float = math.inf
    nodes_expanded: int = 0
    pruning_efficiency: float = 0.0

    @property
    def is_feasible(self) -> bool:
        return math.isfinite(self.best_cost)

    def raise_if_infeasible(self) -> 'SearchResult':
        """Raise InfeasibleInstance when no tour was found."""
        if not self.is_feasible:
            raise InfeasibleInstance(
                f"No complete tour found (termination: {self.termination.value})"
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            'best_tour': list(self.best_tour),
            'best_cost': self.best_cost,
            'elapsed': self.elapsed,
            'nodes_generated': self.nodes_generated,
            'nodes_pruned': self.nodes_pruned,
            'max_queue_size': self.max_queue_size,
            'solutions_found': self.solutions_found,
            'termination': self.termination.value,
            'initial_cost': self.initial_cost,
            'root_lower_bound': self.root_lower_bound,
            'nodes_expanded': self.nodes_expanded,
            'pruning_efficiency': self.pruning_efficiency
        }


class BranchAndBoundDriver:
    """
    Runs one time-boxed Branch & Bound search.

    The best solution so far (BSSF) starts as the warm-start tour and only
    ever improves. The budget is polled once per loop iteration, so a search
    can overrun by at most one node expansion.
    """

    def __init__(self, distances, warm_start: WarmStart = None,
                 config: Optional[SearchConfiguration] = None):
        self.config = config or SearchConfiguration()
        self.distances = as_distance_matrix(distances)
        self.num_cities = self.distances.shape[0]

        if self.num_cities == 0:
            raise ValidationError("Instance has no cities")
        if not 0 <= self.config.root_city < self.num_cities:
            raise ValidationError(
                f"Root city {self.config.root_city} outside a {self.num_cities}-city instance"
            )

        self.warm_start = warm_start
        self.state = SearchState.INIT
        self.statistics = SearchStatistics()
        self.queue = IndexedHeapPriorityQueue(self.config.initial_capacity,
                                              self.config.index_cleanup_ratio)

        self.bssf: List[int] = []
        self.bssf_cost = math.inf
        self.initial_cost = math.inf
        self.root_lower_bound = math.inf

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @timer
    def run(self, time_budget: Optional[float] = None) -> SearchResult:
        """Search until a terminal state is reached and report the BSSF."""
        if self.state is not SearchState.INIT:
            raise RuntimeError(f"Search already ran (state: {self.state.value})")

        budget = TimeBudget(self.config.time_limit if time_budget is None else time_budget)
        budget.start()

        self._initialize()
        self.state = SearchState.SEARCHING
        logger.info(f"Branch & Bound on {self.num_cities} cities: warm start {self.initial_cost}, "
                    f"root bound {self.root_lower_bound}, budget {budget.total_budget}s")

        while not self.state.is_terminal:
            self.state = self._next_state(budget)
            if self.state is SearchState.SEARCHING:
                self._search_step()

        elapsed = budget.stop()
        self.statistics.max_queue_size = self.queue.max_size
        self.statistics.update_pruning_efficiency()

        logger.info(f"Search finished ({self.state.value}) in {elapsed:.3f}s: cost {self.bssf_cost}, "
                    f"{self.statistics.solutions_found} improvements, "
                    f"{self.statistics.nodes_generated} generated, {self.statistics.nodes_expanded} expanded, "
                    f"{self.statistics.nodes_pruned} pruned ({self.statistics.pruning_efficiency:.1%}), "
                    f"max queue {self.statistics.max_queue_size}")

        return SearchResult(
            best_tour=list(self.bssf),
            best_cost=self.bssf_cost,
            elapsed=elapsed,
            nodes_generated=self.statistics.nodes_generated,
            nodes_pruned=self.statistics.nodes_pruned,
            max_queue_size=self.statistics.max_queue_size,
            solutions_found=self.statistics.solutions_found,
            termination=self.state,
            initial_cost=self.initial_cost,
            root_lower_bound=self.root_lower_bound,
            nodes_expanded=self.statistics.nodes_expanded,
            pruning_efficiency=self.statistics.pruning_efficiency
        )

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    def _initialize(self):
        """Seed the BSSF from the warm start and queue the root node."""
        tour = self._warm_start_tour()
        if tour is not None and len(tour) > 0:
            self.bssf = validate_tour(tour, self.num_cities)
            self.bssf_cost = tour_cost(self.distances, self.bssf)
        self.initial_cost = self.bssf_cost

        root_matrix = CostMatrix.from_distances(self.distances, self.config.root_city)
        root = SearchNode.root(root_matrix)
        self.root_lower_bound = root.cost
        self.queue.insert(root, root.priority(self.config.depth_slack))

    def _warm_start_tour(self) -> Optional[Sequence[int]]:
        if self.warm_start is None:
            return make_warm_start(self.distances, self.config.warm_start_method)
        if callable(self.warm_start):
            return self.warm_start(self.distances)
        return self.warm_start

    def _next_state(self, budget: TimeBudget) -> SearchState:
        if self.queue.is_empty():
            if math.isfinite(self.bssf_cost):
                return SearchState.PROVEN_OPTIMAL
            return SearchState.QUEUE_EXHAUSTED

        _, lowest = self.queue.peek_lowest()
        if lowest.cost == self.bssf_cost:
            if math.isfinite(self.bssf_cost):
                return SearchState.PROVEN_OPTIMAL
            return SearchState.QUEUE_EXHAUSTED

        if budget.is_expired():
            return SearchState.TIME_EXPIRED

        return SearchState.SEARCHING

    def _search_step(self):
        """Take the most urgent node off the queue and accept or expand it."""
        stats = self.statistics
        stats.iterations += 1
        if self.config.log_interval and stats.iterations % self.config.log_interval == 0:
            logger.debug(f"Iteration {stats.iterations}: queue {self.queue.size}, "
                         f"bssf {self.bssf_cost}, generated {stats.nodes_generated}, "
                         f"pruned {stats.nodes_pruned}")

        node, _ = self.queue.get_lowest()

        # Depth ordering can let a dominated node survive bulk pruning
        if node.cost >= self.bssf_cost:
            stats.nodes_pruned += 1
            return

        if node.is_complete:
            self._accept_tour(node)
        else:
            self._expand(node)

    def _accept_tour(self, node: SearchNode):
        """Close the tour back to the root and keep it if it beats the BSSF."""
        closing_edge = self.distances[node.last_city, self.config.root_city]
        if self.num_cities > 1 and math.isinf(closing_edge):
            self.statistics.nodes_pruned += 1
            return

        cost = tour_cost(self.distances, node.path)
        if cost >= self.bssf_cost:
            self.statistics.nodes_pruned += 1
            return

        self.bssf = list(node.path)
        self.bssf_cost = cost
        self.statistics.solutions_found += 1

        removed = self.queue.delete_elements_higher_than(Priority.cost_only(cost))
        self.statistics.nodes_pruned += removed
        logger.info(f"New best tour cost {cost}, pruned {removed} queued nodes")

    def _expand(self, node: SearchNode):
        """Queue every child whose bound can still beat the BSSF."""
        stats = self.statistics
        stats.nodes_expanded += 1
        last_city = node.last_city

        for city in node.unvisited_cities():
            if math.isinf(node.matrix.cost(last_city, city)):
                continue

            child = node.extend(city)
            stats.nodes_generated += 1

            if child.cost < self.bssf_cost:
                self.queue.insert(child, child.priority(self.config.depth_slack))
            else:
                stats.nodes_pruned += 1


def solve(distances, warm_start: WarmStart = None, time_budget: Optional[float] = None,
          num_cities: Optional[int] = None,
          config: Optional[SearchConfiguration] = None) -> SearchResult:
    """
    Find the best tour reachable within time_budget seconds.

    distances is an n x n array-like, or a callable distance(i, j) together
    with num_cities. warm_start is a complete tour, a callable building one
    from the distance matrix, or None for the configured heuristic.
    """
    if callable(distances):
        if num_cities is None:
            raise ValidationError("num_cities is required when distances is a callable")
        distances = distance_matrix_from(distances, num_cities)

    driver = BranchAndBoundDriver(distances, warm_start=warm_start, config=config)
    return driver.run(time_budget)
