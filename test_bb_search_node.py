#!/usr/bin/env python3
"""
Test Search Nodes and Priorities
================================
"""

import math

import numpy as np
import pytest

from bb_cost_matrix import CostMatrix
from bb_search_node import DEPTH_NONE, Priority, SearchNode

INF = np.inf

FOUR_CITIES = [
    [INF, 1, 9, 9],
    [1, INF, 1, 9],
    [9, 1, INF, 1],
    [9, 9, 1, INF],
]


def test_deeper_node_wins_at_slack():
    shallow = Priority(depth=1, cost=10)
    deep = Priority(depth=3, cost=50)

    assert deep < shallow
    assert shallow > deep
    assert deep.compare_to(shallow) == -1
    assert shallow.compare_to(deep) == 1


def test_cost_decides_within_slack():
    assert Priority(depth=2, cost=5) < Priority(depth=1, cost=10)
    assert Priority(depth=1, cost=10) < Priority(depth=2, cost=50)
    assert Priority(depth=4, cost=7).compare_to(Priority(depth=4, cost=7)) == 0


def test_depth_slack_is_configurable():
    strict = Priority(depth=2, cost=50, depth_slack=1)
    assert strict < Priority(depth=1, cost=10, depth_slack=1)

    loose = Priority(depth=9, cost=50, depth_slack=10)
    assert Priority(depth=1, cost=10, depth_slack=10) < loose

    with pytest.raises(ValueError):
        Priority(depth=1, cost=10, depth_slack=0)


def test_sentinel_compares_by_cost_only():
    sentinel = Priority.cost_only(20)

    assert sentinel.depth == DEPTH_NONE
    assert sentinel.is_depth_agnostic
    assert Priority(depth=1, cost=15) < sentinel
    assert Priority(depth=50, cost=25) > sentinel
    assert Priority(depth=7, cost=20) >= sentinel


def test_root_node():
    matrix = CostMatrix.from_distances(FOUR_CITIES)
    root = SearchNode.root(matrix)

    assert root.path == (0,)
    assert root.depth == 1
    assert root.cost == matrix.lower_bound == 4
    assert not root.is_complete
    assert root.unvisited_cities() == [1, 2, 3]
    assert root.priority() == Priority(1, 4)


def test_extend_accumulates_bound():
    root = SearchNode.root(CostMatrix.from_distances(FOUR_CITIES))

    child = root.extend(1)

    assert child.path == (0, 1)
    assert child.last_city == 1
    assert child.matrix.cities_visited == 1
    assert child.cost >= root.cost
    assert child.cost == child.matrix.lower_bound
    assert root.path == (0,)


def test_extend_to_excluded_edge_is_infinite():
    root = SearchNode.root(CostMatrix.from_distances(FOUR_CITIES))
    child = root.extend(1)

    # Going back to the root early is excluded
    back = child.extend(0)

    assert math.isinf(back.cost)


def test_complete_node():
    node = SearchNode.root(CostMatrix.from_distances(FOUR_CITIES))
    for city in (1, 2, 3):
        node = node.extend(city)

    assert node.is_complete
    assert node.unvisited_cities() == []
    assert node.cost == 12


def test_nodes_hash_by_identity():
    matrix = CostMatrix.from_distances(FOUR_CITIES)
    first = SearchNode.root(matrix)
    second = SearchNode.root(matrix)

    assert first != second
    assert len({first, second}) == 2
