#!/usr/bin/env python3
"""
Test Warm Start Tours
=====================
"""

import numpy as np
import pytest

from utils import ValidationError, as_distance_matrix, tour_cost
from warm_start import greedy_tour, make_warm_start, random_tour

INF = np.inf

FOUR_CITIES = as_distance_matrix([
    [INF, 1, 9, 9],
    [1, INF, 1, 9],
    [9, 1, INF, 1],
    [9, 9, 1, INF],
])


def test_greedy_finds_cheapest_start():
    tour = greedy_tour(FOUR_CITIES)

    assert sorted(tour) == [0, 1, 2, 3]
    assert tour_cost(FOUR_CITIES, tour) == 12


def test_greedy_skips_dead_end_starts():
    # From city 0 the walk goes 0 -> 1 -> 3 and strands itself, and from
    # city 1 it cannot close the cycle; cities 2 and 3 both succeed
    distances = as_distance_matrix([
        [INF, 1, 5, INF],
        [INF, INF, 2, 1],
        [INF, INF, INF, 3],
        [4, INF, INF, INF],
    ])

    tour = greedy_tour(distances)

    assert tour == [2, 3, 0, 1]
    assert tour_cost(distances, tour) == 10


def test_greedy_returns_empty_when_no_tour():
    distances = as_distance_matrix(np.full((4, 4), INF))

    assert greedy_tour(distances) == []


def test_random_tour_is_finite():
    rng = np.random.default_rng(5)

    tour = random_tour(FOUR_CITIES, attempts=50, rng=rng)

    assert sorted(tour) == [0, 1, 2, 3]
    assert np.isfinite(tour_cost(FOUR_CITIES, tour))


def test_random_tour_gives_up():
    distances = as_distance_matrix(np.full((4, 4), INF))

    assert random_tour(distances, attempts=10) == []


def test_make_warm_start_dispatch():
    assert tour_cost(FOUR_CITIES, make_warm_start(FOUR_CITIES, 'greedy')) == 12
    assert np.isfinite(tour_cost(FOUR_CITIES, make_warm_start(FOUR_CITIES, 'random')))

    with pytest.raises(ValidationError):
        make_warm_start(FOUR_CITIES, 'annealing')
