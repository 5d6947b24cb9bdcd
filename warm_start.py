#!/usr/bin/env python3
"""
warm_start.py - Initial Tours for Branch & Bound
================================================
Cheap constructions that seed the search with an upper bound.
"""

import logging
from typing import List, Optional

import numpy as np

from config import Config
from utils import ValidationError, tour_cost


logger = logging.getLogger(__name__)


def greedy_tour(distances: np.ndarray) -> List[int]:
    """
    Nearest-neighbour tour from every start city, keeping the cheapest.

    A start city is abandoned as soon as the construction reaches a city
    whose remaining edges are all +inf, or when the finished path cannot
    return to its start. Returns [] when no start city yields a tour.
    """
    num_cities = distances.shape[0]
    best_tour: List[int] = []
    best_cost = np.inf

    for start in range(num_cities):
        route = [start]
        unvisited = np.ones(num_cities, dtype=bool)
        unvisited[start] = False

        while len(route) < num_cities:
            candidates = np.where(unvisited, distances[route[-1]], np.inf)
            nearest = int(np.argmin(candidates))
            if np.isinf(candidates[nearest]):
                break
            route.append(nearest)
            unvisited[nearest] = False

        if len(route) < num_cities:
            logger.debug(f"Greedy construction from city {start} dead-ended after {len(route)} cities")
            continue

        cost = tour_cost(distances, route)
        if cost < best_cost:
            best_tour, best_cost = route, cost

    if best_tour:
        logger.debug(f"Greedy tour cost {best_cost}")
    return best_tour


def random_tour(distances: np.ndarray, attempts: Optional[int] = None,
                rng: Optional[np.random.Generator] = None) -> List[int]:
    """First random permutation with a finite cost, or [] after attempts tries."""
    if attempts is None:
        attempts = Config.SEARCH['random_attempts']
    rng = rng or np.random.default_rng()
    num_cities = distances.shape[0]

    if num_cities == 0:
        return []

    for _ in range(attempts):
        route = [int(city) for city in rng.permutation(num_cities)]
        if np.isfinite(tour_cost(distances, route)):
            return route

    logger.debug(f"No finite random tour in {attempts} attempts")
    return []


def make_warm_start(distances: np.ndarray, method: Optional[str] = None) -> List[int]:
    """Build a warm-start tour with the named method ('greedy' or 'random')."""
    method = method or Config.SEARCH['warm_start']

    if method == 'greedy':
        return greedy_tour(distances)
    elif method == 'random':
        return random_tour(distances)
    else:
        raise ValidationError(f"Unknown warm start method: {method}")
