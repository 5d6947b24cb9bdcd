"""
utils.py - Utility Functions and Helpers
=========================================
Common utility functions, error types and logging setup used throughout
the solver.
"""

import logging
import time
from functools import wraps
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

import numpy as np


logger = logging.getLogger(__name__)


# ============================================================================
# ERRORS
# ============================================================================

class TSPError(Exception):
    """Base class for solver errors."""
    pass


class ValidationError(TSPError, ValueError):
    """Invalid distances or an invalid tour."""
    pass


class DimensionMismatch(TSPError, ValueError):
    """Cost matrix is not square or does not match the city count."""
    pass


class EmptyQueue(TSPError, IndexError):
    """Extraction attempted on an empty priority queue."""
    pass


class InfeasibleInstance(TSPError):
    """No complete tour exists for the instance."""
    pass


# ============================================================================
# DISTANCE MATRIX HELPERS
# ============================================================================

def as_distance_matrix(distances: Union[Sequence[Sequence[float]], np.ndarray]) -> np.ndarray:
    """
    Convert array-like distances into a float matrix with an infinite diagonal.
    Raises DimensionMismatch for non-square input and ValidationError for
    negative or NaN entries.
    """
    try:
        matrix = np.array(distances, dtype=float)
    except ValueError as e:
        # Ragged rows cannot form an array at all
        raise DimensionMismatch(f"Distance matrix is not rectangular: {e}") from e

    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise DimensionMismatch(f"Distance matrix must be square, got shape {matrix.shape}")
    if np.isnan(matrix).any():
        raise ValidationError("Distance matrix contains NaN entries")
    if (matrix < 0).any():
        raise ValidationError("Distance matrix contains negative entries")

    np.fill_diagonal(matrix, np.inf)
    return matrix


def distance_matrix_from(distance: Callable[[int, int], float], num_cities: int) -> np.ndarray:
    """Build a distance matrix by querying distance(i, j) for every pair."""
    if num_cities < 0:
        raise ValidationError(f"City count must be non-negative, got {num_cities}")

    matrix = np.full((num_cities, num_cities), np.inf)
    for i in range(num_cities):
        for j in range(num_cities):
            if i != j:
                matrix[i, j] = distance(i, j)

    return as_distance_matrix(matrix)


def tour_cost(distances: np.ndarray, tour: Sequence[int]) -> float:
    """
    Cost of a closed tour, including the edge from the last city back to the
    first. Missing edges make the cost infinite, as does an empty tour.
    A single city tour has no edges and costs nothing.
    """
    if len(tour) == 0:
        return float('inf')
    if len(tour) == 1:
        return 0.0

    cost = 0.0
    for here, there in zip(tour, list(tour[1:]) + [tour[0]]):
        cost += float(distances[here, there])
    return cost


def validate_tour(tour: Sequence[int], num_cities: int) -> List[int]:
    """Check that tour visits each of num_cities cities exactly once."""
    tour = [int(city) for city in tour]

    if len(tour) != num_cities:
        raise ValidationError(f"Tour has {len(tour)} cities, expected {num_cities}")
    if len(set(tour)) != len(tour):
        raise ValidationError("Tour visits a city more than once")
    if any(city < 0 or city >= num_cities for city in tour):
        raise ValidationError("Tour references a city outside the instance")

    return tour


# ============================================================================
# PERFORMANCE UTILITIES
# ============================================================================

def timer(func):
    """Decorator to time function execution."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start = time.time()
        result = func(*args, **kwargs)
        end = time.time()
        logger.debug(f"{func.__name__} took {end - start:.2f} seconds")
        return result
    return wrapper


# ============================================================================
# LOGGING UTILITIES
# ============================================================================

def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None):
    """Setup logging configuration."""
    from config import Config

    log_config = Config.LOGGING

    # Set log level
    level = getattr(logging, log_level.upper(), logging.INFO)

    # Create formatter
    formatter = logging.Formatter(
        log_config['format'],
        datefmt=log_config['date_format']
    )

    # Setup handlers
    handlers = []

    # Console handler
    if log_config.get('console_output', True):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    # File handler
    if log_file or log_config.get('file'):
        file_path = Path(log_file or log_config['file'])
        file_path.parent.mkdir(parents=True, exist_ok=True)

        from logging.handlers import RotatingFileHandler
        file_handler = RotatingFileHandler(
            file_path,
            maxBytes=log_config.get('max_bytes', 10*1024*1024),
            backupCount=log_config.get('backup_count', 5)
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # Configure root logger
    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True
    )

    logger.info(f"Logging configured: level={log_level}")
