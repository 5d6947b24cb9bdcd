#!/usr/bin/env python3
"""
time_management.py - Time Management System
===========================================
Wall-clock budget for time-boxed search. The search loop polls the budget
once per iteration; nothing here interrupts running work.
"""

from dataclasses import dataclass
from typing import Optional
import math
import time


@dataclass
class TimeBudget:
    """Time budget for one search."""
    total_budget: float  # Total time in seconds, may be math.inf
    start_time: Optional[float] = None
    end_time: Optional[float] = None

    def __post_init__(self):
        if math.isnan(self.total_budget):
            raise ValueError("Time budget must be a number")

    def start(self) -> 'TimeBudget':
        """Start (or restart) the clock."""
        self.start_time = time.time()
        self.end_time = None
        return self

    def stop(self) -> float:
        """Freeze the elapsed time and return it."""
        if self.start_time is None:
            return 0.0
        if self.end_time is None:
            self.end_time = time.time()
        return self.end_time - self.start_time

    def elapsed(self) -> float:
        """Seconds since start."""
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.time()
        return end - self.start_time

    def remaining_time(self) -> float:
        """Get remaining time."""
        if self.start_time is None:
            return self.total_budget

        return max(0, self.total_budget - self.elapsed())

    def is_expired(self) -> bool:
        """Check if budget is expired."""
        return self.remaining_time() <= 0
