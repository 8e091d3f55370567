"""Intensification by fixing recently used variables."""

from dataclasses import dataclass
from typing import Iterable, Set

import numpy as np


@dataclass
class Intensificator:
    """
    Intensification parameters and run state.

    Attributes:
        tolerance: Consecutive non-improving iterations before intensifying
        iterations: Number of iterations an intensification phase lasts
        remaining_it: Iterations left in the running phase
        running: Whether a phase is in progress
    """
    tolerance: int
    iterations: int
    remaining_it: int = 0
    running: bool = False

    def __post_init__(self):
        if self.tolerance < 1:
            raise ValueError(f"intensification tolerance must be >= 1, got {self.tolerance}")
        if self.iterations < 1:
            raise ValueError(f"intensification iterations must be >= 1, got {self.iterations}")

    def should_start(self, consecutive_failures: int) -> bool:
        return not self.running and consecutive_failures >= self.tolerance

    def start(self) -> None:
        self.running = True
        self.remaining_it = self.iterations

    def tick(self) -> bool:
        """
        Count one finished iteration of the running phase.

        Returns:
            True if the phase just ended
        """
        if not self.running:
            return False
        self.remaining_it -= 1
        if self.remaining_it <= 0:
            self.running = False
            self.remaining_it = 0
            return True
        return False


def update_recency(recency: np.ndarray, solution: Iterable[int]) -> None:
    """Increment recency of selected variables and zero the rest, in place."""
    present = np.zeros(len(recency), dtype=bool)
    present[list(solution)] = True
    recency[present] += 1
    recency[~present] = 0


def select_fixed_variables(
    recency: np.ndarray,
    incumbent: Iterable[int],
    domain_size: int,
) -> Set[int]:
    """
    Pick the variables to freeze for an intensification phase.

    Variables of the incumbent with positive recency are ranked by recency,
    most used first (ties by index), and at most n // 2 of them are fixed.

    Args:
        recency: Per-variable consecutive usage counters
        incumbent: Selected indices of the incumbent solution
        domain_size: Number of variables n

    Returns:
        Set of fixed indices
    """
    limit = domain_size // 2
    ranked = sorted(
        (e for e in set(incumbent) if recency[e] > 0),
        key=lambda e: (-int(recency[e]), e),
    )
    return set(ranked[:limit])
