"""Search result data structure."""

from dataclasses import dataclass, field
from typing import List, Optional

from .solution import Solution


@dataclass
class SearchResult:
    """
    Results from a Tabu Search run.

    Attributes:
        best: Best feasible solution found (incumbent)
        cost: Incumbent cost in the minimization framing (-x^T A x)
        runtime: Wall-clock seconds spent in the search
        iterations: Number of main-loop iterations executed
        cost_log: Incumbent cost after construction and after every iteration
        intensifications: Number of intensification phases started
        final_penalty: Penalty at the end of the run (oscillation mode only)
    """
    best: Solution
    cost: float
    runtime: float
    iterations: int
    cost_log: List[float] = field(default_factory=list)
    intensifications: int = 0
    final_penalty: Optional[float] = None

    @property
    def value(self) -> float:
        """Maximized QBF value x^T A x of the incumbent."""
        return -self.cost

    @property
    def selected(self) -> List[int]:
        return sorted(self.best)
