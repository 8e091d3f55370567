"""Solution representation: selected variable indices plus a cached cost."""

from typing import Iterable, Optional


class Solution(list):
    """
    Ordered list of the variable indices currently set to 1.

    The ``cost`` attribute caches the evaluator's value for exactly this set of
    indices; whoever mutates the list is responsible for refreshing it.
    """

    def __init__(self, elements: Optional[Iterable[int]] = None, cost: float = float("inf")):
        super().__init__(elements if elements is not None else [])
        self.cost = cost

    def copy(self) -> "Solution":
        return Solution(self, self.cost)

    def __str__(self) -> str:
        return f"Solution: cost=[{self.cost}], size=[{len(self)}], elements={sorted(self)}"

    def __repr__(self) -> str:
        return f"Solution({list(self)!r}, cost={self.cost!r})"


def empty_solution() -> Solution:
    """Empty solution; all variables at zero give a QBF value of zero."""
    return Solution([], 0.0)
