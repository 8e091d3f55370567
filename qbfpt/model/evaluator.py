"""Objective evaluation for the (inverse) quadratic binary function.

The search framework minimizes, so costs are reported for the inverse
objective -x^T A x. A solution maximizing the QBF therefore has the most
negative cost.
"""

import numpy as np
from typing import Optional

from .instance import QBFInstance
from .solution import Solution


class QBFEvaluator:
    """
    Full and incremental evaluation of -x^T A x.

    Incremental deltas are O(n): they only touch the row and column of the
    variable(s) being changed, using the binary vector of the solution under
    evaluation.
    """

    def __init__(self, instance: QBFInstance):
        instance.validate()
        self.instance = instance
        self.size = int(instance.n)
        self.A = np.asarray(instance.A, dtype=float)
        # A[i, j] + A[j, i], so each contribution is a single dot product
        self._sym = self.A + self.A.T
        self.variables = np.zeros(self.size, dtype=float)
        self._loaded: Optional[tuple] = None

    def get_domain_size(self) -> int:
        return self.size

    def set_variables(self, sol: Solution) -> np.ndarray:
        """Load the binary vector of `sol` (skipped if already loaded)."""
        key = tuple(sol)
        if key != self._loaded:
            self.variables = np.zeros(self.size, dtype=float)
            if key:
                self.variables[list(key)] = 1.0
            self._loaded = key
        return self.variables

    def evaluate(self, sol: Solution) -> float:
        """Recompute the cost of `sol` from scratch and store it on the solution."""
        x = self.set_variables(sol)
        sol.cost = -float(x @ self.A @ x)
        return sol.cost

    def _contribution(self, i: int) -> float:
        x = self.variables
        return float(x @ self._sym[i] - x[i] * self._sym[i, i] + self.A[i, i])

    def evaluate_insertion_cost(self, elem: int, sol: Solution) -> float:
        self.set_variables(sol)
        if self.variables[elem] == 1.0:
            return 0.0
        return -self._contribution(elem)

    def evaluate_removal_cost(self, elem: int, sol: Solution) -> float:
        self.set_variables(sol)
        if self.variables[elem] == 0.0:
            return 0.0
        return self._contribution(elem)

    def evaluate_exchange_cost(self, elem_in: int, elem_out: int, sol: Solution) -> float:
        self.set_variables(sol)
        if elem_in == elem_out:
            return 0.0
        if self.variables[elem_in] == 1.0:
            return self.evaluate_removal_cost(elem_out, sol)
        if self.variables[elem_out] == 0.0:
            return self.evaluate_insertion_cost(elem_in, sol)

        gain = self._contribution(elem_in) - self._contribution(elem_out)
        gain -= self._sym[elem_in, elem_out]
        return -gain


class PenalizedQBFEvaluator(QBFEvaluator):
    """
    Evaluator with the strategic-oscillation capability.

    Insertion deltas are increased by ``penalty * violations[i]``, where
    ``violations[i]`` is the number of prohibited triples that inserting `i`
    would complete. ``evaluate`` is left untouched, so cached solution costs
    always hold the true objective.
    """

    def __init__(self, instance: QBFInstance, penalty: float = 1.0):
        super().__init__(instance)
        self.penalty = float(penalty)
        self.violations = np.zeros(self.size, dtype=int)

    def set_violations(self, violations: np.ndarray) -> None:
        if len(violations) != self.size:
            raise ValueError(f"violations length {len(violations)} != domain size {self.size}")
        self.violations = np.asarray(violations, dtype=int)

    def set_penalty(self, penalty: float) -> None:
        self.penalty = float(penalty)

    def _penalty_for(self, elem: int) -> float:
        return self.penalty * float(self.violations[elem])

    def evaluate_insertion_cost(self, elem: int, sol: Solution) -> float:
        delta = super().evaluate_insertion_cost(elem, sol)
        if self.variables[elem] == 0.0:
            delta += self._penalty_for(elem)
        return delta

    def evaluate_exchange_cost(self, elem_in: int, elem_out: int, sol: Solution) -> float:
        delta = super().evaluate_exchange_cost(elem_in, elem_out, sol)
        if elem_in == elem_out or self.variables[elem_in] == 1.0 or self.variables[elem_out] == 0.0:
            # Pure removal, or already penalized via evaluate_insertion_cost
            return delta
        return delta + self._penalty_for(elem_in)
