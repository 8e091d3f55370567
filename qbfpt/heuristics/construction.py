"""Semi-greedy randomized construction of an initial solution."""

import numpy as np
from typing import Iterable, Optional

from ..model.evaluator import QBFEvaluator, PenalizedQBFEvaluator
from ..model.solution import Solution, empty_solution
from ..model.triples import Triple
from .candidates import update_candidate_list


def grasp_constructor(
    evaluator: QBFEvaluator,
    triples: Iterable[Triple] = (),
    oscillation: bool = False,
    rng: Optional[np.random.Generator] = None,
    tolerance: float = 0.0,
) -> Solution:
    """
    Semi-greedy constructor with a Restricted Candidate List (RCL).

    At each step:
    1. Refresh the candidate list for the partial solution
    2. Compute the insertion delta of every candidate
    3. Build the RCL with all candidates whose delta is within `tolerance` of
       the minimum (tolerance 0 keeps exactly the best ones)
    4. Insert a uniformly random RCL member

    Construction stops as soon as no insertion strictly lowers the cost.

    Args:
        evaluator: Objective evaluator (penalized in oscillation mode)
        triples: 1-based prohibited triples
        oscillation: Whether infeasible candidates are penalized instead of pruned
        rng: Random generator (default: seeded with 0)
        tolerance: Width of the band around the minimum delta

    Returns:
        Constructed solution with its cost evaluated
    """
    if rng is None:
        rng = np.random.default_rng(0)

    triples = list(triples)
    penalized = isinstance(evaluator, PenalizedQBFEvaluator)
    sol = empty_solution()
    evaluator.evaluate(sol)

    while True:
        cl = update_candidate_list(sol, evaluator.get_domain_size(), triples, oscillation)
        if penalized:
            evaluator.set_violations(cl.violations)
        if not cl.candidates:
            break

        deltas = np.array([evaluator.evaluate_insertion_cost(c, sol) for c in cl.candidates])
        min_delta = float(deltas.min())

        # Stop once no insertion improves the current cost
        if min_delta >= 0.0:
            break

        rcl = [c for c, d in zip(cl.candidates, deltas) if d <= min_delta + tolerance]
        chosen = rcl[int(rng.integers(len(rcl)))]

        sol.append(chosen)
        evaluator.evaluate(sol)

    return sol
