"""Constraint-aware candidate list for insertion moves."""

from dataclasses import dataclass
from typing import AbstractSet, Iterable, List

import numpy as np

from ..model.triples import Triple


@dataclass
class CandidateList:
    """
    Candidates for insertion in the current iteration.

    Attributes:
        candidates: Sorted indices eligible for insertion
        violations: Shape (n,), number of triples each absent index would
            complete if inserted. Only populated in oscillation mode (all zero
            otherwise).
    """
    candidates: List[int]
    violations: np.ndarray


def update_candidate_list(
    solution: Iterable[int],
    domain_size: int,
    triples: Iterable[Triple],
    oscillation: bool = False,
    fixed: AbstractSet[int] = frozenset(),
) -> CandidateList:
    """
    Recompute the candidate list for the given solution.

    Starts from every index not in the solution and not fixed. For each triple
    with exactly two members selected, the third member cannot be inserted
    without completing the triple:
    - hard-prune mode drops it from the candidates;
    - oscillation mode keeps it and counts one violation for it.

    Args:
        solution: Selected 0-based indices
        domain_size: Number of variables n
        triples: 1-based prohibited triples
        oscillation: Whether strategic oscillation is active
        fixed: Indices frozen by intensification

    Returns:
        CandidateList
    """
    selected = set(solution)
    candidates = set(range(domain_size)) - selected - set(fixed)
    violations = np.zeros(domain_size, dtype=int)

    for t in triples:
        e1, e2, e3 = t[0] - 1, t[1] - 1, t[2] - 1

        if e1 in selected and e2 in selected:
            infeasible = e3
        elif e1 in selected and e3 in selected:
            infeasible = e2
        elif e2 in selected and e3 in selected:
            infeasible = e1
        else:
            continue

        # All three selected: nothing left to insert for this triple
        if infeasible in selected:
            continue

        if oscillation:
            violations[infeasible] += 1
        else:
            candidates.discard(infeasible)

    return CandidateList(candidates=sorted(candidates), violations=violations)
