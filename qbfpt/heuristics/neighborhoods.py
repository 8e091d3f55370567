"""Neighborhood moves for the QBF: insertion, removal and 2-exchange."""

from collections import deque
from dataclasses import dataclass
from typing import AbstractSet, Deque, Iterable, Optional, Sequence

from ..model.evaluator import QBFEvaluator
from ..model.solution import Solution

# Tabu list placeholder for "no element moved in this slot"
FAKE = -1


@dataclass
class Move:
    """
    A neighborhood move. Insertion has only `cand_in`, removal only
    `cand_out`, exchange both; a no-op move has neither.
    """
    cand_in: Optional[int] = None
    cand_out: Optional[int] = None
    delta: float = float("inf")

    @property
    def is_noop(self) -> bool:
        return self.cand_in is None and self.cand_out is None


def make_tabu_list(tenure: int) -> Deque[int]:
    """Tabu list of length 2 * tenure filled with the FAKE sentinel."""
    if tenure < 1:
        raise ValueError(f"tabu tenure must be >= 1, got {tenure}")
    return deque([FAKE] * (2 * tenure))


def _is_admissible(
    elements: Iterable[int],
    delta: float,
    current_cost: float,
    incumbent_cost: float,
    tabu: AbstractSet[int],
    fixed: AbstractSet[int],
) -> bool:
    """Fixed variables never move; tabu ones only through aspiration."""
    elements = tuple(elements)
    if any(e in fixed for e in elements):
        return False
    if any(e in tabu for e in elements):
        return current_cost + delta < incumbent_cost
    return True


def best_improving_move(
    sol: Solution,
    incumbent_cost: float,
    candidates: Sequence[int],
    evaluator: QBFEvaluator,
    tabu_list: Iterable[int],
    fixed: AbstractSet[int] = frozenset(),
) -> Move:
    """
    Scan every insertion, removal and exchange and return the admissible move
    with the lowest delta. Ties keep the first one found, in the order
    insertions, removals, exchanges.
    """
    tabu = set(tabu_list)
    tabu.discard(FAKE)
    best = Move()

    for cand_in in candidates:
        delta = evaluator.evaluate_insertion_cost(cand_in, sol)
        if delta < best.delta and _is_admissible((cand_in,), delta, sol.cost, incumbent_cost, tabu, fixed):
            best = Move(cand_in, None, delta)

    for cand_out in sol:
        delta = evaluator.evaluate_removal_cost(cand_out, sol)
        if delta < best.delta and _is_admissible((cand_out,), delta, sol.cost, incumbent_cost, tabu, fixed):
            best = Move(None, cand_out, delta)

    for cand_in in candidates:
        for cand_out in sol:
            delta = evaluator.evaluate_exchange_cost(cand_in, cand_out, sol)
            if delta < best.delta and _is_admissible(
                (cand_in, cand_out), delta, sol.cost, incumbent_cost, tabu, fixed
            ):
                best = Move(cand_in, cand_out, delta)

    return best


def first_improving_move(
    sol: Solution,
    incumbent_cost: float,
    candidates: Sequence[int],
    evaluator: QBFEvaluator,
    tabu_list: Iterable[int],
    fixed: AbstractSet[int] = frozenset(),
) -> Move:
    """
    First-improving variant of :func:`best_improving_move`.

    Insertions, removals and exchanges are scanned in that order; each scan
    stops at the first admissible move whose delta beats the best move found
    so far (the threshold starts at +inf, so a local optimum still yields a
    move when one is admissible). The best of these at most three moves wins.
    """
    tabu = set(tabu_list)
    tabu.discard(FAKE)
    best = Move()

    for cand_in in candidates:
        delta = evaluator.evaluate_insertion_cost(cand_in, sol)
        if delta < best.delta and _is_admissible((cand_in,), delta, sol.cost, incumbent_cost, tabu, fixed):
            best = Move(cand_in, None, delta)
            break

    for cand_out in sol:
        delta = evaluator.evaluate_removal_cost(cand_out, sol)
        if delta < best.delta and _is_admissible((cand_out,), delta, sol.cost, incumbent_cost, tabu, fixed):
            best = Move(None, cand_out, delta)
            break

    found = False
    for cand_in in candidates:
        for cand_out in sol:
            delta = evaluator.evaluate_exchange_cost(cand_in, cand_out, sol)
            if delta < best.delta and _is_admissible(
                (cand_in, cand_out), delta, sol.cost, incumbent_cost, tabu, fixed
            ):
                best = Move(cand_in, cand_out, delta)
                found = True
                break
        if found:
            break

    return best


def apply_move(
    sol: Solution,
    move: Move,
    tabu_list: Deque[int],
    evaluator: QBFEvaluator,
) -> float:
    """
    Apply `move` to `sol` in place and rotate the tabu list.

    The tabu list pops its two oldest entries and receives the removed and the
    inserted index (or FAKE for a missing half), so its length never changes.

    Returns:
        The refreshed cost of `sol`
    """
    tabu_list.popleft()
    if move.cand_out is not None:
        sol.remove(move.cand_out)
        tabu_list.append(move.cand_out)
    else:
        tabu_list.append(FAKE)

    tabu_list.popleft()
    if move.cand_in is not None:
        sol.append(move.cand_in)
        tabu_list.append(move.cand_in)
    else:
        tabu_list.append(FAKE)

    return evaluator.evaluate(sol)
