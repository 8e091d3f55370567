"""Tests for move selection: aspiration, fixed variables, tie-breaking and no-op moves."""

from collections import deque

import numpy as np
import pytest

from qbfpt.model import QBFInstance, QBFEvaluator, Solution
from qbfpt.heuristics import best_improving_move, first_improving_move, apply_move, make_tabu_list, Move, FAKE
from qbfpt.heuristics.neighborhoods import _is_admissible

STRATEGIES = [best_improving_move, first_improving_move]


def _setup(A, elements=()):
    instance = QBFInstance(n=len(A), A=np.array(A, dtype=float))
    evaluator = QBFEvaluator(instance)
    sol = Solution(elements)
    evaluator.evaluate(sol)
    return evaluator, sol


def test_is_admissible():
    tabu, fixed = {1}, {2}
    assert _is_admissible((0,), 5.0, 0.0, 0.0, tabu, fixed)
    assert _is_admissible((1,), -5.0, 0.0, -1.0, tabu, fixed)
    assert not _is_admissible((1,), -5.0, 0.0, -5.0, tabu, fixed)
    assert not _is_admissible((2,), -5.0, 0.0, 0.0, tabu, fixed)
    assert not _is_admissible((0, 2), -5.0, 0.0, 0.0, tabu, fixed)


@pytest.mark.parametrize('move_fn', STRATEGIES)
def test_tabu_insertion_allowed_only_by_aspiration(move_fn):
    evaluator, sol = _setup(np.diag([5.0, 3.0, 0.0, 0.0]))
    tabu_list = deque([FAKE, 0])

    # 0 + (-5) < 0: aspiration lifts the tabu status of 0
    move = move_fn(sol, 0.0, [0, 1, 2, 3], evaluator, tabu_list)
    assert move == Move(cand_in=0, cand_out=None, delta=-5.0)

    # 0 + (-5) is not below -10: 0 stays tabu
    move = move_fn(sol, -10.0, [0, 1, 2, 3], evaluator, tabu_list)
    assert move == Move(cand_in=1, cand_out=None, delta=-3.0)


@pytest.mark.parametrize('move_fn', STRATEGIES)
def test_fixed_variable_blocks_move_despite_aspiration(move_fn):
    evaluator, sol = _setup(np.diag([5.0, 3.0, 0.0, 0.0]))
    move = move_fn(sol, 0.0, [0, 1, 2, 3], evaluator, deque([FAKE, 0]), fixed={0})
    assert move == Move(cand_in=1, cand_out=None, delta=-3.0)


def test_best_improving_keeps_first_of_tied_moves():
    # All deltas are zero: the first insertion wins
    evaluator, sol = _setup(np.zeros((3, 3)), [0])
    move = best_improving_move(sol, 0.0, [1, 2], evaluator, make_tabu_list(1))
    assert move == Move(cand_in=1, cand_out=None, delta=0.0)


@pytest.mark.parametrize('move_fn', STRATEGIES)
def test_removal_wins_tie_with_exchange(move_fn):
    # Removing 0 and exchanging 0 for 1 both have delta -1; inserting 1 has 0
    evaluator, sol = _setup([[-1.0, 0.0], [0.0, 0.0]], [0])
    assert sol.cost == 1.0
    assert evaluator.evaluate_exchange_cost(1, 0, sol) == -1.0

    move = move_fn(sol, 0.0, [1], evaluator, make_tabu_list(1))
    assert move == Move(cand_in=None, cand_out=0, delta=-1.0)


def test_first_improving_stops_at_first_improving_insertion():
    evaluator, sol = _setup(np.diag([1.0, 5.0, 0.0]))
    candidates = [0, 1, 2]
    tabu_list = make_tabu_list(1)

    assert first_improving_move(sol, 0.0, candidates, evaluator, tabu_list) == Move(0, None, -1.0)
    assert best_improving_move(sol, 0.0, candidates, evaluator, tabu_list) == Move(1, None, -5.0)


@pytest.mark.parametrize('move_fn', STRATEGIES)
def test_nothing_admissible_yields_noop(move_fn):
    evaluator, sol = _setup(np.diag([-1.0, 2.0]), [0])
    tabu_list = deque([0, 1])

    move = move_fn(sol, -100.0, [1], evaluator, tabu_list)
    assert move.is_noop
    assert move.delta == float('inf')

    apply_move(sol, move, tabu_list, evaluator)
    assert list(tabu_list) == [FAKE, FAKE]
    assert list(sol) == [0]
    assert sol.cost == 1.0
