"""Incremental evaluation must agree with full recomputation."""

import numpy as np
import pytest

from qbfpt.model import QBFInstance, QBFEvaluator, PenalizedQBFEvaluator, Solution, generate_instance


def _full_cost(evaluator, elements):
    return evaluator.evaluate(Solution(elements))


def test_evaluate_matches_quadratic_form():
    instance = generate_instance(n=12, seed=3)
    evaluator = QBFEvaluator(instance)
    x = np.zeros(12)
    x[[1, 4, 5, 9]] = 1.0
    sol = Solution([1, 4, 5, 9])
    assert evaluator.evaluate(sol) == pytest.approx(-(x @ instance.A @ x))
    assert sol.cost == pytest.approx(-(x @ instance.A @ x))
    assert evaluator.evaluate(Solution()) == 0.0


def test_incremental_deltas_match_full_recomputation():
    rng = np.random.default_rng(11)
    # Dense (non-triangular) matrix exercises A[i, j] + A[j, i]
    instance = QBFInstance(n=15, A=rng.integers(-10, 11, size=(15, 15)).astype(float))
    evaluator = QBFEvaluator(instance)

    for _ in range(25):
        mask = rng.random(15) < 0.4
        elements = [int(i) for i in np.flatnonzero(mask)]
        sol = Solution(elements)
        base = evaluator.evaluate(sol)
        absent = [i for i in range(15) if i not in elements]

        for i in absent:
            delta = evaluator.evaluate_insertion_cost(i, sol)
            assert base + delta == pytest.approx(_full_cost(evaluator, elements + [i]))

        for i in elements:
            delta = evaluator.evaluate_removal_cost(i, sol)
            rest = [e for e in elements if e != i]
            assert base + delta == pytest.approx(_full_cost(evaluator, rest))

        for i in absent:
            for o in elements:
                delta = evaluator.evaluate_exchange_cost(i, o, sol)
                swapped = [e for e in elements if e != o] + [i]
                assert base + delta == pytest.approx(_full_cost(evaluator, swapped))


def test_degenerate_moves_are_zero_or_reduce():
    instance = generate_instance(n=6, seed=5)
    evaluator = QBFEvaluator(instance)
    sol = Solution([0, 2])
    evaluator.evaluate(sol)
    assert evaluator.evaluate_insertion_cost(0, sol) == 0.0
    assert evaluator.evaluate_removal_cost(1, sol) == 0.0
    assert evaluator.evaluate_exchange_cost(3, 3, sol) == 0.0
    # Incoming element already selected: only the removal half applies
    assert evaluator.evaluate_exchange_cost(0, 2, sol) == evaluator.evaluate_removal_cost(2, sol)
    # Outgoing element not selected: only the insertion half applies
    assert evaluator.evaluate_exchange_cost(4, 5, sol) == evaluator.evaluate_insertion_cost(4, sol)


def test_penalty_is_folded_into_insertions_only():
    instance = generate_instance(n=8, seed=9)
    plain = QBFEvaluator(instance)
    penalized = PenalizedQBFEvaluator(instance, penalty=2.5)
    violations = np.array([0, 0, 3, 0, 1, 0, 0, 0])
    penalized.set_violations(violations)

    sol = Solution([0, 1])
    assert penalized.evaluate(sol) == plain.evaluate(sol)

    assert penalized.evaluate_insertion_cost(2, sol) == pytest.approx(
        plain.evaluate_insertion_cost(2, sol) + 7.5
    )
    assert penalized.evaluate_insertion_cost(3, sol) == pytest.approx(plain.evaluate_insertion_cost(3, sol))
    assert penalized.evaluate_removal_cost(0, sol) == pytest.approx(plain.evaluate_removal_cost(0, sol))
    assert penalized.evaluate_exchange_cost(4, 0, sol) == pytest.approx(
        plain.evaluate_exchange_cost(4, 0, sol) + 2.5
    )
    # Both absent: the exchange is an insertion, penalized exactly once
    assert penalized.evaluate_exchange_cost(2, 5, sol) == pytest.approx(
        plain.evaluate_exchange_cost(2, 5, sol) + 7.5
    )

    with pytest.raises(ValueError):
        penalized.set_violations(np.zeros(3, dtype=int))


def test_invalid_instances_fail_fast():
    with pytest.raises(ValueError):
        QBFEvaluator(QBFInstance(n=0, A=np.zeros((0, 0))))
    with pytest.raises(ValueError):
        QBFEvaluator(QBFInstance(n=3, A=np.zeros((3, 2))))
    with pytest.raises(ValueError):
        QBFEvaluator(QBFInstance(n=3, A=np.zeros((2, 2))))
    with pytest.raises(ValueError):
        QBFEvaluator(QBFInstance(n=2, A=np.array([[1.0, np.nan], [0.0, 1.0]])))
