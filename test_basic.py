"""Basic integration test to verify all components work together."""

import numpy as np
from qbfpt.model import QBFInstance, QBFEvaluator, generate_instance, generate_triples, is_solution_feasible
from qbfpt.heuristics import tabu_search, grasp_constructor, Intensificator


def test_small_instance():
    """Test with a very small instance (3 variables)."""
    print("Testing with small instance (n=3)...")

    instance = QBFInstance(
        n=3,
        A=np.array([
            [5.0, 0.0, 0.0],
            [0.0, 3.0, 0.0],
            [0.0, 0.0, -1.0],
        ]),
    )

    instance.validate()
    print("  Instance validated successfully")

    evaluator = QBFEvaluator(instance)
    sol = grasp_constructor(evaluator, rng=np.random.default_rng(0))
    print(f"  Constructor: {sol}")
    assert sorted(sol) == [0, 1]
    assert sol.cost == -8.0

    cost, best, log = tabu_search(instance, tenure=1, max_iters=20)
    print(f"  Tabu: cost = {cost:.2f}")
    assert cost == -8.0
    assert sorted(best) == [0, 1]
    assert len(log) == 21

    print("\nAll basic tests passed!")


def test_generated_instance_all_configurations():
    """Every strategy/mode combination returns a feasible incumbent."""
    instance = generate_instance(n=20, seed=7)
    triples = generate_triples(instance.n)

    for strategy in ('best', 'first'):
        for oscillation in (False, True):
            cost, best, log = tabu_search(
                instance,
                tenure=3,
                max_iters=150,
                strategy=strategy,
                oscillation=oscillation,
                intensificator=Intensificator(tolerance=20, iterations=10),
                seed=1,
            )
            assert is_solution_feasible(best, triples)
            assert cost == log[-1]
            assert cost <= 0.0


if __name__ == '__main__':
    test_small_instance()
    test_generated_instance_all_configurations()
