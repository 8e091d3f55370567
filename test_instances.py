"""Tests for instance files, the exact solver and the experiment harness."""

import numpy as np
import pulp
import pytest

from qbfpt.model import QBFInstance, generate_instance, load_instance, save_instance, generate_triples
from qbfpt.model.mip_solver import solve_exact
from qbfpt.heuristics import TabuConfig
from qbfpt.experiments.run_all import build_configurations, run_all_experiments


def test_qbf_text_format(tmp_path):
    path = tmp_path / 'qbf003'
    path.write_text("3\n1 -2 3\n4 5\n-6\n")
    instance = load_instance(str(path))
    assert instance.n == 3
    assert instance.name == 'qbf003'
    expected = np.array([[1, -2, 3], [0, 4, 5], [0, 0, -6]], dtype=float)
    assert np.array_equal(instance.A, expected)


def test_lower_triangle_is_folded_on_save(tmp_path):
    A = np.array([[1.0, 2.0], [3.0, 4.0]])
    save_instance(QBFInstance(n=2, A=A), str(tmp_path / 'qbf002'))
    assert (tmp_path / 'qbf002').read_text() == "2\n1 5\n4\n"


def test_json_format(tmp_path):
    instance = generate_instance(n=7, seed=1)
    save_instance(instance, str(tmp_path / 'inst.json'))
    loaded = load_instance(str(tmp_path / 'inst.json'))
    assert loaded.n == 7
    assert np.array_equal(loaded.A, instance.A)


@pytest.mark.parametrize('content', ["", "0\n", "abc\n", "3\n1 2 3\n4\n", "2\n1 x\n3\n"])
def test_malformed_files_raise(tmp_path, content):
    path = tmp_path / 'bad'
    path.write_text(content)
    with pytest.raises(ValueError):
        load_instance(str(path))


def test_generate_instance_is_upper_triangular_and_seeded():
    a = generate_instance(n=10, seed=3)
    b = generate_instance(n=10, seed=3)
    assert np.array_equal(a.A, b.A)
    assert np.array_equal(a.A, np.triu(a.A))
    assert a.A.min() >= -10 and a.A.max() <= 10
    with pytest.raises(ValueError):
        generate_instance(n=0)


def test_exact_solver_respects_triples():
    A = np.zeros((4, 4))
    A[0, 1] = 10.0
    A[2, 3] = 10.0
    instance = QBFInstance(n=4, A=A)

    cost, selected = solve_exact(instance, generate_triples(4), time_limit=30)
    assert cost == pytest.approx(-10.0)

    cost, selected = solve_exact(instance, (), time_limit=30)
    assert cost == pytest.approx(-20.0)
    assert selected == [0, 1, 2, 3]


def test_run_all_experiments(tmp_path):
    instances_dir = tmp_path / 'instances'
    instances_dir.mkdir()
    save_instance(generate_instance(n=12, seed=1), str(instances_dir / 'qbf012'))

    configurations = build_configurations(tenure1=2, tenure2=3, iterations=40, time_limit=None,
                                          intensification_tolerance=5, intensification_iterations=5)
    assert sorted(configurations) == [f'CONFIG0{i}' for i in range(1, 7)]
    assert all(isinstance(c, TabuConfig) for c in configurations.values())

    df = run_all_experiments(str(instances_dir), str(tmp_path / 'results'),
                             configurations=configurations, plots=False)
    assert len(df) == 6
    assert df['feasible'].all()
    assert (tmp_path / 'results' / 'all_results.csv').exists()
    assert (tmp_path / 'results' / 'qbf012_results.json').exists()


def test_exact_solver_rejects_unproven_solution(monkeypatch):
    # A time-limited CBC run can report an optimal status with only an
    # integer-feasible solution
    def stopped_at_limit(self, solver=None, **kwargs):
        self.status = pulp.LpStatusOptimal
        self.sol_status = pulp.LpSolutionIntegerFeasible
        return self.status

    monkeypatch.setattr(pulp.LpProblem, 'solve', stopped_at_limit)
    A = np.zeros((4, 4))
    A[0, 1] = 10.0
    assert solve_exact(QBFInstance(n=4, A=A), (), time_limit=1) == (None, None)
