"""Experimental harness for running Tabu Search configurations on instances."""

import json
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from ..model.instance import QBFInstance
from ..model.instance_generator import load_instance
from ..model.triples import is_solution_feasible
from ..heuristics.intensification import Intensificator
from ..heuristics.tabu import TabuSearch, TabuConfig


def build_configurations(
    tenure1: int = 20,
    tenure2: int = 30,
    iterations: int = 10000,
    time_limit: Optional[float] = 1800.0,
    intensification_tolerance: int = 1000,
    intensification_iterations: int = 100,
    seed: int = 0,
) -> Dict[str, TabuConfig]:
    """
    The six benchmark configurations.

    CONFIG01  tenure1, best-improving, pruning,     no intensification
    CONFIG02  tenure1, best-improving, pruning,     intensification
    CONFIG03  tenure1, best-improving, oscillation, no intensification
    CONFIG04  tenure1, best-improving, oscillation, intensification
    CONFIG05  tenure1, first-improving, oscillation, intensification
    CONFIG06  tenure2, best-improving, oscillation, intensification
    """
    def intens():
        return Intensificator(intensification_tolerance, intensification_iterations)

    common = dict(iterations=iterations, time_limit=time_limit, seed=seed)
    return {
        'CONFIG01': TabuConfig(tenure=tenure1, strategy='best', oscillation=False, intensificator=None, **common),
        'CONFIG02': TabuConfig(tenure=tenure1, strategy='best', oscillation=False, intensificator=intens(), **common),
        'CONFIG03': TabuConfig(tenure=tenure1, strategy='best', oscillation=True, intensificator=None, **common),
        'CONFIG04': TabuConfig(tenure=tenure1, strategy='best', oscillation=True, intensificator=intens(), **common),
        'CONFIG05': TabuConfig(tenure=tenure1, strategy='first', oscillation=True, intensificator=intens(), **common),
        'CONFIG06': TabuConfig(tenure=tenure2, strategy='best', oscillation=True, intensificator=intens(), **common),
    }


def run_configuration_on_instance(
    instance: QBFInstance,
    config: TabuConfig,
) -> Dict[str, Any]:
    """
    Run one Tabu Search configuration on an instance.

    Returns:
        Dictionary with value, cost, runtime, selected indices, feasibility,
        iterations, intensifications, final penalty and the cost log
    """
    engine = TabuSearch(instance, config)
    result = engine.solve()

    return {
        'value': float(result.value),
        'cost': float(result.cost),
        'runtime': result.runtime,
        'selected': result.selected,
        'size': len(result.best),
        'feasible': is_solution_feasible(result.best, engine.triples),
        'iterations': result.iterations,
        'intensifications': result.intensifications,
        'final_penalty': result.final_penalty,
        'tenure': config.tenure,
        'strategy': config.strategy,
        'oscillation': config.oscillation,
        'intensification': config.intensificator is not None,
        'cost_log': result.cost_log,
    }


def save_results(results: Dict[str, Any], filepath: str) -> None:
    """
    Save results to JSON file.

    Args:
        results: Results dictionary
        filepath: Path to save file
    """
    with open(filepath, 'w') as f:
        json.dump(results, f, indent=2)


def load_results(filepath: str) -> Dict[str, Any]:
    """
    Load results from JSON file.

    Args:
        filepath: Path to results file

    Returns:
        Results dictionary
    """
    with open(filepath, 'r') as f:
        return json.load(f)


def _instance_files(instances_dir: str) -> List[Path]:
    path = Path(instances_dir)
    return sorted(p for p in path.iterdir() if p.is_file() and not p.name.startswith('.'))


def run_all_experiments(
    instances_dir: str,
    output_dir: str,
    configurations: Optional[Dict[str, TabuConfig]] = None,
    mip_max_time: Optional[float] = None,
    plots: bool = True,
) -> pd.DataFrame:
    """
    Run every configuration on every instance and save results.

    Writes ``<instance>_results.json`` per instance, ``all_results.csv`` with
    one row per (instance, configuration), and plots.

    Args:
        instances_dir: Directory containing instance files (qbf text or JSON)
        output_dir: Directory to save results
        configurations: Mapping name -> TabuConfig (default: build_configurations())
        mip_max_time: If set, also solve each instance exactly with this time
            limit and report the gap to the optimum
        plots: Whether to create plots

    Returns:
        Summary DataFrame
    """
    if configurations is None:
        configurations = build_configurations()

    instance_files = _instance_files(instances_dir)
    if not instance_files:
        print(f"No instance files found in {instances_dir}")
        return pd.DataFrame()

    output_path = Path(output_dir)
    output_path.mkdir(exist_ok=True, parents=True)

    all_results = []
    cost_logs: Dict[str, Dict[str, List[float]]] = {}

    print(f"Running {len(configurations)} configurations on {len(instance_files)} instances...")

    for instance_file in instance_files:
        print(f"\nProcessing {instance_file.name}...")
        instance = load_instance(str(instance_file))

        optimum = None
        if mip_max_time is not None:
            from ..model.mip_solver import solve_exact
            from ..model.triples import generate_triples
            start = time.perf_counter()
            optimal_cost, _ = solve_exact(instance, generate_triples(instance.n), time_limit=mip_max_time)
            if optimal_cost is not None:
                optimum = -optimal_cost
                print(f"  MIP optimum = {optimum:.2f} ({time.perf_counter() - start:.1f}s)")

        results = {}
        cost_logs[instance_file.stem] = {}
        for name, config in configurations.items():
            try:
                res = run_configuration_on_instance(instance, config)
            except ValueError as e:
                print(f"Error running {name}: {e}")
                results[name] = {'error': str(e), 'value': None, 'runtime': None}
                continue

            print(f"  {name}: value = {res['value']:.2f}, time = {res['runtime']:.2f}s")
            cost_logs[instance_file.stem][name] = res['cost_log']
            results[name] = res

            gap = None
            if optimum is not None and optimum != 0:
                gap = 100.0 * (optimum - res['value']) / abs(optimum)

            all_results.append({
                'instance': instance_file.stem,
                'n': instance.n,
                'configuration': name,
                'value': res['value'],
                'runtime': res['runtime'],
                'size': res['size'],
                'feasible': res['feasible'],
                'iterations': res['iterations'],
                'intensifications': res['intensifications'],
                'final_penalty': res['final_penalty'],
                'optimum': optimum,
                'gap_pct': gap,
            })

        save_results(results, str(output_path / f"{instance_file.stem}_results.json"))

    df = pd.DataFrame(all_results)
    if not df.empty:
        df.to_csv(output_path / 'all_results.csv', index=False)
        print(f"\nSaved summary to {output_path / 'all_results.csv'}")

        if plots:
            from .plots import create_all_plots
            print("\nCreating plots...")
            create_all_plots(df, cost_logs, str(output_path))

    print(f"\nExperiments complete! Results saved to {output_dir}/")
    return df
