"""Plotting functions for experiment results."""

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import pandas as pd
from pathlib import Path
from typing import Dict, List


def plot_convergence(cost_logs: Dict[str, List[float]], output_path: str = 'results/convergence.png'):
    """
    Plot incumbent QBF value per iteration for each configuration.

    Args:
        cost_logs: Dictionary mapping configuration name to its cost log
            (minimization framing; plotted as the maximized value)
        output_path: Path to save plot
    """
    if not cost_logs:
        print("No convergence data to plot")
        return

    plt.figure(figsize=(10, 6))
    for name, log in cost_logs.items():
        plt.plot([-c for c in log], label=name)
    plt.xlabel('Iteration')
    plt.ylabel('Best QBF Value')
    plt.title('Incumbent Value per Iteration')
    plt.legend(title='Configuration')
    plt.tight_layout()

    Path(output_path).parent.mkdir(exist_ok=True, parents=True)
    plt.savefig(output_path)
    plt.close()
    print(f"Saved plot to {output_path}")


def plot_value_by_instance(results_df: pd.DataFrame, output_path: str = 'results/value_by_instance.png'):
    """
    Create bar chart showing best value per configuration vs instance.

    Args:
        results_df: DataFrame with columns: configuration, instance, value
        output_path: Path to save plot
    """
    if results_df.empty:
        print("No data to plot")
        return

    pivot = results_df.pivot_table(values='value', index='instance', columns='configuration', aggfunc='max')

    pivot.plot(kind='bar', figsize=(12, 6))
    plt.ylabel('Best QBF Value')
    plt.xlabel('Instance')
    plt.title('Best Value by Configuration and Instance')
    plt.legend(title='Configuration')
    plt.xticks(rotation=45)
    plt.tight_layout()

    Path(output_path).parent.mkdir(exist_ok=True, parents=True)
    plt.savefig(output_path)
    plt.close()
    print(f"Saved plot to {output_path}")


def create_all_plots(results_df: pd.DataFrame, cost_logs: Dict[str, Dict[str, List[float]]] = None,
                     output_dir: str = 'results'):
    """
    Create all plots from results.

    Args:
        results_df: DataFrame with structured results
        cost_logs: Optional mapping instance -> configuration -> cost log
        output_dir: Directory to save plots
    """
    Path(output_dir).mkdir(exist_ok=True, parents=True)

    if results_df is not None and not results_df.empty:
        plot_value_by_instance(results_df, f'{output_dir}/value_by_instance.png')

        if 'runtime' in results_df.columns:
            plt.figure(figsize=(10, 6))
            results_df.groupby('configuration')['runtime'].mean().plot(kind='bar')
            plt.ylabel('Runtime (seconds)')
            plt.title('Runtime Comparison')
            plt.xticks(rotation=45)
            plt.tight_layout()
            plt.savefig(f'{output_dir}/runtime_comparison.png')
            plt.close()
            print(f"Saved plot to {output_dir}/runtime_comparison.png")

    for instance_name, logs in (cost_logs or {}).items():
        plot_convergence(logs, f'{output_dir}/convergence_{instance_name}.png')
