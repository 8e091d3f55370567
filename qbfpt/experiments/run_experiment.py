"""CLI experiment runner with organized directory structure."""

import argparse
import shutil
import time
from pathlib import Path
from typing import Optional

from .run_all import build_configurations, run_all_experiments


def setup_experiment(
    instances_source: str,
    experiment_name: Optional[str] = None,
    copy_instances: bool = True
) -> tuple[Path, Path]:
    """
    Set up experiment directories.

    Args:
        instances_source: Path to source instances (directory, glob pattern, or single file)
        experiment_name: Name for experiment (default: based on source)
        copy_instances: If True, copy instances to experiment directory

    Returns:
        Tuple of (instances_dir, output_dir)
    """
    import glob

    source_path = Path(instances_source)

    if source_path.is_file():
        instance_files = [str(source_path)]
        base_name = source_path.stem
    elif source_path.is_dir():
        instance_files = [str(p) for p in sorted(source_path.iterdir())
                          if p.is_file() and not p.name.startswith('.')]
        base_name = source_path.name
    elif '*' in instances_source:
        instance_files = glob.glob(instances_source)
        base_name = instances_source.replace('*', '').replace('/', '_').replace('\\', '_').strip('_')
        if not base_name or base_name == '_':
            base_name = 'filtered'
    else:
        raise ValueError(f"Invalid instances source: {instances_source}")

    if not instance_files:
        raise ValueError(f"No instance files found matching: {instances_source}")

    if experiment_name is None:
        experiment_name = base_name

    base_dir = Path('experiments') / experiment_name
    instances_dir = base_dir / 'instances'
    output_dir = base_dir / 'results'

    instances_dir.mkdir(parents=True, exist_ok=True)
    output_dir.mkdir(parents=True, exist_ok=True)

    if not copy_instances and source_path.is_dir():
        instances_dir = source_path
    else:
        for src_file in instance_files:
            shutil.copy2(src_file, instances_dir / Path(src_file).name)
        print(f"Copied {len(instance_files)} instances to {instances_dir}")

    return instances_dir, output_dir


def main():
    """CLI entry point for running experiments."""
    parser = argparse.ArgumentParser(
        description='Run Tabu Search configurations on MAX-QBFPT instances',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run all six configurations on a directory of qbf instances
  python -m qbfpt.experiments.run_experiment instances/ --name qbfpt

  # Quick run on the small instances with a shorter budget
  python -m qbfpt.experiments.run_experiment "instances/qbf0*" --name small \\
    --iterations 2000 --time-limit 60 --configs CONFIG01 CONFIG04

  # Report the gap to the exact optimum on small instances
  python -m qbfpt.experiments.run_experiment instances/qbf020 --mip-time 120
        """
    )

    parser.add_argument(
        'instances',
        type=str,
        help='Path to instances: directory, glob pattern (e.g., "instances/qbf0*"), or single file'
    )
    parser.add_argument('--name', type=str, default=None,
                        help='Experiment name (default: based on source)')
    parser.add_argument('--no-copy', action='store_true',
                        help='Do not copy instances (use source directory directly)')

    # Tabu parameters
    parser.add_argument('--tenure1', type=int, default=20,
                        help='Tabu tenure for CONFIG01-05 (default: 20)')
    parser.add_argument('--tenure2', type=int, default=30,
                        help='Tabu tenure for CONFIG06 (default: 30)')
    parser.add_argument('--iterations', type=int, default=10000,
                        help='Tabu max iterations (default: 10000)')
    parser.add_argument('--time-limit', type=float, default=1800.0,
                        help='Time limit per run in seconds (default: 1800)')
    parser.add_argument('--intens-tolerance', type=int, default=1000,
                        help='Consecutive failures before intensification (default: 1000)')
    parser.add_argument('--intens-iterations', type=int, default=100,
                        help='Intensification length in iterations (default: 100)')
    parser.add_argument('--seed', type=int, default=0,
                        help='Random seed for the construction (default: 0)')
    parser.add_argument('--configs', nargs='+', default=None,
                        help='Subset of configurations to run (default: all)')

    # MIP parameters
    parser.add_argument('--mip-time', type=float, default=None,
                        help='Also solve exactly with this time limit in seconds (default: off)')

    parser.add_argument('--no-plots', action='store_true', help='Skip plot generation')
    parser.add_argument('--verbose', action='store_true', help='Verbose output')

    args = parser.parse_args()

    print(f"\n{'='*70}")
    print(f"Setting up experiment: {args.name or 'unnamed'}")
    print(f"{'='*70}")

    instances_dir, output_dir = setup_experiment(
        args.instances,
        experiment_name=args.name,
        copy_instances=not args.no_copy
    )

    print(f"Instances directory: {instances_dir}")
    print(f"Results directory: {output_dir}")

    configurations = build_configurations(
        tenure1=args.tenure1,
        tenure2=args.tenure2,
        iterations=args.iterations,
        time_limit=args.time_limit,
        intensification_tolerance=args.intens_tolerance,
        intensification_iterations=args.intens_iterations,
        seed=args.seed,
    )
    if args.configs:
        unknown = set(args.configs) - set(configurations)
        if unknown:
            parser.error(f"unknown configurations: {', '.join(sorted(unknown))}")
        configurations = {k: v for k, v in configurations.items() if k in args.configs}
    for config in configurations.values():
        config.verbose = args.verbose

    print(f"\nAlgorithm parameters:")
    print(f"  Tabu: tenure1={args.tenure1}, tenure2={args.tenure2}, iters={args.iterations}, "
          f"time_limit={args.time_limit}s")
    print(f"  Intensification: tolerance={args.intens_tolerance}, iterations={args.intens_iterations}")
    print(f"  Configurations: {', '.join(configurations)}")

    print(f"\n{'='*70}")
    print("Running experiments...")
    print(f"{'='*70}\n")

    start_time = time.time()

    run_all_experiments(
        instances_dir=str(instances_dir),
        output_dir=str(output_dir),
        configurations=configurations,
        mip_max_time=args.mip_time,
        plots=not args.no_plots,
    )

    elapsed = time.time() - start_time

    print(f"\n{'='*70}")
    print(f"Experiment complete!")
    print(f"Total time: {elapsed:.1f} seconds ({elapsed/60:.1f} minutes)")
    print(f"Results saved to: {output_dir}")
    print(f"{'='*70}")


if __name__ == '__main__':
    main()
