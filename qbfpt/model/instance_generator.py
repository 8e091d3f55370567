"""Instance generator and instance file I/O for QBF problems."""

import json
from pathlib import Path
from typing import Sequence, Tuple

import numpy as np

from .instance import QBFInstance

# Sizes of the classic qbf benchmark set (qbf020 ... qbf400)
DEFAULT_SIZES: Tuple[int, ...] = (20, 40, 60, 80, 100, 200, 400)


def generate_instance(
    n: int = 20,
    seed: int = 42,
    low: int = -10,
    high: int = 10,
    name: str = "",
) -> QBFInstance:
    """
    Generate a random QBF instance with integer upper-triangular coefficients.

    Args:
        n: Domain size (number of binary variables)
        seed: Random seed for reproducibility
        low: Smallest coefficient value (inclusive)
        high: Largest coefficient value (inclusive)
        name: Optional instance name

    Returns:
        Validated QBFInstance
    """
    if n < 1:
        raise ValueError(f"domain size must be positive, got {n}")
    if low > high:
        raise ValueError(f"low ({low}) must not exceed high ({high})")

    rng = np.random.RandomState(seed)
    A = rng.randint(low, high + 1, size=(n, n)).astype(float)
    # Keep the upper triangle only, matching the qbf file format
    A = np.triu(A)

    instance = QBFInstance(n=n, A=A, name=name or f"qbf{n:03d}")
    instance.validate()
    return instance


def _format_value(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def save_instance(instance: QBFInstance, filepath: str) -> None:
    """
    Save instance to file.

    Files ending in ``.json`` hold ``{"n", "A", "name"}``; anything else is
    written in the qbf text format: the domain size on the first line, then
    row i with the coefficients A[i][i..n-1]. Lower-triangle entries are folded
    into the upper triangle (the objective is unchanged).

    Args:
        instance: Instance to save
        filepath: Path to save file
    """
    path = Path(filepath)
    A = np.asarray(instance.A, dtype=float)

    if path.suffix == '.json':
        data = {
            'n': int(instance.n),
            'A': A.tolist(),
            'name': instance.name,
        }
        with open(path, 'w') as f:
            json.dump(data, f, indent=2)
        return

    upper = np.triu(A) + np.tril(A, -1).T
    with open(path, 'w') as f:
        f.write(f"{instance.n}\n")
        for i in range(instance.n):
            f.write(" ".join(_format_value(v) for v in upper[i, i:]) + "\n")


def _load_qbf_text(path: Path) -> QBFInstance:
    with open(path, 'r') as f:
        tokens = f.read().split()

    if not tokens:
        raise ValueError(f"{path}: empty instance file")

    try:
        n = int(tokens[0])
    except ValueError:
        raise ValueError(f"{path}: first token must be the domain size, got {tokens[0]!r}")
    if n < 1:
        raise ValueError(f"{path}: domain size must be positive, got {n}")

    expected = n * (n + 1) // 2
    values = tokens[1:]
    if len(values) != expected:
        raise ValueError(
            f"{path}: expected {expected} upper-triangular coefficients for n={n}, got {len(values)}"
        )

    A = np.zeros((n, n), dtype=float)
    pos = 0
    for i in range(n):
        row = values[pos:pos + n - i]
        try:
            A[i, i:] = [float(v) for v in row]
        except ValueError as e:
            raise ValueError(f"{path}: invalid coefficient in row {i}: {e}") from e
        pos += n - i

    return QBFInstance(n=n, A=A, name=path.stem)


def load_instance(filepath: str) -> QBFInstance:
    """
    Load instance from a qbf text file or a JSON file.

    Args:
        filepath: Path to instance file

    Returns:
        Loaded and validated QBFInstance

    Raises:
        ValueError: if the file is malformed
    """
    path = Path(filepath)

    if path.suffix == '.json':
        with open(path, 'r') as f:
            data = json.load(f)
        instance = QBFInstance(
            n=int(data['n']),
            A=np.array(data['A'], dtype=float),
            name=data.get('name', path.stem),
        )
    else:
        instance = _load_qbf_text(path)

    instance.validate()
    return instance


def generate_instance_set(
    output_dir: str = 'instances',
    sizes: Sequence[int] = DEFAULT_SIZES,
    seed: int = 100,
) -> None:
    """
    Generate one random instance per size and save them as qbfNNN files.

    Args:
        output_dir: Directory to save instances
        sizes: Domain sizes to generate
        seed: Base random seed (instance k uses seed + k)
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    print(f"Generating {len(sizes)} instances...")
    for k, n in enumerate(sizes):
        instance = generate_instance(n=n, seed=seed + k)
        filepath = output_path / f'qbf{n:03d}'
        save_instance(instance, str(filepath))
        print(f"  Saved {filepath}")

    print(f"\nGenerated {len(sizes)} instances in {output_dir}/")
