"""Instance data structure for the QBF with prohibited triples."""

from dataclasses import dataclass
import numpy as np


@dataclass
class QBFInstance:
    """
    Instance parameters for the MAX-QBFPT problem.

    The objective is f(x) = x^T A x over binary vectors x of length n. Only the
    upper triangle of A is usually populated (as in the qbf file format), but
    any square matrix is accepted since evaluation uses A[i, j] + A[j, i].

    Attributes:
        n: Number of binary decision variables (domain size)
        A: Coefficient matrix, shape (n, n)
            A[i, j] = coefficient of x_i * x_j
        name: Optional instance name (e.g. the file stem)
    """
    n: int
    A: np.ndarray  # shape (n, n)
    name: str = ""

    def validate(self) -> None:
        """
        Validate the domain size and coefficient matrix.
        Raises ValueError if validation fails.
        """
        if not isinstance(self.n, (int, np.integer)) or self.n < 1:
            raise ValueError(f"domain size must be a positive integer, got {self.n!r}")

        A = np.asarray(self.A)
        if A.ndim != 2 or A.shape[0] != A.shape[1]:
            raise ValueError(f"coefficient matrix must be square, got shape {A.shape}")
        if A.shape != (self.n, self.n):
            raise ValueError(f"A shape {A.shape} != ({self.n}, {self.n})")
        if not np.all(np.isfinite(A)):
            raise ValueError("coefficient matrix must contain only finite values")
