"""
Linear-system solvers for nodal pressures.

Any callable ``solve(A, b, x0) -> x`` can stand in for these; the
hemodynamics module only consumes the returned vector.
"""

import logging

import numpy as np
import scipy.linalg
import scipy.sparse as sp
import scipy.sparse.linalg

logger = logging.getLogger(__name__)

OMEGA = 1.4
MAX_ITERS = 10000
TOLERANCE = 1e-8
MATRIX_THRESHOLD = 100


def sor(
    A: np.ndarray,
    b: np.ndarray,
    x0: np.ndarray,
    omega: float = OMEGA,
    max_iters: int = MAX_ITERS,
    tol: float = TOLERANCE,
) -> np.ndarray:
    """
    Solve A x = b by successive over-relaxation.

    Systems smaller than ``MATRIX_THRESHOLD`` unknowns are iterated with
    dense numpy arrays; larger ones are converted to CSR and use sparse
    triangular solves.

    Parameters
    ----------
    A : np.ndarray or scipy.sparse matrix
        Square coefficient matrix with non-zero diagonal
    b : np.ndarray
        Right-hand side
    x0 : np.ndarray
        Initial guess
    omega : float
        Relaxation factor
    max_iters : int
        Iteration cap
    tol : float
        L2 residual at which iteration stops

    Returns
    -------
    x : np.ndarray
        Last iterate; convergence is not checked by callers
    """
    b = np.asarray(b, dtype=float)
    x = np.array(x0, dtype=float)
    n = len(b)

    if n == 0:
        return x

    if n < MATRIX_THRESHOLD:
        A = A.toarray() if sp.issparse(A) else np.asarray(A, dtype=float)
        diag = np.diag(np.diag(A))
        lower = np.tril(A, k=-1)
        upper = np.triu(A, k=1)
        left = diag + omega * lower
        right = omega * upper + (omega - 1.0) * diag

        def step(x):
            return scipy.linalg.solve_triangular(left, omega * b - right @ x, lower=True)
    else:
        A = sp.csr_matrix(A)
        diag = sp.diags(A.diagonal())
        lower = sp.tril(A, k=-1)
        upper = sp.triu(A, k=1)
        left = sp.csr_matrix(diag + omega * lower)
        right = sp.csr_matrix(omega * upper + (omega - 1.0) * diag)

        def step(x):
            return scipy.sparse.linalg.spsolve_triangular(left, omega * b - right @ x, lower=True)

    residual = np.inf
    for iteration in range(max_iters):
        x = step(x)
        residual = np.linalg.norm(b - A @ x)
        if residual < tol:
            logger.debug(f"SOR converged after {iteration + 1} iterations (n={n})")
            return x

    logger.debug(f"SOR stopped at iteration cap with residual {residual:.3e} (n={n})")
    return x


def direct(A: np.ndarray, b: np.ndarray, x0: np.ndarray = None) -> np.ndarray:
    """Solve A x = b with a sparse direct factorization; ``x0`` is unused."""
    b = np.asarray(b, dtype=float)
    if len(b) == 0:
        return b.copy()
    return np.atleast_1d(scipy.sparse.linalg.spsolve(sp.csc_matrix(A), b))
