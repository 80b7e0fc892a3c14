"""
Linear solves for the Newton steps of the barrier optimizer.

Equality constraints are eliminated before the Newton iteration, so the KKT
system handed to these solvers is already reduced to the null space of the
equalities: ``Z^T (t G + H^T D H) Z dz = -grad``.
"""
import numpy as np
from abc import ABC, abstractmethod
from scipy.linalg import LinAlgError, cho_factor, cho_solve, lstsq

from ..core.exceptions import ConvergenceError


class KKTSolver(ABC):
    """Strategy for solving the (reduced) KKT system of one Newton step."""

    @abstractmethod
    def solve(self, hessian, rhs):
        """Return ``dx`` with ``hessian @ dx = rhs``."""
        pass

    def __repr__(self):
        return f"{self.__class__.__name__}()"


class SVDKKTSolver(KKTSolver):
    """
    Minimum-norm least-squares solve through the SVD (LAPACK ``gelsd``).

    Tolerates singular and positive semidefinite systems, which is what equality
    constraints and a linear-annihilating roughness penalty produce.

    Parameters
    ----------
    rcond : float, optional
        Relative cutoff for small singular values; ``None`` uses machine precision.
    """

    def __init__(self, rcond=None):
        self.rcond = rcond

    def solve(self, hessian, rhs):
        try:
            dx, *_ = lstsq(hessian, rhs, cond=self.rcond, lapack_driver="gelsd")
        except (LinAlgError, ValueError) as err:
            raise ConvergenceError(f"SVD solve of the KKT system failed: {err}") from err
        return dx

    def __repr__(self):
        return f"SVDKKTSolver(rcond={self.rcond})"


class CholeskyKKTSolver(KKTSolver):
    """Cholesky solve; fast, but requires a strictly positive definite system."""

    def solve(self, hessian, rhs):
        try:
            factor = cho_factor(hessian, lower=True)
        except (LinAlgError, ValueError) as err:
            raise ConvergenceError(
                "KKT system is not positive definite; use SVDKKTSolver for rank-deficient problems"
            ) from err
        dx = cho_solve(factor, rhs)
        if not np.all(np.isfinite(dx)):
            raise ConvergenceError("Cholesky solve of the KKT system produced non-finite values")
        return dx
