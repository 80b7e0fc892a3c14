"""
Convex quadratic programming with linear constraints.

Conventions shared with the rest of the package:

* objective ``f(x) = 1/2 x^T G x + g^T x + 1/2 r``
* equalities ``A x = b``
* inequalities ``H x <= h``

Equalities are removed by parametrising their solution set as ``x_p + Z z``
where the columns of ``Z`` span the null space of ``A``. Inequality rows that
become constant in ``z`` are checked once and then dropped, so a one-sided
bound that coincides with an equality never enters the barrier.
"""
import numpy as np
import cvxpy as cp
from dataclasses import dataclass, field, fields, replace
from scipy.linalg import lstsq, null_space

from ..core.exceptions import ConfigurationError, ConvergenceError, InfeasibleError
from ..log_config import setup_logger
from .kkt import KKTSolver, SVDKKTSolver

logger = setup_logger(__name__)


@dataclass
class QuadraticObjective:
    """``f(x) = 1/2 x^T G x + g^T x + 1/2 r``"""
    G : np.ndarray
    g : np.ndarray
    r : float = 0.0

    def __post_init__(self):
        self.G = np.atleast_2d(np.asarray(self.G, dtype=float))
        self.g = np.asarray(self.g, dtype=float).ravel()
        self.r = float(self.r)
        n = self.g.shape[0]
        if self.G.shape != (n, n):
            raise ValueError(f"G must be {n}x{n}, got {self.G.shape}")

    @property
    def dimension(self):
        return self.g.shape[0]

    def value(self, x):
        x = np.asarray(x, dtype=float)
        return 0.5 * x @ self.G @ x + self.g @ x + 0.5 * self.r

    def gradient(self, x):
        return self.G @ np.asarray(x, dtype=float) + self.g


@dataclass
class LinearEqualityConstraint:
    """``A x = b``"""
    A : np.ndarray
    b : np.ndarray

    def __post_init__(self):
        self.A = np.atleast_2d(np.asarray(self.A, dtype=float))
        self.b = np.asarray(self.b, dtype=float).ravel()
        if self.A.shape[0] != self.b.shape[0]:
            raise ValueError(f"A has {self.A.shape[0]} rows but b has {self.b.shape[0]} entries")

    def residual(self, x):
        return self.A @ x - self.b

    @classmethod
    def stack(cls, constraints):
        """Merge several equality systems into one; ``None`` when there are no rows."""
        constraints = [c for c in constraints if c is not None and c.A.shape[0] > 0]
        if not constraints:
            return None
        return cls(np.vstack([c.A for c in constraints]), np.concatenate([c.b for c in constraints]))


@dataclass
class LinearInequalityConstraint:
    """``H x <= h``"""
    H : np.ndarray
    h : np.ndarray

    def __post_init__(self):
        self.H = np.atleast_2d(np.asarray(self.H, dtype=float))
        self.h = np.asarray(self.h, dtype=float).ravel()
        if self.H.shape[0] != self.h.shape[0]:
            raise ValueError(f"H has {self.H.shape[0]} rows but h has {self.h.shape[0]} entries")

    def slack(self, x):
        return self.h - self.H @ x

    @classmethod
    def stack(cls, constraints):
        """Merge several inequality systems into one; ``None`` when there are no rows."""
        constraints = [c for c in constraints if c is not None and c.H.shape[0] > 0]
        if not constraints:
            return None
        return cls(np.vstack([c.H for c in constraints]), np.concatenate([c.h for c in constraints]))


@dataclass
class SolverOptions:
    """
    Tunables for the feasibility search and the barrier optimizer.

    Parameters
    ----------
    max_iter : int
        Maximum number of outer (centering) iterations of the barrier method.
    max_newton_iter : int
        Maximum number of Newton steps per centering.
    epsilon : float
        Stop once the duality gap bound ``m / t`` falls below ``epsilon * max(1, |f|)``.
    t0 : float
        Initial barrier weight on the objective.
    mu : float
        Factor by which ``t`` grows after each centering.
    newton_tol : float
        Stop a centering once half the squared Newton decrement is below this.
    line_search_alpha, line_search_beta : float
        Armijo fraction and step shrink factor of the backtracking line search.
    min_step : float
        A centering ends when the line search step drops below this.
    kkt_solver : KKTSolver
        Linear solver for the Newton systems.
    rank_tol : float
        Relative tolerance for null-space and constant-row detection.
    lp_solver : str
        cvxpy solver name used for the phase-1 problem.
    phase1_ridge : float
        Small ridge on the phase-1 iterate, which keeps the max-margin point bounded.
    """
    max_iter            : int       = 100
    max_newton_iter     : int       = 50
    epsilon             : float     = 1e-9
    t0                  : float     = 1.0
    mu                  : float     = 10.0
    newton_tol          : float     = 1e-10
    line_search_alpha   : float     = 0.25
    line_search_beta    : float     = 0.5
    min_step            : float     = 1e-14
    kkt_solver          : KKTSolver = field(default_factory=SVDKKTSolver)
    rank_tol            : float     = 1e-10
    lp_solver           : str       = cp.CLARABEL
    phase1_ridge        : float     = 1e-8

    def __post_init__(self):
        if int(self.max_iter) < 1 or int(self.max_newton_iter) < 1:
            raise ConfigurationError("max_iter and max_newton_iter must be >= 1")
        if self.mu <= 1.0:
            raise ConfigurationError("mu must be > 1")
        if self.t0 <= 0.0 or self.epsilon <= 0.0:
            raise ConfigurationError("t0 and epsilon must be > 0")
        if not 0.0 < self.line_search_alpha < 0.5 or not 0.0 < self.line_search_beta < 1.0:
            raise ConfigurationError("line search requires 0 < alpha < 0.5 and 0 < beta < 1")
        for name in ("newton_tol", "min_step", "rank_tol"):
            if not getattr(self, name) > 0.0:
                raise ConfigurationError(f"{name} must be > 0, got {getattr(self, name)!r}")
        if not self.phase1_ridge >= 0.0:
            raise ConfigurationError(f"phase1_ridge must be >= 0, got {self.phase1_ridge!r}")
        if not isinstance(self.kkt_solver, KKTSolver):
            raise ConfigurationError(f"kkt_solver must be a KKTSolver, got {type(self.kkt_solver).__name__}")
        if self.lp_solver not in cp.installed_solvers():
            raise ConfigurationError(
                f"lp_solver {self.lp_solver!r} is not installed; available: {cp.installed_solvers()}"
            )

    def merge(self, **overrides):
        """Return a copy with ``overrides`` applied; unknown names are rejected."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigurationError(f"Unknown solver options: {unknown}")
        return replace(self, **overrides)


@dataclass
class FeasibilityResult:
    x       : np.ndarray
    margin  : float

    @property
    def feasible(self):
        return self.margin < 0.0


@dataclass
class OptimizationResult:
    x                   : np.ndarray
    value               : float
    iterations          : int
    newton_iterations   : int
    duality_gap         : float


def _dimension(equality, inequality):
    if equality is not None:
        return equality.A.shape[1]
    if inequality is not None:
        return inequality.H.shape[1]
    raise ValueError("At least one constraint is required to determine the problem dimension")


def _equality_parametrisation(equality, n, rank_tol, x0=None):
    """
    Return ``(x_p, Z)`` with ``{x : A x = b} = {x_p + Z z}``, or ``None`` when the
    equalities are inconsistent. With ``x0`` the particular point is the
    projection of ``x0`` onto the affine set.
    """
    if equality is None:
        x_p = np.zeros(n) if x0 is None else np.asarray(x0, dtype=float).copy()
        return x_p, np.eye(n)

    A, b = equality.A, equality.b
    base = np.zeros(n) if x0 is None else np.asarray(x0, dtype=float)
    correction, *_ = lstsq(A, b - A @ base)
    x_p = base + correction
    scale = max(1.0, np.max(np.abs(b)), np.max(np.abs(A)) * max(1.0, np.max(np.abs(x_p))))
    if np.max(np.abs(A @ x_p - b)) > rank_tol * scale:
        return None
    return x_p, null_space(A, rcond=rank_tol)


def _reduce_inequalities(inequality, x_p, Z, rank_tol):
    """Project ``H x <= h`` onto ``z``; returns ``(Hr, hr, free_rows)``."""
    Hr = inequality.H @ Z
    hr = inequality.h - inequality.H @ x_p
    row_scale = np.maximum(np.linalg.norm(inequality.H, axis=1), 1.0)
    free_rows = np.linalg.norm(Hr, axis=1) > rank_tol * row_scale
    return Hr, hr, free_rows


def feasible_point(equalities=(), inequalities=(), options=None):
    """
    Phase-1 search for a point satisfying every constraint.

    Solves ``min s`` subject to ``A x = b``, ``H x - h <= s`` and ``s >= -1``.

    Parameters
    ----------
    equalities : sequence of LinearEqualityConstraint
    inequalities : sequence of LinearInequalityConstraint
    options : SolverOptions, optional

    Returns
    -------
    FeasibilityResult
        ``margin = max(H x - h)`` evaluated at the returned point. A negative
        margin means the point is strictly feasible; ``inf`` means the equality
        constraints are inconsistent.
    """
    options = options or SolverOptions()
    equality = LinearEqualityConstraint.stack(equalities)
    inequality = LinearInequalityConstraint.stack(inequalities)
    n = _dimension(equality, inequality)

    parametrisation = _equality_parametrisation(equality, n, options.rank_tol)
    if parametrisation is None:
        logger.debug("Equality constraints are inconsistent")
        x_ls, *_ = lstsq(equality.A, equality.b)
        return FeasibilityResult(x_ls, np.inf)
    x_p, Z = parametrisation

    if inequality is None:
        return FeasibilityResult(x_p, -np.inf)

    Hr, hr, free_rows = _reduce_inequalities(inequality, x_p, Z, options.rank_tol)
    x = x_p
    if Z.shape[1] > 0 and free_rows.any():
        z = cp.Variable(Z.shape[1])
        s = cp.Variable()
        problem = cp.Problem(
            cp.Minimize(s + options.phase1_ridge * cp.sum_squares(z)),
            [Hr[free_rows] @ z - hr[free_rows] <= s, s >= -1.0],
        )
        try:
            problem.solve(solver=options.lp_solver)
        except cp.SolverError as err:
            raise ConvergenceError(f"Phase-1 feasibility search failed: {err}") from err
        if z.value is None:
            raise ConvergenceError(f"Phase-1 feasibility search ended with status {problem.status}")
        x = x_p + Z @ z.value

    margin = float(np.max(inequality.H @ x - inequality.h))
    logger.debug(f"Phase-1 margin {margin:.3e} over {inequality.H.shape[0]} inequality rows")
    return FeasibilityResult(x, margin)


class BarrierOptimizer:
    """
    Log-barrier interior-point method for convex quadratic programs.

    Minimises ``t f(z) - sum(log(h - H z))`` for an increasing sequence of
    ``t``. Each centering is a damped Newton iteration whose linear systems are
    solved by ``options.kkt_solver``. Iterates stay strictly inside the
    inequality constraints, and equalities hold to rounding error by
    construction.
    """

    def __init__(self, options=None):
        self.options = options or SolverOptions()

    def optimize(self, objective, equalities=(), inequalities=(), x0=None):
        """
        Parameters
        ----------
        objective : QuadraticObjective
        equalities : sequence of LinearEqualityConstraint
        inequalities : sequence of LinearInequalityConstraint
        x0 : array-like, optional
            Strictly feasible starting point, usually from ``feasible_point``.

        Returns
        -------
        OptimizationResult
        """
        opts = self.options
        n = objective.dimension
        equality = LinearEqualityConstraint.stack(equalities)
        inequality = LinearInequalityConstraint.stack(inequalities)

        parametrisation = _equality_parametrisation(equality, n, opts.rank_tol, x0=x0)
        if parametrisation is None:
            raise InfeasibleError("Equality constraints are inconsistent")
        x_p, Z = parametrisation

        # reduced quadratic: 1/2 z^T Gr z + gr^T z + const
        Gr = Z.T @ objective.G @ Z
        gr = Z.T @ objective.gradient(x_p)

        if inequality is None:
            Hr = np.zeros((0, Z.shape[1]))
            hr = np.zeros(0)
        else:
            Hr, hr, free_rows = _reduce_inequalities(inequality, x_p, Z, opts.rank_tol)
            if np.any(hr[~free_rows] <= 0.0):
                raise InfeasibleError("Starting point violates an inequality fixed by the equalities")
            Hr, hr = Hr[free_rows], hr[free_rows]
            if np.any(hr <= 0.0):
                raise InfeasibleError("Starting point is not strictly feasible")

        z = np.zeros(Z.shape[1])
        if Z.shape[1] == 0:
            return self._result(objective, x_p, 0, 0, 0.0)

        if hr.shape[0] == 0:
            z = opts.kkt_solver.solve(Gr, -gr)
            return self._result(objective, x_p + Z @ z, 1, 1, 0.0)

        n_rows = hr.shape[0]
        t = opts.t0
        newton_total = 0
        gap = np.inf
        for iteration in range(1, opts.max_iter + 1):
            z, steps = self._center(Gr, gr, Hr, hr, z, t)
            newton_total += steps
            gap = n_rows / t
            f_value = 0.5 * z @ Gr @ z + gr @ z
            logger.debug(f"Barrier iteration {iteration}: t={t:.3e}, gap={gap:.3e}, newton steps={steps}")
            if gap <= opts.epsilon * max(1.0, abs(objective.value(x_p) + f_value)):
                return self._result(objective, x_p + Z @ z, iteration, newton_total, gap)
            t *= opts.mu

        raise ConvergenceError(
            f"Barrier method did not converge within {opts.max_iter} iterations (duality gap bound {gap:.3e})"
        )

    def _center(self, Gr, gr, Hr, hr, z, t):
        """Damped Newton minimisation of the barrier function at weight ``t``."""
        opts = self.options

        def phi(point):
            return t * (0.5 * point @ Gr @ point + gr @ point) - np.sum(np.log(hr - Hr @ point))

        steps = 0
        for steps in range(1, opts.max_newton_iter + 1):
            inv_slack = 1.0 / (hr - Hr @ z)
            grad = t * (Gr @ z + gr) + Hr.T @ inv_slack
            hess = t * Gr + (Hr.T * inv_slack ** 2) @ Hr
            dz = opts.kkt_solver.solve(hess, -grad)
            decrement = -grad @ dz
            if not np.isfinite(decrement) or not np.all(np.isfinite(dz)):
                raise ConvergenceError("Newton step is not finite")
            if decrement / 2.0 <= opts.newton_tol:
                break

            # largest step that keeps every slack strictly positive
            step = 1.0
            growth = Hr @ dz
            blocking = growth > 0.0
            if blocking.any():
                slack = hr - Hr @ z
                step = min(1.0, 0.99 * np.min(slack[blocking] / growth[blocking]))

            phi_z = phi(z)
            while phi(z + step * dz) > phi_z - opts.line_search_alpha * step * decrement:
                step *= opts.line_search_beta
                if step < opts.min_step:
                    break
            if step < opts.min_step:
                # no further decrease is representable at this t
                break
            z = z + step * dz
        return z, steps

    def _result(self, objective, x, iterations, newton_iterations, gap):
        return OptimizationResult(
            x=x,
            value=float(objective.value(x)),
            iterations=iterations,
            newton_iterations=newton_iterations,
            duality_gap=gap,
        )
