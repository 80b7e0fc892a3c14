import numpy as np

from ..core.enums import ConstraintDirection
from ..core.exceptions import ConfigurationError, InfeasibleError, ShapeError
from ..core.type_hints import ArrayLike
from ..log_config import setup_logger
from ..optimizer.convex import BarrierOptimizer, SolverOptions, feasible_point
from ..spline.constraints import equality_constraints, inequality_constraints, monotone_constraints
from ..spline.matrices import knot_vector
from ..spline.objective import quadratic_objective
from ..spline.realize import polynomial_spline
from ..utils.decorators import log_runtime
from ..utils.validation import as_float_array, require_finite

logger = setup_logger(__name__)

M_DEFAULT = 5
M_MINIMUM = 4
LAMBDA_DEFAULT = 1.0


def fit_monotone_spline(x, y, m, xmin, xmax, lam, w,
                        values=(), slopes=(), bounds=(), solver_options=None):
    """
    Fit a monotone non-decreasing cubic spline; the functional core of ``MonotonicSplineInterpolator``.

    Inputs are expected to be validated already.

    Parameters
    ----------
    x, y, w : np.ndarray
        Data abscissas, targets and positive weights.
    m : int
        Number of spline intervals over ``[xmin, xmax]``.
    xmin, xmax : float
        Fitting domain.
    lam : float
        Smoothing parameter.
    values : sequence of (x, y)
        Value equality constraints.
    slopes : sequence of (x, dydx)
        Derivative equality constraints.
    bounds : sequence of (x, y, direction)
        One-sided value constraints.
    solver_options : dict, optional
        Overrides for ``SolverOptions``.

    Returns
    -------
    scipy.interpolate.PPoly
    """
    M = m + 3
    knots, alpha = knot_vector(m, xmin, xmax)
    options = SolverOptions().merge(**(solver_options or {}))

    equalities = [equality_constraints(knots, alpha, xmin, xmax, values, slopes)]
    inequalities = [
        monotone_constraints(m, M),
        inequality_constraints(knots, alpha, xmin, xmax, bounds),
    ]
    equalities = [c for c in equalities if c is not None]
    inequalities = [c for c in inequalities if c is not None]

    feasible = feasible_point(equalities, inequalities, options)
    if not feasible.feasible:
        raise InfeasibleError(
            f"Unable to find an initial point in the feasible region (margin {feasible.margin:.3e})"
        )
    logger.debug(f"Feasible starting point found with margin {feasible.margin:.3e}")

    objective = quadratic_objective(x, y, knots, w, lam, alpha)
    result = BarrierOptimizer(options).optimize(objective, equalities, inequalities, feasible.x)
    logger.debug(
        f"Barrier optimizer converged after {result.iterations} iterations "
        f"({result.newton_iterations} Newton steps), objective {result.value:.6g}"
    )
    return polynomial_spline(result.x, alpha, xmin)


class MonotonicSplineInterpolator:
    """
    Fit data with a cubic spline that is constrained to be monotonic non-decreasing.

    Settings accumulate through the setters and are validated immediately.
    Each call to ``fit`` consumes the current settings and returns an
    independent ``scipy.interpolate.PPoly``. Point constraints persist across
    calls until ``clear_constraints`` is called.

    Examples
    --------
    >>> interpolator = MonotonicSplineInterpolator()
    >>> interpolator.add_equality_constraint(5.0, 0.7)
    >>> spline = interpolator.fit(x, y)
    >>> spline(5.0), spline.derivative()(5.0)
    """

    def __init__(self, m=M_DEFAULT, lam=LAMBDA_DEFAULT):
        self.m = M_DEFAULT
        self.lam = LAMBDA_DEFAULT
        self.weights = None
        self.xmin = None
        self.xmax = None
        self.value_constraints = []
        self.slope_constraints = []
        self.bound_constraints = []
        self.solver_options = {}
        self.set_m(m)
        self.set_lambda(lam)

    # -----------------------------
    # Configuration
    # -----------------------------
    def set_m(self, m):
        """Set the number of piecewise polynomial intervals; at least 4, and ``m + 3`` data are needed."""
        if isinstance(m, bool) or not isinstance(m, (int, np.integer)):
            raise ConfigurationError(f"m must be an integer, got {m!r}")
        if m < M_MINIMUM:
            raise ConfigurationError(f"m must be >= {M_MINIMUM}, got {m}")
        self.m = int(m)
        return self

    def set_lambda(self, lam):
        """Set the smoothing parameter; larger values favour smoother fits."""
        lam = require_finite(lam, "lambda")
        if lam <= 0.0:
            raise ConfigurationError(f"lambda must be > 0, got {lam}")
        self.lam = lam
        return self

    def set_bounds(self, xmin, xmax):
        """Fix the fitting domain; by default it spans the data."""
        xmin = require_finite(xmin, "xmin")
        xmax = require_finite(xmax, "xmax")
        if xmax <= xmin:
            raise ConfigurationError(f"xmin must be < xmax, got [{xmin}, {xmax}]")
        self.xmin, self.xmax = xmin, xmax
        return self

    def set_weights(self, w: ArrayLike):
        """Per-sample weights, all > 0 and as many as the data; by default all ones."""
        w = as_float_array(w, "weights")
        if np.any(w <= 0.0):
            raise ConfigurationError("weights must be > 0")
        self.weights = w
        return self

    def add_equality_constraint(self, x, y):
        """Require ``s(x) == y``."""
        self.value_constraints.append((require_finite(x, "x"), require_finite(y, "y")))
        return self

    def add_gradient_equality_constraint(self, x, dydx):
        """Require ``s'(x) == dydx``; ``dydx`` must be >= 0."""
        dydx = require_finite(dydx, "dydx")
        if dydx < 0.0:
            raise ConfigurationError("dydx cannot be negative for monotone spline fitting")
        self.slope_constraints.append((require_finite(x, "x"), dydx))
        return self

    def add_inequality_constraint(self, x, y, direction):
        """Require ``s(x) >= y`` or ``s(x) <= y`` depending on ``direction``."""
        try:
            direction = ConstraintDirection.parse(direction)
        except ValueError as err:
            raise ConfigurationError(f"Unknown constraint direction {direction!r}") from err
        self.bound_constraints.append((require_finite(x, "x"), require_finite(y, "y"), direction))
        return self

    def add_greater_than_constraint(self, x, y):
        """Require ``s(x) >= y``."""
        return self.add_inequality_constraint(x, y, ConstraintDirection.GREATER_EQUAL)

    def add_less_than_constraint(self, x, y):
        """Require ``s(x) <= y``."""
        return self.add_inequality_constraint(x, y, ConstraintDirection.LESS_EQUAL)

    def add_solver_options(self, **options):
        """Pass options such as ``max_iter`` or ``kkt_solver`` to the optimizer; later values win."""
        SolverOptions().merge(**options)
        self.solver_options.update(options)
        return self

    def clear_constraints(self):
        """Remove every point constraint."""
        self.value_constraints.clear()
        self.slope_constraints.clear()
        self.bound_constraints.clear()
        return self

    # -----------------------------
    # Fitting
    # -----------------------------
    def _resolve_inputs(self, x, y):
        x = as_float_array(x, "x")
        y = as_float_array(y, "y")
        n, M = x.shape[0], self.m + 3
        if y.shape[0] != n:
            raise ShapeError(f"x and y must have the same length, got {n} and {y.shape[0]}")
        if n < M:
            raise ShapeError(f"data length ({n}) must be >= {M} for m={self.m}")

        if self.weights is None:
            w = np.ones(n)
        else:
            w = self.weights
            if w.shape[0] != n:
                raise ShapeError(f"weights must match the data length, got {w.shape[0]} and {n}")

        xmin = np.min(x) if self.xmin is None else self.xmin
        xmax = np.max(x) if self.xmax is None else self.xmax
        if xmax <= xmin:
            raise ConfigurationError(f"xmin must be < xmax, got [{xmin}, {xmax}]")
        return x, y, w, float(xmin), float(xmax)

    @log_runtime("MonotonicSplineInterpolator.fit")
    def fit(self, x: ArrayLike, y: ArrayLike):
        """
        Fit the configured monotone spline to data ``(x, y)``.

        Parameters
        ----------
        x, y : array-like
            Data, at least ``m + 3`` points. Duplicate x values are allowed.

        Returns
        -------
        scipy.interpolate.PPoly
            Non-decreasing over ``[xmin, xmax]``; ``.derivative()`` gives the slope spline.

        Raises
        ------
        ConfigurationError, ShapeError, DomainError, InfeasibleError, ConvergenceError
        """
        x, y, w, xmin, xmax = self._resolve_inputs(x, y)
        logger.debug(
            f"Fitting {x.shape[0]} points on [{xmin}, {xmax}] with m={self.m}, lambda={self.lam}, "
            f"{len(self.value_constraints)} value, {len(self.slope_constraints)} slope and "
            f"{len(self.bound_constraints)} one-sided constraints"
        )
        return fit_monotone_spline(
            x, y, self.m, xmin, xmax, self.lam, w,
            values=list(self.value_constraints),
            slopes=list(self.slope_constraints),
            bounds=list(self.bound_constraints),
            solver_options=dict(self.solver_options),
        )

    interpolate = fit

    def __repr__(self):
        return f"MonotonicSplineInterpolator(m={self.m}, lam={self.lam})"
