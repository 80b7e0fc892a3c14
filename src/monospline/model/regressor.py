import numpy as np
import matplotlib.pyplot as plt
from sklearn.base import BaseEstimator, RegressorMixin
from sklearn.exceptions import NotFittedError

from ..utils.validation import as_float_array
from .monotonic_spline import LAMBDA_DEFAULT, M_DEFAULT, MonotonicSplineInterpolator


class MonotonicSplineRegressor(BaseEstimator, RegressorMixin):
    """
    scikit-learn estimator wrapping ``MonotonicSplineInterpolator``.

    Parameters:
    -----------
    m : int
        Number of spline intervals (>= 4).
    lam : float
        Smoothing parameter (> 0).
    bounds : (xmin, xmax) or None
        Fitting domain; None spans the training data.
    equality_constraints : list of (x, y), optional
        Points the spline must pass through.
    gradient_constraints : list of (x, dydx), optional
        Points where the slope is fixed (dydx >= 0).
    inequality_constraints : list of (x, y, direction), optional
        One-sided bounds, direction ">=" or "<=".
    solver_options : dict, optional
        Overrides passed to the barrier optimizer, e.g. ``{"max_iter": 50}``.
    """

    def __init__(self, m=M_DEFAULT, lam=LAMBDA_DEFAULT, bounds=None, equality_constraints=None,
                 gradient_constraints=None, inequality_constraints=None, solver_options=None):
        self.m = m
        self.lam = lam
        self.bounds = bounds
        self.equality_constraints = equality_constraints
        self.gradient_constraints = gradient_constraints
        self.inequality_constraints = inequality_constraints
        self.solver_options = solver_options

    def _build_interpolator(self):
        interpolator = MonotonicSplineInterpolator(m=self.m, lam=self.lam)
        if self.bounds is not None:
            interpolator.set_bounds(*self.bounds)
        for x, y in self.equality_constraints or []:
            interpolator.add_equality_constraint(x, y)
        for x, dydx in self.gradient_constraints or []:
            interpolator.add_gradient_equality_constraint(x, dydx)
        for x, y, direction in self.inequality_constraints or []:
            interpolator.add_inequality_constraint(x, y, direction)
        if self.solver_options:
            interpolator.add_solver_options(**self.solver_options)
        return interpolator

    def fit(self, X, y, sample_weight=None):
        x = as_float_array(X, "X")
        interpolator = self._build_interpolator()
        if sample_weight is not None:
            interpolator.set_weights(sample_weight)
        self.spline_ = interpolator.fit(x, y)
        self.derivative_ = self.spline_.derivative()
        self.n_features_in_ = 1
        return self

    def _require_fitted(self):
        if not hasattr(self, "spline_"):
            raise NotFittedError("Model not fitted yet. Please call fit() first.")

    def predict(self, X):
        self._require_fitted()
        return self.spline_(as_float_array(X, "X"))

    def derivative(self, X):
        """Slope of the fitted spline at ``X``."""
        self._require_fitted()
        return self.derivative_(as_float_array(X, "X"))

    def plot_fit(self, X, y, n_grid=200, ax=None):
        """Scatter the data and draw the fitted spline over its domain."""
        self._require_fitted()
        if ax is None:
            fig, ax = plt.subplots()
        else:
            fig = ax.figure
        grid = np.linspace(self.spline_.x[0], self.spline_.x[-1], n_grid)
        ax.scatter(as_float_array(X, "X"), as_float_array(y, "y"), s=12, alpha=0.6, label="Data")
        ax.plot(grid, self.spline_(grid), color="red", label="Monotone spline")
        ax.legend()
        ax.grid(True, linestyle="--", alpha=0.5)
        return fig, ax
