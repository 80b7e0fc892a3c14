import unittest
import numpy as np
import pandas as pd
from monospline import (
    MonotonicSplineInterpolator,
    ConfigurationError,
    ConvergenceError,
    DomainError,
    InfeasibleError,
    ShapeError,
)
from monospline.model._test_utils import (
    EMPIRICAL_CDF_Y,
    REPRO_X_UNIFORM,
    REPRO_X_NORMAL,
    REPRO_X_GAMMA,
    monotone_violation,
)

EPS_EQ = 1e-8
X9 = np.arange(1.0, 10.0)

class MonotoneAssertions:
    def assertMonotone(self, spline):
        self.assertLess(spline.x[0], spline.x[-1])
        min_increment, min_slope = monotone_violation(spline)
        self.assertGreaterEqual(min_increment, -1e-12)
        self.assertGreaterEqual(min_slope, -1e-9)

class TestMonotonicSplineFit(MonotoneAssertions, unittest.TestCase):
    def setUp(self):
        self.y_noisy = np.array([0.0, 0.05, 0.02, 0.3, 0.5, 0.7, 0.99, 0.95, 1.0])
        self.y_wiggly = np.array([0.0, 0.2, 0.1, 0.4, 0.5, 0.6, 0.9, 0.8, 1.0])
        self.y_bounded = np.array([0.0, 0.2, 0.05, 0.3, 0.5, 0.7, 0.95, 0.8, 1.0])

    def test_default_fit(self):
        spline = MonotonicSplineInterpolator().fit(X9, self.y_noisy)
        self.assertMonotone(spline)
        np.testing.assert_allclose(spline.x, np.linspace(1.0, 9.0, 6))

    def test_second_data_set(self):
        y = [0.0, 0.15, 0.05, 0.3, 0.5, 0.7, 0.95, 0.98, 1.0]
        self.assertMonotone(MonotonicSplineInterpolator().fit(X9, y))

    def test_decreasing_data(self):
        """A decreasing trend still yields a non-decreasing fit."""
        spline = MonotonicSplineInterpolator().fit(X9, X9[::-1])
        self.assertMonotone(spline)

    def test_interpolate_alias(self):
        interpolator = MonotonicSplineInterpolator()
        a = interpolator.fit(X9, self.y_noisy)
        b = interpolator.interpolate(X9, self.y_noisy)
        np.testing.assert_allclose(a.c, b.c)

    def test_equality_constraint(self):
        interpolator = MonotonicSplineInterpolator()
        interpolator.add_equality_constraint(5.0, 0.7)
        spline = interpolator.fit(X9, self.y_wiggly)
        self.assertMonotone(spline)
        self.assertAlmostEqual(spline(5.0), 0.7, delta=EPS_EQ)

    def test_endpoint_equality_constraints(self):
        interpolator = MonotonicSplineInterpolator()
        interpolator.add_equality_constraint(1.0, 0.0).add_equality_constraint(9.0, 1.0)
        spline = interpolator.fit(X9, self.y_wiggly)
        self.assertMonotone(spline)
        self.assertAlmostEqual(spline(1.0), 0.0, delta=EPS_EQ)
        self.assertAlmostEqual(spline(9.0), 1.0, delta=EPS_EQ)

    def test_gradient_constraint(self):
        interpolator = MonotonicSplineInterpolator()
        interpolator.add_gradient_equality_constraint(5.0, 2.0)
        spline = interpolator.fit(X9, self.y_wiggly)
        self.assertMonotone(spline)
        self.assertAlmostEqual(spline.derivative()(5.0), 2.0, delta=EPS_EQ)

    def test_gradient_and_value_constraints(self):
        interpolator = MonotonicSplineInterpolator()
        interpolator.add_equality_constraint(1.0, 0.0)
        interpolator.add_equality_constraint(9.0, 1.0)
        interpolator.add_gradient_equality_constraint(5.0, 0.321)
        spline = interpolator.fit(X9, self.y_wiggly)
        self.assertMonotone(spline)
        self.assertAlmostEqual(spline(1.0), 0.0, delta=EPS_EQ)
        self.assertAlmostEqual(spline(9.0), 1.0, delta=EPS_EQ)
        self.assertAlmostEqual(spline.derivative()(5.0), 0.321, delta=EPS_EQ)

    def test_inequality_constraints(self):
        interpolator = MonotonicSplineInterpolator()
        interpolator.add_greater_than_constraint(1.0, 0.1)
        interpolator.add_less_than_constraint(9.0, 0.9)
        spline = interpolator.fit(X9, self.y_bounded)
        self.assertMonotone(spline)
        self.assertGreaterEqual(spline(1.0), 0.1 - EPS_EQ)
        self.assertLessEqual(spline(9.0), 0.9 + EPS_EQ)
        # both bounds are active for these data
        self.assertAlmostEqual(spline(1.0), 0.1, places=6)
        self.assertAlmostEqual(spline(9.0), 0.9, places=6)

    def test_inequality_and_equality_constraints(self):
        interpolator = MonotonicSplineInterpolator()
        interpolator.add_inequality_constraint(1.0, 0.1, ">=")
        interpolator.add_inequality_constraint(9.0, 0.9, "<=")
        interpolator.add_equality_constraint(5.0, 0.555)
        spline = interpolator.fit(X9, self.y_bounded)
        self.assertMonotone(spline)
        self.assertGreaterEqual(spline(1.0), 0.1 - EPS_EQ)
        self.assertLessEqual(spline(9.0), 0.9 + EPS_EQ)
        self.assertAlmostEqual(spline(5.0), 0.555, delta=EPS_EQ)

    def test_weights_pull_the_fit(self):
        plain = MonotonicSplineInterpolator().fit(X9, self.y_noisy)
        w = np.ones(9)
        w[4] = 1e4
        weighted = MonotonicSplineInterpolator().set_weights(w).fit(X9, self.y_noisy)
        self.assertMonotone(weighted)
        self.assertLess(abs(weighted(5.0) - 0.5), 1e-2)
        self.assertLessEqual(abs(weighted(5.0) - 0.5), abs(plain(5.0) - 0.5) + 1e-12)

    def test_explicit_bounds(self):
        interpolator = MonotonicSplineInterpolator(m=4).set_bounds(0.0, 10.0)
        spline = interpolator.fit(X9, self.y_noisy)
        self.assertMonotone(spline)
        np.testing.assert_allclose(spline.x, [0.0, 2.5, 5.0, 7.5, 10.0])

    def test_pandas_input(self):
        expected = MonotonicSplineInterpolator().fit(X9, self.y_noisy)
        spline = MonotonicSplineInterpolator().fit(pd.Series(X9), pd.Series(self.y_noisy))
        np.testing.assert_allclose(spline.c, expected.c, atol=1e-10)

    def test_cholesky_kkt_solver(self):
        from monospline.optimizer import CholeskyKKTSolver
        interpolator = MonotonicSplineInterpolator()
        interpolator.add_solver_options(kkt_solver=CholeskyKKTSolver())
        spline = interpolator.fit(X9, self.y_noisy)
        self.assertMonotone(spline)
        expected = MonotonicSplineInterpolator().fit(X9, self.y_noisy)
        np.testing.assert_allclose(spline(X9), expected(X9), atol=1e-6)

class TestMonotonicSplineConstraintState(unittest.TestCase):
    def test_constraints_persist_until_cleared(self):
        y = [0.0, 0.2, 0.1, 0.4, 0.5, 0.6, 0.9, 0.8, 1.0]
        interpolator = MonotonicSplineInterpolator()
        interpolator.add_equality_constraint(5.0, 0.7)
        first = interpolator.fit(X9, y)
        second = interpolator.fit(X9, y)
        self.assertAlmostEqual(second(5.0), 0.7, delta=EPS_EQ)
        np.testing.assert_allclose(first.c, second.c, atol=1e-10)

        interpolator.clear_constraints()
        self.assertEqual(interpolator.value_constraints, [])
        plain = MonotonicSplineInterpolator().fit(X9, y)
        np.testing.assert_allclose(interpolator.fit(X9, y).c, plain.c, atol=1e-10)

    def test_bounds_are_not_stored_by_fit(self):
        interpolator = MonotonicSplineInterpolator()
        interpolator.fit(X9, X9 / 9.0)
        self.assertIsNone(interpolator.xmin)
        self.assertIsNone(interpolator.xmax)

    def test_repr(self):
        self.assertEqual(repr(MonotonicSplineInterpolator(m=7, lam=0.5)),
                         "MonotonicSplineInterpolator(m=7, lam=0.5)")

class TestMonotonicSplineErrors(unittest.TestCase):
    def setUp(self):
        self.y = np.linspace(0.0, 1.0, 9)

    def test_invalid_configuration(self):
        with self.assertRaises(ConfigurationError):
            MonotonicSplineInterpolator(m=3)
        with self.assertRaises(ConfigurationError):
            MonotonicSplineInterpolator(m=5.5)
        with self.assertRaises(ConfigurationError):
            MonotonicSplineInterpolator(lam=0.0)
        with self.assertRaises(ConfigurationError):
            MonotonicSplineInterpolator().set_bounds(2.0, 1.0)
        with self.assertRaises(ConfigurationError):
            MonotonicSplineInterpolator().set_weights([1.0, 0.0, 1.0])
        with self.assertRaises(ConfigurationError):
            MonotonicSplineInterpolator().add_gradient_equality_constraint(1.0, -0.5)
        with self.assertRaises(ConfigurationError):
            MonotonicSplineInterpolator().add_equality_constraint(np.nan, 0.5)
        with self.assertRaises(ConfigurationError):
            MonotonicSplineInterpolator().add_inequality_constraint(1.0, 0.5, "==")
        with self.assertRaises(ConfigurationError):
            MonotonicSplineInterpolator().add_solver_options(max_iterations=3)
        with self.assertRaises(ConfigurationError):
            MonotonicSplineInterpolator().add_solver_options(rank_tol=-1.0)
        with self.assertRaises(ConfigurationError):
            MonotonicSplineInterpolator().add_solver_options(lp_solver="NO_SUCH_SOLVER")

    def test_invalid_data(self):
        interpolator = MonotonicSplineInterpolator()
        with self.assertRaises(ShapeError):
            interpolator.fit(X9, self.y[:-1])
        with self.assertRaises(ShapeError):
            interpolator.fit(X9[:7], self.y[:7])
        with self.assertRaises(ConfigurationError):
            interpolator.fit(np.ones(9), self.y)
        with self.assertRaises(ConfigurationError):
            interpolator.fit(np.append(X9[:-1], np.inf), self.y)
        with self.assertRaises(ShapeError):
            MonotonicSplineInterpolator().set_weights(np.ones(5)).fit(X9, self.y)

    def test_constraint_outside_domain(self):
        interpolator = MonotonicSplineInterpolator()
        interpolator.add_equality_constraint(10.0, 1.0)
        with self.assertRaises(DomainError):
            interpolator.fit(X9, self.y)

    def test_contradictory_equalities(self):
        interpolator = MonotonicSplineInterpolator()
        interpolator.add_equality_constraint(5.0, 0.3).add_equality_constraint(5.0, 0.6)
        with self.assertRaises(InfeasibleError):
            interpolator.fit(X9, self.y)

    def test_nearly_identical_equalities(self):
        interpolator = MonotonicSplineInterpolator()
        interpolator.add_equality_constraint(5.0, 0.5).add_equality_constraint(5.0, 0.5 + 1.5e-7)
        with self.assertRaises(InfeasibleError):
            interpolator.fit(X9, self.y)

        # the gap is judged relative to the size of the targets
        interpolator = MonotonicSplineInterpolator()
        interpolator.add_equality_constraint(5.0, 500.0).add_equality_constraint(5.0, 500.0 + 1e-4)
        with self.assertRaises(InfeasibleError):
            interpolator.fit(X9, 1000.0 * self.y)

    def test_repeated_equality_is_consistent(self):
        interpolator = MonotonicSplineInterpolator()
        interpolator.add_equality_constraint(5.0, 0.5).add_equality_constraint(5.0, 0.5)
        spline = interpolator.fit(X9, self.y)
        self.assertAlmostEqual(spline(5.0), 0.5, delta=EPS_EQ)

    def test_decreasing_value_constraints(self):
        interpolator = MonotonicSplineInterpolator()
        interpolator.add_equality_constraint(2.0, 0.8).add_equality_constraint(8.0, 0.2)
        with self.assertRaises(InfeasibleError):
            interpolator.fit(X9, self.y)

    def test_iteration_limit(self):
        y = [0.0, 0.05, 0.02, 0.3, 0.5, 0.7, 0.99, 0.95, 1.0]
        interpolator = MonotonicSplineInterpolator()
        interpolator.add_solver_options(max_iter=1)
        with self.assertRaises(ConvergenceError):
            interpolator.fit(X9, y)

class TestEmpiricalCDFRegression(MonotoneAssertions, unittest.TestCase):
    """Empirical samples with near-duplicate x and pinned endpoints."""

    def _fit_pinned(self, x):
        eps = 1e-9
        xmin, xmax = x[0], x[-1]
        interpolator = MonotonicSplineInterpolator(m=20).set_bounds(xmin, xmax)
        interpolator.add_equality_constraint(xmin, eps)
        interpolator.add_greater_than_constraint(xmin, 0.0)
        interpolator.add_equality_constraint(xmax, 1.0 - eps)
        interpolator.add_less_than_constraint(xmax, 1.0)
        interpolator.add_solver_options(max_iter=25)
        spline = interpolator.fit(x, EMPIRICAL_CDF_Y)
        self.assertMonotone(spline)
        self.assertAlmostEqual(spline(xmin), 0.0, delta=EPS_EQ)
        self.assertAlmostEqual(spline(xmax), 1.0, delta=EPS_EQ)

    def test_uniform_sample(self):
        self._fit_pinned(REPRO_X_UNIFORM)

    def test_normal_sample(self):
        self._fit_pinned(REPRO_X_NORMAL)

    def test_gamma_sample(self):
        self._fit_pinned(REPRO_X_GAMMA)
