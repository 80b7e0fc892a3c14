"""
Linear constraint systems over the B-spline control coefficients.

Every inequality is emitted in the solver form ``H tau <= h`` and every
equality as ``A tau = b``.
"""
import numpy as np

from ..core.enums import ConstraintDirection
from ..core.exceptions import DomainError
from ..core.type_hints import BoundConstraints, SlopeConstraints, ValueConstraints
from ..optimizer.convex import LinearEqualityConstraint, LinearInequalityConstraint
from .basis import local_basis, local_basis_derivative

# Sufficient conditions for a non-decreasing cubic on one knot interval, written
# over the four coefficients active there and already negated into "<= 0" form.
FM3 = np.array([1.0, 0.0, -1.0,  0.0])
FM2 = np.array([1.0, 2.0, -3.0,  0.0])
FM1 = np.array([0.0, 1.0,  0.0, -1.0])
FM0 = np.array([0.0, 3.0, -2.0, -1.0])
MONOTONE_TEMPLATES = np.vstack([FM3, FM2, FM1, FM0])


def monotone_constraints(m, M):
    """The ``4m x M`` system ``H tau <= 0`` forcing a non-decreasing spline on every interval."""
    n_templates, width = MONOTONE_TEMPLATES.shape
    H = np.zeros((n_templates * m, M))
    for z in range(m):
        H[n_templates * z:n_templates * (z + 1), z:z + width] = MONOTONE_TEMPLATES
    return LinearInequalityConstraint(H, np.zeros(n_templates * m))


def knot_interval(x, knots):
    """Index ``q`` with ``K[q] <= x < K[q+1]``, clamped to the last knot."""
    q = int(np.searchsorted(knots, x, side="right")) - 1
    return min(max(q, 0), len(knots) - 1)


def _locate(x, knots, alpha, xmin, xmax):
    if x < xmin or x > xmax:
        raise DomainError(f"Constraint at x={x} lies outside the fitting domain [{xmin}, {xmax}]")
    q = knot_interval(x, knots)
    return q, alpha * (x - knots[q])


def equality_constraints(knots, alpha, xmin, xmax,
                         values: ValueConstraints = (),
                         slopes: SlopeConstraints = ()):
    """
    Merge value and derivative equalities into one system ``A tau = b``.

    Parameters
    ----------
    values : sequence of (x, y)
        The spline must pass through ``(x, y)``.
    slopes : sequence of (x, dydx)
        The spline derivative at ``x`` must equal ``dydx``.

    Returns
    -------
    LinearEqualityConstraint or None
        Value rows first, then derivative rows; ``None`` when both are empty.
    """
    values, slopes = list(values), list(slopes)
    n_rows = len(values) + len(slopes)
    if n_rows == 0:
        return None
    M = len(knots)
    A = np.zeros((n_rows, M))
    b = np.zeros(n_rows)
    for row, (x, y) in enumerate(values):
        q, t = _locate(x, knots, alpha, xmin, xmax)
        A[row, q - 3:q + 1] = local_basis(t)
        b[row] = y
    for row, (x, dydx) in enumerate(slopes, start=len(values)):
        q, t = _locate(x, knots, alpha, xmin, xmax)
        A[row, q - 3:q + 1] = alpha * local_basis_derivative(t)
        b[row] = dydx
    return LinearEqualityConstraint(A, b)


def inequality_constraints(knots, alpha, xmin, xmax, bounds: BoundConstraints = ()):
    """
    One-sided value bounds ``s(x) >= y`` or ``s(x) <= y`` as ``H tau <= h``.

    Parameters
    ----------
    bounds : sequence of (x, y, direction)
        ``direction`` is a ``ConstraintDirection`` or its string value.

    Returns
    -------
    LinearInequalityConstraint or None
    """
    bounds = list(bounds)
    if not bounds:
        return None
    M = len(knots)
    H = np.zeros((len(bounds), M))
    h = np.zeros(len(bounds))
    for row, (x, y, direction) in enumerate(bounds):
        sign = ConstraintDirection.parse(direction).sign
        q, t = _locate(x, knots, alpha, xmin, xmax)
        H[row, q - 3:q + 1] = sign * local_basis(t)
        h[row] = sign * y
    return LinearInequalityConstraint(H, h)
