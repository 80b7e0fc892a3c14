import numpy as np
from scipy.interpolate import PPoly

from ..core.exceptions import ShapeError


def standard_coefficients(j, tau, alpha):
    """
    Power-basis coefficients ``(c0, c1, c2, c3)`` of knot interval ``j``.

    The local origin is the left knot of the interval, so the piece reads
    ``c0 + c1 dx + c2 dx^2 + c3 dx^3`` with ``dx = x - (xmin + j / alpha)``.
    """
    t0, t1, t2, t3 = tau[j], tau[j + 1], tau[j + 2], tau[j + 3]
    a = 1.0 / 6.0
    return np.array([
        a * (t2 + 4.0 * t1 + t0),
        a * alpha * (3.0 * t2 - 3.0 * t0),
        a * alpha ** 2 * (3.0 * t2 - 6.0 * t1 + 3.0 * t0),
        a * alpha ** 3 * (t3 - 3.0 * t2 + 3.0 * t1 - t0),
    ])


def polynomial_spline(tau, alpha, xmin):
    """
    Convert control coefficients into a ``scipy.interpolate.PPoly``.

    ``len(tau) - 3`` intervals with breakpoints ``xmin + j / alpha``.
    """
    tau = np.asarray(tau, dtype=float)
    if tau.ndim != 1 or tau.shape[0] < 4:
        raise ShapeError(f"At least 4 control coefficients are required, got shape {tau.shape}")
    m = tau.shape[0] - 3
    coefficients = np.column_stack([standard_coefficients(j, tau, alpha) for j in range(m)])
    breakpoints = xmin + np.arange(m + 1) / alpha
    # PPoly stores the highest power first
    return PPoly(coefficients[::-1], breakpoints)
