"""
Uniform cubic B-spline kernel.

``b3`` has support ``[0, 4)`` in unit-knot-spacing coordinates. On a single
knot interval with local parameter ``t`` in ``[0, 1]`` exactly four shifted
copies are nonzero; ``local_basis`` returns their values ordered from the
oldest (leftmost start) to the newest basis function.
"""
import numpy as np


def b3(t):
    """Evaluate the cubic B-spline kernel, scalar or elementwise over an array."""
    t = np.asarray(t, dtype=float)
    scalar = t.ndim == 0
    t = np.atleast_1d(t)
    out = np.zeros_like(t)

    piece = (t >= 0.0) & (t < 1.0)
    s = t[piece]
    out[piece] = s ** 3 / 6.0

    piece = (t >= 1.0) & (t < 2.0)
    s = t[piece] - 1.0
    out[piece] = (1.0 + 3.0 * s + 3.0 * s ** 2 - 3.0 * s ** 3) / 6.0

    piece = (t >= 2.0) & (t < 3.0)
    s = t[piece] - 2.0
    out[piece] = (4.0 - 6.0 * s ** 2 + 3.0 * s ** 3) / 6.0

    piece = (t >= 3.0) & (t < 4.0)
    s = 4.0 - t[piece]
    out[piece] = s ** 3 / 6.0

    if scalar:
        return float(out[0])
    return out


def local_basis(t):
    """Values of the four basis functions active at local parameter ``t``; shape ``(..., 4)``."""
    t = np.asarray(t, dtype=float)
    return np.stack([
        (1.0 - t) ** 3,
        4.0 - 6.0 * t ** 2 + 3.0 * t ** 3,
        1.0 + 3.0 * t + 3.0 * t ** 2 - 3.0 * t ** 3,
        t ** 3,
    ], axis=-1) / 6.0


def local_basis_derivative(t):
    """Derivatives of ``local_basis`` with respect to ``t``; multiply by alpha for d/dx."""
    t = np.asarray(t, dtype=float)
    return np.stack([
        -3.0 + 6.0 * t - 3.0 * t ** 2,
        -12.0 * t + 9.0 * t ** 2,
        3.0 + 6.0 * t - 9.0 * t ** 2,
        3.0 * t ** 2,
    ], axis=-1) / 6.0
