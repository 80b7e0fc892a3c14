import numpy as np

from ..core.exceptions import InternalInvariantError
from .basis import b3

# symmetric band of the roughness matrix on an unbounded uniform knot sequence
PENALTY_BAND = np.array([1.0, 0.0, -9.0, 16.0, -9.0, 0.0, 1.0]) / 6.0

# exact-integral corrections for the basis functions truncated at each end
LEFT_CORRECTION = np.array([
    [14.0, -6.0,  0.0],
    [-6.0,  8.0, -3.0],
    [ 0.0, -3.0,  2.0],
]) / 6.0
RIGHT_CORRECTION = np.array([
    [ 2.0, -3.0,  0.0],
    [-3.0,  8.0, -6.0],
    [ 0.0, -6.0, 14.0],
]) / 6.0


def knot_vector(m, xmin, xmax):
    """
    Uniform knots for ``m`` fitting intervals over ``[xmin, xmax]``.

    Returns
    -------
    knots : np.ndarray
        ``m + 3`` values ``xmin + j / alpha`` for ``j = -3 .. m - 1``.
    alpha : float
        ``m / (xmax - xmin)``, the number of knot intervals per unit of x.
    """
    alpha = m / (xmax - xmin)
    knots = xmin + np.arange(-3, m) / alpha
    return knots, alpha


def design_matrix(alpha, knots, u):
    """``n x M`` matrix with entry ``b3(alpha * (u_j - K_k))``."""
    u = np.asarray(u, dtype=float)
    knots = np.asarray(knots, dtype=float)
    return b3(alpha * (u[:, None] - knots[None, :]))


def band_matrix(M):
    """The banded roughness matrix ``Rinf`` clipped to ``M x M``."""
    if M < 7:
        raise InternalInvariantError(f"The penalty matrix needs at least 7 rows, got {M}")
    R = np.zeros((M, M))
    for offset, value in zip(range(-3, 4), PENALTY_BAND):
        if value != 0.0:
            R += np.diag(np.full(M - abs(offset), value), offset)
    return R


def penalty_matrix(M, lam, alpha):
    """
    Roughness penalty ``lam * alpha^3 * R`` in the B-spline coefficient basis.

    ``tau^T R tau`` is the integral of the squared second derivative of the
    spline over the fitting domain, in unit-knot-spacing coordinates.
    """
    R = band_matrix(M)
    R[:3, :3] -= LEFT_CORRECTION
    R[-3:, -3:] -= RIGHT_CORRECTION
    return lam * alpha ** 3 * R
