import numpy as np

from ..optimizer.convex import QuadraticObjective
from .matrices import design_matrix, penalty_matrix


def quadratic_objective(u, d, knots, w, lam, alpha):
    """
    Penalised weighted least-squares objective over the control coefficients.

    With ``Bt = design_matrix(alpha, knots, u)``, ``B = Bt^T``, ``W = diag(w)`` and
    ``Lq = penalty_matrix(M, lam, alpha)``::

        G = Lq + B W Bt
        g = -B W d
        r = d^T W d

    so that ``1/2 tau^T G tau + g^T tau + 1/2 r`` equals one half of
    ``sum(w * (d - Bt tau)^2) + tau^T Lq tau``.

    Parameters
    ----------
    u, d, w : np.ndarray
        Data abscissas, targets and positive weights, all of length ``n``.
    knots : np.ndarray
        Knot vector of length ``M``.
    lam : float
        Smoothing parameter.
    alpha : float
        Knot intervals per unit of x.

    Returns
    -------
    QuadraticObjective
    """
    d = np.asarray(d, dtype=float)
    w = np.asarray(w, dtype=float)
    Bt = design_matrix(alpha, knots, u)
    B = Bt.T
    G = penalty_matrix(len(knots), lam, alpha) + (B * w) @ Bt
    rt = w * d
    g = -(B @ rt)
    r = float(d @ rt)
    return QuadraticObjective(G, g, r)
