from .basis import b3, local_basis, local_basis_derivative
from .matrices import knot_vector, design_matrix, band_matrix, penalty_matrix
from .objective import quadratic_objective
from .constraints import (
    monotone_constraints,
    knot_interval,
    equality_constraints,
    inequality_constraints,
)
from .realize import standard_coefficients, polynomial_spline
