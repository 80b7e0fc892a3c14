from .convex import (
    QuadraticObjective,
    LinearEqualityConstraint,
    LinearInequalityConstraint,
    SolverOptions,
    FeasibilityResult,
    OptimizationResult,
    BarrierOptimizer,
    feasible_point,
)
from .kkt import KKTSolver, SVDKKTSolver, CholeskyKKTSolver
