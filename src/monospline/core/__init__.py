from .enums import ConstraintDirection
from .exceptions import (
    MonoSplineError,
    ConfigurationError,
    ShapeError,
    InternalInvariantError,
    DomainError,
    InfeasibleError,
    ConvergenceError,
)
