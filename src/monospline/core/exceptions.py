class MonoSplineError(Exception):
    """Base class for every error raised by the package."""


class ConfigurationError(MonoSplineError, ValueError):
    """An invalid setting, raised at the configuring call."""


class ShapeError(MonoSplineError, ValueError):
    """Array lengths disagree, or there are too few data for the number of intervals."""


class InternalInvariantError(ShapeError):
    """A structural size requirement of the spline matrices is broken."""


class DomainError(MonoSplineError, ValueError):
    """A point constraint lies outside the fitting domain [xmin, xmax]."""


class InfeasibleError(MonoSplineError, RuntimeError):
    """No point satisfies all of the constraints at once."""


class ConvergenceError(MonoSplineError, RuntimeError):
    """The optimizer ran out of iterations or hit a numerical failure."""
