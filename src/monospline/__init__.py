import importlib

from .core.enums import ConstraintDirection
from .core.exceptions import (
    MonoSplineError,
    ConfigurationError,
    ShapeError,
    InternalInvariantError,
    DomainError,
    InfeasibleError,
    ConvergenceError,
)
from .model.monotonic_spline import MonotonicSplineInterpolator, fit_monotone_spline

_lazy_submodules = [
    "log_config",
    "model",
    "optimizer",
    "spline",
    "utils",
]

_lazy_attributes = {
    "MonotonicSplineRegressor": ".model.regressor",
}

def __getattr__(name):
    if name in _lazy_submodules:
        return importlib.import_module(f".{name}", __package__)
    if name in _lazy_attributes:
        mod = importlib.import_module(_lazy_attributes[name], __package__)
        return getattr(mod, name)
    raise AttributeError(f"Module '{__name__}' has no attribute '{name}'")

def __dir__():
    return list(globals().keys()) + _lazy_submodules + list(_lazy_attributes)


__version__ = "0.1.0"
