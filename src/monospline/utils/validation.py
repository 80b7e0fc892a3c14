"""
Tests: tests/utils/test_validation.py
"""
import numpy as np
import pandas as pd

from ..core.exceptions import ConfigurationError
from ..core.type_hints import ArrayLike


def is_nan_inf_scalar(x):
    """Return True if x is NaN, None, pd.NA, or +/-Inf."""
    if x is None or x is pd.NA:
        return True
    try:
        return bool(np.isnan(x) or np.isinf(x))
    except (TypeError, ValueError):
        return False

def require_finite(value, name):
    """Return ``value`` as a float, rejecting NaN, Inf and non-numeric input."""
    if is_nan_inf_scalar(value):
        raise ConfigurationError(f"{name} must be a finite number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as err:
        raise ConfigurationError(f"{name} must be a finite number, got {value!r}") from err

def as_float_array(values: ArrayLike, name: str) -> np.ndarray:
    """Convert list, tuple, ndarray or Series input to a finite 1-D float array."""
    if isinstance(values, (pd.Series, pd.Index)):
        values = values.to_numpy()
    try:
        arr = np.asarray(values, dtype=float)
    except (TypeError, ValueError) as err:
        raise ConfigurationError(f"{name} must be numeric") from err
    if arr.ndim == 2 and 1 in arr.shape:
        arr = arr.ravel()
    if arr.ndim != 1:
        raise ConfigurationError(f"{name} must be one-dimensional, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ConfigurationError(f"{name} must contain only finite values")
    return arr
