from .validation import (
    is_nan_inf_scalar,
    require_finite,
    as_float_array,
)
from .decorators import log_runtime
