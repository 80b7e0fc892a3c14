import pandas as pd
import numpy as np
from typing import Union
from typing import List, Sequence, Tuple

from .enums import ConstraintDirection

ArrayLike = Union[ List, Tuple, pd.Index, pd.Series, np.ndarray ]

# point constraints on the fitted spline
ValueConstraint = Tuple[float, float]
SlopeConstraint = Tuple[float, float]
BoundConstraint = Tuple[float, float, Union[str, ConstraintDirection]]

ValueConstraints = Sequence[ValueConstraint]
SlopeConstraints = Sequence[SlopeConstraint]
BoundConstraints = Sequence[BoundConstraint]
