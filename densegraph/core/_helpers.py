import math
import operator
from numbers import Real

import numpy as np


def _as_float(x, what: str) -> float:
    """Coerce a numeric scalar to float; reject strings and other non-numbers."""
    if isinstance(x, (Real, np.number)) and not isinstance(x, np.complexfloating):
        return float(x)
    raise TypeError(f"{what} must be numeric, got {type(x).__name__}")


def _is_no_edge(value: float, no_edge_value: float) -> bool:
    """True if a cell value means "no edge" (NaN-aware)."""
    if math.isnan(no_edge_value):
        return math.isnan(value)
    return value == no_edge_value


def _edge_mask(values: np.ndarray, no_edge_value: float) -> np.ndarray:
    """Boolean mask of cells holding an edge."""
    if math.isnan(no_edge_value):
        return ~np.isnan(values)
    return values != no_edge_value


def _as_index(x) -> int:
    """Coerce an integer-like (incl. NumPy integers) to int; bools are rejected."""
    if isinstance(x, (bool, np.bool_)):
        raise TypeError("index must be an integer, got bool")
    return operator.index(x)
