"""
Core math modules для temporal-streams

Оценка длительности шагов и численные примитивы с гарантией стабильности.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    # Epsilon constants
    EPS_CEIL_ABS,
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    # NaN/Inf checks
    is_valid_float,
    require_finite,
    # Epsilon comparisons
    is_close,
    nearest_integer,
    # Rounding
    safe_ceil,
    safe_round,
)

# Unit Estimation
from src.core.math.estimation import (
    count_points,
    estimated_number_of_units,
)

__all__ = [
    # Numerical Safeguards
    "EPS_CEIL_ABS",
    "EPS_FLOAT_COMPARE_ABS",
    "EPS_FLOAT_COMPARE_REL",
    "is_valid_float",
    "require_finite",
    "is_close",
    "nearest_integer",
    "safe_ceil",
    "safe_round",
    # Unit Estimation
    "estimated_number_of_units",
    "count_points",
]
