"""
Numerical Safeguards — Safe Math Primitives

Модуль обеспечивает численную устойчивость оценочной арифметики шагов:
- NaN/Inf проверки для предотвращения распространения невалидных значений
- Epsilon-защиты для сравнений float с учётом машинной точности
- Epsilon-устойчивые ceil/round для перевода оценок в целые количества

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Значение, превышающее целое лишь на машинный шум (абсолютный, не
   относительный), считается этим целым (3.0000000000004 -> ceil = 3)
2. Округление — half up (2.5 -> 3), а не банковское
3. NaN/Inf никогда не превращаются в количество точек
"""

import math
from typing import Final

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Epsilon для сравнения float (относительная толерантность)
# Используется в is_close
EPS_FLOAT_COMPARE_REL: Final[float] = 1e-9

# Epsilon для сравнения float (абсолютная толерантность)
EPS_FLOAT_COMPARE_ABS: Final[float] = 1e-12

# Абсолютная толерантность ceil (не масштабируется с величиной)
EPS_CEIL_ABS: Final[float] = 1e-9


# =============================================================================
# NaN/Inf ПРОВЕРКИ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float валидным (не NaN, не Inf).

    Examples:
        >>> is_valid_float(1.0)
        True
        >>> is_valid_float(float('nan'))
        False
    """
    return math.isfinite(value)


def require_finite(value: float, name: str = "value") -> float:
    """
    Проверка конечности значения.

    Raises:
        ValueError: Если value является NaN или Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be finite, got {value}")
    return value


# =============================================================================
# EPSILON-СРАВНЕНИЯ
# =============================================================================


def is_close(
    a: float,
    b: float,
    rel_tol: float = EPS_FLOAT_COMPARE_REL,
    abs_tol: float = EPS_FLOAT_COMPARE_ABS,
) -> bool:
    """
    Сравнение float с учётом машинной точности.

    Алгоритм:
        abs(a - b) <= max(rel_tol * max(abs(a), abs(b)), abs_tol)

    Examples:
        >>> is_close(1.0, 1.0 + 1e-10)
        True
        >>> is_close(1.0, 1.1)
        False
    """
    return math.isclose(a, b, rel_tol=rel_tol, abs_tol=abs_tol)


def nearest_integer(value: float) -> int:
    """Ближайшее целое, half up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


# =============================================================================
# EPSILON-УСТОЙЧИВОЕ ОКРУГЛЕНИЕ
# =============================================================================


def safe_ceil(value: float, abs_tol: float = EPS_CEIL_ABS) -> int:
    """
    Ceil с защитой от машинного шума.

    Превышение целого не более чем на abs_tol считается шумом. Толерантность
    абсолютная: при больших значениях она меньше шага float и ceil остаётся
    обычным math.ceil.

    Args:
        value: Конечное значение
        abs_tol: Абсолютная толерантность

    Returns:
        Целое >= value - abs_tol

    Raises:
        ValueError: Если value является NaN или Inf

    Examples:
        >>> safe_ceil(1.5)
        2
        >>> safe_ceil(3.0000000000004)
        3
        >>> safe_ceil(1_000_000_000.25)
        1000000001
    """
    require_finite(value)
    return math.ceil(value - abs_tol)


def safe_round(value: float) -> int:
    """
    Округление half up с проверкой конечности.

    Raises:
        ValueError: Если value является NaN или Inf

    Examples:
        >>> safe_round(2.5)
        3
        >>> safe_round(2.4999999)
        2
    """
    return nearest_integer(require_finite(value))
