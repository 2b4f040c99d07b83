"""
Unit Estimation — Оценка длительности шага в единицах

Конвертирует составной шаг в оценочное количество единиц выбранной
гранулярности:

    estimate = sum(magnitude(u) * duration(u) / duration(target))

по всем единицам шага с ненулевой величиной. Оценочные единицы (MONTHS и
крупнее) переносят свою неточность в результат. Округление здесь НЕ
выполняется — вызывающий код сам применяет ceil/round.

count_points переводит расстояние (в наименьших единицах) в количество
ТОЧЕК, а не промежутков:

    день 0 .. день 4 (искл.), шаг 1:  |---|---|---|---|   -> 4 точки
    день 0 .. день 4 (искл.), шаг 3:  |-----------|---    -> 4/3 = 1.33

Floor дал бы 1, но неполный промежуток [3, 4) всё равно содержит точку 3,
поэтому количество точек — ceil(4/3) = 2. Ceil обязателен.
"""

from src.core.domain.step import Step
from src.core.domain.units import TemporalUnit
from src.core.math.numerical_safeguards import safe_ceil


def estimated_number_of_units(step: Step, unit: TemporalUnit) -> float:
    """
    Оценочное количество единиц unit в шаге step.

    Args:
        step: Составной шаг
        unit: Целевая единица (ненулевой длительности)

    Returns:
        Дробное количество unit, представленное шагом

    Examples:
        >>> estimated_number_of_units(Step(days=1, hours=12), TemporalUnit.HOURS)
        36.0
        >>> estimated_number_of_units(Step(years=1), TemporalUnit.MONTHS)
        12.0
    """
    target_nanos = unit.duration_nanos
    total = 0.0
    for step_unit, magnitude in step.items():
        total += (step_unit.duration_nanos * magnitude) / target_nanos
    return total


def count_points(distance: int, ticks_per_step: float) -> int:
    """
    Количество точек в полуоткрытом диапазоне длины distance.

    Args:
        distance: Расстояние до конца в наименьших единицах шага
        ticks_per_step: Оценочная длина шага в тех же единицах (> 0)

    Returns:
        ceil(distance / ticks_per_step); 0 для неположительного расстояния
        (точно для целого ticks_per_step)

    Raises:
        ValueError: Если ticks_per_step не положителен
    """
    if ticks_per_step <= 0:
        raise ValueError(f"ticks_per_step must be positive, got {ticks_per_step}")
    if distance <= 0:
        return 0
    if float(ticks_per_step).is_integer():
        # Точные единицы: целочисленный ceil без float-деления
        return -(-distance // int(ticks_per_step))
    return safe_ceil(distance / ticks_per_step)
