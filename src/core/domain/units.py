"""
TemporalUnit — Единицы гранулярности времени

Каждая единица имеет номинальную длительность в наносекундах (базовое
разрешение) и флаг оценочности:
- Точные единицы (NANOS .. WEEKS): длительность фиксирована
- Оценочные единицы (MONTHS и крупнее): длительность — среднее значение
  (месяц ~ 30.44 дня, год = 365.2425 дня)

DAYS и WEEKS считаются точными: модель не знает о часовых поясах и DST.
"""

from enum import Enum
from typing import Final


# =============================================================================
# НОМИНАЛЬНЫЕ ДЛИТЕЛЬНОСТИ (наносекунды)
# =============================================================================

NANOS_PER_MICRO: Final[int] = 1_000
NANOS_PER_MILLI: Final[int] = 1_000_000
NANOS_PER_SECOND: Final[int] = 1_000_000_000
NANOS_PER_MINUTE: Final[int] = 60 * NANOS_PER_SECOND
NANOS_PER_HOUR: Final[int] = 60 * NANOS_PER_MINUTE
NANOS_PER_DAY: Final[int] = 24 * NANOS_PER_HOUR

# Средний григорианский год: 365.2425 дня = 31 556 952 секунды
SECONDS_PER_AVERAGE_YEAR: Final[int] = 31_556_952
NANOS_PER_AVERAGE_YEAR: Final[int] = SECONDS_PER_AVERAGE_YEAR * NANOS_PER_SECOND
NANOS_PER_AVERAGE_MONTH: Final[int] = NANOS_PER_AVERAGE_YEAR // 12


# =============================================================================
# TEMPORAL UNIT
# =============================================================================


class TemporalUnit(str, Enum):
    """Единица измерения времени (от мелкой к крупной)."""

    NANOS = "nanos"
    MICROS = "micros"
    MILLIS = "millis"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    HALF_DAYS = "half_days"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"
    DECADES = "decades"
    CENTURIES = "centuries"
    MILLENNIA = "millennia"

    @property
    def duration_nanos(self) -> int:
        """Номинальная длительность единицы в наносекундах."""
        return _DURATION_NANOS[self]

    @property
    def is_duration_estimated(self) -> bool:
        """
        Является ли длительность оценочной (средней).

        True для MONTHS и крупнее: реальная длина месяца/года варьируется.
        """
        return self.duration_nanos >= NANOS_PER_AVERAGE_MONTH

    @property
    def is_date_based(self) -> bool:
        """Единица календарная (DAYS и крупнее)."""
        return self.duration_nanos >= NANOS_PER_DAY

    @property
    def is_time_based(self) -> bool:
        """Единица внутрисуточная (меньше DAYS)."""
        return self.duration_nanos < NANOS_PER_DAY

    @property
    def months_per_unit(self) -> int:
        """
        Количество месяцев в месячной единице.

        Raises:
            ValueError: Если единица не выражается целым числом месяцев
        """
        try:
            return _MONTHS_PER_UNIT[self]
        except KeyError:
            raise ValueError(f"{self.name} is not a month-based unit") from None

    @property
    def is_month_based(self) -> bool:
        """Единица выражается целым числом месяцев (MONTHS и крупнее)."""
        return self in _MONTHS_PER_UNIT


_DURATION_NANOS: Final[dict] = {
    TemporalUnit.NANOS: 1,
    TemporalUnit.MICROS: NANOS_PER_MICRO,
    TemporalUnit.MILLIS: NANOS_PER_MILLI,
    TemporalUnit.SECONDS: NANOS_PER_SECOND,
    TemporalUnit.MINUTES: NANOS_PER_MINUTE,
    TemporalUnit.HOURS: NANOS_PER_HOUR,
    TemporalUnit.HALF_DAYS: 12 * NANOS_PER_HOUR,
    TemporalUnit.DAYS: NANOS_PER_DAY,
    TemporalUnit.WEEKS: 7 * NANOS_PER_DAY,
    TemporalUnit.MONTHS: NANOS_PER_AVERAGE_MONTH,
    TemporalUnit.YEARS: NANOS_PER_AVERAGE_YEAR,
    TemporalUnit.DECADES: 10 * NANOS_PER_AVERAGE_YEAR,
    TemporalUnit.CENTURIES: 100 * NANOS_PER_AVERAGE_YEAR,
    TemporalUnit.MILLENNIA: 1_000 * NANOS_PER_AVERAGE_YEAR,
}

_MONTHS_PER_UNIT: Final[dict] = {
    TemporalUnit.MONTHS: 1,
    TemporalUnit.YEARS: 12,
    TemporalUnit.DECADES: 120,
    TemporalUnit.CENTURIES: 1_200,
    TemporalUnit.MILLENNIA: 12_000,
}
