"""
Temporal Domains — Точки временной шкалы и их арифметика

Последовательность обобщена не по иерархии типов, а по capability-объекту
домена: {compare, plus, plus_step, between}. Для каждого поддерживаемого
типа точки зарегистрирован свой домен:

| Точка      | Единицы               | Особенности                          |
|------------|-----------------------|--------------------------------------|
| date       | DAYS .. MILLENNIA     | при сдвиге на месяц день обрезается  |
| datetime   | MICROS .. MILLENNIA   | naive или aware, без tz-конверсии    |
| time       | MICROS .. HALF_DAYS   | циклический домен, перенос в полночь |
| YearMonth  | MONTHS .. MILLENNIA   |                                      |

NANOS не поддерживается ни одним стандартным типом (разрешение — микросекунды).

between(unit, a, b) возвращает число целых единиц от a до b, усечённое
к нулю (отрицательное при b < a).
"""

import calendar
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date, datetime, time, timedelta
from enum import IntEnum
from typing import Any, FrozenSet, Final, List, Optional

from src.core.domain.step import Step
from src.core.domain.units import NANOS_PER_MICRO, TemporalUnit
from src.core.errors import InvalidSequenceConfigurationError, UnsupportedTemporalUnitError


MICROS_PER_DAY: Final[int] = 86_400_000_000


# =============================================================================
# ВСПОМОГАТЕЛЬНЫЕ ФУНКЦИИ
# =============================================================================


def _trunc_div(numerator: int, denominator: int) -> int:
    """Целочисленное деление с усечением к нулю (denominator > 0)."""
    quotient = abs(numerator) // denominator
    return quotient if numerator >= 0 else -quotient


def _unit_micros(unit: TemporalUnit) -> int:
    return unit.duration_nanos // NANOS_PER_MICRO


def _plus_months(point: Any, months: int) -> Any:
    """
    Сдвиг date/datetime на целое число месяцев.

    День месяца обрезается до длины целевого месяца (31 янв + 1 мес = 28/29 фев).

    Raises:
        OverflowError: Если год выходит за [MINYEAR, MAXYEAR]
    """
    if months == 0:
        return point
    year, month_index = divmod(point.year * 12 + (point.month - 1) + months, 12)
    if not MINYEAR <= year <= MAXYEAR:
        raise OverflowError(f"date value out of range: year {year}")
    month = month_index + 1
    day = min(point.day, calendar.monthrange(year, month)[1])
    return point.replace(year=year, month=month, day=day)


def _months_between_dates(start: date, end: date) -> int:
    """Число полных месяцев между датами (месяц засчитывается по достижении дня)."""
    total = (end.year * 12 + end.month) - (start.year * 12 + start.month)
    if total > 0 and end.day < start.day:
        total -= 1
    elif total < 0 and end.day > start.day:
        total += 1
    return total


def _time_to_micros(value: time) -> int:
    return ((value.hour * 60 + value.minute) * 60 + value.second) * 1_000_000 + value.microsecond


def _timedelta_to_micros(delta: timedelta) -> int:
    return (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds


# =============================================================================
# MONTH / YEAR-MONTH
# =============================================================================


class Month(IntEnum):
    """Месяц ISO-календаря."""

    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12


@dataclass(frozen=True, order=True)
class YearMonth:
    """
    Год-месяц (например, 2015-09).

    Immutable, упорядочен естественно по (year, month).
    """

    year: int
    month: int

    def __post_init__(self) -> None:
        # Month (IntEnum) -> int, чтобы repr и hash не зависели от типа
        object.__setattr__(self, "month", int(self.month))
        if not MINYEAR <= self.year <= MAXYEAR:
            raise ValueError(f"year {self.year} is out of range")
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be in 1..12, got {self.month}")

    @classmethod
    def of(cls, year: int, month: int) -> "YearMonth":
        return cls(year, int(month))

    @classmethod
    def parse(cls, text: str) -> "YearMonth":
        """Разбор 'YYYY-MM'."""
        try:
            year, month = text.strip().split("-")
            return cls(int(year), int(month))
        except ValueError:
            raise ValueError(f"Invalid YearMonth: {text!r}") from None

    def plus_months(self, months: int) -> "YearMonth":
        year, month_index = divmod(self.year * 12 + (self.month - 1) + months, 12)
        if not MINYEAR <= year <= MAXYEAR:
            raise OverflowError(f"YearMonth value out of range: year {year}")
        return YearMonth(year, month_index + 1)

    def at_day(self, day: int) -> date:
        return date(self.year, self.month, day)

    def length_of_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


# =============================================================================
# TEMPORAL DOMAIN (capability)
# =============================================================================


class TemporalDomain(ABC):
    """
    Capability-объект домена точек.

    Точки домена должны быть immutable и полностью упорядочены
    естественным порядком (rich comparison).
    """

    point_type: type = object
    supported_units: FrozenSet[TemporalUnit] = frozenset()

    def accepts(self, point: Any) -> bool:
        """Принадлежит ли точка домену."""
        return isinstance(point, self.point_type)

    def is_supported(self, unit: TemporalUnit) -> bool:
        return unit in self.supported_units

    def check_supported(self, unit: TemporalUnit) -> None:
        """
        Raises:
            UnsupportedTemporalUnitError: Если домен не поддерживает unit
        """
        if not self.is_supported(unit):
            raise UnsupportedTemporalUnitError(
                f"Unsupported unit {unit.name} for {self.point_type.__name__}"
            )

    def compare(self, a: Any, b: Any) -> int:
        """Естественный порядок: -1 / 0 / 1."""
        return (a > b) - (a < b)

    @abstractmethod
    def plus(self, point: Any, amount: int, unit: TemporalUnit) -> Any:
        """Сдвиг точки на amount единиц unit (новая точка)."""

    @abstractmethod
    def between(self, unit: TemporalUnit, start: Any, end: Any) -> int:
        """Число целых единиц unit от start до end (усечение к нулю)."""

    def plus_step(self, point: Any, step: Step) -> Any:
        """
        Прибавление составного шага.

        Порядок: месяцы (годы + месяцы) -> дни (недели + дни) ->
        время (часы .. микросекунды) -> наносекунды. Каждая ненулевая часть
        должна поддерживаться доменом.

        Raises:
            UnsupportedTemporalUnitError: Если часть шага не поддерживается
        """
        if step.total_months:
            point = self.plus(point, step.total_months, TemporalUnit.MONTHS)
        if step.total_days:
            point = self.plus(point, step.total_days, TemporalUnit.DAYS)
        time_micros = _timedelta_to_micros(step.time_part)
        if time_micros:
            point = self.plus(point, time_micros, TemporalUnit.MICROS)
        if step.nanoseconds:
            point = self.plus(point, step.nanoseconds, TemporalUnit.NANOS)
        return point

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class DateDomain(TemporalDomain):
    """Домен datetime.date."""

    point_type = date
    supported_units = frozenset(
        unit for unit in TemporalUnit if unit.is_date_based
    )

    def accepts(self, point: Any) -> bool:
        # datetime — подкласс date, но относится к своему домену
        return isinstance(point, date) and not isinstance(point, datetime)

    def plus(self, point: date, amount: int, unit: TemporalUnit) -> date:
        self.check_supported(unit)
        if unit.is_month_based:
            return _plus_months(point, amount * unit.months_per_unit)
        return point + timedelta(days=amount * (7 if unit is TemporalUnit.WEEKS else 1))

    def between(self, unit: TemporalUnit, start: date, end: date) -> int:
        self.check_supported(unit)
        if unit.is_month_based:
            return _trunc_div(_months_between_dates(start, end), unit.months_per_unit)
        days = (end - start).days
        return _trunc_div(days, 7) if unit is TemporalUnit.WEEKS else days


class DateTimeDomain(TemporalDomain):
    """Домен datetime.datetime (naive или aware; tz-арифметика не выполняется)."""

    point_type = datetime
    supported_units = frozenset(unit for unit in TemporalUnit if unit is not TemporalUnit.NANOS)

    def plus(self, point: datetime, amount: int, unit: TemporalUnit) -> datetime:
        self.check_supported(unit)
        if unit.is_month_based:
            return _plus_months(point, amount * unit.months_per_unit)
        return point + timedelta(microseconds=amount * _unit_micros(unit))

    def between(self, unit: TemporalUnit, start: datetime, end: datetime) -> int:
        self.check_supported(unit)
        if not unit.is_month_based:
            return _trunc_div(_timedelta_to_micros(end - start), _unit_micros(unit))

        # Месяц засчитывается только по достижении дня И времени суток
        end_date = end.date()
        if end_date > start.date() and end.time() < start.time():
            end_date -= timedelta(days=1)
        elif end_date < start.date() and end.time() > start.time():
            end_date += timedelta(days=1)
        return _trunc_div(_months_between_dates(start.date(), end_date), unit.months_per_unit)


class TimeDomain(TemporalDomain):
    """
    Домен datetime.time.

    Циклический: сдвиг за полночь переносится на начало суток
    (23:00 + 2 часа = 01:00).
    """

    point_type = time
    supported_units = frozenset(
        unit for unit in TemporalUnit if unit.is_time_based and unit is not TemporalUnit.NANOS
    )

    def plus(self, point: time, amount: int, unit: TemporalUnit) -> time:
        self.check_supported(unit)
        total = (_time_to_micros(point) + amount * _unit_micros(unit)) % MICROS_PER_DAY
        seconds, microsecond = divmod(total, 1_000_000)
        minutes, second = divmod(seconds, 60)
        hour, minute = divmod(minutes, 60)
        return time(hour, minute, second, microsecond, tzinfo=point.tzinfo)

    def between(self, unit: TemporalUnit, start: time, end: time) -> int:
        self.check_supported(unit)
        return _trunc_div(_time_to_micros(end) - _time_to_micros(start), _unit_micros(unit))


class YearMonthDomain(TemporalDomain):
    """Домен YearMonth."""

    point_type = YearMonth
    supported_units = frozenset(unit for unit in TemporalUnit if unit.is_month_based)

    def plus(self, point: YearMonth, amount: int, unit: TemporalUnit) -> YearMonth:
        self.check_supported(unit)
        return point.plus_months(amount * unit.months_per_unit)

    def between(self, unit: TemporalUnit, start: YearMonth, end: YearMonth) -> int:
        self.check_supported(unit)
        months = (end.year * 12 + end.month) - (start.year * 12 + start.month)
        return _trunc_div(months, unit.months_per_unit)


# =============================================================================
# РЕЕСТР ДОМЕНОВ
# =============================================================================

# Порядок важен: первый подходящий домен побеждает
_DOMAINS: List[TemporalDomain] = [
    DateTimeDomain(),
    DateDomain(),
    TimeDomain(),
    YearMonthDomain(),
]


def register_domain(domain: TemporalDomain) -> None:
    """
    Регистрация пользовательского домена.

    Зарегистрированный домен проверяется раньше встроенных.
    """
    _DOMAINS.insert(0, domain)


def unregister_domain(domain: TemporalDomain) -> None:
    _DOMAINS.remove(domain)


def find_domain(point: Any) -> Optional[TemporalDomain]:
    for domain in _DOMAINS:
        if domain.accepts(point):
            return domain
    return None


def domain_for(point: Any) -> TemporalDomain:
    """
    Домен точки.

    Raises:
        InvalidSequenceConfigurationError: Если для типа точки нет домена
    """
    domain = find_domain(point)
    if domain is None:
        raise InvalidSequenceConfigurationError(
            f"No temporal domain registered for {type(point).__name__}"
        )
    return domain
