"""
Фабрики типовых последовательностей.

Все последовательности (кроме all_months) ленивые и хронологически
упорядочены: 4 июля всегда следует за 3 июля и предшествует 5 июля.
"""

from datetime import date, datetime, time, timedelta
from typing import Iterator

from src.core.domain.points import Month, YearMonth
from src.core.domain.step import Step
from src.streams.builder import TemporalStreamBuilder
from src.streams.sequence import TemporalSequence


def builder() -> TemporalStreamBuilder:
    """Новый пустой TemporalStreamBuilder."""
    return TemporalStreamBuilder()


def every_day_in_year(year: int) -> TemporalSequence[date]:
    """
    Каждый день года: 1 января .. 31 декабря.

    Args:
        year: Год (MINYEAR .. MAXYEAR - 1)

    Returns:
        365 или 366 дат
    """
    return (
        TemporalStreamBuilder()
        .every(Step(days=1))
        .from_(date(year, 1, 1))
        .until(date(year + 1, 1, 1))
        .build()
    )


def all_months() -> Iterator[Month]:
    """Все месяцы ISO-календаря (эквивалент iter(Month))."""
    return iter(list(Month))


def every_month_in_year(year: int) -> TemporalSequence[YearMonth]:
    """Каждый YearMonth года: январь year .. декабрь year."""
    return (
        TemporalStreamBuilder()
        .every(Step(months=1))
        .from_(YearMonth(year, Month.JANUARY))
        .until(YearMonth(year + 1, Month.JANUARY))
        .build()
    )


def all_hours_in_day(day: date) -> TemporalSequence[datetime]:
    """
    Каждый час дня как datetime: полночь day .. 23:00 day.

    Полночь следующего дня не включается.
    """
    midnight = datetime.combine(day, time.min)
    return (
        TemporalStreamBuilder()
        .every(Step(hours=1))
        .from_(midnight)
        .until(midnight + timedelta(days=1))
        .build()
    )


def all_hours_in_any_day() -> TemporalSequence[time]:
    """
    Каждый час любых суток как time: 00:00 .. 23:00.

    Конец — 23:59, а не полночь: при естественном порядке полночь == полночь,
    и последовательность от полуночи до полуночи была бы пустой.
    """
    return (
        TemporalStreamBuilder()
        .every(Step(hours=1))
        .from_(time(0, 0))
        .until(time(23, 59))
        .build()
    )
