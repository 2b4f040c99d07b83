"""
Тесты для TemporalSequence

Проверяет:
1. Валидацию конфигурации при построении
2. Produce-next: полуоткрытые границы, монотонность, эквивалентность
   наивной итерации, идемпотентность исчерпания
3. Estimate size: ceil по точкам, точность на начатой последовательности
4. Split: непересекаемость, хронологический порядок половин, сохранение
   размера, завершаемость
5. Характеристики и естественный порядок
"""

from datetime import date, datetime, time, timedelta

import pytest

from src.core.domain.points import (
    TemporalDomain,
    YearMonth,
    domain_for,
    register_domain,
    unregister_domain,
)
from src.core.domain.step import Step
from src.core.domain.units import TemporalUnit
from src.core.errors import InvalidSequenceConfigurationError, UnsupportedTemporalUnitError
from src.streams.sequence import Characteristic, TemporalSequence


# =============================================================================
# FIXTURES
# =============================================================================


class DayNumberDomain(TemporalDomain):
    """Абстрактная шкала дней: точка — номер дня (int)."""

    point_type = int
    supported_units = frozenset({TemporalUnit.DAYS})

    def plus(self, point, amount, unit):
        self.check_supported(unit)
        return point + amount

    def between(self, unit, start, end):
        self.check_supported(unit)
        return end - start


@pytest.fixture
def day_numbers():
    """Регистрирует домен номеров дней на время теста."""
    domain = DayNumberDomain()
    register_domain(domain)
    yield domain
    unregister_domain(domain)


# (start, end, step): все диапазоны выровнены так, что размер точен
SEQUENCE_DATA_POINTS = [
    (date(2015, 6, 1), date(2015, 6, 12), Step(days=1)),
    (time(0, 0), time(23, 0), Step(hours=1)),
    # 3 часа в секундах: размер точен и для невыровненного конца
    (datetime(1992, 12, 23, 12, 0), datetime(1993, 5, 12, 6, 32), Step(seconds=10_800)),
    (date(1990, 1, 1), date(1990, 1, 8), Step(days=3)),
    (YearMonth(1963, 1), YearMonth(1970, 6), Step(months=1)),
    (date(2000, 1, 1), date(2010, 1, 1), Step(years=1)),
    (date(2015, 1, 1), date(2015, 12, 31), Step(weeks=2)),
]

SEQUENCE_IDS = [
    "days",
    "hours-of-day",
    "datetime-3h",
    "every-third-day",
    "year-months",
    "years",
    "fortnights",
]


@pytest.fixture(params=SEQUENCE_DATA_POINTS, ids=SEQUENCE_IDS)
def sequence_args(request):
    return request.param


def naive_iteration(start, end, step):
    """p = start; while p < end: emit p; p = p + step"""
    domain = domain_for(start)
    points = []
    current = start
    while current < end:
        points.append(current)
        current = domain.plus_step(current, step)
    return points


def split_until_none(sequence):
    """Рекурсивно расщепляет до отказа; возвращает листья в хронологическом порядке."""
    front = sequence.try_split()
    if front is None:
        return [sequence]
    return split_until_none(front) + split_until_none(sequence)


# =============================================================================
# CONSTRUCTION
# =============================================================================


class TestConstruction:
    """Тесты валидации при построении"""

    def test_none_start_rejected(self) -> None:
        with pytest.raises(InvalidSequenceConfigurationError, match="starting point"):
            TemporalSequence(None, date(2015, 1, 2), Step(days=1))

    def test_none_end_rejected(self) -> None:
        with pytest.raises(InvalidSequenceConfigurationError, match="ending point"):
            TemporalSequence(date(2015, 1, 1), None, Step(days=1))

    def test_none_step_rejected(self) -> None:
        with pytest.raises(InvalidSequenceConfigurationError, match="incrementing amount"):
            TemporalSequence(date(2015, 1, 1), date(2015, 1, 2), None)

    def test_zero_step_rejected(self) -> None:
        """Шаг "0 дней" отклоняется при построении"""
        with pytest.raises(InvalidSequenceConfigurationError, match="non-zero"):
            TemporalSequence(date(2015, 1, 1), date(2015, 1, 5), Step(days=0))

    def test_unsupported_smallest_unit_rejected(self) -> None:
        """date не поддерживает часы"""
        with pytest.raises(InvalidSequenceConfigurationError, match="HOURS"):
            TemporalSequence(date(2015, 1, 1), date(2015, 1, 5), Step(days=1, hours=1))

    def test_nanos_unsupported_by_datetime(self) -> None:
        with pytest.raises(InvalidSequenceConfigurationError, match="NANOS"):
            TemporalSequence(datetime(2015, 1, 1), datetime(2015, 1, 2), Step(nanoseconds=500))

    def test_mixed_domains_rejected(self) -> None:
        with pytest.raises(InvalidSequenceConfigurationError, match="different temporal domains"):
            TemporalSequence(date(2015, 1, 1), datetime(2015, 1, 5), Step(days=1))

    def test_configuration_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            TemporalSequence(date(2015, 1, 1), date(2015, 1, 5), Step())

    def test_step_like_accepted(self) -> None:
        """Шаг может быть timedelta или ISO-8601 строкой"""
        by_delta = TemporalSequence(date(2015, 1, 1), date(2015, 1, 5), timedelta(days=1))
        by_text = TemporalSequence(date(2015, 1, 1), date(2015, 1, 5), "P1D")
        assert by_delta.step == by_text.step == Step(days=1)

    def test_initial_state(self) -> None:
        seq = TemporalSequence(date(2015, 1, 1), date(2015, 1, 5), Step(days=1, weeks=1))
        assert seq.current == seq.start == date(2015, 1, 1)
        assert seq.end == date(2015, 1, 5)
        assert seq.smallest_unit is TemporalUnit.DAYS
        assert seq.ticks_per_step == 8.0


# =============================================================================
# CONCRETE SCENARIOS
# =============================================================================


class TestScenarios:
    """Конкретные сценарии на абстрактной шкале дней и календаре"""

    def test_day_zero_to_four(self, day_numbers) -> None:
        """Шаг 1 день, 0 .. 4 -> [0, 1, 2, 3], размер 4"""
        seq = TemporalSequence(0, 4, Step(days=1))
        assert seq.estimate_size() == 4
        assert list(seq) == [0, 1, 2, 3]

    def test_day_zero_to_five_by_two(self, day_numbers) -> None:
        """Шаг 2 дня, 0 .. 5 -> [0, 2, 4], размер ceil(5/2) = 3"""
        seq = TemporalSequence(0, 5, Step(days=2))
        assert seq.estimate_size() == 3
        assert list(seq) == [0, 2, 4]

    def test_day_zero_to_four_by_three(self, day_numbers) -> None:
        """Неполный последний период даёт одну точку"""
        seq = TemporalSequence(0, 4, Step(days=3))
        assert seq.estimate_size() == 2
        assert list(seq) == [0, 3]

    def test_inexact_break(self) -> None:
        """5 .. 14 июня каждые 3 дня: 5, 8, 11"""
        seq = TemporalSequence(date(2015, 6, 5), date(2015, 6, 14), Step(days=3))
        assert list(seq) == [date(2015, 6, 5), date(2015, 6, 8), date(2015, 6, 11)]

    def test_every_hour_of_cyclic_day(self) -> None:
        """00:00 .. 23:59 ежечасно: 24 значения ровно в начале часа"""
        seq = TemporalSequence(time(0, 0), time(23, 59), Step(hours=1))
        points = list(seq)
        assert points == [time(hour, 0) for hour in range(24)]

    def test_midnight_to_midnight_is_empty(self) -> None:
        """Полночь == полночь: пустая последовательность"""
        seq = TemporalSequence(time(0, 0), time(0, 0), Step(hours=1))
        assert list(seq) == []

    def test_cyclic_offset_does_not_wrap(self) -> None:
        """22:30 .. 23:59 ежечасно: 22:30 и 23:30, без перехода за полночь"""
        seq = TemporalSequence(time(22, 30), time(23, 59), Step(hours=1))
        assert list(seq) == [time(22, 30), time(23, 30)]

    def test_empty_range(self) -> None:
        """start == end: нет точек, размер 0, split невозможен"""
        seq = TemporalSequence(date(2015, 1, 1), date(2015, 1, 1), Step(days=1))
        assert seq.estimate_size() == 0
        assert seq.try_split() is None
        assert list(seq) == []

    def test_inverted_range_is_empty(self) -> None:
        seq = TemporalSequence(date(2015, 1, 5), date(2015, 1, 1), Step(days=1))
        assert seq.estimate_size() == 0
        assert seq.is_exhausted
        assert list(seq) == []

    def test_split_ten_points(self, day_numbers) -> None:
        """10 точек: размеры половин в сумме 10, граница общая"""
        seq = TemporalSequence(0, 10, Step(days=1))
        front = seq.try_split()
        assert front is not None
        assert front.estimate_size() + seq.estimate_size() == 10
        assert front.end == seq.current == 5
        assert list(front) == [0, 1, 2, 3, 4]
        assert list(seq) == [5, 6, 7, 8, 9]

    def test_months_over_leap_february(self) -> None:
        """Ежемесячно с 15-го: дни не обрезаются"""
        seq = TemporalSequence(date(2016, 1, 15), date(2016, 5, 1), Step(months=1))
        assert list(seq) == [date(2016, 1, 15), date(2016, 2, 15), date(2016, 3, 15), date(2016, 4, 15)]

    def test_tiny_partial_span_counts_as_point(self) -> None:
        """Остаток в 1 мкс после шага в 2000 с даёт вторую точку"""
        start = datetime(2015, 1, 1)
        step = Step(seconds=2000, microseconds=1)
        seq = TemporalSequence(start, start + timedelta(microseconds=2_000_000_002), step)
        assert seq.estimate_size() == 2
        front = seq.try_split()
        assert front is not None
        assert list(front) + list(seq) == [start, start + timedelta(microseconds=2_000_000_001)]

    def test_large_count_keeps_partial_span(self) -> None:
        """3_000_000_001 мкс с шагом 3 мкс: 1_000_000_001 точка"""
        start = datetime(2015, 1, 1)
        seq = TemporalSequence(start, start + timedelta(microseconds=3_000_000_001), Step(microseconds=3))
        assert seq.estimate_size() == 1_000_000_001

    def test_domain_addition_failure_propagates(self, day_numbers) -> None:
        """Ошибка арифметики домена не перехватывается"""
        seq = TemporalSequence(0, 100, Step(months=1, days=1))
        with pytest.raises(UnsupportedTemporalUnitError, match="MONTHS"):
            next(seq)
        # Состояние не изменилось
        assert seq.current == 0


# =============================================================================
# PRODUCE-NEXT
# =============================================================================


class TestProduceNext:
    """Тесты try_advance / __next__"""

    def test_matches_naive_iteration(self, sequence_args) -> None:
        start, end, step = sequence_args
        assert list(TemporalSequence(start, end, step)) == naive_iteration(start, end, step)

    def test_strictly_increasing(self, sequence_args) -> None:
        points = list(TemporalSequence(*sequence_args))
        for previous, current in zip(points, points[1:]):
            assert previous < current

    def test_half_open_bounds(self, sequence_args) -> None:
        start, end, step = sequence_args
        points = list(TemporalSequence(start, end, step))
        assert points[0] == start
        assert end not in points
        assert all(point < end for point in points)

    def test_distinct_and_non_null(self, sequence_args) -> None:
        points = list(TemporalSequence(*sequence_args))
        assert len(set(points)) == len(points)
        assert all(point is not None for point in points)

    def test_try_advance(self) -> None:
        seq = TemporalSequence(date(2015, 1, 1), date(2015, 1, 3), Step(days=1))
        received = []
        assert seq.try_advance(received.append)
        assert seq.try_advance(received.append)
        assert not seq.try_advance(received.append)
        assert received == [date(2015, 1, 1), date(2015, 1, 2)]

    def test_exhaustion_is_idempotent(self) -> None:
        """Исчерпанный генератор навсегда исчерпан, состояние не меняется"""
        seq = TemporalSequence(date(2015, 1, 1), date(2015, 1, 2), Step(days=1))
        assert next(seq) == date(2015, 1, 1)
        for _ in range(3):
            with pytest.raises(StopIteration):
                next(seq)
            assert not seq.try_advance(lambda point: None)
            assert seq.current == seq.end
            assert seq.try_split() is None

    def test_for_each_remaining(self) -> None:
        seq = TemporalSequence(YearMonth(2015, 1), YearMonth(2016, 1), Step(months=1))
        received = []
        seq.for_each_remaining(received.append)
        assert received == [YearMonth(2015, month) for month in range(1, 13)]
        assert seq.is_exhausted

    def test_final_partial_period_clamps_to_end(self) -> None:
        """После последней точки current сразу становится end"""
        seq = TemporalSequence(date(2015, 1, 1), date(2015, 1, 6), Step(days=3))
        next(seq)
        next(seq)
        assert seq.current == date(2015, 1, 6)


# =============================================================================
# ESTIMATE SIZE
# =============================================================================


class TestEstimateSize:
    """Тесты estimate_size"""

    def test_unstarted_size_matches_count(self, sequence_args) -> None:
        seq = TemporalSequence(*sequence_args)
        expected = seq.exact_size_if_known()
        assert expected != -1
        assert expected == len(list(seq))

    def test_started_size_decreases_by_one(self, sequence_args) -> None:
        seq = TemporalSequence(*sequence_args)
        expected = seq.exact_size_if_known()
        for index in range(expected + 1):
            assert seq.exact_size_if_known() == expected - index
            seq.try_advance(lambda point: None)
        assert not seq.try_advance(lambda point: None)

    def test_length_hint(self) -> None:
        import operator

        seq = TemporalSequence(date(2015, 1, 1), date(2015, 1, 11), Step(days=1))
        assert operator.length_hint(seq) == 10

    def test_estimated_units(self) -> None:
        """Годовой шаг в днях — оценка по 365.2425 дня"""
        seq = TemporalSequence(date(2000, 1, 1), date(2004, 1, 1), Step(years=1, days=1))
        assert seq.smallest_unit is TemporalUnit.DAYS
        assert seq.ticks_per_step == pytest.approx(366.2425)
        assert seq.estimate_size() == 4


# =============================================================================
# SPLIT
# =============================================================================


class TestSplit:
    """Тесты try_split / split"""

    def test_no_overlap_after_single_split(self, sequence_args) -> None:
        seq = TemporalSequence(*sequence_args)
        front = seq.try_split()
        assert front is not None
        front_points = list(front)
        back_points = list(seq)
        assert not set(front_points) & set(back_points)

    def test_front_is_strict_prefix(self, sequence_args) -> None:
        """Все точки передней половины раньше первой точки задней"""
        seq = TemporalSequence(*sequence_args)
        front = seq.try_split()
        first_of_back = next(seq)
        assert all(point < first_of_back for point in front)

    def test_contiguous(self, sequence_args) -> None:
        seq = TemporalSequence(*sequence_args)
        old_current = seq.current
        front = seq.try_split()
        assert front.start == old_current
        assert front.end == seq.current

    def test_split_covers_whole_range(self, sequence_args) -> None:
        """Каждая точка выдаётся ровно одним листом, в прежнем порядке"""
        expected = list(TemporalSequence(*sequence_args))
        leaves = split_until_none(TemporalSequence(*sequence_args))
        combined = [point for leaf in leaves for point in leaf]
        assert combined == expected

    def test_size_conserved(self, sequence_args) -> None:
        seq = TemporalSequence(*sequence_args)
        assert seq.has_characteristics(Characteristic.SUBSIZED)
        for _ in range(1000):
            before = seq.estimate_size()
            front = seq.try_split()
            if front is None:
                break
            assert front.estimate_size() + seq.estimate_size() == before

    def test_split_does_not_grow(self, sequence_args) -> None:
        seq = TemporalSequence(*sequence_args)
        for _ in range(1000):
            before = seq.estimate_size()
            front = seq.try_split()
            if front is None:
                break
            assert front.estimate_size() <= before
            assert seq.estimate_size() <= before

    def test_split_terminates(self, sequence_args) -> None:
        seq = TemporalSequence(*sequence_args)
        while seq.estimate_size() > 1:
            if seq.try_split() is None:
                return
        assert seq.try_split() is None

    def test_single_point_not_split(self) -> None:
        seq = TemporalSequence(date(2015, 1, 1), date(2015, 1, 2), Step(days=1))
        assert seq.estimate_size() == 1
        assert seq.try_split() is None
        assert seq.current == date(2015, 1, 1)

    def test_split_after_partial_consumption(self) -> None:
        """Split делит только оставшуюся часть"""
        seq = TemporalSequence(date(2015, 1, 1), date(2015, 1, 11), Step(days=1))
        next(seq)
        next(seq)
        front = seq.try_split()
        assert front.start == date(2015, 1, 3)
        assert front.estimate_size() == 4
        assert seq.estimate_size() == 4

    def test_functional_split_keeps_receiver(self) -> None:
        """split() возвращает две новые половины, исходный не меняется"""
        seq = TemporalSequence(date(2015, 1, 1), date(2015, 1, 11), Step(days=1))
        front, back = seq.split()
        assert seq.current == date(2015, 1, 1)
        assert seq.estimate_size() == 10
        assert list(front) + list(back) == list(seq)

    def test_functional_split_of_singleton(self) -> None:
        seq = TemporalSequence(date(2015, 1, 1), date(2015, 1, 2), Step(days=1))
        assert seq.split() is None


# =============================================================================
# CHARACTERISTICS
# =============================================================================


class TestCharacteristics:
    """Тесты структурных гарантий"""

    def test_reports_ordered_distinct_sorted(self) -> None:
        seq = TemporalSequence(date(2015, 1, 1), date(2015, 1, 5), Step(days=1))
        for flag in (
            Characteristic.ORDERED,
            Characteristic.DISTINCT,
            Characteristic.SORTED,
            Characteristic.NONNULL,
            Characteristic.SIZED,
            Characteristic.SUBSIZED,
            Characteristic.IMMUTABLE,
        ):
            assert seq.has_characteristics(flag)

    def test_natural_order_comparator(self) -> None:
        """Всегда естественный порядок: comparator = None"""
        seq = TemporalSequence(date(2015, 1, 1), date(2015, 1, 5), Step(days=1))
        assert seq.comparator is None

    def test_split_preserves_characteristics(self) -> None:
        seq = TemporalSequence(date(2015, 1, 1), date(2015, 1, 5), Step(days=1))
        front = seq.try_split()
        assert front.characteristics == seq.characteristics
