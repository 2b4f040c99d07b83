"""TemporalSequence — ленивый расщепляемый генератор точек временной шкалы.

Владеет полуоткрытым диапазоном [current, end) и шагом:
- produce-next: выдаёт current и продвигает его
- split: делит оставшийся диапазон пополам по хронологии
- estimate_size: оценка (или точное значение) количества оставшихся точек

Инварианты:
1. start <= current <= end, end никогда не выдаётся
2. start, end, step фиксированы; current только растёт
3. После split диапазоны [current, end) двух генераторов не пересекаются
4. Исчерпанный генератор навсегда остаётся исчерпанным

Модель конкурентности: single-owner. Экземпляр не синхронизирован и не
должен вызываться из нескольких потоков одновременно. Параллелизм
достигается только через split: после него два генератора не разделяют
изменяемого состояния.
"""

from enum import IntFlag
from typing import Any, Callable, Generic, Iterator, Optional, Tuple, TypeVar

from src.core.domain.points import TemporalDomain, domain_for
from src.core.domain.step import Step, StepLike, as_step
from src.core.domain.units import TemporalUnit
from src.core.errors import InvalidSequenceConfigurationError
from src.core.math.estimation import count_points, estimated_number_of_units
from src.core.math.numerical_safeguards import safe_round

T = TypeVar("T")


class Characteristic(IntFlag):
    """Структурные гарантии последовательности."""

    DISTINCT = 0x0001
    SORTED = 0x0004
    ORDERED = 0x0010
    SIZED = 0x0040
    NONNULL = 0x0100
    IMMUTABLE = 0x0400
    SUBSIZED = 0x4000


SEQUENCE_CHARACTERISTICS = (
    Characteristic.IMMUTABLE
    | Characteristic.NONNULL
    | Characteristic.SIZED
    | Characteristic.SUBSIZED
    | Characteristic.ORDERED
    | Characteristic.DISTINCT
    | Characteristic.SORTED
)


class TemporalSequence(Generic[T]):
    """Ленивый генератор точек [start, end) с шагом step.

    Точки создаются по требованию, в том числе в генераторах, полученных
    через try_split(). Если конец диапазона не кратен шагу, последняя
    неполная часть даёт одну точку, после которой генератор исчерпан:
    с 5 по 14 июня с шагом 3 дня — 5, 8, 11 (14-е не входит).

    Example:
        >>> seq = TemporalSequence(date(2015, 6, 5), date(2015, 6, 14), Step(days=3))
        >>> list(seq)
        [datetime.date(2015, 6, 5), datetime.date(2015, 6, 8), datetime.date(2015, 6, 11)]
    """

    def __init__(self, start_inclusive: T, end_exclusive: T, step: StepLike):
        """
        Args:
            start_inclusive: начальная точка (включается)
            end_exclusive: конечная точка (не включается)
            step: шаг (Step, timedelta или ISO-8601 duration)

        Raises:
            InvalidSequenceConfigurationError: при None-аргументах, нулевом
                шаге, разных доменах start/end или неподдерживаемой
                наименьшей единице шага
        """
        if start_inclusive is None:
            raise InvalidSequenceConfigurationError(
                "The starting point of a TemporalSequence may not be None"
            )
        if end_exclusive is None:
            raise InvalidSequenceConfigurationError(
                "The ending point of a TemporalSequence may not be None"
            )
        if step is None:
            raise InvalidSequenceConfigurationError(
                "The incrementing amount of a TemporalSequence may not be None"
            )

        step = as_step(step)
        domain = domain_for(start_inclusive)
        if domain_for(end_exclusive) is not domain:
            raise InvalidSequenceConfigurationError(
                f"Starting point {start_inclusive!r} and ending point {end_exclusive!r} "
                "belong to different temporal domains"
            )

        smallest_unit = step.smallest_unit
        if smallest_unit is None:
            raise InvalidSequenceConfigurationError(
                f"Step {step} must have a non-zero value for a unit it supports"
            )
        if not domain.is_supported(smallest_unit):
            raise InvalidSequenceConfigurationError(
                "The type of starting point or ending point does not support the temporal unit "
                f"{smallest_unit.name} that makes up part of step {step}"
            )

        self._start = start_inclusive
        self._end = end_exclusive
        self._step = step
        self._domain: TemporalDomain = domain
        self._smallest_unit: TemporalUnit = smallest_unit
        self._ticks_per_step = estimated_number_of_units(step, smallest_unit)
        self._current = start_inclusive

    # -------------------------------------------------------------------------
    # Состояние
    # -------------------------------------------------------------------------

    @property
    def start(self) -> T:
        return self._start

    @property
    def end(self) -> T:
        return self._end

    @property
    def current(self) -> T:
        return self._current

    @property
    def step(self) -> Step:
        return self._step

    @property
    def smallest_unit(self) -> TemporalUnit:
        return self._smallest_unit

    @property
    def domain(self) -> TemporalDomain:
        return self._domain

    @property
    def ticks_per_step(self) -> float:
        """Оценочная длина шага в наименьших единицах."""
        return self._ticks_per_step

    @property
    def is_exhausted(self) -> bool:
        return self._domain.compare(self._current, self._end) >= 0

    # -------------------------------------------------------------------------
    # Produce-next
    # -------------------------------------------------------------------------

    def try_advance(self, action: Callable[[T], Any]) -> bool:
        """Передать текущую точку в action и продвинуться.

        Returns:
            False, если генератор исчерпан (состояние не меняется)
        """
        if self.is_exhausted:
            return False
        action(self._current)
        self._current = self._next_point()
        return True

    def for_each_remaining(self, action: Callable[[T], Any]) -> None:
        while self.try_advance(action):
            pass

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        if self.is_exhausted:
            raise StopIteration
        point = self._current
        self._current = self._next_point()
        return point

    def _next_point(self) -> T:
        # Остаток короче шага: сразу в конец. Нужно для неполного последнего
        # периода и для циклических доменов (каждый час с полуночи до 23:59).
        remaining = self._domain.between(self._smallest_unit, self._current, self._end)
        if remaining < self._ticks_per_step:
            return self._end
        return self._domain.plus_step(self._current, self._step)

    # -------------------------------------------------------------------------
    # Size
    # -------------------------------------------------------------------------

    def estimate_size(self) -> int:
        """Количество ещё не выданных точек.

        ceil(расстояние_до_конца / длина_шага): считаются точки, а не
        промежутки, поэтому любой неполный промежуток даёт ещё одну точку.
        Точно, если расстояние кратно шагу и нет оценочных единиц.
        """
        distance = self._domain.between(self._smallest_unit, self._current, self._end)
        return count_points(distance, self._ticks_per_step)

    def exact_size_if_known(self) -> int:
        """estimate_size() для SIZED последовательности, иначе -1."""
        if self.has_characteristics(Characteristic.SIZED):
            return self.estimate_size()
        return -1

    def __length_hint__(self) -> int:
        return self.estimate_size()

    # -------------------------------------------------------------------------
    # Split
    # -------------------------------------------------------------------------

    def try_split(self) -> Optional["TemporalSequence[T]"]:
        """Отделить переднюю половину оставшегося диапазона.

        Этот генератор сохраняет [split_point, end), возвращаемый получает
        [current, split_point). Все точки исходного генератора выдаются
        ровно одним из двух, в прежнем относительном порядке.

        Returns:
            Новый генератор передней половины или None, если осталось
            не больше одной точки (состояние не меняется)
        """
        remaining = self.estimate_size()
        if remaining <= 1:
            return None

        midpoint_index = remaining // 2
        split_point = self._domain.plus(
            self._current,
            safe_round(self._ticks_per_step * midpoint_index),
            self._smallest_unit,
        )

        front = TemporalSequence(self._current, split_point, self._step)
        self._current = split_point
        return front

    def split(self) -> Optional[Tuple["TemporalSequence[T]", "TemporalSequence[T]"]]:
        """Функциональный вариант try_split(): этот генератор не меняется.

        Returns:
            (front, back) — два новых генератора или None
        """
        back = TemporalSequence(self._current, self._end, self._step)
        front = back.try_split()
        if front is None:
            return None
        return front, back

    # -------------------------------------------------------------------------
    # Characteristics
    # -------------------------------------------------------------------------

    @property
    def characteristics(self) -> Characteristic:
        return SEQUENCE_CHARACTERISTICS

    def has_characteristics(self, flags: Characteristic) -> bool:
        return (self.characteristics & flags) == flags

    @property
    def comparator(self) -> None:
        # Всегда естественный порядок
        return None

    def __repr__(self) -> str:
        return (
            f"TemporalSequence(current={self._current!r}, end={self._end!r}, "
            f"step={self._step})"
        )
