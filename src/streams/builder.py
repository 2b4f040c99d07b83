"""
TemporalStreamBuilder — fluent-построение последовательностей

Три обязательных вызова до построения:
- every(step): расстояние между соседними точками
- from_(start): начальная точка (включается)
- until(end): конечная точка (не включается)

Если расстояние между from_ и until не кратно шагу, шаг прибавляется,
пока точка меньше until:

    builder().every(Step(days=5)).from_(today).until(today + 7 дней)
    -> [today, today + 5 дней]  (оставшиеся 2 дня не образуют период)

Циклические типы (datetime.time): при start == end последовательность
пуста, поэтому "каждый час суток" строится до 23:59, а не до полуночи.
"""

import logging
from typing import Callable, Generic, Iterator, List, Optional, TypeVar

from src.core.domain.step import Step, StepLike, as_step
from src.core.errors import InvalidSequenceConfigurationError
from src.streams.parallel import ParallelConfig, parallel_collect, parallel_map
from src.streams.sequence import TemporalSequence

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class TemporalStreamBuilder(Generic[T]):
    """Builder последовательности [from_, until) с шагом every."""

    def __init__(self):
        self._start: Optional[T] = None
        self._end: Optional[T] = None
        self._step: Optional[Step] = None

    def every(self, amount: StepLike) -> "TemporalStreamBuilder[T]":
        """
        Шаг между точками.

        Args:
            amount: Step, timedelta или ISO-8601 duration ('P1D', 'PT3H')

        Raises:
            InvalidSequenceConfigurationError: Если amount равен None
        """
        if amount is None:
            raise InvalidSequenceConfigurationError("every() does not accept None")
        self._step = as_step(amount)
        return self

    def from_(self, start_point: T) -> "TemporalStreamBuilder[T]":
        """Начальная точка (включается)."""
        if start_point is None:
            raise InvalidSequenceConfigurationError("from_() does not accept None")
        self._start = start_point
        return self

    def until(self, end_point: T) -> "TemporalStreamBuilder[T]":
        """Конечная точка (не включается)."""
        if end_point is None:
            raise InvalidSequenceConfigurationError("until() does not accept None")
        self._end = end_point
        return self

    def build(self) -> TemporalSequence[T]:
        """
        Построение последовательности.

        Raises:
            InvalidSequenceConfigurationError: Если every/from_/until не заданы
                или конфигурация невалидна
        """
        missing = [
            name
            for name, value in (("every", self._step), ("from_", self._start), ("until", self._end))
            if value is None
        ]
        if missing:
            raise InvalidSequenceConfigurationError(
                f"TemporalStreamBuilder is missing: {', '.join(missing)}"
            )

        sequence = TemporalSequence(self._start, self._end, self._step)
        logger.debug("Built %r", sequence)
        return sequence

    def stream(self) -> Iterator[T]:
        """Ленивый последовательный итератор точек."""
        return iter(self.build())

    def parallel_stream(self, config: Optional[ParallelConfig] = None) -> List[T]:
        """Все точки, собранные параллельно (хронологический порядок)."""
        return parallel_collect(self.build(), config)

    def parallel_map(self, fn: Callable[[T], R], config: Optional[ParallelConfig] = None) -> List[R]:
        """fn для каждой точки, параллельно (хронологический порядок)."""
        return parallel_map(self.build(), fn, config)
