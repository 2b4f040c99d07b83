"""Streams — ленивые расщепляемые последовательности точек времени.

- TemporalSequence: генератор [start, end) с split/estimate_size
- TemporalStreamBuilder и фабрики типовых последовательностей
- Параллельное потребление через рекурсивный split
- SequenceConfig: декларативная конфигурация
"""

from .builder import TemporalStreamBuilder
from .config import ParallelSettings, PointType, SequenceConfig
from .factories import (
    all_hours_in_any_day,
    all_hours_in_day,
    all_months,
    builder,
    every_day_in_year,
    every_month_in_year,
)
from .parallel import (
    ParallelConfig,
    parallel_collect,
    parallel_map,
    split_into_chunks,
    target_chunk_size,
)
from .sequence import Characteristic, TemporalSequence

__all__ = [
    "TemporalSequence",
    "Characteristic",
    "TemporalStreamBuilder",
    "builder",
    "every_day_in_year",
    "every_month_in_year",
    "all_months",
    "all_hours_in_day",
    "all_hours_in_any_day",
    "ParallelConfig",
    "parallel_map",
    "parallel_collect",
    "split_into_chunks",
    "target_chunk_size",
    "SequenceConfig",
    "ParallelSettings",
    "PointType",
]
