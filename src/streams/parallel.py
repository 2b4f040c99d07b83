r"""
Parallel consumption of temporal sequences.

Последовательность рекурсивно расщепляется через try_split() до чанков
целевого размера, каждый чанк обрабатывается отдельным потоком
ThreadPoolExecutor, результаты склеиваются в хронологическом порядке:

    [----------------- sequence -----------------]
    [---- c1 ----][---- c2 ----][---- c3 ----][c4]
         |              |             |         |
      worker 0      worker 1      worker 2   worker 0
         \______________\_____________\_________/
                         results (c1 + c2 + c3 + c4)

Каждый чанк принадлежит ровно одному потоку (single-owner), поэтому
синхронизация не требуется. Исключения воркеров пропагируют к вызывающему.
"""

import logging
import math
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Final, List, Optional, TypeVar

from src.streams.sequence import TemporalSequence

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


# =============================================================================
# CONFIG
# =============================================================================

# Чанк меньше этого размера больше не расщепляется
DEFAULT_MIN_CHUNK_SIZE: Final[int] = 1

# Чанков на воркер: запас для балансировки неравных чанков
DEFAULT_CHUNKS_PER_WORKER: Final[int] = 4

# Потолок числа потоков по умолчанию
MAX_DEFAULT_WORKERS: Final[int] = 32


@dataclass(frozen=True)
class ParallelConfig:
    """Конфигурация параллельного потребления.

    max_workers: число потоков (None — по числу CPU)
    min_chunk_size: нижняя граница размера чанка
    chunks_per_worker: целевое число чанков на поток
    """

    max_workers: Optional[int] = None
    min_chunk_size: int = DEFAULT_MIN_CHUNK_SIZE
    chunks_per_worker: int = DEFAULT_CHUNKS_PER_WORKER

    def __post_init__(self) -> None:
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.min_chunk_size < 1:
            raise ValueError(f"min_chunk_size must be >= 1, got {self.min_chunk_size}")
        if self.chunks_per_worker < 1:
            raise ValueError(f"chunks_per_worker must be >= 1, got {self.chunks_per_worker}")

    @property
    def effective_workers(self) -> int:
        if self.max_workers is not None:
            return self.max_workers
        return max(1, min((os.cpu_count() or 1) + 4, MAX_DEFAULT_WORKERS))


# =============================================================================
# SPLITTING
# =============================================================================


def target_chunk_size(total_size: int, config: ParallelConfig) -> int:
    """
    Целевой размер чанка для total_size точек.

    Examples:
        >>> target_chunk_size(365, ParallelConfig(max_workers=4))
        23
    """
    chunks = config.effective_workers * config.chunks_per_worker
    return max(config.min_chunk_size, math.ceil(total_size / chunks))


def split_into_chunks(sequence: TemporalSequence[T], chunk_size: int) -> List[TemporalSequence[T]]:
    """
    Рекурсивное расщепление последовательности до чанков <= chunk_size.

    Исходная последовательность становится последним чанком (split
    оставляет ей заднюю половину). Порядок результата — хронологический.

    Args:
        sequence: Расщепляемая последовательность (передаётся во владение)
        chunk_size: Целевой максимальный размер чанка

    Returns:
        Непересекающиеся чанки в хронологическом порядке
    """
    if sequence.estimate_size() <= chunk_size:
        return [sequence]

    front = sequence.try_split()
    if front is None:
        return [sequence]

    return split_into_chunks(front, chunk_size) + split_into_chunks(sequence, chunk_size)


def _consume_chunk(chunk: TemporalSequence[T], fn: Callable[[T], R]) -> List[R]:
    return [fn(point) for point in chunk]


# =============================================================================
# PARALLEL MAP
# =============================================================================


def parallel_map(
    sequence: TemporalSequence[T],
    fn: Callable[[T], R],
    config: Optional[ParallelConfig] = None,
) -> List[R]:
    """
    Применить fn к каждой точке последовательности параллельно.

    Args:
        sequence: Последовательность (передаётся во владение, будет исчерпана)
        fn: Функция точки; должна быть потокобезопасной
        config: Конфигурация параллелизма

    Returns:
        Результаты fn в хронологическом порядке точек

    Raises:
        Любое исключение fn или арифметики домена (первое по хронологии)
    """
    config = config or ParallelConfig()
    workers = config.effective_workers
    total_size = sequence.estimate_size()
    chunk_size = target_chunk_size(total_size, config)

    chunks = split_into_chunks(sequence, chunk_size)
    logger.debug(
        "Split %d points into %d chunks (target size %d) for %d workers",
        total_size,
        len(chunks),
        chunk_size,
        workers,
    )

    if len(chunks) == 1 or workers == 1:
        results: List[R] = []
        for chunk in chunks:
            results.extend(_consume_chunk(chunk, fn))
        return results

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(_consume_chunk, chunk, fn) for chunk in chunks]
        results = []
        for future in futures:
            results.extend(future.result())
    return results


def parallel_collect(
    sequence: TemporalSequence[T],
    config: Optional[ParallelConfig] = None,
) -> List[T]:
    """Все точки последовательности, собранные параллельно (в порядке)."""
    return parallel_map(sequence, _identity, config)


def _identity(point: T) -> T:
    return point
