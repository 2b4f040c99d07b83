"""
SequenceConfig — Декларативная конфигурация последовательности

Конфигурация проходит две ступени проверки:
1. JSON Schema контракт (sequence_config.json) — структура документа
2. Pydantic модель — разбор точек и шага, доменные ограничения

Пример:
    {
        "point_type": "date",
        "start": "2015-06-05",
        "end": "2015-06-14",
        "every": "P3D"
    }
"""

from datetime import date, datetime, time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from src.core.contracts import validate_sequence_config
from src.core.domain.points import YearMonth
from src.core.domain.step import Step
from src.streams.parallel import ParallelConfig, parallel_collect
from src.streams.sequence import TemporalSequence


# =============================================================================
# ENUMS
# =============================================================================


class PointType(str, Enum):
    """Тип точек последовательности"""

    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    YEAR_MONTH = "year_month"


_POINT_PARSERS: Dict[PointType, Callable[[str], Any]] = {
    PointType.DATE: date.fromisoformat,
    PointType.DATETIME: datetime.fromisoformat,
    PointType.TIME: time.fromisoformat,
    PointType.YEAR_MONTH: YearMonth.parse,
}


# =============================================================================
# MODELS
# =============================================================================


class ParallelSettings(BaseModel):
    """Параметры параллельного потребления"""

    max_workers: Optional[int] = Field(None, ge=1, description="Число потоков (None — по CPU)")
    min_chunk_size: int = Field(1, ge=1, description="Минимальный размер чанка")
    chunks_per_worker: int = Field(4, ge=1, description="Целевое число чанков на поток")

    model_config = {"frozen": True}

    def to_config(self) -> ParallelConfig:
        return ParallelConfig(
            max_workers=self.max_workers,
            min_chunk_size=self.min_chunk_size,
            chunks_per_worker=self.chunks_per_worker,
        )


class SequenceConfig(BaseModel):
    """
    Конфигурация последовательности [start, end) с шагом every.

    Immutable модель (frozen=True).
    """

    point_type: PointType = Field(..., description="Домен точек")
    start: str = Field(..., min_length=1, description="Начальная точка (включается)")
    end: str = Field(..., min_length=1, description="Конечная точка (не включается)")
    every: Step = Field(..., description="Шаг (ISO-8601 duration или mapping единиц)")
    parallel: ParallelSettings = Field(default_factory=ParallelSettings)

    model_config = {"frozen": True}

    @field_validator("every", mode="before")
    @classmethod
    def parse_every(cls, v: Any) -> Any:
        """ISO-8601 строка -> Step."""
        if isinstance(v, str):
            return Step.parse(v)
        return v

    @field_validator("every")
    @classmethod
    def validate_every_non_zero(cls, v: Step) -> Step:
        if v.is_zero:
            raise ValueError(f"every must have a non-zero unit, got {v}")
        return v

    @model_validator(mode="after")
    def validate_points(self) -> "SequenceConfig":
        """start и end разбираются в домене point_type, start <= end."""
        start = self.parse_point(self.start)
        end = self.parse_point(self.end)
        if start > end:
            raise ValueError(f"start {self.start} is after end {self.end}")
        return self

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "SequenceConfig":
        """
        Валидация по JSON Schema и разбор.

        Raises:
            jsonschema.ValidationError: Если документ не соответствует контракту
            pydantic.ValidationError: Если точки или шаг невалидны
        """
        validate_sequence_config(data)
        return cls.model_validate(data)

    def parse_point(self, text: str) -> Any:
        return _POINT_PARSERS[self.point_type](text)

    def to_sequence(self) -> TemporalSequence:
        """Новая последовательность по конфигурации."""
        return TemporalSequence(self.parse_point(self.start), self.parse_point(self.end), self.every)

    def collect(self) -> List[Any]:
        """Все точки, собранные параллельно согласно parallel."""
        return parallel_collect(self.to_sequence(), self.parallel.to_config())
