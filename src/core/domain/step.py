"""
Step — Составной шаг последовательности

Immutable Pydantic модель: отображение TemporalUnit -> неотрицательная
целая величина. Отсутствующие единицы имеют величину 0.

Наименьшая единица шага (smallest_unit) — самая мелкая единица с ненулевой
величиной. Вычисляется один раз при создании и кэшируется.

Шаг без ненулевых единиц допустим как значение (Step.zero()), но не может
использоваться для построения последовательности.
"""

import re
from datetime import timedelta
from typing import Dict, Final, Optional, Tuple, Union

from pydantic import BaseModel, Field, PrivateAttr

from src.core.domain.units import TemporalUnit


# =============================================================================
# ПОЛЯ ШАГА
# =============================================================================

# Порядок: от крупной единицы к мелкой
_FIELD_UNITS: Final[Tuple[Tuple[str, TemporalUnit], ...]] = (
    ("years", TemporalUnit.YEARS),
    ("months", TemporalUnit.MONTHS),
    ("weeks", TemporalUnit.WEEKS),
    ("days", TemporalUnit.DAYS),
    ("hours", TemporalUnit.HOURS),
    ("minutes", TemporalUnit.MINUTES),
    ("seconds", TemporalUnit.SECONDS),
    ("milliseconds", TemporalUnit.MILLIS),
    ("microseconds", TemporalUnit.MICROS),
    ("nanoseconds", TemporalUnit.NANOS),
)

_UNIT_FIELDS: Final[Dict[TemporalUnit, str]] = {unit: name for name, unit in _FIELD_UNITS}

# Единицы без собственного поля выражаются через кратное поле
_UNIT_MULTIPLES: Final[Dict[TemporalUnit, Tuple[str, int]]] = {
    TemporalUnit.HALF_DAYS: ("hours", 12),
    TemporalUnit.DECADES: ("years", 10),
    TemporalUnit.CENTURIES: ("years", 100),
    TemporalUnit.MILLENNIA: ("years", 1_000),
}

# ISO-8601 duration: PnYnMnWnDTnHnMn.nS (без знака)
_ISO_DURATION_RE: Final = re.compile(
    r"^P(?:(?P<years>\d+)Y)?(?:(?P<months>\d+)M)?(?:(?P<weeks>\d+)W)?(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?"
    r"(?:(?P<seconds>\d+)(?:[.,](?P<fraction>\d{1,9}))?S)?)?$",
    re.IGNORECASE,
)


# =============================================================================
# STEP MODEL
# =============================================================================


class Step(BaseModel):
    """
    Составной шаг, прибавляемый к точке для получения следующей точки.

    Immutable модель (frozen=True). Все величины неотрицательны:
    убывающий шаг никогда не достигнет конца полуоткрытого диапазона.
    """

    years: int = Field(0, ge=0, description="Годы")
    months: int = Field(0, ge=0, description="Месяцы")
    weeks: int = Field(0, ge=0, description="Недели")
    days: int = Field(0, ge=0, description="Дни")
    hours: int = Field(0, ge=0, description="Часы")
    minutes: int = Field(0, ge=0, description="Минуты")
    seconds: int = Field(0, ge=0, description="Секунды")
    milliseconds: int = Field(0, ge=0, description="Миллисекунды")
    microseconds: int = Field(0, ge=0, description="Микросекунды")
    nanoseconds: int = Field(0, ge=0, description="Наносекунды")

    model_config = {"frozen": True}  # Immutable

    _smallest_unit: Optional[TemporalUnit] = PrivateAttr(default=None)

    def model_post_init(self, __context) -> None:
        # Кэш наименьшей ненулевой единицы (поля идут от крупной к мелкой)
        for name, unit in reversed(_FIELD_UNITS):
            if getattr(self, name) != 0:
                self._smallest_unit = unit
                break

    # -------------------------------------------------------------------------
    # Фабрики
    # -------------------------------------------------------------------------

    @classmethod
    def zero(cls) -> "Step":
        """Нулевой шаг (невалиден для последовательности)."""
        return cls()

    @classmethod
    def of(cls, amount: int, unit: TemporalUnit) -> "Step":
        """
        Шаг из одной единицы.

        Args:
            amount: Величина (>= 0)
            unit: Единица

        Returns:
            Step с единственной ненулевой компонентой

        Examples:
            >>> Step.of(3, TemporalUnit.DAYS)
            Step(days=3)
            >>> Step.of(1, TemporalUnit.DECADES)
            Step(years=10)
        """
        if unit in _UNIT_FIELDS:
            return cls(**{_UNIT_FIELDS[unit]: amount})
        name, multiple = _UNIT_MULTIPLES[unit]
        return cls(**{name: amount * multiple})

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> "Step":
        """
        Конверсия timedelta -> Step.

        Секунды раскладываются на часы/минуты/секунды, чтобы наименьшая
        единица была максимально крупной (timedelta(hours=1) -> hours=1).

        Raises:
            ValueError: Если delta отрицательна
        """
        if delta < timedelta(0):
            raise ValueError(f"Step cannot be negative: {delta}")

        hours, rem = divmod(delta.seconds, 3600)
        minutes, seconds = divmod(rem, 60)
        milliseconds, microseconds = divmod(delta.microseconds, 1000)
        return cls(
            days=delta.days,
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            milliseconds=milliseconds,
            microseconds=microseconds,
        )

    @classmethod
    def parse(cls, text: str) -> "Step":
        """
        Разбор ISO-8601 duration.

        Поддерживается форма PnYnMnWnDTnHnMn.nS без знака. Дробная часть
        секунд (до 9 знаков) раскладывается на милли/микро/наносекунды.

        Args:
            text: Строка, например 'P1M3D' или 'PT1.5S'

        Returns:
            Разобранный Step

        Raises:
            ValueError: Если строка не является ISO-8601 duration
        """
        match = _ISO_DURATION_RE.match(text.strip())
        if match is None or text.strip().upper() in ("P", "PT") or text.strip().upper().endswith("T"):
            raise ValueError(f"Text cannot be parsed to a Step: {text!r}")

        groups = match.groupdict()
        fraction = groups.pop("fraction")
        values = {name: int(value) for name, value in groups.items() if value is not None}

        if fraction is not None:
            nanos = int(fraction.ljust(9, "0"))
            values["milliseconds"], rem = divmod(nanos, 1_000_000)
            values["microseconds"], values["nanoseconds"] = divmod(rem, 1_000)

        return cls(**values)

    # -------------------------------------------------------------------------
    # Доступ к компонентам
    # -------------------------------------------------------------------------

    @property
    def units(self) -> Tuple[TemporalUnit, ...]:
        """Единицы шага (от крупной к мелкой)."""
        return tuple(unit for _, unit in _FIELD_UNITS)

    def get(self, unit: TemporalUnit) -> int:
        """Величина единицы (0 для отсутствующих единиц)."""
        name = _UNIT_FIELDS.get(unit)
        return getattr(self, name) if name is not None else 0

    def items(self) -> Tuple[Tuple[TemporalUnit, int], ...]:
        """Пары (единица, величина) с ненулевой величиной."""
        return tuple(
            (unit, getattr(self, name)) for name, unit in _FIELD_UNITS if getattr(self, name) != 0
        )

    @property
    def smallest_unit(self) -> Optional[TemporalUnit]:
        """Наименьшая единица с ненулевой величиной (None для нулевого шага)."""
        return self._smallest_unit

    @property
    def is_zero(self) -> bool:
        return self._smallest_unit is None

    # -------------------------------------------------------------------------
    # Части шага (порядок применения: месяцы -> дни -> время -> наносекунды)
    # -------------------------------------------------------------------------

    @property
    def total_months(self) -> int:
        return self.years * 12 + self.months

    @property
    def total_days(self) -> int:
        return self.weeks * 7 + self.days

    @property
    def time_part(self) -> timedelta:
        """Внутрисуточная часть шага (часы .. микросекунды) как timedelta."""
        return timedelta(
            hours=self.hours,
            minutes=self.minutes,
            seconds=self.seconds,
            milliseconds=self.milliseconds,
            microseconds=self.microseconds,
        )

    # -------------------------------------------------------------------------
    # Представление
    # -------------------------------------------------------------------------

    def isoformat(self) -> str:
        """ISO-8601 представление шага ('P1M3D', 'PT1H', 'P0D')."""
        date_part = "".join(
            f"{value}{suffix}"
            for value, suffix in (
                (self.years, "Y"),
                (self.months, "M"),
                (self.weeks, "W"),
                (self.days, "D"),
            )
            if value
        )

        nanos = self.milliseconds * 1_000_000 + self.microseconds * 1_000 + self.nanoseconds
        seconds = self.seconds + nanos // 1_000_000_000
        nanos %= 1_000_000_000
        time_part = ""
        if self.hours:
            time_part += f"{self.hours}H"
        if self.minutes:
            time_part += f"{self.minutes}M"
        if seconds or nanos:
            fraction = f".{nanos:09d}".rstrip("0") if nanos else ""
            time_part += f"{seconds}{fraction}S"

        if not date_part and not time_part:
            return "P0D"
        return "P" + date_part + ("T" + time_part if time_part else "")

    def __str__(self) -> str:
        return self.isoformat()

    def __repr__(self) -> str:
        parts = ", ".join(f"{name}={getattr(self, name)}" for name, _ in _FIELD_UNITS if getattr(self, name))
        return f"Step({parts})"


StepLike = Union[Step, timedelta, str]


def as_step(value: StepLike) -> Step:
    """
    Приведение значения к Step.

    Args:
        value: Step, timedelta или ISO-8601 duration строка

    Returns:
        Step

    Raises:
        TypeError: Если тип значения не поддерживается
        ValueError: Если timedelta отрицательна или строка не разбирается
    """
    if isinstance(value, Step):
        return value
    if isinstance(value, timedelta):
        return Step.from_timedelta(value)
    if isinstance(value, str):
        return Step.parse(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to Step")
