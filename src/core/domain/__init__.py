"""
Domain models and value objects.

Contains temporal units, composite steps, point domains and YearMonth.
"""

from src.core.domain.points import (
    DateDomain,
    DateTimeDomain,
    Month,
    TemporalDomain,
    TimeDomain,
    YearMonth,
    YearMonthDomain,
    domain_for,
    find_domain,
    register_domain,
    unregister_domain,
)
from src.core.domain.step import Step, StepLike, as_step
from src.core.domain.units import (
    NANOS_PER_AVERAGE_MONTH,
    NANOS_PER_AVERAGE_YEAR,
    NANOS_PER_DAY,
    TemporalUnit,
)

__all__ = [
    # Units module
    "TemporalUnit",
    "NANOS_PER_DAY",
    "NANOS_PER_AVERAGE_MONTH",
    "NANOS_PER_AVERAGE_YEAR",
    # Step model
    "Step",
    "StepLike",
    "as_step",
    # Points / domains
    "Month",
    "YearMonth",
    "TemporalDomain",
    "DateDomain",
    "DateTimeDomain",
    "TimeDomain",
    "YearMonthDomain",
    "domain_for",
    "find_domain",
    "register_domain",
    "unregister_domain",
]
