"""
Contract Validation Module

Модуль для валидации JSON контрактов temporal-streams.
"""

from .validators import (
    ContractValidator,
    SchemaLoader,
    SequenceConfigValidator,
    validate_sequence_config,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "SequenceConfigValidator",
    # Functions
    "validate_sequence_config",
]
