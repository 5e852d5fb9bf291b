"""
Contract Validation Module

Модуль для валидации JSON контрактов (dual_record).
"""

from .validators import (
    ContractValidator,
    DualRecordValidator,
    SchemaLoader,
    validate_dual_record,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "DualRecordValidator",
    # Functions
    "validate_dual_record",
]
