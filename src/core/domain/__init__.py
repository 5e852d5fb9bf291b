"""
Domain models and value objects.

Contains the JSON interchange record of a dual number.
"""

from src.core.domain.dual_record import (
    DualRecord,
    ScalarTypeName,
    decode_component,
    encode_component,
)

__all__ = [
    "DualRecord",
    "ScalarTypeName",
    "decode_component",
    "encode_component",
]
