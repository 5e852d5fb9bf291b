"""
Core math modules

Скаляры, правило promotion и IEEE-754 примитивы, на которых построена
dual-арифметика.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    # Epsilon constants
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    # IEEE
    ieee_errstate,
    is_nan,
    signbit,
    # Tolerances
    validate_tolerances,
)

# Scalars & promotion
from src.core.math.scalars import (
    EXACT_TYPES,
    FLOAT_TYPES,
    NAN_HASH,
    SCALAR_TYPES,
    InexactConversionError,
    PromotionError,
    convert_scalar,
    float_type,
    hash_scalar,
    is_finite_value,
    is_floating_type,
    is_integer_value,
    is_nan_value,
    is_number,
    is_scalar,
    isequal_scalar,
    promote_type,
    scalar_signbit,
    scalar_type_from_name,
    scalar_type_name,
    scalar_type_of,
    to_builtin,
    zero_of,
)

__all__ = [
    # Numerical Safeguards — Epsilon constants
    "EPS_FLOAT_COMPARE_ABS",
    "EPS_FLOAT_COMPARE_REL",
    # Numerical Safeguards — IEEE
    "ieee_errstate",
    "is_nan",
    "signbit",
    # Numerical Safeguards — Tolerances
    "validate_tolerances",
    # Scalars — Constants
    "EXACT_TYPES",
    "FLOAT_TYPES",
    "NAN_HASH",
    "SCALAR_TYPES",
    # Scalars — Exceptions
    "InexactConversionError",
    "PromotionError",
    # Scalars — Functions
    "convert_scalar",
    "float_type",
    "hash_scalar",
    "is_finite_value",
    "is_floating_type",
    "is_integer_value",
    "is_nan_value",
    "is_number",
    "is_scalar",
    "isequal_scalar",
    "promote_type",
    "scalar_signbit",
    "scalar_type_from_name",
    "scalar_type_name",
    "scalar_type_of",
    "to_builtin",
    "zero_of",
]
