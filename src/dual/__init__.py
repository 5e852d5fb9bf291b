"""
Dual numbers для forward-mode автоматического дифференцирования.

Dual(re, du) переносит значение и его первую производную через
арифметику и элементарные функции:

    >>> from src.dual import Dual, elementary
    >>> z = Dual(4.0, 1.0)
    >>> elementary.sqrt(z)
    2.0 + 0.25du
"""

from src.core.math.scalars import InexactConversionError, PromotionError
from src.dual import elementary
from src.dual.derivative_rules import DERIVATIVE_RULES, DerivativeRule
from src.dual.dual_number import (
    Dual,
    DualPair,
    abs2,
    cbrt,
    conj,
    convert_dual,
    dual,
    dual64,
    dual128,
    dual_abs,
    epsilon,
    integer_valued,
    inv,
    isapprox,
    isdual,
    isequal,
    isfinite,
    promote,
    promote_dual_type,
    real,
    real_valued,
    reim,
    sqrt,
    to_dual,
    to_real,
)
from src.dual.elementary import ELEMENTARY_FUNCTIONS, lift, register_rules
from src.dual.formatting import (
    DEFAULT_FORMAT_CONFIG,
    FormatConfig,
    FormatToken,
    TokenKind,
    dual_tokens,
    format_dual,
    show_dual,
)
from src.dual.serialization import (
    decode_dual,
    dump_dual,
    encode_dual,
    encoded_size,
    load_dual,
)

__all__ = [
    # Exceptions
    "InexactConversionError",
    "PromotionError",
    # Dual type
    "Dual",
    "DualPair",
    "dual",
    "dual64",
    "dual128",
    # Conversions / promotion
    "convert_dual",
    "promote",
    "promote_dual_type",
    "to_dual",
    "to_real",
    # Accessors / predicates
    "epsilon",
    "integer_valued",
    "isdual",
    "isfinite",
    "real",
    "real_valued",
    "reim",
    # Algebra
    "abs2",
    "cbrt",
    "conj",
    "dual_abs",
    "inv",
    "sqrt",
    # Equality
    "isapprox",
    "isequal",
    # Elementary functions
    "DERIVATIVE_RULES",
    "DerivativeRule",
    "ELEMENTARY_FUNCTIONS",
    "elementary",
    "lift",
    "register_rules",
    # Formatting
    "DEFAULT_FORMAT_CONFIG",
    "FormatConfig",
    "FormatToken",
    "TokenKind",
    "dual_tokens",
    "format_dual",
    "show_dual",
    # Binary stream
    "decode_dual",
    "dump_dual",
    "encode_dual",
    "encoded_size",
    "load_dual",
]
