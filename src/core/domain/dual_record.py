"""
DualRecord — текстовое (JSON) представление dual-числа

Immutable Pydantic модель {scalar_type, re, du}.
Полная совместимость с JSON Schema (src/core/contracts/schema/dual_record.json).

Компоненты кодируются JSON-числами, а значения, которые JSON не умеет
передавать, — строками:
- NaN/±Inf → "nan", "inf", "-inf"
- Fraction → "p/q" (или целое число)
"""

import math
from enum import Enum
from fractions import Fraction
from typing import Any, Union

from pydantic import BaseModel, Field, model_validator

from src.core.math.scalars import scalar_type_from_name, scalar_type_name
from src.dual.dual_number import Dual

Component = Union[int, float, str]

_NON_FINITE: dict[str, float] = {
    "nan": math.nan,
    "inf": math.inf,
    "-inf": -math.inf,
}


class ScalarTypeName(str, Enum):
    """Вид скаляра обеих компонент."""

    INT = "int"
    FRACTION = "Fraction"
    FLOAT32 = "float32"
    FLOAT64 = "float64"


# =============================================================================
# КОДИРОВАНИЕ КОМПОНЕНТ
# =============================================================================


def encode_component(x: Any) -> Component:
    """Скаляр dual → JSON-совместимое значение."""
    if isinstance(x, bool):
        return int(x)
    if isinstance(x, int):
        return x
    if isinstance(x, Fraction):
        return x.numerator if x.denominator == 1 else f"{x.numerator}/{x.denominator}"
    value = float(x)
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return value


def decode_component(kind: ScalarTypeName, value: Component) -> Any:
    """
    JSON-значение → скаляр вида kind.

    Raises:
        ValueError: Если значение не представимо в виде kind
    """
    if isinstance(value, bool):
        raise ValueError("booleans are not dual components")

    if kind is ScalarTypeName.INT:
        if not isinstance(value, int):
            raise ValueError(f"int component must be an integer, got {value!r}")
        return value

    if kind is ScalarTypeName.FRACTION:
        if isinstance(value, int):
            return Fraction(value)
        if isinstance(value, str):
            try:
                return Fraction(value)
            except (ValueError, ZeroDivisionError) as e:
                raise ValueError(f"invalid Fraction component {value!r}: {e}") from None
        raise ValueError(f"Fraction component must be an integer or 'p/q', got {value!r}")

    if isinstance(value, str):
        if value not in _NON_FINITE:
            raise ValueError(f"float component string must be one of {sorted(_NON_FINITE)}, got {value!r}")
        return _NON_FINITE[value]
    return float(value)


# =============================================================================
# МОДЕЛЬ
# =============================================================================


class DualRecord(BaseModel):
    """
    JSON-запись dual-числа.

    Examples:
        >>> DualRecord.from_dual(Dual(1.5, float("inf"))).model_dump(mode="json")
        {'scalar_type': 'float64', 're': 1.5, 'du': 'inf'}
    """

    scalar_type: ScalarTypeName = Field(..., description="Вид скаляра компонент")
    re: Component = Field(..., description="Вещественная часть")
    du: Component = Field(..., description="Инфинитезимальная часть (производная)")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_components(self) -> "DualRecord":
        """Обе компоненты должны декодироваться в заданный вид скаляра."""
        decode_component(self.scalar_type, self.re)
        decode_component(self.scalar_type, self.du)
        return self

    @classmethod
    def from_dual(cls, z: Dual) -> "DualRecord":
        return cls(
            scalar_type=ScalarTypeName(scalar_type_name(z.scalar_type)),
            re=encode_component(z.re),
            du=encode_component(z.du),
        )

    def to_dual(self) -> Dual:
        """Восстановление Dual того же вида скаляра."""
        t = scalar_type_from_name(self.scalar_type.value)
        return Dual.of(
            t,
            decode_component(self.scalar_type, self.re),
            decode_component(self.scalar_type, self.du),
        )
