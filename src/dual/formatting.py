"""
Formatting — текстовое представление dual-чисел

Dual отображается как поток токенов (числа, знак, литеральный текст,
суффикс производной), который внешний writer выводит в свой sink.

Два режима:
- verbose:  1.5 + 2.0du,  1.5 - 2.0du
- compact:  1.5+2du,      1.5-2du

Правила:
1. Если re is NaN или du конечно: re, знак, |du|, [*], суффикс.
   Знак du переносится в токен знака (включая -0.0 → " - 0.0du").
   Маркер "*" ставится только когда |du| не является int, Fraction или
   конечным float (то есть когда du = NaN/Inf).
2. Иначе (du не конечно, re не NaN): конструкторная форма dual(re,du).
"""

import math
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Any, Final, NamedTuple, Protocol

from src.core.math.scalars import (
    is_finite_value,
    is_floating_type,
    is_nan_value,
    scalar_signbit,
    scalar_type_of,
)

# =============================================================================
# КОНФИГУРАЦИЯ
# =============================================================================

# Суффикс инфинитезимальной части
DEFAULT_UNIT_SUFFIX: Final[str] = "du"

# Число значащих цифр float в compact-режиме
COMPACT_SIGNIFICANT_DIGITS: Final[int] = 6


@dataclass(frozen=True)
class FormatConfig:
    """Конфигурация текстового представления."""

    unit_suffix: str = DEFAULT_UNIT_SUFFIX
    compact_digits: int = COMPACT_SIGNIFICANT_DIGITS

    def __post_init__(self) -> None:
        if not self.unit_suffix:
            raise ValueError("unit_suffix must be a non-empty string")
        if self.compact_digits < 1:
            raise ValueError(
                f"compact_digits must be positive, got {self.compact_digits}"
            )


DEFAULT_FORMAT_CONFIG: Final[FormatConfig] = FormatConfig()


# =============================================================================
# ТОКЕНЫ
# =============================================================================


class TokenKind(str, Enum):
    """Вид токена в потоке отображения."""

    NUMBER = "NUMBER"
    SIGN = "SIGN"
    TEXT = "TEXT"
    UNIT = "UNIT"


class FormatToken(NamedTuple):
    kind: TokenKind
    text: str


class TextSink(Protocol):
    def write(self, text: str) -> Any: ...


# =============================================================================
# ФОРМАТИРОВАНИЕ ЧИСЕЛ
# =============================================================================


def _verbose_number(x: Any) -> str:
    # str() numpy-скаляра даёт кратчайшее точное представление для его точности
    if isinstance(x, float):
        return str(float(x))
    return str(x)


def _compact_number(x: Any, digits: int) -> str:
    if not is_floating_type(scalar_type_of(x)):
        return str(x)
    value = float(x)
    if not math.isfinite(value):
        return str(value)
    text = f"{value:.{digits}g}"
    if text.lstrip("-").isdigit():
        # сохраняем признак float: 2 → 2.0
        text += ".0"
    return text


def format_number(x: Any, compact: bool = False, config: FormatConfig = DEFAULT_FORMAT_CONFIG) -> str:
    """Текст одного скаляра в выбранном режиме."""
    if compact:
        return _compact_number(x, config.compact_digits)
    return _verbose_number(x)


def _needs_multiplication_marker(y: Any) -> bool:
    if isinstance(y, (int, Fraction)):
        return False
    return not is_finite_value(y)


# =============================================================================
# ПОТОК ТОКЕНОВ
# =============================================================================


def dual_tokens(
    z: Any,
    compact: bool = False,
    config: FormatConfig = DEFAULT_FORMAT_CONFIG,
) -> tuple[FormatToken, ...]:
    """
    Поток токенов для dual z.

    Args:
        z: Dual (любой объект с атрибутами re и du)
        compact: Compact-режим вместо verbose
        config: Конфигурация отображения

    Returns:
        Кортеж FormatToken. Для одинаковых (z, compact, config) результат
        всегда одинаков.

    Examples:
        >>> "".join(t.text for t in dual_tokens(Dual(1.5, -2.0)))
        '1.5 - 2.0du'
    """
    x, y = z.re, z.du

    if not (is_nan_value(x) or is_finite_value(y)):
        return (
            FormatToken(TokenKind.TEXT, "dual("),
            FormatToken(TokenKind.NUMBER, _verbose_number(x)),
            FormatToken(TokenKind.TEXT, ","),
            FormatToken(TokenKind.NUMBER, _verbose_number(y)),
            FormatToken(TokenKind.TEXT, ")"),
        )

    tokens = [FormatToken(TokenKind.NUMBER, format_number(x, compact, config))]

    if scalar_signbit(y) and not is_nan_value(y):
        y = -y
        tokens.append(FormatToken(TokenKind.SIGN, "-" if compact else " - "))
    else:
        tokens.append(FormatToken(TokenKind.SIGN, "+" if compact else " + "))

    tokens.append(FormatToken(TokenKind.NUMBER, format_number(y, compact, config)))
    if _needs_multiplication_marker(y):
        tokens.append(FormatToken(TokenKind.TEXT, "*"))
    tokens.append(FormatToken(TokenKind.UNIT, config.unit_suffix))
    return tuple(tokens)


def format_dual(
    z: Any,
    compact: bool = False,
    config: FormatConfig = DEFAULT_FORMAT_CONFIG,
) -> str:
    return "".join(token.text for token in dual_tokens(z, compact, config))


def show_dual(
    sink: TextSink,
    z: Any,
    compact: bool = False,
    config: FormatConfig = DEFAULT_FORMAT_CONFIG,
) -> None:
    """
    Вывод dual в текстовый sink (любой объект с методом write).

    Токены пишутся по одному, в порядке dual_tokens.
    """
    for token in dual_tokens(z, compact, config):
        sink.write(token.text)
