"""
Numerical Safeguards — IEEE-754 примитивы для dual-арифметики

Модуль задаёт численный режим, в котором вычисляются все операции над
dual-числами:
- Вычисления с плавающей точкой идут через numpy-скаляры в режиме
  errstate(all="ignore"): NaN/Inf и signed zero пропагируют, исключений нет
- Epsilon-параметры для приближённого сравнения dual (isapprox)
- Проверки NaN/Inf и знакового бита

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Деление на ноль для float даёт ±Inf/NaN по IEEE-754, а не исключение
2. NaN/Inf никогда не подменяются fallback-значениями
3. signbit различает +0.0 и -0.0
4. Все операции детерминированы и воспроизводимы
"""

import math
from contextlib import contextmanager
from typing import Final, Iterator

import numpy as np

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Относительная толерантность для приближённых сравнений
EPS_FLOAT_COMPARE_REL: Final[float] = 1e-9

# Абсолютная толерантность для приближённых сравнений
EPS_FLOAT_COMPARE_ABS: Final[float] = 1e-12


# =============================================================================
# IEEE-РЕЖИМ ВЫЧИСЛЕНИЙ
# =============================================================================


@contextmanager
def ieee_errstate() -> Iterator[None]:
    """
    Контекст, в котором numpy не выдаёт предупреждений и не бросает
    исключений на делении на ноль, переполнении и недопустимых операциях.

    Результат операции при этом остаётся тем, что требует IEEE-754:
        >>> with ieee_errstate():
        ...     np.float64(1.0) / np.float64(0.0)
        np.float64(inf)
    """
    with np.errstate(all="ignore"):
        yield


# =============================================================================
# ПРОВЕРКИ NaN/Inf
# =============================================================================


def is_nan(value: float) -> bool:
    """NaN-проверка, работающая и для numpy-скаляров."""
    return bool(np.isnan(value))


def signbit(value: float) -> bool:
    """
    Знаковый бит float.

    В отличие от value < 0, различает -0.0 и +0.0 и читает знак у NaN.

    Examples:
        >>> signbit(-0.0)
        True
        >>> signbit(0.0)
        False
    """
    return bool(np.signbit(value))


# =============================================================================
# ТОЛЕРАНТНОСТИ СРАВНЕНИЯ
# =============================================================================


def validate_tolerances(rel_tol: float, abs_tol: float) -> None:
    """
    Валидация толерантностей сравнения.

    Raises:
        ValueError: Если толерантность отрицательна или NaN
    """
    for name, value in (("rel_tol", rel_tol), ("abs_tol", abs_tol)):
        if math.isnan(value) or value < 0:
            raise ValueError(f"{name} must be non-negative, got {value}")
