"""
Scalars — вещественные скаляры, из которых состоят dual-числа

Модуль определяет допустимые виды скаляров и правило их продвижения
(promotion) к общему виду:

    int  <  Fraction  <  float32  <  float64

При смешивании двух видов результат всегда имеет более общий вид. Любое
значение вне этой решётки (complex, Decimal, str, ...) приводит к
PromotionError.

Хранение:
- int       → int (bool и numpy.integer нормализуются в int)
- Fraction  → fractions.Fraction
- float32   → numpy.float32
- float64   → numpy.float64 (Python float нормализуется сюда)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. promote_type никогда не сужает вид
2. convert_scalar при сужении с потерей информации бросает
   InexactConversionError, а не усекает значение молча
3. hash_scalar согласован с isequal_scalar
"""

import math
import numbers
from fractions import Fraction
from typing import Any, Final

import numpy as np

from src.core.math.numerical_safeguards import is_nan, signbit

# =============================================================================
# EXCEPTIONS
# =============================================================================


class PromotionError(TypeError):
    """
    Для операндов не существует общего числового вида.

    Возникает при конструировании dual из не-вещественного значения или при
    смешивании dual с числом, которое не входит в решётку скаляров
    (например, complex или Decimal).
    """

    pass


class InexactConversionError(ValueError):
    """
    Сужение значения невозможно без потери информации.

    Основной случай: dual с ненулевой производной приводится к обычному
    вещественному числу. Также: Fraction(1, 2) → int, NaN → Fraction.
    """

    pass


# =============================================================================
# РЕШЁТКА СКАЛЯРОВ
# =============================================================================

# Порядок продвижения: от узкого к общему
SCALAR_TYPES: Final[tuple[type, ...]] = (int, Fraction, np.float32, np.float64)

FLOAT_TYPES: Final[tuple[type, ...]] = (np.float32, np.float64)

EXACT_TYPES: Final[tuple[type, ...]] = (int, Fraction)

_RANK: Final[dict[type, int]] = {t: i for i, t in enumerate(SCALAR_TYPES)}

_NAMES: Final[dict[type, str]] = {
    int: "int",
    Fraction: "Fraction",
    np.float32: "float32",
    np.float64: "float64",
}

_TYPES_BY_NAME: Final[dict[str, type]] = {name: t for t, name in _NAMES.items()}

# Фиксированный hash для NaN (hash(float("nan")) в Python зависит от объекта)
NAN_HASH: Final[int] = 0x7FF8_0000_0000


def scalar_type_of(x: Any) -> type:
    """
    Канонический вид скаляра x.

    Args:
        x: Вещественное число

    Returns:
        Один из SCALAR_TYPES

    Raises:
        PromotionError: Если x не вещественный скаляр из решётки

    Examples:
        >>> scalar_type_of(True)
        <class 'int'>
        >>> scalar_type_of(0.5)
        <class 'numpy.float64'>
    """
    if isinstance(x, (bool, np.bool_, int, np.integer)):
        return int
    if isinstance(x, Fraction):
        return Fraction
    if isinstance(x, np.float32):
        return np.float32
    if isinstance(x, (float, np.float64)):
        return np.float64
    raise PromotionError(
        f"no common numeric type for {type(x).__name__} value {x!r}"
    )


def is_scalar(x: Any) -> bool:
    """True для значений, которые scalar_type_of принимает."""
    try:
        scalar_type_of(x)
    except PromotionError:
        return False
    return True


def is_number(x: Any) -> bool:
    """True для любых чисел, включая те, что не входят в решётку."""
    return isinstance(x, (numbers.Number, np.number, np.bool_))


def _check_type(t: type) -> type:
    if t not in _RANK:
        raise PromotionError(f"unsupported scalar type: {t!r}")
    return t


def promote_type(*types: type) -> type:
    """
    Общий вид для набора видов скаляров (наиболее общий из них).

    Raises:
        PromotionError: Если передан вид вне решётки или список пуст

    Examples:
        >>> promote_type(int, Fraction)
        <class 'fractions.Fraction'>
        >>> promote_type(Fraction, np.float32)
        <class 'numpy.float32'>
    """
    if not types:
        raise PromotionError("promote_type() requires at least one type")
    return max((_check_type(t) for t in types), key=_RANK.__getitem__)


def float_type(t: type) -> type:
    """
    Вид с плавающей точкой, в котором считаются трансцендентные функции.

    int и Fraction вычисляются в float64, float32 остаётся float32.
    """
    _check_type(t)
    return t if is_floating_type(t) else np.float64


def is_floating_type(t: type) -> bool:
    return t in FLOAT_TYPES


def scalar_type_name(t: type) -> str:
    """Стабильное имя вида: 'int', 'Fraction', 'float32', 'float64'."""
    return _NAMES[_check_type(t)]


def scalar_type_from_name(name: str) -> type:
    """
    Обратное отображение к scalar_type_name.

    Raises:
        ValueError: Если имя неизвестно
    """
    try:
        return _TYPES_BY_NAME[name]
    except KeyError:
        raise ValueError(
            f"unknown scalar type name {name!r}, expected one of {sorted(_TYPES_BY_NAME)}"
        ) from None


# =============================================================================
# КОНВЕРСИЯ
# =============================================================================


def convert_scalar(t: type, x: Any) -> Any:
    """
    Приведение скаляра x к виду t.

    Расширение всегда точно (кроме округления int/Fraction к float, которое
    является штатным поведением float). Сужение допускается только без
    потери информации.

    Args:
        t: Целевой вид из SCALAR_TYPES
        x: Исходный скаляр

    Returns:
        Значение вида t

    Raises:
        PromotionError: Если x или t вне решётки
        InexactConversionError: Если сужение теряет информацию

    Examples:
        >>> convert_scalar(int, Fraction(4, 2))
        2
        >>> convert_scalar(Fraction, 0.5)
        Fraction(1, 2)
    """
    source = scalar_type_of(x)
    _check_type(t)

    if t is np.float64 or t is np.float32:
        # float → float32 сужает с округлением, это штатная семантика float
        return t(float(x)) if source is Fraction else t(x)

    if t is Fraction:
        if is_floating_type(source):
            if not math.isfinite(x):
                raise InexactConversionError(f"cannot convert {x!r} to Fraction")
            return Fraction(float(x))
        return Fraction(x)

    # t is int
    if source is int:
        return int(x)
    if source is Fraction:
        if x.denominator != 1:
            raise InexactConversionError(f"cannot convert {x} to int exactly")
        return x.numerator
    if not math.isfinite(x) or x != math.floor(x):
        raise InexactConversionError(f"cannot convert {x!r} to int exactly")
    return int(x)


# =============================================================================
# ПРЕДИКАТЫ
# =============================================================================


def is_integer_value(x: Any) -> bool:
    """
    True если скаляр имеет целое значение (1, Fraction(4, 2), 3.0).

    NaN и ±Inf целыми не считаются.
    """
    t = scalar_type_of(x)
    if t is int:
        return True
    if t is Fraction:
        return x.denominator == 1
    return math.isfinite(x) and x == math.floor(x)


def is_finite_value(x: Any) -> bool:
    """Точные виды всегда конечны; float проверяется на NaN/Inf."""
    if scalar_type_of(x) in EXACT_TYPES:
        return True
    return math.isfinite(x)


def is_nan_value(x: Any) -> bool:
    if scalar_type_of(x) in EXACT_TYPES:
        return False
    return is_nan(x)


def scalar_signbit(x: Any) -> bool:
    """
    Знак скаляра с учётом знакового бита float.

    Для int и Fraction это просто x < 0.
    """
    if scalar_type_of(x) in EXACT_TYPES:
        return x < 0
    return signbit(x)


def zero_of(t: type) -> Any:
    return convert_scalar(t, 0)


def to_builtin(x: Any) -> Any:
    """
    numpy float → Python float без потери точности.

    Сравнение Fraction с numpy.float32 в Python не определено напрямую,
    поэтому сравнения между видами идут через builtin-значения.
    """
    if isinstance(x, np.floating):
        return float(x)
    return x


# =============================================================================
# ТОТАЛЬНОЕ РАВЕНСТВО И HASH
# =============================================================================


def isequal_scalar(a: Any, b: Any) -> bool:
    """
    Тотальное равенство скаляров.

    Отличия от ==:
    - NaN равен NaN (рефлексивность для любых значений)
    - +0.0 и -0.0 различаются, если хотя бы один из операндов float

    Examples:
        >>> isequal_scalar(float("nan"), float("nan"))
        True
        >>> isequal_scalar(0.0, -0.0)
        False
        >>> isequal_scalar(1, 1.0)
        True
    """
    a_nan = is_nan_value(a)
    b_nan = is_nan_value(b)
    if a_nan or b_nan:
        return a_nan and b_nan
    if a == 0 and b == 0:
        return scalar_signbit(a) == scalar_signbit(b)
    return to_builtin(a) == to_builtin(b)


def hash_scalar(x: Any) -> int:
    """
    Hash скаляра, согласованный с isequal_scalar.

    Числа, равные между видами (1, Fraction(1), 1.0), получают одинаковый
    hash, как это принято в Python. Для NaN используется NAN_HASH.
    """
    t = scalar_type_of(x)
    if is_floating_type(t):
        if is_nan(x):
            return NAN_HASH
        return hash(float(x))
    return hash(x)
