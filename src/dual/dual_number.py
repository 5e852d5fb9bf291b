"""
Dual — дуальное число для forward-mode автоматического дифференцирования

Dual(re, du) = re + du·ε, где ε² = 0. Арифметика над такими парами
переносит производную вместе со значением:

    (a + a'ε)(b + b'ε) = ab + (a'b + ab')ε          (product rule)
    (a + a'ε)/(b + b'ε) = a/b + (a'b - ab')/b² ε     (quotient rule)

Модуль содержит:
- Тип Dual: хранение, конструирование, конверсии, promotion
- Арифметические и алгебраические операторы (+, -, *, /, **, conj,
  abs, abs2, inv, sqrt, cbrt)
- Равенство (обычное и тотальное), hash, приближённое сравнение
- Диспетчеризацию numpy ufunc

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Dual неизменяем: операторы всегда создают новое значение
2. re и du всегда одного вида скаляра
3. Бинарные операторы сначала продвигают операнды к общему Dual[T]
4. Float-арифметика следует IEEE-754: NaN/Inf пропагируют, исключений нет
5. Сужение Dual → вещественное число возможно только при du == 0
6. Real-valued dual (du == 0) равен и хешируется как его вещественная часть
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

import numpy as np

from src.core.math.numerical_safeguards import (
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    ieee_errstate,
    validate_tolerances,
)
from src.core.math.scalars import (
    EXACT_TYPES,
    InexactConversionError,
    PromotionError,
    convert_scalar,
    float_type,
    hash_scalar,
    is_finite_value,
    is_integer_value,
    is_number,
    is_scalar,
    isequal_scalar,
    promote_type,
    scalar_type_of,
    to_builtin,
    zero_of,
)
from src.dual.formatting import format_dual

# numpy ufunc → перегрузка для Dual (заполняется здесь и в elementary)
_UFUNC_OVERLOADS: dict[np.ufunc, Callable[..., Any]] = {}


def register_ufunc(ufunc: np.ufunc, overload: Callable[..., Any]) -> None:
    """Связывает numpy ufunc с перегрузкой для Dual."""
    _UFUNC_OVERLOADS[ufunc] = overload


# =============================================================================
# ТИП DUAL
# =============================================================================


@dataclass(frozen=True, eq=False, repr=False)
class Dual:
    """
    Неизменяемая пара (re, du) одного вида скаляра.

    Args:
        re: Вещественная часть (значение)
        du: Инфинитезимальная часть (производная), по умолчанию 0

    Оба аргумента приводятся к promote_type их видов:
        >>> Dual(1, 0.5).scalar_type
        <class 'numpy.float64'>
        >>> Dual(Fraction(1, 2)).du
        Fraction(0, 1)

    Raises:
        PromotionError: Если аргумент не вещественный скаляр
    """

    re: Any
    du: Any = 0

    def __post_init__(self) -> None:
        t = promote_type(scalar_type_of(self.re), scalar_type_of(self.du))
        object.__setattr__(self, "re", convert_scalar(t, self.re))
        object.__setattr__(self, "du", convert_scalar(t, self.du))

    @classmethod
    def of(cls, t: type, re: Any, du: Any = 0) -> "Dual":
        """Dual с явно заданным видом скаляра (допускает сужение без потерь)."""
        return _from_parts(t, re, du)

    @property
    def scalar_type(self) -> type:
        return scalar_type_of(self.re)

    def astype(self, t: type) -> "Dual":
        """Покомпонентное приведение к виду t."""
        if t is self.scalar_type:
            return self
        return _from_parts(t, self.re, self.du)

    # -------------------------------------------------------------------------
    # Конверсии в builtin-числа
    # -------------------------------------------------------------------------

    def __float__(self) -> float:
        return float(to_real(self, np.float64))

    def __int__(self) -> int:
        return to_real(self, int)

    def __bool__(self) -> bool:
        return bool(self.re != 0 or self.du != 0)

    # -------------------------------------------------------------------------
    # Отображение
    # -------------------------------------------------------------------------

    def __repr__(self) -> str:
        return format_dual(self)

    __str__ = __repr__

    def __format__(self, format_spec: str) -> str:
        if format_spec == "":
            return format_dual(self)
        if format_spec == "c":
            return format_dual(self, compact=True)
        raise ValueError(f"unsupported format spec {format_spec!r} for Dual")

    # -------------------------------------------------------------------------
    # Равенство и hash
    # -------------------------------------------------------------------------

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Dual):
            return (
                to_builtin(self.re) == to_builtin(other.re)
                and to_builtin(self.du) == to_builtin(other.du)
            )
        if is_scalar(other):
            return bool(self.du == 0) and to_builtin(self.re) == to_builtin(other)
        return NotImplemented

    def __ne__(self, other: Any) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        h = hash_scalar(self.re)
        if real_valued(self):
            return h
        return hash((h, hash_scalar(self.du)))

    # -------------------------------------------------------------------------
    # Арифметика
    # -------------------------------------------------------------------------

    def __neg__(self) -> "Dual":
        with ieee_errstate():
            return _from_parts(self.scalar_type, -self.re, -self.du)

    def __pos__(self) -> "Dual":
        return self

    def __abs__(self) -> Any:
        return dual_abs(self)

    def __add__(self, other: Any) -> "Dual":
        w = _operand(other)
        if w is None:
            return NotImplemented
        return _add(*promote(self, w))

    def __radd__(self, other: Any) -> "Dual":
        w = _operand(other)
        if w is None:
            return NotImplemented
        return _add(*promote(w, self))

    def __sub__(self, other: Any) -> "Dual":
        w = _operand(other)
        if w is None:
            return NotImplemented
        return _sub(*promote(self, w))

    def __rsub__(self, other: Any) -> "Dual":
        w = _operand(other)
        if w is None:
            return NotImplemented
        return _sub(*promote(w, self))

    def __mul__(self, other: Any) -> "Dual":
        if isinstance(other, Dual):
            return _mul(*promote(self, other))
        if _operand(other) is None:
            return NotImplemented
        return _scale(self, other)

    def __rmul__(self, other: Any) -> "Dual":
        if _operand(other) is None:
            return NotImplemented
        return _scale(self, other)

    def __truediv__(self, other: Any) -> "Dual":
        if isinstance(other, Dual):
            return _div(*promote(self, other))
        if _operand(other) is None:
            return NotImplemented
        return _div_scalar(self, other)

    def __rtruediv__(self, other: Any) -> "Dual":
        if _operand(other) is None:
            return NotImplemented
        # x / w = x * inv(w)
        return _scale(inv(self), other)

    def __pow__(self, other: Any, modulo: Any = None) -> "Dual":
        if modulo is not None:
            return NotImplemented
        w = _operand(other)
        if w is None:
            return NotImplemented
        return _pow(*promote(self, w))

    def __rpow__(self, other: Any) -> "Dual":
        w = _operand(other)
        if w is None:
            return NotImplemented
        return _pow(*promote(w, self))

    # -------------------------------------------------------------------------
    # numpy interop
    # -------------------------------------------------------------------------

    def __array_ufunc__(self, ufunc: np.ufunc, method: str, *inputs: Any, **kwargs: Any) -> Any:
        if method != "__call__" or kwargs:
            return NotImplemented
        overload = _UFUNC_OVERLOADS.get(ufunc)
        if overload is None:
            return NotImplemented
        return overload(*inputs)


DualPair = Dual


def _from_parts(t: type, re: Any, du: Any) -> Dual:
    # Минуя promotion: компоненты приводятся прямо к t
    z = object.__new__(Dual)
    object.__setattr__(z, "re", convert_scalar(t, re))
    object.__setattr__(z, "du", convert_scalar(t, du))
    return z


def _operand(x: Any) -> Optional[Dual]:
    """
    Операнд бинарного оператора как Dual.

    Returns:
        Dual, или None для не-чисел (оператор вернёт NotImplemented)

    Raises:
        PromotionError: Для чисел вне решётки скаляров (complex, Decimal)
    """
    if isinstance(x, Dual):
        return x
    if is_scalar(x):
        return Dual(x)
    if is_number(x):
        raise PromotionError(
            f"no common numeric type for Dual and {type(x).__name__}"
        )
    return None


# =============================================================================
# КОНСТРУКТОРЫ
# =============================================================================


def dual(x: Any, y: Any = None) -> Dual:
    """dual(x, y) = Dual(x, y); dual(x) = Dual(x, 0)."""
    return Dual(x) if y is None else Dual(x, y)


def _typed_dual(t: type, x: Any, y: Any) -> Dual:
    if isinstance(x, Dual) and y is None:
        return x.astype(t)
    return _from_parts(t, x, 0 if y is None else y)


def dual128(x: Any, y: Any = None) -> Dual:
    """Dual пара float64; dual128(z) перекодирует существующий dual."""
    return _typed_dual(np.float64, x, y)


def dual64(x: Any, y: Any = None) -> Dual:
    """Dual пара float32; dual64(z) перекодирует существующий dual."""
    return _typed_dual(np.float32, x, y)


# =============================================================================
# КОНВЕРСИИ И PROMOTION
# =============================================================================


def promote_dual_type(*types: type) -> type:
    """
    Вид скаляра общего Dual для набора видов.

    Dual[T] и S продвигаются к Dual[promote_type(T, S)].
    """
    return promote_type(*types)


def promote(*values: Any) -> tuple[Dual, ...]:
    """
    Продвижение значений к общему Dual[T].

    Args:
        *values: Dual или вещественные скаляры

    Returns:
        Кортеж Dual одного вида скаляра, в исходном порядке

    Raises:
        PromotionError: Если общего вида нет

    Examples:
        >>> promote(Dual(1, 2), 0.5)
        (1.0 + 2.0du, 0.5 + 0.0du)
    """
    duals = [to_dual(v) for v in values]
    t = promote_dual_type(*(d.scalar_type for d in duals))
    return tuple(d.astype(t) for d in duals)


def to_dual(x: Any, t: Optional[type] = None) -> Dual:
    """Вещественное x → Dual(x, 0); Dual возвращается как есть (или приводится к t)."""
    if isinstance(x, Dual):
        return x if t is None else x.astype(t)
    if t is None:
        return Dual(x)
    return _from_parts(t, x, 0)


def convert_dual(t: type, z: Any) -> Dual:
    """Покомпонентное приведение Dual к виду t."""
    return to_dual(z, t)


def to_real(z: Any, t: Optional[type] = None) -> Any:
    """
    Сужение Dual до вещественного числа.

    Args:
        z: Dual или вещественный скаляр
        t: Целевой вид (по умолчанию вид самого z)

    Returns:
        re(z), приведённая к t

    Raises:
        InexactConversionError: Если du != 0 (производная была бы потеряна)
    """
    if not isinstance(z, Dual):
        return z if t is None else convert_scalar(t, z)
    if z.du != 0:
        raise InexactConversionError(
            f"cannot convert {z!r} to a real number: derivative part is {z.du}"
        )
    return z.re if t is None else convert_scalar(t, z.re)


# =============================================================================
# ACCESSORS И ПРЕДИКАТЫ
# =============================================================================


def real(z: Any) -> Any:
    return z.re if isinstance(z, Dual) else z


def epsilon(z: Any) -> Any:
    if isinstance(z, Dual):
        return z.du
    return zero_of(scalar_type_of(z))


def reim(z: Any) -> tuple[Any, Any]:
    """(re, du) одной парой."""
    return real(z), epsilon(z)


def isdual(x: Any) -> bool:
    return isinstance(x, Dual)


def real_valued(z: Any) -> bool:
    """Dual эквивалентен вещественному числу, если du == 0."""
    return epsilon(z) == 0


def integer_valued(z: Any) -> bool:
    return real_valued(z) and is_integer_value(real(z))


def isfinite(z: Any) -> bool:
    re, du = reim(z)
    return is_finite_value(re) and is_finite_value(du)


# =============================================================================
# РАВЕНСТВО
# =============================================================================


def isequal(a: Any, b: Any) -> bool:
    """
    Тотальное равенство: NaN равен себе, +0.0 и -0.0 различаются.

    Согласовано с hash: isequal(a, b) ⇒ hash(a) == hash(b).
    Для пары Dual/вещественное число: dual должен быть real-valued, а его
    re — тотально равен числу (в любом порядке операндов).
    """
    a_dual, b_dual = isinstance(a, Dual), isinstance(b, Dual)
    if a_dual and b_dual:
        return isequal_scalar(a.re, b.re) and isequal_scalar(a.du, b.du)
    if a_dual:
        return real_valued(a) and isequal_scalar(a.re, b)
    if b_dual:
        return real_valued(b) and isequal_scalar(b.re, a)
    return isequal_scalar(a, b)


def isapprox(
    z: Any,
    w: Any,
    rel_tol: float = EPS_FLOAT_COMPARE_REL,
    abs_tol: float = EPS_FLOAT_COMPARE_ABS,
) -> bool:
    """
    Приближённое равенство по модулю разности.

    Алгоритм:
        z == w  или  |z - w| <= max(abs_tol, rel_tol * max(|z|, |w|))
    где |·| — abs(z) = hypot(re, du).

    Raises:
        ValueError: Если толерантности отрицательны
    """
    validate_tolerances(rel_tol, abs_tol)
    z, w = promote(z, w)
    if z == w:
        return True
    if not (isfinite(z) and isfinite(w)):
        return False
    diff = float(dual_abs(_sub(z, w)))
    scale = max(float(dual_abs(z)), float(dual_abs(w)))
    return diff <= max(abs_tol, rel_tol * scale)


# =============================================================================
# ПРАВИЛА ОПЕРАТОРОВ (операнды уже продвинуты)
# =============================================================================


def _add(z: Dual, w: Dual) -> Dual:
    with ieee_errstate():
        return _from_parts(z.scalar_type, z.re + w.re, z.du + w.du)


def _sub(z: Dual, w: Dual) -> Dual:
    with ieee_errstate():
        return _from_parts(z.scalar_type, z.re - w.re, z.du - w.du)


def _mul(z: Dual, w: Dual) -> Dual:
    # product rule
    with ieee_errstate():
        return _from_parts(
            z.scalar_type,
            z.re * w.re,
            z.du * w.re + z.re * w.du,
        )


def _scale(z: Dual, x: Any) -> Dual:
    # x * z = (x*a, x*a'), без product rule: 0 * Inf в du не возникает
    t = promote_type(z.scalar_type, scalar_type_of(x))
    x = convert_scalar(t, x)
    with ieee_errstate():
        return _from_parts(t, x * convert_scalar(t, z.re), x * convert_scalar(t, z.du))


def _true_division_type(t: type) -> type:
    # int / int → float64, как у Python
    return np.float64 if t is int else t


def _div(z: Dual, w: Dual) -> Dual:
    # quotient rule
    t = _true_division_type(z.scalar_type)
    a, da = convert_scalar(t, z.re), convert_scalar(t, z.du)
    b, db = convert_scalar(t, w.re), convert_scalar(t, w.du)
    with ieee_errstate():
        return _from_parts(t, a / b, (da * b - a * db) / (b * b))


def _div_scalar(z: Dual, x: Any) -> Dual:
    t = _true_division_type(promote_type(z.scalar_type, scalar_type_of(x)))
    x = convert_scalar(t, x)
    with ieee_errstate():
        return _from_parts(t, convert_scalar(t, z.re) / x, convert_scalar(t, z.du) / x)


def _exact_power(z: Dual, n: int) -> Dual:
    t = z.scalar_type
    a, da = z.re, z.du
    re = a**n
    du = n * a ** (n - 1) * da if n != 0 else zero_of(t)
    return _from_parts(t, re, du)


def _pow(z: Dual, w: Dual) -> Dual:
    """
    Обобщённое степенное правило для dual основания и dual показателя:

        (a^b, a'·b·a^(b-1) + b'·a^b·ln(a))

    При b' == 0 слагаемое с логарифмом не вычисляется (обычное правило
    степени), иначе для a <= 0 оно дало бы NaN даже при целом b.
    """
    t = z.scalar_type
    if w.du == 0 and t in EXACT_TYPES and is_integer_value(w.re):
        n = int(w.re)
        if n >= 0 or t is not int:
            return _exact_power(z, n)

    f = float_type(t)
    a, da = convert_scalar(f, z.re), convert_scalar(f, z.du)
    b, db = convert_scalar(f, w.re), convert_scalar(f, w.du)
    with ieee_errstate():
        re = np.power(a, b)
        if b == 0:
            # z**0 постоянна: a^(-1) в нуле дал бы 0 * Inf
            du = zero_of(f)
        else:
            du = da * b * np.power(a, b - 1)
        if db != 0:
            du = du + db * re * np.log(a)
    return _from_parts(f, re, du)


# =============================================================================
# АЛГЕБРАИЧЕСКИЕ ФУНКЦИИ
# =============================================================================


def conj(z: Any) -> Dual:
    """conj(z) = (a, -a')"""
    z = to_dual(z)
    with ieee_errstate():
        return _from_parts(z.scalar_type, z.re, -z.du)


def dual_abs(z: Any) -> Any:
    """Евклидова длина пары: hypot(a, a'). Результат — обычный скаляр."""
    z = to_dual(z)
    f = float_type(z.scalar_type)
    with ieee_errstate():
        return np.hypot(convert_scalar(f, z.re), convert_scalar(f, z.du))


def abs2(z: Any) -> Any:
    """Квадрат длины: a*a + a'*a', без sqrt."""
    z = to_dual(z)
    with ieee_errstate():
        return convert_scalar(z.scalar_type, z.re * z.re + z.du * z.du)


def inv(z: Any) -> Dual:
    """
    Обратное значение 1/z = (1/a, -a'/a²).

    Совпадает с quotient rule для 1/z. При a = 0 даёт ±Inf по IEEE-754.
    """
    z = to_dual(z)
    t = _true_division_type(z.scalar_type)
    a, da = convert_scalar(t, z.re), convert_scalar(t, z.du)
    one = convert_scalar(t, 1)
    with ieee_errstate():
        return _from_parts(t, one / a, -da / (a * a))


def sqrt(z: Any) -> Any:
    """
    sqrt(z) = (sqrt(a), a' / (2·sqrt(a))).

    При a = 0 производная Inf (или NaN при a' = 0), при a < 0 — NaN.
    Для вещественного аргумента возвращает обычный sqrt.
    """
    if not isinstance(z, Dual):
        with ieee_errstate():
            return np.sqrt(convert_scalar(float_type(scalar_type_of(z)), z))
    f = float_type(z.scalar_type)
    a, da = convert_scalar(f, z.re), convert_scalar(f, z.du)
    with ieee_errstate():
        s = np.sqrt(a)
        return _from_parts(f, s, da / (2 * s))


def cbrt(z: Any) -> Any:
    """cbrt(z) = (cbrt(a), a' / (3·cbrt(a)²))."""
    if not isinstance(z, Dual):
        with ieee_errstate():
            return np.cbrt(convert_scalar(float_type(scalar_type_of(z)), z))
    f = float_type(z.scalar_type)
    a, da = convert_scalar(f, z.re), convert_scalar(f, z.du)
    with ieee_errstate():
        c = np.cbrt(a)
        return _from_parts(f, c, da / (3 * (c * c)))


# =============================================================================
# numpy ufunc → Dual
# =============================================================================


def _ufunc_binary(method: str) -> Callable[[Any, Any], Any]:
    def overload(x: Any, y: Any) -> Any:
        # Вызов dunder-метода Dual напрямую: без повторного входа в numpy
        if isinstance(x, Dual):
            return getattr(x, f"__{method}__")(y)
        return getattr(y, f"__r{method}__")(x)

    return overload


def _ufunc_comparison(method: str) -> Callable[[Any, Any], Any]:
    def overload(x: Any, y: Any) -> Any:
        # == и != симметричны: Dual всегда слева
        z, other = (x, y) if isinstance(x, Dual) else (y, x)
        return getattr(z, f"__{method}__")(other)

    return overload


register_ufunc(np.equal, _ufunc_comparison("eq"))
register_ufunc(np.not_equal, _ufunc_comparison("ne"))

for _ufunc, _method in (
    (np.add, "add"),
    (np.subtract, "sub"),
    (np.multiply, "mul"),
    (np.true_divide, "truediv"),
    (np.power, "pow"),
):
    register_ufunc(_ufunc, _ufunc_binary(_method))

register_ufunc(np.negative, lambda z: -to_dual(z))
register_ufunc(np.positive, lambda z: +to_dual(z))
register_ufunc(np.conjugate, conj)
register_ufunc(np.absolute, dual_abs)
register_ufunc(np.reciprocal, inv)
register_ufunc(np.sqrt, sqrt)
register_ufunc(np.cbrt, cbrt)
