"""
Elementary — элементарные функции на dual-числах

Единое правило для каждой записи таблицы DERIVATIVE_RULES (chain rule):

    f(z) = Dual(f(re(z)), du(z) * f'(re(z)))

Перегрузки создаются один раз при импорте модуля: register_rules
проходит по таблице и материализует функцию с именем записи в этом
модуле (src.dual.elementary.sin, .log, .erf, ...), а также связывает
соответствующий numpy/scipy ufunc с перегрузкой, чтобы np.sin(z)
возвращал Dual.

sqrt и cbrt определены в арифметическом слое и реэкспортируются отсюда.
"""

import logging
from typing import Any, Callable, MutableMapping, Optional, Sequence

import numpy as np

from src.core.math.numerical_safeguards import ieee_errstate
from src.core.math.scalars import convert_scalar, float_type, scalar_type_of
from src.dual.derivative_rules import DERIVATIVE_RULES, DerivativeRule
from src.dual.dual_number import Dual, cbrt, register_ufunc, sqrt

logger = logging.getLogger(__name__)


def _as_scalar(value: Any) -> Any:
    # scipy.special.polygamma и подобные возвращают 0-d ndarray
    if isinstance(value, np.ndarray):
        return value[()]
    return value


def lift(
    primal: Callable[[Any], Any],
    derivative: Callable[[Any], Any],
    name: Optional[str] = None,
) -> Callable[[Any], Any]:
    """
    Поднятие вещественной функции на dual-числа по chain rule.

    Args:
        primal: Вещественная функция f
        derivative: Её производная f'
        name: Имя перегрузки (по умолчанию primal.__name__)

    Returns:
        Функция, которая для Dual z возвращает
        Dual(f(re), du * f'(re)) в float-виде z, а для вещественного x —
        f(x) в float-виде x.

    Examples:
        >>> square = lift(lambda x: x * x, lambda x: 2 * x, "square")
        >>> square(Dual(3.0, 1.0))
        9.0 + 6.0du
    """

    def overload(z: Any) -> Any:
        if not isinstance(z, Dual):
            f = float_type(scalar_type_of(z))
            with ieee_errstate():
                return convert_scalar(f, _as_scalar(primal(convert_scalar(f, z))))

        f = float_type(z.scalar_type)
        x, dx = convert_scalar(f, z.re), convert_scalar(f, z.du)
        with ieee_errstate():
            value = _as_scalar(primal(x))
            slope = _as_scalar(derivative(x))
            return Dual.of(f, value, dx * slope)

    overload.__name__ = overload.__qualname__ = name or getattr(primal, "__name__", "lifted")
    overload.__doc__ = f"{overload.__name__}(z) на dual-числах (chain rule)."
    return overload


def register_rules(
    rules: Sequence[DerivativeRule],
    namespace: MutableMapping[str, Any],
) -> dict[str, Callable[[Any], Any]]:
    """
    Материализация перегрузок по таблице правил.

    Args:
        rules: Записи таблицы (имя, f, f', ufunc)
        namespace: Куда записать перегрузки (обычно globals() модуля)

    Returns:
        Словарь имя → перегрузка, в порядке таблицы

    Raises:
        ValueError: Если имя повторяется или уже занято в namespace
    """
    registered: dict[str, Callable[[Any], Any]] = {}
    for rule in rules:
        if rule.name in registered or rule.name in namespace:
            raise ValueError(f"elementary function {rule.name!r} is already defined")
        overload = lift(rule.primal, rule.derivative, rule.name)
        registered[rule.name] = overload
        if rule.ufunc is not None:
            register_ufunc(rule.ufunc, overload)

    namespace.update(registered)
    logger.debug("Registered %d elementary overloads", len(registered))
    return registered


ELEMENTARY_FUNCTIONS: dict[str, Callable[[Any], Any]] = register_rules(DERIVATIVE_RULES, globals())

__all__ = ["ELEMENTARY_FUNCTIONS", "cbrt", "lift", "register_rules", "sqrt", *ELEMENTARY_FUNCTIONS]
