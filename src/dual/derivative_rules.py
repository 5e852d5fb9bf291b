"""
Derivative Rules — таблица элементарных функций и их производных

Каждая запись: имя функции, сама функция f, её производная f' (обе
вычисляются на вещественной части dual) и, если есть, numpy/scipy ufunc,
через который f может быть вызвана на Dual (np.sin(z), special.erf(z)).

Таблица неизменяема и читается один раз при импорте src.dual.elementary.
Корректность элементарных функций на dual-числах целиком сводится к
корректности производных в этой таблице.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Final, Optional

import numpy as np
from scipy import special

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

LN2: Final[float] = math.log(2.0)
LN10: Final[float] = math.log(10.0)
DEG: Final[float] = math.pi / 180.0
RAD: Final[float] = 180.0 / math.pi
TWO_OVER_SQRT_PI: Final[float] = 2.0 / math.sqrt(math.pi)


@dataclass(frozen=True)
class DerivativeRule:
    """Элементарная функция с производной в замкнутой форме."""

    name: str
    primal: Callable[[Any], Any]
    derivative: Callable[[Any], Any]
    ufunc: Optional[np.ufunc] = None


def _ufunc_rule(name: str, ufunc: np.ufunc, derivative: Callable[[Any], Any]) -> DerivativeRule:
    return DerivativeRule(name, ufunc, derivative, ufunc)


# =============================================================================
# ВСПОМОГАТЕЛЬНЫЕ ФУНКЦИИ
# =============================================================================


def _sec(x):
    return 1 / np.cos(x)


def _csc(x):
    return 1 / np.sin(x)


def _cot(x):
    return 1 / np.tan(x)


def _sech(x):
    return 1 / np.cosh(x)


def _csch(x):
    return 1 / np.sinh(x)


def _coth(x):
    return 1 / np.tanh(x)


def _sind(x):
    return np.sin(np.deg2rad(x))


def _cosd(x):
    return np.cos(np.deg2rad(x))


def _tand(x):
    return np.tan(np.deg2rad(x))


def _trigamma(x):
    return special.polygamma(1, x)


# =============================================================================
# ТАБЛИЦА
# =============================================================================

DERIVATIVE_RULES: Final[tuple[DerivativeRule, ...]] = (
    # Экспонента и логарифмы
    _ufunc_rule("exp", np.exp, np.exp),
    _ufunc_rule("exp2", np.exp2, lambda x: np.exp2(x) * LN2),
    DerivativeRule("exp10", lambda x: np.power(10.0, x), lambda x: np.power(10.0, x) * LN10),
    _ufunc_rule("expm1", np.expm1, np.exp),
    _ufunc_rule("log", np.log, lambda x: 1 / x),
    _ufunc_rule("log2", np.log2, lambda x: 1 / (x * LN2)),
    _ufunc_rule("log10", np.log10, lambda x: 1 / (x * LN10)),
    _ufunc_rule("log1p", np.log1p, lambda x: 1 / (1 + x)),
    # Тригонометрия
    _ufunc_rule("sin", np.sin, np.cos),
    _ufunc_rule("cos", np.cos, lambda x: -np.sin(x)),
    _ufunc_rule("tan", np.tan, lambda x: 1 + np.tan(x) ** 2),
    DerivativeRule("sec", _sec, lambda x: _sec(x) * np.tan(x)),
    DerivativeRule("csc", _csc, lambda x: -_csc(x) * _cot(x)),
    DerivativeRule("cot", _cot, lambda x: -(1 + _cot(x) ** 2)),
    # Тригонометрия в градусах
    DerivativeRule("sind", _sind, lambda x: DEG * _cosd(x)),
    DerivativeRule("cosd", _cosd, lambda x: -DEG * _sind(x)),
    DerivativeRule("tand", _tand, lambda x: DEG * (1 + _tand(x) ** 2)),
    # Обратная тригонометрия
    _ufunc_rule("asin", np.arcsin, lambda x: 1 / np.sqrt(1 - x * x)),
    _ufunc_rule("acos", np.arccos, lambda x: -1 / np.sqrt(1 - x * x)),
    _ufunc_rule("atan", np.arctan, lambda x: 1 / (1 + x * x)),
    DerivativeRule("asec", lambda x: np.arccos(1 / x), lambda x: 1 / (np.abs(x) * np.sqrt(x * x - 1))),
    DerivativeRule("acsc", lambda x: np.arcsin(1 / x), lambda x: -1 / (np.abs(x) * np.sqrt(x * x - 1))),
    DerivativeRule("acot", lambda x: np.arctan(1 / x), lambda x: -1 / (1 + x * x)),
    # Гиперболические
    _ufunc_rule("sinh", np.sinh, np.cosh),
    _ufunc_rule("cosh", np.cosh, np.sinh),
    _ufunc_rule("tanh", np.tanh, lambda x: 1 - np.tanh(x) ** 2),
    DerivativeRule("sech", _sech, lambda x: -np.tanh(x) * _sech(x)),
    DerivativeRule("csch", _csch, lambda x: -_coth(x) * _csch(x)),
    DerivativeRule("coth", _coth, lambda x: -(_csch(x) ** 2)),
    # Обратные гиперболические
    _ufunc_rule("asinh", np.arcsinh, lambda x: 1 / np.sqrt(x * x + 1)),
    _ufunc_rule("acosh", np.arccosh, lambda x: 1 / np.sqrt(x * x - 1)),
    _ufunc_rule("atanh", np.arctanh, lambda x: 1 / (1 - x * x)),
    DerivativeRule("asech", lambda x: np.arccosh(1 / x), lambda x: -1 / (x * np.sqrt(1 - x * x))),
    DerivativeRule("acsch", lambda x: np.arcsinh(1 / x), lambda x: -1 / (np.abs(x) * np.sqrt(1 + x * x))),
    DerivativeRule("acoth", lambda x: np.arctanh(1 / x), lambda x: 1 / (1 - x * x)),
    # Углы
    _ufunc_rule("deg2rad", np.deg2rad, lambda x: DEG),
    _ufunc_rule("rad2deg", np.rad2deg, lambda x: RAD),
    # Специальные функции
    _ufunc_rule("erf", special.erf, lambda x: TWO_OVER_SQRT_PI * np.exp(-x * x)),
    _ufunc_rule("erfc", special.erfc, lambda x: -TWO_OVER_SQRT_PI * np.exp(-x * x)),
    _ufunc_rule("gamma", special.gamma, lambda x: special.gamma(x) * special.digamma(x)),
    _ufunc_rule("lgamma", special.gammaln, special.digamma),
    _ufunc_rule("digamma", special.digamma, _trigamma),
    DerivativeRule("trigamma", _trigamma, lambda x: special.polygamma(2, x)),
    _ufunc_rule("besselj0", special.j0, lambda x: -special.j1(x)),
    _ufunc_rule("besselj1", special.j1, lambda x: (special.j0(x) - special.jv(2, x)) / 2),
    _ufunc_rule("bessely0", special.y0, lambda x: -special.y1(x)),
    _ufunc_rule("bessely1", special.y1, lambda x: (special.y0(x) - special.yv(2, x)) / 2),
)
