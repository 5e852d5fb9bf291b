"""
Тесты для модуля Numerical Safeguards

Проверяет:
1. IEEE-754 режим вычислений (без предупреждений и исключений)
2. NaN/Inf проверки и знаковый бит
3. Значения толерантностей и их валидацию
"""

import math
import warnings

import numpy as np
import pytest

from src.core.math.numerical_safeguards import (
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    ieee_errstate,
    is_nan,
    signbit,
    validate_tolerances,
)

# =============================================================================
# ТЕСТЫ IEEE-РЕЖИМА
# =============================================================================


class TestIeeeErrstate:
    """Тесты для ieee_errstate"""

    def test_division_by_zero_gives_inf(self) -> None:
        """1/0 даёт Inf со знаком делимого"""
        with ieee_errstate():
            assert np.float64(1.0) / np.float64(0.0) == math.inf
            assert np.float64(-1.0) / np.float64(0.0) == -math.inf

    def test_zero_over_zero_gives_nan(self) -> None:
        """0/0 даёт NaN"""
        with ieee_errstate():
            assert math.isnan(np.float64(0.0) / np.float64(0.0))

    def test_no_runtime_warnings(self) -> None:
        """Внутри контекста numpy не выдаёт RuntimeWarning"""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            with ieee_errstate():
                np.float64(1.0) / np.float64(0.0)
                np.log(np.float64(-1.0))
                np.float64(1e308) * np.float64(10.0)

    def test_overflow_gives_inf(self) -> None:
        """Переполнение даёт Inf, а не исключение"""
        with ieee_errstate():
            assert np.float32(3e38) * np.float32(10.0) == np.float32(math.inf)


# =============================================================================
# ТЕСТЫ NaN/Inf И ЗНАКА
# =============================================================================


class TestFloatChecks:
    """Тесты для is_nan / signbit"""

    def test_is_nan_accepts_numpy_scalars(self) -> None:
        """is_nan работает для Python float и numpy-скаляров"""
        assert is_nan(math.nan)
        assert is_nan(np.float32(math.nan))
        assert not is_nan(np.float64(1.0))

    def test_signbit_distinguishes_signed_zeros(self) -> None:
        """signbit различает +0.0 и -0.0"""
        assert signbit(-0.0)
        assert not signbit(0.0)
        assert signbit(np.float32(-0.0))

    def test_signbit_of_infinities(self) -> None:
        """Знак бесконечностей"""
        assert signbit(-math.inf)
        assert not signbit(math.inf)


# =============================================================================
# ТЕСТЫ ТОЛЕРАНТНОСТЕЙ
# =============================================================================


class TestValidateTolerances:
    """Тесты для validate_tolerances"""

    def test_valid_tolerances(self) -> None:
        """Неотрицательные толерантности проходят"""
        validate_tolerances(0.0, 0.0)
        validate_tolerances(1e-9, 1e-12)

    def test_negative_rel_tol(self) -> None:
        """Отрицательный rel_tol отклоняется"""
        with pytest.raises(ValueError, match="rel_tol must be non-negative"):
            validate_tolerances(-1e-9, 0.0)

    def test_negative_abs_tol(self) -> None:
        """Отрицательный abs_tol отклоняется"""
        with pytest.raises(ValueError, match="abs_tol must be non-negative"):
            validate_tolerances(0.0, -1.0)

    def test_nan_tolerance(self) -> None:
        """NaN толерантность отклоняется"""
        with pytest.raises(ValueError, match="rel_tol"):
            validate_tolerances(math.nan, 0.0)

    def test_default_constants_are_valid(self) -> None:
        """Толерантности по умолчанию"""
        assert EPS_FLOAT_COMPARE_REL == 1e-9
        assert EPS_FLOAT_COMPARE_ABS == 1e-12
        validate_tolerances(EPS_FLOAT_COMPARE_REL, EPS_FLOAT_COMPARE_ABS)
