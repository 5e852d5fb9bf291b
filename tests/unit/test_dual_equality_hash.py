"""
Тесты равенства, тотального равенства и hash для Dual

Проверяет:
1. == по IEEE (NaN != NaN, 0.0 == -0.0) и между видами скаляров
2. isequal (NaN рефлексивен, ±0.0 различаются)
3. Согласованность hash с равенством: real-valued dual ≡ его re
4. Dual как ключ dict/set
5. isapprox
"""

import math
from fractions import Fraction

import numpy as np
import pytest

from src.dual import Dual, dual64, isapprox, isequal, real

# =============================================================================
# ==
# =============================================================================


class TestEquality:
    """Тесты для =="""

    def test_equal_across_scalar_types(self) -> None:
        assert Dual(1.0, 2.0) == Dual(1, 2)
        assert Dual(Fraction(1, 2), 0) == dual64(0.5, 0.0)

    def test_different_derivative(self) -> None:
        assert Dual(1.0, 2.0) != Dual(1.0, 3.0)

    def test_nan_not_equal(self) -> None:
        """Обычное равенство следует IEEE: NaN != NaN"""
        assert Dual(math.nan, 0.0) != Dual(math.nan, 0.0)

    def test_signed_zeros_equal(self) -> None:
        assert Dual(0.0, 1.0) == Dual(-0.0, 1.0)

    def test_equal_to_real(self) -> None:
        """Real-valued dual равен своему re в любом порядке"""
        assert Dual(2.0, 0) == 2
        assert 2 == Dual(2.0, 0)
        assert Dual(Fraction(1, 2)) == 0.5

    def test_numpy_scalar_left_operand(self) -> None:
        """numpy-скаляр слева: == и != через np.equal / np.not_equal"""
        assert np.float64(2.0) == Dual(2.0)
        assert np.float32(0.5) == Dual(0.5, 0)
        assert not (np.float64(2.0) != Dual(2.0))
        assert np.float64(2.0) != Dual(2.0, 1.0)
        assert not (np.float64(2.0) == Dual(2.0, 1.0))

    def test_real_part_compares_in_both_orders(self) -> None:
        """real(z) — numpy-скаляр; сравнение симметрично"""
        z = Dual(2.0, 0.0)
        assert real(z) == z
        assert z == real(z)

        w = Dual(2.0, 1.0)
        assert real(w) != w
        assert w != real(w)

    def test_dual_with_derivative_not_equal_to_real(self) -> None:
        z = Dual(2.0, 1.0)
        assert z != 2.0
        assert z != real(z)

    def test_not_equal_to_non_numbers(self) -> None:
        assert Dual(1, 2) != "1 + 2du"
        assert Dual(1, 0) != 1j
        assert Dual(1, 0) != None  # noqa: E711


# =============================================================================
# ТОТАЛЬНОЕ РАВЕНСТВО
# =============================================================================


class TestIsequal:
    """Тесты для isequal"""

    def test_nan_reflexive(self) -> None:
        z = Dual(math.nan, 1.0)
        assert isequal(z, z)
        assert isequal(Dual(math.nan, 0.0), Dual(math.nan, 0.0))

    def test_signed_zeros_differ(self) -> None:
        assert not isequal(Dual(0.0, 1.0), Dual(-0.0, 1.0))
        assert not isequal(Dual(1.0, 0.0), Dual(1.0, -0.0))

    def test_cross_type(self) -> None:
        assert isequal(Dual(1.0, 2.0), Dual(1, 2))

    def test_dual_and_real(self) -> None:
        """Пара dual/число: dual real-valued, re тотально равен числу"""
        assert isequal(Dual(2.0, 0.0), 2.0)
        assert isequal(2.0, Dual(2.0, 0.0))
        assert isequal(Dual(math.nan, 0.0), math.nan)
        assert not isequal(Dual(0.0, 0.0), -0.0)
        assert not isequal(Dual(2.0, 1.0), 2.0)

    def test_plain_reals(self) -> None:
        assert isequal(math.nan, math.nan)
        assert not isequal(0.0, -0.0)


# =============================================================================
# HASH
# =============================================================================


class TestHash:
    """Тесты для hash"""

    def test_real_valued_hash_matches_real(self) -> None:
        assert hash(Dual(2.5, 0)) == hash(2.5)
        assert hash(Dual(3, 0)) == hash(3)
        assert hash(Dual(Fraction(1, 2))) == hash(Fraction(1, 2)) == hash(0.5)
        assert hash(dual64(0.5, 0.0)) == hash(0.5)

    def test_equal_duals_equal_hashes(self) -> None:
        assert hash(Dual(1, 2)) == hash(Dual(1.0, 2.0))
        assert hash(Dual(0.0, 1.0)) == hash(Dual(-0.0, 1.0))

    def test_nan_hash_stable(self) -> None:
        """Разные NaN-объекты дают одинаковый hash"""
        assert hash(Dual(float("nan"), 1.0)) == hash(Dual(float("nan"), 1.0))
        assert hash(Dual(math.nan, 0.0)) == hash(Dual(np.float64(math.nan), 0.0))

    def test_dict_key_interchangeable_with_real(self) -> None:
        """Real-valued dual и число — один ключ dict"""
        table = {Dual(2.0, 0): "a"}
        assert table[2.0] == "a"
        assert table[2] == "a"
        assert {2: "x"}[Dual(2, 0)] == "x"

    def test_set_deduplicates(self) -> None:
        values = {Dual(1, 2), Dual(1.0, 2.0), Dual(Fraction(1), Fraction(2))}
        assert len(values) == 1

    def test_dual_with_derivative_is_distinct_key(self) -> None:
        table = {2.0: "real", Dual(2.0, 1.0): "dual"}
        assert len(table) == 2
        assert table[Dual(2.0, 1.0)] == "dual"


# =============================================================================
# ПРИБЛИЖЁННОЕ РАВЕНСТВО
# =============================================================================


class TestIsapprox:
    """Тесты для isapprox"""

    def test_close_values(self) -> None:
        assert isapprox(Dual(1.0, 2.0), Dual(1.0 + 1e-12, 2.0))

    def test_distant_values(self) -> None:
        assert not isapprox(Dual(1, 2), Dual(1.1, 2))

    def test_custom_tolerance(self) -> None:
        assert isapprox(Dual(1.0, 2.0), Dual(1.05, 2.0), rel_tol=0.1)

    def test_infinities(self) -> None:
        assert isapprox(Dual(math.inf, 0.0), Dual(math.inf, 0.0))
        assert not isapprox(Dual(math.inf, 0.0), Dual(1.0, 0.0))

    def test_nan_never_approx(self) -> None:
        assert not isapprox(Dual(math.nan, 0.0), Dual(math.nan, 0.0))

    def test_real_argument(self) -> None:
        assert isapprox(Dual(2.0, 0.0), 2.0 + 1e-15)

    def test_negative_tolerance(self) -> None:
        with pytest.raises(ValueError):
            isapprox(Dual(1.0), Dual(1.0), rel_tol=-1.0)
