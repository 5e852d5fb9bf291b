"""
Тесты текстового представления Dual

Проверяет:
1. Verbose и compact режимы
2. Перенос знака du в токен знака (включая -0.0)
3. Маркер "*" для NaN/Inf производной и конструкторную форму dual(re,du)
4. Поток токенов и вывод в sink
5. FormatConfig
"""

import io
import math
from fractions import Fraction

import pytest

from src.dual import (
    Dual,
    FormatConfig,
    FormatToken,
    TokenKind,
    dual64,
    dual_tokens,
    format_dual,
    show_dual,
)


class _RecordingSink:
    """Sink, запоминающий каждый вызов write."""

    def __init__(self) -> None:
        self.writes: list[str] = []

    def write(self, text: str) -> None:
        self.writes.append(text)


# =============================================================================
# VERBOSE
# =============================================================================


class TestVerboseFormat:
    """Тесты verbose-режима"""

    @pytest.mark.parametrize(
        "z, expected",
        [
            (Dual(1.5, 2.0), "1.5 + 2.0du"),
            (Dual(1.5, -2.0), "1.5 - 2.0du"),
            (Dual(1, 2), "1 + 2du"),
            (Dual(1, -2), "1 - 2du"),
            (Dual(Fraction(1, 2), Fraction(-3, 4)), "1/2 - 3/4du"),
            (Dual(-1.0, 0.0), "-1.0 + 0.0du"),
            (Dual(1.0, -0.0), "1.0 - 0.0du"),
            (Dual(1 / 3, 2 / 3), "0.3333333333333333 + 0.6666666666666666du"),
        ],
    )
    def test_finite_values(self, z: Dual, expected: str) -> None:
        assert format_dual(z) == expected

    def test_float32_shortest_repr(self) -> None:
        """float32 печатается кратчайшим представлением своей точности"""
        assert format_dual(dual64(0.1, 0.2)) == "0.1 + 0.2du"

    def test_repr_and_str(self) -> None:
        z = Dual(1.5, 2.0)
        assert repr(z) == "1.5 + 2.0du"
        assert str(z) == repr(z)
        assert f"{z}" == repr(z)


class TestNonFiniteFormat:
    """Тесты для NaN/Inf"""

    def test_nan_real_part(self) -> None:
        assert format_dual(Dual(math.nan, 1.0)) == "nan + 1.0du"

    def test_infinite_derivative_with_nan_real(self) -> None:
        """du = ±Inf при re = NaN → маркер умножения"""
        assert format_dual(Dual(math.nan, math.inf)) == "nan + inf*du"
        assert format_dual(Dual(math.nan, -math.inf)) == "nan - inf*du"
        assert format_dual(Dual(math.nan, math.nan)) == "nan + nan*du"

    def test_constructor_form(self) -> None:
        """du не конечно, re не NaN → dual(re,du)"""
        assert format_dual(Dual(1.0, math.inf)) == "dual(1.0,inf)"
        assert format_dual(Dual(1.0, math.nan)) == "dual(1.0,nan)"
        assert format_dual(Dual(math.inf, -math.inf)) == "dual(inf,-inf)"

    def test_constructor_form_ignores_compact(self) -> None:
        assert format_dual(Dual(1.0, math.inf), compact=True) == "dual(1.0,inf)"

    def test_infinite_real_part(self) -> None:
        assert format_dual(Dual(-math.inf, 1.0)) == "-inf + 1.0du"


# =============================================================================
# COMPACT
# =============================================================================


class TestCompactFormat:
    """Тесты compact-режима"""

    @pytest.mark.parametrize(
        "z, expected",
        [
            (Dual(1.5, 2.0), "1.5+2.0du"),
            (Dual(1.5, -2.0), "1.5-2.0du"),
            (Dual(1 / 3, -2 / 3), "0.333333-0.666667du"),
            (Dual(1e20, 1.0), "1e+20+1.0du"),
            (Dual(1, -2), "1-2du"),
            (Dual(Fraction(1, 3), 1), "1/3+1du"),
            (Dual(math.nan, math.inf), "nan+inf*du"),
        ],
    )
    def test_compact(self, z: Dual, expected: str) -> None:
        assert format_dual(z, compact=True) == expected

    def test_format_spec(self) -> None:
        z = Dual(1 / 3, 1.0)
        assert f"{z:c}" == "0.333333+1.0du"
        assert format(z, "") == format_dual(z)

    def test_unknown_format_spec(self) -> None:
        with pytest.raises(ValueError, match="unsupported format spec"):
            format(Dual(1.0, 2.0), ".3f")


# =============================================================================
# ТОКЕНЫ И SINK
# =============================================================================


class TestTokens:
    """Тесты dual_tokens / show_dual"""

    def test_token_stream(self) -> None:
        assert dual_tokens(Dual(1.5, -2.0)) == (
            FormatToken(TokenKind.NUMBER, "1.5"),
            FormatToken(TokenKind.SIGN, " - "),
            FormatToken(TokenKind.NUMBER, "2.0"),
            FormatToken(TokenKind.UNIT, "du"),
        )

    def test_multiplication_marker_token(self) -> None:
        kinds = [token.kind for token in dual_tokens(Dual(math.nan, math.inf))]
        assert kinds == [
            TokenKind.NUMBER,
            TokenKind.SIGN,
            TokenKind.NUMBER,
            TokenKind.TEXT,
            TokenKind.UNIT,
        ]

    def test_constructor_form_tokens(self) -> None:
        tokens = dual_tokens(Dual(1.0, math.inf))
        assert tokens[0] == FormatToken(TokenKind.TEXT, "dual(")
        assert tokens[-1] == FormatToken(TokenKind.TEXT, ")")

    def test_deterministic(self) -> None:
        z = Dual(0.1, -0.2)
        assert dual_tokens(z, compact=True) == dual_tokens(z, compact=True)
        assert format_dual(z) == format_dual(Dual(0.1, -0.2))

    def test_show_dual_writes_each_token(self) -> None:
        sink = _RecordingSink()
        z = Dual(1.5, -2.0)
        show_dual(sink, z)
        assert sink.writes == ["1.5", " - ", "2.0", "du"]

    def test_show_dual_to_text_stream(self) -> None:
        stream = io.StringIO()
        show_dual(stream, Dual(1.5, 2.0), compact=True)
        assert stream.getvalue() == "1.5+2.0du"


# =============================================================================
# КОНФИГУРАЦИЯ
# =============================================================================


class TestFormatConfig:
    """Тесты FormatConfig"""

    def test_custom_unit_suffix(self) -> None:
        config = FormatConfig(unit_suffix="ε")
        assert format_dual(Dual(1.5, 2.0), config=config) == "1.5 + 2.0ε"

    def test_custom_compact_digits(self) -> None:
        config = FormatConfig(compact_digits=3)
        assert format_dual(Dual(1 / 3, 1.0), compact=True, config=config) == "0.333+1.0du"

    def test_invalid_config(self) -> None:
        with pytest.raises(ValueError, match="unit_suffix"):
            FormatConfig(unit_suffix="")
        with pytest.raises(ValueError, match="compact_digits"):
            FormatConfig(compact_digits=0)
