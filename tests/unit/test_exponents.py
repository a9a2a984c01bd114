"""
Тесты для модуля Exponents

Проверяет:
1. Диапазоны ExponentWidth
2. checked_add на границах диапазона
3. Каноническую форму (trim_trailing_zeros)
"""

import pytest

from src.core.math.exponents import (
    DEFAULT_EXPONENT_WIDTH,
    I8,
    I16,
    I32,
    I64,
    MAX_EXPONENT_BITS,
    MIN_EXPONENT_BITS,
    ExponentOverflow,
    ExponentWidth,
    checked_add,
    trim_trailing_zeros,
)


# =============================================================================
# EXPONENT WIDTH
# =============================================================================


class TestExponentWidth:
    """Тесты для ExponentWidth"""

    def test_i8_range(self) -> None:
        assert I8.min_value == -128
        assert I8.max_value == 127

    def test_standard_widths(self) -> None:
        assert I16.max_value == 32767
        assert I32.max_value == 2**31 - 1
        assert I64.min_value == -(2**63)

    def test_default_is_i8(self) -> None:
        assert DEFAULT_EXPONENT_WIDTH == I8

    def test_custom_width(self) -> None:
        w6 = ExponentWidth(6)
        assert w6.min_value == -32
        assert w6.max_value == 31
        assert str(w6) == "i6"

    def test_contains_boundaries(self) -> None:
        assert I8.contains(127)
        assert I8.contains(-128)
        assert not I8.contains(128)
        assert not I8.contains(-129)

    @pytest.mark.parametrize("bits", [0, 1, -8])
    def test_too_narrow_raises(self, bits: int) -> None:
        with pytest.raises(ValueError, match="bits must be in"):
            ExponentWidth(bits)

    @pytest.mark.parametrize("bits", [65, 128, 2**31])
    def test_too_wide_raises(self, bits: int) -> None:
        with pytest.raises(ValueError, match=r"bits must be in \[2, 64\]"):
            ExponentWidth(bits)

    def test_width_bounds(self) -> None:
        assert ExponentWidth(MAX_EXPONENT_BITS) == I64
        assert ExponentWidth(MIN_EXPONENT_BITS).max_value == 1

    def test_non_int_bits_raises(self) -> None:
        with pytest.raises(TypeError):
            ExponentWidth(8.0)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            ExponentWidth(True)

    def test_frozen_and_hashable(self) -> None:
        assert ExponentWidth(8) == I8
        assert len({ExponentWidth(8), I8, I16}) == 2


# =============================================================================
# CHECKED ADD
# =============================================================================


class TestCheckedAdd:
    """Тесты для checked_add"""

    def test_within_range(self) -> None:
        assert checked_add(0, 1) == 1
        assert checked_add(126, 1, I8) == 127

    def test_overflow_at_max(self) -> None:
        with pytest.raises(ExponentOverflow, match="does not fit i8"):
            checked_add(127, 1, I8)

    def test_underflow_at_min(self) -> None:
        with pytest.raises(ExponentOverflow):
            checked_add(-128, -1, I8)

    def test_overflow_names_prime(self) -> None:
        with pytest.raises(ExponentOverflow, match="prime factor 3") as exc_info:
            checked_add(31, 1, ExponentWidth(6), prime=3)
        assert exc_info.value.prime == 3
        assert exc_info.value.bits == 6

    def test_is_overflow_error(self) -> None:
        with pytest.raises(OverflowError):
            checked_add(127, 1, I8)


# =============================================================================
# CANONICAL FORM
# =============================================================================


class TestTrimTrailingZeros:
    """Тесты для trim_trailing_zeros"""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ([], ()),
            ([0], ()),
            ([0, 0, 0], ()),
            ([1], (1,)),
            ([1, 0, 0], (1,)),
            ([0, 1], (0, 1)),
            ([1, 0, -2, 0], (1, 0, -2)),
        ],
    )
    def test_trim(self, raw: list[int], expected: tuple[int, ...]) -> None:
        assert trim_trailing_zeros(raw) == expected

    def test_idempotent(self) -> None:
        once = trim_trailing_zeros([3, 0, 1, 0, 0])
        assert trim_trailing_zeros(once) == once

    def test_accepts_generator(self) -> None:
        assert trim_trailing_zeros(x * 0 for x in range(5)) == ()
