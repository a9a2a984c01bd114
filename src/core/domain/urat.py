"""
Urat — Exponent-Vector Rational

Immutable Pydantic модель положительного рационального числа в виде
вектора знаковых показателей степени по позициям простых чисел:
позиция i — показатель i-го простого (0 ↔ 2, 1 ↔ 3, ...).

Умножение/деление сводятся к поэлементному сложению/вычитанию
векторов, возведение в целую степень — к масштабированию.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Каноническая форма: вектор никогда не заканчивается нулём;
   пустой вектор — значение 1
2. Конструирование только из положительных целых (checked по ExponentWidth)
3. Арифметика vector ↔ vector не обращается к PrimeStore и не проверяет
   переполнение разрядности (unchecked/total)
4. Вектор хранит только показатели, не значения простых: он осмыслен
   лишь относительно одинаково построенного PrimeStore
"""

from fractions import Fraction
from typing import Final, Iterable, Optional

from pydantic import BaseModel, Field, field_validator

from src.core.math.exponents import (
    DEFAULT_EXPONENT_WIDTH,
    ExponentWidth,
    checked_add,
    trim_trailing_zeros,
)
from src.core.primes.store import PrimeStore, get_default_store


# =============================================================================
# CONSTANTS
# =============================================================================

# Максимальная величина входного целого (u64)
INPUT_MAX: Final[int] = 2**64 - 1


# =============================================================================
# URAT MODEL
# =============================================================================


class Urat(BaseModel):
    """
    Ненулевое положительное рациональное число, по умолчанию 1.

    Immutable (frozen=True): каждая операция возвращает новый экземпляр.
    Равенство и hash — по разрядности и каноническому вектору показателей.
    """

    exponents: tuple[int, ...] = Field(
        default=(), description="Показатели по позициям простых (канонические)"
    )
    width: ExponentWidth = Field(
        default=DEFAULT_EXPONENT_WIDTH, description="Разрядность показателя"
    )

    model_config = {"frozen": True}

    @field_validator("exponents")
    @classmethod
    def canonicalize(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        """Удаление хвостовых нулей при любом способе конструирования."""
        return trim_trailing_zeros(v)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def one(cls, width: ExponentWidth = DEFAULT_EXPONENT_WIDTH) -> "Urat":
        return cls(width=width)

    @classmethod
    def from_int(
        cls,
        value: int,
        width: ExponentWidth = DEFAULT_EXPONENT_WIDTH,
        store: Optional[PrimeStore] = None,
    ) -> "Urat":
        """
        Разложение положительного целого на простые множители.

        Простые берутся из store.iterate() позиция за позицией; хранилище
        расширяется прозрачно. Обход прекращается, как только остаток
        становится 1.

        Args:
            value: Положительное целое, 1 <= value <= INPUT_MAX
            width: Разрядность показателя (checked)
            store: Хранилище простых (None → process-wide)

        Returns:
            Канонический Urat

        Raises:
            TypeError: Если value не int
            ValueError: Если value вне [1, INPUT_MAX]
            ExponentOverflow: Если показатель не помещается в width

        Examples:
            >>> Urat.from_int(6).exponents
            (1, 1)
            >>> Urat.from_int(3).exponents
            (0, 1)
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"value must be int, got {type(value).__name__}")
        if value < 1 or value > INPUT_MAX:
            raise ValueError(f"value must be in [1, {INPUT_MAX}], got {value}")

        if value == 1:
            # Простые не нужны: хранилище не трогаем
            return cls(width=width)

        if store is None:
            store = get_default_store()

        remaining = value
        exponents: list[int] = []
        for position, prime in enumerate(store.iterate()):
            if remaining % prime != 0:
                continue
            if len(exponents) <= position:
                exponents.extend([0] * (position + 1 - len(exponents)))
            while remaining % prime == 0:
                exponents[position] = checked_add(exponents[position], 1, width, prime=prime)
                remaining //= prime
                if remaining == 0:
                    raise RuntimeError(
                        f"internal consistency violated: remainder reached 0 "
                        f"while factoring {value} by {prime}"
                    )
            if remaining == 1:
                break

        return cls(exponents=tuple(exponents), width=width)

    # -------------------------------------------------------------------------
    # Arithmetic (unchecked, без обращения к PrimeStore)
    # -------------------------------------------------------------------------

    def _pairwise(self, other: "Urat", sign: int) -> "Urat":
        if self.width != other.width:
            raise ValueError(f"exponent width mismatch: {self.width} vs {other.width}")
        lhs, rhs = self.exponents, other.exponents
        size = max(len(lhs), len(rhs))
        combined = [
            (lhs[i] if i < len(lhs) else 0) + sign * (rhs[i] if i < len(rhs) else 0)
            for i in range(size)
        ]
        return self._derive(combined)

    def _derive(self, exponents: Iterable[int]) -> "Urat":
        return type(self)(exponents=trim_trailing_zeros(exponents), width=self.width)

    def __mul__(self, other: object) -> "Urat":
        if not isinstance(other, Urat):
            return NotImplemented
        return self._pairwise(other, 1)

    def __truediv__(self, other: object) -> "Urat":
        # Отрицательные показатели допустимы: результат может быть < 1
        if not isinstance(other, Urat):
            return NotImplemented
        return self._pairwise(other, -1)

    def pow(self, k: int) -> "Urat":
        """
        Возведение в целую степень: каждый показатель умножается на k.

        k = 0 → значение 1 (пустой вектор).
        """
        if isinstance(k, bool) or not isinstance(k, int):
            raise TypeError(f"power must be int, got {type(k).__name__}")
        return self._derive(e * k for e in self.exponents)

    def __pow__(self, k: object) -> "Urat":
        if isinstance(k, bool) or not isinstance(k, int):
            return NotImplemented
        return self.pow(k)

    # -------------------------------------------------------------------------
    # Equality & inspection
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Urat):
            return NotImplemented
        return self.width == other.width and self.exponents == other.exponents

    def __hash__(self) -> int:
        return hash((self.width.bits, self.exponents))

    def __repr__(self) -> str:
        return f"Urat({list(self.exponents)}, width={self.width})"

    def is_one(self) -> bool:
        return not self.exponents

    def fits_width(self) -> bool:
        """True если все показатели в диапазоне width (после unchecked арифметики)."""
        return all(self.width.contains(e) for e in self.exponents)

    def factors(self, store: Optional[PrimeStore] = None) -> tuple[tuple[int, int], ...]:
        """Пары (prime, exponent) для ненулевых позиций."""
        if store is None:
            store = get_default_store()
        return tuple(
            (store.get_at(position), exponent)
            for position, exponent in enumerate(self.exponents)
            if exponent != 0
        )

    def to_fraction(self, store: Optional[PrimeStore] = None) -> Fraction:
        """
        Точное значение как Fraction.

        Может расширить store, если вектор длиннее закэшированных простых.
        """
        numerator, denominator = 1, 1
        for prime, exponent in self.factors(store):
            if exponent > 0:
                numerator *= prime**exponent
            else:
                denominator *= prime ** (-exponent)
        return Fraction(numerator, denominator)
