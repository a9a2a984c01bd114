"""
Exponents — Checked Exponent Arithmetic

Модуль задаёт разрядность показателей степени (exponent width) для
векторного представления рациональных чисел и проверяемое сложение,
используемое при разложении целого числа на простые множители.

Два контракта, которые НЕЛЬЗЯ смешивать:
- Конструирование (integer → vector): checked, при переполнении
  выбрасывается ExponentOverflow
- Арифметика vector ↔ vector: unchecked/total, здесь не проверяется

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. checked_add никогда не возвращает значение вне диапазона width
2. trim_trailing_zeros идемпотентна
3. Пустой вектор показателей соответствует значению 1
"""

from dataclasses import dataclass
from typing import Final, Iterable, Optional


# =============================================================================
# EXCEPTIONS
# =============================================================================


class ExponentOverflow(OverflowError):
    """
    Показатель степени простого множителя вышел за пределы разрядности.

    Recoverable: вызывающий код либо расширяет ExponentWidth,
    либо отклоняет входное значение. Частично построенный вектор
    никогда не возвращается.
    """

    def __init__(self, message: str, *, prime: Optional[int] = None, bits: Optional[int] = None):
        super().__init__(message)
        self.prime = prime
        self.bits = bits


# =============================================================================
# EXPONENT WIDTH
# =============================================================================

# Допустимая разрядность показателя: от 2 до 64 бит (i64)
MIN_EXPONENT_BITS: Final[int] = 2
MAX_EXPONENT_BITS: Final[int] = 64


@dataclass(frozen=True)
class ExponentWidth:
    """
    Разрядность знакового показателя степени (two's complement).

    bits=8 → диапазон [-128, 127].
    """

    bits: int = 8

    def __post_init__(self) -> None:
        if isinstance(self.bits, bool) or not isinstance(self.bits, int):
            raise TypeError(f"bits must be int, got {type(self.bits).__name__}")
        if not MIN_EXPONENT_BITS <= self.bits <= MAX_EXPONENT_BITS:
            raise ValueError(
                f"bits must be in [{MIN_EXPONENT_BITS}, {MAX_EXPONENT_BITS}], got {self.bits}"
            )

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1))

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1

    def contains(self, value: int) -> bool:
        """True если value помещается в диапазон разрядности."""
        return self.min_value <= value <= self.max_value

    def __str__(self) -> str:
        return f"i{self.bits}"


I8: Final[ExponentWidth] = ExponentWidth(8)
I16: Final[ExponentWidth] = ExponentWidth(16)
I32: Final[ExponentWidth] = ExponentWidth(32)
I64: Final[ExponentWidth] = ExponentWidth(64)

# Разрядность по умолчанию для Urat
DEFAULT_EXPONENT_WIDTH: Final[ExponentWidth] = I8


# =============================================================================
# CHECKED ARITHMETIC
# =============================================================================


def checked_add(
    a: int,
    b: int,
    width: ExponentWidth = DEFAULT_EXPONENT_WIDTH,
    *,
    prime: Optional[int] = None,
) -> int:
    """
    Сложение показателей с проверкой переполнения.

    Args:
        a: Текущий показатель
        b: Приращение
        width: Разрядность показателя
        prime: Простое число, к которому относится показатель (для сообщения)

    Returns:
        a + b, если результат помещается в width

    Raises:
        ExponentOverflow: Если a + b вне [width.min_value, width.max_value]

    Examples:
        >>> checked_add(126, 1, I8)
        127
        >>> checked_add(127, 1, I8)  # doctest: +SKIP
        Traceback (most recent call last):
            ...
        ExponentOverflow: ...
    """
    result = a + b
    if not width.contains(result):
        subject = f"prime factor {prime}" if prime is not None else "prime factor"
        raise ExponentOverflow(
            f"Exponent overflow: exponent {result} for {subject} "
            f"does not fit {width} range [{width.min_value}, {width.max_value}]",
            prime=prime,
            bits=width.bits,
        )
    return result


def trim_trailing_zeros(exponents: Iterable[int]) -> tuple[int, ...]:
    """
    Каноническая форма: удаление хвостовых нулевых показателей.

    Examples:
        >>> trim_trailing_zeros([1, 0, 2, 0, 0])
        (1, 0, 2)
        >>> trim_trailing_zeros([0, 0])
        ()
    """
    values = list(exponents)
    end = len(values)
    while end > 0 and values[end - 1] == 0:
        end -= 1
    return tuple(values[:end])
