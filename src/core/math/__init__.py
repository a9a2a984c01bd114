"""
Core math modules

Проверяемая арифметика показателей степени для векторного представления.
"""

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

__all__ = [
    # Widths
    "DEFAULT_EXPONENT_WIDTH",
    "I8",
    "I16",
    "I32",
    "I64",
    "MIN_EXPONENT_BITS",
    "MAX_EXPONENT_BITS",
    "ExponentWidth",
    # Exceptions
    "ExponentOverflow",
    # Functions
    "checked_add",
    "trim_trailing_zeros",
]
