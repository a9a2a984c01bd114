"""
Domain models and value objects.

Contains the exponent-vector rational Urat.
"""

from src.core.domain.urat import INPUT_MAX, Urat

__all__ = [
    "INPUT_MAX",
    "Urat",
]
