"""
Urat Codec — сериализация вектора показателей

Вектор кодируется позиция-в-позицию как упорядоченный список целых.
Сам вектор не хранит значений простых, поэтому декодированный Urat
КОРРЕКТЕН ТОЛЬКО в паре с PrimeStore, построенным из того же seed-списка
тем же алгоритмом роста. Эта связь фиксируется fingerprint базиса
(PrimeStore.basis_fingerprint) в payload и проверяется при декодировании.

Порядок проверок при decode:
1. JSON Schema (urat_vector.json) → jsonschema.ValidationError
2. Pydantic модель UratPayload (каноническая форма) → pydantic.ValidationError
3. Совпадение базиса с store → BasisMismatch
4. Показатели в пределах width_bits → ExponentOverflow

encode выполняет ту же проверку разрядности: значение, вышедшее за width
после unchecked арифметики, не сериализуется (ExponentOverflow).
"""

from typing import Any, Dict, Final, Optional, Sequence

from pydantic import BaseModel, Field, field_validator

from src.core.contracts.validators import UratVectorValidator
from src.core.domain.urat import Urat
from src.core.math.exponents import (
    MAX_EXPONENT_BITS,
    MIN_EXPONENT_BITS,
    ExponentOverflow,
    ExponentWidth,
)
from src.core.primes.store import GROWTH_ALGORITHM, PrimeStore, get_default_store


SCHEMA_VERSION: Final[str] = "1"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class BasisMismatch(ValueError):
    """Payload закодирован относительно другого базиса простых."""

    pass


# =============================================================================
# PAYLOAD MODELS
# =============================================================================


class BasisDescriptor(BaseModel):
    """Описание базиса простых, относительно которого закодирован вектор."""

    fingerprint: str = Field(..., min_length=64, max_length=64, description="SHA-256 базиса")
    growth: str = Field(..., min_length=1, description="Алгоритм роста хранилища")
    seed_size: int = Field(..., ge=1, description="Размер seed-списка")

    model_config = {"frozen": True}


class UratPayload(BaseModel):
    """Типизированное зеркало urat_vector.json."""

    schema_version: str = Field(default=SCHEMA_VERSION)
    basis: BasisDescriptor
    width_bits: int = Field(..., ge=MIN_EXPONENT_BITS, le=MAX_EXPONENT_BITS)
    exponents: list[int] = Field(default_factory=list)

    model_config = {"frozen": True}

    @field_validator("exponents")
    @classmethod
    def validate_canonical(cls, v: list[int]) -> list[int]:
        """Каноническая форма: последний показатель ненулевой."""
        if v and v[-1] == 0:
            raise ValueError("exponents must not end with a zero exponent")
        return v


def describe_basis(store: PrimeStore) -> BasisDescriptor:
    return BasisDescriptor(
        fingerprint=store.basis_fingerprint(),
        growth=GROWTH_ALGORITHM,
        seed_size=len(store.config.seed_primes),
    )


def _check_width(exponents: Sequence[int], width: ExponentWidth) -> None:
    low, high = width.min_value, width.max_value
    for position, exponent in enumerate(exponents):
        if not low <= exponent <= high:
            raise ExponentOverflow(
                f"Exponent overflow: exponent {exponent} at prime position {position} "
                f"does not fit {width} range [{low}, {high}]",
                bits=width.bits,
            )


# =============================================================================
# ENCODE / DECODE
# =============================================================================


def encode_urat(urat: Urat, store: Optional[PrimeStore] = None) -> Dict[str, Any]:
    """
    Сериализация Urat в JSON-совместимый dict.

    Args:
        urat: Значение для сериализации
        store: Хранилище, задающее базис (None → process-wide)

    Returns:
        dict, соответствующий urat_vector.json

    Raises:
        ExponentOverflow: Если показатель вышел за width после unchecked арифметики
    """
    if store is None:
        store = get_default_store()
    # decode отвергает такие payload, поэтому encode их не выпускает
    _check_width(urat.exponents, urat.width)
    payload = UratPayload(
        basis=describe_basis(store),
        width_bits=urat.width.bits,
        exponents=list(urat.exponents),
    )
    return payload.model_dump(mode="json")


def decode_urat(data: Dict[str, Any], store: Optional[PrimeStore] = None) -> Urat:
    """
    Десериализация Urat с проверкой контракта и базиса.

    Raises:
        jsonschema.ValidationError: Нарушение схемы
        pydantic.ValidationError: Неканонический вектор
        BasisMismatch: Базис payload не совпадает с базисом store
        ExponentOverflow: Показатель вне width_bits
    """
    if store is None:
        store = get_default_store()

    UratVectorValidator().validate(data)
    payload = UratPayload.model_validate(data)

    expected = describe_basis(store)
    if payload.basis.fingerprint != expected.fingerprint or payload.basis.growth != expected.growth:
        raise BasisMismatch(
            f"basis mismatch: payload encoded against {payload.basis.fingerprint[:12]} "
            f"({payload.basis.growth}), store is {expected.fingerprint[:12]} ({expected.growth})"
        )

    width = ExponentWidth(payload.width_bits)
    _check_width(payload.exponents, width)

    return Urat(exponents=tuple(payload.exponents), width=width)
