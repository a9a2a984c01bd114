"""
Contract Validation Module

Сериализация векторов показателей и валидация JSON контракта urat_vector.
"""

from .codec import (
    SCHEMA_VERSION,
    BasisDescriptor,
    BasisMismatch,
    UratPayload,
    decode_urat,
    describe_basis,
    encode_urat,
)
from .validators import (
    ContractValidator,
    SchemaLoader,
    UratVectorValidator,
    validate_urat_vector,
)

__all__ = [
    # Constants
    "SCHEMA_VERSION",
    # Exceptions
    "BasisMismatch",
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "UratVectorValidator",
    "BasisDescriptor",
    "UratPayload",
    # Functions
    "validate_urat_vector",
    "describe_basis",
    "encode_urat",
    "decode_urat",
]
