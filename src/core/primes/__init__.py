"""
Prime Store — общий кэш простых чисел.

Единственный разделяемый изменяемый ресурс ядра: упорядоченная
последовательность простых, расширяемая по требованию под ReadWriteLock.
"""

from src.core.primes.rwlock import LockPoisoned, PrimeStoreFault, ReadWriteLock
from src.core.primes.store import (
    GROWTH_ALGORITHM,
    PRIME_MAX,
    SEED_PRIMES_BELOW_100,
    IteratorMode,
    PrimeIterator,
    PrimeRangeExhausted,
    PrimeStore,
    PrimeStoreConfig,
    get_default_store,
)

__all__ = [
    # Constants
    "GROWTH_ALGORITHM",
    "PRIME_MAX",
    "SEED_PRIMES_BELOW_100",
    # Exceptions
    "PrimeStoreFault",
    "PrimeRangeExhausted",
    "LockPoisoned",
    # Types
    "IteratorMode",
    "PrimeIterator",
    "PrimeStore",
    "PrimeStoreConfig",
    "ReadWriteLock",
    # Functions
    "get_default_store",
]
