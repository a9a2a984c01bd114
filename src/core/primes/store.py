"""
PrimeStore — Shared, Lazily-Extended Prime Cache

Хранилище простых чисел: упорядоченная, растущая без пропусков
последовательность 2, 3, 5, 7, ... с доступом по позиции.

Модуль обеспечивает:
- Random access по позиции (get_at) с прозрачным расширением
- Бесконечный forward-итератор (iterate), расширяющий хранилище на месте
- Конкурентное чтение и сериализованное расширение через ReadWriteLock
- Единственный process-wide экземпляр (get_default_store), init-on-first-access

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. store[0] == 2, store[i] — (i+1)-е простое число
2. Последовательность только растёт; существующие элементы не меняются
3. find_next никогда не выполняется двумя вызывающими одновременно
4. Reader видит только префикс монотонной последовательности (без пропусков)

АЛГОРИТМ РАСШИРЕНИЯ (trial division):
    candidate = last + 2, last + 4, ...  (только нечётные)
    candidate — простое, если не делится ни на одно известное нечётное p
    с p * p <= candidate
"""

import hashlib
import json
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from itertools import islice
from typing import Final, Iterable, Optional

from src.core.primes.rwlock import PrimeStoreFault, ReadWriteLock


logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Кэш простых чисел меньше 100 для базовой производительности
SEED_PRIMES_BELOW_100: Final[tuple[int, ...]] = (
    2, 3, 5, 7,
    11, 13, 17, 19,
    23, 29, 31, 37,
    41, 43, 47, 53, 59,
    61, 67, 71, 73, 79,
    83, 89, 97,
)

# Максимальное представимое значение простого (u64)
PRIME_MAX: Final[int] = 2**64 - 1

# Имя алгоритма роста; входит в fingerprint базиса
GROWTH_ALGORITHM: Final[str] = "trial-division-odd"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class PrimeRangeExhausted(PrimeStoreFault):
    """
    Следующее простое не представимо в пределах max_prime.

    Фатальная ошибка: на реалистичных входах не возникает.
    Выбрасывается внутри write-секции, поэтому отравляет блокировку хранилища.
    """

    pass


# =============================================================================
# CONFIG
# =============================================================================


def _trial_division_primes_upto(limit: int) -> tuple[int, ...]:
    """Эталонная последовательность простых <= limit (для валидации seed)."""
    primes: list[int] = []
    for candidate in range(2, limit + 1):
        if all(candidate % p for p in primes if p * p <= candidate):
            primes.append(candidate)
    return tuple(primes)


@dataclass(frozen=True)
class PrimeStoreConfig:
    """Конфигурация хранилища простых.

    seed_primes должен быть полным префиксом последовательности простых
    (начинается с 2, без пропусков): позиции векторов показателей
    осмысленны только относительно одинаково построенного хранилища.
    """

    seed_primes: tuple[int, ...] = SEED_PRIMES_BELOW_100
    max_prime: int = PRIME_MAX

    def __post_init__(self) -> None:
        seed = tuple(self.seed_primes)
        if not seed:
            raise ValueError("seed_primes must not be empty")
        if seed[0] != 2:
            raise ValueError(f"seed_primes must start with 2, got {seed[0]}")
        if seed != _trial_division_primes_upto(seed[-1]):
            raise ValueError(
                "seed_primes must be the complete, strictly increasing sequence "
                f"of primes up to {seed[-1]}"
            )
        if self.max_prime < seed[-1]:
            raise ValueError(
                f"max_prime {self.max_prime} is below the largest seed prime {seed[-1]}"
            )
        object.__setattr__(self, "seed_primes", seed)


# =============================================================================
# PRIME STORE
# =============================================================================


class PrimeStore:
    """
    Упорядоченный кэш простых с конкурентным доступом.

    Все операции, которым нужны простые, принимают явный handle хранилища;
    process-wide экземпляр доступен через get_default_store().
    """

    def __init__(self, config: Optional[PrimeStoreConfig] = None):
        self._config = config or PrimeStoreConfig()
        self._primes: list[int] = list(self._config.seed_primes)
        self._lock = ReadWriteLock(name="PrimeStore")
        self._fingerprint = _compute_fingerprint(self._config.seed_primes)

    @property
    def config(self) -> PrimeStoreConfig:
        return self._config

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._primes)

    def __repr__(self) -> str:
        # Без захвата: repr должен работать и на отравленной блокировке
        return f"PrimeStore(cached={len(self._primes)}, basis={self._fingerprint[:12]})"

    def basis_fingerprint(self) -> str:
        """
        SHA-256 от seed-списка и алгоритма роста.

        Равные fingerprint гарантируют одинаковые простые на каждой позиции.
        """
        return self._fingerprint

    def get(self) -> tuple[int, ...]:
        """Снапшот закэшированных простых без расширения."""
        with self._lock.read():
            return tuple(self._primes)

    def find_next(self) -> int:
        """
        Добавление следующего простого после текущего максимума.

        Returns:
            Добавленное простое

        Raises:
            PrimeRangeExhausted: Если кандидат выходит за max_prime (фатально)
        """
        with self._lock.write():
            return self._find_next_locked()

    def get_at(self, n: int) -> int:
        """
        Простое на позиции n; хранилище расширяется до n < len(store).

        Raises:
            IndexError: Если n < 0
        """
        if isinstance(n, bool) or not isinstance(n, int):
            raise TypeError(f"position must be int, got {type(n).__name__}")
        if n < 0:
            raise IndexError(f"prime position must be non-negative, got {n}")

        cached = self._read_cached(n)
        if cached is not None:
            return cached
        return self._extend_to(n)

    def iterate(self) -> "PrimeIterator":
        """Новый forward-итератор с позиции 0."""
        return PrimeIterator(self)

    # -------------------------------------------------------------------------
    # Internal: вызывается PrimeIterator и get_at
    # -------------------------------------------------------------------------

    def _read_cached(self, position: int) -> Optional[int]:
        with self._lock.read():
            if position < len(self._primes):
                return self._primes[position]
            return None

    def _extend_to(self, position: int) -> int:
        with self._lock.write():
            # Re-validate: другой writer мог уже расширить хранилище
            while len(self._primes) <= position:
                self._find_next_locked()
            return self._primes[position]

    def _find_next_locked(self) -> int:
        # Требует эксклюзивного захвата self._lock
        last = self._primes[-1]
        candidate = 3 if last == 2 else last
        step = 0 if last == 2 else 2

        while True:
            candidate += step
            step = 2
            if candidate > self._config.max_prime - 3:
                logger.error(
                    "prime range exhausted: candidate %d exceeds max_prime %d",
                    candidate,
                    self._config.max_prime,
                )
                raise PrimeRangeExhausted(
                    f"primes reached the maximum: next candidate {candidate} "
                    f"exceeds max_prime={self._config.max_prime}"
                )
            if _is_prime_by_trial(candidate, islice(self._primes, 1, None)):
                break

        self._primes.append(candidate)
        logger.debug("prime store extended: position=%d prime=%d", len(self._primes) - 1, candidate)
        return candidate


def _is_prime_by_trial(candidate: int, odd_primes: Iterable[int]) -> bool:
    for p in odd_primes:
        if p * p > candidate:
            return True
        if candidate % p == 0:
            return False
    return True


def _compute_fingerprint(seed_primes: tuple[int, ...]) -> str:
    payload = json.dumps(
        {"growth": GROWTH_ALGORITHM, "seed": list(seed_primes)},
        separators=(",", ":"),
        sort_keys=True,
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


# =============================================================================
# ITERATOR
# =============================================================================


class IteratorMode(str, Enum):
    """Режим PrimeIterator."""

    READING_CACHED = "READING_CACHED"
    EXTENDING = "EXTENDING"


class PrimeIterator:
    """Бесконечный forward-итератор по позициям хранилища.

    State machine:
    - READING_CACHED: каждый шаг — короткий read-захват; при выходе позиции
      за кэш read-захват освобождается и режим переходит в EXTENDING
    - EXTENDING: каждый шаг — write-захват с повторной проверкой длины;
      find_next вызывается только если позиция всё ещё не закэширована

    Захваты не переживают вызов __next__, поэтому брошенный итератор
    никогда не удерживает блокировку.
    """

    def __init__(self, store: PrimeStore):
        self._store = store
        self._position = 0
        self._mode = IteratorMode.READING_CACHED

    @property
    def position(self) -> int:
        """Следующая позиция, которая будет выдана."""
        return self._position

    @property
    def mode(self) -> IteratorMode:
        return self._mode

    def __iter__(self) -> "PrimeIterator":
        return self

    def __next__(self) -> int:
        if self._mode is IteratorMode.READING_CACHED:
            prime = self._store._read_cached(self._position)
            if prime is not None:
                self._position += 1
                return prime
            self._mode = IteratorMode.EXTENDING

        prime = self._store._extend_to(self._position)
        self._position += 1
        return prime


# =============================================================================
# PROCESS-WIDE STORE
# =============================================================================

_default_store: Optional[PrimeStore] = None
_default_store_lock = threading.Lock()


def get_default_store() -> PrimeStore:
    """Process-wide хранилище; создаётся при первом обращении, без reset."""
    global _default_store
    if _default_store is None:
        with _default_store_lock:
            if _default_store is None:
                _default_store = PrimeStore()
                logger.info(
                    "default prime store initialized: seed=%d primes, basis=%s",
                    len(_default_store.config.seed_primes),
                    _default_store.basis_fingerprint()[:12],
                )
    return _default_store
