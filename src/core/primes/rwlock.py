"""
ReadWriteLock — блокировка с разделяемым чтением и эксклюзивной записью.

Используется PrimeStore:
- Чтение уже закэшированных позиций — shared (read), без взаимной сериализации
- Расширение последовательности — exclusive (write)

Writer preference: ожидающий writer блокирует новых readers,
поэтому расширение не может голодать под потоком чтений.

Poisoning: если тело write-секции завершилось исключением, состояние
под блокировкой считается потенциально повреждённым. Все последующие
попытки захвата (read или write) выбрасывают LockPoisoned.

Блокировка НЕ реентерабельна.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional


logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================


class PrimeStoreFault(RuntimeError):
    """
    Фатальная, неустранимая ошибка хранилища простых чисел.

    Не перехватывается внутри ядра: сигнализирует о неисправности
    окружения или программы, а не о штатной ошибке входных данных.
    """

    pass


class LockPoisoned(PrimeStoreFault):
    """Блокировка отравлена: предыдущий writer завершился аварийно."""

    pass


# =============================================================================
# READ-WRITE LOCK
# =============================================================================


class ReadWriteLock:
    """Reader-writer lock с writer preference и poisoning."""

    def __init__(self, name: str = "rwlock"):
        self.name = name
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer_active = False
        self._writers_waiting = 0
        self._poison_cause: Optional[BaseException] = None

    @property
    def poisoned(self) -> bool:
        with self._cond:
            return self._poison_cause is not None

    def _check_poison(self, mode: str) -> None:
        # Вызывается под self._cond
        if self._poison_cause is not None:
            raise LockPoisoned(
                f"unable to access {self.name} ({mode}): lock poisoned by "
                f"{type(self._poison_cause).__name__}: {self._poison_cause}"
            )

    def acquire_read(self) -> None:
        with self._cond:
            self._check_poison("read")
            while self._writer_active or self._writers_waiting:
                self._cond.wait()
                self._check_poison("read")
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError(f"{self.name}: release_read without matching acquire")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._check_poison("write")
            self._writers_waiting += 1
            try:
                while self._writer_active or self._readers:
                    self._cond.wait()
                    self._check_poison("write")
            finally:
                self._writers_waiting -= 1
            self._writer_active = True

    def release_write(self, error: Optional[BaseException] = None) -> None:
        with self._cond:
            if not self._writer_active:
                raise RuntimeError(f"{self.name}: release_write without matching acquire")
            self._writer_active = False
            if error is not None:
                self._poison_cause = error
            self._cond.notify_all()

    @contextmanager
    def read(self) -> Iterator[None]:
        """Shared-захват на время блока."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self) -> Iterator[None]:
        """Exclusive-захват на время блока; исключение в блоке отравляет блокировку."""
        self.acquire_write()
        try:
            yield
        except BaseException as exc:
            logger.error("%s poisoned by %s: %s", self.name, type(exc).__name__, exc)
            self.release_write(error=exc)
            raise
        else:
            self.release_write()
