"""
AtomicLazyCell — потокобезопасный двойник LazyCell

Тот же write-once контракт при конкурентном доступе из нескольких потоков:
- fill / try_fill / borrow_with / into_inner выполняются под RLock
- из конкурентных fill успешен ровно один, остальные видят ALREADY_FILLED
- borrow / filled — чтение без блокировки: значение записывается
  до публикации состояния, поэтому borrow, увидевший FILLED,
  всегда видит и значение (fill happens-before borrow)
"""

import threading
from typing import Callable, Optional

from lazycell.core.cell import (
    AlreadyFilled,
    FillResult,
    LazyCell,
    T,
    _require_value,
)


class AtomicLazyCell(LazyCell[T]):
    """
    Write-once ячейка, безопасная для разделяемого доступа.

    RLock (а не Lock) нужен для borrow_with: factory, повторно
    вызывающая fill той же ячейки, получает AlreadyFilled, а не deadlock.
    """

    def __init__(self):
        super().__init__()
        self._lock = threading.RLock()

    def try_fill(self, value: T) -> FillResult[T]:
        with self._lock:
            return super().try_fill(value)

    def fill(self, value: T) -> None:
        with self._lock:
            super().fill(value)

    def borrow_with(self, factory: Callable[[], T]) -> T:
        """
        Compute on first use; factory выполняется не более одного раза
        по всем потокам. Потоки, пришедшие во время вычисления, ждут
        его завершения и получают то же значение.
        """
        value = self.borrow()
        if value is not None:
            return value

        with self._lock:
            # Двойная проверка: ячейку мог заполнить другой поток
            value = self.borrow()
            if value is not None:
                return value

            value = factory()
            _require_value(value)
            if self.filled():
                raise AlreadyFilled(value)
            super().fill(value)
            return value

    def into_inner(self) -> Optional[T]:
        with self._lock:
            return super().into_inner()

    def _replace(self, value: T) -> Optional[T]:
        with self._lock:
            return super()._replace(value)
