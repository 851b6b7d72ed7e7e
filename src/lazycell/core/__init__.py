"""
Core write-once ячейки и их инварианты.

Модуль не зависит от сериализации и внешних систем.
"""

from .atomic import AtomicLazyCell
from .cell import (
    AlreadyFilled,
    CellConsumedError,
    FillOutcome,
    FillResult,
    LazyCell,
    LazyCellError,
)

__all__ = [
    # Cells
    "LazyCell",
    "AtomicLazyCell",
    # Results
    "FillOutcome",
    "FillResult",
    # Exceptions
    "LazyCellError",
    "AlreadyFilled",
    "CellConsumedError",
]
