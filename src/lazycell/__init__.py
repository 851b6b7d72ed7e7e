"""
lazycell — write-once ячейки с ленивой инициализацией.

LazyCell заполняется ровно один раз и после этого ведёт себя как
неизменяемое значение; borrow() отдаёт ссылку, валидную всё время
жизни ячейки. AtomicLazyCell даёт тот же контракт для нескольких потоков.
"""

from lazycell.core import (
    AlreadyFilled,
    AtomicLazyCell,
    CellConsumedError,
    FillOutcome,
    FillResult,
    LazyCell,
    LazyCellError,
)
from lazycell.serde import cell_json_schema, dump_cell, load_cell

__version__ = "0.1.0"

__all__ = [
    "LazyCell",
    "AtomicLazyCell",
    "FillOutcome",
    "FillResult",
    "LazyCellError",
    "AlreadyFilled",
    "CellConsumedError",
    "dump_cell",
    "load_cell",
    "cell_json_schema",
]
