"""
Serialization adapters: ячейка ↔ optional-значение через pydantic.
"""

from .adapters import (
    build_cell_core_schema,
    cell_adapter,
    cell_json_schema,
    dump_cell,
    load_cell,
)

__all__ = [
    "build_cell_core_schema",
    "cell_adapter",
    "cell_json_schema",
    "dump_cell",
    "load_cell",
]
