"""
Contract Validation Module

JSON Schema контракты для сериализованных ячеек.
"""

from .validators import (
    CellContractValidator,
    SchemaLoader,
    validate_cell_payload,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "CellContractValidator",
    # Functions
    "validate_cell_payload",
]
