"""
Serialization Adapters — мост между ячейками и pydantic v2

Ячейка сериализуется как optional-значение:
- заполненная → хранимое значение
- пустая → null

Десериализация всегда строит свежую ячейку и заполняет её через
adapter-only _replace, а не через строгий fill.
"""

from typing import Any, Dict, Optional, Type, get_args

from pydantic import TypeAdapter
from pydantic_core import core_schema

from lazycell.core.cell import LazyCell


def build_cell_core_schema(
    cell_type: Type[LazyCell], source_type: Any, handler: Any
) -> core_schema.CoreSchema:
    """
    Core schema для LazyCell[T] / AtomicLazyCell[T].

    Args:
        cell_type: Класс ячейки (LazyCell или наследник)
        source_type: Аннотация, например LazyCell[int]; без параметра — Any
        handler: GetCoreSchemaHandler от pydantic

    Returns:
        Схема: python-режим принимает готовую ячейку или optional-значение,
        json-режим — только optional-значение
    """
    args = get_args(source_type)
    item_schema = handler.generate_schema(args[0]) if args else core_schema.any_schema()
    optional_schema = core_schema.nullable_schema(item_schema)

    from_optional = core_schema.no_info_after_validator_function(
        cell_type._from_optional, optional_schema
    )

    return core_schema.json_or_python_schema(
        json_schema=from_optional,
        python_schema=core_schema.union_schema(
            [core_schema.is_instance_schema(cell_type), from_optional]
        ),
        serialization=core_schema.plain_serializer_function_ser_schema(
            _to_optional, return_schema=optional_schema
        ),
    )


def _to_optional(cell: LazyCell) -> Optional[Any]:
    return cell.borrow()


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

# Кэш TypeAdapter по (cell_type, item_type)
_ADAPTERS: Dict[tuple, TypeAdapter] = {}


def cell_adapter(item_type: Any = Any, cell_type: Type[LazyCell] = LazyCell) -> TypeAdapter:
    """TypeAdapter для cell_type[item_type] (кэшируется)."""
    key = (cell_type, item_type)
    adapter = _ADAPTERS.get(key)
    if adapter is None:
        adapter = TypeAdapter(cell_type[item_type])
        _ADAPTERS[key] = adapter
    return adapter


def dump_cell(cell: LazyCell, item_type: Any = Any) -> bytes:
    """
    JSON-сериализация ячейки.

    Raises:
        PydanticSerializationError: если ячейка уже потреблена
    """
    return cell_adapter(item_type, type(cell)).dump_json(cell)


def load_cell(
    data: Any, item_type: Any = Any, cell_type: Type[LazyCell] = LazyCell
) -> LazyCell:
    """
    Десериализация ячейки из JSON (str/bytes).

    Raises:
        ValidationError: если значение не соответствует item_type
    """
    return cell_adapter(item_type, cell_type).validate_json(data)


def cell_json_schema(
    item_type: Any = Any, cell_type: Type[LazyCell] = LazyCell
) -> Dict[str, Any]:
    """JSON Schema сериализованной ячейки."""
    return cell_adapter(item_type, cell_type).json_schema()
