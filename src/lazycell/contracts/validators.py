"""
JSON Schema Contract Validators

Валидация сериализованных ячеек (optional-значений) против JSON Schema,
которая строится из pydantic-адаптера ячейки.
Использует библиотеку jsonschema (Draft 2020-12).
"""

from typing import Any, Dict, Iterator, Type

import jsonschema
from jsonschema import Draft202012Validator, ValidationError

from lazycell.core.cell import LazyCell
from lazycell.serde.adapters import cell_json_schema


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema сериализованных ячеек.

    Схемы строятся через pydantic и кэшируются по (cell_type, item_type).
    """

    def __init__(self):
        # Кэш загруженных схем
        self._schemas: Dict[tuple, Dict[str, Any]] = {}

    def load_schema(
        self, item_type: Any = Any, cell_type: Type[LazyCell] = LazyCell
    ) -> Dict[str, Any]:
        """
        Загрузка JSON Schema для cell_type[item_type].

        Returns:
            Схема как dict

        Raises:
            ValueError: если сгенерированная схема невалидна
        """
        key = (cell_type, item_type)
        if key in self._schemas:
            return self._schemas[key]

        schema = cell_json_schema(item_type, cell_type)

        # Валидируем саму схему (meta-validation)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema for {cell_type.__name__}[{item_type!r}]: {e}")

        self._schemas[key] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class CellContractValidator:
    """
    Валидатор сериализованной ячейки.

    Payload — уже декодированный JSON: значение элемента или None.
    """

    def __init__(self, item_type: Any = Any, cell_type: Type[LazyCell] = LazyCell):
        self.item_type = item_type
        self.cell_type = cell_type
        self.schema = _SCHEMA_LOADER.load_schema(item_type, cell_type)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Any) -> None:
        """
        Raises:
            ValidationError: если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Any) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Any) -> Iterator[ValidationError]:
        return self.validator.iter_errors(data)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_cell_payload(
    data: Any, item_type: Any = Any, cell_type: Type[LazyCell] = LazyCell
) -> None:
    """
    Валидация сериализованной ячейки.

    Raises:
        ValidationError: если данные не соответствуют схеме
    """
    CellContractValidator(item_type, cell_type).validate(data)
