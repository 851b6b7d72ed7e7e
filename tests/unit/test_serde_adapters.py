"""
Tests for Serialization Adapters

Ячейка ↔ optional-значение через pydantic v2:
- Round-trip пустой и заполненной ячейки
- Вложенные pydantic модели
- Ячейка как поле BaseModel
- Ошибки валидации
- Pickle
"""

import pickle

import pytest
from pydantic import BaseModel, Field, ValidationError
from pydantic_core import PydanticSerializationError

from lazycell import AtomicLazyCell, LazyCell, dump_cell, load_cell
from lazycell.serde import cell_adapter


# =============================================================================
# FIXTURES
# =============================================================================


class Point(BaseModel):
    """Вложенная модель для проверки сериализации элемента."""

    x: int
    y: int

    model_config = {"frozen": True}


class Settings(BaseModel):
    """Модель с ленивым полем."""

    name: str
    token: LazyCell[str] = Field(default_factory=LazyCell)


@pytest.fixture(params=[LazyCell, AtomicLazyCell])
def cell_type(request):
    return request.param


# =============================================================================
# ROUND-TRIP
# =============================================================================


def test_empty_cell_serializes_as_null(cell_type):
    assert dump_cell(cell_type(), int) == b"null"


def test_filled_cell_serializes_as_value(cell_type):
    assert dump_cell(cell_type.from_value(42), int) == b"42"


def test_empty_round_trip(cell_type):
    restored = load_cell(dump_cell(cell_type(), int), int, cell_type)

    assert isinstance(restored, cell_type)
    assert not restored.filled()


def test_filled_round_trip(cell_type):
    restored = load_cell(dump_cell(cell_type.from_value(42), int), int, cell_type)

    assert isinstance(restored, cell_type)
    assert restored.borrow() == 42


def test_restored_cell_keeps_write_once_contract(cell_type):
    from lazycell import AlreadyFilled

    restored = load_cell(b'"abc"', str, cell_type)

    with pytest.raises(AlreadyFilled):
        restored.fill("def")
    assert restored.borrow() == "abc"


def test_nested_model_round_trip():
    cell = LazyCell.from_value(Point(x=1, y=2))

    data = dump_cell(cell, Point)
    restored = load_cell(data, Point)

    assert data == b'{"x":1,"y":2}'
    assert restored.borrow() == Point(x=1, y=2)


def test_untyped_cell_round_trip():
    restored = load_cell(dump_cell(LazyCell.from_value({"a": [1, 2]})))

    assert restored.borrow() == {"a": [1, 2]}


def test_invalid_item_raises_validation_error():
    with pytest.raises(ValidationError):
        load_cell(b'"not an int"', int)


def test_consumed_cell_cannot_be_serialized():
    cell = LazyCell.from_value(1)
    cell.into_inner()

    with pytest.raises(PydanticSerializationError):
        dump_cell(cell, int)


def test_python_mode_accepts_existing_cell():
    cell = LazyCell.from_value(5)

    assert cell_adapter(int).validate_python(cell) is cell
    assert cell_adapter(int).validate_python(5).borrow() == 5
    assert not cell_adapter(int).validate_python(None).filled()


# =============================================================================
# PYDANTIC MODEL FIELDS
# =============================================================================


def test_model_field_default_is_empty():
    settings = Settings(name="svc")

    assert settings.model_dump() == {"name": "svc", "token": None}


def test_model_field_lazy_fill():
    settings = Settings(name="svc")
    settings.token.fill("secret")

    assert settings.model_dump() == {"name": "svc", "token": "secret"}


def test_model_json_round_trip():
    settings = Settings.model_validate_json('{"name": "svc", "token": "secret"}')

    assert settings.token.borrow() == "secret"
    assert Settings.model_validate_json(settings.model_dump_json()) == settings


def test_model_json_schema_marks_field_nullable():
    schema = Settings.model_json_schema()

    assert schema["properties"]["token"]["anyOf"] == [
        {"type": "string"},
        {"type": "null"},
    ]


# =============================================================================
# PICKLE
# =============================================================================


def test_pickle_round_trip(cell_type):
    for cell in (cell_type(), cell_type.from_value([1, 2, 3])):
        restored = pickle.loads(pickle.dumps(cell))

        assert isinstance(restored, cell_type)
        assert restored == cell


def test_pickled_atomic_cell_has_working_lock():
    restored = pickle.loads(pickle.dumps(AtomicLazyCell()))

    assert restored.try_fill(1).ok
    assert not restored.try_fill(2).ok
