"""
LazyCell — write-once ячейка с ленивой инициализацией

Ячейка создаётся пустой, заполняется ровно один раз во время работы
и после этого ведёт себя как неизменяемое значение:
- fill: строгое заполнение (повторный fill → AlreadyFilled)
- try_fill: восстанавливаемый вариант, возвращает FillResult
- borrow: ссылка на содержимое, валидная всё время жизни ячейки
- into_inner: потребление ячейки с возвратом значения

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. После перехода Empty → Filled ячейка никогда не становится пустой,
   значение никогда не заменяется и не мутируется
2. Empty → Filled — единственная мутирующая операция публичного API
3. Любая ссылка, выданная borrow() после заполнения, остаётся валидной,
   пока жива сама ячейка (следствие п.1)
4. Неудачная операция никогда не меняет состояние ячейки

None зарезервирован под "значения нет" и не может храниться в ячейке.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Final, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Представление пустой ячейки в __repr__
EMPTY_REPR: Final[str] = "<empty>"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class LazyCellError(Exception):
    """Базовое исключение для ошибок write-once ячеек."""


class AlreadyFilled(LazyCellError):
    """
    Повторная попытка заполнить уже заполненную ячейку.

    Нарушение контракта: тихая перезапись испортила бы все ранее
    выданные borrow()-ссылки. Отклонённое значение возвращается
    вызывающему в атрибуте value.
    """

    def __init__(self, value: Any):
        super().__init__("lazy cell is already filled")
        self.value = value


class CellConsumedError(LazyCellError):
    """Обращение к ячейке после into_inner()."""


# =============================================================================
# ENUMS / RESULTS
# =============================================================================


class _CellState(str, Enum):
    """Внутреннее состояние слота ячейки."""

    EMPTY = "EMPTY"
    FILLED = "FILLED"
    CONSUMED = "CONSUMED"


class FillOutcome(str, Enum):
    """Исход try_fill."""

    FILLED = "FILLED"
    ALREADY_FILLED = "ALREADY_FILLED"


@dataclass(frozen=True)
class FillResult(Generic[T]):
    """
    Результат try_fill.

    При ALREADY_FILLED отклонённое значение возвращается в rejected,
    состояние ячейки не меняется.
    """

    outcome: FillOutcome
    rejected: Optional[T] = None

    @property
    def ok(self) -> bool:
        return self.outcome == FillOutcome.FILLED

    def raise_for_outcome(self) -> None:
        """Превращает ALREADY_FILLED обратно в строгую ошибку AlreadyFilled."""
        if not self.ok:
            raise AlreadyFilled(self.rejected)


# =============================================================================
# LAZY CELL
# =============================================================================


def _require_value(value: Any) -> None:
    if value is None:
        raise ValueError("None cannot be stored in a lazy cell")


class LazyCell(Generic[T]):
    """
    Write-once ячейка без потокобезопасности.

    Предназначена для одного потока управления: один писатель,
    сколько угодно читателей после заполнения. Для разделяемого
    доступа из нескольких потоков — AtomicLazyCell.

    Lifetime extension: borrow() возвращает сам хранимый объект.
    Поскольку после заполнения слот больше никогда не меняется,
    ссылку можно держать сколько угодно долго и использовать
    параллельно с любыми другими read-only вызовами (filled, borrow).

    Examples:
        >>> cell = LazyCell()
        >>> cell.borrow() is None
        True
        >>> cell.fill(42)
        >>> cell.borrow()
        42
        >>> cell.into_inner()
        42
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(self):
        self._state = _CellState.EMPTY
        self._value: Optional[T] = None

    @classmethod
    def from_value(cls, value: T) -> "LazyCell[T]":
        """Создание уже заполненной ячейки."""
        cell = cls()
        cell.fill(value)
        return cell

    # -------------------------------------------------------------------------
    # Read-only операции
    # -------------------------------------------------------------------------

    def _check_alive(self) -> None:
        if self._state is _CellState.CONSUMED:
            raise CellConsumedError(
                f"{type(self).__name__} was consumed by into_inner()"
            )

    def filled(self) -> bool:
        """Была ли ячейка заполнена. Никогда не возвращается к False."""
        self._check_alive()
        return self._state is _CellState.FILLED

    def borrow(self) -> Optional[T]:
        """
        Ссылка на содержимое на всё время жизни ячейки.

        Returns:
            Хранимый объект (одна и та же identity при каждом вызове),
            или None, если ячейка ещё не заполнена

        Raises:
            CellConsumedError: если ячейка уже потреблена
        """
        self._check_alive()
        if self._state is _CellState.FILLED:
            return self._value
        return None

    def get(self, default: Any = None) -> Any:
        """Значение ячейки или default, если она пуста."""
        value = self.borrow()
        return default if value is None else value

    # -------------------------------------------------------------------------
    # Заполнение
    # -------------------------------------------------------------------------

    def try_fill(self, value: T) -> FillResult[T]:
        """
        Восстанавливаемый вариант fill.

        Args:
            value: Значение для записи (не None)

        Returns:
            FillResult(FILLED) при успехе;
            FillResult(ALREADY_FILLED, rejected=value) если ячейка уже
            заполнена — состояние при этом не меняется

        Raises:
            ValueError: если value is None
            CellConsumedError: если ячейка уже потреблена
        """
        self._check_alive()
        _require_value(value)

        if self._state is _CellState.FILLED:
            logger.warning("%s: fill rejected, cell is already filled", type(self).__name__)
            return FillResult(outcome=FillOutcome.ALREADY_FILLED, rejected=value)

        # Сначала значение, потом публикация состояния
        self._value = value
        self._state = _CellState.FILLED
        logger.debug("%s: filled with %s", type(self).__name__, type(value).__name__)
        return FillResult(outcome=FillOutcome.FILLED)

    def fill(self, value: T) -> None:
        """
        Строгое заполнение ячейки.

        Повторный fill — нарушение контракта, а не штатная ситуация:
        ошибка логируется и поднимается наружу, значение в ячейке
        остаётся прежним.

        Raises:
            AlreadyFilled: если ячейка уже заполнена
            ValueError: если value is None
            CellConsumedError: если ячейка уже потреблена
        """
        result = self.try_fill(value)
        if not result.ok:
            logger.error("%s: contract violation, fill() called twice", type(self).__name__)
            result.raise_for_outcome()

    def borrow_with(self, factory: Callable[[], T]) -> T:
        """
        Compute on first use.

        Если ячейка заполнена — factory не вызывается. Иначе результат
        factory() записывается в ячейку и возвращается. Исключение из
        factory пробрасывается, ячейка остаётся пустой.

        Raises:
            AlreadyFilled: если factory сама заполнила эту ячейку
            ValueError: если factory вернула None
        """
        value = self.borrow()
        if value is not None:
            return value

        value = factory()
        _require_value(value)
        if self.filled():
            raise AlreadyFilled(value)
        self.fill(value)
        return value

    # -------------------------------------------------------------------------
    # Потребление и adapter-only операции
    # -------------------------------------------------------------------------

    def into_inner(self) -> Optional[T]:
        """
        Потребление ячейки.

        Returns:
            Хранимое значение или None для пустой ячейки.
            После вызова любое обращение к ячейке → CellConsumedError.
        """
        self._check_alive()
        value = self._value if self._state is _CellState.FILLED else None
        self._value = None
        self._state = _CellState.CONSUMED
        return value

    def _replace(self, value: T) -> Optional[T]:
        """
        Прямая запись в слот в обход fill.

        Только для адаптеров (десериализация, pickle), работающих
        со свежесозданной ячейкой, где предыдущего значения быть не может.
        Публичный код должен использовать fill/try_fill.

        Returns:
            Предыдущее значение (для свежей ячейки — None)
        """
        self._check_alive()
        _require_value(value)
        previous = self._value if self._state is _CellState.FILLED else None
        self._value = value
        self._state = _CellState.FILLED
        logger.debug("%s: slot set by adapter", type(self).__name__)
        return previous

    @classmethod
    def _from_optional(cls, value: Optional[T]) -> "LazyCell[T]":
        """Ячейка из optional-значения: None → пустая, иначе заполненная."""
        cell = cls()
        if value is not None:
            cell._replace(value)
        return cell

    # -------------------------------------------------------------------------
    # Python protocol
    # -------------------------------------------------------------------------

    def __repr__(self) -> str:
        if self._state is _CellState.CONSUMED:
            return f"{type(self).__name__}(<consumed>)"
        if self._state is _CellState.EMPTY:
            return f"{type(self).__name__}({EMPTY_REPR})"
        return f"{type(self).__name__}({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LazyCell):
            return NotImplemented
        return self.borrow() == other.borrow()

    def __reduce__(self):
        return (type(self)._from_optional, (self.borrow(),))

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any):
        from lazycell.serde.adapters import build_cell_core_schema

        return build_cell_core_schema(cls, source_type, handler)
