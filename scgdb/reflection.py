"""Creating model instances and converting query results into model lists."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Iterable, Mapping, Sequence, TypeVar

T = TypeVar("T")

_SIZED_VALUES = (str, bytes, bytearray, list, tuple)


class Model(ABC):
    """A persisted record: a table name, a primary key column and relationships."""

    primary_key: ClassVar[str] = "id"

    @property
    @abstractmethod
    def table_name(self) -> str:
        """Name of the table the model is stored in."""

    def relationships(self) -> Mapping[str, Any]:
        """Relationships of the model, keyed by name."""
        return {}


def create_entity_from_model(model: Model) -> Model:
    """Return a fresh, default-constructed instance of the model's class."""
    instance = get_model_type(model)()
    if not isinstance(instance, Model):
        raise TypeError("failed to assert created instance to Model")
    return instance


def convert_models_to_list(models: Sequence[Model | None], model_type: type) -> list[Model]:
    """Check that every model is a ``model_type`` and return them as a new list."""
    if not models:
        raise ValueError("models slice cannot be empty")
    result: list[Model] = []
    for index, model in enumerate(models):
        if model is None:
            raise ValueError(f"model at index {index} cannot be nil")
        if not isinstance(model, model_type):
            raise TypeError(
                f"model at index {index} is not assignable to expected type "
                f"{model_type.__qualname__}"
            )
        result.append(model)
    return result


def convert_to_models(items: Iterable[Any]) -> list[Model]:
    """Return ``items`` as a list, raising TypeError at the first non-model."""
    models: list[Model] = []
    for index, item in enumerate(items):
        if not isinstance(item, Model):
            raise TypeError(
                f"failed to assert item at index {index} to Model, "
                f"got type {type(item).__qualname__}"
            )
        models.append(item)
    return models


def get_model_type(model: Model | type) -> type:
    """Return the class of ``model``; a class is returned unchanged."""
    if isinstance(model, type):
        return model
    return type(model)


def is_nil_or_empty(value: Any) -> bool:
    """True for None and for empty strings, bytes, lists and tuples.

    Mappings, numbers, booleans and other objects are never considered empty.
    """
    if value is None:
        return True
    if isinstance(value, _SIZED_VALUES):
        return len(value) == 0
    return False


def safe_type_assertion(value: Any, expected_type: type[T], type_name: str) -> T:
    """Return ``value`` if it is an ``expected_type``, otherwise raise TypeError."""
    if value is None:
        raise TypeError(f"cannot assert nil value to {type_name}")
    if not isinstance(value, expected_type):
        raise TypeError(
            f"cannot assert value of type {type(value).__qualname__} to {type_name}"
        )
    return value


def execute_query_and_convert_to_models(
    model: Model, query_executor: Callable[[list[Any]], Any]
) -> list[Model]:
    """Let ``query_executor`` fill a list with results and return them as models."""
    dest: list[Any] = []
    query_executor(dest)
    return convert_to_models(dest)


class QueryExecutor:
    """Runs a query function that fills a destination container."""

    def __init__(self, query_func: Callable[[Any], Any]) -> None:
        self._query_func = query_func

    def execute(self, dest: Any) -> Any:
        """Run the query into ``dest`` and return what the query function returns."""
        return self._query_func(dest)

    __call__ = execute