"""Helpers for building repository queries and tracking batch operations."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, NamedTuple, Sequence

from scgdb.reflection import Model
from scgdb.validator import validate_column_name, validate_order_direction


class RecordNotFoundError(LookupError):
    """Raised when a required record does not exist."""

    def __init__(self, message: str = "record not found") -> None:
        super().__init__(message)


class RelationshipType(enum.Enum):
    """Kinds of relationship a model can declare."""

    HAS_ONE = "has_one"
    BELONGS_TO = "belongs_to"
    HAS_MANY = "has_many"
    BELONGS_TO_MANY = "belongs_to_many"
    MANY_TO_MANY = "many_to_many"


class _RepositoryHandle(NamedTuple):
    db: Any
    model: Any


class RepositoryBuilder:
    """Holds a database handle and a model to build repositories from."""

    def __init__(self, db: Any, model: Model) -> None:
        self.db = db
        self.model = model

    def build_repository(self, database: Any, model: Model) -> _RepositoryHandle:
        """Return a repository handle pairing ``database`` with ``model``."""
        return _RepositoryHandle(database, model)


def handle_relationship_preload(tx: Any, model: Model, relations: Sequence[str]) -> Any:
    """Preload each named relation, in order, whether or not the model declares it."""
    for relation in relations:
        tx = tx.preload(relation)
    return tx


def validate_and_apply_limit(tx: Any, limit: int) -> Any:
    """Apply ``limit`` unless it is negative."""
    if limit < 0:
        return tx
    return tx.limit(limit)


def validate_and_apply_offset(tx: Any, offset: int) -> Any:
    """Apply ``offset`` unless it is negative."""
    if offset < 0:
        return tx
    return tx.offset(offset)


def handle_find_or_fail(model: Model | None, err: BaseException | None) -> Model:
    """Raise ``err`` if given, RecordNotFoundError if there is no model, else return it."""
    if err is not None:
        raise err
    if model is None:
        raise RecordNotFoundError()
    return model


def validate_model_for_operation(model: Model | None, operation: str) -> None:
    """Raise ValueError if ``model`` is None."""
    if model is None:
        raise ValueError(f"model cannot be nil for {operation} operation")


def validate_models_for_operation(
    models: Sequence[Model | None] | None, operation: str
) -> None:
    """Raise ValueError at the first None model; an empty sequence is accepted."""
    for index, model in enumerate(models or ()):
        if model is None:
            raise ValueError(
                f"model at index {index} cannot be nil for {operation} operation"
            )


def optimize_create_operation(
    models: Sequence[Model | None],
) -> tuple[bool, Model | None]:
    """Return ``(True, model)`` when a single model can be created on its own.

    Empty and multi-model sequences give ``(False, None)``; a lone None raises.
    """
    if len(models) != 1:
        return False, None
    single = models[0]
    if single is None:
        raise ValueError("model cannot be nil")
    return True, single


def create_repository_instance(database: Any, model: Model) -> _RepositoryHandle:
    """Return a repository handle whose query is scoped to ``model``."""
    return _RepositoryHandle(database.model(model), model)


def apply_order_by(tx: Any, column: str, direction: str) -> Any:
    """Order by ``column`` if it is a safe identifier; direction defaults to ASC."""
    if not validate_column_name(column):
        return tx
    normalized = validate_order_direction(direction, "ASC")
    return tx.order(f"{column} {normalized}")


@dataclass
class BatchOperationResult:
    """Counts processed items and collects errors during a batch operation."""

    processed_count: int = 0
    errors: list[BaseException] = field(default_factory=list)
    success: bool = False

    def add_error(self, err: BaseException) -> None:
        """Record an error and mark the batch as unsuccessful."""
        self.errors.append(err)
        self.success = False

    def increment_processed(self) -> None:
        """Count one more processed item."""
        self.processed_count += 1

    def has_errors(self) -> bool:
        """True if any error has been recorded."""
        return bool(self.errors)

    def first_error(self) -> BaseException | None:
        """The first recorded error, or None."""
        return self.errors[0] if self.errors else None