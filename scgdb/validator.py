"""Input validation helpers for configuration, queries and model batches."""

from __future__ import annotations

import re
from typing import Any, Sequence

_VALID_COLUMN_NAME = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*(\.[a-zA-Z_][a-zA-Z0-9_]*)*")


def _text(cfg: Any, name: str) -> str:
    return getattr(cfg, name, None) or ""


def validate_config_for_migration(cfg: Any) -> None:
    """Raise ValueError unless the config names a migrations path, a DSN and a driver."""
    if not _text(cfg, "migrations_path").strip():
        raise ValueError("migrations path is required")
    if not _text(cfg, "dsn").strip():
        raise ValueError("database dsn is required")
    if not _text(cfg, "driver").strip():
        raise ValueError("database driver is required")


def validate_non_negative_int(value: int, field_name: str) -> None:
    """Raise ValueError if ``value`` is negative."""
    if value < 0:
        raise ValueError(f"{field_name} cannot be negative")


def validate_positive_int(value: int, field_name: str) -> None:
    """Raise ValueError if ``value`` is zero or negative."""
    if value <= 0:
        raise ValueError(f"{field_name} must be positive")


def validate_column_name(column: str) -> bool:
    """Return True if ``column`` is a plain or dot-qualified SQL identifier."""
    return _VALID_COLUMN_NAME.fullmatch(column) is not None


def validate_order_direction(direction: str, default_direction: str) -> str:
    """Normalise an ORDER BY direction, falling back to ``default_direction``."""
    normalized = direction.strip().upper()
    if normalized not in ("ASC", "DESC"):
        return default_direction
    return normalized


def validate_models_slice(models: Sequence[Any] | None, operation: str) -> None:
    """Raise ValueError if ``models`` is empty or holds a None entry."""
    if not models:
        raise ValueError(f"models slice cannot be empty for {operation} operation")
    for index, model in enumerate(models):
        if model is None:
            raise ValueError(
                f"model at index {index} cannot be nil for {operation} operation"
            )


def validate_driver_format(driver: str) -> str:
    """Return the dialect part of a ``prefix:dialect`` driver name."""
    parts = driver.split(":")
    if len(parts) != 2:
        raise ValueError(
            f"invalid gorm driver format: {driver} (expected 'gorm:dialect')"
        )
    return parts[1]