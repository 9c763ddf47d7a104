"""Helpers shared by migration runners: driver mapping, drivers and results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

MIGRATION_DRIVER_MYSQL = "mysql"
MIGRATION_DRIVER_POSTGRES = "postgres"
MIGRATION_DRIVER_SQLITE = "sqlite"

_SUPPORTED_DRIVERS = (MIGRATION_DRIVER_MYSQL, MIGRATION_DRIVER_POSTGRES)

_DRIVER_ALIASES = {
    "gorm:mysql": MIGRATION_DRIVER_MYSQL,
    MIGRATION_DRIVER_MYSQL: MIGRATION_DRIVER_MYSQL,
    "gorm:postgres": MIGRATION_DRIVER_POSTGRES,
    MIGRATION_DRIVER_POSTGRES: MIGRATION_DRIVER_POSTGRES,
}


class NoChangeError(Exception):
    """Raised by a migration engine when there is nothing to apply."""

    def __init__(self, message: str = "no change") -> None:
        super().__init__(message)


class UnsupportedDriverError(ValueError):
    """Raised when no migration driver exists for a driver name."""

    def __init__(self, driver_name: str) -> None:
        super().__init__(f"unsupported migration driver: {driver_name}")
        self.driver_name = driver_name


def map_driver_name(driver: str) -> str:
    """Map a composite driver name such as ``gorm:mysql`` to its SQL driver name."""
    return _DRIVER_ALIASES.get(driver, driver)


def safe_close(connection: Any) -> None:
    """Close ``connection`` unless it is None; errors from closing propagate."""
    if connection is None:
        return
    connection.close()


@dataclass(frozen=True)
class MigrationDriver:
    """A database connection bound to the migration dialect that drives it."""

    name: str
    connection: Any

    def close(self) -> None:
        """Close the underlying connection."""
        safe_close(self.connection)


def create_database_driver(driver_name: str, connection: Any) -> MigrationDriver:
    """Return a migration driver for ``driver_name`` over ``connection``."""
    if driver_name not in _SUPPORTED_DRIVERS:
        raise UnsupportedDriverError(driver_name)
    return MigrationDriver(name=driver_name, connection=connection)


def _is_no_change(err: BaseException) -> bool:
    seen: set[int] = set()
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        if isinstance(current, NoChangeError):
            return True
        seen.add(id(current))
        current = current.__cause__
    return False


def handle_migration_error(err: BaseException | None) -> BaseException | None:
    """Return ``err`` unless it is absent or signals that nothing changed."""
    if err is None or _is_no_change(err):
        return None
    return err


@dataclass
class MigrationResult:
    """Outcome of a migration operation."""

    success: bool
    error: BaseException | None = None
    message: str = ""


def execute_migration_with_cleanup(
    connection: Any, operation: Callable[[], Any]
) -> MigrationResult:
    """Run ``operation``; on failure close ``connection`` and report the error."""
    try:
        operation()
        err: BaseException | None = None
    except Exception as exc:
        err = handle_migration_error(exc)

    if err is None:
        return MigrationResult(True, None, "Migration completed successfully")

    try:
        safe_close(connection)
    except Exception as close_err:
        return MigrationResult(
            False, err, f"Migration failed: {err} (cleanup error: {close_err})"
        )
    return MigrationResult(False, err, f"Migration failed: {err}")


class MigrationDriverFactory:
    """Creates migration drivers for the supported dialects."""

    def create_driver(self, driver_name: str, connection: Any) -> MigrationDriver:
        """Return a migration driver for ``driver_name``."""
        return create_database_driver(driver_name, connection)

    def supported_drivers(self) -> list[str]:
        """Names of the dialects migrations can run against."""
        return list(_SUPPORTED_DRIVERS)

    def is_driver_supported(self, driver_name: str) -> bool:
        """True if ``driver_name`` is a supported dialect (case-sensitive)."""
        return driver_name in self.supported_drivers()


@dataclass
class MigrationConfig:
    """Settings for a migration run."""

    driver_name: str = ""
    dsn: str = ""
    migrations_path: str = ""
    steps: int = 0

    def validate(self) -> None:
        """Raise ValueError if a required setting is missing."""
        if not self.driver_name:
            raise ValueError("driver name is required")
        if not self.dsn:
            raise ValueError("DSN is required")
        if not self.migrations_path:
            raise ValueError("migrations path is required")