"""Running schema migrations up, down and from scratch."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Protocol

from scgdb.migration_utils import (
    MigrationDriver,
    NoChangeError,
    create_database_driver,
    map_driver_name,
    safe_close,
)
from scgdb.validator import validate_config_for_migration


class MigrationEngine(ABC):
    """Applies migrations from a source; raises NoChangeError when nothing changes."""

    @abstractmethod
    def up(self) -> None:
        """Apply every pending up migration."""

    @abstractmethod
    def down(self) -> None:
        """Roll back every applied migration."""

    @abstractmethod
    def steps(self, n: int) -> None:
        """Migrate ``n`` steps; negative ``n`` rolls back."""

    @abstractmethod
    def close(self) -> None:
        """Release the source and database."""


class MigratorError(Exception):
    """Raised when a migrator cannot be set up."""


class _EngineFactory(Protocol):
    def open(self, driver_name: str, dsn: str) -> Any: ...

    def create(
        self, migrations_path: str, driver_name: str, driver: MigrationDriver
    ) -> MigrationEngine: ...


class Migrator:
    """Runs migrations through a migration engine."""

    def __init__(self, engine: MigrationEngine) -> None:
        self._engine = engine

    def up(self) -> None:
        """Apply all pending migrations; having none is not an error."""
        try:
            self._engine.up()
        except NoChangeError:
            pass

    def down(self, steps: int) -> None:
        """Roll back ``steps`` migrations; zero or fewer does nothing."""
        if steps <= 0:
            return
        try:
            self._engine.steps(-steps)
        except NoChangeError:
            pass

    def fresh(self) -> None:
        """Roll back everything, then apply all migrations again."""
        try:
            self._engine.down()
        except NoChangeError:
            pass
        try:
            self._engine.up()
        except NoChangeError:
            pass

    def close(self) -> None:
        """Close the engine's source and database connections."""
        self._engine.close()

    def __enter__(self) -> Migrator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def new_migrator(cfg: Any, engine_factory: _EngineFactory) -> Migrator:
    """Validate ``cfg`` and build a Migrator.

    ``engine_factory`` opens a database with ``open(driver_name, dsn)`` and builds
    the engine with ``create(migrations_path, driver_name, driver)``.
    """
    try:
        validate_config_for_migration(cfg)
    except ValueError as exc:
        raise MigratorError(f"config validation failed: {exc}") from exc

    driver_name = map_driver_name(cfg.driver)

    try:
        connection = engine_factory.open(driver_name, cfg.dsn)
    except Exception as exc:
        raise MigratorError(f"failed to open database for migration: {exc}") from exc

    try:
        driver = create_database_driver(driver_name, connection)
    except Exception as exc:
        try:
            safe_close(connection)
        except Exception:
            pass
        raise MigratorError(f"failed to create migration driver: {exc}") from exc

    try:
        engine = engine_factory.create(cfg.migrations_path, driver_name, driver)
    except Exception as exc:
        raise MigratorError(f"failed to create migrate instance: {exc}") from exc

    return Migrator(engine)