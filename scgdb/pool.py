"""Connection pool settings and a builder that creates dialectors from a config."""

from __future__ import annotations

import copy
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable

DEFAULT_CONN_MAX_LIFETIME = timedelta(seconds=10)
_ZERO = timedelta(0)


@dataclass
class ConnectionPoolOptions:
    """Pool limits; zero means 'leave the pool's own setting alone'."""

    max_open_conns: int = 0
    max_idle_conns: int = 0
    conn_max_lifetime: timedelta = _ZERO


PoolOption = Callable[[ConnectionPoolOptions], None]


def _int_setting(cfg: Any, name: str) -> int:
    return getattr(cfg, name, 0) or 0


def _lifetime_setting(cfg: Any) -> timedelta:
    return getattr(cfg, "conn_max_lifetime", None) or _ZERO


def configure_connection_pool(db: Any, cfg: Any) -> None:
    """Apply the config's pool settings to ``db``; lifetime defaults to ten seconds."""
    lifetime = _lifetime_setting(cfg)
    db.conn_max_lifetime = lifetime if lifetime > _ZERO else DEFAULT_CONN_MAX_LIFETIME

    max_idle = _int_setting(cfg, "max_idle_conns")
    if max_idle > 0:
        db.max_idle_conns = max_idle

    max_open = _int_setting(cfg, "max_open_conns")
    if max_open > 0:
        db.max_open_conns = max_open


def extract_orm_config(cfg: Any) -> dict[str, Any]:
    """Build the ORM configuration from the ``orm_config`` and ``orm_logger`` settings."""
    settings = getattr(cfg, "settings", None) or {}

    orm_config: dict[str, Any] = {}
    base = settings.get("orm_config")
    if isinstance(base, dict):
        orm_config = dict(base)

    orm_logger = settings.get("orm_logger")
    if isinstance(orm_logger, (logging.Logger, logging.LoggerAdapter)):
        orm_config["logger"] = orm_logger

    return orm_config


def apply_connection_pool_options(db: Any, *options: PoolOption) -> None:
    """Apply functional pool options to ``db``, skipping values that are not positive."""
    opts = ConnectionPoolOptions(conn_max_lifetime=DEFAULT_CONN_MAX_LIFETIME)
    for option in options:
        option(opts)

    if opts.conn_max_lifetime > _ZERO:
        db.conn_max_lifetime = opts.conn_max_lifetime
    if opts.max_idle_conns > 0:
        db.max_idle_conns = opts.max_idle_conns
    if opts.max_open_conns > 0:
        db.max_open_conns = opts.max_open_conns


def with_max_open_conns(max_conns: int) -> PoolOption:
    """Option setting the maximum number of open connections."""

    def option(opts: ConnectionPoolOptions) -> None:
        opts.max_open_conns = max_conns

    return option


def with_max_idle_conns(max_conns: int) -> PoolOption:
    """Option setting the maximum number of idle connections."""

    def option(opts: ConnectionPoolOptions) -> None:
        opts.max_idle_conns = max_conns

    return option


def with_conn_max_lifetime(lifetime: timedelta) -> PoolOption:
    """Option setting the maximum connection lifetime."""

    def option(opts: ConnectionPoolOptions) -> None:
        opts.conn_max_lifetime = lifetime

    return option


def options_from_config(cfg: Any) -> list[PoolOption]:
    """Return pool options for each positive pool setting in the config."""
    options: list[PoolOption] = []
    max_open = _int_setting(cfg, "max_open_conns")
    if max_open > 0:
        options.append(with_max_open_conns(max_open))
    max_idle = _int_setting(cfg, "max_idle_conns")
    if max_idle > 0:
        options.append(with_max_idle_conns(max_idle))
    lifetime = _lifetime_setting(cfg)
    if lifetime > _ZERO:
        options.append(with_conn_max_lifetime(lifetime))
    return options


class DialectStrategy(ABC):
    """Knows how to check a driver name and create a dialector for a DSN."""

    @property
    @abstractmethod
    def driver_name(self) -> str:
        """Name of the driver this strategy handles."""

    @abstractmethod
    def create_dialector(self, dsn: str) -> Any:
        """Return a dialector for ``dsn``; raise on failure."""

    @abstractmethod
    def validate_driver(self, driver: str) -> None:
        """Raise if ``driver`` is not handled by this strategy."""


BuilderOption = Callable[["ConnectionBuilder"], None]


def with_dialect_strategy(strategy: DialectStrategy) -> BuilderOption:
    """Builder option setting the dialect strategy."""

    def option(builder: ConnectionBuilder) -> None:
        builder.dialect_strategy = strategy

    return option


def with_pool_options(*options: PoolOption) -> BuilderOption:
    """Builder option appending extra pool options."""

    def option(builder: ConnectionBuilder) -> None:
        builder.pool_options.extend(options)

    return option


class ConnectionBuilder:
    """Builds a dialector from a config using a dialect strategy."""

    def __init__(self, cfg: Any, *options: BuilderOption) -> None:
        self.config = copy.copy(cfg)
        self.dialect_strategy: DialectStrategy | None = None
        self.pool_options: list[PoolOption] = options_from_config(cfg)
        for option in options:
            option(self)

    def build(self) -> Any:
        """Validate the driver and return the dialector for the configured DSN."""
        if self.dialect_strategy is None:
            raise ValueError("dialect strategy is required")
        try:
            self.dialect_strategy.validate_driver(getattr(self.config, "driver", ""))
        except Exception as exc:
            raise ValueError(f"driver validation failed: {exc}") from exc
        try:
            return self.dialect_strategy.create_dialector(getattr(self.config, "dsn", ""))
        except Exception as exc:
            raise ValueError(f"failed to create dialector: {exc}") from exc

    def apply_pool_configuration(self, db: Any) -> None:
        """Apply this builder's pool options to ``db``."""
        apply_connection_pool_options(db, *self.pool_options)