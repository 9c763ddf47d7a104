import logging
from dataclasses import dataclass
from datetime import timedelta
from types import SimpleNamespace
from typing import Any, Optional

import pytest

from scgdb.pool import (
    ConnectionBuilder,
    ConnectionPoolOptions,
    DialectStrategy,
    apply_connection_pool_options,
    configure_connection_pool,
    extract_orm_config,
    options_from_config,
    with_conn_max_lifetime,
    with_dialect_strategy,
    with_max_idle_conns,
    with_max_open_conns,
    with_pool_options,
)


@dataclass
class _Config:
    driver: str = ""
    dsn: str = ""
    max_open_conns: int = 0
    max_idle_conns: int = 0
    conn_max_lifetime: timedelta = timedelta(0)
    settings: Optional[dict] = None


class _Strategy(DialectStrategy):
    def __init__(self, validate_error=None, dialector="dialector", create_error=None):
        self.validate_error = validate_error
        self.dialector = dialector
        self.create_error = create_error
        self.calls: list[tuple[str, Any]] = []

    @property
    def driver_name(self):
        return "mock"

    def validate_driver(self, driver):
        self.calls.append(("validate_driver", driver))
        if self.validate_error is not None:
            raise self.validate_error

    def create_dialector(self, dsn):
        self.calls.append(("create_dialector", dsn))
        if self.create_error is not None:
            raise self.create_error
        return self.dialector


SEC = timedelta(seconds=1)


@pytest.mark.parametrize(
    "cfg, expected",
    [
        (
            _Config(max_open_conns=25, max_idle_conns=10, conn_max_lifetime=30 * SEC),
            {"conn_max_lifetime": 30 * SEC, "max_idle_conns": 10, "max_open_conns": 25},
        ),
        (_Config(max_open_conns=50), {"conn_max_lifetime": 10 * SEC, "max_open_conns": 50}),
        (_Config(max_idle_conns=15), {"conn_max_lifetime": 10 * SEC, "max_idle_conns": 15}),
        (_Config(conn_max_lifetime=60 * SEC), {"conn_max_lifetime": 60 * SEC}),
        (_Config(), {"conn_max_lifetime": 10 * SEC}),
    ],
)
def test_configure_connection_pool(cfg, expected):
    db = SimpleNamespace()
    configure_connection_pool(db, cfg)
    assert vars(db) == expected


def test_extract_orm_config_empty_settings():
    assert extract_orm_config(_Config(settings={})) == {}


def test_extract_orm_config_nil_settings():
    assert extract_orm_config(_Config(settings=None)) == {}


def test_extract_orm_config_with_config():
    cfg = _Config(settings={"orm_config": {"skip_default_transaction": True}})
    assert extract_orm_config(cfg) == {"skip_default_transaction": True}


def test_extract_orm_config_with_logger():
    logger = logging.getLogger("scgdb.test.silent")
    result = extract_orm_config(_Config(settings={"orm_logger": logger}))
    assert result == {"logger": logger}


def test_extract_orm_config_with_both():
    logger = logging.getLogger("scgdb.test.info")
    cfg = _Config(
        settings={"orm_config": {"skip_default_transaction": True}, "orm_logger": logger}
    )
    result = extract_orm_config(cfg)
    assert result["skip_default_transaction"] is True
    assert result["logger"] is logger


@pytest.mark.parametrize("key", ["orm_config", "orm_logger"])
def test_extract_orm_config_ignores_invalid_types(key):
    assert extract_orm_config(_Config(settings={key: "invalid"})) == {}


@pytest.mark.parametrize(
    "options, expected",
    [
        ([], {"conn_max_lifetime": 10 * SEC}),
        ([with_max_open_conns(25)], {"conn_max_lifetime": 10 * SEC, "max_open_conns": 25}),
        ([with_max_idle_conns(10)], {"conn_max_lifetime": 10 * SEC, "max_idle_conns": 10}),
        ([with_conn_max_lifetime(30 * SEC)], {"conn_max_lifetime": 30 * SEC}),
        (
            [with_max_open_conns(50), with_max_idle_conns(20), with_conn_max_lifetime(60 * SEC)],
            {"conn_max_lifetime": 60 * SEC, "max_idle_conns": 20, "max_open_conns": 50},
        ),
        (
            [with_max_open_conns(0), with_max_idle_conns(0), with_conn_max_lifetime(timedelta(0))],
            {},
        ),
    ],
)
def test_apply_connection_pool_options(options, expected):
    db = SimpleNamespace()
    apply_connection_pool_options(db, *options)
    assert vars(db) == expected


def test_pool_option_functions():
    opts = ConnectionPoolOptions()
    with_max_open_conns(25)(opts)
    with_max_idle_conns(10)(opts)
    with_conn_max_lifetime(30 * SEC)(opts)
    assert opts == ConnectionPoolOptions(
        max_open_conns=25, max_idle_conns=10, conn_max_lifetime=30 * SEC
    )


@pytest.mark.parametrize(
    "cfg, count",
    [
        (_Config(max_open_conns=25, max_idle_conns=10, conn_max_lifetime=30 * SEC), 3),
        (_Config(max_open_conns=50), 1),
        (_Config(max_idle_conns=15), 1),
        (_Config(conn_max_lifetime=60 * SEC), 1),
        (_Config(), 0),
    ],
)
def test_options_from_config(cfg, count):
    options = options_from_config(cfg)
    assert len(options) == count
    opts = ConnectionPoolOptions()
    for option in options:
        option(opts)
    assert opts.max_open_conns == cfg.max_open_conns
    assert opts.max_idle_conns == cfg.max_idle_conns
    assert opts.conn_max_lifetime == cfg.conn_max_lifetime


@pytest.mark.parametrize(
    "cfg, options, count",
    [
        (_Config(driver="gorm:sqlite", dsn="test.db"), [], 0),
        (_Config(driver="gorm:sqlite", dsn="test.db"), [with_dialect_strategy(_Strategy())], 0),
        (
            _Config(driver="gorm:sqlite", dsn="test.db"),
            [with_pool_options(with_max_open_conns(25))],
            1,
        ),
        (_Config(driver="gorm:sqlite", dsn="test.db", max_open_conns=10, max_idle_conns=5), [], 2),
    ],
)
def test_connection_builder_init(cfg, options, count):
    builder = ConnectionBuilder(cfg, *options)
    assert builder.config.driver == cfg.driver
    assert builder.config.dsn == cfg.dsn
    assert len(builder.pool_options) == count


def test_builder_copies_config():
    cfg = _Config(driver="gorm:sqlite", dsn="test.db")
    builder = ConnectionBuilder(cfg)
    cfg.dsn = "other.db"
    assert builder.config.dsn == "test.db"


def test_with_dialect_strategy_option():
    strategy = _Strategy()
    builder = ConnectionBuilder(_Config(), with_dialect_strategy(strategy))
    assert builder.dialect_strategy is strategy


def test_build_success():
    strategy = _Strategy()
    builder = ConnectionBuilder(
        _Config(driver="gorm:sqlite", dsn="test.db"), with_dialect_strategy(strategy)
    )
    assert builder.build() == "dialector"
    assert strategy.calls == [("validate_driver", "gorm:sqlite"), ("create_dialector", "test.db")]


def test_build_without_strategy():
    builder = ConnectionBuilder(_Config(driver="gorm:sqlite", dsn="test.db"))
    with pytest.raises(ValueError, match="dialect strategy is required"):
        builder.build()


def test_build_driver_validation_fails():
    cause = RuntimeError("assert.AnError general error for testing")
    strategy = _Strategy(validate_error=cause)
    builder = ConnectionBuilder(
        _Config(driver="invalid:driver", dsn="test.db"), with_dialect_strategy(strategy)
    )
    with pytest.raises(ValueError, match="driver validation failed") as info:
        builder.build()
    assert info.value.__cause__ is cause
    assert strategy.calls == [("validate_driver", "invalid:driver")]


def test_build_dialector_creation_fails():
    cause = RuntimeError("boom")
    strategy = _Strategy(create_error=cause)
    builder = ConnectionBuilder(
        _Config(driver="gorm:sqlite", dsn="invalid.db"), with_dialect_strategy(strategy)
    )
    with pytest.raises(ValueError, match="failed to create dialector") as info:
        builder.build()
    assert info.value.__cause__ is cause
    assert strategy.calls == [("validate_driver", "gorm:sqlite"), ("create_dialector", "invalid.db")]


def test_apply_pool_configuration():
    builder = ConnectionBuilder(
        _Config(),
        with_pool_options(
            with_max_open_conns(25), with_max_idle_conns(10), with_conn_max_lifetime(30 * SEC)
        ),
    )
    db = SimpleNamespace()
    builder.apply_pool_configuration(db)
    assert vars(db) == {"conn_max_lifetime": 30 * SEC, "max_idle_conns": 10, "max_open_conns": 25}