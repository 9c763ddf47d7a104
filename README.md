# scgdb

Helpers for services that talk to a database. Nothing here opens a
connection by itself. Each function and class works with objects that you
pass in, such as database handles, query chains, migration engines and
seeders.

## Modules

- **`scgdb.validator`**
  - `validate_config_for_migration(cfg)` requires non-blank
    `migrations_path`, `dsn` and `driver` attributes.
  - `validate_non_negative_int` and `validate_positive_int` raise
    `ValueError` with the field name in the message.
  - `validate_column_name` accepts plain or dot-qualified identifiers,
    for example `users.name`.
  - `validate_order_direction` normalises `asc` and `desc`, and falls back
    to a default for anything else.
  - `validate_models_slice` rejects a sequence that is empty or contains
    `None`.
  - `validate_driver_format("gorm:mysql")` returns `"mysql"`.
- **`scgdb.pool`**
  - `configure_connection_pool(db, cfg)` sets `conn_max_lifetime`
    (ten seconds by default), `max_idle_conns` and `max_open_conns` on
    `db`. Only positive values are set.
  - The options `with_max_open_conns`, `with_max_idle_conns` and
    `with_conn_max_lifetime` can be passed to
    `apply_connection_pool_options`. `options_from_config(cfg)` builds the
    same options from a config.
  - `extract_orm_config(cfg)` reads the `orm_config` dict and the
    `orm_logger` logger from `cfg.settings`.
  - `ConnectionBuilder(cfg, *options)` uses a `DialectStrategy`, which you
    set with `with_dialect_strategy`. `build()` checks the driver and
    returns the dialector. `apply_pool_configuration(db)` applies the
    builder's pool options to `db`.
- **`scgdb.migration_utils`**
  - `map_driver_name` turns `gorm:mysql` and `gorm:postgres` into `mysql`
    and `postgres`. Other names are returned unchanged.
  - `create_database_driver` and `MigrationDriverFactory` return a
    `MigrationDriver` for `mysql` or `postgres`. Any other name raises
    `UnsupportedDriverError`.
  - `handle_migration_error` treats `NoChangeError` as success.
  - `execute_migration_with_cleanup(connection, operation)` returns a
    `MigrationResult`, and closes the connection when the operation fails.
  - `MigrationConfig.validate()` raises `ValueError` when a required
    setting is missing.
- **`scgdb.migrator`**
  - `Migrator` wraps a `MigrationEngine`. It provides `up()`,
    `down(steps)`, `fresh()` and `close()`, and can be used as a context
    manager.
  - `NoChangeError` from the engine is ignored. `down(0)` does nothing.
  - `new_migrator(cfg, engine_factory)` validates the config. It then calls
    `engine_factory.open(driver_name, dsn)` and
    `engine_factory.create(migrations_path, driver_name, driver)`. Any
    failure raises `MigratorError`.
- **`scgdb.seeder`**
  - `Runner(connection).run(*seeders)` runs `Seeder` objects in order.
  - It stops at the first failure and raises a `SeederError`, with the
    original error as its cause.
- **`scgdb.reflection`**
  - `Model` is the abstract base for records.
  - `create_entity_from_model`, `convert_models_to_list`,
    `convert_to_models`, `get_model_type`, `is_nil_or_empty`,
    `safe_type_assertion` and `execute_query_and_convert_to_models` work
    with model instances.
  - `QueryExecutor` wraps a query function.
- **`scgdb.repository`**
  - Query-chain helpers: `handle_relationship_preload`,
    `validate_and_apply_limit`, `validate_and_apply_offset` and
    `apply_order_by`. Unsafe column names are ignored, and the direction
    defaults to `ASC`. They call `preload`, `limit`, `offset` and `order`
    on the query object you pass in.
  - `handle_find_or_fail` raises `RecordNotFoundError`.
  - `BatchOperationResult` counts processed items and collects errors.

## Example

```python
from scgdb.seeder import Runner, Seeder, SeederError
from scgdb.validator import validate_column_name, validate_order_direction


class RecordingConnection:
    def __init__(self):
        self.statements = []

    def statement(self, query):
        self.statements.append(query)


class UsersSeeder(Seeder):
    def run(self, connection):
        connection.statement("INSERT INTO users (name) VALUES ('alice')")


connection = RecordingConnection()
Runner(connection).run(UsersSeeder())
assert connection.statements == ["INSERT INTO users (name) VALUES ('alice')"]

assert validate_column_name("users.name")
assert not validate_column_name("name'; DROP TABLE users; --")
assert validate_order_direction(" desc ", "ASC") == "DESC"
```

## What it does not do

- It has no database drivers, ORM or migration engine of its own. You
  supply the connections, query objects and `MigrationEngine`
  implementations.
- It provides no command-line tool.

## Running the tests

```
pip install -e .[test]
pytest
```