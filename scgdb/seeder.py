"""Running database seeders in order against one connection."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Seeder(ABC):
    """Fills a database with data."""

    @abstractmethod
    def run(self, connection: Any) -> None:
        """Seed data through ``connection``; raise on failure."""


class SeederError(Exception):
    """Raised when a seeder fails; the original error is the cause."""

    def __init__(self, seeder: Any, error: BaseException) -> None:
        super().__init__(f"failed to run seeder {type(seeder).__qualname__}: {error}")
        self.seeder = seeder
        self.error = error


class Runner:
    """Runs seeders against a connection."""

    def __init__(self, connection: Any) -> None:
        self.connection = connection

    def run(self, *seeders: Seeder) -> None:
        """Run each seeder in order, stopping at the first failure."""
        for seeder in seeders:
            run = seeder.run
            try:
                run(self.connection)
            except Exception as exc:
                raise SeederError(seeder, exc) from exc