"""Database helpers: migration running, seeders, pool settings, validation and repository utilities."""

__version__ = "0.1.0"