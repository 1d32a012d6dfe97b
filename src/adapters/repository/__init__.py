"""Repository adapters - Database implementations."""

from .postgres import PostgresKeyValueStore, run_migrations

__all__ = ["PostgresKeyValueStore", "run_migrations"]
