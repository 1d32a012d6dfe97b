"""Storage adapters - In-process key-value stores."""

from .memory import MemoryStore

__all__ = ["MemoryStore"]
