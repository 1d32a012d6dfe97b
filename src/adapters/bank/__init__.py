"""Bank adapters - Payment rail implementations."""

from .console import ConsoleFundsDispatcher

__all__ = ["ConsoleFundsDispatcher"]
