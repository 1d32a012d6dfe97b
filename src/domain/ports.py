"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the registry requires
from infrastructure. Adapters implement these protocols.
"""

from collections.abc import Iterable, Iterator, Mapping
from typing import Protocol

from .models import BankSend, ValidatorRecord


class KeyValueStore(Protocol):
    """Port interface for the durable ordered key-value store."""

    def get(self, key: bytes) -> bytes | None:
        """Return the value stored at key, or None."""
        ...

    def set(self, key: bytes, value: bytes) -> None:
        """Store value at key, replacing any previous value."""
        ...

    def set_many(
        self,
        items: Iterable[tuple[bytes, bytes]],
        expected: Mapping[bytes, bytes | None] | None = None,
    ) -> None:
        """
        Apply several writes as a single atomic unit.

        Either every write becomes visible or none does. The registry
        flushes all writes of one operation through this method.

        Args:
            items: (key, value) pairs to store
            expected: Values the caller read before writing (None for a key
                it saw absent). Every key must still hold that value when
                the writes are applied.

        Raises:
            Conflict: A key in expected changed; nothing is written
        """
        ...

    def range(self, start: bytes | None = None, end: bytes | None = None) -> Iterator[tuple[bytes, bytes]]:
        """
        Iterate (key, value) pairs in ascending byte order.

        Args:
            start: Exclusive lower bound, or None for the first key
            end: Exclusive upper bound, or None for no upper bound
        """
        ...


class IdentityValidator(Protocol):
    """Port interface for address validation."""

    def validate(self, address: str) -> str:
        """
        Validate an externally supplied address and return its normal form.

        Raises:
            ValueError: If the address is malformed
        """
        ...


class ValidatorDirectory(Protocol):
    """Port interface for the external validator set."""

    def get_validator(self, address: str) -> ValidatorRecord | None:
        """Return the validator with this operator address, or None."""
        ...


class FundsDispatcher(Protocol):
    """Port interface for the payment rail that settles outbound sends."""

    def dispatch(self, send: BankSend) -> None:
        """Hand a send instruction to the payment rail (fire-and-forget)."""
        ...
