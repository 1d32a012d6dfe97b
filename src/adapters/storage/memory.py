"""
In-memory key-value store adapter - Implements KeyValueStore protocol.

Keeps keys in a sorted list alongside a dict so range scans are ordered
without sorting on every call. Used for tests and the default demo backend.
"""

from bisect import bisect_left, bisect_right, insort
from collections.abc import Iterable, Iterator, Mapping

from src.domain.exceptions import Conflict


class MemoryStore:
    """
    Implements KeyValueStore protocol in process memory.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self._data: dict[bytes, bytes] = {}
        self._keys: list[bytes] = []

    def get(self, key: bytes) -> bytes | None:
        return self._data.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        if key not in self._data:
            insort(self._keys, key)
        self._data[key] = value

    def set_many(
        self,
        items: Iterable[tuple[bytes, bytes]],
        expected: Mapping[bytes, bytes | None] | None = None,
    ) -> None:
        # Materialize first so a failing iterator leaves the store unchanged
        rows = list(items)
        for key, value in (expected or {}).items():
            if self._data.get(key) != value:
                raise Conflict()
        for key, value in rows:
            self.set(key, value)

    def range(self, start: bytes | None = None, end: bytes | None = None) -> Iterator[tuple[bytes, bytes]]:
        lo = 0 if start is None else bisect_right(self._keys, start)
        hi = len(self._keys) if end is None else bisect_left(self._keys, end)
        # Snapshot the slice so writes during iteration do not shift it
        for key in self._keys[lo:hi]:
            yield key, self._data[key]

    def __len__(self) -> int:
        return len(self._keys)
