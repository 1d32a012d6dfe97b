"""
Registry state - Config and Entry stores over a KeyValueStore.

Storage layout:
    b"config"                 -> JSON Config
    b"entries:" + name(utf-8) -> JSON Entry

UTF-8 byte order equals code point order, so a range scan over the entries
prefix yields names in the same order Python sorts strings.
"""

import json
from collections.abc import Iterable, Iterator, Mapping

from .models import Config, Entry
from .ports import KeyValueStore

CONFIG_KEY = b"config"
ENTRIES_PREFIX = b"entries:"
# First key after every key that starts with ENTRIES_PREFIX
ENTRIES_END = b"entries;"


class StagedStore:
    """
    Write buffer layered over a KeyValueStore.

    Reads see staged writes first. Nothing reaches the inner store until
    commit(), which flushes every staged write through set_many(). Dropping
    the StagedStore without committing discards the writes.

    The first value read from the inner store for each key is remembered and
    handed to set_many() as ``expected``, so a commit fails with Conflict
    instead of overwriting state another writer changed in the meantime.
    """

    def __init__(self, inner: KeyValueStore) -> None:
        self._inner = inner
        self._writes: dict[bytes, bytes] = {}
        self._reads: dict[bytes, bytes | None] = {}

    def get(self, key: bytes) -> bytes | None:
        if key in self._writes:
            return self._writes[key]
        if key not in self._reads:
            self._reads[key] = self._inner.get(key)
        return self._reads[key]

    def set(self, key: bytes, value: bytes) -> None:
        self._writes[key] = value

    def set_many(
        self,
        items: Iterable[tuple[bytes, bytes]],
        expected: Mapping[bytes, bytes | None] | None = None,
    ) -> None:
        for key, value in (expected or {}).items():
            self._reads.setdefault(key, value)
        for key, value in items:
            self._writes[key] = value

    def range(self, start: bytes | None = None, end: bytes | None = None) -> Iterator[tuple[bytes, bytes]]:
        merged = dict(self._inner.range(start, end))
        for key, value in self._writes.items():
            if (start is None or key > start) and (end is None or key < end):
                merged[key] = value
        for key in sorted(merged):
            yield key, merged[key]

    def commit(self) -> None:
        """
        Flush staged writes in one batch.

        Raises:
            Conflict: A key read by this operation changed in the inner store
        """
        if self._writes:
            self._inner.set_many(sorted(self._writes.items()), expected=dict(self._reads))
        self._writes = {}
        self._reads = {}


def _encode(record: Config | Entry) -> bytes:
    return json.dumps(record.to_dict(), sort_keys=True, separators=(",", ":")).encode()


def entry_key(name: str) -> bytes:
    return ENTRIES_PREFIX + name.encode()


def load_config(store: KeyValueStore) -> Config | None:
    raw = store.get(CONFIG_KEY)
    if raw is None:
        return None
    return Config.from_dict(json.loads(raw))


def save_config(store: KeyValueStore, config: Config) -> None:
    store.set(CONFIG_KEY, _encode(config))


def load_entry(store: KeyValueStore, name: str) -> Entry | None:
    raw = store.get(entry_key(name))
    if raw is None:
        return None
    return Entry.from_dict(json.loads(raw))


def save_entry(store: KeyValueStore, name: str, entry: Entry) -> None:
    store.set(entry_key(name), _encode(entry))


def iter_entries(store: KeyValueStore, start_after: str | None = None) -> Iterator[tuple[str, Entry]]:
    """Yield (name, entry) pairs in ascending name order, strictly after start_after."""
    start = entry_key(start_after) if start_after is not None else ENTRIES_PREFIX
    for key, raw in store.range(start, ENTRIES_END):
        yield key[len(ENTRIES_PREFIX) :].decode(), Entry.from_dict(json.loads(raw))
