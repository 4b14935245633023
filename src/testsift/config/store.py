"""Thread-safe, sorted key/value configuration store.

One FairReadWriteLock guards the whole mapping: reads share it, mutations
hold it exclusively. Every key argument is trimmed and must be non-blank;
violations raise ArgumentError before any state changes.

Lock ordering: whenever two stores are involved (merge/replace from another
store) the *source*'s read lock is acquired first, then this store's write
lock, and they are released in reverse order. Every cross-store operation in
this module follows that order. Two threads merging a pair of stores in
opposite directions at the same time can still deadlock; callers must not
do that.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any

from testsift.config.locks import FairReadWriteLock
from testsift.core.arguments import is_callable, not_blank, not_none
from testsift.core.errors import ArgumentError


class ConfigurationStore:
    """Ordered configuration registry safe for concurrent readers and writers."""

    def __init__(self, entries: Mapping[str, str] | None = None) -> None:
        self._entries: dict[str, str] = {}
        self._lock = FairReadWriteLock()
        if entries is not None:
            self.merge(entries)

    # -------------------------------------------------------------------------
    # Single-key operations
    # -------------------------------------------------------------------------

    def put(self, key: str, value: str) -> str | None:
        """Store value under the trimmed key; return the previous value."""
        key = not_blank(key, "key")
        if not isinstance(value, str):
            raise ArgumentError.invalid("value", f"expected str, got {type(value).__name__}")
        with self._lock.write_locked():
            previous = self._entries.get(key)
            self._entries[key] = value
            return previous

    def get(self, key: str, default: str | None = None) -> str | None:
        key = not_blank(key, "key")
        with self._lock.read_locked():
            return self._entries.get(key, default)

    def get_optional(self, key: str) -> str | None:
        key = not_blank(key, "key")
        with self._lock.read_locked():
            return self._entries.get(key)

    def compute_if_absent(self, key: str, transform: Callable[[str], str | None]) -> str | None:
        """Atomically compute and store a value for an absent key.

        ``transform`` runs under the write lock and must not touch this store.
        A ``None`` result leaves the key absent.
        """
        key = not_blank(key, "key")
        is_callable(transform, "transform")
        with self._lock.write_locked():
            current = self._entries.get(key)
            if current is not None:
                return current
            computed = transform(key)
            if computed is not None:
                self._entries[key] = computed
            return computed

    def contains_key(self, key: str) -> bool:
        key = not_blank(key, "key")
        with self._lock.read_locked():
            return key in self._entries

    def remove(self, key: str) -> str | None:
        key = not_blank(key, "key")
        with self._lock.write_locked():
            return self._entries.pop(key, None)

    def remove_optional(self, key: str) -> str | None:
        key = not_blank(key, "key")
        with self._lock.write_locked():
            return self._entries.pop(key, None)

    # -------------------------------------------------------------------------
    # Whole-store operations
    # -------------------------------------------------------------------------

    def size(self) -> int:
        with self._lock.read_locked():
            return len(self._entries)

    def is_empty(self) -> bool:
        return self.size() == 0

    def clear(self) -> ConfigurationStore:
        with self._lock.write_locked():
            self._entries.clear()
        return self

    def key_set(self) -> list[str]:
        """Sorted snapshot of the keys."""
        with self._lock.read_locked():
            return sorted(self._entries)

    def items(self) -> list[tuple[str, str]]:
        """Sorted snapshot of the entries."""
        with self._lock.read_locked():
            return sorted(self._entries.items())

    def as_dict(self) -> dict[str, str]:
        return dict(self.items())

    def merge(self, source: Mapping[str, str] | ConfigurationStore) -> ConfigurationStore:
        """Copy entries from a mapping or another store into this store.

        Mapping entries are trimmed on both sides and skipped unless key and
        value are non-blank strings. Store entries are copied verbatim.
        """
        not_none(source, "source")
        if isinstance(source, ConfigurationStore):
            if source is self:
                return self
            with source._lock.read_locked(), self._lock.write_locked():
                self._entries.update(source._entries)
            return self

        source = _require_mapping(source)
        with self._lock.write_locked():
            self._merge_mapping_locked(source)
        return self

    def replace(self, source: Mapping[str, str] | ConfigurationStore) -> ConfigurationStore:
        """Clear and merge in one critical section."""
        not_none(source, "source")
        if isinstance(source, ConfigurationStore):
            if source is self:
                return self
            with source._lock.read_locked(), self._lock.write_locked():
                self._entries.clear()
                self._entries.update(source._entries)
            return self

        source = _require_mapping(source)
        with self._lock.write_locked():
            self._entries.clear()
            self._merge_mapping_locked(source)
        return self

    def duplicate(self) -> ConfigurationStore:
        """Independent copy of the current entries with its own lock."""
        copy = ConfigurationStore()
        with self._lock.read_locked():
            copy._entries = dict(self._entries)
        return copy

    def _merge_mapping_locked(self, source: Mapping[Any, Any]) -> None:
        for key, value in source.items():
            if not isinstance(key, str) or not isinstance(value, str):
                continue
            key = key.strip()
            value = value.strip()
            if key and value:
                self._entries[key] = value

    # -------------------------------------------------------------------------
    # Dunder protocol
    # -------------------------------------------------------------------------

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and bool(key.strip()) and self.contains_key(key)

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[str]:
        return iter(self.key_set())

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, ConfigurationStore):
            return NotImplemented
        return self.items() == other.items()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ConfigurationStore({self.as_dict()!r})"


def _require_mapping(source: Any) -> Mapping[Any, Any]:
    if not isinstance(source, Mapping):
        raise ArgumentError.invalid("source", f"expected a mapping, got {type(source).__name__}")
    return source
