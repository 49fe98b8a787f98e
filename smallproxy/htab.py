"""Case-insensitive string-keyed table that never overwrites an entry."""

from __future__ import annotations

import string
from typing import Any, Iterator

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def _fold(key: str) -> str:
    """Lower-case ASCII letters only, leaving other characters untouched."""
    return key.translate(_ASCII_LOWER)


class HashTable:
    """Mapping from string keys to values, compared without regard to ASCII case.

    The key stored is the one given at insertion time; lookups with any
    spelling of the same key in different case find it.  An existing entry
    is never replaced by ``insert``.
    """

    def __init__(self, capacity: int = 8) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self._entries: dict[str, tuple[str, Any]] = {}

    def insert(self, key: str, value: Any) -> bool:
        """Add ``key`` with ``value``; return False if the key is already present."""
        folded = _fold(key)
        if folded in self._entries:
            return False
        self._entries[folded] = (key, value)
        if len(self._entries) > self.capacity:
            self.capacity = max(self.capacity * 2, len(self._entries))
        return True

    def find(self, key: str) -> Any:
        """Return the value stored under ``key``, or None."""
        entry = self._entries.get(_fold(key))
        return None if entry is None else entry[1]

    def find_key(self, key: str) -> tuple[str, Any] | None:
        """Return ``(stored_key, value)`` for ``key``, or None."""
        return self._entries.get(_fold(key))

    def delete(self, key: str) -> bool:
        """Remove ``key``; return whether it was present."""
        return self._entries.pop(_fold(key), None) is not None

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and _fold(key) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        for stored_key, _ in self._entries.values():
            yield stored_key

    def items(self) -> Iterator[tuple[str, Any]]:
        """Yield ``(stored_key, value)`` pairs."""
        yield from self._entries.values()