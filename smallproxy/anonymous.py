"""Headers let through when anonymous mode is turned on."""

from __future__ import annotations

from .htab import HashTable


class AnonymousHeaders:
    """Case-insensitive set of header names that survive anonymisation."""

    def __init__(self) -> None:
        self._headers = HashTable(32)

    def insert(self, name: str) -> None:
        """Let the header ``name`` through; adding it twice is harmless."""
        self._headers.insert(name, 1)

    def __contains__(self, name: object) -> bool:
        return name in self._headers

    def __len__(self) -> int:
        return len(self._headers)