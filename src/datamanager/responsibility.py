"""Memoized identifier to owner mapping.

An owner is recorded the first time an identifier is resolved and then kept
as is. Entries only go away when the manager explicitly invalidates them
(identifier removed, or a migration made the cached owner stale).
"""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from typing import Any


class ResponsibilityTable:
    """Identifier to owning store cache.

    Owners are compared by identity: two stores that happen to compare equal
    are still distinct owners.
    """

    def __init__(self) -> None:
        self._owners: dict[Hashable, Any] = {}

    def lookup(self, key: Hashable) -> Any | None:
        """Return the cached owner for *key*, or ``None`` if unresolved."""
        return self._owners.get(key)

    def assign(self, key: Hashable, owner: Any) -> None:
        self._owners[key] = owner

    def invalidate(self, key: Hashable) -> bool:
        """Drop the cached owner for *key*. Returns whether one existed."""
        return self._owners.pop(key, None) is not None

    def keys(self) -> list[Hashable]:
        """Snapshot of the resolved identifiers, safe to iterate while mutating."""
        return list(self._owners)

    def owned_by(self, owner: Any) -> list[Hashable]:
        return [key for key, cached in self._owners.items() if cached is owner]

    def __contains__(self, key: object) -> bool:
        return key in self._owners

    def __len__(self) -> int:
        return len(self._owners)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self.keys())
