"""Default in-memory storage used when no capability store owns an identifier."""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from typing import Any


class MemoryStorage:
    """Plain dict-backed :class:`~datamanager.storage.ReadWriteStorage`."""

    def __init__(self) -> None:
        self._data: dict[Hashable, Any] = {}

    def get(self, key: Hashable) -> Any:
        return self._data.get(key)

    def set(self, key: Hashable, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: Hashable) -> Any:
        return self._data.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(list(self._data))

    def __repr__(self) -> str:
        return f"MemoryStorage(size={len(self._data)})"
