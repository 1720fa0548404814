from __future__ import annotations

from collections.abc import Callable, Collection, Hashable
from typing import Any

import pytest

Predicate = bool | Collection[Hashable] | Callable[[Hashable], bool]


def _as_predicate(rule: Predicate) -> Callable[[Hashable], bool]:
    if isinstance(rule, bool):
        return lambda _key: rule
    if callable(rule):
        return rule
    keys = frozenset(rule)
    return lambda key: key in keys


class RecordingStore:
    """Capability store keeping owned values in a dict and logging every call."""

    def __init__(self, name: str, *, storable: Predicate = False, dependee: Predicate = False) -> None:
        self.name = name
        self.data: dict[Hashable, Any] = {}
        self.events: list[tuple[Any, ...]] = []
        self._storable = _as_predicate(storable)
        self._dependee = _as_predicate(dependee)

    def is_storable(self, key: Hashable) -> bool:
        return self._storable(key)

    def is_dependee(self, key: Hashable) -> bool:
        return self._dependee(key)

    def get(self, key: Hashable) -> Any:
        return self.data.get(key)

    def set(self, key: Hashable, value: Any, is_owner: bool) -> None:
        self.events.append(("set", key, value, is_owner))
        if is_owner:
            self.data[key] = value

    def remove(self, key: Hashable, is_owner: bool) -> Any:
        self.events.append(("remove", key, is_owner))
        if is_owner:
            return self.data.pop(key, None)
        return None

    def __repr__(self) -> str:
        return f"RecordingStore({self.name!r})"


class LengthIndex:
    """Derived-state store: tracks the length of every string value it hears about."""

    def __init__(self) -> None:
        self.lengths: dict[Hashable, int] = {}

    def is_storable(self, key: Hashable) -> bool:
        return False

    def is_dependee(self, key: Hashable) -> bool:
        return True

    def get(self, key: Hashable) -> Any:
        return None

    def set(self, key: Hashable, value: Any, is_owner: bool) -> None:
        if isinstance(value, str):
            self.lengths[key] = len(value)

    def remove(self, key: Hashable, is_owner: bool) -> Any:
        self.lengths.pop(key, None)
        return None


@pytest.fixture
def make_store() -> Callable[..., RecordingStore]:
    return RecordingStore


@pytest.fixture
def length_index() -> LengthIndex:
    return LengthIndex()
