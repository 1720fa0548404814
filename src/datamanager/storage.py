"""Storage contracts.

Three levels of capability are recognised:

* :class:`Storage` gives read access only.
* :class:`ReadWriteStorage` adds plain ``set``/``remove``. The fallback
  store and :class:`~datamanager.DataManager` itself are read/write storages.
* :class:`CapabilityStore` is a storage strategy plugged into a manager. It
  tells which identifiers it is *able* to own and which ones it *depends*
  on, and it is told on every mutation whether it is the owner.

While several capability stores can depend on the same identifier, only one
of them stores the authoritative value. No capability store is assumed to
know about the others: the manager decides who owns what and passes that
decision as the ``is_owner`` flag. A store that is not the owner should only
update its own derived state.

These are structural protocols, so any object with the right methods
qualifies; no base class is required.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Storage(Protocol):
    """Read access to stored data."""

    def get(self, key: Hashable) -> Any:
        """Return the data stored for *key*, or ``None``."""
        ...


@runtime_checkable
class ReadWriteStorage(Storage, Protocol):
    """A :class:`Storage` that can also be written to."""

    def set(self, key: Hashable, value: Any) -> None:
        """Store *value* under *key*."""
        ...

    def remove(self, key: Hashable) -> Any:
        """Delete *key* and return the value it had, or ``None``."""
        ...


@runtime_checkable
class CapabilityStore(Storage, Protocol):
    """A pluggable storage strategy."""

    def is_storable(self, key: Hashable) -> bool:
        """Return ``True`` if this store is able to own the data of *key*."""
        ...

    def is_dependee(self, key: Hashable) -> bool:
        """Return ``True`` if this store must be told when *key* changes."""
        ...

    def set(self, key: Hashable, value: Any, is_owner: bool) -> None:
        """Record a new value for *key*.

        When *is_owner* is true the store keeps *value* as the authoritative
        copy. In every case it refreshes whatever derived state depends on
        *key*.
        """
        ...

    def remove(self, key: Hashable, is_owner: bool) -> Any:
        """Forget *key*.

        Returns the authoritative value when *is_owner* is true, ``None``
        otherwise.
        """
        ...


_CAPABILITY_METHODS = ("get", "set", "remove", "is_storable", "is_dependee")
_READ_WRITE_METHODS = ("get", "set", "remove")


def missing_capabilities(obj: object) -> tuple[str, ...]:
    """Return the :class:`CapabilityStore` methods *obj* lacks."""
    return tuple(name for name in _CAPABILITY_METHODS if not callable(getattr(obj, name, None)))


def missing_read_write(obj: object) -> tuple[str, ...]:
    """Return the :class:`ReadWriteStorage` methods *obj* lacks."""
    return tuple(name for name in _READ_WRITE_METHODS if not callable(getattr(obj, name, None)))
