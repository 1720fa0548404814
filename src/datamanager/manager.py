"""Data manager: routes identifiers to the store responsible for them.

The manager acts like a mapping from identifiers to values. Capability
stores can be plugged in to store some identifiers in a smarter way, or to
maintain data derived from what is stored. As long as no capability store
claims an identifier, its value lives in the fallback store.

Each identifier has exactly one owner, elected on first access and cached
in a :class:`~datamanager.responsibility.ResponsibilityTable`. Every
mutation is fanned out to the stores depending on the identifier, with the
``is_owner`` flag telling each of them whether it holds the authoritative
copy.
"""

from __future__ import annotations

import contextlib
import logging
import threading
from collections.abc import Callable, Hashable
from typing import Any

from datamanager._describe import describe, describe_all
from datamanager.config import DataManagerConfig
from datamanager.exceptions import StoreContractError
from datamanager.fallback import MemoryStorage
from datamanager.reports import AmbiguousOwnership, ManagerStats, MigrationReport
from datamanager.responsibility import ResponsibilityTable
from datamanager.storage import (
    CapabilityStore,
    ReadWriteStorage,
    missing_capabilities,
    missing_read_write,
)

_logger = logging.getLogger(__name__)

AmbiguityCallback = Callable[[AmbiguousOwnership], None]


class DataManager:
    """Uniform read/write access over a dynamic set of capability stores.

    Parameters
    ----------
    config : DataManagerConfig or None
        Behavior switches. Defaults to ``DataManagerConfig()``.
    fallback : ReadWriteStorage or None
        Storage used for identifiers no capability store can own. A fresh
        :class:`~datamanager.fallback.MemoryStorage` by default.
    on_ambiguous_owner : callable or None
        Called with an :class:`~datamanager.reports.AmbiguousOwnership`
        whenever several stores can own the same identifier.

    Ownership is resolved once per identifier. When several capability
    stores can own it, the earliest registered one wins and the situation
    is reported, but this is not an error.

    The manager is itself a :class:`~datamanager.storage.ReadWriteStorage`,
    so it can be used as the fallback of another manager.
    """

    def __init__(
        self,
        config: DataManagerConfig | None = None,
        *,
        fallback: ReadWriteStorage | None = None,
        on_ambiguous_owner: AmbiguityCallback | None = None,
    ) -> None:
        self._config = config or DataManagerConfig()
        if fallback is None:
            fallback = MemoryStorage()
        else:
            missing = missing_read_write(fallback)
            if missing:
                raise StoreContractError(
                    f"Fallback {self._describe(fallback)} is not a read/write storage "
                    f"(missing: {', '.join(missing)})",
                    missing=missing,
                )
        self._fallback: ReadWriteStorage = fallback
        # Keyed by id() so stores are compared by identity; insertion order is the tie-break.
        self._stores: dict[int, CapabilityStore] = {}
        self._responsibilities = ResponsibilityTable()
        self._on_ambiguous_owner = on_ambiguous_owner
        self._ambiguous_resolutions = 0
        self._lock: contextlib.AbstractContextManager[Any] = (
            threading.RLock() if self._config.thread_safe else contextlib.nullcontext()
        )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def config(self) -> DataManagerConfig:
        return self._config

    @property
    def fallback(self) -> ReadWriteStorage:
        """The storage used when no capability store owns an identifier."""
        return self._fallback

    @property
    def stores(self) -> tuple[CapabilityStore, ...]:
        """Registered capability stores, in registration order."""
        with self._lock:
            return tuple(self._stores.values())

    def known_ids(self) -> list[Hashable]:
        """Identifiers with a cached owner."""
        with self._lock:
            return self._responsibilities.keys()

    def stats(self) -> ManagerStats:
        with self._lock:
            return ManagerStats(
                stores=len(self._stores),
                known_ids=len(self._responsibilities),
                fallback_owned=len(self._responsibilities.owned_by(self._fallback)),
                ambiguous_resolutions=self._ambiguous_resolutions,
            )

    def responsible_for(self, key: Hashable) -> CapabilityStore | ReadWriteStorage:
        """Return the owner of *key*, resolving and caching it if needed."""
        with self._lock:
            return self._resolve(key)

    def is_fallback_owner(self, key: Hashable) -> bool:
        return self.responsible_for(key) is self._fallback

    # ------------------------------------------------------------------
    # Read / write
    # ------------------------------------------------------------------

    def get(self, key: Hashable) -> Any:
        """Return the value of *key*, or ``None`` if nothing is stored."""
        with self._lock:
            return self._resolve(key).get(key)

    def set(self, key: Hashable, value: Any) -> None:
        """Store *value* under *key* and notify every dependee store."""
        with self._lock:
            owner = self._resolve(key)
            self._fan_out_set(key, value, owner)

    def remove(self, key: Hashable) -> Any:
        """Remove *key* everywhere and return the owner's value.

        Removing an identifier that holds nothing is a no-op returning
        ``None``.
        """
        with self._lock:
            owner = self._resolve(key)
            removed = self._fan_out_remove(key, owner)
            self._responsibilities.invalidate(key)
            return removed

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_capability_store(self, store: CapabilityStore, reprocess: bool | None = None) -> MigrationReport:
        """Register *store*.

        With *reprocess*, the data already known is replayed so that the new
        store can take ownership of what it is able to store and build its
        derived state from what it depends on. This touches every known
        identifier, which can be costly, but keeps the manager consistent.
        Registering a store twice is a no-op.
        """
        missing = missing_capabilities(store)
        if missing:
            raise StoreContractError(
                f"{self._describe(store)} is not a capability store (missing: {', '.join(missing)})",
                missing=missing,
            )
        reprocess = self._reprocess(reprocess)
        label = self._describe(store)

        with self._lock:
            if id(store) in self._stores:
                _logger.debug("Capability store already registered: %s", label)
                return MigrationReport(store=label, registered=True, changed=False)
            self._stores[id(store)] = store
            _logger.debug("Registered capability store %s reprocess=%s", label, reprocess)
            if not reprocess:
                return MigrationReport(store=label, registered=True, changed=True)

            staged: dict[Hashable, Any] = {}
            invalidated: list[Hashable] = []
            for key in self._responsibilities.keys():
                storable = store.is_storable(key)
                if storable or store.is_dependee(key):
                    staged[key] = self.remove(key)
                if storable:
                    self._responsibilities.invalidate(key)
                    invalidated.append(key)
            migrated = self._replay(staged)

        _logger.debug(
            "Reprocessed %d identifiers (%d invalidated) for %s",
            len(migrated),
            len(invalidated),
            label,
        )
        return MigrationReport(
            store=label,
            registered=True,
            changed=True,
            reprocessed=True,
            migrated=migrated,
            invalidated=tuple(invalidated),
        )

    def remove_capability_store(self, store: CapabilityStore, reprocess: bool | None = None) -> MigrationReport:
        """Deregister *store*.

        With *reprocess*, the values *store* owns are taken back from it and
        stored again, so a new owner (possibly the fallback) is elected and
        nothing is lost. Without it, identifiers cached against *store* keep
        pointing at it. Deregistering an unknown store is a no-op.
        """
        reprocess = self._reprocess(reprocess)
        label = self._describe(store)

        with self._lock:
            if self._stores.pop(id(store), None) is None:
                _logger.debug("Capability store not registered: %s", label)
                return MigrationReport(store=label, registered=False, changed=False)
            _logger.debug("Deregistered capability store %s reprocess=%s", label, reprocess)
            if not reprocess:
                return MigrationReport(store=label, registered=False, changed=True)

            staged: dict[Hashable, Any] = {}
            for key in self._responsibilities.owned_by(store):
                staged[key] = self._fan_out_remove(key, store)
                self._responsibilities.invalidate(key)
            migrated = self._replay(staged)

        _logger.debug("Reprocessed %d identifiers owned by %s", len(migrated), label)
        return MigrationReport(
            store=label,
            registered=False,
            changed=True,
            reprocessed=True,
            migrated=migrated,
            invalidated=tuple(staged),
        )

    # ------------------------------------------------------------------
    # Internals (callers hold the lock)
    # ------------------------------------------------------------------

    def _resolve(self, key: Hashable) -> Any:
        owner = self._responsibilities.lookup(key)
        if owner is not None:
            return owner

        candidates = [store for store in self._stores.values() if store.is_storable(key)]
        if not candidates:
            owner = self._fallback
        else:
            owner = candidates[0]
            if len(candidates) > 1:
                self._report_ambiguity(key, candidates, owner)
        self._responsibilities.assign(key, owner)
        return owner

    def _report_ambiguity(self, key: Hashable, candidates: list[CapabilityStore], chosen: CapabilityStore) -> None:
        self._ambiguous_resolutions += 1
        if self._config.warn_on_ambiguous:
            max_length = self._config.describe_max_length
            _logger.warning(
                "Several responsible candidates for %s: %s; taking the earliest registered: %s",
                describe(key, max_length=max_length),
                describe_all(candidates, max_length=max_length),
                describe(chosen, max_length=max_length),
            )
        if self._on_ambiguous_owner is None:
            return
        try:
            self._on_ambiguous_owner(AmbiguousOwnership(key=key, candidates=tuple(candidates), chosen=chosen))
        except Exception:
            _logger.debug("on_ambiguous_owner callback failed", exc_info=True)

    def _fan_out_set(self, key: Hashable, value: Any, owner: Any) -> None:
        for store in list(self._stores.values()):
            is_owner = store is owner
            if is_owner or store.is_dependee(key):
                store.set(key, value, is_owner)
        if owner is self._fallback:
            self._fallback.set(key, value)
        elif id(owner) not in self._stores:
            # Cached owner was deregistered without reprocessing; it still holds the data.
            owner.set(key, value, True)

    def _fan_out_remove(self, key: Hashable, owner: Any) -> Any:
        removed = None
        for store in list(self._stores.values()):
            is_owner = store is owner
            if is_owner or store.is_dependee(key):
                result = store.remove(key, is_owner)
                if is_owner:
                    removed = result
        if owner is self._fallback:
            removed = self._fallback.remove(key)
        elif id(owner) not in self._stores:
            removed = owner.remove(key, True)
        return removed

    def _replay(self, staged: dict[Hashable, Any]) -> tuple[Hashable, ...]:
        """Set every staged pair again and return the identifiers that were set.

        A pair whose ``set`` fails is parked in the fallback store so the
        value stays readable; the remaining pairs are still replayed and the
        first error is raised at the end.
        """
        replayed: list[Hashable] = []
        first_error: Exception | None = None
        for key, value in staged.items():
            if value is None:
                # Nothing was stored; setting None would only plant an empty entry.
                continue
            try:
                self.set(key, value)
            except Exception as exc:
                _logger.warning(
                    "Replaying %s failed; keeping its value in the fallback store",
                    self._describe(key),
                    exc_info=True,
                )
                self._responsibilities.assign(key, self._fallback)
                self._fallback.set(key, value)
                if first_error is None:
                    first_error = exc
                continue
            replayed.append(key)
        if first_error is not None:
            raise first_error
        return tuple(replayed)

    def _reprocess(self, reprocess: bool | None) -> bool:
        if reprocess is None:
            return self._config.reprocess_by_default
        return reprocess

    def _describe(self, value: Any) -> str:
        return describe(value, max_length=self._config.describe_max_length)

    def __repr__(self) -> str:
        return f"DataManager(stores={len(self._stores)}, known_ids={len(self._responsibilities)})"
