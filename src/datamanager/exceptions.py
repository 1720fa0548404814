"""Custom exception hierarchy for datamanager."""

from __future__ import annotations


class DataManagerError(Exception):
    """Base exception for all datamanager errors."""


class DataManagerConfigError(DataManagerError):
    """Invalid or missing configuration."""


class StoreContractError(DataManagerError, TypeError):
    """An object does not satisfy the storage contract it is used for.

    Raised when registering something that is not a capability store, or
    when the fallback store handed to :class:`~datamanager.DataManager`
    lacks the read/write methods.
    """

    def __init__(self, message: str, *, missing: tuple[str, ...] = ()) -> None:
        self.missing = missing
        super().__init__(message)
