"""Diagnostic reports emitted by the data manager.

These are observability only: nothing in the manager's behavior depends on
whether anyone reads them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AmbiguousOwnership(BaseModel):
    """Several capability stores were able to own the same identifier."""

    model_config = ConfigDict(frozen=True)

    key: Any = Field(..., description="Identifier being resolved")
    candidates: tuple[Any, ...] = Field(..., description="Eligible stores, in registration order")
    chosen: Any = Field(..., description="Store elected as owner")


class MigrationReport(BaseModel):
    """Outcome of registering or deregistering a capability store."""

    model_config = ConfigDict(frozen=True)

    store: str = Field(..., description="Log-safe rendering of the store")
    registered: bool = Field(..., description="True for registration, False for deregistration")
    changed: bool = Field(..., description="Whether the active store set was modified")
    reprocessed: bool = Field(default=False, description="Whether existing data was migrated")
    migrated: tuple[Any, ...] = Field(default=(), description="Identifiers whose value was removed and set again")
    invalidated: tuple[Any, ...] = Field(default=(), description="Identifiers whose cached owner was dropped")


class ManagerStats(BaseModel):
    """Point-in-time counters of a data manager."""

    model_config = ConfigDict(frozen=True)

    stores: int = 0
    known_ids: int = 0
    fallback_owned: int = 0
    ambiguous_resolutions: int = 0
