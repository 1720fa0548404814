"""Manager configuration for datamanager."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from datamanager.exceptions import DataManagerConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_int(name: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise DataManagerConfigError(f"{name} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class DataManagerConfig:
    """Data manager configuration.

    Parameters
    ----------
    reprocess_by_default : bool
        Whether registering or deregistering a capability store migrates
        existing data when the caller does not say so explicitly.
    thread_safe : bool
        Guard the responsibility table, the active store set and the
        fallback store with a single re-entrant lock. When disabled the
        manager must only be used from one thread.
    warn_on_ambiguous : bool
        Emit a WARNING log when several stores can own the same identifier.
        The ``on_ambiguous_owner`` callback is invoked either way.
    describe_max_length : int
        Maximum length of identifier/store renderings in log messages.
        ``0`` disables truncation.
    """

    reprocess_by_default: bool = True
    thread_safe: bool = True
    warn_on_ambiguous: bool = True
    describe_max_length: int = 200

    def __post_init__(self) -> None:
        if self.describe_max_length < 0:
            raise DataManagerConfigError("describe_max_length must be >= 0")

    @classmethod
    def from_env(cls, **overrides: Any) -> DataManagerConfig:
        """Create configuration from environment variables.

        Reads ``DATAMANAGER_REPROCESS``, ``DATAMANAGER_THREAD_SAFE``,
        ``DATAMANAGER_WARN_ON_AMBIGUOUS`` and
        ``DATAMANAGER_DESCRIBE_MAX_LENGTH``. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        DataManagerConfig
            Populated configuration.
        """
        env = os.environ
        defaults = cls()

        _ENV_BOOL_MAP = {
            "DATAMANAGER_REPROCESS": "reprocess_by_default",
            "DATAMANAGER_THREAD_SAFE": "thread_safe",
            "DATAMANAGER_WARN_ON_AMBIGUOUS": "warn_on_ambiguous",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_BOOL_MAP.items():
            if field_name in overrides:
                continue
            config_kwargs[field_name] = _env_bool(env.get(env_key), getattr(defaults, field_name))

        length_env = env.get("DATAMANAGER_DESCRIBE_MAX_LENGTH")
        if length_env is not None and "describe_max_length" not in overrides:
            config_kwargs["describe_max_length"] = _env_int("DATAMANAGER_DESCRIBE_MAX_LENGTH", length_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
