from __future__ import annotations

import pytest

from datamanager import DataManagerConfig, DataManagerConfigError


def test_defaults() -> None:
    config = DataManagerConfig()

    assert config.reprocess_by_default is True
    assert config.thread_safe is True
    assert config.warn_on_ambiguous is True
    assert config.describe_max_length == 200


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATAMANAGER_REPROCESS", "no")
    monkeypatch.setenv("DATAMANAGER_THREAD_SAFE", "OFF")
    monkeypatch.setenv("DATAMANAGER_WARN_ON_AMBIGUOUS", " 0 ")
    monkeypatch.setenv("DATAMANAGER_DESCRIBE_MAX_LENGTH", "32")

    config = DataManagerConfig.from_env()

    assert config.reprocess_by_default is False
    assert config.thread_safe is False
    assert config.warn_on_ambiguous is False
    assert config.describe_max_length == 32


def test_from_env_unrecognised_bool_keeps_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATAMANAGER_REPROCESS", "maybe")
    monkeypatch.delenv("DATAMANAGER_THREAD_SAFE", raising=False)

    config = DataManagerConfig.from_env()

    assert config.reprocess_by_default is True
    assert config.thread_safe is True


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATAMANAGER_REPROCESS", "false")
    monkeypatch.setenv("DATAMANAGER_DESCRIBE_MAX_LENGTH", "not-a-number")

    config = DataManagerConfig.from_env(reprocess_by_default=True, describe_max_length=10)

    assert config.reprocess_by_default is True
    assert config.describe_max_length == 10


def test_from_env_invalid_length_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATAMANAGER_DESCRIBE_MAX_LENGTH", "lots")

    with pytest.raises(DataManagerConfigError, match="DATAMANAGER_DESCRIBE_MAX_LENGTH"):
        DataManagerConfig.from_env()


def test_negative_length_rejected() -> None:
    with pytest.raises(DataManagerConfigError):
        DataManagerConfig(describe_max_length=-1)
