"""datamanager - key/value storage routed across pluggable capability stores."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("datamanager")
except PackageNotFoundError:
    __version__ = "0+local"
from datamanager.config import DataManagerConfig
from datamanager.exceptions import (
    DataManagerConfigError,
    DataManagerError,
    StoreContractError,
)
from datamanager.fallback import MemoryStorage
from datamanager.manager import DataManager
from datamanager.reports import AmbiguousOwnership, ManagerStats, MigrationReport
from datamanager.responsibility import ResponsibilityTable
from datamanager.storage import CapabilityStore, ReadWriteStorage, Storage

__all__ = [
    "__version__",
    "AmbiguousOwnership",
    "CapabilityStore",
    "DataManager",
    "DataManagerConfig",
    "DataManagerConfigError",
    "DataManagerError",
    "ManagerStats",
    "MemoryStorage",
    "MigrationReport",
    "ReadWriteStorage",
    "ResponsibilityTable",
    "Storage",
    "StoreContractError",
]
