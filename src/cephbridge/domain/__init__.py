from .config import BridgeConfig
from .errors import (
    AlreadyExistsError,
    CephBridgeError,
    ConfigurationError,
    DirectoryNotEmptyError,
    IllegalOperationError,
    InitializationError,
    IsDirectoryError,
    NotFoundError,
    NotInitializedError,
    OperationFailedError,
)
from .models import (
    ROOT,
    BlockLocation,
    CreateFlag,
    FileStatus,
    FsStatistics,
    FsStatus,
    NativeStat,
    NativeStatFs,
)

__all__ = [
    "ROOT",
    "AlreadyExistsError",
    "BlockLocation",
    "BridgeConfig",
    "CephBridgeError",
    "ConfigurationError",
    "CreateFlag",
    "DirectoryNotEmptyError",
    "FileStatus",
    "FsStatistics",
    "FsStatus",
    "IllegalOperationError",
    "InitializationError",
    "IsDirectoryError",
    "NativeStat",
    "NativeStatFs",
    "NotFoundError",
    "NotInitializedError",
    "OperationFailedError",
]
