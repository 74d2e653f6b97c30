from typing import Optional


class CephBridgeError(Exception):
    """Base exception for domain-specific errors."""

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        operation: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.operation = operation


class NotInitializedError(CephBridgeError):
    """An operation was attempted before initialize() or after close()."""


class ConfigurationError(CephBridgeError):
    """Missing or unusable configuration (e.g., no monitor address)."""


class InitializationError(CephBridgeError):
    """The native client reported a startup failure."""


class NotFoundError(CephBridgeError):
    """The path does not exist or could not be accessed."""


class AlreadyExistsError(CephBridgeError):
    """The path exists and the call does not allow replacing it."""


class IsDirectoryError(CephBridgeError):
    """A file operation was pointed at a directory."""


class DirectoryNotEmptyError(CephBridgeError):
    """Non-recursive delete of a directory."""


class IllegalOperationError(CephBridgeError):
    """Operations that are never allowed, such as deleting the root."""


class OperationFailedError(CephBridgeError):
    """Generic native failure; `code` holds the native return when there is one."""

    def __init__(
        self,
        message: str,
        *,
        code: Optional[int] = None,
        path: Optional[str] = None,
        operation: Optional[str] = None,
    ) -> None:
        super().__init__(message, path=path, operation=operation)
        self.code = code
