from .filesystem import FilesystemPort
from .native_client import NativeClientPort

__all__ = ["FilesystemPort", "NativeClientPort"]
