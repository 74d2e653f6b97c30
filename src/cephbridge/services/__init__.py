from .ceph_filesystem import CephFileSystem
from .connection import ConnectionManager, ConnectionState
from .directory_ops import DirectoryEngine
from .handles import HandleFactory
from .metadata import MetadataTranslator
from .path_resolver import PathResolver


__all__ = [
    'CephFileSystem',
    'ConnectionManager',
    'ConnectionState',
    'DirectoryEngine',
    'HandleFactory',
    'MetadataTranslator',
    'PathResolver',
]
