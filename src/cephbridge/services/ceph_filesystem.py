# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

import logging
from typing import Iterator, List, Mapping, Optional, Union

from ..adapters.streams.native_stream import NativeInputStream, NativeOutputStream
from ..domain.config import BridgeConfig
from ..domain.models import BlockLocation, CreateFlag, FileStatus, FsStatistics, FsStatus
from ..ports.filesystem import FilesystemPort, Progress
from ..ports.native_client import NativeClientPort
from . import translation
from .connection import ConnectionManager
from .directory_ops import DirectoryEngine
from .handles import HandleFactory
from .metadata import MetadataTranslator
from .path_resolver import PathResolver

logger = logging.getLogger(__name__)

DEFAULT_REPLICATION = 1


class CephFileSystem(FilesystemPort):
    """
    Hierarchical filesystem backed by a Ceph native client.

    This does not start a cluster; one must already be running and reachable
    through the given client. Usage:

        fs = CephFileSystem(client)
        fs.initialize("ceph://mon:6789/", {"fs.ceph.monAddr": "mon:6789"})
        with fs.create("/data/part-0") as out:
            out.write(b"...")
        fs.close()

    Every public call resolves its path first, then talks to the native
    client through the connection; none of them work before initialize().
    """

    def __init__(self, client: NativeClientPort) -> None:
        self._conn = ConnectionManager(client)
        self.statistics = FsStatistics()
        self._resolver = PathResolver(self._conn)
        self._meta = MetadataTranslator(self._conn)
        self._handles = HandleFactory(self._conn, self.statistics)
        self._engine = DirectoryEngine(
            self._conn, self._meta, self._handles, statistics=self.statistics
        )

    # --- lifecycle ----------------------------------------------------------

    def initialize(self, uri: str, config: Union[BridgeConfig, Mapping[str, str]]) -> None:
        if not isinstance(config, BridgeConfig):
            config = BridgeConfig.from_mapping(config)
        self._conn.initialize(uri, config)

    def close(self) -> None:
        self._conn.close(release=self._handles.release_all)

    def __enter__(self) -> CephFileSystem:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._conn.ready:
            self.close()

    @property
    def connection(self) -> ConnectionManager:
        return self._conn

    def get_uri(self) -> Optional[str]:
        if not self._conn.ready:
            return None
        return self._conn.uri

    def _abs(self, operation: str, path) -> str:
        self._conn.require_ready(operation)
        resolved = self._resolver.resolve(path)
        logger.debug("%s: enter with path %s (resolved %s)", operation, path, resolved)
        return resolved

    # --- working directory --------------------------------------------------

    def get_working_directory(self) -> str:
        cwd = self._conn.client("get_working_directory").getcwd()
        logger.debug("get_working_directory: %s", cwd)
        return self._resolver.qualify(cwd)

    def set_working_directory(self, path: str) -> None:
        abs_path = self._abs("set_working_directory", path)
        if not self._conn.client("set_working_directory").setcwd(abs_path):
            logger.warning("set_working_directory: setcwd failed on path %s", abs_path)

    # --- queries ------------------------------------------------------------

    def exists(self, path) -> bool:
        return self._engine.exists(self._abs("exists", path))

    def is_file(self, path) -> bool:
        return self._engine.is_file(self._abs("is_file", path))

    def is_directory(self, path) -> bool:
        return self._engine.is_directory(self._abs("is_directory", path))

    def get_file_status(self, path) -> FileStatus:
        return self._meta.stat(self._abs("get_file_status", path))

    def list_status(self, path) -> Optional[List[FileStatus]]:
        return self._engine.list_status(self._abs("list_status", path))

    def walk(self, path) -> Iterator[FileStatus]:
        return self._engine.walk(self._abs("walk", path))

    def get_status(self, path=None) -> FsStatus:
        return self._meta.stat_filesystem(self._abs("get_status", path))

    def get_file_block_locations(
        self, status: FileStatus, start: int, length: int
    ) -> List[BlockLocation]:
        abs_path = self._abs("get_file_block_locations", status.path)
        return self._engine.block_locations(abs_path, start, length)

    def get_default_replication(self) -> int:
        # Replication is set by cluster configuration, not per file here.
        self._conn.require_ready("get_default_replication")
        return DEFAULT_REPLICATION

    def get_default_block_size(self) -> int:
        return self._conn.config.block_size

    # --- mutations ----------------------------------------------------------

    def mkdirs(self, path, permission: int = 0o755) -> bool:
        return self._engine.mkdirs(self._abs("mkdirs", path), permission)

    def set_permission(self, path, permission: int) -> None:
        abs_path = self._abs("set_permission", path)
        ok = self._conn.client("set_permission").set_permission(abs_path, permission)
        translation.set_permission_result(ok, abs_path)

    def set_times(self, path, mtime: int, atime: int) -> None:
        abs_path = self._abs("set_times", path)
        code = self._conn.client("set_times").set_times(abs_path, mtime, atime)
        translation.set_times_result(code, abs_path)

    def create(
        self,
        path,
        permission: int = 0o644,
        flags: CreateFlag = CreateFlag.CREATE,
        progress: Optional[Progress] = None,
    ) -> NativeOutputStream:
        return self._engine.create(self._abs("create", path), permission, flags, progress)

    def append(self, path, progress: Optional[Progress] = None) -> NativeOutputStream:
        return self._engine.append(self._abs("append", path), progress)

    def open(self, path) -> NativeInputStream:
        return self._engine.open(self._abs("open", path))

    def rename(self, src, dst) -> bool:
        abs_src = self._abs("rename", src)
        abs_dst = self._resolver.resolve(dst)
        result = self._conn.client("rename").rename(abs_src, abs_dst)
        logger.debug("rename: %s -> %s returned %s", abs_src, abs_dst, result)
        return result

    def delete(self, path, recursive: bool = False) -> bool:
        return self._engine.delete(self._abs("delete", path), recursive)
