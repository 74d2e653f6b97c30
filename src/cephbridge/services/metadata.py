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

import logging

from ..domain.models import ROOT, FileStatus, FsStatus
from . import translation
from .connection import ConnectionManager

logger = logging.getLogger(__name__)

ROOT_PERMISSION = 0o755


class MetadataTranslator:
    """
    Builds FileStatus / FsStatus records from native stat structures.
    Paths given here are already canonical; nothing is cached.
    """

    def __init__(self, connection: ConnectionManager) -> None:
        self._conn = connection

    def root_status(self) -> FileStatus:
        return FileStatus(
            path=ROOT,
            size=0,
            is_dir=True,
            replication=1,
            block_size=self._conn.config.block_size,
            modification_time=0,
            access_time=0,
            permission=ROOT_PERMISSION,
        )

    def stat(self, path: str) -> FileStatus:
        if path == ROOT:
            return self.root_status()

        client = self._conn.client("get_file_status")
        st = translation.stat_result(client.stat(path), path)
        replication = translation.replication_result(client.replication(path), path)
        logger.debug("stat: %s size=%s dir=%s", path, st.size, st.is_dir)
        return FileStatus(
            path=path,
            size=st.size,
            is_dir=st.is_dir,
            replication=replication,
            block_size=st.block_size,
            modification_time=st.mod_time,
            access_time=st.access_time,
            permission=st.mode & 0o7777,
        )

    def size_of(self, path: str) -> int:
        """Size of an opened file, or -1 when the native stat comes back empty."""
        st = self._conn.client("open").stat(path)
        return st.size if st is not None else -1

    def stat_filesystem(self, path: str) -> FsStatus:
        # The cluster ignores the path today; it is passed through anyway.
        client = self._conn.client("get_status")
        return translation.statfs_result(client.statfs(path), path)
