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

import errno
import logging
import os
import posixpath
import shlex
import stat as stat_mod
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ...domain.models import NativeStat, NativeStatFs
from ...ports.native_client import NativeClientPort

logger = logging.getLogger(__name__)


def _neg(e: OSError) -> int:
    return -(e.errno or errno.EIO)


class LocalNativeClient(NativeClientPort):
    """
    Native client that keeps the "cluster" in a local directory.

    Behaves like the real client at the call surface:
      - failures come back as False / None / negative errno, never as exceptions
      - directories can be opened for read
      - `listdir` omits '.' and '..' and returns None for non-directories
      - `mkdirs` is `mkdir -p`; a file in the way gives -EEXIST
      - '..' and '.' are collapsed here, and never escape the root
      - symlinks are entries in their own right: they report as files, are
        never listed through or opened through, and unlink removes the link
      - a path whose parent resolves outside the root fails with -EACCES

    Open handles are tracked in `open_handles` so tests can check for leaks.
    """

    def __init__(self, root: Union[str, Path], host: str = "localhost") -> None:
        self._root = Path(root)
        self._host = host
        self._cwd = "/"
        self._block_size = 0
        self._arguments: list[str] = []
        self._handles: set[int] = set()
        self.readahead: Optional[int] = None
        self.monitor: Optional[str] = None
        self.running = False

    # --- session ------------------------------------------------------------

    def initialize_client(self, arguments: str, block_size: int) -> bool:
        try:
            self._arguments = shlex.split(arguments)
        except ValueError as e:
            logger.warning("LocalNativeClient: bad startup arguments %r: %s", arguments, e)
            return False
        if not self._root.is_dir():
            logger.warning("LocalNativeClient: root %s is not a directory", self._root)
            return False

        it = iter(self._arguments)
        for tok in it:
            if tok == "-m":
                self.monitor = next(it, None)
            elif tok.startswith("--client-readahead-max-periods="):
                self.readahead = int(tok.split("=", 1)[1])

        self._block_size = int(block_size)
        self._cwd = "/"
        self.running = True
        logger.debug("LocalNativeClient started at %s (%s)", self._root, arguments)
        return True

    def shutdown(self) -> bool:
        for fh in list(self._handles):
            self.close(fh)
        self.running = False
        return True

    @property
    def open_handles(self) -> frozenset[int]:
        return frozenset(self._handles)

    @property
    def arguments(self) -> list[str]:
        return list(self._arguments)

    # --- helpers ------------------------------------------------------------

    def _cluster_path(self, path: str) -> str:
        return posixpath.normpath(posixpath.join(self._cwd, path))

    def _local(self, path: str) -> str:
        cluster_path = self._cluster_path(path)
        local = str(self._root / cluster_path.lstrip("/"))
        if cluster_path != "/":
            root = os.path.realpath(self._root)
            parent = os.path.realpath(os.path.dirname(local))
            if os.path.commonpath([root, parent]) != root:
                raise PermissionError(errno.EACCES, "path leaves the cluster root", path)
        return local

    def _lmode(self, path: str) -> Optional[int]:
        try:
            return os.lstat(self._local(path)).st_mode
        except OSError:
            return None

    # --- namespace ----------------------------------------------------------

    def getcwd(self) -> str:
        return self._cwd

    def setcwd(self, path: str) -> bool:
        if not self.is_directory(path):
            return False
        self._cwd = self._cluster_path(path)
        return True

    def mkdir(self, path: str) -> bool:
        try:
            os.mkdir(self._local(path))
        except OSError:
            return False
        return True

    def mkdirs(self, path: str, mode: int) -> int:
        try:
            os.makedirs(self._local(path), mode=mode, exist_ok=True)
        except FileExistsError:
            return -errno.EEXIST
        except OSError as e:
            return _neg(e)
        return 0

    def rmdir(self, path: str) -> bool:
        try:
            os.rmdir(self._local(path))
        except OSError:
            return False
        return True

    def unlink(self, path: str) -> bool:
        try:
            os.unlink(self._local(path))
        except OSError:
            return False
        return True

    def rename(self, old_path: str, new_path: str) -> bool:
        try:
            os.rename(self._local(old_path), self._local(new_path))
        except OSError:
            return False
        return True

    def exists(self, path: str) -> bool:
        return self._lmode(path) is not None

    def is_directory(self, path: str) -> bool:
        mode = self._lmode(path)
        return mode is not None and stat_mod.S_ISDIR(mode)

    def is_file(self, path: str) -> bool:
        mode = self._lmode(path)
        return mode is not None and not stat_mod.S_ISDIR(mode)

    def get_block_size(self, path: str) -> int:
        if not self.exists(path):
            return -errno.ENOENT
        return self._block_size

    def listdir(self, path: str) -> Optional[List[str]]:
        if not self.is_directory(path):
            return None
        try:
            return sorted(os.listdir(self._local(path)))
        except OSError:
            return None

    # --- handles ------------------------------------------------------------

    def _open(self, path: str, flags: int, mode: int = 0o644) -> int:
        try:
            fh = os.open(self._local(path), flags | os.O_NOFOLLOW, mode)
        except OSError as e:
            return _neg(e)
        self._handles.add(fh)
        return fh

    def open_for_read(self, path: str) -> int:
        return self._open(path, os.O_RDONLY)

    def open_for_append(self, path: str) -> int:
        return self._open(path, os.O_WRONLY | os.O_APPEND)

    def open_for_overwrite(self, path: str, mode: int) -> int:
        return self._open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)

    def close(self, fh: int) -> int:
        if fh not in self._handles:
            return -errno.EBADF
        self._handles.discard(fh)
        try:
            os.close(fh)
        except OSError as e:
            return _neg(e)
        return 0

    def read(self, fh: int, length: int, offset: int) -> Union[bytes, int]:
        if fh not in self._handles:
            return -errno.EBADF
        try:
            return os.pread(fh, length, offset)
        except OSError as e:
            return _neg(e)

    def write(self, fh: int, data: bytes) -> int:
        if fh not in self._handles:
            return -errno.EBADF
        try:
            return os.write(fh, data)
        except OSError as e:
            return _neg(e)

    def hosts(self, fh: int, offset: int) -> Optional[str]:
        if fh not in self._handles or offset < 0:
            return None
        return self._host

    # --- metadata -----------------------------------------------------------

    def set_permission(self, path: str, mode: int) -> bool:
        if stat_mod.S_ISLNK(self._lmode(path) or 0):
            return False
        try:
            os.chmod(self._local(path), mode & 0o7777)
        except OSError:
            return False
        return True

    def set_times(self, path: str, mtime: int, atime: int) -> int:
        try:
            local = self._local(path)
            st = os.lstat(local)
            mtime_ns = st.st_mtime_ns if mtime < 0 else mtime * 1_000_000
            atime_ns = st.st_atime_ns if atime < 0 else atime * 1_000_000
            os.utime(local, ns=(atime_ns, mtime_ns), follow_symlinks=False)
        except OSError as e:
            return _neg(e)
        return 0

    def stat(self, path: str) -> Optional[NativeStat]:
        try:
            st = os.lstat(self._local(path))
        except OSError:
            return None
        return NativeStat(
            size=st.st_size,
            is_dir=stat_mod.S_ISDIR(st.st_mode),
            block_size=self._block_size,
            mod_time=st.st_mtime_ns // 1_000_000,
            access_time=st.st_atime_ns // 1_000_000,
            mode=st.st_mode,
        )

    def statfs(self, path: str) -> Tuple[int, Optional[NativeStatFs]]:
        # The cluster is not partitioned; `path` is ignored like the real client does.
        try:
            vfs = os.statvfs(self._root)
        except OSError as e:
            return _neg(e), None
        capacity = vfs.f_blocks * vfs.f_frsize
        used = (vfs.f_blocks - vfs.f_bfree) * vfs.f_frsize
        remaining = vfs.f_bavail * vfs.f_frsize
        return 0, NativeStatFs(capacity=capacity, used=used, remaining=remaining)

    def replication(self, path: str) -> int:
        if not self.exists(path):
            return -errno.ENOENT
        return 1
