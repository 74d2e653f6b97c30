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
import posixpath
from typing import Iterator, List, Optional

from ..adapters.streams.native_stream import NativeInputStream, NativeOutputStream
from ..domain.errors import (
    AlreadyExistsError,
    DirectoryNotEmptyError,
    IllegalOperationError,
    IsDirectoryError,
    NotFoundError,
    OperationFailedError,
)
from ..domain.models import ROOT, BlockLocation, CreateFlag, FileStatus, FsStatistics
from ..ports.filesystem import Progress
from . import translation
from .connection import ConnectionManager
from .handles import HandleFactory
from .metadata import MetadataTranslator

logger = logging.getLogger(__name__)


def _tick(progress: Optional[Progress]) -> None:
    if progress is not None:
        progress()


def _search_bits(mode: int) -> int:
    """Directory mode for parents made by create(): add x wherever r is set."""
    return mode | ((mode & 0o444) >> 2)


class DirectoryEngine:
    """
    Composite operations the native client does not provide itself:
    create-with-parents, recursive listing and delete, and the
    existence-gated create/overwrite rules.

    All paths given here are canonical. Nothing is rolled back: a failing
    recursive delete or create can leave the tree half-done.
    """

    def __init__(
        self,
        connection: ConnectionManager,
        metadata: MetadataTranslator,
        handles: HandleFactory,
        statistics: Optional[FsStatistics] = None,
    ) -> None:
        self._conn = connection
        self._meta = metadata
        self._handles = handles
        self._stats = statistics

    def _count_large_read(self) -> None:
        if self._stats is not None:
            self._stats.increment_read_ops()
            self._stats.increment_large_read_ops()

    # --- predicates ---------------------------------------------------------

    def exists(self, path: str) -> bool:
        if path == ROOT:
            return True
        return self._conn.client("exists").exists(path)

    def is_file(self, path: str) -> bool:
        if path == ROOT:
            return False
        return self._conn.client("is_file").is_file(path)

    def is_directory(self, path: str) -> bool:
        if path == ROOT:
            return True
        return self._conn.client("is_directory").is_directory(path)

    # --- directories --------------------------------------------------------

    def mkdirs(self, path: str, permission: int) -> bool:
        code = self._conn.client("mkdirs").mkdirs(path, permission)
        logger.debug("mkdirs: %s -> %s", path, code)
        return translation.mkdirs_succeeded(code)

    def children(self, path: str) -> Optional[List[str]]:
        """Canonical paths of the direct children, or None if not a directory."""
        entries = self._conn.client("list").listdir(path)
        if entries is None:
            return None
        out = []
        for entry in entries:
            if entry in (".", ".."):
                continue
            out.append(entry if entry.startswith("/") else posixpath.join(path, entry))
        return out

    def list_status(self, path: str) -> Optional[List[FileStatus]]:
        children = self.children(path)
        if children is None:
            # Not a directory: a file is reported with the single-file signal.
            if self.is_file(path):
                logger.debug("list_status: %s is a file", path)
                return None
            raise NotFoundError(
                f"list_status: {path} does not exist", path=path, operation="list_status"
            )
        self._count_large_read()
        return [self._meta.stat(child) for child in children]

    def walk(self, path: str) -> Iterator[FileStatus]:
        """
        Pre-order walk over everything under `path` using an explicit stack.
        A file yields its own status.
        """
        top = self.list_status(path)
        if top is None:
            yield self._meta.stat(path)
            return
        stack = [iter(top)]
        while stack:
            status = next(stack[-1], None)
            if status is None:
                stack.pop()
                continue
            yield status
            if status.is_dir:
                below = self.list_status(status.path)
                if below:
                    stack.append(iter(below))

    # --- delete -------------------------------------------------------------

    def delete(self, path: str, recursive: bool) -> bool:
        if path == ROOT:
            raise IllegalOperationError(
                "Error: deleting the root directory is a Bad Idea.",
                path=path,
                operation="delete",
            )
        if not self.exists(path):
            return False

        client = self._conn.client("delete")
        if self.is_file(path):
            result = client.unlink(path)
            if not result:
                logger.debug('delete: failed to delete file "%s"', path)
            return result

        if not recursive:
            raise DirectoryNotEmptyError(
                "Directories must be deleted recursively!", path=path, operation="delete"
            )
        return self._delete_tree(path)

    def _delete_tree(self, top: str) -> bool:
        """
        Depth-first delete in listing order. Stops at the first failure and
        returns False; whatever was removed before that stays removed.
        """
        client = self._conn.client("delete")
        contents = self.children(top)
        if contents is None:
            logger.debug('delete: failed to read contents of "%s"', top)
            return False

        stack = [(top, iter(contents))]
        while stack:
            directory, pending = stack[-1]
            child = next(pending, None)
            if child is None:
                stack.pop()
                if not client.rmdir(directory):
                    logger.debug('delete: failed to remove directory "%s"', directory)
                    return False
                continue

            if not self.exists(child):
                logger.debug('delete: "%s" vanished while deleting "%s"', child, top)
                return False
            if self.is_file(child):
                if not client.unlink(child):
                    logger.debug('delete: failed to delete file "%s" under "%s"', child, top)
                    return False
                continue

            below = self.children(child)
            if below is None:
                logger.debug('delete: failed to read contents of "%s"', child)
                return False
            stack.append((child, iter(below)))
        return True

    # --- files --------------------------------------------------------------

    def create(
        self,
        path: str,
        permission: int,
        flags: CreateFlag,
        progress: Optional[Progress] = None,
    ) -> NativeOutputStream:
        _tick(progress)

        exists = self.exists(path)
        if exists:
            if self.is_directory(path):
                raise IsDirectoryError(
                    f'create: Cannot overwrite existing directory "{path}" with a file',
                    path=path,
                    operation="create",
                )
            if CreateFlag.OVERWRITE not in flags:
                raise AlreadyExistsError(
                    f'create: Cannot open existing file "{path}" for writing '
                    "without overwrite flag",
                    path=path,
                    operation="create",
                )

        client = self._conn.client("create")
        if not exists:
            parent = posixpath.dirname(path)
            if parent:
                code = client.mkdirs(parent, _search_bits(permission))
                translation.parent_mkdirs(code, parent)
            _tick(progress)

        fh = client.open_for_overwrite(path, permission)
        _tick(progress)
        logger.debug("create: open_for_overwrite %s -> %s", path, fh)
        translation.write_handle(fh, path, "overwrite")
        with self._handles.guarded(fh):
            return self._handles.output_stream(fh, path)

    def append(self, path: str, progress: Optional[Progress] = None) -> NativeOutputStream:
        _tick(progress)
        fh = self._conn.client("append").open_for_append(path)
        _tick(progress)
        translation.write_handle(fh, path, "append")
        with self._handles.guarded(fh):
            return self._handles.output_stream(fh, path)

    def open(self, path: str) -> NativeInputStream:
        fh = translation.read_handle(self._conn.client("open").open_for_read(path), path)
        with self._handles.guarded(fh):
            # The cluster lets directories be opened; files only here.
            if self.is_directory(path):
                raise IsDirectoryError(
                    f'open: absolute path "{path}" is a directory!',
                    path=path,
                    operation="open",
                )
            size = self._meta.size_of(path)
            if size < 0:
                raise OperationFailedError(
                    f"Failed to get file size for file {path} but succeeded "
                    "in opening file.",
                    path=path,
                    operation="open",
                )
            return self._handles.input_stream(fh, size, path)

    def block_locations(self, path: str, start: int, length: int) -> List[BlockLocation]:
        """
        One BlockLocation per block in the range.

        The count is ceil((length - start) / block_size), i.e. `length` is
        treated like an end offset. Callers passing a pure span past a
        non-zero start get fewer blocks than the span covers.
        """
        client = self._conn.client("get_file_block_locations")
        fh = client.open_for_read(path)
        if fh < 0:
            return []

        self._count_large_read()
        locations: List[BlockLocation] = []
        with self._handles.transient(fh):
            block_size = translation.block_size_result(client.get_block_size(path), path)
            count = max(0, -(-(length - start) // block_size))
            for i in range(count):
                offset = start + i * block_size
                host = client.hosts(fh, offset)
                hosts = (host,) if host else ()
                locations.append(BlockLocation(hosts=hosts, offset=offset, length=block_size))
        return locations
