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

from abc import ABC, abstractmethod
from typing import BinaryIO, Callable, Iterator, List, Mapping, Optional, Union

from ..domain.config import BridgeConfig
from ..domain.models import BlockLocation, CreateFlag, FileStatus, FsStatus

Progress = Callable[[], None]


class FilesystemPort(ABC):
    """Abstract hierarchical filesystem, as consumed by the processing framework."""

    @abstractmethod
    def initialize(self, uri: str, config: Union[BridgeConfig, Mapping[str, str]]) -> None:
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_working_directory(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def set_working_directory(self, path: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def exists(self, path: Optional[str]) -> bool:
        raise NotImplementedError

    @abstractmethod
    def is_file(self, path: Optional[str]) -> bool:
        raise NotImplementedError

    @abstractmethod
    def is_directory(self, path: Optional[str]) -> bool:
        raise NotImplementedError

    @abstractmethod
    def mkdirs(self, path: Optional[str], permission: int = 0o755) -> bool:
        """Create a directory and any nonexistent parents."""
        raise NotImplementedError

    @abstractmethod
    def get_file_status(self, path: Optional[str]) -> FileStatus:
        raise NotImplementedError

    @abstractmethod
    def list_status(self, path: Optional[str]) -> Optional[List[FileStatus]]:
        """Statuses of the direct children; None when `path` is a file."""
        raise NotImplementedError

    @abstractmethod
    def walk(self, path: Optional[str]) -> Iterator[FileStatus]:
        """Recursively yield the status of every entry under `path`."""
        raise NotImplementedError

    @abstractmethod
    def set_permission(self, path: Optional[str], permission: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_times(self, path: Optional[str], mtime: int, atime: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def create(
        self,
        path: Optional[str],
        permission: int = 0o644,
        flags: CreateFlag = CreateFlag.CREATE,
        progress: Optional[Progress] = None,
    ) -> BinaryIO:
        raise NotImplementedError

    @abstractmethod
    def append(self, path: Optional[str], progress: Optional[Progress] = None) -> BinaryIO:
        raise NotImplementedError

    @abstractmethod
    def open(self, path: Optional[str]) -> BinaryIO:
        raise NotImplementedError

    @abstractmethod
    def rename(self, src: Optional[str], dst: Optional[str]) -> bool:
        raise NotImplementedError

    @abstractmethod
    def delete(self, path: Optional[str], recursive: bool = False) -> bool:
        raise NotImplementedError

    @abstractmethod
    def get_file_block_locations(
        self, status: FileStatus, start: int, length: int
    ) -> List[BlockLocation]:
        raise NotImplementedError

    @abstractmethod
    def get_status(self, path: Optional[str] = None) -> FsStatus:
        raise NotImplementedError

    @abstractmethod
    def get_default_replication(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def get_default_block_size(self) -> int:
        raise NotImplementedError
