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
from typing import List, Optional, Tuple, Union

from ..domain.models import NativeStat, NativeStatFs


class NativeClientPort(ABC):
    """
    Abstract interface for the cluster's native client.

    Calls mirror the C-style surface: booleans, integer codes (0 or a
    negative errno) and file handles that are negative on failure.
    Translation into domain errors happens above this port.
    """

    @abstractmethod
    def initialize_client(self, arguments: str, block_size: int) -> bool:
        """Start a session with the given startup string."""
        raise NotImplementedError

    @abstractmethod
    def shutdown(self) -> bool:
        """Terminate the session."""
        raise NotImplementedError

    @abstractmethod
    def getcwd(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def setcwd(self, path: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def mkdir(self, path: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def mkdirs(self, path: str, mode: int) -> int:
        """Create `path` and any missing parents. Returns 0 or a negative errno."""
        raise NotImplementedError

    @abstractmethod
    def rmdir(self, path: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def unlink(self, path: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def rename(self, old_path: str, new_path: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def exists(self, path: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def is_directory(self, path: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def is_file(self, path: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def get_block_size(self, path: str) -> int:
        raise NotImplementedError

    @abstractmethod
    def listdir(self, path: str) -> Optional[List[str]]:
        """Directory entries without '.' and '..'; None if `path` is not a directory."""
        raise NotImplementedError

    @abstractmethod
    def open_for_read(self, path: str) -> int:
        raise NotImplementedError

    @abstractmethod
    def open_for_append(self, path: str) -> int:
        raise NotImplementedError

    @abstractmethod
    def open_for_overwrite(self, path: str, mode: int) -> int:
        raise NotImplementedError

    @abstractmethod
    def close(self, fh: int) -> int:
        raise NotImplementedError

    @abstractmethod
    def read(self, fh: int, length: int, offset: int) -> Union[bytes, int]:
        """Positional read. Returns data, or a negative errno."""
        raise NotImplementedError

    @abstractmethod
    def write(self, fh: int, data: bytes) -> int:
        """Write at the handle's position. Returns bytes written, or a negative errno."""
        raise NotImplementedError

    @abstractmethod
    def set_permission(self, path: str, mode: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    def set_times(self, path: str, mtime: int, atime: int) -> int:
        """Times are millis since the epoch; -1 leaves a value unchanged."""
        raise NotImplementedError

    @abstractmethod
    def stat(self, path: str) -> Optional[NativeStat]:
        raise NotImplementedError

    @abstractmethod
    def statfs(self, path: str) -> Tuple[int, Optional[NativeStatFs]]:
        raise NotImplementedError

    @abstractmethod
    def replication(self, path: str) -> int:
        raise NotImplementedError

    @abstractmethod
    def hosts(self, fh: int, offset: int) -> Optional[str]:
        """Host serving the block that contains `offset`."""
        raise NotImplementedError
