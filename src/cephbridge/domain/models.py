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

import enum
from dataclasses import dataclass
from typing import Optional

ROOT = "/"


@dataclass(frozen=True)
class NativeStat:
    """Flat stat record as filled in by the native client. Times are millis."""
    size: int
    is_dir: bool
    block_size: int
    mod_time: int
    access_time: int
    mode: int


@dataclass(frozen=True)
class NativeStatFs:
    capacity: int
    used: int
    remaining: int


@dataclass(frozen=True)
class FileStatus:
    """
    Status record handed to the framework.

    Owner and group stay None: the cluster has no equivalent concept.
    """
    path: str
    size: int
    is_dir: bool
    replication: int
    block_size: int
    modification_time: int
    access_time: int
    permission: int
    owner: Optional[str] = None
    group: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return not self.is_dir


@dataclass(frozen=True)
class FsStatus:
    capacity: int
    used: int
    remaining: int


@dataclass(frozen=True)
class BlockLocation:
    hosts: tuple[str, ...]
    offset: int
    length: int


class CreateFlag(enum.Flag):
    CREATE = enum.auto()
    OVERWRITE = enum.auto()


@dataclass
class FsStatistics:
    """
    Per-filesystem I/O counters. Streams count bytes and read/write ops;
    directory listings and block-location lookups count as large read ops.
    """
    bytes_read: int = 0
    bytes_written: int = 0
    read_ops: int = 0
    large_read_ops: int = 0
    write_ops: int = 0

    def increment_bytes_read(self, n: int) -> None:
        self.bytes_read += n

    def increment_bytes_written(self, n: int) -> None:
        self.bytes_written += n

    def increment_read_ops(self, n: int = 1) -> None:
        self.read_ops += n

    def increment_large_read_ops(self, n: int = 1) -> None:
        self.large_read_ops += n

    def increment_write_ops(self, n: int = 1) -> None:
        self.write_ops += n

    def reset(self) -> None:
        self.bytes_read = 0
        self.bytes_written = 0
        self.read_ops = 0
        self.large_read_ops = 0
        self.write_ops = 0
