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

"""
One translation per native call shape: raw native return in, value or
domain error out. Call sites must not interpret native codes themselves.
"""

import errno
from typing import Optional, Tuple

from ..domain.errors import NotFoundError, OperationFailedError
from ..domain.models import FsStatus, NativeStat, NativeStatFs


def read_handle(fh: int, path: str) -> int:
    if fh == -errno.ENOENT:
        raise NotFoundError(
            f'open: absolute path "{path}" does not exist', path=path, operation="open"
        )
    if fh < 0:
        raise OperationFailedError(
            f"open: Failed to open file {path}", code=fh, path=path, operation="open"
        )
    return fh


def write_handle(fh: int, path: str, operation: str) -> int:
    """Append and overwrite opens: any negative handle is a failure."""
    if fh < 0:
        raise OperationFailedError(
            f'{operation}: Open for {operation} failed on path "{path}"',
            code=fh,
            path=path,
            operation=operation,
        )
    return fh


def mkdirs_succeeded(code: int) -> bool:
    return code == 0


def parent_mkdirs(code: int, path: str) -> None:
    """Parent creation inside create(): a concurrent creator's EEXIST is fine."""
    if code == 0 or code == -errno.EEXIST:
        return
    raise OperationFailedError(
        f"Error creating parent directory {path}; code: {code}",
        code=code,
        path=path,
        operation="create",
    )


def stat_result(st: Optional[NativeStat], path: str) -> NativeStat:
    if st is None:
        raise NotFoundError(
            f"File {path} does not exist or could not be accessed",
            path=path,
            operation="stat",
        )
    return st


def replication_result(replication: int, path: str) -> int:
    if replication < 0:
        raise NotFoundError(
            f"File {path} disappeared while reading its replication",
            path=path,
            operation="stat",
        )
    return replication


def statfs_result(result: Tuple[int, Optional[NativeStatFs]], path: str) -> FsStatus:
    code, fill = result
    if code != 0 or fill is None:
        raise OperationFailedError(
            f"Somehow failed to statfs the Ceph filesystem. Error code: {code}",
            code=code,
            path=path,
            operation="statfs",
        )
    return FsStatus(capacity=fill.capacity, used=fill.used, remaining=fill.remaining)


def set_times_result(code: int, path: str) -> None:
    if code != 0:
        raise OperationFailedError(
            f"Failed to set times on path {path} Error code: {code}",
            code=code,
            path=path,
            operation="set_times",
        )


def set_permission_result(ok: bool, path: str) -> None:
    if not ok:
        raise OperationFailedError(
            f"Failed to set permission on path {path}",
            path=path,
            operation="set_permission",
        )


def block_size_result(block_size: int, path: str) -> int:
    if block_size <= 0:
        raise OperationFailedError(
            f"Failed to get block size for {path}",
            code=block_size,
            path=path,
            operation="get_file_block_locations",
        )
    return block_size
