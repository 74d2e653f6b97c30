# Licensed under the Apache License, Version 2.0
from __future__ import annotations

import io
import logging
from typing import Optional

from ...domain.errors import OperationFailedError
from ...domain.models import FsStatistics
from ...ports.native_client import NativeClientPort

logger = logging.getLogger(__name__)


class _NativeStream(io.RawIOBase):
    """Owns one native handle and closes it exactly once."""

    def __init__(
        self,
        client: NativeClientPort,
        fh: int,
        path: str,
        statistics: Optional[FsStatistics] = None,
    ) -> None:
        super().__init__()
        self._client = client
        self._fh = fh
        self._path = path
        self._stats = statistics

    @property
    def handle(self) -> int:
        return self._fh

    @property
    def path(self) -> str:
        return self._path

    def close(self) -> None:
        if self.closed:
            return
        try:
            code = self._client.close(self._fh)
            if code is not None and code < 0:
                logger.warning("close of handle %s (%s) returned %s", self._fh, self._path, code)
        finally:
            super().close()


class NativeInputStream(_NativeStream):
    """Positional reader over a handle of known size."""

    def __init__(
        self,
        client: NativeClientPort,
        fh: int,
        size: int,
        path: str,
        statistics: Optional[FsStatistics] = None,
    ) -> None:
        super().__init__(client, fh, path, statistics)
        self._size = int(size)
        self._pos = 0

    @property
    def size(self) -> int:
        return self._size

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def tell(self) -> int:
        self._checkClosed()
        return self._pos

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._checkClosed()
        if whence == io.SEEK_SET:
            target = offset
        elif whence == io.SEEK_CUR:
            target = self._pos + offset
        elif whence == io.SEEK_END:
            target = self._size + offset
        else:
            raise ValueError(f"invalid whence: {whence}")
        if target < 0:
            raise ValueError(f"negative seek position {target}")
        self._pos = target
        return self._pos

    def readinto(self, b) -> int:
        self._checkClosed()
        want = min(len(b), self._size - self._pos)
        if want <= 0:
            return 0
        data = self._client.read(self._fh, want, self._pos)
        if isinstance(data, int):
            raise OperationFailedError(
                f"read failed on {self._path}", code=data, path=self._path, operation="read"
            )
        n = len(data)
        b[:n] = data
        self._pos += n
        if self._stats is not None:
            self._stats.increment_bytes_read(n)
            self._stats.increment_read_ops()
        return n


class NativeOutputStream(_NativeStream):
    """Sequential writer; the cluster buffers internally, so there is no local buffer."""

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        self._checkClosed()
        data = bytes(b)
        written = 0
        while written < len(data):
            r = self._client.write(self._fh, data[written:])
            if r < 0:
                raise OperationFailedError(
                    f"write failed on {self._path}", code=r, path=self._path, operation="write"
                )
            if r == 0:
                raise OperationFailedError(
                    f"write made no progress on {self._path}", path=self._path, operation="write"
                )
            written += r
        if self._stats is not None:
            self._stats.increment_bytes_written(written)
            self._stats.increment_write_ops()
        return written
