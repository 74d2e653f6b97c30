# Licensed under the Apache License, Version 2.0
from __future__ import annotations

import logging
import weakref
from contextlib import contextmanager
from typing import Iterator

from ..adapters.streams.native_stream import NativeInputStream, NativeOutputStream
from ..domain.models import FsStatistics
from .connection import ConnectionManager

logger = logging.getLogger(__name__)


class HandleFactory:
    """
    Scoped ownership of native file handles.

    A handle is either closed here or handed to exactly one stream, which
    then owns it. Streams handed out are remembered (weakly) so close() on
    the filesystem can release the ones callers forgot.
    """

    def __init__(self, connection: ConnectionManager, statistics: FsStatistics) -> None:
        self._conn = connection
        self._stats = statistics
        self._streams: "weakref.WeakSet[NativeInputStream | NativeOutputStream]" = (
            weakref.WeakSet()
        )

    def _close(self, fh: int) -> None:
        code = self._conn.client("close").close(fh)
        if code is not None and code < 0:
            logger.warning("close of handle %s returned %s", fh, code)

    @contextmanager
    def guarded(self, fh: int) -> Iterator[int]:
        """Close `fh` if the body raises; otherwise ownership moves on."""
        try:
            yield fh
        except BaseException:
            logger.debug("guarded: closing handle %s after failure", fh)
            self._close(fh)
            raise

    @contextmanager
    def transient(self, fh: int) -> Iterator[int]:
        """Close `fh` when the body finishes, however it finishes."""
        try:
            yield fh
        finally:
            self._close(fh)

    def input_stream(self, fh: int, size: int, path: str) -> NativeInputStream:
        stream = NativeInputStream(
            self._conn.client("open"), fh, size, path, statistics=self._stats
        )
        self._streams.add(stream)
        return stream

    def output_stream(self, fh: int, path: str) -> NativeOutputStream:
        stream = NativeOutputStream(
            self._conn.client("create"), fh, path, statistics=self._stats
        )
        self._streams.add(stream)
        return stream

    @property
    def open_streams(self) -> list:
        return [s for s in list(self._streams) if not s.closed]

    def release_all(self) -> None:
        for stream in self.open_streams:
            logger.debug("release_all: closing stream on %s", stream.path)
            stream.close()
