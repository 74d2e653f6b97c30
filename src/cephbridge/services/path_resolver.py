# Licensed under the Apache License, Version 2.0
from __future__ import annotations

import logging
import posixpath
from typing import Optional, Union
from pathlib import PurePosixPath

from ..domain.models import ROOT
from .connection import ConnectionManager

logger = logging.getLogger(__name__)


class PathResolver:
    """
    Turns caller paths into cluster-absolute ones.

    Notes:
      * A path that starts with the filesystem's own name is stripped by plain
        string prefix, not parsed as a URI. "ceph://host" will also strip
        "ceph://hostname/x" to "name/x".
      * No '.' / '..' collapsing here; the native client does that.
    """

    def __init__(self, connection: ConnectionManager) -> None:
        self._conn = connection

    def resolve(self, path: Optional[Union[str, PurePosixPath]]) -> str:
        if path is None:
            return ROOT
        text = str(path)
        if text == "":
            raise ValueError("empty path")

        prefix = self._conn.default_name
        if prefix and text.startswith(prefix):
            stripped = text[len(prefix):] or ROOT
            logger.debug("resolve: stripped %s to %s", text, stripped)
            return stripped

        if text.startswith("/"):
            return text

        cwd = self._conn.client("resolve").getcwd()
        resolved = posixpath.join(cwd, text)
        logger.debug("resolve: %s relative to %s -> %s", text, cwd, resolved)
        return resolved

    def qualify(self, path: str) -> str:
        """Prefix a cluster path with the filesystem's name."""
        return self._conn.default_name + path
