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
import logging
import threading
from typing import Callable, Optional
from urllib.parse import urlsplit

from ..domain.config import BridgeConfig
from ..domain.errors import InitializationError, NotInitializedError
from ..domain.models import ROOT
from ..logging_config import enable_debug_tracing
from ..ports.native_client import NativeClientPort

logger = logging.getLogger(__name__)


class ConnectionState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    CLOSED = "closed"


class ConnectionManager:
    """
    Owns the single native session: UNINITIALIZED -> READY -> CLOSED.

    Other components borrow the client through `client()`; none of them
    start or stop the session. The lock only serializes initialize/close.
    """

    def __init__(self, client: NativeClientPort) -> None:
        self._client = client
        self._state = ConnectionState.UNINITIALIZED
        self._lock = threading.Lock()
        self._config: Optional[BridgeConfig] = None
        self._uri: Optional[str] = None
        self._default_name: Optional[str] = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def ready(self) -> bool:
        return self._state is ConnectionState.READY

    @property
    def uri(self) -> Optional[str]:
        return self._uri

    @property
    def default_name(self) -> str:
        """Prefix that marks fully-qualified paths on this filesystem."""
        self.require_ready("default_name")
        return self._default_name or ""

    @property
    def config(self) -> BridgeConfig:
        self.require_ready("config")
        return self._config

    def require_ready(self, operation: str) -> None:
        if self._state is not ConnectionState.READY:
            raise NotInitializedError(
                f"{operation}: the filesystem must be initialized before use "
                f"(state: {self._state.value})",
                operation=operation,
            )

    def client(self, operation: str = "native call") -> NativeClientPort:
        self.require_ready(operation)
        return self._client

    def initialize(self, uri: str, config: BridgeConfig) -> bool:
        """
        Start the native session.

        Returns:
            True if the session was started by this call, False if it was
            already READY (the config is not re-validated in that case).

        Raises:
            ConfigurationError: no monitor address or config file.
            InitializationError: the native client refused to start.
            NotInitializedError: the connection was already closed.
        """
        with self._lock:
            if self._state is ConnectionState.READY:
                return False
            if self._state is ConnectionState.CLOSED:
                raise NotInitializedError(
                    "initialize: the filesystem was closed and cannot be reopened",
                    operation="initialize",
                )

            if config.debug:
                enable_debug_tracing()
            logger.debug("initialize: enter with uri %s", uri)

            parts = urlsplit(str(uri))
            qualified = f"{parts.scheme}://{parts.netloc}" if parts.scheme else ""
            arguments = config.startup_arguments()

            if not self._client.initialize_client(arguments, config.block_size):
                logger.debug("initialize: native client startup failed")
                raise InitializationError(
                    "Ceph initialization failed!", operation="initialize"
                )

            self._uri = qualified or None
            self._default_name = config.default_name or qualified
            self._config = config
            self._state = ConnectionState.READY
            logger.debug("initialize: client started, setting cwd to /")
            self._client.setcwd(ROOT)
            return True

    def close(self, release: Optional[Callable[[], None]] = None) -> None:
        """Release framework-level resources, then shut the native session down."""
        with self._lock:
            self.require_ready("close")
            logger.debug("close: enter")
            try:
                if release is not None:
                    release()
            finally:
                self._client.shutdown()
                self._state = ConnectionState.CLOSED
            logger.debug("close: exit")
