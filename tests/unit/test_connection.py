import logging
from pathlib import Path

import pytest

from cephbridge.adapters.native.local_client import LocalNativeClient
from cephbridge.domain.errors import (
    ConfigurationError,
    InitializationError,
    NotInitializedError,
)
from cephbridge.services import CephFileSystem, ConnectionState

URI = "ceph://mon:6789/"
CONF = {"fs.ceph.monAddr": "mon:6789"}


class CountingClient(LocalNativeClient):
    def __init__(self, root: Path, start_ok: bool = True):
        super().__init__(root)
        self.start_ok = start_ok
        self.init_calls = 0
        self.shutdown_calls = 0

    def initialize_client(self, arguments: str, block_size: int) -> bool:
        self.init_calls += 1
        if not self.start_ok:
            return False
        return super().initialize_client(arguments, block_size)

    def shutdown(self) -> bool:
        self.shutdown_calls += 1
        return super().shutdown()


def test_operations_before_initialize_fail(tmp_path: Path):
    fs = CephFileSystem(LocalNativeClient(tmp_path))
    with pytest.raises(NotInitializedError):
        fs.exists("/")
    with pytest.raises(NotInitializedError):
        fs.mkdirs("/a")
    with pytest.raises(NotInitializedError):
        fs.get_default_block_size()
    with pytest.raises(NotInitializedError):
        fs.close()
    assert fs.get_uri() is None


def test_initialize_is_idempotent(tmp_path: Path):
    client = CountingClient(tmp_path)
    fs = CephFileSystem(client)
    fs.initialize(URI, CONF)
    fs.initialize(URI, {})  # not re-validated once READY
    assert client.init_calls == 1
    assert fs.connection.state is ConnectionState.READY
    assert fs.get_uri() == "ceph://mon:6789"
    assert client.monitor == "mon:6789"
    assert client.readahead == 1
    fs.close()


def test_initialize_sets_cwd_to_root(tmp_path: Path):
    (tmp_path / "sub").mkdir()
    client = LocalNativeClient(tmp_path)
    fs = CephFileSystem(client)
    fs.initialize(URI, CONF)
    assert client.getcwd() == "/"
    assert fs.get_working_directory() == "ceph://mon:6789/"
    fs.close()


def test_missing_monitor_is_configuration_error(tmp_path: Path):
    client = CountingClient(tmp_path)
    fs = CephFileSystem(client)
    with pytest.raises(ConfigurationError):
        fs.initialize(URI, {})
    assert client.init_calls == 0
    assert fs.connection.state is ConnectionState.UNINITIALIZED


def test_native_startup_failure(tmp_path: Path):
    fs = CephFileSystem(CountingClient(tmp_path, start_ok=False))
    with pytest.raises(InitializationError):
        fs.initialize(URI, CONF)
    with pytest.raises(NotInitializedError):
        fs.exists("/")


def test_close_is_terminal(tmp_path: Path):
    client = CountingClient(tmp_path)
    fs = CephFileSystem(client)
    fs.initialize(URI, CONF)
    fs.close()
    assert client.shutdown_calls == 1
    assert fs.connection.state is ConnectionState.CLOSED
    with pytest.raises(NotInitializedError):
        fs.exists("/")
    with pytest.raises(NotInitializedError):
        fs.close()
    with pytest.raises(NotInitializedError):
        fs.initialize(URI, CONF)


def test_close_releases_open_streams(tmp_path: Path):
    client = LocalNativeClient(tmp_path)
    fs = CephFileSystem(client)
    fs.initialize(URI, CONF)
    out = fs.create("/left-open")
    out.write(b"abc")
    assert client.open_handles
    fs.close()
    assert out.closed
    assert client.open_handles == frozenset()


def test_context_manager_closes(tmp_path: Path):
    client = CountingClient(tmp_path)
    with CephFileSystem(client) as fs:
        fs.initialize(URI, CONF)
        assert fs.exists("/")
    assert client.shutdown_calls == 1


def test_debug_flag_enables_package_tracing(tmp_path: Path):
    pkg = logging.getLogger("cephbridge")
    old = pkg.level
    try:
        pkg.setLevel(logging.WARNING)
        fs = CephFileSystem(LocalNativeClient(tmp_path))
        fs.initialize(URI, dict(CONF, **{"fs.ceph.debug": "true"}))
        assert pkg.level == logging.DEBUG
        fs.close()
    finally:
        pkg.setLevel(old)


def test_defaults(fs):
    assert fs.get_default_replication() == 1
    assert fs.get_default_block_size() == 64


def test_config_needs_a_ready_connection(tmp_path: Path):
    fs = CephFileSystem(LocalNativeClient(tmp_path))
    with pytest.raises(NotInitializedError):
        fs.connection.config
    fs.initialize(URI, CONF)
    assert fs.connection.config.mon_addr == "mon:6789"
    fs.close()
    with pytest.raises(NotInitializedError):
        fs.connection.config
