from pathlib import Path

import pytest

from cephbridge.adapters.native.local_client import LocalNativeClient
from cephbridge.domain.errors import NotFoundError, OperationFailedError
from cephbridge.services import CephFileSystem

URI = "ceph://mon:6789/"
CONF = {"fs.ceph.monAddr": "mon:6789", "fs.ceph.blockSize": "64"}


class StatCountingClient(LocalNativeClient):
    def __init__(self, root):
        super().__init__(root)
        self.stat_calls = []

    def stat(self, path):
        self.stat_calls.append(path)
        return super().stat(path)


class BrokenStatfsClient(LocalNativeClient):
    def statfs(self, path):
        return -5, None


def _fs(client) -> CephFileSystem:
    fs = CephFileSystem(client)
    fs.initialize(URI, CONF)
    return fs


def test_root_status_is_synthesized(tmp_path: Path):
    client = StatCountingClient(tmp_path)
    fs = _fs(client)
    st = fs.get_file_status("/")
    assert st.is_dir and not st.is_file
    assert st.size == 0
    assert st.path == "/"
    assert client.stat_calls == []
    fs.close()


def test_file_status_fields(fs, cluster_root: Path):
    with fs.create("/data/part-0") as out:
        out.write(b"x" * 10)
    fs.set_permission("/data/part-0", 0o640)

    st = fs.get_file_status("/data/part-0")
    assert st.path == "/data/part-0"
    assert st.size == 10
    assert st.is_dir is False
    assert st.replication == 1
    assert st.block_size == 64
    assert st.permission == 0o640
    assert st.owner is None and st.group is None
    assert st.modification_time > 0

    d = fs.get_file_status("/data")
    assert d.is_dir


def test_missing_path_is_not_found(fs):
    with pytest.raises(NotFoundError) as ei:
        fs.get_file_status("/nope")
    assert ei.value.path == "/nope"


def test_statuses_are_not_cached(fs):
    with fs.create("/grow") as out:
        out.write(b"1")
    assert fs.get_file_status("/grow").size == 1
    with fs.append("/grow") as out:
        out.write(b"23")
    assert fs.get_file_status("/grow").size == 3


def test_get_status(fs):
    st = fs.get_status()
    assert st.capacity > 0
    assert st.used >= 0
    assert st.remaining >= 0


def test_get_status_failure_carries_code(tmp_path: Path):
    fs = _fs(BrokenStatfsClient(tmp_path))
    with pytest.raises(OperationFailedError) as ei:
        fs.get_status("/")
    assert ei.value.code == -5
    fs.close()
