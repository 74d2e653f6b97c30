from pathlib import Path

import pytest

from cephbridge.adapters.native.local_client import LocalNativeClient
from cephbridge.services import CephFileSystem

URI = "ceph://mon:6789/"
CONF = {"fs.ceph.monAddr": "mon:6789", "fs.ceph.blockSize": "64"}


@pytest.fixture
def cluster_root(tmp_path: Path) -> Path:
    root = tmp_path / "cluster"
    root.mkdir()
    return root


@pytest.fixture
def client(cluster_root: Path) -> LocalNativeClient:
    return LocalNativeClient(cluster_root)


@pytest.fixture
def fs(client: LocalNativeClient):
    cfs = CephFileSystem(client)
    cfs.initialize(URI, CONF)
    yield cfs
    if cfs.connection.ready:
        cfs.close()
