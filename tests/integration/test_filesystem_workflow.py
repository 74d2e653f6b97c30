from pathlib import Path

from cephbridge.adapters.native.local_client import LocalNativeClient
from cephbridge.domain.models import CreateFlag
from cephbridge.services import CephFileSystem


def test_job_output_workflow(tmp_path: Path):
    """A typical job: write partitioned output, commit by rename, read back, clean up."""
    cluster = tmp_path / "cluster"
    cluster.mkdir()
    client = LocalNativeClient(cluster, host="osd-3")
    fs = CephFileSystem(client)
    fs.initialize(
        "ceph://mon.example:6789/",
        {"fs.ceph.monAddr": "mon.example:6789", "fs.ceph.blockSize": "32"},
    )

    # Relative paths resolve against the working directory.
    assert fs.mkdirs("/jobs/42")
    fs.set_working_directory("/jobs/42")

    parts = {f"_tmp/part-{i:05d}": bytes([65 + i]) * (40 * (i + 1)) for i in range(3)}
    for name, data in parts.items():
        with fs.create(name, flags=CreateFlag.CREATE) as out:
            out.write(data)

    assert fs.rename("_tmp", "output")
    listing = fs.list_status("ceph://mon.example:6789/jobs/42/output")
    assert [s.path for s in listing] == [
        "/jobs/42/output/part-00000",
        "/jobs/42/output/part-00001",
        "/jobs/42/output/part-00002",
    ]
    assert [s.size for s in listing] == [40, 80, 120]

    for status in listing:
        with fs.open(status.path) as s:
            assert len(s.read()) == status.size
        locs = fs.get_file_block_locations(status, 0, status.size)
        assert sum(1 for _ in locs) == -(-status.size // 32)
        assert all(loc.hosts == ("osd-3",) for loc in locs)

    assert fs.statistics.bytes_written == 240
    assert fs.statistics.bytes_read == 240

    walked = [s.path for s in fs.walk("/jobs")]
    assert walked[0] == "/jobs/42"
    assert len(walked) == 5

    assert fs.delete("/jobs", recursive=True)
    assert fs.list_status("/") == []
    assert client.open_handles == frozenset()

    fs.close()
    assert client.running is False
