import pytest

from cephbridge.domain.config import BridgeConfig, has_monitor_or_conf
from cephbridge.domain.errors import ConfigurationError


def test_startup_arguments_order():
    cfg = BridgeConfig(
        command_line="-c /etc/ceph/ceph.conf",
        client_debug="10",
        messenger_debug="1",
        mon_addr="10.0.0.1:6789",
        readahead=4,
    )
    assert cfg.startup_arguments() == (
        "CephFSInterface -c /etc/ceph/ceph.conf --debug_client 10 --debug_ms 1 "
        "-m 10.0.0.1:6789 --client-readahead-max-periods=4"
    )


def test_readahead_defaults_to_one():
    args = BridgeConfig(mon_addr="m:1").startup_arguments()
    assert args.endswith("--client-readahead-max-periods=1")


def test_missing_monitor_and_conf_is_rejected():
    # The readahead flag contains "-m" as a substring; it must not count.
    with pytest.raises(ConfigurationError):
        BridgeConfig().startup_arguments()


def test_config_file_in_passthrough_is_enough():
    assert "-c" in BridgeConfig(command_line="-c ceph.conf").startup_arguments()
    assert has_monitor_or_conf("x --conf=/etc/ceph.conf")
    assert has_monitor_or_conf("x --mon-host=1.2.3.4")
    assert not has_monitor_or_conf("x --debug_ms 1")


def test_from_mapping_parses_types():
    cfg = BridgeConfig.from_mapping(
        {
            "fs.ceph.monAddr": "mon:6789",
            "fs.ceph.blockSize": "4096",
            "fs.ceph.readahead": "3",
            "fs.ceph.debug": "TRUE",
            "fs.default.name": "ceph://mon:6789",
            "fs.ceph.libDir": "/usr/lib",
        }
    )
    assert cfg.mon_addr == "mon:6789"
    assert cfg.block_size == 4096
    assert cfg.readahead == 3
    assert cfg.debug is True
    assert cfg.default_name == "ceph://mon:6789"
    assert cfg.lib_dir == "/usr/lib"


def test_from_mapping_defaults():
    cfg = BridgeConfig.from_mapping({})
    assert cfg.block_size == 1 << 26
    assert cfg.readahead == 1
    assert cfg.debug is False
    assert cfg.command_line == ""


def test_bad_integer_is_configuration_error():
    with pytest.raises(ConfigurationError):
        BridgeConfig.from_mapping({"fs.ceph.blockSize": "big"})


def test_from_env(monkeypatch):
    monkeypatch.setenv("CEPHBRIDGE_MON_ADDR", "envmon:1")
    monkeypatch.setenv("CEPHBRIDGE_BLOCK_SIZE", "128")
    monkeypatch.delenv("CEPHBRIDGE_DEBUG", raising=False)
    cfg = BridgeConfig.from_env()
    assert cfg.mon_addr == "envmon:1"
    assert cfg.block_size == 128
    assert cfg.debug is False
