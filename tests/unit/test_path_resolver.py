from pathlib import PurePosixPath

import pytest

from cephbridge.services import PathResolver


def test_none_is_root(fs):
    assert PathResolver(fs.connection).resolve(None) == "/"


def test_absolute_paths_are_unchanged(fs):
    resolver = PathResolver(fs.connection)
    assert resolver.resolve("/a/b") == "/a/b"
    # No '..' collapsing; that is left to the native client.
    assert resolver.resolve("/a/../b") == "/a/../b"
    assert resolver.resolve(PurePosixPath("/x/y")) == "/x/y"


def test_relative_paths_join_the_native_cwd(fs):
    resolver = PathResolver(fs.connection)
    assert resolver.resolve("f.txt") == "/f.txt"
    fs.mkdirs("/work/dir")
    fs.set_working_directory("/work")
    assert resolver.resolve("dir/f.txt") == "/work/dir/f.txt"
    assert fs.get_working_directory() == "ceph://mon:6789/work"


def test_own_uri_prefix_is_stripped(fs):
    resolver = PathResolver(fs.connection)
    assert resolver.resolve("ceph://mon:6789/a/b") == "/a/b"
    assert resolver.resolve("ceph://mon:6789") == "/"


def test_prefix_match_is_textual(fs):
    # Same leading characters, different authority: still stripped.
    assert PathResolver(fs.connection).resolve("ceph://mon:67890/x") == "0/x"


def test_empty_path_is_rejected(fs):
    with pytest.raises(ValueError):
        PathResolver(fs.connection).resolve("")


def test_failed_setcwd_keeps_cwd(fs, client):
    fs.set_working_directory("/does/not/exist")
    assert client.getcwd() == "/"


def test_qualified_status_paths_round_trip(fs):
    fs.mkdirs("/q")
    assert fs.is_directory("ceph://mon:6789/q")
