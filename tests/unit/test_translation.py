import errno

import pytest

from cephbridge.domain.errors import NotFoundError, OperationFailedError
from cephbridge.domain.models import NativeStatFs
from cephbridge.services import translation


def test_read_handle():
    assert translation.read_handle(3, "/f") == 3
    with pytest.raises(NotFoundError):
        translation.read_handle(-errno.ENOENT, "/f")
    with pytest.raises(OperationFailedError) as ei:
        translation.read_handle(-errno.EACCES, "/f")
    assert ei.value.code == -errno.EACCES
    assert ei.value.operation == "open"


def test_write_handle_never_reports_not_found():
    with pytest.raises(OperationFailedError) as ei:
        translation.write_handle(-errno.ENOENT, "/f", "append")
    assert ei.value.operation == "append"


def test_parent_mkdirs_tolerates_eexist():
    translation.parent_mkdirs(0, "/p")
    translation.parent_mkdirs(-errno.EEXIST, "/p")
    with pytest.raises(OperationFailedError) as ei:
        translation.parent_mkdirs(-errno.EACCES, "/p")
    assert ei.value.code == -errno.EACCES


def test_mkdirs_succeeded():
    assert translation.mkdirs_succeeded(0)
    assert not translation.mkdirs_succeeded(-errno.EEXIST)


def test_statfs_result():
    fill = NativeStatFs(capacity=10, used=4, remaining=6)
    st = translation.statfs_result((0, fill), "/")
    assert (st.capacity, st.used, st.remaining) == (10, 4, 6)
    with pytest.raises(OperationFailedError):
        translation.statfs_result((1, fill), "/")


def test_set_times_and_permission():
    translation.set_times_result(0, "/f")
    with pytest.raises(OperationFailedError) as ei:
        translation.set_times_result(-errno.ENOENT, "/f")
    assert ei.value.code == -errno.ENOENT
    with pytest.raises(OperationFailedError):
        translation.set_permission_result(False, "/f")
