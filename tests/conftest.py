import io
import lzma
import os
import tarfile

import pytest


@pytest.fixture
def umask_022():
    old = os.umask(0o022)
    yield
    os.umask(old)


def make_tar(entries):
    """Return an uncompressed tar archive holding ``entries`` (name -> bytes)."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w", format=tarfile.PAX_FORMAT) as tar:
        for name, data in entries.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


@pytest.fixture
def tar_bytes():
    return make_tar({
        "dir/a.txt": b"alpha\n" * 100,
        "dir/b.txt": b"bravo\n" * 100,
        "top.txt": b"top level\n",
    })


@pytest.fixture
def compressed_tar(tar_bytes):
    return lzma.compress(tar_bytes, format=lzma.FORMAT_XZ)
