import io
import lzma
import os
import tarfile

import pytest

from pypixz.constants import DICTIONARY_SIZES, PRESET_EXTREME
from pypixz.engine import Engine
from pypixz.errors import EngineError
from pypixz.reader import iter_stream_sizes
from pypixz.writer import block_size_for, write_xz


def _compress(data, **tuning):
    out = io.BytesIO()
    Engine(io.BytesIO(data), out, **tuning).write(tar=False, level=1)
    return out.getvalue()


def test_block_size_for():
    assert block_size_for(6, 2.0) == 2 * DICTIONARY_SIZES[6]
    assert block_size_for(9 | PRESET_EXTREME, 1.0) == DICTIONARY_SIZES[9]
    assert block_size_for(0, 1e-9) == 1


def test_write_produces_xz():
    data = b"hello world\n" * 1000
    assert lzma.decompress(_compress(data)) == data


def test_write_extreme_level():
    data = os.urandom(64) * 50
    out = io.BytesIO()
    Engine(io.BytesIO(data), out).write(tar=True, level=6 | PRESET_EXTREME)
    assert lzma.decompress(out.getvalue()) == data


def test_write_empty_input():
    compressed = _compress(b"")
    assert compressed
    assert lzma.decompress(compressed) == b""


def test_write_multiple_blocks_in_order():
    data = bytes(range(256)) * 40
    compressed = _compress(data, threads=3, queue_size=1, block_fraction=0.004)
    sizes = list(iter_stream_sizes(io.BytesIO(compressed)))
    block_size = block_size_for(1, 0.004)
    assert len(sizes) == -(-len(data) // block_size)
    assert sum(u for _, u in sizes) == len(data)
    assert sum(c for c, _ in sizes) == len(compressed)
    assert lzma.decompress(compressed) == data


def test_write_xz_single_thread():
    data = b"abc" * 1000
    out = io.BytesIO()
    written = write_xz(io.BytesIO(data), out, 0, block_size=100, threads=1, queue_size=1)
    assert written == len(out.getvalue())
    assert lzma.decompress(out.getvalue()) == data


def test_read_round_trip():
    data = os.urandom(5000)
    compressed = _compress(data, block_fraction=0.002)
    out = io.BytesIO()
    assert Engine(io.BytesIO(compressed), out).read(tar=False, members=[]) == len(data)
    assert out.getvalue() == data


def test_read_corrupt_input():
    with pytest.raises(EngineError, match="decompression failed"):
        Engine(io.BytesIO(b"not xz data at all"), io.BytesIO()).read(tar=True, members=[])


def test_read_truncated_input():
    compressed = _compress(b"some data" * 100)
    with pytest.raises(EngineError):
        Engine(io.BytesIO(compressed[:-10]), io.BytesIO()).read(tar=True, members=[])


def _entries(tar_data):
    with tarfile.open(fileobj=io.BytesIO(tar_data)) as tar:
        return {m.name: tar.extractfile(m).read() for m in tar.getmembers()}


def test_extract_single_member(compressed_tar):
    out = io.BytesIO()
    count = Engine(io.BytesIO(compressed_tar), out).read(tar=True, members=["top.txt"])
    assert count == 1
    assert _entries(out.getvalue()) == {"top.txt": b"top level\n"}


def test_extract_directory(compressed_tar):
    out = io.BytesIO()
    Engine(io.BytesIO(compressed_tar), out).read(tar=True, members=["dir/"])
    assert sorted(_entries(out.getvalue())) == ["dir/a.txt", "dir/b.txt"]


def test_extract_missing_member(compressed_tar):
    with pytest.raises(EngineError, match="not found in archive: nope"):
        Engine(io.BytesIO(compressed_tar), io.BytesIO()).read(tar=True, members=["top.txt", "nope"])


def test_extract_requires_tar(compressed_tar):
    with pytest.raises(EngineError, match="requires tar mode"):
        Engine(io.BytesIO(compressed_tar), io.BytesIO()).read(tar=False, members=["top.txt"])


def test_extract_from_non_tar():
    compressed = lzma.compress(b"plain text, not a tarball" * 40)
    with pytest.raises(EngineError, match="not a tar archive"):
        Engine(io.BytesIO(compressed), io.BytesIO()).read(tar=True, members=["x"])


def test_list_tar(compressed_tar):
    out = io.BytesIO()
    assert Engine(io.BytesIO(compressed_tar), out).list(tar=True) == 3
    assert out.getvalue().decode().splitlines() == ["dir/a.txt", "dir/b.txt", "top.txt"]


def test_list_streams():
    first = lzma.compress(b"a" * 100)
    second = lzma.compress(b"b" * 300)
    out = io.BytesIO()
    assert Engine(io.BytesIO(first + second), out).list(tar=False) == 2
    assert out.getvalue().decode().splitlines() == [
        f"{len(first)} 100",
        f"{len(second)} 300",
    ]


def test_list_streams_skips_padding():
    first = lzma.compress(b"a" * 10)
    second = lzma.compress(b"b" * 20)
    sizes = list(iter_stream_sizes(io.BytesIO(first + b"\0" * 4 + second), chunk_size=7))
    assert sizes == [(len(first), 10), (len(second), 20)]


def test_list_truncated_streams():
    compressed = lzma.compress(b"x" * 1000)
    with pytest.raises(EngineError, match="listing failed"):
        Engine(io.BytesIO(compressed[:-5]), io.BytesIO()).list(tar=False)


def test_engine_defaults():
    engine = Engine(io.BytesIO(), io.BytesIO())
    assert engine.threads == 0
    assert engine.queue_size == 2
    assert engine.block_fraction == 2.0


class FailingWriter(io.BytesIO):
    def write(self, data):
        raise OSError(28, "No space left on device")


class FailingReader(io.BytesIO):
    def read(self, size=-1):
        raise OSError(5, "Input/output error")


def test_write_error_becomes_engine_error():
    with pytest.raises(EngineError, match="compression failed: No space left on device"):
        Engine(io.BytesIO(b"data" * 100), FailingWriter()).write(tar=False, level=0)


def test_read_error_becomes_engine_error():
    with pytest.raises(EngineError, match="decompression failed: Input/output error"):
        Engine(FailingReader(), io.BytesIO()).read(tar=True, members=[])


def test_list_write_error_becomes_engine_error(compressed_tar):
    with pytest.raises(EngineError, match="listing failed"):
        Engine(io.BytesIO(compressed_tar), FailingWriter()).list(tar=True)
