import io
import os
import stat
import sys

import pytest

from pypixz.errors import EngineError, StreamOpenError, UsageError
from pypixz.naming import ResolvedPaths
from pypixz.stream import Streams, open_streams


def _mode(path):
    return stat.S_IMODE(os.stat(path).st_mode)


@pytest.mark.parametrize("mode", [0o644, 0o600, 0o640])
def test_output_inherits_input_mode(tmp_path, umask_022, mode):
    src = tmp_path / "data.txt"
    src.write_bytes(b"payload")
    os.chmod(src, mode)
    dst = tmp_path / "data.txt.xz"

    with open_streams(ResolvedPaths(str(src), str(dst), auto_remove_input=True)) as streams:
        assert streams.input.read() == b"payload"
        streams.output.write(b"out")

    assert _mode(dst) == mode
    assert dst.read_bytes() == b"out"


def test_existing_output_is_truncated(tmp_path):
    src = tmp_path / "in"
    src.write_bytes(b"x")
    dst = tmp_path / "out"
    dst.write_bytes(b"a much longer previous content")

    with open_streams(ResolvedPaths(str(src), str(dst))) as streams:
        streams.output.write(b"new")

    assert dst.read_bytes() == b"new"


def test_stdin_input_uses_umask(tmp_path, umask_022, monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"from stdin")))
    dst = tmp_path / "out.xz"

    with open_streams(ResolvedPaths(None, str(dst))) as streams:
        streams.output.write(streams.input.read())

    assert dst.read_bytes() == b"from stdin"
    assert _mode(dst) == 0o644


def test_standard_streams(monkeypatch):
    stdin = io.TextIOWrapper(io.BytesIO(b"in"))
    stdout = io.TextIOWrapper(io.BytesIO())
    monkeypatch.setattr(sys, "stdin", stdin)
    monkeypatch.setattr(sys, "stdout", stdout)

    with open_streams(ResolvedPaths(None, None)) as streams:
        assert streams.input is stdin.buffer
        assert streams.output is stdout.buffer
        assert not streams.owns_input
        assert not streams.owns_output

    assert not stdin.buffer.closed
    assert not stdout.buffer.closed


def test_named_streams_are_closed(tmp_path):
    src = tmp_path / "in"
    src.write_bytes(b"")
    with open_streams(ResolvedPaths(str(src), str(tmp_path / "out"))) as streams:
        pass
    assert streams.input.closed
    assert streams.output.closed


def test_missing_input(tmp_path):
    missing = tmp_path / "missing"
    with pytest.raises(StreamOpenError, match="can not open input file") as exc:
        open_streams(ResolvedPaths(str(missing), None))
    assert exc.value.path == str(missing)
    assert exc.value.reason


def test_unwritable_output(tmp_path):
    src = tmp_path / "in"
    src.write_bytes(b"x")
    dst = tmp_path / "no-such-dir" / "out"
    with pytest.raises(StreamOpenError, match="can not open output file"):
        open_streams(ResolvedPaths(str(src), str(dst)))


def test_unwritable_output_from_stdin(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO()))
    dst = tmp_path / "no-such-dir" / "out"
    with pytest.raises(StreamOpenError, match="can not open output file"):
        open_streams(ResolvedPaths(None, str(dst)))


def test_streams_close_flushes_unowned_output():
    out = io.BufferedWriter(io.BytesIO())
    streams = Streams(io.BytesIO(), out)
    out.write(b"buffered")
    streams.close()
    assert not out.closed
    assert out.raw.getvalue() == b"buffered"


class FullBuffer(io.BytesIO):
    def flush(self):
        raise OSError(28, "No space left on device")


def test_close_reports_failed_flush():
    streams = Streams(io.BytesIO(), FullBuffer())
    with pytest.raises(EngineError, match="can not write output: No space left on device"):
        streams.close()


def test_close_closes_input_after_failed_flush():
    source = io.BytesIO()
    streams = Streams(source, FullBuffer(), owns_input=True)
    with pytest.raises(EngineError):
        streams.close()
    assert source.closed


def test_failed_flush_does_not_hide_run_error():
    with pytest.raises(ValueError, match="engine gave up"):
        with Streams(io.BytesIO(), FullBuffer()):
            raise ValueError("engine gave up")


def test_output_same_as_input(tmp_path):
    src = tmp_path / "a.xz"
    src.write_bytes(b"keep me")
    with pytest.raises(UsageError, match="input and output are the same file"):
        open_streams(ResolvedPaths(str(src), str(src)))
    assert src.read_bytes() == b"keep me"


def test_output_hard_link_to_input(tmp_path):
    src = tmp_path / "a.xz"
    src.write_bytes(b"keep me")
    link = tmp_path / "b"
    os.link(src, link)
    with pytest.raises(UsageError):
        open_streams(ResolvedPaths(str(src), str(link)))
    assert src.read_bytes() == b"keep me"
