"""
Copyright 2025 DNAi inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""


"""
Input/output stream provisioning.

This module opens the byte streams a run reads from and writes to. A missing
path stands for the process's standard input or output. When both ends are
named files, the output is created with the permission bits of the input so
that a compress/decompress round trip keeps the original file mode.
"""

import logging
import os
import stat
import sys
from typing import BinaryIO, Optional

from .errors import EngineError, StreamOpenError, UsageError
from .utils import set_binary_mode

logger = logging.getLogger(__name__)


class Streams:
    """The pair of binary streams of one run.

    Streams opened from a path are owned and closed by ``close()``; the
    process's standard streams are only flushed.

    Example:
        with open_streams(paths) as streams:
            streams.output.write(streams.input.read())
    """

    def __init__(
        self,
        input: BinaryIO,
        output: BinaryIO,
        owns_input: bool = False,
        owns_output: bool = False,
    ):
        self.input = input
        self.output = output
        self.owns_input = owns_input
        self.owns_output = owns_output

    def close(self) -> None:
        """Flush the output and close every stream this object owns.

        Every owned stream is closed even when the flush fails.

        Raises:
            EngineError: If buffered output cannot be written.
        """
        error = None
        try:
            if not self.output.closed:
                self.output.flush()
        except OSError as e:
            error = e
        if self.owns_output:
            try:
                self.output.close()
            except OSError as e:
                error = error or e
        if self.owns_input:
            self.input.close()
        if error is not None:
            raise EngineError(f"can not write output: {error.strerror or error}") from error

    def __enter__(self) -> "Streams":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            self.close()
        except EngineError:
            # The error that aborted the run is the one to report
            if exc_type is None:
                raise


def _stdin() -> BinaryIO:
    return getattr(sys.stdin, "buffer", sys.stdin)


def _stdout() -> BinaryIO:
    return getattr(sys.stdout, "buffer", sys.stdout)


def _open_error(kind: str, path: str, e: OSError) -> StreamOpenError:
    reason = e.strerror or str(e)
    return StreamOpenError(f"can not open {kind} file: {path}: {reason}", path=path, reason=reason)


def open_input(path: Optional[str]) -> BinaryIO:
    """Open the input stream; ``None`` selects standard input.

    Raises:
        StreamOpenError: If the file cannot be opened for reading.
    """
    if path is None:
        return _stdin()
    try:
        return open(path, "rb")
    except OSError as e:
        raise _open_error("input", path, e) from e


def open_output(path: Optional[str], input_path: Optional[str] = None) -> BinaryIO:
    """Open the output stream; ``None`` selects standard output.

    Args:
        path: Output path, or None for standard output.
        input_path: Named input whose permission bits the output inherits.
            None means the input is standard input, in which case the
            output is created with the default, umask-governed mode.

    Raises:
        StreamOpenError: If the input cannot be stat'ed or the output cannot
            be created.
    """
    if path is None:
        return _stdout()

    if input_path is None:
        try:
            return open(path, "wb")
        except OSError as e:
            raise _open_error("output", path, e) from e

    try:
        mode = stat.S_IMODE(os.stat(input_path).st_mode)
    except OSError as e:
        raise _open_error("input", input_path, e) from e

    try:
        fd = os.open(path, os.O_CREAT | os.O_WRONLY | os.O_TRUNC | getattr(os, "O_BINARY", 0), mode)
    except OSError as e:
        raise _open_error("output", path, e) from e
    logger.debug("created %s with mode %o", path, mode)
    return os.fdopen(fd, "wb")


def _same_file(input_path: Optional[str], output_path: Optional[str]) -> bool:
    if input_path is None or output_path is None:
        return False
    try:
        return os.path.samefile(input_path, output_path)
    except OSError:
        return False  # Output does not exist yet


def open_streams(paths) -> Streams:
    """Open both streams of a run.

    Args:
        paths: ``ResolvedPaths`` of the run.

    Returns:
        The open streams, both in binary mode.

    Raises:
        StreamOpenError: If either stream cannot be opened. A stream that was
            already opened is closed first.
        UsageError: If the output is the input file itself.
    """
    input = open_input(paths.input_path)
    try:
        if _same_file(paths.input_path, paths.output_path):
            raise UsageError("input and output are the same file")
        output = open_output(paths.output_path, paths.input_path)
    except (StreamOpenError, UsageError):
        if paths.input_path is not None:
            input.close()
        raise

    set_binary_mode(input)
    set_binary_mode(output)
    return Streams(
        input,
        output,
        owns_input=paths.input_path is not None,
        owns_output=paths.output_path is not None,
    )
