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
Utility functions for pypixz.

This module provides helpers for binary stream handling and for the
post-run removal of the original input file.
"""

import logging
import os
import sys
from typing import BinaryIO

from .constants import COPY_CHUNK_SIZE

logger = logging.getLogger(__name__)


def set_binary_mode(stream: BinaryIO) -> None:
    """Switch a stream's file descriptor to binary mode on Windows.

    Elsewhere this is a no-op, since POSIX does not distinguish text and
    binary descriptors.
    """
    if sys.platform != "win32":
        return
    import msvcrt

    try:
        fileno = stream.fileno()
    except (AttributeError, OSError, ValueError):
        return  # Not backed by a descriptor (e.g. an in-memory buffer)
    msvcrt.setmode(fileno, os.O_BINARY)


def copy_stream(src: BinaryIO, dst: BinaryIO, chunk_size: int = COPY_CHUNK_SIZE) -> int:
    """Copy ``src`` to ``dst`` in chunks.

    Returns:
        Number of bytes copied.
    """
    total = 0
    while True:
        chunk = src.read(chunk_size)
        if not chunk:
            break
        dst.write(chunk)
        total += len(chunk)
    return total


def remove_input(paths, keep_input: bool) -> bool:
    """Delete the original input after a successful run, if appropriate.

    The input is removed only when its output name was derived automatically
    and the user did not ask to keep it. Removal is best-effort: a failure is
    logged and otherwise ignored.

    Args:
        paths: ``ResolvedPaths`` of the run.
        keep_input: Whether ``-k`` was given.

    Returns:
        True if the input file was removed.
    """
    if not paths.auto_remove_input or keep_input or paths.input_path is None:
        return False
    try:
        os.unlink(paths.input_path)
    except OSError as e:
        logger.warning("can not remove input file: %s: %s", paths.input_path, e.strerror or e)
        return False
    logger.debug("removed input file %s", paths.input_path)
    return True
