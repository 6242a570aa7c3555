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
Default processing engine.

``Engine`` provides the three entry points the front end dispatches to:
``write``, ``read`` and ``list``. It is built on the standard library's
``lzma`` and ``tarfile`` modules and produces standard ``.xz`` output.
"""

import contextlib
import lzma
import logging
import tarfile
from typing import BinaryIO, Iterator, List, Optional

from .constants import DEFAULT_BLOCK_FRACTION, DEFAULT_QUEUE_SIZE, DEFAULT_THREADS
from .errors import EngineError
from .reader import decompress_xz, extract_members, iter_member_names, iter_stream_sizes
from .writer import block_size_for, write_xz

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def _engine_errors(action: str) -> Iterator[None]:
    """Convert codec and archive failures into ``EngineError``."""
    try:
        yield
    except lzma.LZMAError as e:
        raise EngineError(f"{action} failed: {e}") from e
    except EOFError as e:
        raise EngineError(f"{action} failed: truncated input") from e
    except tarfile.ReadError as e:
        raise EngineError(f"{action} failed: input is not a tar archive (try -t)") from e
    except tarfile.TarError as e:
        raise EngineError(f"{action} failed: {e}") from e
    except OSError as e:
        raise EngineError(f"{action} failed: {e.strerror or e}") from e


class Engine:
    """Compression engine bound to one pair of streams.

    Tuning values left as None take the engine defaults: one thread per CPU,
    a queue of two blocks and blocks of twice the dictionary size.

    Example:
        engine = Engine(src, dst, threads=4)
        engine.write(tar=True, level=6)
    """

    def __init__(
        self,
        source: BinaryIO,
        dest: BinaryIO,
        threads: Optional[int] = None,
        queue_size: Optional[int] = None,
        block_fraction: Optional[float] = None,
    ):
        self.source = source
        self.dest = dest
        self.threads = DEFAULT_THREADS if threads is None else threads
        self.queue_size = DEFAULT_QUEUE_SIZE if queue_size is None else queue_size
        self.block_fraction = DEFAULT_BLOCK_FRACTION if block_fraction is None else block_fraction

    def write(self, tar: bool, level: int) -> int:
        """Compress the source.

        Args:
            tar: Whether the input is expected to be a tarball. Tar input is
                compressed like any other data.
            level: xz preset, possibly including the extreme bit.

        Returns:
            Number of compressed bytes written.
        """
        block_size = block_size_for(level, self.block_fraction)
        logger.debug(
            "compressing with preset %#x, %d byte blocks, %d threads",
            level, block_size, self.threads,
        )
        with _engine_errors("compression"):
            return write_xz(
                self.source,
                self.dest,
                level,
                block_size,
                threads=self.threads,
                queue_size=self.queue_size,
            )

    def read(self, tar: bool, members: List[str]) -> int:
        """Decompress the source.

        Args:
            tar: Whether the payload is a tarball.
            members: Entry names to extract. Empty means decompress everything.

        Returns:
            Bytes written for a full decompression, entries written for an
            extraction.

        Raises:
            EngineError: If the input is corrupt, extraction is requested
                without tar mode, or a requested member is not in the archive.
        """
        if not members:
            with _engine_errors("decompression"):
                return decompress_xz(self.source, self.dest)

        if not tar:
            raise EngineError("extracting members requires tar mode")
        with _engine_errors("extraction"):
            count, missing = extract_members(self.source, self.dest, members)
        if missing:
            raise EngineError("not found in archive: " + ", ".join(missing))
        return count

    def list(self, tar: bool) -> int:
        """List the source: member names for a tarball, stream sizes otherwise.

        Returns:
            Number of lines written.
        """
        lines = 0
        with _engine_errors("listing"):
            if tar:
                for name in iter_member_names(self.source):
                    self.dest.write(name.encode("utf-8", "surrogateescape") + b"\n")
                    lines += 1
            else:
                for compressed, uncompressed in iter_stream_sizes(self.source):
                    self.dest.write(f"{compressed} {uncompressed}\n".encode("ascii"))
                    lines += 1
        self.dest.flush()
        return lines
