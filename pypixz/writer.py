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
Parallel xz writer.

The input is cut into fixed-size blocks which are compressed concurrently.
Each block becomes a self-contained xz stream; streams are written in input
order, so the output is a valid multi-stream ``.xz`` file that any xz decoder
can read.
"""

import collections
import lzma
import os
from concurrent.futures import ThreadPoolExecutor
from typing import BinaryIO, Iterator

from .constants import DICTIONARY_SIZES, PRESET_LEVEL_MASK


def block_size_for(preset: int, block_fraction: float) -> int:
    """Return the block size for a preset: its dictionary size times ``block_fraction``."""
    return max(1, int(DICTIONARY_SIZES[preset & PRESET_LEVEL_MASK] * block_fraction))


def compress_block(block: bytes, preset: int) -> bytes:
    """Compress one block into a complete xz stream."""
    return lzma.compress(block, format=lzma.FORMAT_XZ, check=lzma.CHECK_CRC64, preset=preset)


def _write_all(dst: BinaryIO, data: bytes) -> int:
    dst.write(data)
    return len(data)


def iter_blocks(src: BinaryIO, block_size: int) -> Iterator[bytes]:
    """Yield successive blocks of at most ``block_size`` bytes from ``src``."""
    while True:
        block = src.read(block_size)
        if not block:
            return
        yield block


def write_xz(
    src: BinaryIO,
    dst: BinaryIO,
    preset: int,
    block_size: int,
    threads: int = 0,
    queue_size: int = 2,
) -> int:
    """Compress ``src`` into ``dst``.

    Args:
        src: Binary stream to compress.
        dst: Binary stream receiving the xz data.
        preset: xz preset, possibly including ``lzma.PRESET_EXTREME``.
        block_size: Uncompressed size of each block.
        threads: Number of compression threads; 0 uses one per CPU.
        queue_size: Blocks allowed to wait for writing beyond one per thread.

    Returns:
        Number of compressed bytes written.
    """
    workers = threads or os.cpu_count() or 1
    max_pending = workers + queue_size
    written = 0
    blocks = 0

    with ThreadPoolExecutor(max_workers=workers) as pool:
        pending = collections.deque()
        for block in iter_blocks(src, block_size):
            pending.append(pool.submit(compress_block, block, preset))
            blocks += 1
            # Bound memory: wait for the oldest block before reading more
            while len(pending) >= max_pending:
                written += _write_all(dst, pending.popleft().result())
        while pending:
            written += _write_all(dst, pending.popleft().result())

    if blocks == 0:
        written += _write_all(dst, compress_block(b"", preset))
    dst.flush()
    return written
