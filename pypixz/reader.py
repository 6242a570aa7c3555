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
xz reader: full decompression, tar member extraction and listing.

All functions read their input sequentially, so they work on pipes as well as
on regular files.
"""

import lzma
import tarfile
from typing import BinaryIO, Iterator, List, Optional, Sequence, Tuple

from .constants import COPY_CHUNK_SIZE
from .utils import copy_stream


def decompress_xz(src: BinaryIO, dst: BinaryIO) -> int:
    """Decompress every concatenated xz stream of ``src`` into ``dst``.

    Returns:
        Number of uncompressed bytes written.
    """
    with lzma.LZMAFile(src, "rb") as xz:
        total = copy_stream(xz, dst)
    dst.flush()
    return total


def _open_tar(src: BinaryIO) -> tarfile.TarFile:
    return tarfile.open(fileobj=lzma.LZMAFile(src, "rb"), mode="r|")


def _matching_member(name: str, members: Sequence[str]) -> Optional[str]:
    """Return the requested member that selects archive entry ``name``.

    A member selects the entry of the same name and, for a directory, every
    entry below it.
    """
    name = name.rstrip("/")
    for member in members:
        if name == member or name.startswith(member + "/"):
            return member
    return None


def extract_members(src: BinaryIO, dst: BinaryIO, members: Sequence[str]) -> Tuple[int, List[str]]:
    """Write a tar archive holding the selected members of a compressed tarball.

    Args:
        src: xz-compressed tar archive.
        dst: Stream receiving the uncompressed tar archive.
        members: Entry names to extract; directories select their contents.

    Returns:
        Tuple of (number of entries written, requested members not found).
    """
    wanted = [m.rstrip("/") or m for m in members]
    found = set()
    count = 0

    with _open_tar(src) as tin, tarfile.open(fileobj=dst, mode="w|", format=tarfile.PAX_FORMAT) as tout:
        for info in tin:
            member = _matching_member(info.name, wanted)
            if member is None:
                continue
            found.add(member)
            if info.isreg():
                tout.addfile(info, tin.extractfile(info))
            else:
                tout.addfile(info)
            count += 1
    dst.flush()

    return count, [m for m in wanted if m not in found]


def iter_member_names(src: BinaryIO) -> Iterator[str]:
    """Yield the entry names of an xz-compressed tar archive."""
    with _open_tar(src) as tin:
        for info in tin:
            yield info.name


def iter_stream_sizes(src: BinaryIO, chunk_size: int = COPY_CHUNK_SIZE) -> Iterator[Tuple[int, int]]:
    """Yield (compressed, uncompressed) sizes of each xz stream in ``src``.

    Raises:
        EOFError: If the last stream is truncated.
    """
    decompressor = lzma.LZMADecompressor(format=lzma.FORMAT_XZ)
    compressed = uncompressed = 0
    pending = b""

    while True:
        if not pending:
            pending = src.read(chunk_size)
            if not pending:
                break
        if compressed == 0:
            # Stream padding between concatenated streams
            pending = pending.lstrip(b"\0")
            if not pending:
                continue

        data, pending = pending, b""
        uncompressed += len(decompressor.decompress(data))
        if decompressor.eof:
            pending = decompressor.unused_data
            compressed += len(data) - len(pending)
            yield compressed, uncompressed
            decompressor = lzma.LZMADecompressor(format=lzma.FORMAT_XZ)
            compressed = uncompressed = 0
        else:
            compressed += len(data)

    if compressed:
        raise EOFError("compressed input ended before the end of the stream")
