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
Constants for the pixz front end and its default engine.

This module defines the program name, exit statuses, compression presets and
the engine tuning defaults used when the command line does not override them.
"""

import lzma

PROG = "pixz"

# Exit statuses
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

# Compression presets
LEVEL_MIN = 0
LEVEL_MAX = 9
LEVEL_DEFAULT = lzma.PRESET_DEFAULT  # 6, the "standard" xz level
PRESET_EXTREME = lzma.PRESET_EXTREME  # Qualifier bit OR'ed into the level
PRESET_LEVEL_MASK = 0x1F  # Bits of a preset holding the numeric level

# LZMA2 dictionary size for each preset level, in bytes
DICTIONARY_SIZES = {
    0: 256 * 1024,
    1: 1 << 20,
    2: 2 << 20,
    3: 4 << 20,
    4: 4 << 20,
    5: 8 << 20,
    6: 8 << 20,
    7: 16 << 20,
    8: 32 << 20,
    9: 64 << 20,
}

# Engine tuning defaults
DEFAULT_THREADS = 0  # One worker per CPU
DEFAULT_QUEUE_SIZE = 2
DEFAULT_BLOCK_FRACTION = 2.0

# Chunk size for plain stream copies
COPY_CHUNK_SIZE = 1024 * 1024

USAGE = """\
pixz: Parallel XZ compression, fully compatible with XZ

Basic usage:
  pixz input output.pxz           # Compress a file in parallel
  pixz -d input.pxz output        # Decompress

Tarballs:
  pixz input.tar output.tpxz      # Compress a tarball
  pixz -d input.tpxz output.tar   # Decompress
  pixz -l input.tpxz              # List tarball contents
  pixz -x path/to/file < input.tpxz | tar x  # Extract one file
  tar -Ipixz -cf output.tpxz dir  # Make tar use pixz automatically

Input and output:
  pixz < input > output.pxz       # Same as `pixz input output.pxz`
  pixz -i input -o output.pxz     # Ditto
  pixz [-d] input                 # Automatically choose output filename

Other flags:
  -0, -1 ... -9      Set compression level, from fastest to strongest
  -e                 Use the extreme variant of the compression level
  -p NUM             Use a maximum of NUM CPU-intensive threads
  -q NUM             Keep at most NUM extra blocks queued per thread pool
  -f FRACTION        Use blocks of FRACTION times the dictionary size
  -t                 Don't assume input is in tar format
  -k                 Keep original input (do not remove it)
  -c                 ignored
  -V                 Print version and exit
  -h                 Print this help
"""
