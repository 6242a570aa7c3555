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


from __future__ import annotations

"""
Command-line interface for pypixz (``pixz``).

Example usages:

    # Compress a file to file.xz, removing the original
    pixz file

    # Compress a tarball to backup.tpxz, keeping the original
    pixz -k backup.tar

    # Decompress back to backup.tar
    pixz -d backup.tpxz

    # List the members of a compressed tarball
    pixz -l backup.tpxz

    # Extract one member as a tar stream
    pixz -x path/to/file < backup.tpxz | tar x

``main`` is the single place where errors are printed and the exit status is
chosen; every other module only raises.
"""

import logging
import sys
from typing import List, Optional

from . import __version__
from .config import parse_args
from .constants import EXIT_OK, EXIT_USAGE, PROG, USAGE
from .dispatch import dispatch
from .errors import HelpRequested, PixzError, UsageError, VersionRequested
from .naming import resolve_paths
from .stream import open_streams
from .utils import remove_input


def _configure_logging(level: int = logging.WARNING) -> None:
    logger = logging.getLogger("pypixz")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(f"{PROG}: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)


def _print_error(message: str) -> None:
    """Print an error message to stderr."""
    sys.stderr.write(f"{PROG}: {message}\n")


def _print_usage() -> None:
    sys.stderr.write(USAGE)
    sys.stderr.write(f"\n{PROG} {__version__}\n")


def run(argv: List[str]) -> int:
    """Perform one run. Errors propagate as ``PixzError`` subclasses."""
    config, positionals = parse_args(argv)
    paths = resolve_paths(config, positionals)

    with open_streams(paths) as streams:
        dispatch(config, streams)

    remove_input(paths, config.keep_input)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point for the pixz CLI.

    This function is invoked when running:

        python -m pypixz ...

    or, via the console script:

        pixz ...

    Returns:
        The process exit status: 0 on success, 2 on a usage error, 1 when a
        file cannot be opened or the engine fails.
    """
    if argv is None:
        argv = sys.argv[1:]
    _configure_logging()

    try:
        return run(argv)
    except HelpRequested:
        _print_usage()
        return EXIT_OK
    except VersionRequested:
        sys.stderr.write(f"{PROG} {__version__}\n")
        return EXIT_OK
    except UsageError as e:
        _print_error(str(e))
        sys.stderr.write("\n")
        _print_usage()
        return EXIT_USAGE
    except PixzError as e:
        _print_error(str(e))
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
