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
Custom exception classes for pypixz.

This module defines specific exception types for the different ways a run of
the ``pixz`` front end can end early. Components only raise these; the
command-line entry point is the single place that prints them and chooses the
exit status.
"""

from typing import Optional

from .constants import EXIT_FAILURE, EXIT_OK, EXIT_USAGE


class PixzError(Exception):
    """Base exception class for all pypixz errors."""

    exit_code = EXIT_FAILURE


class UsageError(PixzError):
    """Raised when the command line cannot be turned into a valid run.

    This exception is raised when:
    - A flag is unknown, is missing its value, or has an invalid value
    - Too many positional arguments are given for the operation
    - An input or output file is specified both by flag and positionally
    - No output name can be derived from the input suffix
    - Compressed output would be written to a terminal
    """

    exit_code = EXIT_USAGE


class StreamOpenError(PixzError):
    """Raised when an input or output file cannot be opened, stat'ed or created.

    The message carries the path and the reason reported by the operating
    system.
    """

    def __init__(self, message: str, path: Optional[str] = None, reason: Optional[str] = None):
        super().__init__(message)
        self.path = path
        self.reason = reason


class EngineError(PixzError):
    """Raised when the compression engine fails.

    This exception is raised when:
    - Compressed input is corrupted or truncated
    - A tar operation is requested on input that is not a tar archive
    - Requested extraction members are missing from the archive
    """

    pass


class HelpRequested(PixzError):
    """Raised by ``-h`` to unwind parsing and print the help text."""

    exit_code = EXIT_OK


class VersionRequested(PixzError):
    """Raised by ``-V`` to unwind parsing and print the version."""

    exit_code = EXIT_OK
