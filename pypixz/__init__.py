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
pypixz - Parallel xz compression front end.

This package provides the ``pixz`` command: it parses the command line,
derives missing file names, opens the input and output streams and hands
the work to a parallel xz engine built on the Python standard library.
"""

from .config import OperationMode, RunConfig, parse_args
from .dispatch import dispatch
from .engine import Engine
from .naming import ResolvedPaths, auto_output, resolve_paths
from .stream import Streams, open_streams

__all__ = [
    "Engine",
    "OperationMode",
    "ResolvedPaths",
    "RunConfig",
    "Streams",
    "auto_output",
    "dispatch",
    "open_streams",
    "parse_args",
    "resolve_paths",
]

__version__ = "0.1.0"
