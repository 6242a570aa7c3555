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
Command-line parsing for the pixz front end.

``parse_args`` turns the raw argument list into an immutable ``RunConfig``
plus the positional arguments that survived flag extraction. Flags follow the
classic single-character style: they can be clustered (``-dk``), option values
may be attached (``-p4``) or separate (``-p 4``), and flags may appear after
positional arguments.

Parsing never prints and never exits. Problems surface as ``UsageError``;
``-h`` and ``-V`` surface as ``HelpRequested`` and ``VersionRequested``.
"""

import argparse
import enum
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .constants import LEVEL_DEFAULT, LEVEL_MAX, LEVEL_MIN, PROG
from .errors import HelpRequested, UsageError, VersionRequested


class OperationMode(enum.Enum):
    """The single operation performed by a run."""

    WRITE = "write"
    READ = "read"
    EXTRACT = "extract"
    LIST = "list"


@dataclass(frozen=True)
class RunConfig:
    """Fully resolved configuration of one run.

    ``level``, ``threads``, ``queue_size`` and ``block_fraction`` are only
    carried through to the engine; ``None`` leaves the engine default in place.
    ``input_path`` and ``output_path`` hold the ``-i``/``-o`` values, ``None``
    meaning standard input/output.
    """

    mode: OperationMode = OperationMode.WRITE
    level: int = LEVEL_DEFAULT
    extreme: bool = False
    tar: bool = True
    keep_input: bool = False
    threads: Optional[int] = None
    queue_size: Optional[int] = None
    block_fraction: Optional[float] = None
    input_path: Optional[str] = None
    output_path: Optional[str] = None
    members: Tuple[str, ...] = ()


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of printing and exiting."""

    def error(self, message):
        raise UsageError(message)


class _RaiseAction(argparse.Action):
    """Flag action that unwinds parsing with a fixed signal exception."""

    signal = None

    def __init__(self, option_strings, dest, **kwargs):
        super().__init__(option_strings, dest=argparse.SUPPRESS, nargs=0, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        raise self.signal()


class _HelpAction(_RaiseAction):
    signal = HelpRequested


class _VersionAction(_RaiseAction):
    signal = VersionRequested


def _non_negative_int(value: str) -> int:
    try:
        number = int(value, 10)
    except ValueError:
        number = -1
    if number < 0:
        raise UsageError("need a non-negative integer argument to -p")
    return number


def _positive_int(value: str) -> int:
    try:
        number = int(value, 10)
    except ValueError:
        number = 0
    if number <= 0:
        raise UsageError("need a positive integer argument to -q")
    return number


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        number = 0.0
    if not number > 0:
        raise UsageError("need a positive floating-point argument to -f")
    return number


# Flags that take a value
_VALUE_FLAGS = "iopqf"


def _split_at_double_dash(argv: List[str]) -> Tuple[List[str], List[str]]:
    """Split ``argv`` at the "--" that ends flag parsing.

    Everything after it is positional, even if it starts with "-". A flag
    value given as a separate argument is attached to its flag (``-o -out``
    becomes ``-o-out``) so that values starting with "-" stay values.
    """
    flags: List[str] = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--":
            return flags, argv[i + 1 :]
        if arg.startswith("-") and len(arg) > 1:
            for pos, flag in enumerate(arg[1:], 1):
                if flag in _VALUE_FLAGS:
                    if pos == len(arg) - 1 and i + 1 < len(argv) and argv[i + 1]:
                        i += 1
                        arg += argv[i]
                    break
        flags.append(arg)
        i += 1
    return flags, []


def build_parser() -> argparse.ArgumentParser:
    """Build the flag parser. Help and usage text are handled by the caller."""
    parser = _ArgumentParser(prog=PROG, add_help=False, allow_abbrev=False)

    parser.add_argument("-d", dest="mode", action="store_const", const=OperationMode.READ)
    parser.add_argument("-x", dest="mode", action="store_const", const=OperationMode.EXTRACT)
    parser.add_argument("-l", dest="mode", action="store_const", const=OperationMode.LIST)
    parser.add_argument("-i", dest="input_path", metavar="PATH")
    parser.add_argument("-o", dest="output_path", metavar="PATH")
    parser.add_argument("-t", dest="tar", action="store_false")
    parser.add_argument("-k", dest="keep_input", action="store_true")
    parser.add_argument("-e", dest="extreme", action="store_true")
    parser.add_argument("-c", dest="compat", action="store_true", help=argparse.SUPPRESS)
    for level in range(LEVEL_MIN, LEVEL_MAX + 1):
        parser.add_argument(f"-{level}", dest="level", action="store_const", const=level)
    parser.add_argument("-p", dest="threads", type=_non_negative_int, metavar="N")
    parser.add_argument("-q", dest="queue_size", type=_positive_int, metavar="N")
    parser.add_argument("-f", dest="block_fraction", type=_positive_float, metavar="X")
    parser.add_argument("-h", action=_HelpAction)
    parser.add_argument("-V", action=_VersionAction)
    parser.add_argument("args", nargs="*")

    parser.set_defaults(mode=OperationMode.WRITE, level=LEVEL_DEFAULT)
    return parser


def parse_args(argv: Sequence[str]) -> Tuple[RunConfig, List[str]]:
    """Parse command-line arguments into a run configuration.

    Args:
        argv: Arguments without the program name.

    Returns:
        Tuple of (config, positionals). For Extract the positionals are the
        member names, which are also stored in ``config.members``.

    Raises:
        UsageError: If flags or positional arguments are invalid.
        HelpRequested: If ``-h`` was given.
        VersionRequested: If ``-V`` was given.
    """
    flags, rest = _split_at_double_dash(list(argv))
    ns = build_parser().parse_intermixed_args(flags)
    positionals = list(ns.args or ()) + rest

    if ns.mode is not OperationMode.EXTRACT and positionals:
        if len(positionals) > 2 or (ns.mode is OperationMode.LIST and len(positionals) == 2):
            raise UsageError("too many arguments")
        if ns.input_path is not None:
            raise UsageError("multiple input files specified")
        if len(positionals) == 2 and ns.output_path is not None:
            raise UsageError("multiple output files specified")

    config = RunConfig(
        mode=ns.mode,
        level=ns.level,
        extreme=ns.extreme,
        tar=ns.tar,
        keep_input=ns.keep_input,
        threads=ns.threads,
        queue_size=ns.queue_size,
        block_fraction=ns.block_fraction,
        input_path=ns.input_path,
        output_path=ns.output_path,
        members=tuple(positionals) if ns.mode is OperationMode.EXTRACT else (),
    )
    return config, positionals
