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
Automatic output filename derivation.

When a single file is named on the command line, the companion file is
derived by suffix substitution. The rules are a fixed, ordered table; the
first rule for the active operation whose suffix matches wins.
"""

import logging
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence

from .config import OperationMode, RunConfig
from .errors import UsageError

logger = logging.getLogger(__name__)


class SuffixRule(NamedTuple):
    mode: OperationMode
    remove: str
    append: str


# Order matters: ".tar.xz" must be tried before ".xz", and the empty suffix
# matches every name.
SUFFIX_RULES = (
    SuffixRule(OperationMode.READ, ".tar.xz", ".tar"),
    SuffixRule(OperationMode.READ, ".tpxz", ".tar"),
    SuffixRule(OperationMode.READ, ".xz", ""),
    SuffixRule(OperationMode.WRITE, ".tar", ".tpxz"),
    SuffixRule(OperationMode.WRITE, "", ".xz"),
)


@dataclass(frozen=True)
class ResolvedPaths:
    """Concrete paths of one run. ``None`` means a standard stream."""

    input_path: Optional[str]
    output_path: Optional[str]
    auto_remove_input: bool = False


def substitute_suffix(filename: str, remove: str, append: str) -> Optional[str]:
    """Replace suffix ``remove`` of ``filename`` with ``append``.

    Returns:
        The new name, or None if ``filename`` does not end with ``remove``.
    """
    if not filename.endswith(remove):
        return None
    return filename[: len(filename) - len(remove)] + append


def auto_output(mode: OperationMode, filename: str) -> Optional[str]:
    """Derive the output filename for ``filename`` under ``mode``.

    Returns:
        The derived name, or None if no rule applies.
    """
    for rule in SUFFIX_RULES:
        if rule.mode is not mode:
            continue
        derived = substitute_suffix(filename, rule.remove, rule.append)
        if derived is not None:
            return derived
    return None


def resolve_paths(config: RunConfig, positionals: Sequence[str]) -> ResolvedPaths:
    """Combine explicit paths and positional arguments into concrete paths.

    Args:
        config: Parsed configuration.
        positionals: Positional arguments left after flag parsing.

    Returns:
        The resolved paths. ``auto_remove_input`` is set when the output name
        was derived from the input name.

    Raises:
        UsageError: If no output name can be derived from the input name.
    """
    args: List[str] = list(positionals)
    if config.mode is OperationMode.EXTRACT or not args:
        return ResolvedPaths(config.input_path, config.output_path)

    input_path = args[0]
    if len(args) == 2:
        return ResolvedPaths(input_path, args[1])
    if config.mode is OperationMode.LIST or config.output_path is not None:
        return ResolvedPaths(input_path, config.output_path)

    output_path = auto_output(config.mode, input_path)
    if output_path is None:
        raise UsageError("unknown suffix")
    logger.debug("derived output name %s from %s", output_path, input_path)
    return ResolvedPaths(input_path, output_path, auto_remove_input=True)
