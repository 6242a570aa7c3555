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
Dispatch of a parsed run to the engine.
"""

import logging
from typing import Callable

from .config import OperationMode, RunConfig
from .constants import PRESET_EXTREME
from .engine import Engine
from .errors import UsageError
from .stream import Streams

logger = logging.getLogger(__name__)


def combined_level(config: RunConfig) -> int:
    """Return the compression level with the extreme bit applied when requested."""
    if config.extreme:
        return config.level | PRESET_EXTREME
    return config.level


def _is_tty(stream) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def dispatch(config: RunConfig, streams: Streams, engine_factory: Callable = Engine):
    """Invoke the engine entry point for ``config.mode``.

    Args:
        config: Parsed configuration.
        streams: Open input and output streams.
        engine_factory: Called with the two streams and the tuning values
            (``threads``, ``queue_size``, ``block_fraction``) to build the engine.

    Returns:
        Whatever the engine entry point returns.

    Raises:
        UsageError: If compressed output would go to a terminal.
    """
    if config.mode is OperationMode.WRITE and _is_tty(streams.output):
        raise UsageError("refusing to output to a TTY")

    engine = engine_factory(
        streams.input,
        streams.output,
        threads=config.threads,
        queue_size=config.queue_size,
        block_fraction=config.block_fraction,
    )
    logger.debug("dispatching %s", config.mode.value)

    if config.mode is OperationMode.WRITE:
        return engine.write(config.tar, combined_level(config))
    if config.mode is OperationMode.READ:
        return engine.read(config.tar, [])
    if config.mode is OperationMode.EXTRACT:
        return engine.read(config.tar, list(config.members))
    return engine.list(config.tar)
