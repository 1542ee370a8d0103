"""Route TLS library debug output into the ``mbedtls`` logger.

Library debug thresholds 1-4 map to warning, info, debug and verbose.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

TAG = "mbedtls"

VERBOSE = 5
NONE = logging.CRITICAL + 10

logging.addLevelName(VERBOSE, "VERBOSE")

_logger = logging.getLogger(TAG)

DebugCallback = Callable[[int, str, int, str], None]

_LEVELS = {
    1: logging.WARNING,
    2: logging.INFO,
    3: logging.DEBUG,
    4: VERBOSE,
}


@dataclass
class DebugConfig:
    """Debug settings of a TLS configuration: the callback and its threshold."""

    callback: Optional[DebugCallback] = None
    threshold: int = 0


def threshold_to_level(threshold: int) -> int:
    """Return the logging level for a library debug threshold; NONE if unknown."""
    return _LEVELS.get(threshold, NONE)


def enable_debug_log(config: DebugConfig, threshold: int) -> None:
    """Send debug output of ``config`` to the logger, filtered at ``threshold``."""
    config.threshold = threshold
    config.callback = debug_callback
    _logger.setLevel(threshold_to_level(threshold))


def disable_debug_log(config: DebugConfig) -> None:
    """Stop debug output of ``config``."""
    config.callback = None


def debug_callback(level: int, file: str, line: int, text: str) -> None:
    """Log one library debug message, naming only the file, not its path."""
    file = file.rsplit("/", 1)[-1]
    log_level = _LEVELS.get(level)
    if log_level is None:
        _logger.error("Unexpected log level %d: %s", level, text)
    else:
        _logger.log(log_level, "%s:%d %s", file, line, text)