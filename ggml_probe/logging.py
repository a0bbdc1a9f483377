# ggml_probe/logging.py
"""
Loguru setup for the ggprobe CLI and embedding applications.

Library modules only emit through ``loguru.logger``; sinks are installed here.
"""
from __future__ import annotations

import sys
from typing import Any, Optional, TextIO

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> "
    "| <level>{level: <8}</level> "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> "
    "- <level>{message}</level>"
)


def configure_logging(
    *, debug: bool = False, serialize: bool = False, sink: Optional[TextIO] = None
) -> int:
    """Replace loguru's sinks with a single console sink.

    Args:
        debug: Log at DEBUG (decode transitions, timings) instead of INFO.
        serialize: Emit one JSON record per line instead of coloured text.
        sink: Stream to write to; defaults to stderr.

    Returns:
        The loguru handler id.
    """
    logger.remove()
    opts: dict[str, Any] = {
        "level": "DEBUG" if debug else "INFO",
        "backtrace": debug,
        "diagnose": debug,
    }
    if serialize:
        opts["serialize"] = True
    else:
        opts["format"] = CONSOLE_FORMAT
    return logger.add(sink or sys.stderr, **opts)
