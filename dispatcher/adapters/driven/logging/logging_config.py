"""Console logging setup for the dispatcher."""

import logging
import os
import sys

__all__ = ["configure_logs"]

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%d/%m/%y %H:%M:%S"


def configure_logs() -> None:
    """Configure console logging.

    Sets up:
    - Root logger at DISPATCH_LOG_LEVEL (INFO by default), writing to stderr
      so that stdout carries only the response body.
    - Framework loggers (aiohttp, asyncio) at WARNING level.
    - Timestamp, level, module, and line number in every record.
    """
    level_name = os.getenv("DISPATCH_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Re-configuring must not stack handlers
    if not any(getattr(h, "_dispatcher_handler", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handler._dispatcher_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    # Suppress verbose framework loggers
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
