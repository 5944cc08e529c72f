"""Logging configuration for the server and the headless runner."""

from __future__ import annotations

import logging
import sys

# Polled endpoints would otherwise log every ~30 Hz request.
_NOISY_LOGGERS = ("uvicorn.access",)


def setup_logging(level: str = "INFO", quiet_access: bool = True) -> None:
    """Install a single stdout handler on the root logger.

    Unknown level names fall back to INFO.
    """
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5s] %(threadName)-12s %(name)-28s | %(message)s",
            datefmt="%H:%M:%S",
        )
    )

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)

    if quiet_access:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
