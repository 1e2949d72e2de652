"""Logging setup for the hygiene CLI."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "hygiene"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``hygiene`` hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send hygiene logs to stderr and, when ``log_file`` is given, to that file.

    Lint messages are printed by :mod:`hygiene.report`, not logged. Logs only
    carry run progress (phases, skipped runs, aborted runs).
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file is not None else level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter("[hygiene] %(levelname)s %(message)s"))
    logger.addHandler(console)

    # The file keeps debug records even without --verbose.
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
