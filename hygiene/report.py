"""Render lint results for the command line."""

from __future__ import annotations

import sys
from typing import TextIO

from .lint import LintResults
from .logging import get_logger

logger = get_logger("report")


def handle_lint_results(results: LintResults, stream: TextIO | None = None) -> int:
    """Print every message and return the process exit status.

    The status is 1 when at least one error-level message was produced.
    Warnings alone are printed but do not fail the run.
    """
    out = stream if stream is not None else sys.stdout

    for source, message in results.messages:
        out.write(f"[{message.level}] [{source.name}] [{source.kind}]: {message.message}\n\n")

    for source, reason in results.skipped:
        logger.debug("Skipped %s on [%s]: %s", source.name, source.kind, reason)

    if not results.has_errors():
        return 0

    out.write(
        f"there were lint errors ({len(results.errors())} errors, "
        f"{len(results.warnings())} warnings)\n"
    )
    return 1


__all__ = ["handle_lint_results"]
