"""File path lint restricting the characters allowed in tracked paths."""

from __future__ import annotations

import re

from ..config import DEFAULT_ALLOWED_PATHS_REGEX, ConfigError
from ..lint import EXECUTED, FilePathContext, FilePathLinter, LintFormatter, LintLevel, RunStatus


class AllowedPaths(FilePathLinter):
    """Every tracked path must fully match a configured regex.

    ``fullmatch`` is used because ``$`` alone also matches before a trailing newline.
    """

    name = "allowed-paths"

    def __init__(self, allowed_paths: str = DEFAULT_ALLOWED_PATHS_REGEX) -> None:
        if not (allowed_paths.startswith("^") and allowed_paths.endswith("$")):
            raise ConfigError(
                f"allowed-paths regex must be anchored with ^ and $: {allowed_paths}"
            )
        try:
            self._allowed_regex = re.compile(allowed_paths)
        except re.error as exc:
            raise ConfigError(f"error while parsing allowed-paths regex: {exc}") from exc

    def run(self, ctx: FilePathContext, out: LintFormatter) -> RunStatus:
        if self._allowed_regex.fullmatch(ctx.file_path()) is None:
            out.write(
                LintLevel.ERROR,
                f"path doesn't match allowed regex: {self._allowed_regex.pattern}",
            )
        return EXECUTED


__all__ = ["AllowedPaths"]
