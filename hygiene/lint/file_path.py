"""File path lints: run once per tracked file, without reading it."""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path, PurePosixPath
from typing import Optional

from .base import EXECUTED, LintFormatter, LintKind, Linter, RunStatus
from .project import ProjectContext


class FilePathContext:
    """Lint context for a single tracked path, relative to the project root."""

    def __init__(self, project_ctx: ProjectContext, file_path: str) -> None:
        self._project_ctx = project_ctx
        self._file_path = file_path

    def project_ctx(self) -> ProjectContext:
        return self._project_ctx

    def file_path(self) -> str:
        return self._file_path

    def extension(self) -> Optional[str]:
        """Return the extension without its leading dot, or None."""
        suffix = PurePosixPath(self._file_path).suffix
        return suffix[1:] if suffix else None

    def full_path(self) -> Path:
        return self._project_ctx.full_path(self._file_path)

    def kind(self) -> LintKind:
        return LintKind.file_path(self._file_path)


class FilePathLinter(Linter):
    """A lint that inspects the path of every tracked file."""

    def pre_run(self, ctx: FilePathContext) -> RunStatus:
        """Decide whether the lint applies to this path."""
        return EXECUTED

    @abstractmethod
    def run(self, ctx: FilePathContext, out: LintFormatter) -> RunStatus:
        ...


__all__ = ["FilePathContext", "FilePathLinter"]
