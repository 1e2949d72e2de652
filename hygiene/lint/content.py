"""Content lints: run once per tracked file whose bytes decode as UTF-8."""

from __future__ import annotations

from abc import abstractmethod
from typing import Optional

from ..errors import FileReadError
from .base import EXECUTED, LintFormatter, LintKind, Linter, RunStatus
from .file_path import FilePathContext


class ContentContext:
    """Lint context carrying a file's decoded text alongside its path context."""

    def __init__(self, file_ctx: FilePathContext, content: Optional[str]) -> None:
        self._file_ctx = file_ctx
        self._content = content

    @classmethod
    def load(cls, file_ctx: FilePathContext) -> "ContentContext":
        """Read the file once; ``content()`` is None when it is not valid UTF-8."""
        try:
            raw = file_ctx.full_path().read_bytes()
        except OSError as exc:
            raise FileReadError(file_ctx.file_path(), exc) from exc
        try:
            return cls(file_ctx, raw.decode("utf-8"))
        except UnicodeDecodeError:
            return cls(file_ctx, None)

    def file_ctx(self) -> FilePathContext:
        return self._file_ctx

    def content(self) -> Optional[str]:
        return self._content

    def kind(self) -> LintKind:
        return LintKind.content(self._file_ctx.file_path())


class ContentLinter(Linter):
    """A lint that inspects the text of every tracked file."""

    def pre_run(self, file_ctx: FilePathContext) -> RunStatus:
        """Decide from the path alone whether the file needs to be read."""
        return EXECUTED

    @abstractmethod
    def run(self, ctx: ContentContext, out: LintFormatter) -> RunStatus:
        ...


__all__ = ["ContentContext", "ContentLinter"]
