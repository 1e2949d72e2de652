"""System errors raised by hygiene.

These abort a lint run. Lint violations are never raised; they are reported
through :class:`hygiene.lint.LintFormatter` instead.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence


class HygieneError(RuntimeError):
    """Base class for fatal errors that stop a run."""


class GitRootError(HygieneError):
    """Raised when the git repository root cannot be determined."""


class CwdNotInProjectRoot(HygieneError):
    """Raised when the working directory lies outside the repository root."""

    def __init__(self, current_dir: Path, project_root: Path) -> None:
        super().__init__(
            f"current directory {current_dir} is not inside the project root {project_root}"
        )
        self.current_dir = current_dir
        self.project_root = project_root


class VcsError(HygieneError):
    """Raised when a git command fails or returns undecodable output."""

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        status: Optional[int] = None,
        path: Optional[bytes] = None,
    ) -> None:
        super().__init__(message)
        self.command = tuple(command)
        self.status = status
        self.path = path

    @classmethod
    def exec_failed(cls, command: Sequence[str], status: int) -> "VcsError":
        joined = " ".join(command)
        return cls(f"`{joined}` exited with status {status}", command=command, status=status)

    @classmethod
    def non_utf8_path(cls, command: Sequence[str], path: bytes) -> "VcsError":
        joined = " ".join(command)
        return cls(
            f"`{joined}` returned a non-UTF-8 path: {path!r}",
            command=command,
            path=path,
        )


class GraphBuildError(HygieneError):
    """Raised when the package graph cannot be resolved."""

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        status: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.command = tuple(command)
        self.status = status


class FileReadError(HygieneError):
    """Raised when a tracked file cannot be read for content lints."""

    def __init__(self, path: str, cause: OSError) -> None:
        super().__init__(f"error while reading {path}: {cause}")
        self.path = path


class LintRunError(HygieneError):
    """Wraps any error raised while a rule was running against a target."""

    def __init__(self, lint_name: str, kind: object, cause: Exception) -> None:
        super().__init__(f"lint '{lint_name}' failed on [{kind}]: {cause}")
        self.lint_name = lint_name
        self.kind = kind
        self.cause = cause


__all__ = [
    "CwdNotInProjectRoot",
    "FileReadError",
    "GitRootError",
    "GraphBuildError",
    "HygieneError",
    "LintRunError",
    "VcsError",
]
