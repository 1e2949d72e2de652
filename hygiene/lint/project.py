"""Project-wide lints: run once per run."""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .base import LintFormatter, LintKind, Linter, RunStatus

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from ..context import HygieneContext
    from ..graph import PackageGraph


class ProjectContext:
    """Overall lint context for a project."""

    def __init__(self, core: "HygieneContext") -> None:
        self._core = core

    def core(self) -> "HygieneContext":
        return self._core

    def project_root(self) -> Path:
        return self._core.project_root()

    def package_graph(self) -> "PackageGraph":
        """Return the package graph, computing it for the first time if necessary."""
        return self._core.package_graph()

    def full_path(self, path: str | Path) -> Path:
        """Return the absolute path for a path relative to the project root."""
        return self._core.full_path(path)

    def workspace_hack_name(self) -> Optional[str]:
        return self._core.workspace_hack_name()

    def kind(self) -> LintKind:
        return LintKind.project()


class ProjectLinter(Linter):
    """A lint that checks a property of the project as a whole."""

    @abstractmethod
    def run(self, ctx: ProjectContext, out: LintFormatter) -> RunStatus:
        """Execute the lint against the project."""


__all__ = ["ProjectContext", "ProjectLinter"]
