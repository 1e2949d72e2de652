"""Package lints: run once per workspace member."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING

from .base import LintFormatter, LintKind, Linter, RunStatus
from .project import ProjectContext

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from ..graph import PackageGraph, PackageNode


class PackageContext:
    """Lint context for an individual workspace package.

    Unlike :class:`ProjectContext`, building one requires the package graph
    to have been resolved already.
    """

    def __init__(
        self,
        project_ctx: ProjectContext,
        package_graph: "PackageGraph",
        workspace_path: str,
        metadata: "PackageNode",
    ) -> None:
        self._project_ctx = project_ctx
        self._package_graph = package_graph
        self._workspace_path = workspace_path
        self._metadata = metadata

    def project_ctx(self) -> ProjectContext:
        return self._project_ctx

    def package_graph(self) -> "PackageGraph":
        return self._package_graph

    def workspace_path(self) -> str:
        """Return the package directory relative to the workspace root."""
        return self._workspace_path

    def metadata(self) -> "PackageNode":
        return self._metadata

    def kind(self) -> LintKind:
        return LintKind.package(self._metadata.name, self._workspace_path)


class PackageLinter(Linter):
    """A lint that runs once per workspace package."""

    @abstractmethod
    def run(self, ctx: PackageContext, out: LintFormatter) -> RunStatus:
        ...


__all__ = ["PackageContext", "PackageLinter"]
