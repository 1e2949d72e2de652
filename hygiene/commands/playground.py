"""``hygiene playground``: a scratch space for experimenting with new lints.

Each rule below runs against every target of its kind and reports nothing.
Add experimental checks to their ``run`` methods locally; keep the
committed versions empty.
"""

from __future__ import annotations

from typing import TextIO

from ..context import HygieneContext
from ..lint import (
    EXECUTED,
    ContentContext,
    ContentLinter,
    FilePathContext,
    FilePathLinter,
    LintEngineConfig,
    LintFormatter,
    PackageContext,
    PackageLinter,
    ProjectContext,
    ProjectLinter,
    RunStatus,
)
from ..report import handle_lint_results


class PlaygroundProject(ProjectLinter):
    name = "playground-project"

    def run(self, ctx: ProjectContext, out: LintFormatter) -> RunStatus:
        return EXECUTED


class PlaygroundPackage(PackageLinter):
    name = "playground-package"

    def run(self, ctx: PackageContext, out: LintFormatter) -> RunStatus:
        return EXECUTED


class PlaygroundFilePath(FilePathLinter):
    name = "playground-file-path"

    def run(self, ctx: FilePathContext, out: LintFormatter) -> RunStatus:
        return EXECUTED


class PlaygroundContent(ContentLinter):
    name = "playground-content"

    def run(self, ctx: ContentContext, out: LintFormatter) -> RunStatus:
        return EXECUTED


def run_playground(core: HygieneContext, *, stream: TextIO | None = None) -> int:
    engine = (
        LintEngineConfig(core)
        .with_project_linters([PlaygroundProject()])
        .with_package_linters([PlaygroundPackage()])
        .with_file_path_linters([PlaygroundFilePath()])
        .with_content_linters([PlaygroundContent()])
        .build()
    )
    return handle_lint_results(engine.run(), stream)


__all__ = [
    "PlaygroundContent",
    "PlaygroundFilePath",
    "PlaygroundPackage",
    "PlaygroundProject",
    "run_playground",
]
