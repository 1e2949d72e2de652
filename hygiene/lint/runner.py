"""Lint engine: enumerates targets, dispatches lints and collects results."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Sequence, Tuple

from ..errors import LintRunError
from ..logging import get_logger
from .base import (
    LintFormatter,
    LintKind,
    LintLevel,
    LintMessage,
    LintSource,
    Linter,
    RunStatus,
    SkipReason,
)
from .content import ContentContext, ContentLinter
from .file_path import FilePathContext, FilePathLinter
from .package import PackageContext, PackageLinter
from .project import ProjectContext, ProjectLinter

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from ..context import HygieneContext

logger = get_logger("engine")


class EngineState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED_FAST = "failed-fast"


@dataclass
class LintResults:
    """Messages and skipped runs collected over one engine run, in emission order."""

    messages: List[Tuple[LintSource, LintMessage]] = field(default_factory=list)
    skipped: List[Tuple[LintSource, SkipReason]] = field(default_factory=list)
    failed_fast: bool = False

    def errors(self) -> List[Tuple[LintSource, LintMessage]]:
        return [item for item in self.messages if item[1].level is LintLevel.ERROR]

    def warnings(self) -> List[Tuple[LintSource, LintMessage]]:
        return [item for item in self.messages if item[1].level is LintLevel.WARNING]

    def has_errors(self) -> bool:
        return any(message.level is LintLevel.ERROR for _, message in self.messages)

    def skip_summary(self) -> Dict[str, int]:
        """Count skipped runs per lint name."""
        return dict(Counter(source.name for source, _ in self.skipped))


class LintEngineConfig:
    """Builder for :class:`LintEngine`."""

    def __init__(self, core: "HygieneContext") -> None:
        self.core = core
        self.project_linters: Sequence[ProjectLinter] = ()
        self.package_linters: Sequence[PackageLinter] = ()
        self.file_path_linters: Sequence[FilePathLinter] = ()
        self.content_linters: Sequence[ContentLinter] = ()
        self.fail_fast_enabled = False

    def with_project_linters(self, linters: Sequence[ProjectLinter]) -> "LintEngineConfig":
        self.project_linters = tuple(linters)
        return self

    def with_package_linters(self, linters: Sequence[PackageLinter]) -> "LintEngineConfig":
        self.package_linters = tuple(linters)
        return self

    def with_file_path_linters(self, linters: Sequence[FilePathLinter]) -> "LintEngineConfig":
        self.file_path_linters = tuple(linters)
        return self

    def with_content_linters(self, linters: Sequence[ContentLinter]) -> "LintEngineConfig":
        self.content_linters = tuple(linters)
        return self

    def fail_fast(self, enabled: bool) -> "LintEngineConfig":
        self.fail_fast_enabled = enabled
        return self

    def build(self) -> "LintEngine":
        return LintEngine(self)


class LintEngine:
    """Runs configured lints against the workspace, one target at a time.

    Targets are visited in a fixed order: the project, then workspace
    packages by name and version, then tracked paths, then tracked file
    contents. With fail-fast enabled the run stops right after the first
    lint invocation that wrote an error.
    """

    def __init__(self, config: LintEngineConfig) -> None:
        self._config = config
        self.state = EngineState.IDLE

    def run(self) -> LintResults:
        """Run every configured lint and return the collected results.

        System errors (git, graph resolution, file reads) propagate and no
        results are returned. Anything a rule itself raises is re-raised as
        LintRunError naming the rule and the target.
        """
        self.state = EngineState.RUNNING
        results = LintResults()
        project_ctx = ProjectContext(self._config.core)
        stopped = (
            self._run_project(project_ctx, results)
            or self._run_packages(project_ctx, results)
            or self._run_file_paths(project_ctx, results)
            or self._run_contents(project_ctx, results)
        )
        results.failed_fast = stopped
        self.state = EngineState.FAILED_FAST if stopped else EngineState.COMPLETED
        logger.info(
            "Lint run %s: %d messages (%d errors), %d skipped runs",
            "stopped early" if stopped else "finished",
            len(results.messages),
            len(results.errors()),
            len(results.skipped),
        )
        return results

    # ------------------------------------------------------------------
    # Phases

    def _run_project(self, project_ctx: ProjectContext, results: LintResults) -> bool:
        linters = self._config.project_linters
        logger.debug("Running %d project lints", len(linters))
        kind = project_ctx.kind()
        for linter in linters:
            if self._invoke(linter, kind, results, lambda out: linter.run(project_ctx, out)):
                return True
        return False

    def _run_packages(self, project_ctx: ProjectContext, results: LintResults) -> bool:
        linters = self._config.package_linters
        if not linters:
            return False
        graph = project_ctx.package_graph()
        members = graph.workspace_packages()
        logger.debug("Running %d package lints over %d packages", len(linters), len(members))
        for package in members:
            ctx = PackageContext(project_ctx, graph, package.workspace_path or "", package)
            for linter in linters:
                if self._invoke(linter, ctx.kind(), results, lambda out: linter.run(ctx, out)):
                    return True
        return False

    def _run_file_paths(self, project_ctx: ProjectContext, results: LintResults) -> bool:
        linters = self._config.file_path_linters
        if not linters:
            return False
        tracked = project_ctx.core().tracked_files()
        logger.debug("Running %d file path lints over %d paths", len(linters), len(tracked))
        for path in tracked:
            ctx = FilePathContext(project_ctx, path)
            for linter in linters:
                status = self._guarded(linter, ctx.kind(), lambda: linter.pre_run(ctx))
                if status.skip_reason is not None:
                    self._record_skip(linter, ctx.kind(), status.skip_reason, results)
                    continue
                if self._invoke(linter, ctx.kind(), results, lambda out: linter.run(ctx, out)):
                    return True
        return False

    def _run_contents(self, project_ctx: ProjectContext, results: LintResults) -> bool:
        linters = self._config.content_linters
        if not linters:
            return False
        tracked = project_ctx.core().tracked_files()
        logger.debug("Running %d content lints over %d paths", len(linters), len(tracked))
        for path in tracked:
            file_ctx = FilePathContext(project_ctx, path)
            kind = LintKind.content(path)
            pending: List[ContentLinter] = []
            for linter in linters:
                status = self._guarded(linter, kind, lambda: linter.pre_run(file_ctx))
                if status.skip_reason is None:
                    pending.append(linter)
                else:
                    self._record_skip(linter, kind, status.skip_reason, results)
            if not pending:
                continue

            ctx = ContentContext.load(file_ctx)
            if ctx.content() is None:
                for linter in pending:
                    self._record_skip(linter, kind, SkipReason.non_utf8_content(), results)
                continue

            for linter in pending:
                if self._invoke(linter, kind, results, lambda out: linter.run(ctx, out)):
                    return True
        return False

    # ------------------------------------------------------------------
    # Helpers

    def _invoke(
        self,
        linter: Linter,
        kind: LintKind,
        results: LintResults,
        call: Callable[[LintFormatter], RunStatus],
    ) -> bool:
        """Run one lint against one target; True means the run must stop."""
        out = LintFormatter(LintSource(linter.name, kind), results.messages)
        status = self._guarded(linter, kind, lambda: call(out))
        if status.skip_reason is not None:
            self._record_skip(linter, kind, status.skip_reason, results)
        return self._config.fail_fast_enabled and out.wrote_error

    @staticmethod
    def _guarded(linter: Linter, kind: LintKind, call: Callable[[], RunStatus]) -> RunStatus:
        try:
            return call()
        except LintRunError:
            raise
        except Exception as exc:
            raise LintRunError(linter.name, kind, exc) from exc

    @staticmethod
    def _record_skip(
        linter: Linter, kind: LintKind, reason: SkipReason, results: LintResults
    ) -> None:
        results.skipped.append((LintSource(linter.name, kind), reason))


__all__ = ["EngineState", "LintEngine", "LintEngineConfig", "LintResults"]
