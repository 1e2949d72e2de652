"""Lint taxonomy and engine.

Every lint implements exactly one of the four variants below, matching the
granularity of the target it checks: the whole project, a workspace
package, a tracked file path, or a tracked file's text.
"""

from .base import (
    EXECUTED,
    KindCategory,
    LintFormatter,
    LintKind,
    LintLevel,
    LintMessage,
    LintSource,
    Linter,
    RunStatus,
    SkipKind,
    SkipReason,
)
from .content import ContentContext, ContentLinter
from .file_path import FilePathContext, FilePathLinter
from .package import PackageContext, PackageLinter
from .project import ProjectContext, ProjectLinter
from .runner import EngineState, LintEngine, LintEngineConfig, LintResults

__all__ = [
    "EXECUTED",
    "ContentContext",
    "ContentLinter",
    "EngineState",
    "FilePathContext",
    "FilePathLinter",
    "KindCategory",
    "LintEngine",
    "LintEngineConfig",
    "LintFormatter",
    "LintKind",
    "LintLevel",
    "LintMessage",
    "LintResults",
    "LintSource",
    "Linter",
    "PackageContext",
    "PackageLinter",
    "ProjectContext",
    "ProjectLinter",
    "RunStatus",
    "SkipKind",
    "SkipReason",
]
