"""``hygiene lint``: run the configured rule bundle against the workspace."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, TextIO, Tuple

from ..config import HygieneConfig, load_config
from ..context import HygieneContext
from ..git import GitCli
from ..lint import ContentLinter, FilePathLinter, LintEngineConfig, PackageLinter, ProjectLinter
from ..lints import (
    AllowedPaths,
    BannedDeps,
    CrateNamesPaths,
    CratesInCratesDirectory,
    CratesOnlyInCratesDirectory,
    DirectDepDups,
    DuplicateGitDependencies,
    EnforcedAttributes,
    EofNewline,
    IrrelevantBuildDeps,
    LicenseHeader,
    OnlyPublishToCratesIo,
    PublishedPackagesDontDependOnUnpublishedPackages,
    TrailingWhitespace,
    UnpublishedPackagesOnlyUsePathDependencies,
    build_exceptions,
)
from ..logging import get_logger
from ..report import handle_lint_results

logger = get_logger("commands.lint")


@dataclass
class LinterBundle:
    """Linters for each of the four phases, in run order."""

    project: List[ProjectLinter] = field(default_factory=list)
    package: List[PackageLinter] = field(default_factory=list)
    file_path: List[FilePathLinter] = field(default_factory=list)
    content: List[ContentLinter] = field(default_factory=list)

    def names(self) -> List[str]:
        linters = (*self.project, *self.package, *self.file_path, *self.content)
        return [linter.name for linter in linters]


def build_linters(config: HygieneConfig) -> LinterBundle:
    """Instantiate the rule set described by ``config``.

    Raises ConfigError when a configured regex or glob is invalid.
    """
    bundle = LinterBundle()

    if config.banned_deps.banned:
        bundle.project.append(BannedDeps(config.banned_deps))
    bundle.project.append(DirectDepDups(config.direct_dep_dups))
    bundle.project.append(DuplicateGitDependencies())

    if config.enforced_attributes is not None:
        bundle.package.append(EnforcedAttributes(config.enforced_attributes))
    bundle.package.extend(
        [
            CrateNamesPaths(),
            IrrelevantBuildDeps(),
            UnpublishedPackagesOnlyUsePathDependencies(),
            PublishedPackagesDontDependOnUnpublishedPackages(),
            OnlyPublishToCratesIo(),
        ]
    )
    if config.crates_directory.enforce:
        directory = config.crates_directory.name
        bundle.package.append(CratesInCratesDirectory(directory))
        bundle.package.append(CratesOnlyInCratesDirectory(directory))

    bundle.file_path.append(AllowedPaths(config.allowed_paths))

    exceptions = build_exceptions(config.whitespace_exceptions)
    if config.license_header is not None:
        bundle.content.append(LicenseHeader(config.license_header))
    bundle.content.append(EofNewline(exceptions))
    bundle.content.append(TrailingWhitespace(exceptions))

    logger.debug("Configured lints: %s", ", ".join(bundle.names()))
    return bundle


def load_context(config_path: Path | None = None) -> Tuple[HygieneContext, HygieneConfig]:
    """Locate the repository from the working directory and load its config.

    Without ``config_path`` the config file is looked up at the repository root
    and may be absent. An explicit ``config_path`` must exist.
    """
    git_cli = GitCli(cwd=Path.cwd())
    if config_path is None:
        config = load_config(git_cli.root)
    else:
        config = load_config(config_path, required=True)
    core = HygieneContext.from_current_dir(config, git_cli=git_cli)
    return core, config


def run_lint(
    core: HygieneContext,
    config: HygieneConfig,
    *,
    fail_fast: bool = False,
    stream: TextIO | None = None,
) -> int:
    bundle = build_linters(config)
    engine = (
        LintEngineConfig(core)
        .with_project_linters(bundle.project)
        .with_package_linters(bundle.package)
        .with_file_path_linters(bundle.file_path)
        .with_content_linters(bundle.content)
        .fail_fast(fail_fast)
        .build()
    )
    results = engine.run()
    return handle_lint_results(results, stream)


__all__ = ["LinterBundle", "build_linters", "load_context", "run_lint"]
