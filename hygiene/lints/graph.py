"""Project and package lints that query the resolved package graph.

Every traversal ignores links that originate from the workspace-hack
package: it depends on everything to unify feature sets and would
otherwise show up as a dependent of every third-party package.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Dict, List, Tuple

from ..config import (
    BannedDepsConfig,
    BannedDepType,
    DirectDepDupsConfig,
    EnforcedAttributesConfig,
)
from ..graph import DependencyKind, PackagePublish, PublishKind, is_any_version, version_sort_key
from ..lint import (
    EXECUTED,
    LintFormatter,
    LintKind,
    LintLevel,
    PackageContext,
    PackageLinter,
    ProjectContext,
    ProjectLinter,
    RunStatus,
)

DEFAULT_CRATES_DIRECTORY = "crates"


def _is_workspace_hack(ctx: PackageContext) -> bool:
    hack = ctx.project_ctx().workspace_hack_name()
    return hack is not None and ctx.metadata().name == hack


class BannedDeps(ProjectLinter):
    """Ban certain packages from being used as dependencies."""

    name = "banned-deps"

    def __init__(self, config: BannedDepsConfig) -> None:
        self._config = config

    def run(self, ctx: ProjectContext, out: LintFormatter) -> RunStatus:
        graph = ctx.package_graph()
        hack = ctx.workspace_hack_name()

        for banned_name in sorted(self._config.banned):
            config = self._config.banned[banned_name]
            packages = graph.packages_named(banned_name)

            if config.type is BannedDepType.ALWAYS:
                for package in packages:
                    out.write_kind(
                        LintKind.project(),
                        LintLevel.ERROR,
                        f"banned project dependency '{package.name}': {config.message}",
                    )
                continue

            # Dependents are ordered by name across every resolved version.
            dependents: List[Tuple[str, str]] = []
            for package in packages:
                for link in graph.reverse_direct_links(package.id):
                    dependent = graph.package(link.from_id)
                    if dependent.workspace_path is None:
                        continue
                    if hack is not None and dependent.name == hack:
                        continue
                    dependents.append((dependent.name, dependent.workspace_path))

            for name, workspace_path in sorted(dependents):
                out.write_kind(
                    LintKind.package(name, workspace_path),
                    LintLevel.ERROR,
                    f"banned direct dependency '{banned_name}': {config.message}",
                )

        return EXECUTED


class DirectDepDups(ProjectLinter):
    """Ensure the workspace depends directly on only one version of each third-party package."""

    name = "direct-dep-dups"

    def __init__(self, config: DirectDepDupsConfig) -> None:
        self._config = config

    def run(self, ctx: ProjectContext, out: LintFormatter) -> RunStatus:
        graph = ctx.package_graph()
        allowed = set(self._config.allow)

        # name -> version -> workspace packages that depend on it directly
        direct_deps: Dict[str, Dict[str, List[str]]] = {}
        for source, target, _ in graph.workspace_direct_links(exclude_from=ctx.workspace_hack_name()):
            direct_deps.setdefault(target.name, {}).setdefault(target.version, []).append(source.name)

        for dep_name in sorted(direct_deps):
            if dep_name in allowed:
                continue
            versions = direct_deps[dep_name]
            if len(versions) <= 1:
                continue
            lines = [f"duplicate direct dependency '{dep_name}':"]
            for version in sorted(versions, key=version_sort_key):
                lines.append(f"  * {version} ({', '.join(sorted(versions[version]))})")
            out.write(LintLevel.ERROR, "\n".join(lines))

        return EXECUTED


class DuplicateGitDependencies(ProjectLinter):
    """Ensure direct git dependencies on one repository resolve to a single commit."""

    name = "direct-duplicate-git-dependencies"

    def run(self, ctx: ProjectContext, out: LintFormatter) -> RunStatus:
        graph = ctx.package_graph()

        # repository -> resolved commit -> (dependent, dependency) name pairs
        repositories: Dict[str, Dict[str, List[Tuple[str, str]]]] = {}
        for source, target, _ in graph.workspace_direct_links(exclude_from=ctx.workspace_hack_name()):
            git = target.source.git_source()
            if git is None:
                continue
            repository, resolved = git
            repositories.setdefault(repository, {}).setdefault(resolved, []).append(
                (source.name, target.name)
            )

        for repository in sorted(repositories):
            commits = repositories[repository]
            if len(commits) <= 1:
                continue
            lines = [f"duplicate git dependency on repository '{repository}':"]
            for resolved in sorted(commits):
                lines.append(f"  * {resolved}:")
                for from_name, to_name in sorted(commits[resolved]):
                    lines.append(f"    * {from_name} -> {to_name}")
            out.write(LintLevel.ERROR, "\n".join(lines))

        return EXECUTED


class EnforcedAttributes(PackageLinter):
    """Enforce authors and license on workspace packages."""

    name = "enforced-attributes"

    def __init__(self, config: EnforcedAttributesConfig) -> None:
        self._config = config

    def run(self, ctx: PackageContext, out: LintFormatter) -> RunStatus:
        metadata = ctx.metadata()
        authors = self._config.authors
        if authors is not None and list(metadata.authors) != list(authors):
            out.write(LintLevel.ERROR, f'invalid authors (expected "{", ".join(authors)}")')
        expected_license = self._config.license
        if expected_license is not None and metadata.license != expected_license:
            out.write(LintLevel.ERROR, f"invalid license (expected {expected_license})")
        return EXECUTED


class CrateNamesPaths(PackageLinter):
    """Package names, paths and target names use '-' rather than '_'."""

    name = "crate-names-paths"

    def run(self, ctx: PackageContext, out: LintFormatter) -> RunStatus:
        metadata = ctx.metadata()
        if "_" in metadata.name:
            out.write(LintLevel.ERROR, "crate name contains '_' (use '-' instead)")

        if "_" in ctx.workspace_path():
            out.write(LintLevel.ERROR, "workspace path contains '_' (use '-' instead)")

        for target in metadata.build_targets:
            # A name implied by the file stem (e.g. tests/foo_bar.rs) is fine.
            if "_" in target.name and target.file_stem() != target.name:
                out.write(
                    LintLevel.ERROR,
                    f"build target '{target.name}' contains '_' (use '-' instead)",
                )

        return EXECUTED


class IrrelevantBuildDeps(PackageLinter):
    """Packages with build dependencies must have a build script."""

    name = "irrelevant-build-deps"

    def run(self, ctx: PackageContext, out: LintFormatter) -> RunStatus:
        metadata = ctx.metadata()
        has_build_dep = any(
            link.has_kind(DependencyKind.BUILD)
            for link in ctx.package_graph().direct_links(metadata.id)
        )
        if has_build_dep and not metadata.has_build_script:
            out.write(LintLevel.ERROR, "build dependencies but no build script")
        return EXECUTED


class UnpublishedPackagesOnlyUsePathDependencies(PackageLinter):
    """Unpublished packages depend on first-party packages by path only."""

    name = "unpublished-packages-only-use-path-dependencies"

    def run(self, ctx: PackageContext, out: LintFormatter) -> RunStatus:
        metadata = ctx.metadata()
        if not metadata.publish.is_never() or _is_workspace_hack(ctx):
            return EXECUTED

        graph = ctx.package_graph()
        for link in graph.direct_links(metadata.id):
            if not graph.package(link.to_id).in_workspace:
                continue
            if not is_any_version(link.version_req):
                out.write(
                    LintLevel.ERROR,
                    f"unpublished package specifies a version of first-party dependency "
                    f"'{link.dep_name}' ({link.version_req}); unpublished packages should "
                    f"only use path dependencies for first-party packages.",
                )
        return EXECUTED


class PublishedPackagesDontDependOnUnpublishedPackages(PackageLinter):
    """Published packages may only depend on other published packages."""

    name = "published-packages-dont-depend-on-unpublished-packages"

    def run(self, ctx: PackageContext, out: LintFormatter) -> RunStatus:
        metadata = ctx.metadata()
        if metadata.publish.is_never() or _is_workspace_hack(ctx):
            return EXECUTED

        graph = ctx.package_graph()
        for link in graph.direct_links(metadata.id):
            if graph.package(link.to_id).publish.is_never():
                out.write(
                    LintLevel.ERROR,
                    f"published package can't depend on unpublished package '{link.dep_name}'",
                )
        return EXECUTED


class OnlyPublishToCratesIo(PackageLinter):
    """Publishable packages may only be published to crates.io."""

    name = "only-publish-to-crates-io"

    def run(self, ctx: PackageContext, out: LintFormatter) -> RunStatus:
        publish = ctx.metadata().publish
        if publish.kind is PublishKind.UNRESTRICTED:
            is_ok = False
        else:
            # No registries at all means the package is never published.
            is_ok = publish.registries in ((), (PackagePublish.CRATES_IO,))

        if not is_ok:
            out.write(
                LintLevel.ERROR,
                "published package should only be publishable to crates.io. "
                "If you intend to publish this package, ensure the 'publish' field in the "
                "package's Cargo.toml is 'publish = [\"crates-io\"]'. "
                "Otherwise set the 'publish' field to 'publish = false'.",
            )
        return EXECUTED


class CratesInCratesDirectory(PackageLinter):
    """Packages under the crates directory sit in a flat directory named after the package."""

    name = "crates-in-crates-directory"

    def __init__(self, directory: str = DEFAULT_CRATES_DIRECTORY) -> None:
        self._directory = directory

    def run(self, ctx: PackageContext, out: LintFormatter) -> RunStatus:
        parts = PurePosixPath(ctx.workspace_path()).parts
        if not parts or parts[0] != self._directory:
            return EXECUTED

        if len(parts) < 2 or parts[1] != ctx.metadata().name:
            out.write(
                LintLevel.ERROR,
                f"crates in the `{self._directory}/` directory must be in a directory "
                f"with the same name as the crate",
            )
        if len(parts) > 2:
            out.write(
                LintLevel.ERROR,
                f"crates in the `{self._directory}/` directory must be in a flat "
                f"directory structure, no nesting",
            )
        return EXECUTED


class CratesOnlyInCratesDirectory(PackageLinter):
    """Every workspace package lives under the crates directory."""

    name = "crates-only-in-crates-directory"

    def __init__(self, directory: str = DEFAULT_CRATES_DIRECTORY) -> None:
        self._directory = directory

    def run(self, ctx: PackageContext, out: LintFormatter) -> RunStatus:
        parts = PurePosixPath(ctx.workspace_path()).parts
        if not parts or parts[0] != self._directory:
            out.write(
                LintLevel.ERROR,
                f"crates are only allowed to be in the `{self._directory}/` directory",
            )
        return EXECUTED


__all__ = [
    "BannedDeps",
    "CrateNamesPaths",
    "CratesInCratesDirectory",
    "CratesOnlyInCratesDirectory",
    "DEFAULT_CRATES_DIRECTORY",
    "DirectDepDups",
    "DuplicateGitDependencies",
    "EnforcedAttributes",
    "IrrelevantBuildDeps",
    "OnlyPublishToCratesIo",
    "PublishedPackagesDontDependOnUnpublishedPackages",
    "UnpublishedPackagesOnlyUsePathDependencies",
]
