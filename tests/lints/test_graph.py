"""Tests for the dependency-graph lint rules."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from hygiene.config import (
    BannedDepConfig,
    BannedDepsConfig,
    BannedDepType,
    DirectDepDupsConfig,
    EnforcedAttributesConfig,
)
from hygiene.graph import BuildTarget, DependencyKind, PackageGraph, PackagePublish
from hygiene.lint import LintEngineConfig, PackageLinter, ProjectLinter
from hygiene.lints import (
    BannedDeps,
    CrateNamesPaths,
    CratesInCratesDirectory,
    CratesOnlyInCratesDirectory,
    DirectDepDups,
    DuplicateGitDependencies,
    EnforcedAttributes,
    IrrelevantBuildDeps,
    OnlyPublishToCratesIo,
    PublishedPackagesDontDependOnUnpublishedPackages,
    UnpublishedPackagesOnlyUsePathDependencies,
)
from tests._fixtures.graph_builder import GraphBuilder, Workspace

HACK = "workspace-hack"


def _run(
    workspace: Workspace,
    graph: PackageGraph,
    *,
    project: Sequence[ProjectLinter] = (),
    package: Sequence[PackageLinter] = (),
) -> List[Tuple[str, str]]:
    """Run lints and return ``(kind, message)`` pairs."""
    results = (
        LintEngineConfig(workspace.context(graph, workspace_hack=HACK))
        .with_project_linters(project)
        .with_package_linters(package)
        .build()
        .run()
    )
    return [(str(source.kind), message.message) for source, message in results.messages]


def _banned(name: str, dep_type: BannedDepType) -> BannedDepsConfig:
    return BannedDepsConfig({name: BannedDepConfig(message="use rustls instead", type=dep_type)})


# ----------------------------------------------------------------------
# banned-deps


def test_banned_always_reports_any_occurrence(workspace: Workspace, graph_builder: GraphBuilder) -> None:
    app = graph_builder.member("app")
    reqwest = graph_builder.third_party("reqwest")
    openssl = graph_builder.third_party("openssl-sys")
    graph_builder.link(app, reqwest).link(reqwest, openssl)

    messages = _run(workspace, graph_builder.build(), project=[BannedDeps(_banned("openssl-sys", BannedDepType.ALWAYS))])

    assert messages == [("project", "banned project dependency 'openssl-sys': use rustls instead")]


def test_banned_direct_reports_each_direct_dependent(
    workspace: Workspace, graph_builder: GraphBuilder
) -> None:
    app = graph_builder.member("app")
    cli = graph_builder.member("cli")
    hack = graph_builder.member(HACK)
    reqwest = graph_builder.third_party("reqwest")
    openssl = graph_builder.third_party("openssl-sys")
    graph_builder.link(app, openssl).link(cli, reqwest).link(reqwest, openssl).link(hack, openssl)

    messages = _run(workspace, graph_builder.build(), project=[BannedDeps(_banned("openssl-sys", BannedDepType.DIRECT))])

    assert messages == [
        ("package app (crates/app)", "banned direct dependency 'openssl-sys': use rustls instead")
    ]


def test_banned_direct_orders_dependents_by_name_across_versions(
    workspace: Workspace, graph_builder: GraphBuilder
) -> None:
    zeta = graph_builder.member("zeta")
    app = graph_builder.member("app")
    mid = graph_builder.member("mid")
    old = graph_builder.third_party("openssl-sys", "0.9.60")
    new = graph_builder.third_party("openssl-sys", "0.9.100")
    graph_builder.link(zeta, old).link(mid, old).link(app, new)

    messages = _run(workspace, graph_builder.build(), project=[BannedDeps(_banned("openssl-sys", BannedDepType.DIRECT))])

    assert messages == [
        ("package app (crates/app)", "banned direct dependency 'openssl-sys': use rustls instead"),
        ("package mid (crates/mid)", "banned direct dependency 'openssl-sys': use rustls instead"),
        ("package zeta (crates/zeta)", "banned direct dependency 'openssl-sys': use rustls instead"),
    ]


def test_banned_dependency_absent_is_clean(workspace: Workspace, graph_builder: GraphBuilder) -> None:
    graph_builder.member("app")

    messages = _run(workspace, graph_builder.build(), project=[BannedDeps(_banned("openssl-sys", BannedDepType.ALWAYS))])

    assert messages == []


# ----------------------------------------------------------------------
# direct-dep-dups


def test_direct_dep_dups_lists_versions_and_dependents(
    workspace: Workspace, graph_builder: GraphBuilder
) -> None:
    app = graph_builder.member("app")
    cli = graph_builder.member("cli")
    tool = graph_builder.member("tool")
    rand7 = graph_builder.third_party("rand", "0.7.3")
    rand8 = graph_builder.third_party("rand", "0.8.5")
    graph_builder.link(tool, rand8).link(app, rand8).link(cli, rand7)

    messages = _run(workspace, graph_builder.build(), project=[DirectDepDups(DirectDepDupsConfig())])

    assert messages == [
        ("project", "duplicate direct dependency 'rand':\n  * 0.7.3 (cli)\n  * 0.8.5 (app, tool)")
    ]


def test_direct_dep_dups_ignores_transitive_allowed_and_hack(
    workspace: Workspace, graph_builder: GraphBuilder
) -> None:
    app = graph_builder.member("app")
    hack = graph_builder.member(HACK)
    rand7 = graph_builder.third_party("rand", "0.7.3")
    rand8 = graph_builder.third_party("rand", "0.8.5")
    syn1 = graph_builder.third_party("syn", "1.0.0")
    syn2 = graph_builder.third_party("syn", "2.0.0")
    serde = graph_builder.third_party("serde")
    graph_builder.link(app, rand8).link(hack, rand7)
    graph_builder.link(app, serde).link(serde, syn1).link(app, syn2)
    log1 = graph_builder.third_party("log", "0.3.9")
    log2 = graph_builder.third_party("log", "0.4.20")
    graph_builder.link(app, log1).link(app, log2)

    messages = _run(
        workspace,
        graph_builder.build(),
        project=[DirectDepDups(DirectDepDupsConfig(allow=["log"]))],
    )

    assert messages == []


# ----------------------------------------------------------------------
# direct-duplicate-git-dependencies


def test_duplicate_git_dependencies(workspace: Workspace, graph_builder: GraphBuilder) -> None:
    repo = "https://github.com/org/tools"
    app = graph_builder.member("app")
    cli = graph_builder.member("cli")
    old = graph_builder.git_dep("tool-a", repo, "a" * 40)
    new = graph_builder.git_dep("tool-b", repo, "b" * 40)
    graph_builder.link(app, old).link(cli, new)

    messages = _run(workspace, graph_builder.build(), project=[DuplicateGitDependencies()])

    assert messages == [
        (
            "project",
            f"duplicate git dependency on repository '{repo}':\n"
            f"  * {'a' * 40}:\n"
            f"    * app -> tool-a\n"
            f"  * {'b' * 40}:\n"
            f"    * cli -> tool-b",
        )
    ]


def test_single_git_commit_is_clean(workspace: Workspace, graph_builder: GraphBuilder) -> None:
    repo = "https://github.com/org/tools"
    app = graph_builder.member("app")
    cli = graph_builder.member("cli")
    tool_a = graph_builder.git_dep("tool-a", repo, "a" * 40)
    tool_b = graph_builder.git_dep("tool-b", repo, "a" * 40)
    graph_builder.link(app, tool_a).link(cli, tool_b)

    assert _run(workspace, graph_builder.build(), project=[DuplicateGitDependencies()]) == []


# ----------------------------------------------------------------------
# publishing rules


def test_unpublished_package_must_use_path_dependencies(
    workspace: Workspace, graph_builder: GraphBuilder
) -> None:
    app = graph_builder.member("app", publish=PackagePublish.never())
    core = graph_builder.member("core", publish=PackagePublish.never())
    serde = graph_builder.third_party("serde")
    graph_builder.link(app, core, req="^0.1").link(app, serde, req="^1.0")

    messages = _run(workspace, graph_builder.build(), package=[UnpublishedPackagesOnlyUsePathDependencies()])

    assert messages == [
        (
            "package app (crates/app)",
            "unpublished package specifies a version of first-party dependency 'core' (^0.1); "
            "unpublished packages should only use path dependencies for first-party packages.",
        )
    ]


def test_unpublished_path_dependency_is_clean(workspace: Workspace, graph_builder: GraphBuilder) -> None:
    app = graph_builder.member("app", publish=PackagePublish.never())
    core = graph_builder.member("core", publish=PackagePublish.never())
    graph_builder.link(app, core, req="*")

    assert _run(workspace, graph_builder.build(), package=[UnpublishedPackagesOnlyUsePathDependencies()]) == []


def test_published_package_cannot_depend_on_unpublished(
    workspace: Workspace, graph_builder: GraphBuilder
) -> None:
    lib = graph_builder.member("lib", publish=PackagePublish.to_registries("crates-io"))
    internal = graph_builder.member("internal", publish=PackagePublish.never())
    graph_builder.link(lib, internal, req="^0.1")

    messages = _run(workspace, graph_builder.build(), package=[PublishedPackagesDontDependOnUnpublishedPackages()])

    assert messages == [
        ("package lib (crates/lib)", "published package can't depend on unpublished package 'internal'")
    ]


def test_only_publish_to_crates_io(workspace: Workspace, graph_builder: GraphBuilder) -> None:
    graph_builder.member("open", publish=PackagePublish.unrestricted())
    graph_builder.member("private", publish=PackagePublish.to_registries("my-registry"))
    graph_builder.member("good", publish=PackagePublish.to_registries("crates-io"))
    graph_builder.member("never", publish=PackagePublish.never())

    messages = _run(workspace, graph_builder.build(), package=[OnlyPublishToCratesIo()])

    assert [kind for kind, _ in messages] == [
        "package open (crates/open)",
        "package private (crates/private)",
    ]
    assert messages[0][1].startswith("published package should only be publishable to crates.io.")


# ----------------------------------------------------------------------
# package metadata rules


def test_enforced_attributes(workspace: Workspace, graph_builder: GraphBuilder) -> None:
    graph_builder.member("good", authors=["Team <team@example.com>"], license="MIT")
    graph_builder.member("bad", authors=["Someone"], license="GPL-3.0")
    config = EnforcedAttributesConfig(authors=["Team <team@example.com>"], license="MIT")

    messages = _run(workspace, graph_builder.build(), package=[EnforcedAttributes(config)])

    assert messages == [
        ("package bad (crates/bad)", 'invalid authors (expected "Team <team@example.com>")'),
        ("package bad (crates/bad)", "invalid license (expected MIT)"),
    ]


def test_crate_names_paths(workspace: Workspace, graph_builder: GraphBuilder) -> None:
    graph_builder.member(
        "snake_case",
        "crates/snake_case",
        targets=[
            BuildTarget("my_test", ("test",), "/ws/crates/snake_case/tests/my_test.rs"),
            BuildTarget("odd_name", ("bin",), "/ws/crates/snake_case/src/main.rs"),
        ],
    )
    graph_builder.member("fine")

    messages = _run(workspace, graph_builder.build(), package=[CrateNamesPaths()])

    assert [message for _, message in messages] == [
        "crate name contains '_' (use '-' instead)",
        "workspace path contains '_' (use '-' instead)",
        "build target 'odd_name' contains '_' (use '-' instead)",
    ]


def test_irrelevant_build_deps(workspace: Workspace, graph_builder: GraphBuilder) -> None:
    script = BuildTarget("build-script-build", ("custom-build",), "/ws/crates/with-script/build.rs")
    with_script = graph_builder.member("with-script", targets=[script])
    without = graph_builder.member("without-script")
    cc = graph_builder.third_party("cc")
    graph_builder.link(with_script, cc, kinds=[DependencyKind.BUILD])
    graph_builder.link(without, cc, kinds=[DependencyKind.BUILD, DependencyKind.NORMAL])

    messages = _run(workspace, graph_builder.build(), package=[IrrelevantBuildDeps()])

    assert messages == [
        ("package without-script (crates/without-script)", "build dependencies but no build script")
    ]


def test_crates_directory_layout(workspace: Workspace, graph_builder: GraphBuilder) -> None:
    graph_builder.member("good")
    graph_builder.member("renamed", "crates/other-name")
    graph_builder.member("nested", "crates/group/nested")
    graph_builder.member("outside", "tools/outside")

    messages = _run(
        workspace,
        graph_builder.build(),
        package=[CratesInCratesDirectory(), CratesOnlyInCratesDirectory()],
    )

    assert messages == [
        (
            "package nested (crates/group/nested)",
            "crates in the `crates/` directory must be in a directory with the same name as the crate",
        ),
        (
            "package nested (crates/group/nested)",
            "crates in the `crates/` directory must be in a flat directory structure, no nesting",
        ),
        ("package outside (tools/outside)", "crates are only allowed to be in the `crates/` directory"),
        (
            "package renamed (crates/other-name)",
            "crates in the `crates/` directory must be in a directory with the same name as the crate",
        ),
    ]


def test_crate_named_after_its_directory_but_nested_is_reported_once(
    workspace: Workspace, graph_builder: GraphBuilder
) -> None:
    graph_builder.member("foo", "crates/foo/sub")

    messages = _run(workspace, graph_builder.build(), package=[CratesInCratesDirectory()])

    assert messages == [
        (
            "package foo (crates/foo/sub)",
            "crates in the `crates/` directory must be in a flat directory structure, no nesting",
        )
    ]
