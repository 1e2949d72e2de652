"""Helpers for building package graphs and workspaces in tests."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from hygiene.context import HygieneContext
from hygiene.git import GitCli
from hygiene.graph import (
    BuildTarget,
    DependencyEdge,
    DependencyKind,
    PackageGraph,
    PackageNode,
    PackagePublish,
    PackageSource,
)


def package_id(name: str, version: str = "1.0.0") -> str:
    return f"{name} {version}"


class GraphBuilder:
    """Accumulates packages and links, then freezes them into a :class:`PackageGraph`."""

    def __init__(self) -> None:
        self._packages: Dict[str, PackageNode] = {}
        self._edges: List[DependencyEdge] = []

    def member(
        self,
        name: str,
        path: Optional[str] = None,
        *,
        version: str = "0.1.0",
        publish: PackagePublish | None = None,
        authors: Sequence[str] = (),
        license: Optional[str] = None,
        targets: Sequence[BuildTarget] = (),
    ) -> str:
        """Add a workspace member (by default at ``crates/<name>``)."""
        node = PackageNode(
            id=package_id(name, version),
            name=name,
            version=version,
            workspace_path=path if path is not None else f"crates/{name}",
            publish=publish if publish is not None else PackagePublish.never(),
            authors=tuple(authors),
            license=license,
            build_targets=tuple(targets),
        )
        self._packages[node.id] = node
        return node.id

    def third_party(
        self,
        name: str,
        version: str = "1.0.0",
        *,
        source: PackageSource | None = None,
    ) -> str:
        node = PackageNode(
            id=package_id(name, version),
            name=name,
            version=version,
            source=source or PackageSource.registry("https://github.com/rust-lang/crates.io-index"),
        )
        self._packages[node.id] = node
        return node.id

    def git_dep(self, name: str, repository: str, commit: str, version: str = "0.1.0") -> str:
        node = PackageNode(
            id=f"{name} {version} ({commit[:7]})",
            name=name,
            version=version,
            source=PackageSource.git(repository, commit),
        )
        self._packages[node.id] = node
        return node.id

    def link(
        self,
        from_id: str,
        to_id: str,
        *,
        req: str = "*",
        dep_name: Optional[str] = None,
        kinds: Iterable[DependencyKind] = (DependencyKind.NORMAL,),
    ) -> "GraphBuilder":
        self._edges.append(
            DependencyEdge(
                from_id=from_id,
                to_id=to_id,
                dep_name=dep_name or self._packages[to_id].name,
                version_req=req,
                kinds=frozenset(kinds),
            )
        )
        return self

    def build(self) -> PackageGraph:
        return PackageGraph(self._packages.values(), self._edges)


class StaticGraphProvider:
    """Graph provider returning a prebuilt graph and counting resolutions."""

    def __init__(self, graph: PackageGraph) -> None:
        self.graph = graph
        self.calls = 0

    def build_graph(self) -> PackageGraph:
        self.calls += 1
        return self.graph


class FakeGit:
    """Scripted stand-in for the git executable.

    ``responses`` maps a command prefix to ``(returncode, stdout)``.
    """

    def __init__(self, responses: Mapping[Tuple[str, ...], Tuple[int, bytes]] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: List[Tuple[List[str], Path]] = []

    def __call__(self, args, *, cwd):  # type: ignore[no-untyped-def]
        args = list(args)
        self.calls.append((args, Path(cwd)))
        for prefix, (returncode, stdout) in self.responses.items():
            if tuple(args[: len(prefix)]) == prefix:
                return subprocess.CompletedProcess(args, returncode, stdout=stdout)
        return subprocess.CompletedProcess(args, 1, stdout=b"")


class Workspace:
    """A temporary repository whose tracked files are written to disk."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()
        self.tracked: List[str] = []
        self.git = FakeGit()

    def write(self, files: Mapping[str, str | bytes]) -> "Workspace":
        """Write ``path -> contents`` entries and mark them as tracked."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            raw = content if isinstance(content, bytes) else content.encode("utf-8")
            path.write_bytes(raw)
            self.tracked.append(relative)
        return self

    def track(self, *paths: str) -> "Workspace":
        """Mark paths as tracked without writing them."""
        self.tracked.extend(paths)
        return self

    def context(
        self,
        graph: PackageGraph | None = None,
        *,
        workspace_hack: Optional[str] = None,
    ) -> HygieneContext:
        listing = b"".join(path.encode("utf-8") + b"\0" for path in self.tracked)
        self.git.responses[("git", "ls-files")] = (0, listing)
        return HygieneContext(
            self.root,
            git_cli=GitCli(self.root, runner=self.git),
            graph_provider=StaticGraphProvider(graph or GraphBuilder().build()),
            workspace_hack=workspace_hack,
        )


__all__ = [
    "FakeGit",
    "GraphBuilder",
    "StaticGraphProvider",
    "Workspace",
    "package_id",
]
