"""In-memory package graph with forward and reverse adjacency."""

from __future__ import annotations

from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..errors import GraphBuildError
from .models import DependencyEdge, PackageNode, PackageSource


class PackageGraph:
    """Resolved packages and the direct dependency links between them.

    Both adjacency directions are indexed once on construction, so walking
    reverse dependencies costs the same as walking forward ones. Package
    iteration is always ordered by name, then version.
    """

    def __init__(
        self,
        packages: Iterable[PackageNode],
        edges: Iterable[DependencyEdge],
        *,
        workspace_root: Path | None = None,
    ) -> None:
        self.workspace_root = workspace_root
        self._packages: Dict[str, PackageNode] = {}
        for package in packages:
            if package.id in self._packages:
                raise GraphBuildError(f"duplicate package id in graph: {package.id}")
            self._packages[package.id] = package

        self._ordered: List[PackageNode] = sorted(self._packages.values(), key=PackageNode.sort_key)
        self._by_name: Dict[str, List[PackageNode]] = defaultdict(list)
        for package in self._ordered:
            self._by_name[package.name].append(package)

        forward: Dict[str, List[DependencyEdge]] = defaultdict(list)
        reverse: Dict[str, List[DependencyEdge]] = defaultdict(list)
        for edge in edges:
            for endpoint in (edge.from_id, edge.to_id):
                if endpoint not in self._packages:
                    raise GraphBuildError(
                        f"dependency link {edge.from_id} -> {edge.to_id} names unknown package {endpoint}"
                    )
            forward[edge.from_id].append(edge)
            reverse[edge.to_id].append(edge)

        self._forward = {
            key: sorted(value, key=lambda e: self._packages[e.to_id].sort_key())
            for key, value in forward.items()
        }
        self._reverse = {
            key: sorted(value, key=lambda e: self._packages[e.from_id].sort_key())
            for key, value in reverse.items()
        }

    # ------------------------------------------------------------------
    # Package queries

    def packages(self) -> Sequence[PackageNode]:
        return tuple(self._ordered)

    def workspace_packages(self) -> Sequence[PackageNode]:
        return tuple(package for package in self._ordered if package.in_workspace)

    def package(self, package_id: str) -> PackageNode:
        try:
            return self._packages[package_id]
        except KeyError as exc:
            raise GraphBuildError(f"unknown package id: {package_id}") from exc

    def packages_named(self, name: str) -> Sequence[PackageNode]:
        return tuple(self._by_name.get(name, ()))

    def workspace_contains_name(self, name: str) -> bool:
        return any(package.in_workspace for package in self._by_name.get(name, ()))

    def workspace_package_named(self, name: str) -> Optional[PackageNode]:
        for package in self._by_name.get(name, ()):
            if package.in_workspace:
                return package
        return None

    # ------------------------------------------------------------------
    # Link queries

    def direct_links(self, package_id: str) -> Sequence[DependencyEdge]:
        """Links from ``package_id`` to the packages it depends on."""
        return tuple(self._forward.get(package_id, ()))

    def reverse_direct_links(self, package_id: str) -> Sequence[DependencyEdge]:
        """Links from packages that depend on ``package_id``."""
        return tuple(self._reverse.get(package_id, ()))

    def link_endpoints(self, edge: DependencyEdge) -> Tuple[PackageNode, PackageNode]:
        return self._packages[edge.from_id], self._packages[edge.to_id]

    def resolution(self, edge: DependencyEdge) -> PackageSource:
        """How the dependency target of ``edge`` was resolved."""
        return self._packages[edge.to_id].source

    def workspace_direct_links(
        self, *, exclude_from: Optional[str] = None
    ) -> List[Tuple[PackageNode, PackageNode, DependencyEdge]]:
        """One-hop links out of workspace members into third-party packages.

        Traversal never continues past the first hop. Links originating from
        a package named ``exclude_from`` are left out.
        """
        links: List[Tuple[PackageNode, PackageNode, DependencyEdge]] = []
        for package in self.workspace_packages():
            if exclude_from is not None and package.name == exclude_from:
                continue
            for edge in self.direct_links(package.id):
                target = self._packages[edge.to_id]
                if target.in_workspace:
                    continue
                links.append((package, target, edge))
        return links

    def __len__(self) -> int:
        return len(self._packages)


__all__ = ["PackageGraph"]
