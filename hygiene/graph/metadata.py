"""Build a :class:`PackageGraph` from ``cargo metadata`` output."""

from __future__ import annotations

import json
import subprocess
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple
from urllib.parse import urlsplit, urlunsplit

from ..errors import GraphBuildError
from ..logging import get_logger
from .models import (
    BuildTarget,
    DependencyEdge,
    DependencyKind,
    PackageNode,
    PackagePublish,
    PackageSource,
)
from .package_graph import PackageGraph
from .versions import ANY_VERSION

Runner = Callable[..., "subprocess.CompletedProcess[bytes]"]

logger = get_logger("graph")

_KIND_BY_NAME = {
    None: DependencyKind.NORMAL,
    "normal": DependencyKind.NORMAL,
    "build": DependencyKind.BUILD,
    "dev": DependencyKind.DEV,
}


class MetadataCommand:
    """Runs ``cargo metadata`` in a workspace and resolves the package graph."""

    def __init__(
        self,
        workspace_root: Path,
        *,
        runner: Runner | None = None,
        cargo: str = "cargo",
    ) -> None:
        self.workspace_root = workspace_root
        self._runner = runner or self._default_runner
        self._cargo = cargo

    def command(self) -> List[str]:
        return [self._cargo, "metadata", "--format-version", "1"]

    def build_graph(self) -> PackageGraph:
        args = self.command()
        logger.debug("Resolving package graph with `%s`", " ".join(args))
        try:
            completed = self._runner(args, cwd=self.workspace_root)
        except OSError as exc:
            raise GraphBuildError(f"running {' '.join(args)}: {exc}", command=args) from exc
        if completed.returncode != 0:
            raise GraphBuildError(
                f"`{' '.join(args)}` exited with status {completed.returncode}",
                command=args,
                status=completed.returncode,
            )
        try:
            payload = json.loads(completed.stdout)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise GraphBuildError(f"invalid JSON from cargo metadata: {exc}", command=args) from exc
        return parse_metadata(payload)

    @staticmethod
    def _default_runner(
        args: Iterable[str],
        *,
        cwd: Path,
    ) -> "subprocess.CompletedProcess[bytes]":
        return subprocess.run(
            list(args),
            cwd=str(cwd),
            check=False,
            stdout=subprocess.PIPE,
        )


def parse_metadata(payload: Any) -> PackageGraph:
    """Convert a decoded ``cargo metadata`` document into a package graph."""
    if not isinstance(payload, dict):
        raise GraphBuildError("cargo metadata output must be a JSON object")

    root_value = payload.get("workspace_root")
    if not isinstance(root_value, str):
        raise GraphBuildError("cargo metadata output is missing 'workspace_root'")
    workspace_root = Path(root_value)

    members = payload.get("workspace_members")
    if not isinstance(members, list):
        raise GraphBuildError("cargo metadata output is missing 'workspace_members'")
    member_ids: Set[str] = {str(member) for member in members}

    raw_packages = payload.get("packages")
    if not isinstance(raw_packages, list):
        raise GraphBuildError("cargo metadata output is missing 'packages'")
    raw_by_id: Dict[str, Mapping[str, Any]] = {}
    packages: List[PackageNode] = []
    for raw in raw_packages:
        package = _parse_package(raw, workspace_root, member_ids)
        raw_by_id[package.id] = raw
        packages.append(package)
    packages_by_id = {package.id: package for package in packages}

    resolve = payload.get("resolve")
    if not isinstance(resolve, dict) or not isinstance(resolve.get("nodes"), list):
        raise GraphBuildError(
            "cargo metadata output has no 'resolve' section (was --no-deps passed?)"
        )

    edges: Dict[Tuple[str, str], DependencyEdge] = {}
    for node in resolve["nodes"]:
        if not isinstance(node, dict) or not isinstance(node.get("id"), str):
            raise GraphBuildError("malformed node in cargo metadata 'resolve' section")
        from_id = node["id"]
        if from_id not in packages_by_id:
            raise GraphBuildError(f"resolve node names unknown package {from_id}")
        declared = raw_by_id[from_id].get("dependencies") or []
        for dep in node.get("deps") or []:
            edge = _parse_dep(from_id, dep, declared, packages_by_id)
            key = (edge.from_id, edge.to_id)
            existing = edges.get(key)
            if existing is not None:
                # Keep the first requirement; the link carries every kind.
                edge = replace(existing, kinds=existing.kinds | edge.kinds)
            edges[key] = edge

    return PackageGraph(packages, edges.values(), workspace_root=workspace_root)


# ----------------------------------------------------------------------
# Helpers


def parse_source(value: Optional[str]) -> PackageSource:
    """Parse a cargo ``source`` string such as ``git+https://host/repo?rev=x#hash``."""
    if value is None:
        return PackageSource.path()
    if value.startswith("git+"):
        parts = urlsplit(value[len("git+"):])
        repository = urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
        return PackageSource.git(repository, parts.fragment, req=parts.query or None)
    for prefix in ("registry+", "sparse+"):
        if value.startswith(prefix):
            return PackageSource.registry(value[len(prefix):])
    return PackageSource.registry(value)


def _parse_publish(value: Any) -> PackagePublish:
    if value is None:
        return PackagePublish.unrestricted()
    if isinstance(value, list):
        return PackagePublish.to_registries(*(str(item) for item in value))
    if value is False:
        return PackagePublish.never()
    raise GraphBuildError(f"unexpected 'publish' value in cargo metadata: {value!r}")


def _parse_package(raw: Any, workspace_root: Path, member_ids: Set[str]) -> PackageNode:
    if not isinstance(raw, dict):
        raise GraphBuildError("malformed package entry in cargo metadata")
    try:
        package_id = str(raw["id"])
        name = str(raw["name"])
        version = str(raw["version"])
    except KeyError as exc:
        raise GraphBuildError(f"package entry is missing {exc}") from exc

    workspace_path: Optional[str] = None
    if package_id in member_ids:
        manifest = raw.get("manifest_path")
        if not isinstance(manifest, str):
            raise GraphBuildError(f"workspace package {name} has no manifest_path")
        workspace_path = _relative_dir(Path(manifest).parent, workspace_root)

    targets = tuple(
        BuildTarget(
            name=str(target.get("name", "")),
            kinds=tuple(str(kind) for kind in target.get("kind") or ()),
            src_path=str(target.get("src_path", "")),
        )
        for target in raw.get("targets") or ()
        if isinstance(target, dict)
    )

    return PackageNode(
        id=package_id,
        name=name,
        version=version,
        source=parse_source(raw.get("source")),
        workspace_path=workspace_path,
        publish=_parse_publish(raw.get("publish")),
        authors=tuple(str(author) for author in raw.get("authors") or ()),
        license=raw.get("license") if isinstance(raw.get("license"), str) else None,
        build_targets=targets,
    )


def _relative_dir(directory: Path, workspace_root: Path) -> str:
    try:
        relative = directory.relative_to(workspace_root)
    except ValueError as exc:
        raise GraphBuildError(
            f"workspace package at {directory} lies outside the workspace root {workspace_root}"
        ) from exc
    posix = relative.as_posix()
    return "" if posix == "." else posix


def _parse_dep(
    from_id: str,
    dep: Any,
    declared: Sequence[Mapping[str, Any]],
    packages_by_id: Mapping[str, PackageNode],
) -> DependencyEdge:
    if not isinstance(dep, dict) or not isinstance(dep.get("pkg"), str):
        raise GraphBuildError(f"malformed dependency of {from_id} in cargo metadata")
    to_id = dep["pkg"]
    target = packages_by_id.get(to_id)
    if target is None:
        raise GraphBuildError(f"{from_id} depends on unknown package {to_id}")

    # Older cargo releases omit dep_kinds; such links are normal dependencies.
    dep_kinds = dep.get("dep_kinds") or [{"kind": None}]
    kinds = frozenset(
        _KIND_BY_NAME.get(entry.get("kind"), DependencyKind.NORMAL)
        for entry in dep_kinds
        if isinstance(entry, dict)
    ) or frozenset({DependencyKind.NORMAL})

    declaration = _match_declaration(str(dep.get("name", "")), target, kinds, declared)
    if declaration is None:
        logger.debug("No manifest declaration found for %s -> %s", from_id, to_id)
        return DependencyEdge(
            from_id=from_id,
            to_id=to_id,
            dep_name=target.name,
            version_req=ANY_VERSION,
            kinds=kinds,
        )

    return DependencyEdge(
        from_id=from_id,
        to_id=to_id,
        dep_name=str(declaration.get("rename") or declaration.get("name") or target.name),
        version_req=str(declaration.get("req") or ANY_VERSION),
        kinds=kinds,
    )


def _match_declaration(
    extern_name: str,
    target: PackageNode,
    kinds: frozenset,
    declared: Sequence[Mapping[str, Any]],
) -> Optional[Mapping[str, Any]]:
    candidates = [
        decl for decl in declared if isinstance(decl, dict) and decl.get("name") == target.name
    ]
    if len(candidates) > 1:
        renamed = [
            decl
            for decl in candidates
            if decl.get("rename") and str(decl["rename"]).replace("-", "_") == extern_name
        ]
        if renamed:
            candidates = renamed
    if len(candidates) > 1:
        by_kind = [
            decl for decl in candidates if _KIND_BY_NAME.get(decl.get("kind"), None) in kinds
        ]
        if by_kind:
            candidates = by_kind
    return candidates[0] if candidates else None


__all__ = ["MetadataCommand", "parse_metadata", "parse_source"]
