"""Data models for the resolved package graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from typing import FrozenSet, Optional, Tuple

from .versions import version_sort_key


class PublishKind(str, Enum):
    NEVER = "never"
    UNRESTRICTED = "unrestricted"
    REGISTRIES = "registries"


@dataclass(frozen=True)
class PackagePublish:
    """Where a package may be published.

    Cargo spells ``publish = false`` as an empty registry list, so an empty
    ``registries`` set is treated as never published.
    """

    kind: PublishKind
    registries: Tuple[str, ...] = ()

    CRATES_IO = "crates-io"

    @classmethod
    def never(cls) -> "PackagePublish":
        return cls(PublishKind.REGISTRIES, ())

    @classmethod
    def unrestricted(cls) -> "PackagePublish":
        return cls(PublishKind.UNRESTRICTED)

    @classmethod
    def to_registries(cls, *registries: str) -> "PackagePublish":
        return cls(PublishKind.REGISTRIES, tuple(registries))

    def is_never(self) -> bool:
        if self.kind is PublishKind.NEVER:
            return True
        return self.kind is PublishKind.REGISTRIES and not self.registries

    def __str__(self) -> str:
        if self.kind is PublishKind.UNRESTRICTED:
            return "unrestricted"
        if self.is_never():
            return "never"
        return ", ".join(self.registries)


class SourceKind(str, Enum):
    PATH = "path"
    REGISTRY = "registry"
    GIT = "git"


@dataclass(frozen=True)
class PackageSource:
    """How a package was resolved: a local path, a registry, or a git checkout."""

    kind: SourceKind
    url: Optional[str] = None
    git_req: Optional[str] = None
    resolved: Optional[str] = None

    @classmethod
    def path(cls) -> "PackageSource":
        return cls(SourceKind.PATH)

    @classmethod
    def registry(cls, url: str) -> "PackageSource":
        return cls(SourceKind.REGISTRY, url=url)

    @classmethod
    def git(cls, repository: str, resolved: str, req: Optional[str] = None) -> "PackageSource":
        return cls(SourceKind.GIT, url=repository, git_req=req, resolved=resolved)

    def git_source(self) -> Optional[Tuple[str, str]]:
        """Return ``(repository, resolved commit)`` for git sources."""
        if self.kind is SourceKind.GIT and self.url is not None and self.resolved is not None:
            return self.url, self.resolved
        return None


class DependencyKind(str, Enum):
    NORMAL = "normal"
    BUILD = "build"
    DEV = "dev"


@dataclass(frozen=True)
class BuildTarget:
    """A library, binary, test, bench, example or build script of a package."""

    name: str
    kinds: Tuple[str, ...]
    src_path: str

    def file_stem(self) -> str:
        return PurePosixPath(self.src_path.replace("\\", "/")).stem

    def is_build_script(self) -> bool:
        return "custom-build" in self.kinds


@dataclass(frozen=True)
class PackageNode:
    """A package in the resolved graph.

    ``id`` is the opaque resolver identifier. ``workspace_path`` is set only
    for workspace members and is relative to the workspace root.
    """

    id: str
    name: str
    version: str
    source: PackageSource = field(default_factory=PackageSource.path)
    workspace_path: Optional[str] = None
    publish: PackagePublish = field(default_factory=PackagePublish.unrestricted)
    authors: Tuple[str, ...] = ()
    license: Optional[str] = None
    build_targets: Tuple[BuildTarget, ...] = ()

    @property
    def in_workspace(self) -> bool:
        return self.workspace_path is not None

    @property
    def has_build_script(self) -> bool:
        return any(target.is_build_script() for target in self.build_targets)

    def sort_key(self) -> Tuple[object, ...]:
        return (self.name, version_sort_key(self.version), self.id)


@dataclass(frozen=True)
class DependencyEdge:
    """A direct dependency of ``from_id`` on ``to_id``.

    ``dep_name`` is the name used in the manifest, which differs from the
    target package name when the dependency is renamed.
    """

    from_id: str
    to_id: str
    dep_name: str
    version_req: str
    kinds: FrozenSet[DependencyKind] = frozenset({DependencyKind.NORMAL})

    def has_kind(self, kind: DependencyKind) -> bool:
        return kind in self.kinds


__all__ = [
    "BuildTarget",
    "DependencyEdge",
    "DependencyKind",
    "PackageNode",
    "PackagePublish",
    "PackageSource",
    "PublishKind",
    "SourceKind",
]
