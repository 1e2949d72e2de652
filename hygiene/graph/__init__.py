"""Package graph model and the cargo-backed graph provider."""

from .metadata import MetadataCommand, parse_metadata, parse_source
from .models import (
    BuildTarget,
    DependencyEdge,
    DependencyKind,
    PackageNode,
    PackagePublish,
    PackageSource,
    PublishKind,
    SourceKind,
)
from .package_graph import PackageGraph
from .versions import ANY_VERSION, is_any_version, version_sort_key

__all__ = [
    "ANY_VERSION",
    "BuildTarget",
    "DependencyEdge",
    "DependencyKind",
    "MetadataCommand",
    "PackageGraph",
    "PackageNode",
    "PackagePublish",
    "PackageSource",
    "PublishKind",
    "SourceKind",
    "is_any_version",
    "parse_metadata",
    "parse_source",
    "version_sort_key",
]
