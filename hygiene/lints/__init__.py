"""Built-in lint rules, grouped by the target they check."""

from .allowed_paths import AllowedPaths
from .graph import (
    DEFAULT_CRATES_DIRECTORY,
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
from .license import LicenseHeader
from .whitespace import EofNewline, PathExceptions, TrailingWhitespace, build_exceptions

__all__ = [
    "AllowedPaths",
    "BannedDeps",
    "CrateNamesPaths",
    "CratesInCratesDirectory",
    "CratesOnlyInCratesDirectory",
    "DEFAULT_CRATES_DIRECTORY",
    "DirectDepDups",
    "DuplicateGitDependencies",
    "EnforcedAttributes",
    "EofNewline",
    "IrrelevantBuildDeps",
    "LicenseHeader",
    "OnlyPublishToCratesIo",
    "PathExceptions",
    "PublishedPackagesDontDependOnUnpublishedPackages",
    "TrailingWhitespace",
    "UnpublishedPackagesOnlyUsePathDependencies",
    "build_exceptions",
]
