"""Workspace context shared by every lint in a run."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Tuple

from .cache import OnceCell
from .config import ConfigError, HygieneConfig
from .errors import CwdNotInProjectRoot, GraphBuildError
from .git import GitCli
from .graph import MetadataCommand, PackageGraph
from .logging import get_logger

_HAKARI_CONFIG = Path(".config") / "hakari.toml"

logger = get_logger("context")


class GraphProvider(Protocol):
    def build_graph(self) -> PackageGraph:
        ...


class HygieneContext:
    """Owns the git gateway and graph provider for a single run.

    The tracked-file list and the package graph are each computed at most
    once and never invalidated. Mutating the repository or its manifests
    while a run is in progress is unsupported.
    """

    def __init__(
        self,
        current_dir: Path,
        *,
        git_cli: GitCli | None = None,
        graph_provider: GraphProvider | None = None,
        workspace_hack: str | None = None,
    ) -> None:
        self._git_cli = git_cli or GitCli(cwd=current_dir)
        root = self._git_cli.root
        try:
            rel_dir = current_dir.resolve().relative_to(root.resolve())
        except ValueError:
            raise CwdNotInProjectRoot(current_dir, root) from None
        self._current_dir = current_dir
        self._current_rel_dir = rel_dir
        self._graph_provider = graph_provider or MetadataCommand(root)
        self._workspace_hack = workspace_hack
        self._package_graph: OnceCell[PackageGraph] = OnceCell()

    @classmethod
    def from_current_dir(
        cls,
        config: HygieneConfig | None = None,
        *,
        git_cli: GitCli | None = None,
    ) -> "HygieneContext":
        """Build a context for the process working directory.

        The workspace-hack package name comes from ``config`` when set,
        otherwise from ``.config/hakari.toml`` at the repository root.
        """
        git_cli = git_cli or GitCli(cwd=Path.cwd())
        workspace_hack = config.workspace_hack if config is not None else None
        if workspace_hack is None:
            workspace_hack = read_hakari_package(git_cli.root)
        return cls(Path.cwd(), git_cli=git_cli, workspace_hack=workspace_hack)

    def project_root(self) -> Path:
        """Return the project root for this workspace."""
        return self._git_cli.root

    def current_dir(self) -> Path:
        return self._current_dir

    def current_rel_dir(self) -> Path:
        """Return the working directory relative to the project root."""
        return self._current_rel_dir

    def current_dir_is_root(self) -> bool:
        return self._current_rel_dir == Path(".")

    def git_cli(self) -> GitCli:
        return self._git_cli

    def full_path(self, path: str | Path) -> Path:
        return self.project_root() / path

    def tracked_files(self) -> List[str]:
        return self._git_cli.tracked_files()

    def changed_files(
        self,
        old: str,
        new: str | None = None,
        diff_filter: str | None = None,
    ) -> List[str]:
        return self._git_cli.files_changed_between(old, new, diff_filter)

    def package_graph(self) -> PackageGraph:
        """Return the package graph, resolving it on first access."""
        return self._package_graph.get_or_init(self._build_graph)

    def workspace_hack_name(self) -> Optional[str]:
        """Name of the feature-unification package whose links are ignored by graph lints."""
        return self._workspace_hack

    def partition_workspace_names(self, names: Iterable[str]) -> Tuple[List[str], List[str]]:
        """Split ``names`` into (workspace members, unknown names)."""
        graph = self.package_graph()
        known: List[str] = []
        unknown: List[str] = []
        for name in names:
            (known if graph.workspace_contains_name(name) else unknown).append(name)
        return known, unknown

    # ------------------------------------------------------------------
    # Internals

    def _build_graph(self) -> PackageGraph:
        graph = self._graph_provider.build_graph()
        if not isinstance(graph, PackageGraph):
            raise GraphBuildError("graph provider did not return a PackageGraph")
        logger.debug(
            "Package graph resolved: %d packages, %d in workspace",
            len(graph),
            len(graph.workspace_packages()),
        )
        return graph


def read_hakari_package(root: Path) -> Optional[str]:
    """Return ``hakari-package`` from ``.config/hakari.toml`` if present."""
    path = root / _HAKARI_CONFIG
    if not path.exists():
        return None
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to read {_HAKARI_CONFIG}: {exc}") from exc
    value = data.get("hakari-package")
    return value if isinstance(value, str) else None


__all__ = ["GraphProvider", "HygieneContext", "read_hakari_package"]
