"""Source control queries backed by the git command line."""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Sequence

from ..cache import OnceCell
from ..errors import GitRootError, VcsError
from ..logging import get_logger

Runner = Callable[..., "subprocess.CompletedProcess[bytes]"]

_HEX_HASH = re.compile(r"^[0-9a-fA-F]{40}$")

logger = get_logger("git")


@dataclass(frozen=True)
class GitHash:
    """A full 40 character git object id."""

    hex: str

    @classmethod
    def from_hex(cls, value: str | bytes) -> "GitHash":
        if isinstance(value, bytes):
            try:
                value = value.decode("ascii")
            except UnicodeDecodeError as exc:
                raise VcsError(f"parsing a git hash: {value!r}") from exc
        value = value.strip()
        if not _HEX_HASH.match(value):
            raise VcsError(f"parsing a git hash: {value!r}")
        return cls(value.lower())

    def __str__(self) -> str:
        return self.hex


class GitCli:
    """Runs git commands from the repository root.

    The working copy is assumed not to change while a run is in progress:
    tracked files are listed once and cached for the lifetime of the object.
    """

    def __init__(
        self,
        root: Path | None = None,
        *,
        runner: Runner | None = None,
        cwd: Path | None = None,
    ) -> None:
        self._runner = runner or self._default_runner
        self._root = root if root is not None else self._repository_root(cwd or Path.cwd())
        self._tracked_files: OnceCell[List[str]] = OnceCell()

    @property
    def root(self) -> Path:
        """Return the root of the repository."""
        return self._root

    def tracked_files(self) -> List[str]:
        """Return every path tracked by git, relative to the repository root."""
        return self._tracked_files.get_or_init(self._list_tracked_files)

    def files_changed_between(
        self,
        old: str | GitHash,
        new: str | GitHash | None = None,
        diff_filter: str | None = None,
    ) -> List[str]:
        """Return files changed between two revisions.

        When ``new`` is omitted the comparison is against the working tree.
        ``diff_filter`` is passed through to ``git diff --diff-filter``.
        """
        args = ["git", "diff", "-z", "--name-only"]
        if diff_filter:
            args.append(f"--diff-filter={diff_filter}")
        args.append(str(old))
        if new is not None:
            args.append(str(new))
        output = self._checked_output(args)
        return _split_paths0(args, output)

    def merge_base(self, commit_ref: str) -> GitHash:
        """Return the merge base of ``HEAD`` with ``commit_ref``."""
        args = ["git", "merge-base", "HEAD", commit_ref]
        output = self._checked_output(args)
        return GitHash.from_hex(output)

    def is_git_repo(self, directory: Path) -> bool:
        args = ["git", "rev-parse", "--git-dir"]
        completed = self._launch(args, cwd=directory)
        return completed.returncode == 0

    # ------------------------------------------------------------------
    # Internals

    def _list_tracked_files(self) -> List[str]:
        # -z stops git from quoting paths and separates them with NUL bytes.
        args = ["git", "ls-files", "-z"]
        output = self._checked_output(args)
        files = _split_paths0(args, output)
        logger.debug("git ls-files returned %d paths", len(files))
        return files

    def _repository_root(self, cwd: Path) -> Path:
        args = ["git", "rev-parse", "--show-toplevel"]
        try:
            completed = self._runner(args, cwd=cwd)
        except OSError as exc:
            raise GitRootError(f"running {' '.join(args)}: {exc}") from exc
        if completed.returncode != 0:
            raise GitRootError(
                "unable to find a git repository; hygiene must be run from inside of a git repository"
            )
        raw = completed.stdout.rstrip(b"\r\n")
        try:
            return Path(raw.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise GitRootError(
                "git rev-parse --show-toplevel returned a non-Unicode path"
            ) from exc

    def _checked_output(self, args: Sequence[str]) -> bytes:
        completed = self._launch(args, cwd=self._root)
        if completed.returncode != 0:
            raise VcsError.exec_failed(args, completed.returncode)
        return completed.stdout

    def _launch(self, args: Sequence[str], *, cwd: Path) -> "subprocess.CompletedProcess[bytes]":
        try:
            return self._runner(list(args), cwd=cwd)
        except OSError as exc:
            raise VcsError(f"running {' '.join(args)}: {exc}", command=args) from exc

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


def _split_paths0(args: Sequence[str], output: bytes) -> List[str]:
    paths: List[str] = []
    for raw in output.split(b"\0"):
        if not raw:
            continue
        try:
            paths.append(raw.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise VcsError.non_utf8_path(args, raw) from exc
    return paths


__all__ = ["GitCli", "GitHash", "Runner"]
