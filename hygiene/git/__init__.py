"""Git integration for hygiene."""

from .cli import GitCli, GitHash

__all__ = ["GitCli", "GitHash"]
