"""Workspace hygiene linter for Cargo workspaces tracked in git."""

__version__ = "0.1.0"
