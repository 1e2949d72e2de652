"""Subcommands of the ``hygiene`` command line."""

from .lint import LinterBundle, build_linters, load_context, run_lint
from .playground import run_playground

__all__ = ["LinterBundle", "build_linters", "load_context", "run_lint", "run_playground"]
