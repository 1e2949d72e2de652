"""CLI entrypoints for hygiene commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .commands import load_context, run_lint, run_playground
from .errors import HygieneError
from .logging import configure_logging, get_logger

logger = get_logger("cli")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_config_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Path to .hygiene.yml (defaults to the repository root).",
    )


def _add_log_file_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write debug logs to this file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hygiene",
        description="Lint a Cargo workspace for layout, metadata and dependency hygiene.",
    )
    _add_verbose_option(parser)
    _add_config_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    lint_parser = subparsers.add_parser(
        "lint",
        help="Run the configured lints against the workspace.",
    )
    _add_verbose_option(lint_parser, suppress_default=True)
    _add_config_option(lint_parser, suppress_default=True)
    _add_log_file_option(lint_parser, suppress_default=True)
    lint_parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop after the first lint that reports an error.",
    )

    playground_parser = subparsers.add_parser(
        "playground",
        help="Run the experimental playground lints.",
    )
    _add_verbose_option(playground_parser, suppress_default=True)
    _add_log_file_option(playground_parser, suppress_default=True)
    playground_parser.add_argument(
        "--dummy",
        action="store_true",
        help="Placeholder flag; has no effect.",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for hygiene commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        core, config = load_context(args.config)
        if args.command == "lint":
            status = run_lint(core, config, fail_fast=bool(args.fail_fast))
        elif args.command == "playground":
            status = run_playground(core)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except HygieneError as exc:
        logger.debug("Run aborted", exc_info=True)
        parser.exit(1, f"hygiene: {exc}\n")
    return status


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
