"""Content lints for trailing whitespace and the newline at end of file."""

from __future__ import annotations

from fnmatch import fnmatchcase
from typing import Iterable, List, Sequence, Tuple

from ..config import ConfigError
from ..lint import (
    EXECUTED,
    ContentContext,
    ContentLinter,
    FilePathContext,
    LintFormatter,
    LintLevel,
    RunStatus,
    SkipReason,
)


class PathExceptions:
    """A compiled set of glob patterns matched against repository-relative paths."""

    def __init__(self, patterns: Sequence[str] = ()) -> None:
        self.patterns: Tuple[str, ...] = tuple(patterns)

    def matches(self, path: str) -> bool:
        return any(_pattern_matches(path, pattern) for pattern in self.patterns)

    def __bool__(self) -> bool:
        return bool(self.patterns)


def build_exceptions(patterns: Iterable[str]) -> PathExceptions:
    """Validate glob patterns and bundle them for matching.

    Raises ConfigError for empty patterns and unbalanced brackets or braces.
    """
    validated = []
    for pattern in patterns:
        if not pattern:
            raise ConfigError("whitespace exception patterns must not be empty")
        if not _balanced(pattern, "[", "]") or not _balanced(pattern, "{", "}"):
            raise ConfigError(f"invalid glob pattern in whitespace exceptions: {pattern}")
        validated.append(pattern)
    return PathExceptions(validated)


def _balanced(pattern: str, opener: str, closer: str) -> bool:
    depth = 0
    for ch in pattern:
        if ch == opener:
            depth += 1
        elif ch == closer:
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def _pattern_matches(path: str, pattern: str) -> bool:
    normalized = path.replace("\\", "/")
    for candidate in _expand_braces(pattern):
        if fnmatchcase(normalized, candidate):
            return True
        # `**/name` also matches at the repository root.
        if candidate.startswith("**/") and fnmatchcase(normalized, candidate[3:]):
            return True
    return False


def _expand_braces(pattern: str) -> Tuple[str, ...]:
    start = pattern.find("{")
    if start < 0:
        return (pattern,)

    # Find the matching close brace and the commas at this nesting level.
    depth = 0
    splits = [start]
    end = start
    for index in range(start, len(pattern)):
        ch = pattern[index]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                end = index
                break
        elif ch == "," and depth == 1:
            splits.append(index)
    splits.append(end)

    head, tail = pattern[:start], pattern[end + 1:]
    expanded = []
    for left, right in zip(splits, splits[1:]):
        expanded.extend(_expand_braces(head + pattern[left + 1:right] + tail))
    return tuple(expanded)


def _lines(content: str) -> List[str]:
    """Split on newlines, dropping the terminator of the last line and any CR."""
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class _WhitespaceLinter(ContentLinter):
    def __init__(self, exceptions: PathExceptions | None = None) -> None:
        self._exceptions = exceptions or PathExceptions()

    def pre_run(self, file_ctx: FilePathContext) -> RunStatus:
        if self._exceptions.matches(file_ctx.file_path()):
            return RunStatus.skipped(SkipReason.unsupported_file(file_ctx.file_path()))
        return EXECUTED


class EofNewline(_WhitespaceLinter):
    """Non-empty files end with a newline."""

    name = "eof-newline"

    def run(self, ctx: ContentContext, out: LintFormatter) -> RunStatus:
        content = ctx.content()
        if content is None:
            return RunStatus.skipped(SkipReason.non_utf8_content())
        if content and not content.endswith("\n"):
            out.write(LintLevel.ERROR, "missing newline at EOF")
        return EXECUTED


class TrailingWhitespace(_WhitespaceLinter):
    """No line ends in spaces or tabs, and the file doesn't end in blank lines."""

    name = "trailing-whitespace"

    def run(self, ctx: ContentContext, out: LintFormatter) -> RunStatus:
        content = ctx.content()
        if content is None:
            return RunStatus.skipped(SkipReason.non_utf8_content())

        lines = _lines(content)
        for line_number, line in enumerate(lines, start=1):
            if line.rstrip() != line:
                out.write(LintLevel.ERROR, f"trailing whitespace at line {line_number}")

        if lines and not lines[-1]:
            out.write(LintLevel.ERROR, "trailing whitespace at EOF")
        return EXECUTED


__all__ = [
    "EofNewline",
    "PathExceptions",
    "TrailingWhitespace",
    "build_exceptions",
]
