"""Content lint requiring a license header near the top of source files."""

from __future__ import annotations

from itertools import dropwhile, islice
from typing import Dict, Optional

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

# Comment prefix stripped from candidate header lines, by extension.
_SLASH_COMMENT = "// "
_HASH_COMMENT = "# "

_COMMENT_BY_EXTENSION: Dict[str, str] = {
    "rs": _SLASH_COMMENT,
    "proto": _SLASH_COMMENT,
    "js": _SLASH_COMMENT,
    "jsx": _SLASH_COMMENT,
    "cjs": _SLASH_COMMENT,
    "mjs": _SLASH_COMMENT,
    "ts": _SLASH_COMMENT,
    "tsx": _SLASH_COMMENT,
    "mts": _SLASH_COMMENT,
    "cts": _SLASH_COMMENT,
    "move": _SLASH_COMMENT,
    "sh": _HASH_COMMENT,
    "py": _HASH_COMMENT,
}

_HEADER_WINDOW = 4


def _comment_prefix(file_ctx: FilePathContext) -> Optional[str]:
    extension = file_ctx.extension()
    if extension is None:
        return None
    return _COMMENT_BY_EXTENSION.get(extension)


class LicenseHeader(ContentLinter):
    """Every line of the header must appear within the first few non-blank lines."""

    name = "license-header"

    def __init__(self, header: str) -> None:
        self._header_lines = set(header.splitlines())

    def pre_run(self, file_ctx: FilePathContext) -> RunStatus:
        if _comment_prefix(file_ctx) is None:
            return RunStatus.skipped(SkipReason.unsupported_extension(file_ctx.extension()))
        return EXECUTED

    def run(self, ctx: ContentContext, out: LintFormatter) -> RunStatus:
        content = ctx.content()
        if content is None:
            return RunStatus.skipped(SkipReason.non_utf8_content())

        prefix = _comment_prefix(ctx.file_ctx())
        if prefix is None:
            return RunStatus.skipped(SkipReason.unsupported_extension(ctx.file_ctx().extension()))

        lines = iter(content.splitlines())
        if prefix == _HASH_COMMENT:
            lines = dropwhile(lambda line: line.startswith("#!"), lines)
        lines = dropwhile(lambda line: not line, lines)
        candidates = {_strip_prefix(line, prefix) for line in islice(lines, _HEADER_WINDOW)}

        if not self._header_lines.issubset(candidates):
            out.write(LintLevel.ERROR, "missing license header")
        return EXECUTED


def _strip_prefix(line: str, prefix: str) -> str:
    while line.startswith(prefix):
        line = line[len(prefix):]
    return line


__all__ = ["LicenseHeader"]
