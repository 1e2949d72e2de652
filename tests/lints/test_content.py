"""Tests for the file path and content lint rules."""

from __future__ import annotations

from typing import List, Sequence, Tuple

import pytest

from hygiene.config import ConfigError
from hygiene.lint import ContentLinter, FilePathLinter, LintEngineConfig, LintResults, SkipKind
from hygiene.lints import AllowedPaths, EofNewline, LicenseHeader, TrailingWhitespace, build_exceptions
from tests._fixtures.graph_builder import Workspace

HEADER = "Copyright (c) Example Contributors\nSPDX-License-Identifier: MIT OR Apache-2.0\n"


def _run(
    workspace: Workspace,
    *,
    file_path: Sequence[FilePathLinter] = (),
    content: Sequence[ContentLinter] = (),
) -> LintResults:
    return (
        LintEngineConfig(workspace.context())
        .with_file_path_linters(file_path)
        .with_content_linters(content)
        .build()
        .run()
    )


def _messages(results: LintResults) -> List[Tuple[str, str]]:
    return [(str(source.kind), message.message) for source, message in results.messages]


# ----------------------------------------------------------------------
# allowed-paths


def test_allowed_paths_flags_disallowed_characters(workspace: Workspace) -> None:
    workspace.track("src/lib.rs", "docs/with space.md", "@scope/pkg:name.js", "ümlaut.txt")

    results = _run(workspace, file_path=[AllowedPaths()])

    assert [kind for kind, _ in _messages(results)] == ["docs/with space.md", "ümlaut.txt"]
    assert _messages(results)[0][1].startswith("path doesn't match allowed regex: ^")


def test_allowed_paths_rejects_trailing_newline(workspace: Workspace) -> None:
    workspace.track("src/lib.rs\n", "src/ok.rs")

    results = _run(workspace, file_path=[AllowedPaths()])

    assert [kind for kind, _ in _messages(results)] == ["src/lib.rs\n"]


@pytest.mark.parametrize("pattern", ["[a-z]+", "^[a-z]+", "^([a-z]+$"])
def test_allowed_paths_rejects_bad_patterns(pattern: str) -> None:
    with pytest.raises(ConfigError):
        AllowedPaths(pattern)


# ----------------------------------------------------------------------
# license-header


def test_license_header_accepts_comment_prefixed_header(workspace: Workspace) -> None:
    workspace.write(
        {
            "src/lib.rs": "// Copyright (c) Example Contributors\n"
            "// SPDX-License-Identifier: MIT OR Apache-2.0\n\nfn main() {}\n",
            "scripts/run.sh": "#!/bin/bash\n\n# Copyright (c) Example Contributors\n"
            "# SPDX-License-Identifier: MIT OR Apache-2.0\necho hi\n",
            "tool.py": "\n\n# Copyright (c) Example Contributors\n"
            "# SPDX-License-Identifier: MIT OR Apache-2.0\n",
        }
    )

    results = _run(workspace, content=[LicenseHeader(HEADER)])

    assert results.messages == []


def test_license_header_reports_missing_or_late_header(workspace: Workspace) -> None:
    workspace.write(
        {
            "src/missing.rs": "fn main() {}\n",
            "src/late.ts": "// a\n// b\n// c\n// d\n// Copyright (c) Example Contributors\n"
            "// SPDX-License-Identifier: MIT OR Apache-2.0\n",
        }
    )

    results = _run(workspace, content=[LicenseHeader(HEADER)])

    assert _messages(results) == [
        ("src/missing.rs", "missing license header"),
        ("src/late.ts", "missing license header"),
    ]


def test_license_header_skips_unsupported_extensions(workspace: Workspace) -> None:
    workspace.write({"README.md": "no header here\n", "Makefile": "all:\n"})

    results = _run(workspace, content=[LicenseHeader(HEADER)])

    assert results.messages == []
    assert [reason.kind for _, reason in results.skipped] == [
        SkipKind.UNSUPPORTED_EXTENSION,
        SkipKind.UNSUPPORTED_EXTENSION,
    ]
    assert [reason.detail for _, reason in results.skipped] == ["md", None]


# ----------------------------------------------------------------------
# whitespace


def test_eof_newline(workspace: Workspace) -> None:
    workspace.write({"ok.txt": "line\n", "empty.txt": "", "bad.txt": "line"})

    results = _run(workspace, content=[EofNewline()])

    assert _messages(results) == [("bad.txt", "missing newline at EOF")]


def test_trailing_whitespace(workspace: Workspace) -> None:
    workspace.write(
        {
            "clean.rs": "fn main() {\r\n    x();\r\n}\r\n",
            "lines.rs": "fn main() { \n\tx();\t\n}\n",
            "tail.rs": "fn main() {}\n\n",
        }
    )

    results = _run(workspace, content=[TrailingWhitespace()])

    assert _messages(results) == [
        ("lines.rs", "trailing whitespace at line 1"),
        ("lines.rs", "trailing whitespace at line 2"),
        ("tail.rs", "trailing whitespace at EOF"),
    ]


def test_whitespace_exceptions_skip_matching_paths(workspace: Workspace) -> None:
    workspace.write(
        {
            "snapshots/out.snap": "no newline",
            "top.snap": "no newline",
            "testdata/deep/input.txt": "no newline",
            "src/lib.rs": "no newline",
        }
    )
    exceptions = build_exceptions(["*.snap", "**/testdata/**"])

    results = _run(workspace, content=[EofNewline(exceptions)])

    assert _messages(results) == [("src/lib.rs", "missing newline at EOF")]
    assert [(str(source.kind), reason.kind) for source, reason in results.skipped] == [
        ("snapshots/out.snap", SkipKind.UNSUPPORTED_FILE),
        ("top.snap", SkipKind.UNSUPPORTED_FILE),
        ("testdata/deep/input.txt", SkipKind.UNSUPPORTED_FILE),
    ]


def test_build_exceptions_supports_braces() -> None:
    exceptions = build_exceptions(["*.{snap,golden}"])

    assert exceptions.matches("a/b.golden")
    assert exceptions.matches("c.snap")
    assert not exceptions.matches("c.rs")


def test_build_exceptions_expands_nested_braces() -> None:
    exceptions = build_exceptions(["*.{snap,{golden,expected}}"])

    assert exceptions.matches("out.snap")
    assert exceptions.matches("out.golden")
    assert exceptions.matches("out.expected")
    assert not exceptions.matches("out.{golden")
    assert not exceptions.matches("out.golden}")


@pytest.mark.parametrize("pattern", ["", "src/[abc", "*.{snap,golden"])
def test_build_exceptions_rejects_invalid_globs(pattern: str) -> None:
    with pytest.raises(ConfigError):
        build_exceptions([pattern])
