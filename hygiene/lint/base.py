"""Core lint types: levels, target kinds, messages, run status and the formatter."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


class LintLevel(str, Enum):
    WARNING = "warning"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


class KindCategory(str, Enum):
    PROJECT = "project"
    PACKAGE = "package"
    FILE_PATH = "file-path"
    CONTENT = "content"


@dataclass(frozen=True)
class LintKind:
    """Identifies the target a lint message is about."""

    category: KindCategory
    name: Optional[str] = None
    path: Optional[str] = None

    @classmethod
    def project(cls) -> "LintKind":
        return cls(KindCategory.PROJECT)

    @classmethod
    def package(cls, name: str, workspace_path: str) -> "LintKind":
        return cls(KindCategory.PACKAGE, name=name, path=workspace_path)

    @classmethod
    def file_path(cls, path: str) -> "LintKind":
        return cls(KindCategory.FILE_PATH, path=path)

    @classmethod
    def content(cls, path: str) -> "LintKind":
        return cls(KindCategory.CONTENT, path=path)

    def __str__(self) -> str:
        if self.category is KindCategory.PROJECT:
            return "project"
        if self.category is KindCategory.PACKAGE:
            return f"package {self.name} ({self.path})"
        return str(self.path)


@dataclass(frozen=True)
class LintSource:
    """The lint that produced a message and the target it ran against."""

    name: str
    kind: LintKind


@dataclass(frozen=True)
class LintMessage:
    level: LintLevel
    message: str


class SkipKind(str, Enum):
    NON_UTF8_CONTENT = "non-utf8-content"
    UNSUPPORTED_EXTENSION = "unsupported-extension"
    UNSUPPORTED_FILE = "unsupported-file"
    EXCLUDED = "excluded"
    CUSTOM = "custom"


@dataclass(frozen=True)
class SkipReason:
    """Why a lint did not execute against a target."""

    kind: SkipKind
    detail: Optional[str] = None

    @classmethod
    def non_utf8_content(cls) -> "SkipReason":
        return cls(SkipKind.NON_UTF8_CONTENT)

    @classmethod
    def unsupported_extension(cls, extension: Optional[str]) -> "SkipReason":
        return cls(SkipKind.UNSUPPORTED_EXTENSION, extension)

    @classmethod
    def unsupported_file(cls, path: str) -> "SkipReason":
        return cls(SkipKind.UNSUPPORTED_FILE, path)

    @classmethod
    def excluded(cls, pattern: str) -> "SkipReason":
        return cls(SkipKind.EXCLUDED, pattern)

    @classmethod
    def custom(cls, text: str) -> "SkipReason":
        return cls(SkipKind.CUSTOM, text)

    def __str__(self) -> str:
        if self.kind is SkipKind.NON_UTF8_CONTENT:
            return "non-UTF-8 content"
        if self.kind is SkipKind.UNSUPPORTED_EXTENSION:
            if self.detail is None:
                return "file has no extension"
            return f"unsupported extension .{self.detail}"
        if self.kind is SkipKind.UNSUPPORTED_FILE:
            return f"unsupported file {self.detail}"
        if self.kind is SkipKind.EXCLUDED:
            return f"excluded by pattern {self.detail}"
        return str(self.detail)


@dataclass(frozen=True)
class RunStatus:
    """Outcome of running one lint against one target."""

    skip_reason: Optional[SkipReason] = None

    @classmethod
    def skipped(cls, reason: SkipReason) -> "RunStatus":
        return cls(reason)

    @property
    def executed(self) -> bool:
        return self.skip_reason is None


EXECUTED = RunStatus()


class Linter(ABC):
    """Common contract for every lint; subclasses set ``name``."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short kebab-case identifier shown in output."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"


class LintFormatter:
    """Collects messages for one lint invocation against one target."""

    def __init__(
        self,
        source: LintSource,
        sink: List[Tuple[LintSource, LintMessage]],
    ) -> None:
        self._source = source
        self._sink = sink
        self._wrote_error = False

    @property
    def source(self) -> LintSource:
        return self._source

    @property
    def wrote_error(self) -> bool:
        return self._wrote_error

    def write(self, level: LintLevel, message: str) -> None:
        """Emit a message about the current target."""
        self._emit(self._source, level, message)

    def write_kind(self, kind: LintKind, level: LintLevel, message: str) -> None:
        """Emit a message about a different target, e.g. a package from a project lint."""
        self._emit(LintSource(self._source.name, kind), level, message)

    def _emit(self, source: LintSource, level: LintLevel, message: str) -> None:
        self._sink.append((source, LintMessage(level, message)))
        if level is LintLevel.ERROR:
            self._wrote_error = True


__all__ = [
    "EXECUTED",
    "KindCategory",
    "LintFormatter",
    "LintKind",
    "LintLevel",
    "LintMessage",
    "LintSource",
    "Linter",
    "RunStatus",
    "SkipKind",
    "SkipReason",
]
