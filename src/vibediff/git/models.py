"""Data models for parsed diffs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class DiffScope(str, Enum):
    """Which comparison produced the raw diff text."""

    UNSTAGED = "unstaged"
    STAGED = "staged"
    AGAINST_TARGET = "against-target"


class LineType(str, Enum):
    CONTEXT = "context"
    ADDED = "added"
    DELETED = "deleted"


class FileStatus(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


@dataclass(frozen=True, slots=True)
class Line:
    """A single row inside a hunk."""

    type: LineType
    content: str
    old_number: Optional[int] = None  # None for added lines
    new_number: Optional[int] = None  # None for deleted lines


@dataclass(frozen=True, slots=True)
class Hunk:
    """One contiguous change region and its ``@@`` header ranges."""

    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    header: str = ""
    lines: Tuple[Line, ...] = ()


@dataclass(frozen=True, slots=True)
class FileDiff:
    """One changed file."""

    path: str
    status: FileStatus = FileStatus.MODIFIED
    hunks: Tuple[Hunk, ...] = ()
    is_binary: bool = False
    old_path: Optional[str] = None  # set on renames

    @property
    def additions(self) -> int:
        return self._count(LineType.ADDED)

    @property
    def deletions(self) -> int:
        return self._count(LineType.DELETED)

    def _count(self, line_type: LineType) -> int:
        return sum(1 for h in self.hunks for ln in h.lines if ln.type == line_type)


@dataclass(frozen=True, slots=True)
class SectionFailure:
    """A file section that could not be parsed."""

    index: int  # position of the section in the document
    path: Optional[str]
    error: str  # exception class name
    message: str


@dataclass(frozen=True, slots=True)
class DiffResult:
    """Every file parsed from one diff document, plus the sections that failed."""

    files: Tuple[FileDiff, ...] = ()
    scope: DiffScope = DiffScope.AGAINST_TARGET
    failures: Tuple[SectionFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def failed_paths(self) -> list[str]:
        return [f.path for f in self.failures if f.path is not None]

    @property
    def additions(self) -> int:
        return sum(f.additions for f in self.files)

    @property
    def deletions(self) -> int:
        return sum(f.deletions for f in self.files)

    def find_file(self, path: str) -> Optional[FileDiff]:
        """Return the FileDiff whose path is *path*, or None."""
        for f in self.files:
            if f.path == path:
                return f
        return None
