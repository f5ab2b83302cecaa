"""Git interface layer — adapter, diff parsing, models, service."""

from vibediff.git.adapter import (
    FULL_CONTEXT,
    GitError,
    get_diff_text,
    get_repo_root,
)
from vibediff.git.diff_parser import (
    DiffParseError,
    MalformedHunkHeader,
    UnterminatedSection,
    parse_diff,
)
from vibediff.git.models import (
    DiffResult,
    DiffScope,
    FileDiff,
    FileStatus,
    Hunk,
    Line,
    LineType,
    SectionFailure,
)
from vibediff.git.service import DiffService, FileNotInDiff

__all__ = [
    "FULL_CONTEXT",
    "DiffParseError",
    "DiffResult",
    "DiffScope",
    "DiffService",
    "FileDiff",
    "FileNotInDiff",
    "FileStatus",
    "GitError",
    "Hunk",
    "Line",
    "LineType",
    "MalformedHunkHeader",
    "SectionFailure",
    "UnterminatedSection",
    "get_diff_text",
    "get_repo_root",
    "parse_diff",
]
