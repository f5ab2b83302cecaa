"""Diff service — fetch, parse, and select files from the working tree diff."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from vibediff.config.schema import VibeDiffConfig
from vibediff.git.adapter import FULL_CONTEXT, get_diff_text
from vibediff.git.diff_parser import DiffParseError, parse_diff
from vibediff.git.models import DiffResult, DiffScope, FileDiff

logger = logging.getLogger(__name__)


class FileNotInDiff(LookupError):
    """The requested path has no changes in the selected scope."""

    def __init__(self, path: str, scope: DiffScope) -> None:
        super().__init__(f"file not found in {scope.value} diff: {path}")
        self.path = path
        self.scope = scope


class DiffService:
    """Runs git for a repository and hands the output to the parser.

    Holds only the repo root and config; every call fetches and parses
    afresh, so one instance can serve concurrent callers.
    """

    def __init__(self, repo_root: Path, config: Optional[VibeDiffConfig] = None) -> None:
        self.repo_root = repo_root
        self.config = config or VibeDiffConfig()

    def get_diff(
        self,
        scope: Optional[DiffScope] = None,
        context_lines: Optional[int] = None,
    ) -> DiffResult:
        """Fetch and parse the diff for *scope* (config default when None)."""
        cfg = self.config.diff
        scope = DiffScope(scope or cfg.scope)
        if context_lines is None:
            context_lines = cfg.context_lines

        text = get_diff_text(
            self.repo_root,
            scope,
            target=cfg.target or None,
            context_lines=context_lines,
            timeout=cfg.timeout,
        )
        result = parse_diff(text, scope)
        logger.debug(
            "Parsed %d file(s) from %s diff (%d failed)",
            len(result.files), scope.value, len(result.failures),
        )
        return result

    def get_file_diff(
        self,
        path: str,
        scope: Optional[DiffScope] = None,
        context_lines: Optional[int] = None,
    ) -> FileDiff:
        """Return the FileDiff for *path*.

        Raises FileNotInDiff when the diff parsed but has no such file, and
        DiffParseError when the file's own section could not be parsed.
        """
        result = self.get_diff(scope, context_lines)
        found = result.find_file(path)
        if found is not None:
            return found
        for failure in result.failures:
            if failure.path == path:
                raise DiffParseError(f"{path}: {failure.message}")
        raise FileNotInDiff(path, result.scope)

    def get_file_diff_full_context(
        self, path: str, scope: Optional[DiffScope] = None
    ) -> FileDiff:
        """Like get_file_diff, with every hunk widened to the whole file."""
        return self.get_file_diff(path, scope, FULL_CONTEXT)
