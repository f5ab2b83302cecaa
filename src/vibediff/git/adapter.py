"""Git subprocess wrapper — repo root and raw diff text per scope."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional

from vibediff.git.models import DiffScope

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT = 3
FULL_CONTEXT = 999999  # wide enough that every hunk spans the whole file

# Keep git's output in the shape the parser expects, whatever the user's
# git config says about colour, external drivers or prefixes.
_DIFF_FLAGS = [
    "--no-color",
    "--no-ext-diff",
    "--find-renames",
    "--src-prefix=a/",
    "--dst-prefix=b/",
]


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


def _run_git(args: list[str], cwd: Path, timeout: int = 30) -> str:
    """Run a git command and return stdout. Raises GitError on failure."""
    logger.debug("Running git %s in %s", " ".join(args), cwd)
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode != 0:
        stderr = result.stderr.strip() or f"exit status {result.returncode}"
        raise GitError(f"git error: {stderr.splitlines()[0]}")
    return result.stdout


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the current git repository."""
    cwd = cwd or Path.cwd()
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    if not out.strip():
        raise GitError(f"not a git repository: {cwd}")
    return Path(out.strip())


def diff_args(
    scope: DiffScope,
    *,
    target: Optional[str] = None,
    context_lines: int = DEFAULT_CONTEXT,
) -> list[str]:
    """Build the ``git diff`` argument list for *scope*."""
    if context_lines < 0:
        raise ValueError(f"context_lines must be non-negative, got {context_lines}")

    scope = DiffScope(scope)
    if scope is DiffScope.STAGED:
        args = ["diff", "--cached"]
    elif scope is DiffScope.UNSTAGED:
        args = ["diff"]
    else:
        args = ["diff", target or "HEAD"]
    # revisions end at "--"; a target is never taken as a path
    return [*args, *_DIFF_FLAGS, f"-U{context_lines}", "--"]


def get_diff_text(
    repo_root: Path,
    scope: DiffScope,
    *,
    target: Optional[str] = None,
    context_lines: int = DEFAULT_CONTEXT,
    timeout: int = 30,
) -> str:
    """Return the unified diff text for *scope*."""
    args = diff_args(scope, target=target, context_lines=context_lines)
    return _run_git(args, cwd=repo_root, timeout=timeout)
