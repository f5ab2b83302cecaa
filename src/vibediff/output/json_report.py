"""JSON serialisation of parsed diffs, using the review UI's field names."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from vibediff.git.models import DiffResult, FileDiff, Hunk, Line, SectionFailure


def line_to_dict(line: Line) -> Dict[str, Any]:
    return {
        "type": line.type.value,
        **({"oldNumber": line.old_number} if line.old_number is not None else {}),
        **({"newNumber": line.new_number} if line.new_number is not None else {}),
        "content": line.content,
    }


def hunk_to_dict(hunk: Hunk) -> Dict[str, Any]:
    return {
        "oldStart": hunk.old_start,
        "oldLines": hunk.old_lines,
        "newStart": hunk.new_start,
        "newLines": hunk.new_lines,
        "header": hunk.header,
        "lines": [line_to_dict(ln) for ln in hunk.lines],
    }


def file_to_dict(file: FileDiff) -> Dict[str, Any]:
    """Convert one FileDiff to a JSON-serialisable dict."""
    return {
        "path": file.path,
        **({"oldPath": file.old_path} if file.old_path else {}),
        "status": file.status.value,
        "additions": file.additions,
        "deletions": file.deletions,
        "isBinary": file.is_binary,
        "hunks": [hunk_to_dict(h) for h in file.hunks],
    }


def failure_to_dict(failure: SectionFailure) -> Dict[str, Any]:
    return {
        "index": failure.index,
        "path": failure.path,
        "error": failure.error,
        "message": failure.message,
    }


def to_dict(result: DiffResult) -> Dict[str, Any]:
    """Convert a DiffResult to a JSON-serialisable dict."""
    files: List[Dict[str, Any]] = [file_to_dict(f) for f in result.files]
    return {
        "files": files,
        "scope": result.scope.value,
        "failures": [failure_to_dict(f) for f in result.failures],
    }


def render(result: DiffResult) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result), indent=2)


def render_file(file: FileDiff) -> str:
    return json.dumps(file_to_dict(file), indent=2)
