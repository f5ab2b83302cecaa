"""Unified diff parser — turns git's textual diff into FileDiff records.

The document is split on ``diff --git`` boundaries and each section is
parsed on its own, so one malformed section is reported as a
SectionFailure while every other file still comes through. Handles BOM,
CRLF, quoted paths, binary markers, renames, mode-only changes, empty
new/deleted files and all hunk header variations.

Everything here is a pure function over its input: no I/O and no state
kept between calls.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Tuple, Union

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

logger = logging.getLogger(__name__)

NULL_DEVICE = "/dev/null"

# --- Regex patterns for diff parsing ---

_DIFF_HEADER = "diff --git "
_HUNK_HEADER_RE = re.compile(
    r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(.*)$"
)
_BINARY_RE = re.compile(r"^Binary files (.+) and (.+) differ$")
_RENAME_FROM_RE = re.compile(r"^(?:rename|copy) from (.+)$")
_RENAME_TO_RE = re.compile(r"^(?:rename|copy) to (.+)$")
_SIMILARITY_RE = re.compile(r"^(?:dis)?similarity index \d+%$")
_NEW_FILE_RE = re.compile(r"^new file mode \d+$")
_DELETED_FILE_RE = re.compile(r"^deleted file mode \d+$")
_MODE_RE = re.compile(r"^(?:old|new) mode \d+$")
_INDEX_RE = re.compile(r"^index [0-9a-f]+\.\.[0-9a-f]+")

_ESCAPES = {
    "a": "\a", "b": "\b", "f": "\f", "n": "\n",
    "r": "\r", "t": "\t", "v": "\v", '"': '"', "\\": "\\",
}


class DiffParseError(Exception):
    """Raised when diff text cannot be parsed."""


class MalformedHunkHeader(DiffParseError):
    """An ``@@`` line does not match the hunk header grammar."""


class UnterminatedSection(DiffParseError):
    """A file section is missing the headers needed to know its paths."""


# --- Line Classifier ---


def classify_line(
    raw: str, old_counter: int, new_counter: int
) -> Tuple[Optional[Line], int, int]:
    """Classify one hunk body line and advance the per-hunk counters.

    Returns ``(None, old_counter, new_counter)`` for anything that is not a
    body line (e.g. ``\\ No newline at end of file``).
    """
    if raw == "" or raw[0] == " ":
        line = Line(LineType.CONTEXT, raw[1:], old_counter, new_counter)
        return line, old_counter + 1, new_counter + 1
    if raw[0] == "+":
        return Line(LineType.ADDED, raw[1:], new_number=new_counter), old_counter, new_counter + 1
    if raw[0] == "-":
        return Line(LineType.DELETED, raw[1:], old_number=old_counter), old_counter + 1, new_counter
    return None, old_counter, new_counter


# --- Hunk Parser ---


def parse_hunk_header(line: str) -> Tuple[int, int, int, int, str]:
    """Return ``(old_start, old_lines, new_start, new_lines, header_text)``."""
    m = _HUNK_HEADER_RE.match(line)
    if m is None:
        raise MalformedHunkHeader(f"malformed hunk header: {line!r}")
    try:
        old_start = int(m.group(1))
        old_lines = int(m.group(2)) if m.group(2) is not None else 1
        new_start = int(m.group(3))
        new_lines = int(m.group(4)) if m.group(4) is not None else 1
    except ValueError as exc:
        # digit strings past the interpreter's int limit
        raise MalformedHunkHeader(f"malformed hunk header: {line[:80]!r}...") from exc
    text = m.group(5)
    if text.startswith(" "):
        text = text[1:]
    return old_start, old_lines, new_start, new_lines, text


def parse_hunk(header_line: str, body: Sequence[str]) -> Hunk:
    """Parse one ``@@`` header and the body lines that follow it."""
    old_start, old_lines, new_start, new_lines, text = parse_hunk_header(header_line)
    old_no, new_no = old_start, new_start
    lines: List[Line] = []
    for raw in body:
        line, old_no, new_no = classify_line(raw, old_no, new_no)
        if line is None:
            if not raw.startswith("\\"):
                logger.debug("Ignoring unexpected line in hunk: %r", raw)
            continue
        lines.append(line)
    return Hunk(
        old_start=old_start,
        old_lines=old_lines,
        new_start=new_start,
        new_lines=new_lines,
        header=text,
        lines=tuple(lines),
    )


def _parse_hunks(lines: Sequence[str]) -> List[Hunk]:
    hunks: List[Hunk] = []
    header: Optional[str] = None
    body: List[str] = []
    for line in lines:
        if line.startswith("@@"):
            if header is not None:
                hunks.append(parse_hunk(header, body))
            header, body = line, []
        elif header is not None:
            body.append(line)
        else:
            logger.debug("Ignoring line before first hunk: %r", line)
    if header is not None:
        hunks.append(parse_hunk(header, body))
    return hunks


# --- Paths ---


def _unquote(path: str) -> str:
    """Decode a C-style quoted path as git writes it (``"sp\\303\\251cial"``)."""
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path
    raw = path[1:-1]
    buf = bytearray()
    i = 0
    while i < len(raw):
        ch = raw[i]
        if ch != "\\" or i + 1 == len(raw):
            buf += ch.encode("utf-8")
            i += 1
            continue
        octal = raw[i + 1 : i + 4]
        if len(octal) == 3 and all(c in "01234567" for c in octal):
            buf.append(int(octal, 8) & 0xFF)
            i += 4
        else:
            buf += _ESCAPES.get(raw[i + 1], raw[i + 1]).encode("utf-8")
            i += 2
    return buf.decode("utf-8", errors="replace")


def _header_path(operand: str, prefix: str) -> str:
    """Turn a ``---``/``+++`` (or binary marker) operand into a repo path."""
    # Non-git diffs append a tab and timestamp; git appends a bare tab to
    # names containing spaces.
    path = _unquote(operand.split("\t", 1)[0])
    if path != NULL_DEVICE and path.startswith(prefix):
        path = path[len(prefix):]
    return path


def _closing_quote(text: str) -> int:
    i = 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == '"':
            return i
        i += 1
    return -1


def _split_git_header(line: str) -> Tuple[Optional[str], Optional[str]]:
    """Return the old and new paths named on a ``diff --git`` line."""
    rest = line[len(_DIFF_HEADER):]
    if rest.startswith('"'):
        end = _closing_quote(rest)
        if end < 0:
            return None, None
        old, new = rest[: end + 1], rest[end + 2 :]
    elif rest.endswith('"'):
        start = rest.rfind(' "')
        if start < 0:
            return None, None
        old, new = rest[:start], rest[start + 1 :]
    else:
        # Same name on both sides is the common case and is unambiguous
        # even when the name contains " b/".
        mid = len(rest) // 2
        if len(rest) % 2 == 1 and rest[mid] == " " and rest[2:mid] == rest[mid + 3 :]:
            old, new = rest[:mid], rest[mid + 1 :]
        else:
            start = rest.rfind(" b/")
            if start < 0:
                return None, None
            old, new = rest[:start], rest[start + 1 :]
    old, new = _unquote(old), _unquote(new)
    if not old.startswith("a/") or not new.startswith("b/"):
        return None, None
    return old[2:], new[2:]


# --- File Section Parser ---


def parse_file_section(lines: Sequence[str]) -> FileDiff:
    """Parse one ``diff --git`` section into a FileDiff.

    Raises UnterminatedSection or MalformedHunkHeader when the section
    cannot be turned into a file record.
    """
    if not lines or not lines[0].startswith(_DIFF_HEADER):
        raise UnterminatedSection("section does not start with a diff --git line")

    git_old, git_new = _split_git_header(lines[0])
    old_path: Optional[str] = None  # from --- / +++
    new_path: Optional[str] = None
    marker_old: Optional[str] = None  # from rename/copy from/to
    marker_new: Optional[str] = None
    binary_paths: Optional[Tuple[str, str]] = None
    is_new = False
    is_deleted = False
    is_binary = False
    is_rename = False
    has_meta = False

    idx = 1
    total = len(lines)

    # Extended header lines, up to the --- / +++ pair or the first hunk
    while idx < total:
        line = lines[idx]
        if line.startswith("@@"):
            break
        if line.startswith("--- "):
            old_path = _header_path(line[4:], "a/")
            idx += 1
            if idx < total and lines[idx].startswith("+++ "):
                new_path = _header_path(lines[idx][4:], "b/")
                idx += 1
            break
        if line.startswith("+++ "):
            new_path = _header_path(line[4:], "b/")
            idx += 1
            break

        has_meta = True
        if _INDEX_RE.match(line) or _MODE_RE.match(line):
            pass
        elif _NEW_FILE_RE.match(line):
            is_new = True
        elif _DELETED_FILE_RE.match(line):
            is_deleted = True
        elif _SIMILARITY_RE.match(line):
            is_rename = True
        elif (rm := _RENAME_FROM_RE.match(line)):
            marker_old = _unquote(rm.group(1))
            is_rename = True
        elif (rt := _RENAME_TO_RE.match(line)):
            marker_new = _unquote(rt.group(1))
            is_rename = True
        elif (bm := _BINARY_RE.match(line)):
            binary_paths = (_header_path(bm.group(1), "a/"), _header_path(bm.group(2), "b/"))
            is_binary = True
        elif line.startswith("GIT binary patch"):
            is_binary = True
        else:
            logger.debug("Ignoring unknown extended header: %r", line)
        idx += 1

    label = git_new or git_old or lines[0]

    if (old_path is None) != (new_path is None):
        raise UnterminatedSection(f"{label}: incomplete ---/+++ file headers")

    if old_path is None or new_path is None:
        if not is_binary and idx < total and lines[idx].startswith("@@"):
            raise UnterminatedSection(f"{label}: hunks without ---/+++ file headers")
        if binary_paths is not None:
            old_path, new_path = binary_paths
        elif marker_old is not None or marker_new is not None:
            old_path = marker_old or git_old
            new_path = marker_new or git_new
        elif has_meta or is_binary:
            old_path, new_path = git_old, git_new
        if old_path is None or new_path is None:
            raise UnterminatedSection(f"{label}: no file headers")
        if is_new:
            old_path = NULL_DEVICE
        if is_deleted:
            new_path = NULL_DEVICE

    if old_path == NULL_DEVICE and new_path == NULL_DEVICE:
        raise UnterminatedSection(f"{label}: both sides are {NULL_DEVICE}")

    if old_path == NULL_DEVICE:
        status = FileStatus.ADDED
    elif new_path == NULL_DEVICE:
        status = FileStatus.DELETED
    elif is_rename and old_path != new_path:
        status = FileStatus.RENAMED
    else:
        status = FileStatus.MODIFIED

    if is_binary:
        hunks: List[Hunk] = []
    else:
        hunks = _parse_hunks(lines[idx:])

    return FileDiff(
        path=old_path if status is FileStatus.DELETED else new_path,
        old_path=old_path if status is FileStatus.RENAMED else None,
        status=status,
        hunks=tuple(hunks),
        is_binary=is_binary,
    )


# --- Diff Document Parser ---


def _decode(raw: Union[str, bytes]) -> str:
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DiffParseError(f"diff text is not valid UTF-8: {exc}") from exc


def _split_lines(text: str) -> List[str]:
    """Split on LF only; str.splitlines would also break on form feeds."""
    if text.startswith("\ufeff"):
        text = text[1:]
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [ln[:-1] if ln.endswith("\r") else ln for ln in lines]


def _split_sections(lines: Sequence[str]) -> List[List[str]]:
    sections: List[List[str]] = []
    for line in lines:
        if line.startswith(_DIFF_HEADER):
            sections.append([line])
        elif sections:
            sections[-1].append(line)
        # anything before the first section is preamble (e.g. git show headers)
    return sections


def parse_diff(
    raw: Union[str, bytes],
    scope: Union[DiffScope, str] = DiffScope.AGAINST_TARGET,
) -> DiffResult:
    """Parse a whole diff document into a DiffResult.

    Sections that fail to parse are skipped and listed in
    ``DiffResult.failures``. Only undecodable input raises.
    """
    text = _decode(raw)
    files: List[FileDiff] = []
    failures: List[SectionFailure] = []

    for index, section in enumerate(_split_sections(_split_lines(text))):
        try:
            files.append(parse_file_section(section))
        except DiffParseError as exc:
            git_old, git_new = _split_git_header(section[0])
            path = git_new or git_old
            logger.warning("Skipping diff section %d (%s): %s", index, path or "?", exc)
            failures.append(
                SectionFailure(
                    index=index,
                    path=path,
                    error=type(exc).__name__,
                    message=str(exc),
                )
            )

    return DiffResult(files=tuple(files), scope=DiffScope(scope), failures=tuple(failures))
