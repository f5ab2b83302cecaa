"""Tests for DiffService — fetch + parse, path selection, full context."""

import subprocess
from pathlib import Path

import pytest

from vibediff.config.schema import VibeDiffConfig
from vibediff.git.diff_parser import DiffParseError
from vibediff.git.models import DiffResult, DiffScope, FileStatus, LineType, SectionFailure
from vibediff.git.service import DiffService, FileNotInDiff


def _git(repo: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=repo, capture_output=True, check=True)


def _change_line_ten(repo: Path) -> None:
    lines = [f"line {i}" for i in range(1, 21)]
    lines[9] = "changed"
    (repo / "numbers.txt").write_text("\n".join(lines) + "\n")


class TestGetDiff:
    def test_empty(self, tmp_git_repo: Path):
        result = DiffService(tmp_git_repo).get_diff(DiffScope.UNSTAGED)
        assert result.files == ()
        assert result.scope == DiffScope.UNSTAGED

    def test_default_scope_from_config(self, tmp_git_repo: Path):
        cfg = VibeDiffConfig()
        cfg.diff.scope = "staged"
        result = DiffService(tmp_git_repo, cfg).get_diff()
        assert result.scope == DiffScope.STAGED

    def test_modified_numbers(self, tmp_git_repo: Path):
        _change_line_ten(tmp_git_repo)
        result = DiffService(tmp_git_repo).get_diff(DiffScope.UNSTAGED)
        f = result.find_file("numbers.txt")
        assert f.status == FileStatus.MODIFIED
        assert (f.additions, f.deletions) == (1, 1)
        hunk = f.hunks[0]
        assert (hunk.old_start, hunk.old_lines, hunk.new_start, hunk.new_lines) == (7, 7, 7, 7)
        deleted = [ln for ln in hunk.lines if ln.type == LineType.DELETED]
        added = [ln for ln in hunk.lines if ln.type == LineType.ADDED]
        assert deleted[0].old_number == 10
        assert deleted[0].content == "line 10"
        assert added[0].new_number == 10
        assert added[0].content == "changed"

    def test_staged_new_file(self, tmp_git_repo: Path):
        (tmp_git_repo / "new.txt").write_text("a\nb\n")
        _git(tmp_git_repo, "add", "new.txt")
        f = DiffService(tmp_git_repo).get_diff(DiffScope.STAGED).find_file("new.txt")
        assert f.status == FileStatus.ADDED
        assert f.additions == 2

    def test_staged_pure_rename(self, tmp_git_repo: Path):
        _git(tmp_git_repo, "mv", "README.md", "DOCS.md")
        result = DiffService(tmp_git_repo).get_diff(DiffScope.STAGED)
        assert len(result.files) == 1
        f = result.files[0]
        assert f.status == FileStatus.RENAMED
        assert f.old_path == "README.md"
        assert f.path == "DOCS.md"
        assert f.hunks == ()

    def test_deleted_file(self, tmp_git_repo: Path):
        (tmp_git_repo / "README.md").unlink()
        f = DiffService(tmp_git_repo).get_diff(DiffScope.UNSTAGED).find_file("README.md")
        assert f.status == FileStatus.DELETED
        assert f.deletions == 1

    def test_binary_file(self, tmp_git_repo: Path):
        (tmp_git_repo / "blob.bin").write_bytes(b"\x00\x01\x02binary\x00")
        _git(tmp_git_repo, "add", "blob.bin")
        f = DiffService(tmp_git_repo).get_diff(DiffScope.STAGED).find_file("blob.bin")
        assert f.is_binary
        assert f.hunks == ()


class TestFileSelection:
    def test_select_by_path(self, tmp_git_repo: Path):
        _change_line_ten(tmp_git_repo)
        f = DiffService(tmp_git_repo).get_file_diff("numbers.txt", DiffScope.UNSTAGED)
        assert f.path == "numbers.txt"

    def test_not_found(self, tmp_git_repo: Path):
        _change_line_ten(tmp_git_repo)
        with pytest.raises(FileNotInDiff) as exc_info:
            DiffService(tmp_git_repo).get_file_diff("README.md", DiffScope.UNSTAGED)
        assert exc_info.value.path == "README.md"
        assert isinstance(exc_info.value, LookupError)

    def test_full_context_spans_file(self, tmp_git_repo: Path):
        _change_line_ten(tmp_git_repo)
        f = DiffService(tmp_git_repo).get_file_diff_full_context("numbers.txt", DiffScope.UNSTAGED)
        assert len(f.hunks) == 1
        hunk = f.hunks[0]
        assert (hunk.old_start, hunk.old_lines, hunk.new_start, hunk.new_lines) == (1, 20, 1, 20)
        assert len(hunk.lines) == 21

    def test_failed_section_is_not_not_found(self, tmp_git_repo: Path, monkeypatch):
        failed = DiffResult(
            scope=DiffScope.UNSTAGED,
            failures=(SectionFailure(0, "bad.txt", "MalformedHunkHeader", "malformed hunk header"),),
        )
        service = DiffService(tmp_git_repo)
        monkeypatch.setattr(service, "get_diff", lambda scope=None, context_lines=None: failed)
        with pytest.raises(DiffParseError):
            service.get_file_diff("bad.txt")
        with pytest.raises(FileNotInDiff):
            service.get_file_diff("other.txt")
