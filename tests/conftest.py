"""Shared test fixtures — sample diffs and temp git repos."""

from __future__ import annotations

import subprocess
import textwrap
from pathlib import Path

import pytest


@pytest.fixture
def sample_diff_added() -> str:
    """A new file with two lines."""
    return textwrap.dedent("""\
        diff --git a/foo.txt b/foo.txt
        new file mode 100644
        index 0000000..3b18e51
        --- /dev/null
        +++ b/foo.txt
        @@ -0,0 +1,2 @@
        +hello
        +world
    """)


@pytest.fixture
def sample_diff_modified() -> str:
    """One context line, one deletion, one addition."""
    return textwrap.dedent("""\
        diff --git a/app.py b/app.py
        index 1234567..abcdef0 100644
        --- a/app.py
        +++ b/app.py
        @@ -5,2 +5,2 @@ def main():
         unchanged
        -old line
        +new line
    """)


@pytest.fixture
def sample_diff_deleted() -> str:
    """A deleted file."""
    return textwrap.dedent("""\
        diff --git a/old.py b/old.py
        deleted file mode 100644
        index abc1234..0000000
        --- a/old.py
        +++ /dev/null
        @@ -1,3 +0,0 @@
        -line one
        -line two
        -line three
    """)


@pytest.fixture
def sample_diff_rename() -> str:
    """A pure rename, no content change."""
    return textwrap.dedent("""\
        diff --git a/a.txt b/b.txt
        similarity index 100%
        rename from a.txt
        rename to b.txt
    """)


@pytest.fixture
def sample_diff_rename_edit() -> str:
    """A rename with a content change."""
    return textwrap.dedent("""\
        diff --git a/old_name.py b/new_name.py
        similarity index 90%
        rename from old_name.py
        rename to new_name.py
        index abc1234..def5678 100644
        --- a/old_name.py
        +++ b/new_name.py
        @@ -1,2 +1,3 @@
         import os
        +# New line added after rename
         print(os.getcwd())
    """)


@pytest.fixture
def sample_diff_binary() -> str:
    """A binary file."""
    return textwrap.dedent("""\
        diff --git a/image.png b/image.png
        new file mode 100644
        index 0000000..1d2f3a4
        Binary files /dev/null and b/image.png differ
    """)


@pytest.fixture
def sample_diff_mode_only() -> str:
    """A diff with only file mode change."""
    return textwrap.dedent("""\
        diff --git a/script.sh b/script.sh
        old mode 100644
        new mode 100755
    """)


@pytest.fixture
def sample_diff_no_newline() -> str:
    """A diff with 'No newline at end of file' markers."""
    return textwrap.dedent("""\
        diff --git a/data.txt b/data.txt
        index 1111111..2222222 100644
        --- a/data.txt
        +++ b/data.txt
        @@ -1,2 +1,2 @@
         first
        -last
        \\ No newline at end of file
        +last, now with newline
    """)


@pytest.fixture
def sample_diff_multi(sample_diff_added, sample_diff_modified, sample_diff_binary) -> str:
    """Several files in one document, including two hunks in one file."""
    two_hunks = textwrap.dedent("""\
        diff --git a/lib/util.py b/lib/util.py
        index 3333333..4444444 100644
        --- a/lib/util.py
        +++ b/lib/util.py
        @@ -1,4 +1,5 @@
         import re
        +import os


         def a():
        @@ -20,4 +21,3 @@ def b():
             x = 1
        -    y = 2
        -    z = 3
        +    y = 3
             return x
    """)
    return sample_diff_added + two_hunks + sample_diff_modified + sample_diff_binary


@pytest.fixture
def sample_diff_malformed(sample_diff_added, sample_diff_modified) -> str:
    """A valid file, a section with a broken hunk header, and another valid file."""
    broken = textwrap.dedent("""\
        diff --git a/broken.txt b/broken.txt
        index 5555555..6666666 100644
        --- a/broken.txt
        +++ b/broken.txt
        @@ garbage @@
        +whatever
    """)
    return sample_diff_added + broken + sample_diff_modified


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    subprocess.run(
        ["git", "config", "user.email", "test@test.com"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    subprocess.run(
        ["git", "config", "user.name", "Test"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    # Initial commit
    readme = tmp_path / "README.md"
    readme.write_text("# Test\n")
    numbers = tmp_path / "numbers.txt"
    numbers.write_text("".join(f"line {i}\n" for i in range(1, 21)))
    subprocess.run(["git", "add", "."], cwd=tmp_path, capture_output=True, check=True)
    subprocess.run(
        ["git", "commit", "-m", "init"],
        cwd=tmp_path, capture_output=True, check=True,
    )
    return tmp_path
