"""Shared test fixtures — sample diffs, temp git repos, a git helper."""

from __future__ import annotations

import subprocess
import textwrap
from pathlib import Path
from typing import Callable

import pytest

from hunkstage.git.adapter import Repository, open_repository

TWENTY_LINES = "".join(f"line {n}\n" for n in range(1, 21))


def _git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=True,
    )
    return result.stdout


@pytest.fixture
def git() -> Callable[..., str]:
    """Run a git command in a directory and return its stdout."""
    return _git


@pytest.fixture
def sample_diff_modified() -> str:
    """One modified line in the middle of a file."""
    return textwrap.dedent("""\
        diff --git a/app.py b/app.py
        index 1234567..abcdef0 100644
        --- a/app.py
        +++ b/app.py
        @@ -1,5 +1,5 @@ import os
         a = 1
         b = 2
        -c = 3
        +c = 30
         d = 4
         e = 5
    """)


@pytest.fixture
def sample_diff_two_hunks() -> str:
    """Two separate hunks in the same file."""
    return textwrap.dedent("""\
        diff --git a/f.txt b/f.txt
        index abc1234..def5678 100644
        --- a/f.txt
        +++ b/f.txt
        @@ -1,4 +1,4 @@
        -line 1
        +LINE 1
         line 2
         line 3
         line 4
        @@ -17,4 +17,5 @@ line 16
         line 17
         line 18
         line 19
         line 20
        +line 21
    """)


@pytest.fixture
def sample_diff_new_file() -> str:
    return textwrap.dedent("""\
        diff --git a/hello.py b/hello.py
        new file mode 100644
        index 0000000..e69de29
        --- /dev/null
        +++ b/hello.py
        @@ -0,0 +1,3 @@
        +def greet(name):
        +    return f"Hello, {name}!"
        +
    """)


@pytest.fixture
def sample_diff_deleted_file() -> str:
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
def sample_diff_binary() -> str:
    return textwrap.dedent("""\
        diff --git a/image.png b/image.png
        index abc1234..def5678 100644
        Binary files a/image.png and b/image.png differ
    """)


@pytest.fixture
def sample_diff_rename() -> str:
    return textwrap.dedent("""\
        diff --git a/old_name.py b/new_name.py
        similarity index 97%
        rename from old_name.py
        rename to new_name.py
        index abc1234..def5678 100644
        --- a/old_name.py
        +++ b/new_name.py
        @@ -1,1 +1,2 @@
         x = 1
        +# New line added after rename
    """)


@pytest.fixture
def sample_diff_pure_rename() -> str:
    return textwrap.dedent("""\
        diff --git a/a.txt b/b.txt
        similarity index 100%
        rename from a.txt
        rename to b.txt
    """)


@pytest.fixture
def sample_diff_mode_only() -> str:
    return textwrap.dedent("""\
        diff --git a/script.sh b/script.sh
        old mode 100644
        new mode 100755
    """)


@pytest.fixture
def sample_diff_no_newline() -> str:
    """Last line gains a trailing newline."""
    return textwrap.dedent("""\
        diff --git a/data.txt b/data.txt
        index 1111111..2222222 100644
        --- a/data.txt
        +++ b/data.txt
        @@ -1,2 +1,2 @@
         first
        -last
        \\ No newline at end of file
        +last
    """)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository with one commit on ``main``."""
    _git(tmp_path, "init", str(tmp_path))
    _git(tmp_path, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(tmp_path, "config", "user.email", "test@test.com")
    _git(tmp_path, "config", "user.name", "Test")
    _git(tmp_path, "config", "commit.gpgsign", "false")
    _git(tmp_path, "config", "core.autocrlf", "false")
    # Initial commit
    (tmp_path / "README.md").write_text("# Test\n")
    (tmp_path / "f.txt").write_text(TWENTY_LINES)
    _git(tmp_path, "add", ".")
    _git(tmp_path, "commit", "-m", "init")
    return tmp_path


@pytest.fixture
def empty_git_repo(tmp_path: Path) -> Path:
    """A repository on an unborn ``main`` branch."""
    _git(tmp_path, "init", str(tmp_path))
    _git(tmp_path, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(tmp_path, "config", "user.email", "test@test.com")
    _git(tmp_path, "config", "user.name", "Test")
    _git(tmp_path, "config", "commit.gpgsign", "false")
    return tmp_path


@pytest.fixture
def repo(tmp_git_repo: Path) -> Repository:
    return open_repository(tmp_git_repo)
