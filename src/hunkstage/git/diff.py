"""Per-path diffs in the workdir, staged, and untracked contexts."""

from __future__ import annotations

import logging
from typing import List, Optional

from hunkstage.git.adapter import (
    Repository,
    get_staged_diff,
    get_untracked_diff,
    get_workdir_diff,
    is_tracked,
)
from hunkstage.git.diff_parser import DiffParser, printable
from hunkstage.git.errors import DiffComputationError, GitError
from hunkstage.git.models import DiffContext, DiffHunk, DiffLine, DiffLineKind, FileDiff

logger = logging.getLogger(__name__)


def _parse(diff_text: str, path: str) -> FileDiff:
    return DiffParser(diff_text).parse_file(path)


def file_diff_workdir(repo: Repository, path: str) -> FileDiff:
    """Diff *path* between the index and the working tree.

    Untracked files are diffed against nothing, so their whole content shows
    up as a single all-additions hunk.
    """
    try:
        if not is_tracked(repo, path) and repo.workdir_path(path).is_file():
            diff_text = get_untracked_diff(repo, path)
        else:
            diff_text = get_workdir_diff(repo, path)
    except GitError as exc:
        raise DiffComputationError(f"workdir diff failed for {path}: {exc}") from exc
    return _parse(diff_text, path)


def file_diff_staged(repo: Repository, path: str) -> FileDiff:
    """Diff *path* between HEAD and the index."""
    try:
        diff_text = get_staged_diff(repo, path)
    except GitError as exc:
        raise DiffComputationError(f"staged diff failed for {path}: {exc}") from exc
    return _parse(diff_text, path)


def file_diff_untracked(repo: Repository, path: str) -> FileDiff:
    """Synthesise a pure-addition diff of an untracked file from disk."""
    raw = _read_workdir_bytes(repo, path)
    if raw is not None and b"\0" in raw:
        return FileDiff(path=path, is_binary=True, is_new=True)

    content = raw.decode("utf-8", errors="surrogateescape") if raw is not None else ""
    text_lines = content.split("\n")
    missing_newline = text_lines[-1] != ""
    if not missing_newline:
        text_lines.pop()

    lines: List[DiffLine] = []
    body: List[str] = []
    for number, raw_line in enumerate(text_lines, start=1):
        text = raw_line[:-1] if raw_line.endswith("\r") else raw_line
        lines.append(DiffLine(DiffLineKind.ADDITION, None, number, printable(text)))
        body.append(f"+{raw_line}")
    if lines and missing_newline:
        body.append("\\ No newline at end of file")

    hunks = ()
    if lines:
        hunks = (
            DiffHunk(
                header=f"@@ -0,0 +1,{len(lines)} @@",
                old_start=0,
                old_lines=0,
                new_start=1,
                new_lines=len(lines),
                lines=tuple(lines),
                hunk_index=0,
                body=tuple(body),
            ),
        )
    return FileDiff(path=path, hunks=hunks, is_new=True)


def file_diff(repo: Repository, path: str, context: DiffContext) -> FileDiff:
    """Dispatch to the diff function for *context*."""
    if context == DiffContext.STAGED:
        return file_diff_staged(repo, path)
    if context == DiffContext.UNTRACKED:
        return file_diff_untracked(repo, path)
    return file_diff_workdir(repo, path)


def _decode(raw: Optional[bytes]) -> Optional[str]:
    if raw is None:
        return None
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return None


def _read_workdir_bytes(repo: Repository, path: str) -> Optional[bytes]:
    try:
        return repo.workdir_path(path).read_bytes()
    except OSError as exc:
        logger.debug("cannot read %s from working tree: %s", path, exc)
        return None


def read_workdir_content(repo: Repository, path: str) -> Optional[str]:
    """Return the working-tree text of *path*, or None if missing or not UTF-8."""
    return _decode(_read_workdir_bytes(repo, path))


def read_head_content(repo: Repository, path: str) -> Optional[str]:
    """Return the text of *path* as committed at HEAD, or None."""
    try:
        raw = repo.run_bytes(["cat-file", "blob", f"HEAD:{path}"])
    except GitError as exc:
        logger.debug("no HEAD content for %s: %s", path, exc)
        return None
    return _decode(raw)
