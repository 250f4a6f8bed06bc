"""Stage, unstage, discard, and commit at file and hunk granularity.

Every operation is a single synchronous pass over the on-disk repository;
nothing is retried and nothing refreshes status afterwards. Callers must
serialise these writes against one repository.
"""

from __future__ import annotations

import logging
import os

from hunkstage.git.adapter import Repository, apply_patch, head_commit
from hunkstage.git.diff import file_diff_workdir
from hunkstage.git.errors import (
    CheckoutError,
    CommitError,
    GitError,
    IndexWriteError,
    PatchApplyError,
)
from hunkstage.git.patch import build_hunk_patch, build_reverse_hunk_patch

logger = logging.getLogger(__name__)


def stage_file(repo: Repository, path: str) -> None:
    """Record the working-tree state of *path* in the index.

    A path that no longer exists on disk is removed from the index instead.
    """
    target = repo.workdir_path(path)
    try:
        if os.path.lexists(target):
            repo.run(["add", "--", path])
        else:
            repo.run(["rm", "--cached", "--quiet", "--ignore-unmatch", "--", path])
    except GitError as exc:
        raise IndexWriteError(f"cannot stage {path}: {exc}") from exc
    logger.info("staged %s", path)


def unstage_file(repo: Repository, path: str) -> None:
    """Reset the index entry of *path* to HEAD, or drop it on an unborn branch."""
    try:
        if head_commit(repo) is not None:
            repo.run(["reset", "--quiet", "HEAD", "--", path])
        else:
            repo.run(["rm", "--cached", "--quiet", "--ignore-unmatch", "--", path])
    except GitError as exc:
        raise IndexWriteError(f"cannot unstage {path}: {exc}") from exc
    logger.info("unstaged %s", path)


def stage_hunk(repo: Repository, path: str, hunk_index: int) -> None:
    """Apply hunk *hunk_index* of the unstaged diff of *path* to the index only.

    Raises HunkNotFoundError if the current diff has no such hunk.
    """
    patch = build_hunk_patch(file_diff_workdir(repo, path), hunk_index)
    try:
        apply_patch(repo, patch, cached=True)
    except GitError as exc:
        raise PatchApplyError(f"cannot stage hunk {hunk_index} of {path}: {exc}") from exc
    logger.info("staged hunk %d of %s", hunk_index, path)


def discard_hunk(repo: Repository, path: str, hunk_index: int) -> None:
    """Undo hunk *hunk_index* of the unstaged diff of *path* in the working tree.

    An untracked file whose only hunk is discarded is removed; a deleted file
    is recreated. Raises HunkNotFoundError if the current diff has no such hunk.
    """
    patch = build_reverse_hunk_patch(file_diff_workdir(repo, path), hunk_index)
    try:
        apply_patch(repo, patch, cached=False)
    except GitError as exc:
        raise PatchApplyError(f"cannot discard hunk {hunk_index} of {path}: {exc}") from exc
    logger.info("discarded hunk %d of %s", hunk_index, path)


def discard_file(repo: Repository, path: str) -> None:
    """Overwrite *path* in the index and working tree with its HEAD version."""
    try:
        head = head_commit(repo)
    except GitError as exc:
        raise CheckoutError(f"cannot discard {path}: {exc}") from exc
    if head is None:
        raise CheckoutError(f"cannot discard {path}: HEAD does not exist yet")

    try:
        repo.run(["checkout", "--force", head, "--", path])
    except GitError as exc:
        raise CheckoutError(f"cannot discard {path}: {exc}") from exc
    logger.info("discarded %s", path)


def commit(repo: Repository, message: str) -> str:
    """Commit the index with HEAD as sole parent and advance HEAD.

    An index identical to HEAD still produces a commit. Returns the new
    commit id.
    """
    try:
        parent = head_commit(repo)
        tree = repo.run(["write-tree"]).strip()
        args = ["commit-tree", tree]
        if parent is not None:
            args += ["-p", parent]
        commit_id = repo.run([*args, "-F", "-"], input_text=message).strip()

        subject = message.splitlines()[0] if message.strip() else ""
        update = ["update-ref", "-m", f"commit: {subject}", "HEAD", commit_id]
        if parent is not None:
            update.append(parent)
        repo.run(update)
    except GitError as exc:
        raise CommitError(f"commit failed: {exc}") from exc
    logger.info("committed %s", commit_id)
    return commit_id
