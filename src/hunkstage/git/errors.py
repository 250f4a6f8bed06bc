"""Exception taxonomy for repository, diff, and staging operations."""

from __future__ import annotations


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


class RepositoryError(GitError):
    """The path is not inside a git repository or cannot be opened."""


class StatusQueryError(GitError):
    """The bulk status scan failed."""


class DiffComputationError(GitError):
    """A targeted diff for one path could not be computed."""


class PatchApplyError(GitError):
    """Applying a patch to the index or working tree failed."""


class IndexWriteError(GitError):
    """Adding, removing, or resetting an index entry failed."""


class CommitError(GitError):
    """Writing the tree or commit object, or advancing HEAD, failed."""


class CheckoutError(GitError):
    """Restoring a path from HEAD into the working tree failed."""


class HunkNotFoundError(GitError):
    """The requested hunk is not present in the current diff of the path."""

    def __init__(self, path: str, hunk_index: int) -> None:
        super().__init__(f"no hunk {hunk_index} in current diff of {path}")
        self.path = path
        self.hunk_index = hunk_index
