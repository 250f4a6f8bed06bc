"""Git interface layer — repository handle, status, diffs, hunk staging."""

from hunkstage.git.adapter import Repository, open_repository
from hunkstage.git.diff import (
    file_diff,
    file_diff_staged,
    file_diff_untracked,
    file_diff_workdir,
    read_head_content,
    read_workdir_content,
)
from hunkstage.git.diff_parser import DiffParser
from hunkstage.git.errors import (
    CheckoutError,
    CommitError,
    DiffComputationError,
    GitError,
    HunkNotFoundError,
    IndexWriteError,
    PatchApplyError,
    RepositoryError,
    StatusQueryError,
)
from hunkstage.git.models import (
    DiffContext,
    DiffHunk,
    DiffLine,
    DiffLineKind,
    FileDiff,
    FileStatusKind,
    GitFileEntry,
    GitSummary,
)
from hunkstage.git.patch import (
    build_hunk_patch,
    build_reverse_hunk_patch,
    reverse_hunk_header,
    reverse_patch,
)
from hunkstage.git.staging import (
    commit,
    discard_file,
    discard_hunk,
    stage_file,
    stage_hunk,
    unstage_file,
)
from hunkstage.git.status import current_branch, status_entries, summary

__all__ = [
    "CheckoutError",
    "CommitError",
    "DiffComputationError",
    "DiffContext",
    "DiffHunk",
    "DiffLine",
    "DiffLineKind",
    "DiffParser",
    "FileDiff",
    "FileStatusKind",
    "GitError",
    "GitFileEntry",
    "GitSummary",
    "HunkNotFoundError",
    "IndexWriteError",
    "PatchApplyError",
    "Repository",
    "RepositoryError",
    "StatusQueryError",
    "build_hunk_patch",
    "build_reverse_hunk_patch",
    "commit",
    "current_branch",
    "discard_file",
    "discard_hunk",
    "file_diff",
    "file_diff_staged",
    "file_diff_untracked",
    "file_diff_workdir",
    "open_repository",
    "read_head_content",
    "read_workdir_content",
    "reverse_hunk_header",
    "reverse_patch",
    "stage_file",
    "stage_hunk",
    "status_entries",
    "summary",
    "unstage_file",
]
