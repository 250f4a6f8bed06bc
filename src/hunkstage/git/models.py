"""Data models for working-tree status, parsed diffs, and summaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class FileStatusKind(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    UNTRACKED = "untracked"


class DiffLineKind(str, Enum):
    CONTEXT = "context"
    ADDITION = "addition"
    DELETION = "deletion"


class DiffContext(str, Enum):
    """Which two states of a path a diff compares."""

    WORKDIR = "workdir"  # index -> working tree
    STAGED = "staged"  # HEAD -> index
    UNTRACKED = "untracked"  # nothing -> working tree


@dataclass(frozen=True)
class GitFileEntry:
    """One reported change for one side (index or working tree) of a path."""

    path: str
    status: FileStatusKind
    staged: bool
    additions: int = 0
    deletions: int = 0


@dataclass(frozen=True, slots=True)
class DiffLine:
    """A single classified line inside a hunk."""

    kind: DiffLineKind
    old_lineno: Optional[int]
    new_lineno: Optional[int]
    content: str


@dataclass(frozen=True)
class DiffHunk:
    """A contiguous block of changes bounded by an ``@@`` header."""

    header: str
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    lines: Tuple[DiffLine, ...] = ()
    hunk_index: int = 0
    # raw patch lines, "\ No newline at end of file" markers included
    body: Tuple[str, ...] = field(default=(), repr=False, compare=False)

    @property
    def additions(self) -> int:
        return sum(1 for line in self.lines if line.kind == DiffLineKind.ADDITION)

    @property
    def deletions(self) -> int:
        return sum(1 for line in self.lines if line.kind == DiffLineKind.DELETION)


@dataclass(frozen=True)
class FileDiff:
    """Structured diff of a single file."""

    path: str
    old_path: Optional[str] = None  # set on renames
    hunks: Tuple[DiffHunk, ...] = ()
    is_binary: bool = False
    is_new: bool = False
    is_deleted: bool = False

    @property
    def additions(self) -> int:
        return sum(h.additions for h in self.hunks)

    @property
    def deletions(self) -> int:
        return sum(h.deletions for h in self.hunks)

    def hunk(self, index: int) -> Optional[DiffHunk]:
        """Return the hunk at *index*, or None if there is no such hunk."""
        if 0 <= index < len(self.hunks):
            return self.hunks[index]
        return None


@dataclass(frozen=True)
class GitSummary:
    """Aggregate snapshot of the repository's pending changes."""

    additions: int = 0
    deletions: int = 0
    changed_files: int = 0
    branch: str = "HEAD"
