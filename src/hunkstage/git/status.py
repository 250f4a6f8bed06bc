"""Working-tree status scan, deduplication, and summary."""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Tuple

from hunkstage.git.adapter import Repository, get_numstat, get_status_records
from hunkstage.git.errors import GitError, StatusQueryError
from hunkstage.git.models import FileStatusKind, GitFileEntry, GitSummary

logger = logging.getLogger(__name__)

# (staged, porcelain column, status code, kind) in priority order; the first
# flag that fires for a (path, staged) key wins deduplication.
_FLAG_PRIORITY: Tuple[Tuple[bool, int, str, FileStatusKind], ...] = (
    (True, 0, "A", FileStatusKind.ADDED),
    (True, 0, "M", FileStatusKind.MODIFIED),
    (True, 0, "D", FileStatusKind.DELETED),
    (True, 0, "R", FileStatusKind.RENAMED),
    (False, 1, "?", FileStatusKind.UNTRACKED),
    (False, 1, "M", FileStatusKind.MODIFIED),
    (False, 1, "D", FileStatusKind.DELETED),
    (False, 1, "R", FileStatusKind.RENAMED),
)


def current_branch(repo: Repository) -> str:
    """Return the checked-out branch name, or ``"HEAD"`` if detached or unborn."""
    try:
        name = repo.run(["rev-parse", "--abbrev-ref", "HEAD"]).strip()
    except GitError:
        return "HEAD"
    return name or "HEAD"


def parse_status_records(output: str) -> Iterator[Tuple[str, str]]:
    """Yield (XY code, path) pairs from ``git status --porcelain=v1 -z`` output."""
    fields = output.split("\0")
    idx = 0
    while idx < len(fields):
        record = fields[idx]
        idx += 1
        if len(record) < 4:
            continue
        code, path = record[:2], record[3:]
        if "R" in code or "C" in code:
            idx += 1  # the original path follows a rename/copy record
        yield code, path


def entries_from_records(records: Iterator[Tuple[str, str]]) -> List[GitFileEntry]:
    """Emit one zero-count entry per set status flag of each record."""
    entries: List[GitFileEntry] = []
    for code, path in records:
        for staged, column, flag, kind in _FLAG_PRIORITY:
            if code[column] == flag:
                entries.append(GitFileEntry(path=path, status=kind, staged=staged))
    return entries


def deduplicate(entries: List[GitFileEntry]) -> List[GitFileEntry]:
    """Keep the first entry for each (path, staged) key, preserving order."""
    merged: Dict[Tuple[str, bool], GitFileEntry] = {}
    for entry in entries:
        merged.setdefault((entry.path, entry.staged), entry)
    return list(merged.values())


def _with_line_counts(repo: Repository, entry: GitFileEntry) -> GitFileEntry:
    try:
        additions, deletions = get_numstat(
            repo,
            entry.path,
            staged=entry.staged,
            untracked=entry.status == FileStatusKind.UNTRACKED,
        )
    except GitError as exc:
        logger.debug("line counts unavailable for %s: %s", entry.path, exc)
        return entry
    return GitFileEntry(
        path=entry.path,
        status=entry.status,
        staged=entry.staged,
        additions=additions,
        deletions=deletions,
    )


def status_entries(repo: Repository) -> List[GitFileEntry]:
    """Scan index and working tree; return deduplicated entries sorted by path."""
    try:
        output = get_status_records(repo)
    except GitError as exc:
        raise StatusQueryError(f"status scan failed: {exc}") from exc

    entries = deduplicate(entries_from_records(parse_status_records(output)))
    entries = [_with_line_counts(repo, entry) for entry in entries]
    entries.sort(key=lambda e: e.path)
    logger.info("status: %d entries", len(entries))
    return entries


def summarize(entries: List[GitFileEntry], branch: str) -> GitSummary:
    return GitSummary(
        additions=sum(e.additions for e in entries),
        deletions=sum(e.deletions for e in entries),
        changed_files=len(entries),
        branch=branch,
    )


def summary(repo: Repository) -> GitSummary:
    """Reduce the current status entries to totals plus the branch name."""
    return summarize(status_entries(repo), current_branch(repo))
