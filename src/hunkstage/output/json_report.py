"""JSON reporter for scripts and editor integrations."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from hunkstage.git.models import FileDiff, GitFileEntry, GitSummary


def entry_to_dict(entry: GitFileEntry) -> Dict[str, Any]:
    return {
        "path": entry.path,
        "status": entry.status.value,
        "staged": entry.staged,
        "additions": entry.additions,
        "deletions": entry.deletions,
    }


def summary_to_dict(summary: GitSummary) -> Dict[str, Any]:
    return {
        "branch": summary.branch,
        "changed_files": summary.changed_files,
        "additions": summary.additions,
        "deletions": summary.deletions,
    }


def diff_to_dict(file_diff: FileDiff) -> Dict[str, Any]:
    """Convert a FileDiff to a JSON-serialisable dict."""
    hunks: List[Dict[str, Any]] = []
    for hunk in file_diff.hunks:
        hunks.append({
            "index": hunk.hunk_index,
            "header": hunk.header,
            "old_start": hunk.old_start,
            "old_lines": hunk.old_lines,
            "new_start": hunk.new_start,
            "new_lines": hunk.new_lines,
            "lines": [
                {
                    "kind": line.kind.value,
                    "old_lineno": line.old_lineno,
                    "new_lineno": line.new_lineno,
                    "content": line.content,
                }
                for line in hunk.lines
            ],
        })

    return {
        "path": file_diff.path,
        **({"old_path": file_diff.old_path} if file_diff.old_path else {}),
        "is_binary": file_diff.is_binary,
        "additions": file_diff.additions,
        "deletions": file_diff.deletions,
        "hunks": hunks,
    }


def render_status(entries: List[GitFileEntry], summary: Optional[GitSummary] = None) -> str:
    """Return formatted JSON for a status scan."""
    data: Dict[str, Any] = {"entries": [entry_to_dict(e) for e in entries]}
    if summary is not None:
        data["summary"] = summary_to_dict(summary)
    return json.dumps(data, indent=2)


def render_summary(summary: GitSummary) -> str:
    return json.dumps(summary_to_dict(summary), indent=2)


def render_diff(file_diff: FileDiff) -> str:
    return json.dumps(diff_to_dict(file_diff), indent=2)
