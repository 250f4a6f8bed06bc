"""Single-hunk patch extraction and patch reversal."""

from __future__ import annotations

import re
from typing import List

from hunkstage.git.adapter import DEV_NULL
from hunkstage.git.errors import HunkNotFoundError
from hunkstage.git.models import FileDiff

_RANGE_HEADER_RE = re.compile(r"^@@ -(\d+(?:,\d+)?) \+(\d+(?:,\d+)?) @@(.*)$")


def build_hunk_patch(file_diff: FileDiff, hunk_index: int, *, use_dev_null: bool = True) -> str:
    """Return a standalone patch containing only hunk *hunk_index*.

    The patch carries just the ``---``/``+++`` file lines, the hunk header and
    the hunk body, so it applies without touching any other hunk of the file.
    With *use_dev_null*, a new or deleted file gets ``/dev/null`` on the absent
    side, which lets ``git apply --cached`` create or drop the index entry.

    Raises HunkNotFoundError for binary files and out-of-range indexes.
    """
    hunk = None if file_diff.is_binary else file_diff.hunk(hunk_index)
    if hunk is None:
        raise HunkNotFoundError(file_diff.path, hunk_index)

    old_name = f"a/{file_diff.old_path or file_diff.path}"
    new_name = f"b/{file_diff.path}"
    if use_dev_null and file_diff.is_new:
        old_name = DEV_NULL
    if use_dev_null and file_diff.is_deleted:
        new_name = DEV_NULL

    out = [f"--- {old_name}", f"+++ {new_name}", hunk.header, *hunk.body]
    return "\n".join(out) + "\n"


def build_reverse_hunk_patch(file_diff: FileDiff, hunk_index: int) -> str:
    """Return a patch that undoes hunk *hunk_index* in the working tree.

    Undoing the whole content of a new file removes the file, and undoing a
    deletion recreates it; other hunks edit *path* in place.

    Raises HunkNotFoundError for binary files and out-of-range indexes.
    """
    body = reverse_patch(build_hunk_patch(file_diff, hunk_index, use_dev_null=False))
    old_name = f"a/{file_diff.path}"
    new_name = f"b/{file_diff.path}"
    if file_diff.is_deleted:
        old_name = DEV_NULL
    elif file_diff.is_new and len(file_diff.hunks) == 1:
        new_name = DEV_NULL

    lines = body.split("\n")
    lines[0:2] = [f"--- {old_name}", f"+++ {new_name}"]
    return "\n".join(lines)


def reverse_hunk_header(header: str) -> str:
    """Swap the old and new range groups of an ``@@`` header.

    ``@@ -3,4 +3,5 @@ def f():`` becomes ``@@ -3,5 +3,4 @@ def f():``.
    Lines that are not range headers are returned unchanged.
    """
    m = _RANGE_HEADER_RE.match(header)
    if not m:
        return header
    old_range, new_range, section = m.groups()
    return f"@@ -{new_range} +{old_range} @@{section}"


def reverse_patch(patch: str) -> str:
    """Invert *patch* so that applying it undoes the original change.

    File identity lines pass through untouched; only the direction of the
    content changes. ``reverse_patch(reverse_patch(p)) == p``.
    """
    out: List[str] = []
    in_body = False
    for line in patch.split("\n"):
        if line.startswith("@@"):
            in_body = True
            out.append(reverse_hunk_header(line))
        elif not in_body:
            out.append(line)
        elif line.startswith("+"):
            out.append("-" + line[1:])
        elif line.startswith("-"):
            out.append("+" + line[1:])
        else:
            if line.startswith("diff "):
                in_body = False
            out.append(line)
    return "\n".join(out)
