"""Unified diff parser — turns git patch text into structured FileDiff objects.

Each ``diff --git`` section becomes one FileDiff holding its ordered hunks.
Hunk lines are numbered from the ranges in the hunk header. Binary markers,
renames, new/deleted files, mode-only changes and "No newline" markers are
recognised; the raw hunk body is kept so a single hunk can be re-emitted as
a standalone patch.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from hunkstage.git.models import DiffHunk, DiffLine, DiffLineKind, FileDiff

# --- Regex patterns for diff parsing ---

_DIFF_HEADER_RE = re.compile(r"^diff --git (\"?a/.*\"?) (\"?b/.*\"?)$")
HUNK_HEADER_RE = re.compile(
    r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@"
)
_BINARY_RE = re.compile(r"^Binary files .* and .* differ$")
_RENAME_FROM_RE = re.compile(r"^(?:rename|copy) from (.+)$")
_RENAME_TO_RE = re.compile(r"^(?:rename|copy) to (.+)$")
_FILE_HEADER_OLD = re.compile(r"^--- (.+)$")
_FILE_HEADER_NEW = re.compile(r"^\+\+\+ (.+)$")
_DELETED_FILE_RE = re.compile(r"^deleted file mode \d+$")
_NEW_FILE_RE = re.compile(r"^new file mode \d+$")

_DEV_NULL = "/dev/null"

_C_ESCAPE_RE = re.compile(rb'\\([0-7]{3}|.)', re.DOTALL)
_C_ESCAPES = {
    b"a": b"\a", b"b": b"\b", b"t": b"\t", b"n": b"\n",
    b"v": b"\v", b"f": b"\f", b"r": b"\r", b'"': b'"', b"\\": b"\\",
}


def _c_unescape(match: re.Match[bytes]) -> bytes:
    code = match.group(1)
    if len(code) == 3:
        return bytes([int(code, 8)])
    return _C_ESCAPES.get(code, code)


def unquote_path(raw: str) -> str:
    """Undo git's C-style quoting of unusual path names.

    Octal escapes are byte values of the UTF-8 name, so they are resolved on
    the encoded path before decoding it again.
    """
    raw = raw.rstrip("\t")
    if len(raw) >= 2 and raw.startswith('"') and raw.endswith('"'):
        inner = raw[1:-1].encode("utf-8", errors="surrogateescape")
        return _C_ESCAPE_RE.sub(_c_unescape, inner).decode("utf-8", errors="surrogateescape")
    return raw


def printable(text: str) -> str:
    """Replace undecodable bytes (kept as lone surrogates) with U+FFFD."""
    return text.encode("utf-8", errors="surrogateescape").decode("utf-8", errors="replace")


def _strip_prefix(raw: str) -> Optional[str]:
    """Strip the a/ or b/ prefix from a header path; None for /dev/null."""
    path = unquote_path(raw)
    if path == _DEV_NULL:
        return None
    if path.startswith(("a/", "b/")):
        return path[2:]
    return path


def _content(raw_line: str) -> str:
    """Drop the origin marker and a trailing carriage return.

    The raw line stays in the hunk body; the content is made printable.
    """
    content = raw_line[1:]
    if content.endswith("\r"):
        content = content[:-1]
    return printable(content)


@dataclass
class _PartialHunk:
    """A hunk whose lines are still being accumulated."""

    header: str
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    old_no: int
    new_no: int
    lines: List[DiffLine] = field(default_factory=list)
    body: List[str] = field(default_factory=list)

    def finish(self, hunk_index: int) -> DiffHunk:
        return DiffHunk(
            header=self.header,
            old_start=self.old_start,
            old_lines=self.old_lines,
            new_start=self.new_start,
            new_lines=self.new_lines,
            lines=tuple(self.lines),
            hunk_index=hunk_index,
            body=tuple(self.body),
        )


@dataclass
class _FileState:
    """Per-file accumulator; ``active`` is None while no hunk is open."""

    path: str
    old_path: Optional[str]
    is_binary: bool = False
    is_new: bool = False
    is_deleted: bool = False
    hunks: List[DiffHunk] = field(default_factory=list)
    active: Optional[_PartialHunk] = None

    def open_hunk(self, header: str, match: re.Match[str]) -> None:
        self.close_hunk()
        old_start = int(match.group(1))
        old_lines = int(match.group(2)) if match.group(2) is not None else 1
        new_start = int(match.group(3))
        new_lines = int(match.group(4)) if match.group(4) is not None else 1
        self.active = _PartialHunk(
            header=header,
            old_start=old_start,
            old_lines=old_lines,
            new_start=new_start,
            new_lines=new_lines,
            old_no=old_start,
            new_no=new_start,
        )

    def close_hunk(self) -> None:
        if self.active is not None:
            self.hunks.append(self.active.finish(len(self.hunks)))
            self.active = None

    def finish(self) -> FileDiff:
        self.close_hunk()
        if self.is_binary:
            self.hunks.clear()
        old_path = self.old_path if self.old_path != self.path and not self.is_new else None
        return FileDiff(
            path=self.path,
            old_path=old_path,
            hunks=tuple(self.hunks),
            is_binary=self.is_binary,
            is_new=self.is_new,
            is_deleted=self.is_deleted,
        )


class DiffParser:
    """Parse unified diff text into FileDiff objects.

    Usage::

        for file_diff in DiffParser(diff_text).parse():
            for hunk in file_diff.hunks:
                ...
    """

    def __init__(self, diff_text: str) -> None:
        lines = diff_text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        self._lines = lines

    def parse(self) -> Iterator[FileDiff]:
        """Yield one FileDiff per ``diff --git`` section, in order."""
        state: Optional[_FileState] = None
        in_header = False

        for raw_line in self._lines:
            # --- diff --git header → new file context ---
            m = _DIFF_HEADER_RE.match(raw_line)
            if m:
                if state is not None:
                    yield state.finish()
                old = _strip_prefix(m.group(1))
                new = _strip_prefix(m.group(2))
                state = _FileState(path=new or old or "", old_path=old)
                in_header = True
                continue

            if state is None:
                continue

            # --- Hunk header ---
            hm = HUNK_HEADER_RE.match(raw_line)
            if hm:
                in_header = False
                state.open_hunk(raw_line.rstrip(), hm)
                continue

            if in_header:
                self._parse_sub_header(state, raw_line)
                continue

            hunk = state.active
            if hunk is None:
                continue

            if raw_line.startswith("+"):
                hunk.lines.append(
                    DiffLine(DiffLineKind.ADDITION, None, hunk.new_no, _content(raw_line))
                )
                hunk.new_no += 1
            elif raw_line.startswith("-"):
                hunk.lines.append(
                    DiffLine(DiffLineKind.DELETION, hunk.old_no, None, _content(raw_line))
                )
                hunk.old_no += 1
            elif raw_line.startswith(" "):
                hunk.lines.append(
                    DiffLine(DiffLineKind.CONTEXT, hunk.old_no, hunk.new_no, _content(raw_line))
                )
                hunk.old_no += 1
                hunk.new_no += 1
            elif raw_line.startswith("\\"):
                # "\ No newline at end of file" belongs to the patch, not the content
                pass
            else:
                continue
            hunk.body.append(raw_line)

        if state is not None:
            yield state.finish()

    def parse_file(self, path: str) -> FileDiff:
        """Return the FileDiff for *path*, or an empty one if it is absent."""
        files = list(self.parse())
        for file_diff in files:
            if file_diff.path == path:
                return file_diff
        for file_diff in files:
            if file_diff.old_path == path:
                return file_diff
        return FileDiff(path=path)

    @staticmethod
    def _parse_sub_header(state: _FileState, line: str) -> None:
        """Handle extended header lines between ``diff --git`` and the first hunk."""
        if _BINARY_RE.match(line) or line == "GIT binary patch":
            state.is_binary = True
        elif _NEW_FILE_RE.match(line):
            state.is_new = True
        elif _DELETED_FILE_RE.match(line):
            state.is_deleted = True
        elif (rm := _RENAME_FROM_RE.match(line)):
            state.old_path = unquote_path(rm.group(1))
        elif (rt := _RENAME_TO_RE.match(line)):
            state.path = unquote_path(rt.group(1))
        elif (fo := _FILE_HEADER_OLD.match(line)):
            old = _strip_prefix(fo.group(1))
            if old is None:
                state.is_new = True
            else:
                state.old_path = old
        elif (fn := _FILE_HEADER_NEW.match(line)):
            new = _strip_prefix(fn.group(1))
            if new is None:
                state.is_deleted = True
            else:
                state.path = new
