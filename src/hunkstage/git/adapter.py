"""Git subprocess wrapper — repository handle, raw diffs, index primitives."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from hunkstage.config.schema import HunkstageConfig
from hunkstage.git.errors import GitError, RepositoryError

logger = logging.getLogger(__name__)

DEV_NULL = "/dev/null"

# Keep paths unquoted, blank context lines prefixed, and diff prefixes
# stable regardless of user config.
_GLOBAL_OPTS = ("-c", "core.quotepath=off", "-c", "diff.suppressBlankEmpty=false")
_DIFF_OPTS = ("--no-color", "--no-ext-diff", "--src-prefix=a/", "--dst-prefix=b/")


@dataclass(frozen=True)
class Repository:
    """Handle on a working tree; borrowed by every operation for one call."""

    root: Path
    executable: str = "git"
    timeout: int = 30
    context_lines: int = 3
    detect_renames: bool = True

    def run(
        self,
        args: Sequence[str],
        *,
        input_text: Optional[str] = None,
        ok_codes: Tuple[int, ...] = (0,),
    ) -> str:
        """Run git inside the working tree and return decoded stdout.

        Bytes that are not UTF-8 survive as lone surrogates, so text read
        here can be fed back through *input_text* unchanged.
        """
        raw = self.run_bytes(
            args,
            input_bytes=(
                input_text.encode("utf-8", errors="surrogateescape")
                if input_text is not None
                else None
            ),
            ok_codes=ok_codes,
        )
        return raw.decode("utf-8", errors="surrogateescape")

    def run_bytes(
        self,
        args: Sequence[str],
        *,
        input_bytes: Optional[bytes] = None,
        ok_codes: Tuple[int, ...] = (0,),
    ) -> bytes:
        return _run_git(
            [*_GLOBAL_OPTS, *args],
            cwd=self.root,
            executable=self.executable,
            timeout=self.timeout,
            input_bytes=input_bytes,
            ok_codes=ok_codes,
        )

    def diff_args(self) -> list[str]:
        """Common options for every textual diff."""
        args = [*_DIFF_OPTS, f"--unified={self.context_lines}"]
        args.append("--find-renames" if self.detect_renames else "--no-renames")
        return args

    def workdir_path(self, path: str) -> Path:
        return self.root / path


def _run_git(
    args: Sequence[str],
    cwd: Path,
    *,
    executable: str = "git",
    timeout: int = 30,
    input_bytes: Optional[bytes] = None,
    ok_codes: Tuple[int, ...] = (0,),
) -> bytes:
    """Run a git command and return raw stdout. Raises GitError on failure."""
    cmd = [executable, *args]
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            input=input_bytes,
            capture_output=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        raise GitError(f"{executable} is not installed or not on PATH")
    except NotADirectoryError:
        raise GitError(f"not a directory: {cwd}")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode not in ok_codes:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise GitError(f"git {' '.join(args)} failed ({result.returncode}): {stderr}")
    return result.stdout


def configured_repository(root: Path, config: HunkstageConfig) -> Repository:
    """Build a handle on the known working tree *root* with *config* applied."""
    return Repository(
        root=root,
        executable=config.git.executable,
        timeout=config.git.timeout,
        context_lines=config.diff.context_lines,
        detect_renames=config.diff.detect_renames,
    )


def open_repository(
    path: Optional[Path] = None,
    config: Optional[HunkstageConfig] = None,
) -> Repository:
    """Discover the repository containing *path* (default: cwd)."""
    start = Path(path) if path is not None else Path.cwd()
    cfg = config or HunkstageConfig()
    if not start.is_dir():
        raise RepositoryError(f"Not a directory: {start}")
    try:
        out = _run_git(
            ["rev-parse", "--show-toplevel"],
            cwd=start,
            executable=cfg.git.executable,
            timeout=cfg.git.timeout,
        )
    except GitError as exc:
        raise RepositoryError(f"Not a git working tree: {start} ({exc})") from exc

    root = Path(out.decode("utf-8", errors="surrogateescape").strip())
    return configured_repository(root, cfg)


def head_commit(repo: Repository) -> Optional[str]:
    """Return the commit id HEAD points at, or None on an unborn branch."""
    out = repo.run(["rev-parse", "--verify", "--quiet", "HEAD^{commit}"], ok_codes=(0, 1))
    return out.strip() or None


def is_tracked(repo: Repository, path: str) -> bool:
    """Return True if *path* has an index entry."""
    out = repo.run(["ls-files", "-z", "--", path])
    return bool(out.strip("\0"))


def get_workdir_diff(repo: Repository, path: str) -> str:
    """Return the unified diff of *path* between the index and the working tree."""
    return repo.run(["diff", *repo.diff_args(), "--", path])


def staged_rename_source(repo: Repository, path: str) -> Optional[str]:
    """Return the path *path* was renamed from in the index, if any.

    Rename pairing needs both sides in view, so this scans the whole staged
    diff rather than limiting it to *path*.
    """
    if not repo.detect_renames:
        return None
    out = repo.run(["diff", "--cached", "--name-status", "-z", "--find-renames", "--no-ext-diff"])
    fields = out.split("\0")
    idx = 0
    while idx < len(fields):
        code = fields[idx]
        if not code:
            break
        if code[0] in "RC":
            source, target = fields[idx + 1], fields[idx + 2]
            if code[0] == "R" and target == path:
                return source
            idx += 3
        else:
            idx += 2
    return None


def _staged_pathspec(repo: Repository, path: str) -> List[str]:
    source = staged_rename_source(repo, path)
    return [source, path] if source is not None else [path]


def get_staged_diff(repo: Repository, path: str) -> str:
    """Return the unified diff of *path* between HEAD and the index (--cached).

    A staged rename is diffed together with its source path so the two sides
    pair up.
    """
    return repo.run(["diff", "--cached", *repo.diff_args(), "--", *_staged_pathspec(repo, path)])


def get_untracked_diff(repo: Repository, path: str) -> str:
    """Return an all-additions diff of an untracked *path* against nothing."""
    # --no-index exits 1 when the two sides differ
    return repo.run(
        ["diff", "--no-index", *repo.diff_args(), "--", DEV_NULL, path],
        ok_codes=(0, 1),
    )


def get_numstat(repo: Repository, path: str, *, staged: bool, untracked: bool = False) -> Tuple[int, int]:
    """Return (insertions, deletions) for *path*. Binary rows count as zero."""
    if untracked:
        output = repo.run(
            ["diff", "--no-index", "--numstat", "--no-color", "--", DEV_NULL, path],
            ok_codes=(0, 1),
        )
    else:
        args = ["diff", "--numstat", "--no-color", "--no-ext-diff"]
        args.append("--find-renames" if repo.detect_renames else "--no-renames")
        pathspec = [path]
        if staged:
            args.insert(1, "--cached")
            pathspec = _staged_pathspec(repo, path)
        output = repo.run([*args, "--", *pathspec])

    insertions = deletions = 0
    for line in output.splitlines():
        # Binary files show as: -\t-\tfilename
        parts = line.split("\t", 2)
        if len(parts) < 3 or not parts[0].isdigit() or not parts[1].isdigit():
            continue
        insertions += int(parts[0])
        deletions += int(parts[1])
    return insertions, deletions


def apply_patch(repo: Repository, patch: str, *, cached: bool) -> None:
    """Apply *patch* to the index (cached) or to the working tree."""
    args = ["apply", "--whitespace=nowarn"]
    if cached:
        args.append("--cached")
    if repo.context_lines == 0:
        args.append("--unidiff-zero")
    repo.run([*args, "-"], input_text=patch)


def get_status_records(repo: Repository) -> str:
    """Return NUL-separated porcelain status, untracked directories recursed."""
    return repo.run(["status", "--porcelain=v1", "-z", "--untracked-files=all"])
