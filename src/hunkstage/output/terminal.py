"""Rich terminal reporter — status table, coloured hunks, summary line."""

from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from hunkstage.git.diff_parser import printable
from hunkstage.git.models import DiffLineKind, FileDiff, FileStatusKind, GitFileEntry, GitSummary

_STATUS_STYLE = {
    FileStatusKind.ADDED: "bold green",
    FileStatusKind.MODIFIED: "bold yellow",
    FileStatusKind.DELETED: "bold red",
    FileStatusKind.RENAMED: "bold cyan",
    FileStatusKind.UNTRACKED: "bold magenta",
}

_LINE_STYLE = {
    DiffLineKind.ADDITION: "green",
    DiffLineKind.DELETION: "red",
    DiffLineKind.CONTEXT: "",
}

_LINE_MARKER = {
    DiffLineKind.ADDITION: "+",
    DiffLineKind.DELETION: "-",
    DiffLineKind.CONTEXT: " ",
}


def _status_pill(status: FileStatusKind) -> Text:
    return Text(status.value.upper(), style=_STATUS_STYLE.get(status, ""))


def _counts(additions: int, deletions: int) -> Text:
    text = Text()
    text.append(f"+{additions}", style="green")
    text.append(" ")
    text.append(f"-{deletions}", style="red")
    return text


def render_status(
    entries: List[GitFileEntry],
    summary: Optional[GitSummary] = None,
    *,
    console: Optional[Console] = None,
) -> None:
    """Print staged and unstaged entries as two tables."""
    console = console or Console()

    if not entries:
        console.print("[bold green]Nothing to commit, working tree clean.[/bold green]")
    for staged, title in ((True, "Staged changes"), (False, "Unstaged changes")):
        rows = [e for e in entries if e.staged is staged]
        if not rows:
            continue
        table = Table(title=title, title_style="bold", border_style="dim")
        table.add_column("Status", justify="center", width=11)
        table.add_column("Path", style="magenta")
        table.add_column("Lines", justify="right")
        for entry in rows:
            table.add_row(
                _status_pill(entry.status),
                printable(entry.path),
                _counts(entry.additions, entry.deletions),
            )
        console.print(table)

    if summary is not None:
        render_summary(summary, console=console)


def render_summary(summary: GitSummary, *, console: Optional[Console] = None) -> None:
    console = console or Console()
    line = Text()
    line.append(f"On {summary.branch}", style="bold")
    line.append(f"  {summary.changed_files} changed  ")
    line.append_text(_counts(summary.additions, summary.deletions))
    console.print(line)


def render_diff(file_diff: FileDiff, *, console: Optional[Console] = None) -> None:
    """Print a file diff hunk by hunk with old/new line-number gutters."""
    console = console or Console()

    title = printable(file_diff.path)
    if file_diff.old_path:
        title = printable(f"{file_diff.old_path} → {file_diff.path}")
    console.print(Text(title, style="bold"))

    if file_diff.is_binary:
        console.print("[dim]Binary file — no line-level diff.[/dim]")
        return
    if not file_diff.hunks:
        console.print("[dim]No changes.[/dim]")
        return

    for hunk in file_diff.hunks:
        console.print(Text(f"[{hunk.hunk_index}] {printable(hunk.header)}", style="cyan"))
        for line in hunk.lines:
            old = str(line.old_lineno) if line.old_lineno is not None else ""
            new = str(line.new_lineno) if line.new_lineno is not None else ""
            text = Text(f"{old:>5} {new:>5} ", style="dim")
            text.append(
                f"{_LINE_MARKER[line.kind]}{line.content}",
                style=_LINE_STYLE[line.kind],
            )
            console.print(text, soft_wrap=True)
