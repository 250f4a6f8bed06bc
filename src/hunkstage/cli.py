"""hunkstage CLI — Typer application over the status, diff, and staging engine."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from hunkstage import __version__

app = typer.Typer(
    name="hunkstage",
    help="Inspect, stage, and discard git changes one hunk at a time.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)
out = Console()


@dataclass
class _Options:
    config: Optional[str] = None
    format: Optional[str] = None
    verbose: bool = False
    debug: bool = False


def _fail(label: str, exc: Exception, code: int) -> typer.Exit:
    console.print(f"[bold red]{label}:[/bold red] {escape(str(exc))}", highlight=False)
    return typer.Exit(code=code)


def _open(ctx: typer.Context):
    """Discover the repository and load its config; exit 2 on failure.

    Discovery itself already honours the git executable from the environment,
    ``--config``, or a config file in the current directory.
    """
    from hunkstage.config.loader import ConfigError, load_config
    from hunkstage.git.adapter import configured_repository, open_repository
    from hunkstage.git.errors import RepositoryError
    from hunkstage.log import configure_logging

    opts: _Options = ctx.obj or _Options()
    flag_level = "DEBUG" if opts.debug else "INFO" if opts.verbose else None
    configure_logging(flag_level or "WARNING")

    try:
        cwd = Path.cwd()
        found = open_repository(cwd, load_config(cwd, opts.config))
        cfg = load_config(found.root, opts.config)
        repo = configured_repository(found.root, cfg)
    except RepositoryError as exc:
        raise _fail("Error", exc, 2) from exc
    except ConfigError as exc:
        raise _fail("Config error", exc, 2) from exc

    if opts.format:
        if opts.format not in ("terminal", "json"):
            console.print(f"[bold red]Invalid format:[/bold red] {opts.format}")
            raise typer.Exit(code=2)
        cfg.output.format = opts.format  # type: ignore[assignment]

    configure_logging(flag_level or cfg.logging.level)
    return repo, cfg


def _run(action, label: str):
    """Run *action*, mapping git failures to exit code 1."""
    from hunkstage.git.errors import GitError, RepositoryError

    try:
        return action()
    except RepositoryError as exc:
        raise _fail("Error", exc, 2) from exc
    except GitError as exc:
        raise _fail(label, exc, 1) from exc


# ── status ────────────────────────────────────────────────────────────────────


@app.command()
def status(ctx: typer.Context) -> None:
    """Show staged and unstaged changes with line counts."""
    from hunkstage.git.status import current_branch, status_entries, summarize
    from hunkstage.output import json_report, terminal

    repo, cfg = _open(ctx)
    entries = _run(lambda: status_entries(repo), "Unable to read repository state")
    summary = summarize(entries, current_branch(repo)) if cfg.output.show_summary else None

    if cfg.output.format == "json":
        print(json_report.render_status(entries, summary))
    else:
        terminal.render_status(entries, summary, console=out)


@app.command()
def summary(ctx: typer.Context) -> None:
    """Show the branch name and total added/deleted lines."""
    from hunkstage.git.status import summary as compute_summary
    from hunkstage.output import json_report, terminal

    repo, cfg = _open(ctx)
    result = _run(lambda: compute_summary(repo), "Unable to read repository state")

    if cfg.output.format == "json":
        print(json_report.render_summary(result))
    else:
        terminal.render_summary(result, console=out)


# ── diff ──────────────────────────────────────────────────────────────────────


@app.command()
def diff(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Repository-relative path"),
    staged: bool = typer.Option(False, "--staged", "--cached", help="Diff HEAD against the index"),
    untracked: bool = typer.Option(False, "--untracked", help="Show an untracked file as all additions"),
) -> None:
    """Show the hunks of one file."""
    from hunkstage.git.diff import file_diff
    from hunkstage.git.models import DiffContext
    from hunkstage.output import json_report, terminal

    if staged and untracked:
        console.print("[bold red]Error:[/bold red] --staged and --untracked are exclusive")
        raise typer.Exit(code=2)

    repo, cfg = _open(ctx)
    context = DiffContext.STAGED if staged else DiffContext.UNTRACKED if untracked else DiffContext.WORKDIR
    result = _run(lambda: file_diff(repo, path, context), "Diff error")

    if cfg.output.format == "json":
        print(json_report.render_diff(result))
    else:
        terminal.render_diff(result, console=out)


@app.command()
def show(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Repository-relative path"),
    head: bool = typer.Option(False, "--head", help="Show the committed version instead of the working tree"),
) -> None:
    """Print the contents of a file from HEAD or the working tree."""
    from hunkstage.git.diff import read_head_content, read_workdir_content

    repo, _ = _open(ctx)
    content = read_head_content(repo, path) if head else read_workdir_content(repo, path)
    if content is None:
        where = "HEAD" if head else "the working tree"
        console.print(f"[bold red]Error:[/bold red] no text content for {path} in {where}")
        raise typer.Exit(code=1)
    typer.echo(content, nl=False)


# ── stage / unstage ───────────────────────────────────────────────────────────


@app.command()
def stage(
    ctx: typer.Context,
    paths: List[str] = typer.Argument(..., help="Paths to stage"),
) -> None:
    """Stage whole files (removals are staged for deleted paths)."""
    from hunkstage.git.staging import stage_file

    repo, _ = _open(ctx)
    for path in paths:
        _run(lambda: stage_file(repo, path), "Stage error")
        console.print(f"[green]✓[/green] staged {path}", highlight=False)


@app.command()
def unstage(
    ctx: typer.Context,
    paths: List[str] = typer.Argument(..., help="Paths to unstage"),
) -> None:
    """Reset files in the index back to HEAD."""
    from hunkstage.git.staging import unstage_file

    repo, _ = _open(ctx)
    for path in paths:
        _run(lambda: unstage_file(repo, path), "Unstage error")
        console.print(f"[green]✓[/green] unstaged {path}", highlight=False)


@app.command("stage-hunk")
def stage_hunk_cmd(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Repository-relative path"),
    index: int = typer.Argument(..., min=0, help="0-based hunk index from 'hunkstage diff'"),
) -> None:
    """Stage a single hunk of a file's unstaged changes."""
    from hunkstage.git.staging import stage_hunk

    repo, _ = _open(ctx)
    _run(lambda: stage_hunk(repo, path, index), "Stage error")
    console.print(f"[green]✓[/green] staged hunk {index} of {path}", highlight=False)


# ── discard ───────────────────────────────────────────────────────────────────


@app.command("discard-hunk")
def discard_hunk_cmd(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Repository-relative path"),
    index: int = typer.Argument(..., min=0, help="0-based hunk index from 'hunkstage diff'"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Throw away a single hunk of unstaged changes in the working tree."""
    from hunkstage.git.staging import discard_hunk

    repo, _ = _open(ctx)
    if not yes:
        typer.confirm(f"Discard hunk {index} of {path}?", abort=True)
    _run(lambda: discard_hunk(repo, path, index), "Discard error")
    console.print(f"[green]✓[/green] discarded hunk {index} of {path}", highlight=False)


@app.command()
def discard(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Repository-relative path"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Restore a file to its HEAD version, dropping staged and unstaged changes."""
    from hunkstage.git.staging import discard_file

    repo, _ = _open(ctx)
    if not yes:
        typer.confirm(f"Discard all changes to {path}?", abort=True)
    _run(lambda: discard_file(repo, path), "Checkout error")
    console.print(f"[green]✓[/green] restored {path} from HEAD", highlight=False)


# ── commit ────────────────────────────────────────────────────────────────────


@app.command("commit")
def commit_cmd(
    ctx: typer.Context,
    message: str = typer.Option(..., "--message", "-m", help="Commit message"),
) -> None:
    """Commit the index on top of HEAD."""
    from hunkstage.git.staging import commit

    repo, _ = _open(ctx)
    commit_id = _run(lambda: commit(repo, message), "Commit error")
    console.print(f"[green]✓[/green] committed {commit_id[:12]}", highlight=False)
    print(commit_id)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
) -> None:
    """Generate a starter .hunkstage.toml in the repo root."""
    from hunkstage.config.defaults import CONFIG_FILENAME, DEFAULT_TOML
    from hunkstage.git.adapter import open_repository
    from hunkstage.git.errors import RepositoryError

    try:
        repo_root = open_repository(Path.cwd()).root
    except RepositoryError as exc:
        raise _fail("Error", exc, 2) from exc
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists() and not force:
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"hunkstage {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .hunkstage.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output, including git commands"),
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """hunkstage — inspect, stage, and discard git changes one hunk at a time."""
    ctx.obj = _Options(config=config, format=format, verbose=verbose, debug=debug)
