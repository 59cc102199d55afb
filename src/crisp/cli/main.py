"""Main CLI interface for crisp."""

import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from crisp.core.diff import render_unified_diff
from crisp.core.errors import CrispError, NotFoundError
from crisp.core.hashing import SUPPORTED_ALGORITHMS
from crisp.core.repository import Repository, find_project_root
from crisp.models.diff import FileStatus

console = Console()


def _configure_logging(verbose: bool) -> None:
    """Route the crisp loggers through rich."""
    logger = logging.getLogger("crisp")
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(
            RichHandler(console=console, show_path=False, show_time=verbose)
        )
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def get_repo_or_exit(ctx: click.Context) -> Repository:
    """Get the Repository for this invocation or exit with an error message."""
    repo_path = ctx.obj.get("repo_path")
    project_root = Path(repo_path) if repo_path else find_project_root()
    if project_root is None:
        console.print("[red]Not a crisp repository. Run 'crisp init' first.[/red]")
        raise click.Abort()

    repo = Repository(project_root)
    if not repo.exists():
        console.print(
            f"[red]crisp not initialized in {escape(str(project_root))}. "
            "Run 'crisp init' first.[/red]"
        )
        raise click.Abort()
    return repo


def _print_error(e: Exception) -> None:
    console.print(f"[red]Error: {escape(str(e))}[/red]")


@click.group()
@click.version_option()
@click.option(
    "--repo-path",
    envvar="CRISP_REPO",
    type=click.Path(file_okay=False),
    help="Repository root (defaults to the nearest directory containing .crisp)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def main(ctx: click.Context, repo_path: Optional[str], verbose: bool):
    """crisp - a minimal content-addressed version control store."""
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["repo_path"] = repo_path


@main.command()
@click.option(
    "--hash-algorithm",
    type=click.Choice(SUPPORTED_ALGORITHMS),
    default="sha1",
    show_default=True,
    help="Digest used to address objects",
)
@click.pass_context
def init(ctx: click.Context, hash_algorithm: str):
    """Initialize a crisp repository."""
    project_root = Path(ctx.obj.get("repo_path") or ".").resolve()
    project_root.mkdir(parents=True, exist_ok=True)
    repo = Repository(project_root)

    try:
        if repo.init(hash_algorithm=hash_algorithm):
            console.print(f"[green]Initialized crisp in {repo.crisp_dir}[/green]")
        else:
            console.print(f"[yellow]Already initialised in {repo.crisp_dir}[/yellow]")
    except (CrispError, OSError) as e:
        _print_error(e)
        raise click.Abort() from e


@main.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@click.pass_context
def add(ctx: click.Context, paths):
    """Stage file contents for the next commit."""
    repo = get_repo_or_exit(ctx)
    for path in paths:
        try:
            entry = repo.add(path)
        except (CrispError, OSError) as e:
            _print_error(e)
            raise click.Abort() from e
        console.print(entry.digest, highlight=False)
        console.print(f"Added {escape(entry.path)}")


@main.command()
@click.option("-m", "--message", required=True, help="Commit message")
@click.pass_context
def commit(ctx: click.Context, message: str):
    """Record the staged files as a new commit."""
    repo = get_repo_or_exit(ctx)
    try:
        digest = repo.commit(message)
    except (CrispError, OSError) as e:
        _print_error(e)
        raise click.Abort() from e
    console.print(f"[green]commit success: {digest}[/green]")


@main.command()
@click.option(
    "--limit",
    default=None,
    type=click.IntRange(min=1),
    help="Number of commits to show",
)
@click.option("--oneline", is_flag=True, help="Show compact one-line format")
@click.pass_context
def log(ctx: click.Context, limit: Optional[int], oneline: bool):
    """Show commit history, newest first."""
    repo = get_repo_or_exit(ctx)
    try:
        commits = repo.log(limit)
    except CrispError as e:
        _print_error(e)
        raise click.Abort() from e

    if not commits:
        console.print("[yellow]No commits yet[/yellow]")
        return

    for record in commits:
        if oneline:
            first_line = record.message.splitlines()[0] if record.message else ""
            console.print(f"[yellow]{record.id[:8]}[/yellow] {first_line}")
            continue
        console.print("-" * 51)
        console.print(f"[yellow]commit: {record.id}[/yellow]")
        console.print(f"Date: {record.timestamp.isoformat()}")
        console.print()
        console.print(f"    {record.message}", markup=False)
        console.print()


@main.command()
@click.argument("commit_ref", default="HEAD")
@click.pass_context
def show(ctx: click.Context, commit_ref: str):
    """Show each file of a commit and how it differs from the parent."""
    repo = get_repo_or_exit(ctx)
    try:
        digest = repo.resolve(commit_ref)
        record = repo.read_commit(digest)
        diffs = repo.show_diff(digest)
    except NotFoundError as e:
        console.print(f"[red]Commit not found: {escape(commit_ref)}[/red]")
        raise click.Abort() from e
    except CrispError as e:
        _print_error(e)
        raise click.Abort() from e

    console.print(f"[yellow]commit: {digest}[/yellow]")
    if record.parent:
        console.print(f"Parent: {record.parent}")
    console.print(f"Date: {record.timestamp.isoformat()}")
    console.print(f"\n    {record.message}\n", markup=False)

    if not diffs:
        console.print("[dim]No files in this commit[/dim]")
        return

    console.print("[bold]Changes in this commit:[/bold]")
    for file_diff in diffs:
        console.print(
            f"\n[bold]File:[/bold] {escape(file_diff.path)} "
            f"[dim]({file_diff.status.value})[/dim]"
        )
        console.print(file_diff.content.decode("utf-8", errors="replace"), markup=False)

        if record.parent is None:
            continue
        if file_diff.status == FileStatus.ADDED:
            console.print("[dim]New file; not present in the parent commit[/dim]")
        elif file_diff.status == FileStatus.UNCHANGED:
            console.print("[dim]Unchanged from the parent commit[/dim]")
        else:
            diff_text = render_unified_diff(file_diff)
            syntax = Syntax(diff_text, "diff", theme="monokai", word_wrap=True)
            console.print(
                Panel(syntax, title="vs parent", border_style="blue", padding=(0, 1))
            )


@main.command()
@click.argument("commit_ref")
@click.argument("path")
@click.pass_context
def cat(ctx: click.Context, commit_ref: str, path: str):
    """Print a file's content as recorded by a commit."""
    repo = get_repo_or_exit(ctx)
    try:
        content = repo.file_content_at(repo.resolve(commit_ref), path)
    except CrispError as e:
        _print_error(e)
        raise click.Abort() from e

    if content is None:
        console.print(
            f"[red]{escape(path)} is not tracked in {escape(commit_ref)}[/red]"
        )
        raise click.Abort()
    click.echo(content, nl=False)


@main.command()
@click.pass_context
def status(ctx: click.Context):
    """Show HEAD and the files staged for the next commit."""
    repo = get_repo_or_exit(ctx)
    head = repo.head()
    console.print(f"[bold]Repository:[/bold] {repo.project_root}")
    console.print(f"[bold]HEAD:[/bold] {head or '(no commits yet)'}")

    entries = repo.status()
    if not entries:
        console.print("[yellow]Nothing staged[/yellow]")
        return

    table = Table(title="Staged files")
    table.add_column("Path", style="green")
    table.add_column("Digest", style="cyan", no_wrap=True)
    for entry in entries:
        table.add_row(escape(entry.path), entry.digest)
    console.print(table)


if __name__ == "__main__":
    main()
