"""Command line interface for mergesweep."""

import time
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from mergesweep.config import Mode, Remote, resolve_protection, resolve_target, scope_from_flags
from mergesweep.exceptions import ConfigError, GitError, NoCandidatesError
from mergesweep.git import DeletionResult, GitRepo
from mergesweep.log import setup_logging
from mergesweep.plan import FilterSpec, Plan, build_plan

app = typer.Typer(help="Delete branches that are already merged")
console = Console()

SAFETY_DELAY = 5

EXIT_ERROR = 1
EXIT_NOTHING_TO_DELETE = 3
EXIT_CANCELLED = 130


def fail(err: Exception, code: int = EXIT_ERROR) -> typer.Exit:
    """Print an error and build the matching exit."""
    console.print(f"[red]Error:[/red] {escape(str(err))}")
    return typer.Exit(code=code)


def get_repo(path: Path) -> GitRepo:
    """Get git repository instance."""
    try:
        return GitRepo(path)
    except GitError as err:
        raise fail(err) from err


def display_name(plan: Plan, branch: str) -> str:
    """Qualify a branch with its remote name when the plan targets a remote."""
    if isinstance(plan.scope, Remote):
        return f"{plan.scope.name}/{branch}"
    return branch


def show_plan(plan: Plan, target: str) -> None:
    """Print the branches a plan selects."""
    title = f"Merged into {target} ({plan.scope})"
    table = Table(
        title=title,
        min_width=len(title) + 4,
        show_header=True,
        header_style="bold",
        title_style="bold blue",
        show_edge=True,
    )
    table.add_column("Branch", style="cyan", no_wrap=True)
    for branch in plan.selected:
        table.add_row(escape(display_name(plan, branch)))

    console.print(table)
    skipped = ", ".join(plan.skipped) or "(none)"
    console.print(f"[dim]Protected: {escape(skipped)}[/dim]")


def show_results(plan: Plan, results: list[DeletionResult]) -> None:
    """Print the outcome of each deletion."""
    deleted = [result for result in results if result.deleted]
    title = f"Deleted {len(deleted)} of {len(results)} branch(es) 🧹"
    table = Table(
        title=title,
        min_width=len(title) + 4,
        show_header=True,
        header_style="bold",
        title_style="bold green" if len(deleted) == len(results) else "bold yellow",
        show_edge=True,
    )
    table.add_column("Branch", style="cyan", no_wrap=True)
    table.add_column("Result", justify="center")
    table.add_column("Details", style="dim")
    for result in results:
        outcome = "[green]deleted[/green]" if result.deleted else "[red]failed[/red]"
        table.add_row(escape(display_name(plan, result.branch)), outcome, escape(result.message))

    console.print()
    console.print(table)


@app.command()
def sweep(
    path: Annotated[Path, typer.Option(help="Path to git repository")] = Path("."),
    local: Annotated[bool, typer.Option("--local", "-l", help="Delete local branches")] = False,
    remote: Annotated[Optional[str], typer.Option("--remote", "-r", help="Delete branches on this remote")] = None,
    apply: Annotated[bool, typer.Option("--apply", help="Actually delete; the default is a dry run")] = False,
    skip: Annotated[
        Optional[str], typer.Option("--skip", "-s", help="Comma-separated branches to protect (replaces the configured list)")
    ] = None,
    match: Annotated[Optional[str], typer.Option("--match", "-m", help="Only delete branches matching this regex")] = None,
    ignore: Annotated[Optional[str], typer.Option("--ignore", "-i", help="Never delete branches matching this regex")] = None,
    into: Annotated[Optional[str], typer.Option("--into", help="Branch the others must be merged into")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
) -> None:
    """Delete local or remote branches already merged into a target branch."""
    setup_logging(verbose)

    try:
        scope = scope_from_flags(local, remote)
    except ConfigError as err:
        raise fail(err) from err

    repo = get_repo(path)
    mode = Mode.APPLY if apply else Mode.DRY_RUN

    try:
        protection = resolve_protection(skip, repo.config)
        target = resolve_target(into, repo.config)
        spec = FilterSpec(protection=protection, include=match, exclude=ignore)
        candidates = repo.list_merged(target, scope)
        plan = build_plan(candidates, spec, scope, mode)
    except NoCandidatesError as err:
        console.print(Panel(f"[green]{escape(str(err))} ✨[/green]", style="green", padding=(0, 2), expand=False))
        raise typer.Exit(code=EXIT_NOTHING_TO_DELETE) from err
    except (ConfigError, GitError) as err:
        raise fail(err) from err

    show_plan(plan, target)

    if plan.dry_run:
        console.print("\n[yellow]Dry run, nothing was deleted.[/yellow] Run again with [bold]--apply[/bold] to delete.")
        return

    console.print(f"\n[yellow]Deleting in {SAFETY_DELAY} seconds, press Ctrl+C to cancel[/yellow]")
    try:
        time.sleep(SAFETY_DELAY)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled[/yellow] 🛑")
        raise typer.Exit(code=EXIT_CANCELLED) from None

    results = [repo.delete_branch(plan.scope, branch) for branch in plan.selected]
    show_results(plan, results)
    if not all(result.deleted for result in results):
        raise typer.Exit(code=EXIT_ERROR)


if __name__ == "__main__":
    app()
