"""gitglance CLI: Typer application over the read-only repository service."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Awaitable, Optional, Sequence, TypeVar

import typer
from rich.console import Console

from gitglance import __version__

app = typer.Typer(
    name="gitglance",
    help="Browse git history, refs and diffs from the command line.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

T = TypeVar("T")

RepoOption = typer.Option(None, "--repo", "-C", help="Repository path (default: current directory)")
FormatOption = typer.Option(None, "--format", "-f", help="Output format: terminal | json | yaml")
ConfigOption = typer.Option(None, "--config", "-c", help="Path to .gitglance.toml")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Verbose output")
DebugOption = typer.Option(False, "--debug", help="Log every git invocation")


def _run(coro: Awaitable[T]) -> T:
    """Drive a service coroutine, mapping git errors to exit code 2."""
    from gitglance.git.errors import GitError

    try:
        return asyncio.run(coro)
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _setup(
    repo: Optional[Path],
    config: Optional[str],
    format: Optional[str],
    verbose: bool,
    debug: bool,
):
    """Resolve repo root, load config and build the service. Exit 2 on failure."""
    from gitglance.config.loader import ConfigError, load_config
    from gitglance.config.schema import OUTPUT_FORMATS
    from gitglance.git.service import RepositoryService
    from gitglance.log import configure_logging

    configure_logging(verbose=verbose, debug=debug)

    if format is not None and format not in OUTPUT_FORMATS:
        console.print(f"[bold red]Invalid format:[/bold red] {format}")
        raise typer.Exit(code=2)

    start = repo or Path.cwd()
    locator = RepositoryService()
    if not _run(locator.is_git_repository(start)):
        console.print(f"[bold red]Error:[/bold red] not a git repository: {start}")
        raise typer.Exit(code=2)
    repo_root = _run(locator.repository_root(start))

    try:
        cfg = load_config(repo_root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if format:
        cfg.output.format = format  # type: ignore[assignment]

    service = RepositoryService(
        git_path=cfg.git.executable,
        context_lines=cfg.diff.context_lines,
    )
    if verbose or debug:
        console.print(f"[dim]Repo root: {repo_root}[/dim]")
        console.print(f"[dim]Git: {cfg.git.executable}[/dim]")
    return repo_root, cfg, service


def _emit(kind: str, items: Sequence, fmt: str) -> bool:
    """Print JSON / YAML documents. Returns False for terminal output."""
    from gitglance.output import json_report, yaml_report

    if fmt == "json":
        print(json_report.render(kind, items))
        return True
    if fmt == "yaml":
        print(yaml_report.render(kind, items), end="")
        return True
    return False


# ── log ───────────────────────────────────────────────────────────────────────


@app.command()
def log(
    path: Optional[str] = typer.Argument(None, help="Only commits touching this file (follows renames)"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1, help="Commits per page"),
    offset: int = typer.Option(0, "--offset", "--skip", min=0, help="Commits to skip"),
    repo: Optional[Path] = RepoOption,
    format: Optional[str] = FormatOption,
    config: Optional[str] = ConfigOption,
    verbose: bool = VerboseOption,
    debug: bool = DebugOption,
) -> None:
    """Show one page of commit history, newest first."""
    from gitglance.output import terminal

    repo_root, cfg, service = _setup(repo, config, format, verbose, debug)
    page = limit or cfg.log.page_size

    if path:
        commits = _run(service.commits_for_file(repo_root, path, page, offset))
    else:
        commits = _run(service.commits(repo_root, page, offset))

    if not _emit("commits", commits, cfg.output.format):
        terminal.render_commits(commits)


# ── show ──────────────────────────────────────────────────────────────────────


@app.command()
def show(
    sha: str = typer.Argument("HEAD", help="Commit to show"),
    repo: Optional[Path] = RepoOption,
    format: Optional[str] = FormatOption,
    config: Optional[str] = ConfigOption,
    verbose: bool = VerboseOption,
    debug: bool = DebugOption,
) -> None:
    """Show a commit with its changed files and line stats."""
    from gitglance.output import terminal

    repo_root, cfg, service = _setup(repo, config, format, verbose, debug)

    async def _load():
        commit = await service.commit(repo_root, sha)
        if commit is None:
            return None, []
        return commit, await service.changed_files(repo_root, commit.sha)

    commit, files = _run(_load())
    if commit is None:
        console.print(f"[yellow]⚠[/yellow]  Commit not found: {sha}")
        raise typer.Exit(code=1)

    commit = commit.with_changed_files(files)
    if not _emit("commit", [commit], cfg.output.format):
        terminal.render_commit(commit, files, show_summary=cfg.output.show_summary)


# ── diff ──────────────────────────────────────────────────────────────────────


@app.command()
def diff(
    sha: str = typer.Argument("HEAD", help="Commit to diff against its parent"),
    parent: int = typer.Option(0, "--parent", "-p", min=0, help="Parent index for merge commits"),
    file: Optional[str] = typer.Option(None, "--file", help="Limit output to one file"),
    repo: Optional[Path] = RepoOption,
    format: Optional[str] = FormatOption,
    config: Optional[str] = ConfigOption,
    verbose: bool = VerboseOption,
    debug: bool = DebugOption,
) -> None:
    """Show the diff a commit introduced (root commits diff against the empty tree)."""
    from gitglance.output import terminal

    repo_root, cfg, service = _setup(repo, config, format, verbose, debug)

    if file:
        result = _run(service.file_diff(repo_root, file, sha, parent))
        if result is None:
            console.print(f"[yellow]⚠[/yellow]  {file} is not changed in {sha}")
            raise typer.Exit(code=1)
        results = [result]
    else:
        results = _run(service.diff(repo_root, sha, parent))

    if not _emit("diff", results, cfg.output.format):
        terminal.render_diff(results)


# ── branches / tags ──────────────────────────────────────────────────────────


@app.command()
def branches(
    repo: Optional[Path] = RepoOption,
    format: Optional[str] = FormatOption,
    config: Optional[str] = ConfigOption,
    verbose: bool = VerboseOption,
    debug: bool = DebugOption,
) -> None:
    """List local and remote-tracking branches."""
    from gitglance.output import terminal

    repo_root, cfg, service = _setup(repo, config, format, verbose, debug)
    result = _run(service.branches(repo_root))
    if not _emit("branches", result, cfg.output.format):
        terminal.render_branches(result)


@app.command()
def tags(
    repo: Optional[Path] = RepoOption,
    format: Optional[str] = FormatOption,
    config: Optional[str] = ConfigOption,
    verbose: bool = VerboseOption,
    debug: bool = DebugOption,
) -> None:
    """List tags (annotated tags show their subject)."""
    from gitglance.output import terminal

    repo_root, cfg, service = _setup(repo, config, format, verbose, debug)
    result = _run(service.tags(repo_root))
    if not _emit("tags", result, cfg.output.format):
        terminal.render_tags(result)


# ── status / submodules ──────────────────────────────────────────────────────


@app.command()
def status(
    repo: Optional[Path] = RepoOption,
    format: Optional[str] = FormatOption,
    config: Optional[str] = ConfigOption,
    verbose: bool = VerboseOption,
    debug: bool = DebugOption,
) -> None:
    """Show working-tree changes."""
    from gitglance.output import terminal

    repo_root, cfg, service = _setup(repo, config, format, verbose, debug)
    result = _run(service.status(repo_root))
    if not _emit("status", result, cfg.output.format):
        terminal.render_changed_files(result)


@app.command()
def submodules(
    repo: Optional[Path] = RepoOption,
    format: Optional[str] = FormatOption,
    config: Optional[str] = ConfigOption,
    verbose: bool = VerboseOption,
    debug: bool = DebugOption,
) -> None:
    """List submodules and their checked-out commits."""
    from gitglance.output import terminal

    repo_root, cfg, service = _setup(repo, config, format, verbose, debug)
    result = _run(service.submodules(repo_root))
    if not _emit("submodules", result, cfg.output.format):
        terminal.render_submodules(result)


# ── cat ──────────────────────────────────────────────────────────────────────


@app.command()
def cat(
    path: str = typer.Argument(..., help="File path relative to the repository root"),
    sha: str = typer.Option("HEAD", "--rev", "-r", help="Revision to read from"),
    repo: Optional[Path] = RepoOption,
    config: Optional[str] = ConfigOption,
    verbose: bool = VerboseOption,
    debug: bool = DebugOption,
) -> None:
    """Print a file as it was at a given revision."""
    from gitglance.git.errors import GitError, GitFileNotFoundError, InvalidCommitError

    repo_root, _, service = _setup(repo, config, None, verbose, debug)
    try:
        content = asyncio.run(service.file_content(repo_root, path, sha))
    except (GitFileNotFoundError, InvalidCommitError) as exc:
        console.print(f"[yellow]⚠[/yellow]  {exc}")
        raise typer.Exit(code=1) from exc
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    typer.echo(content, nl=False)


# ── config ───────────────────────────────────────────────────────────────────


@app.command("config")
def show_config(
    template: bool = typer.Option(False, "--template", help="Print a starter .gitglance.toml"),
    repo: Optional[Path] = RepoOption,
    config: Optional[str] = ConfigOption,
) -> None:
    """Print the effective configuration (or a starter template)."""
    import dataclasses

    import yaml

    from gitglance.config.defaults import DEFAULT_TOML
    from gitglance.config.loader import ConfigError, load_config

    if template:
        typer.echo(DEFAULT_TOML, nl=False)
        raise typer.Exit(code=0)

    try:
        cfg = load_config(repo or Path.cwd(), config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    typer.echo(yaml.safe_dump(dataclasses.asdict(cfg), sort_keys=False), nl=False)


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"gitglance {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """gitglance: read-only git history, refs and diffs."""
