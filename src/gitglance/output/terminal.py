"""Rich terminal renderer: tables for history and refs, coloured diffs."""

from __future__ import annotations

from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from gitglance.git.models import (
    Branch,
    ChangedFile,
    ChangeStatus,
    Commit,
    DiffLineType,
    DiffResult,
    Submodule,
    Tag,
)

_STATUS_STYLE = {
    ChangeStatus.ADDED: "green",
    ChangeStatus.MODIFIED: "yellow",
    ChangeStatus.DELETED: "red",
    ChangeStatus.RENAMED: "cyan",
    ChangeStatus.COPIED: "cyan",
    ChangeStatus.UNTRACKED: "magenta",
}

_LINE_STYLE = {
    DiffLineType.ADDITION: ("+", "green"),
    DiffLineType.DELETION: ("-", "red"),
    DiffLineType.CONTEXT: (" ", ""),
}


def _status_pill(status: ChangeStatus) -> Text:
    return Text(f"{status.symbol} {status.display_name}", style=_STATUS_STYLE[status])


def _table(title: str) -> Table:
    return Table(title=title, title_style="bold", border_style="dim", show_edge=False)


def render_commits(commits: Sequence[Commit], console: Optional[Console] = None) -> None:
    console = console or Console()
    if not commits:
        console.print("[dim]No commits.[/dim]")
        return

    table = _table("History")
    table.add_column("Commit", style="yellow", no_wrap=True)
    table.add_column("Date", style="green", no_wrap=True)
    table.add_column("Author", style="cyan")
    table.add_column("Summary")
    for c in commits:
        summary = Text(c.summary)
        if c.is_merge:
            summary = Text.assemble(("merge ", "dim"), summary)
        table.add_row(c.short_sha, c.date.strftime("%Y-%m-%d %H:%M"), c.author_name, summary)
    console.print(table)


def render_commit(
    commit: Commit,
    files: Sequence[ChangedFile],
    console: Optional[Console] = None,
    *,
    show_summary: bool = True,
) -> None:
    """Commit header, full message and the changed-file list."""
    console = console or Console()
    console.print(f"[bold yellow]commit {commit.sha}[/bold yellow]")
    if commit.is_merge:
        console.print(f"[dim]Merge:[/dim]  {' '.join(p[:7] for p in commit.parents)}")
    console.print(f"[dim]Author:[/dim] {commit.author_name} <{commit.author_email}>")
    console.print(f"[dim]Date:[/dim]   {commit.date.isoformat()}")
    console.print()
    for line in commit.full_message.splitlines():
        console.print(f"    {line}", markup=False, highlight=False)
    console.print()
    render_changed_files(files, console, title="Changed files")

    if show_summary and files:
        additions = sum(f.additions for f in files)
        deletions = sum(f.deletions for f in files)
        console.print(
            f"[dim]{len(files)} file(s) changed,[/dim] "
            f"[green]+{additions}[/green] [red]-{deletions}[/red]"
        )


def render_changed_files(
    files: Sequence[ChangedFile],
    console: Optional[Console] = None,
    *,
    title: str = "Status",
) -> None:
    console = console or Console()
    if not files:
        console.print("[dim]No changes.[/dim]")
        return

    table = _table(title)
    table.add_column("Status", no_wrap=True)
    table.add_column("Path", style="magenta")
    table.add_column("+", justify="right", style="green")
    table.add_column("-", justify="right", style="red")
    for f in files:
        path = f"{f.old_path} → {f.path}" if f.old_path else f.path
        table.add_row(_status_pill(f.status), path, str(f.additions), str(f.deletions))
    console.print(table)


def render_branches(branches: Sequence[Branch], console: Optional[Console] = None) -> None:
    console = console or Console()
    table = _table("Branches")
    table.add_column("", width=1)
    table.add_column("Branch", style="cyan")
    table.add_column("Commit", style="yellow", no_wrap=True)
    table.add_column("Upstream", style="dim")
    for b in branches:
        marker = Text("*", style="bold green") if b.is_head else Text("")
        name = Text(b.name, style="red" if b.is_remote else "")
        table.add_row(marker, name, b.commit_sha, b.upstream or "")
    console.print(table)


def render_tags(tags: Sequence[Tag], console: Optional[Console] = None) -> None:
    console = console or Console()
    table = _table("Tags")
    table.add_column("Tag", style="cyan")
    table.add_column("Commit", style="yellow", no_wrap=True)
    table.add_column("Message")
    for t in tags:
        table.add_row(t.name, t.commit_sha, t.message or Text("lightweight", style="dim"))
    console.print(table)


def render_submodules(modules: Sequence[Submodule], console: Optional[Console] = None) -> None:
    console = console or Console()
    if not modules:
        console.print("[dim]No submodules.[/dim]")
        return
    table = _table("Submodules")
    table.add_column("Name", style="cyan")
    table.add_column("Path", style="magenta")
    table.add_column("Commit", style="yellow", no_wrap=True)
    for m in modules:
        table.add_row(m.name, m.path, m.commit_sha)
    console.print(table)


def render_diff(results: Sequence[DiffResult], console: Optional[Console] = None) -> None:
    """Unified-style diff with per-file addition/deletion totals."""
    console = console or Console()
    if not results:
        console.print("[dim]No differences.[/dim]")
        return

    for result in results:
        header = Text.assemble(
            (result.file_path, "bold magenta"),
            (f"  (from {result.old_path})" if result.old_path else "", "dim"),
            (f"  +{result.total_additions}", "green"),
            (f" -{result.total_deletions}", "red"),
        )
        console.rule(header, align="left", style="dim")
        for hunk in result.hunks:
            console.print(Text(hunk.header, style="cyan"))
            for line in hunk.lines:
                marker, style = _LINE_STYLE[line.type]
                console.print(Text(marker + line.content, style=style), highlight=False)
        console.print()
