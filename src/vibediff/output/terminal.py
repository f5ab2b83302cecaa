"""Rich terminal reporter — file list, hunks with line numbers, failures."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from vibediff.git.models import DiffResult, FileDiff, FileStatus, Hunk, LineType

_STATUS_STYLE = {
    FileStatus.ADDED: "bold black on green",
    FileStatus.MODIFIED: "bold black on yellow",
    FileStatus.DELETED: "bold white on red",
    FileStatus.RENAMED: "bold black on bright_cyan",
}

_LINE_STYLE = {
    LineType.ADDED: "green",
    LineType.DELETED: "red",
    LineType.CONTEXT: "",
}

_LINE_MARKER = {
    LineType.ADDED: "+",
    LineType.DELETED: "-",
    LineType.CONTEXT: " ",
}


def _status_pill(status: FileStatus) -> Text:
    return Text(f" {status.value.upper()} ", style=_STATUS_STYLE.get(status, ""))


def _file_title(file: FileDiff) -> Text:
    title = Text()
    title.append_text(_status_pill(file.status))
    title.append(" ")
    if file.old_path:
        title.append(f"{file.old_path} → ", style="dim")
    title.append(file.path, style="bold magenta")
    if file.is_binary:
        title.append("  (binary)", style="dim")
    else:
        title.append(f"  +{file.additions}", style="green")
        title.append(f" -{file.deletions}", style="red")
    return title


def _hunk_table(hunk: Hunk) -> Table:
    table = Table(
        show_header=False,
        box=None,
        pad_edge=False,
        padding=(0, 1),
    )
    table.add_column("old", justify="right", style="dim", no_wrap=True)
    table.add_column("new", justify="right", style="dim", no_wrap=True)
    table.add_column("line", overflow="fold")

    for line in hunk.lines:
        table.add_row(
            str(line.old_number) if line.old_number is not None else "",
            str(line.new_number) if line.new_number is not None else "",
            Text(_LINE_MARKER[line.type] + line.content, style=_LINE_STYLE[line.type]),
        )
    return table


def render_file(file: FileDiff, console: Optional[Console] = None) -> None:
    """Print one file: title line, then each hunk with old/new numbers."""
    console = console or Console()
    console.print(_file_title(file))
    for hunk in file.hunks:
        header = f"@@ -{hunk.old_start},{hunk.old_lines} +{hunk.new_start},{hunk.new_lines} @@"
        if hunk.header:
            header = f"{header} {hunk.header}"
        console.print(Text(header, style="cyan"))
        console.print(_hunk_table(hunk))
    console.print()


def render(
    result: DiffResult,
    *,
    console: Optional[Console] = None,
    show_summary: bool = True,
    stat_only: bool = False,
) -> None:
    """Print a whole DiffResult to the terminal using Rich."""
    console = console or Console()

    if not result.files and result.ok:
        console.print(f"[dim]No {result.scope.value} changes.[/dim]")
        return

    for file in result.files:
        if stat_only:
            console.print(_file_title(file))
        else:
            render_file(file, console)

    if result.failures:
        console.print()
        console.print(f"[bold red]Could not render {len(result.failures)} file(s):[/bold red]")
        for failure in result.failures:
            line = Text("  ✗ ", style="red")
            line.append(failure.path or f"section {failure.index}", style="bold")
            line.append(f": {failure.message}")
            console.print(line)

    if show_summary:
        _print_summary(console, result)


def _print_summary(console: Console, result: DiffResult) -> None:
    console.print()
    console.print(f"[dim]Scope:[/dim]      {result.scope.value}")
    console.print(f"[dim]Files:[/dim]      {len(result.files)}")
    console.print(f"[dim]Additions:[/dim]  [green]+{result.additions}[/green]")
    console.print(f"[dim]Deletions:[/dim]  [red]-{result.deletions}[/red]")
    if result.failures:
        console.print(f"[dim]Failed:[/dim]     [red]{len(result.failures)}[/red]")
