"""vibediff CLI — Typer application with diff, show, and init commands."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from vibediff import __version__

app = typer.Typer(
    name="vibediff",
    help="Review your working tree's pending changes as a line-annotated diff.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

_SCOPE_HELP = "Diff scope: unstaged | staged | against-target"


def _resolve_repo_root() -> Path:
    """Find the git repo root, exit 2 on failure."""
    from vibediff.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _load(repo_root: Path, config: Optional[str], debug: bool):
    """Load config, apply the --debug flag, and configure logging."""
    from vibediff.config.loader import ConfigError, load_config
    from vibediff.log import configure_logging

    try:
        cfg = load_config(repo_root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if debug:
        cfg.logging.debug = True
    configure_logging(cfg.logging.debug, console=console)
    return cfg


def _apply_overrides(cfg, scope: Optional[str], target: Optional[str], format: Optional[str]) -> None:
    from vibediff.config.schema import FORMATS, SCOPES

    if scope:
        if scope not in SCOPES:
            console.print(f"[bold red]Invalid scope:[/bold red] {scope}")
            raise typer.Exit(code=2)
        cfg.diff.scope = scope
    if target:
        cfg.diff.target = target
    if format:
        if format not in FORMATS:
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        console.print(f"[bold red]Cannot read {source}:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


# ── diff ──────────────────────────────────────────────────────────────────────


@app.command()
def diff(
    scope: Optional[str] = typer.Option(None, "--scope", "-s", help=_SCOPE_HELP),
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Ref to diff against (against-target scope)"),
    context: Optional[int] = typer.Option(None, "--context", "-U", min=0, help="Unchanged lines around each hunk (not with --input)"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    input: Optional[str] = typer.Option(None, "--input", "-i", help="Parse a saved diff file ('-' for stdin) instead of running git"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .vibediff.toml"),
    stat: bool = typer.Option(False, "--stat", help="Only list changed files with counts"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging"),
) -> None:
    """Show pending changes, file by file, with old/new line numbers."""
    from vibediff.git.adapter import GitError
    from vibediff.git.diff_parser import DiffParseError, parse_diff
    from vibediff.git.models import DiffScope
    from vibediff.git.service import DiffService
    from vibediff.output import json_report, terminal

    if input and context is not None:
        console.print("[bold red]--context cannot be used with --input:[/bold red] a saved diff keeps its own context")
        raise typer.Exit(code=2)

    repo_root = Path.cwd() if input else _resolve_repo_root()
    cfg = _load(repo_root, config, debug)
    _apply_overrides(cfg, scope, target, format)

    try:
        if input:
            result = parse_diff(_read_input(input), DiffScope(cfg.diff.scope))
        else:
            result = DiffService(repo_root, cfg).get_diff(context_lines=context)
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    except DiffParseError as exc:
        console.print(f"[bold red]Parse error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if cfg.output.format == "json":
        print(json_report.render(result))
    else:
        terminal.render(
            result,
            show_summary=cfg.output.show_summary,
            stat_only=stat,
        )


# ── show ──────────────────────────────────────────────────────────────────────


@app.command()
def show(
    path: str = typer.Argument(..., help="Repo-relative path of the file to show"),
    full: bool = typer.Option(False, "--full", help="Show the whole file around the changes"),
    scope: Optional[str] = typer.Option(None, "--scope", "-s", help=_SCOPE_HELP),
    target: Optional[str] = typer.Option(None, "--target", "-t", help="Ref to diff against (against-target scope)"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .vibediff.toml"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging"),
) -> None:
    """Show the diff of a single file."""
    from vibediff.git.adapter import GitError
    from vibediff.git.diff_parser import DiffParseError
    from vibediff.git.service import DiffService, FileNotInDiff
    from vibediff.output import json_report, terminal

    repo_root = _resolve_repo_root()
    cfg = _load(repo_root, config, debug)
    _apply_overrides(cfg, scope, target, format)

    service = DiffService(repo_root, cfg)
    try:
        if full:
            file = service.get_file_diff_full_context(path)
        else:
            file = service.get_file_diff(path)
    except FileNotInDiff as exc:
        console.print(f"[yellow]No changes:[/yellow] {exc}")
        raise typer.Exit(code=1) from exc
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    except DiffParseError as exc:
        console.print(f"[bold red]Parse error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if cfg.output.format == "json":
        print(json_report.render_file(file))
    else:
        terminal.render_file(file)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .vibediff.toml in the repo root."""
    from vibediff.config.defaults import DEFAULT_TOML
    from vibediff.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"vibediff {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """vibediff — review pending changes as a structured diff."""
