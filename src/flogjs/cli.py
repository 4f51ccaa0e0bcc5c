"""CLI for flog-js complexity scoring."""

from __future__ import annotations

import io
import logging
import sys
from pathlib import Path, PurePath

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from flogjs import __version__
from flogjs.aggregate import NO_GROUP, apply_threshold, group_functions, parse_threshold, summarize
from flogjs.analyzer import Analyzer, UnitResult
from flogjs.config import ConfigError, load_config
from flogjs.discovery import expand_paths
from flogjs.export import render, renderer_for_path
from flogjs.mode import ModeSelectionError, list_modes
from flogjs.parser import ParseError
from flogjs.weights import get_weights, list_weights

# Force UTF-8 output on Windows to avoid cp1252 encoding errors
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding="utf-8", errors="replace")

console = Console()
err_console = Console(stderr=True)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _score_text(score: float) -> Text:
    """Colour a score by how much attention it deserves."""
    if score > 20:
        color = "red"
    elif score > 10:
        color = "yellow"
    else:
        color = "green"
    return Text(f"{score:.2f}", style=color)


def _display_table(units: list[UnitResult], details: bool) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("File", style="cyan")
    table.add_column("Mode")
    table.add_column("Total", justify="right")
    if details:
        table.add_column("Top Function")
        table.add_column("Top Score", justify="right")
        table.add_column("Drivers", style="dim")

    for unit in units:
        row = [PurePath(unit.file).name, unit.mode, _score_text(unit.total)]
        if details:
            top = max(unit.functions, key=lambda f: f.score, default=None)
            if top is None:
                row += ["", "", ""]
            else:
                drivers = ", ".join(d.kind for d in top.top_drivers)
                row += [top.name, f"{top.score:.2f}", drivers]
        table.add_row(*row)

    console.print(table)


def _display_grouped(units: list[UnitResult], show_all: bool, show_zero: bool, details: bool) -> None:
    """Per-file, per-class listing in the classic flog layout."""
    summary = summarize(units)
    console.print(f"{summary.total:.1f}: flog total", highlight=False)
    console.print(f"  {summary.average:.1f}: flog/method average\n", highlight=False)

    for unit in units:
        base = PurePath(unit.file).name
        for group in group_functions(unit, show_all=show_all, show_zero=show_zero):
            display = PurePath(unit.file).stem if group.name == NO_GROUP else group.name
            console.print(f"{group.total:.1f}: {escape(display)} total", highlight=False)
            for fn in group.functions:
                name = fn.name if group.name == NO_GROUP else f"{group.name}#{fn.name}"
                loc = f"{base}:{fn.start}-{fn.end}"
                console.print(f"{fn.score:6.1f}: {escape(name):<30} {escape(loc)}",
                              highlight=False, soft_wrap=True)
                if details:
                    for driver in fn.all_drivers:
                        console.print(f"{driver.weight:6.1f}:   {escape(driver.kind)}", highlight=False)
            console.print()


@click.group()
@click.version_option(version=__version__)
def main():
    """flog-js - complexity scoring for JavaScript and TypeScript.

    Ranks files and functions by the weighted constructs that make
    code hard to review.
    """
    pass


@main.command()
@click.argument("paths", nargs=-1, required=True)
@click.option("--all", "-a", "show_all", is_flag=True, help="Show every file and function")
@click.option("--continue", "-c", "keep_going", is_flag=True, help="Keep going after parse errors")
@click.option("--details", "-d", is_flag=True, help="Show the drivers behind each score")
@click.option("--group", "-g", is_flag=True, help="Group functions by class or component")
@click.option("--quiet", "-q", is_flag=True, help="Suppress console output")
@click.option("--score", "-s", "total_only", is_flag=True, help="Print only the total score")
@click.option("--threshold", "-t", default=None,
              help="Top percentage of files to show (default 60), or score:N for a minimum score")
@click.option("--verbose", "-v", is_flag=True, help="Log detection and progress")
@click.option("--methods-only", "-m", is_flag=True, help="Ignore code outside functions")
@click.option("--zero", "-z", is_flag=True, help="Include zero-score functions")
@click.option("--output", "-o", type=click.Path(dir_okay=False),
              help="Write a report; format comes from the extension (.json, .html, .csv, .jsonl)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def analyze(paths: tuple[str, ...], show_all: bool, keep_going: bool, details: bool,
            group: bool, quiet: bool, total_only: bool, threshold: str | None, verbose: bool,
            methods_only: bool, zero: bool, output: str | None, as_json: bool):
    """Score JavaScript / TypeScript files and directories.

    PATHS can be files or directories; directories are walked recursively.
    """
    _setup_logging(verbose)

    try:
        settings = load_config(Path.cwd()).merged(
            methods_only=methods_only or None,
            threshold=threshold,
        )
        cutoff = parse_threshold(settings.threshold)
        analyzer = Analyzer(settings=settings)
    except (ConfigError, ModeSelectionError, ValueError) as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise SystemExit(1)

    missing = [p for p in paths if not Path(p).exists()]
    if missing:
        err_console.print(f"[red]Path not found: {escape(', '.join(missing))}[/red]")
        raise SystemExit(1)

    files = expand_paths(paths, exclude=settings.exclude, include=settings.include)
    if not files:
        if not quiet:
            console.print("No files found to analyze")
        return

    try:
        results = analyzer.analyze_paths(files, keep_going=keep_going)
    except (ParseError, OSError, UnicodeDecodeError) as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise SystemExit(1)

    errors = [r for r in results if not r.ok]
    if total_only:
        if not quiet:
            console.print(f"Total flog score: {summarize(results).total:.2f}", highlight=False)
        return

    shown = apply_threshold(results, cutoff, show_all=show_all)

    if output:
        try:
            renderer = renderer_for_path(output)
        except KeyError as e:
            err_console.print(f"[red]{escape(str(e))}[/red]")
            raise SystemExit(1)
        Path(output).write_text(renderer.render(shown, details), encoding="utf-8")
        if not quiet:
            console.print(f"Report saved to: {escape(output)}", highlight=False)
    elif quiet:
        pass
    elif as_json or settings.format == "json":
        click.echo(render("json", shown, details))
    elif group or settings.format == "group":
        _display_grouped(shown, show_all, zero, details)
    else:
        _display_table(shown, details)

    if errors and not quiet:
        err_console.print(f"\n[red]Errors: {len(errors)} file(s) failed to parse[/red]")


@main.command()
def modes():
    """List available scoring modes."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Mode", style="cyan")
    table.add_column("Description")

    for name, desc in list_modes().items():
        table.add_row(name, desc)

    console.print(table)


@main.command()
@click.argument("mode", required=False)
def weights(mode: str | None):
    """Show the weight table for MODE (default: all modes)."""
    names = [mode] if mode else list(list_weights())
    for name in names:
        try:
            table_weights = get_weights(name)
        except KeyError as e:
            err_console.print(f"[red]{escape(str(e))}[/red]")
            raise SystemExit(1)

        table = Table(title=f"{name} - {table_weights.description}", show_header=True,
                      header_style="bold")
        table.add_column("Pattern", style="cyan")
        table.add_column("Weight", justify="right")
        for pattern, weight in table_weights.weights.items():
            table.add_row(pattern, f"{weight:.2f}")
        console.print(table)


if __name__ == "__main__":
    main()
