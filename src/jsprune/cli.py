"""jsprune CLI - Remove unused imports and bindings from JavaScript and TypeScript."""

import dataclasses
import difflib
import logging
import os
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax

from jsprune import __version__
from jsprune.config import CONFIG_FILE, PACKAGE_JSON, CleanSettings, VariableAction, load_settings
from jsprune.engine import analyze_source, clean_all, clean_on_save, handle_unused_variables, remove_unused_imports
from jsprune.errors import ConfigError, JsPruneError
from jsprune.exclusion import FileExcluder, iter_source_files
from jsprune.models.results import AnalysisMetadata, AnalysisResults, AnalysisSummary, FileError, Finding
from jsprune.output.json_writer import write_results
from jsprune.output.tree import build_results_tree, build_summary_table, display_tree

app = typer.Typer(
    name="jsprune",
    help="Remove unused imports, variables and parameters from JS/TS sources",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()
logger = logging.getLogger(__name__)

ROOT_MARKERS = (CONFIG_FILE, PACKAGE_JSON, ".git")

Operation = Callable[[str, str, CleanSettings], Optional[str]]


def setup_logging(*, is_verbose: bool) -> None:
    """Configure logging based on verbosity."""
    log_level = "DEBUG" if is_verbose else os.environ.get("LOG_LEVEL", "WARNING").upper()

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_time=False, show_path=is_verbose)],
        force=True,
    )


def version_callback(value: bool) -> None:
    if value:
        console.print(f"jsprune version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Remove unused imports, variables and parameters from JS/TS sources."""


def find_project_root(path: Path) -> Path:
    """Walk up from ``path`` to the nearest directory holding a project marker."""
    start = path if path.is_dir() else path.parent
    for candidate in [start, *start.parents]:
        if any((candidate / marker).exists() for marker in ROOT_MARKERS):
            return candidate
    return start


def _load_settings(root: Path, config: Optional[Path]) -> CleanSettings:
    try:
        return load_settings(root, config)
    except (ConfigError, OSError, ValueError) as e:
        console.print(f"[red]Invalid configuration:[/] {e}")
        raise typer.Exit(2)


def _collect_files(paths: list[Path], root: Path, settings: CleanSettings, include_ignored: bool) -> list[Path]:
    excluder = FileExcluder(root, include_ignored=include_ignored, extra_excludes=settings.exclude)
    logger.debug("Exclusion sources: %s", ", ".join(excluder.sources) or "none")

    files: list[Path] = []
    for path in paths:
        if not path.exists():
            console.print(f"[red]Path not found:[/] {path}")
            raise typer.Exit(2)
        files.extend(iter_source_files(path.resolve(), excluder))
    return files


def _read_source(path: Path) -> str:
    # newline="" keeps CRLF sources intact
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def _write_source(path: Path, text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def _show_diff(path: Path, before: str, after: str) -> None:
    diff = "".join(
        difflib.unified_diff(
            before.splitlines(keepends=True),
            after.splitlines(keepends=True),
            fromfile=f"a/{path.name}",
            tofile=f"b/{path.name}",
        )
    )
    console.print(f"[bold]{path}[/]")
    console.print(Syntax(diff, "diff", theme="ansi_dark", background_color="default"))


def _rewrite(
    paths: list[Path],
    operation: Operation,
    settings: CleanSettings,
    root: Path,
    write: bool,
    include_ignored: bool,
) -> None:
    """Run ``operation`` over every source file, writing or diffing the result."""
    files = _collect_files(paths, root, settings, include_ignored)
    changed = 0
    failed = 0

    for file_path in files:
        try:
            source = _read_source(file_path)
            updated = operation(source, str(file_path), settings)
        except (JsPruneError, OSError, UnicodeDecodeError) as e:
            console.print(f"[red]Skipped[/] {file_path}: {e}")
            failed += 1
            continue

        if updated is None or updated == source:
            logger.debug("No changes for %s", file_path)
            continue

        changed += 1
        if write:
            _write_source(file_path, updated)
            console.print(f"[green]Updated[/] {file_path}")
        else:
            _show_diff(file_path, source, updated)

    if not files:
        console.print("[yellow]No JavaScript or TypeScript files found[/]")
    elif changed == 0:
        console.print(f"[green]Nothing to change[/] in {len(files)} file(s)")
    elif not write:
        console.print(f"\n{changed} file(s) would change. Re-run with [bold]--write[/] to apply.")

    if failed:
        raise typer.Exit(1)


@app.command()
def check(
    paths: list[Path] = typer.Argument(
        None,
        help="Files or directories to analyze (default: current directory)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a JSON or TOML config file",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write a JSON report to this path",
    ),
    tree: bool = typer.Option(
        False,
        "--tree",
        "-t",
        help="Show every finding grouped by file (default: summary only)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    include_ignored: bool = typer.Option(
        False,
        "--include-ignored",
        help="Include files normally excluded by .gitignore and default patterns",
    ),
) -> None:
    """Report unused imports, variables, parameters and functions."""
    setup_logging(is_verbose=verbose)
    paths = paths or [Path(".")]
    root = find_project_root(paths[0].resolve())
    settings = _load_settings(root, config)

    start_time = time.time()
    files = _collect_files(paths, root, settings, include_ignored)

    findings: list[Finding] = []
    errors: list[FileError] = []
    for file_path in files:
        try:
            findings.extend(analyze_source(_read_source(file_path), str(file_path), settings))
        except (JsPruneError, OSError, UnicodeDecodeError) as e:
            logger.warning("Could not analyze %s: %s", file_path, e)
            errors.append(FileError(file=file_path, message=str(e)))

    results = AnalysisResults(
        metadata=AnalysisMetadata(
            project=root.name,
            analyzed_at=datetime.now(),
            jsprune_version=__version__,
            files_analyzed=len(files),
            analysis_duration_ms=int((time.time() - start_time) * 1000),
        ),
        summary=AnalysisSummary.from_findings(findings),
        findings=findings,
        errors=errors,
    )

    if output is not None:
        write_results(results, output)
        console.print(f"[green]Results saved to:[/] {output}")

    if not findings:
        console.print(f"[green]No unused bindings found[/] in {len(files)} file(s)")
    elif tree:
        display_tree(build_results_tree(findings, root))
    else:
        console.print(build_summary_table(findings))

    for error in errors:
        console.print(f"[red]Could not analyze[/] {error.file}: {error.message}")

    if findings or errors:
        raise typer.Exit(1)


@app.command()
def imports(
    paths: list[Path] = typer.Argument(None, help="Files or directories to clean"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a JSON or TOML config file"),
    write: bool = typer.Option(False, "--write", "-w", help="Write changes instead of showing a diff"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    include_ignored: bool = typer.Option(
        False,
        "--include-ignored",
        help="Include files normally excluded by .gitignore and default patterns",
    ),
) -> None:
    """Remove unused import bindings."""
    setup_logging(is_verbose=verbose)
    paths = paths or [Path(".")]
    root = find_project_root(paths[0].resolve())
    settings = _load_settings(root, config)
    _rewrite(paths, remove_unused_imports, settings, root, write, include_ignored)


@app.command()
def variables(
    paths: list[Path] = typer.Argument(None, help="Files or directories to clean"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a JSON or TOML config file"),
    action: Optional[VariableAction] = typer.Option(
        None,
        "--action",
        "-a",
        case_sensitive=False,
        help="Override unusedVariableAction (comment, prefix or ignore)",
    ),
    remove_trailing: Optional[bool] = typer.Option(
        None,
        "--remove-trailing/--keep-trailing",
        help="Override removeTrailingParameters",
    ),
    write: bool = typer.Option(False, "--write", "-w", help="Write changes instead of showing a diff"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    include_ignored: bool = typer.Option(
        False,
        "--include-ignored",
        help="Include files normally excluded by .gitignore and default patterns",
    ),
) -> None:
    """Comment out or prefix unused variables and functions, trim unused parameters."""
    setup_logging(is_verbose=verbose)
    paths = paths or [Path(".")]
    root = find_project_root(paths[0].resolve())
    settings = _load_settings(root, config)

    if action is not None:
        settings = dataclasses.replace(settings, unused_variable_action=action)
    if remove_trailing is not None:
        settings = dataclasses.replace(settings, remove_trailing_parameters=remove_trailing)

    _rewrite(paths, handle_unused_variables, settings, root, write, include_ignored)


@app.command()
def clean(
    paths: list[Path] = typer.Argument(None, help="Files or directories to clean"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a JSON or TOML config file"),
    write: bool = typer.Option(False, "--write", "-w", help="Write changes instead of showing a diff"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    include_ignored: bool = typer.Option(
        False,
        "--include-ignored",
        help="Include files normally excluded by .gitignore and default patterns",
    ),
) -> None:
    """Remove unused imports, then handle unused variables and parameters."""
    setup_logging(is_verbose=verbose)
    paths = paths or [Path(".")]
    root = find_project_root(paths[0].resolve())
    settings = _load_settings(root, config)
    _rewrite(paths, clean_all, settings, root, write, include_ignored)


@app.command()
def save(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="The file being saved"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a JSON or TOML config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Apply the cleanups enabled by autoRemoveUnusedImports and autoHandleUnusedVariables."""
    setup_logging(is_verbose=verbose)
    file = file.resolve()
    settings = _load_settings(find_project_root(file), config)

    if not (settings.auto_remove_unused_imports or settings.auto_handle_unused_variables):
        console.print("[dim]No on-save cleanups enabled[/]")
        return

    try:
        source = _read_source(file)
        updated = clean_on_save(source, str(file), settings)
    except (JsPruneError, OSError, UnicodeDecodeError) as e:
        console.print(Panel.fit(f"[red]{e}[/]", title="Cleanup failed"))
        raise typer.Exit(1)

    if updated is None:
        console.print(f"[green]Nothing to change[/] in {file.name}")
        return

    _write_source(file, updated)
    console.print(f"[green]Updated[/] {file}")


if __name__ == "__main__":
    app()
