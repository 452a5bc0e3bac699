"""CLI entrypoints."""

from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bren import __version__
from bren.errors import ConfigurationError
from bren.models.rename import HookStatus, NamingStrategy, RenameConfig, RunReport
from bren.processors.hooks import check_hook
from bren.processors.tree_walker import TreeWalker


console = Console()
err_console = Console(stderr=True)

# Flag name -> strategy, in the order they are reported on conflicts
STRATEGY_FLAGS = {
    "original": NamingStrategy.ORIGINAL_NAME,
    "random_id": NamingStrategy.RANDOM8,
    "date": NamingStrategy.FILE_MODIFIED_DATE,
    "sha256": NamingStrategy.CONTENT_HASH,
}

FLAG_LABELS = {
    "original": "--original",
    "random_id": "--random",
    "date": "--date",
    "sha256": "--sha256",
}


@click.group(context_settings=dict(show_default=True))
@click.version_option(__version__, "-V", "--version", prog_name="bren")
def cli() -> None:
    """bren - Bulk rename files without ever overwriting one."""
    pass


def _select_strategy(**flags: bool) -> NamingStrategy:
    """Resolve the mutually exclusive strategy flags into a single strategy."""
    selected = [name for name, enabled in flags.items() if enabled]
    if len(selected) > 1:
        labels = ", ".join(FLAG_LABELS[name] for name in selected)
        raise click.UsageError(f"Only one naming strategy can be selected, got {labels}.")
    if not selected:
        return NamingStrategy.SEQUENTIAL_COUNTER
    return STRATEGY_FLAGS[selected[0]]


def _validation_message(error: ValidationError) -> str:
    messages = []
    for detail in error.errors():
        cause = detail.get("ctx", {}).get("error")
        messages.append(str(cause) if cause is not None else detail["msg"])
    return "; ".join(messages)


def _print_plan(report: RunReport) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Original", style="cyan")
    table.add_column("New Name", style="green")
    table.add_column("Hook", style="dim")

    for outcome in report.renamed:
        hook = "will run" if outcome.hook == HookStatus.PLANNED else ""
        table.add_row(escape(str(outcome.source)), escape(str(outcome.destination)), hook)

    console.print(table)


@cli.command("rename")
@click.argument("path", type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path))
@click.option("-b", "--basename", type=str, default=None, help="Basename used for the new file names.")
@click.option("-o", "--original", is_flag=True, default=False, help="Use the original filename as identifier.")
@click.option(
    "-r", "--random", "random_id", is_flag=True, default=False, help="Append a random 8 letter identifier."
)
@click.option("-d", "--date", is_flag=True, default=False, help="Use the last modified date as identifier.")
@click.option("-s", "--sha256", is_flag=True, default=False, help="Use the SHA-256 of the file content as name.")
@click.option("-e", "--strip-extension", is_flag=True, default=False, help="Remove extensions from the files.")
@click.option("-t", "--top-only", is_flag=True, default=False, help="Do not traverse into subdirectories.")
@click.option("-D", "--dry-run", is_flag=True, default=False, help="Show what would be renamed and change nothing.")
@click.option(
    "-c",
    "--hook",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Executable run after each rename with the new file path as argument.",
)
@click.option("--progress/--no-progress", default=False, help="Display a progress bar while renaming.")
def rename(
    path: Path,
    basename: str | None,
    original: bool,
    random_id: bool,
    date: bool,
    sha256: bool,
    strip_extension: bool,
    top_only: bool,
    dry_run: bool,
    hook: Path | None,
    progress: bool,
) -> None:
    """Rename every file under PATH.

    By default files are numbered in traversal order using the basename,
    e.g. photo.jpg becomes img(1).jpg. A file whose new name is already
    taken is skipped and left untouched.

    Examples:

        bren rename ./photos -b img

        bren rename ./photos -b holiday --date --top-only --dry-run

        bren rename ./downloads --sha256 -c ./index.sh
    """
    strategy = _select_strategy(original=original, random_id=random_id, date=date, sha256=sha256)

    try:
        config = RenameConfig(
            root_path=path,
            strategy=strategy,
            basename=basename,
            strip_extension=strip_extension,
            recursive=not top_only,
            dry_run=dry_run,
            post_rename_hook=hook,
        )
    except ValidationError as e:
        raise click.UsageError(_validation_message(e)) from e

    try:
        if hook is not None:
            check_hook(hook)
        config.check_root()
    except ConfigurationError as e:
        raise click.UsageError(str(e)) from e

    if dry_run:
        console.print("[bold]=============== Dry run ===============[/bold]")

    walker = TreeWalker(config, show_progress=progress)
    try:
        report = walker.run()
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e
    except KeyboardInterrupt:
        err_console.print("[yellow]Interrupted. Files renamed so far keep their new names.[/yellow]")
        raise SystemExit(130) from None

    if dry_run and report.renamed:
        _print_plan(report)

    style = "bold green" if not report.failed and not report.hook_failures else "bold yellow"
    console.print(f"[{style}]{report.summary()}.[/{style}]")
