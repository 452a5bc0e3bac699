"""Directory traversal and rename execution."""

import os
import random
from collections.abc import Callable, Iterator
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from tqdm import tqdm

from bren.counters import PlannedMoves, RunCounters
from bren.errors import ConfigurationError, DestinationExistsError, HookError, InvalidNameError, MetadataUnavailableError
from bren.models.rename import FileOutcome, FileStatus, HookStatus, RenameConfig, RunReport
from bren.processors.hooks import run_hook
from bren.processors.naming import name_fragment
from bren.processors.path_builder import build_candidate, construct_destination


# Per-file diagnostics go to stderr
err_console = Console(stderr=True)

HookRunner = Callable[[Path, Path], None]


class TreeWalker:
    """Walks a directory tree and renames every regular file in it.

    Files are processed strictly one at a time in a deterministic pre-order:
    the entries of each directory are sorted by name, its files come before
    its subdirectories. Any per-file problem is reported and the walk moves on.
    """

    def __init__(
        self,
        config: RenameConfig,
        console: Console | None = None,
        rng: random.Random | None = None,
        hook_runner: HookRunner = run_hook,
        show_progress: bool = False,
    ) -> None:
        """Initialize the walker.

        Args:
            config: Validated run configuration.
            console: Console receiving per-file diagnostics. Defaults to stderr.
            rng: Random generator for the random strategy.
            hook_runner: Callable running the post-rename hook for a new path.
            show_progress: Display a progress bar while walking.
        """
        self.config = config
        self.console = console or err_console
        self.rng = rng or random.Random()
        self.hook_runner = hook_runner
        self.show_progress = show_progress

    def iter_files(self) -> Iterator[Path]:
        """Yield the regular files under the root in traversal order.

        Each directory listing is read in full before any of its files is
        yielded, so files renamed along the way are never visited twice.

        Raises:
            ConfigurationError: If the root directory itself cannot be read.
        """
        yield from self._walk(self.config.root_path, depth=1)

    def _walk(self, directory: Path, depth: int) -> Iterator[Path]:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            if depth == 1:
                raise ConfigurationError(f"Cannot read {directory}: {e.strerror or e}") from e
            reason = escape(e.strerror or str(e))
            self.console.print(f"[yellow]Cannot read directory {escape(str(directory))}: {reason}, skipping...[/yellow]")
            return

        subdirectories: list[Path] = []
        for entry in entries:
            try:
                # Symlinks are neither followed nor renamed
                is_file = entry.is_file(follow_symlinks=False)
                is_dir = not is_file and entry.is_dir(follow_symlinks=False)
            except OSError as e:
                reason = escape(e.strerror or str(e))
                self.console.print(f"[yellow]Cannot inspect {escape(entry.path)}: {reason}, skipping...[/yellow]")
                continue

            if is_file:
                yield Path(entry.path)
            elif is_dir:
                subdirectories.append(Path(entry.path))

        if not self.config.recursive:
            return

        for subdirectory in subdirectories:
            yield from self._walk(subdirectory, depth + 1)

    def run(self) -> RunReport:
        """Rename every regular file under the root.

        Returns:
            RunReport with one outcome per visited file.

        Raises:
            ConfigurationError: If the root is missing, not a directory, or unreadable.
        """
        self.config.check_root()

        counters = RunCounters()
        planned = PlannedMoves()
        report = RunReport(dry_run=self.config.dry_run)

        files = tqdm(self.iter_files(), desc="Renaming files...", unit="file", disable=not self.show_progress)
        for path in files:
            report.outcomes.append(self.process_file(path, counters, planned))

        report.files_seen = counters.files_seen
        return report

    def process_file(self, path: Path, counters: RunCounters, planned: PlannedMoves | None = None) -> FileOutcome:
        """Name, move and hook a single file.

        Args:
            path: Regular file found by the traversal.
            counters: Counters of the current run, advanced once for this file.
            planned: Moves recorded so far in a dry run.

        Returns:
            The file's outcome. Per-file errors are reported, never raised.
        """
        if not os.path.lexists(path):
            self.console.print(f"[yellow]{escape(str(path))} does not exist, skipping...[/yellow]")
            return FileOutcome(
                source=path, status=FileStatus.SKIPPED_MISSING, hook=self._hook_skipped(), message="Source vanished"
            )

        counters.next_file()

        try:
            fragment = name_fragment(path, self.config, counters, rng=self.rng)
        except MetadataUnavailableError as e:
            self.console.print(f"[yellow]Skipping. {escape(str(e))}[/yellow]")
            return FileOutcome(
                source=path, status=FileStatus.SKIPPED_METADATA, hook=self._hook_skipped(), message=str(e)
            )

        try:
            if self.config.dry_run:
                destination = self._plan_destination(path, fragment, planned if planned is not None else PlannedMoves())
            else:
                destination = construct_destination(path, fragment, self.config.strip_extension)
        except DestinationExistsError as e:
            self.console.print(f"[yellow]Skipping {escape(str(path))}. {escape(str(e))}.[/yellow]")
            return FileOutcome(
                source=path,
                destination=e.destination,
                status=FileStatus.SKIPPED_EXISTS,
                hook=self._hook_skipped(),
                message=str(e),
            )
        except InvalidNameError as e:
            self.console.print(f"[red]Renaming {escape(str(path))} failed: {escape(str(e))}[/red]")
            return FileOutcome(source=path, status=FileStatus.FAILED, hook=self._hook_skipped(), message=str(e))

        if self.config.dry_run:
            return FileOutcome(
                source=path,
                destination=destination,
                status=FileStatus.PLANNED,
                hook=HookStatus.PLANNED if self.config.post_rename_hook else HookStatus.NOT_CONFIGURED,
            )

        try:
            os.rename(path, destination)
        except OSError as e:
            reason = e.strerror or str(e)
            self.console.print(f"[red]Renaming {escape(str(path))} failed: {escape(reason)}[/red]")
            return FileOutcome(
                source=path,
                destination=destination,
                status=FileStatus.FAILED,
                hook=self._hook_skipped(),
                message=reason,
            )

        outcome = FileOutcome(source=path, destination=destination, status=FileStatus.RENAMED)
        if self.config.post_rename_hook is not None:
            try:
                self.hook_runner(self.config.post_rename_hook, destination)
                outcome.hook = HookStatus.INVOKED
            except HookError as e:
                self.console.print(f"[red]{escape(str(e))}[/red]")
                outcome.hook = HookStatus.FAILED
                outcome.message = str(e)

        return outcome

    def _plan_destination(self, path: Path, fragment: str, planned: PlannedMoves) -> Path:
        """Dry-run counterpart of construct_destination, aware of earlier planned moves."""
        destination = build_candidate(path, fragment, self.config.strip_extension).destination_path
        if planned.is_occupied(destination):
            raise DestinationExistsError(destination)
        planned.record(path, destination)
        return destination

    def _hook_skipped(self) -> HookStatus:
        return HookStatus.SKIPPED if self.config.post_rename_hook else HookStatus.NOT_CONFIGURED
