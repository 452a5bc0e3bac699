"""Per-run state shared by the traversal and the naming strategies."""

import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class RunCounters:
    """Tracks files visited during a single rename run.

    One instance is owned by each walker run and handed to the naming
    strategy explicitly, so numbering restarts at 1 for every run.
    """

    files_seen: int = 0

    def next_file(self) -> int:
        """Record one more visited regular file and return the new count."""
        self.files_seen += 1
        return self.files_seen


@dataclass
class PlannedMoves:
    """Moves recorded during a dry run in place of the real renames.

    A dry run leaves the filesystem alone, so destinations claimed earlier in
    the run and sources that would have been moved away are tracked here.
    """

    destinations: set[Path] = field(default_factory=set)
    sources: set[Path] = field(default_factory=set)

    def is_occupied(self, path: Path) -> bool:
        if path in self.destinations:
            return True
        return os.path.lexists(path) and path not in self.sources

    def record(self, source: Path, destination: Path) -> None:
        self.sources.add(source)
        self.destinations.add(destination)
