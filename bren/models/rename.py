"""Rename configuration and outcome data models."""

import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator

from bren.errors import ConfigurationError


class NamingStrategy(str, Enum):
    """Closed set of strategies used to derive a new name fragment."""

    SEQUENTIAL_COUNTER = "sequential-counter"
    ORIGINAL_NAME = "original-name"
    FILE_MODIFIED_DATE = "file-modified-date"
    RANDOM8 = "random8"
    CONTENT_HASH = "content-hash"

    @property
    def requires_basename(self) -> bool:
        return self not in (NamingStrategy.ORIGINAL_NAME, NamingStrategy.CONTENT_HASH)


class RenameConfig(BaseModel):
    """Validated configuration for a single rename run."""

    model_config = ConfigDict(frozen=True)

    root_path: Path = Field(description="Directory to scan")
    strategy: NamingStrategy = Field(
        default=NamingStrategy.SEQUENTIAL_COUNTER,
        description="Naming strategy applied to every regular file",
    )
    basename: str | None = Field(default=None, description="Prefix used by strategies that need one")
    strip_extension: bool = Field(default=False, description="Drop the extension from every destination")
    recursive: bool = Field(default=True, description="Descend into subdirectories of the root")
    dry_run: bool = Field(default=False, description="Preview the moves without touching the filesystem")
    post_rename_hook: Path | None = Field(default=None, description="Executable run once per renamed file")

    @model_validator(mode="after")
    def _check_basename(self) -> "RenameConfig":
        if self.strategy.requires_basename and not self.basename:
            raise ValueError(f"A basename is required for the {self.strategy.value} strategy")
        if self.basename and (os.sep in self.basename or (os.altsep and os.altsep in self.basename)):
            raise ValueError(f"Basename must not contain a path separator: {self.basename!r}")
        return self

    def check_root(self) -> None:
        """Make sure the root path is an existing directory.

        Raises:
            ConfigurationError: If the path is missing or is not a directory.
        """
        if not self.root_path.exists():
            raise ConfigurationError(f"{self.root_path} does not exist")
        if not self.root_path.is_dir():
            raise ConfigurationError(f"{self.root_path} is not a valid directory path")


class RenameCandidate(BaseModel):
    """A proposed move for a single file, computed on the fly and never persisted."""

    original_path: Path
    name_fragment: str
    extension: str | None = None
    destination_path: Path

    def __str__(self) -> str:
        return f"RenameCandidate('{self.original_path}' -> '{self.destination_path}')"


class FileStatus(str, Enum):
    RENAMED = "renamed"
    PLANNED = "planned"
    SKIPPED_EXISTS = "skipped_exists"
    SKIPPED_MISSING = "skipped_missing"
    SKIPPED_METADATA = "skipped_metadata"
    FAILED = "failed"


class HookStatus(str, Enum):
    NOT_CONFIGURED = "not_configured"
    INVOKED = "invoked"
    PLANNED = "planned"
    FAILED = "failed"
    SKIPPED = "skipped"


class FileOutcome(BaseModel):
    """What happened to one visited regular file."""

    source: Path = Field(description="Path of the file as found by the traversal")
    destination: Path | None = Field(default=None, description="Computed destination, if one was produced")
    status: FileStatus
    hook: HookStatus = HookStatus.NOT_CONFIGURED
    message: str = ""

    @property
    def is_skipped(self) -> bool:
        return self.status in (FileStatus.SKIPPED_EXISTS, FileStatus.SKIPPED_MISSING, FileStatus.SKIPPED_METADATA)


class RunReport(BaseModel):
    """Result of a rename run containing one outcome per visited file."""

    dry_run: bool = False
    files_seen: int = 0
    outcomes: list[FileOutcome] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.outcomes)

    @property
    def renamed(self) -> list[FileOutcome]:
        """Files moved, or that would be moved under dry-run."""
        done = FileStatus.PLANNED if self.dry_run else FileStatus.RENAMED
        return [outcome for outcome in self.outcomes if outcome.status == done]

    @property
    def skipped(self) -> list[FileOutcome]:
        return [outcome for outcome in self.outcomes if outcome.is_skipped]

    @property
    def failed(self) -> list[FileOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status == FileStatus.FAILED]

    @property
    def hook_failures(self) -> list[FileOutcome]:
        return [outcome for outcome in self.outcomes if outcome.hook == HookStatus.FAILED]

    def summary(self) -> str:
        """Return a one-line, human-readable summary of the run."""
        verb = "Would rename" if self.dry_run else "Renamed"
        parts = [
            f"{verb} {len(self.renamed)} of {self.files_seen} file(s)",
            f"skipped {len(self.skipped)}",
            f"failed {len(self.failed)}",
        ]
        if self.hook_failures:
            parts.append(f"hook failures {len(self.hook_failures)}")
        return ", ".join(parts)
