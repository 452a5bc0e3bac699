"""Naming strategies deriving a new name fragment for each file."""

import hashlib
import random
import string
from datetime import datetime
from pathlib import Path

from bren.counters import RunCounters
from bren.errors import MetadataUnavailableError
from bren.models.rename import NamingStrategy, RenameConfig
from bren.processors.path_builder import split_extension


RANDOM_ID_LENGTH = 8
RANDOM_ID_ALPHABET = string.ascii_uppercase

# Matches the ISO-like stamp used in the destination name, e.g. 2023-09-14T13:24:59
MODIFIED_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

HASH_CHUNK_SIZE = 1024 * 1024


def counter_fragment(basename: str, file_number: int) -> str:
    """Return ``basename(n)``, e.g. ``photo(12)``."""
    return f"{basename}({file_number})"


def modified_date_fragment(basename: str, path: Path) -> str:
    """Append the file's last modification time (local time) to the basename.

    Raises:
        MetadataUnavailableError: If the file cannot be stat'ed or its timestamp is out of range.
    """
    try:
        mtime = path.stat().st_mtime
        modified = datetime.fromtimestamp(mtime)
    except (OSError, OverflowError, ValueError) as e:
        reason = getattr(e, "strerror", None) or e
        raise MetadataUnavailableError(f"Cannot read modification time of {path}: {reason}") from e

    return basename + modified.strftime(MODIFIED_DATE_FORMAT)


def random_fragment(basename: str, rng: random.Random | None = None) -> str:
    """Append eight random uppercase letters to the basename."""
    rng = rng or random.Random()
    return basename + "".join(rng.choices(RANDOM_ID_ALPHABET, k=RANDOM_ID_LENGTH))


def original_fragment(path: Path) -> str:
    """Return the file's current name without its extension."""
    stem, _ = split_extension(path.name)
    return stem


def content_hash_fragment(path: Path) -> str:
    """Return the SHA-256 hex digest of the file's content.

    Raises:
        MetadataUnavailableError: If the file cannot be read.
    """
    digest = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
                digest.update(chunk)
    except OSError as e:
        raise MetadataUnavailableError(f"Cannot read content of {path}: {e.strerror or e}") from e

    return digest.hexdigest()


def name_fragment(
    path: Path,
    config: RenameConfig,
    counters: RunCounters,
    rng: random.Random | None = None,
) -> str:
    """Derive the new name fragment for a file using the configured strategy.

    The caller is expected to have already counted the file in ``counters``.

    Args:
        path: Path of the file being renamed.
        config: Run configuration selecting the strategy and basename.
        counters: Counters of the current run.
        rng: Random generator used by the random strategy.

    Returns:
        The name fragment, excluding directory and extension.

    Raises:
        MetadataUnavailableError: If the strategy needs metadata or content that cannot be read.
    """
    basename = config.basename or ""

    match config.strategy:
        case NamingStrategy.SEQUENTIAL_COUNTER:
            return counter_fragment(basename, counters.files_seen)
        case NamingStrategy.FILE_MODIFIED_DATE:
            return modified_date_fragment(basename, path)
        case NamingStrategy.RANDOM8:
            return random_fragment(basename, rng)
        case NamingStrategy.ORIGINAL_NAME:
            return original_fragment(path)
        case NamingStrategy.CONTENT_HASH:
            return content_hash_fragment(path)

    raise ValueError(f"Unknown naming strategy: {config.strategy}")
