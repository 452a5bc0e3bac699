"""Destination path construction for renamed files."""

import os
from pathlib import Path

from bren.errors import DestinationExistsError, InvalidNameError
from bren.models.rename import RenameCandidate


def split_extension(filename: str) -> tuple[str, str | None]:
    """Split a filename into its stem and extension.

    The extension is whatever follows the last dot, unless that dot is the
    first character of the name (``.bashrc``) or nothing follows it (``name.``).

    Args:
        filename: Bare filename without any directory component.

    Returns:
        Tuple of (stem, extension), where extension is None when not detected.
    """
    head, dot, tail = filename.rpartition(".")
    if not dot or not head or not tail:
        return filename, None
    return head, tail


def _check_fragment(name_fragment: str) -> None:
    if not name_fragment or name_fragment in (".", ".."):
        raise InvalidNameError(f"Invalid name fragment: {name_fragment!r}")
    if os.sep in name_fragment or (os.altsep and os.altsep in name_fragment):
        raise InvalidNameError(f"Name fragment must not contain a path separator: {name_fragment!r}")


def build_candidate(original_path: Path, name_fragment: str, strip_extension: bool = False) -> RenameCandidate:
    """Compute the destination for a file without touching the filesystem.

    The file keeps its directory. A bare filename stays relative to the
    current directory and a file at ``/`` stays at ``/``.

    Raises:
        InvalidNameError: If the fragment is empty or contains a separator.
    """
    _check_fragment(name_fragment)

    original_path = Path(original_path)
    _, extension = split_extension(original_path.name)

    new_name = name_fragment
    if extension is not None and not strip_extension:
        new_name = f"{name_fragment}.{extension}"

    return RenameCandidate(
        original_path=original_path,
        name_fragment=name_fragment,
        extension=extension,
        destination_path=original_path.parent / new_name,
    )


def construct_destination(original_path: Path, name_fragment: str, strip_extension: bool = False) -> Path:
    """Build the destination path and make sure nothing occupies it.

    Args:
        original_path: Path of the file as found by the traversal.
        name_fragment: New name without directory or extension.
        strip_extension: Drop the original extension from the destination.

    Returns:
        The free destination path.

    Raises:
        DestinationExistsError: If a file, directory or link already sits at the destination.
        InvalidNameError: If the fragment cannot be used as a filename.
    """
    candidate = build_candidate(original_path, name_fragment, strip_extension)

    # lexists: a dangling symlink still occupies the name
    if os.path.lexists(candidate.destination_path):
        raise DestinationExistsError(candidate.destination_path)

    return candidate.destination_path
