"""Exceptions raised by the rename engine."""


class BrenError(Exception):
    """Base class for all bren errors."""


class ConfigurationError(BrenError):
    """Invalid configuration detected before any traversal starts."""


class DestinationExistsError(BrenError, FileExistsError):
    """The computed destination path is already occupied."""

    def __init__(self, destination) -> None:
        super().__init__(f"File with name {destination} already exists")
        self.destination = destination


class InvalidNameError(BrenError, ValueError):
    """A name fragment cannot be used as a filename."""


class MetadataUnavailableError(BrenError):
    """File metadata or content needed by a naming strategy could not be read."""


class HookError(BrenError):
    """The post-rename hook could not be run or exited with an error."""
