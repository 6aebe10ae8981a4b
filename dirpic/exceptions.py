"""
Custom exception hierarchy for dirpic.

Per-file problems that the pipeline can absorb (missing metadata, unknown
extensions, a destination that is already current) are not exceptions at
all; they show up as placement outcomes. The types below cover the cases
that have to travel up the call stack.
"""


class DirpicError(Exception):
    """Base exception for all dirpic errors."""
    pass


class ConfigurationError(DirpicError):
    """Raised when a configuration value is out of range."""
    pass


class MetadataExtractionError(DirpicError):
    """Raised when embedded metadata cannot be decoded."""
    pass


class PlacementError(DirpicError):
    """Raised when a file cannot be linked or copied into the destination tree."""

    def __init__(self, source, destination, cause: Exception):
        self.source = source
        self.destination = destination
        self.cause = cause
        super().__init__(f"placing {source} -> {destination}: {cause}")


class SourceRootError(DirpicError):
    """Raised when the source root cannot be read at all."""
    pass
