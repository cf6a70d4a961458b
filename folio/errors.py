"""Error types raised by Folio.

All Folio errors inherit from FolioError so callers can catch them in one place.
Only FatalError subclasses represent conditions a caller cannot recover from;
everything else (unknown attributes, unsortable values) is logged and absorbed.
"""

from __future__ import annotations

from pathlib import Path


class FolioError(Exception):
    """Base error for all Folio operations."""


class FatalError(FolioError):
    """Unrecoverable error with a human-readable message.

    Attributes:
        message: Human-readable error message.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class CollectionNotFoundError(FatalError):
    """Raised when a label does not resolve to pages or a known collection.

    Attributes:
        label: The label that could not be resolved.
    """

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"The `{label}' collection was not found")


class FrontMatterNotFoundError(FatalError):
    """Raised when a body-bearing file has no delimited front matter block.

    Attributes:
        path: Path to the offending file.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(f"YAML front matter not found in {path}")


class InvalidConfigurationError(FatalError):
    """Raised for malformed configuration or a missing user config file."""


class ModelBindingError(FolioError):
    """Raised when a model is used without a document, or re-bound to another."""
