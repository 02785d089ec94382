"""Folio error hierarchy.

All folio-specific errors inherit from FolioError for easy catching.
"""


class FolioError(Exception):
    """Base error for all folio operations."""


class ConfigError(FolioError):
    """Invalid or missing configuration."""


class ValidationError(FolioError):
    """Admin input that cannot be stored (bad slug, inverted date range)."""


class ConflictError(FolioError):
    """A write collided with an existing record (e.g. a taken slug)."""


class NotFoundError(FolioError):
    """A requested project, page, or block does not exist."""


class StoreError(FolioError):
    """The content store could not be reached or failed mid-query."""


class ExportError(FolioError):
    """Error during static export."""
