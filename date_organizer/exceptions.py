"""
Custom exception hierarchy for the date organizer.

Only configuration and source-enumeration errors are fatal to a run. The
per-file errors are caught at the file boundary by the batch relocator and
recorded as failed outcomes.
"""


class OrganizerError(Exception):
    """Base exception for all date organizer errors."""
    pass


class ConfigurationError(OrganizerError):
    """Raised when required settings are missing or invalid."""
    pass


class SourceDirectoryError(OrganizerError):
    """Raised when the source root cannot be enumerated."""
    pass


class TimestampResolutionError(OrganizerError):
    """Raised when a file cannot be opened to resolve its timestamp."""
    pass


class MetadataExtractionError(OrganizerError):
    """Raised when an embedded capture date cannot be parsed."""
    pass


class FileOperationError(OrganizerError):
    """Raised when directory creation or rename fails."""
    pass
