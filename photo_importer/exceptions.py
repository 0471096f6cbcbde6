"""
Custom exception hierarchy for the photo importer.

Per-file errors (FileAccessError, VerificationError, PersistError, ...) are
caught by the import engine and logged; StoreUnavailableError stops the run.
"""


class PhotoImporterError(Exception):
    """Base exception for all photo importer errors."""
    pass


class FileAccessError(PhotoImporterError):
    """Raised when a file cannot be read, copied or its folder created."""
    pass


class CollisionError(FileAccessError):
    """Raised when no free alternate file name could be found."""
    pass


class VerificationError(PhotoImporterError):
    """Raised when a copied file does not match its source."""

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind  # 'length' or 'hash'


class MetadataExtractionError(PhotoImporterError):
    """Raised when metadata cannot be extracted from a file."""
    pass


class DatabaseError(PhotoImporterError):
    """Raised when record store operations fail."""
    pass


class StoreUnavailableError(DatabaseError):
    """Raised when the record store of a target root cannot be opened."""
    pass


class PersistError(DatabaseError):
    """Raised when a record could not be written (or is not visible afterwards)."""
    pass


class DuplicateRecordError(DatabaseError):
    """Raised when an insert is rejected by a unique key."""
    pass
