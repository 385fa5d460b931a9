class StoreError(Exception):
    """Base exception for metadata store errors."""


class DocumentNotFoundError(StoreError):
    """Raised when an operation references an unknown document id."""


class DuplicateDocumentIdError(StoreError):
    """Raised when creating a document whose id already exists."""


class SearchError(StoreError):
    """Raised when both the full-text and the substring search fail."""
