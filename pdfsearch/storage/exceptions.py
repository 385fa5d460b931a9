class ObjectStoreError(Exception):
    """Raised when a payload cannot be stored, loaded or deleted."""
