class ProcessorError(Exception):
    """Base exception for request handling errors."""


class InputValidationError(ProcessorError):
    """Raised when caller input is malformed (short query, non-PDF payload, ...)."""
