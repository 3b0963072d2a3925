"""
OpenProject provider errors.

Absence of a remote user is not an error; it is reported as a value by the
client and the reconciler. Everything below is a real failure.
"""


class ProviderError(Exception):
    """Base exception for all provider errors."""
    pass


class ConfigurationError(ProviderError):
    """Missing or invalid connection configuration."""
    pass


class MissingIdentifierError(ProviderError, ValueError):
    """An operation that needs a remote identity was given an empty one."""
    pass


class TransportError(ProviderError):
    """Network-level failure talking to OpenProject (connect, read, timeout)."""

    retryable = True

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"error during {operation}: {cause}")


class ResponseDecodeError(ProviderError):
    """A response body could not be decoded into the expected shape."""

    def __init__(self, operation: str, status_code: int, detail: str):
        self.operation = operation
        self.status_code = status_code
        self.detail = detail
        super().__init__(
            f"error decoding {operation} response (status {status_code}): {detail}"
        )


class RemoteOperationError(ProviderError):
    """OpenProject answered with an unexpected status code."""

    action = "perform operation on"

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        self.message = message
        text = f"failed to {self.action} user (status {status_code})"
        if message:
            text = f"{text}: {message}"
        super().__init__(text)


class CreateFailedError(RemoteOperationError):
    action = "create"


class ReadFailedError(RemoteOperationError):
    """Read failed; ``message`` holds the raw response body."""

    action = "read"


class DeleteFailedError(RemoteOperationError):
    action = "delete"


class ImportFailedError(ProviderError):
    """Import could not establish a managed user from the given identifier."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(f"import failed: {message}")
