"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class GMusicError(Exception):
    """Base exception for all application-specific errors."""


class InvalidCredentialsError(GMusicError):
    """
    Raised when the login endpoint rejects the submitted credentials.

    Both submitted values are kept on the instance for diagnostics; only the
    email is rendered in the message.
    """

    def __init__(self, email: str, password: str, message: str | None = None):
        self.email = email
        self.password = password
        super().__init__(
            message or f"Provided credentials for '{email}' were insufficient."
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(email={self.email!r}, password='***')"


class InvalidArgumentError(GMusicError, ValueError):
    """Raised when a caller passes a disallowed value, before any I/O happens."""


class TransportError(GMusicError):
    """Raised when the network exchange with the remote service fails."""


class InvalidStateError(TransportError):
    """Raised by a transport when the remote rejects an authentication attempt."""


class FormatError(GMusicError):
    """Raised when a response does not match the expected record shape."""


class URIFormatError(FormatError):
    """Raised when a resolved stream URL is not a valid absolute URI."""


class FormClosedError(GMusicError):
    """Raised when a field is added to a form that has already been closed."""


class UploadNotSupportedError(GMusicError, NotImplementedError):
    """Raised by the upload operation, which this client does not implement."""


class ConfigurationError(GMusicError):
    """Raised for issues related to configuration loading or validation."""


class StorageError(GMusicError):
    """Raised when downloaded audio cannot be written to local storage."""
