"""Domain errors raised by the service layer.

The API layer translates these into HTTP responses using ``status_code``.
Messages are meant for end users and never carry persistence details.
"""


class StorefrontError(Exception):
    """Base class for all storefront errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StorefrontError):
    """Input is malformed, missing or out of range."""

    status_code = 400


class NotFoundError(StorefrontError):
    """The referenced entity does not exist."""

    status_code = 404


class ConflictError(StorefrontError):
    """The operation would violate a referential or uniqueness constraint."""

    status_code = 400


class PersistenceError(StorefrontError):
    """The database failed in a way the caller cannot fix."""

    status_code = 500


class UploadError(StorefrontError):
    """Blob storage could not store an uploaded file."""

    status_code = 500
