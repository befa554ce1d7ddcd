"""Application error hierarchy.

Every error here carries an HTTP status and is rendered by the exception
handler registered in ``eventhub.main`` as
``{"Code": status, "Message": message, "Details": details}``.
"""

from typing import Any


class AppError(Exception):
    """Base application error."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class NotFoundError(AppError):
    """Requested resource does not exist."""

    status_code = 404
    default_message = "Resource not found"


class ValidationError(AppError):
    """User-correctable input problem; nothing was persisted."""

    status_code = 422
    default_message = "Validation failed"


class ImageValidationError(ValidationError):
    """Uploaded file rejected by the upload policy (extension, size, count)."""

    default_message = "Invalid image upload"


class FormValidationError(ValidationError):
    """Form fields accompanying an upload failed validation."""

    default_message = "Invalid form data"


class CodecError(AppError):
    """Resizing or compressing an image failed."""

    default_message = "Could not process image"


class PersistenceError(AppError):
    """Saving or removing an entity failed."""

    default_message = "Could not save changes"


class ImageFileMissingError(AppError):
    """A stored image reference points at a file that is not on disk."""

    status_code = 404
    default_message = "Image file not found"


class InvalidImageReference(ValueError):
    """Image reference or path does not contain exactly one variant segment."""
