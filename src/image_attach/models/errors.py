"""Custom exception classes for image attachments."""

from typing import Any

from image_attach.utils.constants import (
    ERROR_CODE_IMAGE_NOT_FOUND,
    ERROR_CODE_IMAGE_TOO_BIG,
    ERROR_CODE_IMAGE_TOO_SMALL,
    ERROR_CODE_INTERNAL_ERROR,
    ERROR_CODE_INVALID_GEOMETRY,
    ERROR_CODE_PROCESSOR,
    ERROR_CODE_RECORD_NOT_FOUND,
    ERROR_CODE_RECORD_STORE,
    ERROR_CODE_STORAGE,
    ERROR_CODE_VALIDATION_FAILED,
)


class ImageAttachError(Exception):
    """
    Base exception for all image attachment errors.

    Errors are built with keyword arguments only. Each subclass carries a
    ``default_error_code``; callers may pass a more specific ``error_code``
    and optional context via ``details``.
    """

    default_error_code: str = ERROR_CODE_INTERNAL_ERROR

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}

        super().__init__(self.message)


class ProcessorError(ImageAttachError):
    """Raised when the image backend cannot decode or transform the input.

    The message is user-facing: it ends up attached to the record
    rather than in a stack trace.
    """

    default_error_code = ERROR_CODE_PROCESSOR


class InvalidGeometryError(ProcessorError):
    """Raised when a geometry string does not match the accepted grammar.

    This is a configuration error and should surface when an
    AttachmentConfig is built, not when an image is uploaded.
    """

    default_error_code = ERROR_CODE_INVALID_GEOMETRY


class StorageError(ImageAttachError):
    """Raised when a storage operation cannot proceed."""

    default_error_code = ERROR_CODE_STORAGE


class FileTooBigError(StorageError):
    default_error_code = ERROR_CODE_IMAGE_TOO_BIG


class FileTooSmallError(StorageError):
    default_error_code = ERROR_CODE_IMAGE_TOO_SMALL


class ValidationError(ImageAttachError):
    """Raised when an upload is rejected by the validation gate.

    ``details["errors"]`` holds every validation message.
    """

    default_error_code = ERROR_CODE_VALIDATION_FAILED


class RecordNotFoundError(ImageAttachError):
    default_error_code = ERROR_CODE_RECORD_NOT_FOUND


class RecordStoreError(ImageAttachError):
    """Raised when the host record store fails."""

    default_error_code = ERROR_CODE_RECORD_STORE


class ImageNotFoundError(ImageAttachError):
    """Raised when a record has no image, or no thumbnail with the requested label."""

    default_error_code = ERROR_CODE_IMAGE_NOT_FOUND
