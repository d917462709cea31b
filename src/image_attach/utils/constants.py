"""Global constants used throughout the application.

This module centralizes configuration defaults, environment variable names,
error codes and the geometry grammar so that they can be changed in one place.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================

# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_IMAGE_TOO_BIG = "IMAGE_TOO_BIG"
ERROR_CODE_IMAGE_TOO_SMALL = "IMAGE_TOO_SMALL"

# Processor Errors
ERROR_CODE_PROCESSOR = "PROCESSOR_ERROR"
ERROR_CODE_INVALID_GEOMETRY = "INVALID_GEOMETRY"

# Storage Errors
ERROR_CODE_STORAGE = "STORAGE_ERROR"
ERROR_CODE_NO_IMAGE_DATA = "NO_IMAGE_DATA"
ERROR_CODE_IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"

# Record Errors
ERROR_CODE_RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
ERROR_CODE_RECORD_STORE = "RECORD_STORE_ERROR"
ERROR_CODE_RECORD_CREATE_FAILED = "RECORD_CREATE_FAILED"
ERROR_CODE_RECORD_FETCH_FAILED = "RECORD_FETCH_FAILED"
ERROR_CODE_RECORD_UPDATE_FAILED = "RECORD_UPDATE_FAILED"
ERROR_CODE_RECORD_DELETE_FAILED = "RECORD_DELETE_FAILED"
ERROR_CODE_ID_ALLOCATION_FAILED = "ID_ALLOCATION_FAILED"

# Internal / Unexpected
ERROR_CODE_INTERNAL_ERROR = "INTERNAL_ERROR"


# ============================================================================
# Attachment Defaults
# ============================================================================

DEFAULT_RESIZE_SPEC: Final[str] = "200x200"
DEFAULT_MAX_SIZE_BYTES: Final[int] = 12 * 1024 * 1024  # 12MB
DEFAULT_MIN_SIZE_BYTES: Final[int] = 4 * 1024  # 4KB
DEFAULT_OUTPUT_FORMAT: Final[str] = "JPEG"
DEFAULT_OUTPUT_QUALITY: Final[int] = 85
DEFAULT_PUBLIC_DIR: Final[str] = "public"

DEFAULT_INVALID_IMAGE_MESSAGE: Final[str] = "Can't process the image."
DEFAULT_IMAGE_TOO_SMALL_MESSAGE: Final[str] = "The image is too small."
DEFAULT_IMAGE_TOO_BIG_MESSAGE: Final[str] = "The image is too big."

INVALID_IMAGE_DATA_MESSAGE: Final[str] = "That doesn't look like an image file."

# Formats whose encoders honour a "quality" argument
QUALITY_FORMATS: Final[frozenset[str]] = frozenset({"JPEG", "WEBP"})

# Formats that cannot carry an alpha channel or a palette
RGB_ONLY_FORMATS: Final[frozenset[str]] = frozenset({"JPEG"})


# ============================================================================
# Geometry Grammar
# ============================================================================

# <width>x<height>{+-}<xoffset>{+-}<yoffset>{%@!<>^}
GEOMETRY_PATTERN: Final[str] = (
    r"\A(?P<width>\d*)x(?P<height>\d*)"
    r"(?P<offset>(?P<x_offset>[+-]\d+)(?P<y_offset>[+-]\d+))?"
    r"(?P<modifier>[%@!<>^])?\Z"
)
FIXED_GEOMETRY_PATTERN: Final[str] = r"\A\d+x\d+!?\Z"


# ============================================================================
# Storage Layout
# ============================================================================

PARTITION_DIGITS: Final[int] = 8
PARTITION_GROUP: Final[int] = 4
MAX_RECORD_ID: Final[int] = 10**PARTITION_DIGITS - 1

NAME_LENGTH: Final[int] = 6
NAME_ALPHABET: Final[str] = "0123456789abcdefghijklmnopqrstuvwxyz"

STAGED_FILE_PREFIX: Final[str] = "image_attach_data_"
FILE_CHUNK_SIZE: Final[int] = 8192


# ============================================================================
# Host Records
# ============================================================================

RECORD_TYPE: Final[str] = "Photo"
RECORD_ID_COUNTER_KEY: Final[int] = 0
IMAGE_NAME_ATTRIBUTE: Final[str] = "image_file"
TITLE_MAX_LENGTH = 255


# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length"
DEFAULT_CONTENT_TYPE = "application/json"


# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_IMAGE_RECORD_TABLE_NAME = "IMAGE_RECORD_TABLE_NAME"

ENV_IMAGE_BASE_PATH = "IMAGE_BASE_PATH"
ENV_IMAGE_PATH_PREFIX = "IMAGE_PATH_PREFIX"
ENV_IMAGE_RESIZE_SPEC = "IMAGE_RESIZE_SPEC"
ENV_IMAGE_THUMBNAILS = "IMAGE_THUMBNAILS"
ENV_IMAGE_MIN_SIZE_BYTES = "IMAGE_MIN_SIZE_BYTES"
ENV_IMAGE_MAX_SIZE_BYTES = "IMAGE_MAX_SIZE_BYTES"
ENV_IMAGE_OUTPUT_FORMAT = "IMAGE_OUTPUT_FORMAT"
ENV_IMAGE_OUTPUT_QUALITY = "IMAGE_OUTPUT_QUALITY"


# ============================================================================
# Helper Functions
# ============================================================================


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"
