"""
Decorators for API Gateway Lambda handlers.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from typing import Any, NamedTuple

from aws_lambda_powertools import Logger

from image_attach.models.errors import (
    ImageAttachError,
    ImageNotFoundError,
    ProcessorError,
    RecordNotFoundError,
    ValidationError,
)
from image_attach.utils.response import ResponseBuilder

logger = Logger(service="api-gateway-handler", utc=True)

JsonDict = dict[str, Any]


class ErrorMapping(NamedTuple):
    """How an exception escaping a handler becomes a response.

    ``message`` None means the exception's own message is public.
    """

    error_types: tuple[type[Exception], ...]
    status: HTTPStatus
    message: str | None = None
    expected: bool = True


# First match wins; order from most to least specific
ERROR_MAPPINGS: tuple[ErrorMapping, ...] = (
    ErrorMapping((RecordNotFoundError, ImageNotFoundError), HTTPStatus.NOT_FOUND),
    # Rejected uploads and images that fail to decode at install time
    ErrorMapping((ValidationError, ProcessorError), HTTPStatus.UNPROCESSABLE_ENTITY),
    ErrorMapping((ImageAttachError,), HTTPStatus.INTERNAL_SERVER_ERROR, expected=False),
    ErrorMapping(
        (ValueError, KeyError, TypeError),
        HTTPStatus.BAD_REQUEST,
        "The provided data is invalid. Please check your input and try again.",
    ),
    ErrorMapping(
        (PermissionError,),
        HTTPStatus.FORBIDDEN,
        "You don't have permission to perform this action.",
        expected=False,
    ),
    # Disk full, unwritable base path, ...
    ErrorMapping(
        (OSError,),
        HTTPStatus.SERVICE_UNAVAILABLE,
        "Unable to store the image. Please try again later.",
        expected=False,
    ),
    ErrorMapping(
        (Exception,),
        HTTPStatus.INTERNAL_SERVER_ERROR,
        "We're experiencing technical difficulties. Please try again in a few moments.",
        expected=False,
    ),
)


def error_response(
    exc: Exception,
    *,
    handler_name: str,
    request_id: str | None = None,
    cors_origin: str | None = None,
) -> JsonDict:
    """Log ``exc`` and turn it into the response of its first matching mapping."""
    mapping = next(m for m in ERROR_MAPPINGS if isinstance(exc, m.error_types))

    log_extra = {
        "handler": handler_name,
        "request_id": request_id,
        "status": mapping.status.value,
        "error": str(exc),
        "error_type": type(exc).__name__,
    }
    if mapping.expected:
        logger.warning("Request failed", extra=log_extra)
    else:
        logger.exception("Unhandled error in handler", extra=log_extra)

    if mapping.message is None and isinstance(exc, ImageAttachError):
        return ResponseBuilder.from_exception(
            exc,
            mapping.status,
            request_id=request_id,
            cors_origin=cors_origin,
        )

    return ResponseBuilder.error(
        status=mapping.status,
        message=mapping.message or "Internal server error",
        request_id=request_id,
        cors_origin=cors_origin,
    )


def api_gateway_handler(
    func: Callable[..., JsonDict],
) -> Callable[..., JsonDict]:
    """
    Decorator for API Gateway Lambda handlers.

    Answers CORS preflight (OPTIONS) requests and maps any exception that
    escapes the handler to an HTTP response via ERROR_MAPPINGS.

    Example:
        @api_gateway_handler
        def handler(event, context):
            return ResponseBuilder.ok({"record_id": 1})
    """

    @wraps(func)
    def wrapper(
        event: Any,
        context: Any,
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        if event.get("httpMethod") == "OPTIONS":
            return ResponseBuilder.no_content(cors_origin=cors_origin)

        try:
            return func(event, context)
        except Exception as exc:
            return error_response(
                exc,
                handler_name=func.__name__,
                request_id=getattr(context, "aws_request_id", None),
                cors_origin=cors_origin,
            )

    return wrapper
