"""
API Gateway proxy responses for the image attachment handlers.

Every error body has the same shape:

    {"error": "<code>", "message": "...", "timestamp": "...", "details": {...}}
"""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any

from image_attach.models.errors import ImageAttachError
from image_attach.utils.constants import (
    CORS_HEADERS,
    CORS_METHODS,
    CORS_ORIGIN,
    DEFAULT_CONTENT_TYPE,
    ERROR_CODE_VALIDATION_FAILED,
    EXPOSE_HEADERS,
)
from image_attach.utils.time import utc_now_iso

JsonDict = dict[str, Any]


class ResponseBuilder:
    """Builds API Gateway-compatible HTTP responses."""

    CORS: dict[str, str] = {
        "Access-Control-Allow-Origin": CORS_ORIGIN,
        "Access-Control-Allow-Headers": CORS_HEADERS,
        "Access-Control-Allow-Methods": CORS_METHODS,
        "Access-Control-Expose-Headers": EXPOSE_HEADERS,
    }

    @classmethod
    def headers(cls, cors_origin: str | None = None) -> dict[str, str]:
        headers = {"Content-Type": DEFAULT_CONTENT_TYPE, **cls.CORS}
        if cors_origin:
            headers["Access-Control-Allow-Origin"] = cors_origin
        return headers

    @classmethod
    def build(
        cls,
        status: HTTPStatus,
        body: JsonDict | None = None,
        *,
        request_id: str | None = None,
        cors_origin: str | None = None,
    ) -> JsonDict:
        payload = dict(body or {})
        if request_id:
            payload["request_id"] = request_id

        return {
            "statusCode": status.value,
            "headers": cls.headers(cors_origin),
            "body": json.dumps(payload) if payload else "",
        }

    @classmethod
    def ok(cls, body: JsonDict, **kwargs: Any) -> JsonDict:
        return cls.build(HTTPStatus.OK, body, **kwargs)

    @classmethod
    def created(cls, body: JsonDict, **kwargs: Any) -> JsonDict:
        return cls.build(HTTPStatus.CREATED, body, **kwargs)

    @classmethod
    def no_content(cls, **kwargs: Any) -> JsonDict:
        return cls.build(HTTPStatus.NO_CONTENT, **kwargs)

    @classmethod
    def error(
        cls,
        *,
        status: HTTPStatus,
        message: str,
        error: str | None = None,
        details: JsonDict | None = None,
        **kwargs: Any,
    ) -> JsonDict:
        body: JsonDict = {
            "error": error or status.name,
            "message": message,
            "timestamp": utc_now_iso(),
        }
        if details:
            body["details"] = details

        return cls.build(status, body, **kwargs)

    @classmethod
    def from_exception(cls, exc: ImageAttachError, status: HTTPStatus, **kwargs: Any) -> JsonDict:
        """Error response carrying the exception's own code, message and details."""
        return cls.error(
            status=status,
            message=exc.message,
            error=exc.error_code,
            details=exc.details,
            **kwargs,
        )

    @classmethod
    def bad_request(cls, message: str, **kwargs: Any) -> JsonDict:
        return cls.error(status=HTTPStatus.BAD_REQUEST, message=message, **kwargs)

    @classmethod
    def validation_error(cls, *, message: str, **kwargs: Any) -> JsonDict:
        """422: the upload was well-formed but rejected."""
        kwargs.setdefault("error", ERROR_CODE_VALIDATION_FAILED)
        return cls.error(status=HTTPStatus.UNPROCESSABLE_ENTITY, message=message, **kwargs)

    @classmethod
    def not_found(cls, message: str = "Resource not found", **kwargs: Any) -> JsonDict:
        return cls.error(status=HTTPStatus.NOT_FOUND, message=message, **kwargs)

    @classmethod
    def internal_error(cls, message: str = "Internal server error", **kwargs: Any) -> JsonDict:
        return cls.error(status=HTTPStatus.INTERNAL_SERVER_ERROR, message=message, **kwargs)
