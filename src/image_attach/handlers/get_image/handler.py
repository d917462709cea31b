"""
Lambda handler responsible for resolving a record's image paths.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from image_attach.models.errors import ImageNotFoundError, RecordNotFoundError, RecordStoreError
from image_attach.utils.decorators import api_gateway_handler
from image_attach.utils.response import ResponseBuilder
from image_attach.utils.validators import sanitize_validation_errors, validate_request

from .models import GetImageRequest, GetImageResponse
from .service import GetImageService

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle GET /records/{record_id}/image.

    Query parameters:
        thumbnail: optional thumbnail label

    Args:
        event: API Gateway event payload.
        context: AWS Lambda runtime context.

    Returns:
        API Gateway-compatible response dictionary.
    """
    logger.info(
        "Received image get request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "query_params": event.get("queryStringParameters"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    path_params = event.get("pathParameters") or {}
    query_params = event.get("queryStringParameters") or {}

    try:
        request = validate_request(
            GetImageRequest,
            {
                "record_id": path_params.get("record_id"),
                "thumbnail": query_params.get("thumbnail"),
            },
        )
    except ValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors()},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    service = GetImageService()

    try:
        result = service.get_image(request.record_id, request.thumbnail)

    except (RecordNotFoundError, ImageNotFoundError) as exc:
        logger.warning("Image not found", extra={"record_id": request.record_id})
        return ResponseBuilder.not_found(exc.message)

    except RecordStoreError as exc:
        logger.exception("Record store error during image get")
        return ResponseBuilder.internal_error(exc.message)

    return ResponseBuilder.ok(GetImageResponse(**result).model_dump())
