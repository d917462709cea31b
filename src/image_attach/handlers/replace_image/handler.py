"""
Lambda handler responsible for replacing the image of an existing record.
"""

import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from image_attach.models.errors import RecordNotFoundError, RecordStoreError, ValidationError
from image_attach.utils.decorators import api_gateway_handler
from image_attach.utils.response import ResponseBuilder
from image_attach.utils.validators import sanitize_validation_errors, validate_request

from .models import ReplaceImageRequest, ReplaceImageResponse
from .service import ReplaceImageService

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle PUT /records/{record_id}/image.

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response with the new image paths
    """
    logger.info(
        "Received image replace request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError as exc:
        logger.exception("Invalid JSON body received", exc_info=exc)
        return ResponseBuilder.bad_request(message="Invalid JSON body")

    if not isinstance(body, dict):
        return ResponseBuilder.bad_request(message="Request body must be a JSON object")

    path_params = event.get("pathParameters") or {}

    try:
        request = validate_request(
            ReplaceImageRequest,
            {"record_id": path_params.get("record_id"), "file": body.get("file")},
        )
    except PydanticValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors()},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    try:
        service = ReplaceImageService()
        result = service.replace_image(record_id=request.record_id, file_data=request.file_data)

    except RecordNotFoundError as exc:
        logger.warning("Record not found during image replace", extra={"record_id": request.record_id})
        return ResponseBuilder.not_found(exc.message)

    except ValidationError as exc:
        logger.info("Upload rejected by validation", extra={"errors": exc.details.get("errors")})
        return ResponseBuilder.validation_error(message=exc.message, details=exc.details)

    except RecordStoreError as exc:
        logger.exception("Record store error during image replace")
        return ResponseBuilder.internal_error(exc.message)

    metrics.add_metric(name="ImagesInstalled", unit=MetricUnit.Count, value=1)

    response = ReplaceImageResponse(**result, message="Image replaced successfully")
    return ResponseBuilder.ok(response.model_dump())
