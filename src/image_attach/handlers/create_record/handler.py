"""
Lambda handler responsible for creating a record with an attached image.
"""

import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from image_attach.models.errors import RecordStoreError, ValidationError
from image_attach.utils.decorators import api_gateway_handler
from image_attach.utils.response import ResponseBuilder
from image_attach.utils.validators import sanitize_validation_errors, validate_request

from .models import CreateRecordRequest, CreateRecordResponse
from .service import CreateRecordService

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle record creation requests.

    Expected API Gateway event structure:
    {
        "body": "{\"file\": \"<base64>\", \"title\": \"...\"}",
        "isBase64Encoded": false
    }

    Args:
        event: API Gateway Lambda proxy event containing the upload payload
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response describing the created record
    """
    logger.info(
        "Received record create request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
        },
    )

    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError as exc:
        logger.exception("Invalid JSON body received", exc_info=exc)
        return ResponseBuilder.bad_request(message="Invalid JSON body")

    try:
        request = validate_request(CreateRecordRequest, body)
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
        service = CreateRecordService()
        result = service.create_record(file_data=request.file_data, title=request.title)

    except ValidationError as exc:
        logger.info("Upload rejected by validation", extra={"errors": exc.details.get("errors")})
        return ResponseBuilder.validation_error(message=exc.message, details=exc.details)

    except RecordStoreError as exc:
        logger.exception("Record store error during create")
        return ResponseBuilder.internal_error(exc.message)

    metrics.add_metric(name="ImagesInstalled", unit=MetricUnit.Count, value=1)

    response = CreateRecordResponse(**result, message="Record created successfully")
    return ResponseBuilder.created(response.model_dump())
