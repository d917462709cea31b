"""
Lambda handler responsible for deleting a record and its images.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from image_attach.models.errors import RecordNotFoundError, RecordStoreError
from image_attach.utils.decorators import api_gateway_handler
from image_attach.utils.response import ResponseBuilder
from image_attach.utils.validators import sanitize_validation_errors, validate_request

from .models import DeleteRecordRequest, DeleteRecordResponse
from .service import DeleteRecordService

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle DELETE /records/{record_id}.

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info(
        "Received record delete request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
        },
    )

    path_params = event.get("pathParameters") or {}

    try:
        request = validate_request(
            DeleteRecordRequest,
            {"record_id": path_params.get("record_id")},
        )
    except ValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": exc.errors()},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request payload",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    service = DeleteRecordService()

    try:
        result = service.delete_record(request.record_id)

    except RecordNotFoundError as exc:
        logger.warning(
            "Record not found during delete",
            extra={"record_id": request.record_id},
        )
        return ResponseBuilder.not_found(exc.message)

    except RecordStoreError as exc:
        logger.exception(
            "Deletion failed",
            extra={"record_id": request.record_id},
        )
        return ResponseBuilder.internal_error(exc.message)

    response = DeleteRecordResponse(**result, message="Record deleted successfully")
    return ResponseBuilder.ok(response.model_dump())
