import json
from types import SimpleNamespace

import pytest

from image_attach.models.errors import (
    ImageNotFoundError,
    InvalidGeometryError,
    ProcessorError,
    RecordStoreError,
    StorageError,
    ValidationError,
)
from image_attach.utils.decorators import api_gateway_handler

CONTEXT = SimpleNamespace(aws_request_id="req-123")


def _raising(exc: Exception):
    @api_gateway_handler
    def handler(event, context):
        raise exc

    return handler


@pytest.mark.parametrize(
    ("exc", "status"),
    [
        (ImageNotFoundError(message="Record 1 has no image"), 404),
        (ValidationError(message="The image is too big."), 422),
        (ProcessorError(message="That doesn't look like an image file."), 422),
        (InvalidGeometryError(message="bad geometry"), 422),
        (StorageError(message="nothing to install"), 500),
        (RecordStoreError(message="Unable to update record"), 500),
        (ValueError("bad"), 400),
        (KeyError("file"), 400),
        (PermissionError("denied"), 403),
        (OSError("disk full"), 503),
        (RuntimeError("boom"), 500),
    ],
)
def test_exception_mapping(exc: Exception, status: int) -> None:
    response = _raising(exc)({"httpMethod": "POST"}, CONTEXT)

    assert response["statusCode"] == status
    assert json.loads(response["body"])["request_id"] == "req-123"


def test_domain_message_and_details_are_public() -> None:
    exc = ValidationError(
        message="The image is too small.",
        details={"errors": ["The image is too small."]},
    )

    body = json.loads(_raising(exc)({}, CONTEXT)["body"])

    assert body["error"] == "VALIDATION_FAILED"
    assert body["message"] == "The image is too small."
    assert body["details"] == {"errors": ["The image is too small."]}


def test_unexpected_error_message_is_generic() -> None:
    body = json.loads(_raising(RuntimeError("secret internals"))({}, CONTEXT)["body"])

    assert "secret internals" not in body["message"]


def test_options_preflight() -> None:
    response = _raising(RuntimeError("not called"))({"httpMethod": "OPTIONS"}, CONTEXT)

    assert response["statusCode"] == 204
    assert response["headers"]["Access-Control-Allow-Origin"]


def test_passes_through_success() -> None:
    @api_gateway_handler
    def handler(event, context):
        return {"statusCode": 200, "body": "ok"}

    assert handler({}, CONTEXT) == {"statusCode": 200, "body": "ok"}
