import base64

import pytest
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from image_attach.utils.validators import (
    decode_base64_file,
    sanitize_validation_errors,
    validate_request,
)


class _Request(BaseModel):
    record_id: int = Field(..., ge=1)


class TestDecodeBase64File:
    def test_valid(self) -> None:
        assert decode_base64_file(base64.b64encode(b"abc").decode()) == b"abc"

    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_decodes_to_empty_bytes(self, value: str) -> None:
        assert decode_base64_file(value) == b""

    def test_invalid(self) -> None:
        with pytest.raises(ValueError, match="Invalid base64"):
            decode_base64_file("not-base64!!!")


class TestValidateRequest:
    def test_returns_model(self) -> None:
        assert validate_request(_Request, {"record_id": "42"}).record_id == 42

    def test_invalid_raises(self) -> None:
        with pytest.raises(PydanticValidationError):
            validate_request(_Request, {"record_id": 0})


def test_sanitize_validation_errors() -> None:
    errors = [
        {"loc": ("record_id",), "msg": "Field required", "url": "https://errors.pydantic.dev"},
        {"loc": ("file",), "msg": "Value error, Invalid base64 encoded file", "input": "x"},
    ]

    assert sanitize_validation_errors(errors) == [
        {"field": "record_id", "message": "This field is required"},
        {"field": "file", "message": "File must be a valid Base64-encoded string"},
    ]
