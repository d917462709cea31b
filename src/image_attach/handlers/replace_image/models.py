"""Pydantic models for image replacement request/response."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from image_attach.models.record import ImagePaths
from image_attach.utils.validators import decode_base64_file


class ReplaceImageRequest(BaseModel):
    """Validation model for image replacement request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    record_id: int = Field(..., ge=1, description="Record whose image is replaced")
    file: str = Field(..., description="Base64 encoded image file")

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        decode_base64_file(value)
        return value

    @property
    def file_data(self) -> bytes:
        return decode_base64_file(self.file)


class ReplaceImageResponse(BaseModel):
    """Response model for a replaced image."""

    record_id: int
    image_file: str
    previous_image_file: str | None = None
    paths: ImagePaths
    message: str
